from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from cubebld.models import (
    BldOperations,
    CornerOperation,
    CornerSwap,
    CornerTwist,
    EdgeFlip,
    EdgeOperation,
    EdgeSwap,
    Operation,
)
from cubebld.state import CORNER_COUNT, EDGE_COUNT, CubeState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverConfig:
    corner_buffer: int = 0
    edge_buffer: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.corner_buffer < CORNER_COUNT:
            raise ValueError(f"corner_buffer must be in range 0..{CORNER_COUNT - 1}")
        if not 0 <= self.edge_buffer < EDGE_COUNT:
            raise ValueError(f"edge_buffer must be in range 0..{EDGE_COUNT - 1}")


@dataclass(frozen=True)
class _Step:
    kind: str
    target: int
    orientation: int


def _decompose(perm: Sequence[int], orient: Sequence[int], buffer: int, modulus: int) -> list[_Step]:
    """Cycle decomposition of one piece family through ``buffer``.

    Follows the buffer's piece home until the buffer holds its own piece, then
    breaks into the lowest-index misplaced slot. Residual orientations of the
    other slots are reported afterwards, in slot order; the buffer absorbs them.
    """
    perm = [int(value) for value in perm]
    orient = [int(value) for value in orient]
    steps: list[_Step] = []

    def swap(target: int) -> None:
        orientation = orient[buffer]
        steps.append(_Step(kind="swap", target=target, orientation=orientation))
        perm[buffer], perm[target] = perm[target], perm[buffer]
        orient[buffer], orient[target] = (orient[target] + orientation) % modulus, 0

    while True:
        while perm[buffer] != buffer:
            swap(perm[buffer])

        next_slot = next(
            (slot for slot in range(len(perm)) if slot != buffer and perm[slot] != slot),
            None,
        )
        if next_slot is None:
            break
        swap(next_slot)

    for slot in range(len(orient)):
        if slot == buffer or orient[slot] == 0:
            continue
        steps.append(_Step(kind="reorient", target=slot, orientation=orient[slot]))
        orient[buffer] = (orient[buffer] + orient[slot]) % modulus
        orient[slot] = 0

    return steps


def solve_corners(state: CubeState, buffer: int = 0) -> tuple[CornerOperation, ...]:
    operations: list[CornerOperation] = []
    for step in _decompose(state.cp, state.co, buffer, modulus=3):
        if step.kind == "swap":
            operations.append(CornerSwap(buffer, step.target, step.orientation))
        else:
            operations.append(CornerTwist(step.target, step.orientation, buffer=buffer))
    return tuple(operations)


def solve_edges(state: CubeState, buffer: int = 0) -> tuple[EdgeOperation, ...]:
    operations: list[EdgeOperation] = []
    for step in _decompose(state.ep, state.eo, buffer, modulus=2):
        if step.kind == "swap":
            operations.append(EdgeSwap(buffer, step.target, step.orientation))
        else:
            operations.append(EdgeFlip(step.target, buffer=buffer))
    return tuple(operations)


def solve(state: CubeState, config: SolverConfig | None = None) -> BldOperations:
    """Decomposes a valid state into buffer swaps plus twists and flips.

    Raises InvalidStateError when the state breaks a cube invariant. The same
    input always yields the same operations in the same order.
    """
    config = config or SolverConfig()
    state.validate()

    corner_operations = solve_corners(state, buffer=config.corner_buffer)
    edge_operations = solve_edges(state, buffer=config.edge_buffer)
    logger.debug(
        "BLD decomposition: %d corner operations, %d edge operations",
        len(corner_operations),
        len(edge_operations),
    )
    return BldOperations(corner_operations=corner_operations, edge_operations=edge_operations)


def apply_operations(state: CubeState, operations: Iterable[Operation]) -> CubeState:
    """Applies the abstract effect of each operation; a full solution leads to the solved state."""
    for operation in operations:
        state = state.compose(operation.transform())
    return state


def swap_count(operations: Iterable[Operation]) -> int:
    return sum(1 for operation in operations if isinstance(operation, (CornerSwap, EdgeSwap)))
