from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence, Union

from cubebld.formula import expand_notation
from cubebld.models import (
    BldSolution,
    CornerSwap,
    CornerTwist,
    EdgeFlip,
    EdgeSwap,
    MoveSequence,
    Operation,
)
from cubebld.moveset import Moveset, default_moveset
from cubebld.solver import SolverConfig, solve
from cubebld.state import CubeState

logger = logging.getLogger(__name__)


class NoAlgorithmError(LookupError):
    def __init__(self, operation: object, message: str | None = None) -> None:
        super().__init__(message or f"No algorithm for {operation}")
        self.operation = operation


def _sequence(description: str, algorithm: str) -> MoveSequence:
    return MoveSequence(description=description, moves=tuple(expand_notation(algorithm)))


def _lookup(table: Mapping[Any, str], key: Any, operation: object) -> str:
    try:
        return table[key]
    except KeyError:
        raise NoAlgorithmError(operation) from None


def _check_buffer(operation: Operation, buffer: int) -> None:
    if operation.buffer != buffer:
        raise NoAlgorithmError(
            operation,
            f"{operation} uses buffer slot {operation.buffer}, the moveset is built for slot {buffer}",
        )


def _split(
    operations: Iterable[Operation],
) -> tuple[list[CornerSwap], list[EdgeSwap], list[CornerTwist], list[EdgeFlip]]:
    corner_swaps: list[CornerSwap] = []
    edge_swaps: list[EdgeSwap] = []
    twists: list[CornerTwist] = []
    flips: list[EdgeFlip] = []
    for operation in operations:
        if isinstance(operation, CornerSwap):
            corner_swaps.append(operation)
        elif isinstance(operation, EdgeSwap):
            edge_swaps.append(operation)
        elif isinstance(operation, CornerTwist):
            twists.append(operation)
        elif isinstance(operation, EdgeFlip):
            flips.append(operation)
        else:
            raise NoAlgorithmError(operation, f"Unsupported operation type: {type(operation).__name__}")
    return corner_swaps, edge_swaps, twists, flips


def _cycles(
    swaps: Sequence[Union[CornerSwap, EdgeSwap]],
    table: Mapping[Any, str],
    family: str,
) -> list[MoveSequence]:
    sequences: list[MoveSequence] = []
    for index in range(0, len(swaps) - 1, 2):
        first, second = swaps[index], swaps[index + 1]
        key = (first.target2, first.orientation, second.target2, second.orientation)
        algorithm = _lookup(table, key, (first, second))
        description = (
            f"{family} swap: slot {first.target1} ↔ slot {first.target2}, "
            f"slot {second.target1} ↔ slot {second.target2}"
        )
        sequences.append(_sequence(description, algorithm))
    return sequences


def translate(operations: Iterable[Operation], moveset: Moveset) -> list[MoveSequence]:
    """Turns solver operations into move sequences from ``moveset``.

    Swaps of one family are consumed in pairs as 3-cycles. When both families
    are left with one swap each, the two are performed together by a parity
    algorithm. Output order: corner cycles, edge cycles, parity, corner twists,
    edge flips.
    """
    corner_swaps, edge_swaps, twists, flips = _split(operations)
    for operation in [*corner_swaps, *twists]:
        _check_buffer(operation, moveset.corner_buffer)
    for operation in [*edge_swaps, *flips]:
        _check_buffer(operation, moveset.edge_buffer)

    odd_corners = len(corner_swaps) % 2 == 1
    odd_edges = len(edge_swaps) % 2 == 1
    if odd_corners != odd_edges:
        unpaired = corner_swaps[-1] if odd_corners else edge_swaps[-1]
        raise NoAlgorithmError(unpaired, f"{unpaired} has no partner swap; the operations break cube parity")

    sequences = _cycles(corner_swaps, moveset.corner_cycles, "Corner")
    sequences.extend(_cycles(edge_swaps, moveset.edge_cycles, "Edge"))

    if odd_corners:
        corner, edge = corner_swaps[-1], edge_swaps[-1]
        key = (corner.target2, corner.orientation, edge.target2, edge.orientation)
        algorithm = _lookup(moveset.parities, key, (corner, edge))
        description = (
            f"Parity: corner slot {corner.target1} ↔ slot {corner.target2}, "
            f"edge slot {edge.target1} ↔ slot {edge.target2}"
        )
        sequences.append(_sequence(description, algorithm))

    for twist in twists:
        algorithm = _lookup(moveset.corner_twists, (twist.target, twist.orientation), twist)
        sequences.append(_sequence(twist.label(), algorithm))
    for flip in flips:
        algorithm = _lookup(moveset.edge_flips, flip.target, flip)
        sequences.append(_sequence(flip.label(), algorithm))

    return sequences


def build_solution(
    state: CubeState,
    moveset: Moveset | None = None,
    config: SolverConfig | None = None,
) -> BldSolution:
    """Solves ``state`` and translates the result; buffers follow the moveset unless ``config`` is given."""
    moveset = moveset or default_moveset()
    config = config or SolverConfig(corner_buffer=moveset.corner_buffer, edge_buffer=moveset.edge_buffer)

    operations = solve(state, config)
    sequences = tuple(translate(operations.all_operations, moveset))
    logger.debug("Translated %d operations into %d move sequences", len(operations.all_operations), len(sequences))
    return BldSolution(
        corner_operations=operations.corner_operations,
        edge_operations=operations.edge_operations,
        move_sequences=sequences,
        all_operations=operations.all_operations,
    )
