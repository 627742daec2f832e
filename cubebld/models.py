from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Tuple, Union

import numpy as np

from cubebld.formula import Move, format_moves
from cubebld.state import CORNER_COUNT, EDGE_COUNT, CubeState


class Family(str, Enum):
    CORNER = "corner"
    EDGE = "edge"


def _check_slot(name: str, value: int, count: int) -> None:
    if not 0 <= value < count:
        raise ValueError(f"{name} must be in range 0..{count - 1}, got {value}")


def _corner_transform(swap: tuple[int, int] | None, twists: dict[int, int]) -> CubeState:
    cp = np.arange(CORNER_COUNT)
    co = np.zeros(CORNER_COUNT, dtype=np.int64)
    if swap is not None:
        first, second = swap
        cp[first], cp[second] = second, first
    for slot, delta in twists.items():
        co[slot] = (co[slot] + delta) % 3
    return CubeState(cp=cp, co=co, ep=np.arange(EDGE_COUNT), eo=np.zeros(EDGE_COUNT, dtype=np.int64))


def _edge_transform(swap: tuple[int, int] | None, flips: dict[int, int]) -> CubeState:
    ep = np.arange(EDGE_COUNT)
    eo = np.zeros(EDGE_COUNT, dtype=np.int64)
    if swap is not None:
        first, second = swap
        ep[first], ep[second] = second, first
    for slot, delta in flips.items():
        eo[slot] = (eo[slot] + delta) % 2
    return CubeState(cp=np.arange(CORNER_COUNT), co=np.zeros(CORNER_COUNT, dtype=np.int64), ep=ep, eo=eo)


@dataclass(frozen=True)
class CornerSwap:
    """Sends the buffer's piece home to ``target2`` and pulls ``target2``'s piece into the buffer.

    ``orientation`` is the buffer's twist before the swap.
    """

    target1: int
    target2: int
    orientation: int
    family: ClassVar[Family] = Family.CORNER
    kind: ClassVar[str] = "swap"

    def __post_init__(self) -> None:
        _check_slot("target1", self.target1, CORNER_COUNT)
        _check_slot("target2", self.target2, CORNER_COUNT)
        if self.target1 == self.target2:
            raise ValueError("A swap needs two different slots")
        if self.orientation not in (0, 1, 2):
            raise ValueError(f"Corner orientation must be 0, 1 or 2, got {self.orientation}")

    @property
    def buffer(self) -> int:
        return self.target1

    def transform(self) -> CubeState:
        return _corner_transform(
            (self.target1, self.target2),
            {self.target2: -self.orientation, self.target1: self.orientation},
        )

    def label(self) -> str:
        return f"Corner swap: slot {self.target1} ↔ slot {self.target2}"

    def __str__(self) -> str:
        return f"{self.label()} (ori: {self.orientation})"


@dataclass(frozen=True)
class CornerTwist:
    """Twists ``target`` back by ``orientation``; the buffer absorbs the opposite twist."""

    target: int
    orientation: int
    buffer: int = 0
    family: ClassVar[Family] = Family.CORNER
    kind: ClassVar[str] = "twist"

    def __post_init__(self) -> None:
        _check_slot("target", self.target, CORNER_COUNT)
        _check_slot("buffer", self.buffer, CORNER_COUNT)
        if self.target == self.buffer:
            raise ValueError("The buffer cannot be twisted against itself")
        if self.orientation not in (1, 2):
            raise ValueError(f"Twist orientation must be 1 or 2, got {self.orientation}")

    def transform(self) -> CubeState:
        return _corner_transform(None, {self.target: -self.orientation, self.buffer: self.orientation})

    def label(self) -> str:
        return f"Corner twist: slot {self.target} ({self.orientation})"

    def __str__(self) -> str:
        return self.label()


@dataclass(frozen=True)
class EdgeSwap:
    """Edge counterpart of CornerSwap; ``orientation`` is the buffer's flip before the swap."""

    target1: int
    target2: int
    orientation: int
    family: ClassVar[Family] = Family.EDGE
    kind: ClassVar[str] = "swap"

    def __post_init__(self) -> None:
        _check_slot("target1", self.target1, EDGE_COUNT)
        _check_slot("target2", self.target2, EDGE_COUNT)
        if self.target1 == self.target2:
            raise ValueError("A swap needs two different slots")
        if self.orientation not in (0, 1):
            raise ValueError(f"Edge orientation must be 0 or 1, got {self.orientation}")

    @property
    def buffer(self) -> int:
        return self.target1

    def transform(self) -> CubeState:
        return _edge_transform(
            (self.target1, self.target2),
            {self.target2: self.orientation, self.target1: self.orientation},
        )

    def label(self) -> str:
        return f"Edge swap: slot {self.target1} ↔ slot {self.target2}"

    def __str__(self) -> str:
        return f"{self.label()} (ori: {self.orientation})"


@dataclass(frozen=True)
class EdgeFlip:
    target: int
    buffer: int = 0
    family: ClassVar[Family] = Family.EDGE
    kind: ClassVar[str] = "flip"

    def __post_init__(self) -> None:
        _check_slot("target", self.target, EDGE_COUNT)
        _check_slot("buffer", self.buffer, EDGE_COUNT)
        if self.target == self.buffer:
            raise ValueError("The buffer cannot be flipped against itself")

    @property
    def orientation(self) -> int:
        return 1

    def transform(self) -> CubeState:
        return _edge_transform(None, {self.target: 1, self.buffer: 1})

    def label(self) -> str:
        return f"Edge flip: slot {self.target}"

    def __str__(self) -> str:
        return self.label()


CornerOperation = Union[CornerSwap, CornerTwist]
EdgeOperation = Union[EdgeSwap, EdgeFlip]
Operation = Union[CornerSwap, CornerTwist, EdgeSwap, EdgeFlip]


def operation_targets(operation: Operation) -> list[int]:
    if isinstance(operation, (CornerSwap, EdgeSwap)):
        return [operation.target1, operation.target2]
    return [operation.target]


@dataclass(frozen=True)
class MoveSequence:
    description: str
    moves: Tuple[Move, ...] = ()

    @property
    def sequence(self) -> str:
        return format_moves(self.moves)

    def __str__(self) -> str:
        return self.sequence


@dataclass(frozen=True)
class BldOperations:
    corner_operations: Tuple[CornerOperation, ...] = ()
    edge_operations: Tuple[EdgeOperation, ...] = ()

    @property
    def all_operations(self) -> Tuple[Operation, ...]:
        return (*self.corner_operations, *self.edge_operations)

    def is_empty(self) -> bool:
        return not self.corner_operations and not self.edge_operations


@dataclass(frozen=True)
class BldSolution:
    corner_operations: Tuple[CornerOperation, ...] = ()
    edge_operations: Tuple[EdgeOperation, ...] = ()
    move_sequences: Tuple[MoveSequence, ...] = ()
    all_operations: Tuple[Operation, ...] = ()

    @property
    def moves(self) -> list[Move]:
        return [move for sequence in self.move_sequences for move in sequence.moves]

    @property
    def formatted_solution(self) -> str:
        return " ".join(sequence.sequence for sequence in self.move_sequences if sequence.moves)


class AlgorithmKind(str, Enum):
    CORNER_CYCLE = "CORNER_CYCLE"
    EDGE_CYCLE = "EDGE_CYCLE"
    PARITY = "PARITY"
    CORNER_TWIST = "CORNER_TWIST"


@dataclass(frozen=True)
class AlgorithmPreset:
    name: str
    formula: str
    kind: AlgorithmKind

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Preset name must be non-empty")
        if not self.formula.strip():
            raise ValueError("Preset formula must be non-empty")
