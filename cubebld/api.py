from __future__ import annotations

import logging
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from cubebld.formula import ScrambleSyntaxError, format_moves
from cubebld.formula import parse_scramble as parse_moves
from cubebld.models import BldSolution, MoveSequence, Operation, operation_targets
from cubebld.moves import scramble_to_state
from cubebld.moveset import Moveset, MovesetError, default_moveset
from cubebld.state import CubeState, InvalidStateError
from cubebld.translator import NoAlgorithmError, build_solution

logger = logging.getLogger(__name__)

_BOUNDARY_ERRORS = (ScrambleSyntaxError, InvalidStateError, NoAlgorithmError, MovesetError)


class ParsedScramble(BaseModel):
    success: bool
    moves: Optional[list[str]] = None
    error: Optional[str] = None


class StateData(BaseModel):
    cp: list[int]
    co: list[int]
    ep: list[int]
    eo: list[int]

    @classmethod
    def from_state(cls, state: CubeState) -> StateData:
        return cls(**state.to_dict())


class ScrambleResult(BaseModel):
    success: bool
    state: Optional[StateData] = None
    error: Optional[str] = None


class OperationData(BaseModel):
    family: str = Field(pattern="^(corner|edge)$")
    kind: str = Field(pattern="^(swap|twist|flip)$")
    targets: list[int]
    orientation: int
    label: str

    @classmethod
    def from_operation(cls, operation: Operation) -> OperationData:
        return cls(
            family=operation.family.value,
            kind=operation.kind,
            targets=operation_targets(operation),
            orientation=operation.orientation,
            label=operation.label(),
        )


class MoveSequenceData(BaseModel):
    description: str
    sequence: str

    @classmethod
    def from_sequence(cls, sequence: MoveSequence) -> MoveSequenceData:
        return cls(description=sequence.description, sequence=sequence.sequence)


class BldSolutionData(BaseModel):
    corner_operations: list[OperationData]
    edge_operations: list[OperationData]
    move_sequences: list[MoveSequenceData]
    all_operations: list[OperationData]
    formatted_solution: str

    @classmethod
    def from_solution(cls, solution: BldSolution) -> BldSolutionData:
        return cls(
            corner_operations=[OperationData.from_operation(op) for op in solution.corner_operations],
            edge_operations=[OperationData.from_operation(op) for op in solution.edge_operations],
            move_sequences=[MoveSequenceData.from_sequence(seq) for seq in solution.move_sequences],
            all_operations=[OperationData.from_operation(op) for op in solution.all_operations],
            formatted_solution=solution.formatted_solution,
        )


class BldSolutionResult(BaseModel):
    success: bool
    solution: Optional[BldSolutionData] = None
    error: Optional[str] = None


def parse_scramble(text: str) -> ParsedScramble:
    try:
        moves = parse_moves(text)
    except ScrambleSyntaxError as exc:
        logger.warning("Rejected scramble %r: %s", text, exc)
        return ParsedScramble(success=False, error=str(exc))
    return ParsedScramble(success=True, moves=format_moves(moves).split())


def apply_scramble_to_state(text: str) -> ScrambleResult:
    try:
        state = scramble_to_state(text)
    except ScrambleSyntaxError as exc:
        logger.warning("Rejected scramble %r: %s", text, exc)
        return ScrambleResult(success=False, error=str(exc))
    return ScrambleResult(success=True, state=StateData.from_state(state))


def solve_bld(
    cp: Sequence[int],
    co: Sequence[int],
    ep: Sequence[int],
    eo: Sequence[int],
    moveset: Moveset,
) -> BldSolutionResult:
    """Solves the given state with ``moveset``; failures come back as ``success=False``."""
    try:
        state = CubeState(cp=cp, co=co, ep=ep, eo=eo)
        solution = build_solution(state, moveset)
    except _BOUNDARY_ERRORS as exc:
        logger.warning("BLD solve failed: %s", exc)
        return BldSolutionResult(success=False, error=str(exc))
    return BldSolutionResult(success=True, solution=BldSolutionData.from_solution(solution))


def solve_bld_with_default_moveset(
    cp: Sequence[int],
    co: Sequence[int],
    ep: Sequence[int],
    eo: Sequence[int],
) -> BldSolutionResult:
    try:
        moveset = default_moveset()
    except MovesetError as exc:
        logger.warning("Default moveset unavailable: %s", exc)
        return BldSolutionResult(success=False, error=str(exc))
    return solve_bld(cp, co, ep, eo, moveset)
