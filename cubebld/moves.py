from __future__ import annotations

from functools import reduce
from types import MappingProxyType
from typing import Iterable, Mapping

from cubebld.formula import FACES, Move, parse_scramble
from cubebld.state import CubeState

# Clockwise quarter turns. new_cp[i] = old_cp[cp[i]], new_co[i] = old_co[cp[i]] + co[i].
_QUARTER_TURNS = {
    "U": CubeState(
        cp=[3, 0, 1, 2, 4, 5, 6, 7],
        co=[0, 0, 0, 0, 0, 0, 0, 0],
        ep=[0, 1, 2, 3, 7, 4, 5, 6, 8, 9, 10, 11],
        eo=[0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    ),
    "D": CubeState(
        cp=[0, 1, 2, 3, 5, 6, 7, 4],
        co=[0, 0, 0, 0, 0, 0, 0, 0],
        ep=[0, 1, 2, 3, 4, 5, 6, 7, 9, 10, 11, 8],
        eo=[0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    ),
    "L": CubeState(
        cp=[4, 1, 2, 0, 7, 5, 6, 3],
        co=[2, 0, 0, 1, 1, 0, 0, 2],
        ep=[11, 1, 2, 7, 4, 5, 6, 0, 8, 9, 10, 3],
        eo=[0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    ),
    "R": CubeState(
        cp=[0, 2, 6, 3, 4, 1, 5, 7],
        co=[0, 1, 2, 0, 0, 2, 1, 0],
        ep=[0, 5, 9, 3, 4, 2, 6, 7, 8, 1, 10, 11],
        eo=[0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    ),
    "F": CubeState(
        cp=[0, 1, 3, 7, 4, 5, 2, 6],
        co=[0, 0, 1, 2, 0, 0, 2, 1],
        ep=[0, 1, 6, 10, 4, 5, 3, 7, 8, 9, 2, 11],
        eo=[0, 0, 1, 1, 0, 0, 1, 0, 0, 0, 1, 0],
    ),
    "B": CubeState(
        cp=[1, 5, 2, 3, 0, 4, 6, 7],
        co=[1, 2, 0, 0, 2, 1, 0, 0],
        ep=[4, 8, 2, 3, 1, 5, 6, 7, 0, 9, 10, 11],
        eo=[1, 1, 0, 0, 1, 0, 0, 0, 1, 0, 0, 0],
    ),
}


def _build_move_table() -> Mapping[Move, CubeState]:
    table: dict[Move, CubeState] = {}
    for face in FACES:
        quarter = _QUARTER_TURNS[face]
        half = quarter.compose(quarter)
        table[Move(face)] = quarter
        table[Move(face, "2")] = half
        table[Move(face, "'")] = half.compose(quarter)
    return MappingProxyType(table)


MOVE_TABLE = _build_move_table()
ALL_MOVES = tuple(MOVE_TABLE)


def apply_move(state: CubeState, move: Move) -> CubeState:
    return state.compose(MOVE_TABLE[move])


def apply_moves(state: CubeState, moves: Iterable[Move]) -> CubeState:
    return reduce(apply_move, moves, state)


def sequence_transform(moves: Iterable[Move]) -> CubeState:
    """The net effect of ``moves`` as a transform, i.e. the moves applied to a solved cube."""
    return apply_moves(CubeState.solved(), moves)


def scramble_to_state(scramble: str) -> CubeState:
    return apply_moves(CubeState.solved(), parse_scramble(scramble))
