from __future__ import annotations

import random

import pytest

from cubebld.formula import FACES, Move, invert_moves, parse_scramble
from cubebld.moves import ALL_MOVES, MOVE_TABLE, apply_move, apply_moves, scramble_to_state, sequence_transform
from cubebld.state import CubeState


def _random_moves(rng: random.Random, length: int) -> list[Move]:
    return [rng.choice(ALL_MOVES) for _ in range(length)]


def test_move_table_has_eighteen_turns() -> None:
    assert len(ALL_MOVES) == 18
    assert {move.face for move in ALL_MOVES} == set(FACES)


@pytest.mark.parametrize("face", list(FACES))
def test_half_and_prime_turns_agree_with_quarter_turns(face: str) -> None:
    quarter = MOVE_TABLE[Move(face)]
    assert MOVE_TABLE[Move(face, "2")] == quarter.compose(quarter)
    assert MOVE_TABLE[Move(face, "'")] == quarter.compose(quarter).compose(quarter)
    assert MOVE_TABLE[Move(face, "'")] == quarter.inverse()
    assert quarter.compose(quarter).compose(quarter).compose(quarter).is_solved()


@pytest.mark.parametrize("move", ALL_MOVES, ids=str)
def test_every_move_is_a_valid_transform(move: Move) -> None:
    MOVE_TABLE[move].validate()


def test_r_turn_cycles_right_layer() -> None:
    state = apply_move(CubeState.solved(), Move("R"))
    assert state.cp.tolist() == [0, 2, 6, 3, 4, 1, 5, 7]
    assert state.ep.tolist() == [0, 5, 9, 3, 4, 2, 6, 7, 8, 1, 10, 11]
    assert state.moved_corners() == [1, 2, 5, 6]
    assert state.eo.tolist() == [0] * 12


def test_u_and_d_turns_keep_orientation() -> None:
    for face in "UD":
        state = apply_move(CubeState.solved(), Move(face))
        assert state.co.tolist() == [0] * 8
        assert state.eo.tolist() == [0] * 12


def test_f_turn_flips_four_edges() -> None:
    state = apply_move(CubeState.solved(), Move("F"))
    assert sorted(slot for slot in range(12) if state.eo[slot]) == [2, 3, 6, 10]


def test_sexy_move_has_order_six() -> None:
    state = scramble_to_state("R U R' U' " * 6)
    assert state.is_solved()


def test_sequence_followed_by_its_reverse_returns_to_solved() -> None:
    state = apply_moves(CubeState.solved(), parse_scramble("R U R' U'"))
    state = apply_moves(state, parse_scramble("U R U' R'"))
    assert state.is_solved()


def test_apply_moves_is_left_fold() -> None:
    moves = parse_scramble("F R' D2 B L U'")
    state = CubeState.solved()
    for move in moves:
        state = apply_move(state, move)
    assert apply_moves(CubeState.solved(), moves) == state
    assert sequence_transform(moves) == state


def test_transforms_compose_like_concatenation() -> None:
    first = parse_scramble("R U2 F'")
    second = parse_scramble("D L' B2")
    assert sequence_transform(first).compose(sequence_transform(second)) == sequence_transform(first + second)


def test_random_scrambles_keep_every_invariant() -> None:
    rng = random.Random(20240601)
    for _ in range(50):
        moves = _random_moves(rng, rng.randint(1, 40))
        state = apply_moves(CubeState.solved(), moves)
        state.validate()
        assert apply_moves(state, invert_moves(moves)).is_solved()


def test_superflip_flips_every_edge() -> None:
    state = scramble_to_state("U R2 F B R B2 R U2 L B2 R U' D' R2 F R' L B2 U2 F2")
    assert state.cp.tolist() == list(range(8))
    assert state.co.tolist() == [0] * 8
    assert state.ep.tolist() == list(range(12))
    assert state.eo.tolist() == [1] * 12
