from __future__ import annotations

import random

import pytest

from cubebld.models import CornerSwap, CornerTwist, EdgeFlip, EdgeSwap
from cubebld.moves import ALL_MOVES, apply_moves, scramble_to_state
from cubebld.moveset import Moveset, build_moveset, default_moveset
from cubebld.state import CubeState
from cubebld.translator import NoAlgorithmError, build_solution, translate


def _empty_moveset(corner_buffer: int = 0, edge_buffer: int = 0) -> Moveset:
    return Moveset(
        corner_buffer=corner_buffer,
        edge_buffer=edge_buffer,
        corner_cycles={},
        edge_cycles={},
        parities={},
        corner_twists={},
        edge_flips={},
    )


def test_solved_state_gives_empty_solution() -> None:
    solution = build_solution(CubeState.solved())
    assert solution.corner_operations == ()
    assert solution.edge_operations == ()
    assert solution.move_sequences == ()
    assert solution.all_operations == ()
    assert solution.formatted_solution == ""


def test_swaps_are_paired_into_cycles() -> None:
    operations = [CornerSwap(0, 2, 0), CornerSwap(0, 5, 1), EdgeSwap(0, 4, 1), EdgeSwap(0, 9, 0)]
    sequences = translate(operations, default_moveset())
    assert [sequence.description for sequence in sequences] == [
        "Corner swap: slot 0 ↔ slot 2, slot 0 ↔ slot 5",
        "Edge swap: slot 0 ↔ slot 4, slot 0 ↔ slot 9",
    ]
    assert sequences[0].sequence == default_moveset().corner_cycles[(2, 0, 5, 1)]
    assert sequences[1].sequence == default_moveset().edge_cycles[(4, 1, 9, 0)]


def test_emission_order() -> None:
    operations = [
        CornerSwap(0, 1, 0),
        CornerSwap(0, 3, 0),
        CornerSwap(0, 6, 2),
        CornerTwist(4, 2),
        EdgeSwap(0, 7, 0),
        EdgeFlip(6),
    ]
    descriptions = [sequence.description for sequence in translate(operations, default_moveset())]
    assert descriptions == [
        "Corner swap: slot 0 ↔ slot 1, slot 0 ↔ slot 3",
        "Parity: corner slot 0 ↔ slot 6, edge slot 0 ↔ slot 7",
        "Corner twist: slot 4 (2)",
        "Edge flip: slot 6",
    ]


def test_parity_scramble_is_solved() -> None:
    state = scramble_to_state("R U R' U' R' F R2 U' R' U' R U R' F'")
    solution = build_solution(state)
    assert any(sequence.description.startswith("Parity:") for sequence in solution.move_sequences)
    assert apply_moves(state, solution.moves).is_solved()


def test_random_scrambles_are_solved_by_the_solution() -> None:
    rng = random.Random(1234)
    for _ in range(25):
        state = apply_moves(CubeState.solved(), [rng.choice(ALL_MOVES) for _ in range(25)])
        solution = build_solution(state)
        assert apply_moves(state, solution.moves).is_solved()
        assert solution.all_operations == solution.corner_operations + solution.edge_operations
        assert solution.formatted_solution == " ".join(
            sequence.sequence for sequence in solution.move_sequences if sequence.sequence
        )


def test_solution_with_other_buffers() -> None:
    moveset = build_moveset(2, 5)
    rng = random.Random(99)
    for _ in range(10):
        state = apply_moves(CubeState.solved(), [rng.choice(ALL_MOVES) for _ in range(25)])
        solution = build_solution(state, moveset)
        assert all(op.buffer == 2 for op in solution.corner_operations)
        assert apply_moves(state, solution.moves).is_solved()


def test_missing_algorithm_names_the_operation() -> None:
    twist = CornerTwist(3, 1)
    with pytest.raises(NoAlgorithmError) as exc_info:
        translate([twist], _empty_moveset())
    assert exc_info.value.operation == twist
    assert isinstance(exc_info.value, LookupError)


def test_buffer_mismatch_is_rejected() -> None:
    flip = EdgeFlip(3)
    with pytest.raises(NoAlgorithmError) as exc_info:
        translate([flip], _empty_moveset(edge_buffer=1))
    assert exc_info.value.operation == flip


def test_unpaired_swap_is_rejected() -> None:
    swap = CornerSwap(0, 1, 0)
    with pytest.raises(NoAlgorithmError) as exc_info:
        translate([swap], default_moveset())
    assert exc_info.value.operation == swap


def test_unknown_operation_is_rejected() -> None:
    with pytest.raises(NoAlgorithmError):
        translate(["R"], default_moveset())
