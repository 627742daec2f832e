from cubebld.api import (
    BldSolutionResult,
    ParsedScramble,
    ScrambleResult,
    apply_scramble_to_state,
    parse_scramble,
    solve_bld,
    solve_bld_with_default_moveset,
)
from cubebld.formula import Move, ScrambleSyntaxError, expand_notation
from cubebld.models import BldOperations, BldSolution, CornerSwap, CornerTwist, EdgeFlip, EdgeSwap, MoveSequence
from cubebld.moves import apply_move, apply_moves, scramble_to_state
from cubebld.moveset import Moveset, MovesetError, build_moveset, default_moveset
from cubebld.presets import preset_for_kind
from cubebld.solver import SolverConfig, solve
from cubebld.state import CubeState, InvalidStateError
from cubebld.translator import NoAlgorithmError, build_solution, translate

__all__ = [
    "BldOperations",
    "BldSolution",
    "BldSolutionResult",
    "CornerSwap",
    "CornerTwist",
    "CubeState",
    "EdgeFlip",
    "EdgeSwap",
    "InvalidStateError",
    "Move",
    "MoveSequence",
    "Moveset",
    "MovesetError",
    "NoAlgorithmError",
    "ParsedScramble",
    "ScrambleResult",
    "ScrambleSyntaxError",
    "SolverConfig",
    "apply_move",
    "apply_moves",
    "apply_scramble_to_state",
    "build_moveset",
    "build_solution",
    "default_moveset",
    "expand_notation",
    "parse_scramble",
    "preset_for_kind",
    "scramble_to_state",
    "solve",
    "solve_bld",
    "solve_bld_with_default_moveset",
    "translate",
]
