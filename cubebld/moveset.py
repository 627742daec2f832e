from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Hashable, Iterable, Mapping, Tuple

from cubebld.formula import Move, ScrambleSyntaxError, expand_notation, format_moves, simplify_moves
from cubebld.models import AlgorithmKind, CornerSwap, CornerTwist, EdgeFlip, EdgeSwap
from cubebld.moves import ALL_MOVES, MOVE_TABLE, sequence_transform
from cubebld.presets import preset_for_kind
from cubebld.state import CORNER_COUNT, EDGE_COUNT, CubeState

logger = logging.getLogger(__name__)

PairKey = Tuple[int, int, int, int]
TwistKey = Tuple[int, int]

_MAX_CONJUGATES = 20000


class MovesetError(ValueError):
    pass


@dataclass(frozen=True)
class Moveset:
    """Algorithm table keyed by operation shape.

    ``corner_cycles[(t1, o1, t2, o2)]`` performs the corner swaps
    ``(buffer, t1, o1)`` then ``(buffer, t2, o2)``; ``edge_cycles`` is the same
    for edges. ``parities[(corner t, corner o, edge t, edge o)]`` performs one
    corner swap and one edge swap together. ``corner_twists[(t, o)]`` and
    ``edge_flips[t]`` fix orientation against the buffer.
    """

    corner_buffer: int
    edge_buffer: int
    corner_cycles: Mapping[PairKey, str]
    edge_cycles: Mapping[PairKey, str]
    parities: Mapping[PairKey, str]
    corner_twists: Mapping[TwistKey, str]
    edge_flips: Mapping[int, str]

    def __post_init__(self) -> None:
        if not 0 <= self.corner_buffer < CORNER_COUNT:
            raise MovesetError(f"corner_buffer must be in range 0..{CORNER_COUNT - 1}")
        if not 0 <= self.edge_buffer < EDGE_COUNT:
            raise MovesetError(f"edge_buffer must be in range 0..{EDGE_COUNT - 1}")
        for name in ("corner_cycles", "edge_cycles", "parities", "corner_twists", "edge_flips"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def tables(self) -> dict[str, Mapping[Any, str]]:
        return {
            "corner_cycles": self.corner_cycles,
            "edge_cycles": self.edge_cycles,
            "parities": self.parities,
            "corner_twists": self.corner_twists,
            "edge_flips": self.edge_flips,
        }

    def expected_keys(self) -> dict[str, list[Any]]:
        return _expected_keys(self.corner_buffer, self.edge_buffer)

    def missing_entries(self) -> dict[str, list[Any]]:
        missing: dict[str, list[Any]] = {}
        tables = self.tables()
        for name, keys in self.expected_keys().items():
            absent = [key for key in keys if key not in tables[name]]
            if absent:
                missing[name] = absent
        return missing

    def is_complete(self) -> bool:
        return not self.missing_entries()

    def verify(self) -> None:
        """Raises MovesetError if any algorithm does not perform the effect its key names."""
        expected_keys = self.expected_keys()
        for name, table in self.tables().items():
            allowed = set(expected_keys[name])
            for key, algorithm in table.items():
                if key not in allowed:
                    raise MovesetError(f"{name} has an entry for an impossible key {_encode_key(key)}")
                expected = required_transform(name, key, self.corner_buffer, self.edge_buffer)
                if sequence_transform(expand_notation(algorithm)) != expected:
                    raise MovesetError(f"{name} entry {_encode_key(key)} does not match its effect: {algorithm}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "corner_buffer": self.corner_buffer,
            "edge_buffer": self.edge_buffer,
        }
        for name, table in self.tables().items():
            data[name] = {_encode_key(key): table[key] for key in sorted(table)}
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], verify: bool = True) -> Moveset:
        try:
            corner_buffer = int(data.get("corner_buffer", 0))
            edge_buffer = int(data.get("edge_buffer", 0))
        except (TypeError, ValueError) as exc:
            raise MovesetError("Buffers must be integers") from exc

        tables: dict[str, dict[Any, str]] = {}
        for name, size in _KEY_SIZES.items():
            raw_table = data.get(name, {})
            if not isinstance(raw_table, Mapping):
                raise MovesetError(f"{name} must be an object mapping keys to algorithms")
            tables[name] = {
                _decode_key(raw_key, size): _normalize_algorithm(name, raw_key, algorithm)
                for raw_key, algorithm in raw_table.items()
            }

        moveset = cls(corner_buffer=corner_buffer, edge_buffer=edge_buffer, **tables)
        if verify:
            moveset.verify()
        return moveset

    def to_json(self, path: Path) -> None:
        path.write_text(json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")

    @classmethod
    def from_json(cls, path: Path, verify: bool = True) -> Moveset:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise MovesetError(f"Invalid moveset JSON in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise MovesetError(f"Moveset file {path} must contain a JSON object")
        return cls.from_dict(data, verify=verify)


_KEY_SIZES = {
    "corner_cycles": 4,
    "edge_cycles": 4,
    "parities": 4,
    "corner_twists": 2,
    "edge_flips": 1,
}


def _encode_key(key: Any) -> str:
    if isinstance(key, int):
        return str(key)
    if len(key) == 2:
        return f"{key[0]}:{key[1]}"
    return f"{key[0]}:{key[1]} {key[2]}:{key[3]}"


def _decode_key(raw_key: str, size: int) -> Any:
    parts = str(raw_key).replace(":", " ").split()
    if len(parts) != size:
        raise MovesetError(f"Malformed moveset key '{raw_key}'")
    try:
        values = tuple(int(part) for part in parts)
    except ValueError as exc:
        raise MovesetError(f"Malformed moveset key '{raw_key}'") from exc
    return values[0] if size == 1 else values


def _normalize_algorithm(name: str, raw_key: str, algorithm: Any) -> str:
    if not isinstance(algorithm, str):
        raise MovesetError(f"{name} entry {raw_key} must be a notation string")
    try:
        return format_moves(expand_notation(algorithm))
    except ScrambleSyntaxError as exc:
        raise MovesetError(f"{name} entry {raw_key}: {exc}") from exc


def _expected_keys(corner_buffer: int, edge_buffer: int) -> dict[str, list[Any]]:
    corners = [slot for slot in range(CORNER_COUNT) if slot != corner_buffer]
    edges = [slot for slot in range(EDGE_COUNT) if slot != edge_buffer]
    return {
        "corner_cycles": [
            (first, o1, second, o2)
            for first in corners
            for o1 in range(3)
            for second in corners
            for o2 in range(3)
            if first != second
        ],
        "edge_cycles": [
            (first, o1, second, o2)
            for first in edges
            for o1 in range(2)
            for second in edges
            for o2 in range(2)
            if first != second
        ],
        "parities": [
            (corner, co, edge, eo)
            for corner in corners
            for co in range(3)
            for edge in edges
            for eo in range(2)
        ],
        "corner_twists": [(corner, twist) for corner in corners for twist in (1, 2)],
        "edge_flips": list(edges),
    }


def required_transform(table: str, key: Any, corner_buffer: int, edge_buffer: int) -> CubeState:
    """The exact cube effect an entry of ``table`` under ``key`` has to perform."""
    if table == "corner_cycles":
        first, o1, second, o2 = key
        return CornerSwap(corner_buffer, first, o1).transform().compose(
            CornerSwap(corner_buffer, second, o2).transform()
        )
    if table == "edge_cycles":
        first, o1, second, o2 = key
        return EdgeSwap(edge_buffer, first, o1).transform().compose(EdgeSwap(edge_buffer, second, o2).transform())
    if table == "parities":
        corner, co, edge, eo = key
        return CornerSwap(corner_buffer, corner, co).transform().compose(EdgeSwap(edge_buffer, edge, eo).transform())
    if table == "corner_twists":
        corner, twist = key
        return CornerTwist(corner, twist, buffer=corner_buffer).transform()
    if table == "edge_flips":
        return EdgeFlip(key, buffer=edge_buffer).transform()
    raise MovesetError(f"Unknown moveset table: {table}")


def _base_moves(kind: AlgorithmKind, corners: int, edges: int) -> tuple[Move, ...]:
    preset = preset_for_kind(kind)
    moves = tuple(expand_notation(preset.formula))
    transform = sequence_transform(moves)
    if len(transform.moved_corners()) != corners or len(transform.moved_edges()) != edges:
        raise MovesetError(
            f"Base algorithm {preset.name} must move exactly {corners} corners and {edges} edges"
        )
    return moves


def _conjugate_search(
    base_moves: tuple[Move, ...],
    wanted: Mapping[bytes, Hashable],
    stop_when: Callable[[int], bool],
) -> dict[Hashable, tuple[Move, ...]]:
    """Breadth-first search over setup conjugates ``S base S'`` of a base algorithm.

    Returns the shortest conjugate found for every wanted transform key.
    """
    inverse_turns = {move: MOVE_TABLE[move.inverse()] for move in ALL_MOVES}
    base = sequence_transform(base_moves)
    found: dict[Hashable, tuple[Move, ...]] = {}
    if base.key() in wanted:
        found[wanted[base.key()]] = base_moves

    seen = {base.key()}
    queue: deque[tuple[CubeState, tuple[Move, ...]]] = deque([(base, base_moves)])

    while queue and not stop_when(len(found)):
        transform, moves = queue.popleft()
        for move in ALL_MOVES:
            conjugate = MOVE_TABLE[move].compose(transform).compose(inverse_turns[move])
            key = conjugate.key()
            if key in seen:
                continue
            seen.add(key)
            if len(seen) > _MAX_CONJUGATES:
                raise MovesetError("Conjugate search did not cover the requested algorithms")

            conjugate_moves = (move, *moves, move.inverse())
            if key in wanted and wanted[key] not in found:
                found[wanted[key]] = conjugate_moves
            queue.append((conjugate, conjugate_moves))

    return found


def _wanted(table: str, keys: Iterable[Any], corner_buffer: int, edge_buffer: int) -> dict[bytes, Any]:
    return {required_transform(table, key, corner_buffer, edge_buffer).key(): key for key in keys}


def _finish(table: str, key: Any, moves: Iterable[Move], corner_buffer: int, edge_buffer: int) -> str:
    simplified = simplify_moves(moves)
    if sequence_transform(simplified) != required_transform(table, key, corner_buffer, edge_buffer):
        raise MovesetError(f"Generated {table} algorithm for {_encode_key(key)} has the wrong effect")
    return format_moves(simplified)


@lru_cache(maxsize=None)
def build_moveset(corner_buffer: int = 0, edge_buffer: int = 0) -> Moveset:
    """Generates a complete moveset for the given buffers.

    Cycles, twists and the parity seed are setup conjugates of the base
    algorithms in ``presets``; edge flips are two edge cycles back to back and
    every parity entry is the seed followed by corner and edge fix-ups.
    """
    expected = _expected_keys(corner_buffer, edge_buffer)
    searches = {
        "corner_cycles": (AlgorithmKind.CORNER_CYCLE, 3, 0),
        "edge_cycles": (AlgorithmKind.EDGE_CYCLE, 0, 3),
        "corner_twists": (AlgorithmKind.CORNER_TWIST, 2, 0),
    }

    found: dict[str, dict[Any, tuple[Move, ...]]] = {}
    for table, (kind, corners, edges) in searches.items():
        wanted = _wanted(table, expected[table], corner_buffer, edge_buffer)
        total = len(wanted)
        found[table] = _conjugate_search(
            _base_moves(kind, corners, edges),
            wanted,
            stop_when=lambda count, total=total: count >= total,
        )
        if len(found[table]) != total:
            raise MovesetError(f"Could not generate every {table} entry")
        logger.debug("Generated %d %s entries", total, table)

    corner_index = {
        required_transform(table, key, corner_buffer, edge_buffer).key(): moves
        for table in ("corner_cycles", "corner_twists")
        for key, moves in found[table].items()
    }
    cycle_index = {
        required_transform("edge_cycles", key, corner_buffer, edge_buffer).key(): moves
        for key, moves in found["edge_cycles"].items()
    }

    edge_flips: dict[Any, tuple[Move, ...]] = {}
    for target in expected["edge_flips"]:
        helper = next(slot for slot in range(EDGE_COUNT) if slot not in (edge_buffer, target))
        first = (target, 0, helper, 0)
        rest = required_transform("edge_cycles", first, corner_buffer, edge_buffer).inverse().compose(
            required_transform("edge_flips", target, corner_buffer, edge_buffer)
        )
        edge_flips[target] = (*found["edge_cycles"][first], *cycle_index[rest.key()])
    found["edge_flips"] = edge_flips

    edge_index = {
        **cycle_index,
        **{
            required_transform("edge_flips", key, corner_buffer, edge_buffer).key(): moves
            for key, moves in edge_flips.items()
        },
    }
    found["parities"] = _build_parities(expected["parities"], corner_buffer, edge_buffer, corner_index, edge_index)

    tables = {
        table: {key: _finish(table, key, moves, corner_buffer, edge_buffer) for key, moves in entries.items()}
        for table, entries in found.items()
    }
    logger.debug("Built moveset for buffers corner=%d edge=%d", corner_buffer, edge_buffer)
    return Moveset(corner_buffer=corner_buffer, edge_buffer=edge_buffer, **tables)


def _build_parities(
    keys: list[PairKey],
    corner_buffer: int,
    edge_buffer: int,
    corner_index: Dict[bytes, tuple[Move, ...]],
    edge_index: Dict[bytes, tuple[Move, ...]],
) -> dict[PairKey, tuple[Move, ...]]:
    wanted = _wanted("parities", keys, corner_buffer, edge_buffer)
    seeds = _conjugate_search(
        _base_moves(AlgorithmKind.PARITY, 2, 2),
        wanted,
        stop_when=lambda count: count >= 1,
    )
    if not seeds:
        raise MovesetError("Could not find a parity algorithm through both buffers")
    seed_key, seed_moves = next(iter(seeds.items()))
    seed_inverse = required_transform("parities", seed_key, corner_buffer, edge_buffer).inverse()

    parities: dict[PairKey, tuple[Move, ...]] = {}
    for key in keys:
        remainder = seed_inverse.compose(required_transform("parities", key, corner_buffer, edge_buffer))
        moves = list(seed_moves)
        for part, index in ((remainder.corner_part(), corner_index), (remainder.edge_part(), edge_index)):
            if part.is_solved():
                continue
            if part.key() not in index:
                raise MovesetError(f"No fix-up algorithm for parity entry {_encode_key(key)}")
            moves.extend(index[part.key()])
        parities[key] = tuple(moves)
    return parities


@lru_cache(maxsize=1)
def default_moveset() -> Moveset:
    """The built-in moveset (both buffers in slot 0), generated once per process."""
    return build_moveset(0, 0)
