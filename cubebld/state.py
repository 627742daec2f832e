from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

CORNER_COUNT = 8
EDGE_COUNT = 12

# Slot order shared by the move tables and the solver:
# corners UBL UBR UFR UFL DBL DBR DFR DFL, edges BL BR FR FL UB UR UF UL DB DR DF DL.


class InvalidStateError(ValueError):
    """Raised when a cube state is malformed or not reachable by face turns.

    ``invariant`` names the failed check: ``shape``, ``range``, ``permutation``,
    ``corner_orientation``, ``edge_orientation`` or ``parity``.
    """

    def __init__(self, message: str, invariant: str) -> None:
        super().__init__(message)
        self.invariant = invariant


def _frozen_vector(values: Any, length: int, modulus: int, name: str) -> np.ndarray:
    try:
        array = np.asarray(values)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidStateError(f"{name} must be a sequence of integers", "shape") from exc

    if array.shape != (length,):
        raise InvalidStateError(f"{name} must have exactly {length} entries, got shape {array.shape}", "shape")
    # Integers beyond 64 bits arrive as an object array.
    if not np.issubdtype(array.dtype, np.integer):
        raise InvalidStateError(f"{name} must contain integers only, got {array.dtype}", "shape")
    if int(array.min()) < 0 or int(array.max()) >= modulus:
        raise InvalidStateError(f"{name} values must be in range 0..{modulus - 1}", "range")

    frozen = array.astype(np.uint8)
    frozen.flags.writeable = False
    return frozen


def _read_only(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


def permutation_parity(perm: Sequence[int]) -> int:
    """Returns 0 for an even permutation and 1 for an odd one."""
    size = len(perm)
    seen = [False] * size
    parity = 0
    for start in range(size):
        if seen[start]:
            continue
        length = 0
        index = start
        while not seen[index]:
            seen[index] = True
            index = int(perm[index])
            length += 1
        parity ^= (length - 1) & 1
    return parity


@dataclass(frozen=True, eq=False)
class CubeState:
    """Corner/edge permutation and orientation vectors of a 3x3x3 cube.

    ``cp[i]`` is the corner piece sitting in slot ``i`` and ``co[i]`` its twist;
    ``ep``/``eo`` are the same for edges. A state is also a transform: composing
    ``a`` with ``b`` means "apply ``a``, then ``b``".
    """

    cp: np.ndarray
    co: np.ndarray
    ep: np.ndarray
    eo: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "cp", _frozen_vector(self.cp, CORNER_COUNT, CORNER_COUNT, "cp"))
        object.__setattr__(self, "co", _frozen_vector(self.co, CORNER_COUNT, 3, "co"))
        object.__setattr__(self, "ep", _frozen_vector(self.ep, EDGE_COUNT, EDGE_COUNT, "ep"))
        object.__setattr__(self, "eo", _frozen_vector(self.eo, EDGE_COUNT, 2, "eo"))

    @classmethod
    def _trusted(cls, cp: np.ndarray, co: np.ndarray, ep: np.ndarray, eo: np.ndarray) -> CubeState:
        # Skips range checks; only for vectors computed from already valid states.
        state = object.__new__(cls)
        object.__setattr__(state, "cp", _read_only(cp))
        object.__setattr__(state, "co", _read_only(co))
        object.__setattr__(state, "ep", _read_only(ep))
        object.__setattr__(state, "eo", _read_only(eo))
        return state

    @classmethod
    def solved(cls) -> CubeState:
        return _SOLVED

    @classmethod
    def from_dict(cls, data: dict[str, Sequence[int]]) -> CubeState:
        missing = [name for name in ("cp", "co", "ep", "eo") if name not in data]
        if missing:
            raise InvalidStateError(f"Missing state vectors: {', '.join(missing)}", "shape")
        return cls(cp=data["cp"], co=data["co"], ep=data["ep"], eo=data["eo"])

    def to_dict(self) -> dict[str, list[int]]:
        return {
            "cp": self.cp.tolist(),
            "co": self.co.tolist(),
            "ep": self.ep.tolist(),
            "eo": self.eo.tolist(),
        }

    def key(self) -> bytes:
        return self.cp.tobytes() + self.co.tobytes() + self.ep.tobytes() + self.eo.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CubeState):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self) -> int:
        return hash(self.key())

    def __repr__(self) -> str:
        return (
            f"CubeState(cp={self.cp.tolist()}, co={self.co.tolist()}, "
            f"ep={self.ep.tolist()}, eo={self.eo.tolist()})"
        )

    def is_solved(self) -> bool:
        return self == _SOLVED

    def compose(self, other: CubeState) -> CubeState:
        return CubeState._trusted(
            cp=self.cp[other.cp],
            co=(self.co[other.cp] + other.co) % 3,
            ep=self.ep[other.ep],
            eo=(self.eo[other.ep] + other.eo) % 2,
        )

    def inverse(self) -> CubeState:
        cp = np.argsort(self.cp).astype(np.uint8)
        ep = np.argsort(self.ep).astype(np.uint8)
        return CubeState._trusted(
            cp=cp,
            co=((3 - self.co[cp]) % 3).astype(np.uint8),
            ep=ep,
            eo=self.eo[ep].copy(),
        )

    def corner_part(self) -> CubeState:
        return CubeState._trusted(self.cp.copy(), self.co.copy(), _SOLVED.ep.copy(), _SOLVED.eo.copy())

    def edge_part(self) -> CubeState:
        return CubeState._trusted(_SOLVED.cp.copy(), _SOLVED.co.copy(), self.ep.copy(), self.eo.copy())

    def moved_corners(self) -> list[int]:
        return [i for i in range(CORNER_COUNT) if self.cp[i] != i or self.co[i] != 0]

    def moved_edges(self) -> list[int]:
        return [i for i in range(EDGE_COUNT) if self.ep[i] != i or self.eo[i] != 0]

    def validate(self) -> None:
        """Raises InvalidStateError naming the first violated invariant."""
        if sorted(self.cp.tolist()) != list(range(CORNER_COUNT)):
            raise InvalidStateError(f"cp is not a permutation of 0..7: {self.cp.tolist()}", "permutation")
        if sorted(self.ep.tolist()) != list(range(EDGE_COUNT)):
            raise InvalidStateError(f"ep is not a permutation of 0..11: {self.ep.tolist()}", "permutation")
        if int(self.co.sum()) % 3 != 0:
            raise InvalidStateError("Corner orientation sum must be divisible by 3", "corner_orientation")
        if int(self.eo.sum()) % 2 != 0:
            raise InvalidStateError("Edge orientation sum must be even", "edge_orientation")
        if permutation_parity(self.cp) != permutation_parity(self.ep):
            raise InvalidStateError("Corner and edge permutation parities differ", "parity")

    def is_valid(self) -> bool:
        try:
            self.validate()
        except InvalidStateError:
            return False
        return True


_SOLVED = CubeState(
    cp=list(range(CORNER_COUNT)),
    co=[0] * CORNER_COUNT,
    ep=list(range(EDGE_COUNT)),
    eo=[0] * EDGE_COUNT,
)
