from __future__ import annotations

from cubebld.models import AlgorithmKind, AlgorithmPreset

# Base algorithms the default moveset is conjugated from. Each one must be a
# pure effect of its kind; moveset generation checks this.
PRESET_LIST = [
    AlgorithmPreset(
        name="CornerCommutator",
        formula="[R U R', D]",
        kind=AlgorithmKind.CORNER_CYCLE,
    ),
    AlgorithmPreset(
        name="Ua",
        formula="R U' R U R U R U' R' U' R2",
        kind=AlgorithmKind.EDGE_CYCLE,
    ),
    AlgorithmPreset(
        name="T",
        formula="R U R' U' R' F R2 U' R' U' R U R' F'",
        kind=AlgorithmKind.PARITY,
    ),
    AlgorithmPreset(
        name="CornerTwist",
        formula="[(R' D' R D)2, U]",
        kind=AlgorithmKind.CORNER_TWIST,
    ),
]


def preset_for_kind(kind: AlgorithmKind) -> AlgorithmPreset:
    for preset in PRESET_LIST:
        if preset.kind == kind:
            return preset
    raise KeyError(f"No base algorithm registered for {kind.value}")
