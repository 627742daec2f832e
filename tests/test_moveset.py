from __future__ import annotations

import json
from pathlib import Path

import pytest

from cubebld.formula import expand_notation
from cubebld.moves import sequence_transform
from cubebld.moveset import Moveset, MovesetError, build_moveset, default_moveset, required_transform


def _empty_moveset(**tables) -> Moveset:
    data = {
        "corner_buffer": 0,
        "edge_buffer": 0,
        "corner_cycles": {},
        "edge_cycles": {},
        "parities": {},
        "corner_twists": {},
        "edge_flips": {},
    }
    data.update(tables)
    return Moveset(**data)


def test_default_moveset_is_complete() -> None:
    moveset = default_moveset()
    assert moveset.is_complete()
    assert moveset.missing_entries() == {}
    assert len(moveset.corner_cycles) == 7 * 3 * 6 * 3
    assert len(moveset.edge_cycles) == 11 * 2 * 10 * 2
    assert len(moveset.parities) == 7 * 3 * 11 * 2
    assert len(moveset.corner_twists) == 14
    assert len(moveset.edge_flips) == 11


def test_default_moveset_is_built_once() -> None:
    assert default_moveset() is default_moveset()


def test_default_moveset_entries_have_their_effect() -> None:
    default_moveset().verify()


def test_sample_entries_match_required_transforms() -> None:
    moveset = default_moveset()
    samples = [
        ("corner_cycles", (2, 0, 5, 1)),
        ("edge_cycles", (7, 1, 4, 0)),
        ("parities", (3, 2, 7, 0)),
        ("corner_twists", (6, 1)),
        ("edge_flips", 10),
    ]
    for table, key in samples:
        algorithm = moveset.tables()[table][key]
        assert sequence_transform(expand_notation(algorithm)) == required_transform(table, key, 0, 0)


def test_moveset_tables_are_read_only() -> None:
    moveset = default_moveset()
    with pytest.raises(TypeError):
        moveset.edge_flips[1] = "R"


def test_missing_entries_lists_absent_keys() -> None:
    moveset = _empty_moveset(edge_flips={1: "R"})
    missing = moveset.missing_entries()
    assert not moveset.is_complete()
    assert 1 not in missing["edge_flips"]
    assert len(missing["edge_flips"]) == 10
    assert len(missing["corner_twists"]) == 14


def test_dict_round_trip() -> None:
    moveset = default_moveset()
    data = moveset.to_dict()
    assert data["edge_flips"]["1"] == moveset.edge_flips[1]
    assert data["corner_cycles"]["1:0 2:0"] == moveset.corner_cycles[(1, 0, 2, 0)]

    loaded = Moveset.from_dict(data)
    assert loaded.tables() == moveset.tables()


def test_json_round_trip(tmp_path: Path) -> None:
    moveset = default_moveset()
    path = tmp_path / "moveset.json"
    moveset.to_json(path)
    loaded = Moveset.from_json(path)
    assert loaded.corner_buffer == 0
    assert loaded.parities == moveset.parities


def test_from_dict_expands_notation() -> None:
    moveset = Moveset.from_dict(
        {"corner_cycles": {"3:0 1:0": "[R U R', D]"}},
        verify=False,
    )
    assert moveset.corner_cycles[(3, 0, 1, 0)] == "R U R' D R U' R' D'"


def test_from_dict_rejects_wrong_algorithm() -> None:
    with pytest.raises(MovesetError):
        Moveset.from_dict({"edge_flips": {"1": "R U R' U'"}})


def test_from_dict_rejects_impossible_key() -> None:
    with pytest.raises(MovesetError):
        Moveset.from_dict({"corner_twists": {"0:1": "R"}})


@pytest.mark.parametrize(
    "data",
    [
        {"corner_cycles": {"1:0": "R"}},
        {"edge_flips": {"one": "R"}},
        {"corner_twists": {"1:1": 5}},
        {"corner_twists": {"1:1": "R X"}},
        {"corner_twists": ["R"]},
        {"corner_buffer": "first"},
    ],
)
def test_from_dict_rejects_malformed_data(data: dict) -> None:
    with pytest.raises(MovesetError):
        Moveset.from_dict(data, verify=False)


def test_from_json_rejects_invalid_file(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(MovesetError):
        Moveset.from_json(path)

    path.write_text(json.dumps(["R"]), encoding="utf-8")
    with pytest.raises(MovesetError):
        Moveset.from_json(path)


def test_buffers_must_be_slots() -> None:
    with pytest.raises(MovesetError):
        _empty_moveset(corner_buffer=8)


def test_moveset_for_other_buffers() -> None:
    moveset = build_moveset(2, 5)
    assert moveset.is_complete()
    assert moveset.corner_buffer == 2
    assert moveset.edge_buffer == 5
    for key in [(0, 1, 7, 2), (6, 0, 4, 0)]:
        algorithm = moveset.corner_cycles[key]
        assert sequence_transform(expand_notation(algorithm)) == required_transform("corner_cycles", key, 2, 5)
    algorithm = moveset.parities[(1, 0, 0, 1)]
    assert sequence_transform(expand_notation(algorithm)) == required_transform("parities", (1, 0, 0, 1), 2, 5)
