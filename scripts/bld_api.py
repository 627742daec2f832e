#!/usr/bin/env python3
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from cubebld.api import (
    BldSolutionResult,
    ParsedScramble,
    ScrambleResult,
    apply_scramble_to_state,
    parse_scramble,
    solve_bld,
)
from cubebld.moveset import Moveset, MovesetError, default_moveset

logger = logging.getLogger(__name__)


def _load_moveset() -> Moveset:
    moveset_env = os.environ.get("CUBEBLD_MOVESET", "").strip()
    if not moveset_env:
        return default_moveset()
    logger.info("Loading moveset from %s", moveset_env)
    return Moveset.from_json(Path(moveset_env))


moveset: Moveset | None = None
app = FastAPI(title="cubebld BLD Solver API", version="1.0.0")


def _moveset() -> Moveset:
    global moveset
    if moveset is None:
        try:
            moveset = _load_moveset()
        except (OSError, MovesetError) as exc:
            raise HTTPException(status_code=500, detail=f"Moveset unavailable: {exc}") from exc
    return moveset


class ScrambleRequest(BaseModel):
    scramble: str = Field(default="", max_length=2000)


class StateRequest(BaseModel):
    cp: list[int]
    co: list[int]
    ep: list[int]
    eo: list[int]


@app.post("/api/scramble/parse")
def api_parse_scramble(payload: ScrambleRequest) -> ParsedScramble:
    return parse_scramble(payload.scramble)


@app.post("/api/scramble/state")
def api_scramble_state(payload: ScrambleRequest) -> ScrambleResult:
    return apply_scramble_to_state(payload.scramble)


@app.post("/api/solve")
def api_solve(payload: StateRequest) -> BldSolutionResult:
    return solve_bld(payload.cp, payload.co, payload.ep, payload.eo, _moveset())


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("scripts.bld_api:app", host="127.0.0.1", port=8009, reload=True)
