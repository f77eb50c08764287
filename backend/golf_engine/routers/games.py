from __future__ import annotations

import logging
from typing import Any, Callable, Union

from fastapi import APIRouter

from ..config import DEFAULT_STAKE_PER_POINT
from ..exceptions import UnknownGameFormat, http_problem
from ..schemas import (
    GameIn,
    HoleInputIn,
    HoleRequest,
    HoleResultOut,
    PayoutOut,
    PayoutRequest,
    ReplayOut,
    ReplayRequest,
)
from ..scoring import engine
from ..services import ValidationError, validate_hole_scores, validate_roster_for_format

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["games"])


def _game_payload(game: GameIn) -> dict:
    if game.format not in engine.FORMATS:
        raise UnknownGameFormat(game.format)
    payload = game.model_dump(exclude_none=True)
    player_ids = [p.id for p in game.players]
    try:
        validate_roster_for_format(game.format, player_ids, game.teams)
    except ValidationError as exc:
        logger.warning("Rejected %s roster: %s", game.format, exc.detail)
        raise http_problem(status_code=422, detail=exc.detail, code="invalid_scorecard")
    return payload


def _hole_payloads(game: GameIn, holes: list[HoleInputIn]) -> list[dict]:
    player_ids = [p.id for p in game.players]
    payloads = []
    for hole in holes:
        try:
            validate_hole_scores(hole.scores, player_ids)
        except ValidationError as exc:
            logger.warning("Rejected scores for hole %s: %s", hole.hole, exc.detail)
            raise http_problem(
                status_code=422,
                detail=f"Hole {hole.hole}: {exc.detail}",
                code="invalid_scorecard",
            )
        payloads.append(hole.model_dump(exclude_none=True))
    return payloads


def _run(fn: Callable[..., Any], *args: Any) -> Any:
    """Call an engine function and turn its errors into problem responses."""
    try:
        return fn(*args)
    except ValidationError as exc:
        logger.warning("Invalid scorecard: %s", exc.detail)
        raise http_problem(status_code=422, detail=exc.detail, code="invalid_scorecard")
    except engine.UnknownFormatError as exc:
        raise UnknownGameFormat(str(exc.format))
    except ValueError as exc:
        logger.warning("Invalid game: %s", exc)
        raise http_problem(status_code=400, detail=str(exc), code="invalid_game")


# POST /api/v0/games/holes
@router.post("/holes", response_model=HoleResultOut)
async def compute_hole(body: HoleRequest) -> HoleResultOut:
    game = _game_payload(body.game)
    hole, *_ = _hole_payloads(body.game, [body.hole])
    history = _hole_payloads(body.game, body.history)
    result = _run(engine.compute_hole, game, hole, history)
    return HoleResultOut(**result)


# POST /api/v0/games/replay
@router.post("/replay", response_model=ReplayOut)
async def replay_game(body: ReplayRequest) -> ReplayOut:
    game = _game_payload(body.game)
    holes = _hole_payloads(body.game, body.holes)
    if body.fromHole is None:
        result = _run(engine.replay_game, game, holes)
    else:
        result = _run(engine.recompute_game, game, holes, body.previousResults, body.fromHole)
    return ReplayOut(**result)


# POST /api/v0/games/payout
@router.post("/payout", response_model=Union[ReplayOut, PayoutOut])
async def payout(body: PayoutRequest) -> Union[ReplayOut, PayoutOut]:
    settings = body.settings.model_dump(exclude_none=True)
    if body.finalTotals is not None:
        settings.setdefault("stakePerPoint", DEFAULT_STAKE_PER_POINT)
        return PayoutOut(**_run(engine.compute_payout, body.finalTotals, settings))

    game = _game_payload(body.game)
    game_settings = game.setdefault("settings", {})
    game_settings.setdefault("payoutMode", settings["payoutMode"])
    game_settings.setdefault("stakePerPoint", settings.get("stakePerPoint", DEFAULT_STAKE_PER_POINT))
    holes = _hole_payloads(body.game, body.holes)
    return ReplayOut(**_run(engine.settle_game, game, holes))
