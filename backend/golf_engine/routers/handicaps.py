from __future__ import annotations

import logging

from fastapi import APIRouter

from ..exceptions import http_problem
from ..schemas import HandicapAllocationOut, HandicapAllocationRequest
from ..scoring import handicap as handicap_engine
from ..services import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/handicaps", tags=["handicaps"])


# POST /api/v0/handicaps/allocation
@router.post("/allocation", response_model=HandicapAllocationOut)
async def allocate(body: HandicapAllocationRequest) -> HandicapAllocationOut:
    try:
        value = handicap_engine.parse_handicap(body.handicap)
    except ValidationError as exc:
        raise http_problem(status_code=422, detail=exc.detail, code="invalid_handicap")
    try:
        strokes = handicap_engine.allocate_round(value, body.strokeIndices)
    except ValueError as exc:
        logger.warning("Rejected stroke indices: %s", exc)
        raise http_problem(status_code=400, detail=str(exc), code="invalid_stroke_index")
    return HandicapAllocationOut(
        handicap=value,
        display=handicap_engine.format_handicap(value),
        playingHandicap=handicap_engine.playing_handicap(value),
        strokes=strokes,
        total=sum(strokes),
    )
