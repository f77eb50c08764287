from __future__ import annotations

import logging

from fastapi import APIRouter

from ..config import SG_INTERPOLATION
from ..exceptions import http_problem
from ..schemas import StrokesGainedOut, StrokesGainedRequest
from ..scoring.baselines import BaselineTables
from ..services import summarize_strokes_gained

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/strokes-gained", tags=["strokes-gained"])


# POST /api/v0/strokes-gained
@router.post("", response_model=StrokesGainedOut)
async def strokes_gained(body: StrokesGainedRequest) -> StrokesGainedOut:
    tables = BaselineTables(interpolation=body.interpolation or SG_INTERPOLATION)
    shots = [shot.model_dump() for shot in body.shots]
    try:
        summary = summarize_strokes_gained(shots, tables)
    except ValueError as exc:
        logger.warning("Rejected shot data: %s", exc)
        raise http_problem(status_code=422, detail=str(exc), code="invalid_shot")
    return StrokesGainedOut(**summary)
