"""Strokes gained per shot against the baseline tables.

Shot distances are entered in metres.  A shot input looks like::

    {"hole": 1, "startDistance": 150, "startLie": "fairway",
     "endDistance": 4, "endLie": "green", "holed": False, "outOfBounds": False}

``compute`` returns a list of events because an out-of-bounds shot is
recorded as two: the shot itself, which gains nothing measurable, and the
stroke-and-distance replay from the same spot carrying the penalty.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from .baselines import GREEN, LONG_GAME_LIES, BaselineTables

logger = logging.getLogger(__name__)

METERS_TO_FEET = 3.28084
METERS_TO_YARDS = 1.09361
LIES = (GREEN,) + LONG_GAME_LIES
OB_PENALTY = 1


def _lie(value) -> str:
    lie = (value or "").strip().lower() if isinstance(value, str) else value
    if lie not in LIES:
        raise ValueError(f"unknown lie {value!r}")
    return lie


def expected_strokes(distance_m: float, lie: str, tables: BaselineTables) -> float:
    lie = _lie(lie)
    if lie == GREEN:
        converted = distance_m * METERS_TO_FEET
    else:
        converted = distance_m * METERS_TO_YARDS
    low, high = tables.domain(lie)
    if not low <= converted <= high:
        logger.warning(
            "Distance %.1f outside %s baseline [%s, %s]; clamping", converted, lie, low, high
        )
    if lie == GREEN:
        return tables.expected_putting(converted)
    return tables.expected_long(converted, lie)


def strokes_gained(expected_before: float, expected_after: float, penalty: int = 0) -> float:
    return round(expected_before - expected_after - 1 - penalty, 2)


def _event(shot: Mapping, **fields) -> Dict:
    event = {
        "hole": shot.get("hole"),
        "startDistance": shot.get("startDistance"),
        "startLie": _lie(shot.get("startLie")),
        "endDistance": None,
        "endLie": None,
        "holed": False,
        "outOfBounds": False,
        "penalty": False,
        "expectedBefore": None,
        "expectedAfter": None,
        "strokesGained": None,
    }
    event.update(fields)
    return event


def compute(shot: Mapping, tables: Optional[BaselineTables] = None) -> List[Dict]:
    tables = tables or BaselineTables()
    try:
        start = float(shot.get("startDistance"))
    except (TypeError, ValueError):
        raise ValueError("startDistance is required")
    if start <= 0:
        raise ValueError("startDistance must be positive")
    start_lie = _lie(shot.get("startLie"))
    before = expected_strokes(start, start_lie, tables)

    if shot.get("outOfBounds"):
        return [
            _event(shot, outOfBounds=True, expectedBefore=round(before, 3)),
            _event(
                shot,
                penalty=True,
                endDistance=start,
                endLie=start_lie,
                expectedBefore=round(before, 3),
                expectedAfter=round(before, 3),
                strokesGained=strokes_gained(before, before, OB_PENALTY),
            ),
        ]

    if shot.get("holed"):
        return [
            _event(
                shot,
                endDistance=0,
                holed=True,
                expectedBefore=round(before, 3),
                expectedAfter=0,
                strokesGained=strokes_gained(before, 0),
            )
        ]

    try:
        end = float(shot.get("endDistance"))
    except (TypeError, ValueError):
        raise ValueError("endDistance is required unless the shot was holed")
    if end < 0:
        raise ValueError("endDistance cannot be negative")
    end_lie = _lie(shot.get("endLie"))
    after = expected_strokes(end, end_lie, tables) if end > 0 else 0.0
    return [
        _event(
            shot,
            endDistance=end,
            endLie=end_lie,
            holed=end == 0,
            expectedBefore=round(before, 3),
            expectedAfter=round(after, 3),
            strokesGained=strokes_gained(before, after),
        )
    ]
