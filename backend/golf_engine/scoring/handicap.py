"""Handicap stroke allocation.

Strokes are handed out by stroke index: with a playing handicap ``h`` over an
``N``-hole round every hole receives ``|h| // N`` strokes and the hardest
``|h| % N`` holes (stroke index ``<= |h| % N``) receive one more.  Plus
players (negative handicaps) give strokes instead, so their allocation is
negative and the net score is ``gross + |allocation|``.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Mapping, Optional, Sequence

from ..services.validation import ValidationError
from .scores import Score

logger = logging.getLogger(__name__)


def parse_handicap(raw) -> Optional[float]:
    """Parse a handicap entered by a user.

    ``"+2.4"`` is a plus handicap and becomes ``-2.4``.  Empty input means
    "no handicap" and returns ``None``.  Anything else that is not a
    non-negative number raises :class:`ValidationError`.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValidationError("Handicap must be a number (not a boolean).")
    if isinstance(raw, (int, float)):
        if not math.isfinite(raw):
            raise ValidationError("Handicap must be a finite number.")
        return float(raw)
    if not isinstance(raw, str):
        raise ValidationError("Handicap must be a number or a string.")

    text = raw.strip()
    if not text:
        return None
    sign = 1.0
    if text.startswith("+"):
        sign = -1.0
        text = text[1:].strip()
        if not text or text[0] in "+-":
            raise ValidationError(f"Invalid handicap {raw!r}.")
    try:
        value = float(text)
    except ValueError:
        raise ValidationError(f"Invalid handicap {raw!r}.")
    if not math.isfinite(value) or value < 0:
        raise ValidationError(f"Invalid handicap {raw!r}.")
    return sign * value if value else 0.0


def format_handicap(handicap: Optional[float]) -> str:
    if handicap is None:
        return ""
    if handicap < 0:
        return f"+{abs(handicap):g}"
    return f"{handicap:g}"


def playing_handicap(handicap: Optional[float]) -> int:
    """Round a handicap index to whole strokes, half away from zero."""
    if not handicap:
        return 0
    strokes = math.floor(abs(handicap) + 0.5)
    return -strokes if handicap < 0 else strokes


def validate_stroke_indices(stroke_indices: Sequence[int], holes: int | None = None) -> None:
    holes = len(stroke_indices) if holes is None else holes
    if len(stroke_indices) != holes:
        raise ValueError(f"expected {holes} stroke indices, got {len(stroke_indices)}")
    if sorted(stroke_indices) != list(range(1, holes + 1)):
        raise ValueError(f"stroke indices must be a permutation of 1..{holes}")


def strokes_for_hole(handicap: Optional[float], stroke_index: Optional[int], holes: int = 18) -> int:
    """Signed strokes on a hole: positive received, negative given."""
    if stroke_index is None:
        logger.warning("stroke index missing; hole is unstroked")
        return 0
    if holes <= 0:
        raise ValueError("holes must be positive")
    if isinstance(stroke_index, bool) or not 1 <= stroke_index <= holes:
        raise ValueError(f"stroke index {stroke_index!r} outside 1..{holes}")
    h = playing_handicap(handicap)
    base, extra = divmod(abs(h), holes)
    allocation = base + (1 if stroke_index <= extra else 0)
    return -allocation if h < 0 else allocation


def allocate_round(handicap: Optional[float], stroke_indices: Sequence[int]) -> List[int]:
    validate_stroke_indices(stroke_indices)
    holes = len(stroke_indices)
    return [strokes_for_hole(handicap, si, holes) for si in stroke_indices]


def net_score(score: Score, strokes: int) -> Score:
    return score.adjusted(strokes)


def relative_handicaps(handicaps: Mapping[str, Optional[float]]) -> Dict[str, float]:
    """Play "off the low": the lowest handicap plays off scratch."""
    values = {pid: (h or 0.0) for pid, h in handicaps.items()}
    if not values:
        return {}
    low = min(values.values())
    return {pid: h - low for pid, h in values.items()}


def effective_handicaps(game: Mapping) -> Dict[str, float]:
    """Handicaps actually used for allocation in ``game``."""
    settings = game.get("settings") or {}
    players = game["players"]
    if not settings.get("useHandicaps", True):
        return {p["id"]: 0.0 for p in players}
    handicaps = {p["id"]: parse_handicap(p.get("handicap")) for p in players}
    if settings.get("handicapMode") == "off_low":
        return relative_handicaps(handicaps)
    return {pid: (h or 0.0) for pid, h in handicaps.items()}


def validate_course(game: Mapping) -> None:
    """Check the course's stroke indices once per game.

    Holes without a stroke index are allowed (they are unstroked), but the
    indices that are present must be unique and inside ``1..holesPlayed``.
    """
    holes = int(game.get("holesPlayed") or len(game.get("holes") or []) or 18)
    indices = [h.get("strokeIndex") for h in game.get("holes") or []]
    present = [si for si in indices if si is not None]
    if len(present) == len(indices) and len(indices) == holes:
        validate_stroke_indices(present, holes)
        return
    if len(set(present)) != len(present):
        raise ValueError("stroke indices must not repeat")
    for si in present:
        if not 1 <= si <= holes:
            raise ValueError(f"stroke index {si} outside 1..{holes}")
