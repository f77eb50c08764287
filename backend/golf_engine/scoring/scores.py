"""Tagged hole score values: played(n), conceded or unplayed."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

PLAYED = "played"
CONCEDED = "conceded"
UNPLAYED = "unplayed"


@dataclass(frozen=True)
class Score:
    status: str
    strokes: Optional[int] = None

    @classmethod
    def played(cls, strokes: int) -> "Score":
        if isinstance(strokes, bool) or not isinstance(strokes, int):
            raise ValueError("strokes must be an integer")
        if strokes <= 0:
            raise ValueError("strokes must be positive")
        return cls(PLAYED, strokes)

    @classmethod
    def conceded(cls) -> "Score":
        return cls(CONCEDED)

    @classmethod
    def unplayed(cls) -> "Score":
        return cls(UNPLAYED)

    @property
    def is_played(self) -> bool:
        return self.status == PLAYED

    @property
    def is_conceded(self) -> bool:
        return self.status == CONCEDED

    @property
    def is_entered(self) -> bool:
        """True once a score or a concession has been recorded."""
        return self.status != UNPLAYED

    def sort_key(self) -> float:
        # conceded and unplayed rank behind every played score
        return float(self.strokes) if self.is_played else math.inf

    def adjusted(self, strokes: int) -> "Score":
        if not self.is_played:
            return self
        return Score(PLAYED, self.strokes - strokes)

    def to_json(self) -> Any:
        return self.strokes if self.is_played else self.status


def coerce_score(raw: Any) -> Score:
    """Convert a raw JSON score value into a :class:`Score`.

    Accepts a positive integer, ``None`` (not yet played), the strings
    ``"conceded"`` / ``"unplayed"``, an existing :class:`Score`, or a mapping
    ``{"status": ..., "strokes": ...}``.
    """
    if isinstance(raw, Score):
        return raw
    if raw is None:
        return Score.unplayed()
    if isinstance(raw, str):
        value = raw.strip().lower()
        if value == CONCEDED:
            return Score.conceded()
        if value in (UNPLAYED, ""):
            return Score.unplayed()
        raise ValueError(f"unknown score value {raw!r}")
    if isinstance(raw, Mapping):
        status = raw.get("status")
        if status == PLAYED:
            return Score.played(raw.get("strokes"))
        return coerce_score(status)
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    return Score.played(raw)


def coerce_scores(raw_scores: Mapping[str, Any], player_ids) -> Dict[str, Score]:
    """Return a score for every player id; missing entries are unplayed."""
    unknown = set(raw_scores or {}) - set(player_ids)
    if unknown:
        raise ValueError(f"scores given for unknown players: {', '.join(sorted(unknown))}")
    return {pid: coerce_score((raw_scores or {}).get(pid)) for pid in player_ids}


def any_entered(scores: Mapping[str, Score]) -> bool:
    return any(s.is_entered for s in scores.values())


def best(scores, members) -> Optional[int]:
    """Lowest played score among ``members`` or ``None`` when nobody played."""
    played = [scores[m].strokes for m in members if scores[m].is_played]
    return min(played) if played else None
