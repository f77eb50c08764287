"""Scoring engines for the supported golf formats."""

from . import best_ball, copenhagen, match_play, stroke_play, umbriago, wolf
from .engine import (
    FORMATS,
    UnknownFormatError,
    compute_hole,
    compute_payout,
    compute_strokes_gained,
    get_format,
    idempotency_key,
    recompute_game,
    replay_game,
    settle_game,
)

__all__ = [
    "FORMATS",
    "UnknownFormatError",
    "best_ball",
    "compute_hole",
    "compute_payout",
    "compute_strokes_gained",
    "copenhagen",
    "get_format",
    "idempotency_key",
    "match_play",
    "recompute_game",
    "replay_game",
    "settle_game",
    "stroke_play",
    "umbriago",
    "wolf",
]
