"""Entry points that tie the format engines together.

Callers hand over the game setup and raw hole inputs; every result is
derived by replaying those inputs, so the same request always produces the
same answer.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from . import (
    best_ball,
    copenhagen,
    match_play,
    match_state,
    payout,
    stroke_play,
    strokes_gained,
    umbriago,
    wolf,
)
from .baselines import BaselineTables

logger = logging.getLogger(__name__)

FORMATS = {
    "copenhagen": copenhagen,
    "wolf": wolf,
    "best_ball": best_ball,
    "match_play": match_play,
    "umbriago": umbriago,
    "stroke_play": stroke_play,
}


class UnknownFormatError(ValueError):
    def __init__(self, fmt: Any) -> None:
        super().__init__(f"unknown game format {fmt!r}")
        self.format = fmt


def get_format(fmt: Any):
    try:
        return FORMATS[fmt]
    except (KeyError, TypeError):
        raise UnknownFormatError(fmt)


def idempotency_key(game: Mapping, hole: Mapping) -> str:
    """Content hash of a hole submission; equal submissions share a key."""
    payload = json.dumps({"game": game, "hole": hole}, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _hole_number(hole: Mapping) -> int:
    try:
        return int(hole.get("hole"))
    except (TypeError, ValueError):
        raise ValueError("hole number is required")


def _final_state(module, game: Mapping, snapshots: List[Dict]) -> Dict:
    return snapshots[-1] if snapshots else module.init_state(game)


def compute_hole(game: Mapping, hole: Mapping, history: Optional[Iterable[Mapping]] = None) -> Dict:
    """Score ``hole`` on top of the earlier hole inputs in ``history``."""
    module = get_format(game.get("format"))
    number = _hole_number(hole)
    earlier = list(history or [])
    for previous in earlier:
        if _hole_number(previous) >= number:
            raise ValueError("history may only contain holes played before this one")
    snapshots = match_state.replay(module, game, earlier + [hole])
    state = snapshots[-1]
    return {
        "format": game.get("format"),
        "hole": state["holes"][-1],
        "summary": module.summary(state),
        "idempotencyKey": idempotency_key(game, hole),
    }


def replay_game(game: Mapping, holes: Iterable[Mapping]) -> Dict:
    module = get_format(game.get("format"))
    snapshots = match_state.replay(module, game, holes)
    state = _final_state(module, game, snapshots)
    logger.debug("Replayed %s game over %d holes", game.get("format"), len(snapshots))
    return {
        "format": game.get("format"),
        "holes": state["holes"],
        "summary": module.summary(state),
    }


def recompute_game(
    game: Mapping,
    holes: Iterable[Mapping],
    previous_results: Optional[Iterable[Mapping]],
    from_hole: int,
) -> Dict:
    """Recompute after an edit to hole ``from_hole``.

    Results for earlier holes are returned exactly as given in
    ``previous_results``; every hole from ``from_hole`` on is refolded from
    the state at the hole before it.
    """
    if from_hole < 1:
        raise ValueError("from_hole must be at least 1")
    module = get_format(game.get("format"))
    holes = list(holes)
    earlier = [h for h in holes if _hole_number(h) < from_hole]
    snapshots = match_state.replay(module, game, earlier)
    snapshots = match_state.recompute(module, game, snapshots, holes, from_hole)
    state = _final_state(module, game, snapshots)

    previous = {int(r["hole"]): r for r in previous_results or []}
    results = []
    for record in state["holes"]:
        if record["hole"] < from_hole and record["hole"] in previous:
            results.append(previous[record["hole"]])
        else:
            results.append(record)
    return {
        "format": game.get("format"),
        "holes": results,
        "summary": module.summary(state),
        "recomputedFrom": from_hole,
    }


def compute_payout(final_totals: Mapping[str, float], settings: Mapping) -> Dict:
    return payout.compute_payout(final_totals, settings)


def _counts_strokes(game: Mapping) -> bool:
    settings = game.get("settings") or {}
    return game.get("format") == "stroke_play" or (
        game.get("format") == "best_ball" and settings.get("variant") == "stroke"
    )


def settlement_totals(game: Mapping, summary: Mapping) -> Dict[str, float]:
    """Totals to settle on, higher is better.

    Stroke totals are negated.  A card with a conceded or unplayed hole is
    unranked, so it settles one stroke behind the worst complete card
    instead of on its short total.
    """
    # Umbriago settles on each team's own points, not the zero-sum pair
    totals = summary.get("rawTotals") or summary["totals"]
    if not _counts_strokes(game):
        return dict(totals)
    unranked = {entry["id"] for entry in summary.get("standings") or [] if entry["rank"] is None}
    complete = {key: -value for key, value in totals.items() if key not in unranked}
    last_place = min(complete.values()) - 1 if complete else 0
    return {key: complete.get(key, last_place) for key in totals}


def settle_game(game: Mapping, holes: Iterable[Mapping]) -> Dict:
    """Replay a finished game and settle it with the game's own settings."""
    replayed = replay_game(game, holes)
    totals = settlement_totals(game, replayed["summary"])
    return {**replayed, "payout": compute_payout(totals, game.get("settings") or {})}


def compute_strokes_gained(shot: Mapping, tables: Optional[BaselineTables] = None) -> List[Dict]:
    return strokes_gained.compute(shot, tables)
