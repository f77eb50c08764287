"""Singles match play.

Player one is side ``A`` and player two side ``B``.  Handicaps are played off
the low by default, so only the higher handicap receives strokes.
"""

from __future__ import annotations

from typing import Dict, Mapping

from . import handicap, match_state
from .best_ball import hole_result
from .scores import any_entered


def init_state(game: Mapping) -> Dict:
    players = game.get("players") or []
    if len(players) != 2:
        raise ValueError("match play is played by exactly two players")
    settings = game.get("settings") or {}
    mode = settings.get("handicapMode") or "off_low"
    handicaps = handicap.effective_handicaps(
        {**game, "settings": {**settings, "handicapMode": mode}}
    )
    state = match_state.base_state(
        game,
        {
            "handicaps": handicaps,
            "sides": {"A": players[0]["id"], "B": players[1]["id"]},
            "names": (players[0].get("name") or "Player 1", players[1].get("name") or "Player 2"),
        },
    )
    state["totals"] = {"A": 0, "B": 0}
    state["closedOutAt"] = None
    return state


def apply(event: Dict, state: Dict) -> Dict:
    number, hole_def, scores = match_state.prepare_hole(event, state)
    if event.get("doubles"):
        raise ValueError("match play does not use doubles")
    sides = state["config"]["sides"]
    net, strokes = match_state.net_scores(state, hole_def, scores)
    a, b = net[sides["A"]], net[sides["B"]]
    result = hole_result(
        a.strokes if a.is_played else None,
        b.strokes if b.is_played else None,
        (a.is_conceded, b.is_conceded),
    )

    record = match_state.hole_record(
        number, hole_def, scores, net, strokes, scored=any_entered(scores), multiplier=1
    )
    match_state.settle_match_hole(record, state, result)
    return state


def summary(state: Dict) -> Dict:
    result = match_state.match_summary(state, tuple(state["config"]["names"]))
    result["sides"] = state["config"]["sides"]
    return result
