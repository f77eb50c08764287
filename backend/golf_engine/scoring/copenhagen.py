"""Copenhagen (six point) scoring engine for three players.

Every hole distributes six points by net score:

* no ties 4-2-0, tie for low 3-3-0, tie for second 4-1-1, three-way tie 2-2-2
* sweep 6-0-0 when the low player makes birdie or better (gross) and beats
  both opponents by two or more net strokes

Presses run alongside the main game from the hole they are called on, each
with its own ledger.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from . import match_state
from .scores import Score, any_entered

POINTS_PER_HOLE = 6

# (low == middle, middle == high) -> points for the ordered players
_DISTRIBUTION = {
    (False, False): (4, 2, 0),
    (True, False): (3, 3, 0),
    (False, True): (4, 1, 1),
    (True, True): (2, 2, 2),
}


def _sweep_winner(order: List[str], keys: List[float], gross: Mapping[str, Score], par: int) -> Optional[str]:
    low = order[0]
    if not gross[low].is_played or gross[low].strokes > par - 1:
        return None
    if keys[1] - keys[0] >= 2 and keys[2] - keys[0] >= 2:
        return low
    return None


def hole_points(net: Mapping[str, Score], gross: Mapping[str, Score], par: int) -> Dict:
    """Distribute the six points of one hole."""
    if len(net) != 3:
        raise ValueError("Copenhagen is played by exactly three players")
    order = sorted(net, key=lambda pid: net[pid].sort_key())
    keys = [net[pid].sort_key() for pid in order]

    sweep = _sweep_winner(order, keys, gross, par)
    if sweep:
        points = {pid: (POINTS_PER_HOLE if pid == sweep else 0) for pid in order}
    else:
        pattern = (keys[0] == keys[1], keys[1] == keys[2])
        try:
            distribution = _DISTRIBUTION[pattern]
        except KeyError:
            raise RuntimeError(f"no Copenhagen distribution for ordering {keys!r}")
        points = dict(zip(order, distribution))

    if sum(points.values()) != POINTS_PER_HOLE:
        raise RuntimeError("Copenhagen hole points must total six")
    return {"points": points, "isSweep": sweep is not None, "sweepWinner": sweep}


def normalize_points(totals: Mapping[str, float]) -> Dict[str, float]:
    """Subtract the lowest total, e.g. 10-5-5 becomes 5-0-0."""
    if not totals:
        return {}
    low = min(totals.values())
    return {pid: value - low for pid, value in totals.items()}


def point_differentials(totals: Mapping[str, float]) -> Dict[str, float]:
    if not totals:
        return {}
    average = sum(totals.values()) / len(totals)
    return {pid: value - average for pid, value in totals.items()}


def init_state(game: Mapping) -> Dict:
    if len(game.get("players") or []) != 3:
        raise ValueError("Copenhagen is played by exactly three players")
    state = match_state.base_state(game, {})
    state["presses"] = []
    for press in (game.get("settings") or {}).get("presses") or []:
        _add_press(state, press, int(press.get("startHole") or 1))
    state["totals"] = {pid: 0 for pid in state["config"]["playerIds"]}
    return state


def _add_press(state: Dict, press: Mapping, start_hole: int) -> None:
    called_by = press.get("calledBy")
    if called_by is not None and called_by not in state["config"]["playerIds"]:
        raise ValueError(f"press called by unknown player {called_by!r}")
    press_id = press.get("id") or f"press-{len(state['presses']) + 1}"
    if any(p["id"] == press_id for p in state["presses"]):
        raise ValueError(f"duplicate press id {press_id!r}")
    state["presses"].append(
        {"id": press_id, "startHole": start_hole, "calledBy": called_by, "totals": {}}
    )


def apply(event: Dict, state: Dict) -> Dict:
    number, hole_def, scores = match_state.prepare_hole(event, state)
    if event.get("doubles"):
        raise ValueError("Copenhagen uses presses, not doubles")
    net, strokes = match_state.net_scores(state, hole_def, scores)
    ids = state["config"]["playerIds"]

    for press in event.get("presses") or []:
        _add_press(state, press, number)

    if any_entered(scores):
        outcome = hole_points(net, scores, hole_def["par"])
        scored = True
    else:
        outcome = {"points": {pid: 0 for pid in ids}, "isSweep": False, "sweepWinner": None}
        scored = False

    record = match_state.hole_record(
        number,
        hole_def,
        scores,
        net,
        strokes,
        scored=scored,
        rawPoints=dict(outcome["points"]),
        multiplier=1,
        points=dict(outcome["points"]),
        isSweep=outcome["isSweep"],
        sweepWinner=outcome["sweepWinner"],
    )
    state["holes"].append(record)

    state["totals"] = match_state.sum_points(state["holes"], ids)
    for press in state["presses"]:
        press["totals"] = match_state.sum_points(
            (h for h in state["holes"] if h["hole"] >= press["startHole"]), ids
        )
    status = match_state.leader_status(state["totals"])
    record["runningTotals"] = dict(state["totals"])
    record["matchStatus"] = status["status"]
    record["leader"] = status["leader"]
    record["presses"] = {p["id"]: dict(p["totals"]) for p in state["presses"]}
    return state


def summary(state: Dict) -> Dict:
    totals = state["totals"]
    status = match_state.leader_status(totals)
    return {
        "holes": state["holes"],
        "totals": totals,
        "normalized": normalize_points(totals),
        "differentials": point_differentials(totals),
        "standings": match_state.rank_labels(totals, ascending=False),
        "leader": status["leader"],
        "matchStatus": status["status"],
        "presses": state["presses"],
    }
