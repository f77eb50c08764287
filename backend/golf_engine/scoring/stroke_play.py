"""Handicapped stroke play."""

from __future__ import annotations

from typing import Dict, Mapping

from . import match_state


def init_state(game: Mapping) -> Dict:
    if not game.get("players"):
        raise ValueError("stroke play needs at least one player")
    state = match_state.base_state(game, {})
    ids = state["config"]["playerIds"]
    state["totals"] = {pid: 0 for pid in ids}
    state["grossTotals"] = {pid: 0 for pid in ids}
    state["toPar"] = {pid: 0 for pid in ids}
    state["incomplete"] = []
    return state


def _played(values: Mapping) -> Dict:
    return {pid: v for pid, v in values.items() if isinstance(v, int)}


def _refresh(state: Dict) -> None:
    ids = state["config"]["playerIds"]
    holes = state["holes"]
    state["totals"] = match_state.sum_points(holes, ids, field="points")
    state["grossTotals"] = match_state.sum_points(holes, ids, field="grossPoints")
    state["toPar"] = match_state.sum_points(holes, ids, field="parDelta")
    # a conceded or unplayed hole on an entered card takes the player out of the ranking
    state["incomplete"] = [
        pid for pid in ids if any(h["scored"] and pid not in h["points"] for h in holes)
    ]


def apply(event: Dict, state: Dict) -> Dict:
    number, hole_def, scores = match_state.prepare_hole(event, state)
    if event.get("doubles"):
        raise ValueError("stroke play does not use doubles")
    net, strokes = match_state.net_scores(state, hole_def, scores)
    par = hole_def["par"]

    points = _played({pid: s.to_json() for pid, s in net.items()})
    gross = _played({pid: s.to_json() for pid, s in scores.items()})
    record = match_state.hole_record(
        number,
        hole_def,
        scores,
        net,
        strokes,
        scored=any(s.is_entered for s in scores.values()),
        multiplier=1,
        rawPoints=dict(points),
        points=points,
        grossPoints=gross,
        parDelta={pid: value - par for pid, value in points.items()},
    )
    state["holes"].append(record)
    _refresh(state)

    standings = standings_for(state)
    leader = standings[0] if standings and standings[0]["label"] == "1" else None
    record.update(
        runningTotals=dict(state["totals"]),
        standings=standings,
        matchStatus=_status(standings),
        leader=leader["id"] if leader else None,
    )
    return state


def standings_for(state: Mapping):
    standings = match_state.rank_labels(state["totals"], ascending=True, unranked=state["incomplete"])
    for entry in standings:
        pid = entry["id"]
        entry["gross"] = state["grossTotals"][pid]
        entry["toPar"] = format_to_par(state["toPar"][pid])
    return standings


def _status(standings) -> str:
    ranked = [s for s in standings if s["rank"] is not None]
    if len(ranked) < 2 or ranked[0]["value"] == ranked[1]["value"]:
        return "AS"
    return match_state.match_status(ranked[1]["value"] - ranked[0]["value"])


def format_to_par(delta: int) -> str:
    if delta == 0:
        return "E"
    return f"+{delta}" if delta > 0 else str(delta)


def summary(state: Dict) -> Dict:
    standings = standings_for(state)
    return {
        "holes": state["holes"],
        "totals": state["totals"],
        "grossTotals": state["grossTotals"],
        "toPar": {pid: format_to_par(v) for pid, v in state["toPar"].items()},
        "standings": standings,
        "matchStatus": _status(standings),
    }
