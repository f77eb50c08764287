"""Running match state shared by every format engine.

Every format module exposes ``init_state(game)``, ``apply(hole, state)`` and
``summary(state)``.  The helpers here fold hole inputs through those modules,
derive running totals by summing per-hole points, and build the status and
rank labels shown to players.  Nothing in this module keeps a counter that is
incremented independently of the hole list.
"""

from __future__ import annotations

import copy
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from . import handicap
from .scores import Score, coerce_scores


# -----------------------------------------------------------------------------
# Replay
# -----------------------------------------------------------------------------
def _ordered(holes: Iterable[Mapping]) -> List[Mapping]:
    return sorted(holes, key=lambda h: int(h.get("hole", 0)))


def replay(module, game: Mapping, holes: Iterable[Mapping]) -> List[Dict]:
    """Fold ``holes`` from hole 1 and return the state after each hole."""
    state = module.init_state(game)
    snapshots: List[Dict] = []
    for hole in _ordered(holes):
        state = module.apply(hole, state)
        snapshots.append(copy.deepcopy(state))
    return snapshots


def recompute(
    module,
    game: Mapping,
    snapshots: Sequence[Dict],
    holes: Iterable[Mapping],
    from_hole: int,
) -> List[Dict]:
    """Refold every hole ``>= from_hole`` on top of the untouched earlier states.

    Returns a new snapshot list; ``snapshots`` itself is never modified, so a
    reader sees either the old list or the complete new one.
    """
    kept = [s for s in snapshots if s["holes"] and s["holes"][-1]["hole"] < from_hole]
    state = copy.deepcopy(kept[-1]) if kept else module.init_state(game)
    result = list(kept)
    for hole in _ordered(holes):
        if int(hole.get("hole", 0)) < from_hole:
            continue
        state = module.apply(hole, state)
        result.append(copy.deepcopy(state))
    return result


# -----------------------------------------------------------------------------
# Per-hole helpers used by the format modules
# -----------------------------------------------------------------------------
def base_state(game: Mapping, config: Dict) -> Dict:
    handicap.validate_course(game)
    players = game.get("players") or []
    ids = [p["id"] for p in players]
    if len(set(ids)) != len(ids):
        raise ValueError("duplicate player ids provided")
    holes_played = int(game.get("holesPlayed") or 18)
    if holes_played not in (9, 18):
        raise ValueError("holesPlayed must be 9 or 18")
    course = {int(h["number"]): dict(h) for h in game.get("holes") or []}
    extra = {key: value for key, value in config.items() if key != "handicaps"}
    return {
        "config": {
            "format": game.get("format"),
            "playerIds": ids,
            "holesPlayed": holes_played,
            "course": course,
            "handicaps": config.get("handicaps") or handicap.effective_handicaps(game),
            **extra,
        },
        "holes": [],
    }


def prepare_hole(event: Mapping, state: Mapping) -> Tuple[int, Dict, Dict[str, Score]]:
    """Validate a hole input and return ``(number, hole definition, scores)``."""
    cfg = state["config"]
    try:
        number = int(event.get("hole"))
    except (TypeError, ValueError):
        raise ValueError("hole number is required")
    if not 1 <= number <= cfg["holesPlayed"]:
        raise ValueError("hole out of range")
    if state["holes"] and number <= state["holes"][-1]["hole"]:
        raise ValueError("holes must be applied in order")
    hole_def = dict(cfg["course"].get(number) or {"number": number, "strokeIndex": None})
    if event.get("par") is not None:
        hole_def["par"] = event["par"]
    if hole_def.get("par") is None:
        raise ValueError(f"par missing for hole {number}")
    hole_def["par"] = int(hole_def["par"])
    scores = coerce_scores(event.get("scores") or {}, cfg["playerIds"])
    return number, hole_def, scores


def net_scores(state: Mapping, hole_def: Mapping, scores: Mapping[str, Score]) -> Tuple[Dict[str, Score], Dict[str, int]]:
    cfg = state["config"]
    stroke_index = hole_def.get("strokeIndex")
    strokes = {
        pid: handicap.strokes_for_hole(cfg["handicaps"].get(pid), stroke_index, cfg["holesPlayed"])
        for pid in scores
    }
    net = {pid: handicap.net_score(score, strokes[pid]) for pid, score in scores.items()}
    return net, strokes


def hole_record(number: int, hole_def: Mapping, scores, net, strokes, **extra) -> Dict:
    record = {
        "hole": number,
        "par": hole_def["par"],
        "strokeIndex": hole_def.get("strokeIndex"),
        "strokeIndexMissing": hole_def.get("strokeIndex") is None,
        "scores": {pid: s.to_json() for pid, s in scores.items()},
        "netScores": {pid: s.to_json() for pid, s in net.items()},
        "strokes": dict(strokes),
    }
    record.update(extra)
    return record


def sum_points(holes: Iterable[Mapping], keys: Iterable[str], field: str = "points") -> Dict[str, float]:
    totals: Dict[str, float] = {key: 0 for key in keys}
    for hole in holes:
        for key, value in (hole.get(field) or {}).items():
            totals[key] = totals.get(key, 0) + value
    return totals


# -----------------------------------------------------------------------------
# Status and ranking labels
# -----------------------------------------------------------------------------
def match_status(differential: float) -> str:
    """``"AS"`` or ``"<n>UP"`` / ``"<n>DN"`` from side A's point of view."""
    if differential == 0:
        return "AS"
    lead = abs(differential)
    lead = int(lead) if float(lead).is_integer() else lead
    return f"{lead}UP" if differential > 0 else f"{lead}DN"


def format_match_status(
    differential: float,
    holes_remaining: int,
    side_a: str = "Team A",
    side_b: str = "Team B",
) -> str:
    if differential == 0:
        status = "All Square"
    else:
        leader = side_a if differential > 0 else side_b
        status = f"{leader} {abs(int(differential))} Up"
    if holes_remaining > 0:
        return f"{status}, {holes_remaining} to play"
    return status


def is_closed_out(differential: float, holes_remaining: int) -> bool:
    return abs(differential) > holes_remaining


def is_dormie(differential: float, holes_remaining: int) -> bool:
    return holes_remaining > 0 and differential != 0 and abs(differential) == holes_remaining


def final_result(differential: float, holes_remaining: int) -> Dict[str, Any]:
    if differential == 0:
        return {"winner": None, "result": "All Square"}
    winner = "A" if differential > 0 else "B"
    lead = abs(int(differential))
    if holes_remaining <= 0:
        return {"winner": winner, "result": f"{lead} Up"}
    return {"winner": winner, "result": f"{lead} & {holes_remaining}"}


def leader_status(totals: Mapping[str, float]) -> Dict[str, Any]:
    """Leader and margin over second place for multi-player ledgers."""
    if not totals:
        return {"leader": None, "status": "AS"}
    ordered = sorted(totals.items(), key=lambda item: -item[1])
    if len(ordered) == 1:
        return {"leader": ordered[0][0], "status": "AS"}
    (first, top), (_, second) = ordered[0], ordered[1]
    if top == second:
        return {"leader": None, "status": "AS"}
    return {"leader": first, "status": match_status(top - second)}


def rank_labels(
    values: Mapping[str, float],
    *,
    ascending: bool = True,
    unranked: Iterable[str] = (),
) -> List[Dict[str, Any]]:
    """Standings with competition ranks; exact ties share a ``T<rank>`` label.

    Entries in ``unranked`` sort after everyone else with ``rank`` ``None``.
    Ranks are always computed from the complete ``values`` mapping.
    """
    skipped = set(unranked)
    ranked = [(pid, v) for pid, v in values.items() if pid not in skipped]
    ranked.sort(key=lambda item: item[1] if ascending else -item[1])

    counts: Dict[float, int] = defaultdict(int)
    for _, value in ranked:
        counts[value] += 1

    standings: List[Dict[str, Any]] = []
    rank = 0
    previous: Optional[float] = None
    for position, (pid, value) in enumerate(ranked, start=1):
        if value != previous:
            rank = position
            previous = value
        label = f"T{rank}" if counts[value] > 1 else str(rank)
        standings.append({"id": pid, "value": value, "rank": rank, "label": label})

    rest = [(pid, values[pid]) for pid in values if pid in skipped]
    rest.sort(key=lambda item: item[1] if ascending else -item[1])
    standings.extend({"id": pid, "value": v, "rank": None, "label": "-"} for pid, v in rest)
    return standings


# -----------------------------------------------------------------------------
# Hole-by-hole match play between sides "A" and "B"
# -----------------------------------------------------------------------------
MATCH_SIDES = ("A", "B")


def settle_match_hole(record: Dict, state: Dict, result: int) -> None:
    """Append a match-play hole and update the closeout bookkeeping.

    Once one side leads by more than the holes remaining the match is over
    and later holes are recorded with ``scored`` false and no result.
    """
    if state.get("closedOutAt") is not None:
        record["scored"] = False
    if not record["scored"]:
        result = 0
    record.update(holeResult=result, rawPoints={"A": result, "B": -result})
    record["points"] = dict(record["rawPoints"])
    state["holes"].append(record)

    state["totals"] = sum_points(state["holes"], MATCH_SIDES)
    differential = state["totals"]["A"]
    remaining = state["config"]["holesPlayed"] - record["hole"]
    if state.get("closedOutAt") is None and is_closed_out(differential, remaining):
        state["closedOutAt"] = record["hole"]
    record.update(
        runningTotals=dict(state["totals"]),
        differential=differential,
        matchStatus=match_status(differential),
        holesRemaining=remaining,
        dormie=is_dormie(differential, remaining),
        closedOut=state.get("closedOutAt") is not None,
    )


def match_summary(state: Dict, names: Tuple[str, str] = ("Team A", "Team B")) -> Dict:
    differential = state["totals"]["A"]
    holes_played = state["config"]["holesPlayed"]
    closed_at = state.get("closedOutAt")
    last_hole = closed_at or (state["holes"][-1]["hole"] if state["holes"] else 0)
    remaining = holes_played - last_hole
    finished = closed_at is not None or remaining == 0
    return {
        "holes": state["holes"],
        "totals": state["totals"],
        "differential": differential,
        "matchStatus": match_status(differential),
        "display": format_match_status(differential, remaining, *names),
        "holesRemaining": remaining,
        "isFinished": finished,
        "result": final_result(differential, remaining) if finished else None,
    }
