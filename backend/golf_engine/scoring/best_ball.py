"""Best ball (four-ball) scoring engine for two teams.

A team's score on a hole is the lowest net score among its members.  The
``match`` variant turns each hole into a win, loss or half; the ``stroke``
variant adds the team scores up and ranks them.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from . import match_state
from .scores import Score, any_entered

SIDES = ("A", "B")


def team_score(net: Mapping[str, Score], members: Sequence[str]) -> Tuple[Optional[int], Optional[str]]:
    """Best net score of a team and the member whose score counts."""
    if not members:
        raise ValueError("best ball needs at least one player per team")
    best: Optional[Tuple[int, str]] = None
    for pid in members:
        score = net[pid]
        if score.is_played and (best is None or score.strokes < best[0]):
            best = (score.strokes, pid)
    if best is None:
        return None, None
    return best


def hole_result(
    team_a: Optional[int],
    team_b: Optional[int],
    conceded: Tuple[bool, bool] = (False, False),
) -> int:
    """+1 when team A wins the hole, -1 when team B wins, 0 when halved.

    A side that conceded loses to a side that did not.  Otherwise the hole
    stays halved until both sides have a score.
    """
    conceded_a, conceded_b = conceded
    if conceded_a != conceded_b:
        return -1 if conceded_a else 1
    if team_a is None or team_b is None:
        return 0
    if team_a < team_b:
        return 1
    if team_b < team_a:
        return -1
    return 0


def team_conceded(net: Mapping[str, Score], members: Sequence[str]) -> bool:
    return all(net[pid].is_conceded for pid in members)


def validate_teams(teams: Mapping[str, Sequence[str]], roster: Sequence[str]) -> Dict[str, List[str]]:
    normalized = {side: list((teams or {}).get(side) or []) for side in SIDES}
    if not normalized["A"] or not normalized["B"]:
        raise ValueError("best ball needs two non-empty teams")
    if len(normalized["A"]) != len(normalized["B"]):
        raise ValueError("teams must be the same size")
    members = normalized["A"] + normalized["B"]
    if len(set(members)) != len(members):
        raise ValueError("a player cannot be on both teams")
    unknown = set(members) - set(roster)
    if unknown:
        raise ValueError(f"unknown players on teams: {', '.join(sorted(unknown))}")
    return normalized


def init_state(game: Mapping) -> Dict:
    settings = game.get("settings") or {}
    variant = settings.get("variant") or "match"
    if variant not in ("match", "stroke"):
        raise ValueError("best ball variant must be 'match' or 'stroke'")
    roster = [p["id"] for p in game.get("players") or []]
    teams = validate_teams(game.get("teams") or {}, roster)
    state = match_state.base_state(game, {"variant": variant, "teams": teams})
    state["totals"] = {side: 0 for side in SIDES}
    state["closedOutAt"] = None
    return state


def apply(event: Dict, state: Dict) -> Dict:
    number, hole_def, scores = match_state.prepare_hole(event, state)
    if event.get("doubles"):
        raise ValueError("best ball does not use doubles")
    cfg = state["config"]
    net, strokes = match_state.net_scores(state, hole_def, scores)

    team_scores: Dict[str, Optional[int]] = {}
    counting: Dict[str, Optional[str]] = {}
    for side in SIDES:
        team_scores[side], counting[side] = team_score(net, cfg["teams"][side])

    record = match_state.hole_record(
        number,
        hole_def,
        scores,
        net,
        strokes,
        teamScores=team_scores,
        countingPlayers=counting,
        multiplier=1,
    )
    if cfg["variant"] == "match":
        conceded = tuple(team_conceded(net, cfg["teams"][side]) for side in SIDES)
        _apply_match(record, state, any_entered(scores), conceded)
    else:
        _apply_stroke(record, state, any_entered(scores))
    return state


def _apply_match(record: Dict, state: Dict, entered: bool, conceded: Tuple[bool, bool]) -> None:
    record["scored"] = entered
    result = hole_result(record["teamScores"]["A"], record["teamScores"]["B"], conceded)
    match_state.settle_match_hole(record, state, result)


def _apply_stroke(record: Dict, state: Dict, entered: bool) -> None:
    team_scores = record["teamScores"]
    points = {side: team_scores[side] for side in SIDES if team_scores[side] is not None}
    record.update(scored=entered, rawPoints=dict(points), points=dict(points))
    state["holes"].append(record)
    state["totals"] = match_state.sum_points(state["holes"], SIDES)
    # lower is better, so flip the sign to reuse the "leader" semantics
    status = match_state.leader_status({side: -total for side, total in state["totals"].items()})
    record.update(
        runningTotals=dict(state["totals"]),
        matchStatus=status["status"],
        leader=status["leader"],
    )


def _to_par(state: Dict) -> Dict[str, int]:
    to_par = {side: 0 for side in SIDES}
    for hole in state["holes"]:
        for side in SIDES:
            if hole["teamScores"][side] is not None:
                to_par[side] += hole["teamScores"][side] - hole["par"]
    return to_par


def summary(state: Dict) -> Dict:
    totals = state["totals"]
    base = {"holes": state["holes"], "totals": totals, "teams": state["config"]["teams"]}
    if state["config"]["variant"] == "stroke":
        incomplete = {
            side
            for side in SIDES
            if any(h["teamScores"][side] is None for h in state["holes"] if h["scored"])
        }
        base.update(
            toPar=_to_par(state),
            standings=match_state.rank_labels(totals, ascending=True, unranked=incomplete),
            matchStatus=match_state.leader_status({s: -t for s, t in totals.items()})["status"],
        )
        return base

    base.update(match_state.match_summary(state))
    return base
