"""Umbriago: 2v2 points game with optional rotating partners.

Each hole is made of independent contests, each awarding points to one team:

``closest_to_pin``
    declared per hole by player id
``team_low``
    lower combined net score; a team with a missing score cannot win it
``individual_low``
    the team holding the single lowest net score (a cross-team tie halves it)
``birdie``
    one award for every birdie or better (gross)

A roll called before a contest doubles that contest and every later one on
the hole.  A team that wins closest to pin, team low and individual low and
makes at least one birdie scores an Umbriago: the bonus per stroke times its
strokes under par less the opponents' strokes under par.  Hole doubles then
scale the whole hole.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

from . import match_state
from .multiplier import MultiplierStack
from .rotation import SIDES, RotationScheduler
from .scores import Score, any_entered

CONTESTS = ("closest_to_pin", "team_low", "individual_low", "birdie")
DEFAULT_CONTEST_POINTS = {name: 1 for name in CONTESTS}
DEFAULT_BONUS_PER_STROKE = 8


def _other(side: str) -> str:
    return "B" if side == "A" else "A"


def team_low(net: Mapping[str, Score], teams: Mapping[str, Sequence[str]]) -> Optional[str]:
    complete = {side: all(net[pid].is_played for pid in teams[side]) for side in SIDES}
    if not complete["A"] and not complete["B"]:
        return None
    if not complete["A"]:
        return "B"
    if not complete["B"]:
        return "A"
    totals = {side: sum(net[pid].strokes for pid in teams[side]) for side in SIDES}
    if totals["A"] == totals["B"]:
        return None
    return "A" if totals["A"] < totals["B"] else "B"


def individual_low(net: Mapping[str, Score], teams: Mapping[str, Sequence[str]]) -> Optional[str]:
    played = [(net[pid].strokes, side) for side in SIDES for pid in teams[side] if net[pid].is_played]
    if not played:
        return None
    low = min(score for score, _ in played)
    holders = {side for score, side in played if score == low}
    return holders.pop() if len(holders) == 1 else None


def birdies(gross: Mapping[str, Score], teams: Mapping[str, Sequence[str]], par: int) -> Dict[str, int]:
    return {
        side: sum(1 for pid in teams[side] if gross[pid].is_played and gross[pid].strokes < par)
        for side in SIDES
    }


def under_par(gross: Mapping[str, Score], members: Sequence[str], par: int) -> int:
    return sum(max(0, par - gross[pid].strokes) for pid in members if gross[pid].is_played)


def roll_factors(rolls: Sequence[Mapping]) -> Dict[str, int]:
    """Multiplier for each contest given the rolls called on the hole."""
    factors = {name: 1 for name in CONTESTS}
    for roll in rolls:
        before = roll.get("before")
        if before not in CONTESTS:
            raise ValueError(f"roll must name the contest it precedes, got {before!r}")
        for name in CONTESTS[CONTESTS.index(before):]:
            factors[name] *= 2
    return factors


def hole_points(
    net: Mapping[str, Score],
    gross: Mapping[str, Score],
    teams: Mapping[str, Sequence[str]],
    par: int,
    closest_to_pin: Optional[str],
    settings: Mapping,
    rolls: Sequence[Mapping] = (),
) -> Dict:
    """Raw team points for one hole, before doubles."""
    contest_points = {**DEFAULT_CONTEST_POINTS, **(settings.get("contestPoints") or {})}
    factors = roll_factors(rolls)
    winners = {
        "closest_to_pin": closest_to_pin,
        "team_low": team_low(net, teams),
        "individual_low": individual_low(net, teams),
    }
    birdie_counts = birdies(gross, teams, par)

    points = {side: 0 for side in SIDES}
    for name, side in winners.items():
        if side is not None:
            points[side] += contest_points[name] * factors[name]
    for side in SIDES:
        points[side] += birdie_counts[side] * contest_points["birdie"] * factors["birdie"]

    umbriago = None
    if settings.get("umbriagoBonus", True):
        for side in SIDES:
            if all(w == side for w in winners.values()) and birdie_counts[side] > 0:
                umbriago = side
        if umbriago is not None:
            per_stroke = settings.get("umbriagoBonusPerStroke") or DEFAULT_BONUS_PER_STROKE
            strokes = under_par(gross, teams[umbriago], par) - under_par(gross, teams[_other(umbriago)], par)
            points = {umbriago: strokes * per_stroke, _other(umbriago): 0}

    return {
        "points": points,
        "contests": {**winners, "birdie": birdie_counts},
        "rollFactors": factors,
        "isUmbriago": umbriago is not None,
        "umbriagoTeam": umbriago,
    }


def init_state(game: Mapping) -> Dict:
    players = game.get("players") or []
    if len(players) != 4:
        raise ValueError("Umbriago is played by four players")
    settings = game.get("settings") or {}
    rotation = RotationScheduler.from_game(game)
    roster = {p["id"] for p in players}
    for segment in rotation.segments:
        if set(segment["A"] + segment["B"]) != roster or len(segment["A"]) != 2:
            raise ValueError("every Umbriago segment must split the four players two against two")
    state = match_state.base_state(
        game,
        {
            "rotation": {"segmentSize": rotation.segment_size, "segments": rotation.segments},
            "doublesEnabled": bool(settings.get("doublesEnabled", True)),
            "rollsPerTeam": settings.get("rollsPerTeam"),
            "contestPoints": settings.get("contestPoints") or {},
            "umbriagoBonus": settings.get("umbriagoBonus", True),
            "umbriagoBonusPerStroke": settings.get("umbriagoBonusPerStroke"),
        },
    )
    state["totals"] = {side: 0 for side in SIDES}
    state["rawTotals"] = {side: 0 for side in SIDES}
    state["playerTotals"] = {pid: 0 for pid in state["config"]["playerIds"]}
    state["rollsUsed"] = {side: 0 for side in SIDES}
    return state


def _scheduler(state: Mapping) -> RotationScheduler:
    rotation = state["config"]["rotation"]
    return RotationScheduler(rotation["segmentSize"], rotation["segments"])


def apply(event: Dict, state: Dict) -> Dict:
    number, hole_def, scores = match_state.prepare_hole(event, state)
    cfg = state["config"]
    scheduler = _scheduler(state)
    teams = scheduler.teams_for(number)
    net, strokes = match_state.net_scores(state, hole_def, scores)
    for declaration in event.get("doubles") or []:
        if not declaration.get("clear") and declaration.get("side") not in SIDES:
            raise ValueError("double side must be 'A' or 'B'")
    stack = MultiplierStack.from_declarations(event.get("doubles"), enabled=cfg["doublesEnabled"])

    rolls = list(event.get("rolls") or [])
    entered = any_entered(scores)
    for roll in rolls:
        side = roll.get("team")
        if side not in SIDES:
            raise ValueError("roll must name team 'A' or 'B'")
        # a roll is only spent once the hole is scored
        if not entered:
            continue
        state["rollsUsed"][side] += 1
        limit = cfg["rollsPerTeam"]
        if limit is not None and state["rollsUsed"][side] > limit:
            raise ValueError(f"team {side} has no rolls left")

    closest = event.get("closestToPin")
    closest_side = scheduler.team_of(number, closest) if closest else None

    if entered:
        outcome = hole_points(net, scores, teams, hole_def["par"], closest_side, cfg, rolls)
        scored = True
    else:
        outcome = {
            "points": {side: 0 for side in SIDES},
            "contests": None,
            "rollFactors": roll_factors(rolls),
            "isUmbriago": False,
            "umbriagoTeam": None,
        }
        scored = False

    raw = stack.scale(outcome["points"])
    delta = raw["A"] - raw["B"]
    record = match_state.hole_record(
        number,
        hole_def,
        scores,
        net,
        strokes,
        scored=scored,
        segment=scheduler.segment_index(number),
        teams={side: list(members) for side, members in teams.items()},
        contests=outcome["contests"],
        closestToPin=closest,
        rolls=rolls,
        rollFactors=outcome["rollFactors"],
        isUmbriago=outcome["isUmbriago"],
        umbriagoTeam=outcome["umbriagoTeam"],
        rawPoints=dict(outcome["points"]),
        multiplier=stack.multiplier,
        doubles=stack.to_dict(),
        teamPoints=raw,
        points={"A": delta, "B": -delta},
        playerPoints={
            pid: (delta if pid in teams["A"] else -delta) for pid in cfg["playerIds"]
        },
    )
    state["holes"].append(record)

    state["totals"] = match_state.sum_points(state["holes"], SIDES)
    state["rawTotals"] = match_state.sum_points(state["holes"], SIDES, field="teamPoints")
    state["playerTotals"] = match_state.sum_points(state["holes"], cfg["playerIds"], field="playerPoints")
    record.update(
        runningTotals=dict(state["totals"]),
        runningRawTotals=dict(state["rawTotals"]),
        runningPlayerTotals=dict(state["playerTotals"]),
        differential=state["totals"]["A"],
        matchStatus=match_state.match_status(state["totals"]["A"]),
    )
    return state


def summary(state: Dict) -> Dict:
    rotating = len(state["config"]["rotation"]["segments"]) > 1
    return {
        "holes": state["holes"],
        "totals": state["totals"],
        "rawTotals": state["rawTotals"],
        "playerTotals": state["playerTotals"],
        "rotating": rotating,
        "rollsUsed": state["rollsUsed"],
        "differential": state["totals"]["A"],
        "matchStatus": match_state.match_status(state["totals"]["A"]),
        "standings": match_state.rank_labels(state["playerTotals"], ascending=False),
    }
