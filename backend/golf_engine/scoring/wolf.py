"""Wolf scoring engine.

The wolf rotates through the tee order.  On each hole the wolf either goes
alone against the field or picks one partner, and the best net score on each
side decides the hole.  Either side may double, and the other side may answer
with a double-back.
"""

from __future__ import annotations

import math
from typing import Dict, List, Mapping, Optional, Sequence

from . import match_state
from .multiplier import MultiplierStack
from .scores import Score, any_entered

DEFAULT_SETTINGS = {
    "loneWolfWinPoints": 3,
    "loneWolfLossPoints": 1,
    "teamWinPoints": 1,
    "wolfPosition": "last",
}

WOLF_SIDE = "wolf"
OPPONENT_SIDE = "opponents"


def wolf_for_hole(hole: int, roster: Sequence[str], position: str = "last") -> str:
    """Player who is the wolf on ``hole``.

    With ``position="first"`` the wolf tees off first: hole 1 is the first
    player, hole 2 the second and so on.  With ``"last"`` the wolf tees off
    last, so hole 1 belongs to the last player in the order and hole 2 to the
    first.
    """
    if not roster:
        raise ValueError("wolf needs a roster")
    if hole < 1:
        raise ValueError("hole numbers start at 1")
    n = len(roster)
    if position == "first":
        return roster[(hole - 1) % n]
    if position == "last":
        return roster[(hole - 2) % n]
    raise ValueError(f"unknown wolf position {position!r}")


def first_to_tee(position: str) -> str:
    return WOLF_SIDE if position == "first" else OPPONENT_SIDE


def _side_best(net: Mapping[str, Score], members: Sequence[str]) -> float:
    return min((net[pid].sort_key() for pid in members), default=math.inf)


def score_hole(
    net: Mapping[str, Score],
    wolf: str,
    choice: str,
    partner: Optional[str],
    settings: Mapping,
) -> Dict:
    """Raw point deltas for one hole, before any double."""
    players = list(net)
    if wolf not in net:
        raise ValueError(f"wolf {wolf!r} is not playing")
    if choice == "lone":
        if partner is not None:
            raise ValueError("a lone wolf cannot have a partner")
        wolf_side = [wolf]
    elif choice == "partner":
        if partner is None or partner == wolf or partner not in net:
            raise ValueError("partner must be one of the other players")
        wolf_side = [wolf, partner]
    else:
        raise ValueError("wolf must choose 'lone' or 'partner'")
    opponents = [pid for pid in players if pid not in wolf_side]
    if not opponents:
        raise ValueError("wolf needs at least one opponent")

    points = {pid: 0 for pid in players}
    # nothing is decided until the wolf has a score in
    if not net[wolf].is_entered:
        return {"points": points, "winningSide": "tie", "wolfSide": wolf_side, "opponents": opponents}

    wolf_best = _side_best(net, wolf_side)
    opponent_best = _side_best(net, opponents)
    if wolf_best == opponent_best:
        return {"points": points, "winningSide": "tie", "wolfSide": wolf_side, "opponents": opponents}

    wolf_won = wolf_best < opponent_best
    if choice == "lone":
        win = settings["loneWolfWinPoints"]
        loss = settings["loneWolfLossPoints"]
        if wolf_won:
            points[wolf] = win
            for pid in opponents:
                points[pid] = -loss
        else:
            points[wolf] = -loss * len(opponents)
            for pid in opponents:
                points[pid] = loss
    else:
        team = settings["teamWinPoints"]
        winners, losers = (wolf_side, opponents) if wolf_won else (opponents, wolf_side)
        for pid in winners:
            points[pid] = team
        for pid in losers:
            points[pid] = -team

    return {
        "points": points,
        "winningSide": WOLF_SIDE if wolf_won else OPPONENT_SIDE,
        "wolfSide": wolf_side,
        "opponents": opponents,
    }


def init_state(game: Mapping) -> Dict:
    players = game.get("players") or []
    if not 3 <= len(players) <= 6:
        raise ValueError("Wolf needs three to six players")
    settings = {**DEFAULT_SETTINGS, **{k: v for k, v in (game.get("settings") or {}).items() if v is not None}}
    if settings["wolfPosition"] not in ("first", "last"):
        raise ValueError("wolfPosition must be 'first' or 'last'")
    state = match_state.base_state(
        game,
        {
            "points": {k: settings[k] for k in ("loneWolfWinPoints", "loneWolfLossPoints", "teamWinPoints")},
            "wolfPosition": settings["wolfPosition"],
            "doublesEnabled": bool(settings.get("doublesEnabled", True)),
        },
    )
    state["totals"] = {pid: 0 for pid in state["config"]["playerIds"]}
    return state


def _multiplier(event: Mapping, cfg: Mapping) -> MultiplierStack:
    declarations = event.get("doubles") or []
    stack = MultiplierStack(enabled=cfg["doublesEnabled"])
    opener = first_to_tee(cfg["wolfPosition"])
    for declaration in declarations:
        if declaration.get("clear"):
            stack.clear()
            continue
        side = declaration.get("side")
        if side not in (WOLF_SIDE, OPPONENT_SIDE):
            raise ValueError("double side must be 'wolf' or 'opponents'")
        if stack.double_called_by is None and side != opener:
            raise ValueError(f"only the {opener} side may open with a double")
        stack.declare(side)
    return stack


def apply(event: Dict, state: Dict) -> Dict:
    number, hole_def, scores = match_state.prepare_hole(event, state)
    cfg = state["config"]
    ids = cfg["playerIds"]
    wolf = wolf_for_hole(number, ids, cfg["wolfPosition"])
    net, strokes = match_state.net_scores(state, hole_def, scores)
    stack = _multiplier(event, cfg)
    declaration = event.get("wolf") or {}

    if any_entered(scores):
        if not declaration.get("choice"):
            raise ValueError(f"wolf must declare lone or partner on hole {number}")
        outcome = score_hole(net, wolf, declaration["choice"], declaration.get("partner"), cfg["points"])
        scored = True
    else:
        outcome = {"points": {pid: 0 for pid in ids}, "winningSide": None, "wolfSide": [wolf], "opponents": []}
        scored = False

    record = match_state.hole_record(
        number,
        hole_def,
        scores,
        net,
        strokes,
        scored=scored,
        wolf=wolf,
        wolfChoice=declaration.get("choice"),
        partner=declaration.get("partner"),
        winningSide=outcome["winningSide"],
        rawPoints=dict(outcome["points"]),
        multiplier=stack.multiplier,
        doubles=stack.to_dict(),
        points=stack.scale(outcome["points"]),
    )
    state["holes"].append(record)
    state["totals"] = match_state.sum_points(state["holes"], ids)
    status = match_state.leader_status(state["totals"])
    record["runningTotals"] = dict(state["totals"])
    record["matchStatus"] = status["status"]
    record["leader"] = status["leader"]
    return state


def summary(state: Dict) -> Dict:
    totals = state["totals"]
    status = match_state.leader_status(totals)
    return {
        "holes": state["holes"],
        "totals": totals,
        "standings": match_state.rank_labels(totals, ascending=False),
        "leader": status["leader"],
        "matchStatus": status["status"],
    }
