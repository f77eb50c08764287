"""Settle a finished game's points into money."""

from __future__ import annotations

from typing import Dict, Mapping

PAYOUT_MODES = ("difference", "total")
TIE = "TIE"


def _cents(value: float) -> float:
    return round(value + 0.0, 2)


def compute_payout(final_totals: Mapping[str, float], settings: Mapping) -> Dict:
    """Return ``{"winner", "amount", "balances"}``.

    With two sides, ``difference`` pays the point gap times the stake and
    ``total`` pays the winner's own point total times the stake.  With three
    or more players, ``difference`` settles every pair on its gap and
    ``total`` has the outright leader collect its total times the stake,
    shared evenly by everyone else.  Balances are positive for money won.
    """
    mode = settings.get("payoutMode") or "difference"
    if mode not in PAYOUT_MODES:
        raise ValueError(f"unknown payout mode {mode!r}")
    stake = float(settings.get("stakePerPoint") or 0)
    if stake < 0:
        raise ValueError("stakePerPoint must be >= 0")
    if len(final_totals) < 2:
        raise ValueError("payout needs at least two sides")

    ordered = sorted(final_totals.items(), key=lambda item: -item[1])
    (leader, top), (_, second) = ordered[0], ordered[1]
    balances = {key: 0.0 for key in final_totals}
    if top == second:
        if len(final_totals) == 2 or mode == "total":
            return {"winner": TIE, "amount": 0.0, "balances": balances}

    if len(final_totals) == 2:
        loser = ordered[1][0]
        if mode == "difference":
            amount = abs(top - second) * stake
        else:
            amount = abs(top) * stake
        balances[leader], balances[loser] = _cents(amount), _cents(-amount)
        return {"winner": leader, "amount": _cents(amount), "balances": balances}

    if mode == "difference":
        keys = list(final_totals)
        for i, a in enumerate(keys):
            for b in keys[i + 1:]:
                gap = (final_totals[a] - final_totals[b]) * stake
                balances[a] += gap
                balances[b] -= gap
        balances = {key: _cents(value) for key, value in balances.items()}
        winner = leader if top != second else TIE
        return {"winner": winner, "amount": balances[leader] if winner != TIE else 0.0, "balances": balances}

    amount = abs(top) * stake
    share = amount / (len(final_totals) - 1)
    for key in balances:
        balances[key] = _cents(amount if key == leader else -share)
    return {"winner": leader, "amount": _cents(amount), "balances": balances}
