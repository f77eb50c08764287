from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import matplotlib.pyplot as plt

from ..scoring.baselines import BaselineTables
from ..scoring.strokes_gained import compute

CATEGORIES = ("off_the_tee", "approach", "around_green", "putting")
# metres; shots from closer than this off the green count as short game
AROUND_GREEN_LIMIT = 40


def shot_category(event: Mapping) -> str:
    """Bucket a shot the way round summaries report it."""
    lie = event.get("startLie")
    if lie == "green":
        return "putting"
    if lie == "tee":
        return "off_the_tee"
    if (event.get("startDistance") or 0) >= AROUND_GREEN_LIMIT:
        return "approach"
    return "around_green"


def summarize_strokes_gained(
    shots: Iterable[Mapping], tables: Optional[BaselineTables] = None
) -> Dict[str, object]:
    """Strokes gained for every shot of a round, with hole and category totals.

    Out-of-bounds shots contribute two events; only the penalty replay
    carries a value.
    """
    tables = tables or BaselineTables()
    events: List[Dict] = []
    by_hole: Dict[str, float] = defaultdict(float)
    by_category: Dict[str, float] = {category: 0.0 for category in CATEGORIES}
    for shot in shots:
        for event in compute(shot, tables):
            event["category"] = shot_category(event)
            events.append(event)
            sg = event["strokesGained"]
            if sg is None:
                continue
            by_category[event["category"]] += sg
            if event.get("hole") is not None:
                by_hole[str(event["hole"])] += sg

    total = sum(by_category.values())
    return {
        "shots": events,
        "byHole": {hole: round(value, 2) for hole, value in sorted(by_hole.items(), key=lambda item: int(item[0]))},
        "byCategory": {category: round(value, 2) for category, value in by_category.items()},
        "total": round(total, 2),
    }


def cumulative_strokes_gained(by_hole: Mapping[str, float]) -> list[float]:
    running = 0.0
    cumulative: list[float] = []
    for hole in sorted(by_hole, key=int):
        running += by_hole[hole]
        cumulative.append(round(running, 2))
    return cumulative


def plot_strokes_gained(by_hole: Mapping[str, float]):
    """Create a matplotlib chart of strokes gained through the round.

    Returns a ``matplotlib.figure.Figure`` that has already been closed with
    ``plt.close``."""
    holes: Sequence[int] = sorted(int(h) for h in by_hole)
    values = cumulative_strokes_gained(by_hole)
    fig, ax = plt.subplots()
    ax.plot(holes, values, marker="o")
    ax.axhline(0, color="grey", linewidth=0.8)
    ax.set_xlabel("Hole")
    ax.set_ylabel("Strokes gained (cumulative)")
    plt.close(fig)
    return fig
