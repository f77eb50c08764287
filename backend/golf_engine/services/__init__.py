"""Internal application services (pure helpers, no I/O)."""

from .validation import (
    FORMAT_RULES,
    ValidationError,
    validate_hole_scores,
    validate_roster_for_format,
    validate_score_totals,
)
from .stats import (
    cumulative_strokes_gained,
    plot_strokes_gained,
    summarize_strokes_gained,
)

__all__ = [
    "FORMAT_RULES",
    "ValidationError",
    "validate_hole_scores",
    "validate_roster_for_format",
    "validate_score_totals",
    "cumulative_strokes_gained",
    "plot_strokes_gained",
    "summarize_strokes_gained",
]
