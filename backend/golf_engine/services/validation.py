from typing import Any, Dict, List, Mapping, Optional, Sequence

class ValidationError(Exception):
    """Raised when a submitted scorecard or game setup is invalid."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


FORMAT_RULES: dict[str, dict[str, object]] = {
    "copenhagen": {"min_players": 3, "max_players": 3, "teams": False},
    "wolf": {"min_players": 3, "max_players": 6, "teams": False},
    "best_ball": {"min_players": 2, "max_players": 8, "teams": True},
    "match_play": {"min_players": 2, "max_players": 2, "teams": False},
    "umbriago": {"min_players": 4, "max_players": 4, "teams": True},
    "stroke_play": {"min_players": 1, "max_players": None, "teams": False},
}


def _format_label(format_id: str) -> str:
    return format_id.replace("_", " ").title() or "Game"


def validate_roster_for_format(
    format_id: str,
    player_ids: Sequence[str],
    teams: Optional[Mapping[str, Sequence[str]]] = None,
) -> None:
    """Check the roster size and team split a format requires.

    Formats without an entry in ``FORMAT_RULES`` are left to the engine.
    """
    rules = FORMAT_RULES.get(format_id)
    if not rules:
        return

    label = _format_label(format_id)
    if len(set(player_ids)) != len(player_ids):
        raise ValidationError("Player ids must be unique.")

    count = len(player_ids)
    min_players = rules.get("min_players")
    max_players = rules.get("max_players")
    if min_players == max_players and isinstance(min_players, int) and count != min_players:
        raise ValidationError(f"{label} games require exactly {min_players} players.")
    if isinstance(min_players, int) and count < min_players:
        raise ValidationError(f"{label} games require at least {min_players} player(s).")
    if isinstance(max_players, int) and count > max_players:
        raise ValidationError(f"{label} games support at most {max_players} players.")

    if not rules.get("teams") or not teams:
        return
    known = set(player_ids)
    for side, members in teams.items():
        unknown = [pid for pid in members if pid not in known]
        if unknown:
            raise ValidationError(
                f"Team {side} lists unknown player(s): {', '.join(unknown)}."
            )


def validate_score_totals(
    scores: Sequence[Any],
    *,
    min_value: int = 1,
    max_value: int = 30,
) -> List[int]:
    """Validate gross hole scores as entered on a card."""
    if not isinstance(scores, Sequence) or isinstance(scores, (str, bytes)):
        raise ValidationError("Scores must be provided as a sequence of integers.")
    if len(scores) == 0:
        raise ValidationError("Scores must include at least one value.")

    normalized: List[int] = []
    for index, raw in enumerate(scores, start=1):
        if isinstance(raw, bool):
            raise ValidationError(
                f"Score #{index} must be an integer (not a boolean)."
            )
        try:
            value = int(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"Score #{index} must be an integer.")

        if value < min_value:
            raise ValidationError(
                f"Score #{index} must be greater than or equal to {min_value}."
            )
        if max_value is not None and value > max_value:
            raise ValidationError(
                f"Score #{index} must be less than or equal to {max_value}."
            )
        normalized.append(value)

    return normalized


def validate_hole_scores(scores: Dict[str, Any], player_ids: Sequence[str]) -> None:
    """Reject unknown players and impossible stroke counts on one hole.

    ``None``, ``"conceded"`` and ``"unplayed"`` are accepted as-is.
    """
    unknown = sorted(set(scores) - set(player_ids))
    if unknown:
        raise ValidationError(f"Scores given for unknown player(s): {', '.join(unknown)}.")
    strokes = []
    for pid, raw in scores.items():
        if raw is None:
            continue
        if isinstance(raw, str):
            if raw.strip().lower() not in ("conceded", "unplayed", ""):
                raise ValidationError(f"Score for {pid} must be a number, 'conceded' or 'unplayed'.")
            continue
        strokes.append(raw)
    if strokes:
        validate_score_totals(strokes)
