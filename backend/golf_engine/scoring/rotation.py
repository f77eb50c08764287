"""Rotating 2v2 partnerships, keyed by player id."""

from __future__ import annotations

from typing import Dict, List, Mapping, Sequence, Tuple

SIDES = ("A", "B")


class RotationScheduler:
    """Map a hole number to the team composition playing it.

    ``segments`` is an ordered list of ``{"A": [pid, pid], "B": [pid, pid]}``
    mappings; each covers ``segment_size`` consecutive holes.  A schedule
    shorter than the round keeps using its last segment.
    """

    def __init__(self, segment_size: int, segments: Sequence[Mapping[str, Sequence[str]]]) -> None:
        if segment_size <= 0:
            raise ValueError("segment size must be positive")
        if not segments:
            raise ValueError("rotation needs at least one segment")
        normalized: List[Dict[str, Tuple[str, ...]]] = []
        roster = None
        for i, segment in enumerate(segments, start=1):
            teams = {side: tuple(segment.get(side) or ()) for side in SIDES}
            members = teams["A"] + teams["B"]
            if not teams["A"] or len(teams["A"]) != len(teams["B"]):
                raise ValueError(f"segment #{i} must have two teams of equal size")
            if len(set(members)) != len(members):
                raise ValueError(f"segment #{i} lists a player on both teams")
            if roster is None:
                roster = set(members)
            elif set(members) != roster:
                raise ValueError(f"segment #{i} uses a different roster")
            normalized.append(teams)
        self.segment_size = segment_size
        self.segments = normalized

    @classmethod
    def from_game(cls, game: Mapping) -> "RotationScheduler":
        """Build the schedule for ``game``; fixed teams become one segment."""
        settings = game.get("settings") or {}
        rotation = settings.get("rotation")
        if rotation:
            return cls(int(rotation.get("segmentSize") or 0), rotation.get("segments") or [])
        teams = game.get("teams") or {}
        holes = int(game.get("holesPlayed") or 18)
        return cls(holes, [teams])

    def segment_index(self, hole: int) -> int:
        if hole < 1:
            raise ValueError("hole numbers start at 1")
        return min((hole - 1) // self.segment_size, len(self.segments) - 1)

    def teams_for(self, hole: int) -> Dict[str, Tuple[str, ...]]:
        return self.segments[self.segment_index(hole)]

    def team_of(self, hole: int, player_id: str) -> str:
        teams = self.teams_for(hole)
        for side in SIDES:
            if player_id in teams[side]:
                return side
        raise ValueError(f"player {player_id!r} is not in the rotation")

