from __future__ import annotations

from fastapi import APIRouter

from ..schemas import FormatOut
from ..services import FORMAT_RULES

router = APIRouter(prefix="/formats", tags=["formats"])


DEFAULT_FORMAT_CATALOG: tuple[tuple[str, str], ...] = (
    ("copenhagen", "Copenhagen"),
    ("wolf", "Wolf"),
    ("best_ball", "Best Ball"),
    ("match_play", "Match Play"),
    ("umbriago", "Umbriago"),
    ("stroke_play", "Stroke Play"),
)


# GET /api/v0/formats
@router.get("", response_model=list[FormatOut])
async def list_formats() -> list[FormatOut]:
    formats = []
    for format_id, name in DEFAULT_FORMAT_CATALOG:
        rules = FORMAT_RULES[format_id]
        formats.append(
            FormatOut(
                id=format_id,
                name=name,
                minPlayers=rules["min_players"],
                maxPlayers=rules["max_players"],
                teams=rules["teams"],
            )
        )
    # Return a deterministic ordering for consumers
    return sorted(formats, key=lambda f: (f.name.lower(), f.id))
