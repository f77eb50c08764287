import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# main.py refuses to start without an explicit origin list
os.environ.setdefault("ALLOWED_ORIGINS", "http://testserver")
os.environ.setdefault("ALLOW_CREDENTIALS", "false")

PARS = [4, 4, 3, 5, 4, 4, 3, 4, 5, 4, 4, 3, 5, 4, 4, 3, 4, 5]
STROKE_INDICES = [7, 11, 15, 1, 3, 13, 17, 9, 5, 8, 12, 16, 2, 4, 14, 18, 10, 6]


def build_course(holes=18):
    indices = STROKE_INDICES if holes == 18 else list(range(1, holes + 1))
    return [
        {"number": n, "par": PARS[n - 1], "strokeIndex": indices[n - 1]}
        for n in range(1, holes + 1)
    ]


def build_game(fmt, player_ids, *, handicaps=None, teams=None, holes=18, **settings):
    handicaps = handicaps or {}
    return {
        "format": fmt,
        "players": [
            {"id": pid, "name": pid.title(), "handicap": handicaps.get(pid, 0)}
            for pid in player_ids
        ],
        "teams": teams or {},
        "holes": build_course(holes),
        "holesPlayed": holes,
        "settings": settings,
    }


@pytest.fixture()
def course():
    return build_course()


@pytest.fixture()
def make_game():
    return build_game
