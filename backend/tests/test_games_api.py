import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from golf_engine.main import app

client = TestClient(app)
API = "/api/v0"


@pytest.fixture()
def copenhagen_game(make_game):
    return make_game("copenhagen", ["a", "b", "c"])


def test_healthz():
    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/api/healthz").json() == {"status": "ok"}


def test_list_formats():
    resp = client.get(f"{API}/formats")
    assert resp.status_code == 200
    formats = resp.json()
    assert [f["id"] for f in formats] == [
        "best_ball",
        "copenhagen",
        "match_play",
        "stroke_play",
        "umbriago",
        "wolf",
    ]
    copenhagen = next(f for f in formats if f["id"] == "copenhagen")
    assert copenhagen["minPlayers"] == copenhagen["maxPlayers"] == 3


def test_compute_hole(copenhagen_game):
    resp = client.post(
        f"{API}/games/holes",
        json={
            "game": copenhagen_game,
            "history": [{"hole": 1, "scores": {"a": 4, "b": 5, "c": 6}}],
            "hole": {"hole": 2, "scores": {"a": 5, "b": 4, "c": 4}},
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["format"] == "copenhagen"
    assert data["hole"]["points"] == {"a": 0, "b": 3, "c": 3}
    assert data["summary"]["totals"] == {"a": 4, "b": 5, "c": 3}
    assert len(data["idempotencyKey"]) == 64


def test_unknown_format_is_not_found(copenhagen_game):
    game = {**copenhagen_game, "format": "skins"}
    resp = client.post(f"{API}/games/holes", json={"game": game, "hole": {"hole": 1}})
    assert resp.status_code == 404
    assert resp.headers["content-type"].startswith("application/problem+json")
    assert resp.json()["code"] == "format_not_found"


def test_wrong_roster_size_is_rejected(make_game):
    game = make_game("copenhagen", ["a", "b"])
    resp = client.post(f"{API}/games/holes", json={"game": game, "hole": {"hole": 1}})
    assert resp.status_code == 422
    assert resp.json()["code"] == "invalid_scorecard"


def test_score_for_unknown_player_is_rejected(copenhagen_game):
    resp = client.post(
        f"{API}/games/holes",
        json={"game": copenhagen_game, "hole": {"hole": 1, "scores": {"zz": 4}}},
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == "invalid_scorecard"


def test_malformed_handicap_is_rejected(make_game):
    game = make_game("copenhagen", ["a", "b", "c"], handicaps={"a": "+"})
    resp = client.post(
        f"{API}/games/holes",
        json={"game": game, "hole": {"hole": 1, "scores": {"a": 4, "b": 4, "c": 4}}},
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == "invalid_scorecard"


def test_engine_precondition_is_bad_request(make_game):
    game = make_game("wolf", ["a", "b", "c"])
    resp = client.post(
        f"{API}/games/holes",
        json={"game": game, "hole": {"hole": 1, "scores": {"a": 4}}},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "invalid_game"
    assert "declare" in body["detail"]


def test_replay_and_recompute(copenhagen_game):
    holes = [
        {"hole": 1, "scores": {"a": 4, "b": 5, "c": 6}},
        {"hole": 2, "scores": {"a": 5, "b": 4, "c": 4}},
        {"hole": 3, "scores": {"a": 3, "b": 4, "c": 5}},
    ]
    replay = client.post(f"{API}/games/replay", json={"game": copenhagen_game, "holes": holes})
    assert replay.status_code == 200
    original = replay.json()
    assert original["summary"]["totals"] == {"a": 8, "b": 7, "c": 3}

    holes[2]["scores"] = {"a": 6, "b": 4, "c": 5}
    resp = client.post(
        f"{API}/games/replay",
        json={
            "game": copenhagen_game,
            "holes": holes,
            "fromHole": 3,
            "previousResults": original["holes"],
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["recomputedFrom"] == 3
    assert data["holes"][:2] == original["holes"][:2]
    assert data["summary"]["totals"] == {"a": 4, "b": 9, "c": 5}


def test_payout_from_final_totals():
    resp = client.post(
        f"{API}/games/payout",
        json={"finalTotals": {"A": 6, "B": 2}, "settings": {"payoutMode": "difference", "stakePerPoint": 5}},
    )
    assert resp.status_code == 200
    assert resp.json() == {"winner": "A", "amount": 20.0, "balances": {"A": 20.0, "B": -20.0}}


def test_payout_settles_a_game(make_game):
    game = make_game("match_play", ["pat", "sam"], stakePerPoint=10)
    holes = [
        {"hole": 1, "scores": {"pat": 4, "sam": 5}},
        {"hole": 2, "scores": {"pat": 4, "sam": 5}},
    ]
    resp = client.post(f"{API}/games/payout", json={"game": game, "holes": holes})
    assert resp.status_code == 200
    data = resp.json()
    assert data["summary"]["matchStatus"] == "2UP"
    assert data["payout"]["winner"] == "A"
    assert data["payout"]["amount"] == 40.0


def test_payout_needs_totals_or_game():
    resp = client.post(f"{API}/games/payout", json={"settings": {"stakePerPoint": 1}})
    assert resp.status_code == 422


def test_handicap_allocation():
    resp = client.post(
        f"{API}/handicaps/allocation",
        json={"handicap": "+2", "strokeIndices": list(range(1, 19))},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["display"] == "+2"
    assert data["playingHandicap"] == -2
    assert data["strokes"][:3] == [-1, -1, 0]
    assert data["total"] == -2


def test_handicap_allocation_rejects_bad_indices():
    resp = client.post(
        f"{API}/handicaps/allocation",
        json={"handicap": 9, "strokeIndices": [1, 2, 2]},
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid_stroke_index"


def test_strokes_gained_round():
    shots = [
        {"hole": 1, "startDistance": 220, "startLie": "tee", "outOfBounds": True},
        {"hole": 1, "startDistance": 220, "startLie": "tee", "endDistance": 100, "endLie": "fairway"},
        {"hole": 1, "startDistance": 100, "startLie": "fairway", "endDistance": 3, "endLie": "green"},
        {"hole": 1, "startDistance": 3, "startLie": "green", "holed": True},
    ]
    resp = client.post(f"{API}/strokes-gained", json={"shots": shots})
    assert resp.status_code == 200
    data = resp.json()
    assert len(data["shots"]) == 5
    assert data["byCategory"]["approach"] == pytest.approx(0.22)
    assert data["byCategory"]["putting"] == pytest.approx(0.6)
    assert data["byHole"]["1"] == pytest.approx(data["total"])


def test_strokes_gained_rejects_unknown_lie():
    resp = client.post(
        f"{API}/strokes-gained",
        json={"shots": [{"startDistance": 10, "startLie": "water", "holed": True}]},
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == "invalid_shot"
