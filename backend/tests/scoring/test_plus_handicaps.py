import os, sys
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
from golf_engine.scoring import copenhagen, engine, match_state, stroke_play

# hole 4 is stroke index 1 (par 5), hole 5 is stroke index 3 (par 4)
FORMATS = [
    ("stroke_play", ["p1", "p2"], None, {}),
    ("copenhagen", ["p1", "p2", "p3"], None, {}),
    ("wolf", ["p1", "p2", "p3", "p4"], None, {}),
    ("best_ball", ["p1", "p2", "p3", "p4"], {"A": ["p1", "p2"], "B": ["p3", "p4"]}, {}),
    ("best_ball", ["p1", "p2", "p3", "p4"], {"A": ["p1", "p2"], "B": ["p3", "p4"]}, {"variant": "stroke"}),
    ("match_play", ["p1", "p2"], None, {"handicapMode": "full"}),
    ("umbriago", ["p1", "p2", "p3", "p4"], {"A": ["p1", "p2"], "B": ["p3", "p4"]}, {}),
]


@pytest.mark.parametrize(
    "fmt, players, teams, settings",
    FORMATS,
    ids=["stroke-play", "copenhagen", "wolf", "best-ball", "best-ball-stroke", "match-play", "umbriago"],
)
def test_plus_player_gives_strokes_in_every_format(make_game, fmt, players, teams, settings):
    game = make_game(fmt, players, handicaps={"p1": "+2"}, teams=teams, **settings)
    holes = []
    for number, gross in ((4, 5), (5, 4)):
        hole = {"hole": number, "scores": {pid: gross for pid in players}}
        if fmt == "wolf":
            hole["wolf"] = {"choice": "lone"}
        holes.append(hole)

    stroked, unstroked = engine.replay_game(game, holes)["holes"]
    assert stroked["strokes"]["p1"] == -1
    assert stroked["netScores"]["p1"] == stroked["scores"]["p1"] + 1
    assert stroked["netScores"]["p2"] == stroked["scores"]["p2"]
    assert unstroked["strokes"]["p1"] == 0
    assert unstroked["netScores"]["p1"] == unstroked["scores"]["p1"]


def test_plus_player_in_stroke_play_totals(make_game):
    game = make_game("stroke_play", ["x", "y"], handicaps={"x": "+2"})
    state = stroke_play.init_state(game)
    state = stroke_play.apply({"hole": 4, "scores": {"x": 5, "y": 5}}, state)
    state = stroke_play.apply({"hole": 5, "scores": {"x": 4, "y": 4}}, state)

    summary = stroke_play.summary(state)
    assert summary["totals"] == {"x": 10, "y": 9}
    assert summary["grossTotals"] == {"x": 9, "y": 9}
    assert summary["toPar"] == {"x": "+1", "y": "E"}
    assert [entry["id"] for entry in summary["standings"]] == ["y", "x"]


def test_plus_player_turns_a_copenhagen_win_into_a_tie(make_game):
    game = make_game("copenhagen", ["a", "b", "c"], handicaps={"a": "+2"})
    state = copenhagen.init_state(game)
    state = copenhagen.apply({"hole": 4, "scores": {"a": 4, "b": 5, "c": 5}}, state)
    record = state["holes"][0]
    assert record["netScores"] == {"a": 5, "b": 5, "c": 5}
    assert record["points"] == {"a": 2, "b": 2, "c": 2}


def test_base_state_does_not_touch_the_callers_config(make_game):
    config = {"handicaps": {"x": 3.0}, "variant": "match"}
    state = match_state.base_state(make_game("stroke_play", ["x"]), config)
    assert config == {"handicaps": {"x": 3.0}, "variant": "match"}
    assert state["config"]["handicaps"] == {"x": 3.0}
    assert state["config"]["variant"] == "match"
