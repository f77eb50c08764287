import os, sys
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
from golf_engine.scoring import match_state, stroke_play


def test_net_stroke_play_with_an_incomplete_card(make_game):
    game = make_game("stroke_play", ["x", "y", "z"], handicaps={"y": 18})
    state = stroke_play.init_state(game)
    state = stroke_play.apply({"hole": 1, "scores": {"x": 4, "y": 5, "z": 5}}, state)
    state = stroke_play.apply({"hole": 2, "scores": {"x": 5, "y": 5, "z": "conceded"}}, state)

    summary = stroke_play.summary(state)
    assert summary["totals"] == {"x": 9, "y": 8, "z": 5}
    assert summary["grossTotals"] == {"x": 9, "y": 10, "z": 5}
    assert summary["toPar"] == {"x": "+1", "y": "E", "z": "+1"}
    assert [(s["id"], s["label"]) for s in summary["standings"]] == [("y", "1"), ("x", "2"), ("z", "-")]
    assert summary["standings"][-1]["rank"] is None
    assert summary["matchStatus"] == "1UP"
    assert state["holes"][1]["leader"] == "y"


def test_stroke_play_rejects_doubles(make_game):
    state = stroke_play.init_state(make_game("stroke_play", ["x"]))
    with pytest.raises(ValueError):
        stroke_play.apply({"hole": 1, "scores": {"x": 4}, "doubles": [{"side": "x"}]}, state)


@pytest.mark.parametrize("delta, label", [(0, "E"), (3, "+3"), (-2, "-2")])
def test_format_to_par(delta, label):
    assert stroke_play.format_to_par(delta) == label


def test_rank_labels_share_ties():
    standings = match_state.rank_labels({"a": 70, "b": 72, "c": 72, "d": 75})
    assert [s["label"] for s in standings] == ["1", "T2", "T2", "4"]
    assert [s["rank"] for s in standings] == [1, 2, 2, 4]


def test_rank_labels_descending_with_unranked():
    standings = match_state.rank_labels({"a": 3, "b": 9, "c": 9, "d": 1}, ascending=False, unranked=["c"])
    assert [(s["id"], s["label"]) for s in standings] == [("b", "1"), ("a", "2"), ("d", "3"), ("c", "-")]


@pytest.mark.parametrize("diff, status", [(0, "AS"), (2, "2UP"), (-3, "3DN"), (1.5, "1.5UP")])
def test_match_status(diff, status):
    assert match_state.match_status(diff) == status


def test_match_status_display():
    assert match_state.format_match_status(2, 5) == "Team A 2 Up, 5 to play"
    assert match_state.format_match_status(-1, 3, "Pat", "Sam") == "Sam 1 Up, 3 to play"
    assert match_state.format_match_status(0, 0) == "All Square"


def test_closeout_and_final_result():
    assert match_state.is_closed_out(3, 2) is True
    assert match_state.is_closed_out(2, 2) is False
    assert match_state.is_dormie(2, 2) is True
    assert match_state.final_result(3, 2) == {"winner": "A", "result": "3 & 2"}
    assert match_state.final_result(-1, 0) == {"winner": "B", "result": "1 Up"}
    assert match_state.final_result(0, 0) == {"winner": None, "result": "All Square"}


def test_leader_status():
    assert match_state.leader_status({"a": 10, "b": 7, "c": 1}) == {"leader": "a", "status": "3UP"}
    assert match_state.leader_status({"a": 5, "b": 5}) == {"leader": None, "status": "AS"}


def test_holes_must_be_in_order_and_in_range(make_game):
    state = stroke_play.init_state(make_game("stroke_play", ["x"], holes=9))
    state = stroke_play.apply({"hole": 2, "scores": {"x": 4}}, state)
    with pytest.raises(ValueError):
        stroke_play.apply({"hole": 2, "scores": {"x": 4}}, state)
    with pytest.raises(ValueError):
        stroke_play.apply({"hole": 10, "scores": {"x": 4}}, state)


def test_missing_stroke_index_is_flagged(make_game):
    game = make_game("stroke_play", ["x"], handicaps={"x": 18})
    game["holes"][0]["strokeIndex"] = None
    state = stroke_play.init_state(game)
    state = stroke_play.apply({"hole": 1, "scores": {"x": 5}}, state)
    record = state["holes"][0]
    assert record["strokeIndexMissing"] is True
    assert record["strokes"] == {"x": 0}
    assert record["netScores"] == {"x": 5}


def test_par_can_come_from_the_hole_input(make_game):
    game = make_game("stroke_play", ["x"])
    game["holes"] = []
    state = stroke_play.init_state(game)
    with pytest.raises(ValueError):
        stroke_play.apply({"hole": 1, "scores": {"x": 5}}, state)
    state = stroke_play.apply({"hole": 1, "par": 5, "scores": {"x": 5}}, state)
    assert state["toPar"] == {"x": 0}
