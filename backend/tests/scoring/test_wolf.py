import os, sys
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
from golf_engine.scoring import wolf
from golf_engine.scoring.scores import Score

SETTINGS = {"loneWolfWinPoints": 3, "loneWolfLossPoints": 1, "teamWinPoints": 1}


def _net(**values):
    return {pid: (Score.played(v) if v else Score.unplayed()) for pid, v in values.items()}


def test_lone_wolf_win_against_three():
    outcome = wolf.score_hole(_net(w=3, x=4, y=5, z=5), "w", "lone", None, SETTINGS)
    assert outcome["points"] == {"w": 3, "x": -1, "y": -1, "z": -1}
    assert outcome["winningSide"] == "wolf"


def test_lone_wolf_loss_pays_every_opponent():
    outcome = wolf.score_hole(_net(w=5, x=4, y=5, z=6), "w", "lone", None, SETTINGS)
    assert outcome["points"] == {"w": -3, "x": 1, "y": 1, "z": 1}
    # the wolf's loss equals the opponents' combined gain
    assert sum(outcome["points"].values()) == 0


def test_partner_win_and_loss():
    won = wolf.score_hole(_net(w=4, x=5, y=3, z=6), "w", "partner", "y", SETTINGS)
    assert won["points"] == {"w": 1, "x": -1, "y": 1, "z": -1}
    lost = wolf.score_hole(_net(w=5, x=4, y=6, z=6), "w", "partner", "y", SETTINGS)
    assert lost["points"] == {"w": -1, "x": 1, "y": -1, "z": 1}


def test_tie_changes_nothing():
    outcome = wolf.score_hole(_net(w=4, x=4, y=5), "w", "lone", None, SETTINGS)
    assert outcome["points"] == {"w": 0, "x": 0, "y": 0}
    assert outcome["winningSide"] == "tie"


def test_hole_is_tied_until_the_wolf_scores():
    outcome = wolf.score_hole(_net(w=None, x=6, y=7), "w", "lone", None, SETTINGS)
    assert outcome["points"] == {"w": 0, "x": 0, "y": 0}
    assert outcome["winningSide"] == "tie"


def test_opponents_without_a_score_lose():
    outcome = wolf.score_hole(_net(w=5, x=None, y=None), "w", "lone", None, SETTINGS)
    assert outcome["points"] == {"w": 3, "x": -1, "y": -1}


def test_partly_entered_hole_scores_nothing(make_game):
    game = make_game("wolf", ["a", "b", "c", "d"])
    state = wolf.init_state(game)
    state = wolf.apply({"hole": 1, "scores": {"a": 5}, "wolf": {"choice": "lone"}}, state)
    record = state["holes"][0]
    assert record["wolf"] == "d"
    assert record["points"] == {"a": 0, "b": 0, "c": 0, "d": 0}
    assert state["totals"] == {"a": 0, "b": 0, "c": 0, "d": 0}


@pytest.mark.parametrize(
    "choice, partner",
    [("lone", "x"), ("partner", None), ("partner", "w"), ("partner", "nobody"), ("blind", None)],
)
def test_invalid_declarations(choice, partner):
    with pytest.raises(ValueError):
        wolf.score_hole(_net(w=4, x=5, y=6), "w", choice, partner, SETTINGS)


@pytest.mark.parametrize(
    "hole, position, expected",
    [(1, "first", "a"), (2, "first", "b"), (5, "first", "a"), (1, "last", "d"), (2, "last", "a"), (5, "last", "d")],
)
def test_wolf_rotation(hole, position, expected):
    assert wolf.wolf_for_hole(hole, ["a", "b", "c", "d"], position) == expected


def test_doubled_and_doubled_back_hole(make_game):
    state = wolf.init_state(make_game("wolf", ["a", "b", "c", "d"]))
    state = wolf.apply(
        {
            "hole": 1,
            "scores": {"a": 4, "b": 4, "c": 5, "d": 3},
            "wolf": {"choice": "lone"},
            "doubles": [{"side": "opponents"}, {"side": "wolf"}],
        },
        state,
    )
    record = state["holes"][0]
    assert record["wolf"] == "d"
    assert record["multiplier"] == 4
    assert record["rawPoints"] == {"a": -1, "b": -1, "c": -1, "d": 3}
    assert record["points"] == {"a": -4, "b": -4, "c": -4, "d": 12}
    summary = wolf.summary(state)
    assert summary["leader"] == "d"
    assert summary["matchStatus"] == "16UP"


def test_only_first_to_tee_may_open_the_double(make_game):
    state = wolf.init_state(make_game("wolf", ["a", "b", "c", "d"]))
    with pytest.raises(ValueError):
        wolf.apply(
            {"hole": 1, "scores": {"d": 3}, "wolf": {"choice": "lone"}, "doubles": [{"side": "wolf"}]},
            state,
        )

    first = wolf.init_state(make_game("wolf", ["a", "b", "c", "d"], wolfPosition="first"))
    first = wolf.apply(
        {"hole": 1, "scores": {"a": 3, "b": 4}, "wolf": {"choice": "lone"}, "doubles": [{"side": "wolf"}]},
        first,
    )
    assert first["holes"][0]["points"]["a"] == 6


def test_scores_need_a_wolf_declaration(make_game):
    state = wolf.init_state(make_game("wolf", ["a", "b", "c"]))
    with pytest.raises(ValueError):
        wolf.apply({"hole": 1, "scores": {"a": 4}}, state)


def test_roster_size_limits(make_game):
    with pytest.raises(ValueError):
        wolf.init_state(make_game("wolf", ["a", "b"]))
    with pytest.raises(ValueError):
        wolf.init_state(make_game("wolf", list("abcdefg")))


def test_totals_are_summed_from_holes(make_game):
    state = wolf.init_state(make_game("wolf", ["a", "b", "c"], loneWolfWinPoints=2))
    # hole 1: wolf is c, hole 2: wolf is a
    state = wolf.apply({"hole": 1, "scores": {"a": 5, "b": 5, "c": 4}, "wolf": {"choice": "lone"}}, state)
    state = wolf.apply(
        {"hole": 2, "scores": {"a": 4, "b": 5, "c": 5}, "wolf": {"choice": "partner", "partner": "b"}},
        state,
    )
    assert state["totals"] == {"a": -1 + 1, "b": -1 + 1, "c": 2 - 1}
    assert state["holes"][1]["runningTotals"] == state["totals"]
