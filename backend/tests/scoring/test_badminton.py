import pytest

from courtside.exceptions import InvalidEventError, InvalidStateError
from courtside.scoring import badminton
from courtside.scoring.replay import replay_points
from courtside.scoring.state import MatchConfig, MatchState
from courtside.scoring.undo import undo_last


def _play(config, sides):
    state, _ = replay_points(config, sides)
    return state


def _win_set(side):
    return [side] * 21


def test_set_wins_at_21_with_two_point_margin(singles_config):
    state = _play(singles_config, ["A", "B"] * 19 + ["A", "A"])

    assert state.current_set == 1
    assert (state.score_a, state.score_b) == (0, 0)
    assert state.set_scores_a == (21, 0, 0)
    assert state.set_scores_b == (19, 0, 0)
    assert state.sets_won() == {"A": 1, "B": 0}
    assert state.serving_side == "A"


def test_requires_two_point_gap(singles_config):
    state = _play(singles_config, ["A", "B"] * 20 + ["A"])

    assert state.current_set == 0
    assert (state.score_a, state.score_b) == (21, 20)

    state, record = badminton.apply_point(state, "A")
    assert record.set_completed
    assert state.set_scores_a[0] == 22
    assert state.set_scores_b[0] == 20


def test_set_caps_at_30(singles_config):
    state = _play(singles_config, ["A", "B"] * 29)
    assert (state.score_a, state.score_b) == (29, 29)

    state, record = badminton.apply_point(state, "A")

    assert record.set_completed
    assert (record.score_a, record.score_b) == (30, 29)
    assert state.set_scores_a[0] == 30
    assert state.set_scores_b[0] == 29
    assert state.current_set == 1


def test_set_completion_rules():
    assert badminton.is_set_complete(21, 19)
    assert not badminton.is_set_complete(21, 20)
    assert badminton.is_set_complete(30, 29)
    assert badminton.is_set_complete(29, 30)
    assert not badminton.is_set_complete(20, 0)


def test_new_set_resets_positions_and_flips_sides(doubles_config):
    state = _play(doubles_config, ["B"] + ["A"] * 21)

    assert state.current_set == 1
    assert state.positions_a == (0, 1)
    assert state.positions_b == (0, 1)
    assert state.serving_side == "A"
    assert state.server_index == 1
    assert state.left_side == "B"


def test_doubles_serve_retention_swaps_serving_pair(doubles_config):
    state = MatchState.initial(doubles_config)

    state, _ = badminton.apply_point(state, "A")

    assert state.serving_side == "A"
    assert state.server_index == 0
    assert state.positions_a == (1, 0)
    assert state.positions_b == (0, 1)


def test_doubles_side_out_keeps_positions(doubles_config):
    state = _play(doubles_config, ["B", "A", "A"])
    assert state.positions_a == (1, 0)
    before_b = state.positions_b

    state, _ = badminton.apply_point(state, "B")

    # B now has 2 points, so the player on the right serves.
    assert state.serving_side == "B"
    assert state.positions_b == before_b
    assert state.server_index == before_b[1] == 1
    assert state.server_name() == "Bruno"


def test_side_out_on_odd_score_serves_from_left(doubles_config):
    state, _ = badminton.apply_point(MatchState.initial(doubles_config), "B")

    assert state.serving_side == "B"
    assert state.server_index == state.positions_b[0]
    assert badminton.server_court_position(state.score_b) == "Left"


def test_singles_server_index_stays_zero(singles_config):
    state = _play(singles_config, ["A", "B", "B", "A", "B"])

    assert state.server_index == 0
    assert state.positions_a == (0,)
    assert state.serving_side == "B"


def test_eleven_switch_only_in_deciding_set(singles_config):
    state = _play(singles_config, ["A"] * 11)
    assert state.current_set == 0
    assert not state.switched_mid_set
    assert state.left_side == "A"

    state = _play(singles_config, _win_set("A") + _win_set("B") + ["A"] * 10)
    assert state.current_set == 2
    assert state.left_side == "A"
    assert not state.switched_mid_set

    state, _ = badminton.apply_point(state, "A")
    assert state.switched_mid_set
    assert state.left_side == "B"

    # Later points in the same set never flip again.
    state = _play(
        singles_config, _win_set("A") + _win_set("B") + ["A"] * 11 + ["B"] * 11
    )
    assert (state.score_a, state.score_b) == (11, 11)
    assert state.left_side == "B"


def test_undo_of_eleventh_point_reverts_switch(singles_config):
    state, history = replay_points(
        singles_config, _win_set("A") + _win_set("B") + ["B"] * 11
    )
    assert state.switched_mid_set
    assert state.left_side == "B"

    result = undo_last(singles_config, history)

    assert (result.state.score_a, result.state.score_b) == (0, 10)
    assert not result.state.switched_mid_set
    assert result.state.left_side == "A"


def test_match_ends_after_two_sets_and_rejects_points(singles_config):
    state = _play(singles_config, _win_set("A") * 2)

    assert state.ended
    assert state.winner == "A"
    assert state.sets_won() == {"A": 2, "B": 0}
    assert state.set_scores_a == (21, 21, 0)

    with pytest.raises(InvalidStateError):
        badminton.apply_point(state, "B")


def test_rejects_unknown_side(singles_config):
    with pytest.raises(InvalidEventError):
        badminton.apply_point(MatchState.initial(singles_config), "C")


def test_rejects_malformed_positions(doubles_config):
    state = MatchState.initial(doubles_config)
    state.positions_a = (0, 0)

    with pytest.raises(InvalidStateError):
        badminton.apply_point(state, "A")


def test_right_starting_side_puts_b_on_left():
    config = MatchConfig.from_setup(
        ["Alice", "Bob"], first_server=1, starting_side="Right"
    )
    state = MatchState.initial(config)

    assert state.left_side == "B"
    assert state.right_side == "A"
    assert state.serving_side == "B"


def test_summary_matches_game_columns(singles_config):
    state = _play(singles_config, _win_set("B") + ["A"])

    assert badminton.summary(state) == {
        "score_a": 1,
        "score_b": 0,
        "set_scores_a": [0, 0, 0],
        "set_scores_b": [21, 0, 0],
        "current_set": 1,
        "game_ended": False,
        "winner": None,
    }
