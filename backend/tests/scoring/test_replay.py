import random

import pytest

from courtside.exceptions import InvalidStateError
from courtside.scoring import get_ruleset
from courtside.scoring.replay import completed_set_scores, reconstruct
from courtside.scoring.state import MatchConfig, MatchState


def _config(sport, doubles):
    names = ["Alice", "Amir", "Bea", "Bruno"] if doubles else ["Alice", "Bob"]
    return MatchConfig.from_setup(
        names, first_server=1, starting_side="Right", sport=sport
    )


def _random_match(config, seed, bias=0.5):
    """Play random points until the match ends; return states and records."""

    rng = random.Random(seed)
    ruleset = get_ruleset(config.sport)
    state = MatchState.initial(config)
    states = [state]
    history = []
    while not state.ended:
        side = "A" if rng.random() < bias else "B"
        state, record = ruleset.apply_point(state, side)
        states.append(state)
        history.insert(0, record)
    return states, history


@pytest.mark.parametrize("sport", ["badminton", "tennis"])
@pytest.mark.parametrize("doubles", [False, True])
@pytest.mark.parametrize("seed", [1, 7, 42])
def test_replay_matches_incremental_state(sport, doubles, seed):
    config = _config(sport, doubles)
    states, history = _random_match(config, seed)

    for played, expected in enumerate(states):
        remaining = history[len(history) - played:] if played else []
        assert reconstruct(config, remaining) == expected


def test_reaches_deciding_set_with_switch():
    config = _config("badminton", True)
    ruleset = get_ruleset("badminton")
    state = MatchState.initial(config)
    history = []
    for side in ["A"] * 21 + ["B"] * 21 + ["A"] * 11 + ["B"] * 3:
        state, record = ruleset.apply_point(state, side)
        history.insert(0, record)

    assert state.current_set == 2
    assert state.switched_mid_set
    assert reconstruct(config, history) == state


def test_empty_history_gives_initial_state():
    config = _config("badminton", False)

    state = reconstruct(config, [])

    assert state == MatchState.initial(config)
    assert state.serving_side == "B"
    assert state.server_index == 0
    assert state.left_side == "B"


def test_completed_set_scores_use_markers():
    config = _config("badminton", False)
    _, history = _random_match(config, 11)

    a, b = completed_set_scores(get_ruleset("badminton"), history)
    finished = [r for r in history if r.set_completed]

    assert len(finished) in (2, 3)
    for record in finished:
        assert a[record.set_number] == record.score_a
        assert b[record.set_number] == record.score_b


def test_rejects_malformed_snapshot():
    config = _config("badminton", True)
    _, history = _random_match(config, 5)
    history[0].positions_a = (1, 1)

    with pytest.raises(InvalidStateError):
        reconstruct(config, history)


def test_rejects_out_of_range_set_number():
    config = _config("badminton", False)
    _, history = _random_match(config, 5)
    history[0].set_number = 3

    with pytest.raises(InvalidStateError):
        reconstruct(config, history)
