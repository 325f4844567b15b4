import pytest

from courtside.exceptions import ConfigurationError
from courtside.scoring import get_ruleset, badminton, tennis
from courtside.scoring.state import (
    MatchConfig,
    MatchState,
    count_sets_won,
    flip_side,
)


def test_from_setup_splits_names_by_side():
    config = MatchConfig.from_setup(
        [" Alice ", "Amir", "Bea", "Bruno"], first_server=1, starting_side="Left"
    )

    assert config.match_type == "doubles"
    assert config.players_a == ("Alice", "Amir")
    assert config.players_b == ("Bea", "Bruno")
    assert config.first_server == "B"
    assert config.sport == "badminton"


@pytest.mark.parametrize(
    "names, kwargs",
    [
        (["Alice"], {}),
        (["Alice", "Bob", "Cleo"], {}),
        (["Alice", ""], {}),
        (["Alice", "Bob"], {"match_type": "doubles"}),
        (["Alice", "Bob"], {"first_server": 2}),
        (["Alice", "Bob"], {"starting_side": "Middle"}),
        (["Alice", "Bob"], {"sport": "squash"}),
    ],
)
def test_from_setup_rejects_bad_configuration(names, kwargs):
    params = {"first_server": 0, "starting_side": "Left", **kwargs}
    with pytest.raises(ConfigurationError):
        MatchConfig.from_setup(names, **params)


def test_initial_state(doubles_config):
    state = MatchState.initial(doubles_config)

    assert state.is_doubles
    assert state.serving_side == "A"
    assert state.server_index == 0
    assert state.positions_a == (0, 1)
    assert state.left_side == "A"
    assert state.sets_won() == {"A": 0, "B": 0}
    assert state.server_name() == "Alice"


def test_flip_side_composes_by_parity():
    assert flip_side("A", 0) == "A"
    assert flip_side("A", 1) == "B"
    assert flip_side("A", 2) == "A"
    assert flip_side("B", 3) == "A"


def test_count_sets_won_ignores_unplayed_sets():
    assert count_sets_won((21, 15, 0), (19, 21, 0)) == {"A": 1, "B": 1}


def test_get_ruleset():
    assert get_ruleset("badminton") is badminton
    assert get_ruleset("tennis") is tennis
    with pytest.raises(ConfigurationError):
        get_ruleset("squash")
