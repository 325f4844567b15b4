"""Scoring engines for the supported racquet sports.

Each ruleset is a stateless module exposing the same functions:
``apply_point``, ``next_serve``, ``scores_after``, ``set_result``,
``is_set_complete``, ``is_match_complete``, ``mid_set_switched``,
``physical_left_side``, ``server_court_position`` and ``summary``.
"""

from types import ModuleType

from ..exceptions import ConfigurationError
from . import badminton, tennis

RULESETS = {
    "badminton": badminton,
    "tennis": tennis,
}


def get_ruleset(sport: str) -> ModuleType:
    """Return the ruleset module registered for ``sport``."""

    try:
        return RULESETS[sport]
    except KeyError:
        raise ConfigurationError(f"unknown sport '{sport}'") from None


__all__ = [
    "RULESETS",
    "badminton",
    "get_ruleset",
    "tennis",
]
