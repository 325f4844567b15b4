"""Application services: the record store and the scoreboard built on it."""

from . import records, scoreboard
from .scoreboard import (
    Scoreboard,
    persistence_guard,
    config_from_game,
    load_scoreboard,
    resync,
    score_point,
    undo_point,
)

__all__ = [
    "records",
    "scoreboard",
    "Scoreboard",
    "persistence_guard",
    "config_from_game",
    "load_scoreboard",
    "resync",
    "score_point",
    "undo_point",
]
