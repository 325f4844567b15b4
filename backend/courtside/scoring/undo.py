"""Undo the most recent point of a match."""

from typing import List, NamedTuple, Sequence

from ..exceptions import NoHistoryError
from .replay import reconstruct
from .state import MatchConfig, MatchState, PointRecord


class UndoResult(NamedTuple):
    history: List[PointRecord]
    state: MatchState
    removed: PointRecord


def undo_last(config: MatchConfig, history: Sequence[PointRecord]) -> UndoResult:
    """Drop the newest record from ``history`` and rebuild the state.

    Persisting the removal is left to the caller, which should delete
    ``removed`` and then write the new summary.  A set completed by the
    removed point loses its recorded score because the rebuilt per-set
    scores only come from remaining ``set_completed`` markers.
    """

    if not history:
        raise NoHistoryError("no points recorded for this match")
    removed, remaining = history[0], list(history[1:])
    return UndoResult(remaining, reconstruct(config, remaining), removed)
