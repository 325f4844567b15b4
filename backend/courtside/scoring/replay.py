"""Rebuild a match state from its point history.

The history is the ground truth for serve, court positions and ends.  Scores
come straight from the newest record; the serve is re-derived by running the
ruleset's transition on that record's pre-point snapshot; completed sets are
read from the ``set_completed`` markers.  Cached summary fields are never
consulted.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from ..exceptions import InvalidStateError
from . import get_ruleset
from .state import (
    MAX_SETS,
    SIDES,
    MatchConfig,
    MatchState,
    PointRecord,
    check_serve,
    count_sets_won,
    with_set_score,
)


def validate_history(config: MatchConfig, history: Sequence[PointRecord]) -> None:
    """Reject records that could not have been produced for ``config``."""

    for record in history:
        if record.scored_by not in SIDES:
            raise InvalidStateError(f"record {record.id} names no scoring side")
        if not 0 <= record.set_number < MAX_SETS:
            raise InvalidStateError(
                f"record {record.id} has set number {record.set_number}"
            )
        check_serve(config, record.before)


def completed_set_scores(
    ruleset, history: Iterable[PointRecord]
) -> tuple[tuple[int, ...], tuple[int, ...]]:
    set_scores_a = (0,) * MAX_SETS
    set_scores_b = (0,) * MAX_SETS
    for record in history:
        if record.set_completed:
            a, b = ruleset.set_result(record)
            set_scores_a = with_set_score(set_scores_a, record.set_number, a)
            set_scores_b = with_set_score(set_scores_b, record.set_number, b)
    return set_scores_a, set_scores_b


def reconstruct(config: MatchConfig, history: Iterable[PointRecord]) -> MatchState:
    """Return the state after every point in ``history`` (newest first)."""

    records: List[PointRecord] = list(history)
    if not records:
        return MatchState.initial(config)
    validate_history(config, records)

    ruleset = get_ruleset(config.sport)
    latest = records[0]

    set_scores_a, set_scores_b = completed_set_scores(ruleset, records)
    sets_won = count_sets_won(set_scores_a, set_scores_b)
    ended = ruleset.is_match_complete(sets_won)
    winner = None
    if ended:
        winner = "A" if sets_won["A"] > sets_won["B"] else "B"

    current_set, score_a, score_b, games_a, games_b = ruleset.scores_after(latest, ended)
    serve = ruleset.next_serve(config, latest.before, latest)

    state = MatchState(
        config=config,
        serving_side=serve.serving_side,
        server_index=serve.server_index,
        positions_a=serve.positions_a,
        positions_b=serve.positions_b,
        left_side=config.baseline_left_side(),
        score_a=score_a,
        score_b=score_b,
        games_a=games_a,
        games_b=games_b,
        current_set=current_set,
        set_scores_a=set_scores_a,
        set_scores_b=set_scores_b,
        switched_mid_set=ruleset.mid_set_switched(records, current_set),
        ended=ended,
        winner=winner,
    )
    state.left_side = ruleset.physical_left_side(state)
    return state


def replay_points(config: MatchConfig, sides: Iterable[str]) -> tuple[MatchState, List[PointRecord]]:
    """Apply ``sides`` one point at a time from the initial state.

    Returns the final state and the produced records newest first, the
    order the record store hands them out.
    """

    ruleset = get_ruleset(config.sport)
    state = MatchState.initial(config)
    records: List[PointRecord] = []
    for side in sides:
        state, record = ruleset.apply_point(state, side)
        records.insert(0, record)
    return state, records
