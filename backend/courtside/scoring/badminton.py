"""Badminton scoring engine.

Rally scoring to 21 points with a win-by-2 requirement and a 30-point cap.
Matches are best-of-3 games.  Doubles pairs swap service courts whenever the
serving side wins a rally; on a side-out the new server is chosen by the
parity of the receiving side's score.  In the deciding game the ends change
once, the first time either side reaches 11.
"""

from dataclasses import replace
from typing import Dict, Iterable, Tuple

from ..exceptions import InvalidEventError
from .state import (
    DECIDING_SET,
    SETS_TO_WIN,
    SIDES,
    MatchConfig,
    MatchState,
    PointRecord,
    ServeState,
    check_playable,
    count_sets_won,
    flip_side,
    initial_positions,
    with_set_score,
)

POINTS_TO = 21
WIN_BY = 2
MAX_POINT = 30
SWITCH_AT = 11


def is_set_complete(score_a: int, score_b: int) -> bool:
    if score_a >= MAX_POINT or score_b >= MAX_POINT:
        return True
    return max(score_a, score_b) >= POINTS_TO and abs(score_a - score_b) >= WIN_BY


def is_match_complete(sets_won: Dict[str, int]) -> bool:
    return max(sets_won.values()) >= SETS_TO_WIN


def server_court_position(server_points: int, receiver_points: int = 0) -> str:
    """Service court for the current server: even score serves from the right."""

    return "Right" if server_points % 2 == 0 else "Left"


def switches_mid_set(set_number: int, score_a: int, score_b: int) -> bool:
    """Return ``True`` if a rally ending on this score triggers the 11 switch."""

    return (
        set_number == DECIDING_SET
        and SWITCH_AT in (score_a, score_b)
        and score_a != score_b
    )


def mid_set_switched(history: Iterable[PointRecord], set_number: int) -> bool:
    return any(
        switches_mid_set(r.set_number, r.score_a, r.score_b)
        for r in history
        if r.set_number == set_number
    )


def next_serve(config: MatchConfig, before: ServeState, record: PointRecord) -> ServeState:
    """Serve and court positions for the rally after ``record``."""

    side = record.scored_by
    if record.set_completed:
        # New game: pairs reset and the winner serves from the right (score 0).
        positions = initial_positions(config.doubles)
        return ServeState(
            serving_side=side,
            server_index=positions[-1],
            positions_a=positions,
            positions_b=positions,
        )

    if side == before.serving_side:
        if not config.doubles:
            return before
        left, right = before.positions(side)
        return before.with_positions(side, (right, left))

    # Side-out: nobody moves, the player standing in the court that matches
    # the new server's score parity serves.
    if config.doubles:
        left, right = before.positions(side)
        server = right if record.score(side) % 2 == 0 else left
    else:
        server = 0
    return replace(before, serving_side=side, server_index=server)


def scores_after(record: PointRecord, match_over: bool) -> Tuple[int, int, int, int, int]:
    """``(current_set, score_a, score_b, games_a, games_b)`` after ``record``."""

    if record.set_completed and not match_over:
        return record.set_number + 1, 0, 0, 0, 0
    return record.set_number, record.score_a, record.score_b, 0, 0


def set_result(record: PointRecord) -> Tuple[int, int]:
    return record.score_a, record.score_b


def physical_left_side(state: MatchState) -> str:
    flips = state.current_set + (1 if state.switched_mid_set else 0)
    return flip_side(state.config.baseline_left_side(), flips)


def apply_point(state: MatchState, side: str) -> Tuple[MatchState, PointRecord]:
    """Score one rally for ``side``.

    Returns the next state and the record to persist; ``state`` is left
    untouched.
    """

    if side not in SIDES:
        raise InvalidEventError("invalid badminton event")
    check_playable(state)

    score_a = state.score_a + (1 if side == "A" else 0)
    score_b = state.score_b + (1 if side == "B" else 0)
    record = PointRecord(
        scored_by=side,
        set_number=state.current_set,
        score_a=score_a,
        score_b=score_b,
        serving_side=state.serving_side,
        server_index=state.server_index,
        positions_a=tuple(state.positions_a),
        positions_b=tuple(state.positions_b),
        set_completed=is_set_complete(score_a, score_b),
    )

    set_scores_a, set_scores_b = state.set_scores_a, state.set_scores_b
    if record.set_completed:
        set_scores_a = with_set_score(set_scores_a, record.set_number, score_a)
        set_scores_b = with_set_score(set_scores_b, record.set_number, score_b)
    ended = record.set_completed and is_match_complete(
        count_sets_won(set_scores_a, set_scores_b)
    )

    current_set, score_a, score_b, _, _ = scores_after(record, ended)
    switched = current_set == record.set_number and (
        state.switched_mid_set
        or switches_mid_set(record.set_number, record.score_a, record.score_b)
    )
    serve = next_serve(state.config, state.serve, record)

    next_state = replace(
        state,
        score_a=score_a,
        score_b=score_b,
        games_a=0,
        games_b=0,
        current_set=current_set,
        set_scores_a=set_scores_a,
        set_scores_b=set_scores_b,
        serving_side=serve.serving_side,
        server_index=serve.server_index,
        positions_a=serve.positions_a,
        positions_b=serve.positions_b,
        switched_mid_set=switched,
        ended=ended,
        winner=side if ended else None,
    )
    next_state = replace(next_state, left_side=physical_left_side(next_state))
    return next_state, record


def summary(state: MatchState) -> Dict:
    """Game summary fields for the persisted record."""

    return {
        "score_a": state.score_a,
        "score_b": state.score_b,
        "set_scores_a": list(state.set_scores_a),
        "set_scores_b": list(state.set_scores_b),
        "current_set": state.current_set,
        "game_ended": state.ended,
        "winner": state.winner,
    }
