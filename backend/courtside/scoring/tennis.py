"""Tennis scoring engine.
Tracks points → games → sets with deuce/advantage games and a tiebreak at 6-6.

Serve passes to the other side after every game.  In doubles each side
alternates its two servers, giving the order F0, O0, F1, O1 where F is the
side that served first.  Ends change on set change and after every odd game
total within a set.
"""

from dataclasses import replace
from typing import Dict, Iterable, Tuple

from ..exceptions import InvalidEventError
from .state import (
    SETS_TO_WIN,
    SIDES,
    MatchConfig,
    MatchState,
    PointRecord,
    ServeState,
    check_playable,
    count_sets_won,
    flip_side,
    other,
    with_set_score,
)

GAME_POINTS = 4
GAMES_PER_SET = 6
TIEBREAK_TO = 7
WIN_BY = 2

CALLS = ("Love", "15", "30", "40")


def is_tiebreak(games_a: int, games_b: int) -> bool:
    return games_a == GAMES_PER_SET and games_b == GAMES_PER_SET


def is_game_complete(points_a: int, points_b: int, tiebreak: bool = False) -> bool:
    target = TIEBREAK_TO if tiebreak else GAME_POINTS
    return max(points_a, points_b) >= target and abs(points_a - points_b) >= WIN_BY


def is_set_complete(games_a: int, games_b: int) -> bool:
    high, low = max(games_a, games_b), min(games_a, games_b)
    if high >= GAMES_PER_SET and high - low >= WIN_BY:
        return True
    # A won tiebreak leaves the set at 7-6.
    return high == GAMES_PER_SET + 1 and low == GAMES_PER_SET


def is_match_complete(sets_won: Dict[str, int]) -> bool:
    return max(sets_won.values()) >= SETS_TO_WIN


def server_court_position(server_points: int, receiver_points: int = 0) -> str:
    """Service court for the next point: first point of a game from the right."""

    return "Right" if (server_points + receiver_points) % 2 == 0 else "Left"


def score_display(points: int, opponent_points: int, tiebreak: bool = False) -> str:
    """Call for ``points`` given the opponent's count (Love/15/30/40/Deuce/Adv)."""

    if tiebreak:
        return str(points)
    if points >= GAME_POINTS and points - opponent_points >= WIN_BY:
        return "Game"
    if points >= 3 and opponent_points >= 3:
        if points == opponent_points:
            return "Deuce"
        return "Adv" if points > opponent_points else "40"
    return CALLS[min(points, 3)]


def mid_set_switched(history: Iterable[PointRecord], set_number: int) -> bool:
    return False


def next_serve(config: MatchConfig, before: ServeState, record: PointRecord) -> ServeState:
    """Serve for the point after ``record``; positions never move in tennis."""

    if not record.game_completed:
        return before
    outgoing = before.serving_side
    if not config.doubles:
        server = 0
    elif outgoing != config.first_server:
        server = 1 - before.server_index
    else:
        server = before.server_index
    return replace(before, serving_side=other(outgoing), server_index=server)


def scores_after(record: PointRecord, match_over: bool) -> Tuple[int, int, int, int, int]:
    """``(current_set, points_a, points_b, games_a, games_b)`` after ``record``."""

    if record.set_completed and not match_over:
        return record.set_number + 1, 0, 0, 0, 0
    if record.game_completed and not record.set_completed:
        return record.set_number, 0, 0, record.games("A"), record.games("B")
    return (
        record.set_number,
        record.score_a,
        record.score_b,
        record.games("A"),
        record.games("B"),
    )


def set_result(record: PointRecord) -> Tuple[int, int]:
    return record.games("A"), record.games("B")


def physical_left_side(state: MatchState) -> str:
    """Team on the left, counting every end change since the first point.

    A finished set of ``n`` games contributes ``n // 2`` changeovers plus the
    change at the start of the next set.  In the current set a changeover
    follows every odd game total, except after the game that ends the match.
    """

    flips = 0
    for i in range(state.current_set):
        flips += (state.set_scores_a[i] + state.set_scores_b[i]) // 2 + 1
    played = state.games_a + state.games_b
    flips += played // 2 if state.ended else (played + 1) // 2
    return flip_side(state.config.baseline_left_side(), flips)


def apply_point(state: MatchState, side: str) -> Tuple[MatchState, PointRecord]:
    if side not in SIDES:
        raise InvalidEventError("invalid tennis event")
    check_playable(state)

    points_a = state.score_a + (1 if side == "A" else 0)
    points_b = state.score_b + (1 if side == "B" else 0)
    games_a, games_b = state.games_a, state.games_b

    tiebreak = is_tiebreak(games_a, games_b)
    game_completed = is_game_complete(points_a, points_b, tiebreak=tiebreak)
    if not tiebreak and points_a == points_b >= 3:
        # Losing the advantage goes back to deuce.
        points_a = points_b = 3
    if game_completed:
        games_a += 1 if side == "A" else 0
        games_b += 1 if side == "B" else 0
    set_completed = game_completed and is_set_complete(games_a, games_b)

    record = PointRecord(
        scored_by=side,
        set_number=state.current_set,
        score_a=points_a,
        score_b=points_b,
        games_a=games_a,
        games_b=games_b,
        serving_side=state.serving_side,
        server_index=state.server_index,
        positions_a=tuple(state.positions_a),
        positions_b=tuple(state.positions_b),
        game_completed=game_completed,
        set_completed=set_completed,
    )

    set_scores_a, set_scores_b = state.set_scores_a, state.set_scores_b
    if set_completed:
        set_scores_a = with_set_score(set_scores_a, record.set_number, games_a)
        set_scores_b = with_set_score(set_scores_b, record.set_number, games_b)
    ended = set_completed and is_match_complete(
        count_sets_won(set_scores_a, set_scores_b)
    )

    current_set, points_a, points_b, games_a, games_b = scores_after(record, ended)
    serve = next_serve(state.config, state.serve, record)

    next_state = replace(
        state,
        score_a=points_a,
        score_b=points_b,
        games_a=games_a,
        games_b=games_b,
        current_set=current_set,
        set_scores_a=set_scores_a,
        set_scores_b=set_scores_b,
        serving_side=serve.serving_side,
        server_index=serve.server_index,
        positions_a=serve.positions_a,
        positions_b=serve.positions_b,
        switched_mid_set=False,
        ended=ended,
        winner=side if ended else None,
    )
    next_state = replace(next_state, left_side=physical_left_side(next_state))
    return next_state, record


def summary(state: MatchState) -> Dict:
    return {
        "score_a": state.score_a,
        "score_b": state.score_b,
        "games_a": state.games_a,
        "games_b": state.games_b,
        "set_scores_a": list(state.set_scores_a),
        "set_scores_b": list(state.set_scores_b),
        "current_set": state.current_set,
        "game_ended": state.ended,
        "winner": state.winner,
    }
