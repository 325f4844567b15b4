"""Match state shared by every ruleset.

``MatchConfig`` is fixed at setup, ``MatchState`` is the derived view of a
match after some number of points and ``PointRecord`` is the append-only
checkpoint written for every scored point.  Rulesets never mutate a state in
place; they return a new instance via :func:`dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..exceptions import ConfigurationError, InvalidStateError

SIDES = ("A", "B")
SPORTS = ("badminton", "tennis")
MATCH_TYPES = ("singles", "doubles")
COURT_HALVES = ("Left", "Right")

MAX_SETS = 3
SETS_TO_WIN = MAX_SETS // 2 + 1
DECIDING_SET = MAX_SETS - 1


def other(side: str) -> str:
    return "B" if side == "A" else "A"


def flip_side(baseline: str, flips: int) -> str:
    """Return the team on the left after ``flips`` side changes.

    Every physical side change (new set, tennis changeover, badminton
    mid-set switch) is a toggle, so only the parity of the total count
    matters.  All side derivations go through this function.
    """

    return baseline if flips % 2 == 0 else other(baseline)


def initial_positions(doubles: bool) -> Tuple[int, ...]:
    return (0, 1) if doubles else (0,)


@dataclass(frozen=True)
class MatchConfig:
    """Immutable match setup."""

    sport: str
    match_type: str
    players_a: Tuple[str, ...]
    players_b: Tuple[str, ...]
    first_server: str = "A"
    starting_side: str = "Left"

    def __post_init__(self) -> None:
        if self.sport not in SPORTS:
            raise ConfigurationError(f"unknown sport '{self.sport}'")
        if self.match_type not in MATCH_TYPES:
            raise ConfigurationError(f"unknown match type '{self.match_type}'")
        expected = 2 if self.match_type == "doubles" else 1
        for side, roster in (("A", self.players_a), ("B", self.players_b)):
            if len(roster) != expected:
                raise ConfigurationError(
                    f"side {side} needs {expected} player(s) for {self.match_type}"
                )
            if any(not isinstance(name, str) or not name.strip() for name in roster):
                raise ConfigurationError(f"side {side} has a blank player name")
        if self.first_server not in SIDES:
            raise ConfigurationError("first server must be side A or B")
        if self.starting_side not in COURT_HALVES:
            raise ConfigurationError("starting side must be 'Left' or 'Right'")

    @classmethod
    def from_setup(
        cls,
        player_names: Sequence[str],
        *,
        first_server: int,
        starting_side: str,
        sport: str = "badminton",
        match_type: Optional[str] = None,
    ) -> "MatchConfig":
        """Build a config from the flat setup payload.

        ``player_names`` lists side A's players first: two names for singles,
        four for doubles.  ``first_server`` is ``0`` for side A and ``1`` for
        side B.
        """

        names = [n.strip() if isinstance(n, str) else n for n in player_names or []]
        if len(names) not in (2, 4):
            raise ConfigurationError("expected 2 (singles) or 4 (doubles) player names")
        inferred = "doubles" if len(names) == 4 else "singles"
        if match_type is not None and match_type != inferred:
            raise ConfigurationError(
                f"{match_type} needs {4 if match_type == 'doubles' else 2} player names"
            )
        if isinstance(first_server, bool) or first_server not in (0, 1):
            raise ConfigurationError("first server must be 0 (side A) or 1 (side B)")
        half = len(names) // 2
        return cls(
            sport=sport,
            match_type=inferred,
            players_a=tuple(names[:half]),
            players_b=tuple(names[half:]),
            first_server=SIDES[first_server],
            starting_side=starting_side,
        )

    @property
    def doubles(self) -> bool:
        return self.match_type == "doubles"

    @property
    def player_names(self) -> list[str]:
        return [*self.players_a, *self.players_b]

    def roster(self, side: str) -> Tuple[str, ...]:
        return self.players_a if side == "A" else self.players_b

    def baseline_left_side(self) -> str:
        """Team on the left at the start of set 0."""

        return "A" if self.starting_side == "Left" else "B"


@dataclass(frozen=True)
class ServeState:
    serving_side: Optional[str]
    server_index: Optional[int]
    positions_a: Tuple[int, ...]
    positions_b: Tuple[int, ...]

    def positions(self, side: str) -> Tuple[int, ...]:
        return self.positions_a if side == "A" else self.positions_b

    def with_positions(self, side: str, positions: Iterable[int]) -> "ServeState":
        if side == "A":
            return replace(self, positions_a=tuple(positions))
        return replace(self, positions_b=tuple(positions))


@dataclass
class PointRecord:
    """One scored point.

    Scores are the end-of-rally values before any rollover (a set-winning
    badminton point is stored as e.g. 21-19 with ``set_completed``).  The
    serve fields describe the state *before* the rally was played.
    """

    scored_by: str
    set_number: int
    score_a: int
    score_b: int
    serving_side: str
    server_index: int
    positions_a: Tuple[int, ...]
    positions_b: Tuple[int, ...]
    games_a: Optional[int] = None
    games_b: Optional[int] = None
    game_completed: bool = False
    set_completed: bool = False
    id: Optional[str] = None
    game_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def before(self) -> ServeState:
        return ServeState(
            serving_side=self.serving_side,
            server_index=self.server_index,
            positions_a=tuple(self.positions_a),
            positions_b=tuple(self.positions_b),
        )

    def score(self, side: str) -> int:
        return self.score_a if side == "A" else self.score_b

    def games(self, side: str) -> int:
        value = self.games_a if side == "A" else self.games_b
        return value or 0


@dataclass
class MatchState:
    config: MatchConfig
    serving_side: Optional[str]
    server_index: Optional[int]
    positions_a: Tuple[int, ...]
    positions_b: Tuple[int, ...]
    left_side: str
    score_a: int = 0
    score_b: int = 0
    games_a: int = 0
    games_b: int = 0
    current_set: int = 0
    set_scores_a: Tuple[int, ...] = (0,) * MAX_SETS
    set_scores_b: Tuple[int, ...] = (0,) * MAX_SETS
    switched_mid_set: bool = False
    ended: bool = False
    winner: Optional[str] = None

    @classmethod
    def initial(cls, config: MatchConfig) -> "MatchState":
        positions = initial_positions(config.doubles)
        return cls(
            config=config,
            serving_side=config.first_server,
            server_index=0,
            positions_a=positions,
            positions_b=positions,
            left_side=config.baseline_left_side(),
        )

    @property
    def serve(self) -> ServeState:
        return ServeState(
            serving_side=self.serving_side,
            server_index=self.server_index,
            positions_a=self.positions_a,
            positions_b=self.positions_b,
        )

    @property
    def is_doubles(self) -> bool:
        return self.config.doubles

    @property
    def right_side(self) -> str:
        return other(self.left_side)

    def score(self, side: str) -> int:
        return self.score_a if side == "A" else self.score_b

    def games(self, side: str) -> int:
        return self.games_a if side == "A" else self.games_b

    def sets_won(self) -> Dict[str, int]:
        return count_sets_won(self.set_scores_a, self.set_scores_b)

    def server_name(self) -> Optional[str]:
        if self.serving_side is None or self.server_index is None:
            return None
        roster = self.config.roster(self.serving_side)
        if 0 <= self.server_index < len(roster):
            return roster[self.server_index]
        return None


def count_sets_won(
    set_scores_a: Sequence[int], set_scores_b: Sequence[int]
) -> Dict[str, int]:
    """Count finished sets; unplayed slots are 0-0 and count for nobody."""

    won = {"A": 0, "B": 0}
    for a, b in zip(set_scores_a, set_scores_b):
        if a > b:
            won["A"] += 1
        elif b > a:
            won["B"] += 1
    return won


def with_set_score(
    scores: Sequence[int], set_index: int, value: int
) -> Tuple[int, ...]:
    updated = list(scores)
    updated[set_index] = value
    return tuple(updated)


def check_serve(config: MatchConfig, serve: ServeState) -> None:
    """Raise ``InvalidStateError`` unless ``serve`` fits the match format."""

    if serve.serving_side not in SIDES:
        raise InvalidStateError("no serving side assigned")
    expected = initial_positions(config.doubles)
    for side in SIDES:
        positions = tuple(serve.positions(side) or ())
        if len(positions) != len(expected) or sorted(positions) != list(expected):
            raise InvalidStateError(
                f"malformed positions for side {side}: {list(positions)}"
            )
    roster = config.roster(serve.serving_side)
    if serve.server_index is None or not 0 <= serve.server_index < len(roster):
        raise InvalidStateError(f"server index {serve.server_index} out of range")


def check_playable(state: MatchState) -> None:
    if state.ended:
        raise InvalidStateError("match has already ended")
    check_serve(state.config, state.serve)
    if not 0 <= state.current_set < MAX_SETS:
        raise InvalidStateError(f"set index {state.current_set} out of range")
