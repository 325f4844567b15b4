from typing import Any, Dict, List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, Field, model_validator, field_validator, ConfigDict

from .scoring import get_ruleset
from .scoring.state import MAX_SETS, MatchState, PointRecord

Side = Literal["A", "B"]
Sport = Literal["badminton", "tennis"]


class GameCreate(BaseModel):
    """Match setup as submitted by the scorer."""

    sport: Sport = "badminton"
    matchType: Optional[Literal["singles", "doubles"]] = None
    playerNames: List[str]
    firstServer: int = Field(..., ge=0, le=1)
    startingSide: Literal["Left", "Right"] = "Left"

    model_config = ConfigDict(extra="forbid")

    @field_validator("playerNames", mode="before")
    @classmethod
    def _strip_names(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [v.strip() if isinstance(v, str) else v for v in value]


class GameIdOut(BaseModel):
    id: str


class GameUpdate(BaseModel):
    """Merge patch for a game summary; omitted fields are left untouched."""

    sport: Optional[Sport] = None
    score_a: Optional[int] = Field(default=None, alias="scoreA", ge=0)
    score_b: Optional[int] = Field(default=None, alias="scoreB", ge=0)
    games_a: Optional[int] = Field(default=None, alias="gamesA", ge=0)
    games_b: Optional[int] = Field(default=None, alias="gamesB", ge=0)
    set_scores_a: Optional[List[int]] = Field(default=None, alias="setScoresA")
    set_scores_b: Optional[List[int]] = Field(default=None, alias="setScoresB")
    current_set: Optional[int] = Field(
        default=None, alias="currentSet", ge=0, lt=MAX_SETS
    )
    game_ended: Optional[bool] = Field(default=None, alias="gameEnded")
    winner: Optional[Side] = None

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("set_scores_a", "set_scores_b")
    @classmethod
    def _three_sets(cls, value: Optional[List[int]]) -> Optional[List[int]]:
        if value is not None and len(value) != MAX_SETS:
            raise ValueError(f"set scores must list exactly {MAX_SETS} values")
        return value

    @model_validator(mode="after")
    def _not_empty(self):
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        return self

    def fields(self) -> Dict[str, Any]:
        """Column values for the fields the client actually sent.

        Only ``winner`` may be cleared with an explicit null.
        """
        data = self.model_dump(exclude_unset=True)
        return {k: v for k, v in data.items() if v is not None or k == "winner"}


class GameOut(BaseModel):
    id: str
    sport: str
    matchType: str
    playerNames: List[str]
    firstServer: int
    startingSide: str
    scoreA: int
    scoreB: int
    gamesA: int
    gamesB: int
    setScoresA: List[int]
    setScoresB: List[int]
    currentSet: int
    gameEnded: bool
    winner: Optional[str] = None
    createdAt: Optional[datetime] = None


class PointIn(BaseModel):
    side: Side


class PointOut(BaseModel):
    id: str
    gameId: str
    scoredBy: str
    setNumber: int
    scoreA: int
    scoreB: int
    gamesA: Optional[int] = None
    gamesB: Optional[int] = None
    gameCompleted: bool
    setCompleted: bool
    servingSide: str
    serverIndex: int
    playerPositionsA: List[int]
    playerPositionsB: List[int]
    createdAt: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: PointRecord) -> "PointOut":
        return cls(
            id=record.id,
            gameId=record.game_id,
            scoredBy=record.scored_by,
            setNumber=record.set_number,
            scoreA=record.score_a,
            scoreB=record.score_b,
            gamesA=record.games_a,
            gamesB=record.games_b,
            gameCompleted=record.game_completed,
            setCompleted=record.set_completed,
            servingSide=record.serving_side,
            serverIndex=record.server_index,
            playerPositionsA=list(record.positions_a),
            playerPositionsB=list(record.positions_b),
            createdAt=record.created_at,
        )


class SetsWonOut(BaseModel):
    A: int
    B: int


class MatchStateOut(BaseModel):
    """Derived match state plus the values a court renderer needs."""

    gameId: Optional[str] = None
    sport: str
    matchType: str
    playerNames: List[str]
    scoreA: int
    scoreB: int
    gamesA: int
    gamesB: int
    currentSet: int
    setScoresA: List[int]
    setScoresB: List[int]
    setsWon: SetsWonOut
    servingSide: Optional[str] = None
    serverIndex: Optional[int] = None
    serverName: Optional[str] = None
    serveBox: Optional[Literal["Left", "Right"]] = None
    positionsA: List[int]
    positionsB: List[int]
    leftSide: str
    rightSide: str
    switchedMidSet: bool
    ended: bool
    winner: Optional[str] = None
    scoreCalls: Optional[Dict[str, str]] = None

    @classmethod
    def from_state(
        cls, state: MatchState, game_id: Optional[str] = None
    ) -> "MatchStateOut":
        config = state.config
        ruleset = get_ruleset(config.sport)

        serve_box = None
        if state.serving_side is not None and not state.ended:
            receiver = "B" if state.serving_side == "A" else "A"
            serve_box = ruleset.server_court_position(
                state.score(state.serving_side), state.score(receiver)
            )

        calls = None
        if config.sport == "tennis":
            tiebreak = ruleset.is_tiebreak(state.games_a, state.games_b)
            calls = {
                "A": ruleset.score_display(state.score_a, state.score_b, tiebreak),
                "B": ruleset.score_display(state.score_b, state.score_a, tiebreak),
            }

        return cls(
            gameId=game_id,
            sport=config.sport,
            matchType=config.match_type,
            playerNames=config.player_names,
            scoreA=state.score_a,
            scoreB=state.score_b,
            gamesA=state.games_a,
            gamesB=state.games_b,
            currentSet=state.current_set,
            setScoresA=list(state.set_scores_a),
            setScoresB=list(state.set_scores_b),
            setsWon=SetsWonOut(**state.sets_won()),
            servingSide=state.serving_side,
            serverIndex=state.server_index,
            serverName=state.server_name(),
            serveBox=serve_box,
            positionsA=list(state.positions_a),
            positionsB=list(state.positions_b),
            leftSide=state.left_side,
            rightSide=state.right_side,
            switchedMidSet=state.switched_mid_set,
            ended=state.ended,
            winner=state.winner,
            scoreCalls=calls,
        )
