# backend/courtside/routers/games.py
import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..exceptions import http_problem
from ..models import Game
from ..schemas import GameCreate, GameIdOut, GameOut, GameUpdate, MatchStateOut, PointIn
from ..scoring.state import MatchConfig
from ..services import persistence_guard, records, scoreboard
from ..time_utils import coerce_utc

logger = logging.getLogger(__name__)

# Resource-only prefix; versioning is added in main.py
router = APIRouter(prefix="/games", tags=["games"])


def _game_out(game: Game) -> GameOut:
    return GameOut(
        id=game.id,
        sport=game.sport,
        matchType=game.match_type,
        playerNames=list(game.player_names or []),
        firstServer=game.first_server,
        startingSide=game.starting_side,
        scoreA=game.score_a,
        scoreB=game.score_b,
        gamesA=game.games_a or 0,
        gamesB=game.games_b or 0,
        setScoresA=list(game.set_scores_a or []),
        setScoresB=list(game.set_scores_b or []),
        currentSet=game.current_set,
        gameEnded=bool(game.game_ended),
        winner=game.winner,
        createdAt=coerce_utc(game.created_at),
    )


@router.post("", response_model=GameIdOut)
async def create_game(body: GameCreate, session: AsyncSession = Depends(get_session)):
    config = MatchConfig.from_setup(
        body.playerNames,
        first_server=body.firstServer,
        starting_side=body.startingSide,
        sport=body.sport,
        match_type=body.matchType,
    )
    async with persistence_guard(session, "create game"):
        game_id = await records.create_game(session, config)
    return GameIdOut(id=game_id)


@router.get("/{gid}", response_model=GameOut)
async def get_game(gid: str, session: AsyncSession = Depends(get_session)):
    async with persistence_guard(session, "load game %s", gid):
        game = await records.get_game(session, gid)
    return _game_out(game)


@router.patch("/{gid}", response_model=GameOut)
async def patch_game(
    gid: str, body: GameUpdate, session: AsyncSession = Depends(get_session)
):
    fields = body.fields()
    async with persistence_guard(session, "load game %s", gid):
        game = await records.get_game(session, gid)
        has_points = await records.latest_point(session, gid) is not None
    if "sport" in fields and fields["sport"] != game.sport:
        # Switching rulesets would make the stored history unreadable.
        if has_points:
            raise http_problem(
                status_code=409,
                detail="cannot change sport after points were recorded",
                code="sport_locked",
            )
    async with persistence_guard(session, "patch game %s", gid):
        game = await records.patch_game(session, gid, fields)
    return _game_out(game)


@router.delete("/{gid}", status_code=204)
async def delete_game(gid: str, session: AsyncSession = Depends(get_session)):
    async with persistence_guard(session, "delete game %s", gid):
        await records.delete_game(session, gid)
    return Response(status_code=204)


@router.get("/{gid}/state", response_model=MatchStateOut)
async def get_state(gid: str, session: AsyncSession = Depends(get_session)):
    board = await scoreboard.load_scoreboard(session, gid)
    return MatchStateOut.from_state(board.state, game_id=gid)


@router.post("/{gid}/points", response_model=MatchStateOut)
async def score_point(
    gid: str, body: PointIn, session: AsyncSession = Depends(get_session)
):
    state = await scoreboard.score_point(session, gid, body.side)
    return MatchStateOut.from_state(state, game_id=gid)


@router.post("/{gid}/undo", response_model=MatchStateOut)
async def undo_point(gid: str, session: AsyncSession = Depends(get_session)):
    state = await scoreboard.undo_point(session, gid)
    return MatchStateOut.from_state(state, game_id=gid)


@router.post("/{gid}/resync", response_model=MatchStateOut)
async def resync_game(gid: str, session: AsyncSession = Depends(get_session)):
    state = await scoreboard.resync(session, gid)
    logger.info("Resynchronised game %s", gid)
    return MatchStateOut.from_state(state, game_id=gid)
