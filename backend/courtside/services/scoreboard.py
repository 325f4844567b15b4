"""I/O around the pure scoring core.

Every operation starts from the stored point history, never from the cached
summary on the game record.  Writes happen in a fixed order: the point record
is committed first and the game summary second, so a failure in between
leaves a summary that ``resync`` can repair from the history.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, NamedTuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import PersistenceError
from ..models import Game
from ..scoring import get_ruleset
from ..scoring.replay import reconstruct
from ..scoring.state import MatchConfig, MatchState, PointRecord
from ..scoring.undo import undo_last
from . import records

logger = logging.getLogger(__name__)


@asynccontextmanager
async def persistence_guard(
    session: AsyncSession, action: str, *args
) -> AsyncIterator[None]:
    """Turn database errors raised inside the block into ``PersistenceError``.

    The session is rolled back first so it stays usable; ``action`` is a
    %-style description used for the log line and the problem detail.
    """

    try:
        yield
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Failed to " + action, *args)
        raise PersistenceError(f"could not {action % args}") from exc


class Scoreboard(NamedTuple):
    game: Game
    config: MatchConfig
    history: List[PointRecord]
    state: MatchState


def config_from_game(game: Game) -> MatchConfig:
    """Build the match setup from the stored game record."""

    return MatchConfig.from_setup(
        game.player_names or [],
        first_server=game.first_server,
        starting_side=game.starting_side,
        sport=game.sport,
        match_type=game.match_type,
    )


async def load_scoreboard(session: AsyncSession, game_id: str) -> Scoreboard:
    async with persistence_guard(session, "load game %s", game_id):
        game = await records.get_game(session, game_id)
        history = await records.list_points(session, game_id)
    config = config_from_game(game)
    return Scoreboard(game, config, history, reconstruct(config, history))


async def score_point(session: AsyncSession, game_id: str, side: str) -> MatchState:
    """Record a point for ``side`` and return the resulting state."""

    board = await load_scoreboard(session, game_id)
    ruleset = get_ruleset(board.config.sport)
    state, record = ruleset.apply_point(board.state, side)

    async with persistence_guard(session, "record point for game %s", game_id):
        await records.create_point(session, game_id, record)
        await records.patch_game(session, game_id, ruleset.summary(state))

    if state.ended:
        logger.info("Game %s won by side %s", game_id, state.winner)
    return state


async def undo_point(session: AsyncSession, game_id: str) -> MatchState:
    """Remove the newest point and return the state before it."""

    board = await load_scoreboard(session, game_id)
    result = undo_last(board.config, board.history)
    ruleset = get_ruleset(board.config.sport)

    async with persistence_guard(session, "undo point %s", result.removed.id):
        await records.delete_point(session, result.removed.id)
        await records.patch_game(session, game_id, ruleset.summary(result.state))

    logger.info("Undid point %s of game %s", result.removed.id, game_id)
    return result.state


async def resync(session: AsyncSession, game_id: str) -> MatchState:
    """Rebuild the state from history and overwrite the cached summary."""

    board = await load_scoreboard(session, game_id)
    ruleset = get_ruleset(board.config.sport)
    async with persistence_guard(session, "resync game %s", game_id):
        await records.patch_game(session, game_id, ruleset.summary(board.state))
    return board.state
