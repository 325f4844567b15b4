"""Record store for game summaries and point records.

These are the persistence operations the scoring core relies on.  Each
mutating call commits on its own so the caller controls the order in which
records reach the database (point record first, summary second).  Database
errors are not caught here.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import GameNotFound, PointNotFound
from ..models import Game, Point
from ..scoring.state import MAX_SETS, SIDES, MatchConfig, PointRecord
from ..time_utils import coerce_utc, utcnow

logger = logging.getLogger(__name__)

GAME_PATCH_FIELDS = frozenset(
    {
        "sport",
        "score_a",
        "score_b",
        "games_a",
        "games_b",
        "set_scores_a",
        "set_scores_b",
        "current_set",
        "game_ended",
        "winner",
    }
)


async def create_game(session: AsyncSession, config: MatchConfig) -> str:
    """Store a new game with every score zeroed and return its id."""

    game_id = uuid.uuid4().hex
    session.add(
        Game(
            id=game_id,
            sport=config.sport,
            match_type=config.match_type,
            player_names=config.player_names,
            first_server=SIDES.index(config.first_server),
            starting_side=config.starting_side,
            score_a=0,
            score_b=0,
            games_a=0,
            games_b=0,
            set_scores_a=[0] * MAX_SETS,
            set_scores_b=[0] * MAX_SETS,
            current_set=0,
            game_ended=False,
            created_at=utcnow(),
        )
    )
    await session.commit()
    logger.info("Created %s %s game %s", config.match_type, config.sport, game_id)
    return game_id


async def get_game(session: AsyncSession, game_id: str) -> Game:
    game = await session.get(Game, game_id)
    if game is None:
        raise GameNotFound(game_id)
    return game


async def patch_game(
    session: AsyncSession, game_id: str, fields: Mapping[str, Any]
) -> Game:
    """Merge-patch a game: only the supplied fields are overwritten."""

    unknown = set(fields) - GAME_PATCH_FIELDS
    if unknown:
        raise ValueError(f"cannot patch game fields: {sorted(unknown)}")

    game = await get_game(session, game_id)
    for name, value in fields.items():
        setattr(game, name, value)
    await session.commit()
    return game


async def delete_game(session: AsyncSession, game_id: str) -> None:
    game = await get_game(session, game_id)
    await session.execute(delete(Point).where(Point.game_id == game_id))
    await session.delete(game)
    await session.commit()
    logger.info("Deleted game %s", game_id)


def to_record(point: Point) -> PointRecord:
    return PointRecord(
        id=point.id,
        game_id=point.game_id,
        created_at=coerce_utc(point.created_at),
        scored_by=point.scored_by,
        set_number=point.set_number,
        score_a=point.score_a,
        score_b=point.score_b,
        games_a=point.games_a,
        games_b=point.games_b,
        game_completed=bool(point.game_completed),
        set_completed=bool(point.set_completed),
        serving_side=point.serving_side,
        server_index=point.server_index,
        positions_a=tuple(point.positions_a or ()),
        positions_b=tuple(point.positions_b or ()),
    )


async def create_point(
    session: AsyncSession, game_id: str, record: PointRecord
) -> PointRecord:
    """Append ``record`` to the game's history and return the stored copy."""

    last_seq = (
        await session.execute(
            select(func.max(Point.seq)).where(Point.game_id == game_id)
        )
    ).scalar()
    point = Point(
        id=uuid.uuid4().hex,
        game_id=game_id,
        created_at=utcnow(),
        seq=(last_seq or 0) + 1,
        scored_by=record.scored_by,
        set_number=record.set_number,
        score_a=record.score_a,
        score_b=record.score_b,
        games_a=record.games_a,
        games_b=record.games_b,
        game_completed=record.game_completed,
        set_completed=record.set_completed,
        serving_side=record.serving_side,
        server_index=record.server_index,
        positions_a=list(record.positions_a),
        positions_b=list(record.positions_b),
    )
    session.add(point)
    await session.commit()
    return to_record(point)


def _history_query(game_id: str):
    # ``seq`` follows creation order within a game.
    return (
        select(Point)
        .where(Point.game_id == game_id)
        .order_by(Point.seq.desc(), Point.created_at.desc())
    )


async def list_points(session: AsyncSession, game_id: str) -> list[PointRecord]:
    """Return the game's point records, newest first."""

    rows = (await session.execute(_history_query(game_id))).scalars().all()
    return [to_record(p) for p in rows]


async def latest_point(session: AsyncSession, game_id: str) -> Optional[PointRecord]:
    row = (
        await session.execute(_history_query(game_id).limit(1))
    ).scalar_one_or_none()
    return to_record(row) if row is not None else None


async def get_point(session: AsyncSession, point_id: str) -> PointRecord:
    point = await session.get(Point, point_id)
    if point is None:
        raise PointNotFound(point_id)
    return to_record(point)


async def delete_point(session: AsyncSession, point_id: str) -> None:
    point = await session.get(Point, point_id)
    if point is None:
        raise PointNotFound(point_id)
    await session.delete(point)
    await session.commit()
