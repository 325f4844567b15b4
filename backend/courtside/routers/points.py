# backend/courtside/routers/points.py
from typing import List, Union

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..exceptions import http_problem
from ..schemas import PointOut
from ..services import persistence_guard, records

# Raw access to point records; scoring goes through /games/{id}/points.
router = APIRouter(prefix="/points", tags=["points"])


@router.get("", response_model=Union[List[PointOut], PointOut])
async def list_points(
    game_id: str = Query(..., alias="gameId"),
    latest: bool = False,
    session: AsyncSession = Depends(get_session),
):
    async with persistence_guard(session, "list points for game %s", game_id):
        await records.get_game(session, game_id)
        if latest:
            found = await records.latest_point(session, game_id)
            history = [found] if found is not None else []
        else:
            history = await records.list_points(session, game_id)

    if not latest:
        return [PointOut.from_record(r) for r in history]
    if not history:
        raise http_problem(
            status_code=404,
            detail="no points recorded for this game",
            code="point_not_found",
        )
    return PointOut.from_record(history[0])


@router.get("/{pid}", response_model=PointOut)
async def get_point(pid: str, session: AsyncSession = Depends(get_session)):
    async with persistence_guard(session, "load point %s", pid):
        record = await records.get_point(session, pid)
    return PointOut.from_record(record)


@router.delete("/{pid}", status_code=204)
async def delete_point(pid: str, session: AsyncSession = Depends(get_session)):
    async with persistence_guard(session, "delete point %s", pid):
        await records.delete_point(session, pid)
    return Response(status_code=204)
