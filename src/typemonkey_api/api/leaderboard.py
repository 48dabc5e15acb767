from logging import getLogger
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..lib.dependencies import (
    GetActiveUserRet,
    get_active_user,
    get_leaderboard_service,
)
from ..lib.util import catch_error_async, error_response
from ..services.leaderboard import LeaderboardService
from ..types.enums import LeaderboardMetric, LeaderboardTimeframe, RankMetric
from ..types.responses.base import ErrorResponse
from ..types.responses.leaderboard import (
    HallOfFameResponse,
    LeaderboardResponse,
    RankResponse,
)

logger = getLogger(__name__)

router = APIRouter(tags=["Leaderboard"], prefix="/leaderboard")


@router.get("", responses={200: {"model": LeaderboardResponse}})
@catch_error_async
async def leaderboard(
    timeframe: LeaderboardTimeframe = LeaderboardTimeframe.ALL,
    metric: LeaderboardMetric = LeaderboardMetric.WPM,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    category: str | None = None,
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    ret = await service.leaderboard(
        timeframe=timeframe, metric=metric, limit=limit, category=category
    )

    assert ret.data is not None
    msg = jsonable_encoder(ret.data)
    return JSONResponse(msg, status_code=200)


@router.get(
    "/rank",
    responses={
        200: {"model": RankResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
@catch_error_async
async def my_rank(
    timeframe: LeaderboardTimeframe = LeaderboardTimeframe.ALL,
    metric: RankMetric = RankMetric.WPM,
    current_user: GetActiveUserRet = Depends(get_active_user),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    if current_user.error:
        raise current_user.error

    assert current_user.user_id is not None
    ret = await service.rank(
        current_user.user_id, timeframe=timeframe, metric=metric
    )
    if not ret.ok:
        return error_response(ret.error)

    assert ret.data is not None
    msg = jsonable_encoder(ret.data)
    return JSONResponse(msg, status_code=200)


@router.get(
    "/rank/{user_id}",
    responses={
        200: {"model": RankResponse},
        404: {"model": ErrorResponse},
    },
)
@catch_error_async
async def rank(
    user_id: int,
    timeframe: LeaderboardTimeframe = LeaderboardTimeframe.ALL,
    metric: RankMetric = RankMetric.WPM,
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    ret = await service.rank(user_id, timeframe=timeframe, metric=metric)
    if not ret.ok:
        return error_response(ret.error)

    assert ret.data is not None
    msg = jsonable_encoder(ret.data)
    return JSONResponse(msg, status_code=200)


@router.get("/hall-of-fame", responses={200: {"model": HallOfFameResponse}})
@catch_error_async
async def hall_of_fame(
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    ret = await service.hall_of_fame()

    assert ret.data is not None
    msg = jsonable_encoder(HallOfFameResponse(records=ret.data))
    return JSONResponse(msg, status_code=200)
