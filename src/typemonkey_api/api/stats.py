from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..lib.dependencies import (
    GetActiveUserRet,
    get_active_user,
    get_statistics_service,
)
from ..lib.util import catch_error_async, error_response
from ..services.statistics import StatisticsService
from ..types.enums import GroupBy, StatsTimeframe
from ..types.responses.base import ErrorResponse
from ..types.responses.stats import (
    CompareResponse,
    GlobalStatsResponse,
    UserStatisticsResponse,
)

router = APIRouter(tags=["Statistics"], prefix="/stats")


@router.get(
    "/user",
    responses={
        200: {"model": UserStatisticsResponse},
        401: {"model": ErrorResponse},
    },
)
@catch_error_async
async def user_stats(
    timeframe: StatsTimeframe = StatsTimeframe.ALL,
    group_by: GroupBy = GroupBy.DAY,
    current_user: GetActiveUserRet = Depends(get_active_user),
    service: StatisticsService = Depends(get_statistics_service),
):
    if current_user.error:
        raise current_user.error

    assert current_user.user_id is not None
    ret = await service.user_stats(
        current_user.user_id, timeframe=timeframe, group_by=group_by
    )
    if not ret.ok:
        return error_response(ret.error)

    assert ret.data is not None
    msg = jsonable_encoder(ret.data)
    return JSONResponse(msg, status_code=200)


@router.get("/global", responses={200: {"model": GlobalStatsResponse}})
@catch_error_async
async def global_stats(
    timeframe: StatsTimeframe = StatsTimeframe.ALL,
    service: StatisticsService = Depends(get_statistics_service),
):
    ret = await service.global_stats(timeframe=timeframe)

    assert ret.data is not None
    msg = jsonable_encoder(ret.data)
    return JSONResponse(msg, status_code=200)


@router.get(
    "/compare",
    responses={
        200: {"model": CompareResponse},
        401: {"model": ErrorResponse},
    },
)
@catch_error_async
async def compare(
    current_user: GetActiveUserRet = Depends(get_active_user),
    service: StatisticsService = Depends(get_statistics_service),
):
    if current_user.error:
        raise current_user.error

    assert current_user.user_id is not None
    ret = await service.compare(current_user.user_id)
    if not ret.ok:
        return error_response(ret.error)

    assert ret.data is not None
    msg = jsonable_encoder(ret.data)
    return JSONResponse(msg, status_code=200)
