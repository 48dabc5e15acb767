from logging import getLogger
from typing import Annotated

from fastapi import APIRouter, Depends, Header
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..lib.dependencies import get_admin_service
from ..lib.util import catch_error_async, error_response
from ..services.admin import AdminService
from ..types.requests.admin import ResetRequest
from ..types.responses.admin import (
    AdminStatsResponse,
    DatabaseStats,
    ResetResponse,
    SeedResponse,
)
from ..types.responses.base import ErrorResponse
from ..types.responses.typing_test import TextView

logger = getLogger(__name__)

router = APIRouter(
    tags=["Admin"],
    prefix="/admin",
    responses={403: {"model": ErrorResponse}},
)

AdminKey = Annotated[str | None, Header(alias="X-Admin-Key")]


@router.post(
    "/seed",
    responses={
        201: {"model": SeedResponse},
        400: {"model": ErrorResponse},
    },
)
@catch_error_async
async def seed(
    x_admin_key: AdminKey = None,
    service: AdminService = Depends(get_admin_service),
):
    auth = service.authorize(x_admin_key)
    if not auth.ok:
        return error_response(auth.error)

    ret = await service.seed()
    if not ret.ok:
        return error_response(ret.error)

    assert ret.data is not None
    msg = jsonable_encoder(
        SeedResponse(
            inserted_count=len(ret.data),
            texts=[TextView.model_validate(text) for text in ret.data],
        )
    )
    return JSONResponse(msg, status_code=201)


@router.post(
    "/reset",
    responses={
        200: {"model": ResetResponse},
        400: {"model": ErrorResponse},
    },
)
@catch_error_async
async def reset(
    request: ResetRequest,
    x_admin_key: AdminKey = None,
    service: AdminService = Depends(get_admin_service),
):
    auth = service.authorize(x_admin_key)
    if not auth.ok:
        return error_response(auth.error)

    ret = await service.reset(request.confirm)
    if not ret.ok:
        return error_response(ret.error)

    msg = jsonable_encoder(ResetResponse())
    return JSONResponse(msg, status_code=200)


@router.get("/stats", responses={200: {"model": AdminStatsResponse}})
@catch_error_async
async def stats(
    x_admin_key: AdminKey = None,
    service: AdminService = Depends(get_admin_service),
):
    auth = service.authorize(x_admin_key)
    if not auth.ok:
        return error_response(auth.error)

    ret = await service.stats()

    assert ret.data is not None
    msg = jsonable_encoder(
        AdminStatsResponse(
            database=DatabaseStats(
                total_users=ret.data.total_users,
                total_tests=ret.data.total_tests,
                total_texts=ret.data.total_texts,
                recent_users=ret.data.recent_users,
                recent_tests=ret.data.recent_tests,
                recent_texts=ret.data.recent_texts,
            )
        )
    )
    return JSONResponse(msg, status_code=200)
