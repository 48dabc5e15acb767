from logging import getLogger

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..lib.dependencies import (
    GetActiveUserRet,
    get_active_user,
    get_user_service,
)
from ..lib.util import catch_error_async, error_response
from ..services.user import UserService
from ..types.requests.user import (
    ChangePasswordRequest,
    DeleteAccountRequest,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
)
from ..types.responses.base import ErrorResponse, SuccessResponse
from ..types.responses.user import (
    AchievementView,
    AuthResponse,
    UserInfo,
    UserResponse,
    UserStatsResponse,
    UserStatsView,
    VerifyTokenResponse,
)

logger = getLogger(__name__)

router = APIRouter(tags=["Users"], prefix="/users")


@router.post(
    "/register",
    responses={
        201: {"model": AuthResponse},
        400: {"model": ErrorResponse},
    },
)
@catch_error_async
async def register(
    request: RegisterRequest,
    service: UserService = Depends(get_user_service),
):
    ret = await service.register(request)
    if not ret.ok:
        return error_response(ret.error)

    assert ret.data is not None
    msg = jsonable_encoder(
        AuthResponse(token=ret.data.token, user=UserInfo.from_user(ret.data.user))
    )
    return JSONResponse(msg, status_code=201)


@router.post(
    "/login",
    responses={
        200: {"model": AuthResponse},
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
    },
)
@catch_error_async
async def login(
    request: LoginRequest,
    service: UserService = Depends(get_user_service),
):
    ret = await service.login(request)
    if not ret.ok:
        return error_response(ret.error)

    assert ret.data is not None
    msg = jsonable_encoder(
        AuthResponse(token=ret.data.token, user=UserInfo.from_user(ret.data.user))
    )
    return JSONResponse(msg, status_code=200)


@router.get(
    "/profile",
    responses={
        200: {"model": UserResponse},
        401: {"model": ErrorResponse},
    },
)
@catch_error_async
async def get_profile(
    current_user: GetActiveUserRet = Depends(get_active_user),
    service: UserService = Depends(get_user_service),
):
    if current_user.error:
        raise current_user.error

    assert current_user.user_id is not None
    ret = await service.get_user(current_user.user_id)
    if not ret.ok:
        return error_response(ret.error)

    assert ret.data is not None
    msg = jsonable_encoder(UserResponse(user=UserInfo.from_user(ret.data)))
    return JSONResponse(msg, status_code=200)


@router.put(
    "/profile",
    responses={
        200: {"model": UserResponse},
        401: {"model": ErrorResponse},
    },
)
@catch_error_async
async def update_profile(
    request: UpdateProfileRequest,
    current_user: GetActiveUserRet = Depends(get_active_user),
    service: UserService = Depends(get_user_service),
):
    if current_user.error:
        raise current_user.error

    assert current_user.user_id is not None
    ret = await service.update_profile(current_user.user_id, request)
    if not ret.ok:
        return error_response(ret.error)

    assert ret.data is not None
    msg = jsonable_encoder(UserResponse(user=UserInfo.from_user(ret.data)))
    return JSONResponse(msg, status_code=200)


@router.get(
    "/stats",
    responses={
        200: {"model": UserStatsResponse},
        401: {"model": ErrorResponse},
    },
)
@catch_error_async
async def stats(
    current_user: GetActiveUserRet = Depends(get_active_user),
    service: UserService = Depends(get_user_service),
):
    if current_user.error:
        raise current_user.error

    assert current_user.user_id is not None
    ret = await service.stats(current_user.user_id)
    if not ret.ok:
        return error_response(ret.error)

    assert ret.data is not None
    msg = jsonable_encoder(
        UserStatsResponse(
            stats=UserStatsView.model_validate(ret.data.user),
            achievements=[
                AchievementView.model_validate(item) for item in ret.data.achievements
            ],
        )
    )
    return JSONResponse(msg, status_code=200)


@router.put(
    "/change-password",
    responses={
        200: {"model": SuccessResponse},
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
    },
)
@catch_error_async
async def change_password(
    request: ChangePasswordRequest,
    current_user: GetActiveUserRet = Depends(get_active_user),
    service: UserService = Depends(get_user_service),
):
    if current_user.error:
        raise current_user.error

    assert current_user.user_id is not None
    ret = await service.change_password(current_user.user_id, request)
    if not ret.ok:
        return error_response(ret.error)

    msg = jsonable_encoder(SuccessResponse())
    return JSONResponse(msg, status_code=200)


@router.delete(
    "/account",
    responses={
        200: {"model": SuccessResponse},
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
    },
)
@catch_error_async
async def delete_account(
    request: DeleteAccountRequest,
    current_user: GetActiveUserRet = Depends(get_active_user),
    service: UserService = Depends(get_user_service),
):
    if current_user.error:
        raise current_user.error

    assert current_user.user_id is not None
    ret = await service.delete_account(current_user.user_id, request)
    if not ret.ok:
        return error_response(ret.error)

    msg = jsonable_encoder(SuccessResponse())
    return JSONResponse(msg, status_code=200)


@router.get(
    "/verify-token",
    responses={
        200: {"model": VerifyTokenResponse},
        401: {"model": ErrorResponse},
    },
)
@catch_error_async
async def verify_token(
    current_user: GetActiveUserRet = Depends(get_active_user),
    service: UserService = Depends(get_user_service),
):
    if current_user.error:
        raise current_user.error

    assert current_user.user_id is not None
    ret = await service.get_user(current_user.user_id)
    if not ret.ok:
        return error_response(ret.error)

    assert ret.data is not None
    msg = jsonable_encoder(VerifyTokenResponse(user=UserInfo.from_user(ret.data)))
    return JSONResponse(msg, status_code=200)
