from dataclasses import dataclass
from logging import getLogger

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt.exceptions import PyJWTError

from ..repositories.leaderboard_cache import LeaderboardCacheRepo
from ..repositories.user import UserRepo
from ..services.admin import AdminService
from ..services.health_check import HealthCheckService
from ..services.leaderboard import LeaderboardService
from ..services.statistics import StatisticsService
from ..services.typing_test import TypingTestService
from ..services.user import UserService
from ..types.errors import InvalidToken, TokenNotProvided, UserNotFound
from ..types.jwt import JWTPayload
from ..types.setting import Setting
from .server import TypemonkeyServer
from .token_generator import TokenGenerator
from .token_validator import TokenValidator

bearer = HTTPBearer(
    auto_error=False,
    description="Access token from register / login",
    scheme_name="Access token",
)

logger = getLogger(__name__)


async def get_health_check_service(request: Request) -> HealthCheckService:
    app: TypemonkeyServer = request.app
    service = HealthCheckService(app)
    return service


async def get_user_service(request: Request) -> UserService:
    app: TypemonkeyServer = request.app
    service = UserService(
        sessionmaker=app.sessionmaker,
        token_generator=TokenGenerator(app.setting),
        password_hasher=app.password_hasher,
    )
    return service


async def get_typing_test_service(request: Request) -> TypingTestService:
    app: TypemonkeyServer = request.app
    leaderboard_cache_repo = LeaderboardCacheRepo(
        redis_conn=app.redis_conn, setting=app.setting
    )
    service = TypingTestService(
        sessionmaker=app.sessionmaker,
        text_generator=app.text_generator,
        leaderboard_cache_repo=leaderboard_cache_repo,
    )
    return service


async def get_leaderboard_service(request: Request) -> LeaderboardService:
    app: TypemonkeyServer = request.app
    leaderboard_cache_repo = LeaderboardCacheRepo(
        redis_conn=app.redis_conn, setting=app.setting
    )
    service = LeaderboardService(
        sessionmaker=app.sessionmaker, leaderboard_cache_repo=leaderboard_cache_repo
    )
    return service


async def get_statistics_service(request: Request) -> StatisticsService:
    app: TypemonkeyServer = request.app
    service = StatisticsService(sessionmaker=app.sessionmaker)
    return service


async def get_admin_service(request: Request) -> AdminService:
    app: TypemonkeyServer = request.app
    leaderboard_cache_repo = LeaderboardCacheRepo(
        redis_conn=app.redis_conn, setting=app.setting
    )
    service = AdminService(
        setting=app.setting,
        sessionmaker=app.sessionmaker,
        leaderboard_cache_repo=leaderboard_cache_repo,
    )
    return service


def get_setting(request: Request) -> Setting:
    app: TypemonkeyServer = request.app
    return app.setting


@dataclass(slots=True)
class GetAccessTokenInfoRet:
    payload: JWTPayload | None = None
    error: Exception | None = None


def get_access_token_info(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> GetAccessTokenInfoRet:
    """
    validate the bearer token and return payload
    """
    if credentials is None:
        error = TokenNotProvided("Access denied. No token provided.")
        return GetAccessTokenInfoRet(error=error)

    app: TypemonkeyServer = request.app
    try:
        token_validator = TokenValidator(app.setting)
        return GetAccessTokenInfoRet(
            payload=token_validator.validate(credentials.credentials)
        )
    except PyJWTError as ex:
        return GetAccessTokenInfoRet(error=ex)


@dataclass(slots=True)
class GetActiveUserRet:
    user_id: int | None = None
    error: Exception | None = None


async def get_active_user(
    request: Request,
    token_info: GetAccessTokenInfoRet = Depends(get_access_token_info),
) -> GetActiveUserRet:
    """
    resolve the token owner, unknown and deactivated users are rejected
    """
    if token_info.error:
        return GetActiveUserRet(error=InvalidToken(str(token_info.error)))

    assert token_info.payload is not None
    app: TypemonkeyServer = request.app
    async with app.sessionmaker() as session:
        user = await UserRepo(session).get_active(token_info.payload.user_id)

    if user is None:
        logger.warning(
            "token for unknown or inactive user: %s", token_info.payload.user_id
        )
        return GetActiveUserRet(error=UserNotFound("User not found or inactive"))

    return GetActiveUserRet(user_id=user.id)
