from contextlib import asynccontextmanager
from logging import Filter, LogRecord, getLogger

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.asyncio import Redis

from ..api.admin import router as admin_router
from ..api.healthcheck import router as healthcheck_router
from ..api.leaderboard import router as leaderboard_router
from ..api.stats import router as stats_router
from ..api.typing_tests import router as typing_tests_router
from ..api.users import router as users_router
from ..types.common import ErrorContext
from ..types.enums import ErrorCode
from ..types.responses.base import ErrorResponse
from ..types.setting import Setting
from .server import TypemonkeyServer

logger = getLogger(__name__)


class HealthCheckFilter(Filter):
    """disable access log for health check endpoints"""

    def filter(self, record: LogRecord):
        return record.getMessage().find("/healthcheck") == -1


@asynccontextmanager
async def lifespan(app: TypemonkeyServer):
    logger.info("lifespan startup")
    await app.prepare()
    getLogger("uvicorn.access").addFilter(HealthCheckFilter())

    yield

    logger.info("lifespan shutdown")
    await app.cleanup()


async def validation_error_handler(_: Request, exc: Exception):
    logger.info("validation error: %s", exc)
    msg = jsonable_encoder(
        ErrorResponse(
            error=ErrorContext(code=ErrorCode.VALIDATION_ERROR, message=str(exc))
        )
    )
    return JSONResponse(status_code=400, content=msg)


def create_server(setting: Setting, redis_conn: Redis | None = None) -> TypemonkeyServer:
    app = TypemonkeyServer(
        setting=setting,
        redis_conn=redis_conn,
        lifespan=lifespan,
        title="Typemonkey API",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=setting.cors.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)

    v1_router = APIRouter(
        prefix="/api/v1",
        responses={500: {"model": ErrorResponse}, 400: {"model": ErrorResponse}},
    )
    v1_router.include_router(users_router)
    v1_router.include_router(typing_tests_router)
    v1_router.include_router(leaderboard_router)
    v1_router.include_router(stats_router)
    v1_router.include_router(admin_router)

    app.include_router(healthcheck_router)
    app.include_router(v1_router)

    return app
