import json
from functools import wraps
from hashlib import md5
from logging import getLogger
from logging.config import dictConfig
from typing import Callable

from alembic import command
from alembic.config import Config
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic_core import Url

from ..types.common import ErrorContext
from ..types.enums import ErrorCode
from ..types.errors import InvalidToken, UserNotFound
from ..types.log import TRACE
from ..types.responses.base import ErrorResponse
from ..types.setting import Setting

logger = getLogger(__name__)

ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.UNKNOWN_ERROR: 500,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_TOKEN: 401,
    ErrorCode.USER_EXISTS: 400,
    ErrorCode.USER_NOT_FOUND: 401,
    ErrorCode.MISSING_CREDENTIALS: 400,
    ErrorCode.INVALID_CREDENTIALS: 401,
    ErrorCode.TEST_NOT_FOUND: 404,
    ErrorCode.ACCESS_DENIED: 403,
    ErrorCode.INVALID_RESULTS: 400,
    ErrorCode.NO_DATA: 404,
    ErrorCode.ALREADY_SEEDED: 400,
    ErrorCode.CONFIRMATION_REQUIRED: 400,
    ErrorCode.ADMIN_DISABLED: 403,
}


def sanitized_dsn(dsn: str) -> Url | str:
    if dsn.startswith("sqlite"):
        return dsn

    temp_url = Url(dsn)
    assert temp_url.host
    assert temp_url.path
    url = Url.build(
        scheme=temp_url.scheme,
        username=temp_url.username,
        password="***",
        host=temp_url.host,
        port=temp_url.port,
        path=temp_url.path.lstrip("/"),
    )
    return url


def db_migration(setting: Setting):
    logger.info("running migration on %s", sanitized_dsn(setting.db.dsn))
    config = Config()
    config.set_main_option("script_location", setting.db.migration_location)
    config.set_main_option("sqlalchemy.url", setting.db.dsn)
    command.upgrade(config, "head")
    logger.info("finish migration")


def init_logger(setting: Setting):
    dictConfig(setting.logger)
    logger.info("logger initialized")
    logger.debug("debug level activated")
    logger.log(TRACE, "trace level activated")


def load_setting(base: str) -> Setting:
    return Setting.from_file(base)


def error_response(error: ErrorContext | None) -> JSONResponse:
    """
    JSON error body with the status code mapped from the error code
    """
    error = error or ErrorContext()
    msg = jsonable_encoder(ErrorResponse(error=error))
    return JSONResponse(msg, status_code=ERROR_STATUS.get(error.code, 500))


def catch_error_async(func: Callable):
    @wraps(func)
    async def wrapped(*args, **kwargs):
        try:
            return await func(*args, **kwargs)

        except InvalidToken as ex:
            logger.warning("token error: %s", str(ex))
            error = ErrorContext(code=ErrorCode.INVALID_TOKEN, message=str(ex))
            msg = ErrorResponse(error=error).model_dump()
            return JSONResponse(msg, status_code=401)

        except UserNotFound as ex:
            logger.warning("user error: %s", str(ex))
            error = ErrorContext(code=ErrorCode.USER_NOT_FOUND, message=str(ex))
            msg = ErrorResponse(error=error).model_dump()
            return JSONResponse(msg, status_code=401)

        except Exception:
            logger.exception("something went wrong")
            msg = ErrorResponse().model_dump()
            return JSONResponse(msg, status_code=500)

    return wrapped


def get_dict_hash(inpt: dict) -> str:
    """
    This is only used to check if the content of the input is identical
    """
    return md5(json.dumps(inpt, sort_keys=True).encode()).hexdigest()[:8]
