from asyncio import to_thread
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..lib.password import PasswordHasher
from ..lib.token_generator import TokenGenerator
from ..orm.achievement import Achievement
from ..orm.user import User
from ..repositories.achievement import AchievementRepo
from ..repositories.user import UserRepo
from ..types.common import ErrorContext
from ..types.enums import ErrorCode
from ..types.requests.user import (
    ChangePasswordRequest,
    DeleteAccountRequest,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
)
from .base import ServiceRet

logger = getLogger(__name__)

USER_NOT_FOUND = ErrorContext(
    code=ErrorCode.USER_NOT_FOUND, message="User not found or inactive"
)


@dataclass(slots=True)
class AuthRet:
    token: str
    user: User


@dataclass(slots=True)
class UserStatsRet:
    user: User
    achievements: list[Achievement]


class UserService:
    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        token_generator: TokenGenerator,
        password_hasher: PasswordHasher,
    ) -> None:
        self._sessionmaker = sessionmaker
        self._token_generator = token_generator
        self._password_hasher = password_hasher

    async def register(self, request: RegisterRequest) -> ServiceRet[AuthRet]:
        logger.debug("register, username: %s", request.username)

        async with self._sessionmaker() as session:
            repo = UserRepo(session)
            if await repo.exists(username=request.username, email=request.email):
                return ServiceRet(
                    ok=False,
                    error=ErrorContext(
                        code=ErrorCode.USER_EXISTS,
                        message="Username or email is already taken",
                    ),
                )

            password = await to_thread(self._password_hasher.hash, request.password)
            user = await repo.create(
                username=request.username,
                email=request.email,
                password=password,
                profile=request.profile.model_dump(exclude_none=True),
            )
            await session.commit()

        token = self._token_generator.gen_access_token(user.id, user.username)
        logger.info("user registered, id: %s", user.id)
        return ServiceRet(ok=True, data=AuthRet(token=token.access_token, user=user))

    async def login(self, request: LoginRequest) -> ServiceRet[AuthRet]:
        if not request.login or not request.password:
            return ServiceRet(
                ok=False,
                error=ErrorContext(
                    code=ErrorCode.MISSING_CREDENTIALS,
                    message="Please provide username/email and password",
                ),
            )

        async with self._sessionmaker() as session:
            repo = UserRepo(session)
            user = await repo.get_by_login(request.login)
            if user is None or not user.is_active:
                logger.debug("login failed, user not found: %s", request.login)
                return ServiceRet(
                    ok=False,
                    error=ErrorContext(
                        code=ErrorCode.INVALID_CREDENTIALS, message="User not found"
                    ),
                )

            if not await to_thread(
                self._password_hasher.verify, request.password, user.password
            ):
                logger.debug("login failed, incorrect password, id: %s", user.id)
                return ServiceRet(
                    ok=False,
                    error=ErrorContext(
                        code=ErrorCode.INVALID_CREDENTIALS,
                        message="Incorrect password",
                    ),
                )

            user = await repo.update(user.id, {"last_login_at": datetime.now(UTC)})
            await session.commit()

        token = self._token_generator.gen_access_token(user.id, user.username)
        return ServiceRet(ok=True, data=AuthRet(token=token.access_token, user=user))

    async def get_user(self, user_id: int) -> ServiceRet[User]:
        async with self._sessionmaker() as session:
            user = await UserRepo(session).get_active(user_id)

        if user is None:
            return ServiceRet(ok=False, error=USER_NOT_FOUND)
        return ServiceRet(ok=True, data=user)

    async def update_profile(
        self, user_id: int, request: UpdateProfileRequest
    ) -> ServiceRet[User]:
        values = {}
        if request.profile is not None:
            values.update(request.profile.model_dump(exclude_unset=True))
        if request.preferences is not None:
            values.update(
                request.preferences.model_dump(exclude_unset=True, exclude_none=True)
            )

        async with self._sessionmaker() as session:
            repo = UserRepo(session)
            user = await repo.get_active(user_id)
            if user is None:
                return ServiceRet(ok=False, error=USER_NOT_FOUND)

            if values:
                user = await repo.update(user_id, values)
                await session.commit()

        return ServiceRet(ok=True, data=user)

    async def stats(self, user_id: int) -> ServiceRet[UserStatsRet]:
        async with self._sessionmaker() as session:
            user = await UserRepo(session).get_active(user_id)
            if user is None:
                return ServiceRet(ok=False, error=USER_NOT_FOUND)

            achievements = await AchievementRepo(session).list_by_user(user_id)

        return ServiceRet(
            ok=True, data=UserStatsRet(user=user, achievements=achievements)
        )

    async def change_password(
        self, user_id: int, request: ChangePasswordRequest
    ) -> ServiceRet:
        if not request.current_password or not request.new_password:
            return ServiceRet(
                ok=False,
                error=ErrorContext(
                    code=ErrorCode.MISSING_CREDENTIALS,
                    message="Please provide current and new passwords",
                ),
            )

        async with self._sessionmaker() as session:
            repo = UserRepo(session)
            user = await repo.get_active(user_id)
            if user is None:
                return ServiceRet(ok=False, error=USER_NOT_FOUND)

            if not await to_thread(
                self._password_hasher.verify, request.current_password, user.password
            ):
                return ServiceRet(
                    ok=False,
                    error=ErrorContext(
                        code=ErrorCode.INVALID_CREDENTIALS,
                        message="Current password is incorrect",
                    ),
                )

            password = await to_thread(
                self._password_hasher.hash, request.new_password
            )
            await repo.update(user_id, {"password": password})
            await session.commit()

        logger.info("password changed, id: %s", user_id)
        return ServiceRet(ok=True)

    async def delete_account(
        self, user_id: int, request: DeleteAccountRequest
    ) -> ServiceRet:
        """
        soft delete, the user is only marked inactive
        """
        if not request.password:
            return ServiceRet(
                ok=False,
                error=ErrorContext(
                    code=ErrorCode.MISSING_CREDENTIALS,
                    message="Please provide your password to delete account",
                ),
            )

        async with self._sessionmaker() as session:
            repo = UserRepo(session)
            user = await repo.get_active(user_id)
            if user is None:
                return ServiceRet(ok=False, error=USER_NOT_FOUND)

            if not await to_thread(
                self._password_hasher.verify, request.password, user.password
            ):
                return ServiceRet(
                    ok=False,
                    error=ErrorContext(
                        code=ErrorCode.INVALID_CREDENTIALS,
                        message="Password is incorrect",
                    ),
                )

            await repo.update(user_id, {"is_active": False})
            await session.commit()

        logger.info("account deactivated, id: %s", user_id)
        return ServiceRet(ok=True)
