from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from hmac import compare_digest
from logging import getLogger

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..lib.text_pools import SEED_TEXTS
from ..orm.text_content import TextContent
from ..repositories.achievement import AchievementRepo
from ..repositories.leaderboard_cache import LeaderboardCacheRepo
from ..repositories.text_content import TextContentRepo
from ..repositories.typing_test import TypingTestRepo
from ..repositories.user import UserRepo
from ..types.common import ErrorContext
from ..types.enums import ErrorCode
from ..types.requests.admin import RESET_CONFIRMATION
from ..types.setting import Setting
from .base import ServiceRet

logger = getLogger(__name__)

RECENT_WINDOW = timedelta(days=7)


@dataclass(slots=True)
class DatabaseStatsRet:
    total_users: int
    total_tests: int
    total_texts: int
    recent_users: int
    recent_tests: int
    recent_texts: int


class AdminService:
    def __init__(
        self,
        setting: Setting,
        sessionmaker: async_sessionmaker[AsyncSession],
        leaderboard_cache_repo: LeaderboardCacheRepo,
    ) -> None:
        self._setting = setting
        self._sessionmaker = sessionmaker
        self._leaderboard_cache_repo = leaderboard_cache_repo

    def authorize(self, admin_key: str | None) -> ServiceRet:
        """
        compare the 'X-Admin-Key' header with the configured key
        """
        expected = self._setting.admin.api_key
        if not expected:
            return ServiceRet(
                ok=False,
                error=ErrorContext(
                    code=ErrorCode.ADMIN_DISABLED,
                    message="Admin routes are disabled",
                ),
            )

        if admin_key is None or not compare_digest(admin_key, expected):
            logger.warning("rejected admin request, invalid key")
            return ServiceRet(
                ok=False,
                error=ErrorContext(
                    code=ErrorCode.ACCESS_DENIED, message="Invalid admin key"
                ),
            )

        return ServiceRet(ok=True)

    async def seed(self) -> ServiceRet[list[TextContent]]:
        async with self._sessionmaker() as session:
            repo = TextContentRepo(session)
            existing = await repo.count()
            if existing > 0:
                return ServiceRet(
                    ok=False,
                    error=ErrorContext(
                        code=ErrorCode.ALREADY_SEEDED,
                        message=f"Database already contains {existing} texts",
                    ),
                )

            texts = [await repo.create(**values) for values in SEED_TEXTS]
            await session.commit()

        logger.info("seeded %s texts", len(texts))
        return ServiceRet(ok=True, data=texts)

    async def reset(self, confirm: str | None) -> ServiceRet:
        if confirm != RESET_CONFIRMATION:
            return ServiceRet(
                ok=False,
                error=ErrorContext(
                    code=ErrorCode.CONFIRMATION_REQUIRED,
                    message=f"Send confirm: '{RESET_CONFIRMATION}' to reset the database",
                ),
            )

        async with self._sessionmaker() as session:
            # children first, sqlite does not cascade without the foreign key pragma
            await AchievementRepo(session).delete_all()
            await TypingTestRepo(session).delete_all()
            await TextContentRepo(session).delete_all()
            await UserRepo(session).delete_all()
            await session.commit()

        logger.warning("database reset")
        try:
            await self._leaderboard_cache_repo.invalidate()
        except Exception:
            logger.exception("failed to invalidate leaderboard cache")

        return ServiceRet(ok=True)

    async def stats(self) -> ServiceRet[DatabaseStatsRet]:
        since = datetime.now(UTC) - RECENT_WINDOW
        async with self._sessionmaker() as session:
            user_repo = UserRepo(session)
            test_repo = TypingTestRepo(session)
            text_repo = TextContentRepo(session)
            ret = DatabaseStatsRet(
                total_users=await user_repo.count_active(),
                total_tests=await test_repo.count(),
                total_texts=await text_repo.count(active_only=True),
                recent_users=await user_repo.count_active(since=since),
                recent_tests=await test_repo.count(since=since),
                recent_texts=await text_repo.count(active_only=True, since=since),
            )

        return ServiceRet(ok=True, data=ret)
