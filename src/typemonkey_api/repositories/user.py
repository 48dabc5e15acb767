from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..lib.typing_metrics import round_half_up
from ..orm.user import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        username: str,
        email: str,
        password: str,
        profile: dict[str, Any] | None = None,
    ) -> User:
        """
        - password: bcrypt hash
        """
        now = datetime.now(UTC)
        query = (
            insert(User)
            .values(
                {
                    "username": username,
                    "email": email,
                    "password": password,
                    "last_login_at": now,
                    "created_at": now,
                    **(profile or {}),
                }
            )
            .returning(User)
        )

        user = await self._session.scalar(query)
        assert user
        return user

    async def get(self, id: int, lock: bool = False) -> User | None:
        query = select(User).where(User.id == id)
        if lock:
            query = query.with_for_update()
        return await self._session.scalar(query)

    async def get_active(self, id: int) -> User | None:
        query = select(User).where(User.id == id).where(User.is_active.is_(True))
        return await self._session.scalar(query)

    async def exists(self, username: str, email: str) -> bool:
        query = select(func.count(User.id)).where(
            or_(User.username == username, User.email == email.lower())
        )
        ret = await self._session.scalar(query)
        return bool(ret)

    async def get_by_login(self, login: str) -> User | None:
        """
        - login: username or email
        """
        query = select(User).where(
            or_(User.username == login, User.email == login.lower())
        )
        return await self._session.scalar(query)

    async def update(self, id: int, values: dict[str, Any]) -> User:
        query = (
            update(User)
            .where(User.id == id)
            .values({**values, "updated_at": datetime.now(UTC)})
            .returning(User)
            .execution_options(synchronize_session=False, populate_existing=True)
        )
        user = await self._session.scalar(query)
        assert user
        return user

    async def apply_result(
        self,
        user: User,
        wpm: float,
        accuracy: float,
        time_elapsed: float,
        total_characters: int,
        correct_characters: int,
    ) -> User:
        """
        Add one finished test to the aggregate stats of a user.
        Averages are running averages rounded to whole numbers.
        The user must be loaded with 'get(id, lock=True)' in the same transaction.
        """
        total_tests = user.total_tests + 1
        average_wpm = round_half_up(
            (user.average_wpm * (total_tests - 1) + wpm) / total_tests
        )
        average_accuracy = round_half_up(
            (user.average_accuracy * (total_tests - 1) + accuracy) / total_tests
        )

        return await self.update(
            user.id,
            {
                "total_tests": total_tests,
                "total_time_typed": user.total_time_typed + time_elapsed,
                "total_characters_typed": user.total_characters_typed
                + total_characters,
                "total_correct_characters": user.total_correct_characters
                + correct_characters,
                "best_wpm": max(user.best_wpm, wpm),
                "best_accuracy": max(user.best_accuracy, accuracy),
                "average_wpm": average_wpm,
                "average_accuracy": average_accuracy,
            },
        )

    async def count_active(self, since: datetime | None = None) -> int:
        query = select(func.count(User.id)).where(User.is_active.is_(True))
        if since is not None:
            query = query.where(User.created_at >= since)

        ret = await self._session.scalar(query)
        return ret or 0

    async def delete_all(self):
        await self._session.execute(delete(User))
