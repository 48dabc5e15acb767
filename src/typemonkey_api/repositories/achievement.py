from datetime import UTC, datetime

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..orm.achievement import Achievement


class AchievementRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_by_user(self, user_id: int) -> list[Achievement]:
        query = (
            select(Achievement)
            .where(Achievement.user_id == user_id)
            .order_by(Achievement.unlocked_at, Achievement.id)
        )
        ret = await self._session.scalars(query)
        return list(ret)

    async def names(self, user_id: int) -> set[str]:
        query = select(Achievement.name).where(Achievement.user_id == user_id)
        ret = await self._session.scalars(query)
        return set(ret)

    async def create(
        self,
        user_id: int,
        name: str,
        description: str,
        icon: str | None = None,
    ) -> Achievement:
        query = (
            insert(Achievement)
            .values(
                {
                    "user_id": user_id,
                    "name": name,
                    "description": description,
                    "icon": icon,
                    "unlocked_at": datetime.now(UTC),
                }
            )
            .returning(Achievement)
        )
        ret = await self._session.scalar(query)
        assert ret
        return ret

    async def delete_all(self):
        await self._session.execute(delete(Achievement))
