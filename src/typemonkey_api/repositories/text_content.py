from datetime import UTC, datetime

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..lib.typing_metrics import text_stats
from ..orm.text_content import TextContent


class TextContentRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def random(
        self,
        category: str | None = None,
        difficulty: str | None = None,
        language: str | None = None,
    ) -> TextContent | None:
        """
        random active passage matching every given filter
        """
        query = select(TextContent).where(TextContent.is_active.is_(True))
        if category is not None:
            query = query.where(TextContent.category == category)
        if difficulty is not None:
            query = query.where(TextContent.difficulty == difficulty)
        if language is not None:
            query = query.where(TextContent.language == language)

        query = query.order_by(func.random()).limit(1)
        return await self._session.scalar(query)

    async def increment_usage(self, id: int):
        query = (
            update(TextContent)
            .where(TextContent.id == id)
            .values(usage_count=TextContent.usage_count + 1)
        )
        await self._session.execute(query)

    async def create(
        self,
        title: str,
        content: str,
        category: str,
        difficulty: str,
        language: str = "english",
        author: str | None = None,
        source: str | None = None,
        tags: list[str] | None = None,
        created_by: int | None = None,
    ) -> TextContent:
        stats = text_stats(content)
        query = (
            insert(TextContent)
            .values(
                {
                    "title": title,
                    "content": content,
                    "category": category,
                    "difficulty": difficulty,
                    "language": language,
                    "author": author,
                    "source": source,
                    "tags": tags or [],
                    "created_by": created_by,
                    "word_count": stats.word_count,
                    "character_count": stats.character_count,
                    "average_word_length": stats.average_word_length,
                    "created_at": datetime.now(UTC),
                }
            )
            .returning(TextContent)
        )
        ret = await self._session.scalar(query)
        assert ret
        return ret

    async def options(self) -> dict[str, list[str]]:
        """
        distinct categories / difficulties / languages of active passages
        """
        result: dict[str, list[str]] = {}
        for key, column in (
            ("categories", TextContent.category),
            ("difficulties", TextContent.difficulty),
            ("languages", TextContent.language),
        ):
            query = (
                select(column)
                .distinct()
                .where(TextContent.is_active.is_(True))
                .order_by(column)
            )
            ret = await self._session.scalars(query)
            result[key] = list(ret)

        return result

    async def count(
        self, active_only: bool = False, since: datetime | None = None
    ) -> int:
        query = select(func.count(TextContent.id))
        if active_only:
            query = query.where(TextContent.is_active.is_(True))
        if since is not None:
            query = query.where(TextContent.created_at >= since)

        ret = await self._session.scalar(query)
        return ret or 0

    async def delete_all(self):
        await self._session.execute(delete(TextContent))
