from collections import defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Sequence

from sqlalchemy import (
    ColumnElement,
    Select,
    and_,
    case,
    delete,
    distinct,
    func,
    insert,
    literal_column,
    or_,
    select,
)
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from ..orm.typing_test import TypingTest
from ..orm.user import User
from ..types.enums import HistorySortBy, RankMetric, SortOrder


@dataclass(slots=True)
class AggregateRow:
    total_tests: int = 0
    average_wpm: float = 0
    average_accuracy: float = 0
    best_wpm: float = 0
    best_accuracy: float = 0
    total_time_typed: float = 0
    total_characters: int = 0
    total_correct_characters: int = 0
    total_users: int = 0


@dataclass(slots=True)
class LeaderboardRow:
    """
    per user aggregate of the tests in a timeframe
    - wpm_values: every wpm of those tests, used for the consistency score
    """

    user_id: int
    username: str
    first_name: str | None
    last_name: str | None
    avatar: str | None
    country: str | None
    best_wpm: float
    best_accuracy: float
    average_wpm: float
    average_accuracy: float
    total_tests: int
    recent_test_date: datetime | None
    wpm_values: list[float] = field(default_factory=list)


@dataclass(slots=True)
class UserBestRow:
    best_wpm: float
    best_accuracy: float
    average_wpm: float
    total_tests: int


@dataclass(slots=True)
class TestWithUsername:
    test: TypingTest
    username: str | None


_HISTORY_SORT: dict[HistorySortBy, InstrumentedAttribute] = {
    HistorySortBy.CREATED_AT: TypingTest.created_at,
    HistorySortBy.WPM: TypingTest.wpm,
    HistorySortBy.ACCURACY: TypingTest.accuracy,
    HistorySortBy.TIME_ELAPSED: TypingTest.time_elapsed,
}


class TypingTestRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ---- single test ----

    async def create(self, values: dict[str, Any]) -> TypingTest:
        query = (
            insert(TypingTest)
            .values({"created_at": datetime.now(UTC), **values})
            .returning(TypingTest)
        )
        ret = await self._session.scalar(query)
        assert ret
        return ret

    async def get(self, id: int) -> TypingTest | None:
        query = select(TypingTest).where(TypingTest.id == id)
        return await self._session.scalar(query)

    async def get_with_username(self, id: int) -> TestWithUsername | None:
        query = (
            select(TypingTest, User.username)
            .outerjoin(User, TypingTest.user_id == User.id)
            .where(TypingTest.id == id)
        )
        ret = await self._session.execute(query)
        row = ret.one_or_none()
        if row is None:
            return None
        return TestWithUsername(test=row[0], username=row[1])

    async def get_by_submission_id(self, submission_id: str) -> TypingTest | None:
        query = select(TypingTest).where(TypingTest.submission_id == submission_id)
        return await self._session.scalar(query)

    async def delete(self, id: int):
        await self._session.execute(delete(TypingTest).where(TypingTest.id == id))

    async def delete_all(self):
        await self._session.execute(delete(TypingTest))

    # ---- per user ----

    async def history(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 20,
        sort_by: HistorySortBy = HistorySortBy.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> list[TypingTest]:
        column = _HISTORY_SORT[sort_by]
        order = column.desc() if sort_order == SortOrder.DESC else column.asc()

        query = (
            select(TypingTest)
            .where(TypingTest.user_id == user_id)
            .order_by(order, TypingTest.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        ret = await self._session.scalars(query)
        return list(ret)

    async def count_by_user(self, user_id: int) -> int:
        query = select(func.count(TypingTest.id)).where(TypingTest.user_id == user_id)
        ret = await self._session.scalar(query)
        return ret or 0

    async def user_aggregate(
        self, user_id: int, since: datetime | None = None
    ) -> AggregateRow:
        query = self._aggregate_query().where(
            TypingTest.user_id == user_id, TypingTest.is_completed.is_(True)
        )
        if since is not None:
            query = query.where(TypingTest.created_at >= since)

        return await self._fetch_aggregate(query)

    async def user_tests(
        self,
        user_id: int,
        since: datetime | None = None,
        limit: int | None = None,
        newest_first: bool = False,
    ) -> list[TypingTest]:
        """
        completed tests of a user ordered by creation time
        """
        order = TypingTest.created_at.desc() if newest_first else TypingTest.created_at
        query = (
            select(TypingTest)
            .where(TypingTest.user_id == user_id, TypingTest.is_completed.is_(True))
            .order_by(order, TypingTest.id)
        )
        if since is not None:
            query = query.where(TypingTest.created_at >= since)
        if limit is not None:
            query = query.limit(limit)

        ret = await self._session.scalars(query)
        return list(ret)

    # ---- leaderboard ----

    async def leaderboard(
        self, since: datetime | None = None, category: str | None = None
    ) -> list[LeaderboardRow]:
        """
        one row per active registered user with a public completed test
        """
        filters = self._ranked_filters(since, category)
        query = (
            select(
                User.id,
                User.username,
                User.first_name,
                User.last_name,
                User.avatar,
                User.country,
                func.max(TypingTest.wpm),
                func.max(TypingTest.accuracy),
                func.avg(TypingTest.wpm),
                func.avg(TypingTest.accuracy),
                func.count(TypingTest.id),
                func.max(TypingTest.created_at),
            )
            .select_from(TypingTest)
            .join(User, TypingTest.user_id == User.id)
            .where(*filters)
            .group_by(
                User.id,
                User.username,
                User.first_name,
                User.last_name,
                User.avatar,
                User.country,
            )
        )
        ret = await self._session.execute(query)

        rows: dict[int, LeaderboardRow] = {}
        for item in ret:
            rows[item[0]] = LeaderboardRow(
                user_id=item[0],
                username=item[1],
                first_name=item[2],
                last_name=item[3],
                avatar=item[4],
                country=item[5],
                best_wpm=item[6],
                best_accuracy=item[7],
                average_wpm=float(item[8]),
                average_accuracy=float(item[9]),
                total_tests=item[10],
                recent_test_date=item[11],
            )

        if not rows:
            return []

        wpm_query = (
            select(TypingTest.user_id, TypingTest.wpm)
            .join(User, TypingTest.user_id == User.id)
            .where(*filters)
            .order_by(TypingTest.created_at, TypingTest.id)
        )
        values: dict[int, list[float]] = defaultdict(list)
        for user_id, wpm in await self._session.execute(wpm_query):
            values[user_id].append(wpm)

        for user_id, row in rows.items():
            row.wpm_values = values[user_id]

        return list(rows.values())

    async def user_best(
        self, user_id: int, since: datetime | None = None
    ) -> UserBestRow | None:
        query = (
            select(
                func.max(TypingTest.wpm),
                func.max(TypingTest.accuracy),
                func.avg(TypingTest.wpm),
                func.count(TypingTest.id),
            )
            .join(User, TypingTest.user_id == User.id)
            .where(*self._ranked_filters(since), TypingTest.user_id == user_id)
        )
        ret = await self._session.execute(query)
        best_wpm, best_accuracy, average_wpm, total = ret.one()
        if not total:
            return None

        return UserBestRow(
            best_wpm=best_wpm,
            best_accuracy=best_accuracy,
            average_wpm=float(average_wpm),
            total_tests=total,
        )

    async def count_better_users(
        self,
        metric: RankMetric,
        best_wpm: float,
        best_accuracy: float,
        since: datetime | None = None,
    ) -> int:
        """
        Distinct users with at least one test beating (best_wpm, best_accuracy):
        a strictly greater primary metric, or an equal primary metric and a
        strictly greater secondary one.
        """
        if metric == RankMetric.ACCURACY:
            primary, secondary = TypingTest.accuracy, TypingTest.wpm
            primary_value, secondary_value = best_accuracy, best_wpm
        else:
            primary, secondary = TypingTest.wpm, TypingTest.accuracy
            primary_value, secondary_value = best_wpm, best_accuracy

        better: ColumnElement[bool] = or_(
            primary > primary_value,
            and_(primary == primary_value, secondary > secondary_value),
        )
        query = (
            select(func.count(distinct(TypingTest.user_id)))
            .join(User, TypingTest.user_id == User.id)
            .where(*self._ranked_filters(since), better)
        )
        ret = await self._session.scalar(query)
        return ret or 0

    async def count_participants(
        self, since: datetime | None = None, category: str | None = None
    ) -> int:
        query = (
            select(func.count(distinct(TypingTest.user_id)))
            .join(User, TypingTest.user_id == User.id)
            .where(*self._ranked_filters(since, category))
        )
        ret = await self._session.scalar(query)
        return ret or 0

    async def top_test(
        self,
        order_by: Sequence[ColumnElement],
        where: Sequence[ColumnElement] = (),
    ) -> TestWithUsername | None:
        """
        best public completed test of an active user for the given ordering
        """
        query = (
            select(TypingTest, User.username)
            .join(User, TypingTest.user_id == User.id)
            .where(*self._ranked_filters(), *where)
            .order_by(*order_by, TypingTest.id)
            .limit(1)
        )
        ret = await self._session.execute(query)
        row = ret.one_or_none()
        if row is None:
            return None
        return TestWithUsername(test=row[0], username=row[1])

    # ---- global ----

    async def global_aggregate(self, since: datetime | None = None) -> AggregateRow:
        query = self._aggregate_query().where(*self._public_filters(since))
        return await self._fetch_aggregate(query)

    async def distribution(
        self,
        column: InstrumentedAttribute,
        bounds: Sequence[float],
        since: datetime | None = None,
    ) -> list[int]:
        """
        Count public completed tests per bucket.
        Bucket i holds bounds[i] <= value < bounds[i + 1], the last bucket
        holds value >= bounds[-1]. Returns one count per bucket, in order.
        """
        # inline literals, the case expression is repeated in GROUP BY
        bucket = case(
            *[
                (column < literal_column(str(upper)), literal_column(str(index)))
                for index, upper in enumerate(bounds[1:])
            ],
            else_=literal_column(str(len(bounds) - 1)),
        )
        query = (
            select(bucket, func.count(TypingTest.id))
            .where(*self._public_filters(since))
            .group_by(bucket)
        )

        counts = [0] * len(bounds)
        for index, count in await self._session.execute(query):
            counts[index] = count
        return counts

    async def average_since(
        self, since: datetime, user_id: int | None = None
    ) -> AggregateRow:
        """
        - user_id: None for every public test
        """
        query = self._aggregate_query()
        if user_id is None:
            query = query.where(*self._public_filters(since))
        else:
            query = query.where(
                TypingTest.user_id == user_id,
                TypingTest.is_completed.is_(True),
                TypingTest.created_at >= since,
            )
        return await self._fetch_aggregate(query)

    async def count_public(self, max_wpm: float | None = None) -> int:
        query = select(func.count(TypingTest.id)).where(*self._public_filters())
        if max_wpm is not None:
            query = query.where(TypingTest.wpm <= max_wpm)
        ret = await self._session.scalar(query)
        return ret or 0

    async def count(self, since: datetime | None = None) -> int:
        query = select(func.count(TypingTest.id))
        if since is not None:
            query = query.where(TypingTest.created_at >= since)
        ret = await self._session.scalar(query)
        return ret or 0

    # ---- helpers ----

    def _public_filters(self, since: datetime | None = None) -> list[ColumnElement]:
        filters: list[ColumnElement] = [
            TypingTest.is_completed.is_(True),
            TypingTest.is_public.is_(True),
        ]
        if since is not None:
            filters.append(TypingTest.created_at >= since)
        return filters

    def _ranked_filters(
        self, since: datetime | None = None, category: str | None = None
    ) -> list[ColumnElement]:
        """
        public completed tests of active registered users, the query has to
        join User
        """
        filters = self._public_filters(since)
        filters.append(User.is_active.is_(True))
        if category is not None:
            filters.append(TypingTest.text_type == category)
        return filters

    def _aggregate_query(self) -> Select:
        return select(
            func.count(TypingTest.id),
            func.coalesce(func.avg(TypingTest.wpm), 0),
            func.coalesce(func.avg(TypingTest.accuracy), 0),
            func.coalesce(func.max(TypingTest.wpm), 0),
            func.coalesce(func.max(TypingTest.accuracy), 0),
            func.coalesce(func.sum(TypingTest.time_elapsed), 0),
            func.coalesce(func.sum(TypingTest.total_characters), 0),
            func.coalesce(func.sum(TypingTest.correct_characters), 0),
            func.count(distinct(TypingTest.user_id)),
        )

    async def _fetch_aggregate(self, query: Select) -> AggregateRow:
        ret = await self._session.execute(query)
        row = ret.one()
        return AggregateRow(
            total_tests=row[0],
            average_wpm=float(row[1]),
            average_accuracy=float(row[2]),
            best_wpm=float(row[3]),
            best_accuracy=float(row[4]),
            total_time_typed=float(row[5]),
            total_characters=int(row[6]),
            total_correct_characters=int(row[7]),
            total_users=row[8],
        )
