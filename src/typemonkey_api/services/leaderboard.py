from datetime import UTC, datetime
from logging import getLogger

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..lib.timeframe import timeframe_start
from ..lib.typing_metrics import consistency_score, round_half_up
from ..orm.typing_test import TypingTest
from ..repositories.leaderboard_cache import LeaderboardCacheRepo
from ..repositories.typing_test import LeaderboardRow, TestWithUsername, TypingTestRepo
from ..types.common import ErrorContext
from ..types.enums import (
    ErrorCode,
    LeaderboardMetric,
    LeaderboardTimeframe,
    RankMetric,
)
from ..types.responses.leaderboard import (
    HallOfFameRecord,
    LeaderboardEntry,
    LeaderboardMetadata,
    LeaderboardResponse,
    RankResponse,
    RankUserStats,
    Ranking,
)
from .base import ServiceRet

logger = getLogger(__name__)


def _full_name(row: LeaderboardRow) -> str:
    if row.first_name and row.last_name:
        return f"{row.first_name} {row.last_name}"
    return row.first_name or row.last_name or row.username


def _sort_key(metric: LeaderboardMetric, row: LeaderboardRow, consistency: float):
    match metric:
        case LeaderboardMetric.ACCURACY:
            return (row.best_accuracy, row.best_wpm)
        case LeaderboardMetric.CONSISTENCY:
            return (consistency, row.best_wpm)
        case LeaderboardMetric.TESTS:
            return (row.total_tests, row.best_wpm)
        case _:
            return (row.best_wpm, row.best_accuracy)


def _record(
    record_type: str, value: float, ret: TestWithUsername, **extra
) -> HallOfFameRecord:
    test = ret.test
    return HallOfFameRecord(
        type=record_type,
        value=value,
        username=ret.username or "",
        date=test.created_at,
        **extra,
    )


class LeaderboardService:
    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        leaderboard_cache_repo: LeaderboardCacheRepo,
    ) -> None:
        self._sessionmaker = sessionmaker
        self._leaderboard_cache_repo = leaderboard_cache_repo

    async def leaderboard(
        self,
        timeframe: LeaderboardTimeframe = LeaderboardTimeframe.ALL,
        metric: LeaderboardMetric = LeaderboardMetric.WPM,
        limit: int = 50,
        category: str | None = None,
    ) -> ServiceRet[LeaderboardResponse]:
        """
        Per user ranking of public completed tests.

        Rows are ordered by the metric, ties are broken by the secondary
        metric and finally by user id so equal rows keep a stable order.
        Responses are cached per query until the next submission.
        """
        params = {
            "timeframe": timeframe,
            "metric": metric,
            "limit": limit,
            "category": category,
        }
        cached = None
        try:
            cached = await self._leaderboard_cache_repo.get(params)
        except Exception:
            logger.exception("failed to read leaderboard cache")

        if cached is not None:
            logger.debug("cache hit, params: %s", params)
            return ServiceRet(
                ok=True, data=LeaderboardResponse.model_validate_json(cached)
            )

        since = timeframe_start(timeframe)
        async with self._sessionmaker() as session:
            rows = await TypingTestRepo(session).leaderboard(
                since=since, category=category
            )

        scored = [(row, consistency_score(row.wpm_values)) for row in rows]
        scored.sort(key=lambda item: item[0].user_id)
        scored.sort(key=lambda item: _sort_key(metric, *item), reverse=True)

        entries = [
            LeaderboardEntry(
                rank=index + 1,
                user_id=row.user_id,
                username=row.username,
                full_name=_full_name(row),
                avatar=row.avatar,
                country=row.country,
                best_wpm=round_half_up(row.best_wpm, 1),
                best_accuracy=round_half_up(row.best_accuracy, 1),
                average_wpm=round_half_up(row.average_wpm, 1),
                average_accuracy=round_half_up(row.average_accuracy, 1),
                total_tests=row.total_tests,
                recent_test_date=row.recent_test_date,
                consistency_score=round_half_up(consistency, 1),
            )
            for index, (row, consistency) in enumerate(scored[:limit])
        ]

        response = LeaderboardResponse(
            leaderboard=entries,
            metadata=LeaderboardMetadata(
                timeframe=timeframe,
                metric=metric,
                category=category or "all",
                total_participants=len(rows),
                entries_shown=len(entries),
                last_updated=datetime.now(UTC),
            ),
        )

        try:
            await self._leaderboard_cache_repo.set(params, response.model_dump_json())
        except Exception:
            logger.exception("failed to cache leaderboard")

        return ServiceRet(ok=True, data=response)

    async def rank(
        self,
        user_id: int,
        timeframe: LeaderboardTimeframe = LeaderboardTimeframe.ALL,
        metric: RankMetric = RankMetric.WPM,
    ) -> ServiceRet[RankResponse]:
        since = timeframe_start(timeframe)
        async with self._sessionmaker() as session:
            repo = TypingTestRepo(session)
            best = await repo.user_best(user_id, since=since)
            if best is None:
                return ServiceRet(
                    ok=False,
                    error=ErrorContext(
                        code=ErrorCode.NO_DATA,
                        message="No tests found for this user in the specified timeframe",
                    ),
                )

            better = await repo.count_better_users(
                metric=metric,
                best_wpm=best.best_wpm,
                best_accuracy=best.best_accuracy,
                since=since,
            )
            participants = await repo.count_participants(since=since)

        rank = better + 1
        percentile = 0
        if participants > 0:
            percentile = int(round_half_up((1 - (rank - 1) / participants) * 100))

        return ServiceRet(
            ok=True,
            data=RankResponse(
                user_stats=RankUserStats(
                    user_id=user_id,
                    best_wpm=round_half_up(best.best_wpm, 1),
                    best_accuracy=round_half_up(best.best_accuracy, 1),
                    average_wpm=round_half_up(best.average_wpm, 1),
                    total_tests=best.total_tests,
                ),
                ranking=Ranking(
                    rank=rank,
                    total_participants=participants,
                    percentile=percentile,
                    metric=metric,
                    timeframe=timeframe,
                ),
            ),
        )

    async def hall_of_fame(self) -> ServiceRet[list[HallOfFameRecord]]:
        async with self._sessionmaker() as session:
            repo = TypingTestRepo(session)
            fastest = await repo.top_test(
                order_by=[TypingTest.wpm.desc(), TypingTest.accuracy.desc()]
            )
            most_accurate = await repo.top_test(
                order_by=[TypingTest.accuracy.desc(), TypingTest.wpm.desc()]
            )
            perfect = await repo.top_test(
                order_by=[TypingTest.wpm.desc()],
                where=[TypingTest.accuracy == 100],
            )
            longest = await repo.top_test(order_by=[TypingTest.time_elapsed.desc()])

        records: list[HallOfFameRecord] = []
        if fastest is not None:
            records.append(
                _record(
                    "Fastest WPM",
                    fastest.test.wpm,
                    fastest,
                    accuracy=fastest.test.accuracy,
                    test_duration=fastest.test.time_elapsed,
                )
            )
        if most_accurate is not None:
            records.append(
                _record(
                    "Highest Accuracy",
                    most_accurate.test.accuracy,
                    most_accurate,
                    wpm=most_accurate.test.wpm,
                    test_duration=most_accurate.test.time_elapsed,
                )
            )
        if perfect is not None:
            records.append(
                _record(
                    "Perfect Accuracy + Highest WPM",
                    perfect.test.wpm,
                    perfect,
                    accuracy=perfect.test.accuracy,
                    test_duration=perfect.test.time_elapsed,
                )
            )
        if longest is not None:
            records.append(
                _record(
                    "Longest Test Duration",
                    longest.test.time_elapsed,
                    longest,
                    wpm=longest.test.wpm,
                    accuracy=longest.test.accuracy,
                )
            )

        return ServiceRet(ok=True, data=records)
