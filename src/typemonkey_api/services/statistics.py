from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..lib.timeframe import as_utc, timeframe_start
from ..lib.typing_metrics import consistency_score, round_half_up
from ..orm.typing_test import TypingTest
from ..repositories.achievement import AchievementRepo
from ..repositories.typing_test import AggregateRow, TypingTestRepo
from ..repositories.user import UserRepo
from ..types.common import ErrorContext
from ..types.enums import ErrorCode, GroupBy, StatsTimeframe
from ..types.responses.stats import (
    AggregateStats,
    CompareGlobalStats,
    CompareResponse,
    CompareUserStats,
    Comparison,
    DistributionBucket,
    GlobalStats,
    GlobalStatsResponse,
    ProgressPoint,
    RecentTest,
    UserStatisticsResponse,
)
from ..types.responses.user import AchievementView, UserStatsView
from .base import ServiceRet

logger = getLogger(__name__)

WPM_BOUNDS: list[float] = [0, 20, 40, 60, 80, 100, 120, 150, 200]
ACCURACY_BOUNDS: list[float] = [0, 70, 80, 85, 90, 95, 98, 100]
RECENT_TESTS = 10
COMPARE_WINDOW = timedelta(days=30)

_PERIOD_FORMAT: dict[GroupBy, str] = {
    GroupBy.HOUR: "%Y-%m-%d %H:00",
    GroupBy.DAY: "%Y-%m-%d",
    GroupBy.WEEK: "%G-W%V",
    GroupBy.MONTH: "%Y-%m",
}


def _aggregate_stats(row: AggregateRow) -> AggregateStats:
    return AggregateStats(
        total_tests=row.total_tests,
        average_wpm=round_half_up(row.average_wpm, 2),
        average_accuracy=round_half_up(row.average_accuracy, 2),
        best_wpm=row.best_wpm,
        best_accuracy=row.best_accuracy,
        total_time_typed=row.total_time_typed,
        total_characters=row.total_characters,
        total_correct_characters=row.total_correct_characters,
    )


def progress(tests: Sequence[TypingTest], group_by: GroupBy) -> list[ProgressPoint]:
    """
    Group tests by period, tests have to be ordered oldest first.
    """
    fmt = _PERIOD_FORMAT[group_by]
    groups: dict[str, list[TypingTest]] = {}
    for test in tests:
        key = as_utc(test.created_at).strftime(fmt)
        groups.setdefault(key, []).append(test)

    points = []
    for period, items in groups.items():
        wpms = [item.wpm for item in items]
        accuracies = [item.accuracy for item in items]
        points.append(
            ProgressPoint(
                period=period,
                average_wpm=round_half_up(sum(wpms) / len(wpms), 2),
                average_accuracy=round_half_up(sum(accuracies) / len(accuracies), 2),
                test_count=len(items),
                best_wpm=max(wpms),
                date=as_utc(items[0].created_at),
            )
        )

    points.sort(key=lambda point: point.date)
    return points


def buckets(bounds: Sequence[float], counts: Sequence[int], last_label: str):
    ret = []
    for index, lower in enumerate(bounds):
        is_last = index == len(bounds) - 1
        ret.append(
            DistributionBucket(
                bucket=last_label if is_last else f"{lower:g}",
                lower=lower,
                upper=None if is_last else bounds[index + 1],
                count=counts[index],
            )
        )
    return ret


class StatisticsService:
    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self._sessionmaker = sessionmaker

    async def user_stats(
        self,
        user_id: int,
        timeframe: StatsTimeframe = StatsTimeframe.ALL,
        group_by: GroupBy = GroupBy.DAY,
    ) -> ServiceRet[UserStatisticsResponse]:
        since = timeframe_start(timeframe)
        async with self._sessionmaker() as session:
            user = await UserRepo(session).get_active(user_id)
            if user is None:
                return ServiceRet(
                    ok=False,
                    error=ErrorContext(
                        code=ErrorCode.USER_NOT_FOUND,
                        message="User not found or inactive",
                    ),
                )

            repo = TypingTestRepo(session)
            aggregate = await repo.user_aggregate(user_id, since=since)
            tests = await repo.user_tests(user_id, since=since)
            recent = await repo.user_tests(
                user_id, since=since, limit=RECENT_TESTS, newest_first=True
            )
            achievements = await AchievementRepo(session).list_by_user(user_id)

        consistency = consistency_score([test.wpm for test in recent])
        logger.debug(
            "user stats, user_id: %s, timeframe: %s, tests: %s",
            user_id,
            timeframe,
            aggregate.total_tests,
        )

        return ServiceRet(
            ok=True,
            data=UserStatisticsResponse(
                stats=_aggregate_stats(aggregate),
                progress_data=progress(tests, group_by),
                recent_tests=[
                    RecentTest(
                        id=test.id,
                        wpm=test.wpm,
                        accuracy=test.accuracy,
                        time_elapsed=test.time_elapsed,
                        text_type=test.text_type,
                        difficulty=test.difficulty,
                        duration=test.duration,
                        created_at=as_utc(test.created_at),
                    )
                    for test in recent
                ],
                consistency_score=int(round_half_up(consistency)),
                user_stats=UserStatsView.model_validate(user),
                achievements=[
                    AchievementView.model_validate(item) for item in achievements
                ],
            ),
        )

    async def global_stats(
        self, timeframe: StatsTimeframe = StatsTimeframe.ALL
    ) -> ServiceRet[GlobalStatsResponse]:
        since = timeframe_start(timeframe)
        async with self._sessionmaker() as session:
            repo = TypingTestRepo(session)
            aggregate = await repo.global_aggregate(since=since)
            wpm_counts = await repo.distribution(
                TypingTest.wpm, WPM_BOUNDS, since=since
            )
            accuracy_counts = await repo.distribution(
                TypingTest.accuracy, ACCURACY_BOUNDS, since=since
            )

        return ServiceRet(
            ok=True,
            data=GlobalStatsResponse(
                global_stats=GlobalStats(
                    total_tests=aggregate.total_tests,
                    average_wpm=round_half_up(aggregate.average_wpm, 2),
                    average_accuracy=round_half_up(aggregate.average_accuracy, 2),
                    highest_wpm=aggregate.best_wpm,
                    highest_accuracy=aggregate.best_accuracy,
                    total_users=aggregate.total_users,
                ),
                wpm_distribution=buckets(WPM_BOUNDS, wpm_counts, "200+"),
                accuracy_distribution=buckets(ACCURACY_BOUNDS, accuracy_counts, "100"),
            ),
        )

    async def compare(self, user_id: int) -> ServiceRet[CompareResponse]:
        """
        The caller's last 30 days against the public tests of the same window.
        - best_wpm, best_accuracy: the stored all time bests of the caller
        - wpm_percentile: share of all public tests at or below the caller's average
        """
        since = datetime.now(UTC) - COMPARE_WINDOW
        async with self._sessionmaker() as session:
            user = await UserRepo(session).get_active(user_id)
            if user is None:
                return ServiceRet(
                    ok=False,
                    error=ErrorContext(
                        code=ErrorCode.USER_NOT_FOUND,
                        message="User not found or inactive",
                    ),
                )

            repo = TypingTestRepo(session)
            mine = await repo.average_since(since, user_id=user_id)
            everyone = await repo.average_since(since)
            below = await repo.count_public(max_wpm=mine.average_wpm)
            total = await repo.count_public()

        wpm_percentile = 0
        if total > 0:
            wpm_percentile = int(round_half_up(below / total * 100))

        return ServiceRet(
            ok=True,
            data=CompareResponse(
                user_stats=CompareUserStats(
                    average_wpm=round_half_up(mine.average_wpm, 2),
                    average_accuracy=round_half_up(mine.average_accuracy, 2),
                    test_count=mine.total_tests,
                    best_wpm=user.best_wpm,
                    best_accuracy=user.best_accuracy,
                ),
                global_stats=CompareGlobalStats(
                    average_wpm=round_half_up(everyone.average_wpm, 2),
                    average_accuracy=round_half_up(everyone.average_accuracy, 2),
                ),
                comparison=Comparison(
                    wpm_difference=round_half_up(
                        mine.average_wpm - everyone.average_wpm, 2
                    ),
                    accuracy_difference=round_half_up(
                        mine.average_accuracy - everyone.average_accuracy, 2
                    ),
                    wpm_percentile=wpm_percentile,
                ),
            ),
        )
