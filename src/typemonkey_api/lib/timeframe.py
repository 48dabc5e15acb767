from datetime import UTC, datetime, timedelta

from ..types.enums import LeaderboardTimeframe, StatsTimeframe

_WINDOWS: dict[str, timedelta] = {
    LeaderboardTimeframe.WEEKLY: timedelta(days=7),
    LeaderboardTimeframe.MONTHLY: timedelta(days=30),
    LeaderboardTimeframe.YEARLY: timedelta(days=365),
    StatsTimeframe.WEEK: timedelta(days=7),
    StatsTimeframe.MONTH: timedelta(days=30),
    StatsTimeframe.YEAR: timedelta(days=365),
}


def timeframe_start(
    timeframe: LeaderboardTimeframe | StatsTimeframe,
    now: datetime | None = None,
) -> datetime | None:
    """
    Start of the window, None for 'all'.
    'daily' / 'today' start at UTC midnight, the others look back a fixed
    number of days.
    """
    now = now or datetime.now(UTC)

    if timeframe in (LeaderboardTimeframe.DAILY, StatsTimeframe.TODAY):
        return now.replace(hour=0, minute=0, second=0, microsecond=0)

    window = _WINDOWS.get(timeframe)
    if window is None:
        return None
    return now - window


def as_utc(value: datetime) -> datetime:
    """
    sqlite returns naive datetimes, values are always stored in UTC
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
