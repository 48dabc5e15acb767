from enum import StrEnum


class ErrorCode(StrEnum):
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_TOKEN = "INVALID_TOKEN"
    USER_EXISTS = "USER_EXISTS"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    TEST_NOT_FOUND = "TEST_NOT_FOUND"
    ACCESS_DENIED = "ACCESS_DENIED"
    INVALID_RESULTS = "INVALID_RESULTS"
    NO_DATA = "NO_DATA"
    ALREADY_SEEDED = "ALREADY_SEEDED"
    CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"
    ADMIN_DISABLED = "ADMIN_DISABLED"


class TextType(StrEnum):
    RANDOM = "random"
    QUOTE = "quote"
    CUSTOM = "custom"


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class TextCategory(StrEnum):
    QUOTES = "quotes"
    LITERATURE = "literature"
    PROGRAMMING = "programming"
    COMMON_WORDS = "common-words"
    CUSTOM = "custom"


class PerformanceRating(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    NEEDS_IMPROVEMENT = "needs-improvement"


class LeaderboardMetric(StrEnum):
    WPM = "wpm"
    ACCURACY = "accuracy"
    CONSISTENCY = "consistency"
    TESTS = "tests"


class RankMetric(StrEnum):
    WPM = "wpm"
    ACCURACY = "accuracy"


class LeaderboardTimeframe(StrEnum):
    ALL = "all"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class StatsTimeframe(StrEnum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class GroupBy(StrEnum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class HistorySortBy(StrEnum):
    CREATED_AT = "created_at"
    WPM = "wpm"
    ACCURACY = "accuracy"
    TIME_ELAPSED = "time_elapsed"


class Theme(StrEnum):
    TYPE_MONKEY = "Type Monkey"
    OCEAN_BLUE = "Ocean Blue"
    GROOVE_FOREST = "Groove Forest"
    OLIVE_GREEN = "Olive Green"
    SUNSET_ORANGE = "Sunset Orange"
    YOUNG_CLAM = "Young Clam"
    MODERN = "Modern"
    DISCORD_DARK = "Discord Dark"
