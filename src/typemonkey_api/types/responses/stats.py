from datetime import datetime

from pydantic import BaseModel, Field

from .base import SuccessResponse
from .user import AchievementView, UserStatsView


class AggregateStats(BaseModel):
    total_tests: int = 0
    average_wpm: float = 0
    average_accuracy: float = 0
    best_wpm: float = 0
    best_accuracy: float = 0
    total_time_typed: float = 0
    total_characters: int = 0
    total_correct_characters: int = 0


class ProgressPoint(BaseModel):
    """
    - period: group key, e.g. '2026-10-19' for 'day', '2026-W42' for 'week'
    - date: first test of the period
    """

    period: str
    average_wpm: float
    average_accuracy: float
    test_count: int
    best_wpm: float
    date: datetime


class RecentTest(BaseModel):
    id: int
    wpm: float
    accuracy: float
    time_elapsed: float
    text_type: str
    difficulty: str
    duration: int
    created_at: datetime


class UserStatisticsResponse(SuccessResponse):
    stats: AggregateStats
    progress_data: list[ProgressPoint] = Field(default_factory=list)
    recent_tests: list[RecentTest] = Field(default_factory=list)
    consistency_score: int = 0
    user_stats: UserStatsView
    achievements: list[AchievementView] = Field(default_factory=list)


class GlobalStats(BaseModel):
    total_tests: int = 0
    average_wpm: float = 0
    average_accuracy: float = 0
    highest_wpm: float = 0
    highest_accuracy: float = 0
    total_users: int = 0


class DistributionBucket(BaseModel):
    """
    - bucket: lower bound as label, the last bucket is open ended
    - upper: exclusive, None for the last bucket
    """

    bucket: str
    lower: float
    upper: float | None = None
    count: int = 0


class GlobalStatsResponse(SuccessResponse):
    global_stats: GlobalStats
    wpm_distribution: list[DistributionBucket] = Field(default_factory=list)
    accuracy_distribution: list[DistributionBucket] = Field(default_factory=list)


class CompareUserStats(BaseModel):
    average_wpm: float = 0
    average_accuracy: float = 0
    test_count: int = 0
    best_wpm: float = 0
    best_accuracy: float = 0


class CompareGlobalStats(BaseModel):
    average_wpm: float = 0
    average_accuracy: float = 0


class Comparison(BaseModel):
    wpm_difference: float
    accuracy_difference: float
    wpm_percentile: int


class CompareResponse(SuccessResponse):
    user_stats: CompareUserStats
    global_stats: CompareGlobalStats
    comparison: Comparison
