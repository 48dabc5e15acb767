from datetime import datetime

from pydantic import BaseModel, Field

from .base import SuccessResponse


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    username: str
    full_name: str
    avatar: str | None = None
    country: str | None = None
    best_wpm: float
    best_accuracy: float
    average_wpm: float
    average_accuracy: float
    total_tests: int
    recent_test_date: datetime | None = None
    consistency_score: float = 0


class LeaderboardMetadata(BaseModel):
    """
    - total_participants: distinct users in the timeframe, before the limit
    """

    timeframe: str
    metric: str
    category: str
    total_participants: int
    entries_shown: int
    last_updated: datetime


class LeaderboardResponse(SuccessResponse):
    leaderboard: list[LeaderboardEntry] = Field(default_factory=list)
    metadata: LeaderboardMetadata


class RankUserStats(BaseModel):
    user_id: int
    best_wpm: float
    best_accuracy: float
    average_wpm: float
    total_tests: int


class Ranking(BaseModel):
    rank: int
    total_participants: int
    percentile: int
    metric: str
    timeframe: str


class RankResponse(SuccessResponse):
    user_stats: RankUserStats
    ranking: Ranking


class HallOfFameRecord(BaseModel):
    """
    - value: the record itself, wpm / accuracy / seconds depending on type
    """

    type: str
    value: float
    wpm: float | None = None
    accuracy: float | None = None
    username: str
    date: datetime
    test_duration: float | None = None


class HallOfFameResponse(SuccessResponse):
    records: list[HallOfFameRecord] = Field(default_factory=list)
