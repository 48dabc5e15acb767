from pydantic import BaseModel, Field

from .base import SuccessResponse
from .typing_test import TextView


class SeedResponse(SuccessResponse):
    inserted_count: int
    texts: list[TextView] = Field(default_factory=list)


class ResetResponse(SuccessResponse):
    warning: str = "All data has been deleted"


class DatabaseStats(BaseModel):
    """
    - recent_*: created in the last 7 days
    """

    total_users: int
    total_tests: int
    total_texts: int
    recent_users: int
    recent_tests: int
    recent_texts: int


class AdminStatsResponse(SuccessResponse):
    database: DatabaseStats
