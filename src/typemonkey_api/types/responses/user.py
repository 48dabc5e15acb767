from datetime import date, datetime
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

from ...orm.user import User
from .base import SuccessResponse


class AchievementView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str
    icon: str | None = None
    unlocked_at: datetime


class ProfileView(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    full_name: str
    avatar: str | None = None
    bio: str | None = None
    country: str | None = None
    date_of_birth: date | None = None


class PreferenceView(BaseModel):
    theme: str
    sound_enabled: bool
    show_wpm: bool
    show_accuracy: bool


class UserStatsView(BaseModel):
    """
    - total_time_typed: (seconds)
    """

    model_config = ConfigDict(from_attributes=True)

    total_tests: int = 0
    total_time_typed: float = 0
    best_wpm: float = 0
    best_accuracy: float = 0
    average_wpm: float = 0
    average_accuracy: float = 0
    total_characters_typed: int = 0
    total_correct_characters: int = 0


class UserInfo(BaseModel):
    """
    public view of a user, the password hash is never part of it
    """

    id: int
    username: str
    email: str
    profile: ProfileView
    preferences: PreferenceView
    stats: UserStatsView
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> Self:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            profile=ProfileView(
                first_name=user.first_name,
                last_name=user.last_name,
                full_name=user.full_name,
                avatar=user.avatar,
                bio=user.bio,
                country=user.country,
                date_of_birth=user.date_of_birth,
            ),
            preferences=PreferenceView(
                theme=user.theme,
                sound_enabled=user.sound_enabled,
                show_wpm=user.show_wpm,
                show_accuracy=user.show_accuracy,
            ),
            stats=UserStatsView.model_validate(user),
            is_active=user.is_active,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(SuccessResponse):
    token: str
    user: UserInfo


class UserResponse(SuccessResponse):
    user: UserInfo


class VerifyTokenResponse(SuccessResponse):
    valid: bool = True
    user: UserInfo


class UserStatsResponse(SuccessResponse):
    stats: UserStatsView
    achievements: list[AchievementView] = Field(default_factory=list)
