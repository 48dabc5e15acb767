from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Float, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..types.enums import Theme
from .base import Base
from .custom import BigSerial


class User(Base):
    """
    Registered user with profile, preferences and aggregate typing stats.
    The password column holds a bcrypt hash.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigSerial(), primary_key=True)
    username: Mapped[str] = mapped_column(Text(), unique=True)
    email: Mapped[str] = mapped_column(Text(), unique=True)
    password: Mapped[str] = mapped_column(Text())

    # profile
    first_name: Mapped[str | None] = mapped_column(Text())
    last_name: Mapped[str | None] = mapped_column(Text())
    avatar: Mapped[str | None] = mapped_column(Text())
    bio: Mapped[str | None] = mapped_column(Text())
    country: Mapped[str | None] = mapped_column(Text())
    date_of_birth: Mapped[date | None] = mapped_column(Date())

    # preferences
    theme: Mapped[str] = mapped_column(Text(), default=Theme.TYPE_MONKEY)
    sound_enabled: Mapped[bool] = mapped_column(Boolean(), default=True)
    show_wpm: Mapped[bool] = mapped_column(Boolean(), default=True)
    show_accuracy: Mapped[bool] = mapped_column(Boolean(), default=True)

    # stats
    total_tests: Mapped[int] = mapped_column(server_default=text("0"), default=0)
    total_time_typed: Mapped[float] = mapped_column(
        Float(), server_default=text("0"), default=0
    )
    best_wpm: Mapped[float] = mapped_column(Float(), server_default=text("0"), default=0)
    best_accuracy: Mapped[float] = mapped_column(
        Float(), server_default=text("0"), default=0
    )
    average_wpm: Mapped[float] = mapped_column(
        Float(), server_default=text("0"), default=0
    )
    average_accuracy: Mapped[float] = mapped_column(
        Float(), server_default=text("0"), default=0
    )
    total_characters_typed: Mapped[int] = mapped_column(
        server_default=text("0"), default=0
    )
    total_correct_characters: Mapped[int] = mapped_column(
        server_default=text("0"), default=0
    )

    is_active: Mapped[bool] = mapped_column(Boolean(), default=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.current_timestamp(),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.current_timestamp()
    )

    achievements = relationship(
        "Achievement",
        back_populates="user",
        passive_deletes=True,
        uselist=True,
    )
    typing_tests = relationship(
        "TypingTest",
        back_populates="user",
        passive_deletes=True,
        uselist=True,
    )

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name or self.last_name or self.username
