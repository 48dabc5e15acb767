from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .custom import BigSerial


class Achievement(Base):
    """
    Achievement unlocked by a user, a name is unlocked at most once per user
    """

    __tablename__ = "achievements"
    __table_args__ = (UniqueConstraint("user_id", "name"),)

    id: Mapped[int] = mapped_column(BigSerial(), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger(),
        ForeignKey("users.id", ondelete="CASCADE"),
    )
    name: Mapped[str] = mapped_column(Text())
    description: Mapped[str] = mapped_column(Text())
    icon: Mapped[str | None] = mapped_column(Text())
    unlocked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    user = relationship(
        "User",
        foreign_keys=user_id,
        back_populates="achievements",
    )
