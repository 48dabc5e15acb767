from datetime import datetime

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .custom import BigSerial


class TextContent(Base):
    """
    Practice passage, word_count / character_count / average_word_length are
    derived from content when the passage is created
    """

    __tablename__ = "text_contents"

    id: Mapped[int] = mapped_column(BigSerial(), primary_key=True)
    title: Mapped[str] = mapped_column(Text())
    content: Mapped[str] = mapped_column(Text())
    category: Mapped[str] = mapped_column(Text(), index=True)
    difficulty: Mapped[str] = mapped_column(Text(), index=True)
    language: Mapped[str] = mapped_column(Text(), default="english")
    author: Mapped[str | None] = mapped_column(Text())
    source: Mapped[str | None] = mapped_column(Text())
    tags: Mapped[list] = mapped_column(JSON(), default=list)
    word_count: Mapped[int] = mapped_column()
    character_count: Mapped[int] = mapped_column()
    average_word_length: Mapped[float] = mapped_column(Float())
    commonality: Mapped[int] = mapped_column(server_default=text("5"), default=5)
    is_active: Mapped[bool] = mapped_column(Boolean(), default=True)
    created_by: Mapped[int | None] = mapped_column(
        BigInteger(), ForeignKey("users.id", ondelete="SET NULL")
    )
    usage_count: Mapped[int] = mapped_column(server_default=text("0"), default=0)
    rating_average: Mapped[float] = mapped_column(
        Float(), server_default=text("0"), default=0
    )
    rating_count: Mapped[int] = mapped_column(server_default=text("0"), default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.current_timestamp(),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.current_timestamp()
    )
