"""Per-user wellness chat usage for daily quota enforcement."""

from datetime import date, datetime
from uuid import uuid4

from sqlalchemy import Date, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base import Base, created_at_column, updated_at_column


class UserChatUsage(Base):
    """
    One row per user counting AI chat escalations.

    daily_count resets when a request arrives on a later UTC date than
    last_reset_date. monthly_count is only ever incremented here.
    FAQ cache hits never touch this row.
    """

    __tablename__ = "user_chat_usage"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )

    daily_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    monthly_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_reset_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_message_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()
