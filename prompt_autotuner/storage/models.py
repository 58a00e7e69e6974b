"""SQLAlchemy ORM models for session storage."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class SessionLog(Base):
    """One recorded optimize/evaluate/auto-optimize call."""

    __tablename__ = "session_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    action: Mapped[str]  # optimize, evaluate, auto_optimize
    inputs: Mapped[str] = mapped_column(Text)  # JSON object as string
    outputs: Mapped[str] = mapped_column(Text)  # JSON object as string
    status: Mapped[str | None] = mapped_column(default=None)
    created_at: Mapped[datetime] = mapped_column(default=datetime.now)
