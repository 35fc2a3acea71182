"""Meeting model."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from ..core.config import DEFAULT_MEETING_TTL_HOURS
from .base import Base

DEFAULT_MEETING_TTL = timedelta(hours=DEFAULT_MEETING_TTL_HOURS)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _default_expiry() -> datetime:
    return _utcnow() + DEFAULT_MEETING_TTL


class Meeting(Base):
    """Maps a shareable meeting code onto the SFU room it was created with.

    ``livekit_room`` is assigned once at creation and never rewritten, so every
    participant holding the same code is issued credentials for the same room.
    ``expires_at`` is informational for the service; only the purge script reads it.
    """

    __tablename__ = "meetings"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid4()))
    meeting_code: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    password: Mapped[str] = mapped_column(String, nullable=False)
    host_id: Mapped[str] = mapped_column(String, nullable=False)
    livekit_room: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_default_expiry, nullable=False)
