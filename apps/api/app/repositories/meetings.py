"""Meeting repository helpers."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.meeting import Meeting


async def insert(session: AsyncSession, meeting: Meeting) -> Meeting:
    """Add a meeting and flush so unique constraints fire inside the caller's transaction."""

    session.add(meeting)
    await session.flush()
    return meeting


async def get_by_code(session: AsyncSession, meeting_code: str, *, active_only: bool = False) -> Meeting | None:
    """Return the meeting registered under ``meeting_code``."""

    stmt: Select[tuple[Meeting]] = select(Meeting).where(Meeting.meeting_code == meeting_code)
    if active_only:
        stmt = stmt.where(Meeting.is_active.is_(True))
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def delete_by_code(session: AsyncSession, meeting_code: str) -> int:
    """Delete the meeting row; returns the number of rows removed."""

    result = await session.execute(delete(Meeting).where(Meeting.meeting_code == meeting_code))
    return result.rowcount or 0


async def delete_expired(session: AsyncSession, now: datetime) -> int:
    """Delete every meeting whose ``expires_at`` is in the past."""

    result = await session.execute(delete(Meeting).where(Meeting.expires_at <= now))
    return result.rowcount or 0
