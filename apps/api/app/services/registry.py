"""Client for the persisted ``meetings`` collection.

Each call is a single short unit of work against the hosted store; there is no
caching or batching, so a write is visible to the very next read.
"""
from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.errors import MeetingConflictError, RegistryError
from ..models.meeting import Meeting
from ..repositories import meetings as meetings_repo


class MeetingRegistry:
    """CRUD pass-through over the meetings table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        if self._session_factory is None:
            raise RegistryError("Database is not configured")
        async with self._session_factory() as session:
            yield session

    async def insert(self, meeting: Meeting) -> Meeting:
        """Persist a new meeting; raises :class:`MeetingConflictError` on a duplicate code."""

        try:
            async with self._session() as session:
                async with session.begin():
                    await meetings_repo.insert(session, meeting)
        except IntegrityError as exc:
            raise MeetingConflictError(meeting.meeting_code) from exc
        except SQLAlchemyError as exc:
            raise RegistryError(str(exc)) from exc
        return meeting

    async def find_by_code(self, meeting_code: str, *, active_only: bool = False) -> Meeting | None:
        try:
            async with self._session() as session:
                return await meetings_repo.get_by_code(session, meeting_code, active_only=active_only)
        except SQLAlchemyError as exc:
            raise RegistryError(str(exc)) from exc

    async def delete_by_code(self, meeting_code: str) -> None:
        """Delete the row for ``meeting_code``; deleting an unknown code is a no-op."""

        try:
            async with self._session() as session:
                async with session.begin():
                    await meetings_repo.delete_by_code(session, meeting_code)
        except SQLAlchemyError as exc:
            raise RegistryError(str(exc)) from exc

    async def purge_expired(self, now: datetime) -> int:
        try:
            async with self._session() as session:
                async with session.begin():
                    return await meetings_repo.delete_expired(session, now)
        except SQLAlchemyError as exc:
            raise RegistryError(str(exc)) from exc
