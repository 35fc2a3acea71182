"""Create, join and end workflows for meetings.

Each workflow is one function taking its collaborators explicitly. None of
them spans a transaction across collaborators: in :func:`create_meeting` the
row stays persisted if token signing fails afterwards, and in
:func:`end_meeting` the row is deleted even when the SFU room could not be.
"""
from __future__ import annotations

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Protocol

from ..core.config import DEFAULT_CODE_ATTEMPTS
from ..core.errors import AuthorizationError, InvalidRequestError, MeetingConflictError, NotFoundError, RegistryError
from ..models.meeting import DEFAULT_MEETING_TTL, Meeting
from ..schemas import meetings as schemas
from .codes import generate_identifiers
from .rtc import RtcToken

logger = logging.getLogger(__name__)


class Registry(Protocol):
    async def insert(self, meeting: Meeting) -> Meeting: ...

    async def find_by_code(self, meeting_code: str, *, active_only: bool = False) -> Meeting | None: ...

    async def delete_by_code(self, meeting_code: str) -> None: ...


class Issuer(Protocol):
    def issue_token(self, room: str, user_id: str, is_host: bool) -> RtcToken: ...


class Rooms(Protocol):
    async def delete_room(self, room: str) -> None: ...


async def create_meeting(
    payload: schemas.CreateMeetingRequest,
    *,
    registry: Registry,
    issuer: Issuer,
    code_attempts: int = DEFAULT_CODE_ATTEMPTS,
    meeting_ttl: timedelta = DEFAULT_MEETING_TTL,
) -> schemas.CreateMeetingResponse:
    """Register a new meeting hosted by ``payload.user_id`` and return a host token."""

    if not payload.user_id:
        raise InvalidRequestError("userId required")

    meeting: Meeting | None = None
    for attempt in range(1, code_attempts + 1):
        identifiers = generate_identifiers()
        created_at = datetime.now(timezone.utc)
        candidate = Meeting(
            meeting_code=identifiers.meeting_id,
            password=identifiers.password,
            livekit_room=identifiers.room_name,
            host_id=payload.user_id,
            is_active=True,
            created_at=created_at,
            expires_at=created_at + meeting_ttl,
        )
        try:
            meeting = await registry.insert(candidate)
            break
        except MeetingConflictError:
            logger.warning("Meeting code collision on attempt %d/%d", attempt, code_attempts)

    if meeting is None:
        raise RegistryError(f"Could not allocate a unique meeting code after {code_attempts} attempts")

    logger.info("Created meeting %s for host %s", meeting.meeting_code, meeting.host_id)

    token = issuer.issue_token(meeting.livekit_room, payload.user_id, True)
    return schemas.CreateMeetingResponse(
        meeting_id=meeting.meeting_code,
        password=meeting.password,
        room_name=meeting.livekit_room,
        token=token.token,
    )


async def join_meeting(
    payload: schemas.JoinMeetingRequest,
    *,
    registry: Registry,
    issuer: Issuer,
) -> schemas.JoinMeetingResponse:
    """Issue a token for the room bound to the meeting code.

    The host is let in without the password and receives the room-admin grant.
    """

    if not payload.meeting_id or not payload.user_id:
        raise InvalidRequestError("Missing fields")

    meeting = await registry.find_by_code(payload.meeting_id, active_only=True)
    if meeting is None:
        raise NotFoundError("Meeting not found or inactive")

    is_host = meeting.host_id == payload.user_id
    if not is_host and not _password_matches(payload.password, meeting.password):
        raise AuthorizationError("Invalid password")

    token = issuer.issue_token(meeting.livekit_room, payload.user_id, is_host)
    return schemas.JoinMeetingResponse(token=token.token, is_host=is_host)


async def end_meeting(
    payload: schemas.EndMeetingRequest,
    *,
    registry: Registry,
    rooms: Rooms,
) -> schemas.EndMeetingResponse:
    """Tear down the SFU room (best effort) and delete the meeting record."""

    meeting = None
    if payload.meeting_id and payload.user_id:
        meeting = await registry.find_by_code(payload.meeting_id)

    if meeting is None or meeting.host_id != payload.user_id:
        raise AuthorizationError("Not authorized")

    try:
        await rooms.delete_room(meeting.livekit_room)
    except Exception as exc:  # noqa: BLE001 - room may already be gone; the record is removed regardless
        logger.warning("Room %s already closed or not found: %s", meeting.livekit_room, exc)

    await registry.delete_by_code(meeting.meeting_code)
    logger.info("Ended meeting %s", meeting.meeting_code)
    return schemas.EndMeetingResponse(success=True)


def _password_matches(supplied: str | None, stored: str) -> bool:
    if supplied is None:
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))
