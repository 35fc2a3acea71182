"""Meeting create/join/end endpoints."""
from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..core.config import Settings
from ..core.errors import ServiceError
from ..schemas import meetings as schemas
from ..services import meetings as meetings_service
from ..services.registry import MeetingRegistry
from ..services.rtc import CredentialIssuer, RoomService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_registry(request: Request) -> MeetingRegistry:
    return request.app.state.registry


def get_issuer(request: Request) -> CredentialIssuer:
    return request.app.state.issuer


def get_rooms(request: Request) -> RoomService:
    return request.app.state.rooms


def _error_response(exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@router.post("/create-meeting", response_model=schemas.CreateMeetingResponse)
async def create_meeting(
    payload: schemas.CreateMeetingRequest,
    registry: MeetingRegistry = Depends(get_registry),
    issuer: CredentialIssuer = Depends(get_issuer),
    settings: Settings = Depends(get_settings_dep),
) -> schemas.CreateMeetingResponse | JSONResponse:
    """Generate a meeting code, persist it and return a host token."""

    try:
        return await meetings_service.create_meeting(
            payload,
            registry=registry,
            issuer=issuer,
            code_attempts=settings.meeting_code_attempts,
            meeting_ttl=timedelta(hours=settings.meeting_ttl_hours),
        )
    except ServiceError as exc:
        if exc.status_code >= 500:
            logger.exception("Create meeting failed: %s", exc.message)
        return _error_response(exc)


@router.post("/join-meeting", response_model=schemas.JoinMeetingResponse)
async def join_meeting(
    payload: schemas.JoinMeetingRequest,
    registry: MeetingRegistry = Depends(get_registry),
    issuer: CredentialIssuer = Depends(get_issuer),
) -> schemas.JoinMeetingResponse | JSONResponse:
    """Return a token for the room behind a meeting code."""

    try:
        return await meetings_service.join_meeting(payload, registry=registry, issuer=issuer)
    except ServiceError as exc:
        if exc.status_code >= 500:
            logger.exception("Join meeting failed: %s", exc.message)
        return _error_response(exc)


@router.post("/end-meeting", response_model=schemas.EndMeetingResponse)
async def end_meeting(
    request: Request,
    registry: MeetingRegistry = Depends(get_registry),
    rooms: RoomService = Depends(get_rooms),
) -> schemas.EndMeetingResponse | JSONResponse:
    """Host-only: close the SFU room and delete the meeting.

    The body is read leniently: an absent, non-JSON or ill-typed body carries no
    identity and is refused with 403 like any other non-host caller.
    """

    payload = await _read_end_request(request)
    try:
        return await meetings_service.end_meeting(payload, registry=registry, rooms=rooms)
    except ServiceError as exc:
        if exc.status_code >= 500:
            logger.exception("End meeting failed: %s", exc.message)
        return _error_response(exc)


async def _read_end_request(request: Request) -> schemas.EndMeetingRequest:
    try:
        data = await request.json()
    except ValueError:
        return schemas.EndMeetingRequest()
    if not isinstance(data, dict):
        return schemas.EndMeetingRequest()
    try:
        return schemas.EndMeetingRequest.model_validate(data)
    except ValidationError:
        return schemas.EndMeetingRequest()
