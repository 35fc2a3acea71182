"""Data contracts for the meeting endpoints.

Request fields are optional at the schema level so a missing field is reported
as a 400 by the workflow instead of a generic validation failure.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CreateMeetingRequest(_CamelModel):
    user_id: str | None = Field(default=None, alias="userId", description="Identity of the host")


class CreateMeetingResponse(_CamelModel):
    meeting_id: str = Field(..., alias="meetingId", description="Shareable meeting code")
    password: str
    room_name: str = Field(..., alias="roomName", description="Internal SFU room name")
    token: str = Field(..., description="Host access token")


class JoinMeetingRequest(_CamelModel):
    meeting_id: str | None = Field(default=None, alias="meetingId")
    password: str | None = None
    user_id: str | None = Field(default=None, alias="userId")


class JoinMeetingResponse(_CamelModel):
    token: str
    is_host: bool = Field(..., alias="isHost")


class EndMeetingRequest(_CamelModel):
    meeting_id: str | None = Field(default=None, alias="meetingId")
    user_id: str | None = Field(default=None, alias="userId")


class EndMeetingResponse(BaseModel):
    success: bool
