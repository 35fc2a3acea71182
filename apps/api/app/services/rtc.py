"""LiveKit access token issuance and room teardown.

Token signing happens locally with the API key pair; only room deletion talks
to the LiveKit server.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from livekit import api

from ..core.config import DEFAULT_TOKEN_TTL_SECONDS
from ..core.errors import CredentialError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RtcToken:
    token: str
    expires_in: int


class CredentialIssuer:
    """Mint room-scoped join tokens."""

    def __init__(self, api_key: str, api_secret: str, ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS) -> None:
        self._api_key = api_key
        self._api_secret = api_secret
        self._ttl_seconds = ttl_seconds

    def issue_token(self, room: str, user_id: str, is_host: bool) -> RtcToken:
        """Produce a token for ``user_id`` in ``room``.

        Every participant may join, publish, subscribe and publish data; only the
        host receives the room-admin grant. The user id doubles as display name.
        """

        grants = api.VideoGrants(
            room_join=True,
            room=room,
            can_publish=True,
            can_subscribe=True,
            can_publish_data=True,
            room_admin=is_host,
        )
        try:
            jwt = (
                api.AccessToken(self._api_key, self._api_secret)
                .with_identity(user_id)
                .with_name(user_id)
                .with_ttl(timedelta(seconds=self._ttl_seconds))
                .with_grants(grants)
                .to_jwt()
            )
        except Exception as exc:  # noqa: BLE001 - any signer failure is a configuration problem
            raise CredentialError(f"Could not sign access token: {exc}") from exc
        return RtcToken(token=jwt, expires_in=self._ttl_seconds)


class RoomService:
    """Thin wrapper around the LiveKit room API."""

    def __init__(self, url: str, api_key: str, api_secret: str) -> None:
        self._url = url
        self._api_key = api_key
        self._api_secret = api_secret
        self._client: api.LiveKitAPI | None = None

    def _get_client(self) -> api.LiveKitAPI:
        # LiveKitAPI opens an aiohttp session, so it must be built inside the running loop.
        if self._client is None:
            self._client = api.LiveKitAPI(self._url, self._api_key, self._api_secret)
        return self._client

    async def delete_room(self, room: str) -> None:
        await self._get_client().room.delete_room(api.DeleteRoomRequest(room=room))

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
