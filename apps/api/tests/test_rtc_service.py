"""Tests for token issuance and room teardown wrappers."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import jwt
import pytest

from app.core.errors import CredentialError
from app.services import rtc


def test_participant_token_grants(issuer, verify_token) -> None:
    token = issuer.issue_token("room_ABC-DEF-GHI_0011aabb", "u2", False)
    claims = verify_token(token.token)

    assert token.expires_in == 7200
    assert claims.identity == "u2"
    assert claims.name == "u2"
    assert claims.video.room == "room_ABC-DEF-GHI_0011aabb"
    assert claims.video.room_join is True
    assert claims.video.can_publish is True
    assert claims.video.can_subscribe is True
    assert claims.video.can_publish_data is True
    assert not claims.video.room_admin


def test_host_token_has_room_admin(issuer, verify_token) -> None:
    claims = verify_token(issuer.issue_token("room_x", "u1", True).token)

    assert claims.video.room_admin is True


def test_token_validity_window_is_two_hours(issuer) -> None:
    payload = jwt.decode(issuer.issue_token("room_x", "u1", False).token, options={"verify_signature": False})

    assert abs((payload["exp"] - payload["nbf"]) - 7200) <= 1


def test_missing_keys_raise_credential_error(monkeypatch) -> None:
    monkeypatch.delenv("LIVEKIT_API_KEY", raising=False)
    monkeypatch.delenv("LIVEKIT_API_SECRET", raising=False)
    issuer = rtc.CredentialIssuer("", "")

    with pytest.raises(CredentialError) as exc:
        issuer.issue_token("room_x", "u1", True)

    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_room_service_deletes_by_name(monkeypatch) -> None:
    fake_client = MagicMock()
    fake_client.room.delete_room = AsyncMock()
    fake_client.aclose = AsyncMock()
    monkeypatch.setattr(rtc.api, "LiveKitAPI", MagicMock(return_value=fake_client))

    service = rtc.RoomService("wss://livekit.test", "key", "secret")
    await service.delete_room("room_x")
    await service.aclose()

    request = fake_client.room.delete_room.await_args.args[0]
    assert request.room == "room_x"
    fake_client.aclose.assert_awaited_once()
