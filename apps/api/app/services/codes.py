"""Meeting code, password and room name generation."""
from __future__ import annotations

import secrets
import string
from dataclasses import dataclass

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_GROUPS = 3
CODE_GROUP_LENGTH = 3
PASSWORD_LENGTH = 6
ROOM_SUFFIX_BYTES = 4


@dataclass(slots=True, frozen=True)
class MeetingIdentifiers:
    meeting_id: str
    password: str
    room_name: str


def generate_meeting_code() -> str:
    """Return a code like ``K3F-9QX-A2M``."""

    groups = (
        "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_GROUP_LENGTH))
        for _ in range(CODE_GROUPS)
    )
    return "-".join(groups)


def generate_password() -> str:
    """Return a 6-digit numeric password; leading zeros are kept."""

    return "".join(secrets.choice(string.digits) for _ in range(PASSWORD_LENGTH))


def build_room_name(meeting_id: str) -> str:
    """Combine the public code with random bytes so the room cannot be guessed from the code."""

    return f"room_{meeting_id}_{secrets.token_hex(ROOM_SUFFIX_BYTES)}"


def generate_identifiers() -> MeetingIdentifiers:
    meeting_id = generate_meeting_code()
    return MeetingIdentifiers(
        meeting_id=meeting_id,
        password=generate_password(),
        room_name=build_room_name(meeting_id),
    )
