"""Error taxonomy shared by the meeting workflows and their collaborators."""
from __future__ import annotations


class ServiceError(Exception):
    """Base error carrying the HTTP status the API layer should answer with."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(ServiceError):
    """A required request field is missing or empty."""

    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class AuthorizationError(ServiceError):
    """Wrong password, or a non-host attempting a host-only action."""

    status_code = 403


class DependencyError(ServiceError):
    """The registry, signer or room service failed."""

    status_code = 500


class RegistryError(DependencyError):
    pass


class MeetingConflictError(RegistryError):
    """A meeting with the same code (or room) already exists."""

    def __init__(self, meeting_code: str) -> None:
        super().__init__(f"Meeting code {meeting_code} already exists")
        self.meeting_code = meeting_code


class CredentialError(DependencyError):
    """The access token could not be signed."""
