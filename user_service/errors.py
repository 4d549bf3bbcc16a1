"""Error kinds surfaced by the user service core."""
from __future__ import annotations


class UserServiceError(Exception):
    """Base class for errors raised by the user service."""


class ValidationError(UserServiceError, ValueError):
    """Raised when user input fails validation."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class NotFoundError(UserServiceError, LookupError):
    """Raised when a user with the requested identifier does not exist."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User with ID {user_id} not found.")
        self.user_id = user_id


class TransportError(UserServiceError):
    """Raised by event transports when a message could not be sent."""


__all__ = ["NotFoundError", "TransportError", "UserServiceError", "ValidationError"]
