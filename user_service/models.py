"""Domain models for the user service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional


@dataclass
class User:
    """Represents a user row stored in the service database.

    ``id`` and ``created_at`` stay ``None`` until the row has been persisted.
    """

    name: str
    email: str
    age: int
    id: Optional[int] = None
    created_at: Optional[datetime] = None


class EventType(str, Enum):
    USER_CREATED = "USER_CREATED"
    USER_DELETED = "USER_DELETED"


@dataclass(frozen=True)
class UserEvent:
    """Notification emitted when a user is created or deleted."""

    event_type: EventType
    email: str

    def to_payload(self) -> Dict[str, str]:
        return {"eventType": self.event_type.value, "email": self.email}


__all__ = ["EventType", "User", "UserEvent"]
