"""Wire representations exchanged with API clients."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .database import SQLITE_MAX_INTEGER


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateUserRequest(_WireModel):
    name: Optional[str]
    email: Optional[str]
    age: int = Field(le=SQLITE_MAX_INTEGER)


class UpdateUserRequest(_WireModel):
    """Full replacement of a user's name, email and age."""

    name: Optional[str]
    email: Optional[str]
    age: int = Field(le=SQLITE_MAX_INTEGER)


class UserResponse(_WireModel):
    id: int
    name: str
    email: str
    age: int
    created_at: datetime


__all__ = ["CreateUserRequest", "UpdateUserRequest", "UserResponse"]
