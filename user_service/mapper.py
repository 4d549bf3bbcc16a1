"""Conversions between wire DTOs and stored users."""
from __future__ import annotations

from .models import User
from .schemas import CreateUserRequest, UpdateUserRequest, UserResponse


def to_entity(request: CreateUserRequest) -> User:
    """Build an unsaved :class:`User`; the store assigns ``id`` and ``created_at``."""

    return User(name=request.name, email=request.email, age=request.age)


def to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        age=user.age,
        created_at=user.created_at,
    )


def apply_update(user: User, request: UpdateUserRequest) -> User:
    """Overwrite name, email and age in place. ``id`` and ``created_at`` are kept."""

    user.name = request.name
    user.email = request.email
    user.age = request.age
    return user


__all__ = ["apply_update", "to_entity", "to_response"]
