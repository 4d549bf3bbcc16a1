"""Use cases for creating, reading, updating and deleting users."""

from __future__ import annotations

import logging
from typing import List

from .database import Database
from .errors import NotFoundError
from .events import EventPublisher
from .mapper import apply_update, to_entity, to_response
from .models import EventType, UserEvent
from .schemas import CreateUserRequest, UpdateUserRequest, UserResponse
from .validation import validate

logger = logging.getLogger("userservice.service")


class UserService:
    """Coordinates validation, persistence and event publication.

    Every use case runs its store access inside one unit of work. Events are
    published after that unit of work has committed, so a failed publish never
    undoes a write.
    """

    def __init__(self, database: Database, publisher: EventPublisher) -> None:
        self._database = database
        self._publisher = publisher

    def create_user(self, request: CreateUserRequest) -> UserResponse:
        validate(request.name, request.email, request.age)

        with self._database.unit_of_work() as users:
            saved = users.save(to_entity(request))

        logger.info("Created user %s", saved.id)
        self._publisher.publish(UserEvent(EventType.USER_CREATED, saved.email))
        return to_response(saved)

    def find_user_by_id(self, user_id: int) -> UserResponse:
        with self._database.unit_of_work() as users:
            user = users.find_by_id(user_id)
        if user is None:
            raise NotFoundError(user_id)
        return to_response(user)

    def find_all_users(self) -> List[UserResponse]:
        with self._database.unit_of_work() as users:
            found = users.find_all()
        return [to_response(user) for user in found]

    def update_user(self, user_id: int, request: UpdateUserRequest) -> UserResponse:
        with self._database.unit_of_work() as users:
            user = users.find_by_id(user_id)
            if user is None:
                raise NotFoundError(user_id)

            validate(request.name, request.email, request.age)

            updated = users.save(apply_update(user, request))

        logger.info("Updated user %s", user_id)
        return to_response(updated)

    def delete_user(self, user_id: int) -> None:
        with self._database.unit_of_work() as users:
            user = users.find_by_id(user_id)
            if user is None:
                raise NotFoundError(user_id)
            email = user.email
            users.delete_by_id(user_id)

        logger.info("Deleted user %s", user_id)
        self._publisher.publish(UserEvent(EventType.USER_DELETED, email))


__all__ = ["UserService"]
