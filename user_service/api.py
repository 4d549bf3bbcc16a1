"""FastAPI application exposing the user management endpoints."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .config import Settings, load_settings
from .database import Database
from .errors import NotFoundError, ValidationError
from .events import EventPublisher, build_transport
from .schemas import CreateUserRequest, UpdateUserRequest, UserResponse
from .service import UserService

logger = logging.getLogger("userservice.api")


class Link(BaseModel):
    href: str


class UserModel(UserResponse):
    links: Dict[str, Link] = Field(default_factory=dict, alias="_links")


class UserCollectionModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    embedded: Dict[str, List[UserModel]] = Field(alias="_embedded")
    links: Dict[str, Link] = Field(alias="_links")


def _user_links(request: Request, user_id: int) -> Dict[str, Link]:
    return {
        "self": Link(href=str(request.url_for("get_user_by_id", user_id=user_id))),
        "all-users": Link(href=str(request.url_for("get_all_users"))),
    }


def decorate_user(request: Request, user: UserResponse) -> UserModel:
    """Attach hypermedia links to a :class:`UserResponse`."""

    return UserModel(**user.model_dump(), links=_user_links(request, user.id))


def build_service(settings: Settings) -> UserService:
    database = Database(settings.database_path)
    database.initialize()
    publisher = EventPublisher(build_transport(settings), topic=settings.events_topic)
    return UserService(database, publisher)


def create_app(
    *,
    service: UserService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    if service is None:
        service = build_service(settings or load_settings())

    app = FastAPI(
        title="User Service",
        description="CRUD API for users with lifecycle notifications",
        version="1.0.0",
    )
    app.state.service = service

    @app.exception_handler(NotFoundError)
    async def _handle_not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def _handle_validation(_request: Request, exc: ValidationError) -> JSONResponse:
        logger.info("Rejected user payload: %s", exc.reason)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.reason})

    def get_service() -> UserService:
        return service

    @app.get("/health")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    router = APIRouter(prefix="/api/users", tags=["User Management"])

    @router.get(
        "/{user_id}",
        response_model=UserModel,
        name="get_user_by_id",
        summary="Get a user by ID",
        responses={404: {"description": "No user with that ID exists"}},
    )
    def get_user_by_id(
        user_id: int,
        request: Request,
        users: UserService = Depends(get_service),
    ) -> UserModel:
        return decorate_user(request, users.find_user_by_id(user_id))

    @router.get(
        "",
        response_model=UserCollectionModel,
        name="get_all_users",
        summary="List all users",
    )
    def get_all_users(
        request: Request,
        users: UserService = Depends(get_service),
    ) -> UserCollectionModel:
        models = [decorate_user(request, user) for user in users.find_all_users()]
        return UserCollectionModel(
            embedded={"users": models},
            links={"self": Link(href=str(request.url_for("get_all_users")))},
        )

    @router.post(
        "",
        response_model=UserModel,
        status_code=status.HTTP_201_CREATED,
        name="create_user",
        summary="Create a new user",
        responses={400: {"description": "Invalid name, email or age"}},
    )
    def create_user(
        payload: CreateUserRequest,
        request: Request,
        response: Response,
        users: UserService = Depends(get_service),
    ) -> UserModel:
        created = decorate_user(request, users.create_user(payload))
        response.headers["Location"] = created.links["self"].href
        return created

    @router.put(
        "/{user_id}",
        response_model=UserModel,
        name="update_user",
        summary="Replace a user's name, email and age",
        responses={
            400: {"description": "Invalid name, email or age"},
            404: {"description": "No user with that ID exists"},
        },
    )
    def update_user(
        user_id: int,
        payload: UpdateUserRequest,
        request: Request,
        users: UserService = Depends(get_service),
    ) -> UserModel:
        return decorate_user(request, users.update_user(user_id, payload))

    @router.delete(
        "/{user_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        name="delete_user",
        summary="Delete a user",
        responses={404: {"description": "No user with that ID exists"}},
    )
    def delete_user(user_id: int, users: UserService = Depends(get_service)) -> Response:
        users.delete_user(user_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    app.include_router(router)
    return app


__all__ = ["Link", "UserCollectionModel", "UserModel", "create_app", "decorate_user"]
