"""
User endpoints.

Registration, deletion by any of the three identifier forms and the
lookup of a public ``User_ID`` from a Google user id.  Responses use
the ``{"success": ..., ...}`` envelope, except the deletion 404 which
answers ``{"error": "User not found"}``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from chapter_registry_api.app.api import responses
from chapter_registry_api.app.api.dependencies import get_user_service
from chapter_registry_api.app.core.exceptions import NotFoundError
from chapter_registry_api.app.schemas.user import UserCreate
from chapter_registry_api.app.services.user_service import UserService

router = APIRouter()


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_user(
    user: Optional[UserCreate] = None,
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    """Register a user from ``GoogleUserId``, ``Email`` and ``Role``."""
    try:
        created = await service.create_user(user or UserCreate())
    except Exception as exc:
        return responses.from_exception(exc, "Error creating user")
    return responses.success(created, status.HTTP_201_CREATED)


@router.get("/get-user-id")
async def get_user_id(
    google_user_id: Optional[str] = Query(None, alias="GoogleUserId"),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    """Resolve a Google user id to the public ``User_ID``."""
    try:
        lookup = await service.get_user_id(google_user_id)
    except Exception as exc:
        return responses.from_exception(exc, "Error getting User_ID")
    return responses.success(lookup)


@router.delete("/{identifier}")
async def delete_user(
    identifier: str,
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    """Delete a user by e‑mail, ``User_ID`` or Google user id."""
    try:
        await service.delete_user(identifier)
    except NotFoundError as exc:
        return responses.error(status.HTTP_404_NOT_FOUND, exc.message)
    except Exception as exc:
        return responses.from_exception(exc, "Internal server error while deleting user")
    return responses.success(message="User deleted successfully")
