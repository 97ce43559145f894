"""
Membership endpoints.

Joining a chapter, listing memberships per chapter or per user, and
checking whether a warrior name is still free.  All responses use the
``{"success": ..., ...}`` envelope.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from chapter_registry_api.app.api import responses
from chapter_registry_api.app.api.dependencies import get_membership_service
from chapter_registry_api.app.schemas.membership import MembershipCreate
from chapter_registry_api.app.services.membership_service import MembershipService

router = APIRouter()


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_membership(
    membership: Optional[MembershipCreate] = None,
    service: MembershipService = Depends(get_membership_service),
) -> JSONResponse:
    """Add a user to a chapter under a warrior name.

    ``Chapter_Rank`` is optional and defaults to ``member``.
    """
    try:
        created = await service.create_membership(membership or MembershipCreate())
    except Exception as exc:
        return responses.from_exception(exc, "Error creating membership")
    return responses.success(created, status.HTTP_201_CREATED)


@router.get("/check-warrior-name")
async def check_warrior_name(
    warrior_name: Optional[str] = Query(None, alias="warriorName"),
    service: MembershipService = Depends(get_membership_service),
) -> JSONResponse:
    """Check a warrior name against every chapter, ignoring case."""
    try:
        result = await service.check_warrior_name(warrior_name)
    except Exception as exc:
        return responses.from_exception(exc, "Error checking warrior name availability")
    return responses.success(result)


@router.get("/chapters/{chapter_id}")
async def list_chapter_memberships(
    chapter_id: str,
    service: MembershipService = Depends(get_membership_service),
) -> JSONResponse:
    try:
        memberships = await service.list_by_chapter(chapter_id)
    except Exception as exc:
        return responses.from_exception(exc, "Error fetching chapter memberships")
    return responses.success(memberships)


@router.get("/users/{user_id}")
async def list_user_memberships(
    user_id: str,
    service: MembershipService = Depends(get_membership_service),
) -> JSONResponse:
    try:
        memberships = await service.list_by_user(user_id)
    except Exception as exc:
        return responses.from_exception(exc, "Error fetching user memberships")
    return responses.success(memberships)
