"""
Pydantic schemas for memberships.

A membership joins a user (by ``User_ID``) and a chapter (by
``Chapter_Id``) and carries the member's rank and warrior name.
Warrior names are unique across the whole system, compared without
regard to case.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .common import RECORD_CONFIG, REQUEST_CONFIG, utcnow

DEFAULT_RANK = "member"


class MembershipCreate(BaseModel):
    """Schema for joining a chapter.

    Required fields are validated by ``MembershipService`` so that a
    missing value produces the documented message.
    """

    user_id: Optional[str] = Field(None, alias="User_ID")
    chapter_id: Optional[str] = Field(None, alias="Chapter_Id")
    chapter_rank: Optional[str] = Field(None, alias="Chapter_Rank", examples=["member"])
    warrior_name: Optional[str] = Field(None, alias="Warrior_Name", examples=["TestWarrior"])

    model_config = REQUEST_CONFIG


class Membership(BaseModel):
    """Stored membership record."""

    id: int = Field(0, alias="ID")
    user_id: str = Field("", alias="User_ID")
    chapter_id: str = Field("", alias="Chapter_Id")
    chapter_rank: str = Field(DEFAULT_RANK, alias="Chapter_Rank")
    chapter_status: str = Field("pending", alias="Chapter_Status")
    warrior_name: str = Field("", alias="Warrior_Name")
    created_at: datetime = Field(default_factory=utcnow, alias="CreatedAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="UpdatedAt")

    model_config = RECORD_CONFIG


class UserMembership(Membership):
    """Membership row joined with its chapter's name and description."""

    chapter_name: str = Field(..., alias="Chapter_Name")
    chapter_description: str = Field(..., alias="Chapter_Description")


class WarriorNameCheck(BaseModel):
    is_available: bool = Field(..., alias="isAvailable")
    warrior_name: str = Field(..., alias="warriorName")

    model_config = RECORD_CONFIG
