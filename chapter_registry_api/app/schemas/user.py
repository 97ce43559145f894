"""
Pydantic models for user data.

``UserCreate`` is the registration payload.  Its fields are optional
at the schema level because the service reports missing values with
its own message rather than a generic validation error.  ``User`` is
the stored record; omitted fields take their defaults, including a
freshly generated ``User_ID``.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .common import RECORD_CONFIG, REQUEST_CONFIG, utcnow


class UserCreate(BaseModel):
    """Schema for registering a user."""

    google_user_id: Optional[str] = Field(None, alias="GoogleUserId", examples=["108234567890123456789"])
    email: Optional[str] = Field(None, alias="Email", examples=["warrior@example.com"])
    role: Optional[str] = Field(None, alias="Role", examples=["user"])

    model_config = REQUEST_CONFIG


class User(BaseModel):
    """Stored user record."""

    id: int = Field(0, alias="ID")
    user_id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="User_ID")
    google_user_id: str = Field("", alias="GoogleUserId")
    email: str = Field("", alias="Email")
    role: str = Field("user", alias="Role")
    status: str = Field("pending", alias="Status")
    created_at: datetime = Field(default_factory=utcnow, alias="CreatedAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="UpdatedAt")

    model_config = RECORD_CONFIG


class UserIdLookup(BaseModel):
    """Result of resolving a Google user id to the public ``User_ID``."""

    user_id: str = Field(..., alias="User_ID")

    model_config = RECORD_CONFIG
