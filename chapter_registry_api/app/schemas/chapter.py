"""
Pydantic schemas for chapters.

A chapter is identified publicly by a short random ``Chapter_Id`` made
of six lowercase letters or digits.  ``ChapterCreate`` trims its text
fields and rejects blank values with a per-field message; those
errors are reported by the application's validation handler as
``{"errors": [...]}``.
"""

import secrets
import string
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from .common import RECORD_CONFIG, utcnow

CHAPTER_ID_ALPHABET = string.ascii_lowercase + string.digits
CHAPTER_ID_LENGTH = 6

_REQUIRED_MESSAGES = {
    "chapter_name": "Chapter name is required",
    "chapter_description": "Chapter description is required",
    "created_by": "Created by is required",
}


def generate_chapter_id() -> str:
    """Return a random 6-character lowercase alphanumeric identifier."""
    return "".join(secrets.choice(CHAPTER_ID_ALPHABET) for _ in range(CHAPTER_ID_LENGTH))


class ChapterCreate(BaseModel):
    """Schema for creating a chapter."""

    chapter_name: Optional[str] = Field(None, alias="Chapter_Name", examples=["Alpha"])
    chapter_description: Optional[str] = Field(None, alias="Chapter_Description")
    created_by: Optional[str] = Field(None, alias="Created_By")

    model_config = RECORD_CONFIG

    @model_validator(mode="before")
    @classmethod
    def fill_missing(cls, data: Any) -> Any:
        # Omitted fields are validated as explicit nulls so that their
        # errors are located by the wire name (``Chapter_Description``).
        if isinstance(data, dict):
            data = dict(data)
            for name, field in cls.model_fields.items():
                if name not in data and field.alias not in data:
                    data[field.alias] = None
        return data

    @field_validator("chapter_name", "chapter_description", "created_by")
    @classmethod
    def require_text(cls, value: Optional[str], info: ValidationInfo) -> str:
        if value is None or not value.strip():
            raise ValueError(_REQUIRED_MESSAGES[info.field_name])
        return value.strip()


class Chapter(BaseModel):
    """Stored chapter record."""

    id: int = Field(0, alias="ID")
    chapter_id: str = Field(default_factory=generate_chapter_id, alias="Chapter_Id")
    chapter_name: str = Field("", alias="Chapter_Name")
    chapter_description: str = Field("", alias="Chapter_Description")
    created_by: str = Field("", alias="Created_By")
    status: str = Field("pending", alias="Status")
    created_at: datetime = Field(default_factory=utcnow, alias="CreatedAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="UpdatedAt")

    model_config = RECORD_CONFIG


class ChapterSummary(BaseModel):
    """Identifier and name, as returned by the chapter listing."""

    chapter_id: str = Field(..., alias="Chapter_Id")
    chapter_name: str = Field(..., alias="Chapter_Name")

    model_config = RECORD_CONFIG


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int = Field(..., alias="totalPages")

    model_config = RECORD_CONFIG


class ChapterPage(BaseModel):
    chapters: List[ChapterSummary]
    pagination: Pagination


class ChapterNameCheck(BaseModel):
    exists: bool
    message: str
