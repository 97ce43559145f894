"""
JSON envelopes shared by the endpoints.

Two failure shapes are in use: the user and membership routes answer
``{"success": false, "message": ...}`` while the chapter routes answer
``{"error": ...}``.  ``from_exception`` maps a raised error onto one
of them: domain errors below 500 keep their own status and message,
anything else is logged and reported with the endpoint's fixed 500
message.
"""

import logging
from typing import Any, Callable

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..core.exceptions import ChapterRegistryError

logger = logging.getLogger(__name__)

Envelope = Callable[[int, str], JSONResponse]


def payload(content: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Serialize ``content`` (models use their column-name aliases)."""
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content, by_alias=True))


def success(data: Any = None, status_code: int = status.HTTP_200_OK, **extra: Any) -> JSONResponse:
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    body.update(extra)
    return payload(body, status_code)


def failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def from_exception(exc: Exception, fallback: str, envelope: Envelope = failure) -> JSONResponse:
    """Translate ``exc`` into a response.  Call from inside an ``except`` block."""
    if isinstance(exc, ChapterRegistryError) and exc.status_code < 500:
        return envelope(exc.status_code, exc.message)
    logger.exception("%s", fallback)
    return envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, fallback)
