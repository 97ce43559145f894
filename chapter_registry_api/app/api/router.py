"""
Top‑level API router.

Aggregates the domain routers under their prefixes.  When a new
domain is introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import chapters, memberships, users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(chapters.router, prefix="/chapters", tags=["chapters"])
router.include_router(memberships.router, prefix="/memberships", tags=["memberships"])
