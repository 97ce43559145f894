"""FastAPI dependencies that hand each request its services.

The ``Database`` lives on ``app.state`` and is created by
``create_app``; services are cheap wrappers built per request around
that shared instance.
"""

from fastapi import Depends, Request

from ..core.db import Database
from ..services.chapter_service import ChapterService
from ..services.membership_service import MembershipService
from ..services.user_service import UserService


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_user_service(db: Database = Depends(get_database)) -> UserService:
    return UserService(db)


def get_chapter_service(db: Database = Depends(get_database)) -> ChapterService:
    return ChapterService(db)


def get_membership_service(db: Database = Depends(get_database)) -> MembershipService:
    return MembershipService(db)
