# app/domains/notice/routers.py

"""
'notice' 도메인 (공지)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
목록은 게시 중이고 만료되지 않은 공지만 보여주며, 게시/수정/삭제는 직원과 관리자만 가능합니다.
"""

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.exceptions import NotFound, ValidationFailed
from app.core.responses import ApiResponse, ok
from app.domains.usr.models import UserRole
from app.domains.usr.schemas import UserRead

from . import crud as notice_crud
from . import models as notice_models
from . import schemas as notice_schemas

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Announcements (공지)"],
    responses={404: {"description": "Not found"}},
)

require_staff = deps.require_role(UserRole.ADMIN, UserRole.STAFF)


def _school_of(current_user: UserRead) -> uuid.UUID:
    if current_user.school_id is None:
        raise ValidationFailed("User is not assigned to a school")
    return current_user.school_id


async def _get_announcement_or_404(
    db: AsyncSession, announcement_id: uuid.UUID, school_id: uuid.UUID
) -> notice_models.Announcement:
    db_announcement = await notice_crud.announcement.get_in_school(db, id=announcement_id, school_id=school_id)
    if db_announcement is None:
        raise NotFound("Announcement not found")
    return db_announcement


@router.get("", response_model=ApiResponse[List[notice_schemas.AnnouncementRead]], summary="공지 목록 조회")
async def read_announcements(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.get_current_user),
):
    announcements = await notice_crud.announcement.get_visible(
        db, school_id=_school_of(current_user), skip=skip, limit=limit
    )
    return ok([notice_schemas.AnnouncementRead.model_validate(a) for a in announcements])


@router.post(
    "",
    response_model=ApiResponse[notice_schemas.AnnouncementRead],
    status_code=status.HTTP_201_CREATED,
    summary="공지 게시 (직원/관리자)",
)
async def create_announcement(
    announcement_in: notice_schemas.AnnouncementCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(require_staff),
):
    db_announcement = await notice_crud.announcement.create_for_school(
        db, obj_in=announcement_in, school_id=_school_of(current_user), author_id=current_user.id
    )
    return ok(notice_schemas.AnnouncementRead.model_validate(db_announcement), "Announcement created successfully")


@router.put(
    "/{announcement_id}",
    response_model=ApiResponse[notice_schemas.AnnouncementRead],
    summary="공지 수정 (직원/관리자)",
)
async def update_announcement(
    announcement_id: uuid.UUID,
    announcement_in: notice_schemas.AnnouncementUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(require_staff),
):
    db_announcement = await _get_announcement_or_404(db, announcement_id, _school_of(current_user))
    updated = await notice_crud.announcement.update(db, db_obj=db_announcement, obj_in=announcement_in)
    return ok(notice_schemas.AnnouncementRead.model_validate(updated), "Announcement updated successfully")


@router.delete(
    "/{announcement_id}",
    response_model=ApiResponse[notice_schemas.AnnouncementRead],
    summary="공지 내리기 (직원/관리자)",
)
async def deactivate_announcement(
    announcement_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(require_staff),
):
    """공지는 삭제하지 않고 게시 중단(is_active=False) 처리합니다."""
    db_announcement = await _get_announcement_or_404(db, announcement_id, _school_of(current_user))
    updated = await notice_crud.announcement.deactivate(db, db_obj=db_announcement)
    logger.info("Announcement %s deactivated by %s", announcement_id, current_user.id)
    return ok(notice_schemas.AnnouncementRead.model_validate(updated), "Announcement removed")
