# app/domains/maint/routers.py

"""
'maint' 도메인 (시설 요청)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
모든 요청은 사용자가 속한 학교 안에서만 조회/수정됩니다.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.exceptions import NotFound, ValidationFailed
from app.core.responses import ApiResponse, ok
from app.domains.usr.models import User, UserRole
from app.domains.usr.schemas import UserRead

from . import crud as maint_crud
from . import models as maint_models
from . import schemas as maint_schemas

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Maintenance Requests (시설 요청)"],
    responses={404: {"description": "Not found"}},
)


def _school_of(current_user: UserRead) -> uuid.UUID:
    if current_user.school_id is None:
        raise ValidationFailed("User is not assigned to a school")
    return current_user.school_id


async def _get_request_or_404(db: AsyncSession, request_id: uuid.UUID, school_id: uuid.UUID) -> maint_models.Request:
    db_request = await maint_crud.request.get_in_school(db, id=request_id, school_id=school_id)
    if db_request is None:
        raise NotFound("Request not found")
    return db_request


async def _check_assignee(db: AsyncSession, assignee_id: uuid.UUID, school_id: uuid.UUID) -> None:
    """담당자는 같은 학교의 활성 직원 또는 관리자여야 합니다."""
    assignee = await db.get(User, assignee_id)
    if (
        assignee is None
        or not assignee.is_active
        or assignee.school_id != school_id
        or assignee.role not in (UserRole.STAFF, UserRole.ADMIN)
    ):
        raise ValidationFailed("Assignee must be an active staff member of this school")


async def _to_read(db: AsyncSession, db_request: maint_models.Request) -> maint_schemas.RequestRead:
    author_name = None
    if db_request.user_id is not None:
        author = await db.get(User, db_request.user_id)
        author_name = author.full_name if author else None
    return maint_schemas.RequestRead.model_validate(db_request).model_copy(update={"author_name": author_name})


@router.get("", response_model=ApiResponse[maint_schemas.RequestPage], summary="학교 요청 목록 조회")
async def read_requests(
    status_filter: Optional[maint_models.RequestStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.get_current_user),
):
    rows, total = await maint_crud.request.get_page(
        db, school_id=_school_of(current_user), status=status_filter, page=page, limit=limit
    )
    items = [
        maint_schemas.RequestRead.model_validate(row).model_copy(update={"author_name": author_name})
        for row, author_name in rows
    ]
    return ok(maint_schemas.RequestPage(items=items, page=page, limit=limit, total=total))


@router.post(
    "",
    response_model=ApiResponse[maint_schemas.RequestRead],
    status_code=status.HTTP_201_CREATED,
    summary="요청 생성",
)
async def create_request(
    request_in: maint_schemas.RequestCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.get_current_user),
):
    db_request = await maint_crud.request.create_for_user(
        db, obj_in=request_in, user_id=current_user.id, school_id=_school_of(current_user)
    )
    return ok(await _to_read(db, db_request), "Request created successfully")


@router.get("/{request_id}", response_model=ApiResponse[maint_schemas.RequestRead], summary="요청 상세 조회")
async def read_request(
    request_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.get_current_user),
):
    db_request = await _get_request_or_404(db, request_id, _school_of(current_user))
    return ok(await _to_read(db, db_request))


@router.put("/{request_id}", response_model=ApiResponse[maint_schemas.RequestRead], summary="요청 상태 변경 (직원/관리자)")
async def update_request(
    request_id: uuid.UUID,
    request_in: maint_schemas.RequestUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.require_role(UserRole.ADMIN, UserRole.STAFF)),
):
    db_request = await _get_request_or_404(db, request_id, _school_of(current_user))
    if request_in.assigned_to is not None:
        await _check_assignee(db, request_in.assigned_to, db_request.school_id)
    updated = await maint_crud.request.update_status(db, db_obj=db_request, obj_in=request_in)
    return ok(await _to_read(db, updated), "Request updated successfully")


@router.post("/{request_id}/upvote", response_model=ApiResponse[maint_schemas.RequestRead], summary="요청 공감")
async def upvote_request(
    request_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.get_current_user),
):
    db_request = await _get_request_or_404(db, request_id, _school_of(current_user))
    updated = await maint_crud.request.increment_upvotes(db, db_obj=db_request)
    logger.info("Request %s upvoted by %s", request_id, current_user.id)
    return ok(await _to_read(db, updated), "Vote recorded successfully")
