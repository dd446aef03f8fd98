# app/domains/school/routers.py

"""
'school' 도메인 (학교)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
학교 목록/상세 조회는 가입 화면에서 쓰이므로 인증 없이 열려 있습니다.
"""

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.exceptions import NotFound, PermissionDenied
from app.core.responses import ApiResponse, ok
from app.domains.usr.models import UserRole
from app.domains.usr.schemas import UserRead

from . import crud as school_crud
from . import schemas as school_schemas

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Schools (학교)"],
    responses={404: {"description": "Not found"}},
)


async def _get_school_or_404(db: AsyncSession, school_id: uuid.UUID):
    db_school = await school_crud.school.get(db, school_id)
    if db_school is None:
        raise NotFound("School not found")
    return db_school


@router.get("", response_model=ApiResponse[List[school_schemas.SchoolSummary]], summary="학교 목록 조회")
async def read_schools(db: AsyncSession = Depends(deps.get_db_session)):
    schools = await school_crud.school.get_all(db)
    return ok([school_schemas.SchoolSummary.model_validate(s) for s in schools])


@router.post(
    "",
    response_model=ApiResponse[school_schemas.SchoolRead],
    status_code=status.HTTP_201_CREATED,
    summary="학교 생성 (관리자)",
)
async def create_school(
    school_in: school_schemas.SchoolCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.require_role(UserRole.ADMIN)),
):
    db_school = await school_crud.school.create(db, obj_in=school_in)
    return ok(school_schemas.SchoolRead.model_validate(db_school), "School created successfully")


@router.get("/{school_id}", response_model=ApiResponse[school_schemas.SchoolRead], summary="학교 상세 조회")
async def read_school(school_id: uuid.UUID, db: AsyncSession = Depends(deps.get_db_session)):
    db_school = await _get_school_or_404(db, school_id)
    return ok(school_schemas.SchoolRead.model_validate(db_school))


@router.patch("/{school_id}", response_model=ApiResponse[school_schemas.SchoolRead], summary="학교 정보 수정 (관리자)")
async def update_school(
    school_id: uuid.UUID,
    school_in: school_schemas.SchoolUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.require_role(UserRole.ADMIN)),
):
    db_school = await _get_school_or_404(db, school_id)
    updated = await school_crud.school.update(db, db_obj=db_school, obj_in=school_in)
    return ok(school_schemas.SchoolRead.model_validate(updated), "School updated successfully")


@router.get("/{school_id}/stats", response_model=ApiResponse[school_schemas.SchoolStats], summary="학교 통계 (관리자)")
async def read_school_stats(
    school_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.require_role(UserRole.ADMIN)),
):
    """관리자 전용입니다. 다른 역할이 허용되더라도 자기 학교 통계만 볼 수 있습니다."""
    if current_user.role != UserRole.ADMIN and current_user.school_id != school_id:
        logger.info("Cross-school stats access denied: user=%s school=%s", current_user.id, school_id)
        raise PermissionDenied("Access denied")
    await _get_school_or_404(db, school_id)
    stats = await school_crud.school.get_stats(db, school_id=school_id)
    return ok(stats)
