# app/domains/maint/crud.py

"""
'maint' 도메인의 CRUD 작업을 담당하는 모듈입니다.
모든 조회는 학교(school_id) 단위로 범위가 제한됩니다.
"""

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import func, update as sa_update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.core.db_types import utcnow
from app.domains.usr.models import User
from . import models as maint_models
from . import schemas as maint_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. maint.requests 테이블 CRUD
# =============================================================================
class CRUDRequest(CRUDBase[maint_models.Request, maint_schemas.RequestCreate, maint_schemas.RequestUpdate]):
    updatable_fields = ("status", "assigned_to", "resolved_at")

    def __init__(self):
        super().__init__(model=maint_models.Request)

    async def create_for_user(
        self,
        db: AsyncSession,
        *,
        obj_in: maint_schemas.RequestCreate,
        user_id: uuid.UUID,
        school_id: uuid.UUID,
    ) -> maint_models.Request:
        """요청을 생성합니다. 익명 요청이면 작성자 ID를 저장하지 않습니다."""
        db_obj = await super().create(
            db,
            obj_in=obj_in,
            school_id=school_id,
            user_id=None if obj_in.is_anonymous else user_id,
            status=maint_models.RequestStatus.PENDING,
            upvotes=0,
        )
        logger.info("Request created: %s (school=%s)", db_obj.id, school_id)
        return db_obj

    async def get_in_school(
        self, db: AsyncSession, *, id: uuid.UUID, school_id: uuid.UUID
    ) -> Optional[maint_models.Request]:
        statement = select(self.model).where(self.model.id == id, self.model.school_id == school_id)
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_page(
        self,
        db: AsyncSession,
        *,
        school_id: uuid.UUID,
        status: Optional[maint_models.RequestStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Tuple[maint_models.Request, Optional[str]]], int]:
        """
        학교의 요청을 최신순으로 페이지 조회합니다.
        각 항목은 (요청, 작성자 이름) 튜플이며, 익명 요청의 작성자 이름은 None입니다.
        """
        conditions = [self.model.school_id == school_id]
        if status is not None:
            conditions.append(self.model.status == status.value)

        total = await db.scalar(select(func.count(self.model.id)).where(*conditions))
        statement = (
            select(self.model, User.full_name)
            .outerjoin(User, User.id == self.model.user_id)
            .where(*conditions)
            .order_by(self.model.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await db.execute(statement)
        return [(row[0], row[1]) for row in result.all()], total or 0

    async def update_status(
        self, db: AsyncSession, *, db_obj: maint_models.Request, obj_in: maint_schemas.RequestUpdate
    ) -> maint_models.Request:
        """상태를 바꿉니다. resolved로 바뀌면 resolved_at을 기록합니다."""
        update_data = obj_in.model_dump(exclude_unset=True)
        if update_data.get("status") == maint_models.RequestStatus.RESOLVED:
            update_data["resolved_at"] = utcnow()
        db_obj = await super().update(db, db_obj=db_obj, obj_in=update_data)
        logger.info("Request %s updated: %s", db_obj.id, sorted(update_data))
        return db_obj

    async def increment_upvotes(self, db: AsyncSession, *, db_obj: maint_models.Request) -> maint_models.Request:
        """공감 수를 원자적으로 1 증가시킵니다."""
        await db.execute(
            sa_update(self.model).where(self.model.id == db_obj.id).values(upvotes=self.model.upvotes + 1)
        )
        await db.commit()
        await db.refresh(db_obj)
        return db_obj


request = CRUDRequest()
