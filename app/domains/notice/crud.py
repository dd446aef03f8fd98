# app/domains/notice/crud.py

"""
'notice' 도메인의 CRUD 작업을 담당하는 모듈입니다.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import or_, update as sa_update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.core.db_types import utcnow
from . import models as notice_models
from . import schemas as notice_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. notice.announcements 테이블 CRUD
# =============================================================================
class CRUDAnnouncement(
    CRUDBase[notice_models.Announcement, notice_schemas.AnnouncementCreate, notice_schemas.AnnouncementUpdate]
):
    updatable_fields = ("title", "content", "type", "priority", "target_audience", "expires_at", "is_active")

    def __init__(self):
        super().__init__(model=notice_models.Announcement)

    async def get_in_school(
        self, db: AsyncSession, *, id: uuid.UUID, school_id: uuid.UUID
    ) -> Optional[notice_models.Announcement]:
        statement = select(self.model).where(self.model.id == id, self.model.school_id == school_id)
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_visible(
        self, db: AsyncSession, *, school_id: uuid.UUID, skip: int = 0, limit: int = 20
    ) -> List[notice_models.Announcement]:
        """게시 중이고 만료되지 않은 공지를 최신순으로 조회합니다."""
        statement = (
            select(self.model)
            .where(
                self.model.school_id == school_id,
                self.model.is_active == True,  # noqa: E712
                or_(self.model.expires_at.is_(None), self.model.expires_at > utcnow()),
            )
            .order_by(self.model.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def create_for_school(
        self,
        db: AsyncSession,
        *,
        obj_in: notice_schemas.AnnouncementCreate,
        school_id: uuid.UUID,
        author_id: uuid.UUID,
    ) -> notice_models.Announcement:
        db_obj = await super().create(db, obj_in=obj_in, school_id=school_id, author_id=author_id)
        logger.info("Announcement created: %s (school=%s)", db_obj.id, school_id)
        return db_obj

    async def deactivate(self, db: AsyncSession, *, db_obj: notice_models.Announcement) -> notice_models.Announcement:
        return await super().update(db, db_obj=db_obj, obj_in={"is_active": False})

    async def deactivate_expired(self, db: AsyncSession) -> int:
        """만료 시각이 지난 게시 중 공지를 일괄 비활성화하고 처리한 행 수를 반환합니다."""
        result = await db.execute(
            sa_update(self.model)
            .where(
                self.model.is_active == True,  # noqa: E712
                self.model.expires_at.is_not(None),
                self.model.expires_at <= utcnow(),
            )
            .values(is_active=False, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount or 0


announcement = CRUDAnnouncement()
