# app/domains/school/crud.py

"""
'school' 도메인의 CRUD 작업과 학교 단위 통계 쿼리를 담당하는 모듈입니다.
"""

import logging
import uuid
from typing import List
from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.core.db_types import utcnow
from app.core.exceptions import DuplicateName
from app.domains.climate.models import TemperatureVote, TemperatureZone
from app.domains.maint.models import ACTIVE_REQUEST_STATUSES, Request
from app.domains.usr.models import User
from . import models as school_models
from . import schemas as school_schemas

logger = logging.getLogger(__name__)

STATS_VOTE_WINDOW = timedelta(days=7)


# =============================================================================
# 1. school.schools 테이블 CRUD
# =============================================================================
class CRUDSchool(CRUDBase[school_models.School, school_schemas.SchoolCreate, school_schemas.SchoolUpdate]):
    updatable_fields = ("name", "address", "logo_url", "timezone", "settings")

    def __init__(self):
        super().__init__(model=school_models.School)

    async def get_all(self, db: AsyncSession) -> List[school_models.School]:
        """모든 학교를 이름순으로 조회합니다."""
        result = await db.execute(select(self.model).order_by(self.model.name))
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, *, obj_in: school_schemas.SchoolCreate) -> school_models.School:
        if await self.get_by_attribute(db, attribute="name", value=obj_in.name):
            raise DuplicateName("School name already exists")
        try:
            db_obj = await super().create(db, obj_in=obj_in)
        except IntegrityError:
            await db.rollback()
            raise DuplicateName("School name already exists")
        logger.info("School created: %s (%s)", db_obj.id, db_obj.name)
        return db_obj

    async def _name_taken(self, db: AsyncSession, *, name: str, exclude_id: uuid.UUID) -> bool:
        result = await db.execute(select(self.model.id).where(self.model.name == name, self.model.id != exclude_id))
        return result.first() is not None

    async def update(
        self, db: AsyncSession, *, db_obj: school_models.School, obj_in: school_schemas.SchoolUpdate
    ) -> school_models.School:
        school_id = db_obj.id
        if obj_in.name and await self._name_taken(db, name=obj_in.name, exclude_id=school_id):
            raise DuplicateName("School name already exists")
        try:
            return await super().update(db, db_obj=db_obj, obj_in=obj_in)
        except IntegrityError:
            await db.rollback()
            # 다른 학교와 이름이 겹칠 때만 중복으로 바꾸고, 그 밖의 제약 위반은 그대로 올립니다.
            if obj_in.name is not None and await self._name_taken(db, name=obj_in.name, exclude_id=school_id):
                raise DuplicateName("School name already exists")
            raise

    async def get_stats(self, db: AsyncSession, *, school_id: uuid.UUID) -> school_schemas.SchoolStats:
        """
        학교 단위 통계를 계산합니다.
        - totalUsers: 활성 사용자 수
        - totalRequests / activeRequests: 전체 요청 수 / pending, in_progress 요청 수
        - averageTemperatureVote: 최근 7일간 학교 소속 구역 투표 평균 (없으면 0)
        """
        total_users = await db.scalar(
            select(func.count(User.id)).where(User.school_id == school_id, User.is_active == True)  # noqa: E712
        )
        total_requests = await db.scalar(
            select(func.count(Request.id)).where(Request.school_id == school_id)
        )
        active_requests = await db.scalar(
            select(func.count(Request.id)).where(
                Request.school_id == school_id,
                Request.status.in_(ACTIVE_REQUEST_STATUSES),
            )
        )
        avg_vote = await db.scalar(
            select(func.avg(TemperatureVote.temperature))
            .join(TemperatureZone, TemperatureZone.id == TemperatureVote.zone_id)
            .where(
                TemperatureZone.school_id == school_id,
                TemperatureVote.created_at >= utcnow() - STATS_VOTE_WINDOW,
            )
        )
        return school_schemas.SchoolStats(
            total_users=total_users or 0,
            total_requests=total_requests or 0,
            active_requests=active_requests or 0,
            average_temperature_vote=float(avg_vote) if avg_vote is not None else 0.0,
        )


school = CRUDSchool()
