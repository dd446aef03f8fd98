# app/domains/climate/crud.py

"""
'climate' 도메인의 CRUD 작업과 온도 투표 규칙을 담당하는 모듈입니다.

투표 규칙:
- 사용자는 구역마다 UTC 기준 하루에 한 번만 투표할 수 있습니다.
  사전 검사(can_vote) 후에도 (user_id, zone_id, vote_date) 유일 제약 위반이 나면
  동일하게 AlreadyVotedToday로 처리합니다.
- 투표 온도는 구역의 [min_temperature, max_temperature] 범위(양 끝 포함)여야 합니다.
- 투표가 저장되면 최근 24시간 투표 평균을 반올림하여 구역의 목표 온도로 기록합니다.
"""

import logging
import math
import uuid
from typing import List, Optional
from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.core.db_types import utcnow
from app.core.exceptions import AlreadyVotedToday, TemperatureOutOfRange
from . import models as climate_models
from . import schemas as climate_schemas

logger = logging.getLogger(__name__)

TARGET_WINDOW = timedelta(hours=24)
TREND_WINDOW = timedelta(days=7)
VOTE_INTERVAL = timedelta(hours=24)


def round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


# =============================================================================
# 1. climate.temperature_zones 테이블 CRUD
# =============================================================================
class CRUDTemperatureZone(
    CRUDBase[climate_models.TemperatureZone, climate_schemas.ZoneCreate, climate_schemas.ZoneTemperatureUpdate]
):
    def __init__(self):
        super().__init__(model=climate_models.TemperatureZone)

    async def get_active(self, db: AsyncSession, *, id: uuid.UUID) -> Optional[climate_models.TemperatureZone]:
        statement = select(self.model).where(self.model.id == id, self.model.is_active == True)  # noqa: E712
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_by_school(self, db: AsyncSession, *, school_id: uuid.UUID) -> List[climate_models.TemperatureZone]:
        """학교의 활성 구역을 이름순으로 조회합니다."""
        statement = (
            select(self.model)
            .where(self.model.school_id == school_id, self.model.is_active == True)  # noqa: E712
            .order_by(self.model.name)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def create_for_school(
        self, db: AsyncSession, *, obj_in: climate_schemas.ZoneCreate, school_id: uuid.UUID
    ) -> climate_models.TemperatureZone:
        return await super().create(db, obj_in=obj_in.model_copy(update={"school_id": school_id}))

    async def update_temperature(
        self,
        db: AsyncSession,
        *,
        zone: climate_models.TemperatureZone,
        current_temperature: float,
        target_temperature: Optional[float] = None,
    ) -> climate_models.TemperatureZone:
        """
        현재 온도(및 주어진 경우 목표 온도)를 갱신하고 이력 행을 하나 추가합니다.
        """
        zone.current_temperature = current_temperature
        if target_temperature is not None:
            zone.target_temperature = target_temperature
        zone.updated_at = utcnow()
        db.add(zone)
        db.add(climate_models.TemperatureHistory(
            zone_id=zone.id,
            temperature=current_temperature,
            target_temperature=zone.target_temperature,
        ))
        await db.commit()
        await db.refresh(zone)
        logger.info("Zone %s temperature updated to %.1f", zone.id, current_temperature)
        return zone

    async def get_history(
        self, db: AsyncSession, *, zone_id: uuid.UUID, limit: int = 50
    ) -> List[climate_models.TemperatureHistory]:
        statement = (
            select(climate_models.TemperatureHistory)
            .where(climate_models.TemperatureHistory.zone_id == zone_id)
            .order_by(climate_models.TemperatureHistory.recorded_at.desc())
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def refresh_target_from_votes(
        self, db: AsyncSession, *, zone: climate_models.TemperatureZone
    ) -> Optional[float]:
        """
        최근 24시간 투표 평균을 반올림해 목표 온도로 기록합니다.
        해당 기간 투표가 없으면 아무것도 쓰지 않고 None을 반환합니다.
        """
        average = await db.scalar(
            select(func.avg(climate_models.TemperatureVote.temperature)).where(
                climate_models.TemperatureVote.zone_id == zone.id,
                climate_models.TemperatureVote.created_at >= utcnow() - TARGET_WINDOW,
            )
        )
        if average is None:
            return None
        zone.target_temperature = round_half_up(float(average))
        zone.updated_at = utcnow()
        db.add(zone)
        await db.commit()
        await db.refresh(zone)
        return zone.target_temperature


temperature_zone = CRUDTemperatureZone()


# =============================================================================
# 2. climate.temperature_votes 테이블 CRUD
# =============================================================================
class CRUDTemperatureVote(CRUDBase[climate_models.TemperatureVote, climate_schemas.VoteCreate, climate_schemas.VoteCreate]):
    def __init__(self):
        super().__init__(model=climate_models.TemperatureVote)

    async def can_vote(self, db: AsyncSession, *, user_id: uuid.UUID, zone_id: uuid.UUID) -> bool:
        """오늘(UTC) 해당 구역에 이미 투표한 기록이 없으면 True."""
        statement = select(self.model.id).where(
            self.model.user_id == user_id,
            self.model.zone_id == zone_id,
            self.model.vote_date == utcnow().date(),
        )
        result = await db.execute(statement)
        return result.first() is None

    async def submit(
        self,
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        zone: climate_models.TemperatureZone,
        temperature: float,
    ) -> climate_models.TemperatureVote:
        """
        투표를 저장하고 구역의 목표 온도를 다시 계산합니다.
        오늘 이미 투표했으면 AlreadyVotedToday, 범위를 벗어나면 TemperatureOutOfRange를 발생시킵니다.
        """
        zone_id = zone.id
        if not await self.can_vote(db, user_id=user_id, zone_id=zone_id):
            raise AlreadyVotedToday()
        if not (zone.min_temperature <= temperature <= zone.max_temperature):
            raise TemperatureOutOfRange(zone.min_temperature, zone.max_temperature)

        now = utcnow()
        vote = self.model(
            user_id=user_id,
            zone_id=zone_id,
            temperature=temperature,
            vote_weight=1.0,
            vote_date=now.date(),
            created_at=now,
        )
        db.add(vote)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info("Concurrent duplicate vote rejected: user=%s zone=%s", user_id, zone_id)
            raise AlreadyVotedToday()
        await db.refresh(vote)
        logger.info("Vote recorded: user=%s zone=%s temperature=%.1f", user_id, zone_id, temperature)

        await temperature_zone.refresh_target_from_votes(db, zone=zone)
        return vote

    async def get_user_last_vote(
        self, db: AsyncSession, *, user_id: uuid.UUID, zone_id: uuid.UUID
    ) -> Optional[climate_models.TemperatureVote]:
        statement = (
            select(self.model)
            .where(self.model.user_id == user_id, self.model.zone_id == zone_id)
            .order_by(self.model.created_at.desc())
            .limit(1)
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_zone_stats(self, db: AsyncSession, *, zone_id: uuid.UUID) -> climate_schemas.ZoneStats:
        """
        구역 투표 통계를 계산합니다.
        averageVote는 반올림하지 않으며, lastWeekTrend는 투표가 있었던 날만 날짜 오름차순으로 담습니다.
        """
        totals = await db.execute(
            select(func.count(self.model.id), func.avg(self.model.temperature)).where(self.model.zone_id == zone_id)
        )
        total_votes, average_vote = totals.one()
        today_votes = await db.scalar(
            select(func.count(self.model.id)).where(
                self.model.zone_id == zone_id,
                self.model.vote_date == utcnow().date(),
            )
        )
        trend_rows = await db.execute(
            select(self.model.vote_date, func.avg(self.model.temperature))
            .where(
                self.model.zone_id == zone_id,
                self.model.created_at >= utcnow() - TREND_WINDOW,
            )
            .group_by(self.model.vote_date)
            .order_by(self.model.vote_date)
        )
        return climate_schemas.ZoneStats(
            average_vote=float(average_vote) if average_vote is not None else 0.0,
            total_votes=total_votes or 0,
            today_votes=today_votes or 0,
            last_week_trend=[float(avg) for _, avg in trend_rows.all()],
        )


temperature_vote = CRUDTemperatureVote()
