# app/domains/climate/models.py

"""
'climate' 도메인 (PostgreSQL 'climate' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- temperature_zones: 학교별 온도 구역 (현재/목표 온도, 투표 허용 범위)
- temperature_votes: 사용자 투표. (user_id, zone_id, vote_date) 유일 제약으로 하루 1회를 보장합니다.
- temperature_history: 구역 온도 변경 이력 (추가 전용)
"""

import uuid
from typing import Optional
from datetime import date, datetime
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from app.core.db_types import utcnow


# =============================================================================
# 1. climate.temperature_zones 테이블 모델
# =============================================================================
class TemperatureZone(SQLModel, table=True):
    __tablename__ = "temperature_zones"
    __table_args__ = {'schema': 'climate'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="구역 고유 ID")
    school_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("school.schools.id", ondelete="CASCADE"), nullable=False, index=True),
        description="소속 학교 ID (FK)"
    )
    name: str = Field(max_length=100, description="구역 이름 (예: North Wing)")
    description: Optional[str] = Field(default=None, description="구역 설명")
    current_temperature: Optional[float] = Field(default=None, description="현재 측정 온도 (°F)")
    target_temperature: Optional[float] = Field(default=None, description="투표로 결정된 목표 온도 (°F)")
    min_temperature: float = Field(default=65.0, description="투표 허용 최저 온도 (°F)")
    max_temperature: float = Field(default=80.0, description="투표 허용 최고 온도 (°F)")
    is_active: bool = Field(default=True, description="구역 활성 여부")

    created_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )


# =============================================================================
# 2. climate.temperature_votes 테이블 모델
# =============================================================================
class TemperatureVote(SQLModel, table=True):
    """
    투표는 생성 후 수정/삭제되지 않습니다.
    vote_date는 투표 시점의 UTC 날짜이며 하루 1회 제약의 기준입니다.
    """
    __tablename__ = "temperature_votes"
    __table_args__ = (
        UniqueConstraint("user_id", "zone_id", "vote_date", name="uq_temperature_votes_user_zone_day"),
        {'schema': 'climate'},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="투표 고유 ID")
    user_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("usr.users.id", ondelete="CASCADE"), nullable=False, index=True),
        description="투표한 사용자 ID (FK)"
    )
    zone_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("climate.temperature_zones.id", ondelete="CASCADE"), nullable=False, index=True),
        description="대상 구역 ID (FK)"
    )
    temperature: float = Field(description="희망 온도 (°F)")
    vote_weight: float = Field(default=1.0, description="투표 가중치 (현재 항상 1.0)")
    vote_date: date = Field(default_factory=lambda: utcnow().date(), description="투표 일자 (UTC)")

    created_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), index=True),
        description="투표 일시"
    )


# =============================================================================
# 3. climate.temperature_history 테이블 모델
# =============================================================================
class TemperatureHistory(SQLModel, table=True):
    __tablename__ = "temperature_history"
    __table_args__ = {'schema': 'climate'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="이력 고유 ID")
    zone_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("climate.temperature_zones.id", ondelete="CASCADE"), nullable=False, index=True),
        description="대상 구역 ID (FK)"
    )
    temperature: float = Field(description="기록 시점의 현재 온도 (°F)")
    target_temperature: Optional[float] = Field(default=None, description="기록 시점의 목표 온도 (°F)")
    recorded_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="기록 일시"
    )
