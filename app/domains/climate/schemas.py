# app/domains/climate/schemas.py

"""
'climate' 도메인 (온도 구역/투표)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

import uuid
from typing import List, Optional
from datetime import date, datetime
from pydantic import Field, model_validator

from app.core.responses import CamelModel


# =============================================================================
# 1. 온도 구역 (TemperatureZone) 스키마
# =============================================================================
class ZoneCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    school_id: Optional[uuid.UUID] = Field(None, description="생략하면 요청자의 학교")
    current_temperature: Optional[float] = None
    target_temperature: Optional[float] = None
    min_temperature: float = 65.0
    max_temperature: float = 80.0

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min_temperature > self.max_temperature:
            raise ValueError("minTemperature must not exceed maxTemperature")
        return self


class ZoneRead(CamelModel):
    id: uuid.UUID
    school_id: uuid.UUID
    name: str
    description: Optional[str] = None
    current_temperature: Optional[float] = None
    target_temperature: Optional[float] = None
    min_temperature: float
    max_temperature: float
    is_active: bool


class ZoneTemperatureUpdate(CamelModel):
    """외부 센서/HVAC 연동 또는 관리자가 보내는 현재 온도 갱신"""
    current_temperature: float
    target_temperature: Optional[float] = None


# =============================================================================
# 2. 투표 (TemperatureVote) 스키마
# =============================================================================
class VoteCreate(CamelModel):
    temperature: float = Field(..., ge=65, le=80)
    zone: Optional[uuid.UUID] = Field(None, description="생략하면 학교의 첫 번째 활성 구역")


class VoteRead(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    zone_id: uuid.UUID
    temperature: float
    vote_weight: float
    vote_date: date
    created_at: Optional[datetime] = None


class ZoneStats(CamelModel):
    average_vote: float
    total_votes: int
    today_votes: int
    # 투표가 있었던 날의 일별 평균만 날짜 오름차순으로 담습니다.
    last_week_trend: List[float] = Field(default_factory=list)


class HistoryRead(CamelModel):
    id: uuid.UUID
    zone_id: uuid.UUID
    temperature: float
    target_temperature: Optional[float] = None
    recorded_at: Optional[datetime] = None


# =============================================================================
# 3. 엔드포인트 응답 스키마
# =============================================================================
class CurrentTemperature(CamelModel):
    zone: ZoneRead
    temperature: float
    target_temperature: float
    can_vote: bool
    user_last_vote: Optional[VoteRead] = None
    stats: ZoneStats


class VoteResult(CamelModel):
    vote: VoteRead
    next_vote_time: datetime


class ZoneStatsWithVote(ZoneStats):
    user_last_vote: Optional[VoteRead] = None
