# app/domains/school/models.py

"""
'school' 도메인 (PostgreSQL 'school' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
학교는 사용자, 온도 구역, 요청, 공지의 테넌트 경계입니다.
"""

import uuid
from typing import Any, Dict, Optional
from datetime import datetime
from sqlmodel import Field, SQLModel, Column
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from app.core.db_types import JSONVariant, utcnow


# =============================================================================
# 1. school.schools 테이블 모델
# =============================================================================
class School(SQLModel, table=True):
    """
    PostgreSQL의 school.schools 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "schools"
    __table_args__ = {'schema': 'school'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="학교 고유 ID")
    name: str = Field(max_length=255, sa_column_kwargs={"unique": True}, description="학교명")
    address: Optional[str] = Field(default=None, description="주소")
    logo_url: Optional[str] = Field(default=None, max_length=500, description="로고 이미지 URL")
    timezone: str = Field(default="UTC", max_length=50, description="학교 기준 시간대")
    settings: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSONVariant), description="학교별 설정 (JSON)")

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
