# app/domains/maint/models.py

"""
'maint' 도메인 (PostgreSQL 'maint' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
거주자가 올리는 시설 수리/민원 요청을 저장합니다.
"""

import enum
import uuid
from typing import List, Optional
from datetime import datetime
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from app.core.db_types import JSONVariant, utcnow


class RequestPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class RequestStatus(str, enum.Enum):
    """요청 상태. 상태 전이 순서는 강제하지 않습니다."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


# 처리 중으로 집계되는 상태 (학교 통계의 activeRequests)
ACTIVE_REQUEST_STATUSES = (RequestStatus.PENDING.value, RequestStatus.IN_PROGRESS.value)


# =============================================================================
# 1. maint.requests 테이블 모델
# =============================================================================
class Request(SQLModel, table=True):
    """
    익명 요청은 user_id를 저장하지 않습니다.
    """
    __tablename__ = "requests"
    __table_args__ = {'schema': 'maint'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="요청 고유 ID")
    school_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("school.schools.id", ondelete="CASCADE"), nullable=False, index=True),
        description="소속 학교 ID (FK)"
    )
    user_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid, ForeignKey("usr.users.id", ondelete="SET NULL"), index=True),
        description="요청자 ID (익명이면 NULL)"
    )
    category: str = Field(max_length=50, description="요청 분류 (예: plumbing)")
    title: str = Field(max_length=255, description="제목")
    description: str = Field(description="상세 내용")
    priority: RequestPriority = Field(
        default=RequestPriority.MEDIUM,
        sa_column=Column(String(20), nullable=False, server_default=RequestPriority.MEDIUM.value),
        description="우선순위"
    )
    status: RequestStatus = Field(
        default=RequestStatus.PENDING,
        sa_column=Column(String(20), nullable=False, server_default=RequestStatus.PENDING.value, index=True),
        description="처리 상태"
    )
    is_anonymous: bool = Field(default=False, description="익명 요청 여부")
    photos: List[str] = Field(default_factory=list, sa_column=Column(JSONVariant), description="첨부 사진 URL 목록")
    upvotes: int = Field(default=0, description="공감 수")
    assigned_to: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid, ForeignKey("usr.users.id", ondelete="SET NULL")),
        description="담당 직원 ID"
    )
    resolved_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True)),
        description="해결 일시"
    )

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
