# app/domains/notice/models.py

"""
'notice' 도메인 (PostgreSQL 'notice' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
직원/관리자가 게시하는 학교 공지를 저장합니다.
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
from app.domains.maint.models import RequestPriority


class AnnouncementType(str, enum.Enum):
    GENERAL = "general"
    EMERGENCY = "emergency"
    MAINTENANCE = "maintenance"
    EVENT = "event"


# =============================================================================
# 1. notice.announcements 테이블 모델
# =============================================================================
class Announcement(SQLModel, table=True):
    __tablename__ = "announcements"
    __table_args__ = {'schema': 'notice'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="공지 고유 ID")
    school_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("school.schools.id", ondelete="CASCADE"), nullable=False, index=True),
        description="소속 학교 ID (FK)"
    )
    author_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid, ForeignKey("usr.users.id", ondelete="SET NULL")),
        description="작성자 ID"
    )
    title: str = Field(max_length=255, description="제목")
    content: str = Field(description="본문")
    type: AnnouncementType = Field(
        default=AnnouncementType.GENERAL,
        sa_column=Column(String(20), nullable=False, server_default=AnnouncementType.GENERAL.value),
        description="공지 유형"
    )
    priority: RequestPriority = Field(
        default=RequestPriority.MEDIUM,
        sa_column=Column(String(20), nullable=False, server_default=RequestPriority.MEDIUM.value),
        description="중요도"
    )
    target_audience: List[str] = Field(default_factory=list, sa_column=Column(JSONVariant), description="대상 (예: ['all'], ['floor-3'])")
    expires_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), index=True),
        description="게시 만료 일시"
    )
    is_active: bool = Field(default=True, description="게시 여부")

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
