# app/domains/notice/schemas.py

"""
'notice' 도메인 (공지)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
expiresAt은 생성/수정 시점 기준으로 미래여야 합니다.
"""

import uuid
from typing import List, Optional
from datetime import datetime, timezone
from pydantic import Field, field_validator

from app.core.responses import CamelModel, reject_null
from app.domains.maint.models import RequestPriority
from . import models as notice_models


def _must_be_future(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    if value <= datetime.now(timezone.utc):
        raise ValueError("expiresAt must be in the future")
    return value


class AnnouncementCreate(CamelModel):
    title: str = Field(..., min_length=5, max_length=255)
    content: str = Field(..., min_length=10, max_length=2000)
    type: notice_models.AnnouncementType = notice_models.AnnouncementType.GENERAL
    priority: RequestPriority = RequestPriority.MEDIUM
    target_audience: List[str] = Field(default_factory=list)
    expires_at: Optional[datetime] = None

    @field_validator("expires_at")
    @classmethod
    def check_expires_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _must_be_future(value)


class AnnouncementUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=5, max_length=255)
    content: Optional[str] = Field(None, min_length=10, max_length=2000)
    type: Optional[notice_models.AnnouncementType] = None
    priority: Optional[RequestPriority] = None
    target_audience: Optional[List[str]] = None
    expires_at: Optional[datetime] = None
    is_active: Optional[bool] = None

    @field_validator("title", "content", "type", "priority", "target_audience", "is_active")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)

    @field_validator("expires_at")
    @classmethod
    def check_expires_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _must_be_future(value)


class AnnouncementRead(CamelModel):
    id: uuid.UUID
    school_id: uuid.UUID
    author_id: Optional[uuid.UUID] = None
    title: str
    content: str
    type: notice_models.AnnouncementType
    priority: RequestPriority
    target_audience: List[str] = Field(default_factory=list)
    expires_at: Optional[datetime] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
