# app/domains/maint/schemas.py

"""
'maint' 도메인 (시설 요청)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

import uuid
from typing import List, Optional
from datetime import datetime
from pydantic import Field, field_validator

from app.core.responses import CamelModel, reject_null
from . import models as maint_models


class RequestCreate(CamelModel):
    category: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=5, max_length=255)
    description: str = Field(..., min_length=10, max_length=2000)
    priority: maint_models.RequestPriority = maint_models.RequestPriority.MEDIUM
    is_anonymous: bool = False
    photos: List[str] = Field(default_factory=list, max_length=5)


class RequestUpdate(CamelModel):
    """직원/관리자의 처리 상태 변경. 상태 전이 순서는 강제하지 않습니다."""
    status: Optional[maint_models.RequestStatus] = None
    assigned_to: Optional[uuid.UUID] = None

    @field_validator("status")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class RequestRead(CamelModel):
    id: uuid.UUID
    school_id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    author_name: Optional[str] = None
    category: str
    title: str
    description: str
    priority: maint_models.RequestPriority
    status: maint_models.RequestStatus
    is_anonymous: bool
    photos: List[str] = Field(default_factory=list)
    upvotes: int
    assigned_to: Optional[uuid.UUID] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RequestPage(CamelModel):
    items: List[RequestRead]
    page: int
    limit: int
    total: int
