# app/domains/school/schemas.py

"""
'school' 도메인의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

import uuid
from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import Field, field_validator

from app.core.responses import CamelModel, reject_null


class SchoolCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=255)
    address: Optional[str] = None
    logo_url: Optional[str] = Field(None, max_length=500)
    timezone: str = Field("UTC", max_length=50)
    settings: Dict[str, Any] = Field(default_factory=dict)


class SchoolUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    address: Optional[str] = None
    logo_url: Optional[str] = Field(None, max_length=500)
    timezone: Optional[str] = Field(None, max_length=50)
    settings: Optional[Dict[str, Any]] = None

    @field_validator("name", "timezone", "settings")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class SchoolSummary(CamelModel):
    """공개 학교 목록 항목 (가입 화면의 학교 선택용)"""
    id: uuid.UUID
    name: str
    address: Optional[str] = None
    logo_url: Optional[str] = None


class SchoolRead(SchoolSummary):
    timezone: str
    settings: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SchoolStats(CamelModel):
    total_users: int
    total_requests: int
    active_requests: int
    average_temperature_vote: float
