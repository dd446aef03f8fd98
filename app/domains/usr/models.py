# app/domains/usr/models.py

"""
'usr' 도메인 (PostgreSQL 'usr' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 기숙사 거주 학생, 직원, 관리자 계정을 담는 users 테이블의 SQLModel 클래스를 포함합니다.
계정은 물리 삭제하지 않고 is_active 플래그로 비활성화합니다.
"""

import enum
import uuid
from typing import Any, Dict, Optional
from datetime import datetime
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from app.core.db_types import JSONVariant, utcnow


class UserRole(str, enum.Enum):
    """
    사용자 역할을 정의하는 문자열 Enum 클래스입니다.
    DB에는 문자열 값으로 저장됩니다.
    """
    STUDENT = "student"
    STAFF = "staff"
    ADMIN = "admin"


def default_preferences() -> Dict[str, Any]:
    """신규 사용자에게 부여되는 기본 환경설정 값"""
    return {
        "quietHoursStart": "22:00",
        "quietHoursEnd": "08:00",
        "temperaturePreference": 72,
        "notificationsEnabled": True,
        "biometricEnabled": False,
    }


# =============================================================================
# 1. usr.users 테이블 모델
# =============================================================================
class User(SQLModel, table=True):
    """
    PostgreSQL의 usr.users 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    email은 항상 소문자로 저장됩니다.
    """
    __tablename__ = "users"
    __table_args__ = {'schema': 'usr'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="사용자 고유 ID")
    email: str = Field(max_length=255, sa_column_kwargs={"unique": True}, index=True, description="로그인 이메일 (소문자)")
    password_hash: str = Field(max_length=255, description="해싱된 비밀번호")
    full_name: str = Field(max_length=255, description="사용자 이름")
    room_number: Optional[str] = Field(default=None, max_length=20, description="기숙사 호실")
    profile_photo_url: Optional[str] = Field(default=None, max_length=500, description="프로필 사진 URL")
    year: Optional[str] = Field(default=None, max_length=20, description="학년 (예: Freshman)")
    emergency_contact: Optional[str] = Field(default=None, max_length=255, description="비상 연락처")
    school_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid, ForeignKey("school.schools.id", onupdate="CASCADE", ondelete="RESTRICT"), index=True),
        description="소속 학교 ID (FK)"
    )
    role: UserRole = Field(
        default=UserRole.STUDENT,
        sa_column=Column(String(20), nullable=False, server_default=UserRole.STUDENT.value),
        description="사용자 역할 (권한)"
    )
    preferences: Dict[str, Any] = Field(default_factory=default_preferences, sa_column=Column(JSONVariant), description="사용자 환경설정")
    is_verified: bool = Field(default=False, description="이메일 인증 여부")
    is_active: bool = Field(default=True, description="계정 활성 여부")

    verification_token: Optional[str] = Field(default=None, max_length=1024, description="이메일 인증 토큰")
    reset_token: Optional[str] = Field(default=None, max_length=1024, description="비밀번호 재설정 토큰")
    reset_token_expires: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True)),
        description="비밀번호 재설정 토큰 만료 일시"
    )
    last_login: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True)),
        description="마지막 로그인 일시"
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
