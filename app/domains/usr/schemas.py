# app/domains/usr/schemas.py

"""
'usr' 도메인 (사용자 계정 및 인증)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
JSON 키는 camelCase로 주고받습니다.
"""

import uuid
from typing import Annotated, Any, Dict, Optional
from datetime import datetime
from pydantic import AfterValidator, EmailStr, Field, field_validator

from app.core.responses import CamelModel, reject_null
from . import models as usr_models

HHMM_PATTERN = r"^([01]?\d|2[0-3]):[0-5]\d$"


def _lower_email(value: str) -> str:
    return value.strip().lower()


# 이메일은 대소문자를 구분하지 않으므로 항상 소문자로 정규화합니다.
LowerEmail = Annotated[EmailStr, AfterValidator(_lower_email)]


# =============================================================================
# 1. 환경설정 (Preferences) 스키마
# =============================================================================
class PreferencesUpdate(CamelModel):
    """환경설정 부분 수정. 넘어온 키만 기존 값 위에 덮어씁니다."""
    quiet_hours_start: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    quiet_hours_end: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    temperature_preference: Optional[float] = Field(None, ge=65, le=80)
    notifications_enabled: Optional[bool] = None
    biometric_enabled: Optional[bool] = None


# =============================================================================
# 2. 사용자 (User) 스키마
# =============================================================================
class UserProfileUpdate(CamelModel):
    """프로필 수정 스키마. 이 필드들 외에는 수정할 수 없습니다."""
    full_name: Optional[str] = Field(None, min_length=2, max_length=255)
    room_number: Optional[str] = Field(None, max_length=20)
    profile_photo_url: Optional[str] = Field(None, max_length=500)
    year: Optional[str] = Field(None, max_length=20)
    emergency_contact: Optional[str] = Field(None, max_length=255)
    preferences: Optional[PreferencesUpdate] = None

    @field_validator("full_name", "preferences")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class UserRead(CamelModel):
    """
    사용자 정보 조회 스키마.
    비밀번호 해시, 인증/재설정 토큰 등 민감한 정보는 제외됩니다.
    """
    id: uuid.UUID
    email: str
    full_name: str
    room_number: Optional[str] = None
    profile_photo_url: Optional[str] = None
    year: Optional[str] = None
    emergency_contact: Optional[str] = None
    school_id: Optional[uuid.UUID] = None
    role: usr_models.UserRole
    preferences: Dict[str, Any] = Field(default_factory=dict)
    is_verified: bool
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# 3. 인증 (Auth) 요청 스키마
# =============================================================================
class RegisterRequest(CamelModel):
    email: LowerEmail
    password: str = Field(..., min_length=8)
    full_name: str = Field(..., min_length=2, max_length=255)
    school_id: uuid.UUID
    room_number: Optional[str] = Field(None, max_length=20)
    year: Optional[str] = Field(None, max_length=20)


class LoginRequest(CamelModel):
    email: LowerEmail
    password: str = Field(..., min_length=1)


class VerifyEmailRequest(CamelModel):
    token: str = Field(..., min_length=1)


class ForgotPasswordRequest(CamelModel):
    email: LowerEmail


class ResetPasswordRequest(CamelModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8)


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


# =============================================================================
# 4. 인증 (Auth) 응답 스키마
# =============================================================================
class TokenPair(CamelModel):
    token: str
    refresh_token: str


class AuthResult(TokenPair):
    """로그인/이메일 인증 성공 시 사용자와 토큰 쌍을 함께 반환합니다."""
    user: UserRead


class RegisterResult(CamelModel):
    user: UserRead
    verification_required: bool


class ProfileResult(CamelModel):
    user: UserRead
