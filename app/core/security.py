# app/core/security.py

"""
애플리케이션의 보안 관련 유틸리티 함수를 정의하는 모듈입니다.

- 비밀번호 해싱 및 검증 (passlib bcrypt).
- 세션 토큰 (access/refresh) 발급 및 검증.
- 목적(purpose)이 박힌 일회용 토큰 (이메일 인증, 비밀번호 재설정) 발급 및 검증.
- Authorization 헤더에서 Bearer 토큰 추출.

토큰 검증 실패는 만료(`TokenExpired`)와 그 외 모든 실패(`TokenInvalid`)로 구분됩니다.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext  # 비밀번호 해싱을 위한 라이브러리

from app.core.config import settings  # 애플리케이션 설정
from app.core.exceptions import TokenExpired, TokenInvalid, TokenPurposeMismatch

logger = logging.getLogger(__name__)


# --- 비밀번호 해싱 설정 ---
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def _verify_password_sync(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Malformed password hash encountered during verification")
        return False


async def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    일반 텍스트 비밀번호와 해싱된 비밀번호를 비교합니다.
    해시가 비어 있거나 형식이 잘못된 경우에도 예외 대신 False를 반환합니다.
    bcrypt 연산은 스레드풀에서 실행합니다.
    """
    return await run_in_threadpool(_verify_password_sync, plain_password, hashed_password)


async def get_password_hash(password: str) -> str:
    return await run_in_threadpool(pwd_context.hash, password)


# --- 토큰 종류 ---
class TokenPurpose(str, enum.Enum):
    """일회용 토큰의 목적 구분자. 페이로드의 'type' 클레임에 저장됩니다."""
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"


@dataclass(frozen=True)
class SessionTokens:
    access_token: str
    refresh_token: str


# --- 내부 헬퍼 ---
def _encode(claims: Dict[str, Any], secret: str, expires_delta: timedelta) -> str:
    to_encode = claims.copy()
    now = datetime.now(timezone.utc)
    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, secret, algorithm=settings.ALGORITHM)


def _decode(token: str, secret: str) -> Dict[str, Any]:
    """
    토큰 서명과 만료를 검증합니다.
    만료는 TokenExpired, 나머지(서명 불일치, 형식 오류 등)는 TokenInvalid로 변환합니다.
    """
    try:
        return jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError as e:
        logger.debug("JWT decode failed: %s", e)
        raise TokenInvalid()


def _access_secret() -> str:
    return settings.JWT_SECRET.get_secret_value()


def _refresh_secret() -> str:
    return settings.JWT_REFRESH_SECRET.get_secret_value()


# --- 세션 토큰 ---
def create_access_token(claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Access Token을 생성합니다. claims: {userId, email, role, schoolId}
    """
    expires = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(claims, _access_secret(), expires)


def create_refresh_token(claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Refresh Token을 생성합니다. claims: {userId, email}
    Access Token과 다른 비밀 키로 서명합니다.
    """
    expires = expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode(claims, _refresh_secret(), expires)


def create_session_tokens(user: Any) -> SessionTokens:
    """사용자 객체(id, email, role, school_id 보유)로 access/refresh 토큰 쌍을 발급합니다."""
    role = getattr(user.role, "value", user.role)
    access_token = create_access_token({
        "userId": str(user.id),
        "email": user.email,
        "role": role,
        "schoolId": str(user.school_id) if user.school_id else None,
    })
    refresh_token = create_refresh_token({"userId": str(user.id), "email": user.email})
    return SessionTokens(access_token=access_token, refresh_token=refresh_token)


def verify_access_token(token: str) -> Dict[str, Any]:
    payload = _decode(token, _access_secret())
    if "userId" not in payload or "type" in payload:
        # 일회용 토큰은 세션 토큰으로 사용할 수 없습니다.
        raise TokenInvalid()
    return payload


def verify_refresh_token(token: str) -> Dict[str, Any]:
    payload = _decode(token, _refresh_secret())
    if "userId" not in payload:
        raise TokenInvalid()
    return {"userId": payload["userId"], "email": payload.get("email")}


# --- 일회용 토큰 ---
def create_single_use_token(
    purpose: TokenPurpose,
    claims: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    목적 구분자(type)를 포함한 일회용 토큰을 발급합니다.
    기본 만료: 이메일 인증 24시간, 비밀번호 재설정 1시간.
    """
    if expires_delta is None:
        if purpose is TokenPurpose.EMAIL_VERIFICATION:
            expires_delta = timedelta(hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS)
        else:
            expires_delta = timedelta(hours=settings.PASSWORD_RESET_EXPIRE_HOURS)
    return _encode({**claims, "type": purpose.value}, _access_secret(), expires_delta)


def verify_single_use_token(purpose: TokenPurpose, token: str) -> Dict[str, Any]:
    """
    일회용 토큰을 검증합니다. 서명/만료가 유효해도 목적이 다르면 TokenPurposeMismatch를 발생시킵니다.
    """
    payload = _decode(token, _access_secret())
    if payload.get("type") != purpose.value:
        raise TokenPurposeMismatch()
    return payload


# --- Authorization 헤더 ---
def extract_bearer(header_value: Optional[str]) -> Optional[str]:
    """
    "Bearer <token>" 형식(공백으로 정확히 두 부분)일 때만 토큰을 반환합니다.
    """
    if not header_value:
        return None
    parts = header_value.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]
