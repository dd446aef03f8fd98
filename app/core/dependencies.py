# app/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session).
- Bearer 토큰으로 현재 사용자 식별 (get_current_user, get_optional_user).
- 역할(role) 및 이메일 인증 여부 기반 접근 제어 (require_role, require_verification).

요청 처리 순서: 토큰 추출 → 토큰 검증 → 사용자 조회 → 권한 확인.
어느 단계에서든 실패하면 그 즉시 오류 응답으로 끝납니다.
"""

import logging
import uuid
from typing import AsyncGenerator, Callable, Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import get_session as get_main_app_session
from app.core.exceptions import AuthenticationFailed, PermissionDenied
from app.core.security import extract_bearer, verify_access_token
from app.domains.usr.models import User, UserRole
from app.domains.usr.schemas import UserRead

logger = logging.getLogger(__name__)

# "Authorization: Bearer <token>" 헤더. 형식 검사는 extract_bearer가 직접 수행합니다.
bearer_header = APIKeyHeader(name="Authorization", auto_error=False, description="Bearer <access token>")


# --- 데이터베이스 세션 의존성 주입 ---
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    app.core.database.get_session을 래핑하여 사용합니다.
    """
    async for session in get_main_app_session():
        yield session


# --- 인증 ---
async def _resolve_user(db: AsyncSession, authorization: Optional[str]) -> User:
    token = extract_bearer(authorization)
    if not token:
        raise AuthenticationFailed("Authentication required")

    try:
        payload = verify_access_token(token)
        user_id = uuid.UUID(str(payload["userId"]))
    except (AuthenticationFailed, KeyError, ValueError) as e:
        logger.info("Access token rejected: %s", getattr(e, "message", type(e).__name__))
        raise AuthenticationFailed("Invalid or expired token")

    user = await db.get(User, user_id)
    if user is None:
        raise AuthenticationFailed("User not found")
    if not user.is_active:
        raise AuthenticationFailed("Account deactivated")
    return user


async def get_current_user(
    authorization: Optional[str] = Depends(bearer_header),
    db: AsyncSession = Depends(get_db_session),
) -> UserRead:
    """
    Bearer 토큰으로 활성 사용자를 식별합니다.
    비밀번호 해시와 토큰 값이 제거된 UserRead를 반환합니다.
    """
    user = await _resolve_user(db, authorization)
    return UserRead.model_validate(user)


async def get_optional_user(
    authorization: Optional[str] = Depends(bearer_header),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[UserRead]:
    """get_current_user와 같지만 실패하지 않습니다. 식별에 실패하면 None."""
    try:
        user = await _resolve_user(db, authorization)
    except AuthenticationFailed:
        return None
    return UserRead.model_validate(user)


# --- 인가 ---
def require_role(*roles: UserRole) -> Callable:
    """
    지정한 역할 중 하나를 가진 사용자만 통과시키는 의존성을 만듭니다.

    사용 예:
        current_user: UserRead = Depends(deps.require_role(UserRole.ADMIN, UserRole.STAFF))
    """
    allowed = {UserRole(role) for role in roles}

    async def _checker(current_user: UserRead = Depends(get_current_user)) -> UserRead:
        if current_user.role not in allowed:
            logger.info("Role %s denied (allowed: %s)", current_user.role.value, sorted(r.value for r in allowed))
            raise PermissionDenied()
        return current_user

    return _checker


async def require_verification(current_user: UserRead = Depends(get_current_user)) -> UserRead:
    """이메일 인증을 마친 사용자만 통과시킵니다."""
    if not current_user.is_verified:
        raise PermissionDenied("Email verification required")
    return current_user
