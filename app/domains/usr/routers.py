# app/domains/usr/routers.py

"""
'usr' 도메인 (계정 및 인증)과 관련된 API 엔드포인트를 정의하는 모듈입니다.

- /auth/*  : 가입, 로그인, 이메일 인증, 비밀번호 재설정, 토큰 갱신
- /users/* : 프로필 조회/수정, 학교 사용자 목록, 계정 비활성화
"""

import logging
import uuid
from typing import List
from datetime import timedelta

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core import dependencies as deps
from app.core.db_types import utcnow
from app.core.exceptions import AuthenticationFailed, NotFound, ValidationFailed
from app.core.responses import ApiResponse, ok
from app.core.security import (
    TokenPurpose,
    create_session_tokens,
    create_single_use_token,
    verify_refresh_token,
    verify_single_use_token,
)
from app.domains.school import crud as school_crud

from . import crud as usr_crud
from . import models as usr_models
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a password reset link has been sent."


# 라우터 인스턴스 생성 (prefix는 main.py에서 관리)
router = APIRouter(
    tags=["Auth & Users (인증 및 사용자)"],
    responses={404: {"description": "Not found"}},
)


def _auth_result(user: usr_models.User) -> usr_schemas.AuthResult:
    tokens = create_session_tokens(user)
    return usr_schemas.AuthResult(
        user=usr_schemas.UserRead.model_validate(user),
        token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


# =============================================================================
# 1. 인증 (Authentication) 엔드포인트
# =============================================================================
@router.post(
    "/auth/register",
    response_model=ApiResponse[usr_schemas.RegisterResult],
    status_code=status.HTTP_201_CREATED,
    summary="회원 가입",
)
async def register(
    register_in: usr_schemas.RegisterRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    학교를 지정해 학생 계정을 만듭니다.
    AUTO_VERIFY_EMAIL이 꺼져 있으면 인증 토큰만 발급하고 verificationRequired=true를 반환합니다.
    """
    if await school_crud.school.get(db, register_in.school_id) is None:
        raise ValidationFailed("Invalid school")

    user = await usr_crud.user.create(db, obj_in=register_in)

    verification_token = create_single_use_token(TokenPurpose.EMAIL_VERIFICATION, {"email": user.email})
    await usr_crud.user.set_verification_token(db, email=user.email, token=verification_token)

    if settings.AUTO_VERIFY_EMAIL:
        user = await usr_crud.user.verify_email(db, token=verification_token)
        message = "Registration successful. Your account is ready to use."
    else:
        # 메일 발송은 외부 시스템 몫이므로 개발 환경에서 확인할 수 있도록 디버그 로그로만 남깁니다.
        logger.debug("Email verification token for user %s: %s", user.id, verification_token)
        message = "Registration successful. Please verify your email."

    logger.info("User registered: %s (school=%s)", user.id, user.school_id)
    result = usr_schemas.RegisterResult(
        user=usr_schemas.UserRead.model_validate(user),
        verification_required=not user.is_verified,
    )
    return ok(result, message)


@router.post("/auth/login", response_model=ApiResponse[usr_schemas.AuthResult], summary="로그인")
async def login(
    login_in: usr_schemas.LoginRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    user = await usr_crud.user.authenticate(db, email=login_in.email, password=login_in.password)
    if not user:
        # 비활성 계정은 비밀번호가 맞을 때만 따로 알려줍니다.
        inactive = await usr_crud.user.get_by_attribute(db, attribute="email", value=login_in.email)
        if inactive is not None and not inactive.is_active and await usr_crud.user.verify_password(inactive, login_in.password):
            logger.info("Login rejected for deactivated account %s", inactive.id)
            raise AuthenticationFailed("Account deactivated")
        logger.info("Failed login attempt for %s", login_in.email)
        raise AuthenticationFailed("Invalid credentials")

    result = _auth_result(user)
    await usr_crud.user.update_last_login(db, user_id=user.id)
    logger.info("User logged in: %s", user.id)
    return ok(result, "Login successful")


@router.post("/auth/verify-email", response_model=ApiResponse[usr_schemas.AuthResult], summary="이메일 인증")
async def verify_email(
    verify_in: usr_schemas.VerifyEmailRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    try:
        verify_single_use_token(TokenPurpose.EMAIL_VERIFICATION, verify_in.token)
    except AuthenticationFailed as e:
        logger.info("Email verification token rejected: %s", e.message)
        raise ValidationFailed("Invalid or expired verification token")

    user = await usr_crud.user.verify_email(db, token=verify_in.token)
    if not user:
        raise ValidationFailed("Invalid or expired verification token")

    logger.info("Email verified: %s", user.id)
    return ok(_auth_result(user), "Email verified successfully")


@router.post("/auth/forgot-password", response_model=ApiResponse, summary="비밀번호 재설정 요청")
async def forgot_password(
    forgot_in: usr_schemas.ForgotPasswordRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """계정 존재 여부와 관계없이 항상 같은 응답을 돌려줍니다."""
    user = await usr_crud.user.get_by_email(db, email=forgot_in.email)
    if user:
        reset_token = create_single_use_token(
            TokenPurpose.PASSWORD_RESET, {"userId": str(user.id), "email": user.email}
        )
        expires = utcnow() + timedelta(hours=settings.PASSWORD_RESET_EXPIRE_HOURS)
        await usr_crud.user.set_reset_token(db, email=user.email, token=reset_token, expires=expires)
        logger.info("Password reset token issued for user %s", user.id)
        logger.debug("Password reset token for user %s: %s", user.id, reset_token)
    return ok(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/auth/reset-password", response_model=ApiResponse, summary="비밀번호 재설정")
async def reset_password(
    reset_in: usr_schemas.ResetPasswordRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    try:
        verify_single_use_token(TokenPurpose.PASSWORD_RESET, reset_in.token)
    except AuthenticationFailed as e:
        logger.info("Password reset token rejected: %s", e.message)
        raise ValidationFailed("Invalid or expired reset token")

    user = await usr_crud.user.reset_password(db, token=reset_in.token, new_password=reset_in.password)
    if not user:
        raise ValidationFailed("Invalid or expired reset token")
    return ok(message="Password reset successfully")


@router.post("/auth/refresh-token", response_model=ApiResponse[usr_schemas.TokenPair], summary="토큰 갱신")
async def refresh_token(
    refresh_in: usr_schemas.RefreshTokenRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    try:
        claims = verify_refresh_token(refresh_in.refresh_token)
        user_id = uuid.UUID(str(claims["userId"]))
    except (AuthenticationFailed, ValueError):
        raise AuthenticationFailed("Invalid or expired refresh token")

    user = await usr_crud.user.get_active(db, id=user_id)
    if not user:
        raise AuthenticationFailed("Invalid refresh token")

    tokens = create_session_tokens(user)
    return ok(
        usr_schemas.TokenPair(token=tokens.access_token, refresh_token=tokens.refresh_token),
        "Token refreshed successfully",
    )


@router.post("/auth/logout", response_model=ApiResponse, summary="로그아웃")
async def logout(current_user: usr_schemas.UserRead = Depends(deps.get_current_user)):
    """토큰은 서버에 저장되지 않으므로 클라이언트가 버리는 것으로 끝납니다."""
    logger.info("User logged out: %s", current_user.id)
    return ok(message="Logged out successfully")


@router.get("/auth/profile", response_model=ApiResponse[usr_schemas.ProfileResult], summary="현재 사용자 정보 조회")
async def read_auth_profile(current_user: usr_schemas.UserRead = Depends(deps.get_current_user)):
    return ok(usr_schemas.ProfileResult(user=current_user))


# =============================================================================
# 2. 사용자 (User) 엔드포인트
# =============================================================================
@router.get("/users/profile", response_model=ApiResponse[usr_schemas.ProfileResult], summary="내 프로필 조회")
async def read_profile(current_user: usr_schemas.UserRead = Depends(deps.get_current_user)):
    return ok(usr_schemas.ProfileResult(user=current_user))


@router.put("/users/profile", response_model=ApiResponse[usr_schemas.ProfileResult], summary="내 프로필 수정")
async def update_profile(
    profile_in: usr_schemas.UserProfileUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_schemas.UserRead = Depends(deps.get_current_user),
):
    db_user = await usr_crud.user.get_active(db, id=current_user.id)
    if db_user is None:
        raise NotFound("User not found")
    updated = await usr_crud.user.update_profile(db, db_obj=db_user, obj_in=profile_in)
    return ok(usr_schemas.ProfileResult(user=usr_schemas.UserRead.model_validate(updated)), "Profile updated successfully")


@router.get("/users", response_model=ApiResponse[List[usr_schemas.UserRead]], summary="학교 사용자 목록 (직원/관리자)")
async def read_school_users(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_schemas.UserRead = Depends(deps.require_role(usr_models.UserRole.ADMIN, usr_models.UserRole.STAFF)),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    if current_user.school_id is None:
        return ok([])
    users = await usr_crud.user.get_multi_by_school(db, school_id=current_user.school_id, skip=skip, limit=limit)
    return ok([usr_schemas.UserRead.model_validate(u) for u in users])


@router.delete("/users/{user_id}", response_model=ApiResponse[usr_schemas.ProfileResult], summary="계정 비활성화 (관리자)")
async def deactivate_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_schemas.UserRead = Depends(deps.require_role(usr_models.UserRole.ADMIN)),
):
    if user_id == current_user.id:
        raise ValidationFailed("Cannot deactivate your own account")
    db_user = await usr_crud.user.get_active(db, id=user_id)
    if db_user is None:
        raise NotFound("User not found")
    updated = await usr_crud.user.deactivate(db, db_obj=db_user)
    return ok(usr_schemas.ProfileResult(user=usr_schemas.UserRead.model_validate(updated)), "User deactivated")
