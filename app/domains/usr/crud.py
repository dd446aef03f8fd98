# app/domains/usr/crud.py

"""
'usr' 도메인의 CRUD 작업을 담당하는 모듈입니다.

- 비활성(is_active=False) 사용자는 이메일/ID 조회에서 제외됩니다.
- 이메일은 소문자로 정규화하여 저장/조회합니다.
- 인증 토큰과 재설정 토큰의 소모(consume)는 하나의 UPDATE 조건으로 처리합니다.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional
from datetime import datetime

from sqlalchemy import update as sa_update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.core.db_types import utcnow
from app.core.exceptions import DuplicateEmail, NoFieldsToUpdate
from app.core.security import get_password_hash, verify_password
from . import models as usr_models
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. usr.users 테이블 CRUD
# =============================================================================
class CRUDUser(CRUDBase[usr_models.User, usr_schemas.RegisterRequest, usr_schemas.UserProfileUpdate]):
    updatable_fields = (
        "full_name",
        "room_number",
        "profile_photo_url",
        "year",
        "emergency_contact",
        "preferences",
    )

    def __init__(self):
        super().__init__(model=usr_models.User)

    # --- 조회 ---
    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[usr_models.User]:
        """이메일로 활성 사용자를 조회합니다. 없으면 None을 반환합니다."""
        statement = select(self.model).where(
            self.model.email == email.strip().lower(),
            self.model.is_active == True,  # noqa: E712
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_active(self, db: AsyncSession, *, id: uuid.UUID) -> Optional[usr_models.User]:
        """ID로 활성 사용자를 조회합니다. 없거나 비활성이면 None을 반환합니다."""
        statement = select(self.model).where(self.model.id == id, self.model.is_active == True)  # noqa: E712
        result = await db.execute(statement)
        return result.scalars().first()

    async def email_exists(self, db: AsyncSession, *, email: str) -> bool:
        """비활성 계정까지 포함하여 이메일 사용 여부를 확인합니다."""
        result = await db.execute(select(self.model.id).where(self.model.email == email.strip().lower()))
        return result.first() is not None

    async def get_multi_by_school(
        self, db: AsyncSession, *, school_id: uuid.UUID, skip: int = 0, limit: int = 20
    ) -> List[usr_models.User]:
        """학교에 소속된 활성 사용자를 최근 가입순으로 조회합니다."""
        statement = (
            select(self.model)
            .where(self.model.school_id == school_id, self.model.is_active == True)  # noqa: E712
            .order_by(self.model.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    # --- 생성 ---
    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: usr_schemas.RegisterRequest,
        role: usr_models.UserRole = usr_models.UserRole.STUDENT,
        is_verified: bool = False,
    ) -> usr_models.User:
        """새로운 사용자를 생성하며 비밀번호를 해싱하고 이메일 중복을 검사합니다."""
        email = obj_in.email.strip().lower()
        if await self.email_exists(db, email=email):
            raise DuplicateEmail()

        db_user = usr_models.User(
            email=email,
            password_hash=await get_password_hash(obj_in.password),
            full_name=obj_in.full_name,
            room_number=obj_in.room_number,
            year=obj_in.year,
            school_id=obj_in.school_id,
            role=role,
            preferences=usr_models.default_preferences(),
            is_verified=is_verified,
        )
        db.add(db_user)
        try:
            await db.commit()
        except IntegrityError:
            # 동시 가입으로 사전 검사를 통과한 경우 유일 제약 위반을 중복으로 처리합니다.
            await db.rollback()
            raise DuplicateEmail()
        await db.refresh(db_user)
        logger.info("User registered: %s (role=%s)", db_user.id, role.value)
        return db_user

    # --- 인증 ---
    async def verify_password(self, user: usr_models.User, candidate: str) -> bool:
        return await verify_password(candidate, user.password_hash)

    async def authenticate(self, db: AsyncSession, *, email: str, password: str) -> Optional[usr_models.User]:
        """이메일과 비밀번호로 활성 사용자를 인증합니다. 실패 시 None을 반환합니다."""
        user = await self.get_by_email(db, email=email)
        if not user:
            return None
        if not await self.verify_password(user, password):
            return None
        return user

    async def update_last_login(self, db: AsyncSession, *, user_id: uuid.UUID) -> None:
        """마지막 로그인 시각을 기록합니다. 실패해도 로그인 흐름을 막지 않습니다."""
        try:
            await db.execute(
                sa_update(self.model).where(self.model.id == user_id).values(last_login=utcnow())
            )
            await db.commit()
        except SQLAlchemyError:
            logger.exception("Failed to update last login for user %s", user_id)
            await db.rollback()

    # --- 프로필 수정 ---
    async def update_profile(
        self,
        db: AsyncSession,
        *,
        db_obj: usr_models.User,
        obj_in: usr_schemas.UserProfileUpdate,
    ) -> usr_models.User:
        """
        허용된 필드만 수정합니다. preferences는 기존 값 위에 넘어온 키만 덮어씁니다.
        """
        update_data: Dict[str, Any] = obj_in.model_dump(exclude_unset=True, exclude={"preferences"})
        if obj_in.preferences is not None:
            changes = obj_in.preferences.model_dump(exclude_unset=True, by_alias=True)
            if changes:
                update_data["preferences"] = {**(db_obj.preferences or {}), **changes}
        if not update_data:
            raise NoFieldsToUpdate()
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def deactivate(self, db: AsyncSession, *, db_obj: usr_models.User) -> usr_models.User:
        """사용자를 비활성화합니다 (소프트 삭제)."""
        db_obj.is_active = False
        db_obj.updated_at = utcnow()
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        logger.info("User deactivated: %s", db_obj.id)
        return db_obj

    # --- 이메일 인증 ---
    async def set_verification_token(self, db: AsyncSession, *, email: str, token: str) -> None:
        await db.execute(
            sa_update(self.model)
            .where(self.model.email == email.strip().lower())
            .values(verification_token=token, updated_at=utcnow())
        )
        await db.commit()

    async def verify_email(self, db: AsyncSession, *, token: str) -> Optional[usr_models.User]:
        """
        토큰을 가진 사용자를 인증 완료 상태로 바꾸고 토큰을 지웁니다.
        해당 토큰을 가진 사용자가 없으면(이미 사용되었거나 잘못된 토큰) None을 반환합니다.
        """
        result = await db.execute(
            select(self.model).where(self.model.verification_token == token, self.model.is_active == True)  # noqa: E712
        )
        user = result.scalars().first()
        if not user:
            return None
        user.is_verified = True
        user.verification_token = None
        user.updated_at = utcnow()
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    # --- 비밀번호 재설정 ---
    async def set_reset_token(self, db: AsyncSession, *, email: str, token: str, expires: datetime) -> None:
        await db.execute(
            sa_update(self.model)
            .where(self.model.email == email.strip().lower())
            .values(reset_token=token, reset_token_expires=expires, updated_at=utcnow())
        )
        await db.commit()

    async def reset_password(self, db: AsyncSession, *, token: str, new_password: str) -> Optional[usr_models.User]:
        """
        토큰이 일치하고 만료 전일 때만 비밀번호를 바꿉니다.
        성공하면 토큰과 만료 시각을 지우고, 만료/불일치면 None을 반환합니다.
        """
        statement = select(self.model).where(
            self.model.reset_token == token,
            self.model.reset_token_expires > utcnow(),
            self.model.is_active == True,  # noqa: E712
        )
        result = await db.execute(statement)
        user = result.scalars().first()
        if not user:
            return None
        user.password_hash = await get_password_hash(new_password)
        user.reset_token = None
        user.reset_token_expires = None
        user.updated_at = utcnow()
        db.add(user)
        await db.commit()
        await db.refresh(user)
        logger.info("Password reset for user %s", user.id)
        return user

    async def clear_expired_reset_tokens(self, db: AsyncSession) -> int:
        """만료된 재설정 토큰을 일괄 정리하고 정리된 행 수를 반환합니다."""
        result = await db.execute(
            sa_update(self.model)
            .where(self.model.reset_token.is_not(None), self.model.reset_token_expires <= utcnow())
            .values(reset_token=None, reset_token_expires=None)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount or 0


user = CRUDUser()
