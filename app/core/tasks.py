# app/core/tasks.py

"""
ARQ 워커가 주기적으로 실행하는 유지보수 태스크 모듈입니다.

- health_check_database_task: 데이터베이스 연결 확인
- deactivate_expired_announcements_task: 만료된 공지 게시 중단
- clear_expired_reset_tokens_task: 만료된 비밀번호 재설정 토큰 정리
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from app.core.database import get_async_session_context
from app.domains.notice import crud as notice_crud
from app.domains.usr import crud as usr_crud

logger = logging.getLogger(__name__)


async def health_check_database_task(ctx):
    """
    ARQ 워커에 의해 실행될 주기적인 데이터베이스 헬스 체크 태스크.
    데이터베이스 연결 상태를 확인하고 로그를 남깁니다.
    """
    logger.info("ARQ task: database health check")
    try:
        async with get_async_session_context() as db:
            result = await db.execute(select(1))
            if result.scalar_one_or_none() == 1:
                logger.info("Database health check succeeded")
                return {"status": "success", "message": "Database connection successful."}
            error_msg = "Database health check failed: No result from test query."
            logger.error(error_msg)
            return {"status": "failed", "message": error_msg}
    except (SQLAlchemyError, OSError) as e:
        logger.error("Database health check failed: %s", e)
        return {"status": "failed", "message": f"Database connection error: {e}"}


async def deactivate_expired_announcements_task(ctx):
    """expiresAt이 지난 공지를 게시 중단 상태로 바꿉니다."""
    async with get_async_session_context() as db:
        count = await notice_crud.announcement.deactivate_expired(db)
    logger.info("Deactivated %d expired announcement(s)", count)
    return {"status": "success", "deactivated": count}


async def clear_expired_reset_tokens_task(ctx):
    """만료된 비밀번호 재설정 토큰을 지웁니다."""
    async with get_async_session_context() as db:
        count = await usr_crud.user.clear_expired_reset_tokens(db)
    logger.info("Cleared %d expired password reset token(s)", count)
    return {"status": "success", "cleared": count}
