# app/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLModel의 비동기 엔진(크기 제한이 있는 커넥션 풀)을 설정합니다.
- 요청 단위 비동기 세션 의존성과 백그라운드 작업용 세션 컨텍스트를 제공합니다.
- 개발 환경에서 스키마와 테이블을 생성하는 함수를 포함합니다.
"""

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlalchemy import text

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings

# 모든 SQLModel 클래스가 SQLModel.metadata에 등록되도록 도메인 모델을 임포트합니다.
from app.domains import models  # noqa: F401

logger = logging.getLogger(__name__)

# 도메인별 PostgreSQL 스키마 목록 (migrations/env.py와 테스트에서도 사용)
SCHEMA = ["usr", "school", "climate", "maint", "notice"]


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL.get_secret_value(),
    echo=settings.DEBUG_MODE,  # 디버그 모드일 때만 SQL 쿼리 출력
    future=True,
    pool_pre_ping=True,
    pool_recycle=3600,  # 1시간마다 연결 재활용
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_timeout=settings.DB_POOL_TIMEOUT,  # 풀이 가득 찼을 때 대기할 최대 시간(초)
)

# 비동기 세션을 생성하는 '세션 공장'을 정의합니다.
AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# =============================================================================
# 데이터베이스 초기화 및 테이블 생성 함수
# =============================================================================
async def create_db_and_tables() -> None:
    """
    데이터베이스 스키마 및 테이블을 생성합니다.
    개발 환경 전용이며, 기존 테이블을 삭제하지는 않습니다. 운영 환경은 Alembic을 사용합니다.
    """
    async with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            for schema_name in SCHEMA:
                await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema_name}"))
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database schemas and tables are ready")


# =============================================================================
# 비동기 데이터베이스 세션 의존성 주입
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    요청마다 새로운 세션을 생성하고, 어떤 경로로 끝나든 세션을 닫아 커넥션을 풀로 돌려보냅니다.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    ARQ Task 등 요청 밖의 비동기 컨텍스트에서 사용할
    독립적인 비동기 DB 세션을 제공하는 컨텍스트 관리자입니다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
