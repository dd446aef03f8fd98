# migrations/env.py

import os
import sys
import asyncio
import logging
from logging.config import fileConfig

from alembic import context

from sqlalchemy import pool, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

# --- 1. 프로젝트 루트 경로 설정 ---
# env.py가 어디에서 실행되든 'app' 모듈을 찾을 수 있게 합니다.
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# --- 2. 애플리케이션의 핵심 설정 및 모든 모델 임포트 ---
# app.core.database가 app.domains.models를 임포트하므로 모든 테이블이 metadata에 등록됩니다.
from app.core.config import settings        # noqa: E402
from app.core.database import SCHEMA        # noqa: E402

# --- 3. Alembic 기본 설정 ---
config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

target_metadata = SQLModel.metadata

if config.get_main_option("sqlalchemy.url") is None:
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL.get_secret_value())


def include_object(object, name, type_, reflected, compare_to):
    if type_ == "table" and name == "alembic_version":
        return False
    return True


def do_run_migrations(connection) -> None:
    """
    Alembic 컨텍스트를 데이터베이스 연결로 구성하고 마이그레이션을 실행합니다.
    """
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        include_schemas=True,  # 도메인별 스키마(usr, school, climate, maint, notice)
        version_table_schema='public',
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    """'오프라인' 모드: DB 연결 없이 SQL 스크립트를 생성합니다."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        include_schemas=True,
        version_table_schema='public',
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """'온라인' 모드: 실제 데이터베이스에 연결하여 마이그레이션을 실행합니다."""
    engine: AsyncEngine = create_async_engine(
        settings.DATABASE_URL.get_secret_value(),
        echo=settings.DEBUG_MODE,
        future=True,
        poolclass=pool.NullPool,  # 마이그레이션 시에는 풀을 사용하지 않아 즉시 연결/해제
    )

    # --- 1단계: 스키마 생성 전용 연결 ---
    async with engine.connect() as connection:
        async with connection.begin():
            for schema_name in SCHEMA:
                await connection.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema_name}"))
        logger.info("Schemas ensured: %s", ", ".join(SCHEMA))

    # --- 2단계: Alembic 마이그레이션 전용 연결 ---
    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await engine.dispose()
    logger.info("Alembic migrations finished")


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
