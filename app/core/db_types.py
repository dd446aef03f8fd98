# app/core/db_types.py

"""
여러 도메인 모델이 공유하는 컬럼 타입과 시간 헬퍼입니다.
"""

from datetime import datetime, UTC

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

# PostgreSQL에서는 JSONB, 그 외(테스트용 SQLite 등)에서는 JSON으로 매핑됩니다.
JSONVariant = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(UTC)
