# tests/test_tasks.py

"""
ARQ 워커 태스크(app.core.tasks)와 워커 설정에 대한 테스트입니다.
태스크가 여는 세션은 테스트 세션으로 바꿔 끼웁니다.
"""

from contextlib import asynccontextmanager
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import tasks as core_tasks
from app.core.db_types import utcnow
from app.domains.notice import models as notice_models
from app.domains.school.models import School
from app.domains.usr import crud as usr_crud
from app.domains.usr import models as usr_models
from app.main import ArqWorkerSettings, worker_functions


@pytest.fixture
def task_session(db_session: AsyncSession, monkeypatch):
    @asynccontextmanager
    async def _context():
        yield db_session

    monkeypatch.setattr(core_tasks, "get_async_session_context", _context)
    return db_session


@pytest.mark.asyncio
async def test_health_check_task_success(task_session: AsyncSession):
    result = await core_tasks.health_check_database_task({})
    assert result["status"] == "success"


@pytest.mark.asyncio
async def test_health_check_task_reports_connection_error(monkeypatch):
    @asynccontextmanager
    async def _broken():
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))
        yield  # pragma: no cover

    monkeypatch.setattr(core_tasks, "get_async_session_context", _broken)
    result = await core_tasks.health_check_database_task({})
    assert result["status"] == "failed"
    assert "Database connection error" in result["message"]


@pytest.mark.asyncio
async def test_deactivate_expired_announcements_task(task_session: AsyncSession, test_school: School):
    task_session.add_all([
        notice_models.Announcement(school_id=test_school.id, title="Expired notice", content="Should be hidden now.",
                                   expires_at=utcnow() - timedelta(hours=1)),
        notice_models.Announcement(school_id=test_school.id, title="Running notice", content="Still on the board."),
    ])
    await task_session.commit()

    result = await core_tasks.deactivate_expired_announcements_task({})
    assert result == {"status": "success", "deactivated": 1}


@pytest.mark.asyncio
async def test_clear_expired_reset_tokens_task(task_session: AsyncSession, test_user: usr_models.User):
    await usr_crud.user.set_reset_token(
        task_session, email=test_user.email, token="stale-token", expires=utcnow() - timedelta(minutes=1)
    )

    result = await core_tasks.clear_expired_reset_tokens_task({})
    assert result == {"status": "success", "cleared": 1}

    await task_session.refresh(test_user)
    assert test_user.reset_token is None
    assert test_user.reset_token_expires is None


def test_worker_settings_register_all_tasks():
    assert set(ArqWorkerSettings.functions) == set(worker_functions)
    scheduled = {job.coroutine for job in ArqWorkerSettings.cron_jobs}
    assert scheduled == set(worker_functions)
