# tests/domains/test_notice_n.py

"""
'notice' 도메인 (학교 공지) API 엔드포인트와 만료 처리에 대한 통합 테스트 모듈입니다.
"""

import uuid
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.db_types import utcnow
from app.domains.notice import crud as notice_crud
from app.domains.notice import models as notice_models
from app.domains.school.models import School
from app.domains.usr import models as usr_models


def _future(days: int = 7) -> str:
    return (utcnow() + timedelta(days=days)).isoformat()


async def _add_announcement(db: AsyncSession, school_id, title: str, **kwargs) -> notice_models.Announcement:
    db_announcement = notice_models.Announcement(
        school_id=school_id,
        title=title,
        content=kwargs.pop("content", "Details will be posted at the front desk."),
        **kwargs,
    )
    db.add(db_announcement)
    await db.commit()
    await db.refresh(db_announcement)
    return db_announcement


# =============================================================================
# 1. 공지 게시
# =============================================================================
@pytest.mark.asyncio
async def test_staff_creates_announcement(staff_client: AsyncClient, test_staff_user: usr_models.User):
    payload = {
        "title": "Fire drill on Friday",
        "content": "A fire drill will take place at 10am. Please follow the wardens.",
        "type": "emergency",
        "priority": "urgent",
        "targetAudience": ["all"],
        "expiresAt": _future(),
    }
    res = await staff_client.post("/api/announcements", json=payload)
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Announcement created successfully"
    data = body["data"]
    assert data["type"] == "emergency"
    assert data["priority"] == "urgent"
    assert data["targetAudience"] == ["all"]
    assert data["authorId"] == str(test_staff_user.id)
    assert data["isActive"] is True


@pytest.mark.asyncio
async def test_create_announcement_defaults(admin_client: AsyncClient):
    res = await admin_client.post(
        "/api/announcements",
        json={"title": "Laundry room reopened", "content": "The basement laundry room is open again."},
    )
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["type"] == "general"
    assert data["priority"] == "medium"
    assert data["expiresAt"] is None


@pytest.mark.asyncio
async def test_student_cannot_create_announcement(authorized_client: AsyncClient):
    res = await authorized_client.post(
        "/api/announcements",
        json={"title": "Party tonight", "content": "Everyone is invited to room 301."},
    )
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_create_announcement_with_past_expiry(staff_client: AsyncClient):
    res = await staff_client.post(
        "/api/announcements",
        json={
            "title": "Old news item",
            "content": "This should never have been posted.",
            "expiresAt": (utcnow() - timedelta(hours=1)).isoformat(),
        },
    )
    assert res.status_code == 400
    details = res.json()["details"]
    assert details[0]["field"] == "expiresAt"
    assert "expiresAt must be in the future" in details[0]["message"]


# =============================================================================
# 2. 공지 목록
# =============================================================================
@pytest.mark.asyncio
async def test_list_hides_inactive_expired_and_foreign(
    authorized_client: AsyncClient, db_session: AsyncSession, test_school: School, other_school: School
):
    await _add_announcement(db_session, test_school.id, "Visible forever")
    await _add_announcement(db_session, test_school.id, "Visible for now", expires_at=utcnow() + timedelta(days=1))
    await _add_announcement(db_session, test_school.id, "Already expired", expires_at=utcnow() - timedelta(days=1))
    await _add_announcement(db_session, test_school.id, "Taken down", is_active=False)
    await _add_announcement(db_session, other_school.id, "Birch only")

    res = await authorized_client.get("/api/announcements")
    assert res.status_code == 200
    assert [a["title"] for a in res.json()["data"]] == ["Visible for now", "Visible forever"]


@pytest.mark.asyncio
async def test_list_requires_authentication(client: AsyncClient):
    res = await client.get("/api/announcements")
    assert res.status_code == 401


# =============================================================================
# 3. 수정 / 내리기
# =============================================================================
@pytest.mark.asyncio
async def test_update_announcement(staff_client: AsyncClient, db_session: AsyncSession, test_school: School):
    db_announcement = await _add_announcement(
        db_session, test_school.id, "Water shutoff", expires_at=utcnow() + timedelta(days=1)
    )

    res = await staff_client.put(
        f"/api/announcements/{db_announcement.id}",
        json={"priority": "high", "expiresAt": None},
    )
    assert res.status_code == 200
    assert res.json()["message"] == "Announcement updated successfully"
    data = res.json()["data"]
    assert data["priority"] == "high"
    assert data["expiresAt"] is None
    assert data["title"] == "Water shutoff"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "content", "type", "priority", "targetAudience", "isActive"])
async def test_update_announcement_rejects_null_for_required_fields(
    staff_client: AsyncClient, db_session: AsyncSession, test_school: School, field: str
):
    db_announcement = await _add_announcement(db_session, test_school.id, "Laundry room closed")
    res = await staff_client.put(f"/api/announcements/{db_announcement.id}", json={field: None})
    assert res.status_code == 400
    assert res.json()["details"][0]["field"] == field

    await db_session.refresh(db_announcement)
    assert db_announcement.title == "Laundry room closed"
    assert db_announcement.is_active is True


@pytest.mark.asyncio
async def test_update_unknown_announcement(staff_client: AsyncClient):
    res = await staff_client.put(f"/api/announcements/{uuid.uuid4()}", json={"priority": "low"})
    assert res.status_code == 404
    assert res.json()["error"] == "Announcement not found"


@pytest.mark.asyncio
async def test_update_announcement_in_other_school(
    staff_client: AsyncClient, db_session: AsyncSession, other_school: School
):
    foreign = await _add_announcement(db_session, other_school.id, "Birch only")
    res = await staff_client.put(f"/api/announcements/{foreign.id}", json={"priority": "low"})
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_delete_announcement_is_soft(
    staff_client: AsyncClient, db_session: AsyncSession, test_school: School
):
    db_announcement = await _add_announcement(db_session, test_school.id, "Movie night")

    res = await staff_client.delete(f"/api/announcements/{db_announcement.id}")
    assert res.status_code == 200
    assert res.json()["message"] == "Announcement removed"
    assert res.json()["data"]["isActive"] is False

    await db_session.refresh(db_announcement)
    assert db_announcement.is_active is False

    listing = await staff_client.get("/api/announcements")
    assert listing.json()["data"] == []


# =============================================================================
# 4. 만료 처리
# =============================================================================
@pytest.mark.asyncio
async def test_deactivate_expired(db_session: AsyncSession, test_school: School):
    expired = await _add_announcement(db_session, test_school.id, "Expired", expires_at=utcnow() - timedelta(minutes=5))
    current = await _add_announcement(db_session, test_school.id, "Current", expires_at=utcnow() + timedelta(days=1))
    forever = await _add_announcement(db_session, test_school.id, "Forever")

    assert await notice_crud.announcement.deactivate_expired(db_session) == 1

    for db_announcement in (expired, current, forever):
        await db_session.refresh(db_announcement)
    assert expired.is_active is False
    assert current.is_active is True
    assert forever.is_active is True

    assert await notice_crud.announcement.deactivate_expired(db_session) == 0
