# tests/domains/test_maint_n.py

"""
'maint' 도메인 (시설 수리/민원 요청) API 엔드포인트에 대한 통합 테스트 모듈입니다.
"""

import uuid

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.maint import models as maint_models
from app.domains.school.models import School
from app.domains.usr import models as usr_models


def _request_payload(**overrides) -> dict:
    payload = {
        "category": "plumbing",
        "title": "Shower drain clogged",
        "description": "The shower on floor 3 has not drained since Monday.",
        "priority": "high",
    }
    payload.update(overrides)
    return payload


async def _add_request(db: AsyncSession, school_id, user_id=None, **kwargs) -> maint_models.Request:
    db_request = maint_models.Request(
        school_id=school_id,
        user_id=user_id,
        category=kwargs.pop("category", "electrical"),
        title=kwargs.pop("title", "Hallway light flickers"),
        description=kwargs.pop("description", "The hallway light flickers every few seconds."),
        **kwargs,
    )
    db.add(db_request)
    await db.commit()
    await db.refresh(db_request)
    return db_request


# =============================================================================
# 1. 요청 생성
# =============================================================================
@pytest.mark.asyncio
async def test_create_request(authorized_client: AsyncClient, test_user: usr_models.User, test_school: School):
    res = await authorized_client.post("/api/requests", json=_request_payload(photos=["https://img.maple.edu/1.jpg"]))
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Request created successfully"
    data = body["data"]
    assert data["status"] == "pending"
    assert data["priority"] == "high"
    assert data["upvotes"] == 0
    assert data["userId"] == str(test_user.id)
    assert data["schoolId"] == str(test_school.id)
    assert data["authorName"] == "Sam Student"
    assert data["photos"] == ["https://img.maple.edu/1.jpg"]
    assert data["resolvedAt"] is None


@pytest.mark.asyncio
async def test_create_anonymous_request_hides_author(
    authorized_client: AsyncClient, db_session: AsyncSession
):
    res = await authorized_client.post("/api/requests", json=_request_payload(isAnonymous=True))
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["isAnonymous"] is True
    assert data["userId"] is None
    assert data["authorName"] is None

    db_request = await db_session.get(maint_models.Request, uuid.UUID(data["id"]))
    assert db_request.user_id is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"title": "Leak"}, "title"),
        ({"description": "Too short"}, "description"),
        ({"priority": "whenever"}, "priority"),
        ({"photos": [f"https://img/{i}.jpg" for i in range(6)]}, "photos"),
    ],
)
async def test_create_request_validation(authorized_client: AsyncClient, overrides: dict, field: str):
    res = await authorized_client.post("/api/requests", json=_request_payload(**overrides))
    assert res.status_code == 400
    assert res.json()["details"][0]["field"] == field


# =============================================================================
# 2. 조회
# =============================================================================
@pytest.mark.asyncio
async def test_list_requests_paging_and_filter(
    authorized_client: AsyncClient,
    db_session: AsyncSession,
    test_user: usr_models.User,
    test_school: School,
    other_school: School,
):
    for i in range(3):
        await _add_request(db_session, test_school.id, test_user.id, title=f"Pending issue {i}")
    await _add_request(db_session, test_school.id, test_user.id, title="Fixed issue",
                       status=maint_models.RequestStatus.RESOLVED)
    await _add_request(db_session, other_school.id, title="Birch issue")

    res = await authorized_client.get("/api/requests", params={"page": 1, "limit": 2})
    assert res.status_code == 200
    page = res.json()["data"]
    assert page["total"] == 4
    assert page["page"] == 1 and page["limit"] == 2
    assert len(page["items"]) == 2
    # 최신순
    assert page["items"][0]["title"] == "Fixed issue"
    assert page["items"][0]["authorName"] == "Sam Student"

    res = await authorized_client.get("/api/requests", params={"page": 3, "limit": 2})
    assert res.json()["data"]["items"] == []

    res = await authorized_client.get("/api/requests", params={"status": "resolved"})
    page = res.json()["data"]
    assert page["total"] == 1
    assert page["items"][0]["title"] == "Fixed issue"


@pytest.mark.asyncio
async def test_list_requests_rejects_unknown_status(authorized_client: AsyncClient):
    res = await authorized_client.get("/api/requests", params={"status": "lost"})
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_read_request_in_other_school_is_not_found(
    authorized_client: AsyncClient, db_session: AsyncSession, other_school: School
):
    foreign = await _add_request(db_session, other_school.id)
    res = await authorized_client.get(f"/api/requests/{foreign.id}")
    assert res.status_code == 404
    assert res.json()["error"] == "Request not found"


@pytest.mark.asyncio
async def test_read_request(authorized_client: AsyncClient, db_session: AsyncSession, test_school: School):
    db_request = await _add_request(db_session, test_school.id, is_anonymous=True)
    res = await authorized_client.get(f"/api/requests/{db_request.id}")
    assert res.status_code == 200
    assert res.json()["data"]["title"] == "Hallway light flickers"
    assert res.json()["data"]["authorName"] is None


@pytest.mark.asyncio
async def test_user_without_school_cannot_list(authorized_client_factory, user_factory):
    drifter = await user_factory("drifter@maple.edu", "drifterpass1", role=usr_models.UserRole.STUDENT, school_id=None)
    async with authorized_client_factory(drifter, "drifterpass1") as ac:
        res = await ac.get("/api/requests")
    assert res.status_code == 400
    assert res.json()["error"] == "User is not assigned to a school"


# =============================================================================
# 3. 상태 변경 / 공감
# =============================================================================
@pytest.mark.asyncio
async def test_staff_resolves_request(
    staff_client: AsyncClient, db_session: AsyncSession, test_school: School, test_staff_user: usr_models.User
):
    db_request = await _add_request(db_session, test_school.id)

    res = await staff_client.put(
        f"/api/requests/{db_request.id}",
        json={"status": "in_progress", "assignedTo": str(test_staff_user.id)},
    )
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "in_progress"
    assert res.json()["data"]["assignedTo"] == str(test_staff_user.id)
    assert res.json()["data"]["resolvedAt"] is None

    res = await staff_client.put(f"/api/requests/{db_request.id}", json={"status": "resolved"})
    assert res.status_code == 200
    assert res.json()["message"] == "Request updated successfully"
    assert res.json()["data"]["resolvedAt"] is not None

    await db_session.refresh(db_request)
    assert db_request.status == maint_models.RequestStatus.RESOLVED
    assert db_request.resolved_at is not None


@pytest.mark.asyncio
async def test_student_cannot_update_request(
    authorized_client: AsyncClient, db_session: AsyncSession, test_school: School
):
    db_request = await _add_request(db_session, test_school.id)
    res = await authorized_client.put(f"/api/requests/{db_request.id}", json={"status": "closed"})
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_update_request_with_empty_body(
    staff_client: AsyncClient, db_session: AsyncSession, test_school: School
):
    db_request = await _add_request(db_session, test_school.id)
    res = await staff_client.put(f"/api/requests/{db_request.id}", json={})
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_update_request_rejects_null_status(
    staff_client: AsyncClient, db_session: AsyncSession, test_school: School
):
    db_request = await _add_request(db_session, test_school.id)
    res = await staff_client.put(f"/api/requests/{db_request.id}", json={"status": None})
    assert res.status_code == 400
    assert res.json()["details"][0]["field"] == "status"

    await db_session.refresh(db_request)
    assert db_request.status == maint_models.RequestStatus.PENDING


@pytest.mark.asyncio
async def test_update_request_rejects_invalid_assignee(
    staff_client: AsyncClient,
    db_session: AsyncSession,
    test_school: School,
    test_user: usr_models.User,
    other_school_staff: usr_models.User,
    user_factory,
):
    """담당자는 같은 학교의 활성 직원/관리자만 지정할 수 있습니다."""
    retired_staff = await user_factory(
        "retired.staff@maple.edu", "retiredpass123", role=usr_models.UserRole.STAFF,
        school_id=test_school.id, is_active=False,
    )
    db_request = await _add_request(db_session, test_school.id)

    for assignee_id in (uuid.uuid4(), test_user.id, other_school_staff.id, retired_staff.id):
        res = await staff_client.put(f"/api/requests/{db_request.id}", json={"assignedTo": str(assignee_id)})
        assert res.status_code == 400
        assert res.json()["error"] == "Assignee must be an active staff member of this school"

    await db_session.refresh(db_request)
    assert db_request.assigned_to is None


@pytest.mark.asyncio
async def test_update_request_unassigns_with_null(
    staff_client: AsyncClient, db_session: AsyncSession, test_school: School, test_admin_user: usr_models.User
):
    db_request = await _add_request(db_session, test_school.id, assigned_to=test_admin_user.id)
    res = await staff_client.put(f"/api/requests/{db_request.id}", json={"assignedTo": None})
    assert res.status_code == 200
    assert res.json()["data"]["assignedTo"] is None


@pytest.mark.asyncio
async def test_upvote_request(authorized_client: AsyncClient, db_session: AsyncSession, test_school: School):
    db_request = await _add_request(db_session, test_school.id)

    for expected in (1, 2):
        res = await authorized_client.post(f"/api/requests/{db_request.id}/upvote")
        assert res.status_code == 200
        assert res.json()["message"] == "Vote recorded successfully"
        assert res.json()["data"]["upvotes"] == expected

    await db_session.refresh(db_request)
    assert db_request.upvotes == 2


@pytest.mark.asyncio
async def test_upvote_request_in_other_school(
    authorized_client: AsyncClient, db_session: AsyncSession, other_school: School
):
    foreign = await _add_request(db_session, other_school.id)
    res = await authorized_client.post(f"/api/requests/{foreign.id}/upvote")
    assert res.status_code == 404
