# app/domains/climate/routers.py

"""
'climate' 도메인 (온도 구역/투표)과 관련된 API 엔드포인트를 정의하는 모듈입니다.

zone 파라미터를 생략하면 사용자 학교의 첫 번째 활성 구역(이름순)을 사용합니다.
다른 학교의 구역은 관리자가 아니면 존재하지 않는 것처럼 404로 응답합니다.
"""

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.db_types import utcnow
from app.core.exceptions import NotFound, TemperatureOutOfRange, ValidationFailed
from app.core.responses import ApiResponse, ok
from app.domains.school import crud as school_crud
from app.domains.usr.models import UserRole
from app.domains.usr.schemas import UserRead

from . import crud as climate_crud
from . import models as climate_models
from . import schemas as climate_schemas

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 72.0

router = APIRouter(
    tags=["Temperature (온도 투표)"],
    responses={404: {"description": "Not found"}},
)


async def _resolve_zone(
    db: AsyncSession, current_user: UserRead, zone_id: Optional[uuid.UUID]
) -> climate_models.TemperatureZone:
    if zone_id is None:
        zones = []
        if current_user.school_id is not None:
            zones = await climate_crud.temperature_zone.get_by_school(db, school_id=current_user.school_id)
        if not zones:
            raise NotFound("No temperature zones found for your school")
        return zones[0]

    zone = await climate_crud.temperature_zone.get_active(db, id=zone_id)
    if zone is None or (current_user.role != UserRole.ADMIN and zone.school_id != current_user.school_id):
        raise NotFound("Temperature zone not found")
    return zone


def _vote_read(vote: Optional[climate_models.TemperatureVote]) -> Optional[climate_schemas.VoteRead]:
    return climate_schemas.VoteRead.model_validate(vote) if vote is not None else None


# =============================================================================
# 1. 투표 엔드포인트
# =============================================================================
@router.get("/current", response_model=ApiResponse[climate_schemas.CurrentTemperature], summary="현재 온도 및 투표 가능 여부")
async def read_current_temperature(
    zone: Optional[uuid.UUID] = Query(None, description="구역 ID"),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.get_current_user),
):
    db_zone = await _resolve_zone(db, current_user, zone)
    can_vote = await climate_crud.temperature_vote.can_vote(db, user_id=current_user.id, zone_id=db_zone.id)
    last_vote = await climate_crud.temperature_vote.get_user_last_vote(db, user_id=current_user.id, zone_id=db_zone.id)
    stats = await climate_crud.temperature_vote.get_zone_stats(db, zone_id=db_zone.id)

    result = climate_schemas.CurrentTemperature(
        zone=climate_schemas.ZoneRead.model_validate(db_zone),
        temperature=db_zone.current_temperature if db_zone.current_temperature is not None else DEFAULT_TEMPERATURE,
        target_temperature=db_zone.target_temperature if db_zone.target_temperature is not None else DEFAULT_TEMPERATURE,
        can_vote=can_vote,
        user_last_vote=_vote_read(last_vote),
        stats=stats,
    )
    return ok(result)


@router.post("/vote", response_model=ApiResponse[climate_schemas.VoteResult], summary="온도 투표")
async def submit_vote(
    vote_in: climate_schemas.VoteCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.get_current_user),
):
    """
    구역별로 하루(UTC) 한 번 투표할 수 있습니다.
    구역 범위를 벗어나면 400, 이미 투표했으면 429를 반환합니다.
    """
    db_zone = await _resolve_zone(db, current_user, vote_in.zone)
    logger.info("Vote attempt: user=%s zone=%s temperature=%.1f", current_user.id, db_zone.id, vote_in.temperature)
    if not (db_zone.min_temperature <= vote_in.temperature <= db_zone.max_temperature):
        raise TemperatureOutOfRange(db_zone.min_temperature, db_zone.max_temperature)

    vote = await climate_crud.temperature_vote.submit(
        db, user_id=current_user.id, zone=db_zone, temperature=vote_in.temperature
    )
    result = climate_schemas.VoteResult(
        vote=climate_schemas.VoteRead.model_validate(vote),
        next_vote_time=utcnow() + climate_crud.VOTE_INTERVAL,
    )
    return ok(result, "Vote submitted successfully")


@router.get("/stats", response_model=ApiResponse[climate_schemas.ZoneStatsWithVote], summary="구역 투표 통계")
async def read_temperature_stats(
    zone: Optional[uuid.UUID] = Query(None, description="구역 ID"),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.get_current_user),
):
    db_zone = await _resolve_zone(db, current_user, zone)
    stats = await climate_crud.temperature_vote.get_zone_stats(db, zone_id=db_zone.id)
    last_vote = await climate_crud.temperature_vote.get_user_last_vote(db, user_id=current_user.id, zone_id=db_zone.id)
    result = climate_schemas.ZoneStatsWithVote(
        average_vote=stats.average_vote,
        total_votes=stats.total_votes,
        today_votes=stats.today_votes,
        last_week_trend=stats.last_week_trend,
        user_last_vote=_vote_read(last_vote),
    )
    return ok(result)


# =============================================================================
# 2. 구역 (Zone) 엔드포인트
# =============================================================================
@router.get("/zones", response_model=ApiResponse[List[climate_schemas.ZoneRead]], summary="내 학교의 구역 목록")
async def read_zones(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.get_current_user),
):
    if current_user.school_id is None:
        return ok([])
    zones = await climate_crud.temperature_zone.get_by_school(db, school_id=current_user.school_id)
    return ok([climate_schemas.ZoneRead.model_validate(z) for z in zones])


@router.post(
    "/zones",
    response_model=ApiResponse[climate_schemas.ZoneRead],
    status_code=status.HTTP_201_CREATED,
    summary="구역 생성 (관리자)",
)
async def create_zone(
    zone_in: climate_schemas.ZoneCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.require_role(UserRole.ADMIN)),
):
    school_id = zone_in.school_id or current_user.school_id
    if school_id is None or await school_crud.school.get(db, school_id) is None:
        raise ValidationFailed("Invalid school")
    db_zone = await climate_crud.temperature_zone.create_for_school(db, obj_in=zone_in, school_id=school_id)
    logger.info("Zone created: %s (school=%s)", db_zone.id, school_id)
    return ok(climate_schemas.ZoneRead.model_validate(db_zone), "Temperature zone created")


@router.put(
    "/zones/{zone_id}/temperature",
    response_model=ApiResponse[climate_schemas.ZoneRead],
    summary="구역 현재 온도 갱신 (센서/직원)",
)
async def update_zone_temperature(
    zone_id: uuid.UUID,
    update_in: climate_schemas.ZoneTemperatureUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.require_role(UserRole.ADMIN, UserRole.STAFF)),
):
    db_zone = await _resolve_zone(db, current_user, zone_id)
    updated = await climate_crud.temperature_zone.update_temperature(
        db,
        zone=db_zone,
        current_temperature=update_in.current_temperature,
        target_temperature=update_in.target_temperature,
    )
    return ok(climate_schemas.ZoneRead.model_validate(updated), "Temperature updated")


@router.get(
    "/zones/{zone_id}/history",
    response_model=ApiResponse[List[climate_schemas.HistoryRead]],
    summary="구역 온도 이력 (최신순)",
)
async def read_zone_history(
    zone_id: uuid.UUID,
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UserRead = Depends(deps.get_current_user),
):
    db_zone = await _resolve_zone(db, current_user, zone_id)
    history = await climate_crud.temperature_zone.get_history(db, zone_id=db_zone.id, limit=limit)
    return ok([climate_schemas.HistoryRead.model_validate(h) for h in history])
