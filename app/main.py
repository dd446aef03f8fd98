import asyncio
import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from arq import cron
from arq.connections import create_pool, RedisSettings

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# 핵심 설정 및 데이터베이스 모듈 임포트
from app.core.config import settings
from app.core.database import create_db_and_tables, engine
from app.core.dependencies import get_db_session
from app.core.exceptions import error_body, register_exception_handlers
from app.core.logging import configure_logging
from app.core.responses import ApiResponse, ok

from app import API_PREFIX

# 태스크 모듈 임포트
from app.core import tasks as core_tasks

# 각 도메인의 라우터들을 임포트합니다.
from app.domains.usr.routers import router as usr_router
from app.domains.school.routers import router as school_router
from app.domains.climate.routers import router as climate_router
from app.domains.maint.routers import router as maint_router
from app.domains.notice.routers import router as notice_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# ARQ 워커가 실행할 태스크 함수 목록
worker_functions = [
    core_tasks.health_check_database_task,
    core_tasks.deactivate_expired_announcements_task,
    core_tasks.clear_expired_reset_tokens_task,
]


# ARQ 워커 설정 클래스 (arq app.main.ArqWorkerSettings)
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions
    cron_jobs = [
        cron(core_tasks.health_check_database_task, hour={0}, minute={0}, timeout=300, keep_result=600),
        cron(core_tasks.deactivate_expired_announcements_task, minute={5}, timeout=300, keep_result=600),
        cron(core_tasks.clear_expired_reset_tokens_task, hour={1}, minute={0}, timeout=300, keep_result=600),
    ]


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(데이터베이스, ARQ Redis)를 함께 처리합니다.
    """
    logger.info("Starting %s (%s)", settings.APP_NAME, settings.APP_ENV)
    # 운영 환경의 스키마 변경은 Alembic으로 관리합니다 (alembic upgrade head).
    if settings.APP_ENV == "development":
        await create_db_and_tables()
    app.state.redis = await create_pool(ArqWorkerSettings.redis_settings)
    logger.info("ARQ Redis pool created")

    yield  # 애플리케이션 실행

    logger.info("Shutting down %s", settings.APP_NAME)
    if app.state.redis:
        await app.state.redis.close()
    await engine.dispose()
    logger.info("Redis and database pools closed")


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

register_exception_handlers(app)

# -- CORS 미들웨어 설정 --
# CORS_ORIGIN에 쉼표로 구분된 출처 목록을 지정합니다. "*"이면 모든 출처를 허용합니다.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -- 요청 타임아웃 미들웨어 --
@app.middleware("http")
async def request_timeout_middleware(request: Request, call_next):
    try:
        return await asyncio.wait_for(call_next(request), timeout=settings.REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.error("Request timed out after %.1fs: %s %s",
                     settings.REQUEST_TIMEOUT_SECONDS, request.method, request.url.path)
        return JSONResponse(status_code=status.HTTP_504_GATEWAY_TIMEOUT, content=error_body("Request timed out"))


# -- 도메인 라우터 포함 --
app.include_router(usr_router, prefix=API_PREFIX)
app.include_router(school_router, prefix=f"{API_PREFIX}/schools")
app.include_router(climate_router, prefix=f"{API_PREFIX}/temperature")
app.include_router(maint_router, prefix=f"{API_PREFIX}/requests")
app.include_router(notice_router, prefix=f"{API_PREFIX}/announcements")


# -- 루트 엔드포인트 --
@app.get("/", response_model=ApiResponse, summary="API Root")
async def read_root():
    """API의 시작점을 알리고 문서 링크를 제공합니다."""
    return ok(
        {"name": settings.APP_NAME, "version": settings.APP_VERSION, "docs": "/docs"},
        f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation.",
    )


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", response_model=ApiResponse, summary="Health Check")
async def health_check(session: AsyncSession = Depends(get_db_session)):
    """데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다."""
    try:
        result = await session.exec(select(1))
        if result.first() is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Database health check failed: No result from test query",
            )
    except SQLAlchemyError as e:
        logger.error("Health check database error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection error during health check",
        )
    return ok({"status": "ok", "databaseConnection": "successful"})
