# app/core/config.py

from typing import List
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    서명 키나 DB 주소가 없으면 임포트 시점에 검증 오류로 기동을 중단합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일을 명시적으로 지정
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "DormLife API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Dormitory management API (accounts, temperature voting, requests, announcements)"
    # 애플리케이션 환경 (예: "development", "production", "testing")
    APP_ENV: str = Field("development", description="Application environment (development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Echo SQL and expose debug details")
    LOG_LEVEL: str = Field("INFO", description="Root log level")

    # --- 데이터베이스 설정 ---
    DATABASE_URL: SecretStr = Field(..., description="Async database connection URL (postgresql+asyncpg://...)")
    DB_POOL_SIZE: int = Field(10, description="Persistent connections kept in the pool")
    DB_MAX_OVERFLOW: int = Field(20, description="Extra connections allowed above pool size")
    DB_POOL_TIMEOUT: int = Field(30, description="Seconds to wait for a free pooled connection")

    # --- JWT (JSON Web Token) 설정 ---
    JWT_SECRET: SecretStr = Field(..., description="Signing secret for access and single-use tokens")
    JWT_REFRESH_SECRET: SecretStr = Field(..., description="Signing secret for refresh tokens")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(15, description="Access token lifetime in minutes")
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(7, description="Refresh token lifetime in days")
    EMAIL_VERIFICATION_EXPIRE_HOURS: int = Field(24, description="Email verification token lifetime in hours")
    PASSWORD_RESET_EXPIRE_HOURS: int = Field(1, description="Password reset token lifetime in hours")

    # --- 계정 설정 ---
    BCRYPT_ROUNDS: int = Field(12, description="bcrypt work factor")
    AUTO_VERIFY_EMAIL: bool = Field(False, description="Mark new accounts verified at registration")

    # --- HTTP 설정 ---
    CORS_ORIGIN: str = Field("*", description="Comma separated list of allowed origins")
    REQUEST_TIMEOUT_SECONDS: float = Field(30.0, description="Per-request processing deadline")

    # --- ARQ (Redis) 설정 ---
    REDIS_HOST: str = Field("localhost", description="Redis host for the ARQ worker")
    REDIS_PORT: int = Field(6379, description="Redis port for the ARQ worker")

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGIN.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"


settings = Settings()
