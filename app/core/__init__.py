# app/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

주요 서브모듈:

- `config.py`: 환경 변수 기반 설정 (Pydantic Settings).
- `logging.py`: 애플리케이션 전역 로깅 설정.
- `database.py`: 비동기 엔진, 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `crud_base.py`: 도메인 CRUD 클래스의 공통 베이스.
- `security.py`: 비밀번호 해싱, JWT 발급/검증, Bearer 헤더 파싱.
- `dependencies.py`: 인증/권한 확인 및 DB 세션 의존성.
- `exceptions.py`: 상태 코드를 가진 애플리케이션 예외 계층과 예외 핸들러.
- `responses.py`: 공통 JSON 응답 봉투(envelope) 스키마.
- `tasks.py`: ARQ 워커가 실행하는 주기 작업.
"""

__title__ = "DormLife Core"
__description__ = "Core components for DormLife FastAPI application."
__version__ = "0.1.0"
__all__ = []
