# tests/__init__.py

"""
DormLife API의 테스트 스위트 패키지입니다.

- `conftest.py`: 테스트 DB(기본 SQLite, TEST_DATABASE_URL로 PostgreSQL 지정 가능),
                 학교/사용자/구역 팩토리, 역할별 인증 클라이언트 픽스처를 정의합니다.
- `test_main.py`, `test_security.py`, `test_tasks.py`, `test_scripts.py`:
                 공통 응답/오류 봉투, 토큰 및 비밀번호, ARQ 태스크, 운영 스크립트 테스트.
- `domains/`: 도메인별 통합 테스트 (usr, school, climate, maint, notice).
"""

__title__ = "DormLife API Tests"
__description__ = "Test suite for DormLife FastAPI application."
__version__ = "0.1.0"  # 테스트 스위트의 내부 버전
__all__ = []
