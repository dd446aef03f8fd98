# tests/domains/__init__.py

"""
도메인별 통합 테스트 패키지입니다.

- `test_auth_n.py`: 'usr' 도메인의 인증 흐름 (/api/auth/*).
- `test_usr_n.py`: 'usr' 도메인의 사용자 CRUD와 프로필/관리 엔드포인트 (/api/users/*).
- `test_school_n.py`: 'school' 도메인 (학교 디렉터리, 학교 통계).
- `test_climate_n.py`: 'climate' 도메인 (온도 구역, 투표 규칙).
- `test_maint_n.py`: 'maint' 도메인 (시설 요청).
- `test_notice_n.py`: 'notice' 도메인 (공지).
"""

__title__ = "DormLife Domain Tests"
__description__ = "Categorized tests for each business domain in DormLife FastAPI application."
__version__ = "0.1.0"  # 도메인 테스트 패키지의 내부 버전
__all__ = []
