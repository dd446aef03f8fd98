# app/domains/notice/__init__.py

"""
FastAPI 애플리케이션의 'notice' 도메인 패키지입니다.

'notice' 도메인은 직원/관리자가 게시하는 학교 공지를 관리합니다.

주요 서브모듈:
- `models.py`: 'notice' 스키마의 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 Pydantic 모델 (camelCase JSON).
- `crud.py`: 공지 게시, 만료 처리, 학교 단위 조회.
- `routers.py`: /announcements API 엔드포인트.
"""

__title__ = "DormLife Notice Domain"
__description__ = "School announcements with expiry."
__version__ = "0.1.0"
__all__ = []
