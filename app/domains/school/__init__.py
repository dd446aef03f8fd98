# app/domains/school/__init__.py

"""
FastAPI 애플리케이션의 'school' 도메인 패키지입니다.

'school' 도메인은 테넌트 단위인 학교 정보와 학교별 통계를 관리합니다.

주요 서브모듈:
- `models.py`: 'school' 스키마의 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 Pydantic 모델 (camelCase JSON).
- `crud.py`: 학교 CRUD와 통계 집계 쿼리.
- `routers.py`: /schools API 엔드포인트.
"""

__title__ = "DormLife School Domain"
__description__ = "Manages schools (tenants) and per-school statistics."
__version__ = "0.1.0"
__all__ = []
