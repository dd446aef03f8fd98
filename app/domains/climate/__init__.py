# app/domains/climate/__init__.py

"""
FastAPI 애플리케이션의 'climate' 도메인 패키지입니다.

'climate' 도메인은 기숙사 구역별 온도와 하루 한 번의 온도 투표를 관리합니다.

주요 서브모듈:
- `models.py`: 'climate' 스키마의 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 Pydantic 모델 (camelCase JSON).
- `crud.py`: 구역 관리, 투표 규칙, 통계/추이 계산.
- `routers.py`: /temperature API 엔드포인트.
"""

__title__ = "DormLife Climate Domain"
__description__ = "Temperature zones, daily votes and temperature history."
__version__ = "0.1.0"
__all__ = []
