# app/domains/maint/__init__.py

"""
FastAPI 애플리케이션의 'maint' 도메인 패키지입니다.

'maint' 도메인은 거주자의 시설 수리/민원 요청을 관리합니다.

주요 서브모듈:
- `models.py`: 'maint' 스키마의 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 Pydantic 모델 (camelCase JSON).
- `crud.py`: 요청 생성, 학교 단위 조회, 상태 변경, 공감.
- `routers.py`: /requests API 엔드포인트.
"""

__title__ = "DormLife Maintenance Domain"
__description__ = "Maintenance requests raised by residents."
__version__ = "0.1.0"
__all__ = []
