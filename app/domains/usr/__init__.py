# app/domains/usr/__init__.py

"""
FastAPI 애플리케이션의 'usr' 도메인 패키지입니다.

이 패키지는 PostgreSQL의 'usr' 스키마에 해당하는 데이터 모델과
관련된 비즈니스 로직 및 API 엔드포인트를 포함합니다.

'usr' 도메인은 기숙사 학생/직원/관리자 계정과 가입, 로그인,
이메일 인증, 비밀번호 재설정 흐름을 담당합니다.

주요 서브모듈:
- `models.py`: 'usr' 스키마의 users 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 Pydantic 모델 (camelCase JSON).
- `crud.py`: 사용자 조회, 생성, 프로필 수정, 토큰 소모 로직.
- `routers.py`: /auth, /users API 엔드포인트.
"""

__title__ = "DormLife User Domain"
__description__ = "Manages resident accounts and authentication flows."
__version__ = "0.1.0"
__all__ = []
