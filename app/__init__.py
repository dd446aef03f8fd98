# app/__init__.py

"""
DormLife FastAPI 애플리케이션의 메인 패키지입니다.

이 패키지는 FastAPI 애플리케이션의 진입점 (main.py)과
공통 설정, 데이터베이스 연결, 인증/보안 유틸리티를 담는 core 서브패키지,
그리고 기숙사 업무 도메인(usr, school, climate, maint, notice)을 담는
domains 서브패키지로 구성됩니다.
"""

APP_NAME = "DormLife API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "DormLife API backend for dormitory residents, staff and administrators."
__all__ = []
