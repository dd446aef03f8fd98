# app/core/logging.py

"""
애플리케이션 전역 로깅 설정 모듈입니다.

- 모든 모듈은 `logging.getLogger(__name__)`으로 자신의 로거를 얻습니다.
- 포맷과 레벨은 `configure_logging()`이 한 번만 설정합니다 (main.py 기동 시).
"""

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    루트 로거의 레벨과 포맷을 설정합니다.
    uvicorn이 stdout을 수집하므로 별도 핸들러는 두지 않습니다.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    logging.getLogger(__name__).info("Logging initialized with level %s", level)
