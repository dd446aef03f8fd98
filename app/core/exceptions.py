# app/core/exceptions.py

"""
애플리케이션 예외 계층과 FastAPI 예외 핸들러를 정의하는 모듈입니다.

- 모든 도메인 오류는 `AppError`의 하위 클래스로 표현되며, 상태 코드를 직접 가집니다.
  (메시지 문자열로 상태 코드를 추론하지 않습니다.)
- `register_exception_handlers()`는 모든 오류를 공통 실패 봉투
  `{"success": false, "error": ..., "details": ...}`로 변환합니다.
"""

import logging
import traceback
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 애플리케이션 예외 계층
# =============================================================================
class AppError(HTTPException):
    """상태 코드와 사용자 노출 메시지를 가진 애플리케이션 오류의 루트 클래스"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, details: Optional[List[Dict[str, Any]]] = None):
        self.message = message or self.default_message
        self.details = details
        headers = {"WWW-Authenticate": "Bearer"} if self.status_code == status.HTTP_401_UNAUTHORIZED else None
        super().__init__(status_code=self.status_code, detail=self.message, headers=headers)


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class NoFieldsToUpdate(ValidationFailed):
    default_message = "No valid fields to update"


class TemperatureOutOfRange(ValidationFailed):
    def __init__(self, min_temperature: float, max_temperature: float):
        super().__init__(f"Temperature must be between {min_temperature:g}°F and {max_temperature:g}°F")
        self.min_temperature = min_temperature
        self.max_temperature = max_temperature


class AuthenticationFailed(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class TokenInvalid(AuthenticationFailed):
    default_message = "Invalid token"


class TokenPurposeMismatch(TokenInvalid):
    default_message = "Invalid token type"


class TokenExpired(AuthenticationFailed):
    default_message = "Token expired"


class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class DuplicateEmail(Conflict):
    default_message = "Email already registered"


class DuplicateName(Conflict):
    default_message = "Name already exists"


class AlreadyVotedToday(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "You can only vote once per 24 hours"


# =============================================================================
# 2. 예외 핸들러
# =============================================================================
def error_body(message: str, details: Optional[Any] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": message}
    if details:
        body["details"] = details
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.details),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content=error_body(message), headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]) or "body",
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation failed", details),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if settings.is_production:
        body = error_body("Something went wrong")
    else:
        body = error_body("Internal server error")
        body["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """FastAPI 앱에 공통 실패 봉투를 만드는 예외 핸들러들을 등록합니다."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
