# app/core/responses.py

"""
모든 엔드포인트가 공유하는 JSON 응답 봉투와 camelCase 스키마 베이스를 정의하는 모듈입니다.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """
    JSON 키를 camelCase로 주고받는 스키마의 베이스 클래스입니다.
    snake_case 필드 이름으로도 값을 넣을 수 있고, ORM 객체에서 바로 변환할 수 있습니다.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[DataT]):
    """성공 응답 봉투: {"success": true, "data": ..., "message": ...}"""
    success: bool = True
    data: Optional[DataT] = None
    message: Optional[str] = None


def ok(data: Optional[DataT] = None, message: Optional[str] = None) -> ApiResponse[DataT]:
    return ApiResponse(success=True, data=data, message=message)


def reject_null(value: Any) -> Any:
    """
    부분 수정 스키마에서 NOT NULL 컬럼에 대응하는 필드용 검사 함수입니다.
    필드를 생략하는 것은 허용하지만 명시적인 null은 거부합니다.

    사용 예:
        @field_validator("title", "content")
        @classmethod
        def check_not_null(cls, value):
            return reject_null(value)
    """
    if value is None:
        raise ValueError("Field cannot be null")
    return value
