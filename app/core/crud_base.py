# app/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 클래스 모듈입니다.
모든 메서드는 호출자가 넘겨준 AsyncSession 위에서 동작하며, 자체 상태를 갖지 않습니다.
"""

from typing import Generic, Optional, Type, TypeVar, Any, Dict, Iterable
from datetime import datetime, UTC

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

from app.core.exceptions import NoFieldsToUpdate

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    `updatable_fields`가 지정되면 update()는 해당 필드만 반영합니다.
    """
    updatable_fields: Optional[Iterable[str]] = None

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """ID를 기준으로 단일 레코드를 조회합니다."""
        return await db.get(self.model, id)

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        response = await db.execute(statement)
        return response.scalars().first()

    async def create(self, db: AsyncSession, *, obj_in: CreateSchemaType, **extra: Any) -> ModelType:
        """
        새로운 레코드를 생성합니다. extra로 스키마에 없는 컬럼 값(소유자 ID 등)을 함께 넣을 수 있습니다.
        """
        db_obj = self.model(**obj_in.model_dump(), **extra)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: UpdateSchemaType | Dict[str, Any]
    ) -> ModelType:
        """
        기존 레코드를 부분 업데이트합니다.
        반영할 필드가 하나도 없으면 NoFieldsToUpdate를 발생시키며, 항상 updated_at을 갱신합니다.
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        if self.updatable_fields is not None:
            allowed = set(self.updatable_fields)
            update_data = {k: v for k, v in update_data.items() if k in allowed}
        if not update_data:
            raise NoFieldsToUpdate()

        for key, value in update_data.items():
            setattr(db_obj, key, value)
        if hasattr(db_obj, "updated_at"):
            db_obj.updated_at = datetime.now(UTC)

        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

