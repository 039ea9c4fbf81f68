from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .exceptions import (
    DatabaseError,
    DoesNotExistError,
    IntegrityViolationError,
    MultipleObjectsReturnedError,
)
from .models import Model
from .queryset import QuerySet

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql import ColumnElement

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Model)


class ModelManager(Generic[T]):
    """
    Entry point for model-level database operations.

    Responsible for creating QuerySets and handling single-record writes.
    Driver errors never leave this class raw: constraint violations become
    ``IntegrityViolationError``, anything else ``DatabaseError``, and the
    session is rolled back first.
    """

    def __init__(self, model: type[T]):
        self._model = model

    @property
    def model_name(self) -> str:
        return self._model.__name__

    def all(self) -> QuerySet[T]:
        """
        Return a QuerySet containing all records.
        """
        return QuerySet(self._model)

    def filter(self, *conditions: ColumnElement[bool] | None) -> QuerySet[T]:
        return self.all().filter(*conditions)

    async def get(
        self,
        db: AsyncSession,
        *conditions: ColumnElement[bool],
    ) -> T:
        """
        Retrieve a single object matching the given conditions.

        Raises:
            DoesNotExistError: If no object matches.
            MultipleObjectsReturnedError: If more than one object matches.
        """
        stmt = select(self._model).where(*conditions).limit(2)
        result = await db.execute(stmt)
        objs = cast("list[T]", result.scalars().all())

        if not objs:
            msg = f"{self.model_name} not found"
            raise DoesNotExistError(msg, model_name=self.model_name)
        if len(objs) > 1:
            msg = f"get() returned more than one {self.model_name}"
            raise MultipleObjectsReturnedError(msg)

        return objs[0]

    async def get_by_pk(self, db: AsyncSession, pk: Any) -> T:
        return await self.get(db, self._model.id == pk)

    async def create(self, db: AsyncSession, **fields: Any) -> T:
        """
        Create and persist a new model instance.

        Raises:
            IntegrityViolationError: On unique/foreign key violations.
            DatabaseError: On any other database failure.
        """
        instance: T = self._model(**fields)
        db.add(instance)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise self._integrity_error("creating", e) from e
        except SQLAlchemyError as e:
            await db.rollback()
            msg = f"Database error while creating {self.model_name}"
            raise DatabaseError(msg) from e
        await db.refresh(instance)
        return instance

    async def update(self, db: AsyncSession, pk: Any, **fields: Any) -> T:
        """
        Update a single record by primary key and return the updated instance.

        Raises:
            DoesNotExistError: If the record with the given PK does not exist.
            IntegrityViolationError: On unique/foreign key violations.
            DatabaseError: On any other database failure.
        """
        stmt = (
            update(self._model)
            .where(self._model.id == pk)
            .values(**fields)
            .returning(self._model)
        )
        try:
            result = await db.execute(stmt)
            instance = result.scalar_one_or_none()
            if instance is not None:
                await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise self._integrity_error("updating", e) from e
        except SQLAlchemyError as e:
            await db.rollback()
            msg = f"Database error while updating {self.model_name}"
            raise DatabaseError(msg) from e

        if instance is None:
            await db.rollback()
            msg = f"{self.model_name} not found"
            raise DoesNotExistError(msg, model_name=self.model_name)
        await db.refresh(instance)
        return cast("T", instance)

    async def delete_by_pk(
        self,
        db: AsyncSession,
        pk: Any,
        *,
        raise_if_missing: bool = False,
    ) -> int:
        """
        Delete a single object by primary key and return the number of deleted rows.
        """
        stmt = delete(self._model).where(self._model.id == pk)

        try:
            result = await db.execute(stmt)
            await db.commit()
            count = getattr(result, "rowcount", 0)
        except SQLAlchemyError as e:
            await db.rollback()
            msg = f"Database error while deleting {self.model_name}"
            raise DatabaseError(msg) from e

        if raise_if_missing and count == 0:
            msg = f"{self.model_name} not found"
            raise DoesNotExistError(msg, model_name=self.model_name)

        return count

    def _integrity_error(
        self, action: str, error: IntegrityError
    ) -> IntegrityViolationError:
        detail = str(error.orig) if error.orig is not None else str(error)
        logger.info("Integrity violation while %s %s: %s", action, self.model_name, detail)
        msg = f"Integrity violation while {action} {self.model_name}"
        return IntegrityViolationError(msg, constraint=detail)
