from __future__ import annotations

import uuid
from functools import wraps
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import transaction
from app.models.base import Base
from app.utils.logger import setup_logger

logger = setup_logger("db_handlers")


ModelType = TypeVar("ModelType", bound=Base)


def check_local_db(func):
    """
    Run the decorated coroutine inside a unit of work.

    If the caller passes `db=`, the call joins that session and the outermost
    caller owns the commit. Otherwise a new session is opened and committed
    when the coroutine returns, or rolled back if it raises.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        async with transaction(kwargs.get("db")) as db:
            kwargs["db"] = db
            return await func(*args, **kwargs)

    return wrapper


def to_uuid(value: Any) -> uuid.UUID | None:
    """Coerce a stored id (UUID or string) to UUID; None if it is not one."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


class BaseDBHandler(Generic[ModelType]):
    """
    Generic repository with basic CRUD methods.

    Writes are flushed, never committed: the enclosing unit of work decides
    whether they persist.
    """

    def __init__(self, model: type[ModelType]):
        self.model = model

    @check_local_db
    async def create(
        self, obj_dict: dict[str, Any], *, db: AsyncSession = None
    ) -> ModelType:
        """Create a new record in the database."""
        db_obj = self.model(**obj_dict)
        try:
            db.add(db_obj)
            await db.flush()
            return db_obj
        except IntegrityError as e:
            logger.warning(f"IntegrityError creating {self.model.__name__}: {e}")
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model.__name__}: {e}", exc_info=True)
            raise

    @check_local_db
    async def get(self, id: Any, *, db: AsyncSession = None) -> ModelType | None:
        """Get a single record by its primary key."""
        record_id = to_uuid(id)
        if record_id is None:
            return None
        return await db.get(self.model, record_id)

    @check_local_db
    async def get_multi_by_attributes(
        self, *, db: AsyncSession = None, skip: int = 0, limit: int = 100, **kwargs
    ) -> list[ModelType]:
        """Get multiple records by a set of attributes with pagination."""
        order_by_clauses = kwargs.pop("order_by", None)

        stmt = select(self.model).filter_by(**kwargs)
        if order_by_clauses is not None:
            if isinstance(order_by_clauses, list):
                stmt = stmt.order_by(*order_by_clauses)
            else:
                stmt = stmt.order_by(order_by_clauses)

        stmt = stmt.offset(skip).limit(limit)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @check_local_db
    async def get_many_by_ids(
        self, ids: list[Any], *, db: AsyncSession = None
    ) -> list[ModelType]:
        """
        Resolve a list of ids, keeping the order of `ids`.

        Ids without a matching record are skipped.
        """
        record_ids = [rid for rid in (to_uuid(i) for i in ids) if rid is not None]
        if not record_ids:
            return []

        result = await db.execute(
            select(self.model).where(self.model.id.in_(record_ids))
        )
        found = {obj.id: obj for obj in result.scalars().all()}
        return [found[rid] for rid in record_ids if rid in found]

    @check_local_db
    async def update(
        self,
        db_obj: ModelType,
        update_data: dict[str, Any],
        *,
        db: AsyncSession = None,
    ) -> ModelType:
        """Update an existing record in the database."""
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        return await self.save(db_obj, db=db)

    @check_local_db
    async def save(self, db_obj: ModelType, *, db: AsyncSession = None) -> ModelType:
        """Persist pending changes of an instance."""
        try:
            db.add(db_obj)
            await db.flush()
            return db_obj
        except SQLAlchemyError as e:
            logger.error(
                f"Error saving {self.model.__name__} with id {db_obj.id}: {e}",
                exc_info=True,
            )
            raise

    @check_local_db
    async def remove(self, db_obj: ModelType, *, db: AsyncSession = None) -> ModelType:
        """Delete an instance."""
        try:
            await db.delete(db_obj)
            await db.flush()
            return db_obj
        except SQLAlchemyError as e:
            logger.error(
                f"Error removing {self.model.__name__} with id {db_obj.id}: {e}",
                exc_info=True,
            )
            raise
