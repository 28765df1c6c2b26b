"""
DeviceLab Backend — Store Call Helpers
========================================

What:  Wrappers that run a store call and re-classify its failures.
Why:   Every service method must turn driver errors into DeviceLab errors
       with a human-readable message; this keeps the try/except in one place.
How:   commit() commits the pending unit of work, rolls back on failure and
       raises DuplicateKeyError or DatabaseError. fetch_or_404() loads a
       record by primary key and raises NotFoundError when it is missing.
"""

import logging
from typing import Any, Dict, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, DuplicateKeyError, NotFoundError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


async def commit(
    db: AsyncSession,
    failure_message: str,
    duplicate_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Commit the session, translating store errors.

    Raises:
        DuplicateKeyError: A unique index was violated and the caller gave
                           a duplicate_message for it
        DatabaseError:     Any other store failure
    """
    ctx = dict(context or {})
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        ctx["error_type"] = type(e).__name__
        if duplicate_message:
            logger.warning("Duplicate key: %s | Context: %s", duplicate_message, ctx)
            raise DuplicateKeyError(message=duplicate_message, context=ctx) from e
        logger.error("Integrity error: %s | Context: %s", str(e), ctx)
        raise DatabaseError(message=failure_message, context=ctx) from e
    except SQLAlchemyError as e:
        await db.rollback()
        ctx["error_type"] = type(e).__name__
        logger.error("Store error: %s | Context: %s", str(e), ctx, exc_info=True)
        raise DatabaseError(message=failure_message, context=ctx) from e


async def fetch_or_404(
    db: AsyncSession,
    model: Type[ModelT],
    record_id: str,
    resource: str,
    failure_message: str,
) -> ModelT:
    """Load `model` by primary key or raise NotFoundError."""
    try:
        record = await db.get(model, record_id)
    except SQLAlchemyError as e:
        logger.error("Store error loading %s %s: %s", resource, record_id, str(e))
        raise DatabaseError(
            message=failure_message,
            context={"resource": resource, "resource_id": record_id},
        ) from e

    if record is None:
        raise NotFoundError(resource=resource, resource_id=record_id)
    return record
