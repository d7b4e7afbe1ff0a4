"""
Transaction helper for multi-statement writes.

Either every statement issued inside the block is committed, or the whole
transaction is rolled back, including when the request task is cancelled.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from trip_planner_backend.app.core.exceptions import StorageFailureError

logger = logging.getLogger("trip_planner.db")


@asynccontextmanager
async def transaction(db: AsyncSession, operation: str) -> AsyncIterator[AsyncSession]:
    """
    Run a block of writes atomically.

    Usage:
        async with transaction(db, "create_trip"):
            db.add(trip)
            await db.flush()

    Raises:
        StorageFailureError: any SQLAlchemy error inside the block or on commit
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error(
            "Transaction failed, rolled back",
            exc_info=exc,
            extra={"operation": operation}
        )
        raise StorageFailureError(operation) from exc
    except BaseException:
        # Domain errors and cancellation: nothing may be left half-written
        await db.rollback()
        raise
