"""
Transactional unit of work.

Runs a piece of work against one session and commits it as a single
database transaction, or rolls the whole of it back.
"""

import logging
from typing import Awaitable, Callable, TypeVar
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger("booking_settlement.db")

T = TypeVar("T")


class UnitOfWork:
    """
    Usage:
        uow = UnitOfWork(db)
        refund = await uow.run(lambda tx: workflow_step(tx, refund_id))

    Services flush inside `work`; only the unit of work commits.
    Any exception raised by `work` (or by the commit) rolls back every
    write made through the session and is re-raised unchanged.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def run(self, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        try:
            result = await work(self.db)
            await self.db.commit()
        except Exception as exc:
            await self.db.rollback()
            logger.warning("Transaction rolled back: %s: %s", type(exc).__name__, exc)
            raise
        return result
