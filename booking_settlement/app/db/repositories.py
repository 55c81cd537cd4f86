"""
Repositories over the transactional store.

Each repository wraps one aggregate and exposes get / append / conditional
update operations. Nothing here commits; the caller's UnitOfWork does.
Conditional updates return False when their guard did not match, so the
check and the write are one statement and cannot interleave with another
writer.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import select, update, func, and_
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from booking_settlement.app.models.account import Account
from booking_settlement.app.models.booking import Booking
from booking_settlement.app.models.commission_model import CommissionModel
from booking_settlement.app.models.journal_entry import JournalEntry, JournalLine
from booking_settlement.app.models.refund import Refund
from booking_settlement.app.models.refund_policy import RefundPolicy
from booking_settlement.app.models.settlement_enums import (
    BookingStatus, JournalEntryKind, RefundStatus
)
from booking_settlement.app.models.wallet import Wallet, WalletTransaction


class AccountRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, account_id: str) -> Optional[Account]:
        return await self.db.get(Account, account_id)

    async def get_many(self, account_ids: Iterable[str]) -> Dict[str, Account]:
        ids = set(account_ids)
        if not ids:
            return {}
        result = await self.db.execute(select(Account).where(Account.id.in_(ids)))
        return {account.id: account for account in result.scalars().all()}

    async def list_all(self) -> List[Account]:
        result = await self.db.execute(select(Account).order_by(Account.id))
        return list(result.scalars().all())

    async def append(self, account: Account) -> Account:
        self.db.add(account)
        await self.db.flush()
        return account


class JournalRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(self, entry: JournalEntry) -> JournalEntry:
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def get(self, entry_id: int) -> Optional[JournalEntry]:
        return await self.db.get(JournalEntry, entry_id)

    async def find_for_booking(self, booking_id: str, kind: JournalEntryKind) -> Optional[JournalEntry]:
        result = await self.db.execute(
            select(JournalEntry).where(
                JournalEntry.booking_id == booking_id,
                JournalEntry.kind == kind,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_booking(self, booking_id: str) -> List[JournalEntry]:
        result = await self.db.execute(
            select(JournalEntry)
            .where(JournalEntry.booking_id == booking_id)
            .order_by(JournalEntry.id)
        )
        return list(result.scalars().all())

    async def list_for_user(self, user_id: str, limit: int = 100) -> List[JournalEntry]:
        result = await self.db.execute(
            select(JournalEntry)
            .where(JournalEntry.user_id == user_id)
            .order_by(JournalEntry.posted_at.desc(), JournalEntry.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    def _period(self, query, start: Optional[datetime], end: Optional[datetime]):
        if start is not None:
            query = query.where(JournalEntry.posted_at >= start)
        if end is not None:
            query = query.where(JournalEntry.posted_at <= end)
        return query

    async def sum_lines(
        self,
        account_ids: Sequence[str],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Tuple[int, int]:
        query = (
            select(
                func.coalesce(func.sum(JournalLine.debit), 0),
                func.coalesce(func.sum(JournalLine.credit), 0),
            )
            .join(JournalEntry, JournalLine.entry_id == JournalEntry.id)
            .where(JournalLine.account_id.in_(list(account_ids)))
        )
        result = await self.db.execute(self._period(query, start, end))
        debit, credit = result.one()
        return int(debit), int(credit)

    async def totals_by_account(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Dict[str, Tuple[int, int]]:
        query = (
            select(
                JournalLine.account_id,
                func.coalesce(func.sum(JournalLine.debit), 0),
                func.coalesce(func.sum(JournalLine.credit), 0),
            )
            .join(JournalEntry, JournalLine.entry_id == JournalEntry.id)
            .group_by(JournalLine.account_id)
        )
        result = await self.db.execute(self._period(query, start, end))
        return {account_id: (int(debit), int(credit)) for account_id, debit, credit in result.all()}


class WalletRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: str, currency_code: str, for_update: bool = False) -> Optional[Wallet]:
        query = select(Wallet).where(
            Wallet.user_id == user_id,
            Wallet.currency_code == currency_code,
        ).execution_options(populate_existing=True)
        if for_update:
            # Row lock on PostgreSQL; SQLite serializes writers itself.
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> List[Wallet]:
        result = await self.db.execute(
            select(Wallet).where(Wallet.user_id == user_id).order_by(Wallet.currency_code)
        )
        return list(result.scalars().all())

    async def insert_if_absent(self, user_id: str, currency_code: str) -> None:
        """
        Create an empty wallet unless one already exists.

        A concurrent insert of the same (user, currency) is absorbed by the
        unique constraint instead of failing the transaction.
        """
        dialect = self.db.get_bind().dialect.name
        insert = postgresql_insert if dialect == "postgresql" else sqlite_insert
        await self.db.execute(
            insert(Wallet)
            .values(user_id=user_id, currency_code=currency_code, balance=0, version=0)
            .on_conflict_do_nothing(index_elements=["user_id", "currency_code"])
        )

    async def apply_delta_if_covered(self, wallet_id: int, delta: int) -> bool:
        """
        Add `delta` to the balance unless the result would be negative.

        The guard and the write are a single UPDATE statement.
        """
        result = await self.db.execute(
            update(Wallet)
            .where(Wallet.id == wallet_id, Wallet.balance + delta >= 0)
            .values(balance=Wallet.balance + delta, version=Wallet.version + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def apply_delta(self, wallet_id: int, delta: int) -> None:
        await self.db.execute(
            update(Wallet)
            .where(Wallet.id == wallet_id)
            .values(balance=Wallet.balance + delta, version=Wallet.version + 1)
            .execution_options(synchronize_session=False)
        )

    async def current_balance(self, wallet_id: int) -> int:
        result = await self.db.execute(select(Wallet.balance).where(Wallet.id == wallet_id))
        return int(result.scalar_one())

    async def append_transaction(self, transaction: WalletTransaction) -> WalletTransaction:
        self.db.add(transaction)
        await self.db.flush()
        return transaction

    async def list_transactions(self, wallet_id: int, limit: Optional[int] = None) -> List[WalletTransaction]:
        """Oldest first; with `limit`, the most recent `limit` transactions."""
        query = select(WalletTransaction).where(WalletTransaction.wallet_id == wallet_id)
        if limit is None:
            result = await self.db.execute(query.order_by(WalletTransaction.id))
            return list(result.scalars().all())
        result = await self.db.execute(query.order_by(WalletTransaction.id.desc()).limit(limit))
        return list(reversed(result.scalars().all()))

    async def sum_transactions(self, wallet_id: int) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.sum(WalletTransaction.amount), 0))
            .where(WalletTransaction.wallet_id == wallet_id)
        )
        return int(result.scalar_one())


class BookingRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, booking_id: str, for_update: bool = False) -> Optional[Booking]:
        query = select(Booking).where(Booking.id == booking_id).execution_options(populate_existing=True)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def update_status_if(
        self,
        booking_id: str,
        expected: Iterable[BookingStatus],
        new_status: BookingStatus,
    ) -> bool:
        result = await self.db.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.status.in_(list(expected)))
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class CommissionModelRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, model_id: Optional[str]) -> Optional[CommissionModel]:
        if not model_id:
            return None
        return await self.db.get(CommissionModel, model_id)

    async def list_all(self) -> List[CommissionModel]:
        result = await self.db.execute(select(CommissionModel).order_by(CommissionModel.id))
        return list(result.scalars().all())

    async def append(self, model: CommissionModel) -> CommissionModel:
        self.db.add(model)
        await self.db.flush()
        return model


class RefundPolicyRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, policy_id: Optional[str]) -> Optional[RefundPolicy]:
        if not policy_id:
            return None
        result = await self.db.execute(select(RefundPolicy).where(RefundPolicy.id == policy_id))
        return result.scalar_one_or_none()

    async def append(self, policy: RefundPolicy) -> RefundPolicy:
        self.db.add(policy)
        await self.db.flush()
        return policy


class RefundRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, refund_id: int) -> Optional[Refund]:
        result = await self.db.execute(
            select(Refund).where(Refund.id == refund_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def append(self, refund: Refund) -> Refund:
        self.db.add(refund)
        await self.db.flush()
        return refund

    async def find_blocking_for_booking(self, booking_id: str) -> Optional[Refund]:
        """Any refund for the booking that has not been rejected."""
        result = await self.db.execute(
            select(Refund)
            .where(Refund.booking_id == booking_id, Refund.status != RefundStatus.REJECTED)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_refunds(self, status: Optional[RefundStatus] = None, user_id: Optional[str] = None,
                           limit: int = 100) -> List[Refund]:
        query = select(Refund).order_by(Refund.requested_at.desc(), Refund.id.desc())
        if status is not None:
            query = query.where(Refund.status == status)
        if user_id is not None:
            query = query.where(Refund.user_id == user_id)
        result = await self.db.execute(query.limit(limit))
        return list(result.scalars().all())

    async def update_if(
        self,
        refund_id: int,
        expected: Iterable[RefundStatus],
        values: dict,
        expected_version: Optional[int] = None,
    ) -> bool:
        """
        Compare-and-set on (id, status[, version]).

        Bumps `version` on success. Returns False when the refund is no
        longer in one of the expected states.
        """
        guard = and_(Refund.id == refund_id, Refund.status.in_(list(expected)))
        if expected_version is not None:
            guard = and_(guard, Refund.version == expected_version)
        result = await self.db.execute(
            update(Refund)
            .where(guard)
            .values(version=Refund.version + 1, **values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
