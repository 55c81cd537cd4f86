"""
Ledger Service (Domain Logic).

Owns the chart of accounts and the journal. The only write operation for
postings is `append`; there is no update or delete. Correcting an error
means appending a reversing entry.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from booking_settlement.app.core.exceptions import (
    ResourceNotFoundError, UnbalancedEntryError, UnknownAccountError
)
from booking_settlement.app.db.repositories import AccountRepository, JournalRepository
from booking_settlement.app.domain.ledger.chart_of_accounts import DEFAULT_CHART
from booking_settlement.app.domain.ledger.journal import JournalEntryDraft
from booking_settlement.app.models.account import Account
from booking_settlement.app.models.journal_entry import JournalEntry, JournalLine
from booking_settlement.app.models.settlement_enums import AccountType

logger = logging.getLogger("booking_settlement.ledger")


@dataclass(frozen=True)
class TrialBalanceRow:
    account_id: str
    account_type: AccountType
    debit: int
    credit: int


@dataclass(frozen=True)
class TrialBalance:
    rows: List[TrialBalanceRow]
    total_debit: int
    total_credit: int

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit


class Ledger:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.accounts = AccountRepository(db)
        self.journal = JournalRepository(db)

    async def append(self, draft: JournalEntryDraft) -> JournalEntry:
        """
        Append a journal entry.

        Re-checks the balance law, then that every line posts to an existing
        leaf account. The entry is flushed into the caller's transaction.

        Raises:
            UnbalancedEntryError: debit sum differs from credit sum
            UnknownAccountError: a line references a missing or parent account
        """
        total_debit = sum(line.debit for line in draft.lines)
        total_credit = sum(line.credit for line in draft.lines)
        if total_debit != total_credit:
            raise UnbalancedEntryError(total_debit, total_credit)

        accounts = await self.accounts.get_many(line.account_id for line in draft.lines)
        for line in draft.lines:
            account = accounts.get(line.account_id)
            if account is None:
                raise UnknownAccountError(line.account_id)
            if account.is_parent:
                raise UnknownAccountError(line.account_id, reason="is a parent account and cannot be posted to")

        entry = JournalEntry(
            kind=draft.kind,
            description=draft.description,
            user_id=draft.user_id,
            booking_id=draft.booking_id,
            currency_code=draft.currency_code,
            lines=[
                JournalLine(position=position, account_id=line.account_id, debit=line.debit, credit=line.credit)
                for position, line in enumerate(draft.lines)
            ],
        )
        await self.journal.append(entry)

        logger.info(
            "Journal entry %s appended (%s, booking=%s, amount=%s %s)",
            entry.id, draft.kind.value, draft.booking_id, total_debit, draft.currency_code
        )
        return entry

    async def balance_of(
        self,
        account_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Tuple[int, int]:
        """
        Debit and credit totals for an account over [start, end].

        A parent account aggregates all of its descendants.
        """
        account = await self.accounts.get(account_id)
        if account is None:
            raise ResourceNotFoundError("Account", account_id)

        account_ids = [account_id]
        if account.is_parent:
            account_ids = await self._descendant_ids(account_id)
        return await self.journal.sum_lines(account_ids, start, end)

    async def _descendant_ids(self, account_id: str) -> List[str]:
        children: Dict[Optional[str], List[str]] = {}
        for account in await self.accounts.list_all():
            children.setdefault(account.parent_id, []).append(account.id)

        found = []
        pending = [account_id]
        while pending:
            current = pending.pop()
            found.append(current)
            pending.extend(children.get(current, []))
        return found

    async def trial_balance(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> TrialBalance:
        totals = await self.journal.totals_by_account(start, end)
        rows = []
        for account in await self.accounts.list_all():
            if account.is_parent:
                continue
            debit, credit = totals.get(account.id, (0, 0))
            if debit or credit:
                rows.append(TrialBalanceRow(account.id, account.type, debit, credit))
        return TrialBalance(
            rows=rows,
            total_debit=sum(row.debit for row in rows),
            total_credit=sum(row.credit for row in rows),
        )

    async def entries_for_user(self, user_id: str, limit: int = 100) -> List[JournalEntry]:
        return await self.journal.list_for_user(user_id, limit=limit)

    async def entries_for_booking(self, booking_id: str) -> List[JournalEntry]:
        return await self.journal.list_for_booking(booking_id)

    async def list_accounts(self) -> List[Account]:
        return await self.accounts.list_all()

    async def create_account(
        self,
        account_id: str,
        name: dict,
        account_type: AccountType,
        parent_id: Optional[str] = None,
        is_parent: bool = False,
    ) -> Account:
        if parent_id is not None and await self.accounts.get(parent_id) is None:
            raise ResourceNotFoundError("Account", parent_id)
        return await self.accounts.append(
            Account(id=account_id, name=name, type=account_type, parent_id=parent_id, is_parent=is_parent)
        )

    async def seed_chart_of_accounts(self) -> int:
        """Create any missing accounts of the default chart. Returns how many were created."""
        existing = {account.id for account in await self.accounts.list_all()}
        created = 0
        for account_id, name, account_type, parent_id, is_parent in DEFAULT_CHART:
            if account_id in existing:
                continue
            await self.create_account(account_id, name, account_type, parent_id, is_parent)
            created += 1
        if created:
            logger.info("Seeded %s accounts into the chart of accounts", created)
        return created
