"""
In-memory journal entry drafts.

A draft is validated when it is constructed: every line is one-sided and
non-negative, and the entry balances. An unbalanced draft cannot exist,
so nothing unbalanced can reach the Ledger.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from booking_settlement.app.core.exceptions import UnbalancedEntryError
from booking_settlement.app.models.settlement_enums import JournalEntryKind


@dataclass(frozen=True)
class LineDraft:
    account_id: str
    debit: int = 0
    credit: int = 0

    def swapped(self) -> "LineDraft":
        return LineDraft(account_id=self.account_id, debit=self.credit, credit=self.debit)


@dataclass(frozen=True)
class JournalEntryDraft:
    kind: JournalEntryKind
    description: str
    currency_code: str
    lines: Tuple[LineDraft, ...]
    user_id: Optional[str] = None
    booking_id: Optional[str] = None
    total_debit: int = field(init=False)
    total_credit: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))
        total_debit = 0
        total_credit = 0
        for line in self.lines:
            if not isinstance(line.debit, int) or not isinstance(line.credit, int):
                raise UnbalancedEntryError(
                    total_debit, total_credit,
                    reason=f"Line on {line.account_id} carries a non-integer amount"
                )
            if line.debit < 0 or line.credit < 0:
                raise UnbalancedEntryError(
                    total_debit, total_credit,
                    reason=f"Line on {line.account_id} carries a negative amount"
                )
            if line.debit and line.credit:
                raise UnbalancedEntryError(
                    total_debit, total_credit,
                    reason=f"Line on {line.account_id} is both a debit and a credit"
                )
            total_debit += line.debit
            total_credit += line.credit
        if not self.lines:
            raise UnbalancedEntryError(0, 0, reason="Journal entry has no lines")
        if total_debit != total_credit:
            raise UnbalancedEntryError(total_debit, total_credit)
        object.__setattr__(self, "total_debit", total_debit)
        object.__setattr__(self, "total_credit", total_credit)

    def reversed(self, kind: JournalEntryKind, description: str) -> "JournalEntryDraft":
        """Mirror entry: every debit becomes a credit and vice versa."""
        return replace(
            self,
            kind=kind,
            description=description,
            lines=tuple(line.swapped() for line in self.lines),
        )
