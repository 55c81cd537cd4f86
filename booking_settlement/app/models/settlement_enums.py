"""
Settlement enumerations.

Closed sets for every status or type field the settlement core stores.
"""

import enum


class AccountType(str, enum.Enum):
    """Chart-of-accounts classification."""
    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expense"


class CommissionCalculationType(str, enum.Enum):
    """How a commission model's rates are applied."""
    PERCENTAGE = "Percentage"  # rate is a percent of the base price total
    FIXED_AMOUNT = "FixedAmount"  # rate is a minor-unit amount per passenger


class JournalEntryKind(str, enum.Enum):
    """Accounting event a journal entry records."""
    BOOKING_CREATE = "BOOKING_CREATE"
    BOOKING_REVERSAL = "BOOKING_REVERSAL"
    CANCELLATION_PENALTY = "CANCELLATION_PENALTY"
    MANUAL = "MANUAL"


class WalletTransactionType(str, enum.Enum):
    """Wallet transaction type enumeration."""
    BOOKING_PAYMENT = "BOOKING_PAYMENT"
    REFUND = "REFUND"
    COMMISSION_PAYOUT = "COMMISSION_PAYOUT"
    MANUAL_CHARGE = "MANUAL_CHARGE"


class BookingStatus(str, enum.Enum):
    """Booking status as seen by the settlement core."""
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class RefundStatus(str, enum.Enum):
    """
    Refund workflow states.

    PENDING_EXPERT_REVIEW -> PENDING_FINANCIAL_REVIEW -> PENDING_PAYMENT -> COMPLETED,
    REJECTED reachable from any non-terminal state.
    """
    PENDING_EXPERT_REVIEW = "PENDING_EXPERT_REVIEW"
    PENDING_FINANCIAL_REVIEW = "PENDING_FINANCIAL_REVIEW"
    PENDING_PAYMENT = "PENDING_PAYMENT"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self in (RefundStatus.COMPLETED, RefundStatus.REJECTED)


class RefundPolicyType(str, enum.Enum):
    DOMESTIC = "Domestic"
    INTERNATIONAL = "International"
    CHARTER = "Charter"
