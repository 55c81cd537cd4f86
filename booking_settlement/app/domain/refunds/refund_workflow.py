"""
Refund Workflow (Domain Logic).

Drives a refund through expert review, financial review and payment.
Every transition is a compare-and-set on the refund's status, so two
admins acting on the same refund cannot both succeed, and a repeated
call never re-applies its effects.

process_payment credits the wallet, appends the reversing journal entry
and marks the booking REFUNDED in one transaction.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Dict, FrozenSet, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from booking_settlement.app.core.clock import utcnow
from booking_settlement.app.core.config import settings
from booking_settlement.app.core.exceptions import (
    BookingNotRefundableError,
    InvalidAmountError,
    InvalidTransitionError,
    MissingActorError,
    RefundAlreadyRequestedError,
    RejectionReasonRequiredError,
    ResourceNotFoundError,
)
from booking_settlement.app.db.repositories import (
    BookingRepository,
    JournalRepository,
    RefundPolicyRepository,
    RefundRepository,
)
from booking_settlement.app.db.unit_of_work import UnitOfWork
from booking_settlement.app.domain.ledger.ledger import Ledger
from booking_settlement.app.domain.refunds.refund_policy import RefundPolicyResolver
from booking_settlement.app.domain.settlement.journal_entry_factory import JournalEntryFactory
from booking_settlement.app.domain.wallet.wallet_service import WalletService
from booking_settlement.app.models.notification import NotificationType
from booking_settlement.app.models.refund import Refund
from booking_settlement.app.models.settlement_enums import (
    BookingStatus, JournalEntryKind, RefundStatus, WalletTransactionType
)
from booking_settlement.app.services.audit import AuditAction, log_event
from booking_settlement.app.services.notification_service import NotificationService

logger = logging.getLogger("booking_settlement.refunds")

REFUNDABLE_BOOKING_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED})

OPEN_STATUSES = frozenset(status for status in RefundStatus if not status.is_terminal)

# action -> (statuses it may start from, status it moves to)
TRANSITIONS: Dict[str, Tuple[FrozenSet[RefundStatus], RefundStatus]] = {
    "expert_approve": (frozenset({RefundStatus.PENDING_EXPERT_REVIEW}), RefundStatus.PENDING_FINANCIAL_REVIEW),
    "financial_approve": (frozenset({RefundStatus.PENDING_FINANCIAL_REVIEW}), RefundStatus.PENDING_PAYMENT),
    "process_payment": (frozenset({RefundStatus.PENDING_PAYMENT}), RefundStatus.COMPLETED),
    "reject": (OPEN_STATUSES, RefundStatus.REJECTED),
}

AUDIT_ACTIONS = {
    "submit": AuditAction.REFUND_SUBMITTED,
    "expert_approve": AuditAction.REFUND_EXPERT_APPROVED,
    "financial_approve": AuditAction.REFUND_FINANCIAL_APPROVED,
    "process_payment": AuditAction.REFUND_PAID,
    "reject": AuditAction.REFUND_REJECTED,
}

STATUS_LABELS: Dict[RefundStatus, str] = {
    RefundStatus.PENDING_EXPERT_REVIEW: "awaiting expert review",
    RefundStatus.PENDING_FINANCIAL_REVIEW: "awaiting financial review",
    RefundStatus.PENDING_PAYMENT: "approved, awaiting payment",
    RefundStatus.COMPLETED: "paid to your wallet",
    RefundStatus.REJECTED: "rejected",
}


def describe_transition(old: Optional[RefundStatus], new: RefundStatus) -> str:
    """Plain-text status change shown to the customer."""
    if old is None:
        return f"Refund request received, {STATUS_LABELS[new]}"
    return f"Refund status changed from {STATUS_LABELS[old]} to {STATUS_LABELS[new]}"


@dataclass(frozen=True)
class TransitionResult:
    refund: Refund
    previous_status: Optional[RefundStatus]
    description: str


def _require_actor(actor: Optional[str]) -> str:
    if actor is None or not actor.strip():
        raise MissingActorError()
    return actor.strip()


class RefundWorkflow:

    def __init__(self, db: AsyncSession, record_cancellation_penalty: Optional[bool] = None):
        self.db = db
        self.refunds = RefundRepository(db)
        self.bookings = BookingRepository(db)
        self.journal = JournalRepository(db)
        self.refund_policies = RefundPolicyRepository(db)
        self.wallets = WalletService(db)
        self.ledger = Ledger(db)
        if record_cancellation_penalty is None:
            record_cancellation_penalty = settings.record_cancellation_penalty
        self.record_cancellation_penalty = record_cancellation_penalty

    async def get(self, refund_id: int) -> Refund:
        refund = await self.refunds.get(refund_id)
        if refund is None:
            raise ResourceNotFoundError("Refund", refund_id)
        return refund

    async def list_refunds(self, status: Optional[RefundStatus] = None, user_id: Optional[str] = None,
                           limit: int = 100) -> List[Refund]:
        return await self.refunds.list_refunds(status=status, user_id=user_id, limit=limit)

    async def submit(
        self,
        booking_id: str,
        requested_by: str,
        reason: Optional[str] = None,
        penalty_amount: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> TransitionResult:
        """
        Open a refund request for a settled booking.

        The penalty is `penalty_amount` when given, otherwise resolved from
        the booking's refund policy. Amounts are frozen here.

        Raises:
            ResourceNotFoundError: unknown booking
            BookingNotRefundableError: booking is not confirmed/cancelled or was never settled
            RefundAlreadyRequestedError: an open or completed refund exists
            InvalidAmountError: explicit penalty outside [0, original amount]
        """
        actor = _require_actor(requested_by)

        async def work(db: AsyncSession) -> TransitionResult:
            booking = await self.bookings.get(booking_id, for_update=True)
            if booking is None:
                raise ResourceNotFoundError("Booking", booking_id)
            if booking.status not in REFUNDABLE_BOOKING_STATUSES:
                raise BookingNotRefundableError(booking_id, f"booking is {booking.status.value}")
            created = await self.journal.find_for_booking(booking_id, JournalEntryKind.BOOKING_CREATE)
            if created is None:
                raise BookingNotRefundableError(booking_id, "booking has not been settled")

            existing = await self.refunds.find_blocking_for_booking(booking_id)
            if existing is not None:
                raise RefundAlreadyRequestedError(booking_id, existing.id)

            # Amount actually charged at settlement
            original_amount = created.total_debit
            if penalty_amount is None:
                policy = await self.refund_policies.get(booking.refund_policy_id)
                penalty = RefundPolicyResolver.quote(policy, original_amount, booking.departure_at, now).penalty_amount
            else:
                if (isinstance(penalty_amount, bool) or not isinstance(penalty_amount, int)
                        or not 0 <= penalty_amount <= original_amount):
                    raise InvalidAmountError(penalty_amount)
                penalty = penalty_amount

            refund = await self.refunds.append(
                Refund(
                    booking_id=booking.id,
                    user_id=booking.user_id,
                    status=RefundStatus.PENDING_EXPERT_REVIEW,
                    version=0,
                    currency_code=created.currency_code,
                    original_amount=original_amount,
                    penalty_amount=penalty,
                    refund_amount=original_amount - penalty,
                    reason=reason,
                    requested_at=utcnow(),
                )
            )
            refund = await self.get(refund.id)
            description = describe_transition(None, refund.status)
            await self._record(refund, "submit", actor, description, None)
            return TransitionResult(refund, None, description)

        return await UnitOfWork(self.db).run(work)

    async def expert_approve(self, refund_id: int, actor: str,
                             expected_version: Optional[int] = None) -> TransitionResult:
        actor = _require_actor(actor)
        return await self._transition(
            "expert_approve", refund_id, actor, expected_version,
            {"expert_reviewer_name": actor, "expert_reviewed_at": utcnow()},
        )

    async def financial_approve(self, refund_id: int, actor: str,
                                expected_version: Optional[int] = None) -> TransitionResult:
        actor = _require_actor(actor)
        return await self._transition(
            "financial_approve", refund_id, actor, expected_version,
            {"financial_reviewer_name": actor, "financial_reviewed_at": utcnow()},
        )

    async def process_payment(self, refund_id: int, actor: str,
                              expected_version: Optional[int] = None) -> TransitionResult:
        """
        Pay an approved refund.

        The status flip is applied first; the wallet credit, reversing entry,
        optional penalty entry and booking status follow in the same
        transaction, and any failure rolls all of them back.
        """
        actor = _require_actor(actor)
        return await self._transition(
            "process_payment", refund_id, actor, expected_version,
            {"payment_processor_name": actor, "paid_at": utcnow()},
            side_effects=self._pay_out,
        )

    async def reject(self, refund_id: int, actor: str, reason: Optional[str],
                     expected_version: Optional[int] = None) -> TransitionResult:
        actor = _require_actor(actor)
        if reason is None or not reason.strip():
            raise RejectionReasonRequiredError()
        return await self._transition(
            "reject", refund_id, actor, expected_version,
            {"rejecter_name": actor, "rejected_at": utcnow(), "rejection_reason": reason.strip()},
        )

    async def _transition(
        self,
        action: str,
        refund_id: int,
        actor: str,
        expected_version: Optional[int],
        values: dict,
        side_effects: Optional[Callable[[Refund], Awaitable[None]]] = None,
    ) -> TransitionResult:
        expected, target = TRANSITIONS[action]

        async def work(db: AsyncSession) -> TransitionResult:
            refund = await self.get(refund_id)
            previous = refund.status
            applied = await self.refunds.update_if(
                refund_id, expected, {"status": target, **values}, expected_version=expected_version
            )
            if not applied:
                raise InvalidTransitionError(refund_id, action, previous)

            refund = await self.get(refund_id)
            if side_effects is not None:
                await side_effects(refund)

            description = describe_transition(previous, target)
            await self._record(refund, action, actor, description, previous)
            return TransitionResult(refund, previous, description)

        return await UnitOfWork(self.db).run(work)

    async def _pay_out(self, refund: Refund) -> None:
        booking = await self.bookings.get(refund.booking_id, for_update=True)
        if booking is None:
            raise ResourceNotFoundError("Booking", refund.booking_id)

        if refund.refund_amount > 0:
            await self.wallets.credit(
                refund.user_id,
                refund.currency_code,
                refund.refund_amount,
                WalletTransactionType.REFUND,
                description=f"Refund #{refund.id} for booking {booking.id}",
                booking_id=booking.id,
            )

        created = await self.journal.find_for_booking(booking.id, JournalEntryKind.BOOKING_CREATE)
        if created is None:
            raise BookingNotRefundableError(booking.id, "booking has not been settled")
        await self.ledger.append(
            JournalEntryFactory.for_booking_cancel_or_refund(booking, None, posted_entry=created)
        )

        if refund.penalty_amount > 0 and self.record_cancellation_penalty:
            await self.ledger.append(JournalEntryFactory.for_cancellation_penalty(booking, refund.penalty_amount))

        if not await self.bookings.update_status_if(booking.id, REFUNDABLE_BOOKING_STATUSES, BookingStatus.REFUNDED):
            raise BookingNotRefundableError(booking.id, "booking is no longer confirmed or cancelled")

    async def _record(self, refund: Refund, action: str, actor: str, description: str,
                      previous: Optional[RefundStatus]) -> None:
        metadata = {
            "refund_id": refund.id,
            "booking_id": refund.booking_id,
            "from_status": previous.value if previous is not None else None,
            "to_status": refund.status.value,
            "refund_amount": refund.refund_amount,
            "currency": refund.currency_code,
        }
        await log_event(self.db, AUDIT_ACTIONS[action], actor, target_user_id=refund.user_id, metadata=metadata)
        await NotificationService.create_notification(
            self.db,
            user_id=refund.user_id,
            title=f"Refund #{refund.id}",
            message=description,
            type=NotificationType.REFUND_UPDATE,
            metadata=metadata,
        )
        logger.info("Refund %s %s by %s: %s", refund.id, action, actor, description)
