"""
Settlement Orchestrator (Domain Logic).

Entry point for the money side of a booking's life cycle:
1. settle_booking: charge the customer, post the booking entry, pay the
   flight creator's commission.
2. complete_refund: hand an approved refund to the workflow for payment.
3. manual_adjustment: audited admin correction of a wallet.

Each operation is one database transaction.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from booking_settlement.app.core.exceptions import (
    BookingAlreadySettledError,
    BookingNotSettleableError,
    InvalidAmountError,
    InvalidCommissionModelError,
    MissingActorError,
    NoCommissionModelError,
    ResourceNotFoundError,
)
from booking_settlement.app.db.repositories import (
    BookingRepository, CommissionModelRepository, JournalRepository
)
from booking_settlement.app.db.unit_of_work import UnitOfWork
from booking_settlement.app.domain.ledger.ledger import Ledger
from booking_settlement.app.domain.refunds.refund_workflow import RefundWorkflow, TransitionResult
from booking_settlement.app.domain.settlement.commission_calculator import CommissionCalculator, CommissionSplit
from booking_settlement.app.domain.settlement.journal_entry_factory import JournalEntryFactory
from booking_settlement.app.domain.wallet.wallet_service import WalletService
from booking_settlement.app.models.commission_model import CommissionModel
from booking_settlement.app.models.journal_entry import JournalEntry
from booking_settlement.app.models.notification import NotificationType
from booking_settlement.app.models.settlement_enums import (
    BookingStatus, CommissionCalculationType, JournalEntryKind, WalletTransactionType
)
from booking_settlement.app.models.wallet import WalletTransaction
from booking_settlement.app.services.audit import SYSTEM_ACTOR, AuditAction, log_event
from booking_settlement.app.services.notification_service import NotificationService

logger = logging.getLogger("booking_settlement.settlement")


@dataclass(frozen=True)
class SettlementResult:
    booking_id: str
    journal_entry: JournalEntry
    payment: WalletTransaction
    split: CommissionSplit
    creator_payout: Optional[WalletTransaction] = None


class SettlementOrchestrator:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.bookings = BookingRepository(db)
        self.journal = JournalRepository(db)
        self.commission_models = CommissionModelRepository(db)
        self.wallets = WalletService(db)
        self.ledger = Ledger(db)

    async def settle_booking(self, booking_id: str, actor: str = SYSTEM_ACTOR) -> SettlementResult:
        """
        Settle a booking exactly once.

        The commission model is resolved and the entry built before anything
        is written. The wallet debit comes before the ledger, so an
        insufficient balance leaves the journal untouched.

        Raises:
            ResourceNotFoundError: unknown booking
            BookingAlreadySettledError: a booking entry already exists
            BookingNotSettleableError: booking is not confirmed
            NoCommissionModelError: commission model did not resolve
            InsufficientFundsError: the customer's wallet cannot cover the total
        """

        async def work(db: AsyncSession) -> SettlementResult:
            booking = await self.bookings.get(booking_id, for_update=True)
            if booking is None:
                raise ResourceNotFoundError("Booking", booking_id)
            if await self.journal.find_for_booking(booking_id, JournalEntryKind.BOOKING_CREATE) is not None:
                raise BookingAlreadySettledError(booking_id)
            if booking.status != BookingStatus.CONFIRMED:
                raise BookingNotSettleableError(booking_id, booking.status)

            model = await self.commission_models.get(booking.commission_model_id)
            if model is None:
                raise NoCommissionModelError(booking_id, booking.commission_model_id)
            split = CommissionCalculator.compute(model, booking.base_price_total, booking.passenger_count)
            draft = JournalEntryFactory.for_booking_create(booking, model)

            payment = await self.wallets.debit(
                booking.user_id,
                booking.currency_code,
                booking.total_price,
                WalletTransactionType.BOOKING_PAYMENT,
                description=f"Payment for booking {booking.id}, flight {booking.flight_number}",
                booking_id=booking.id,
            )
            entry = await self.ledger.append(draft)

            payout = None
            if booking.creator_id and split.creator > 0:
                payout = await self.wallets.credit(
                    booking.creator_id,
                    booking.currency_code,
                    split.creator,
                    WalletTransactionType.COMMISSION_PAYOUT,
                    description=f"Creator commission for booking {booking.id}",
                    booking_id=booking.id,
                )
                await log_event(
                    db, AuditAction.COMMISSION_PAID, actor,
                    target_user_id=booking.creator_id,
                    metadata={"booking_id": booking.id, "amount": split.creator, "currency": booking.currency_code},
                )

            await log_event(
                db, AuditAction.BOOKING_SETTLED, actor,
                target_user_id=booking.user_id,
                metadata={
                    "booking_id": booking.id,
                    "journal_entry_id": entry.id,
                    "total_price": booking.total_price,
                    "commission_model_id": model.id,
                    "currency": booking.currency_code,
                },
            )
            logger.info(
                "Booking %s settled: charged %s %s, charter=%s creator=%s web_service=%s net=%s",
                booking.id, booking.total_price, booking.currency_code,
                split.charter, split.creator, split.web_service, split.net_revenue
            )
            return SettlementResult(
                booking_id=booking.id,
                journal_entry=entry,
                payment=payment,
                split=split,
                creator_payout=payout,
            )

        return await UnitOfWork(self.db).run(work)

    async def complete_refund(self, refund_id: int, actor: str,
                              expected_version: Optional[int] = None) -> TransitionResult:
        return await RefundWorkflow(self.db).process_payment(refund_id, actor, expected_version=expected_version)

    async def manual_adjustment(
        self,
        user_id: str,
        currency_code: str,
        amount: int,
        actor: str,
        description: str = "",
    ) -> WalletTransaction:
        """
        Signed admin charge: positive credits the wallet, negative debits it.

        Raises:
            MissingActorError: no acting admin
            InvalidAmountError: zero or non-integer amount
            InsufficientFundsError: a debit larger than the balance
        """
        if actor is None or not actor.strip():
            raise MissingActorError()
        if isinstance(amount, bool) or not isinstance(amount, int) or amount == 0:
            raise InvalidAmountError(amount)

        async def work(db: AsyncSession) -> WalletTransaction:
            description_text = description or f"Manual adjustment by {actor}"
            if amount > 0:
                transaction = await self.wallets.credit(
                    user_id, currency_code, amount, WalletTransactionType.MANUAL_CHARGE, description_text
                )
            else:
                transaction = await self.wallets.debit(
                    user_id, currency_code, -amount, WalletTransactionType.MANUAL_CHARGE, description_text
                )
            await log_event(
                db, AuditAction.WALLET_MANUAL_CHARGE, actor,
                target_user_id=user_id,
                metadata={
                    "amount": amount,
                    "currency": currency_code,
                    "description": description_text,
                    "balance_after": transaction.balance_after,
                },
            )
            await NotificationService.create_notification(
                db,
                user_id=user_id,
                title="Wallet update",
                message=f"Your {currency_code} wallet was adjusted by {amount}. New balance: {transaction.balance_after}",
                type=NotificationType.WALLET_UPDATE,
                metadata={"wallet_transaction_id": transaction.id},
            )
            return transaction

        return await UnitOfWork(self.db).run(work)

    async def create_commission_model(
        self,
        model_id: str,
        name: dict,
        calculation_type: CommissionCalculationType,
        charter_commission: Decimal,
        creator_commission: Decimal,
        web_service_commission: Decimal,
        actor: str = SYSTEM_ACTOR,
    ) -> CommissionModel:
        """Create a commission model after validating its rates."""
        CommissionCalculator.validate_rates(
            calculation_type, charter_commission, creator_commission, web_service_commission
        )

        async def work(db: AsyncSession) -> CommissionModel:
            if await self.commission_models.get(model_id) is not None:
                raise InvalidCommissionModelError(
                    f"Commission model {model_id} already exists",
                    details={"model_id": model_id}
                )
            model = await self.commission_models.append(
                CommissionModel(
                    id=model_id,
                    name=name,
                    calculation_type=calculation_type,
                    charter_commission=Decimal(str(charter_commission)),
                    creator_commission=Decimal(str(creator_commission)),
                    web_service_commission=Decimal(str(web_service_commission)),
                )
            )
            await db.refresh(model)
            await log_event(
                db, AuditAction.COMMISSION_MODEL_CREATED, actor,
                metadata={"model_id": model_id, "calculation_type": calculation_type.value},
            )
            return model

        return await UnitOfWork(self.db).run(work)

    async def list_commission_models(self) -> List[CommissionModel]:
        return await self.commission_models.list_all()

    async def get_commission_model(self, model_id: str) -> CommissionModel:
        model = await self.commission_models.get(model_id)
        if model is None:
            raise ResourceNotFoundError("CommissionModel", model_id)
        return model
