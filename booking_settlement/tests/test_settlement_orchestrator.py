"""
Settlement Orchestrator Tests.

Booking settlement, manual wallet adjustments and commission model setup.
"""

import pytest
from decimal import Decimal
from sqlalchemy import select

from booking_settlement.app.core.exceptions import (
    BookingAlreadySettledError,
    BookingNotSettleableError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidCommissionModelError,
    MissingActorError,
    NoCommissionModelError,
    ResourceNotFoundError,
)
from booking_settlement.app.domain.ledger import chart_of_accounts as coa
from booking_settlement.app.domain.ledger.ledger import Ledger
from booking_settlement.app.domain.settlement.orchestrator import SettlementOrchestrator
from booking_settlement.app.domain.wallet.wallet_service import WalletService
from booking_settlement.app.models.audit_log import AuditLog
from booking_settlement.app.models.notification import Notification, NotificationType
from booking_settlement.app.models.settlement_enums import (
    BookingStatus, CommissionCalculationType, JournalEntryKind, WalletTransactionType
)

CUSTOMER_ID = "customer-1"
CREATOR_ID = "creator-1"


async def _audit_actions(db_session):
    rows = (await db_session.execute(select(AuditLog).order_by(AuditLog.id))).scalars().all()
    return [row.action for row in rows]


# TEST 1: Settlement happy path
@pytest.mark.asyncio
async def test_settle_booking_charges_customer_and_pays_creator(db_session, make_booking, fund_wallet):
    """2 adults at 2,500,000 + 150,000 taxes: 5,300,000 charged, 100,000 to the creator."""
    await make_booking("BK-1")
    await fund_wallet(CUSTOMER_ID, 6_000_000)

    result = await SettlementOrchestrator(db_session).settle_booking("BK-1")

    lines = {line.account_id: (line.debit, line.credit) for line in result.journal_entry.lines}
    customer = await WalletService(db_session).get_wallet(CUSTOMER_ID, "IRR")
    creator = await WalletService(db_session).get_wallet(CREATOR_ID, "IRR")

    assert result.booking_id == "BK-1"
    assert result.payment.amount == -5_300_000
    assert result.payment.type == WalletTransactionType.BOOKING_PAYMENT
    assert result.creator_payout.amount == 100_000
    assert result.split.charter == 250_000
    assert result.split.net_revenue == 4_600_000
    assert customer.balance == 700_000
    assert creator.balance == 100_000
    assert result.journal_entry.kind == JournalEntryKind.BOOKING_CREATE
    assert lines[coa.ACCOUNTS_RECEIVABLE] == (5_300_000, 0)
    assert lines[coa.TAXES_PAYABLE] == (0, 300_000)
    assert (await Ledger(db_session).trial_balance()).is_balanced
    assert await WalletService(db_session).verify_consistency(CUSTOMER_ID, "IRR")


@pytest.mark.asyncio
async def test_settlement_is_audited(db_session, make_booking, fund_wallet):
    await make_booking("BK-1")
    await fund_wallet(CUSTOMER_ID, 6_000_000)

    await SettlementOrchestrator(db_session).settle_booking("BK-1", actor="ops-1")

    actions = await _audit_actions(db_session)
    assert actions[-2:] == ["COMMISSION_PAID", "BOOKING_SETTLED"]


@pytest.mark.asyncio
async def test_no_creator_no_payout(db_session, make_booking, fund_wallet):
    await make_booking("BK-1", creator_id=None)
    await fund_wallet(CUSTOMER_ID, 6_000_000)

    result = await SettlementOrchestrator(db_session).settle_booking("BK-1")

    assert result.creator_payout is None
    assert await WalletService(db_session).list_wallets(CREATOR_ID) == []


# TEST 2: Exactly once
@pytest.mark.asyncio
async def test_double_settlement_refused(db_session, make_booking, fund_wallet):
    await make_booking("BK-1")
    await fund_wallet(CUSTOMER_ID, 20_000_000)
    orchestrator = SettlementOrchestrator(db_session)
    await orchestrator.settle_booking("BK-1")

    with pytest.raises(BookingAlreadySettledError):
        await orchestrator.settle_booking("BK-1")

    wallet = await WalletService(db_session).get_wallet(CUSTOMER_ID, "IRR")
    entries = await Ledger(db_session).entries_for_booking("BK-1")
    assert wallet.balance == 14_700_000
    assert len(entries) == 1


# TEST 3: Failure leaves nothing behind
@pytest.mark.asyncio
async def test_insufficient_funds_leaves_ledger_untouched(db_session, make_booking, fund_wallet):
    await make_booking("BK-1")
    await fund_wallet(CUSTOMER_ID, 1_000_000)

    with pytest.raises(InsufficientFundsError) as exc_info:
        await SettlementOrchestrator(db_session).settle_booking("BK-1")

    wallet = await WalletService(db_session).get_wallet(CUSTOMER_ID, "IRR")
    assert exc_info.value.details["requested"] == 5_300_000
    assert wallet.balance == 1_000_000
    assert await Ledger(db_session).entries_for_booking("BK-1") == []
    assert "BOOKING_SETTLED" not in await _audit_actions(db_session)


@pytest.mark.asyncio
async def test_missing_commission_model(db_session, make_booking, fund_wallet):
    await make_booking("BK-1", commission_model_id=None)
    await fund_wallet(CUSTOMER_ID, 6_000_000)

    with pytest.raises(NoCommissionModelError) as exc_info:
        await SettlementOrchestrator(db_session).settle_booking("BK-1")

    wallet = await WalletService(db_session).get_wallet(CUSTOMER_ID, "IRR")
    assert exc_info.value.user_facing is False
    assert wallet.balance == 6_000_000


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [BookingStatus.CANCELLED, BookingStatus.REFUNDED])
async def test_only_confirmed_bookings_are_settled(db_session, make_booking, fund_wallet, status):
    await make_booking("BK-C", status=status)
    await fund_wallet(CUSTOMER_ID, 10_000_000)

    with pytest.raises(BookingNotSettleableError) as exc_info:
        await SettlementOrchestrator(db_session).settle_booking("BK-C")

    wallet = await WalletService(db_session).get_wallet(CUSTOMER_ID, "IRR")
    assert exc_info.value.status_code == 409
    assert exc_info.value.details["status"] == status.value
    assert wallet.balance == 10_000_000
    assert await Ledger(db_session).entries_for_booking("BK-C") == []
    assert await WalletService(db_session).list_wallets(CREATOR_ID) == []


@pytest.mark.asyncio
async def test_unknown_booking(db_session, chart):
    with pytest.raises(ResourceNotFoundError):
        await SettlementOrchestrator(db_session).settle_booking("BK-MISSING")


# TEST 4: Manual adjustments
@pytest.mark.asyncio
async def test_manual_adjustment_credit_and_debit(db_session):
    orchestrator = SettlementOrchestrator(db_session)

    credit = await orchestrator.manual_adjustment(CUSTOMER_ID, "IRR", 900_000, actor="admin-1")
    debit = await orchestrator.manual_adjustment(
        CUSTOMER_ID, "IRR", -400_000, actor="admin-1", description="Goodwill reversal"
    )

    notifications = (await db_session.execute(
        select(Notification).where(Notification.user_id == CUSTOMER_ID)
    )).scalars().all()

    assert credit.type == WalletTransactionType.MANUAL_CHARGE
    assert credit.description == "Manual adjustment by admin-1"
    assert debit.amount == -400_000
    assert debit.balance_after == 500_000
    assert await _audit_actions(db_session) == ["WALLET_MANUAL_CHARGE", "WALLET_MANUAL_CHARGE"]
    assert len(notifications) == 2
    assert all(n.type == NotificationType.WALLET_UPDATE for n in notifications)


@pytest.mark.asyncio
async def test_manual_debit_cannot_overdraw(db_session):
    orchestrator = SettlementOrchestrator(db_session)
    await orchestrator.manual_adjustment(CUSTOMER_ID, "IRR", 100, actor="admin-1")

    with pytest.raises(InsufficientFundsError):
        await orchestrator.manual_adjustment(CUSTOMER_ID, "IRR", -101, actor="admin-1")

    assert (await WalletService(db_session).get_wallet(CUSTOMER_ID, "IRR")).balance == 100
    assert await _audit_actions(db_session) == ["WALLET_MANUAL_CHARGE"]


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, 1.5, True])
async def test_manual_adjustment_invalid_amount(db_session, amount):
    with pytest.raises(InvalidAmountError):
        await SettlementOrchestrator(db_session).manual_adjustment(CUSTOMER_ID, "IRR", amount, actor="admin-1")


@pytest.mark.asyncio
async def test_manual_adjustment_requires_actor(db_session):
    with pytest.raises(MissingActorError):
        await SettlementOrchestrator(db_session).manual_adjustment(CUSTOMER_ID, "IRR", 100, actor="  ")


# TEST 5: Commission models
@pytest.mark.asyncio
async def test_create_commission_model(db_session):
    orchestrator = SettlementOrchestrator(db_session)

    model = await orchestrator.create_commission_model(
        "CM-9", {"en": "Fixed fee"}, CommissionCalculationType.FIXED_AMOUNT,
        Decimal("100000"), 50_000, "25000", actor="admin-1",
    )

    assert model.creator_commission == Decimal("50000")
    assert (await orchestrator.get_commission_model("CM-9")).name == {"en": "Fixed fee"}
    assert [m.id for m in await orchestrator.list_commission_models()] == ["CM-9"]
    assert await _audit_actions(db_session) == ["COMMISSION_MODEL_CREATED"]


@pytest.mark.asyncio
async def test_commission_model_over_100_percent_refused(db_session):
    with pytest.raises(InvalidCommissionModelError):
        await SettlementOrchestrator(db_session).create_commission_model(
            "CM-9", {"en": "Too much"}, CommissionCalculationType.PERCENTAGE, 60, 30, 20,
        )

    with pytest.raises(ResourceNotFoundError):
        await SettlementOrchestrator(db_session).get_commission_model("CM-9")


@pytest.mark.asyncio
async def test_duplicate_commission_model_refused(db_session, standard_model):
    with pytest.raises(InvalidCommissionModelError) as exc_info:
        await SettlementOrchestrator(db_session).create_commission_model(
            "CM-1", {"en": "Again"}, CommissionCalculationType.PERCENTAGE, 1, 1, 1,
        )

    assert "already exists" in exc_info.value.message
