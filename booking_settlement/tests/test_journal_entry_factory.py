"""
Journal Entry Factory Tests.

Entry shapes for booking creation, reversal and cancellation penalties.
"""

import pytest
from collections import defaultdict
from decimal import Decimal

from booking_settlement.app.core.exceptions import NoCommissionModelError, UnbalancedEntryError
from booking_settlement.app.domain.ledger import chart_of_accounts as coa
from booking_settlement.app.domain.ledger.journal import JournalEntryDraft, LineDraft
from booking_settlement.app.domain.settlement.journal_entry_factory import JournalEntryFactory
from booking_settlement.app.models.booking import Booking
from booking_settlement.app.models.commission_model import CommissionModel
from booking_settlement.app.models.journal_entry import JournalEntry, JournalLine
from booking_settlement.app.models.settlement_enums import (
    BookingStatus, CommissionCalculationType, JournalEntryKind
)


@pytest.fixture
def booking():
    return Booking(
        id="BK-100",
        user_id="customer-1",
        flight_number="IR-452",
        creator_id="creator-1",
        commission_model_id="CM-1",
        price=2_500_000,
        taxes=150_000,
        currency_code="IRR",
        adults=2,
        children=0,
        infants=0,
        status=BookingStatus.CONFIRMED,
    )


@pytest.fixture
def model():
    return CommissionModel(
        id="CM-1",
        name={"en": "Standard Charter"},
        calculation_type=CommissionCalculationType.PERCENTAGE,
        charter_commission=Decimal("5"),
        creator_commission=Decimal("2"),
        web_service_commission=Decimal("1"),
    )


def _lines_by_account(draft):
    return {line.account_id: (line.debit, line.credit) for line in draft.lines}


def test_booking_create_entry_lines(booking, model):
    draft = JournalEntryFactory.for_booking_create(booking, model)
    lines = _lines_by_account(draft)
    
    assert draft.kind == JournalEntryKind.BOOKING_CREATE
    assert draft.booking_id == "BK-100"
    assert draft.user_id == "customer-1"
    assert draft.currency_code == "IRR"
    assert len(draft.lines) == 6
    assert lines[coa.ACCOUNTS_RECEIVABLE] == (5_300_000, 0)
    assert lines[coa.CHARTER_COMMISSION_PAYABLE] == (0, 250_000)
    assert lines[coa.CREATOR_COMMISSION_PAYABLE] == (0, 100_000)
    assert lines[coa.WEB_SERVICE_COMMISSION_REVENUE] == (0, 50_000)
    assert lines[coa.NET_TICKET_REVENUE] == (0, 4_600_000)
    assert lines[coa.TAXES_PAYABLE] == (0, 300_000)
    assert draft.total_debit == draft.total_credit == 5_300_000


def test_create_and_reversal_net_to_zero_per_account(booking, model):
    created = JournalEntryFactory.for_booking_create(booking, model)
    reversed_entry = JournalEntryFactory.for_booking_cancel_or_refund(booking, model)
    
    net = defaultdict(int)
    for draft in (created, reversed_entry):
        for line in draft.lines:
            net[line.account_id] += line.debit - line.credit
    
    assert reversed_entry.kind == JournalEntryKind.BOOKING_REVERSAL
    assert all(amount == 0 for amount in net.values())


def test_reversal_with_children_and_infants(booking, model):
    booking.children = 1
    booking.infants = 1
    reversed_entry = JournalEntryFactory.for_booking_cancel_or_refund(booking, model)
    lines = _lines_by_account(reversed_entry)
    
    # 4 passengers: total 10,600,000
    assert lines[coa.ACCOUNTS_RECEIVABLE] == (0, 10_600_000)
    assert lines[coa.NET_TICKET_REVENUE] == (9_200_000, 0)


def test_reversal_of_posted_entry_ignores_current_booking(booking):
    posted = JournalEntry(
        kind=JournalEntryKind.BOOKING_CREATE,
        description="Booking BK-100 created, flight IR-452",
        currency_code="IRR",
        user_id="customer-1",
        booking_id="BK-100",
        lines=[
            JournalLine(position=0, account_id=coa.ACCOUNTS_RECEIVABLE, debit=700, credit=0),
            JournalLine(position=1, account_id=coa.NET_TICKET_REVENUE, debit=0, credit=700),
        ],
    )
    
    draft = JournalEntryFactory.for_booking_cancel_or_refund(booking, None, posted_entry=posted)
    
    assert draft.kind == JournalEntryKind.BOOKING_REVERSAL
    assert draft.booking_id == "BK-100"
    assert _lines_by_account(draft) == {
        coa.ACCOUNTS_RECEIVABLE: (0, 700),
        coa.NET_TICKET_REVENUE: (700, 0),
    }


def test_missing_commission_model_raises(booking):
    with pytest.raises(NoCommissionModelError) as exc_info:
        JournalEntryFactory.for_booking_create(booking, None)
    
    assert exc_info.value.user_facing is False


def test_cancellation_penalty_entry(booking):
    draft = JournalEntryFactory.for_cancellation_penalty(booking, 530_000)
    
    assert draft.kind == JournalEntryKind.CANCELLATION_PENALTY
    assert _lines_by_account(draft) == {
        coa.ACCOUNTS_RECEIVABLE: (530_000, 0),
        coa.CANCELLATION_FEE_REVENUE: (0, 530_000),
    }


def test_unbalanced_draft_cannot_be_built():
    with pytest.raises(UnbalancedEntryError):
        JournalEntryDraft(
            kind=JournalEntryKind.MANUAL,
            description="Off by one",
            currency_code="IRR",
            lines=(LineDraft("1020", debit=100), LineDraft("4011", credit=99)),
        )


def test_two_sided_line_rejected():
    with pytest.raises(UnbalancedEntryError):
        JournalEntryDraft(
            kind=JournalEntryKind.MANUAL,
            description="Both sides",
            currency_code="IRR",
            lines=(LineDraft("1020", debit=100, credit=100),),
        )


def test_negative_line_rejected():
    with pytest.raises(UnbalancedEntryError):
        JournalEntryDraft(
            kind=JournalEntryKind.MANUAL,
            description="Negative",
            currency_code="IRR",
            lines=(LineDraft("1020", debit=-100), LineDraft("4011", credit=-100)),
        )


def test_empty_entry_rejected():
    with pytest.raises(UnbalancedEntryError):
        JournalEntryDraft(kind=JournalEntryKind.MANUAL, description="Empty", currency_code="IRR", lines=())
