"""
Journal Entry Factory.

Builds the balanced entries recorded for a booking's life cycle.
"""

from booking_settlement.app.core.exceptions import InvalidAmountError, NoCommissionModelError
from booking_settlement.app.domain.ledger import chart_of_accounts as coa
from booking_settlement.app.domain.ledger.journal import JournalEntryDraft, LineDraft
from booking_settlement.app.domain.settlement.commission_calculator import CommissionCalculator
from booking_settlement.app.models.settlement_enums import JournalEntryKind


class JournalEntryFactory:

    @staticmethod
    def for_booking_create(booking, commission_model) -> JournalEntryDraft:
        """
        Six-line entry for a confirmed booking.

        Dr Accounts Receivable         total price (fares + taxes)
            Cr Charter Commission Payable
            Cr Creator Commission Payable
            Cr Web Service Commission Revenue
            Cr Net Ticket Revenue
            Cr Taxes Payable

        Raises:
            NoCommissionModelError: the booking's model did not resolve
        """
        if commission_model is None:
            raise NoCommissionModelError(booking.id, booking.commission_model_id)

        split = CommissionCalculator.compute(
            commission_model, booking.base_price_total, booking.passenger_count
        )
        return JournalEntryDraft(
            kind=JournalEntryKind.BOOKING_CREATE,
            description=f"Booking {booking.id} created, flight {booking.flight_number}",
            currency_code=booking.currency_code,
            user_id=booking.user_id,
            booking_id=booking.id,
            lines=(
                LineDraft(coa.ACCOUNTS_RECEIVABLE, debit=booking.total_price),
                LineDraft(coa.CHARTER_COMMISSION_PAYABLE, credit=split.charter),
                LineDraft(coa.CREATOR_COMMISSION_PAYABLE, credit=split.creator),
                LineDraft(coa.WEB_SERVICE_COMMISSION_REVENUE, credit=split.web_service),
                LineDraft(coa.NET_TICKET_REVENUE, credit=split.net_revenue),
                LineDraft(coa.TAXES_PAYABLE, credit=booking.taxes_total),
            ),
        )

    @staticmethod
    def from_posted(entry) -> JournalEntryDraft:
        """Draft carrying the lines of an entry already in the journal."""
        return JournalEntryDraft(
            kind=entry.kind,
            description=entry.description,
            currency_code=entry.currency_code,
            user_id=entry.user_id,
            booking_id=entry.booking_id,
            lines=tuple(
                LineDraft(line.account_id, debit=line.debit, credit=line.credit) for line in entry.lines
            ),
        )

    @staticmethod
    def for_booking_cancel_or_refund(booking, commission_model, posted_entry=None) -> JournalEntryDraft:
        """
        Exact mirror of the creation entry, so a fully cancelled booking nets to zero.

        With `posted_entry` the lines actually recorded at settlement are
        swapped; the booking's current price and commission model are not
        consulted.
        """
        if posted_entry is not None:
            created = JournalEntryFactory.from_posted(posted_entry)
        else:
            created = JournalEntryFactory.for_booking_create(booking, commission_model)
        return created.reversed(
            kind=JournalEntryKind.BOOKING_REVERSAL,
            description=f"Booking {booking.id} cancelled/refunded, flight {booking.flight_number}",
        )

    @staticmethod
    def for_cancellation_penalty(booking, penalty_amount: int) -> JournalEntryDraft:
        """Penalty retained on a refunded booking, recognized as cancellation fee revenue."""
        if not isinstance(penalty_amount, int) or penalty_amount <= 0:
            raise InvalidAmountError(penalty_amount)
        return JournalEntryDraft(
            kind=JournalEntryKind.CANCELLATION_PENALTY,
            description=f"Cancellation penalty retained for booking {booking.id}",
            currency_code=booking.currency_code,
            user_id=booking.user_id,
            booking_id=booking.id,
            lines=(
                LineDraft(coa.ACCOUNTS_RECEIVABLE, debit=penalty_amount),
                LineDraft(coa.CANCELLATION_FEE_REVENUE, credit=penalty_amount),
            ),
        )
