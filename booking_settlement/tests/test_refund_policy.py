"""
Refund Policy Resolver Tests.

Penalty tier selection by hours before departure.
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from booking_settlement.app.core.exceptions import InvalidAmountError
from booking_settlement.app.domain.refunds.refund_policy import RefundPolicyResolver
from booking_settlement.app.models.refund_policy import RefundPolicy, RefundPolicyRule

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _policy(*rules):
    return RefundPolicy(
        id="RP-T",
        name={"en": "Test policy"},
        rules=[
            RefundPolicyRule(id=index, hours_before_departure=hours, penalty_percentage=Decimal(str(percentage)))
            for index, (hours, percentage) in enumerate(rules, start=1)
        ],
    )


@pytest.fixture
def international():
    # Deliberately unsorted
    return _policy((24, 50), (72, 10), (0, 100))


@pytest.mark.parametrize(
    "hours_left, expected_percentage",
    [
        (48, Decimal("10")),   # covered by the 72h tier
        (72, Decimal("10")),
        (10, Decimal("50")),   # covered by the 24h tier
        (24, Decimal("50")),
        (-2, Decimal("100")),  # already departed
        (100, Decimal("100")), # no tier reaches that far out
    ],
)
def test_tier_selection(international, hours_left, expected_percentage):
    quote = RefundPolicyResolver.quote(
        international, 1_000_000, departure_at=NOW + timedelta(hours=hours_left), now=NOW
    )
    
    assert quote.penalty_percentage == expected_percentage
    assert quote.penalty_amount == 1_000_000 * expected_percentage / 100
    assert quote.refund_amount == 1_000_000 - quote.penalty_amount


def test_smallest_covering_threshold_wins():
    policy = _policy((24, 0), (0, 80))
    quote = RefundPolicyResolver.quote(policy, 500_000, departure_at=NOW + timedelta(hours=12), now=NOW)
    
    assert quote.penalty_amount == 0
    assert quote.rule_id == 1


def test_penalty_is_floored():
    policy = _policy((24, "33.3333"))
    quote = RefundPolicyResolver.quote(policy, 1_001, departure_at=NOW + timedelta(hours=1), now=NOW)
    
    # 333.6666...
    assert quote.penalty_amount == 333
    assert quote.refund_amount == 668


def test_no_policy_means_full_penalty():
    quote = RefundPolicyResolver.quote(None, 750_000, departure_at=NOW + timedelta(days=30), now=NOW)
    
    assert quote.penalty_percentage == Decimal(100)
    assert quote.penalty_amount == 750_000
    assert quote.refund_amount == 0


def test_unknown_departure_means_full_penalty(international):
    quote = RefundPolicyResolver.quote(international, 750_000, departure_at=None, now=NOW)
    
    assert quote.hours_before_departure is None
    assert quote.penalty_amount == 750_000


def test_naive_departure_read_as_utc(international):
    naive_departure = (NOW + timedelta(hours=48)).replace(tzinfo=None)
    
    assert RefundPolicyResolver.hours_before_departure(naive_departure, NOW) == 48


def test_negative_amount_rejected(international):
    with pytest.raises(InvalidAmountError):
        RefundPolicyResolver.quote(international, -1, departure_at=NOW, now=NOW)
