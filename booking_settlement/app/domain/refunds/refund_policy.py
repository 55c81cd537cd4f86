"""
Refund Policy Resolver.

Maps a booking's refund policy and the time left before departure to a
cancellation penalty. Pure; the caller loads the policy.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_FLOOR
from typing import Optional

from booking_settlement.app.core.clock import as_utc, utcnow
from booking_settlement.app.core.exceptions import InvalidAmountError

FULL_PENALTY = Decimal(100)


@dataclass(frozen=True)
class PenaltyQuote:
    original_amount: int
    penalty_percentage: Decimal
    penalty_amount: int
    hours_before_departure: Optional[float] = None
    rule_id: Optional[int] = None

    @property
    def refund_amount(self) -> int:
        return self.original_amount - self.penalty_amount


class RefundPolicyResolver:

    @staticmethod
    def hours_before_departure(departure_at: Optional[datetime], now: Optional[datetime] = None) -> Optional[float]:
        if departure_at is None:
            return None
        now = as_utc(now) if now is not None else utcnow()
        return (as_utc(departure_at) - now).total_seconds() / 3600

    @staticmethod
    def applicable_rule(policy, hours: Optional[float]):
        """
        The rule with the smallest threshold that still covers `hours`.

        A rule covers a cancellation made at most `hours_before_departure`
        hours before the flight. Returns None when nothing covers it.
        """
        if policy is None or hours is None:
            return None
        rules = sorted(policy.rules, key=lambda rule: rule.hours_before_departure)
        for rule in rules:
            if hours <= rule.hours_before_departure:
                return rule
        return None

    @staticmethod
    def quote(policy, original_amount: int, departure_at: Optional[datetime],
              now: Optional[datetime] = None) -> PenaltyQuote:
        """
        Penalty for refunding `original_amount` now.

        No policy, an unknown departure time or no covering rule means a
        100% penalty. The amount is floored to the minor unit.
        """
        if isinstance(original_amount, bool) or not isinstance(original_amount, int) or original_amount < 0:
            raise InvalidAmountError(original_amount)

        hours = RefundPolicyResolver.hours_before_departure(departure_at, now)
        rule = RefundPolicyResolver.applicable_rule(policy, hours)
        percentage = Decimal(str(rule.penalty_percentage)) if rule is not None else FULL_PENALTY

        penalty = int((Decimal(original_amount) * percentage / FULL_PENALTY).to_integral_value(rounding=ROUND_FLOOR))
        return PenaltyQuote(
            original_amount=original_amount,
            penalty_percentage=percentage,
            penalty_amount=min(max(penalty, 0), original_amount),
            hours_before_departure=hours,
            rule_id=getattr(rule, "id", None),
        )
