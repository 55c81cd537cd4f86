"""
Commission Calculator.

Pure functions mapping a commission model, a base price total and a
passenger count to the charter / creator / web-service split. No database,
no side effects.

Rounding always goes down to the minor unit so the house never records
more commission owed than the rates allow.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import Union

from booking_settlement.app.core.exceptions import InvalidAmountError, InvalidCommissionModelError
from booking_settlement.app.models.settlement_enums import CommissionCalculationType

Rate = Union[Decimal, int, float, str]

HUNDRED = Decimal(100)


@dataclass(frozen=True)
class CommissionSplit:
    base_price_total: int
    charter: int
    creator: int
    web_service: int

    @property
    def total_commission(self) -> int:
        return self.charter + self.creator + self.web_service

    @property
    def net_revenue(self) -> int:
        return self.base_price_total - self.total_commission


def _decimal(rate: Rate) -> Decimal:
    # str() keeps 1.5 as 1.5 instead of its binary float expansion
    return rate if isinstance(rate, Decimal) else Decimal(str(rate))


def _floor(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


class CommissionCalculator:

    @staticmethod
    def validate_rates(
        calculation_type: CommissionCalculationType,
        charter: Rate,
        creator: Rate,
        web_service: Rate,
    ) -> None:
        """
        Reject rates that could overstate commission owed.

        Raises:
            InvalidCommissionModelError: a negative rate, or percentage rates
                above 100 individually or in total.
        """
        rates = {
            "charter_commission": _decimal(charter),
            "creator_commission": _decimal(creator),
            "web_service_commission": _decimal(web_service),
        }
        for field_name, rate in rates.items():
            if rate < 0:
                raise InvalidCommissionModelError(
                    f"{field_name} must not be negative",
                    details={"field": field_name, "rate": str(rate)}
                )

        if calculation_type == CommissionCalculationType.PERCENTAGE:
            total = sum(rates.values())
            if total > HUNDRED:
                raise InvalidCommissionModelError(
                    "Percentage commission rates must not add up to more than 100",
                    details={"total_rate": str(total)}
                )

    @staticmethod
    def validate_model(model) -> None:
        CommissionCalculator.validate_rates(
            model.calculation_type,
            model.charter_commission,
            model.creator_commission,
            model.web_service_commission,
        )

    @staticmethod
    def compute(model, base_price_total: int, passenger_count: int) -> CommissionSplit:
        """
        Split a booking's base price total.

        Percentage: each share = floor(base_price_total * rate / 100).
        FixedAmount: each share = floor(rate * passenger_count).

        Args:
            model: any object with calculation_type and the three rate attributes
            base_price_total: fare total before taxes, minor units
            passenger_count: passengers on the booking

        Returns:
            CommissionSplit with net_revenue derived from the shares
        """
        if base_price_total < 0:
            raise InvalidAmountError(base_price_total)
        if passenger_count < 0:
            raise InvalidAmountError(passenger_count)

        CommissionCalculator.validate_model(model)
        rates = (
            _decimal(model.charter_commission),
            _decimal(model.creator_commission),
            _decimal(model.web_service_commission),
        )

        calculation_type = model.calculation_type
        if calculation_type == CommissionCalculationType.PERCENTAGE:
            base = Decimal(base_price_total)
            charter, creator, web_service = (_floor(base * rate / HUNDRED) for rate in rates)
        elif calculation_type == CommissionCalculationType.FIXED_AMOUNT:
            charter, creator, web_service = (_floor(rate * passenger_count) for rate in rates)
        else:
            raise InvalidCommissionModelError(
                f"Unsupported calculation type {calculation_type!r}",
                details={"calculation_type": str(calculation_type)}
            )

        split = CommissionSplit(
            base_price_total=base_price_total,
            charter=charter,
            creator=creator,
            web_service=web_service,
        )
        if split.net_revenue < 0:
            raise InvalidCommissionModelError(
                "Commission exceeds the booking's base price total",
                details={
                    "model_id": getattr(model, "id", None),
                    "base_price_total": base_price_total,
                    "total_commission": split.total_commission,
                }
            )
        return split
