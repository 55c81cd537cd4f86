"""
Commission Calculator Tests.

Pure split arithmetic; no database.
"""

import pytest
from decimal import Decimal

from booking_settlement.app.core.exceptions import InvalidAmountError, InvalidCommissionModelError
from booking_settlement.app.domain.settlement.commission_calculator import CommissionCalculator
from booking_settlement.app.models.commission_model import CommissionModel
from booking_settlement.app.models.settlement_enums import CommissionCalculationType


def _model(calculation_type, charter, creator, web_service, model_id="CM-T"):
    return CommissionModel(
        id=model_id,
        name={"en": "Test"},
        calculation_type=calculation_type,
        charter_commission=Decimal(str(charter)),
        creator_commission=Decimal(str(creator)),
        web_service_commission=Decimal(str(web_service)),
    )


def test_percentage_split_for_two_adult_booking():
    """5/2/1 percent of 5,000,000."""
    model = _model(CommissionCalculationType.PERCENTAGE, 5, 2, 1)
    split = CommissionCalculator.compute(model, base_price_total=5_000_000, passenger_count=2)
    
    assert split.charter == 250_000
    assert split.creator == 100_000
    assert split.web_service == 50_000
    assert split.total_commission == 400_000
    assert split.net_revenue == 4_600_000


def test_percentage_shares_are_floored():
    model = _model(CommissionCalculationType.PERCENTAGE, "1.5", "2.5", "0.3")
    split = CommissionCalculator.compute(model, base_price_total=999, passenger_count=1)
    
    # 14.985, 24.975, 2.997
    assert (split.charter, split.creator, split.web_service) == (14, 24, 2)
    assert split.net_revenue == 999 - 40


def test_fixed_amount_split_is_per_passenger():
    """Floating model: 0 / 50,000 / 20,000 per passenger."""
    model = _model(CommissionCalculationType.FIXED_AMOUNT, 0, 50_000, 20_000)
    split = CommissionCalculator.compute(model, base_price_total=9_000_000, passenger_count=3)
    
    assert split.charter == 0
    assert split.creator == 150_000
    assert split.web_service == 60_000
    assert split.net_revenue == 9_000_000 - 210_000


def test_fixed_amount_exceeding_base_price_is_refused():
    model = _model(CommissionCalculationType.FIXED_AMOUNT, 400_000, 400_000, 400_000)
    
    with pytest.raises(InvalidCommissionModelError):
        CommissionCalculator.compute(model, base_price_total=1_000_000, passenger_count=1)


def test_percentage_commission_never_exceeds_base_price():
    """Any valid percentage model keeps the three shares within the base price."""
    models = [
        _model(CommissionCalculationType.PERCENTAGE, 5, 2, "1.5"),
        _model(CommissionCalculationType.PERCENTAGE, 8, "2.5", 2),
        _model(CommissionCalculationType.PERCENTAGE, "33.3333", "33.3333", "33.3334"),
        _model(CommissionCalculationType.PERCENTAGE, 100, 0, 0),
    ]
    for model in models:
        for base in (0, 1, 7, 999, 1_234_567, 47_500_000):
            split = CommissionCalculator.compute(model, base_price_total=base, passenger_count=1)
            assert split.total_commission <= base
            assert split.net_revenue >= 0


def test_percentage_rates_above_one_hundred_rejected():
    with pytest.raises(InvalidCommissionModelError) as exc_info:
        CommissionCalculator.validate_rates(CommissionCalculationType.PERCENTAGE, 60, 30, 20)
    
    assert exc_info.value.error_code == "ERR_CONFIG_002"
    assert exc_info.value.details["total_rate"] == "110"


def test_negative_rate_rejected():
    with pytest.raises(InvalidCommissionModelError):
        CommissionCalculator.validate_rates(CommissionCalculationType.FIXED_AMOUNT, 0, -1, 0)


def test_compute_refuses_model_written_around_validation():
    model = _model(CommissionCalculationType.PERCENTAGE, 90, 20, 0)
    
    with pytest.raises(InvalidCommissionModelError):
        CommissionCalculator.compute(model, base_price_total=1_000, passenger_count=1)


def test_float_rates_are_read_as_written():
    """1.1% of 1,000,000 is 11,000, not 10,999."""
    model = _model(CommissionCalculationType.PERCENTAGE, 0, 0, 0)
    model.charter_commission = 1.1
    split = CommissionCalculator.compute(model, base_price_total=1_000_000, passenger_count=1)
    
    assert split.charter == 11_000


def test_negative_base_price_rejected():
    model = _model(CommissionCalculationType.PERCENTAGE, 5, 2, 1)
    
    with pytest.raises(InvalidAmountError):
        CommissionCalculator.compute(model, base_price_total=-1, passenger_count=1)
