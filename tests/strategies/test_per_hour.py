from decimal import Decimal

from servicequote.core.pricing_types import PricingType
from servicequote.strategies import Labour, evaluate_area


def test_per_hour_happy(refresh_config, make_area):
    area = make_area(refresh_config, "foh", pricing_type=PricingType.PER_HOUR, hours="1.5")

    out = evaluate_area(area, refresh_config)

    assert isinstance(out, Labour)
    assert out.amount == Decimal("600")
    assert out.strategy is PricingType.PER_HOUR


def test_per_hour_remote_rate(refresh_schema, remote_config, make_area):
    config = remote_config(refresh_schema, {"coreRates": {"perHourRate": 300}})
    area = make_area(config, "foh", pricing_type=PricingType.PER_HOUR, hours=2)

    assert evaluate_area(area, config).amount == Decimal("600")


def test_per_hour_zero_hours(refresh_config, make_area):
    area = make_area(refresh_config, "foh", pricing_type=PricingType.PER_HOUR, hours=0)

    out = evaluate_area(area, refresh_config)

    assert out.amount == Decimal("0")
    assert not out.has_activity
