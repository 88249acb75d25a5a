from decimal import Decimal

from servicequote.core.pricing_types import PricingType
from servicequote.strategies import Labour, Package, evaluate_area


def test_custom_amount_wins_over_any_strategy(refresh_config, make_area):
    area = make_area(
        refresh_config,
        "walkway",
        pricing_type=PricingType.PER_WORKER,
        workers=10,
        custom_amount="123.45",
    )

    out = evaluate_area(area, refresh_config)

    assert isinstance(out, Package)
    assert out.amount == Decimal("123.45")
    assert out.strategy is PricingType.CUSTOM


def test_custom_strategy_without_amount_is_zero(spray_config, make_area):
    area = make_area(spray_config, "other")

    out = evaluate_area(area, spray_config)

    assert out.amount == Decimal("0")


def test_disabled_area_is_neutral(refresh_config, make_area):
    area = make_area(refresh_config, "patio", custom_amount=999)
    area.enabled = False

    out = evaluate_area(area, refresh_config)

    assert isinstance(out, Labour)
    assert out.amount == Decimal("0")
    assert not out.has_activity
