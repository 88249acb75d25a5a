from decimal import Decimal

from servicequote.core.pricing_types import PricingType
from servicequote.strategies import Labour, evaluate_area


def test_per_worker_uses_config_rate(refresh_config, make_area):
    area = make_area(refresh_config, "walkway", pricing_type=PricingType.PER_WORKER, workers=2)

    out = evaluate_area(area, refresh_config)

    assert isinstance(out, Labour)
    assert out.amount == Decimal("400")
    assert out.activity == Decimal("2")
    assert out.has_activity


def test_per_worker_override_rate(refresh_config, make_area):
    area = make_area(
        refresh_config,
        "walkway",
        pricing_type=PricingType.PER_WORKER,
        workers=2,
        worker_rate=250,
    )
    area.overridden.add("worker_rate")

    assert evaluate_area(area, refresh_config).amount == Decimal("500")


def test_per_worker_zero_override_falls_back(refresh_config, make_area):
    area = make_area(
        refresh_config,
        "walkway",
        pricing_type=PricingType.PER_WORKER,
        workers=1,
        worker_rate=0,
    )
    area.overridden.add("worker_rate")

    assert evaluate_area(area, refresh_config).amount == Decimal("200")


def test_per_worker_zero_workers_costs_nothing(refresh_config, make_area):
    area = make_area(refresh_config, "walkway", pricing_type=PricingType.PER_WORKER, workers=0)

    out = evaluate_area(area, refresh_config)

    assert out.amount == Decimal("0")
    assert not out.has_activity
