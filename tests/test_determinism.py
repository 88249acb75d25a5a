from decimal import Decimal

from servicequote.core.pricing_types import PricingType
from servicequote.engine.aggregator import aggregate
from servicequote.engine.context import QuoteTerms

D = Decimal


def _areas(config, make_area):
    return [
        make_area(config, "walkway", pricing_type=PricingType.PER_WORKER, workers=1),
        make_area(config, "patio", include_addon=True),
        make_area(config, "boh", option="smallMedium", frequency_label="quarterly"),
    ]


def test_same_inputs_same_result(refresh_config, make_area):
    areas = _areas(refresh_config, make_area)
    terms = QuoteTerms(frequency_label="biweekly", contract_months=24)

    first = aggregate(areas, refresh_config, terms)
    second = aggregate(areas, refresh_config, terms)

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_aggregate_does_not_mutate_areas(refresh_config, make_area):
    areas = _areas(refresh_config, make_area)
    before = [(a.enabled, a.workers, a.custom_amount, a.worker_rate) for a in areas]

    aggregate(areas, refresh_config)

    assert [(a.enabled, a.workers, a.custom_amount, a.worker_rate) for a in areas] == before


def test_disabled_area_neutrality(refresh_config, make_area):
    areas = _areas(refresh_config, make_area)
    baseline = aggregate(areas, refresh_config)

    ghost = make_area(refresh_config, "foh", pricing_type=PricingType.PER_HOUR, hours=40, custom_amount=5000)
    ghost.enabled = False

    assert aggregate(areas + [ghost], refresh_config) == baseline


def test_custom_override_precedence(refresh_config, make_area):
    for pricing_type in (PricingType.PER_WORKER, PricingType.PER_HOUR, PricingType.SQUARE_FEET):
        area = make_area(
            refresh_config,
            "walkway",
            pricing_type=pricing_type,
            workers=5,
            hours=5,
            inside_sq_ft=5000,
            custom_amount=1234,
        )
        out = aggregate([area], refresh_config, QuoteTerms(frequency_label="monthly"))

        assert out.areas[0].cost == D("1234.00")


def test_minimum_floor_property(refresh_config, make_area):
    for workers in (1, 2, 3, 5):
        area = make_area(refresh_config, "walkway", pricing_type=PricingType.PER_WORKER, workers=workers)
        cost = aggregate([area], refresh_config).areas[0].cost

        raw = D(workers) * D("200")
        assert cost == max(raw, D("475"))
