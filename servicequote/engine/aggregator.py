from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Optional

from servicequote.core.numbers import ZERO, format_money, q2
from servicequote.core.pricing_types import PRICING_TYPE_LABELS, PricingType
from servicequote.strategies import Labour, evaluate_area

from .area_state import AreaState
from .billing import contract_total, monthly_multiplier
from .breakdown import Breakdown
from .context import AreaQuote, QuoteResult, QuoteTerms
from .effective_config import EffectiveConfig
from .minimums import decide_trip_charge, enforce_minimum

D = Decimal


def rate_category_multiplier(config: EffectiveConfig, category: Optional[str]) -> D:
    if not category:
        return D("1")
    value = config.leaf(f"rateCategories.{category}.multiplier")
    if value is None or value <= ZERO:
        return D("1")
    return value


def minimum_visit(config: EffectiveConfig, terms: QuoteTerms) -> D:
    if terms.minimum_visit is not None:
        return terms.minimum_visit
    return config.rate("minimum_visit")


def aggregate(
    areas: Iterable[AreaState],
    config: EffectiveConfig,
    terms: Optional[QuoteTerms] = None,
    *,
    degraded: bool = False,
) -> QuoteResult:
    """
    Price every area, enforce minimums, add the trip charge and convert the
    per-visit price to monthly/contract figures.

    Pure: identical (areas, config, terms) always give an identical result.

    Order of operations:
      1. per area: strategy -> rate category -> area minimum (labour only)
      2. subtotal = sum of area costs
      3. trip charge on a nonzero subtotal unless waived
      4. whole-quote minimum on (subtotal + trip), only when it is > 0
      5. per-area billing at the area's own terms; trip and minimum lift
         billed at the quote terms
    """
    terms = terms or QuoteTerms(frequency_label=config.schema.default_frequency)
    months = config.clamp_months(terms.contract_months)
    floor = minimum_visit(config, terms)
    category = rate_category_multiplier(config, terms.rate_category)

    breakdown = Breakdown()
    area_quotes: List[AreaQuote] = []
    original = ZERO
    subtotal = ZERO
    any_area_bumped = False

    for area in areas:
        result = evaluate_area(area, config)

        raw = result.amount
        if result.strategy is not PricingType.CUSTOM:
            raw = raw * category

        cost = raw
        if isinstance(result, Labour):
            cost = enforce_minimum(raw, result.has_activity, floor)

        raw = q2(raw)
        cost = q2(cost)
        original += raw
        subtotal += cost

        if cost <= ZERO:
            continue

        bumped = cost > raw
        any_area_bumped = any_area_bumped or bumped

        freq = area.frequency_label or terms.frequency_label
        area_months = config.clamp_months(area.contract_months) if area.contract_months else months

        area_quotes.append(
            AreaQuote(
                key=area.key,
                label=area.label,
                strategy=result.strategy,
                is_package=not isinstance(result, Labour),
                raw_cost=raw,
                cost=cost,
                minimum_applied=bumped,
                frequency_label=freq,
                contract_months=area_months,
                monthly_recurring=q2(cost * monthly_multiplier(freq, config)),
                contract_total=q2(contract_total(cost, freq, area_months, config)),
            )
        )

        how = PRICING_TYPE_LABELS[result.strategy]
        if bumped:
            how = f"{how}, minimum applied"
        breakdown.add_step("AREA", f"{area.label}: {format_money(cost)} ({how})")

    # Trip charge
    trip = ZERO
    trip_spec = config.schema.trip_charge
    if trip_spec is not None:
        rate = terms.trip_charge if terms.trip_charge is not None else config.rate(trip_spec.rate)
        threshold = config.leaf(trip_spec.waive_at_or_above) if trip_spec.waive_at_or_above else None
        decision = decide_trip_charge(
            subtotal,
            rate,
            all_inclusive=terms.all_inclusive,
            waive_when_all_inclusive=trip_spec.waive_when_all_inclusive,
            trip_waived=terms.trip_waived,
            waive_at_or_above=threshold,
        )
        if decision.applied:
            trip = q2(decision.amount)
            breakdown.add_step("TRIP_CHARGE", f"Trip charge: {format_money(trip)}")
        elif decision.reason:
            breakdown.add_meta("TRIP_WAIVED", f"Trip charge waived ({decision.reason})")

    # Whole-quote minimum; an empty quote stays at exactly 0
    before_minimum = subtotal + trip
    per_visit = q2(enforce_minimum(before_minimum, before_minimum > ZERO, floor))
    lift = per_visit - before_minimum
    if lift > ZERO:
        breakdown.add_step(
            "MINIMUM",
            f"Minimum visit adjustment: {format_money(lift)} (minimum {format_money(floor)})",
        )

    quote_multiplier = monthly_multiplier(terms.frequency_label, config)
    extra = trip + lift
    monthly = sum((a.monthly_recurring for a in area_quotes), ZERO)
    contract = sum((a.contract_total for a in area_quotes), ZERO)
    if extra > ZERO:
        monthly += q2(extra * quote_multiplier)
        contract += q2(contract_total(extra, terms.frequency_label, months, config))

    return QuoteResult(
        service_id=config.schema.service_id,
        per_visit_price=per_visit,
        monthly_recurring=q2(monthly),
        contract_total=q2(contract),
        details_breakdown=breakdown.as_lines(),
        areas=tuple(area_quotes),
        original_per_visit=q2(original),
        trip_charge=trip,
        minimum_applied=any_area_bumped or lift > ZERO,
        frequency_label=terms.frequency_label,
        contract_months=months,
        config_source=config.source_label,
        config_version=config.version,
        degraded=degraded,
    )
