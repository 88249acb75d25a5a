from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import uuid4

from servicequote.changes.recorder import ChangeRecorder
from servicequote.core.numbers import ZERO, clamp_quantity, to_decimal
from servicequote.core.pricing_types import PricingType
from servicequote.logging_config import LoggingContext, get_logger
from servicequote.metrics import record_quote_computed
from servicequote.verticals.schema import ServiceSchema

from .aggregator import aggregate, minimum_visit
from .area_state import QUANTITY_FIELDS, RATE_FIELDS, AreaState
from .config_resolver import ConfigResolver, Resolution
from .context import QuoteResult, QuoteTerms
from .effective_config import ConfigTier, EffectiveConfig

D = Decimal

logger = get_logger("quote_session")

# Quantity that drives each rate, attached to change records for context
_RATE_QUANTITY = {
    "worker_rate": "workers",
    "hourly_rate": "hours",
    "inside_rate": "inside_sq_ft",
    "outside_rate": "outside_sq_ft",
}


class QuoteSession:
    """
    One service form being filled in.

    Owns the area states, quote terms and the current EffectiveConfig. All
    mutation goes through the setters so inputs are clamped and price-relevant
    edits reach the change recorder. `quote()` is a pure recomputation.
    """

    def __init__(
        self,
        schema: ServiceSchema,
        *,
        resolver: Optional[ConfigResolver] = None,
        recorder: Optional[ChangeRecorder] = None,
        session_id: Optional[str] = None,
    ):
        self.schema = schema
        self.service_id = schema.service_id
        self.session_id = session_id or uuid4().hex
        self.resolver = resolver
        self.recorder = recorder or ChangeRecorder(schema.service_id)

        self.config = EffectiveConfig.static(schema)
        self.degraded = True
        self.areas: Dict[str, AreaState] = {
            spec.key: AreaState.from_spec(spec, self.config) for spec in schema.areas
        }
        self.terms = QuoteTerms(
            frequency_label=schema.default_frequency,
            contract_months=self.config.default_contract_months,
        )

    # -----------------------
    # Config
    # -----------------------

    async def refresh_config(self) -> Resolution:
        if self.resolver is None:
            raise RuntimeError("QuoteSession has no config resolver")

        with LoggingContext(service_id=self.service_id, session_id=self.session_id):
            resolution = await self.resolver.resolve(self.service_id)
            if resolution.superseded:
                return resolution
            self.apply_config(resolution.config, degraded=resolution.degraded)
            logger.info(
                f"Applied {resolution.tier.value} config (version={resolution.config.version})"
            )
        return resolution

    def apply_config(self, config: EffectiveConfig, *, degraded: bool = False) -> None:
        """
        Swap in a new config. Rates the user has not overridden are re-seeded;
        enablement, quantities and overrides are kept. A fresh remote config
        clears custom amounts.
        """
        self.config = config
        self.degraded = degraded
        for area in self.areas.values():
            area.refresh_rates(config)
            if config.tier is ConfigTier.REMOTE:
                area.custom_amount = ZERO
        self.terms = replace(self.terms, contract_months=config.clamp_months(self.terms.contract_months))

    # -----------------------
    # Areas
    # -----------------------

    def area(self, key: str) -> AreaState:
        try:
            return self.areas[key]
        except KeyError:
            raise ValueError(
                f"Unknown area '{key}' for {self.service_id}. Available: {list(self.areas.keys())}"
            )

    def set_enabled(self, key: str, enabled: bool) -> None:
        self.area(key).enabled = bool(enabled)

    def set_pricing_type(self, key: str, pricing_type: str | PricingType) -> None:
        area = self.area(key)
        pt = PricingType(pricing_type)
        allowed = self.schema.area(key).pricing_types
        if pt not in allowed:
            raise ValueError(
                f"Area '{key}' does not support {pt.value}; allowed: {[p.value for p in allowed]}"
            )
        area.pricing_type = pt

    def set_quantity(self, key: str, field_name: str, value: Any) -> None:
        if field_name not in QUANTITY_FIELDS:
            raise ValueError(f"Not a quantity field: {field_name}")
        area = self.area(key)
        previous = getattr(area, field_name)
        current = clamp_quantity(value)
        setattr(area, field_name, current)
        self._observe(area, field_name, previous, current)

    def set_rate(self, key: str, field_name: str, value: Any) -> None:
        """A positive value overrides the config rate; 0 hands it back to config."""
        if field_name not in RATE_FIELDS:
            raise ValueError(f"Not a rate field: {field_name}")
        area = self.area(key)
        previous = getattr(area, field_name)
        current = clamp_quantity(value)

        if current > ZERO:
            area.overridden.add(field_name)
            setattr(area, field_name, current)
        else:
            area.overridden.discard(field_name)
            area.refresh_rates(self.config)
            current = getattr(area, field_name)

        self._observe(area, field_name, previous, current)

    def set_option(self, key: str, option: str) -> None:
        preset = self.schema.area(key).preset
        if preset is None or option not in preset.options:
            allowed = list(preset.options) if preset else []
            raise ValueError(f"Area '{key}' has no option '{option}'; allowed: {allowed}")
        self.area(key).option = option

    def set_include_addon(self, key: str, include: bool) -> None:
        preset = self.schema.area(key).preset
        if include and (preset is None or not preset.addon_path):
            raise ValueError(f"Area '{key}' has no addon")
        self.area(key).include_addon = bool(include)

    def set_area_frequency(self, key: str, label: Optional[str]) -> None:
        self.area(key).frequency_label = label or None

    def set_area_contract_months(self, key: str, months: Any) -> None:
        """Missing, zero or unparseable months hand the area back to the quote terms."""
        area = self.area(key)
        value = to_decimal(months, default=None)
        area.contract_months = self.config.clamp_months(value) if value is not None and value > ZERO else None

    # -----------------------
    # Quote terms
    # -----------------------

    def set_frequency(self, label: str) -> None:
        self.terms = replace(self.terms, frequency_label=label)

    def set_contract_months(self, months: Any) -> None:
        self.terms = replace(self.terms, contract_months=self.config.clamp_months(months))

    def set_minimum_visit(self, value: Any) -> None:
        previous = minimum_visit(self.config, self.terms)
        current = clamp_quantity(value)
        self.terms = replace(self.terms, minimum_visit=current)
        self._observe(None, "minimum_visit", previous, current)

    def set_trip_charge(self, value: Any) -> None:
        trip = self.schema.trip_charge
        if trip is None:
            raise ValueError(f"{self.service_id} does not charge a trip fee")
        previous = self.terms.trip_charge
        if previous is None:
            previous = self.config.rate(trip.rate)
        current = clamp_quantity(value)
        self.terms = replace(self.terms, trip_charge=current)
        self._observe(None, "trip_charge", previous, current)

    def set_all_inclusive(self, all_inclusive: bool) -> None:
        self.terms = replace(self.terms, all_inclusive=bool(all_inclusive))

    def set_trip_waived(self, waived: bool) -> None:
        self.terms = replace(self.terms, trip_waived=bool(waived))

    def set_rate_category(self, category: Optional[str]) -> None:
        if category:
            categories = self.config.section("rateCategories") or {}
            if category not in categories:
                raise ValueError(
                    f"Unknown rate category '{category}'; available: {list(categories.keys())}"
                )
        self.terms = replace(self.terms, rate_category=category or None)

    # -----------------------
    # Quote
    # -----------------------

    def quote(self) -> QuoteResult:
        result = aggregate(self.areas.values(), self.config, self.terms, degraded=self.degraded)
        record_quote_computed(self.service_id)
        return result

    def _observe(self, area: Optional[AreaState], field_name: str, previous: D, current: D) -> None:
        quantity = None
        frequency = self.terms.frequency_label
        if area is not None:
            qty_field = _RATE_QUANTITY.get(field_name)
            quantity = getattr(area, qty_field) if qty_field else None
            frequency = area.frequency_label or frequency

        self.recorder.observe(
            field_name,
            previous,
            current,
            area_key=area.key if area is not None else None,
            quantity=quantity,
            frequency=frequency,
        )
