from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Set

from servicequote.core.numbers import ZERO
from servicequote.core.pricing_types import PricingType
from servicequote.engine.effective_config import EffectiveConfig
from servicequote.verticals.schema import AreaSpec

D = Decimal

# Each field shares its name with the rate declared in the service schema
RATE_FIELDS = ("worker_rate", "hourly_rate", "sq_ft_fixed_fee", "inside_rate", "outside_rate")

QUANTITY_FIELDS = ("workers", "hours", "inside_sq_ft", "outside_sq_ft", "custom_amount")


@dataclass
class AreaState:
    # Identity / selection
    key: str
    label: str
    enabled: bool = False
    pricing_type: PricingType = PricingType.PRESET

    # Quantities
    workers: D = ZERO
    hours: D = ZERO
    inside_sq_ft: D = ZERO
    outside_sq_ft: D = ZERO
    custom_amount: D = ZERO

    # Rates (seeded from config, user-overridable)
    worker_rate: D = ZERO
    hourly_rate: D = ZERO
    sq_ft_fixed_fee: D = ZERO
    inside_rate: D = ZERO
    outside_rate: D = ZERO

    # Preset selection
    option: Optional[str] = None
    include_addon: bool = False

    # Per-area billing; None means "use the quote terms"
    frequency_label: Optional[str] = None
    contract_months: Optional[int] = None

    overridden: Set[str] = field(default_factory=set)

    @classmethod
    def from_spec(cls, spec: AreaSpec, config: EffectiveConfig) -> "AreaState":
        state = cls(
            key=spec.key,
            label=spec.label,
            pricing_type=spec.default_pricing_type,
            option=spec.preset.default_option if spec.preset else None,
        )
        state.refresh_rates(config)
        return state

    def refresh_rates(self, config: EffectiveConfig) -> None:
        """Re-seed every rate the user has not explicitly overridden."""
        for fname in RATE_FIELDS:
            if fname in self.overridden or not config.has_rate(fname):
                continue
            setattr(self, fname, config.rate(fname))

    def rate_override(self, fname: str) -> Optional[D]:
        if fname not in self.overridden:
            return None
        value = getattr(self, fname)
        return value if value > ZERO else None

    def effective_rate(self, fname: str, config: EffectiveConfig) -> D:
        """User override when positive, else the config rate."""
        override = self.rate_override(fname)
        if override is not None:
            return override
        if config.has_rate(fname):
            return config.rate(fname)
        return getattr(self, fname)
