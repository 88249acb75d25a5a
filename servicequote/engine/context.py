from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from servicequote.core.numbers import ZERO
from servicequote.core.pricing_types import PricingType

D = Decimal


# -----------------------------
# Input
# -----------------------------


@dataclass(frozen=True)
class QuoteTerms:
    """
    Quote-level terms. `None` overrides mean "use the config value";
    contract months are clamped to the config bounds at aggregation time.
    """

    frequency_label: str = "monthly"
    contract_months: Optional[int] = None
    minimum_visit: Optional[D] = None
    trip_charge: Optional[D] = None
    all_inclusive: bool = False
    trip_waived: bool = False
    rate_category: Optional[str] = None


# -----------------------------
# Output
# -----------------------------


@dataclass(frozen=True)
class AreaQuote:
    key: str
    label: str
    strategy: PricingType
    is_package: bool
    raw_cost: D
    cost: D
    minimum_applied: bool
    frequency_label: str
    contract_months: int
    monthly_recurring: D
    contract_total: D


@dataclass(frozen=True)
class QuoteResult:
    """
    Derived, never stored. Money fields are quantized to cents.

    `original_per_visit` is the sum before any minimum (the red line);
    `per_visit_price` is what the customer pays per visit.
    """

    service_id: str
    per_visit_price: D
    monthly_recurring: D
    contract_total: D
    details_breakdown: Tuple[str, ...]
    areas: Tuple[AreaQuote, ...] = ()
    original_per_visit: D = ZERO
    trip_charge: D = ZERO
    minimum_applied: bool = False
    frequency_label: str = "monthly"
    contract_months: int = 12
    config_source: str = "STATIC"
    config_version: Optional[str] = None
    degraded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "serviceId": self.service_id,
            "perVisitPrice": str(self.per_visit_price),
            "monthlyRecurring": str(self.monthly_recurring),
            "contractTotal": str(self.contract_total),
            "originalPerVisit": str(self.original_per_visit),
            "tripCharge": str(self.trip_charge),
            "minimumApplied": self.minimum_applied,
            "frequency": self.frequency_label,
            "contractMonths": self.contract_months,
            "configSource": self.config_source,
            "configVersion": self.config_version,
            "degraded": self.degraded,
            "detailsBreakdown": list(self.details_breakdown),
            "areas": [
                {
                    "key": a.key,
                    "label": a.label,
                    "strategy": a.strategy.value,
                    "cost": str(a.cost),
                    "monthlyRecurring": str(a.monthly_recurring),
                    "contractTotal": str(a.contract_total),
                }
                for a in self.areas
            ],
        }
