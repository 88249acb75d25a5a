from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, Type

from servicequote.core.numbers import ZERO
from servicequote.core.pricing_types import PricingType

D = Decimal

if TYPE_CHECKING:
    from servicequote.engine.area_state import AreaState
    from servicequote.engine.effective_config import EffectiveConfig


@dataclass(frozen=True)
class Package:
    """Price already inclusive of trip/minimum; never minimum-bumped."""

    amount: D
    strategy: PricingType = PricingType.PRESET

    @property
    def has_activity(self) -> bool:
        return False


@dataclass(frozen=True)
class Labour:
    """
    Raw labour/material cost. `activity` is the driving quantity (workers,
    hours, square feet); the per-visit minimum only applies when both the
    activity and the computed amount are nonzero.
    """

    amount: D
    activity: D = ZERO
    strategy: PricingType = PricingType.PER_WORKER

    @property
    def has_activity(self) -> bool:
        return self.activity > ZERO and self.amount > ZERO


AreaCost = Package | Labour


class Strategy:
    """
    Base class for pricing strategies. Every strategy implements
    evaluate(area, config) as a pure function of its two inputs.
    """

    pricing_type: PricingType

    def evaluate(self, area: "AreaState", config: "EffectiveConfig") -> AreaCost:
        raise NotImplementedError


# Registry: pricing type -> Strategy instance
strategy_registry: Dict[PricingType, Strategy] = {}


def register(strategy_cls: Type[Strategy]) -> Type[Strategy]:
    """
    Decorator to register a strategy by its pricing_type.
    Fails fast on duplicate registrations.
    """
    key = getattr(strategy_cls, "pricing_type", None)
    if key is None:
        raise ValueError(f"Strategy class {strategy_cls.__name__} has no pricing_type")

    existing = strategy_registry.get(key)
    if existing is not None and type(existing) is not strategy_cls:
        raise ValueError(
            f"Duplicate strategy registration for '{key.value}': "
            f"{type(existing).__name__} vs {strategy_cls.__name__}"
        )

    strategy_registry[key] = strategy_cls()
    return strategy_cls
