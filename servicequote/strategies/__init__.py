# Ensure registration happens by importing modules
from servicequote.core.numbers import ZERO
from servicequote.core.pricing_types import PricingType

from .base import AreaCost, Labour, Package, Strategy, strategy_registry  # noqa
from . import (  # noqa
    preset,
    per_worker,
    per_hour,
    square_feet,
    custom,
)


def evaluate_area(area, config) -> AreaCost:
    """
    Disabled areas cost nothing; a positive custom amount wins over the
    selected strategy; otherwise the registered strategy prices the area.
    """
    if not area.enabled:
        return Labour(ZERO, ZERO, area.pricing_type)
    if area.custom_amount > ZERO:
        return Package(area.custom_amount, PricingType.CUSTOM)
    return strategy_registry[area.pricing_type].evaluate(area, config)
