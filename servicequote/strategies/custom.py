from __future__ import annotations

from servicequote.core.pricing_types import PricingType

from .base import AreaCost, Package, Strategy, register


@register
class CustomStrategy(Strategy):
    """Fixed amount typed in by the user, assumed to include trip/minimum."""

    pricing_type = PricingType.CUSTOM

    def evaluate(self, area, config) -> AreaCost:
        return Package(area.custom_amount, self.pricing_type)
