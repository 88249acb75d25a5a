from __future__ import annotations

from servicequote.core.numbers import ZERO
from servicequote.core.pricing_types import PricingType

from .base import AreaCost, Package, Strategy, register


@register
class PresetStrategy(Strategy):
    """
    Named package price from the config tree, optionally keyed by a
    sub-selector (kitchen size, patio standalone/upsell). The addon is an
    additive surcharge on top of the package price.
    """

    pricing_type = PricingType.PRESET

    def evaluate(self, area, config) -> AreaCost:
        spec = config.schema.area(area.key).preset
        if spec is None:
            return Package(ZERO, self.pricing_type)

        price = None
        path = spec.price_path(area.option)
        if path:
            price = config.leaf(path)
        if price is None and spec.fallback_rate:
            price = config.rate(spec.fallback_rate)
        if price is None:
            price = ZERO

        if area.include_addon and spec.addon_path:
            price += config.leaf(spec.addon_path) or ZERO

        return Package(price, self.pricing_type)
