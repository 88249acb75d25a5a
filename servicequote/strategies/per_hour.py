from __future__ import annotations

from servicequote.core.numbers import ZERO
from servicequote.core.pricing_types import PricingType

from .base import AreaCost, Labour, Strategy, register


@register
class PerHourStrategy(Strategy):
    pricing_type = PricingType.PER_HOUR

    def evaluate(self, area, config) -> AreaCost:
        if area.hours <= ZERO:
            return Labour(ZERO, ZERO, self.pricing_type)
        rate = area.effective_rate("hourly_rate", config)
        return Labour(area.hours * rate, area.hours, self.pricing_type)
