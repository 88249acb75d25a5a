from __future__ import annotations

from servicequote.core.numbers import ZERO
from servicequote.core.pricing_types import PricingType

from .base import AreaCost, Labour, Strategy, register


@register
class PerWorkerStrategy(Strategy):
    pricing_type = PricingType.PER_WORKER

    def evaluate(self, area, config) -> AreaCost:
        if area.workers <= ZERO:
            return Labour(ZERO, ZERO, self.pricing_type)
        rate = area.effective_rate("worker_rate", config)
        return Labour(area.workers * rate, area.workers, self.pricing_type)
