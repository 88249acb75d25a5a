from __future__ import annotations

from servicequote.core.numbers import ZERO
from servicequote.core.pricing_types import PricingType

from .base import AreaCost, Labour, Strategy, register


@register
class SquareFeetStrategy(Strategy):
    """fixedFee + inside x insideRate + outside x outsideRate. No footage, no fee."""

    pricing_type = PricingType.SQUARE_FEET

    def evaluate(self, area, config) -> AreaCost:
        footage = area.inside_sq_ft + area.outside_sq_ft
        if footage <= ZERO:
            return Labour(ZERO, ZERO, self.pricing_type)

        cost = (
            area.effective_rate("sq_ft_fixed_fee", config)
            + area.inside_sq_ft * area.effective_rate("inside_rate", config)
            + area.outside_sq_ft * area.effective_rate("outside_rate", config)
        )
        return Labour(cost, footage, self.pricing_type)
