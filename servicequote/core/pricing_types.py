from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class PricingType(str, Enum):
    PRESET = "preset"
    PER_WORKER = "perWorker"
    PER_HOUR = "perHour"
    SQUARE_FEET = "squareFeet"
    CUSTOM = "custom"


# Plain-language names used in breakdown lines
PRICING_TYPE_LABELS: Dict[PricingType, str] = {
    PricingType.PRESET: "Preset Package",
    PricingType.PER_WORKER: "Per Worker",
    PricingType.PER_HOUR: "Per Hour",
    PricingType.SQUARE_FEET: "Square Feet",
    PricingType.CUSTOM: "Custom Amount",
}

# Rate names a strategy reads from the effective config
STRATEGY_RATES: Dict[PricingType, Tuple[str, ...]] = {
    PricingType.PRESET: (),
    PricingType.PER_WORKER: ("worker_rate",),
    PricingType.PER_HOUR: ("hourly_rate",),
    PricingType.SQUARE_FEET: ("sq_ft_fixed_fee", "inside_rate", "outside_rate"),
    PricingType.CUSTOM: (),
}
