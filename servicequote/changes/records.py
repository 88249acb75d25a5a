from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from servicequote.core.numbers import ZERO

D = Decimal

# Price-relevant fields and their display names; nothing else is recorded
PRICE_FIELDS: Dict[str, str] = {
    "workers": "Workers",
    "hours": "Hours",
    "inside_sq_ft": "Inside Sq Ft",
    "outside_sq_ft": "Outside Sq Ft",
    "custom_amount": "Custom Amount",
    "worker_rate": "Per Worker Rate",
    "hourly_rate": "Per Hour Rate",
    "sq_ft_fixed_fee": "Square Footage Fixed Fee",
    "inside_rate": "Inside Rate",
    "outside_rate": "Outside Rate",
    "minimum_visit": "Minimum Visit",
    "trip_charge": "Trip Charge",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ChangeRecord:
    service_id: str
    field_name: str
    field_display_name: str
    original_value: D
    new_value: D
    area_key: Optional[str] = None
    quantity: Optional[D] = None
    frequency: Optional[str] = None
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def change_amount(self) -> D:
        return self.new_value - self.original_value

    @property
    def change_percentage(self) -> Optional[D]:
        if self.original_value == ZERO:
            return None
        return (self.change_amount / self.original_value * D("100")).quantize(D("0.01"))

    def to_dict(self) -> Dict[str, Any]:
        pct = self.change_percentage
        return {
            "serviceId": self.service_id,
            "areaKey": self.area_key,
            "fieldName": self.field_name,
            "fieldDisplayName": self.field_display_name,
            "originalValue": str(self.original_value),
            "newValue": str(self.new_value),
            "changeAmount": str(self.change_amount),
            "changePercentage": str(pct) if pct is not None else None,
            "quantity": str(self.quantity) if self.quantity is not None else None,
            "frequency": self.frequency,
            "timestamp": self.timestamp.isoformat(),
        }
