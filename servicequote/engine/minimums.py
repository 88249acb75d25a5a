from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from servicequote.core.numbers import ZERO

D = Decimal


def enforce_minimum(cost: D, has_activity: bool, minimum_visit: D) -> D:
    """Lift `cost` to the per-visit floor, but only for real activity."""
    if has_activity and cost < minimum_visit:
        return minimum_visit
    return cost


@dataclass(frozen=True)
class TripDecision:
    amount: D
    applied: bool
    reason: Optional[str] = None


def decide_trip_charge(
    subtotal: D,
    trip_charge: D,
    *,
    all_inclusive: bool = False,
    waive_when_all_inclusive: bool = True,
    trip_waived: bool = False,
    waive_at_or_above: Optional[D] = None,
) -> TripDecision:
    """
    Trip charge on top of a nonzero subtotal. Waived for all-inclusive
    contracts, when the caller says so (e.g. bundled with another visit),
    or when the subtotal reaches the volume threshold.
    """
    if subtotal <= ZERO or trip_charge <= ZERO:
        return TripDecision(ZERO, False, None)
    if all_inclusive and waive_when_all_inclusive:
        return TripDecision(ZERO, False, "all-inclusive")
    if trip_waived:
        return TripDecision(ZERO, False, "waived")
    if waive_at_or_above is not None and waive_at_or_above > ZERO and subtotal >= waive_at_or_above:
        return TripDecision(ZERO, False, "volume")
    return TripDecision(trip_charge, True, None)
