from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

D = Decimal

ZERO = D("0")
CENT = D("0.01")

# Largest quantity or rate accepted; keeps every total inside default Decimal precision
MAX_INPUT = D("1000000000")


def to_decimal(value: Any, default: Optional[D] = ZERO) -> Optional[D]:
    """
    Parse a number coming from form input or a config leaf.

    Accepts int/float/Decimal/str ("1,250.00", "$475"). Anything that does not
    parse to a finite number returns `default`. Booleans are not numbers here.
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, int):
        d = D(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            return default
        d = D(str(value))
    else:
        s = str(value).strip().replace(",", "").replace("$", "")
        if not s:
            return default
        try:
            d = D(s)
        except InvalidOperation:
            return default

    if not d.is_finite():
        return default
    return d


def clamp_quantity(value: Any) -> D:
    """Input boundary: negatives, NaN/inf and junk become 0; huge values are capped at MAX_INPUT."""
    d = to_decimal(value)
    if d is None or d <= ZERO:
        return ZERO
    return min(d, MAX_INPUT)


def q2(x: D) -> D:
    return x.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(x: D) -> str:
    return f"${q2(x):,.2f}"
