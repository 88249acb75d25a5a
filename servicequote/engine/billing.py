from __future__ import annotations

import re
from decimal import Decimal
from typing import Dict, Optional

from servicequote.core.numbers import ZERO
from servicequote.engine.effective_config import EffectiveConfig
from servicequote.logging_config import get_logger

D = Decimal

logger = get_logger("billing")

ONE_TIME = "oneTime"
WEEKLY = "weekly"
BIWEEKLY = "biweekly"
TWICE_PER_MONTH = "twicePerMonth"
MONTHLY = "monthly"
BIMONTHLY = "bimonthly"
QUARTERLY = "quarterly"
BIANNUAL = "biannual"
ANNUAL = "annual"

STATIC_MONTHLY_MULTIPLIERS: Dict[str, D] = {
    ONE_TIME: D("0"),
    WEEKLY: D("4.33"),
    BIWEEKLY: D("2.165"),
    TWICE_PER_MONTH: D("2.0"),
    MONTHLY: D("1"),
    BIMONTHLY: D("0.5"),
    QUARTERLY: D("0.333"),
    BIANNUAL: D("0.167"),
    ANNUAL: D("0.083"),
}

STATIC_CYCLE_MONTHS: Dict[str, D] = {
    MONTHLY: D("1"),
    BIMONTHLY: D("2"),
    QUARTERLY: D("3"),
    BIANNUAL: D("6"),
    ANNUAL: D("12"),
}

# Priced per discrete visit rather than as a smooth monthly rate
VISIT_BASED = frozenset({QUARTERLY, BIANNUAL, ANNUAL})

_ALIASES: Dict[str, str] = {
    "onetime": ONE_TIME,
    "once": ONE_TIME,
    "weekly": WEEKLY,
    "biweekly": BIWEEKLY,
    "everyotherweek": BIWEEKLY,
    "every2weeks": BIWEEKLY,
    "twicepermonth": TWICE_PER_MONTH,
    "2month": TWICE_PER_MONTH,
    "2xmonth": TWICE_PER_MONTH,
    "2xpermonth": TWICE_PER_MONTH,
    "semimonthly": TWICE_PER_MONTH,
    "monthly": MONTHLY,
    "bimonthly": BIMONTHLY,
    "every2months": BIMONTHLY,
    "everyothermonth": BIMONTHLY,
    "quarterly": QUARTERLY,
    "biannual": BIANNUAL,
    "biannually": BIANNUAL,
    "semiannual": BIANNUAL,
    "semiannually": BIANNUAL,
    "annual": ANNUAL,
    "annually": ANNUAL,
    "yearly": ANNUAL,
}

_STRIP_RE = re.compile(r"[^a-z0-9]")


def normalize_frequency(label: Optional[str]) -> Optional[str]:
    """
    "Bi-Weekly", "bi weekly" and "biweekly" all map to "biweekly".
    Unknown labels return None.
    """
    if not label:
        return None
    return _ALIASES.get(_STRIP_RE.sub("", str(label).lower()))


def _explicit_multiplier(freq: str, config: EffectiveConfig) -> Optional[D]:
    return config.leaf(
        f"billingConversions.{freq}.monthlyMultiplier",
        f"frequencyMetadata.{freq}.monthlyRecurringMultiplier",
    )


def _config_cycle_months(freq: str, config: Optional[EffectiveConfig]) -> Optional[D]:
    if config is None:
        return None
    cycle = config.leaf(f"frequencyMetadata.{freq}.cycleMonths")
    if cycle is None or cycle <= ZERO:
        return None
    return cycle


def cycle_months(label: Optional[str], config: Optional[EffectiveConfig] = None) -> Optional[D]:
    freq = normalize_frequency(label)
    if freq is None:
        return None
    return _config_cycle_months(freq, config) or STATIC_CYCLE_MONTHS.get(freq)


def monthly_multiplier(label: Optional[str], config: Optional[EffectiveConfig] = None) -> D:
    """
    Monthly recurring multiplier for a frequency label.

    Resolution: explicit config multiplier, then 1 / cycleMonths from config
    metadata, then the static table. Unknown labels bill as monthly.
    """
    freq = normalize_frequency(label)
    if freq is None:
        logger.warning(f"Unknown frequency label {label!r}; billing as monthly")
        return D("1")

    if config is not None:
        explicit = _explicit_multiplier(freq, config)
        if explicit is not None:
            return explicit

    cycle = _config_cycle_months(freq, config)
    if cycle is not None:
        return D("1") / cycle

    return STATIC_MONTHLY_MULTIPLIERS[freq]


def annual_multiplier(label: Optional[str], config: Optional[EffectiveConfig] = None) -> D:
    cycle = cycle_months(label, config)
    if cycle is not None:
        return D("12") / cycle
    return monthly_multiplier(label, config) * D("12")


def is_visit_based(label: Optional[str]) -> bool:
    return normalize_frequency(label) in VISIT_BASED


def visits_in_contract(
    label: Optional[str], contract_months: int, config: Optional[EffectiveConfig] = None
) -> D:
    months = D(int(contract_months))
    if is_visit_based(label):
        return months / cycle_months(label, config)
    return months * monthly_multiplier(label, config)


def contract_total(
    per_visit: D, label: Optional[str], contract_months: int, config: Optional[EffectiveConfig] = None
) -> D:
    """
    Visit-based frequencies: per-visit x visits in the contract.
    Everything else: monthly recurring x months.
    """
    if is_visit_based(label):
        return per_visit * visits_in_contract(label, contract_months, config)
    return per_visit * monthly_multiplier(label, config) * D(int(contract_months))
