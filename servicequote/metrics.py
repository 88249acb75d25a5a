# servicequote/metrics.py
from prometheus_client import Counter

from servicequote.config import get_settings

# ---------------------------
# Config resolution metrics
# ---------------------------
CONFIG_RESOLUTIONS = Counter(
    "config_resolutions_total",
    "Total number of pricing config resolutions, by the tier that supplied the config",
    ["service_id", "tier"],
)

# ---------------------------
# Quote metrics
# ---------------------------
QUOTES_COMPUTED = Counter(
    "quotes_computed_total",
    "Total number of quotes computed",
    ["service_id"],
)

# ---------------------------
# Change tracking metrics
# ---------------------------
CHANGE_RECORDS = Counter(
    "change_records_total",
    "Total number of price-relevant change records emitted",
    ["service_id", "field"],
)


def _enabled() -> bool:
    return get_settings().metrics_enabled


def record_config_resolution(service_id: str, tier: str) -> None:
    if _enabled():
        CONFIG_RESOLUTIONS.labels(service_id=service_id, tier=tier).inc()


def record_quote_computed(service_id: str) -> None:
    if _enabled():
        QUOTES_COMPUTED.labels(service_id=service_id).inc()


def record_change(service_id: str, field: str) -> None:
    if _enabled():
        CHANGE_RECORDS.labels(service_id=service_id, field=field).inc()
