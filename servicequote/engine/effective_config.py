from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from servicequote.core.numbers import MAX_INPUT, to_decimal
from servicequote.core.tree import freeze, lookup
from servicequote.verticals.schema import ServiceSchema

D = Decimal


class ConfigTier(str, Enum):
    """Where the winning config document came from, highest priority first."""

    REMOTE = "REMOTE"
    CACHED = "CACHED"
    STATIC = "STATIC"


def _usable_leaf(value: Any) -> Optional[D]:
    """Negative, non-finite, oversized and non-numeric leaves count as missing."""
    if isinstance(value, (Mapping, tuple, list)):
        return None
    out = to_decimal(value, default=None)
    if out is None or out < 0 or out > MAX_INPUT:
        return None
    return out


@dataclass(frozen=True)
class EffectiveConfig:
    """
    Read-only merged view of remote/cached config over the service's static
    defaults. Each numeric leaf is resolved independently: the first tier whose
    tree carries a usable value at any of the requested paths wins, so a remote
    document that omits a rate falls back for that rate only.
    """

    schema: ServiceSchema
    tier: ConfigTier
    version: Optional[str] = None
    layers: Tuple[Tuple[ConfigTier, Mapping[str, Any]], ...] = ()

    @classmethod
    def build(
        cls,
        schema: ServiceSchema,
        tier: ConfigTier,
        tree: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
    ) -> "EffectiveConfig":
        layers = []
        if tier is not ConfigTier.STATIC and tree:
            layers.append((tier, freeze(tree)))
        layers.append((ConfigTier.STATIC, schema.defaults))
        return cls(schema=schema, tier=tier, version=version, layers=tuple(layers))

    @classmethod
    def static(cls, schema: ServiceSchema) -> "EffectiveConfig":
        return cls.build(schema, ConfigTier.STATIC, version=schema.version)

    # -----------------------
    # Lookups
    # -----------------------

    def leaf(self, *paths: str) -> Optional[D]:
        for _, tree in self.layers:
            for p in paths:
                value = _usable_leaf(lookup(tree, p))
                if value is not None:
                    return value
        return None

    def number(self, *paths: str) -> D:
        """Like `leaf`, but a miss means the static defaults are broken."""
        value = self.leaf(*paths)
        if value is None:
            raise KeyError(f"No usable value for {list(paths)} in {self.schema.service_id}")
        return value

    def rate(self, name: str) -> D:
        paths = self.schema.rate_paths(name)
        if not paths:
            raise KeyError(f"Rate '{name}' is not declared for {self.schema.service_id}")
        return self.number(*paths)

    def has_rate(self, name: str) -> bool:
        return bool(self.schema.rate_paths(name))

    def section(self, path: str) -> Optional[Mapping[str, Any]]:
        """First mapping found at `path`, used for option tables like rateCategories."""
        for _, tree in self.layers:
            node = lookup(tree, path)
            if isinstance(node, Mapping):
                return node
        return None

    # -----------------------
    # Contract bounds
    # -----------------------

    @property
    def min_contract_months(self) -> int:
        return int(self.number("contract.minMonths"))

    @property
    def max_contract_months(self) -> int:
        return int(self.number("contract.maxMonths"))

    @property
    def default_contract_months(self) -> int:
        return int(self.number("contract.defaultMonths"))

    def clamp_months(self, months: Any) -> int:
        lo, hi = self.min_contract_months, self.max_contract_months
        value = to_decimal(months, default=None)
        if value is None or value <= 0:
            return self.default_contract_months
        return max(lo, min(hi, int(value)))

    @property
    def source_label(self) -> str:
        return self.tier.value
