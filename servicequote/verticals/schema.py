from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml
from jsonschema import validate

from servicequote.core.pricing_types import STRATEGY_RATES, PricingType
from servicequote.core.tree import freeze, lookup

SCHEMA_FILE = Path(__file__).parent / "schemas" / "service_schema.schema.json"

CONTRACT_PATHS = ("contract.minMonths", "contract.maxMonths", "contract.defaultMonths")


def _is_price(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


def _dups(items: List[str]) -> List[str]:
    seen, dups = set(), []
    for it in items:
        if it in seen and it not in dups:
            dups.append(it)
        seen.add(it)
    return dups


# -----------------------
# Area / preset models
# -----------------------


@dataclass(frozen=True)
class PresetSpec:
    """
    Where a preset package price lives in the config tree.

    - `path` with `options`: price is `{path}.{option}`
    - `path` alone: price is the leaf at `path`
    - no path: price is the `fallback_rate` (e.g. the minimum visit)
    """

    path: Optional[str] = None
    options: Tuple[str, ...] = ()
    default_option: Optional[str] = None
    addon_path: Optional[str] = None
    fallback_rate: Optional[str] = None

    def price_path(self, option: Optional[str]) -> Optional[str]:
        if not self.path:
            return None
        if not self.options:
            return self.path
        chosen = option if option in self.options else self.default_option
        return f"{self.path}.{chosen}"

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PresetSpec":
        options = tuple(str(o) for o in d.get("options") or [])
        default_option = d.get("defaultOption")
        if default_option is None and options:
            default_option = options[0]
        return PresetSpec(
            path=d.get("path"),
            options=options,
            default_option=default_option,
            addon_path=d.get("addonPath"),
            fallback_rate=d.get("fallbackRate"),
        )


@dataclass(frozen=True)
class AreaSpec:
    key: str
    label: str
    pricing_types: Tuple[PricingType, ...]
    default_pricing_type: PricingType
    preset: Optional[PresetSpec] = None

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AreaSpec":
        preset = PresetSpec.from_dict(d["preset"]) if d.get("preset") is not None else None

        if d.get("pricingTypes"):
            pricing_types = tuple(PricingType(p) for p in d["pricingTypes"])
        else:
            pricing_types = tuple(
                p for p in PricingType if p is not PricingType.PRESET or preset is not None
            )

        default = d.get("defaultPricingType")
        if default is None:
            default = PricingType.PRESET if PricingType.PRESET in pricing_types else pricing_types[0]

        return AreaSpec(
            key=str(d["key"]),
            label=str(d.get("label") or d["key"]),
            pricing_types=pricing_types,
            default_pricing_type=PricingType(default),
            preset=preset,
        )


@dataclass(frozen=True)
class TripChargeSpec:
    rate: str = "trip_charge"
    waive_when_all_inclusive: bool = True
    # Volume threshold: a subtotal at or above the leaf at this path waives the trip
    waive_at_or_above: Optional[str] = None

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TripChargeSpec":
        return TripChargeSpec(
            rate=str(d.get("rate") or "trip_charge"),
            waive_when_all_inclusive=bool(d.get("waiveWhenAllInclusive", True)),
            waive_at_or_above=d.get("waiveAtOrAbove"),
        )


# -----------------------
# Service schema
# -----------------------


@dataclass(frozen=True)
class ServiceSchema:
    """
    Declarative description of one service: its areas, the config paths each
    named rate is read from (in priority order) and the static default tree
    that backs every lookup when remote and cached configs are unavailable.
    """

    service_id: str
    display_name: str
    version: str
    default_frequency: str
    rates: Mapping[str, Tuple[str, ...]]
    areas: Tuple[AreaSpec, ...]
    defaults: Mapping[str, Any] = field(repr=False)
    trip_charge: Optional[TripChargeSpec] = None

    @property
    def area_keys(self) -> Tuple[str, ...]:
        return tuple(a.key for a in self.areas)

    def area(self, key: str) -> AreaSpec:
        for a in self.areas:
            if a.key == key:
                return a
        raise ValueError(f"Unknown area '{key}' for service '{self.service_id}'")

    def rate_paths(self, name: str) -> Tuple[str, ...]:
        return tuple(self.rates.get(name, ()))

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ServiceSchema":
        areas = [AreaSpec.from_dict(a) for a in d.get("areas") or []]
        rates = {str(k): tuple(str(p) for p in v) for k, v in (d.get("rates") or {}).items()}
        defaults = d.get("defaults") or {}
        trip = TripChargeSpec.from_dict(d["tripCharge"]) if d.get("tripCharge") else None
        service_id = str(d["serviceId"])

        # Cross-validation
        dups = _dups([a.key for a in areas])
        if dups:
            raise ValueError(f"Duplicate area keys in {service_id}: {dups}")

        if not areas:
            raise ValueError(f"{service_id} must declare at least one area.")

        if "minimum_visit" not in rates:
            raise ValueError(f"{service_id} must declare a minimum_visit rate.")

        for a in areas:
            if a.default_pricing_type not in a.pricing_types:
                raise ValueError(
                    f"Area '{a.key}' default pricing type {a.default_pricing_type.value} "
                    f"is not among its allowed types"
                )
            if PricingType.PRESET in a.pricing_types and a.preset is None:
                raise ValueError(f"Area '{a.key}' allows preset pricing but has no preset block")
            for pt in a.pricing_types:
                missing = [r for r in STRATEGY_RATES[pt] if r not in rates]
                if missing:
                    raise ValueError(
                        f"Area '{a.key}' allows {pt.value} but rates {missing} are not declared"
                    )
            if a.preset is not None:
                _check_preset(service_id, a, a.preset, rates, defaults)

        if trip is not None:
            if trip.rate not in rates:
                raise ValueError(f"Trip charge rate '{trip.rate}' is not declared")
            if trip.waive_at_or_above and not _is_price(lookup(defaults, trip.waive_at_or_above)):
                raise ValueError(
                    f"Static defaults do not resolve trip waiver threshold '{trip.waive_at_or_above}'"
                )

        # Static defaults are the last tier and must resolve every rate leaf
        for name, paths in rates.items():
            if not any(_is_price(lookup(defaults, p)) for p in paths):
                raise ValueError(f"Static defaults do not resolve rate '{name}' via {list(paths)}")

        for p in CONTRACT_PATHS:
            if not _is_price(lookup(defaults, p)):
                raise ValueError(f"Static defaults do not resolve '{p}'")

        return ServiceSchema(
            service_id=service_id,
            display_name=str(d.get("displayName") or service_id),
            version=str(d.get("version") or "v1"),
            default_frequency=str(d.get("defaultFrequency") or "monthly"),
            rates=freeze(rates),
            areas=tuple(areas),
            defaults=freeze(defaults),
            trip_charge=trip,
        )

    @classmethod
    def from_yaml_file(cls, path: str | Path) -> "ServiceSchema":
        schema_path = Path(path)

        with schema_path.open("r", encoding="utf-8") as f:
            d = yaml.safe_load(f)

        with SCHEMA_FILE.open("r", encoding="utf-8") as f:
            json_schema = json.load(f)

        validate(instance=d, schema=json_schema)
        return cls.from_dict(d)


def _check_preset(
    service_id: str,
    area: AreaSpec,
    preset: PresetSpec,
    rates: Mapping[str, Tuple[str, ...]],
    defaults: Mapping[str, Any],
) -> None:
    if preset.fallback_rate and preset.fallback_rate not in rates:
        raise ValueError(
            f"Area '{area.key}' preset falls back to undeclared rate '{preset.fallback_rate}'"
        )
    if not preset.path and not preset.fallback_rate:
        raise ValueError(f"Area '{area.key}' preset needs a path or a fallbackRate")
    if preset.options and preset.default_option not in preset.options:
        raise ValueError(
            f"Area '{area.key}' default option '{preset.default_option}' is not among {list(preset.options)}"
        )

    if preset.path and not preset.fallback_rate:
        for option in preset.options or (None,):
            leaf = preset.price_path(option)
            if not _is_price(lookup(defaults, leaf)):
                raise ValueError(f"{service_id}: static defaults do not resolve preset '{leaf}'")

    if preset.addon_path and not _is_price(lookup(defaults, preset.addon_path)):
        raise ValueError(f"{service_id}: static defaults do not resolve addon '{preset.addon_path}'")
