from __future__ import annotations

from typing import Dict

from servicequote.verticals.schema import ServiceSchema

_REGISTRY: Dict[str, ServiceSchema] = {}


def register(schema: ServiceSchema) -> None:
    sid = schema.service_id
    if not sid:
        raise ValueError("service_id required")
    if sid in _REGISTRY:
        raise ValueError(f"Service schema already registered: {sid}")
    _REGISTRY[sid] = schema


def get(service_id: str) -> ServiceSchema:
    try:
        return _REGISTRY[service_id]
    except KeyError:
        raise KeyError(f"Unknown service: {service_id}. Available: {list(_REGISTRY.keys())}")


def is_registered(service_id: str) -> bool:
    return service_id in _REGISTRY
