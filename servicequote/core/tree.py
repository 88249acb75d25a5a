from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional


def lookup(tree: Optional[Mapping[str, Any]], path: str) -> Any:
    """
    Walk a dotted path ("coreRates.perWorkerRate") through nested mappings.
    Missing keys or non-mapping intermediates yield None.
    """
    node: Any = tree
    for part in path.split("."):
        if not isinstance(node, Mapping):
            return None
        node = node.get(part)
        if node is None:
            return None
    return node


def freeze(value: Any) -> Any:
    """Deep, read-only copy: dicts become MappingProxyType, lists become tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value

