from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

from servicequote.logging_config import get_logger
from servicequote.schemas.service_config import ServiceConfig

if TYPE_CHECKING:
    from .config_client import ServiceConfigClient

logger = get_logger("pricing_context")


class ServicePricingContext:
    """
    Process-wide cache of pricing documents, keyed by serviceId.

    Holds whatever was last seen for a service, including inactive documents,
    so a failed fetch can still price from the last known configuration.
    """

    def __init__(self, documents: Optional[Iterable[ServiceConfig]] = None):
        self._lock = threading.Lock()
        self._docs: Dict[str, ServiceConfig] = {}
        if documents:
            self.load(documents)

    @classmethod
    async def from_client(cls, client: "ServiceConfigClient") -> "ServicePricingContext":
        ctx = cls()
        try:
            ctx.load(await client.get_all_pricing())
        except Exception as e:
            logger.warning(f"Could not seed pricing context: {e!r}")
        return ctx

    def load(self, documents: Iterable[ServiceConfig]) -> None:
        with self._lock:
            for doc in documents:
                self._docs[doc.service_id] = doc

    def remember(self, document: ServiceConfig) -> None:
        with self._lock:
            self._docs[document.service_id] = document

    def get_cached_pricing_for_service(self, service_id: str) -> Optional[ServiceConfig]:
        with self._lock:
            return self._docs.get(service_id)

    def service_ids(self) -> List[str]:
        with self._lock:
            return list(self._docs.keys())
