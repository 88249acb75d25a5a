from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

from servicequote.schemas.service_config import ServiceConfig

if TYPE_CHECKING:
    from servicequote.changes.records import ChangeRecord


class ConfigFetcher(Protocol):
    """Remote config service. May return None or raise; callers fall through either way."""

    async def get_active(self, service_id: str) -> Optional[ServiceConfig]: ...


class CachedPricingProvider(Protocol):
    """Shared services context holding previously loaded (possibly inactive) configs."""

    def get_cached_pricing_for_service(self, service_id: str) -> Optional[ServiceConfig]: ...

    def remember(self, document: ServiceConfig) -> None: ...


class ChangeSink(Protocol):
    """Fire-and-forget consumer of change records."""

    def record(self, change: "ChangeRecord") -> None: ...
