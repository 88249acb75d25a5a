from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from servicequote.core.contracts import CachedPricingProvider, ConfigFetcher
from servicequote.logging_config import get_logger
from servicequote.metrics import record_config_resolution
from servicequote.schemas.service_config import ServiceConfig
from servicequote.verticals import registry
from servicequote.verticals.schema import ServiceSchema

from .effective_config import ConfigTier, EffectiveConfig

logger = get_logger("config_resolver")


@dataclass(frozen=True)
class Resolution:
    config: EffectiveConfig
    tier: ConfigTier
    degraded: bool
    # A newer resolve() for the same service started while this one was in flight
    superseded: bool = False
    error: Optional[str] = None


class ConfigResolver:
    """
    Remote -> cached -> static config resolution.

    - Never raises for fetch/cache failures; the static tier always answers
    - A usable remote document from a current resolve is pushed into the
      shared pricing context
    - Last resolver wins per serviceId: results of superseded calls are
      flagged so the session can discard them
    """

    def __init__(
        self,
        fetcher: Optional[ConfigFetcher] = None,
        context: Optional[CachedPricingProvider] = None,
        schema_lookup: Callable[[str], ServiceSchema] = registry.get,
    ):
        self.fetcher = fetcher
        self.context = context
        self._schema_lookup = schema_lookup
        self._lock = threading.Lock()
        self._generations: Dict[str, int] = {}

    def _next_generation(self, service_id: str) -> int:
        with self._lock:
            gen = self._generations.get(service_id, 0) + 1
            self._generations[service_id] = gen
            return gen

    def _is_current(self, service_id: str, generation: int) -> bool:
        with self._lock:
            return self._generations.get(service_id) == generation

    async def _fetch_remote(self, service_id: str) -> tuple[Optional[ServiceConfig], Optional[str]]:
        if self.fetcher is None:
            return None, None
        try:
            doc = await self.fetcher.get_active(service_id)
        except Exception as e:
            logger.warning(f"Remote config fetch failed for {service_id}: {e!r}")
            return None, repr(e)

        if doc is None:
            logger.info(f"No active remote config for {service_id}")
            return None, None
        if not doc.usable:
            logger.info(f"Remote config for {service_id} is inactive or empty; ignoring")
            return None, None
        return doc, None

    def _cached(self, service_id: str) -> Optional[ServiceConfig]:
        if self.context is None:
            return None
        try:
            doc = self.context.get_cached_pricing_for_service(service_id)
        except Exception as e:
            logger.warning(f"Pricing context lookup failed for {service_id}: {e!r}")
            return None
        # Inactive cached documents are still better than compiled-in defaults
        if doc is None or not doc.config:
            return None
        return doc

    async def resolve(self, service_id: str) -> Resolution:
        schema = self._schema_lookup(service_id)
        generation = self._next_generation(service_id)

        remote, error = await self._fetch_remote(service_id)
        superseded = not self._is_current(service_id, generation)

        if remote is not None:
            # A superseded fetch must not overwrite the newer cached document
            if self.context is not None and not superseded:
                try:
                    self.context.remember(remote)
                except Exception as e:
                    logger.warning(f"Could not cache config for {service_id}: {e!r}")
            config = EffectiveConfig.build(schema, ConfigTier.REMOTE, remote.config, remote.version)
        else:
            cached = self._cached(service_id)
            if cached is not None:
                config = EffectiveConfig.build(schema, ConfigTier.CACHED, cached.config, cached.version)
            else:
                config = EffectiveConfig.static(schema)

        tier = config.tier
        if tier is not ConfigTier.REMOTE:
            logger.warning(f"Pricing for {service_id} degraded to {tier.value} config")
        if superseded:
            logger.info(f"Discarding superseded config resolution for {service_id}")

        record_config_resolution(service_id, tier.value)
        return Resolution(
            config=config,
            tier=tier,
            degraded=tier is not ConfigTier.REMOTE,
            superseded=superseded,
            error=error,
        )
