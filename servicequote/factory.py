from __future__ import annotations

from functools import lru_cache
from typing import Optional

import httpx

from servicequote.changes.recorder import ChangeRecorder
from servicequote.config import Settings, get_settings
from servicequote.core.contracts import CachedPricingProvider, ChangeSink
from servicequote.engine.config_resolver import ConfigResolver
from servicequote.engine.quote_engine import QuoteSession
from servicequote.services.config_client import ServiceConfigClient
from servicequote.services.pricing_context import ServicePricingContext
from servicequote.verticals import register_verticals, registry


@lru_cache(maxsize=1)
def get_pricing_context() -> ServicePricingContext:
    """Process-wide pricing context shared by every session."""
    return ServicePricingContext()


def create_quote_session(
    service_id: str,
    settings: Optional[Settings] = None,
    *,
    change_sink: Optional[ChangeSink] = None,
    pricing_context: Optional[CachedPricingProvider] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> QuoteSession:
    """
    Wire a QuoteSession for `service_id`: HTTP fetcher from settings, the
    shared pricing context, and a change recorder feeding `change_sink`.
    The session starts on static defaults; call `refresh_config()` to resolve.
    """
    settings = settings or get_settings()
    register_verticals()
    schema = registry.get(service_id)

    client = ServiceConfigClient.from_settings(settings, transport=transport)
    context = pricing_context if pricing_context is not None else get_pricing_context()

    return QuoteSession(
        schema,
        resolver=ConfigResolver(client, context),
        recorder=ChangeRecorder(service_id, change_sink),
    )
