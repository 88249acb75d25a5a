from __future__ import annotations

from decimal import Decimal

import pytest

import servicequote.strategies  # noqa: F401 (register all strategies)

from servicequote.engine.area_state import QUANTITY_FIELDS, RATE_FIELDS, AreaState
from servicequote.engine.effective_config import ConfigTier, EffectiveConfig
from servicequote.engine.quote_engine import QuoteSession
from servicequote.schemas.service_config import ServiceConfig
from servicequote.verticals import register_verticals, registry

REFRESH = "refreshPowerScrub"
SPRAY = "electrostaticSpray"


@pytest.fixture
def anyio_backend():
    # asyncio only, no trio needed
    return "asyncio"


@pytest.fixture(scope="session", autouse=True)
def _service_schemas():
    register_verticals()


@pytest.fixture
def refresh_schema():
    return registry.get(REFRESH)


@pytest.fixture
def spray_schema():
    return registry.get(SPRAY)


@pytest.fixture
def refresh_config(refresh_schema):
    return EffectiveConfig.static(refresh_schema)


@pytest.fixture
def spray_config(spray_schema):
    return EffectiveConfig.static(spray_schema)


@pytest.fixture
def remote_config():
    """Build a REMOTE-tier config for a schema from a partial rate tree."""

    def _build(schema, tree, version="7"):
        return EffectiveConfig.build(schema, ConfigTier.REMOTE, tree, version)

    return _build


@pytest.fixture
def make_area():
    """Enabled AreaState for `key`, seeded from `config`, with field overrides."""

    def _make(config, key, **fields):
        area = AreaState.from_spec(config.schema.area(key), config)
        area.enabled = True
        for name, value in fields.items():
            if name in QUANTITY_FIELDS or name in RATE_FIELDS:
                value = Decimal(str(value))
            setattr(area, name, value)
        return area

    return _make


@pytest.fixture
def refresh_session(refresh_schema):
    return QuoteSession(refresh_schema, session_id="test-session")


@pytest.fixture
def remote_doc():
    def _doc(service_id=REFRESH, config=None, version="2", active=True):
        return ServiceConfig(
            serviceId=service_id,
            version=version,
            isActive=active,
            config=config if config is not None else {"coreRates": {"perWorkerRate": 250}},
        )

    return _doc


class FakeFetcher:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def get_active(self, service_id):
        self.calls.append(service_id)
        if self.error is not None:
            raise self.error
        if callable(self.result):
            return self.result(service_id)
        return self.result


@pytest.fixture
def fake_fetcher():
    return FakeFetcher
