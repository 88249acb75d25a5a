import httpx
import pytest

from servicequote.config import Settings
from servicequote.services.config_client import ServiceConfigClient
from servicequote.services.pricing_context import ServicePricingContext

pytestmark = pytest.mark.anyio

DOC = {
    "serviceId": "refreshPowerScrub",
    "version": 3,
    "isActive": True,
    "config": {"coreRates": {"perWorkerRate": 250}},
}


def _client(handler, **kwargs):
    return ServiceConfigClient("http://config.test", transport=httpx.MockTransport(handler), **kwargs)


async def test_get_active_happy():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["service"] = request.url.params["serviceId"]
        return httpx.Response(200, json=DOC)

    doc = await _client(handler).get_active("refreshPowerScrub")

    assert seen == {"path": "/api/service-configs/active", "service": "refreshPowerScrub"}
    assert doc.service_id == "refreshPowerScrub"
    assert doc.version == "3"
    assert doc.usable


async def test_get_active_unwraps_data_and_lists():
    def handler(request):
        return httpx.Response(200, json={"data": [{"serviceId": "other", "config": {"a": 1}}, DOC]})

    doc = await _client(handler).get_active("refreshPowerScrub")

    assert doc.config == DOC["config"]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(404),
        httpx.Response(200),
        httpx.Response(200, json={"data": None}),
        httpx.Response(200, json=[]),
    ],
)
async def test_get_active_empty_is_none(response):
    doc = await _client(lambda request: response).get_active("refreshPowerScrub")

    assert doc is None


async def test_get_active_server_error_raises():
    client = _client(lambda request: httpx.Response(500))

    with pytest.raises(httpx.HTTPStatusError):
        await client.get_active("refreshPowerScrub")


async def test_bearer_token_sent():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=DOC)

    await _client(handler, token="s3cret").get_active("refreshPowerScrub")

    assert seen["auth"] == "Bearer s3cret"


async def test_get_all_pricing_seeds_context():
    inactive = dict(DOC, serviceId="electrostaticSpray", isActive=False)

    def handler(request):
        assert request.url.path == "/api/service-configs/pricing"
        return httpx.Response(200, json={"data": [DOC, inactive, {"noId": True}]})

    ctx = await ServicePricingContext.from_client(_client(handler))

    assert sorted(ctx.service_ids()) == ["electrostaticSpray", "refreshPowerScrub"]
    assert ctx.get_cached_pricing_for_service("electrostaticSpray").is_active is False


async def test_pricing_context_survives_failed_seed():
    ctx = await ServicePricingContext.from_client(_client(lambda request: httpx.Response(503)))

    assert ctx.service_ids() == []


async def test_from_settings():
    settings = Settings(config_api_base_url="http://api.example/", config_api_token="t", config_fetch_timeout_seconds=2)

    client = ServiceConfigClient.from_settings(settings)

    assert client.base_url == "http://api.example"
    assert client.token == "t"
    assert client.timeout == 2
