# servicequote/services/config_client.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from servicequote.config import Settings, get_settings
from servicequote.logging_config import get_logger
from servicequote.schemas.service_config import ServiceConfig

logger = get_logger("config_client")

ACTIVE_PATH = "/api/service-configs/active"
PRICING_PATH = "/api/service-configs/pricing"


def _unwrap(payload: Any) -> Any:
    # Backend responses come bare or wrapped in {"data": ...}
    if isinstance(payload, dict) and "data" in payload and "serviceId" not in payload:
        return payload["data"]
    return payload


class ServiceConfigClient:
    """
    Read-only client for the service-config backend.

    Transport errors and non-2xx responses (other than 404) raise; the config
    resolver is the layer that turns failures into a fallback.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "ServiceConfigClient":
        settings = settings or get_settings()
        return cls(
            settings.config_api_base_url,
            token=settings.config_api_token,
            timeout=settings.config_fetch_timeout_seconds,
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.timeout,
            transport=self._transport,
        )

    async def get_active(self, service_id: str) -> Optional[ServiceConfig]:
        async with self._client() as client:
            r = await client.get(ACTIVE_PATH, params={"serviceId": service_id})

        if r.status_code == 404:
            return None
        r.raise_for_status()
        if not r.content:
            return None

        payload = _unwrap(r.json())
        if isinstance(payload, list):
            payload = next(
                (p for p in payload if isinstance(p, dict) and p.get("serviceId") == service_id),
                None,
            )
        if not payload:
            return None

        return ServiceConfig.model_validate(payload)

    async def get_all_pricing(self) -> List[ServiceConfig]:
        async with self._client() as client:
            r = await client.get(PRICING_PATH)
        r.raise_for_status()

        payload = _unwrap(r.json()) if r.content else []
        if isinstance(payload, dict):
            payload = list(payload.values())

        out: List[ServiceConfig] = []
        for item in payload or []:
            if isinstance(item, dict) and item.get("serviceId"):
                out.append(ServiceConfig.model_validate(item))
        logger.info(f"Loaded {len(out)} pricing documents")
        return out
