# servicequote/schemas/service_config.py
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServiceConfig(BaseModel):
    """
    Server-owned pricing document for one service.

    The backend sends camelCase (`serviceId`, `isActive`); both spellings are
    accepted. `config` is the nested rate tree and is treated as read-only once
    fetched.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    service_id: str = Field(alias="serviceId", min_length=1)
    version: Optional[str] = None
    is_active: bool = Field(True, alias="isActive")
    config: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_str(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v)

    @field_validator("config", mode="before")
    @classmethod
    def _config_dict(cls, v: Any) -> Dict[str, Any]:
        return dict(v or {})

    @property
    def usable(self) -> bool:
        return self.is_active and bool(self.config)
