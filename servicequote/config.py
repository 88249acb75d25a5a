# servicequote/config.py
import os
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === General ===
    app_env: str = "local"  # local | development | production

    # === Remote service-config API ===
    config_api_base_url: str = Field(
        "http://localhost:5000", description="Base URL of the service-config backend"
    )
    config_api_token: Optional[str] = Field(
        None, description="Bearer token for the service-config backend"
    )
    config_fetch_timeout_seconds: float = 5.0

    # === Logging ===
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = False
    log_rotation: str = "1 day"
    log_retention: str = "30 days"

    # === Metrics ===
    metrics_enabled: bool = True

    # === Pydantic Settings config ===
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide Settings; production quiets logging to WARNING."""
    s = Settings()

    env = os.getenv("ENVIRONMENT", s.app_env).lower()
    if env == "production":
        s.log_level = "WARNING"

    return s
