# app/config.py
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_POLICY_PATH = (
    Path(__file__).resolve().parent / "verticals" / "quoting" / "policies" / "v1.yaml"
)


class Settings(BaseSettings):
    # === Algemene app settings ===
    app_env: str = "local"  # local | development | production
    engine_version: str = "quoting-1.0.0"

    # === Pricing ===
    pricing_policy_path: str = Field(
        str(DEFAULT_POLICY_PATH), description="YAML calculator policy (rounding, tolerance, overtime)"
    )

    # === Logging ===
    log_level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    log_rotation: str = "1 day"
    log_retention: str = "30 days"
    log_file: Optional[str] = None

    # === Pydantic Settings config ===
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="QUOTING_",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance met simpele env-overrides."""
    s = Settings()

    env = os.getenv("ENVIRONMENT", s.app_env).lower()
    if env == "production":
        s.log_level = "WARNING"
        s.log_to_file = True
    elif env == "development":
        s.log_level = "DEBUG"

    return s
