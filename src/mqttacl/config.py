"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MQTTACL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Service
    service_name: str = "mqtt-acl"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Rules
    rules_file: Path = Field(default=Path("acl.yaml"))

    # Cache
    decision_cache_enabled: bool = True
    decision_cache_maxsize: int = 10000
    decision_cache_ttl_seconds: int = 300  # 5 minutes

    # Audit
    audit_enabled: bool = True
    audit_log_inputs: bool = True  # Log full attempts (disable in prod if sensitive)


settings = Settings()


@lru_cache
def get_settings() -> Settings:
    """Backward-compatible alias for the module-level settings singleton."""
    return settings
