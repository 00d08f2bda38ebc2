"""Deed registry configuration via pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_DEFAULTS = {
    "api_key": "insecure-registry-key-change-me",
}


class RegistrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DEED_REGISTRY_")

    environment: str = "development"

    # Database
    db_url: str = "sqlite+aiosqlite:///./data/deed_registry.db"

    # API
    api_title: str = "Deed Registry"
    api_version: str = "0.1.0"
    api_key: str = "insecure-registry-key-change-me"
    host: str = "0.0.0.0"
    port: int = 8080
    api_prefix: str = ""
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Label used for audit entries when the caller does not identify itself
    default_actor: str = "Admin"

    log_level: str = "INFO"

    # Pagination
    default_page_size: int = 50
    max_page_size: int = 200

    def validate_for_production(self) -> None:
        """Raise if insecure defaults are used in non-development environments."""
        insecure_fields = [
            field
            for field, default in _INSECURE_DEFAULTS.items()
            if getattr(self, field) == default
        ]

        if self.environment != "development" and insecure_fields:
            env_vars = ", ".join(f"DEED_REGISTRY_{f.upper()}" for f in insecure_fields)
            raise RuntimeError(
                f"Insecure default values detected in '{self.environment}' environment. "
                f"Set these environment variables to secure values: {env_vars}."
            )

        if insecure_fields:
            warnings.warn(
                "Using insecure default API key, set DEED_REGISTRY_API_KEY for production",
                UserWarning,
                stacklevel=2,
            )


@lru_cache
def get_settings() -> RegistrySettings:
    settings = RegistrySettings()
    settings.validate_for_production()
    return settings
