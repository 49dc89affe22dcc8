"""Application settings loaded from environment variables via Pydantic."""

from __future__ import annotations

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings

from domain.models.resources import LimitCatalog, ResourceDimension, ResourceLimit
from domain.services.server_lifecycle import DEFAULT_RENEWAL_WINDOW_DAYS


class LimitSettings(BaseModel):
    min: int = Field(ge=0)
    max: int = Field(ge=0)
    step: int = Field(default=1, gt=0)
    default: int | None = None


class ResourceLimitSettings(BaseModel):
    """Admin-defined bounds for every bundle dimension.

    Override as JSON, e.g.
    ``APP_RESOURCE_LIMITS='{"cpu": {"min": 10, "max": 800, "step": 10}}'``.
    """

    cpu: LimitSettings = LimitSettings(min=5, max=400, step=5, default=5)
    ram: LimitSettings = LimitSettings(min=128, max=16384, step=128, default=128)
    disk: LimitSettings = LimitSettings(min=128, max=32768, step=128, default=128)
    databases: LimitSettings = LimitSettings(min=0, max=10, step=1, default=0)
    allocations: LimitSettings = LimitSettings(min=0, max=5, step=1, default=0)
    backups: LimitSettings = LimitSettings(min=0, max=10, step=1, default=0)


class AppSettings(BaseSettings):
    """Central configuration for the game-server provisioning service."""

    model_config = {"env_prefix": "APP_", "case_sensitive": False}

    # Provisioning backend
    backend_api_url: str = "http://localhost:3001"
    backend_api_key: SecretStr = SecretStr("")
    backend_timeout_seconds: float | None = None

    # Lifecycle
    renewal_window_days: int = DEFAULT_RENEWAL_WINDOW_DAYS

    # Resource limit catalog
    resource_limits: ResourceLimitSettings = ResourceLimitSettings()

    # Logging
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "*"

    def limit_catalog(self) -> LimitCatalog:
        limits = {}
        for dimension in ResourceDimension:
            cfg: LimitSettings = getattr(self.resource_limits, dimension.value)
            limits[dimension] = ResourceLimit(
                min=cfg.min, max=cfg.max, step=cfg.step, default=cfg.default
            )
        return LimitCatalog(limits=limits)


def get_settings() -> AppSettings:
    """Load application settings from the environment."""
    return AppSettings()
