"""Dependency injection container for the game-server provisioning service.

Wires together the backend adapter, domain services and the provisioning
application service, exposing factory functions suitable for FastAPI's
``Depends()`` system.
"""

from __future__ import annotations

import logging

from application.services.provisioning_service import ProvisioningBackend, ProvisioningService
from domain.models.resources import LimitCatalog
from domain.services.balance_gate import BalanceGate
from domain.services.cost_calculator import CostCalculator
from domain.services.resource_validator import ResourceValidator
from domain.services.server_lifecycle import ServerLifecycleGuard
from infrastructure.adapters import MetricsEventPublisher
from infrastructure.backend import HttpProvisioningBackend
from infrastructure.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Central DI container that owns all service instances."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        backend: ProvisioningBackend | None = None,
    ) -> None:
        self._settings = settings or get_settings()

        # Infrastructure adapters
        self.backend = backend or HttpProvisioningBackend(
            base_url=self._settings.backend_api_url,
            api_key=self._settings.backend_api_key,
            timeout=self._settings.backend_timeout_seconds,
        )
        self.event_publisher = MetricsEventPublisher()

        # Domain services
        self.limit_catalog: LimitCatalog = self._settings.limit_catalog()
        self.validator = ResourceValidator(self.limit_catalog)
        self.cost_calculator = CostCalculator()
        self.balance_gate = BalanceGate()
        self.lifecycle_guard = ServerLifecycleGuard(self._settings.renewal_window_days)

        # Application services
        self.provisioning_service = ProvisioningService(
            backend=self.backend,
            validator=self.validator,
            cost_calculator=self.cost_calculator,
            balance_gate=self.balance_gate,
            lifecycle_guard=self.lifecycle_guard,
            event_publisher=self.event_publisher,
        )

        logger.info("ServiceContainer initialized against %s", self._settings.backend_api_url)

    @property
    def settings(self) -> AppSettings:
        return self._settings


# Module-level singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Return the global container singleton."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def set_container(container: ServiceContainer) -> None:
    """Install a pre-built container (tests, alternate backends)."""
    global _container
    _container = container


def reset_container() -> None:
    """Reset the global container (for testing)."""
    global _container
    _container = None


# ---------------------------------------------------------------------------
# FastAPI dependency factories
# ---------------------------------------------------------------------------


def get_provisioning_service() -> ProvisioningService:
    return get_container().provisioning_service


def get_limit_catalog() -> LimitCatalog:
    return get_container().limit_catalog
