"""Shared fixtures for unit tests."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

# Ensure src is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from domain.models.pricing import PricingSchedule
from domain.models.resources import (
    DEFAULT_LIMITS,
    LimitCatalog,
    ResourceBundle,
    ResourceDimension,
)
from domain.models.server import AccountState, ServerInstance, ServerStatus
from domain.services.balance_gate import BalanceGate
from domain.services.cost_calculator import CostCalculator
from domain.services.resource_validator import ResourceValidator
from domain.services.server_lifecycle import ServerLifecycleGuard
from infrastructure.adapters import InMemoryProvisioningBackend

ACCOUNT_ID = "user-1"
SERVER_ID = "42"
NOW = datetime(2026, 2, 17, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def catalog() -> LimitCatalog:
    return LimitCatalog(limits=dict(DEFAULT_LIMITS))


@pytest.fixture
def pricing() -> PricingSchedule:
    return PricingSchedule(
        base=Decimal("5"),
        per_unit={
            ResourceDimension.CPU: Decimal("0.5"),
            ResourceDimension.RAM: Decimal("0.01"),
            ResourceDimension.DISK: Decimal("0.005"),
            ResourceDimension.DATABASES: Decimal("2"),
            ResourceDimension.ALLOCATIONS: Decimal("1"),
            ResourceDimension.BACKUPS: Decimal("1"),
        },
    )


@pytest.fixture
def small_bundle() -> ResourceBundle:
    return ResourceBundle(cpu=10, ram=256, disk=512, databases=1, allocations=1, backups=1)


@pytest.fixture
def active_server(small_bundle) -> ServerInstance:
    return ServerInstance(
        id=SERVER_ID,
        identifier="a1b2c3d4",
        name="survival",
        resources=small_bundle,
        status=ServerStatus.ACTIVE,
        expires_at=NOW + timedelta(days=10),
        auto_renew=True,
    )


@pytest.fixture
def account(active_server) -> AccountState:
    return AccountState(id=ACCOUNT_ID, balance=Decimal("100.00"), instances=(active_server,))


@pytest.fixture
def backend(pricing, account) -> InMemoryProvisioningBackend:
    return InMemoryProvisioningBackend(pricing=pricing, accounts=[account])


@pytest.fixture
def validator(catalog) -> ResourceValidator:
    return ResourceValidator(catalog)


@pytest.fixture
def cost_calculator() -> CostCalculator:
    return CostCalculator()


@pytest.fixture
def balance_gate() -> BalanceGate:
    return BalanceGate()


@pytest.fixture
def lifecycle_guard() -> ServerLifecycleGuard:
    return ServerLifecycleGuard()

