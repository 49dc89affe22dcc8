"""Shared fixtures for API contract tests."""

from __future__ import annotations

import sys
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

BUNDLE = {"cpu": 10, "ram": 256, "disk": 512, "databases": 1, "allocations": 1, "backups": 1}


@pytest.fixture
def backend():
    from domain.models.pricing import PricingSchedule
    from domain.models.resources import ResourceBundle, ResourceDimension
    from domain.models.server import AccountState, ServerInstance, ServerStatus
    from infrastructure.adapters import InMemoryProvisioningBackend

    pricing = PricingSchedule(
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
    expires = datetime.now(UTC) + timedelta(days=10, hours=1)
    bundle = ResourceBundle(**BUNDLE)
    active = ServerInstance(id="42", resources=bundle, expires_at=expires, name="survival")
    suspended = ServerInstance(
        id="43", resources=bundle, status=ServerStatus.SUSPENDED, expires_at=expires
    )
    return InMemoryProvisioningBackend(
        pricing=pricing,
        accounts=[
            AccountState(id="user-1", balance=Decimal("100.00"), instances=(active, suspended)),
            AccountState(id="user-2", balance=Decimal("10.00"), instances=(active,)),
        ],
    )


@pytest.fixture
def client(backend):
    from starlette.testclient import TestClient

    from infrastructure.container import ServiceContainer, reset_container, set_container
    from infrastructure.settings import AppSettings
    from presentation.main import create_app

    set_container(ServiceContainer(settings=AppSettings(), backend=backend))
    yield TestClient(create_app())
    reset_container()
