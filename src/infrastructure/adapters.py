"""Adapter implementations bridging infrastructure to application-layer ports.

Provides an in-memory provisioning backend for tests and local runs, and
the event publishers used by the provisioning service.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from itertools import count
from typing import Any, Optional

from domain.events.server_events import ServerEvent
from domain.exceptions import BackendError, ServerNotFoundError
from domain.models.pricing import PricingSchedule
from domain.models.server import (
    AccountState,
    MutationKind,
    MutationRequest,
    ServerInstance,
    ServerStatus,
)
from infrastructure.observability.metrics import record_server_event

logger = logging.getLogger(__name__)

LEASE_PERIOD = timedelta(days=30)


# ---------------------------------------------------------------------------
# In-memory provisioning backend (swap for the HTTP backend in production)
# ---------------------------------------------------------------------------

class InMemoryProvisioningBackend:
    """Synchronous in-memory stand-in for the panel backend.

    Counts every call per method so tests can assert that rejected requests
    never reached :meth:`submit_mutation`. Balances are never debited.
    """

    def __init__(
        self,
        pricing: Optional[PricingSchedule] = None,
        accounts: Optional[list[AccountState]] = None,
    ) -> None:
        self.pricing = pricing or PricingSchedule()
        self._accounts: dict[str, AccountState] = {a.id: a for a in accounts or []}
        self._ids = count(1)
        self.calls: Counter[str] = Counter()
        self.mutations: list[MutationRequest] = []
        self._failure: Optional[BackendError] = None

    # -- setup helpers ----------------------------------------------------

    def add_account(self, account: AccountState) -> AccountState:
        self._accounts[account.id] = account
        return account

    def fail_next_mutation(self, status_code: int, payload: Any = None) -> None:
        self._failure = BackendError(status_code=status_code, payload=payload)

    def _account(self, account_id: str) -> AccountState:
        account = self._accounts.get(account_id)
        if account is None:
            raise BackendError(status_code=404, payload={"error": "User not found"})
        return account

    # -- port implementation ---------------------------------------------

    def fetch_account_state(self, account_id: str) -> AccountState:
        self.calls["fetch_account_state"] += 1
        return self._account(account_id)

    def fetch_pricing_schedule(self) -> PricingSchedule:
        self.calls["fetch_pricing_schedule"] += 1
        return self.pricing

    def submit_mutation(self, request: MutationRequest) -> dict[str, Any]:
        self.calls["submit_mutation"] += 1
        self.mutations.append(request)
        if self._failure is not None:
            failure, self._failure = self._failure, None
            raise failure

        account = self._account(request.account_id)
        if request.kind is MutationKind.CREATE:
            server = ServerInstance(
                id=str(next(self._ids)),
                resources=request.bundle,
                status=ServerStatus.ACTIVE,
                expires_at=datetime.now(UTC) + LEASE_PERIOD,
                auto_renew=bool(request.options.auto_renew),
                name=request.options.name,
            )
            instances = (*account.instances, server)
        else:
            server = account.find_instance(request.server_id or "")
            if server is None:
                raise ServerNotFoundError(request.server_id or "")
            server = self._apply(request, server)
            instances = tuple(server if s.id == server.id else s for s in account.instances)

        self._accounts[account.id] = replace(account, instances=instances)
        return _server_payload(server)

    @staticmethod
    def _apply(request: MutationRequest, server: ServerInstance) -> ServerInstance:
        if request.kind is MutationKind.MODIFY:
            changes: dict[str, Any] = {"resources": request.bundle}
            if request.options.auto_renew is not None:
                changes["auto_renew"] = request.options.auto_renew
            return replace(server, **changes)
        if request.kind is MutationKind.RENEW:
            return replace(server, expires_at=server.expires_at + LEASE_PERIOD)
        return replace(server, status=ServerStatus.DELETED)


def _server_payload(server: ServerInstance) -> dict[str, Any]:
    return {
        "id": server.id,
        "name": server.name,
        "status": server.status.value,
        "resources": server.resources.as_dict(),
        "expiresAt": server.expires_at.isoformat(),
        "autoRenew": server.auto_renew,
    }


# ---------------------------------------------------------------------------
# Event publishers
# ---------------------------------------------------------------------------

class LoggingEventPublisher:
    """Event publisher that logs events."""

    def publish(self, event: ServerEvent) -> None:
        logger.info("Domain event: %s", event)


class MetricsEventPublisher(LoggingEventPublisher):
    """Logs events and feeds them into the Prometheus provisioning metrics."""

    def publish(self, event: ServerEvent) -> None:
        super().publish(event)
        amount = getattr(event, "cost", None)
        if amount is None:
            amount = getattr(event, "additional_cost", Decimal("0"))
        record_server_event(event.event_type, amount)
