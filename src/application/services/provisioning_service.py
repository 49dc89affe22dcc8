"""Provisioning application service.

Sequences validation, pricing, lifecycle and balance checks in front of
every mutation sent to the remote provisioning backend. All local checks
run before the mutation call; the backend stays the final authority on
state and balance. Pricing and account state are fetched fresh on every
call and never cached.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Protocol

from domain.events.server_events import (
    ServerCreated,
    ServerDeleted,
    ServerEvent,
    ServerModified,
    ServerRenewed,
)
from domain.exceptions import ServerNotFoundError
from domain.models.pricing import CostBreakdown, PricingSchedule
from domain.models.resources import ResourceBundle
from domain.models.server import (
    AccountState,
    MutationKind,
    MutationRequest,
    ProvisioningOptions,
    ServerInstance,
)
from domain.services.server_lifecycle import days_until_expiry

if TYPE_CHECKING:
    from domain.services.balance_gate import BalanceGate
    from domain.services.cost_calculator import CostCalculator
    from domain.services.resource_validator import ResourceValidator
    from domain.services.server_lifecycle import ServerLifecycleGuard

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Value objects returned by service methods
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MutationResult:
    """Backend answer for an accepted mutation plus the locally quoted charge."""

    data: Any
    charged: Decimal | None = None
    breakdown: CostBreakdown | None = None


@dataclass(frozen=True)
class RenewalQuote:
    server_id: str
    breakdown: CostBreakdown
    balance: Decimal
    days_until_expiry: int
    renewable: bool
    affordable: bool
    remaining_after: Decimal


# ---------------------------------------------------------------------------
# Infrastructure port interfaces
# ---------------------------------------------------------------------------


class ProvisioningBackend(Protocol):
    """Port: the remote panel backend that owns servers and balances."""

    def fetch_account_state(self, account_id: str) -> AccountState: ...

    def fetch_pricing_schedule(self) -> PricingSchedule: ...

    def submit_mutation(self, request: MutationRequest) -> Any: ...


class EventPublisher(Protocol):
    """Port: domain event publishing."""

    def publish(self, event: ServerEvent) -> None: ...


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ProvisioningService:
    """Create, resize, renew and delete servers behind local pre-checks."""

    def __init__(
        self,
        backend: ProvisioningBackend,
        validator: ResourceValidator,
        cost_calculator: CostCalculator,
        balance_gate: BalanceGate,
        lifecycle_guard: ServerLifecycleGuard,
        event_publisher: EventPublisher,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._backend = backend
        self._validator = validator
        self._calculator = cost_calculator
        self._gate = balance_gate
        self._guard = lifecycle_guard
        self._event_publisher = event_publisher
        self._clock = clock or (lambda: datetime.now(UTC))

    # -- helpers ----------------------------------------------------------

    def _load_server(self, account_id: str, server_id: str) -> tuple[AccountState, ServerInstance]:
        account = self._backend.fetch_account_state(account_id)
        server = account.find_instance(server_id)
        if server is None:
            raise ServerNotFoundError(server_id)
        return account, server

    def _submit(self, request: MutationRequest) -> Any:
        logger.info("Submitting mutation %s", request.describe())
        return self._backend.submit_mutation(request)

    # -- quotes -----------------------------------------------------------

    def quote(self, bundle: ResourceBundle) -> CostBreakdown:
        """Price a bundle without submitting anything."""
        self._validator.validate(bundle)
        pricing = self._backend.fetch_pricing_schedule()
        return self._calculator.compute_cost(bundle, pricing)

    def quote_renewal(self, account_id: str, server_id: str) -> RenewalQuote:
        account, server = self._load_server(account_id, server_id)
        pricing = self._backend.fetch_pricing_schedule()
        breakdown = self._calculator.compute_cost(server.resources, pricing)
        now = self._clock()
        return RenewalQuote(
            server_id=server.id,
            breakdown=breakdown,
            balance=account.balance,
            days_until_expiry=days_until_expiry(server.expires_at, now),
            renewable=self._guard.can_renew(server, now),
            affordable=self._gate.can_afford(account.balance, breakdown.total),
            remaining_after=self._gate.remaining_after(account.balance, breakdown.total),
        )

    # -- mutations --------------------------------------------------------

    def create(
        self,
        account_id: str,
        bundle: ResourceBundle,
        options: ProvisioningOptions | None = None,
    ) -> MutationResult:
        self._validator.validate(bundle)
        account = self._backend.fetch_account_state(account_id)
        pricing = self._backend.fetch_pricing_schedule()
        breakdown = self._calculator.compute_cost(bundle, pricing)
        self._gate.require(account.balance, breakdown.total)

        data = self._submit(
            MutationRequest(
                kind=MutationKind.CREATE,
                account_id=account_id,
                bundle=bundle,
                options=options or ProvisioningOptions(),
            )
        )
        self._event_publisher.publish(
            ServerCreated(
                account_id=account_id,
                cost=breakdown.total,
                resources=bundle.as_dict(),
            )
        )
        logger.info("Server created for account %s at cost %s", account_id, breakdown.total)
        return MutationResult(data=data, charged=breakdown.total, breakdown=breakdown)

    def modify(
        self,
        account_id: str,
        server_id: str,
        bundle: ResourceBundle,
        options: ProvisioningOptions | None = None,
    ) -> MutationResult:
        """Resize a server in place.

        The requested bundle replaces the current one entirely. Only the
        increase per dimension is charged, plus the base fee.
        """
        account, server = self._load_server(account_id, server_id)
        self._validator.validate(bundle)
        self._guard.ensure_status(MutationKind.MODIFY, server)

        pricing = self._backend.fetch_pricing_schedule()
        quote = self._calculator.compute_delta(server.resources, bundle, pricing)
        self._gate.require(account.balance, quote.total_additional_cost)

        data = self._submit(
            MutationRequest(
                kind=MutationKind.MODIFY,
                account_id=account_id,
                server_id=server.id,
                bundle=bundle,
                options=options or ProvisioningOptions(),
            )
        )
        self._event_publisher.publish(
            ServerModified(
                account_id=account_id,
                server_id=server.id,
                additional_cost=quote.total_additional_cost,
                previous_resources=server.resources.as_dict(),
                resources=bundle.as_dict(),
            )
        )
        return MutationResult(
            data=data,
            charged=quote.total_additional_cost,
            breakdown=quote.breakdown,
        )

    def renew(self, account_id: str, server_id: str) -> MutationResult:
        """Extend a server's lease for a full price of its current bundle."""
        account, server = self._load_server(account_id, server_id)
        days_left = self._guard.ensure_renewable(server, self._clock())

        pricing = self._backend.fetch_pricing_schedule()
        breakdown = self._calculator.compute_cost(server.resources, pricing)
        self._gate.require(account.balance, breakdown.total)

        data = self._submit(
            MutationRequest(
                kind=MutationKind.RENEW,
                account_id=account_id,
                server_id=server.id,
            )
        )
        self._event_publisher.publish(
            ServerRenewed(
                account_id=account_id,
                server_id=server.id,
                cost=breakdown.total,
                days_until_expiry=days_left,
            )
        )
        return MutationResult(data=data, charged=breakdown.total, breakdown=breakdown)

    def delete(self, account_id: str, server_id: str) -> MutationResult:
        _, server = self._load_server(account_id, server_id)
        self._guard.ensure_status(MutationKind.DELETE, server)

        data = self._submit(
            MutationRequest(
                kind=MutationKind.DELETE,
                account_id=account_id,
                server_id=server.id,
            )
        )
        self._event_publisher.publish(ServerDeleted(account_id=account_id, server_id=server.id))
        return MutationResult(data=data)
