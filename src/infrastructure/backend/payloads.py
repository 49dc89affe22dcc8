"""Translation between panel-backend JSON payloads and domain models.

Anything that does not have the expected shape raises
:class:`MalformedResponseError`; values are never guessed.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from domain.exceptions import MalformedResponseError
from domain.models.pricing import PricingSchedule, to_decimal
from domain.models.resources import ResourceBundle, ResourceDimension
from domain.models.server import (
    AccountState,
    MutationKind,
    MutationRequest,
    ServerInstance,
    ServerStatus,
)

# Older panel servers omit the optional slots; they default to zero.
_REQUIRED_DIMENSIONS = (ResourceDimension.CPU, ResourceDimension.RAM, ResourceDimension.DISK)


def _amount(value: Any, operation: str, name: str) -> Decimal:
    try:
        amount = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise MalformedResponseError(operation, f"{name} is not a number: {value!r}") from exc
    if not amount.is_finite():
        raise MalformedResponseError(operation, f"{name} is not finite: {value!r}")
    return amount


def _quantity(value: Any, operation: str, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedResponseError(operation, f"{name} is not an integer: {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise MalformedResponseError(operation, f"{name} is not an integer: {value!r}")
    if value < 0:
        raise MalformedResponseError(operation, f"{name} is negative: {value!r}")
    return int(value)


def _timestamp(value: Any, operation: str) -> datetime:
    if not isinstance(value, str):
        raise MalformedResponseError(operation, f"expiresAt is not a string: {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise MalformedResponseError(operation, f"bad expiresAt: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _unwrap(payload: Any) -> Any:
    if isinstance(payload, dict) and payload.get("success") is True and "data" in payload:
        return payload["data"]
    return payload


def parse_pricing(payload: Any) -> PricingSchedule:
    operation = "fetch_pricing_schedule"
    payload = _unwrap(payload)
    if not isinstance(payload, dict):
        raise MalformedResponseError(operation, "pricing payload is not an object")

    base_raw = payload.get("base")
    base = Decimal("0") if base_raw is None else _amount(base_raw, operation, "base")
    per_unit: dict[ResourceDimension, Decimal] = {}
    for dimension in ResourceDimension:
        raw = payload.get(dimension.value)
        if raw is not None:
            per_unit[dimension] = _amount(raw, operation, dimension.value)
    return PricingSchedule(base=base, per_unit=per_unit)


def parse_bundle(payload: Any, operation: str) -> ResourceBundle:
    if not isinstance(payload, dict):
        raise MalformedResponseError(operation, "resources is not an object")
    values: dict[str, int] = {}
    for dimension in ResourceDimension:
        raw = payload.get(dimension.value)
        if raw is None:
            if dimension in _REQUIRED_DIMENSIONS:
                raise MalformedResponseError(operation, f"resources.{dimension.value} missing")
            raw = 0
        values[dimension.value] = _quantity(raw, operation, dimension.value)
    return ResourceBundle.from_mapping(values)


def parse_server(payload: Any, operation: str = "fetch_account_state") -> ServerInstance:
    if not isinstance(payload, dict) or payload.get("id") is None:
        raise MalformedResponseError(operation, "server entry without id")
    try:
        status = ServerStatus(payload.get("status"))
    except ValueError as exc:
        raise MalformedResponseError(
            operation, f"unknown server status: {payload.get('status')!r}"
        ) from exc
    return ServerInstance(
        id=str(payload["id"]),
        resources=parse_bundle(payload.get("resources"), operation),
        status=status,
        expires_at=_timestamp(payload.get("expiresAt"), operation),
        auto_renew=bool(payload.get("autoRenew", False)),
        identifier=str(payload.get("identifier") or ""),
        name=str(payload.get("name") or ""),
    )


def parse_account(account_id: str, payload: Any) -> AccountState:
    operation = "fetch_account_state"
    payload = _unwrap(payload)
    if not isinstance(payload, dict):
        raise MalformedResponseError(operation, "account payload is not an object")
    servers = payload.get("servers")
    if not isinstance(servers, list):
        raise MalformedResponseError(operation, "servers is not a list")
    if "coins" not in payload:
        raise MalformedResponseError(operation, "coins missing")
    return AccountState(
        id=account_id,
        balance=_amount(payload["coins"], operation, "coins"),
        instances=tuple(parse_server(entry, operation) for entry in servers),
    )


def mutation_body(request: MutationRequest) -> dict[str, Any]:
    """Request body for the panel endpoint matching ``request.kind``."""
    body: dict[str, Any] = {"id": request.account_id}
    if request.server_id is not None:
        body["serverId"] = request.server_id

    if request.kind in (MutationKind.CREATE, MutationKind.MODIFY) and request.bundle:
        options = request.options
        if request.kind is MutationKind.CREATE:
            body["name"] = options.name
            body["location"] = options.location_id
        body["egg"] = options.egg
        body["nest"] = options.nest
        body.update(request.bundle.as_dict())
        if options.auto_renew is not None:
            body["autoRenew"] = options.auto_renew
    return body
