from __future__ import annotations

import json
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from domain.models.pricing import CENT

_PROBLEM_BASE = "https://api.gamehost.example/problems"


class DomainError(Exception):
    """Base class for all domain-layer exceptions.

    Carries HTTP-mapping metadata so the presentation layer can render a
    uniform error envelope without knowing exception internals.
    """

    def __init__(
        self,
        detail: str = "",
        *,
        title: str = "Domain Error",
        status_code: int = 400,
        error_type: str = "about:blank",
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.title = title
        self.status_code = status_code
        self.error_type = error_type


def _money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)

class ResourceValidationError(DomainError):
    def __init__(
        self,
        dimension: str = "",
        minimum: int = 0,
        maximum: int = 0,
        unit: str = "",
    ) -> None:
        self.dimension = dimension
        self.minimum = minimum
        self.maximum = maximum
        self.allowed_range = f"{minimum} to {maximum}"
        suffix = f" {unit}" if unit else ""
        super().__init__(
            detail=f"{dimension} must be between {minimum} and {maximum}{suffix}",
            title="Resource Out Of Bounds",
            status_code=400,
            error_type=f"{_PROBLEM_BASE}/resource-out-of-bounds",
        )


class LifecycleError(DomainError):
    def __init__(self, detail: str = "", *, server_id: str = "", status: str = "") -> None:
        self.server_id = server_id
        self.status = status
        super().__init__(
            detail=detail,
            title="Lifecycle Violation",
            status_code=400,
            error_type=f"{_PROBLEM_BASE}/lifecycle-violation",
        )


class InsufficientBalanceError(DomainError):
    def __init__(self, required: Decimal = Decimal("0"), available: Decimal = Decimal("0")) -> None:
        self.required = required
        self.available = available
        super().__init__(
            detail=(
                f"Insufficient balance. Required: {_money(required)}, "
                f"Available: {_money(available)}"
            ),
            title="Insufficient Balance",
            status_code=400,
            error_type=f"{_PROBLEM_BASE}/insufficient-balance",
        )


class ServerNotFoundError(DomainError):
    def __init__(self, server_id: str = "") -> None:
        self.server_id = server_id
        super().__init__(
            detail=f"Server not found: {server_id}",
            title="Server Not Found",
            status_code=404,
            error_type=f"{_PROBLEM_BASE}/server-not-found",
        )


class UnauthenticatedError(DomainError):
    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(
            detail=detail,
            title="Unauthenticated",
            status_code=401,
            error_type=f"{_PROBLEM_BASE}/unauthenticated",
        )


class BackendError(DomainError):
    """Non-2xx answer from the provisioning backend.

    The original status code and payload are kept untouched; the detail is
    the most specific human-readable message found in the payload.
    """

    FALLBACK_MESSAGE = "The provisioning backend rejected the request."

    def __init__(self, status_code: int = 500, payload: Any = None) -> None:
        self.payload = payload
        super().__init__(
            detail=extract_backend_message(payload) or self.FALLBACK_MESSAGE,
            title="Backend Error",
            status_code=status_code,
            error_type=f"{_PROBLEM_BASE}/backend-error",
        )


class BackendUnavailableError(BackendError):
    FALLBACK_MESSAGE = "The provisioning backend is unreachable."

    def __init__(self, reason: str = "") -> None:
        self.reason = reason
        super().__init__(status_code=500, payload=None)
        self.title = "Backend Unavailable"


class MalformedResponseError(DomainError):
    def __init__(self, operation: str = "", reason: str = "") -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(
            detail="The provisioning backend returned an unexpected response.",
            title="Malformed Backend Response",
            status_code=500,
            error_type=f"{_PROBLEM_BASE}/malformed-response",
        )


def extract_backend_message(payload: Any) -> str:
    """Pull a single message out of a backend error payload.

    Tries ``error.message``, ``message`` and a plain ``error`` string in
    that order; any other non-empty payload is serialised as-is.
    """
    if payload is None or payload == "":
        return ""
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(payload.get("message"), str):
            return payload["message"]
        if isinstance(error, str):
            return error
    try:
        return json.dumps(payload, default=str)
    except (TypeError, ValueError):
        return ""
