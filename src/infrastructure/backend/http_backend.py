"""
HTTP adapter for the remote game-panel provisioning backend.

Implements the :class:`ProvisioningBackend` port with a synchronous
``httpx`` client. Every call carries the bearer API key; the key itself is
held as a ``SecretStr`` and never appears in logs. Calls are not retried,
since mutation endpoints are not guaranteed to be idempotent.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import SecretStr

from domain.exceptions import BackendError, BackendUnavailableError, MalformedResponseError
from domain.models.pricing import PricingSchedule
from domain.models.server import AccountState, MutationKind, MutationRequest

from .payloads import mutation_body, parse_account, parse_pricing

logger = logging.getLogger(__name__)

# ======================================================================
# Endpoint table
# ======================================================================

ACCOUNT_PATH = "/userinfo"
PRICING_PATH = "/price"

# Status reported for ``{"success": false}`` bodies delivered with a 2xx code.
ENVELOPE_FAILURE_STATUS = 400

MUTATION_ROUTES: dict[MutationKind, tuple[str, str]] = {
    MutationKind.CREATE: ("POST", "/servers/create"),
    MutationKind.MODIFY: ("PATCH", "/servers/modify"),
    MutationKind.RENEW: ("POST", "/servers/renew"),
    MutationKind.DELETE: ("DELETE", "/servers/delete"),
}


# ======================================================================
# Backend adapter
# ======================================================================


class HttpProvisioningBackend:
    """Talks to the panel backend over HTTP.

    Parameters
    ----------
    base_url:
        Root URL of the panel backend.
    api_key:
        Bearer credential sent on every request.
    timeout:
        Optional timeout in seconds; ``None`` keeps the httpx default.
    transport:
        Optional custom transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        base_url: str,
        api_key: SecretStr,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {"base_url": base_url.rstrip("/")}
        if timeout is not None:
            client_kwargs["timeout"] = httpx.Timeout(timeout)
        if transport is not None:
            client_kwargs["transport"] = transport
        self._api_key = api_key
        self._client = httpx.Client(**client_kwargs)

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Port implementation
    # ------------------------------------------------------------------

    def fetch_account_state(self, account_id: str) -> AccountState:
        payload = self._request("GET", ACCOUNT_PATH, params={"id": account_id})
        return parse_account(account_id, payload)

    def fetch_pricing_schedule(self) -> PricingSchedule:
        pricing = parse_pricing(self._request("GET", PRICING_PATH))
        missing = pricing.missing_dimensions()
        if missing:
            logger.warning(
                "Pricing schedule has no unit price for %s; pricing them at 0",
                ", ".join(d.value for d in missing),
            )
        return pricing

    def submit_mutation(self, request: MutationRequest) -> Any:
        method, path = MUTATION_ROUTES[request.kind]
        return self._request(method, path, json=mutation_body(request))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key.get_secret_value()}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        logger.debug("Backend request %s %s", method, path)
        try:
            response = self._client.request(
                method, path, params=params, json=json, headers=self._headers()
            )
        except httpx.TransportError as exc:
            logger.error("Backend unreachable on %s %s: %s", method, path, exc.__class__.__name__)
            raise BackendUnavailableError(reason=exc.__class__.__name__) from exc

        if response.is_success:
            try:
                payload = response.json()
            except ValueError as exc:
                logger.error("Backend sent non-JSON body for %s %s", method, path)
                raise MalformedResponseError(path, "response body is not JSON") from exc
            if isinstance(payload, dict) and payload.get("success") is False:
                # Refusal wrapped in a 2xx envelope; surfaced as a client error.
                logger.warning(
                    "Backend refused %s %s inside a %s envelope",
                    method,
                    path,
                    response.status_code,
                )
                raise BackendError(status_code=ENVELOPE_FAILURE_STATUS, payload=payload)
            return payload

        payload = _error_payload(response)
        logger.warning(
            "Backend rejected %s %s with status %s", method, path, response.status_code
        )
        raise BackendError(status_code=response.status_code, payload=payload)


def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None
