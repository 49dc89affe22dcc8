"""
Account context resolution for the provisioning API.

The session layer in front of this service authenticates the caller and
forwards the account identity in the ``X-Account-ID`` header (plus the
optional display name and e-mail). This module turns those headers into an
:class:`AccountContext` on ``request.state`` and exposes a FastAPI
dependency that rejects unauthenticated calls with a 401.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from domain.exceptions import UnauthenticatedError

ACCOUNT_ID_HEADER = "X-Account-ID"
ACCOUNT_NAME_HEADER = "X-Account-Name"
ACCOUNT_EMAIL_HEADER = "X-Account-Email"


@dataclass(frozen=True, slots=True)
class AccountContext:
    """Caller identity resolved for the current request."""

    account_id: str
    name: str = ""
    email: str = ""


class AccountContextMiddleware(BaseHTTPMiddleware):
    """Attach an :class:`AccountContext` (or ``None``) to every request.

    The middleware never rejects a request itself; protected routes depend
    on :func:`get_current_account`, so public endpoints stay reachable.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.account_context = self._extract(request)
        return await call_next(request)

    @staticmethod
    def _extract(request: Request) -> AccountContext | None:
        account_id = (request.headers.get(ACCOUNT_ID_HEADER) or "").strip()
        if not account_id:
            return None
        return AccountContext(
            account_id=account_id,
            name=request.headers.get(ACCOUNT_NAME_HEADER, ""),
            email=request.headers.get(ACCOUNT_EMAIL_HEADER, ""),
        )


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------


def get_current_account(request: Request) -> AccountContext:
    """Return the caller's :class:`AccountContext`.

    Raises:
        UnauthenticatedError: If the request carries no account identity.
    """
    ctx: AccountContext | None = getattr(request.state, "account_context", None)
    if ctx is None:
        raise UnauthenticatedError()
    return ctx
