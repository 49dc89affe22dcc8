from __future__ import annotations

from datetime import datetime, timedelta

from domain.exceptions import LifecycleError
from domain.models.server import MutationKind, ServerInstance, ServerStatus

DEFAULT_RENEWAL_WINDOW_DAYS = 30

# Statuses from which each mutation may be requested. Renewal has no
# entry: it is gated by the expiry window only.
PERMITTED_STATUSES: dict[MutationKind, frozenset[ServerStatus]] = {
    MutationKind.MODIFY: frozenset({ServerStatus.ACTIVE}),
    MutationKind.DELETE: frozenset({ServerStatus.ACTIVE, ServerStatus.SUSPENDED}),
}

_REJECTION_MESSAGES: dict[tuple[MutationKind, ServerStatus], str] = {
    (MutationKind.MODIFY, ServerStatus.SUSPENDED): "Cannot modify suspended server",
    (MutationKind.MODIFY, ServerStatus.DELETED): "Cannot modify deleted server",
    (MutationKind.DELETE, ServerStatus.DELETED): "Server has already been deleted",
}


def days_until_expiry(expires_at: datetime, now: datetime) -> int:
    """Whole days left before *expires_at*, floored (negative once expired)."""
    return (expires_at - now) // timedelta(days=1)


class ServerLifecycleGuard:

    def __init__(self, renewal_window_days: int = DEFAULT_RENEWAL_WINDOW_DAYS) -> None:
        self._window = renewal_window_days

    @property
    def renewal_window_days(self) -> int:
        return self._window

    def is_permitted(self, kind: MutationKind, status: ServerStatus) -> bool:
        allowed = PERMITTED_STATUSES.get(kind)
        return allowed is None or status in allowed

    def ensure_status(self, kind: MutationKind, server: ServerInstance) -> None:
        if self.is_permitted(kind, server.status):
            return
        message = _REJECTION_MESSAGES.get(
            (kind, server.status),
            f"Cannot {kind.value.lower()} server in status {server.status.value}",
        )
        raise LifecycleError(message, server_id=server.id, status=server.status.value)

    def can_renew(self, server: ServerInstance, now: datetime) -> bool:
        return days_until_expiry(server.expires_at, now) < self._window

    def ensure_renewable(self, server: ServerInstance, now: datetime) -> int:
        """Raise :class:`LifecycleError` outside the renewal window; return days left."""
        days_left = days_until_expiry(server.expires_at, now)
        if days_left >= self._window:
            raise LifecycleError(
                f"Server can only be renewed within {self._window} days of expiration.",
                server_id=server.id,
                status=server.status.value,
            )
        return days_left
