from __future__ import annotations

from decimal import Decimal

from domain.exceptions import InsufficientBalanceError


class BalanceGate:
    """Optimistic affordability check against a balance read from the backend.

    The backend remains the authority: a request that passes here may still
    be rejected there, e.g. when two requests race on the same account.
    """

    def can_afford(self, balance: Decimal, cost: Decimal) -> bool:
        return balance >= cost

    def remaining_after(self, balance: Decimal, cost: Decimal) -> Decimal:
        return balance - cost

    def require(self, balance: Decimal, cost: Decimal) -> None:
        if not self.can_afford(balance, cost):
            raise InsufficientBalanceError(required=cost, available=balance)
