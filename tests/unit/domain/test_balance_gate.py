"""Tests for src/domain/services/balance_gate.py"""

from decimal import Decimal

import pytest

from domain.exceptions import InsufficientBalanceError


class TestCanAfford:
    @pytest.mark.parametrize(
        "balance, cost, expected",
        [
            ("10.00", "9.99", True),
            ("10.00", "10.00", True),
            ("10.00", "10.01", False),
            ("0", "0", True),
        ],
    )
    def test_boundary_is_inclusive(self, balance_gate, balance, cost, expected):
        assert balance_gate.can_afford(Decimal(balance), Decimal(cost)) is expected


class TestRemainingAfter:
    def test_positive(self, balance_gate):
        assert balance_gate.remaining_after(Decimal("100.00"), Decimal("19.12")) == Decimal("80.88")

    def test_may_go_negative(self, balance_gate):
        assert balance_gate.remaining_after(Decimal("10.00"), Decimal("15.00")) == Decimal("-5.00")


class TestRequire:
    def test_passes_when_affordable(self, balance_gate):
        balance_gate.require(Decimal("15.00"), Decimal("15.00"))

    def test_raises_with_amounts(self, balance_gate):
        with pytest.raises(InsufficientBalanceError) as exc_info:
            balance_gate.require(Decimal("10"), Decimal("15.004"))
        err = exc_info.value
        assert err.required == Decimal("15.004")
        assert err.available == Decimal("10")
        assert err.detail == "Insufficient balance. Required: 15.00, Available: 10.00"
        assert err.status_code == 400
