"""Tests for src/domain/services/server_lifecycle.py"""

from dataclasses import replace
from datetime import timedelta

import pytest

from domain.exceptions import LifecycleError
from domain.models.server import MutationKind, ServerStatus
from domain.services.server_lifecycle import ServerLifecycleGuard, days_until_expiry


class TestDaysUntilExpiry:
    @pytest.mark.parametrize(
        "delta, expected",
        [
            (timedelta(days=30), 30),
            (timedelta(days=29, hours=23, minutes=59), 29),
            (timedelta(hours=1), 0),
            (timedelta(0), 0),
            (timedelta(hours=-1), -1),
        ],
    )
    def test_floors_whole_days(self, now, delta, expected):
        assert days_until_expiry(now + delta, now) == expected


class TestStatusRules:
    @pytest.mark.parametrize(
        "kind, status, expected",
        [
            (MutationKind.MODIFY, ServerStatus.ACTIVE, True),
            (MutationKind.MODIFY, ServerStatus.SUSPENDED, False),
            (MutationKind.MODIFY, ServerStatus.DELETED, False),
            (MutationKind.DELETE, ServerStatus.ACTIVE, True),
            (MutationKind.DELETE, ServerStatus.SUSPENDED, True),
            (MutationKind.DELETE, ServerStatus.DELETED, False),
            (MutationKind.RENEW, ServerStatus.SUSPENDED, True),
            (MutationKind.CREATE, ServerStatus.ACTIVE, True),
        ],
    )
    def test_is_permitted(self, lifecycle_guard, kind, status, expected):
        assert lifecycle_guard.is_permitted(kind, status) is expected

    def test_modify_suspended_message(self, lifecycle_guard, active_server):
        server = replace(active_server, status=ServerStatus.SUSPENDED)
        with pytest.raises(LifecycleError) as exc_info:
            lifecycle_guard.ensure_status(MutationKind.MODIFY, server)
        assert exc_info.value.detail == "Cannot modify suspended server"
        assert exc_info.value.server_id == server.id
        assert exc_info.value.status == "Suspended"

    def test_delete_deleted_message(self, lifecycle_guard, active_server):
        server = replace(active_server, status=ServerStatus.DELETED)
        with pytest.raises(LifecycleError, match="already been deleted"):
            lifecycle_guard.ensure_status(MutationKind.DELETE, server)

    def test_active_passes(self, lifecycle_guard, active_server):
        lifecycle_guard.ensure_status(MutationKind.MODIFY, active_server)


class TestRenewalWindow:
    def test_thirty_days_out_is_rejected(self, lifecycle_guard, active_server, now):
        server = replace(active_server, expires_at=now + timedelta(days=30))
        assert lifecycle_guard.can_renew(server, now) is False
        with pytest.raises(LifecycleError) as exc_info:
            lifecycle_guard.ensure_renewable(server, now)
        assert exc_info.value.detail == "Server can only be renewed within 30 days of expiration."

    def test_twenty_nine_days_out_is_permitted(self, lifecycle_guard, active_server, now):
        server = replace(active_server, expires_at=now + timedelta(days=29))
        assert lifecycle_guard.can_renew(server, now) is True
        assert lifecycle_guard.ensure_renewable(server, now) == 29

    def test_expired_server_is_renewable(self, lifecycle_guard, active_server, now):
        server = replace(active_server, expires_at=now - timedelta(days=3))
        assert lifecycle_guard.ensure_renewable(server, now) == -3

    def test_window_ignores_status(self, lifecycle_guard, active_server, now):
        server = replace(active_server, status=ServerStatus.SUSPENDED)
        assert lifecycle_guard.can_renew(server, now) is True

    def test_custom_window(self, active_server, now):
        guard = ServerLifecycleGuard(renewal_window_days=7)
        assert guard.renewal_window_days == 7
        server = replace(active_server, expires_at=now + timedelta(days=7))
        with pytest.raises(LifecycleError, match="within 7 days"):
            guard.ensure_renewable(server, now)
