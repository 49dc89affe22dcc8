"""Tests for infrastructure.backend.payloads."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from domain.exceptions import MalformedResponseError
from domain.models.resources import ResourceBundle, ResourceDimension
from domain.models.server import MutationKind, MutationRequest, ProvisioningOptions
from infrastructure.backend.payloads import (
    mutation_body,
    parse_account,
    parse_bundle,
    parse_pricing,
    parse_server,
)


def _server(**overrides: object) -> dict[str, object]:
    entry: dict[str, object] = {
        "id": "7",
        "resources": {"cpu": 50, "ram": 512, "disk": 1024},
        "expiresAt": "2026-03-01T12:00:00",
        "status": "Suspended",
    }
    entry.update(overrides)
    return entry


class TestParsePricing:
    def test_unwraps_success_envelope(self) -> None:
        pricing = parse_pricing({"success": True, "data": {"base": "2.50", "cpu": 1}})
        assert pricing.base == Decimal("2.50")
        assert pricing.unit_price(ResourceDimension.CPU) == Decimal("1")

    def test_missing_base_is_zero(self) -> None:
        assert parse_pricing({"cpu": 1}).base == Decimal("0")

    @pytest.mark.parametrize("payload", [[], "price", {"cpu": "cheap"}, {"base": True}])
    def test_malformed(self, payload: object) -> None:
        with pytest.raises(MalformedResponseError):
            parse_pricing(payload)


class TestParseBundle:
    def test_optional_slots_default_to_zero(self) -> None:
        bundle = parse_bundle({"cpu": 5, "ram": 128, "disk": 128}, "op")
        assert bundle == ResourceBundle(cpu=5, ram=128, disk=128)

    def test_integral_floats_accepted(self) -> None:
        assert parse_bundle({"cpu": 5.0, "ram": 128, "disk": 128}, "op").cpu == 5

    @pytest.mark.parametrize(
        "payload",
        [
            {"ram": 128, "disk": 128},
            {"cpu": 5.5, "ram": 128, "disk": 128},
            {"cpu": -5, "ram": 128, "disk": 128},
            {"cpu": "5", "ram": 128, "disk": 128},
            None,
        ],
    )
    def test_malformed(self, payload: object) -> None:
        with pytest.raises(MalformedResponseError):
            parse_bundle(payload, "op")


class TestParseServer:
    def test_naive_timestamp_treated_as_utc(self) -> None:
        server = parse_server(_server())
        assert server.expires_at == datetime(2026, 3, 1, 12, tzinfo=timezone.utc)
        assert server.auto_renew is False
        assert server.name == ""

    @pytest.mark.parametrize(
        "overrides",
        [{"id": None}, {"status": "Frozen"}, {"expiresAt": 1700000000}, {"expiresAt": "soon"}],
    )
    def test_malformed(self, overrides: dict[str, object]) -> None:
        with pytest.raises(MalformedResponseError):
            parse_server(_server(**overrides))


class TestParseAccount:
    def test_parses(self) -> None:
        account = parse_account("u", {"coins": "12.30", "servers": [_server()]})
        assert account.balance == Decimal("12.30")
        assert account.instances[0].id == "7"

    @pytest.mark.parametrize(
        "payload",
        [
            {"coins": 1},
            {"coins": 1, "servers": {}},
            {"servers": []},
            {"coins": "NaN", "servers": []},
            {"coins": None, "servers": []},
        ],
    )
    def test_malformed(self, payload: object) -> None:
        with pytest.raises(MalformedResponseError):
            parse_account("u", payload)


class TestMutationBody:
    def test_create(self) -> None:
        request = MutationRequest(
            kind=MutationKind.CREATE,
            account_id="u",
            bundle=ResourceBundle(cpu=100, ram=2048, disk=4096),
            options=ProvisioningOptions(
                name="survival", egg="5", nest="1", location_id="2", auto_renew=True
            ),
        )
        body = mutation_body(request)
        assert "serverId" not in body
        assert body["name"] == "survival"
        assert body["location"] == "2"
        assert body["egg"] == "5"
        assert body["nest"] == "1"
        assert body["autoRenew"] is True
        assert body["ram"] == 2048

    def test_renew_sends_ids_only(self) -> None:
        request = MutationRequest(kind=MutationKind.RENEW, account_id="u", server_id="7")
        assert mutation_body(request) == {"id": "u", "serverId": "7"}
