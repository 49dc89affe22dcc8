"""Schema validation contract tests: request bodies are rejected with a 400 envelope."""

from __future__ import annotations

import pytest

ACCOUNT_HEADERS = {"X-Account-ID": "user-1"}

BUNDLE = {"cpu": 10, "ram": 256, "disk": 512, "databases": 1, "allocations": 1, "backups": 1}


@pytest.mark.contract
class TestResourceFieldValidation:

    def test_missing_dimension(self, client, backend):
        body = {k: v for k, v in BUNDLE.items() if k != "disk"}
        resp = client.post("/api/v1/servers/quote", json=body)
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["title"] == "Validation Error"
        assert any("disk" in e["field"] for e in error["details"])
        assert backend.calls["fetch_pricing_schedule"] == 0

    @pytest.mark.parametrize("value", ["10", 10.5, True, None])
    def test_non_integer_quantities(self, client, value):
        resp = client.post("/api/v1/servers/quote", json={**BUNDLE, "cpu": value})
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_negative_quantity(self, client):
        resp = client.post("/api/v1/servers/quote", json={**BUNDLE, "backups": -1})
        assert resp.status_code == 400
        assert resp.json()["error"]["message"].startswith("body -> backups")


@pytest.mark.contract
class TestCreateValidation:

    def test_name_required(self, client, backend):
        resp = client.post("/api/v1/servers", json=BUNDLE, headers=ACCOUNT_HEADERS)
        assert resp.status_code == 400
        assert any("name" in e["field"] for e in resp.json()["error"]["details"])
        assert backend.calls["submit_mutation"] == 0

    def test_empty_name_rejected(self, client):
        resp = client.post(
            "/api/v1/servers", json={**BUNDLE, "name": ""}, headers=ACCOUNT_HEADERS
        )
        assert resp.status_code == 400


@pytest.mark.contract
class TestRequestModels:

    def test_modify_aliases(self):
        from presentation.api.v1.schemas import ModifyServerRequest

        request = ModifyServerRequest.model_validate(
            {**BUNDLE, "serverType": 5, "nestId": "1", "autoRenew": False}
        )
        options = request.to_options()
        assert options.egg == "5"
        assert options.nest == "1"
        assert options.auto_renew is False
        assert request.to_bundle().cpu == 10

    def test_create_auto_renew_defaults_on(self):
        from presentation.api.v1.schemas import CreateServerRequest

        request = CreateServerRequest.model_validate({**BUNDLE, "name": "s"})
        assert request.to_options().auto_renew is True
        assert request.to_options().location_id is None
