import inspect
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from src.api.app import app
from src.api.deps import get_scenario_repository
from src.api.routes import scenarios
from src.storage.scenarios import InMemoryScenarioRepository, SqlScenarioRepository

CANONICAL = {
    "initial_nav": "50",
    "initial_market_value": "10",
    "substance_discount_percent": "80",
    "ownership_share_percent": "10",
    "default_raise_amount": "5",
    "default_management_cost": "5",
    "default_growth_percent": "20",
    "initial_share_count": 441862,
}


@pytest.fixture
def client():
    repo = InMemoryScenarioRepository()
    app.dependency_overrides[get_scenario_repository] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


class TestProjectionRoute:
    def test_template_events(self, client):
        resp = client.post("/api/v1/projection", json={"params": CANONICAL})
        assert resp.status_code == 200
        body = resp.json()
        assert body["complete"] is True
        assert body["halted_year"] is None
        assert len(body["snapshots"]) == 22
        assert len(body["entrants"]) == 11

    def test_decimals_as_strings(self, client):
        body = client.post("/api/v1/projection", json={"params": CANONICAL}).json()
        first = body["snapshots"][0]
        assert isinstance(first["market_value"], str)
        assert Decimal(first["market_value"]) == Decimal("10")
        assert first["step"] == "before_financing"

    def test_explicit_events(self, client):
        params = {"initial_nav": "10", "initial_market_value": "10", "initial_share_count": 1000,
                  "default_raise_amount": "0", "default_management_cost": "0",
                  "default_growth_percent": "0"}
        events = [{}, {"growth_percent": "100"}] + [{} for _ in range(9)]
        body = client.post("/api/v1/projection", json={"params": params, "events": events}).json()
        assert body["irr"]["status"] == "converged"
        assert abs(Decimal(body["irr"]["rate"]) - Decimal("0.0718")) < Decimal("0.0001")
        assert Decimal(body["snapshots"][-1]["attributable_share_value"]) == Decimal("20")

    def test_halted_run(self, client):
        params = {"initial_nav": "10", "initial_market_value": "10", "initial_share_count": 1000,
                  "default_raise_amount": "0", "default_management_cost": "0",
                  "default_growth_percent": "0"}
        events = [{}, {"management_cost": "50", "raise_amount": "5"}, {}]
        resp = client.post("/api/v1/projection", json={"params": params, "events": events})
        assert resp.status_code == 200
        body = resp.json()
        assert body["complete"] is False
        assert body["halted_year"] == 1
        assert body["irr"]["status"] == "undefined"
        assert len(body["snapshots"]) == 3

    def test_every_violation_reported(self, client):
        params = dict(CANONICAL, substance_discount_percent="150", initial_nav="0")
        resp = client.post("/api/v1/projection", json={"params": params})
        assert resp.status_code == 422
        fields = {v["field"] for v in resp.json()["detail"]}
        assert fields == {"initial_nav", "substance_discount_percent"}

    def test_missing_required_field(self, client):
        resp = client.post("/api/v1/projection", json={"params": {"initial_nav": "10"}})
        assert resp.status_code == 422


class TestOneYearRoute:
    def test_canonical(self, client):
        resp = client.post("/api/v1/one-year", json=CANONICAL)
        assert resp.status_code == 200
        body = resp.json()
        assert Decimal(body["required_substance_value"]) == Decimal("225")
        # Fixed-point strings, not "2.25E+2"
        assert body["required_substance_value"] == "225"
        assert body["required_increase_amount"] == "175"
        assert Decimal(body["required_increase_percent"]) == Decimal("350")
        assert abs(Decimal(body["projected_one_year_value"]) - Decimal("0.8")) < Decimal("0.000001")

    def test_full_discount(self, client):
        body = client.post(
            "/api/v1/one-year", json=dict(CANONICAL, substance_discount_percent="100")
        ).json()
        assert body["required_substance_value"] is None

    def test_invalid(self, client):
        resp = client.post("/api/v1/one-year", json=dict(CANONICAL, ownership_share_percent="-1"))
        assert resp.status_code == 422
        assert resp.json()["detail"][0]["field"] == "ownership_share_percent"


class TestIRRRoute:
    def test_converged(self, client):
        body = client.post("/api/v1/irr", json={"cash_flows": [-100, 110]}).json()
        assert body["status"] == "converged"
        assert Decimal(body["rate"]) == Decimal("0.1")

    def test_total_loss(self, client):
        body = client.post("/api/v1/irr", json={"cash_flows": ["-10", "0"]}).json()
        assert body["status"] == "total_loss"
        assert Decimal(body["rate_percent"]) == Decimal("-100")

    def test_undefined(self, client):
        body = client.post("/api/v1/irr", json={"cash_flows": [5]}).json()
        assert body["status"] == "undefined"
        assert body["rate"] is None


class TestScenarioRoutes:
    def test_save_load_list_delete(self, client):
        events = [{"raise_amount": "5"}, {"growth_percent": "10"}]
        resp = client.put("/api/v1/scenarios/base", json={"params": CANONICAL, "events": events})
        assert resp.status_code == 200
        assert resp.json()["saved_at"] is not None

        loaded = client.get("/api/v1/scenarios/base").json()
        assert loaded["name"] == "base"
        assert Decimal(loaded["params"]["initial_nav"]) == Decimal("50")
        assert loaded["events"][1]["raise_amount"] is None
        assert Decimal(loaded["events"][1]["growth_percent"]) == Decimal("10")

        assert client.get("/api/v1/scenarios").json() == ["base"]
        assert client.delete("/api/v1/scenarios/base").status_code == 204
        assert client.get("/api/v1/scenarios").json() == []

    def test_missing(self, client):
        assert client.get("/api/v1/scenarios/nope").status_code == 404
        assert client.delete("/api/v1/scenarios/nope").status_code == 404


class TestSqlBackedScenarioRoutes:
    @pytest.fixture
    def sql_client(self, tmp_path):
        repo = SqlScenarioRepository(create_engine(f"sqlite:///{tmp_path / 'api.db'}"))
        app.dependency_overrides[get_scenario_repository] = lambda: repo
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_handlers_run_off_the_event_loop(self):
        for handler in (
            scenarios.list_scenarios,
            scenarios.load_scenario,
            scenarios.save_scenario,
            scenarios.delete_scenario,
        ):
            assert not inspect.iscoroutinefunction(handler)

    def test_round_trip(self, sql_client):
        params = dict(CANONICAL, initial_nav="1.5E+2")
        assert sql_client.put("/api/v1/scenarios/big", json={"params": params}).status_code == 200
        loaded = sql_client.get("/api/v1/scenarios/big").json()
        assert loaded["params"]["initial_nav"] == "150"
        assert sql_client.get("/api/v1/scenarios").json() == ["big"]
        assert sql_client.delete("/api/v1/scenarios/big").status_code == 204
        assert sql_client.get("/api/v1/scenarios/big").status_code == 404
