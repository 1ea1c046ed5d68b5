"""
Tests for the calculation, scenario and report API endpoints.
"""

import inspect

import anyio
import httpx
import pytest
from fastapi.testclient import TestClient

from valuation.api.calculations import run_monte_carlo_endpoint
from valuation.api.scenarios import calculate_sensitivity_endpoint
from valuation.main import app


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCalculationsAPI:
    """Test calculation endpoints."""

    def test_metrics(self, client, params_payload):
        """Metrics endpoint returns the engine record plus a risk label."""
        response = client.post("/api/calculate/metrics", json=params_payload)
        assert response.status_code == 200
        data = response.json()
        assert len(data["free_cash_flows"]) == 6
        assert data["present_values"][0] == data["free_cash_flows"][0]
        assert data["npv"] > 0
        assert data["irr_converged"] is True
        assert data["risk_level"] == "Medium"

    def test_metrics_short_revenue_list(self, client, params_payload):
        """Missing years are treated as zero revenue and cost."""
        params_payload["annual_revenues"] = [60000]
        params_payload["operating_costs"] = [20000]
        response = client.post("/api/calculate/metrics", json=params_payload)
        assert response.status_code == 200
        assert response.json()["free_cash_flows"][2] == 0

    def test_metrics_rate_out_of_domain(self, client, params_payload):
        """Engine validation errors map to 400 with the offending field."""
        params_payload["discount_rate"] = 1.5
        response = client.post("/api/calculate/metrics", json=params_payload)
        assert response.status_code == 400
        assert response.json()["field"] == "discount_rate"

    def test_metrics_negative_investment(self, client, params_payload):
        params_payload["initial_investment"] = -1
        response = client.post("/api/calculate/metrics", json=params_payload)
        assert response.status_code == 400

    def test_metrics_timeline_bounds(self, client, params_payload):
        """Timeline outside 1..max is rejected by request validation."""
        params_payload["project_timeline"] = 0
        response = client.post("/api/calculate/metrics", json=params_payload)
        assert response.status_code == 422

    def test_irr(self, client):
        """IRR endpoint with plain cash flows."""
        response = client.post("/api/calculate/irr", json={"cash_flows": [-100, 110]})
        assert response.status_code == 200
        data = response.json()
        assert abs(data["irr"] - 0.10) < 0.001
        assert data["converged"] is True
        assert data["payback_period"] == pytest.approx(100 / 110)

    def test_irr_single_flow(self, client):
        response = client.post("/api/calculate/irr", json={"cash_flows": [-100]})
        assert response.status_code == 400

    def test_monte_carlo(self, client, params_payload):
        """Seeded simulation through the API is reproducible."""
        body = {"parameters": params_payload, "iterations": 100, "seed": 5}
        first = client.post("/api/calculate/monte-carlo", json=body)
        second = client.post("/api/calculate/monte-carlo", json=body)
        assert first.status_code == 200
        data = first.json()
        assert len(data["npv_distribution"]) == 100
        assert data["seed"] == 5
        assert data == second.json()

    def test_monte_carlo_iteration_limit(self, client, params_payload):
        body = {"parameters": params_payload, "iterations": 1000000}
        response = client.post("/api/calculate/monte-carlo", json=body)
        assert response.status_code == 422


class TestScenariosAPI:
    """Test scenario endpoints."""

    def test_scenarios(self, client, params_payload):
        response = client.post("/api/scenarios/", json=params_payload)
        assert response.status_code == 200
        data = response.json()
        assert data["best_case"]["npv"] >= data["base_case"]["npv"] >= data["worst_case"]["npv"]

    def test_sensitivity(self, client, params_payload):
        response = client.post(
            "/api/scenarios/sensitivity", json={"parameters": params_payload, "swing": 0.1}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["swing"] == 0.1
        assert len(data["variables"]) == 5

    def test_sensitivity_default_swing(self, client, params_payload):
        response = client.post("/api/scenarios/sensitivity", json={"parameters": params_payload})
        assert response.status_code == 200
        assert response.json()["swing"] == 0.2


class TestReportsAPI:
    """Test report endpoints."""

    def test_reports(self, client, params_payload):
        response = client.post("/api/reports/", json=params_payload)
        assert response.status_code == 200
        data = response.json()
        assert len(data["income_statements"]) == 5
        assert data["summary"]["total_assets"] == data["balance_sheets"][-1]["total_assets"]
        assert data["summary"]["total_revenue"] == pytest.approx(300000)


class TestHeavyRoutesOffEventLoop:
    """Simulation and sweep routes run in the threadpool."""

    def test_heavy_routes_are_sync(self):
        """Plain def endpoints are dispatched to worker threads by FastAPI."""
        assert not inspect.iscoroutinefunction(run_monte_carlo_endpoint)
        assert not inspect.iscoroutinefunction(calculate_sensitivity_endpoint)

    @pytest.mark.slow
    @pytest.mark.anyio
    async def test_health_responsive_during_simulation(self, params_payload):
        """A long simulation does not hold up the health check."""
        payload = dict(params_payload)
        payload["project_timeline"] = 20
        payload["annual_revenues"] = [60000] * 20
        payload["operating_costs"] = [20000] * 20
        body = {"parameters": payload, "iterations": 5000, "seed": 1}
        finished = []

        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:

            async def simulate():
                response = await ac.post("/api/calculate/monte-carlo", json=body, timeout=None)
                assert response.status_code == 200
                finished.append("simulation")

            async def health():
                await anyio.sleep(0.05)
                response = await ac.get("/health")
                assert response.status_code == 200
                finished.append("health")

            async with anyio.create_task_group() as tg:
                tg.start_soon(simulate)
                tg.start_soon(health)

        assert finished == ["health", "simulation"]
