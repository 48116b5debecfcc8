"""
Tests for the calculation API endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from proforma.main import app


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def sample_payload(client):
    """Sample assumptions as JSON."""
    response = client.get("/api/calculate/sample")
    assert response.status_code == 200
    return response.json()


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestSampleEndpoints:
    def test_sample(self, sample_payload):
        assert sample_payload["purchase_price"] == 2_000_000
        assert sample_payload["financing_type"] == "ltv"
        assert len(sample_payload["rental_income"]) == 10

    def test_named_scenario(self, client):
        response = client.get("/api/calculate/sample", params={"scenario": "quickflip"})
        assert response.status_code == 200
        assert response.json()["hold_period_years"] == 2

    def test_unknown_scenario(self, client):
        response = client.get("/api/calculate/sample", params={"scenario": "nope"})
        assert response.status_code == 404

    def test_list_scenarios(self, client):
        response = client.get("/api/calculate/scenarios")
        assert response.status_code == 200
        ids = [s["id"] for s in response.json()]
        assert "standard" in ids
        assert "stress" in ids


class TestProFormaEndpoint:
    def test_calculate(self, client, sample_payload):
        response = client.post("/api/calculate/proforma", json=sample_payload)
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "ok"
        assert data["violations"] == []
        assert len(data["results"]["annual_cash_flows"]) == 10
        assert data["results"]["total_equity_invested"] == pytest.approx(708_000)
        assert data["returns"]["discount_rate"] == 0.10
        assert data["returns"]["irr"] == pytest.approx(data["results"]["irr"])

    def test_invalid_input(self, client):
        response = client.post(
            "/api/calculate/proforma",
            json={"purchase_price": 0, "hold_period_years": 5},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "invalid_input"
        assert "Purchase price must be greater than 0" in data["violations"]
        assert len(data["results"]["annual_cash_flows"]) == 5
        assert data["results"]["irr"] is None

    def test_bad_enum(self, client, sample_payload):
        sample_payload["financing_type"] = "seller-carry"
        response = client.post("/api/calculate/proforma", json=sample_payload)
        assert response.status_code == 422


class TestValidateEndpoint:
    def test_validate(self, client, sample_payload):
        sample_payload["land_percentage"] = 10
        response = client.post("/api/calculate/validate", json=sample_payload)
        assert response.status_code == 200

        data = response.json()
        assert data["valid"] is False
        assert data["violations"] == ["Land % and Improvements % must add up to 100%"]
        assert data["completion"]["cashflows_ready"] is True


class TestSensitivityEndpoint:
    def test_sensitivity(self, client, sample_payload):
        response = client.post("/api/calculate/sensitivity", json=sample_payload)
        assert response.status_code == 200

        data = response.json()
        assert [c["label"] for c in data["exit_cap_rate"]["cases"]] == [
            "-50 bps",
            "+50 bps",
        ]
        assert data["interest_rate"]["base"]["loan_amount"] == 1_400_000


class TestIRREndpoint:
    def test_irr(self, client):
        response = client.post(
            "/api/calculate/irr", json={"cash_flows": [-100, 20, 20, 20, 20, 120]}
        )
        assert response.status_code == 200

        data = response.json()
        assert data["irr"] == pytest.approx(0.20, abs=1e-4)
        assert data["multiple"] == pytest.approx(2.0)
        assert data["profit"] == pytest.approx(100)

    def test_irr_no_investment(self, client):
        response = client.post("/api/calculate/irr", json={"cash_flows": [10, 20]})
        assert response.status_code == 400


class TestAmortizationEndpoint:
    def test_amortization(self, client):
        response = client.post(
            "/api/calculate/amortization",
            json={
                "principal": 1_400_000,
                "annual_rate": 0.065,
                "amortization_years": 30,
                "total_periods": 120,
            },
        )
        assert response.status_code == 200

        data = response.json()
        assert len(data["schedule"]) == 120
        assert abs(data["payment"] - 8848.95) < 0.01
        assert data["total_interest"] > data["total_principal"]

    def test_amortization_requires_term(self, client):
        response = client.post(
            "/api/calculate/amortization",
            json={"principal": 100_000, "annual_rate": 0.05, "amortization_years": 0},
        )
        assert response.status_code == 400
