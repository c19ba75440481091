"""
API tests for the commission endpoints
"""
import inspect
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from agentos.api import commissions
from agentos.core.dependencies import get_commission_service
from agentos.main import app

from factories import AGENT_ID, build_commission, build_order, customer, item


@pytest.fixture
def client(service):
    app.dependency_overrides[get_commission_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def order_payload(**overrides):
    payload = {
        "id": "1001",
        "name": "#1001",
        "total": 88,
        "lineItems": [{"title": "Kurung Batik Alana", "quantity": 1, "price": 88}],
        "customer": {"id": "C-1", "fullName": "Siti Aminah", "ordersCount": 1},
        "createdAt": "2025-08-20T10:00:00Z",
    }
    payload.update(overrides)
    return payload


class TestHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["ok"] is True

    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["firestore"] is False


class TestCalculate:

    def test_calculate(self, client, store, agent):
        response = client.post("/api/commission/calculate", json={"order": order_payload(), "agentId": AGENT_ID})

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["message"] == "Commission calculated: RM 56.60"
        assert body["data"]["totalCommission"] == 56.6
        assert body["data"]["commissionBreakdown"]["customerBonus"] == 50
        assert body["data"]["payoutDate"].startswith("2025-09-01")
        assert "1001_AGT-001" in store.commissions

    def test_missing_agent(self, client):
        response = client.post("/api/commission/calculate", json={"order": order_payload()})

        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": "Order data and agent ID are required"}

    def test_missing_order(self, client):
        response = client.post("/api/commission/calculate", json={"agentId": AGENT_ID})
        assert response.status_code == 400

    def test_malformed_order(self, client):
        payload = order_payload()
        del payload["total"]

        response = client.post("/api/commission/calculate", json={"order": payload, "agentId": AGENT_ID})

        assert response.status_code == 400
        assert response.json()["ok"] is False

    def test_store_outage_does_not_fail_request(self, client, store, monkeypatch):
        def unavailable(*args, **kwargs):
            raise ConnectionError("Firestore unavailable")

        monkeypatch.setattr(store, "get_agent", unavailable)
        monkeypatch.setattr(store, "save_commission", unavailable)

        response = client.post("/api/commission/calculate", json={"order": order_payload(), "agentId": AGENT_ID})

        assert response.status_code == 200
        assert response.json()["data"]["totalCommission"] == 56.6


class TestCalculateExistingOrder:

    def test_existing_order(self, client, store, agent):
        store.add_order(build_order(line_items=[item("Kurung Batik Alana", 88.0)], customer=customer(1)))

        response = client.get(f"/api/commission/calculate/1001/{AGENT_ID}")

        assert response.status_code == 200
        assert response.json()["data"]["totalCommission"] == 56.6

    def test_unknown_order(self, client):
        response = client.get(f"/api/commission/calculate/missing/{AGENT_ID}")

        assert response.status_code == 404
        assert response.json()["error"] == "Order not found"

    def test_already_calculated(self, client, store):
        store.add_order(build_order(commissionCalculated=True))

        response = client.get(f"/api/commission/calculate/1001/{AGENT_ID}")

        assert response.status_code == 409


class TestAgentCommissions:

    @pytest.fixture
    def history(self, store):
        store.save_commission(build_commission("A", 100.0, total_commission=10.0, calculated_at=datetime(2025, 7, 3, tzinfo=timezone.utc)))
        store.save_commission(build_commission("B", 200.0, total_commission=25.0, calculated_at=datetime(2025, 8, 3, tzinfo=timezone.utc)))
        store.save_commission(build_commission("C", 300.0, total_commission=40.0, calculated_at=datetime(2025, 8, 9, tzinfo=timezone.utc)))

    def test_history(self, client, history):
        body = client.get(f"/api/commission/agent/{AGENT_ID}").json()

        assert [c["orderId"] for c in body["data"]["commissions"]] == ["C", "B", "A"]
        assert body["data"]["summary"]["totalCommission"] == 75.0
        assert body["data"]["summary"]["averageCommission"] == 25.0

    def test_history_period(self, client, history):
        body = client.get(
            f"/api/commission/agent/{AGENT_ID}",
            params={"startDate": "2025-08-01T00:00:00Z", "endDate": "2025-08-31T23:59:59Z"},
        ).json()

        assert body["data"]["summary"]["totalOrders"] == 2
        assert body["data"]["summary"]["period"]["startDate"].startswith("2025-08-01")

    def test_history_limit(self, client, history):
        body = client.get(f"/api/commission/agent/{AGENT_ID}", params={"limit": 1}).json()
        assert len(body["data"]["commissions"]) == 1

    def test_summary(self, client, history):
        data = client.get(f"/api/commission/agent/{AGENT_ID}/summary").json()["data"]

        assert data["totals"]["totalOrders"] == 3
        assert data["status"]["pending"]["amount"] == 75.0
        assert data["monthlyBreakdown"]["2025-08"]["orderCount"] == 2
        assert data["monthlyBreakdown"]["2025-08"]["averageCommission"] == 32.5


class TestSimulate:

    def test_simulate_sample_orders(self, client, store):
        response = client.post("/api/commission/simulate", json={"agentId": "AGT-777"})

        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "Simulated 2 commission calculations"
        totals = [c["totalCommission"] for c in body["data"]["commissions"]]
        assert totals == [5.76, 7.13]
        assert body["data"]["summary"]["totalCommission"] == 12.89
        assert store.commissions == {}

    def test_simulate_without_body_uses_default_agent(self, client):
        body = client.post("/api/commission/simulate").json()
        assert {c["agentId"] for c in body["data"]["commissions"]} == {"AGT-001"}

    def test_simulate_labels_categories(self, client):
        body = client.post("/api/commission/simulate").json()
        categories = [c["productBonusItems"][0]["category"] for c in body["data"]["commissions"]]
        assert categories == ["Kurung Batik", "Baju Melayu"]


def test_rates(client):
    data = client.get("/api/commission/rates").json()["data"]

    assert data["defaultRate"] == 0.05
    assert data["productBonuses"]["Kurung Batik"] == 0.025
    assert data["volumeTiers"][0] == {"minAmount": 10000, "bonusRate": 0.02, "description": "RM10k+ = 2% bonus"}


def test_line_item_with_null_fields(client, agent):
    line_items = [
        {"title": None, "quantity": 1, "price": 88},
        {"title": "Kurung Batik Alana", "quantity": None, "price": 88},
    ]
    response = client.post(
        "/api/commission/calculate",
        json={"order": order_payload(lineItems=line_items), "agentId": AGENT_ID},
    )

    assert response.status_code == 200
    assert response.json()["data"]["commissionBreakdown"]["productBonus"] == 0


def test_routes_run_in_threadpool():
    # Sync handlers run in the threadpool
    endpoints = [route.endpoint for route in commissions.router.routes]
    assert endpoints
    assert not any(inspect.iscoroutinefunction(endpoint) for endpoint in endpoints)
