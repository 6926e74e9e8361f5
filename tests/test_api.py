from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import shopledger.models  # noqa: F401
from shopledger.core.database import Base
from shopledger.core.dependencies import get_db
from shopledger.main import create_app
from shopledger.storage import MemoryStore


def _make_client() -> TestClient:
    return TestClient(create_app(store=MemoryStore()))


def _make_sql_client() -> TestClient:
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app = create_app()
    app.state.store = None
    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def _seed_shop(client: TestClient) -> dict:
    supplier_resp = client.post("/api/v1/suppliers", json={"name": "Fresh Farms", "opening_balance": 500})
    assert supplier_resp.status_code == 201
    supplier_id = supplier_resp.json()["data"]["id"]

    stock_resp = client.post(
        "/api/v1/inventory/stock",
        json={"supplier_id": supplier_id, "type": "chicken", "quantity": 50, "price": 180},
    )
    assert stock_resp.status_code == 201

    customer_resp = client.post("/api/v1/customers", json={"name": "Hotel Annapurna", "category": "wholesale"})
    assert customer_resp.status_code == 201
    customer_id = customer_resp.json()["data"]["id"]
    return {"supplier_id": supplier_id, "customer_id": customer_id}


def _order_then_pay_flow(client: TestClient) -> None:
    ids = _seed_shop(client)
    customer_id = ids["customer_id"]

    first = client.post("/api/v1/orders", json={
        "customer_id": customer_id,
        "items": [{"type": "chicken", "quantity": 3, "rate": 200}],
        "created_at": "2026-01-01T09:00:00Z",
    })
    assert first.status_code == 201
    second = client.post("/api/v1/orders", json={
        "customer_id": customer_id,
        "items": [{"type": "chicken", "quantity": 2, "rate": 200}],
        "created_at": "2026-01-01T10:00:00Z",
    })
    assert second.status_code == 201

    pending = client.get(f"/api/v1/customers/{customer_id}/pending").json()["data"]
    assert Decimal(pending["pending_amount"]) == Decimal("1000")

    payment = client.post(f"/api/v1/customers/{customer_id}/payments", json={"amount": 700})
    assert payment.status_code == 200
    result = payment.json()["data"]
    assert Decimal(result["applied_amount"]) == Decimal("700")
    assert Decimal(result["remaining_credit"]) == Decimal("0")
    assert Decimal(result["pending_amount"]) == Decimal("300")
    assert result["updated_order_ids"] == [first.json()["data"]["id"], second.json()["data"]["id"]]

    order = client.get(f"/api/v1/orders/{second.json()['data']['id']}").json()["data"]
    assert order["payment_status"] == "partially_paid"

    inventory = client.get("/api/v1/inventory").json()["data"]
    assert Decimal(inventory[0]["quantity"]) == Decimal("45")

    supplier_pending = client.get(f"/api/v1/suppliers/{ids['supplier_id']}/pending").json()["data"]
    assert Decimal(supplier_pending["pending_amount"]) == Decimal("9500")


def test_order_and_payment_flow_memory():
    with _make_client() as client:
        _order_then_pay_flow(client)


def test_order_and_payment_flow_sql():
    with _make_sql_client() as client:
        _order_then_pay_flow(client)


def test_insufficient_stock_maps_to_conflict():
    with _make_client() as client:
        ids = _seed_shop(client)
        resp = client.post("/api/v1/orders", json={
            "customer_id": ids["customer_id"],
            "items": [{"type": "chicken", "quantity": 60, "rate": 200}],
        })

        assert resp.status_code == 409
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "InsufficientStock"
        assert body["errors"][0]["field"] == "items"
        assert client.get("/api/v1/orders").json()["data"] == []


def test_error_status_codes():
    with _make_client() as client:
        ids = _seed_shop(client)

        assert client.get("/api/v1/customers/CUS-MISSING0/pending").status_code == 404
        assert client.get("/api/v1/orders/ORD-MISSING0").status_code == 404

        bad_precision = client.post(f"/api/v1/customers/{ids['customer_id']}/payments", json={"amount": "10.001"})
        assert bad_precision.status_code == 400
        assert bad_precision.json()["error"] == "InvalidAmount"

        not_positive = client.post(f"/api/v1/customers/{ids['customer_id']}/payments", json={"amount": 0})
        assert not_positive.status_code == 422
        assert not_positive.json()["success"] is False


def test_cancel_order_restores_stock():
    with _make_client() as client:
        ids = _seed_shop(client)
        order = client.post("/api/v1/orders", json={
            "customer_id": ids["customer_id"],
            "items": [{"type": "chicken", "quantity": 10, "rate": 200}],
        }).json()["data"]

        resp = client.patch(f"/api/v1/orders/{order['id']}/status", json={"order_status": "cancelled"})
        assert resp.status_code == 200
        assert resp.json()["data"]["order_status"] == "cancelled"

        inventory = client.get("/api/v1/inventory").json()["data"]
        assert Decimal(inventory[0]["quantity"]) == Decimal("50")

        deleted = client.delete(f"/api/v1/orders/{order['id']}")
        assert deleted.status_code == 200
        assert client.get(f"/api/v1/orders/{order['id']}").status_code == 404


def test_admin_integrity_and_reports():
    with _make_client() as client:
        ids = _seed_shop(client)
        client.post("/api/v1/orders", json={
            "customer_id": ids["customer_id"],
            "items": [{"type": "chicken", "quantity": 48, "rate": 200}],
        })

        integrity = client.post(f"/api/v1/admin/integrity/customers/{ids['customer_id']}")
        assert integrity.status_code == 200
        assert integrity.json()["data"]["is_valid"] is True

        repair = client.post(f"/api/v1/admin/repair/customers/{ids['customer_id']}").json()["data"]
        assert repair["total_orders"] == 1
        assert repair["corrupted_orders"] == 0

        low_stock = client.get("/api/v1/inventory/low-stock").json()["data"]
        assert [(i["type"], i["alert_level"]) for i in low_stock] == [("chicken", "warning")]

        report = client.get("/api/v1/inventory/report").json()["data"]
        assert report["summary"]["low_stock_count"] == 1

        check = client.post("/api/v1/inventory/validate", json=[{"type": "chicken", "quantity": 5, "rate": 200}])
        assert check.status_code == 409

        transactions = client.get(f"/api/v1/suppliers/{ids['supplier_id']}/transactions").json()["data"]
        assert [t["type"] for t in transactions["transactions"]] == ["initial_debt", "purchase", "stock_adjustment"]
