"""
HTTP tests for the FastAPI routes.
"""

import httpx
import pytest
import pytest_asyncio

from schoolpay.api import deps
from schoolpay.api.deps import get_payment_service, get_transaction_service
from schoolpay.main import app
from schoolpay.services.payment_service import PaymentService
from schoolpay.services.transaction_service import TransactionService

from tests.conftest import make_webhook

API_HEADERS = {"X-API-Key": "dashboard-key"}
ADMIN_HEADERS = {"X-Admin-Key": "admin-key"}


@pytest_asyncio.fixture
async def client(db, settings, gateway, monkeypatch):
    """ASGI client wired to the test session and gateway stub."""
    monkeypatch.setattr(deps.settings, "api_key", "dashboard-key")
    monkeypatch.setattr(deps.settings, "admin_api_key", "admin-key")
    
    app.dependency_overrides[get_payment_service] = lambda: PaymentService(
        db, settings=settings, gateway_transport=gateway.transport
    )
    app.dependency_overrides[get_transaction_service] = lambda: TransactionService(db)
    
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_create_then_webhook_then_status(client, payment_request):
    """Create, settle via webhook, then read the status back."""
    created = await client.post("/create-payment", json=payment_request, headers=API_HEADERS)
    assert created.status_code == 200
    body = created.json()
    assert body["payment_url"] == "https://pay.example/abc"
    assert body["status"] == "initiated"
    
    ack = await client.post("/webhook", json=make_webhook(body["order_id"]))
    assert ack.status_code == 200
    assert ack.json() == {"message": "Webhook processed successfully"}
    
    status = await client.get(f"/transaction-status/{body['custom_order_id']}", headers=API_HEADERS)
    assert status.status_code == 200
    assert status.json()["status"] == "success"
    assert status.json()["collect_id"] == body["order_id"]


@pytest.mark.asyncio
async def test_create_requires_api_key(client, payment_request, gateway):
    response = await client.post("/create-payment", json=payment_request)
    
    assert response.status_code == 401
    assert gateway.requests == []


@pytest.mark.asyncio
async def test_create_validation_error(client, payment_request):
    payment_request["student_info"]["email"] = "nope"
    
    response = await client.post("/create-payment", json=payment_request, headers=API_HEADERS)
    
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_configuration_error(client, payment_request, settings, monkeypatch):
    monkeypatch.setattr(settings, "gateway_pg_secret", "")
    
    response = await client.post("/create-payment", json=payment_request, headers=API_HEADERS)
    
    assert response.status_code == 500
    assert response.json()["error"] == "ConfigurationError"


@pytest.mark.asyncio
async def test_create_gateway_error(client, payment_request, gateway):
    gateway.status_code = 503
    
    response = await client.post("/create-payment", json=payment_request, headers=API_HEADERS)
    
    assert response.status_code == 502
    assert response.json()["error"] == "GatewayError"


@pytest.mark.asyncio
async def test_webhook_unknown_order(client):
    response = await client.post(
        "/webhook",
        json=make_webhook("9b2f7a3e-8c1d-4e5f-a6b7-c8d9e0f1a2b3"),
    )
    
    assert response.status_code == 404
    assert response.json()["message"] == "Order not found"


@pytest.mark.asyncio
async def test_webhook_invalid_json_is_logged(client):
    response = await client.post(
        "/webhook",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )
    
    assert response.status_code == 422
    assert response.json()["error"] == "ValidationError"


@pytest.mark.asyncio
async def test_transaction_status_unknown_is_null(client):
    response = await client.get("/transaction-status/ORD_missing", headers=API_HEADERS)
    
    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_transactions_listing(client, payment_request):
    await client.post("/create-payment", json=payment_request, headers=API_HEADERS)
    payment_request["school_id"] = "S2"
    await client.post("/create-payment", json=payment_request, headers=API_HEADERS)
    
    everything = await client.get("/transactions", params={"limit": 1}, headers=API_HEADERS)
    assert everything.status_code == 200
    assert everything.json()["total"] == 2
    assert everything.json()["total_pages"] == 2
    
    school = await client.get("/transactions/school/S2", headers=API_HEADERS)
    assert school.json()["total"] == 1
    assert school.json()["transactions"][0]["school_id"] == "S2"
    
    bad_sort = await client.get("/transactions", params={"sort": "password"}, headers=API_HEADERS)
    assert bad_sort.status_code == 422


@pytest.mark.asyncio
async def test_orphaned_orders_endpoint(client, payment_request, gateway):
    gateway.status_code = 500
    await client.post("/create-payment", json=payment_request, headers=API_HEADERS)
    
    denied = await client.get("/admin/orphaned-orders", headers=API_HEADERS)
    assert denied.status_code == 401
    
    response = await client.get("/admin/orphaned-orders", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.json()["count"] == 1
