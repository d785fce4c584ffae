"""
Pytest configuration and fixtures.
"""

import sys
import os
from typing import AsyncGenerator, Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Add package root to path
sys.path.append(os.getcwd())

from schoolpay.config import Settings
from schoolpay.database import Base
from schoolpay.services.payment_service import PaymentService
import schoolpay.models  # noqa: F401

# Use in-memory SQLite for tests
TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

GATEWAY_BASE_URL = "https://gateway.test"
DEFAULT_REDIRECT = "https://pay.example/abc"


class GatewayStub:
    """Records collect requests and answers with a canned response."""
    
    def __init__(self, status_code: int = 200, json_body: Optional[dict] = None):
        self.status_code = status_code
        self.json_body = json_body if json_body is not None else {
            "Collect_request_url": DEFAULT_REDIRECT,
        }
        self.requests: list[httpx.Request] = []
    
    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.json_body)
    
    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_settings(**overrides) -> Settings:
    values = {
        "gateway_base_url": GATEWAY_BASE_URL,
        "gateway_api_key": "test-api-key",
        "gateway_pg_secret": "test-pg-secret",
        "public_app_url": "https://school.test/payment-success",
        "api_key": "dashboard-key",
        "admin_api_key": "admin-key",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    yield engine
    
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for a test."""
    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    
    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def gateway() -> GatewayStub:
    return GatewayStub()


@pytest.fixture
def payment_service(db, settings, gateway) -> PaymentService:
    return PaymentService(db, settings=settings, gateway_transport=gateway.transport)


@pytest.fixture
def payment_request() -> dict:
    return {
        "school_id": "S1",
        "trustee_id": "T1",
        "student_info": {"name": "Jane", "id": "STU1", "email": "jane@x.com"},
        "gateway_name": "PhonePe",
        "amount": 2500,
    }


def make_webhook(order_id: str, status: str = "success", **order_info) -> dict:
    """Gateway webhook body with the gateway's own field spellings."""
    info = {
        "order_id": order_id,
        "order_amount": 2500,
        "transaction_amount": 2500,
        "gateway": "PhonePe",
        "bank_reference": "REF1",
        "status": status,
        "payment_mode": "upi",
        "payemnt_details": "upi@bank",
        "Payment_message": "OK",
        "payment_time": "2024-01-01T00:00:00Z",
        "error_message": "",
    }
    info.update(order_info)
    return {"status": 200, "order_info": info}
