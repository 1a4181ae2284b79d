"""Shared fixtures: a throwaway SQLite database and mocked collaborators"""

import os
import tempfile
from pathlib import Path

_DB_DIR = tempfile.mkdtemp(prefix="orderservice-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_DB_DIR) / 'orders.db'}"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "False"
os.environ["SECRET_KEY"] = "test-secret"

from typing import Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from app.core.database import AsyncSessionLocal, SessionLocal, sync_engine
from app.core.security import SecurityUtils
from app.main import app
from app.models import Base, Cart, CartItem, Order, Payment
from app.services.deliveries import DeliveryService, get_delivery_service
from app.services.products import ProductService, get_product_service

UNIT_PRICES = {1: 10.0, 2: 2.5, 3: 5.5}

@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(sync_engine)
    yield
    Base.metadata.drop_all(sync_engine)

@pytest.fixture
def sync_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
async def db_session():
    async with AsyncSessionLocal() as session:
        yield session

@pytest.fixture
def product_service():
    service = MagicMock(spec=ProductService)
    service.get_unit_prices = AsyncMock(
        side_effect=lambda ids: {pid: UNIT_PRICES[pid] for pid in set(ids) if pid in UNIT_PRICES}
    )
    return service

@pytest.fixture
def delivery_service():
    service = MagicMock(spec=DeliveryService)
    service.get_owned_delivery_address = AsyncMock(
        return_value={"id": 7, "patient_id": 1, "street": "12 Harbour Road", "city": "Hanoi"}
    )
    return service

@pytest.fixture
async def client(product_service, delivery_service):
    app.dependency_overrides[get_product_service] = lambda: product_service
    app.dependency_overrides[get_delivery_service] = lambda: delivery_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

def auth_headers(patient_id: int = 1, role: str = "patient") -> Dict[str, str]:
    token = SecurityUtils.create_access_token(patient_id, role)
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def patient_headers():
    return auth_headers()

@pytest.fixture
def headers_for():
    return auth_headers

class Seeder:
    """Writes committed rows through a session of its own"""

    async def cart(self, patient_id: int = 1, items: Optional[Dict[int, int]] = None) -> Cart:
        async with AsyncSessionLocal() as session:
            cart = Cart(patient_id=patient_id)
            session.add(cart)
            await session.flush()
            for product_id, quantity in (items or {}).items():
                session.add(CartItem(cart_id=cart.id, product_id=product_id, quantity=quantity))
            await session.commit()
            return cart

    async def order(self, cart: Cart, status: str = "PENDING", **values) -> Order:
        async with AsyncSessionLocal() as session:
            order = Order(cart_id=cart.id, patient_id=cart.patient_id, status=status, **values)
            session.add(order)
            await session.commit()
            return order

    async def payment(self, order: Order, status: str = "PENDING", amount: float = 25.5) -> Payment:
        async with AsyncSessionLocal() as session:
            payment = Payment(order_id=order.id, amount=amount, provider="qr_payment", status=status)
            session.add(payment)
            await session.commit()
            return payment

    async def fetch(self, model, *criteria):
        async with AsyncSessionLocal() as session:
            result = await session.execute(select(model).where(*criteria))
            return list(result.scalars().all())

@pytest.fixture
def seed():
    return Seeder()
