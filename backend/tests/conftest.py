"""
Test Configuration — Fixtures for async DB, test client, and seed data.

Each test gets its own in-memory SQLite database (foreign keys on, tables
and views created), so audit ledgers never leak between tests.
"""

import os
from decimal import Decimal

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from api.deps import get_db
from api.main import app
from db import models  # noqa: F401
from db.session import Base, enable_foreign_keys

# StaticPool keeps one connection so the in-memory database survives
# across sessions opened on the same engine.
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Fresh database per test with all tables and views."""
    engine = enable_foreign_keys(create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_db(test_engine):
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(test_db):
    """Create an async test client with dependency overrides."""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def seeded_db(test_db):
    """
    Seed the test DB with a small store:

      products   1 "Product 1" 10.00 (sold), 2 "Product 2" 25.50, 3 "Freebie" 0.00
      employees  1 "Employee 1" Manager, 2 "Employee 2" Cashier
      sales      transaction 1: product 1 by employee 1, quantity 2
      suppliers  1 "Acme" contact "A"
      customers  1 "Customer 1" "123-456-7890"
    """
    from repositories.customers import insert_customers
    from repositories.products import insert_products
    from repositories.sales import insert_sales_transactions
    from repositories.staff import insert_employees
    from repositories.suppliers import insert_suppliers

    products = (
        await insert_products(
            test_db,
            [
                {"product_id": 1, "product_name": "Product 1", "price": Decimal("10.00")},
                {"product_id": 2, "product_name": "Product 2", "price": Decimal("25.50")},
                {"product_id": 3, "product_name": "Freebie", "price": Decimal("0.00")},
            ],
        )
    ).unwrap()
    employees = (
        await insert_employees(
            test_db,
            [
                {"employee_id": 1, "employee_name": "Employee 1", "position": "Manager"},
                {"employee_id": 2, "employee_name": "Employee 2", "position": "Cashier"},
            ],
        )
    ).unwrap()
    sales = (
        await insert_sales_transactions(
            test_db,
            [{"transaction_id": 1, "product_id": 1, "employee_id": 1, "quantity": 2}],
        )
    ).unwrap()
    suppliers = (
        await insert_suppliers(test_db, [{"supplier_id": 1, "supplier_name": "Acme", "contact_info": "A"}])
    ).unwrap()
    customers = (
        await insert_customers(
            test_db,
            [{"customer_id": 1, "customer_name": "Customer 1", "contact_info": "123-456-7890"}],
        )
    ).unwrap()

    return {
        "products": products,
        "employees": employees,
        "sales": sales,
        "suppliers": suppliers,
        "customers": customers,
    }
