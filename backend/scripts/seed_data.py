"""
Seed Data — Creates the starter rows for development.

Rows go through the audited repositories, so the seeded sale also lands in
the sales log.

Run: python scripts/seed_data.py [--create-schema]
"""

import argparse
import asyncio
import os
import sys
from decimal import Decimal

# Add backend/ to path when run as a script.
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.config import get_settings
from db.session import Base, build_engine
from repositories.customers import insert_customers
from repositories.products import insert_products
from repositories.sales import insert_sales_transactions
from repositories.staff import insert_employees

logger = structlog.get_logger()

PRODUCTS = [{"product_id": 1, "product_name": "Product 1", "price": Decimal("10.00")}]
EMPLOYEES = [{"employee_id": 1, "employee_name": "Employee 1", "position": "Manager"}]
SALES = [{"transaction_id": 1, "product_id": 1, "employee_id": 1, "quantity": 2}]
CUSTOMERS = [{"customer_id": 1, "customer_name": "Customer 1", "contact_info": "123-456-7890"}]


async def seed(db: AsyncSession) -> dict:
    """Insert the seed rows; stops at the first rejected batch."""
    steps = [
        ("products", insert_products, PRODUCTS),
        ("employees", insert_employees, EMPLOYEES),
        ("sales_transactions", insert_sales_transactions, SALES),
        ("customers", insert_customers, CUSTOMERS),
    ]
    counts = {}
    for table, write, rows in steps:
        result = await write(db, rows)
        counts[table] = len(result.unwrap())
        logger.info("seed.table_done", table=table, rows=counts[table])
    return counts


async def main(create_schema: bool = False) -> dict:
    settings = get_settings()
    engine = build_engine(settings.database_url)
    try:
        if create_schema:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with session_factory() as db:
            return await seed(db)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the store database")
    parser.add_argument("--create-schema", action="store_true", help="Create tables and views first")
    args = parser.parse_args()
    print(asyncio.run(main(create_schema=args.create_schema)))
