"""
Integration Tests — The three named procedures.
"""

from decimal import Decimal

import pytest
from sqlalchemy import select

from core.exceptions import IntegrityViolationError
from db.models import Customer, Product


@pytest.mark.asyncio
class TestGetProductsAbovePrice:
    async def test_returns_exactly_products_above_threshold(self, test_db, seeded_db):
        from db.procedures import get_products_above_price
        from repositories.products import insert_products

        await insert_products(
            test_db,
            [
                {"product_id": 4, "product_name": "Just over", "price": Decimal("10.01")},
                {"product_id": 5, "product_name": "Just under", "price": Decimal("9.99")},
            ],
        )

        products = await get_products_above_price(test_db, Decimal("10.00"))

        expected = (
            await test_db.execute(select(Product.product_id).where(Product.price > Decimal("10.00")))
        ).scalars().all()
        assert [p.product_id for p in products] == sorted(expected)
        assert [p.product_id for p in products] == [2, 4]

    async def test_threshold_is_exclusive(self, test_db, seeded_db):
        from db.procedures import get_products_above_price

        products = await get_products_above_price(test_db, Decimal("25.50"))
        assert products == []

    async def test_negative_threshold_returns_all_priced_products(self, test_db, seeded_db):
        from db.procedures import get_products_above_price

        products = await get_products_above_price(test_db, Decimal("-1"))
        assert [p.product_id for p in products] == [1, 2, 3]


@pytest.mark.asyncio
class TestUpdateCustomerContactInfo:
    async def test_overwrites_contact(self, test_db, seeded_db):
        from db.procedures import update_customer_contact_info

        result = await update_customer_contact_info(test_db, 1, "555-000-1111")

        assert result.unwrap() == 1
        contact = (
            await test_db.execute(select(Customer.__table__.c.contact_info).where(Customer.__table__.c.customer_id == 1))
        ).scalar_one()
        assert contact == "555-000-1111"

    async def test_unknown_customer_affects_no_rows(self, test_db, seeded_db):
        from db.procedures import update_customer_contact_info

        result = await update_customer_contact_info(test_db, 404, "nobody")
        assert result.unwrap() == 0


@pytest.mark.asyncio
class TestDeleteProductByID:
    async def test_referenced_product_fails_with_integrity_error(self, test_db, seeded_db):
        from db.procedures import delete_product_by_id

        result = await delete_product_by_id(test_db, 1)
        assert isinstance(result.error, IntegrityViolationError)

    async def test_unreferenced_product_is_deleted(self, test_db, seeded_db):
        from db.procedures import delete_product_by_id

        result = await delete_product_by_id(test_db, 3)
        assert result.unwrap() == 1
