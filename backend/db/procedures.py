"""
Named procedures — the three parameterized operations exposed to callers.

  get_products_above_price      price threshold -> product rows
  update_customer_contact_info  customer id + contact -> rows updated
  delete_product_by_id          product id -> rows deleted
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.results import WriteResult
from db.models import Product
from repositories.customers import update_customers
from repositories.products import delete_product


async def get_products_above_price(db: AsyncSession, price: Decimal | float) -> list[Product]:
    """Products priced strictly above ``price``."""
    result = await db.execute(
        select(Product).where(Product.price > price).order_by(Product.product_id)
    )
    return list(result.scalars().all())


async def update_customer_contact_info(
    db: AsyncSession,
    customer_id: int,
    new_contact_info: str,
) -> WriteResult[int]:
    return await update_customers(db, [customer_id], {"contact_info": new_contact_info})


async def delete_product_by_id(db: AsyncSession, product_id: int) -> WriteResult[int]:
    return await delete_product(db, product_id)
