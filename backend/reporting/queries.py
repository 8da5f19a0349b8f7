"""
Reporting Queries — read-only aggregates over sales and the sales log.

  products_never_sold       products with no sales transaction, newest id first
  sales_count_per_product   number of sales transactions per product
  average_price_sold_today  mean product price over today's sales log rows
"""

from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import utcnow
from db.models import Product, SalesLog, SalesTransaction

logger = structlog.get_logger()

CENTS = Decimal("0.01")


async def products_never_sold(db: AsyncSession) -> list[Product]:
    sold = select(SalesTransaction.product_id).where(SalesTransaction.product_id.isnot(None))
    result = await db.execute(
        select(Product)
        .where(Product.product_id.not_in(sold))
        .order_by(Product.product_id.desc())
    )
    return list(result.scalars().all())


async def sales_count_per_product(db: AsyncSession) -> list[dict]:
    per_product = (
        select(
            SalesTransaction.product_id,
            func.count().label("sales_count"),
        )
        .group_by(SalesTransaction.product_id)
        .subquery()
    )
    result = await db.execute(
        select(per_product.c.product_id, per_product.c.sales_count).order_by(per_product.c.product_id)
    )
    return [{"product_id": row.product_id, "sales_count": row.sales_count} for row in result.all()]


async def average_price_sold_today(db: AsyncSession, day: date | None = None) -> Decimal | None:
    """
    Average price of the products logged as sold on ``day`` (UTC, default today).

    Each sales log row counts once regardless of quantity. Returns None when
    nothing was logged that day.
    """
    day = day or utcnow().date()
    start = datetime.combine(day, time.min)
    end = start + timedelta(days=1)

    logged_prices = (
        select(Product.price.label("product_price"))
        .select_from(SalesLog)
        .join(Product, SalesLog.product_id == Product.product_id)
        .where(SalesLog.log_time >= start, SalesLog.log_time < end)
        .subquery()
    )
    result = await db.execute(select(func.avg(logged_prices.c.product_price)))
    average = result.scalar_one_or_none()
    if average is None:
        return None

    value = Decimal(str(average)).quantize(CENTS, rounding=ROUND_HALF_UP)
    logger.debug("reporting.average_price_today", day=day.isoformat(), average=str(value))
    return value
