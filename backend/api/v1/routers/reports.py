"""
Reports Router — sales aggregates and the read-only views.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db
from core.clock import utcnow
from db.views import read_view
from reporting.queries import average_price_sold_today, sales_count_per_product

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])

VIEW_ROUTES = {
    "join": "view_with_join",
    "union": "view_with_union",
    "simple": "simple_view",
}


@router.get("/sales-count")
async def get_sales_count(db: AsyncSession = Depends(get_db)):
    """Number of sales transactions per product."""
    return await sales_count_per_product(db)


@router.get("/average-price-today")
async def get_average_price_today(
    day: date | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Average price of products logged as sold on ``day`` (default today, UTC)."""
    day = day or utcnow().date()
    average = await average_price_sold_today(db, day=day)
    return {
        "day": day.isoformat(),
        "average_price": str(average) if average is not None else None,
    }


@router.get("/views/{view}")
async def get_view(view: str, db: AsyncSession = Depends(get_db)):
    name = VIEW_ROUTES.get(view)
    if name is None:
        raise HTTPException(status_code=404, detail=f"Unknown view '{view}'")
    return await read_view(db, name)
