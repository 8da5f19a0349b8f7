"""
Sales Router — record sales transactions and read the sales log.
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, unwrap_or_http
from repositories.sales import insert_sales_transactions, list_sales_log

router = APIRouter(prefix="/api/v1/sales", tags=["sales"])


# ─── Schemas ────────────────────────────────────────────────────────────────


class SalesTransactionCreate(BaseModel):
    transaction_id: int
    product_id: int | None = None
    employee_id: int | None = None
    quantity: int | None = None


class SalesTransactionResponse(SalesTransactionCreate):
    pass


class SalesLogResponse(BaseModel):
    log_id: int
    transaction_id: int | None
    product_id: int | None
    employee_id: int | None
    quantity: int | None
    log_time: datetime

    model_config = {"from_attributes": True}


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.post("/", response_model=list[SalesTransactionResponse], status_code=201)
async def create_sales(
    transactions: list[SalesTransactionCreate],
    db: AsyncSession = Depends(get_db),
):
    """Insert sales transactions; each one is also appended to the sales log."""
    result = await insert_sales_transactions(db, [t.model_dump() for t in transactions])
    return unwrap_or_http(result)


@router.get("/log", response_model=list[SalesLogResponse])
async def get_sales_log(
    transaction_id: int | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Sales log entries, optionally for one transaction."""
    return await list_sales_log(db, transaction_id=transaction_id)
