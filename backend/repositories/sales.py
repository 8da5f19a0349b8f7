"""
Sales repository — transaction inserts and the sales log they produce.
"""

from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from audit.registry import AuditRegistry
from audit.triggers import audit_registry
from core.results import WriteResult
from db.models import SalesLog, SalesTransaction
from repositories.base import audited_insert


async def insert_sales_transactions(
    db: AsyncSession,
    rows: Iterable[dict[str, Any]],
    registry: AuditRegistry = audit_registry,
) -> WriteResult[list[dict]]:
    """Insert sales; each accepted row is copied into sales_log in the same transaction."""
    return await audited_insert(db, SalesTransaction, rows, registry=registry)


async def list_sales_log(db: AsyncSession, transaction_id: int | None = None) -> list[SalesLog]:
    query = select(SalesLog)
    if transaction_id is not None:
        query = query.where(SalesLog.transaction_id == transaction_id)
    result = await db.execute(query.order_by(SalesLog.log_id))
    return list(result.scalars().all())
