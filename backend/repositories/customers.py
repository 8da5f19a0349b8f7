"""
Customers repository — customers and their feedback.
"""

from collections.abc import Iterable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from core.results import WriteResult
from db.models import Customer, CustomerFeedback
from repositories.base import audited_insert, audited_update


async def insert_customers(db: AsyncSession, rows: Iterable[dict[str, Any]]) -> WriteResult[list[dict]]:
    return await audited_insert(db, Customer, rows)


async def update_customers(
    db: AsyncSession,
    customer_ids: Iterable[int],
    values: dict[str, Any],
) -> WriteResult[int]:
    return await audited_update(db, Customer, customer_ids, values)


async def insert_customer_feedback(db: AsyncSession, rows: Iterable[dict[str, Any]]) -> WriteResult[list[dict]]:
    return await audited_insert(db, CustomerFeedback, rows)
