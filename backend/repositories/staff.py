"""
Staff repository — employees, store locations, and who works where.
"""

from collections.abc import Iterable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from core.results import WriteResult
from db.models import Employee, EmployeeLocation, StoreLocation
from repositories.base import audited_insert


async def insert_employees(db: AsyncSession, rows: Iterable[dict[str, Any]]) -> WriteResult[list[dict]]:
    return await audited_insert(db, Employee, rows)


async def insert_store_locations(db: AsyncSession, rows: Iterable[dict[str, Any]]) -> WriteResult[list[dict]]:
    return await audited_insert(db, StoreLocation, rows)


async def assign_employee_locations(db: AsyncSession, rows: Iterable[dict[str, Any]]) -> WriteResult[list[dict]]:
    """Insert (employee_id, location_id) assignments."""
    return await audited_insert(db, EmployeeLocation, rows)
