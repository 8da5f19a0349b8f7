"""
Integration Tests — Sales transactions and the sales log they produce.
"""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from core.clock import utcnow
from core.exceptions import IntegrityViolationError
from db.models import SalesLog, SalesTransaction


async def _log_count(db, transaction_id: int | None = None) -> int:
    query = select(func.count()).select_from(SalesLog)
    if transaction_id is not None:
        query = query.where(SalesLog.transaction_id == transaction_id)
    return (await db.execute(query)).scalar_one()


@pytest.mark.asyncio
class TestSalesLogger:
    async def test_seeded_sale_is_logged(self, test_db, seeded_db):
        from repositories.sales import list_sales_log

        entries = await list_sales_log(test_db, transaction_id=1)
        assert len(entries) == 1
        assert (entries[0].product_id, entries[0].employee_id, entries[0].quantity) == (1, 1, 2)

    async def test_insert_appends_exactly_one_matching_log_row(self, test_db, seeded_db):
        from repositories.sales import insert_sales_transactions, list_sales_log

        assert await _log_count(test_db, transaction_id=2) == 0
        started = utcnow() - timedelta(seconds=1)

        result = await insert_sales_transactions(
            test_db, [{"transaction_id": 2, "product_id": 2, "employee_id": 2, "quantity": 7}]
        )

        assert result.ok
        entries = await list_sales_log(test_db, transaction_id=2)
        assert len(entries) == 1
        entry = entries[0]
        assert (entry.product_id, entry.employee_id, entry.quantity) == (2, 2, 7)
        assert entry.log_time >= started

    async def test_batch_insert_logs_every_row(self, test_db, seeded_db):
        from repositories.sales import insert_sales_transactions

        before = await _log_count(test_db)
        rows = [
            {"transaction_id": 10 + i, "product_id": 2, "employee_id": 1, "quantity": i}
            for i in range(1, 4)
        ]
        result = await insert_sales_transactions(test_db, rows)

        assert result.ok
        assert await _log_count(test_db) == before + 3
        for row in rows:
            assert await _log_count(test_db, transaction_id=row["transaction_id"]) == 1

    async def test_unknown_product_rejects_sale_and_logs_nothing(self, test_db, seeded_db):
        from repositories.sales import insert_sales_transactions

        before = await _log_count(test_db)
        result = await insert_sales_transactions(
            test_db, [{"transaction_id": 5, "product_id": 404, "employee_id": 1, "quantity": 1}]
        )

        assert isinstance(result.error, IntegrityViolationError)
        assert await _log_count(test_db) == before
        assert await test_db.get(SalesTransaction, 5) is None

    async def test_duplicate_transaction_id_leaves_log_untouched(self, test_db, seeded_db):
        from repositories.sales import insert_sales_transactions

        before = await _log_count(test_db, transaction_id=1)
        result = await insert_sales_transactions(
            test_db, [{"transaction_id": 1, "product_id": 1, "employee_id": 1, "quantity": 9}]
        )

        assert not result.ok
        assert await _log_count(test_db, transaction_id=1) == before

    async def test_failed_row_rolls_back_whole_batch(self, test_db, seeded_db):
        from repositories.sales import insert_sales_transactions

        before = await _log_count(test_db)
        result = await insert_sales_transactions(
            test_db,
            [
                {"transaction_id": 20, "product_id": 1, "employee_id": 1, "quantity": 1},
                {"transaction_id": 21, "product_id": 1, "employee_id": 404, "quantity": 1},
            ],
        )

        assert not result.ok
        assert await _log_count(test_db) == before
        assert await test_db.get(SalesTransaction, 20) is None
