"""
StoreLedger API Dependencies

Dependency injection for DB sessions and write-result handling.
"""

from collections.abc import AsyncGenerator

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.results import WriteResult
from db.session import AsyncSessionLocal

ERROR_STATUS = {
    "PRICE_VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INTEGRITY_VIOLATION": status.HTTP_409_CONFLICT,
    "RECORD_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


def unwrap_or_http(result: WriteResult):
    """Return the result value, or raise the HTTP error matching its failure."""
    if result.ok:
        return result.value
    error = result.error
    raise HTTPException(
        status_code=ERROR_STATUS.get(error.error_code, status.HTTP_400_BAD_REQUEST),
        detail=error.to_dict(),
    )
