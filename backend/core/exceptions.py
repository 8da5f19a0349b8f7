"""
StoreLedger error hierarchy.

Every error carries a stable ``error_code`` so the API layer can map it to
an HTTP status without inspecting messages.
"""

from typing import Any


class StoreLedgerError(Exception):
    """Base error for the application."""

    error_code = "STORELEDGER_ERROR"

    def __init__(self, message: str, details: Any | None = None, error_code: str | None = None) -> None:
        self.message = message
        self.details = details
        if error_code:
            self.error_code = error_code
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        payload = {"error_code": self.error_code, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class PriceValidationError(StoreLedgerError):
    """A product batch contained a negative or non-numeric price."""

    error_code = "PRICE_VALIDATION_ERROR"

    def __init__(self, product_ids: list[int], message: str = "Price cannot be negative") -> None:
        self.product_ids = product_ids
        super().__init__(
            message,
            details={"product_ids": product_ids},
        )


class IntegrityViolationError(StoreLedgerError):
    """The engine rejected a write on a primary/foreign key or check constraint."""

    error_code = "INTEGRITY_VIOLATION"

    def __init__(self, table: str, operation: str, reason: str) -> None:
        self.table = table
        self.operation = operation
        super().__init__(
            f"{operation} on {table} violates a constraint: {reason}",
            details={"table": table, "operation": operation},
        )


class RecordNotFoundError(StoreLedgerError):
    """No row matched the requested key."""

    error_code = "RECORD_NOT_FOUND"

    def __init__(self, table: str, key: Any) -> None:
        self.table = table
        self.key = key
        super().__init__(f"{table} {key} not found", details={"table": table, "key": key})


class BackupConfigurationError(StoreLedgerError):
    """Backups were requested without a usable configuration."""

    error_code = "BACKUP_CONFIGURATION_ERROR"


class BackupError(StoreLedgerError):
    """The backup writer failed to produce an artifact."""

    error_code = "BACKUP_FAILED"
