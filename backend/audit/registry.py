"""
Audit Hook Registry — observers attached to repository write paths.

A hook is registered against a (table, event) pair and is called
synchronously by the repository that owns the table:

  before_insert  hook(rows) -> StoreLedgerError | None
                 Sees the whole candidate batch. Returning an error rejects
                 the batch before anything is written.

  after_insert   hook(None, after) -> derived row | None
  after_update   hook(before, after) -> derived row | None
                 Called once per written row, after the engine accepted the
                 base write and inside the same transaction. Any derived ORM
                 instances are added to the session by the repository.

Hooks are pure: they receive plain dict images and return new objects,
they never touch the session themselves.
"""

from collections import defaultdict
from collections.abc import Callable
from typing import Any

import structlog

from core.exceptions import StoreLedgerError

logger = structlog.get_logger()

BEFORE_INSERT = "before_insert"
AFTER_INSERT = "after_insert"
AFTER_UPDATE = "after_update"

EVENTS = (BEFORE_INSERT, AFTER_INSERT, AFTER_UPDATE)

RowImage = dict[str, Any]


class AuditRegistry:
    """Per-table lists of audit hooks, kept in registration order."""

    def __init__(self) -> None:
        self._hooks: dict[tuple[str, str], list[Callable]] = defaultdict(list)

    def register(self, table: str, event: str, hook: Callable) -> Callable:
        if event not in EVENTS:
            raise ValueError(f"Unknown audit event '{event}'")
        self._hooks[(table, event)].append(hook)
        return hook

    def listens_for(self, table: str, event: str) -> Callable[[Callable], Callable]:
        """Decorator form of :meth:`register`."""

        def decorator(hook: Callable) -> Callable:
            return self.register(table, event, hook)

        return decorator

    def hooks(self, table: str, event: str) -> list[Callable]:
        return list(self._hooks.get((table, event), ()))

    def check_insert(self, table: str, rows: list[RowImage]) -> StoreLedgerError | None:
        """Run before_insert guards; the first error wins."""
        for guard in self.hooks(table, BEFORE_INSERT):
            error = guard(rows)
            if error is not None:
                logger.info("audit.guard_rejected", table=table, guard=guard.__name__, error_code=error.error_code)
                return error
        return None

    def derive_after_insert(self, table: str, rows: list[RowImage]) -> list:
        return self._derive(table, AFTER_INSERT, [(None, row) for row in rows])

    def derive_after_update(self, table: str, pairs: list[tuple[RowImage, RowImage]]) -> list:
        return self._derive(table, AFTER_UPDATE, pairs)

    def _derive(self, table: str, event: str, pairs: list[tuple[RowImage | None, RowImage]]) -> list:
        derived = []
        for hook in self.hooks(table, event):
            for before, after in pairs:
                row = hook(before, after)
                if row is not None:
                    derived.append(row)
        return derived
