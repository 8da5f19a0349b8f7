"""
Backup Worker — nightly database snapshot with a rotating window.

Keeps at most ``backup_max_count`` snapshots (30 by default) in
``backup_dir``; the oldest is evicted before each new one is written.

Schedule: crontab(hour=1, minute=0) — daily at 1 AM
Queue: ops
"""

import structlog

from core.exceptions import BackupConfigurationError
from workers.celery_app import celery_app

logger = structlog.get_logger()


@celery_app.task(
    name="workers.backup.run_database_backup",
    bind=True,
    acks_late=True,
)
def run_database_backup(self):
    """Run one backup rotation cycle. Configuration errors are reported, not retried."""
    from core.config import get_settings
    from ops.backup import build_rotator

    run_id = self.request.id or "manual"
    settings = get_settings()

    try:
        rotator = build_rotator(settings)
    except BackupConfigurationError as exc:
        logger.error("backup.misconfigured", run_id=run_id, error=str(exc))
        return {"status": "failed", "reason": exc.error_code, "message": str(exc)}

    logger.info("backup.started", run_id=run_id, backup_dir=str(rotator.backup_dir))
    summary = rotator.run()
    summary["run_id"] = run_id
    return summary
