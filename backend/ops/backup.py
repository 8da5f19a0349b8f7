"""
Backup Rotation — timestamped database snapshots in a fixed-size window.

Each cycle:
1. List existing ``<prefix>_<YYYY-MM-DD HHMMSS>.bak`` files in the backup dir
2. If ``max_count`` or more exist, delete the single oldest (best effort:
   a failed delete is logged and the cycle carries on)
3. Write a new snapshot named with the current timestamp

Snapshots are produced by a writer chosen from the database URL:
SQLite files via the sqlite3 online backup API, PostgreSQL via pg_dump.
The backup directory has no default and must be configured.
"""

import sqlite3
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import structlog
from sqlalchemy.engine import make_url

from core.clock import utcnow
from core.exceptions import BackupConfigurationError, BackupError

logger = structlog.get_logger()

TIMESTAMP_FORMAT = "%Y-%m-%d %H%M%S"
BACKUP_SUFFIX = ".bak"

BackupWriter = Callable[[Path], None]


@dataclass(frozen=True)
class BackupFile:
    path: Path
    taken_at: datetime


def backup_file_name(prefix: str, taken_at: datetime) -> str:
    return f"{prefix}_{taken_at.strftime(TIMESTAMP_FORMAT)}{BACKUP_SUFFIX}"


def parse_backup_time(prefix: str, file_name: str) -> datetime | None:
    """Timestamp embedded in a backup file name, or None if the name isn't ours."""
    head = f"{prefix}_"
    if not file_name.startswith(head) or not file_name.endswith(BACKUP_SUFFIX):
        return None
    stamp = file_name[len(head) : -len(BACKUP_SUFFIX)]
    try:
        return datetime.strptime(stamp, TIMESTAMP_FORMAT)
    except ValueError:
        return None


# ─── Writers ────────────────────────────────────────────────────────────────


class SQLiteBackupWriter:
    """Online copy of a SQLite database file."""

    def __init__(self, database_path: str | Path):
        self.database_path = Path(database_path)

    def __call__(self, target: Path) -> None:
        if not self.database_path.exists():
            raise BackupError(f"SQLite database {self.database_path} does not exist")
        source = sqlite3.connect(str(self.database_path))
        dest = sqlite3.connect(str(target))
        try:
            source.backup(dest)
        except sqlite3.Error as exc:
            raise BackupError(f"SQLite backup failed: {exc}") from exc
        finally:
            dest.close()
            source.close()


class PgDumpBackupWriter:
    """Custom-format dump of a PostgreSQL database through pg_dump."""

    def __init__(self, dsn: str, pg_dump_path: str = "pg_dump"):
        self.dsn = dsn
        self.pg_dump_path = pg_dump_path

    def __call__(self, target: Path) -> None:
        cmd = [self.pg_dump_path, "--format=custom", f"--file={target}", self.dsn]
        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise BackupError(f"pg_dump not found at '{self.pg_dump_path}'") from exc
        except subprocess.CalledProcessError as exc:
            raise BackupError(f"pg_dump exited with {exc.returncode}", details={"stderr": exc.stderr}) from exc


def writer_for_url(database_url: str, pg_dump_path: str = "pg_dump") -> BackupWriter:
    url = make_url(database_url)
    backend = url.get_backend_name()
    if backend == "sqlite":
        if not url.database or url.database == ":memory:":
            raise BackupConfigurationError("In-memory SQLite databases cannot be backed up")
        return SQLiteBackupWriter(url.database)
    if backend == "postgresql":
        dsn = url.set(drivername="postgresql").render_as_string(hide_password=False)
        return PgDumpBackupWriter(dsn, pg_dump_path=pg_dump_path)
    raise BackupConfigurationError(f"No backup writer for '{backend}' databases")


# ─── Rotation ───────────────────────────────────────────────────────────────


class BackupRotator:
    """Keeps at most ``max_count`` backups by evicting the oldest before each new one."""

    def __init__(
        self,
        backup_dir: str | Path | None,
        writer: BackupWriter,
        prefix: str = "DBBackup",
        max_count: int = 30,
        clock: Callable[[], datetime] = utcnow,
    ):
        if not backup_dir:
            raise BackupConfigurationError("backup_dir must be configured before running backups")
        if max_count < 1:
            raise BackupConfigurationError("max_count must be at least 1")
        self.backup_dir = Path(backup_dir)
        self.writer = writer
        self.prefix = prefix
        self.max_count = max_count
        self.clock = clock

    def list_backups(self) -> list[BackupFile]:
        """Existing backups, oldest first."""
        if not self.backup_dir.is_dir():
            return []
        backups = []
        for path in self.backup_dir.iterdir():
            taken_at = parse_backup_time(self.prefix, path.name)
            if taken_at is not None and path.is_file():
                backups.append(BackupFile(path=path, taken_at=taken_at))
        return sorted(backups, key=lambda b: b.taken_at)

    def _evict(self, backup: BackupFile) -> bool:
        try:
            backup.path.unlink()
        except OSError as exc:
            logger.warning("backup.evict_failed", path=str(backup.path), error=str(exc))
            return False
        logger.info("backup.evicted", path=str(backup.path), taken_at=backup.taken_at.isoformat())
        return True

    def run(self) -> dict:
        """Run one rotation cycle and return a summary."""
        existing = self.list_backups()
        evicted = None
        if len(existing) >= self.max_count:
            oldest = existing[0]
            if self._evict(oldest):
                evicted = str(oldest.path)

        self.backup_dir.mkdir(parents=True, exist_ok=True)
        target = self.backup_dir / backup_file_name(self.prefix, self.clock())
        if target.exists():
            raise BackupError(f"Backup {target} already exists")

        try:
            self.writer(target)
        except Exception as exc:
            # A half-written file would otherwise count toward the window.
            target.unlink(missing_ok=True)
            logger.error("backup.write_failed", path=str(target), error=str(exc))
            raise
        logger.info("backup.created", path=str(target), existing=len(existing), evicted=evicted)

        return {
            "status": "success",
            "backup_path": str(target),
            "evicted_path": evicted,
            "backup_count": len(self.list_backups()),
        }


def build_rotator(settings, clock: Callable[[], datetime] = utcnow) -> BackupRotator:
    """Rotator wired from application settings."""
    writer = writer_for_url(settings.database_url, pg_dump_path=settings.pg_dump_path)
    return BackupRotator(
        settings.backup_dir,
        writer=writer,
        prefix=settings.backup_prefix,
        max_count=settings.backup_max_count,
        clock=clock,
    )
