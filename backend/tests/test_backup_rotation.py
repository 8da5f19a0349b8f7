"""
Unit Tests — Backup naming, rotation window, and writers.
"""

import sqlite3
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from core.exceptions import BackupConfigurationError, BackupError
from ops.backup import (
    BackupRotator,
    PgDumpBackupWriter,
    SQLiteBackupWriter,
    backup_file_name,
    parse_backup_time,
    writer_for_url,
)

START = datetime(2026, 9, 1, 1, 0, 0)


def _touch_writer(target: Path) -> None:
    target.write_text("snapshot")


def _seed_backups(backup_dir: Path, count: int, prefix: str = "DBBackup") -> list[Path]:
    backup_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for day in range(count):
        path = backup_dir / backup_file_name(prefix, START + timedelta(days=day))
        path.write_text("old")
        paths.append(path)
    return paths


class TestNaming:
    def test_file_name_embeds_timestamp_without_colons(self):
        assert backup_file_name("DBBackup", datetime(2026, 10, 18, 14, 5, 9)) == "DBBackup_2026-10-18 140509.bak"

    def test_parse_round_trip(self):
        stamp = datetime(2026, 10, 18, 14, 5, 9)
        assert parse_backup_time("DBBackup", backup_file_name("DBBackup", stamp)) == stamp

    def test_foreign_files_are_not_backups(self):
        assert parse_backup_time("DBBackup", "notes.txt") is None
        assert parse_backup_time("DBBackup", "DBBackup_garbage.bak") is None
        assert parse_backup_time("DBBackup", "Other_2026-10-18 140509.bak") is None


class TestRotation:
    def test_thirty_existing_backups_evict_oldest(self, tmp_path):
        seeded = _seed_backups(tmp_path, 30)
        now = START + timedelta(days=30)
        rotator = BackupRotator(tmp_path, writer=_touch_writer, clock=lambda: now)

        summary = rotator.run()

        assert summary["status"] == "success"
        assert summary["evicted_path"] == str(seeded[0])
        assert not seeded[0].exists()
        assert all(p.exists() for p in seeded[1:])
        assert summary["backup_count"] == 30
        assert Path(summary["backup_path"]).read_text() == "snapshot"
        assert len(list(tmp_path.glob("DBBackup_*.bak"))) == 30

    def test_below_window_keeps_everything(self, tmp_path):
        seeded = _seed_backups(tmp_path, 29)
        rotator = BackupRotator(tmp_path, writer=_touch_writer, clock=lambda: START + timedelta(days=40))

        summary = rotator.run()

        assert summary["evicted_path"] is None
        assert all(p.exists() for p in seeded)
        assert summary["backup_count"] == 30

    def test_oldest_is_chosen_by_timestamp_not_file_order(self, tmp_path):
        tmp_path.mkdir(exist_ok=True)
        newer = tmp_path / backup_file_name("DBBackup", datetime(2026, 1, 2))
        older = tmp_path / backup_file_name("DBBackup", datetime(2025, 12, 31))
        newer.write_text("x")
        older.write_text("x")
        rotator = BackupRotator(tmp_path, writer=_touch_writer, max_count=2, clock=lambda: datetime(2026, 1, 3))

        rotator.run()

        assert not older.exists()
        assert newer.exists()

    def test_eviction_failure_does_not_block_new_backup(self, tmp_path, monkeypatch):
        seeded = _seed_backups(tmp_path, 30)
        real_unlink = Path.unlink

        def _failing_unlink(self, *args, **kwargs):
            if self == seeded[0]:
                raise PermissionError("locked")
            return real_unlink(self, *args, **kwargs)

        monkeypatch.setattr(Path, "unlink", _failing_unlink)
        rotator = BackupRotator(tmp_path, writer=_touch_writer, clock=lambda: START + timedelta(days=30))

        summary = rotator.run()

        assert summary["status"] == "success"
        assert summary["evicted_path"] is None
        assert seeded[0].exists()
        assert Path(summary["backup_path"]).exists()
        assert summary["backup_count"] == 31

    def test_unrelated_files_are_ignored(self, tmp_path):
        _seed_backups(tmp_path, 2)
        (tmp_path / "README.txt").write_text("keep me")
        rotator = BackupRotator(tmp_path, writer=_touch_writer, max_count=2, clock=lambda: START + timedelta(days=5))

        rotator.run()

        assert (tmp_path / "README.txt").exists()
        assert len(rotator.list_backups()) == 2

    def test_missing_directory_is_created(self, tmp_path):
        target_dir = tmp_path / "nested" / "backups"
        rotator = BackupRotator(target_dir, writer=_touch_writer, clock=lambda: START)

        summary = rotator.run()

        assert Path(summary["backup_path"]).parent == target_dir
        assert summary["backup_count"] == 1

    def test_existing_target_is_not_overwritten(self, tmp_path):
        _seed_backups(tmp_path, 1)
        rotator = BackupRotator(tmp_path, writer=_touch_writer, clock=lambda: START)

        with pytest.raises(BackupError, match="already exists"):
            rotator.run()

    def test_failed_write_leaves_no_partial_backup(self, tmp_path):
        seeded = _seed_backups(tmp_path, 3)

        def _partial_writer(target: Path) -> None:
            target.write_text("trunc")
            raise BackupError("disk full")

        rotator = BackupRotator(tmp_path, writer=_partial_writer, clock=lambda: START + timedelta(days=10))

        with pytest.raises(BackupError, match="disk full"):
            rotator.run()

        assert [b.path for b in rotator.list_backups()] == seeded

    def test_failed_pg_dump_removes_its_output(self, tmp_path):
        fake_pg_dump = tmp_path / "pg_dump"
        fake_pg_dump.write_text(
            '#!/bin/sh\nfor arg in "$@"; do case "$arg" in --file=*) echo partial > "${arg#--file=}";; esac; done\nexit 1\n'
        )
        fake_pg_dump.chmod(0o755)
        backup_dir = tmp_path / "backups"
        writer = PgDumpBackupWriter("postgresql://localhost/x", pg_dump_path=str(fake_pg_dump))
        rotator = BackupRotator(backup_dir, writer=writer, clock=lambda: datetime(2026, 1, 1))

        with pytest.raises(BackupError, match="exited with 1"):
            rotator.run()

        assert rotator.list_backups() == []
        assert list(backup_dir.iterdir()) == []

    @pytest.mark.parametrize("backup_dir", ["", None])
    def test_backup_dir_is_required(self, backup_dir):
        with pytest.raises(BackupConfigurationError):
            BackupRotator(backup_dir, writer=_touch_writer)


class TestWriters:
    def test_sqlite_writer_copies_database(self, tmp_path):
        source = tmp_path / "store.db"
        conn = sqlite3.connect(str(source))
        conn.execute("CREATE TABLE products (product_id INTEGER PRIMARY KEY, product_name TEXT)")
        conn.execute("INSERT INTO products VALUES (1, 'Product 1')")
        conn.commit()
        conn.close()

        target = tmp_path / "copy.bak"
        SQLiteBackupWriter(source)(target)

        copy = sqlite3.connect(str(target))
        try:
            assert copy.execute("SELECT product_name FROM products").fetchall() == [("Product 1",)]
        finally:
            copy.close()

    def test_sqlite_writer_missing_source(self, tmp_path):
        with pytest.raises(BackupError, match="does not exist"):
            SQLiteBackupWriter(tmp_path / "missing.db")(tmp_path / "out.bak")

    def test_writer_for_sqlite_file_url(self, tmp_path):
        writer = writer_for_url(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
        assert isinstance(writer, SQLiteBackupWriter)
        assert writer.database_path == tmp_path / "store.db"

    def test_writer_for_memory_sqlite_refused(self):
        with pytest.raises(BackupConfigurationError):
            writer_for_url("sqlite+aiosqlite:///:memory:")

    def test_writer_for_postgres_uses_libpq_dsn(self):
        writer = writer_for_url("postgresql+asyncpg://app:secret@db:5432/storeledger", pg_dump_path="/usr/bin/pg_dump")
        assert isinstance(writer, PgDumpBackupWriter)
        assert writer.dsn == "postgresql://app:secret@db:5432/storeledger"
        assert writer.pg_dump_path == "/usr/bin/pg_dump"

    def test_pg_dump_missing_binary(self, tmp_path):
        writer = PgDumpBackupWriter("postgresql://localhost/x", pg_dump_path=str(tmp_path / "no-pg-dump"))
        with pytest.raises(BackupError, match="not found"):
            writer(tmp_path / "out.bak")

    def test_unsupported_backend(self):
        with pytest.raises(BackupConfigurationError, match="No backup writer"):
            writer_for_url("mysql+pymysql://u:p@localhost/db")
