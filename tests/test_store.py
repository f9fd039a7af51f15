"""
Tests for the record store: schema creation, versioning and the
process-wide handle.
"""

import sqlite3
import threading

import pytest

import farmbook.db.base as db_base
from farmbook.config import SCHEMA_VERSION
from farmbook.db import RecordStore, StorageUnavailableError, generate_id, open_store

EXPECTED_TABLES = {
    "transactions",
    "employees",
    "labor_entries",
    "activities",
    "activity_records",
    "assets",
    "rentals",
    "rental_payments",
    "settings",
}


class TestRecordStore:
    """Tests for opening and creating the database."""

    def test_creates_all_tables(self, store):
        """Test that a fresh store has one table per entity."""
        with store.connection() as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            ).fetchall()
        assert EXPECTED_TABLES <= {row["name"] for row in rows}

    def test_creates_indexes(self, store):
        """Test that secondary indexes are created."""
        with store.connection() as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'index'"
            ).fetchall()
        names = {row["name"] for row in rows}
        assert "idx_transactions_date" in names
        assert "idx_labor_entries_employee" in names
        assert "idx_rental_payments_rental" in names

    def test_schema_version_stamped(self, store):
        """Test that the schema version is recorded."""
        assert store.schema_version() == SCHEMA_VERSION

    def test_reopen_keeps_data(self, db_path, store):
        """Test that reopening an existing file does not recreate tables."""
        with store.connection() as conn:
            conn.execute(
                "INSERT INTO settings (id, farm_name, currency, fiscal_year_start, "
                "updated_at) VALUES ('main', 'Kept', 'UGX', '01-01', 'x')"
            )
        reopened = RecordStore(db_path)
        with reopened.connection() as conn:
            row = conn.execute("SELECT farm_name FROM settings").fetchone()
        assert row["farm_name"] == "Kept"

    def test_newer_schema_rejected(self, db_path, store):
        """Test that a database from a newer version is refused."""
        conn = sqlite3.connect(db_path)
        conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION + 1}")
        conn.close()

        with pytest.raises(StorageUnavailableError):
            RecordStore(db_path)

    def test_unwritable_location_raises(self, tmp_path):
        """Test that an unusable path raises StorageUnavailableError."""
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x")

        with pytest.raises(StorageUnavailableError):
            RecordStore(blocker / "farmbook.db")

    def test_rollback_on_error(self, store):
        """Test that a failing operation leaves no partial writes."""
        with pytest.raises(RuntimeError):
            with store.connection() as conn:
                conn.execute(
                    "INSERT INTO settings (id, farm_name, currency, "
                    "fiscal_year_start, updated_at) "
                    "VALUES ('main', 'Gone', 'UGX', '01-01', 'x')"
                )
                raise RuntimeError("boom")

        with store.connection() as conn:
            assert conn.execute("SELECT COUNT(*) FROM settings").fetchone()[0] == 0


class TestOpenStore:
    """Tests for the process-wide store handle."""

    def test_returns_same_instance(self, db_path):
        """Test that repeated calls share one store."""
        first = open_store(db_path)
        second = open_store()
        assert first is second

    def test_later_path_ignored(self, tmp_path, db_path):
        """Test that a different path after the first open is ignored."""
        first = open_store(db_path)
        second = open_store(tmp_path / "other.db")
        assert second is first
        assert not (tmp_path / "other.db").exists()

    def test_concurrent_first_calls_create_one_store(self, db_path):
        """Test that racing first calls all get the same store."""
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(open_store(db_path))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        assert all(r is results[0] for r in results)

    def test_failed_open_not_cached(self, tmp_path, db_path):
        """Test that a failed open can be retried."""
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x")

        with pytest.raises(StorageUnavailableError):
            open_store(blocker / "farmbook.db")
        assert db_base._default_store is None

        assert open_store(db_path).db_path == db_path


class TestGenerateId:
    """Tests for record id generation."""

    def test_ids_are_unique(self):
        """Test that ids generated in a burst do not collide."""
        ids = {generate_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_id_format(self):
        """Test the timestamp-random id shape."""
        millis, suffix = generate_id().split("-")
        assert millis.isdigit()
        assert len(suffix) == 12
