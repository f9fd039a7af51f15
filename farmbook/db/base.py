"""
Base repository module with connection management and schema initialization.

Provides the foundation for all database operations in Farmbook:

- RecordStore: the local SQLite database, its schema and version upgrades
- open_store: the process-wide store handle
- BaseRepository / EntityRepository: shared CRUD over one table per entity
"""

import logging
import sqlite3
import threading
import time
import uuid
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Any, Generic, Optional, TypeVar, Union

from farmbook.config import DB_TIMEOUT, DEFAULT_DB_PATH, SCHEMA_VERSION
from farmbook.models.dates import DateLike, normalize_date, utc_timestamp

from .models import Record

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)


class StorageUnavailableError(RuntimeError):
    """The local record store could not be opened or created."""


def generate_id() -> str:
    """
    Generate a unique record id.

    Format is ``<epoch milliseconds>-<12 hex digits>``. A collision is a
    defect and surfaces as ``sqlite3.IntegrityError`` on insert.
    """
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}"


def insert_record(conn: sqlite3.Connection, table: str, record: Record) -> None:
    """Insert a record as a new row; fails if the id already exists."""
    row = record.to_row()
    columns = ", ".join(row)
    placeholders = ", ".join(f":{name}" for name in row)
    conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", row)


class RecordStore:
    """
    Handle to the local SQLite record store.

    Creating a store ensures the database file exists and its schema is at
    ``SCHEMA_VERSION``. Each operation then borrows a short-lived connection
    through :meth:`connection`.
    """

    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        timeout: float = DB_TIMEOUT,
    ):
        """
        Open (and if needed create) the record store.

        Args:
            db_path: Path to the SQLite database file. Defaults to data/farmbook.db
            timeout: Seconds to wait for a locked database

        Raises:
            StorageUnavailableError: If the database cannot be opened or created
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self.timeout = timeout
        try:
            self._ensure_db_directory()
            self._upgrade_schema()
        except (OSError, sqlite3.Error) as e:
            logger.error(
                f"Failed to open record store at {self.db_path}: {e}", exc_info=True
            )
            raise StorageUnavailableError(
                f"Cannot open record store at {self.db_path}: {e}"
            ) from e

    def _ensure_db_directory(self):
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Database directory ensured: {self.db_path.parent}")

    @contextmanager
    def connection(self):
        """Context manager for database connections with proper error handling."""
        conn = None
        try:
            try:
                conn = sqlite3.connect(self.db_path, timeout=self.timeout)
            except sqlite3.Error as e:
                raise StorageUnavailableError(
                    f"Cannot connect to record store at {self.db_path}: {e}"
                ) from e
            conn.row_factory = sqlite3.Row
            yield conn
            conn.commit()
        except sqlite3.OperationalError as e:
            logger.error(f"Database locked or operational error: {e}", exc_info=True)
            if conn:
                conn.rollback()
            raise
        except Exception as e:
            logger.error(f"Database error: {e}", exc_info=True)
            if conn:
                conn.rollback()
            raise
        finally:
            if conn:
                conn.close()

    def schema_version(self) -> int:
        """Read the schema version stamped in the database header."""
        with self.connection() as conn:
            return conn.execute("PRAGMA user_version").fetchone()[0]

    # =========================================================================
    # Schema
    # =========================================================================

    def _upgrade_schema(self):
        """
        Bring the schema up to ``SCHEMA_VERSION``.

        Runs under an immediate write lock and re-reads the version inside
        it, so two processes opening a fresh file create the tables once.
        """
        conn = sqlite3.connect(
            self.db_path, timeout=self.timeout, isolation_level=None
        )
        try:
            conn.execute("BEGIN IMMEDIATE")
            version = conn.execute("PRAGMA user_version").fetchone()[0]

            if version > SCHEMA_VERSION:
                raise StorageUnavailableError(
                    f"Database schema version {version} is newer than "
                    f"supported version {SCHEMA_VERSION}"
                )

            for target in range(version + 1, SCHEMA_VERSION + 1):
                self._MIGRATIONS[target](self, conn)
                logger.info(f"Upgraded record store schema to version {target}")

            if version < SCHEMA_VERSION:
                conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
            conn.execute("COMMIT")
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            conn.close()

    def _create_schema_v1(self, conn: sqlite3.Connection):
        """Create the nine entity tables and their indexes."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS transactions (
                id TEXT PRIMARY KEY,
                date TEXT NOT NULL,
                type TEXT NOT NULL CHECK(type IN ('income', 'expense')),
                category TEXT NOT NULL,
                amount REAL NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                activity_id TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS employees (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                role TEXT NOT NULL,
                daily_rate REAL NOT NULL,
                phone TEXT,
                status TEXT NOT NULL CHECK(status IN ('active', 'inactive')),
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        # employee_id and activity_id are soft references, no FOREIGN KEY
        conn.execute("""
            CREATE TABLE IF NOT EXISTS labor_entries (
                id TEXT PRIMARY KEY,
                date TEXT NOT NULL,
                employee_id TEXT NOT NULL,
                hours_worked REAL NOT NULL,
                amount REAL NOT NULL,
                labor_type TEXT NOT NULL CHECK(labor_type IN ('direct', 'shared')),
                activity_id TEXT,
                notes TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS activities (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                type TEXT NOT NULL CHECK(
                    type IN ('crop', 'livestock', 'service', 'other')
                ),
                status TEXT NOT NULL CHECK(
                    status IN ('active', 'completed', 'cancelled')
                ),
                start_date TEXT,
                end_date TEXT,
                notes TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS activity_records (
                id TEXT PRIMARY KEY,
                activity_id TEXT NOT NULL,
                date TEXT NOT NULL,
                quantity REAL,
                unit TEXT,
                loss REAL,
                income REAL,
                expense REAL,
                notes TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS assets (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                category TEXT NOT NULL CHECK(
                    category IN ('equipment', 'vehicle', 'building', 'land', 'other')
                ),
                purchase_date TEXT NOT NULL,
                purchase_price REAL NOT NULL CHECK(purchase_price > 0),
                current_value REAL NOT NULL,
                depreciation_rate REAL NOT NULL,
                depreciation_method TEXT NOT NULL CHECK(
                    depreciation_method IN ('straight-line', 'declining-balance')
                ),
                useful_life REAL NOT NULL CHECK(useful_life > 0),
                status TEXT NOT NULL CHECK(status IN ('active', 'disposed', 'sold')),
                notes TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS rentals (
                id TEXT PRIMARY KEY,
                asset_name TEXT NOT NULL,
                start_date TEXT NOT NULL,
                monthly_rate REAL NOT NULL,
                asset_id TEXT,
                renter_name TEXT,
                end_date TEXT,
                status TEXT NOT NULL CHECK(
                    status IN ('active', 'completed', 'cancelled')
                ),
                notes TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        # Creation-only rows: no updated_at
        conn.execute("""
            CREATE TABLE IF NOT EXISTS rental_payments (
                id TEXT PRIMARY KEY,
                rental_id TEXT NOT NULL,
                date TEXT NOT NULL,
                amount REAL NOT NULL,
                period TEXT NOT NULL,
                notes TEXT,
                created_at TEXT NOT NULL
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS settings (
                id TEXT PRIMARY KEY,
                farm_name TEXT NOT NULL,
                currency TEXT NOT NULL,
                fiscal_year_start TEXT NOT NULL,
                owner_name TEXT,
                address TEXT,
                phone TEXT,
                email TEXT,
                updated_at TEXT NOT NULL
            )
        """)

        self._create_indexes(conn)
        logger.debug("Record store schema v1 created")

    def _create_indexes(self, conn: sqlite3.Connection):
        """Create secondary indexes for filtered queries."""
        indexes = [
            ("idx_transactions_date", "transactions", "date"),
            ("idx_transactions_type", "transactions", "type"),
            ("idx_transactions_category", "transactions", "category"),
            ("idx_employees_status", "employees", "status"),
            ("idx_labor_entries_date", "labor_entries", "date"),
            ("idx_labor_entries_employee", "labor_entries", "employee_id"),
            ("idx_labor_entries_activity", "labor_entries", "activity_id"),
            ("idx_activities_status", "activities", "status"),
            ("idx_activities_type", "activities", "type"),
            ("idx_activity_records_date", "activity_records", "date"),
            ("idx_activity_records_activity", "activity_records", "activity_id"),
            ("idx_assets_category", "assets", "category"),
            ("idx_assets_status", "assets", "status"),
            ("idx_rentals_status", "rentals", "status"),
            ("idx_rentals_asset", "rentals", "asset_id"),
            ("idx_rental_payments_rental", "rental_payments", "rental_id"),
            ("idx_rental_payments_date", "rental_payments", "date"),
        ]

        for index_name, table, columns in indexes:
            conn.execute(f"""
                CREATE INDEX IF NOT EXISTS {index_name}
                ON {table}({columns})
            """)

    _MIGRATIONS = {
        1: _create_schema_v1,
    }


# Singleton instance
_default_store: Optional[RecordStore] = None
_store_lock = threading.Lock()


def open_store(db_path: Optional[Union[str, Path]] = None) -> RecordStore:
    """
    Get or create the process-wide record store.

    The first call opens the database and runs schema creation; concurrent
    first calls wait on a lock so exactly one store is created. A failed
    open is not cached, so calling again retries.

    Args:
        db_path: Database path used on the first call only

    Raises:
        StorageUnavailableError: If the database cannot be opened
    """
    global _default_store
    if _default_store is None:
        with _store_lock:
            if _default_store is None:
                _default_store = RecordStore(db_path)
                logger.info(f"Record store opened at {_default_store.db_path}")
    elif db_path is not None and Path(db_path) != _default_store.db_path:
        logger.warning(
            f"open_store() ignoring {db_path}; store already open at "
            f"{_default_store.db_path}"
        )
    return _default_store


class BaseRepository:
    """
    Base repository class bound to a record store.

    Repositories share the process-wide store unless given one explicitly.
    """

    def __init__(self, store: Optional[RecordStore] = None):
        """
        Initialize the repository.

        Args:
            store: Record store to use. Defaults to :func:`open_store`
        """
        self.store = store or open_store()

    @contextmanager
    def _get_connection(self):
        with self.store.connection() as conn:
            yield conn


class EntityRepository(BaseRepository, Generic[R]):
    """
    CRUD operations for one entity table.

    Subclasses set ``table``, ``model`` and ``indexes`` (index name mapped
    to the column it covers).
    """

    table: str
    model: type
    indexes: dict[str, str] = {}

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_all(self) -> list[R]:
        """Get every record in the table."""
        with self._get_connection() as conn:
            cursor = conn.execute(f"SELECT * FROM {self.table}")
            return [self.model.from_row(row) for row in cursor.fetchall()]

    def get_by_index(self, index_name: str, value: Any) -> list[R]:
        """
        Get records whose indexed column equals ``value``.

        Args:
            index_name: One of the names in ``indexes``
            value: Value to match

        Returns:
            List of matching records

        Raises:
            ValueError: If the index is not declared for this table
        """
        column = self.indexes.get(index_name)
        if column is None:
            raise ValueError(
                f"Unknown index {index_name!r} for {self.table}; "
                f"expected one of {sorted(self.indexes)}"
            )
        if isinstance(value, Enum):
            value = value.value

        with self._get_connection() as conn:
            cursor = conn.execute(
                f"SELECT * FROM {self.table} WHERE {column} = ?", (value,)
            )
            return [self.model.from_row(row) for row in cursor.fetchall()]

    def get_by_id(self, record_id: str) -> Optional[R]:
        """Get a record by its id, or None if it does not exist."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                f"SELECT * FROM {self.table} WHERE id = ?", (record_id,)
            )
            row = cursor.fetchone()
            if row:
                return self.model.from_row(row)
            return None

    def count(self) -> int:
        """Count records in the table."""
        with self._get_connection() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {self.table}").fetchone()[0]

    def _get_by_date_range(
        self, start_date: DateLike, end_date: DateLike, column: str = "date"
    ) -> list[R]:
        """Records whose date column lies in [start_date, end_date]."""
        start = normalize_date(start_date, "start_date")
        end = normalize_date(end_date, "end_date")
        with self._get_connection() as conn:
            cursor = conn.execute(
                f"""
                SELECT * FROM {self.table}
                WHERE {column} >= ? AND {column} <= ?
                ORDER BY {column} ASC
                """,
                (start, end),
            )
            return [self.model.from_row(row) for row in cursor.fetchall()]

    # =========================================================================
    # Write Operations
    # =========================================================================

    def add(self, data: dict) -> R:
        """
        Create a new record.

        Args:
            data: Field values (camelCase or snake_case). Any id or
                timestamp keys are ignored and stamped here.

        Returns:
            The stored record

        Raises:
            ValueError: If a field is unknown or a value is invalid
        """
        values = self.model.normalize_keys(data)
        for name in self.model.SYSTEM_FIELDS:
            values.pop(name, None)

        now = utc_timestamp()
        values["id"] = generate_id()
        for stamp in ("created_at", "updated_at"):
            if stamp in self.model.SYSTEM_FIELDS:
                values[stamp] = now

        record = self.model(**values)

        with self._get_connection() as conn:
            insert_record(conn, self.table, record)

        logger.info(f"Added {self.table} record {record.id}")
        return record

    def update(self, record_id: str, patch: dict) -> Optional[R]:
        """
        Merge a partial patch into an existing record.

        The patch wins over stored values. The id and timestamps are not
        patchable; ``updated_at`` is refreshed.

        Args:
            record_id: Id of the record to update
            patch: Fields to change (camelCase or snake_case)

        Returns:
            The updated record, or None if no record has that id

        Raises:
            ValueError: If a field is unknown or a merged value is invalid
        """
        changes = self.model.normalize_keys(patch)
        for name in self.model.SYSTEM_FIELDS:
            changes.pop(name, None)

        existing = self.get_by_id(record_id)
        if existing is None:
            logger.debug(f"No {self.table} record {record_id} to update")
            return None

        merged = {**existing.to_row(), **changes, "id": record_id}
        if "updated_at" in merged:
            merged["updated_at"] = utc_timestamp()
        record = self.model(**merged)

        row = record.to_row()
        assignments = ", ".join(f"{name} = :{name}" for name in row if name != "id")
        with self._get_connection() as conn:
            conn.execute(
                f"UPDATE {self.table} SET {assignments} WHERE id = :id", row
            )

        logger.info(f"Updated {self.table} record {record_id}")
        return record

    def delete(self, record_id: str) -> bool:
        """
        Delete a record by id.

        Deleting an id that does not exist is not an error. Records that
        reference this one are left in place.

        Returns:
            Always True
        """
        with self._get_connection() as conn:
            cursor = conn.execute(
                f"DELETE FROM {self.table} WHERE id = ?", (record_id,)
            )
            if cursor.rowcount > 0:
                logger.info(f"Deleted {self.table} record {record_id}")
            else:
                logger.debug(f"No {self.table} record {record_id} to delete")
        return True
