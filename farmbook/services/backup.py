"""
Backup service for the whole record store.

Serializes every table to a single JSON document and restores one. A
restore replaces all existing data: records are parsed and validated
first, then the clear and every insert run in one SQLite transaction, so
a failure at any point leaves the previous data in place.
"""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Union

from farmbook.config import BACKUP_JSON_INDENT, SETTINGS_ID
from farmbook.db import (
    Activity,
    ActivityRecord,
    Asset,
    Employee,
    FarmRepository,
    FarmSettings,
    LaborEntry,
    Rental,
    RentalPayment,
    Transaction,
)
from farmbook.db.base import insert_record
from farmbook.db.settings import seed_default_settings
from farmbook.models.dates import utc_timestamp

logger = logging.getLogger(__name__)

# Document key -> (table, model). Order is the restore insert order.
BACKUP_STORES = {
    "transactions": ("transactions", Transaction),
    "employees": ("employees", Employee),
    "laborEntries": ("labor_entries", LaborEntry),
    "activities": ("activities", Activity),
    "activityRecords": ("activity_records", ActivityRecord),
    "assets": ("assets", Asset),
    "rentals": ("rentals", Rental),
    "rentalPayments": ("rental_payments", RentalPayment),
    "settings": ("settings", FarmSettings),
}


class BackupService:
    """Service for exporting and restoring the full farm database."""

    def __init__(self, repository: FarmRepository):
        """
        Initialize the backup service.

        Args:
            repository: Facade whose record store is backed up
        """
        self.repository = repository
        self.store = repository.store

    def export_all(self) -> str:
        """
        Export every table to a JSON document.

        All tables are read on one connection so the document reflects a
        single point in time.

        Returns:
            JSON text keyed by store name plus ``exportedAt``
        """
        document = {}
        with self.store.connection() as conn:
            for key, (table, model) in BACKUP_STORES.items():
                cursor = conn.execute(f"SELECT * FROM {table}")
                document[key] = [
                    model.from_row(row).to_dict() for row in cursor.fetchall()
                ]
        document["exportedAt"] = utc_timestamp()

        total = sum(len(document[key]) for key in BACKUP_STORES)
        logger.info(f"Exported {total} records")
        return json.dumps(document, indent=BACKUP_JSON_INDENT)

    def import_all(self, document: str) -> bool:
        """
        Replace all data with the contents of a backup document.

        Missing store keys restore as empty tables, except that the farm
        settings fall back to their defaults; unknown keys are ignored.
        Ids and timestamps in the document are kept as-is.

        Args:
            document: JSON text produced by :meth:`export_all`

        Returns:
            True if the restore completed, False if the document could not
            be parsed or any record could not be written. On False the
            existing data is unchanged.

        Raises:
            StorageUnavailableError: If the record store cannot be opened
        """
        try:
            data = json.loads(document)
        except (TypeError, ValueError) as e:
            logger.error(f"Backup document is not valid JSON: {e}")
            return False

        if not isinstance(data, dict):
            logger.error(
                f"Backup document must be a JSON object, got {type(data).__name__}"
            )
            return False

        try:
            records = self._build_records(data)
        except (TypeError, ValueError) as e:
            logger.error(f"Backup document contains an invalid record: {e}")
            return False

        try:
            with self.store.connection() as conn:
                for table, _ in BACKUP_STORES.values():
                    conn.execute(f"DELETE FROM {table}")
                for table, items in records.items():
                    for record in items:
                        insert_record(conn, table, record)
                if seed_default_settings(conn):
                    logger.info("Backup had no farm settings; restored defaults")
        except sqlite3.Error as e:
            logger.error(f"Restore failed and was rolled back: {e}")
            return False

        total = sum(len(items) for items in records.values())
        logger.info(f"Restored {total} records from backup")
        return True

    def _build_records(self, data: dict) -> dict[str, list]:
        """
        Parse every store in the document into model instances.

        Raises:
            ValueError: If a store is not a list or a record is invalid
            TypeError: If a record is missing required fields
        """
        records = {}
        for key, (table, model) in BACKUP_STORES.items():
            items = data.get(key) or []
            if not isinstance(items, list):
                raise ValueError(f"{key} must be a list, got {type(items).__name__}")

            parsed = []
            for index, item in enumerate(items):
                if not isinstance(item, dict):
                    raise ValueError(f"{key}[{index}] must be an object")
                parsed.append(model.from_dict(item))
            records[table] = parsed

        for settings in records["settings"]:
            if settings.id != SETTINGS_ID:
                raise ValueError(
                    f"settings id must be {SETTINGS_ID!r}, got {settings.id!r}"
                )
        return records

    # =========================================================================
    # Files
    # =========================================================================

    def backup_to_file(self, path: Union[str, Path]) -> Path:
        """Write a backup document to ``path`` and return the path."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.export_all(), encoding="utf-8")
        logger.info(f"Backup written to {path}")
        return path

    def restore_from_file(self, path: Union[str, Path]) -> bool:
        """
        Restore from a backup file.

        Returns:
            False if the file cannot be read or the restore fails
        """
        try:
            document = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not read backup file {path}: {e}")
            return False
        return self.import_all(document)

    def get_filename(self) -> str:
        """Suggested filename for a backup taken now."""
        date_str = datetime.now().strftime("%Y%m%d")
        return f"farmbook_backup_{date_str}.json"
