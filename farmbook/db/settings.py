"""
Farm settings repository module.

The settings table holds exactly one row, keyed by ``SETTINGS_ID``. It is
created with defaults the first time it is read.
"""

import logging
import sqlite3

from farmbook.config import SETTINGS_ID
from farmbook.models.dates import utc_timestamp

from .base import BaseRepository
from .models import FarmSettings

logger = logging.getLogger(__name__)


def seed_default_settings(conn: sqlite3.Connection) -> bool:
    """
    Insert the default settings row unless one already exists.

    Args:
        conn: Open connection; the caller owns the transaction

    Returns:
        True if the default row was inserted
    """
    row = FarmSettings(updated_at=utc_timestamp()).to_row()
    columns = ", ".join(row)
    placeholders = ", ".join(f":{name}" for name in row)
    # OR IGNORE: another caller may have created the row meanwhile
    cursor = conn.execute(
        f"INSERT OR IGNORE INTO settings ({columns}) VALUES ({placeholders})",
        row,
    )
    return cursor.rowcount > 0


class SettingsRepository(BaseRepository):
    """Repository for the farm profile singleton."""

    table = "settings"

    def get(self) -> FarmSettings:
        """
        Get the farm settings, creating the default row if missing.

        Returns:
            The stored FarmSettings
        """
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM settings WHERE id = ?", (SETTINGS_ID,)
            ).fetchone()
            if row:
                return FarmSettings.from_row(row)

            if seed_default_settings(conn):
                logger.info("Created default farm settings")
            stored = conn.execute(
                "SELECT * FROM settings WHERE id = ?", (SETTINGS_ID,)
            ).fetchone()
            return FarmSettings.from_row(stored)

    def update(self, patch: dict) -> FarmSettings:
        """
        Merge a partial patch into the farm settings.

        Args:
            patch: Fields to change (camelCase or snake_case)

        Returns:
            The updated FarmSettings

        Raises:
            ValueError: If a field is unknown or a merged value is invalid
        """
        changes = FarmSettings.normalize_keys(patch)
        existing = self.get()

        settings = FarmSettings(
            **{
                **existing.to_row(),
                **changes,
                "id": SETTINGS_ID,
                "updated_at": utc_timestamp(),
            }
        )

        row = settings.to_row()
        assignments = ", ".join(f"{name} = :{name}" for name in row if name != "id")
        with self._get_connection() as conn:
            conn.execute(f"UPDATE settings SET {assignments} WHERE id = :id", row)

        logger.info("Updated farm settings")
        return settings

    def get_all(self) -> list[FarmSettings]:
        """Get every settings row (used by backup)."""
        with self._get_connection() as conn:
            cursor = conn.execute("SELECT * FROM settings")
            return [FarmSettings.from_row(row) for row in cursor.fetchall()]
