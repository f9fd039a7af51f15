"""
Transactions repository module for the daily cashbook.

Handles cashbook CRUD plus the date lookups used by the cashbook and
report views.
"""

from farmbook.models.dates import DateLike, normalize_date, today_iso

from .base import EntityRepository
from .models import Transaction


class TransactionRepository(EntityRepository[Transaction]):
    """Repository for cashbook income and expense entries."""

    table = "transactions"
    model = Transaction
    indexes = {
        "by_date": "date",
        "by_type": "type",
        "by_category": "category",
    }

    def get_by_date(self, on_date: DateLike) -> list[Transaction]:
        """Get all transactions recorded on a single day."""
        return self.get_by_index("by_date", normalize_date(on_date))

    def get_by_date_range(
        self, start_date: DateLike, end_date: DateLike
    ) -> list[Transaction]:
        """
        Get transactions within a date range.

        Args:
            start_date: Start date (inclusive)
            end_date: End date (inclusive)

        Returns:
            List of Transaction objects ordered by date
        """
        return self._get_by_date_range(start_date, end_date)

    def get_today(self) -> list[Transaction]:
        """Get all transactions dated today."""
        return self.get_by_date(today_iso())
