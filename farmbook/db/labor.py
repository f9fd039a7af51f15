"""
Labor repository module.

Handles labor entry CRUD and the lookups used for payroll views and
labor cost reporting.
"""

from farmbook.models.dates import DateLike, normalize_date

from .base import EntityRepository
from .models import LaborEntry


class LaborRepository(EntityRepository[LaborEntry]):
    """
    Repository for labor entries.

    ``employee_id`` and ``activity_id`` are not checked against their
    tables; entries survive deletion of the employee or activity.
    """

    table = "labor_entries"
    model = LaborEntry
    indexes = {
        "by_date": "date",
        "by_employee": "employee_id",
        "by_activity": "activity_id",
    }

    def get_by_date(self, on_date: DateLike) -> list[LaborEntry]:
        """Get labor entries for a single day."""
        return self.get_by_index("by_date", normalize_date(on_date))

    def get_by_date_range(
        self, start_date: DateLike, end_date: DateLike
    ) -> list[LaborEntry]:
        """
        Get labor entries within a date range.

        Args:
            start_date: Start date (inclusive)
            end_date: End date (inclusive)

        Returns:
            List of LaborEntry objects ordered by date
        """
        return self._get_by_date_range(start_date, end_date)

    def get_by_employee(self, employee_id: str) -> list[LaborEntry]:
        return self.get_by_index("by_employee", employee_id)

    def get_by_activity(self, activity_id: str) -> list[LaborEntry]:
        return self.get_by_index("by_activity", activity_id)
