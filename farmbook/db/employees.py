"""Employees repository module."""

from farmbook.models.types import EmployeeStatus

from .base import EntityRepository
from .models import Employee


class EmployeeRepository(EntityRepository[Employee]):
    """Repository for farm workers."""

    table = "employees"
    model = Employee
    indexes = {"by_status": "status"}

    def get_active(self) -> list[Employee]:
        """Get employees currently on the roster."""
        return self.get_by_index("by_status", EmployeeStatus.ACTIVE)
