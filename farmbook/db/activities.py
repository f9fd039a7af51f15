"""
Activities repository module.

Handles farm activities (crops, livestock, services) and the records
logged against them. Records are not removed when their activity is
deleted.
"""

from farmbook.models.types import ActivityStatus

from .base import EntityRepository
from .models import Activity, ActivityRecord


class ActivityRepository(EntityRepository[Activity]):
    """Repository for farm activities."""

    table = "activities"
    model = Activity
    indexes = {
        "by_status": "status",
        "by_type": "type",
    }

    def get_active(self) -> list[Activity]:
        """Get activities that are still running."""
        return self.get_by_index("by_status", ActivityStatus.ACTIVE)


class ActivityRecordRepository(EntityRepository[ActivityRecord]):
    """Repository for production and money records of an activity."""

    table = "activity_records"
    model = ActivityRecord
    indexes = {
        "by_date": "date",
        "by_activity": "activity_id",
    }

    def get_by_activity(self, activity_id: str) -> list[ActivityRecord]:
        """Get every record logged against an activity."""
        return self.get_by_index("by_activity", activity_id)
