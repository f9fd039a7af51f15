"""
Closed value sets for farm bookkeeping records.

Every enum is a ``str`` subclass so values compare equal to their stored
text and serialize to JSON without conversion.
"""

from enum import Enum


class TransactionType(str, Enum):
    """Direction of a cashbook transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class LaborType(str, Enum):
    """
    How a labor entry is charged.

    - DIRECT: Work done for a single activity
    - SHARED: General farm work split across activities
    """

    DIRECT = "direct"
    SHARED = "shared"


class ActivityType(str, Enum):
    CROP = "crop"
    LIVESTOCK = "livestock"
    SERVICE = "service"
    OTHER = "other"


class ActivityStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AssetCategory(str, Enum):
    EQUIPMENT = "equipment"
    VEHICLE = "vehicle"
    BUILDING = "building"
    LAND = "land"
    OTHER = "other"


class AssetStatus(str, Enum):
    ACTIVE = "active"
    DISPOSED = "disposed"
    SOLD = "sold"


class DepreciationMethod(str, Enum):
    """
    Depreciation schedule used for an asset.

    - STRAIGHT_LINE: Equal charge every year over the useful life
    - DECLINING_BALANCE: Fixed percentage of the remaining value per year
    """

    STRAIGHT_LINE = "straight-line"
    DECLINING_BALANCE = "declining-balance"


class RentalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
