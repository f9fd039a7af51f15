from .dates import month_bounds, normalize_date, normalize_optional_date
from .depreciation import book_value, monthly_depreciation, years_owned
from .types import (
    ActivityStatus,
    ActivityType,
    AssetCategory,
    AssetStatus,
    DepreciationMethod,
    EmployeeStatus,
    LaborType,
    RentalStatus,
    TransactionType,
)

__all__ = [
    "ActivityStatus",
    "ActivityType",
    "AssetCategory",
    "AssetStatus",
    "DepreciationMethod",
    "EmployeeStatus",
    "LaborType",
    "RentalStatus",
    "TransactionType",
    "book_value",
    "month_bounds",
    "monthly_depreciation",
    "normalize_date",
    "normalize_optional_date",
    "years_owned",
]
