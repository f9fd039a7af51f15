"""
Database module for Farmbook.

This module provides the local persistence layer: the record store, one
repository per entity, the aggregation queries and the facade that ties
them together.

Structure:
- base.py: Record store, schema, process-wide handle and generic CRUD
- models.py: Stored records (Transaction, Employee, Asset, etc.)
- transactions.py, employees.py, labor.py, activities.py, assets.py,
  rentals.py, settings.py: Entity repositories
- queries.py: Balances and derived financial figures
- repository.py: Main facade that composes all sub-repositories
"""

from .activities import ActivityRecordRepository, ActivityRepository
from .assets import AssetRepository
from .base import (
    BaseRepository,
    EntityRepository,
    RecordStore,
    StorageUnavailableError,
    generate_id,
    open_store,
)
from .employees import EmployeeRepository
from .labor import LaborRepository
from .models import (
    Activity,
    ActivityRecord,
    Asset,
    Employee,
    FarmSettings,
    LaborEntry,
    Record,
    Rental,
    RentalPayment,
    Transaction,
)
from .queries import PeriodSummary, QueryRepository
from .rentals import RentalPaymentRepository, RentalRepository
from .repository import FarmRepository, get_repository
from .settings import SettingsRepository
from .transactions import TransactionRepository

__all__ = [
    # Base
    "BaseRepository",
    "EntityRepository",
    "RecordStore",
    "StorageUnavailableError",
    "generate_id",
    "open_store",
    # Models
    "Activity",
    "ActivityRecord",
    "Asset",
    "Employee",
    "FarmSettings",
    "LaborEntry",
    "Record",
    "Rental",
    "RentalPayment",
    "Transaction",
    # Repositories
    "ActivityRecordRepository",
    "ActivityRepository",
    "AssetRepository",
    "EmployeeRepository",
    "FarmRepository",
    "LaborRepository",
    "QueryRepository",
    "RentalPaymentRepository",
    "RentalRepository",
    "SettingsRepository",
    "TransactionRepository",
    # Results
    "PeriodSummary",
    # Utilities
    "get_repository",
]
