"""
Main repository facade for Farmbook.

Composes the entity repositories and the query repository behind a single
object so callers can address every operation by name. All
sub-repositories share one record store.
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

from farmbook.models.dates import DateLike
from farmbook.models.depreciation import book_value, monthly_depreciation

from .activities import ActivityRecordRepository, ActivityRepository
from .assets import AssetRepository
from .base import RecordStore, open_store
from .employees import EmployeeRepository
from .labor import LaborRepository
from .models import (
    Activity,
    ActivityRecord,
    Asset,
    Employee,
    FarmSettings,
    LaborEntry,
    Rental,
    RentalPayment,
    Transaction,
)
from .queries import PeriodSummary, QueryRepository
from .rentals import RentalPaymentRepository, RentalRepository
from .settings import SettingsRepository
from .transactions import TransactionRepository

logger = logging.getLogger(__name__)


class FarmRepository:
    """Facade over every farm record repository and aggregation."""

    def __init__(self, store: Optional[RecordStore] = None):
        """
        Initialize the facade and its sub-repositories.

        Args:
            store: Record store to use. Defaults to the process-wide store
        """
        self.store = store or open_store()

        self.transactions = TransactionRepository(self.store)
        self.employees = EmployeeRepository(self.store)
        self.labor = LaborRepository(self.store)
        self.activities = ActivityRepository(self.store)
        self.activity_records = ActivityRecordRepository(self.store)
        self.assets = AssetRepository(self.store)
        self.rentals = RentalRepository(self.store)
        self.rental_payments = RentalPaymentRepository(self.store)
        self.settings = SettingsRepository(self.store)
        self.queries = QueryRepository(self.store)

        logger.debug(f"FarmRepository initialized on {self.store.db_path}")

    # =========================================================================
    # Transactions
    # =========================================================================

    def get_all_transactions(self) -> list[Transaction]:
        return self.transactions.get_all()

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self.transactions.get_by_id(transaction_id)

    def get_transactions_by_date(self, on_date: DateLike) -> list[Transaction]:
        return self.transactions.get_by_date(on_date)

    def get_transactions_by_date_range(
        self, start_date: DateLike, end_date: DateLike
    ) -> list[Transaction]:
        return self.transactions.get_by_date_range(start_date, end_date)

    def get_today_transactions(self) -> list[Transaction]:
        return self.transactions.get_today()

    def add_transaction(self, data: dict) -> Transaction:
        return self.transactions.add(data)

    def update_transaction(
        self, transaction_id: str, patch: dict
    ) -> Optional[Transaction]:
        return self.transactions.update(transaction_id, patch)

    def delete_transaction(self, transaction_id: str) -> bool:
        return self.transactions.delete(transaction_id)

    # =========================================================================
    # Employees
    # =========================================================================

    def get_all_employees(self) -> list[Employee]:
        return self.employees.get_all()

    def get_active_employees(self) -> list[Employee]:
        return self.employees.get_active()

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        return self.employees.get_by_id(employee_id)

    def add_employee(self, data: dict) -> Employee:
        return self.employees.add(data)

    def update_employee(self, employee_id: str, patch: dict) -> Optional[Employee]:
        return self.employees.update(employee_id, patch)

    def delete_employee(self, employee_id: str) -> bool:
        return self.employees.delete(employee_id)

    # =========================================================================
    # Labor
    # =========================================================================

    def get_all_labor_entries(self) -> list[LaborEntry]:
        return self.labor.get_all()

    def get_labor_entry(self, entry_id: str) -> Optional[LaborEntry]:
        return self.labor.get_by_id(entry_id)

    def get_labor_entries_by_date(self, on_date: DateLike) -> list[LaborEntry]:
        return self.labor.get_by_date(on_date)

    def get_labor_entries_by_date_range(
        self, start_date: DateLike, end_date: DateLike
    ) -> list[LaborEntry]:
        return self.labor.get_by_date_range(start_date, end_date)

    def get_labor_entries_by_employee(self, employee_id: str) -> list[LaborEntry]:
        return self.labor.get_by_employee(employee_id)

    def add_labor_entry(self, data: dict) -> LaborEntry:
        return self.labor.add(data)

    def update_labor_entry(self, entry_id: str, patch: dict) -> Optional[LaborEntry]:
        return self.labor.update(entry_id, patch)

    def delete_labor_entry(self, entry_id: str) -> bool:
        return self.labor.delete(entry_id)

    # =========================================================================
    # Activities
    # =========================================================================

    def get_all_activities(self) -> list[Activity]:
        return self.activities.get_all()

    def get_active_activities(self) -> list[Activity]:
        return self.activities.get_active()

    def get_activity(self, activity_id: str) -> Optional[Activity]:
        return self.activities.get_by_id(activity_id)

    def add_activity(self, data: dict) -> Activity:
        return self.activities.add(data)

    def update_activity(self, activity_id: str, patch: dict) -> Optional[Activity]:
        return self.activities.update(activity_id, patch)

    def delete_activity(self, activity_id: str) -> bool:
        return self.activities.delete(activity_id)

    def get_all_activity_records(self) -> list[ActivityRecord]:
        return self.activity_records.get_all()

    def get_activity_records_by_activity(
        self, activity_id: str
    ) -> list[ActivityRecord]:
        return self.activity_records.get_by_activity(activity_id)

    def add_activity_record(self, data: dict) -> ActivityRecord:
        return self.activity_records.add(data)

    def update_activity_record(
        self, record_id: str, patch: dict
    ) -> Optional[ActivityRecord]:
        return self.activity_records.update(record_id, patch)

    def delete_activity_record(self, record_id: str) -> bool:
        return self.activity_records.delete(record_id)

    # =========================================================================
    # Assets
    # =========================================================================

    def get_all_assets(self) -> list[Asset]:
        return self.assets.get_all()

    def get_active_assets(self) -> list[Asset]:
        return self.assets.get_active()

    def get_asset(self, asset_id: str) -> Optional[Asset]:
        return self.assets.get_by_id(asset_id)

    def add_asset(self, data: dict) -> Asset:
        return self.assets.add(data)

    def update_asset(self, asset_id: str, patch: dict) -> Optional[Asset]:
        return self.assets.update(asset_id, patch)

    def delete_asset(self, asset_id: str) -> bool:
        return self.assets.delete(asset_id)

    # =========================================================================
    # Rentals
    # =========================================================================

    def get_all_rentals(self) -> list[Rental]:
        return self.rentals.get_all()

    def get_active_rentals(self) -> list[Rental]:
        return self.rentals.get_active()

    def get_rental(self, rental_id: str) -> Optional[Rental]:
        return self.rentals.get_by_id(rental_id)

    def add_rental(self, data: dict) -> Rental:
        return self.rentals.add(data)

    def update_rental(self, rental_id: str, patch: dict) -> Optional[Rental]:
        return self.rentals.update(rental_id, patch)

    def delete_rental(self, rental_id: str) -> bool:
        return self.rentals.delete(rental_id)

    def get_rental_payments(self, rental_id: str) -> list[RentalPayment]:
        return self.rental_payments.get_by_rental(rental_id)

    def add_rental_payment(self, data: dict) -> RentalPayment:
        return self.rental_payments.add(data)

    def delete_rental_payment(self, payment_id: str) -> bool:
        return self.rental_payments.delete(payment_id)

    # =========================================================================
    # Settings
    # =========================================================================

    def get_settings(self) -> FarmSettings:
        return self.settings.get()

    def update_settings(self, patch: dict) -> FarmSettings:
        return self.settings.update(patch)

    # =========================================================================
    # Aggregations
    # =========================================================================

    def get_cash_balance(self) -> float:
        return self.queries.get_cash_balance()

    def get_month_to_date_summary(self, today: Optional[date] = None) -> PeriodSummary:
        return self.queries.get_month_to_date_summary(today)

    def get_activity_profitability(self, activity_id: str) -> PeriodSummary:
        return self.queries.get_activity_profitability(activity_id)

    def get_labor_cost_by_activity(self, activity_id: str) -> float:
        return self.queries.get_labor_cost_by_activity(activity_id)

    def get_total_labor_cost(self, start_date: DateLike, end_date: DateLike) -> float:
        return self.queries.get_total_labor_cost(start_date, end_date)

    def calculate_depreciation(
        self, asset: Asset, as_of: Optional[Union[date, datetime]] = None
    ) -> float:
        """Current book value of an asset."""
        return book_value(asset, as_of)

    def get_monthly_depreciation(self, asset: Asset) -> float:
        return monthly_depreciation(asset)

    def get_total_asset_value(self) -> float:
        return self.queries.get_total_asset_value()

    def get_total_depreciation_this_month(self) -> float:
        return self.queries.get_total_depreciation_this_month()

    def get_monthly_rental_income(self) -> float:
        return self.queries.get_monthly_rental_income()

    def get_total_rental_income_this_month(self, today: Optional[date] = None) -> float:
        return self.queries.get_total_rental_income_this_month(today)

    def get_rental_payments_total(self, rental_id: str) -> float:
        return self.queries.get_rental_payments_total(rental_id)


# Singleton instance
_default_repository: Optional[FarmRepository] = None


def get_repository(db_path: Optional[Union[str, Path]] = None) -> FarmRepository:
    """Get or create the default repository instance."""
    global _default_repository
    if _default_repository is None:
        _default_repository = FarmRepository(open_store(db_path))
    return _default_repository
