"""
Queries repository module for balances and derived financial figures.

Handles all read-only aggregations over the record store:
- Cash balance and period income/expense summaries
- Activity profitability and labor cost
- Asset value and depreciation
- Rental income expected vs received

Nothing here is cached; every call recomputes from the stored rows. A
figure built from several queries may observe a write that lands between
them (read skew).
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from farmbook.models.dates import DateLike, month_bounds, normalize_date
from farmbook.models.depreciation import monthly_depreciation
from farmbook.models.types import AssetStatus, RentalStatus, TransactionType

from .base import BaseRepository
from .models import Asset

logger = logging.getLogger(__name__)


@dataclass
class PeriodSummary:
    """Income, expenses and profit over some scope."""

    income: float
    expenses: float
    profit: float

    @classmethod
    def from_totals(cls, income: float, expenses: float) -> "PeriodSummary":
        return cls(income=income, expenses=expenses, profit=income - expenses)

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "income": self.income,
            "expenses": self.expenses,
            "profit": self.profit,
        }


class QueryRepository(BaseRepository):
    """
    Repository for balance calculations and analytics queries.

    Provides read-only query operations for analyzing farm records.
    """

    # =========================================================================
    # Cashbook
    # =========================================================================

    def get_cash_balance(self) -> float:
        """Get the running cash balance: all income minus all expenses."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                """
                SELECT
                    COALESCE(SUM(
                        CASE WHEN type = ? THEN amount ELSE 0 END
                    ), 0) -
                    COALESCE(SUM(
                        CASE WHEN type = ? THEN amount ELSE 0 END
                    ), 0) as balance
                FROM transactions
                """,
                (TransactionType.INCOME.value, TransactionType.EXPENSE.value),
            )
            result = cursor.fetchone()
            return float(result[0]) if result else 0.0

    def get_period_summary(
        self, start_date: DateLike, end_date: DateLike
    ) -> PeriodSummary:
        """
        Get income, expenses and profit for transactions in a date range.

        Args:
            start_date: Start date (inclusive)
            end_date: End date (inclusive)

        Returns:
            PeriodSummary for the range
        """
        start = normalize_date(start_date, "start_date")
        end = normalize_date(end_date, "end_date")

        with self._get_connection() as conn:
            cursor = conn.execute(
                """
                SELECT
                    COALESCE(SUM(
                        CASE WHEN type = ? THEN amount ELSE 0 END
                    ), 0) as income,
                    COALESCE(SUM(
                        CASE WHEN type = ? THEN amount ELSE 0 END
                    ), 0) as expenses
                FROM transactions
                WHERE date >= ? AND date <= ?
                """,
                (
                    TransactionType.INCOME.value,
                    TransactionType.EXPENSE.value,
                    start,
                    end,
                ),
            )
            row = cursor.fetchone()
            return PeriodSummary.from_totals(
                float(row["income"]), float(row["expenses"])
            )

    def get_month_to_date_summary(self, today: Optional[date] = None) -> PeriodSummary:
        """
        Get income, expenses and profit for the current calendar month.

        Args:
            today: Any day of the month to summarize (defaults to today)

        Returns:
            PeriodSummary from the first to the last day of that month
        """
        start, end = month_bounds(today)
        return self.get_period_summary(start, end)

    # =========================================================================
    # Activities and Labor
    # =========================================================================

    def get_activity_profitability(self, activity_id: str) -> PeriodSummary:
        """
        Sum the income and expense logged in an activity's records.

        Records without an income or expense value count as zero.
        """
        with self._get_connection() as conn:
            row = conn.execute(
                """
                SELECT
                    COALESCE(SUM(COALESCE(income, 0)), 0) as income,
                    COALESCE(SUM(COALESCE(expense, 0)), 0) as expenses
                FROM activity_records
                WHERE activity_id = ?
                """,
                (activity_id,),
            ).fetchone()
            return PeriodSummary.from_totals(
                float(row["income"]), float(row["expenses"])
            )

    def get_labor_cost_by_activity(self, activity_id: str) -> float:
        """Total labor amount charged to an activity."""
        with self._get_connection() as conn:
            row = conn.execute(
                """
                SELECT COALESCE(SUM(amount), 0)
                FROM labor_entries
                WHERE activity_id = ?
                """,
                (activity_id,),
            ).fetchone()
            return float(row[0])

    def get_total_labor_cost(self, start_date: DateLike, end_date: DateLike) -> float:
        """
        Total labor amount for entries dated within a range.

        Args:
            start_date: Start date (inclusive)
            end_date: End date (inclusive)
        """
        start = normalize_date(start_date, "start_date")
        end = normalize_date(end_date, "end_date")

        with self._get_connection() as conn:
            row = conn.execute(
                """
                SELECT COALESCE(SUM(amount), 0)
                FROM labor_entries
                WHERE date >= ? AND date <= ?
                """,
                (start, end),
            ).fetchone()
            return float(row[0])

    # =========================================================================
    # Assets
    # =========================================================================

    def _get_active_assets(self) -> list[Asset]:
        with self._get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM assets WHERE status = ?", (AssetStatus.ACTIVE.value,)
            )
            return [Asset.from_row(row) for row in cursor.fetchall()]

    def get_total_asset_value(self) -> float:
        """Sum of the saved current value of all active assets."""
        return sum(asset.current_value for asset in self._get_active_assets())

    def get_total_depreciation_this_month(self) -> float:
        """Sum of the monthly depreciation charge of all active assets."""
        return sum(monthly_depreciation(asset) for asset in self._get_active_assets())

    # =========================================================================
    # Rentals
    # =========================================================================

    def get_monthly_rental_income(self) -> float:
        """Expected monthly income: the rate of every active rental."""
        with self._get_connection() as conn:
            row = conn.execute(
                """
                SELECT COALESCE(SUM(monthly_rate), 0)
                FROM rentals
                WHERE status = ?
                """,
                (RentalStatus.ACTIVE.value,),
            ).fetchone()
            return float(row[0])

    def get_total_rental_income_this_month(self, today: Optional[date] = None) -> float:
        """
        Rental payments actually received in the current calendar month.

        Args:
            today: Any day of the month to total (defaults to today)
        """
        start, end = month_bounds(today)

        with self._get_connection() as conn:
            row = conn.execute(
                """
                SELECT COALESCE(SUM(amount), 0)
                FROM rental_payments
                WHERE date >= ? AND date <= ?
                """,
                (start, end),
            ).fetchone()
            return float(row[0])

    def get_rental_payments_total(self, rental_id: str) -> float:
        """Total payments received for one rental."""
        with self._get_connection() as conn:
            row = conn.execute(
                """
                SELECT COALESCE(SUM(amount), 0)
                FROM rental_payments
                WHERE rental_id = ?
                """,
                (rental_id,),
            ).fetchone()
            return float(row[0])
