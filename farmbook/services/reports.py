"""
Report service for farm financial statements.

Builds the profit & loss statement, the dashboard snapshot and the labor
ledger from the repository facade. Every report is recomputed on request.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

import pandas as pd

from farmbook.config import (
    BACKUP_JSON_INDENT,
    GENERAL_ACTIVITY_LABEL,
    TOP_ACTIVITIES_COUNT,
    UNKNOWN_EMPLOYEE_LABEL,
)
from farmbook.db import FarmRepository, PeriodSummary
from farmbook.models.dates import DateLike, month_bounds, normalize_date, utc_timestamp
from farmbook.models.types import LaborType, TransactionType

logger = logging.getLogger(__name__)


@dataclass
class CategoryTotal:
    """Amount summed over one transaction category."""

    category: str
    amount: float

    def to_dict(self) -> dict:
        return {"category": self.category, "amount": self.amount}


@dataclass
class ProfitLossStatement:
    """Profit & loss over a date range."""

    start_date: str
    end_date: str
    income: list[CategoryTotal]
    expenses: list[CategoryTotal]
    total_income: float
    total_expenses: float
    labor_cost: float
    depreciation: float
    net_profit: float

    @property
    def profit_margin(self) -> float:
        """Net profit as a percentage of income (0 when there is no income)."""
        if self.total_income <= 0:
            return 0.0
        return self.net_profit / self.total_income * 100

    def to_dict(self) -> dict:
        """Export representation of the statement."""
        return {
            "type": "Profit & Loss Statement",
            "period": f"{self.start_date} - {self.end_date}",
            "generatedAt": utc_timestamp(),
            "data": {
                "income": [c.to_dict() for c in self.income],
                "expenses": [c.to_dict() for c in self.expenses],
                "totalIncome": self.total_income,
                "totalExpenses": self.total_expenses,
                "laborCost": self.labor_cost,
                "depreciation": self.depreciation,
                "netProfit": self.net_profit,
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=BACKUP_JSON_INDENT)

    def get_filename(self) -> str:
        return f"profit-loss-{self.start_date}-to-{self.end_date}.json"


@dataclass
class ActivityProfit:
    """Profit of one activity from its logged records."""

    activity_id: str
    name: str
    profit: float


@dataclass
class DashboardSnapshot:
    """Headline figures for the current month."""

    cash_balance: float
    month_summary: PeriodSummary
    labor_cost: float
    labor_percent: float
    top_activities: list[ActivityProfit] = field(default_factory=list)
    worst_activity: Optional[ActivityProfit] = None


@dataclass
class LaborLedgerRow:
    """A labor entry with its employee and activity names resolved."""

    entry_id: str
    date: str
    employee_name: str
    activity_name: str
    labor_type: LaborType
    hours_worked: float
    amount: float
    notes: Optional[str] = None


class ReportService:
    """Service for building financial reports over the farm records."""

    def __init__(self, repository: FarmRepository):
        self.repository = repository

    def profit_and_loss(
        self, start_date: DateLike, end_date: DateLike
    ) -> ProfitLossStatement:
        """
        Build the profit & loss statement for a date range.

        Income and expenses are grouped by category. Labor over the range
        and the current month's depreciation are added to expenses.

        Args:
            start_date: Start date (inclusive)
            end_date: End date (inclusive)

        Returns:
            ProfitLossStatement for the range
        """
        start = normalize_date(start_date, "start_date")
        end = normalize_date(end_date, "end_date")

        transactions = self.repository.get_transactions_by_date_range(start, end)
        labor = self.repository.get_total_labor_cost(start, end)
        depreciation = self.repository.get_total_depreciation_this_month()

        df = pd.DataFrame(
            [
                {"type": t.type.value, "category": t.category, "amount": t.amount}
                for t in transactions
            ],
            columns=["type", "category", "amount"],
        )

        income = self._group_by_category(df, TransactionType.INCOME)
        expenses = self._group_by_category(df, TransactionType.EXPENSE)

        total_income = sum(c.amount for c in income)
        total_expenses = sum(c.amount for c in expenses) + labor + depreciation

        logger.debug(
            f"P&L {start}..{end}: {len(transactions)} transactions, "
            f"labor={labor}, depreciation={depreciation}"
        )

        return ProfitLossStatement(
            start_date=start,
            end_date=end,
            income=income,
            expenses=expenses,
            total_income=total_income,
            total_expenses=total_expenses,
            labor_cost=labor,
            depreciation=depreciation,
            net_profit=total_income - total_expenses,
        )

    @staticmethod
    def _group_by_category(
        df: pd.DataFrame, txn_type: TransactionType
    ) -> list[CategoryTotal]:
        subset = df[df["type"] == txn_type.value]
        if subset.empty:
            return []
        grouped = subset.groupby("category", sort=False)["amount"].sum()
        return [
            CategoryTotal(category=str(category), amount=float(amount))
            for category, amount in grouped.items()
        ]

    def activity_ranking(self) -> list[ActivityProfit]:
        """All activities ordered by profit, most profitable first."""
        ranking = [
            ActivityProfit(
                activity_id=activity.id,
                name=activity.name,
                profit=self.repository.get_activity_profitability(activity.id).profit,
            )
            for activity in self.repository.get_all_activities()
        ]
        ranking.sort(key=lambda a: a.profit, reverse=True)
        return ranking

    def dashboard(self, today: Optional[date] = None) -> DashboardSnapshot:
        """
        Build the dashboard snapshot for the month containing ``today``.

        Args:
            today: Any day of the month to report on (defaults to today)
        """
        start, end = month_bounds(today)

        summary = self.repository.get_month_to_date_summary(today)
        labor_cost = self.repository.get_total_labor_cost(start, end)
        labor_percent = (
            round(labor_cost / summary.income * 100, 1) if summary.income > 0 else 0.0
        )

        ranking = self.activity_ranking()

        return DashboardSnapshot(
            cash_balance=self.repository.get_cash_balance(),
            month_summary=summary,
            labor_cost=labor_cost,
            labor_percent=labor_percent,
            top_activities=ranking[:TOP_ACTIVITIES_COUNT],
            worst_activity=ranking[-1] if ranking else None,
        )

    def labor_ledger(
        self, start_date: DateLike, end_date: DateLike
    ) -> list[LaborLedgerRow]:
        """
        List labor entries in a date range with names resolved.

        Entries pointing at a missing employee show as "Unknown"; entries
        with no activity or a missing one show as "General".
        """
        employees = {e.id: e.name for e in self.repository.get_all_employees()}
        activities = {a.id: a.name for a in self.repository.get_all_activities()}

        rows = []
        for entry in self.repository.get_labor_entries_by_date_range(
            start_date, end_date
        ):
            rows.append(
                LaborLedgerRow(
                    entry_id=entry.id,
                    date=entry.date,
                    employee_name=employees.get(
                        entry.employee_id, UNKNOWN_EMPLOYEE_LABEL
                    ),
                    activity_name=activities.get(
                        entry.activity_id or "", GENERAL_ACTIVITY_LABEL
                    ),
                    labor_type=entry.labor_type,
                    hours_worked=entry.hours_worked,
                    amount=entry.amount,
                    notes=entry.notes,
                )
            )
        return rows
