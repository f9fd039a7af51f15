"""
Tests for the profit & loss statement, dashboard and labor ledger.
"""

import json

import pytest

from farmbook.services import ReportService


@pytest.fixture
def reports(repo):
    return ReportService(repo)


def add_txn(repo, txn_type, category, amount, on="2024-03-10"):
    return repo.add_transaction(
        {"date": on, "type": txn_type, "category": category, "amount": amount}
    )


class TestProfitAndLoss:
    """Tests for the profit & loss statement."""

    def test_statement_totals(self, repo, reports, employee, tractor):
        """Test grouping by category plus labor and depreciation."""
        add_txn(repo, "income", "Sales", 5000)
        add_txn(repo, "income", "Sales", 1000)
        add_txn(repo, "income", "Rental", 3000)
        add_txn(repo, "expense", "Feed", 2000)
        add_txn(repo, "expense", "Feed", 500, on="2024-02-28")
        repo.add_labor_entry(
            {
                "date": "2024-03-05",
                "employeeId": employee.id,
                "hoursWorked": 8,
                "amount": 500,
            }
        )

        statement = reports.profit_and_loss("2024-03-01", "2024-03-31")

        income = {c.category: c.amount for c in statement.income}
        assert income == {"Sales": pytest.approx(6000), "Rental": pytest.approx(3000)}
        assert [(c.category, c.amount) for c in statement.expenses] == [("Feed", 2000)]
        assert statement.labor_cost == pytest.approx(500)
        assert statement.depreciation == pytest.approx(1000)
        assert statement.total_income == pytest.approx(9000)
        assert statement.total_expenses == pytest.approx(3500)
        assert statement.net_profit == pytest.approx(5500)

    def test_empty_period(self, reports):
        """Test that an empty period yields a zero statement."""
        statement = reports.profit_and_loss("2024-03-01", "2024-03-31")
        assert statement.income == []
        assert statement.expenses == []
        assert statement.net_profit == 0
        assert statement.profit_margin == 0

    def test_profit_margin(self, repo, reports):
        """Test net profit as a share of income."""
        add_txn(repo, "income", "Sales", 4000)
        add_txn(repo, "expense", "Seed", 1000)
        statement = reports.profit_and_loss("2024-03-01", "2024-03-31")
        assert statement.profit_margin == pytest.approx(75)

    def test_export_document(self, repo, reports):
        """Test the exported statement shape."""
        add_txn(repo, "income", "Sales", 4000)
        statement = reports.profit_and_loss("2024-03-01", "2024-03-31")

        document = json.loads(statement.to_json())
        assert document["type"] == "Profit & Loss Statement"
        assert document["period"] == "2024-03-01 - 2024-03-31"
        assert document["generatedAt"]
        assert document["data"]["totalIncome"] == 4000
        assert document["data"]["income"] == [{"category": "Sales", "amount": 4000}]
        assert statement.get_filename() == "profit-loss-2024-03-01-to-2024-03-31.json"

    def test_bad_range_rejected(self, reports):
        """Test that malformed dates raise ValueError."""
        with pytest.raises(ValueError):
            reports.profit_and_loss("March", "2024-03-31")


class TestDashboard:
    """Tests for the dashboard snapshot."""

    def add_activity(self, repo, name, income, expense):
        activity = repo.add_activity({"name": name, "type": "crop"})
        repo.add_activity_record(
            {
                "activityId": activity.id,
                "date": "2024-03-01",
                "income": income,
                "expense": expense,
            }
        )
        return activity

    def test_snapshot(self, repo, reports, employee, today):
        """Test the headline figures for a month."""
        add_txn(repo, "income", "Sales", 8000, on="2024-03-02")
        add_txn(repo, "expense", "Feed", 3000, on="2024-03-03")
        add_txn(repo, "income", "Sales", 1000, on="2024-01-15")
        repo.add_labor_entry(
            {
                "date": "2024-03-04",
                "employeeId": employee.id,
                "hoursWorked": 8,
                "amount": 2000,
            }
        )

        snapshot = reports.dashboard(today)
        assert snapshot.cash_balance == pytest.approx(6000)
        assert snapshot.month_summary.profit == pytest.approx(5000)
        assert snapshot.labor_cost == pytest.approx(2000)
        assert snapshot.labor_percent == pytest.approx(25.0)

    def test_labor_percent_without_income(self, repo, reports, employee, today):
        """Test that labor share is zero when there is no income."""
        repo.add_labor_entry(
            {
                "date": "2024-03-04",
                "employeeId": employee.id,
                "hoursWorked": 8,
                "amount": 2000,
            }
        )
        assert reports.dashboard(today).labor_percent == 0

    def test_top_and_worst_activities(self, repo, reports, today):
        """Test ranking of activities by profit."""
        self.add_activity(repo, "Beans", 500, 0)
        self.add_activity(repo, "Maize", 9000, 1000)
        self.add_activity(repo, "Poultry", 1000, 4000)
        self.add_activity(repo, "Goats", 3000, 1000)

        snapshot = reports.dashboard(today)
        assert [a.name for a in snapshot.top_activities] == ["Maize", "Goats", "Beans"]
        assert snapshot.worst_activity.name == "Poultry"
        assert snapshot.worst_activity.profit == pytest.approx(-3000)

    def test_no_activities(self, reports, today):
        """Test the snapshot with no activities."""
        snapshot = reports.dashboard(today)
        assert snapshot.top_activities == []
        assert snapshot.worst_activity is None


class TestLaborLedger:
    """Tests for the labor ledger with resolved names."""

    def test_names_resolved(self, repo, reports, employee, activity):
        """Test that known references show their names."""
        repo.add_labor_entry(
            {
                "date": "2024-03-04",
                "employeeId": employee.id,
                "activityId": activity.id,
                "hoursWorked": 8,
                "amount": 2000,
            }
        )
        [row] = reports.labor_ledger("2024-03-01", "2024-03-31")
        assert row.employee_name == "Okello"
        assert row.activity_name == "Maize season A"

    def test_dangling_references_use_fallbacks(self, repo, reports, employee, activity):
        """Test the fallback labels for missing or unset references."""
        repo.add_labor_entry(
            {"date": "2024-03-04", "employeeId": "ghost", "hoursWorked": 8, "amount": 2000}
        )
        repo.add_labor_entry(
            {
                "date": "2024-03-05",
                "employeeId": employee.id,
                "activityId": activity.id,
                "hoursWorked": 4,
                "amount": 1000,
            }
        )
        repo.delete_employee(employee.id)
        repo.delete_activity(activity.id)

        rows = reports.labor_ledger("2024-03-01", "2024-03-31")
        assert [(r.employee_name, r.activity_name) for r in rows] == [
            ("Unknown", "General"),
            ("Unknown", "General"),
        ]
