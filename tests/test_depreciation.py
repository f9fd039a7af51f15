"""
Tests for asset book value and monthly depreciation.
"""

from datetime import date, datetime, timedelta

import pytest

from farmbook.db import Asset
from farmbook.models import book_value, monthly_depreciation, years_owned

PURCHASED = datetime(2020, 1, 1)


def after_years(years: float) -> datetime:
    return PURCHASED + timedelta(days=365.25 * years)


def make_asset(**overrides) -> Asset:
    data = {
        "id": "a1",
        "name": "Tractor",
        "category": "equipment",
        "purchase_date": "2020-01-01",
        "purchase_price": 120000,
        "current_value": 120000,
        "depreciation_rate": 10,
        "depreciation_method": "straight-line",
        "useful_life": 10,
    }
    data.update(overrides)
    return Asset(**data)


class TestYearsOwned:
    """Tests for the elapsed-time helper."""

    def test_fractional_years(self):
        """Test a 365.25-day year."""
        assert years_owned("2020-01-01", after_years(2.5)) == pytest.approx(2.5)

    def test_date_reference_is_midnight(self):
        """Test that a plain date is taken at midnight."""
        assert years_owned("2020-01-01", date(2020, 1, 1)) == 0

    def test_future_purchase_clamped(self):
        """Test that a purchase after the reference date owns zero years."""
        assert years_owned("2030-01-01", PURCHASED) == 0


class TestStraightLine:
    """Tests for straight-line book value."""

    def test_half_life(self):
        """Test 120000 over 10 years after 5 years."""
        value = book_value(make_asset(), after_years(5))
        assert value == pytest.approx(60000, abs=1)

    def test_at_purchase(self):
        """Test that a new asset is worth its price."""
        assert book_value(make_asset(), PURCHASED) == pytest.approx(120000)

    def test_never_negative(self):
        """Test that value stops at zero past the useful life."""
        assert book_value(make_asset(), after_years(10)) == pytest.approx(0, abs=1e-6)
        assert book_value(make_asset(), after_years(25)) == 0

    def test_monthly_charge(self):
        """Test the straight-line monthly charge."""
        assert monthly_depreciation(make_asset()) == pytest.approx(1000)

    def test_monthly_charge_ignores_current_value(self):
        """Test that straight-line spreads the purchase price."""
        asset = make_asset(current_value=5000)
        assert monthly_depreciation(asset) == pytest.approx(1000)


class TestDecliningBalance:
    """Tests for declining-balance book value."""

    def declining(self, **overrides):
        data = {
            "purchase_price": 100000,
            "current_value": 100000,
            "depreciation_rate": 20,
            "depreciation_method": "declining-balance",
            "useful_life": 5,
        }
        data.update(overrides)
        return make_asset(**data)

    def test_one_year(self):
        """Test 100000 at 20% after one year."""
        assert book_value(self.declining(), after_years(1)) == pytest.approx(80000, abs=1)

    def test_continuous_decay(self):
        """Test that partial years use a fractional exponent."""
        value = book_value(self.declining(), after_years(0.5))
        assert value == pytest.approx(100000 * 0.8 ** 0.5, abs=1)

    def test_future_purchase_not_above_price(self):
        """Test that an asset bought after the reference date keeps its price."""
        asset = self.declining(purchase_date="2030-01-01")
        assert book_value(asset, PURCHASED) == pytest.approx(100000)

    def test_zero_rate_keeps_value(self):
        """Test that a zero rate never depreciates."""
        asset = self.declining(depreciation_rate=0)
        assert book_value(asset, after_years(7)) == pytest.approx(100000)

    def test_monthly_charge_uses_current_value(self):
        """Test that the monthly charge is based on the saved value."""
        asset = self.declining(current_value=60000)
        assert monthly_depreciation(asset) == pytest.approx(1000)

    def test_monthly_charge_independent_of_book_value(self):
        """Test that the monthly charge does not follow the book value."""
        asset = self.declining()
        one_year_drop = asset.purchase_price - book_value(asset, after_years(1))
        assert monthly_depreciation(asset) * 12 == pytest.approx(20000)
        assert one_year_drop == pytest.approx(20000, abs=1)
        assert monthly_depreciation(asset) == monthly_depreciation(
            self.declining(purchase_date="2010-01-01")
        )


class TestFacade:
    """Tests for depreciation through the repository facade."""

    def test_calculate_depreciation(self, repo, tractor):
        """Test that the facade returns the book value."""
        assert repo.calculate_depreciation(tractor, after_years(5)) == pytest.approx(
            60000, abs=1
        )

    def test_monthly_depreciation(self, repo, tractor):
        """Test that the facade returns the monthly charge."""
        assert repo.get_monthly_depreciation(tractor) == pytest.approx(1000)
