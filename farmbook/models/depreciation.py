"""
Asset depreciation schedules.

Two independent figures are computed for an asset:

- Book value: derived from the purchase price and the time elapsed since
  the purchase date.
- Monthly depreciation expense: used for period reporting. Straight-line
  spreads the purchase price evenly; declining-balance charges the monthly
  share of the rate against the asset's last saved ``current_value``.

The monthly expense is deliberately not the derivative of the book value.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional, Union

from farmbook.config import DAYS_PER_YEAR, MONTHS_PER_YEAR

from .types import DepreciationMethod

if TYPE_CHECKING:
    from farmbook.db.models import Asset

SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 60 * 60


def years_owned(
    purchase_date: str, as_of: Optional[Union[date, datetime]] = None
) -> float:
    """
    Fractional years between the purchase date and ``as_of``.

    A purchase dated after ``as_of`` counts as zero years rather than a
    negative span, which would value a declining-balance asset above its
    purchase price.

    Args:
        purchase_date: ISO purchase date (taken as midnight)
        as_of: Reference moment, defaults to now

    Returns:
        Years owned using a 365.25-day year, never negative
    """
    if as_of is None:
        as_of = datetime.now()
    elif not isinstance(as_of, datetime):
        as_of = datetime(as_of.year, as_of.month, as_of.day)

    purchased = datetime.fromisoformat(purchase_date)
    elapsed = (as_of - purchased).total_seconds() / SECONDS_PER_YEAR
    return max(0.0, elapsed)


def annual_straight_line_charge(asset: "Asset") -> float:
    """Yearly straight-line charge: purchase price spread over the useful life."""
    return asset.purchase_price / asset.useful_life


def book_value(
    asset: "Asset", as_of: Optional[Union[date, datetime]] = None
) -> float:
    """
    Calculate the current book value of an asset.

    Straight-line stops depreciating once the useful life is reached and
    never goes below zero. Declining-balance decays continuously using a
    non-integer exponent.

    Args:
        asset: The asset to value
        as_of: Reference moment, defaults to now

    Returns:
        Book value in the farm currency
    """
    owned = years_owned(asset.purchase_date, as_of)

    if asset.depreciation_method == DepreciationMethod.STRAIGHT_LINE:
        annual = annual_straight_line_charge(asset)
        total = annual * min(owned, asset.useful_life)
        return max(0.0, asset.purchase_price - total)

    rate = asset.depreciation_rate / 100
    return asset.purchase_price * (1 - rate) ** owned


def monthly_depreciation(asset: "Asset") -> float:
    """
    Calculate the depreciation expense charged for one month.

    Args:
        asset: The asset to charge

    Returns:
        Monthly depreciation expense
    """
    if asset.depreciation_method == DepreciationMethod.STRAIGHT_LINE:
        return annual_straight_line_charge(asset) / MONTHS_PER_YEAR

    rate = asset.depreciation_rate / 100
    return (asset.current_value * rate) / MONTHS_PER_YEAR
