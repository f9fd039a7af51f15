"""
Rentals repository module.

Handles rental agreements and the payments received against them.
Payments are creation-only and are not removed with their rental.
"""

from typing import Optional

from farmbook.models.dates import DateLike
from farmbook.models.types import RentalStatus

from .base import EntityRepository
from .models import Rental, RentalPayment


class RentalRepository(EntityRepository[Rental]):
    """Repository for rental agreements."""

    table = "rentals"
    model = Rental
    indexes = {
        "by_status": "status",
        "by_asset": "asset_id",
    }

    def get_active(self) -> list[Rental]:
        """Get rentals currently earning income."""
        return self.get_by_index("by_status", RentalStatus.ACTIVE)


class RentalPaymentRepository(EntityRepository[RentalPayment]):
    """Repository for rental payments received."""

    table = "rental_payments"
    model = RentalPayment
    indexes = {
        "by_rental": "rental_id",
        "by_date": "date",
    }

    def get_by_rental(self, rental_id: str) -> list[RentalPayment]:
        """Get all payments received for a rental."""
        return self.get_by_index("by_rental", rental_id)

    def get_by_date_range(
        self, start_date: DateLike, end_date: DateLike
    ) -> list[RentalPayment]:
        """
        Get payments dated within a range.

        Args:
            start_date: Start date (inclusive)
            end_date: End date (inclusive)

        Returns:
            List of RentalPayment objects ordered by date
        """
        return self._get_by_date_range(start_date, end_date)

    def update(self, record_id: str, patch: dict) -> Optional[RentalPayment]:
        """
        Rental payments cannot be edited.

        Raises:
            TypeError: Always; delete and re-add the payment instead
        """
        raise TypeError(
            "Rental payments are creation-only; delete and re-add to correct one"
        )
