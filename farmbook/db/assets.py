"""Assets repository module."""

from farmbook.models.types import AssetStatus

from .base import EntityRepository
from .models import Asset


class AssetRepository(EntityRepository[Asset]):
    """
    Repository for depreciable farm assets.

    Validation of purchase price, useful life and depreciation rate happens
    when the Asset model is built, so invalid values never reach the table
    or the depreciation formulas.
    """

    table = "assets"
    model = Asset
    indexes = {
        "by_category": "category",
        "by_status": "status",
    }

    def get_active(self) -> list[Asset]:
        """Get assets still in service."""
        return self.get_by_index("by_status", AssetStatus.ACTIVE)
