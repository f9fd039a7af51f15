"""
Farmbook - offline farm bookkeeping.

Local persistence and aggregation for a farm's cashbook, labor, activities,
assets and rentals.
"""

from .config import VERSION
from .db import FarmRepository, StorageUnavailableError, get_repository

__version__ = VERSION

__all__ = [
    "FarmRepository",
    "StorageUnavailableError",
    "get_repository",
    "__version__",
]
