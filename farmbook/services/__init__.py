"""
Services module for Farmbook.

Contains business logic built on top of the repository facade.
"""

from .backup import BACKUP_STORES, BackupService
from .export import ExportFormat, ExportService
from .reports import (
    ActivityProfit,
    CategoryTotal,
    DashboardSnapshot,
    LaborLedgerRow,
    ProfitLossStatement,
    ReportService,
)

__all__ = [
    # Backup
    "BACKUP_STORES",
    "BackupService",
    # Export
    "ExportFormat",
    "ExportService",
    # Reports
    "ActivityProfit",
    "CategoryTotal",
    "DashboardSnapshot",
    "LaborLedgerRow",
    "ProfitLossStatement",
    "ReportService",
]
