"""
Export service for cashbook data.

Provides functionality to export cashbook transactions to XLSX and CSV formats.
"""

import csv
import io
import logging
from collections import defaultdict
from datetime import datetime
from enum import Enum
from typing import Optional, cast

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from farmbook.config import GENERAL_ACTIVITY_LABEL, MAX_EXPORT_ENTRIES
from farmbook.db import FarmRepository, Transaction
from farmbook.models.dates import DateLike, normalize_optional_date
from farmbook.models.types import TransactionType

logger = logging.getLogger(__name__)

HEADERS = ["ID", "Date", "Type", "Category", "Description", "Amount", "Activity"]
COLUMN_WIDTHS = [22, 12, 10, 18, 40, 15, 22]
AMOUNT_FORMAT = "#,##0.00"

HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
INCOME_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
EXPENSE_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    XLSX = "xlsx"


class ExportService:
    """Service for exporting the cashbook to spreadsheet formats."""

    def __init__(self, repository: FarmRepository):
        """
        Initialize the export service.

        Args:
            repository: Facade used to read transactions and activities
        """
        self.repository = repository

    def export_to_csv(
        self,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
    ) -> io.BytesIO:
        """
        Export cashbook transactions to CSV format.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter

        Returns:
            BytesIO buffer containing the CSV data
        """
        transactions = self._get_transactions(start_date, end_date)

        text_buffer = io.StringIO()
        writer = csv.writer(text_buffer)
        writer.writerow(HEADERS)
        writer.writerows(self._rows(transactions))

        # BOM so Excel detects UTF-8
        buffer = io.BytesIO(text_buffer.getvalue().encode("utf-8-sig"))

        logger.info(f"Exported {len(transactions)} transactions to CSV")
        return buffer

    def export_to_xlsx(
        self,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
    ) -> io.BytesIO:
        """
        Export cashbook transactions to XLSX format with formatting.

        The first sheet lists transactions colour-coded by type; the second
        totals income, expenses and each category.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter

        Returns:
            BytesIO buffer containing the XLSX data
        """
        transactions = self._get_transactions(start_date, end_date)

        wb = Workbook()
        ws = cast(Worksheet, wb.active)
        ws.title = "Cashbook"

        header_font = Font(bold=True, color="FFFFFF")
        for col, header in enumerate(HEADERS, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = header_font
            cell.fill = HEADER_FILL
            cell.alignment = Alignment(horizontal="center")

        for row_idx, (txn, values) in enumerate(
            zip(transactions, self._rows(transactions)), 2
        ):
            fill = INCOME_FILL if txn.type == TransactionType.INCOME else EXPENSE_FILL
            for col, value in enumerate(values, 1):
                ws.cell(row=row_idx, column=col, value=value).fill = fill
            ws.cell(row=row_idx, column=6).number_format = AMOUNT_FORMAT

        for col, width in enumerate(COLUMN_WIDTHS, 1):
            ws.column_dimensions[get_column_letter(col)].width = width

        # Freeze header row
        ws.freeze_panes = "A2"

        self._add_summary_sheet(wb, transactions)

        buffer = io.BytesIO()
        wb.save(buffer)
        buffer.seek(0)

        logger.info(f"Exported {len(transactions)} transactions to XLSX")
        return buffer

    def _rows(self, transactions: list[Transaction]) -> list[list]:
        """Cell values per transaction, with activity ids resolved to names."""
        activities = {a.id: a.name for a in self.repository.get_all_activities()}
        return [
            [
                txn.id,
                txn.date,
                txn.type.value,
                txn.category,
                txn.description,
                txn.amount,
                activities.get(txn.activity_id or "", GENERAL_ACTIVITY_LABEL),
            ]
            for txn in transactions
        ]

    def _add_summary_sheet(self, wb: Workbook, transactions: list[Transaction]):
        """Add income, expense and per-category totals to the workbook."""
        ws = wb.create_sheet(title="Summary")
        settings = self.repository.get_settings()
        total_heading = f"Total ({settings.currency})"

        header_font = Font(bold=True)
        title = ws.cell(row=1, column=1, value=f"{settings.farm_name} Cashbook")
        title.font = Font(bold=True, size=14)
        ws.cell(
            row=2,
            column=1,
            value=f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}",
        )

        counts: dict[TransactionType, int] = defaultdict(int)
        totals: dict[TransactionType, float] = defaultdict(float)
        by_category: dict[tuple[str, str], float] = defaultdict(float)
        for txn in transactions:
            counts[txn.type] += 1
            totals[txn.type] += txn.amount
            by_category[(txn.type.value, txn.category)] += txn.amount

        for col, heading in enumerate(["Type", "Count", total_heading], 1):
            ws.cell(row=4, column=col, value=heading).font = header_font

        sections = [
            ("Income", TransactionType.INCOME),
            ("Expenses", TransactionType.EXPENSE),
        ]
        for row, (label, txn_type) in enumerate(sections, 5):
            ws.cell(row=row, column=1, value=label)
            ws.cell(row=row, column=2, value=counts[txn_type])
            ws.cell(row=row, column=3, value=totals[txn_type])

        net = totals[TransactionType.INCOME] - totals[TransactionType.EXPENSE]
        ws.cell(row=8, column=1, value="Net").font = header_font
        ws.cell(row=8, column=3, value=net)

        # Category breakdown, income first
        for col, heading in enumerate(["Category", "Type", total_heading], 1):
            ws.cell(row=10, column=col, value=heading).font = header_font

        breakdown = sorted(
            by_category.items(),
            key=lambda item: (item[0][0] != TransactionType.INCOME.value, item[0][1]),
        )
        for row, ((txn_type, category), amount) in enumerate(breakdown, 11):
            ws.cell(row=row, column=1, value=category)
            ws.cell(row=row, column=2, value=txn_type)
            ws.cell(row=row, column=3, value=amount)

        for row in range(5, 11 + len(breakdown)):
            ws.cell(row=row, column=3).number_format = AMOUNT_FORMAT

        ws.column_dimensions["A"].width = 18
        ws.column_dimensions["B"].width = 10
        ws.column_dimensions["C"].width = 18

    def _get_transactions(
        self,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
    ) -> list[Transaction]:
        """
        Get transactions with optional date filtering, oldest first.

        Either bound may be given alone.

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)

        Returns:
            List of Transaction objects, capped at MAX_EXPORT_ENTRIES
        """
        start = normalize_optional_date(start_date, "start_date")
        end = normalize_optional_date(end_date, "end_date")

        if start and end:
            transactions = self.repository.get_transactions_by_date_range(start, end)
        else:
            transactions = sorted(
                (
                    t
                    for t in self.repository.get_all_transactions()
                    if (not start or t.date >= start) and (not end or t.date <= end)
                ),
                key=lambda t: (t.date, t.created_at),
            )

        if len(transactions) > MAX_EXPORT_ENTRIES:
            logger.warning(
                f"Export truncated to {MAX_EXPORT_ENTRIES} of "
                f"{len(transactions)} transactions"
            )
            transactions = transactions[:MAX_EXPORT_ENTRIES]
        return transactions

    def get_filename(
        self,
        format: ExportFormat,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
    ) -> str:
        """
        Generate a filename for the export.

        Args:
            format: Export format
            start_date: Optional start date
            end_date: Optional end date

        Returns:
            Suggested filename
        """
        date_str = datetime.now().strftime("%Y%m%d")
        start = normalize_optional_date(start_date, "start_date")
        end = normalize_optional_date(end_date, "end_date")

        date_range = ""
        if start or end:
            date_range = "_{}-{}".format(
                start.replace("-", "") if start else "",
                end.replace("-", "") if end else "",
            )

        return f"farmbook_cashbook_{date_str}{date_range}.{format.value}"
