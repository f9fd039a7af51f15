"""
Command-line entry point for Farmbook.

Prints a dashboard snapshot and runs backup and restore against the local
database.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from farmbook.config import (
    ERROR_MESSAGES,
    LOG_DIR,
    LOG_FILE,
    LOG_FORMAT,
    ensure_directories,
    get_log_level,
)
from farmbook.db import FarmRepository, StorageUnavailableError, open_store
from farmbook.services import BackupService, ReportService

logger = logging.getLogger(__name__)


def setup_logging():
    """Configure file and stdout logging."""
    ensure_directories()
    logging.basicConfig(
        level=get_log_level(),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(LOG_DIR / LOG_FILE),
            logging.StreamHandler(sys.stdout),
        ],
    )


def print_summary(repository: FarmRepository):
    """Print the dashboard snapshot for the current month."""
    settings = repository.get_settings()
    snapshot = ReportService(repository).dashboard()
    currency = settings.currency

    print("=" * 50)
    print(f"{settings.farm_name}")
    print("=" * 50)
    print(f"  Cash balance:      {currency} {snapshot.cash_balance:,.2f}")
    print(f"  Income (month):    {currency} {snapshot.month_summary.income:,.2f}")
    print(f"  Expenses (month):  {currency} {snapshot.month_summary.expenses:,.2f}")
    print(f"  Profit (month):    {currency} {snapshot.month_summary.profit:,.2f}")
    print(
        f"  Labor (month):     {currency} {snapshot.labor_cost:,.2f}"
        f" ({snapshot.labor_percent}% of income)"
    )

    if snapshot.top_activities:
        print("\nTop activities:")
        for i, activity in enumerate(snapshot.top_activities, 1):
            print(f"  {i}. {activity.name}: {currency} {activity.profit:,.2f}")

    worst = snapshot.worst_activity
    if worst and worst.profit < 0:
        print(f"\nNeeds attention: {worst.name} ({currency} {worst.profit:,.2f})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="farmbook", description="Offline farm bookkeeping"
    )
    parser.add_argument("--db", help="Path to the database file")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("summary", help="Print this month's dashboard")

    export_parser = subparsers.add_parser("export", help="Write a JSON backup")
    export_parser.add_argument("path", help="Backup file to write")

    import_parser = subparsers.add_parser(
        "import", help="Replace all data with a JSON backup"
    )
    import_parser.add_argument("path", help="Backup file to read")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run the command-line interface and return the exit status."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        repository = FarmRepository(
            open_store(args.db or os.getenv("FARMBOOK_DB_PATH"))
        )
    except StorageUnavailableError as e:
        logger.error(f"Failed to open database: {e}", exc_info=True)
        print(f"Error: {ERROR_MESSAGES['storage_unavailable']}")
        return 1

    if args.command == "summary":
        print_summary(repository)
        return 0

    backup = BackupService(repository)

    if args.command == "export":
        path = backup.backup_to_file(args.path)
        print(f"Backup written to {path}")
        return 0

    if not backup.restore_from_file(args.path):
        print(f"Error: {ERROR_MESSAGES['import_failed']}")
        return 1
    print(f"Restored backup from {args.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
