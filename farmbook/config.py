"""
Configuration module for Farmbook.

Contains constants, settings, and configuration values used throughout the application.
"""

import os
from pathlib import Path

# Version
VERSION = "0.1.0"

# Application paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("FARMBOOK_DATA_DIR", PROJECT_ROOT / "data"))
LOG_DIR = Path(os.getenv("FARMBOOK_LOG_DIR", PROJECT_ROOT / "logs"))

# Database configuration
DEFAULT_DB_PATH = Path(os.getenv("FARMBOOK_DB_PATH", DATA_DIR / "farmbook.db"))
DB_TIMEOUT = 10.0  # seconds
SCHEMA_VERSION = 1

# Farm settings defaults (created on first access)
SETTINGS_ID = "main"
DEFAULT_FARM_NAME = "My Farm"
DEFAULT_CURRENCY = "UGX"
DEFAULT_FISCAL_YEAR_START = "01-01"

# Depreciation
DAYS_PER_YEAR = 365.25
MONTHS_PER_YEAR = 12

# Display fallbacks for dangling references
UNKNOWN_EMPLOYEE_LABEL = "Unknown"
GENERAL_ACTIVITY_LABEL = "General"

# Dashboard
TOP_ACTIVITIES_COUNT = 3

# Export configuration
MAX_EXPORT_ENTRIES = 10000
BACKUP_JSON_INDENT = 2

# Logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "farmbook.log"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Validation constraints
MIN_DEPRECIATION_RATE = 0.0
MAX_DEPRECIATION_RATE = 100.0

# Error messages
ERROR_MESSAGES = {
    "storage_unavailable": "The local database could not be opened. Please try again.",
    "import_failed": "The backup could not be restored. Existing data was left unchanged.",
}


def ensure_directories():
    """Ensure required directories exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    LOG_DIR.mkdir(parents=True, exist_ok=True)


def get_log_level():
    """Get the configured log level."""
    import logging

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(LOG_LEVEL.upper(), logging.INFO)
