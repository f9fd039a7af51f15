"""
Database models for Farmbook.

Defines the records stored in each table of the local record store. Every
model is a dataclass whose field names match the table's column names;
``to_dict`` produces the portable camelCase form used in backup documents.
"""

import logging
import re
import sqlite3
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Optional

from farmbook.config import (
    DEFAULT_CURRENCY,
    DEFAULT_FARM_NAME,
    DEFAULT_FISCAL_YEAR_START,
    MAX_DEPRECIATION_RATE,
    MIN_DEPRECIATION_RATE,
    SETTINGS_ID,
)
from farmbook.models.dates import normalize_date, normalize_optional_date
from farmbook.models.types import (
    ActivityStatus,
    ActivityType,
    AssetCategory,
    AssetStatus,
    DepreciationMethod,
    EmployeeStatus,
    LaborType,
    RentalStatus,
    TransactionType,
)

logger = logging.getLogger(__name__)

FISCAL_YEAR_START_PATTERN = re.compile(r"^(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$")
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_camel(name: str) -> str:
    """Convert a snake_case field name to camelCase."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_snake(name: str) -> str:
    """Convert a camelCase field name to snake_case."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _as_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} must be a number, got {value!r}") from None


def _as_optional_float(value: Any, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    return _as_float(value, field_name)


def _as_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string, got {value!r}")
    return value


def _as_optional_str(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    return _as_str(value, field_name)


def _as_id(value: Any) -> str:
    """Record ids are non-empty strings; a NULL key can never be looked up."""
    if not _as_str(value, "id"):
        raise ValueError("id must not be empty")
    return value


class Record:
    """
    Shared behaviour for stored records.

    Subclasses are dataclasses; ``SYSTEM_FIELDS`` are stamped by the
    repository and never taken from caller input on create.
    """

    SYSTEM_FIELDS: tuple[str, ...] = ("id", "created_at", "updated_at")

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def normalize_keys(cls, data: dict, strict: bool = True) -> dict:
        """
        Map camelCase or snake_case keys onto this model's field names.

        Args:
            data: Input mapping
            strict: Raise on unknown keys instead of dropping them

        Returns:
            Dictionary keyed by field name

        Raises:
            ValueError: If ``strict`` and a key matches no field
        """
        names = set(cls.field_names())
        normalized = {}
        for key, value in data.items():
            name = key if key in names else to_snake(key)
            if name not in names:
                if strict:
                    raise ValueError(f"Unknown {cls.__name__} field: {key!r}")
                logger.warning(f"Dropping unknown {cls.__name__} field {key!r}")
                continue
            normalized[name] = value
        return normalized

    def to_row(self) -> dict:
        """Convert to a column-name dictionary suitable for SQL parameters."""
        row = {}
        for f in fields(self):
            value = getattr(self, f.name)
            row[f.name] = value.value if isinstance(value, Enum) else value
        return row

    def to_dict(self) -> dict:
        """Convert to the portable camelCase representation."""
        return {to_camel(name): value for name, value in self.to_row().items()}

    @classmethod
    def from_row(cls, row: sqlite3.Row):
        """Create a record from a database row."""
        return cls(**{key: row[key] for key in row.keys()})

    @classmethod
    def from_dict(cls, data: dict, strict: bool = False):
        """Create a record from a camelCase or snake_case dictionary."""
        return cls(**cls.normalize_keys(data, strict=strict))


@dataclass
class Transaction(Record):
    """A single cashbook entry: money in or out on a given day."""

    id: str
    date: str
    type: TransactionType
    category: str
    amount: float
    description: str = ""
    activity_id: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        self.id = _as_id(self.id)
        self.date = normalize_date(self.date, "date")
        self.type = TransactionType(self.type)
        self.category = _as_str(self.category, "category")
        self.amount = _as_float(self.amount, "amount")
        self.description = _as_optional_str(self.description, "description") or ""
        self.activity_id = _as_optional_str(self.activity_id, "activity_id") or None

    @property
    def signed_amount(self) -> float:
        """Amount with expenses negated."""
        if self.type == TransactionType.INCOME:
            return self.amount
        return -self.amount


@dataclass
class Employee(Record):
    id: str
    name: str
    role: str
    daily_rate: float
    phone: Optional[str] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        self.id = _as_id(self.id)
        self.name = _as_str(self.name, "name").strip()
        self.role = _as_str(self.role, "role")
        self.daily_rate = _as_float(self.daily_rate, "daily_rate")
        self.status = EmployeeStatus(self.status)
        self.phone = _as_optional_str(self.phone, "phone") or None


@dataclass
class LaborEntry(Record):
    """
    Work done by an employee on a given day.

    ``employee_id`` and ``activity_id`` are soft references; entries whose
    employee or activity was deleted are kept and shown with a fallback
    label.
    """

    id: str
    date: str
    employee_id: str
    hours_worked: float
    amount: float
    labor_type: LaborType = LaborType.DIRECT
    activity_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        self.id = _as_id(self.id)
        self.date = normalize_date(self.date, "date")
        self.employee_id = _as_str(self.employee_id, "employee_id")
        self.hours_worked = _as_float(self.hours_worked, "hours_worked")
        self.amount = _as_float(self.amount, "amount")
        self.labor_type = LaborType(self.labor_type)
        self.activity_id = _as_optional_str(self.activity_id, "activity_id") or None
        self.notes = _as_optional_str(self.notes, "notes")


@dataclass
class Activity(Record):
    """A farm enterprise tracked for profitability (a crop, a herd, a service)."""

    id: str
    name: str
    type: ActivityType
    status: ActivityStatus = ActivityStatus.ACTIVE
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        self.id = _as_id(self.id)
        self.name = _as_str(self.name, "name").strip()
        self.type = ActivityType(self.type)
        self.status = ActivityStatus(self.status)
        self.start_date = normalize_optional_date(self.start_date, "start_date")
        self.end_date = normalize_optional_date(self.end_date, "end_date")
        self.notes = _as_optional_str(self.notes, "notes")


@dataclass
class ActivityRecord(Record):
    """Production, loss and money figures logged against an activity."""

    id: str
    activity_id: str
    date: str
    quantity: Optional[float] = None
    unit: Optional[str] = None
    loss: Optional[float] = None
    income: Optional[float] = None
    expense: Optional[float] = None
    notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        self.id = _as_id(self.id)
        self.activity_id = _as_str(self.activity_id, "activity_id")
        self.date = normalize_date(self.date, "date")
        self.quantity = _as_optional_float(self.quantity, "quantity")
        self.unit = _as_optional_str(self.unit, "unit")
        self.loss = _as_optional_float(self.loss, "loss")
        self.income = _as_optional_float(self.income, "income")
        self.expense = _as_optional_float(self.expense, "expense")
        self.notes = _as_optional_str(self.notes, "notes")


@dataclass
class Asset(Record):
    """
    A depreciable farm asset.

    ``purchase_price`` and ``useful_life`` must be positive: the
    depreciation formulas divide by the useful life.
    """

    id: str
    name: str
    category: AssetCategory
    purchase_date: str
    purchase_price: float
    current_value: float
    depreciation_rate: float
    depreciation_method: DepreciationMethod
    useful_life: float
    status: AssetStatus = AssetStatus.ACTIVE
    notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        self.id = _as_id(self.id)
        self.name = _as_str(self.name, "name").strip()
        self.notes = _as_optional_str(self.notes, "notes")
        self.category = AssetCategory(self.category)
        self.purchase_date = normalize_date(self.purchase_date, "purchase_date")
        self.purchase_price = _as_float(self.purchase_price, "purchase_price")
        self.current_value = _as_float(self.current_value, "current_value")
        self.depreciation_rate = _as_float(
            self.depreciation_rate, "depreciation_rate"
        )
        self.depreciation_method = DepreciationMethod(self.depreciation_method)
        self.useful_life = _as_float(self.useful_life, "useful_life")
        self.status = AssetStatus(self.status)

        if self.purchase_price <= 0:
            raise ValueError(
                f"purchase_price must be > 0, got {self.purchase_price}"
            )
        if self.useful_life <= 0:
            raise ValueError(f"useful_life must be > 0, got {self.useful_life}")
        if not (
            MIN_DEPRECIATION_RATE <= self.depreciation_rate <= MAX_DEPRECIATION_RATE
        ):
            raise ValueError(
                f"depreciation_rate must be between {MIN_DEPRECIATION_RATE:g} "
                f"and {MAX_DEPRECIATION_RATE:g}, got {self.depreciation_rate}"
            )


@dataclass
class Rental(Record):
    """An asset let out to a renter at a monthly rate."""

    id: str
    asset_name: str
    start_date: str
    monthly_rate: float
    asset_id: Optional[str] = None
    renter_name: Optional[str] = None
    end_date: Optional[str] = None
    status: RentalStatus = RentalStatus.ACTIVE
    notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        self.id = _as_id(self.id)
        self.asset_name = _as_str(self.asset_name, "asset_name")
        self.start_date = normalize_date(self.start_date, "start_date")
        self.end_date = normalize_optional_date(self.end_date, "end_date")
        self.monthly_rate = _as_float(self.monthly_rate, "monthly_rate")
        self.status = RentalStatus(self.status)
        self.asset_id = _as_optional_str(self.asset_id, "asset_id") or None
        self.renter_name = _as_optional_str(self.renter_name, "renter_name")
        self.notes = _as_optional_str(self.notes, "notes")


@dataclass
class RentalPayment(Record):
    """
    Money received against a rental.

    Payments are creation-only, so there is no ``updated_at``.
    """

    SYSTEM_FIELDS = ("id", "created_at")

    id: str
    rental_id: str
    date: str
    amount: float
    period: str
    notes: Optional[str] = None
    created_at: str = ""

    def __post_init__(self):
        self.id = _as_id(self.id)
        self.rental_id = _as_str(self.rental_id, "rental_id")
        self.date = normalize_date(self.date, "date")
        self.amount = _as_float(self.amount, "amount")
        self.period = _as_str(self.period, "period")
        self.notes = _as_optional_str(self.notes, "notes")


@dataclass
class FarmSettings(Record):
    """The single farm profile row, always stored under ``SETTINGS_ID``."""

    SYSTEM_FIELDS = ("id", "updated_at")

    id: str = SETTINGS_ID
    farm_name: str = DEFAULT_FARM_NAME
    currency: str = DEFAULT_CURRENCY
    fiscal_year_start: str = DEFAULT_FISCAL_YEAR_START
    owner_name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    updated_at: str = ""

    def __post_init__(self):
        self.id = _as_id(self.id)
        self.farm_name = _as_str(self.farm_name, "farm_name")
        self.currency = _as_str(self.currency, "currency").strip().upper()
        for name in ("owner_name", "address", "phone", "email"):
            setattr(self, name, _as_optional_str(getattr(self, name), name))
        fiscal_year_start = _as_str(self.fiscal_year_start, "fiscal_year_start")
        if not FISCAL_YEAR_START_PATTERN.match(fiscal_year_start):
            raise ValueError(
                f"fiscal_year_start must be MM-DD, got {self.fiscal_year_start!r}"
            )
