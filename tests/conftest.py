"""
Shared fixtures for Farmbook tests.

Every test gets its own SQLite file under pytest's tmp_path, and the
process-wide store and repository handles are reset around it.
"""

from datetime import date

import pytest

import farmbook.db.base as db_base
import farmbook.db.repository as db_repository
from farmbook.db import FarmRepository, RecordStore


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Isolate the process-wide handles between tests."""
    monkeypatch.setattr(db_base, "_default_store", None)
    monkeypatch.setattr(db_repository, "_default_repository", None)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "farmbook.db"


@pytest.fixture
def store(db_path):
    """A fresh record store."""
    return RecordStore(db_path)


@pytest.fixture
def repo(store):
    """Facade over a fresh record store."""
    return FarmRepository(store)


@pytest.fixture
def today():
    """Fixed reference day used by month-bounded queries."""
    return date(2024, 3, 15)


@pytest.fixture
def employee(repo):
    return repo.add_employee(
        {"name": "Okello", "role": "Herdsman", "dailyRate": 15000}
    )


@pytest.fixture
def activity(repo):
    return repo.add_activity({"name": "Maize season A", "type": "crop"})


@pytest.fixture
def tractor(repo):
    """Straight-line asset: 120000 over 10 years."""
    return repo.add_asset(
        {
            "name": "Tractor",
            "category": "equipment",
            "purchaseDate": "2020-01-01",
            "purchasePrice": 120000,
            "currentValue": 120000,
            "depreciationRate": 10,
            "depreciationMethod": "straight-line",
            "usefulLife": 10,
        }
    )
