"""
Tests for whole-database backup and restore.
"""

import json

import pytest

from farmbook.db import FarmRepository, RecordStore
from farmbook.services import BACKUP_STORES, BackupService


@pytest.fixture
def populated(repo, employee, activity, tractor):
    """A repository with at least one record in every table."""
    repo.add_transaction(
        {"date": "2024-03-01", "type": "income", "category": "Sales", "amount": 5000}
    )
    repo.add_transaction(
        {
            "date": "2024-03-02",
            "type": "expense",
            "category": "Feed",
            "amount": 1200,
            "activityId": activity.id,
        }
    )
    repo.add_labor_entry(
        {
            "date": "2024-03-02",
            "employeeId": employee.id,
            "activityId": activity.id,
            "hoursWorked": 8,
            "amount": 15000,
        }
    )
    repo.add_activity_record(
        {"activityId": activity.id, "date": "2024-03-03", "quantity": 12, "unit": "bags"}
    )
    rental = repo.add_rental(
        {
            "assetId": tractor.id,
            "assetName": "Tractor",
            "startDate": "2024-01-01",
            "monthlyRate": 3000,
        }
    )
    repo.add_rental_payment(
        {"rentalId": rental.id, "date": "2024-03-05", "amount": 3000, "period": "March"}
    )
    repo.update_settings({"farmName": "Green Acres"})
    return repo


def snapshot(repo):
    """Every record in every table, keyed by id."""
    service = BackupService(repo)
    document = json.loads(service.export_all())
    return {
        key: {item["id"]: item for item in document[key]} for key in BACKUP_STORES
    }


class TestExport:
    """Tests for export_all."""

    def test_document_has_every_store(self, populated):
        """Test that each table appears under its key."""
        document = json.loads(BackupService(populated).export_all())

        assert set(BACKUP_STORES) <= set(document)
        assert document["exportedAt"].endswith("Z")
        assert len(document["transactions"]) == 2
        assert document["settings"][0]["farmName"] == "Green Acres"

    def test_records_are_camel_case(self, populated):
        """Test that exported record keys use camelCase."""
        document = json.loads(BackupService(populated).export_all())
        labor = document["laborEntries"][0]
        assert {"employeeId", "hoursWorked", "laborType", "createdAt"} <= set(labor)

    def test_empty_database(self, repo):
        """Test that an empty database exports empty lists."""
        document = json.loads(BackupService(repo).export_all())
        assert document["transactions"] == []
        assert document["rentalPayments"] == []


class TestImport:
    """Tests for import_all."""

    def test_round_trip_into_fresh_database(self, populated, tmp_path):
        """Test that export then import reproduces every record."""
        document = BackupService(populated).export_all()

        target = FarmRepository(RecordStore(tmp_path / "restored.db"))
        assert BackupService(target).import_all(document) is True
        assert snapshot(target) == snapshot(populated)

    def test_import_replaces_existing_data(self, populated, repo):
        """Test that records not in the document are removed."""
        document = BackupService(populated).export_all()
        extra = repo.add_transaction(
            {"date": "2024-03-09", "type": "expense", "category": "Fuel", "amount": 80}
        )

        assert BackupService(repo).import_all(document) is True
        assert repo.get_transaction(extra.id) is None
        assert len(repo.get_all_transactions()) == 2

    def test_missing_keys_restore_empty(self, populated):
        """Test that stores absent from the document end up empty."""
        document = json.dumps({"transactions": []})

        assert BackupService(populated).import_all(document) is True
        assert populated.get_all_transactions() == []
        assert populated.get_all_employees() == []
        assert populated.get_settings().farm_name == "My Farm"

    def test_unknown_record_keys_dropped(self, repo):
        """Test that extra keys on a record do not fail the import."""
        document = json.dumps(
            {
                "transactions": [
                    {
                        "id": "t1",
                        "date": "2024-03-01",
                        "type": "income",
                        "category": "Sales",
                        "amount": 10,
                        "createdAt": "2024-03-01T08:00:00.000Z",
                        "updatedAt": "2024-03-01T08:00:00.000Z",
                        "syncedAt": "whenever",
                    }
                ]
            }
        )
        assert BackupService(repo).import_all(document) is True
        assert repo.get_transaction("t1").created_at == "2024-03-01T08:00:00.000Z"

    @pytest.mark.parametrize("document", ["{not json", "[1, 2, 3]", ""])
    def test_unparseable_document_leaves_data(self, populated, document):
        """Test that a bad document returns False without touching data."""
        before = snapshot(populated)
        assert BackupService(populated).import_all(document) is False
        assert snapshot(populated) == before

    def test_invalid_record_leaves_data(self, populated):
        """Test that a record failing validation aborts the whole import."""
        before = snapshot(populated)
        document = json.dumps(
            {
                "transactions": [
                    {
                        "id": "t1",
                        "date": "2024-03-01",
                        "type": "gift",
                        "category": "x",
                        "amount": 1,
                    }
                ]
            }
        )
        assert BackupService(populated).import_all(document) is False
        assert snapshot(populated) == before

    @pytest.mark.parametrize(
        "document",
        [
            {
                "settings": [
                    {
                        "id": "main",
                        "farmName": "F",
                        "currency": 5,
                        "fiscalYearStart": "01-01",
                        "updatedAt": "2024-03-01T08:00:00.000Z",
                    }
                ]
            },
            {
                "employees": [
                    {"id": "e1", "name": 5, "role": "Herdsman", "dailyRate": 100}
                ]
            },
            {
                "transactions": [
                    {
                        "id": None,
                        "date": "2024-03-01",
                        "type": "income",
                        "category": "Sales",
                        "amount": 1,
                    }
                ]
            },
        ],
        ids=["numeric-currency", "numeric-name", "null-id"],
    )
    def test_mistyped_field_leaves_data(self, populated, document):
        """Test that a field of the wrong type returns False instead of raising."""
        before = snapshot(populated)
        assert BackupService(populated).import_all(json.dumps(document)) is False
        assert snapshot(populated) == before

    def test_foreign_settings_id_rejected(self, populated):
        """Test that settings stored under another id abort the import."""
        before = snapshot(populated)
        document = json.dumps(
            {"settings": [{"id": "other", "farmName": "F", "currency": "KES"}]}
        )
        assert BackupService(populated).import_all(document) is False
        assert snapshot(populated) == before

    @pytest.mark.parametrize("document", ['{"transactions": []}', '{"settings": []}'])
    def test_missing_settings_restored_as_defaults(self, populated, document):
        """Test that a restore without settings still leaves the default row."""
        assert BackupService(populated).import_all(document) is True

        rows = populated.settings.get_all()
        assert len(rows) == 1
        assert rows[0].farm_name == "My Farm"

        exported = json.loads(BackupService(populated).export_all())
        assert len(exported["settings"]) == 1

    def test_store_not_a_list_rejected(self, populated):
        """Test that a store value of the wrong shape aborts the import."""
        before = snapshot(populated)
        assert BackupService(populated).import_all('{"employees": {"a": 1}}') is False
        assert snapshot(populated) == before

    def test_write_failure_rolls_back(self, populated):
        """Test that a failing insert undoes the clear and earlier inserts."""
        before = snapshot(populated)
        row = {
            "id": "dup",
            "date": "2024-03-01",
            "type": "income",
            "category": "x",
            "amount": 1,
        }
        document = json.dumps({"transactions": [row, row]})

        assert BackupService(populated).import_all(document) is False
        assert snapshot(populated) == before


class TestFiles:
    """Tests for backup files on disk."""

    def test_backup_and_restore_file(self, populated, tmp_path):
        """Test writing a backup file and restoring it elsewhere."""
        path = BackupService(populated).backup_to_file(tmp_path / "out" / "backup.json")
        assert path.exists()

        target = FarmRepository(RecordStore(tmp_path / "restored.db"))
        assert BackupService(target).restore_from_file(path) is True
        assert snapshot(target) == snapshot(populated)

    def test_restore_missing_file(self, repo, tmp_path):
        """Test that an unreadable file returns False."""
        assert BackupService(repo).restore_from_file(tmp_path / "nope.json") is False

    def test_filename(self, repo):
        """Test the suggested backup filename."""
        name = BackupService(repo).get_filename()
        assert name.startswith("farmbook_backup_")
        assert name.endswith(".json")
