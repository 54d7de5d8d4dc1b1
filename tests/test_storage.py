"""Tests for the JSON file and in-memory state storage."""

import json
from datetime import date

import pytest

from placebi.models.restaurant import AppSnapshot, ExpenseCategory
from placebi.services.storage import (
    CorruptStateError,
    InMemoryStateStorage,
    JsonFileStateStorage,
    StorageWriteError,
)


@pytest.fixture
def snapshot(restaurant, make_revenue, make_expense):
    return AppSnapshot(
        restaurant=restaurant,
        revenues=[make_revenue(date(2024, 12, 2), 1200)],
        expenses=[make_expense(date(2024, 12, 1), 300, {ExpenseCategory.SALARIES: 300})],
    )


@pytest.fixture
def blob_path(tmp_path):
    return tmp_path / "data" / "placebi-storage.json"


class TestJsonFileStateStorage:
    """Tests for JsonFileStateStorage."""

    def test_missing_file_means_fresh_install(self, blob_path):
        assert JsonFileStateStorage(path=blob_path).load() is None

    def test_round_trip(self, blob_path, snapshot):
        storage = JsonFileStateStorage(path=blob_path)
        assert storage.save(snapshot) is True
        assert storage.load() == snapshot

    def test_file_layout(self, blob_path, snapshot):
        JsonFileStateStorage(path=blob_path).save(snapshot)
        data = json.loads(blob_path.read_text(encoding="utf-8"))

        assert set(data) == {"restaurant", "revenues", "expenses"}
        assert data["restaurant"]["name"] == "Chez Fatou"
        assert data["revenues"][0]["date"] == "2024-12-02"
        assert data["revenues"][0]["restaurantId"] == "rest_test"
        assert data["expenses"][0]["expenseLines"][0]["category"] == "salaries"

    def test_save_replaces_previous_blob(self, blob_path, snapshot):
        storage = JsonFileStateStorage(path=blob_path)
        storage.save(snapshot)
        storage.save(AppSnapshot())
        assert storage.load() == AppSnapshot()

    def test_no_temp_files_left(self, blob_path, snapshot):
        JsonFileStateStorage(path=blob_path).save(snapshot)
        assert [p.name for p in blob_path.parent.iterdir()] == [blob_path.name]

    def test_legacy_blob_with_timestamps(self, blob_path):
        blob_path.parent.mkdir(parents=True)
        blob_path.write_text(json.dumps({
            "restaurant": None,
            "revenues": [{
                "id": "rev_legacy",
                "restaurantId": "rest_1",
                "date": "2024-11-30T23:00:00.000Z",
                "totalAmount": 700,
                "paymentMethods": [{"id": "pm_1", "method": "wave", "amount": 700}],
                "createdAt": "2024-11-30T23:05:00.000Z",
                "updatedAt": "2024-11-30T23:05:00.000Z",
            }],
            "expenses": [],
        }), encoding="utf-8")

        snapshot = JsonFileStateStorage(path=blob_path).load()
        assert snapshot.revenues[0].date == date(2024, 11, 30)
        assert snapshot.revenues[0].total_amount == 700

    def test_corrupt_file_is_quarantined(self, blob_path):
        blob_path.parent.mkdir(parents=True)
        blob_path.write_text("{not json", encoding="utf-8")

        storage = JsonFileStateStorage(path=blob_path)
        with pytest.raises(CorruptStateError) as exc_info:
            storage.load()

        assert not blob_path.exists()
        quarantined = exc_info.value.quarantined_to
        assert quarantined is not None
        assert ".corrupt-" in quarantined
        assert storage.load() is None

    def test_write_failure(self, tmp_path, snapshot):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        storage = JsonFileStateStorage(path=blocker / "state.json", write_retries=1)

        with pytest.raises(StorageWriteError):
            storage.save(snapshot)

    def test_describe_is_absolute(self, blob_path):
        described = JsonFileStateStorage(path=blob_path).describe()
        assert described.endswith("placebi-storage.json")
        assert described == str(blob_path.resolve())


class TestInMemoryStateStorage:
    """Tests for InMemoryStateStorage."""

    def test_round_trip(self, snapshot):
        storage = InMemoryStateStorage()
        assert storage.load() is None
        storage.save(snapshot)
        assert storage.load() == snapshot

    def test_blob_is_serialized(self, snapshot):
        storage = InMemoryStateStorage()
        storage.save(snapshot)
        assert json.loads(storage.raw_blob)["revenues"][0]["totalAmount"] == 1200

    def test_keys_are_isolated(self, snapshot):
        first = InMemoryStateStorage("first")
        first.save(snapshot)
        assert InMemoryStateStorage("second").load() is None
        assert first.describe() == "memory://first"

    def test_corrupt_blob_is_set_aside(self):
        """An undecodable blob moves to a side key instead of being lost."""
        storage = InMemoryStateStorage()
        storage.put_raw_blob("[]")
        with pytest.raises(CorruptStateError) as exc_info:
            storage.load()

        assert storage.raw_blob is None
        assert storage.quarantined_blob == "[]"
        assert exc_info.value.quarantined_to == "memory://placebi-storage.corrupt"
        assert storage.load() is None
