"""Tests for AppStore: ordering, queries, mutations and persistence."""

from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from placebi.models.restaurant import AppSnapshot, PaymentMethod
from placebi.services.storage import (
    InMemoryStateStorage,
    JsonFileStateStorage,
    StateStorageInterface,
    StorageWriteError,
)
from placebi.store import AppStore


FIXED_CLOCK = datetime(2024, 12, 20, 9, 30, tzinfo=timezone.utc)


class FailingStorage(StateStorageInterface):
    """Accepts loads, refuses every write."""

    def __init__(self):
        self.attempts = 0

    def load(self):
        return None

    def save(self, snapshot):
        self.attempts += 1
        raise StorageWriteError("disk full")

    def describe(self):
        return "failing://"


@pytest.fixture
def storage():
    return InMemoryStateStorage()


@pytest.fixture
def store(storage):
    return AppStore(storage=storage, clock=lambda: FIXED_CLOCK)


class TestOrdering:
    """Histories are newest first, stable within a day."""

    def test_revenues_sorted_newest_first(self, store, make_revenue):
        for day in (date(2024, 12, 2), date(2024, 12, 5), date(2024, 12, 1)):
            store.add_revenue(make_revenue(day, 100))

        assert [r.date for r in store.revenues] == [
            date(2024, 12, 5),
            date(2024, 12, 2),
            date(2024, 12, 1),
        ]

    def test_same_day_keeps_insertion_order(self, store, make_expense):
        first = make_expense(date(2024, 12, 3), 10)
        second = make_expense(date(2024, 12, 3), 20)
        older = make_expense(date(2024, 12, 1), 30)
        for expense in (first, older, second):
            store.add_expense(expense)

        assert [e.id for e in store.expenses] == [first.id, second.id, older.id]

    def test_accessors_return_copies(self, store, make_revenue):
        store.add_revenue(make_revenue(date(2024, 12, 1), 100))
        store.revenues.clear()
        assert len(store.revenues) == 1


class TestRangeQueries:
    def test_range_is_inclusive(self, store, make_revenue):
        for day in range(1, 8):
            store.add_revenue(make_revenue(date(2024, 12, day), 100))

        matched = store.get_revenues_by_date_range(date(2024, 12, 2), date(2024, 12, 4))
        assert sorted(r.date.day for r in matched) == [2, 3, 4]

    def test_datetime_bounds_are_truncated(self, store, make_expense):
        store.add_expense(make_expense(date(2024, 12, 4), 50))
        matched = store.get_expenses_by_date_range(
            datetime(2024, 12, 4, 18, 0), datetime(2024, 12, 4, 6, 0)
        )
        assert len(matched) == 1

    def test_inverted_range_is_empty(self, store, make_revenue):
        store.add_revenue(make_revenue(date(2024, 12, 4), 50))
        assert store.get_revenues_by_date_range(date(2024, 12, 5), date(2024, 12, 1)) == []


class TestMutations:
    def test_set_restaurant(self, store, restaurant):
        assert store.has_restaurant is False
        store.set_restaurant(restaurant)
        assert store.has_restaurant is True
        assert store.restaurant.name == "Chez Fatou"

    def test_update_revenue(self, store, make_revenue):
        revenue = make_revenue(date(2024, 12, 1), 100)
        store.add_revenue(revenue)

        updated = store.update_revenue(revenue.id, {"total_amount": 250, "notes": "late sale"})

        assert updated.total_amount == 250
        assert updated.notes == "late sale"
        assert updated.created_at == revenue.created_at
        assert updated.updated_at == FIXED_CLOCK
        assert store.revenues[0] == updated

    def test_update_cannot_change_id(self, store, make_expense):
        expense = make_expense(date(2024, 12, 1), 100)
        store.add_expense(expense)

        updated = store.update_expense(expense.id, {"id": "exp_other", "total_amount": 5})
        assert updated.id == expense.id

    def test_update_date_resorts(self, store, make_revenue):
        old = make_revenue(date(2024, 12, 1), 100)
        new = make_revenue(date(2024, 12, 10), 100)
        store.add_revenue(old)
        store.add_revenue(new)

        store.update_revenue(old.id, {"date": date(2024, 12, 20)})
        assert [r.id for r in store.revenues] == [old.id, new.id]

    def test_update_is_validated(self, store, make_revenue):
        revenue = make_revenue(date(2024, 12, 1), 100)
        store.add_revenue(revenue)
        with pytest.raises(ValueError):
            store.update_revenue(revenue.id, {"total_amount": -1})
        assert store.revenues[0].total_amount == 100

    def test_update_unknown_id(self, store, storage):
        assert store.update_revenue("rev_missing", {"total_amount": 1}) is None
        assert store.update_expense("exp_missing", {"total_amount": 1}) is None
        assert storage.raw_blob is None

    def test_delete(self, store, make_revenue, make_expense):
        revenue = make_revenue(date(2024, 12, 1), 100)
        expense = make_expense(date(2024, 12, 1), 40)
        store.add_revenue(revenue)
        store.add_expense(expense)

        assert store.delete_revenue(revenue.id) is True
        assert store.delete_expense(expense.id) is True
        assert store.revenues == []
        assert store.expenses == []

    def test_delete_unknown_id(self, store, make_revenue):
        store.add_revenue(make_revenue(date(2024, 12, 1), 100))
        assert store.delete_revenue("rev_missing") is False
        assert store.delete_expense("exp_missing") is False
        assert len(store.revenues) == 1

    def test_reset(self, store, storage, restaurant, make_revenue):
        store.set_restaurant(restaurant)
        store.add_revenue(make_revenue(date(2024, 12, 1), 100))

        store.reset_store()

        assert store.restaurant is None
        assert store.revenues == []
        assert AppSnapshot.from_blob(storage.raw_blob) == AppSnapshot()


class TestPersistence:
    def test_every_mutation_is_saved(self, store, storage, restaurant, make_revenue):
        store.set_restaurant(restaurant)
        store.add_revenue(make_revenue(date(2024, 12, 1), 100, {PaymentMethod.WAVE: 100}))

        snapshot = AppSnapshot.from_blob(storage.raw_blob)
        assert snapshot.restaurant == restaurant
        assert len(snapshot.revenues) == 1

    def test_reload_into_new_store(self, store, storage, restaurant, make_revenue, make_expense):
        store.set_restaurant(restaurant)
        store.add_revenue(make_revenue(date(2024, 12, 2), 300))
        store.add_expense(make_expense(date(2024, 12, 2), 120))

        reloaded = AppStore(storage=storage)
        assert reloaded.load() is True
        assert reloaded.snapshot() == store.snapshot()

    def test_load_from_empty_storage(self, storage):
        store = AppStore(storage=storage)
        assert store.load() is False
        assert store.has_restaurant is False

    def test_corrupt_blob_starts_empty(self, storage, restaurant):
        """A quarantined blob cannot be overwritten, so saving stays allowed."""
        bad_blob = '{"revenues": [{"totalAmount": "lots"}]}'
        storage.put_raw_blob(bad_blob)
        store = AppStore(storage=storage)

        assert store.load() is False
        assert store.revenues == []
        assert store.load_error is not None
        assert store.writes_blocked is False
        assert storage.raw_blob is None
        assert storage.quarantined_blob == bad_blob

        store.set_restaurant(restaurant)
        assert storage.raw_blob is not None
        assert storage.quarantined_blob == bad_blob

    def test_write_failure_keeps_state(self, restaurant):
        failing = FailingStorage()
        store = AppStore(storage=failing)

        with pytest.raises(StorageWriteError):
            store.set_restaurant(restaurant)

        assert store.restaurant == restaurant
        assert failing.attempts == 1

    def test_autosave_disabled(self, storage, restaurant):
        store = AppStore(storage=storage, autosave=False)
        store.set_restaurant(restaurant)
        assert storage.raw_blob is None

        assert store.save() is True
        assert storage.raw_blob is not None

    def test_without_storage(self, restaurant):
        store = AppStore()
        store.set_restaurant(restaurant)
        assert store.save() is False
        assert store.load() is False


class TestReadFailure:
    """A blob that could not be read must survive the session."""

    @pytest.fixture
    def saved_history(self, tmp_path, make_revenue):
        storage = JsonFileStateStorage(path=tmp_path / "state.json", write_retries=1)
        AppStore(storage=storage).add_revenue(make_revenue(date(2024, 12, 1), 500))
        return storage

    @pytest.fixture
    def unreadable(self, monkeypatch):
        def _fail(self):
            raise OSError(5, "Input/output error")

        monkeypatch.setattr(Path, "read_bytes", _fail)
        return monkeypatch

    def test_history_is_not_overwritten(self, saved_history, unreadable, restaurant):
        store = AppStore(storage=saved_history)
        assert store.load() is False
        assert store.writes_blocked is True
        assert "Input/output error" in store.load_error
        unreadable.undo()

        with pytest.raises(StorageWriteError):
            store.set_restaurant(restaurant)

        on_disk = saved_history.load()
        assert len(on_disk.revenues) == 1
        assert on_disk.restaurant is None

    def test_successful_reload_unblocks(self, saved_history, unreadable, restaurant):
        store = AppStore(storage=saved_history)
        store.load()
        unreadable.undo()

        assert store.load() is True
        assert store.load_error is None
        assert store.writes_blocked is False

        store.set_restaurant(restaurant)
        on_disk = saved_history.load()
        assert on_disk.restaurant == restaurant
        assert len(on_disk.revenues) == 1

    def test_explicit_reset_unblocks(self, saved_history, unreadable):
        store = AppStore(storage=saved_history)
        store.load()
        unreadable.undo()

        store.reset_store()

        assert store.writes_blocked is False
        assert saved_history.load() == AppSnapshot()

    def test_autosave_disabled_save_is_refused(self, saved_history, unreadable):
        store = AppStore(storage=saved_history, autosave=False)
        store.load()
        unreadable.undo()

        with pytest.raises(StorageWriteError):
            store.save()
