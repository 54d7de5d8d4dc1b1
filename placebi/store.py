"""
Application State Store

The single source of truth for the restaurant profile and the full
revenue / expense history, and the persistence boundary.

DESIGN DECISION: The store is an explicit object handed to whoever needs
it, not a module-level global. Persistence is an explicit load()/save()
pair; with autosave enabled (the default) every mutator calls save()
before returning, so a committed change is durable before the next read.
A store built without storage is purely in-memory.

Ordering: both histories are kept sorted by date, newest first. The sort
is stable, so records sharing a date keep their insertion order.
"""

import datetime as dt
from typing import Any, Callable, Optional, TypeVar

from placebi.audit import AuditLogger
from placebi.models.restaurant import (
    AppSnapshot,
    DailyExpense,
    DailyRevenue,
    Restaurant,
    utc_now,
)
from placebi.services.storage import (
    CorruptStateError,
    StateStorageInterface,
    StorageError,
    StorageWriteError,
)


RecordT = TypeVar("RecordT", DailyRevenue, DailyExpense)


class AppStore:
    """
    Holds the current restaurant profile and the revenue/expense history.

    Single writer, synchronous. Not thread-safe and not meant to be.
    """

    def __init__(
        self,
        storage: Optional[StateStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        autosave: bool = True,
        clock: Optional[Callable[[], dt.datetime]] = None,
    ):
        """
        Initialize an empty store.

        Args:
            storage: Persistence backend. If None, state lives in memory only.
            audit_logger: Receives one event per mutation.
            autosave: Save after every mutation when storage is attached.
            clock: Source of updated_at timestamps.
        """
        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        self._autosave = autosave
        self._clock = clock or utc_now

        self._restaurant: Optional[Restaurant] = None
        self._revenues: list[DailyRevenue] = []
        self._expenses: list[DailyExpense] = []

        # Set when load() failed and the persisted blob is still in place
        self._load_error: Optional[str] = None
        self._writes_blocked = False

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def restaurant(self) -> Optional[Restaurant]:
        return self._restaurant

    @property
    def has_restaurant(self) -> bool:
        """Gate for every page but setup."""
        return self._restaurant is not None

    @property
    def revenues(self) -> list[DailyRevenue]:
        return list(self._revenues)

    @property
    def expenses(self) -> list[DailyExpense]:
        return list(self._expenses)

    @property
    def storage(self) -> Optional[StateStorageInterface]:
        return self._storage

    @property
    def load_error(self) -> Optional[str]:
        """Why the last load() failed, for display. None after a clean load."""
        return self._load_error

    @property
    def writes_blocked(self) -> bool:
        """True while an unreadable blob must not be overwritten."""
        return self._writes_blocked

    def snapshot(self) -> AppSnapshot:
        """The current state as one persistable value."""
        return AppSnapshot(
            restaurant=self._restaurant,
            revenues=list(self._revenues),
            expenses=list(self._expenses),
        )

    def get_revenues_by_date_range(
        self,
        start: dt.date,
        end: dt.date,
    ) -> list[DailyRevenue]:
        """Revenues dated within [start, end], in store order."""
        return _filter_by_day(self._revenues, start, end)

    def get_expenses_by_date_range(
        self,
        start: dt.date,
        end: dt.date,
    ) -> list[DailyExpense]:
        """Expenses dated within [start, end], in store order."""
        return _filter_by_day(self._expenses, start, end)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def set_restaurant(self, restaurant: Restaurant) -> None:
        """Replace the profile unconditionally."""
        self._restaurant = restaurant
        self._audit.log_restaurant_set(restaurant.id, restaurant.name)
        self._commit()

    def add_revenue(self, revenue: DailyRevenue) -> None:
        self._revenues = _sorted_newest_first([*self._revenues, revenue])
        self._audit.log_record_added(
            "revenue", revenue.id, revenue.date.isoformat(), revenue.total_amount
        )
        self._commit()

    def add_expense(self, expense: DailyExpense) -> None:
        self._expenses = _sorted_newest_first([*self._expenses, expense])
        self._audit.log_record_added(
            "expense", expense.id, expense.date.isoformat(), expense.total_amount
        )
        self._commit()

    def update_revenue(
        self,
        revenue_id: str,
        updates: dict[str, Any],
    ) -> Optional[DailyRevenue]:
        """
        Merge snake_case fields into a revenue and bump updated_at.

        Returns the updated record, or None if the id is unknown.
        """
        updated = self._update(self._revenues, revenue_id, updates)
        if updated is None:
            return None
        self._revenues = _sorted_newest_first(
            [updated if r.id == revenue_id else r for r in self._revenues]
        )
        self._audit.log_record_updated("revenue", revenue_id, sorted(updates))
        self._commit()
        return updated

    def update_expense(
        self,
        expense_id: str,
        updates: dict[str, Any],
    ) -> Optional[DailyExpense]:
        """Same contract as update_revenue."""
        updated = self._update(self._expenses, expense_id, updates)
        if updated is None:
            return None
        self._expenses = _sorted_newest_first(
            [updated if e.id == expense_id else e for e in self._expenses]
        )
        self._audit.log_record_updated("expense", expense_id, sorted(updates))
        self._commit()
        return updated

    def delete_revenue(self, revenue_id: str) -> bool:
        """Remove a revenue. Returns False (and does nothing) if not found."""
        remaining = [r for r in self._revenues if r.id != revenue_id]
        if len(remaining) == len(self._revenues):
            return False
        self._revenues = remaining
        self._audit.log_record_deleted("revenue", revenue_id)
        self._commit()
        return True

    def delete_expense(self, expense_id: str) -> bool:
        """Remove an expense. Returns False (and does nothing) if not found."""
        remaining = [e for e in self._expenses if e.id != expense_id]
        if len(remaining) == len(self._expenses):
            return False
        self._expenses = remaining
        self._audit.log_record_deleted("expense", expense_id)
        self._commit()
        return True

    def reset_store(self) -> None:
        """
        Forget the profile and every record. Irreversible once saved.

        This is also the explicit way out of a failed load: the unreadable
        blob is replaced by the empty state.
        """
        revenue_count, expense_count = len(self._revenues), len(self._expenses)
        self._restaurant = None
        self._revenues = []
        self._expenses = []
        self._writes_blocked = False
        self._audit.log_store_reset(revenue_count, expense_count)
        self._commit()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> bool:
        """
        Rehydrate from storage.

        Returns True if a persisted snapshot was restored. A missing blob
        or an unreadable one leaves the store empty; the latter is logged
        as an error but never raised, so the app can still start.

        If the blob could not be read and was not moved aside, saving is
        refused until a later load() succeeds or reset_store() is called,
        so the empty session cannot overwrite the existing history.
        """
        if self._storage is None:
            return False

        try:
            snapshot = self._storage.load()
        except StorageError as e:
            self._audit.log_state_load_failed(str(e))
            self._apply(AppSnapshot())
            self._load_error = str(e)
            self._writes_blocked = not (
                isinstance(e, CorruptStateError) and e.quarantined_to
            )
            return False

        found = snapshot is not None
        self._apply(snapshot or AppSnapshot())
        self._load_error = None
        self._writes_blocked = False
        self._audit.log_state_loaded(found, len(self._revenues), len(self._expenses))
        return found

    def save(self) -> bool:
        """
        Persist the current state.

        Raises:
            StorageError: The write failed. The in-memory state is kept
                and will be written by the next successful save.
            StorageWriteError: Writes are blocked after a failed load.
        """
        if self._storage is None:
            return False

        if self._writes_blocked:
            message = (
                f"Not saving: the stored data could not be read ({self._load_error}). "
                "Reload, or reset to start over."
            )
            self._audit.log_state_save_failed(message)
            raise StorageWriteError(message)

        try:
            self._storage.save(self.snapshot())
        except StorageError as e:
            self._audit.log_state_save_failed(str(e))
            raise

        self._audit.log_state_saved(len(self._revenues), len(self._expenses))
        return True

    def _commit(self) -> None:
        if self._autosave:
            self.save()

    def _apply(self, snapshot: AppSnapshot) -> None:
        self._restaurant = snapshot.restaurant
        self._revenues = list(snapshot.revenues)
        self._expenses = list(snapshot.expenses)

    def _update(
        self,
        records: list[RecordT],
        record_id: str,
        updates: dict[str, Any],
    ) -> Optional[RecordT]:
        current = next((r for r in records if r.id == record_id), None)
        if current is None:
            return None

        data = current.model_dump()
        data.update({k: v for k, v in updates.items() if k != "id"})
        data["updated_at"] = self._clock()
        return type(current).model_validate(data)


def _sorted_newest_first(records: list[RecordT]) -> list[RecordT]:
    # sorted() is stable with reverse=True too: equal dates keep insertion order
    return sorted(records, key=lambda r: r.date, reverse=True)


def _filter_by_day(records: list[RecordT], start: dt.date, end: dt.date) -> list[RecordT]:
    start, end = _as_day(start), _as_day(end)
    return [r for r in records if start <= r.date <= end]


def _as_day(value: dt.date) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    return value
