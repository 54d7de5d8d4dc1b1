"""
Main Orchestrator for Placebi

This module ties together all the components and defines the
end-to-end flows behind each page:
1. Setup (form -> validate -> Restaurant -> store)
2. Revenue / expense entry (form -> validate -> record -> store)
3. Dashboard (filter -> range query -> analytics engine -> view)
4. Settings (profile edit, full reset)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the store without passing validation
- Nothing is recorded before a restaurant profile exists
- The analytics engine only ever sees snapshots, never the store

The UI layer is a thin binding over these flows.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

import structlog
from pydantic import BaseModel

from placebi.analytics import (
    calculate_kpis,
    calculate_payment_method_breakdown,
    generate_revenue_time_series,
    get_date_range,
    predict_month_revenue,
    predict_week_revenue,
)
from placebi.audit import AuditLogger, configure_logging
from placebi.config import get_settings
from placebi.models.analytics import (
    FinancialKPIs,
    PaymentMethodBreakdown,
    Prediction,
    RevenueTimeSeriesPoint,
    TimeFilter,
)
from placebi.models.forms import (
    ExpenseFormData,
    RestaurantFormData,
    RevenueEntryMode,
    RevenueFormData,
    ValidationResult,
)
from placebi.models.restaurant import (
    DailyExpense,
    DailyRevenue,
    ExpenseLine,
    Restaurant,
    RevenuePaymentMethod,
    utc_now,
)
from placebi.services.storage import (
    InMemoryStateStorage,
    JsonFileStateStorage,
    StateStorageInterface,
)
from placebi.store import AppStore
from placebi.validation import EntryValidator


logger = structlog.get_logger(__name__)


class RestaurantNotConfiguredError(Exception):
    """An entry was submitted before the setup wizard was completed."""
    pass


class EntryRejectedError(Exception):
    """A form failed validation; nothing was written to the store."""

    def __init__(self, result: ValidationResult):
        super().__init__(
            f"{result.form} entry rejected with {result.error_count} error(s)"
        )
        self.result = result


class _EntryFlow:
    """Shared plumbing: validation outcome -> audit -> raise or continue."""

    def __init__(
        self,
        store: AppStore,
        validator: Optional[EntryValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._validator = validator or EntryValidator()
        self._audit_logger = audit_logger or AuditLogger()

    def _require_valid(self, result: ValidationResult) -> None:
        if result.has_errors:
            self._audit_logger.log_entry_rejected(
                result.form,
                [issue.model_dump() for issue in result.issues],
            )
            raise EntryRejectedError(result)

    def _require_restaurant(self) -> Restaurant:
        if not self._store.has_restaurant:
            raise RestaurantNotConfiguredError(
                "Complete the restaurant setup before recording entries"
            )
        return self._store.restaurant


class SetupFlow(_EntryFlow):
    """Creates or edits the restaurant profile."""

    def validate(self, form: RestaurantFormData) -> ValidationResult:
        return self._validator.validate_restaurant(form)

    def submit(self, form: RestaurantFormData) -> Restaurant:
        """
        Validate the form and store the profile.

        Editing an existing profile keeps its id and created_at.

        Raises:
            EntryRejectedError: The form has errors
        """
        self._require_valid(self.validate(form))

        now = utc_now()
        fields = {
            "name": form.name,
            "location": form.location,
            "type": form.type,
            "currency": form.currency,
            "created_at": now,
            "updated_at": now,
        }
        current = self._store.restaurant
        if current is not None:
            fields.update(id=current.id, created_at=current.created_at)

        restaurant = Restaurant(**fields)
        self._store.set_restaurant(restaurant)
        return restaurant


class RevenueEntryFlow(_EntryFlow):
    """Turns a revenue form into a DailyRevenue record."""

    def validate(self, form: RevenueFormData) -> ValidationResult:
        return self._validator.validate_revenue(form)

    def submit(self, form: RevenueFormData) -> DailyRevenue:
        """
        Validate and record a day's revenue.

        GLOBAL mode: the total is the sum of the payment-method amounts.
        DETAILED mode: the total is the one entered.
        Zero-amount lines are dropped in both modes.

        Raises:
            RestaurantNotConfiguredError: Setup not completed
            EntryRejectedError: The form has errors
        """
        restaurant = self._require_restaurant()
        self._require_valid(self.validate(form))

        if form.mode == RevenueEntryMode.GLOBAL:
            total_amount = form.payment_methods_total
        else:
            total_amount = form.total_amount

        revenue = DailyRevenue(
            restaurant_id=restaurant.id,
            date=form.date,
            total_amount=total_amount,
            payment_methods=[
                RevenuePaymentMethod(method=pm.method, amount=pm.amount)
                for pm in form.payment_methods
                if pm.amount > 0
            ],
            notes=form.notes or None,
        )

        self._store.add_revenue(revenue)
        return revenue


class ExpenseEntryFlow(_EntryFlow):
    """Turns an expense form into a DailyExpense record."""

    def validate(self, form: ExpenseFormData) -> ValidationResult:
        return self._validator.validate_expense(form)

    def submit(self, form: ExpenseFormData) -> DailyExpense:
        """
        Validate and record a day's expenses.

        Simple mode keeps only the entered total. Detailed mode keeps the
        positive lines and uses their sum as the total.

        Raises:
            RestaurantNotConfiguredError: Setup not completed
            EntryRejectedError: The form has errors
        """
        restaurant = self._require_restaurant()
        self._require_valid(self.validate(form))

        if form.is_detailed:
            lines = [
                ExpenseLine(category=line.category, amount=line.amount)
                for line in form.expense_lines
                if line.amount > 0
            ]
            expense = DailyExpense(
                restaurant_id=restaurant.id,
                date=form.date,
                total_amount=sum(line.amount for line in lines),
                is_detailed=True,
                expense_lines=lines,
                notes=form.notes or None,
            )
        else:
            expense = DailyExpense(
                restaurant_id=restaurant.id,
                date=form.date,
                total_amount=form.total_amount,
                is_detailed=False,
                notes=form.notes or None,
            )

        self._store.add_expense(expense)
        return expense


class DashboardView(BaseModel):
    """Everything the dashboard page renders, computed in one pass."""

    time_filter: TimeFilter
    start: date
    end: date
    kpis: FinancialKPIs
    payment_breakdown: list[PaymentMethodBreakdown]
    time_series: list[RevenueTimeSeriesPoint]
    week_prediction: Prediction
    month_prediction: Prediction


class DashboardFlow:
    """
    Builds the dashboard from a store snapshot.

    KPIs, breakdown and series cover the selected period only.
    Predictions always look at the full history.
    """

    def __init__(self, store: AppStore):
        self._store = store

    def build(
        self,
        time_filter: Union[TimeFilter, str] = TimeFilter.THIS_MONTH,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> DashboardView:
        time_filter = TimeFilter(time_filter)
        if now is None and today is None:
            now = datetime.now()
        today = today or now.date()
        start, end = get_date_range(time_filter, today=today)

        revenues = self._store.get_revenues_by_date_range(start, end)
        expenses = self._store.get_expenses_by_date_range(start, end)
        all_revenues = self._store.revenues
        all_expenses = self._store.expenses
        # A bare `today` gives day-level prediction windows
        prediction_now = now or today

        return DashboardView(
            time_filter=time_filter,
            start=start,
            end=end,
            kpis=calculate_kpis(revenues, expenses),
            payment_breakdown=calculate_payment_method_breakdown(revenues),
            time_series=generate_revenue_time_series(revenues, expenses, start, end),
            week_prediction=predict_week_revenue(all_revenues, all_expenses, now=prediction_now),
            month_prediction=predict_month_revenue(all_revenues, all_expenses, now=prediction_now),
        )


class SettingsFlow:
    """Settings page actions."""

    def __init__(self, store: AppStore):
        self._store = store

    def storage_location(self) -> str:
        storage = self._store.storage
        return storage.describe() if storage else "not persisted"

    def load_error(self) -> Optional[str]:
        """Why the stored data could not be loaded, if it could not."""
        return self._store.load_error

    def reload(self) -> bool:
        """Retry loading the stored data, e.g. after a transient read error."""
        return self._store.load()

    def reset(self) -> None:
        """Delete the profile and the whole history. The UI must confirm first."""
        self._store.reset_store()


@dataclass
class AppComponents:
    """Everything the UI needs, wired together."""

    store: AppStore
    setup_flow: SetupFlow
    revenue_flow: RevenueEntryFlow
    expense_flow: ExpenseEntryFlow
    dashboard_flow: DashboardFlow
    settings_flow: SettingsFlow


def create_app_components(
    use_storage: bool = True,
    storage: Optional[StateStorageInterface] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to persist to the configured JSON file.
                    Set to False for an in-memory session.
        storage: Explicit backend, overriding use_storage.

    Returns:
        The wired components, with the store already loaded.
    """
    settings = get_settings()
    app_settings = settings.app
    configure_logging(app_settings.effective_log_level)
    logger.info(
        "app_starting",
        environment=app_settings.app_environment,
        debug_mode=app_settings.debug_mode,
    )
    audit_logger = AuditLogger()

    if storage is None:
        if use_storage:
            try:
                storage = JsonFileStateStorage()
            except Exception as e:
                # Storage not configured - continue in memory
                logger.warning("storage_not_configured", error=str(e))
                storage = InMemoryStateStorage()
        else:
            storage = InMemoryStateStorage()

    store = AppStore(storage=storage, audit_logger=audit_logger)
    store.load()

    validator = EntryValidator(app_settings)

    return AppComponents(
        store=store,
        setup_flow=SetupFlow(store, validator, audit_logger),
        revenue_flow=RevenueEntryFlow(store, validator, audit_logger),
        expense_flow=ExpenseEntryFlow(store, validator, audit_logger),
        dashboard_flow=DashboardFlow(store),
        settings_flow=SettingsFlow(store),
    )
