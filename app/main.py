"""
Streamlit Frontend for Placebi

This is the interface a restaurant owner uses every evening to record
the day's takings and spending, and to glance at how the month is going.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Nothing works until the restaurant is set up
3. Clear error messages next to the field that caused them
4. Visual feedback for every save
5. Destructive actions need an explicit confirmation

The UI is a thin binding over the orchestrator flows:
- Forms are validated by the flows, not here
- Charts render DashboardView values as-is
"""

from datetime import date

import plotly.graph_objects as go
import streamlit as st

from placebi.config import get_settings, validate_all_settings
from placebi.models.analytics import Prediction, TimeFilter
from placebi.models.forms import (
    ExpenseFormData,
    ExpenseLineEntry,
    PaymentMethodEntry,
    RestaurantFormData,
    RevenueEntryMode,
    RevenueFormData,
)
from placebi.models.restaurant import ExpenseCategory, PaymentMethod, RestaurantType
from placebi.orchestrator import (
    AppComponents,
    EntryRejectedError,
    RestaurantNotConfiguredError,
    create_app_components,
)
from placebi.services.storage import StorageError
from placebi.utils.formatting import format_currency, format_percent


# Page configuration
st.set_page_config(
    page_title="Placebi",
    page_icon="🍽️",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


PAYMENT_METHOD_LABELS = {
    PaymentMethod.WAVE: "Wave",
    PaymentMethod.ORANGE_MONEY: "Orange Money",
    PaymentMethod.CASH: "Cash",
}

PAYMENT_METHOD_COLORS = {
    PaymentMethod.WAVE: "#0ea5e9",
    PaymentMethod.ORANGE_MONEY: "#f97316",
    PaymentMethod.CASH: "#10b981",
}

EXPENSE_CATEGORY_LABELS = {
    ExpenseCategory.RENT: "Rent",
    ExpenseCategory.SALARIES: "Salaries",
    ExpenseCategory.INGREDIENTS: "Ingredients",
    ExpenseCategory.UTILITIES: "Utilities (water, electricity)",
    ExpenseCategory.TRANSPORT: "Transport",
    ExpenseCategory.MARKETING: "Marketing",
    ExpenseCategory.OTHERS: "Others",
}

TIME_FILTER_LABELS = {
    TimeFilter.TODAY: "Today",
    TimeFilter.THIS_WEEK: "This week",
    TimeFilter.THIS_MONTH: "This month",
}

PAGES = ["📊 Dashboard", "💵 Revenue", "🧾 Expense", "⚙️ Settings"]


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create application components (cached)."""
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize storage, data will not be saved: {e}")
        return create_app_components(use_storage=False)


def main():
    """Main application entry point."""
    components = get_components()
    store = components.store

    st.sidebar.title("🍽️ Placebi")
    st.sidebar.markdown("---")

    render_load_error(components)

    # Every page but setup needs a restaurant
    if not store.has_restaurant:
        render_setup_page(components)
        return

    st.sidebar.markdown(f"**{store.restaurant.name}**  \n{store.restaurant.location}")
    page = st.sidebar.radio("Navigate to:", PAGES, index=0)

    if page == "📊 Dashboard":
        render_dashboard_page(components)
    elif page == "💵 Revenue":
        render_revenue_page(components)
    elif page == "🧾 Expense":
        render_expense_page(components)
    elif page == "⚙️ Settings":
        render_settings_page(components)


def render_load_error(components: AppComponents):
    """Tell the user when their saved data could not be loaded."""
    error = components.settings_flow.load_error()
    if not error:
        return

    if components.store.writes_blocked:
        st.error(
            f"Your saved data could not be read: {error}. "
            "Nothing will be saved until it loads again."
        )
    else:
        st.error(
            f"Your saved data was unreadable and has been set aside: {error}. "
            "You are starting from an empty history."
        )
    if st.button("🔄 Retry loading data"):
        components.settings_flow.reload()
        st.rerun()


def show_field_errors(error: EntryRejectedError):
    """Render validation errors, one line per field."""
    for field, message in error.result.errors_by_field().items():
        st.error(f"**{field.replace('_', ' ').capitalize()}**: {message}")


def show_warnings(result):
    for issue in result.warnings:
        st.warning(issue.message)


def restaurant_form(components: AppComponents, submit_label: str):
    """Shared by the setup wizard and the settings page."""
    settings = get_settings().app
    current = components.store.restaurant
    currencies = settings.supported_currencies_list
    current_currency = current.currency if current else settings.default_currency
    if current_currency not in currencies:
        currencies = [current_currency, *currencies]

    with st.form("restaurant_form"):
        name = st.text_input("Restaurant name *", value=current.name if current else "")
        location = st.text_input("Location *", value=current.location if current else "")
        restaurant_type = st.selectbox(
            "Type",
            options=list(RestaurantType),
            index=list(RestaurantType).index(current.type) if current else 0,
            format_func=lambda x: x.value.replace("_", " ").title(),
        )
        currency = st.selectbox(
            "Currency",
            options=currencies,
            index=currencies.index(current_currency),
        )
        submitted = st.form_submit_button(submit_label, type="primary")

    if not submitted:
        return None

    form = RestaurantFormData(
        name=name,
        location=location,
        type=restaurant_type,
        currency=currency,
    )
    try:
        return components.setup_flow.submit(form)
    except EntryRejectedError as e:
        show_field_errors(e)
    except StorageError as e:
        st.error(f"Saved in this session only, the data file could not be written: {e}")
    return None


def render_setup_page(components: AppComponents):
    """Render the first-run setup wizard."""
    st.title("🏪 Set up your restaurant")
    st.markdown("A few details before you start recording your daily figures.")

    if restaurant_form(components, "Create my restaurant"):
        st.rerun()


def render_kpi_cards(view, currency: str):
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Revenue", format_currency(view.kpis.total_revenue, currency))
    with col2:
        st.metric("Expenses", format_currency(view.kpis.total_expenses, currency))
    with col3:
        st.metric(
            "Net margin",
            format_currency(view.kpis.net_margin, currency),
            delta=format_percent(view.kpis.net_margin_percentage),
        )


def render_time_series_chart(view, currency: str):
    days = [point.date for point in view.time_series]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=days,
        y=[point.revenue for point in view.time_series],
        name="Revenue",
        mode="lines+markers",
        line=dict(color="#10b981", width=2),
    ))
    fig.add_trace(go.Scatter(
        x=days,
        y=[point.expenses for point in view.time_series],
        name="Expenses",
        mode="lines+markers",
        line=dict(color="#ef4444", width=2),
    ))
    fig.add_trace(go.Scatter(
        x=days,
        y=[point.net_margin for point in view.time_series],
        name="Net margin",
        mode="lines",
        line=dict(color="#6366f1", width=2, dash="dot"),
    ))
    fig.update_layout(
        height=360,
        margin=dict(l=10, r=10, t=10, b=10),
        yaxis_title=currency,
        hovermode="x unified",
        legend=dict(orientation="h", y=-0.2),
    )
    st.plotly_chart(fig, use_container_width=True)


def render_payment_breakdown_chart(view, currency: str):
    if not any(row.amount for row in view.payment_breakdown):
        st.info("No revenue recorded for this period.")
        return

    fig = go.Figure(go.Pie(
        labels=[PAYMENT_METHOD_LABELS[row.method] for row in view.payment_breakdown],
        values=[row.amount for row in view.payment_breakdown],
        hole=0.5,
        textinfo="label+percent",
        marker=dict(colors=[PAYMENT_METHOD_COLORS[row.method] for row in view.payment_breakdown]),
    ))
    fig.update_layout(
        height=320,
        margin=dict(l=10, r=10, t=10, b=10),
        showlegend=False,
    )
    st.plotly_chart(fig, use_container_width=True)

    for row in view.payment_breakdown:
        st.markdown(
            f"**{PAYMENT_METHOD_LABELS[row.method]}**: "
            f"{format_currency(row.amount, currency)} ({format_percent(row.percentage)})"
        )


def render_prediction_card(title: str, prediction: Prediction, currency: str):
    st.markdown(f"#### {title}")
    st.caption(f"Based on the recent daily average, {prediction.remaining_days} day(s) left")
    st.markdown(f"Revenue: **{format_currency(prediction.predicted_revenue, currency)}**")
    st.markdown(f"Expenses: **{format_currency(prediction.predicted_expenses, currency)}**")
    color = "green" if prediction.predicted_net_margin >= 0 else "red"
    st.markdown(
        f"Net margin: :{color}[**{format_currency(prediction.predicted_net_margin, currency)}** "
        f"({format_percent(prediction.predicted_net_margin_percentage)})]"
    )
    with st.expander("By payment method"):
        for item in prediction.payment_method_predictions:
            st.markdown(
                f"{PAYMENT_METHOD_LABELS[item.method]}: "
                f"{format_currency(item.predicted_amount, currency)}"
            )


def render_dashboard_page(components: AppComponents):
    """Render the dashboard page."""
    st.title("📊 Dashboard")
    st.markdown("Overview of your finances")

    currency = components.store.restaurant.currency

    time_filter = st.radio(
        "Period",
        options=list(TIME_FILTER_LABELS),
        index=2,
        format_func=lambda x: TIME_FILTER_LABELS[x],
        horizontal=True,
    )

    try:
        view = components.dashboard_flow.build(time_filter)
    except Exception as e:
        st.error(f"Could not compute the dashboard: {e}")
        return

    render_kpi_cards(view, currency)
    st.markdown("---")

    col1, col2 = st.columns([2, 1])
    with col1:
        st.subheader("Revenue and expenses per day")
        render_time_series_chart(view, currency)
    with col2:
        st.subheader("Payment methods")
        render_payment_breakdown_chart(view, currency)

    st.markdown("---")
    st.subheader("🔮 Predictions")
    col1, col2 = st.columns(2)
    with col1:
        render_prediction_card("Rest of the week", view.week_prediction, currency)
    with col2:
        render_prediction_card("Rest of the month", view.month_prediction, currency)


def render_revenue_page(components: AppComponents):
    """Render the revenue entry page."""
    st.title("💵 Record revenue")
    st.markdown("Enter the day's takings for your restaurant.")

    currency = components.store.restaurant.currency

    if "revenue_lines" not in st.session_state:
        st.session_state.revenue_lines = 1

    mode = st.radio(
        "Entry mode",
        options=list(RevenueEntryMode),
        format_func=lambda x: "Global" if x == RevenueEntryMode.GLOBAL else "Detailed",
        horizontal=True,
    )
    entry_date = st.date_input("Date", value=date.today(), key="revenue_date")

    total_amount = None
    if mode == RevenueEntryMode.GLOBAL:
        st.markdown("**Split by payment method**")
        payment_methods = [
            PaymentMethodEntry(
                method=method,
                amount=st.number_input(
                    PAYMENT_METHOD_LABELS[method],
                    min_value=0.0,
                    step=100.0,
                    key=f"revenue_global_{method.value}",
                ),
            )
            for method in PaymentMethod
        ]
    else:
        total_amount = st.number_input("Total amount *", min_value=0.0, step=100.0)
        st.markdown("**Revenue lines**")
        payment_methods = []
        for i in range(st.session_state.revenue_lines):
            col1, col2 = st.columns(2)
            with col1:
                amount = st.number_input(
                    "Amount", min_value=0.0, step=100.0, key=f"revenue_line_amount_{i}"
                )
            with col2:
                method = st.selectbox(
                    "Method",
                    options=list(PaymentMethod),
                    format_func=lambda x: PAYMENT_METHOD_LABELS[x],
                    key=f"revenue_line_method_{i}",
                )
            payment_methods.append(PaymentMethodEntry(method=method, amount=amount))

        col1, col2 = st.columns(2)
        with col1:
            if st.button("➕ Add line"):
                st.session_state.revenue_lines += 1
                st.rerun()
        with col2:
            if st.session_state.revenue_lines > 1 and st.button("🗑️ Remove last line"):
                st.session_state.revenue_lines -= 1
                st.rerun()

    lines_total = sum(pm.amount for pm in payment_methods)
    st.markdown(f"**Total from lines:** {format_currency(lines_total, currency)}")

    notes = st.text_area("Notes (optional)", key="revenue_notes")

    if st.button("✅ Save revenue", type="primary"):
        form = RevenueFormData(
            date=entry_date,
            mode=mode,
            total_amount=total_amount,
            payment_methods=payment_methods,
            notes=notes,
        )
        try:
            revenue = components.revenue_flow.submit(form)
        except EntryRejectedError as e:
            show_field_errors(e)
        except RestaurantNotConfiguredError as e:
            st.error(str(e))
        except StorageError as e:
            st.error(f"Recorded for this session only, the data file could not be written: {e}")
        else:
            show_warnings(components.revenue_flow.validate(form))
            st.markdown(f"""
            <div class="success-box">
                <h4>✅ Revenue saved</h4>
                <p>{format_currency(revenue.total_amount, currency)} on {revenue.date.strftime('%d %B %Y')}</p>
            </div>
            """, unsafe_allow_html=True)


def render_expense_page(components: AppComponents):
    """Render the expense entry page."""
    st.title("🧾 Record expenses")
    st.markdown("Enter what the restaurant spent today.")

    currency = components.store.restaurant.currency

    if "expense_lines" not in st.session_state:
        st.session_state.expense_lines = 1

    is_detailed = st.toggle("Detailed by category", value=False)
    entry_date = st.date_input("Date", value=date.today(), key="expense_date")

    total_amount = None
    expense_lines = []
    if not is_detailed:
        total_amount = st.number_input("Total amount *", min_value=0.0, step=100.0)
    else:
        st.markdown("**Expense lines**")
        for i in range(st.session_state.expense_lines):
            col1, col2 = st.columns(2)
            with col1:
                category = st.selectbox(
                    "Category",
                    options=list(ExpenseCategory),
                    index=list(ExpenseCategory).index(ExpenseCategory.INGREDIENTS),
                    format_func=lambda x: EXPENSE_CATEGORY_LABELS[x],
                    key=f"expense_line_category_{i}",
                )
            with col2:
                amount = st.number_input(
                    "Amount", min_value=0.0, step=100.0, key=f"expense_line_amount_{i}"
                )
            expense_lines.append(ExpenseLineEntry(category=category, amount=amount))

        col1, col2 = st.columns(2)
        with col1:
            if st.button("➕ Add line"):
                st.session_state.expense_lines += 1
                st.rerun()
        with col2:
            if st.session_state.expense_lines > 1 and st.button("🗑️ Remove last line"):
                st.session_state.expense_lines -= 1
                st.rerun()

        st.markdown(
            f"**Total:** {format_currency(sum(line.amount for line in expense_lines), currency)}"
        )

    notes = st.text_area("Notes (optional)", key="expense_notes")

    if st.button("✅ Save expense", type="primary"):
        form = ExpenseFormData(
            date=entry_date,
            total_amount=total_amount,
            is_detailed=is_detailed,
            expense_lines=expense_lines,
            notes=notes,
        )
        try:
            expense = components.expense_flow.submit(form)
        except EntryRejectedError as e:
            show_field_errors(e)
        except RestaurantNotConfiguredError as e:
            st.error(str(e))
        except StorageError as e:
            st.error(f"Recorded for this session only, the data file could not be written: {e}")
        else:
            show_warnings(components.expense_flow.validate(form))
            st.markdown(f"""
            <div class="success-box">
                <h4>✅ Expense saved</h4>
                <p>{format_currency(expense.total_amount, currency)} on {expense.date.strftime('%d %B %Y')}</p>
            </div>
            """, unsafe_allow_html=True)


def render_settings_page(components: AppComponents):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Restaurant")
    if restaurant_form(components, "Save changes"):
        st.success("Restaurant updated")

    st.markdown("---")
    st.markdown("### Data")
    store = components.store
    st.markdown(
        f"{len(store.revenues)} revenue and {len(store.expenses)} expense record(s), "
        f"stored in `{components.settings_flow.storage_location()}`"
    )

    status = validate_all_settings()
    for name, key in [("Storage", "storage"), ("Application", "app")]:
        if not status.get(key, False):
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")

    st.markdown("""
    <div class="warning-box">
        <h4>⚠️ Reset all data</h4>
        <p>Deletes the restaurant profile and every revenue and expense. This cannot be undone.</p>
    </div>
    """, unsafe_allow_html=True)

    confirmed = st.checkbox("I understand that all data will be deleted")
    if st.button("🗑️ Reset everything", disabled=not confirmed):
        try:
            components.settings_flow.reset()
        except StorageError as e:
            st.error(f"Data cleared for this session, but the data file could not be written: {e}")
        st.rerun()


if __name__ == "__main__":
    main()
