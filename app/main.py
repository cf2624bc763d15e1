"""
Streamlit Frontend for the Cash Flow Tracker

DESIGN PRINCIPLES:
1. Every number on screen is derived from the records at render time
2. Every change goes through the FinanceController (never the state directly)
3. Clear error messages; sync problems are shown but never lose local data
4. The PIN lock covers everything once a PIN is set
"""

import asyncio
from datetime import date
from decimal import Decimal

import pandas as pd
import streamlit as st
from pydantic import ValidationError

from cashflow.aggregates import (
    all_budget_progress,
    asset_summary_by_type,
    calendar_running_balance,
    cash_flow_history,
    daily_activity,
    month_totals,
    net_cash_balance,
    obligation_overview,
    obligation_progress,
    payoff_schedule,
    spending_by_category,
    total_asset_value,
    value_asset,
    year_running_balance,
    year_totals,
)
from cashflow.config import validate_all_settings
from cashflow.models.records import (
    INCOME_CATEGORIES,
    OBLIGATION_PAYMENT_CATEGORY,
    SPENDING_CATEGORIES,
    Asset,
    AssetType,
    Budget,
    BudgetPeriod,
    Frequency,
    Income,
    Obligation,
    ObligationType,
    Spending,
    SpendingKind,
)
from cashflow.orchestrator import FinanceController, create_app_components
from cashflow.services.export import ExportError
from cashflow.utils.currency import format_currency


# Page configuration
st.set_page_config(
    page_title="Cash Flow",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_controller() -> FinanceController:
    """Get or create the application controller (cached)."""
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        return create_app_components(use_storage=False)


def money(controller: FinanceController, amount, **kwargs) -> str:
    state = controller.state
    return format_currency(
        amount,
        state.currency,
        hide_amount=state.is_amount_hidden,
        **kwargs,
    )


def show_error(controller: FinanceController):
    if controller.state.error:
        st.error(controller.state.error)


def submit_update(coro):
    """Run an update from an edit form; invalid changes leave the record as it was."""
    try:
        run_async(coro)
    except ValidationError as e:
        st.error(f"Please check the form: {e.errors()[0]['msg']}")
        return
    st.rerun()


def main():
    """Main application entry point."""
    controller = get_controller()

    if controller.has_remote and controller.state.profile is None:
        render_login_page(controller)
        return

    if controller.state.is_locked and controller.state.pin:
        render_lock_screen(controller)
        return
    if controller.state.is_locked:
        run_async(controller.unlock(""))

    st.sidebar.title("💰 Cash Flow")
    if controller.state.profile:
        st.sidebar.caption(f"Signed in as {controller.state.profile.user_id_text}")
    if controller.state.is_syncing:
        st.sidebar.info("Syncing...")
    elif controller.state.last_synced_at:
        st.sidebar.caption(f"Last synced {controller.state.last_synced_at:%Y-%m-%d %H:%M} UTC")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        [
            "📊 Dashboard",
            "💵 Incomes",
            "🧾 Spendings",
            "🏦 Obligations",
            "🪙 Assets",
            "🎯 Budgets",
            "📅 Calendar",
            "⚙️ Settings",
        ],
        index=0,
    )

    st.sidebar.markdown("---")
    hidden = st.sidebar.toggle("Hide amounts", value=controller.state.is_amount_hidden)
    if hidden != controller.state.is_amount_hidden:
        controller.set_amount_hidden(hidden)
        st.rerun()
    if st.sidebar.button("🔒 Lock"):
        controller.lock()
        st.rerun()

    show_error(controller)

    if page == "📊 Dashboard":
        render_dashboard_page(controller)
    elif page == "💵 Incomes":
        render_incomes_page(controller)
    elif page == "🧾 Spendings":
        render_spendings_page(controller)
    elif page == "🏦 Obligations":
        render_obligations_page(controller)
    elif page == "🪙 Assets":
        render_assets_page(controller)
    elif page == "🎯 Budgets":
        render_budgets_page(controller)
    elif page == "📅 Calendar":
        render_calendar_page(controller)
    elif page == "⚙️ Settings":
        render_settings_page(controller)


# =============================================================================
# GATES
# =============================================================================

def render_login_page(controller: FinanceController):
    st.title("💰 Cash Flow")
    st.markdown("Enter your User ID and a 6-digit PIN. New IDs are registered automatically.")
    show_error(controller)

    with st.form("login"):
        user_id = st.text_input("User ID")
        pin = st.text_input("6-Digit PIN", type="password", max_chars=6)
        submitted = st.form_submit_button("Sign in", type="primary")

    if submitted:
        with st.spinner("Signing in..."):
            result = run_async(controller.login(user_id, pin))
        if result.ok:
            if result.created:
                st.success("Welcome! Your profile was created.")
            st.rerun()
        else:
            st.error(result.error)


def render_lock_screen(controller: FinanceController):
    st.title("🔒 Enter PIN")
    with st.form("unlock"):
        pin = st.text_input("PIN", type="password", max_chars=6)
        submitted = st.form_submit_button("Unlock", type="primary")
    if submitted:
        if run_async(controller.unlock(pin)):
            st.rerun()
        else:
            st.error("Wrong PIN")


# =============================================================================
# DASHBOARD
# =============================================================================

def render_dashboard_page(controller: FinanceController):
    st.title("📊 Dashboard")
    state = controller.state
    today = date.today()

    this_month = month_totals(state.incomes, state.spendings, today.year, today.month)
    overview = obligation_overview(state.obligations)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Net cash balance", money(controller, net_cash_balance(state.incomes, state.spendings)))
    col2.metric(f"Income ({this_month.label})", money(controller, this_month.income))
    col3.metric(f"Spending ({this_month.label})", money(controller, this_month.expense))
    col4.metric("Net this month", money(controller, this_month.net, sign_display="always"))

    st.markdown("### Cash flow, last 6 months")
    history = cash_flow_history(state.incomes, state.spendings, today)
    st.bar_chart(
        pd.DataFrame(
            {
                "Income": [float(p.income) for p in history],
                "Spending": [float(p.expense) for p in history],
            },
            index=[p.label for p in history],
        )
    )

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("### Obligations")
        st.metric("Monthly commitments", money(controller, overview.total_monthly_payment))
        st.metric("Total debt", money(controller, overview.total_debt))
        st.caption(
            f"Installments {money(controller, overview.installment_balance)} · "
            f"Other debt {money(controller, overview.other_debt_balance)}"
        )
    with col2:
        st.markdown("### Assets")
        st.metric("Total value", money(controller, total_asset_value(state.assets, controller.prices)))
        for asset_type, value in asset_summary_by_type(state.assets, controller.prices):
            st.write(f"{asset_type.value.title()}: {money(controller, value)}")

    st.markdown("### Spending by category this month")
    by_category = spending_by_category(state.spendings, today.year, today.month)
    if by_category:
        st.dataframe(
            pd.DataFrame(
                [{"Category": c.category, "Amount": money(controller, c.amount)} for c in by_category]
            ),
            hide_index=True,
        )
    else:
        st.info("No spendings this month yet.")


# =============================================================================
# INCOMES & SPENDINGS
# =============================================================================

def render_incomes_page(controller: FinanceController):
    st.title("💵 Incomes")

    with st.expander("➕ Add income"):
        with st.form("add_income", clear_on_submit=True):
            name = st.text_input("Name")
            amount = st.number_input("Amount", min_value=0.0, step=100.0)
            category = st.selectbox("Category", list(INCOME_CATEGORIES))
            frequency = st.selectbox("Frequency", list(Frequency), format_func=lambda f: f.value)
            when = st.date_input("Date", value=date.today())
            if st.form_submit_button("Save", type="primary"):
                try:
                    income = Income(
                        name=name,
                        amount=Decimal(str(amount)),
                        category=category,
                        frequency=frequency,
                        date=when,
                    )
                except ValidationError as e:
                    st.error(f"Please check the form: {e.errors()[0]['msg']}")
                    return
                run_async(controller.add_income(income))
                st.rerun()

    incomes = sorted(controller.state.incomes, key=lambda i: i.date, reverse=True)
    if not incomes:
        st.info("No incomes yet.")
    for income in incomes:
        col1, col2, col3 = st.columns([4, 2, 1])
        col1.write(f"**{income.name}** · {income.category} · {income.date:%d %b %Y}")
        col2.write(money(controller, income.amount))
        if col3.button("Delete", key=f"del_income_{income.id}"):
            run_async(controller.delete_income(income.id))
            st.rerun()
        with st.expander("✏️ Edit"):
            with st.form(f"edit_income_{income.id}"):
                name = st.text_input("Name", value=income.name)
                amount = st.number_input("Amount", min_value=0.0, step=100.0, value=float(income.amount))
                category = st.selectbox(
                    "Category",
                    list(INCOME_CATEGORIES),
                    index=list(INCOME_CATEGORIES).index(income.category)
                    if income.category in INCOME_CATEGORIES else 0,
                )
                when = st.date_input("Date", value=income.date)
                if st.form_submit_button("Update"):
                    submit_update(controller.update_income(income.id, {
                        "name": name,
                        "amount": Decimal(str(amount)),
                        "category": category,
                        "date": when,
                    }))


def render_spendings_page(controller: FinanceController):
    st.title("🧾 Spendings")
    obligations = {o.id: o for o in controller.state.obligations}

    with st.expander("➕ Add spending"):
        with st.form("add_spending", clear_on_submit=True):
            name = st.text_input("Name")
            amount = st.number_input("Amount", min_value=0.0, step=50.0)
            kind = st.radio(
                "Kind",
                list(SpendingKind),
                format_func=lambda k: k.value.replace("-", " ").title(),
                horizontal=True,
            )
            category = st.selectbox("Category", list(SPENDING_CATEGORIES))
            linked = st.selectbox(
                "Pays obligation",
                [None] + list(obligations),
                format_func=lambda oid: "-" if oid is None else obligations[oid].name,
            )
            when = st.date_input("Date", value=date.today())
            if st.form_submit_button("Save", type="primary"):
                try:
                    spending = Spending(
                        name=name,
                        amount=Decimal(str(amount)),
                        category=(
                            OBLIGATION_PAYMENT_CATEGORY
                            if kind == SpendingKind.OBLIGATION_PAYMENT else category
                        ),
                        kind=kind,
                        linked_obligation_id=linked,
                        date=when,
                    )
                except ValidationError as e:
                    st.error(f"Please check the form: {e.errors()[0]['msg']}")
                    return
                run_async(controller.add_spending(spending))
                st.rerun()

    spendings = sorted(controller.state.spendings, key=lambda s: s.date, reverse=True)
    if not spendings:
        st.info("No spendings yet.")
    for spending in spendings:
        col1, col2, col3 = st.columns([4, 2, 1])
        label = f"**{spending.name}** · {spending.category} · {spending.date:%d %b %Y}"
        if spending.is_obligation_payment:
            target = obligations.get(spending.linked_obligation_id)
            label += f" → {target.name if target else 'missing obligation'}"
        col1.write(label)
        col2.write(money(controller, -spending.amount))
        if col3.button("Delete", key=f"del_spending_{spending.id}"):
            run_async(controller.delete_spending(spending.id))
            st.rerun()
        with st.expander("✏️ Edit"):
            with st.form(f"edit_spending_{spending.id}"):
                changes = {
                    "name": st.text_input("Name", value=spending.name),
                    "date": st.date_input("Date", value=spending.date),
                }
                amount = st.number_input("Amount", min_value=0.0, step=50.0, value=float(spending.amount))
                if spending.is_obligation_payment:
                    choices = list(obligations)
                    if spending.linked_obligation_id not in obligations:
                        choices.insert(0, spending.linked_obligation_id)
                    changes["linked_obligation_id"] = st.selectbox(
                        "Pays obligation",
                        choices,
                        index=choices.index(spending.linked_obligation_id),
                        format_func=lambda oid: obligations[oid].name if oid in obligations else "missing obligation",
                    )
                else:
                    categories = list(SPENDING_CATEGORIES)
                    changes["category"] = st.selectbox(
                        "Category",
                        categories,
                        index=categories.index(spending.category) if spending.category in categories else 0,
                    )
                if st.form_submit_button("Update"):
                    changes["amount"] = Decimal(str(amount))
                    submit_update(controller.update_spending(spending.id, changes))


# =============================================================================
# OBLIGATIONS
# =============================================================================

def render_obligations_page(controller: FinanceController):
    st.title("🏦 Obligations")

    with st.expander("➕ Add obligation"):
        with st.form("add_obligation", clear_on_submit=True):
            name = st.text_input("Name")
            ob_type = st.selectbox("Type", list(ObligationType), format_func=lambda t: t.value)
            amount = st.number_input("Monthly payment", min_value=0.0, step=100.0)
            balance = st.number_input("Outstanding balance", min_value=0.0, step=1000.0)
            col1, col2 = st.columns(2)
            total_months = col1.number_input("Total months (installments)", min_value=0, step=1)
            paid_months = col2.number_input("Paid months", min_value=0, step=1)
            credit_limit = st.number_input("Credit limit (cards)", min_value=0.0, step=1000.0)
            if st.form_submit_button("Save", type="primary"):
                try:
                    obligation = Obligation(
                        name=name,
                        type=ob_type,
                        amount=Decimal(str(amount)),
                        balance=Decimal(str(balance)),
                        total_months=total_months or None,
                        paid_months=paid_months if total_months else None,
                        credit_limit=Decimal(str(credit_limit)) if credit_limit else None,
                        start_date=date.today(),
                    )
                except ValidationError as e:
                    st.error(f"Please check the form: {e.errors()[0]['msg']}")
                    return
                run_async(controller.add_obligation(obligation))
                st.rerun()

    if not controller.state.obligations:
        st.info("No obligations yet.")
    for obligation in controller.state.obligations:
        progress = obligation_progress(obligation)
        with st.container(border=True):
            col1, col2 = st.columns([4, 1])
            col1.markdown(f"**{obligation.name}** · {obligation.type.value}")
            col1.write(
                f"Monthly {money(controller, obligation.amount)} · "
                f"Balance {money(controller, obligation.balance or 0)}"
            )
            if progress.percent_paid is not None:
                col1.progress(
                    float(progress.percent_paid) / 100,
                    text=f"{progress.paid_months}/{progress.total_months} months paid",
                )
            if progress.credit_utilization is not None:
                col1.progress(
                    float(progress.credit_utilization) / 100,
                    text=f"Available credit {money(controller, progress.available_credit)}",
                )
            schedule = payoff_schedule(obligation, date.today())
            if schedule:
                col1.caption(
                    f"Paid off by {schedule[-1].due_date:%b %Y} "
                    f"({len(schedule)} more payments, interest not included)"
                )
            if col2.button("Delete", key=f"del_obligation_{obligation.id}"):
                run_async(controller.delete_obligation(obligation.id))
                st.rerun()
            with st.expander("✏️ Edit"):
                with st.form(f"edit_obligation_{obligation.id}"):
                    name = st.text_input("Name", value=obligation.name)
                    amount = st.number_input(
                        "Monthly payment", min_value=0.0, step=100.0, value=float(obligation.amount)
                    )
                    balance = st.number_input(
                        "Outstanding balance", min_value=0.0, step=1000.0,
                        value=float(obligation.balance or 0),
                    )
                    col_a, col_b = st.columns(2)
                    total_months = col_a.number_input(
                        "Total months", min_value=0, step=1, value=obligation.total_months or 0
                    )
                    paid_months = col_b.number_input(
                        "Paid months", min_value=0, step=1, value=obligation.paid_months or 0
                    )
                    if st.form_submit_button("Update"):
                        submit_update(controller.update_obligation(obligation.id, {
                            "name": name,
                            "amount": Decimal(str(amount)),
                            "balance": Decimal(str(balance)),
                            "total_months": total_months or None,
                            "paid_months": paid_months if total_months else None,
                        }))


# =============================================================================
# ASSETS
# =============================================================================

def render_assets_page(controller: FinanceController):
    st.title("🪙 Assets")
    prices = controller.prices

    col1, col2, col3 = st.columns([2, 2, 1])
    col1.metric("Bitcoin (THB)", format_currency(prices.bitcoin, "THB"))
    col2.metric("Gold per baht (THB)", format_currency(prices.gold_per_baht, "THB"))
    if col3.button("🔄 Refresh prices"):
        with st.spinner("Fetching prices..."):
            run_async(controller.refresh_prices())
        st.rerun()

    with st.expander("➕ Add asset"):
        with st.form("add_asset", clear_on_submit=True):
            name = st.text_input("Name")
            asset_type = st.selectbox("Type", list(AssetType), format_func=lambda t: t.value)
            quantity = st.number_input("Quantity", min_value=0.0, step=0.01, format="%.4f")
            unit = st.text_input("Unit", help="For gold: baht, salung, satang or gram")
            purchase_price = st.number_input("Purchase price per unit (THB)", min_value=0.0, step=100.0)
            if st.form_submit_button("Save", type="primary"):
                try:
                    asset = Asset(
                        name=name,
                        type=asset_type,
                        quantity=Decimal(str(quantity)),
                        unit=unit,
                        purchase_price=Decimal(str(purchase_price)) if purchase_price else None,
                    )
                except ValidationError as e:
                    st.error(f"Please check the form: {e.errors()[0]['msg']}")
                    return
                run_async(controller.add_asset(asset))
                st.rerun()

    if not controller.state.assets:
        st.info("No assets yet.")
    for asset in controller.state.assets:
        valuation = value_asset(asset, prices)
        col1, col2, col3 = st.columns([4, 2, 1])
        col1.write(f"**{asset.name}** · {asset.quantity.normalize():f} {asset.unit}")
        line = money(controller, valuation.value)
        if valuation.unrealized_pnl is not None:
            line += f" ({money(controller, valuation.unrealized_pnl, sign_display='always')})"
        col2.write(line)
        if col3.button("Delete", key=f"del_asset_{asset.id}"):
            run_async(controller.delete_asset(asset.id))
            st.rerun()
        with st.expander("✏️ Edit"):
            with st.form(f"edit_asset_{asset.id}"):
                name = st.text_input("Name", value=asset.name)
                quantity = st.number_input(
                    "Quantity", min_value=0.0, step=0.01, format="%.4f", value=float(asset.quantity)
                )
                unit = st.text_input(
                    "Unit", value=asset.unit, help="Changing a gold unit keeps the quantity as entered"
                )
                purchase_price = st.number_input(
                    "Purchase price per unit (THB)", min_value=0.0, step=100.0,
                    value=float(asset.purchase_price or 0),
                )
                if st.form_submit_button("Update"):
                    submit_update(controller.update_asset(asset.id, {
                        "name": name,
                        "quantity": Decimal(str(quantity)),
                        "unit": unit,
                        "purchase_price": Decimal(str(purchase_price)) if purchase_price else None,
                    }))


# =============================================================================
# BUDGETS
# =============================================================================

def render_budgets_page(controller: FinanceController):
    st.title("🎯 Budgets")
    st.caption("Budgets are kept on this device only.")

    with st.expander("➕ Add budget"):
        with st.form("add_budget", clear_on_submit=True):
            category = st.selectbox("Category", list(SPENDING_CATEGORIES))
            amount = st.number_input("Limit", min_value=0.0, step=500.0)
            period = st.selectbox("Period", list(BudgetPeriod), format_func=lambda p: p.value)
            if st.form_submit_button("Save", type="primary"):
                try:
                    budget = Budget(category=category, amount=Decimal(str(amount)), period=period)
                except ValidationError as e:
                    st.error(f"Please check the form: {e.errors()[0]['msg']}")
                    return
                run_async(controller.add_budget(budget))
                st.rerun()

    results = all_budget_progress(controller.state.budgets, controller.state.spendings, date.today())
    if not results:
        st.info("No budgets yet.")
    for result in results:
        col1, col2 = st.columns([5, 1])
        text = (
            f"{result.budget.category} ({result.budget.period.value}): "
            f"{money(controller, result.spent)} of {money(controller, result.budget.amount)}"
        )
        if result.is_over:
            text += " ⚠️ over budget"
        col1.progress(min(1.0, float(result.progress) / 100), text=text)
        if col2.button("Delete", key=f"del_budget_{result.budget.id}"):
            run_async(controller.delete_budget(result.budget.id))
            st.rerun()
        with st.expander(f"✏️ Edit {result.budget.category}"):
            with st.form(f"edit_budget_{result.budget.id}"):
                amount = st.number_input(
                    "Limit", min_value=0.0, step=500.0, value=float(result.budget.amount)
                )
                periods = list(BudgetPeriod)
                period = st.selectbox(
                    "Period",
                    periods,
                    index=periods.index(result.budget.period),
                    format_func=lambda p: p.value,
                )
                if st.form_submit_button("Update"):
                    submit_update(controller.update_budget(result.budget.id, {
                        "amount": Decimal(str(amount)),
                        "period": period,
                    }))


# =============================================================================
# CALENDAR
# =============================================================================

def render_calendar_page(controller: FinanceController):
    st.title("📅 Calendar")
    state = controller.state
    today = date.today()

    col1, col2 = st.columns(2)
    year = col1.number_input("Year", value=today.year, step=1)
    month = col2.selectbox("Month", range(1, 13), index=today.month - 1)

    points = calendar_running_balance(state.incomes, state.spendings, int(year), month)
    st.markdown("### Running balance")
    st.line_chart(
        pd.DataFrame(
            {"Balance": [float(p.balance) for p in points]},
            index=[p.date for p in points],
        )
    )

    selected = st.date_input("Day details", value=today)
    activity = daily_activity(state.incomes, state.spendings, selected)
    for income in activity.incomes:
        st.write(f"➕ {income.name}: {money(controller, income.amount)}")
    for spending in activity.spendings:
        st.write(f"➖ {spending.name}: {money(controller, spending.amount)}")
    if not activity.incomes and not activity.spendings:
        st.caption("Nothing recorded on this day.")

    st.markdown(f"### {int(year)} overview")
    totals = year_totals(state.incomes, state.spendings, int(year))
    st.write(
        f"Income {money(controller, totals.income)} · "
        f"Spending {money(controller, totals.expense)} · "
        f"Net {money(controller, totals.net, sign_display='always')}"
    )
    yearly = year_running_balance(state.incomes, state.spendings, int(year))
    st.line_chart(
        pd.DataFrame(
            {"Balance": [float(p.balance) for p in yearly]},
            index=[p.date.strftime("%b") for p in yearly],
        )
    )


# =============================================================================
# SETTINGS
# =============================================================================

def render_settings_page(controller: FinanceController):
    st.title("⚙️ Settings")

    st.markdown("### Security")
    with st.form("set_pin"):
        new_pin = st.text_input("New 6-digit PIN", type="password", max_chars=6)
        if st.form_submit_button("Set PIN"):
            try:
                run_async(controller.set_pin(new_pin))
            except ValueError as e:
                st.error(str(e))
            else:
                st.rerun()

    st.markdown("### Language")
    language = st.selectbox(
        "Language",
        ["en", "th"],
        index=0 if controller.state.language == "en" else 1,
    )
    if language != controller.state.language:
        run_async(controller.set_language(language))
        st.rerun()

    st.markdown("### Data")
    col1, col2, col3 = st.columns(3)
    if col1.button("☁️ Sync now", disabled=controller.state.profile is None):
        if run_async(controller.sync_to_cloud()):
            st.success("Synced.")
    if col2.button("🧪 Load demo data"):
        run_async(controller.load_demo_data())
        st.rerun()
    if col3.button("🗑️ Reset all data"):
        run_async(controller.reset_data())
        st.rerun()

    st.markdown("### Export")
    col1, col2 = st.columns(2)
    try:
        if col1.button("📗 Export Excel"):
            path = run_async(controller.export_excel())
            st.success(f"Saved {path}")
        if col2.button("📕 Export PDF"):
            path = run_async(controller.export_pdf())
            st.success(f"Saved {path}")
    except ExportError as e:
        st.error(str(e))

    st.markdown("### Connection Status")
    status = validate_all_settings()
    for name, key in [("Google Sheets (Storage)", "google_sheets"), ("Price feeds", "price_feed")]:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")

    st.markdown("### Recent Activity")
    events = run_async(controller.audit.recent_events(limit=20))
    if events:
        st.dataframe(
            pd.DataFrame([
                {
                    "Time": e.timestamp.strftime("%Y-%m-%d %H:%M"),
                    "Event": e.event_type.value,
                    "Description": e.description,
                    "Error": e.error_message or "",
                }
                for e in events
            ]),
            hide_index=True,
        )
    else:
        st.caption("No audit events recorded.")

    if controller.state.profile is not None:
        st.markdown("---")
        if st.button("Sign out"):
            controller.logout()
            st.rerun()


if __name__ == "__main__":
    main()
