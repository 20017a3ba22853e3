"""
InvestTrack - Streamlit Application
Dashboard, investment detail and transaction entry for a personal portfolio.
"""

import streamlit as st
import pandas as pd
import plotly.express as px
import logging
from datetime import date
from typing import Optional
from dotenv import load_dotenv
from pydantic import ValidationError

from config import get_settings
from db_engine import init_db
from models import AssetType, Country, TransactionType
from services import (
    InvestmentNotFoundError,
    NotAuthenticatedError,
    PortfolioService,
    StoreError,
    StoreFetchError,
    TransactionForm,
    TransactionService,
    UserContext,
    context_from_settings,
)
from services.portfolio import DashboardData

# Load environment variables
load_dotenv()

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Configure Streamlit page
st.set_page_config(
    page_title="InvestTrack - Portfolio Tracker",
    page_icon="📈",
    layout="wide"
)

# Initialize database
init_db()

VIEW_DASHBOARD = "dashboard"
VIEW_INVESTMENT = "investment"
VIEW_NEW_TRANSACTION = "new"


# ==================== SESSION STATE ====================
if "user_id" not in st.session_state:
    st.session_state.user_id = settings.user_id

if "flash" not in st.session_state:
    st.session_state.flash = None


# ==================== HELPER FUNCTIONS ====================
def money(value: float) -> str:
    """Format an amount with the configured currency symbol."""
    return f"{settings.currency_symbol}{value:,.2f}"


def signed_money(value: float) -> str:
    """Format a profit/loss amount with an explicit + for gains."""
    return f"{'+' if value >= 0 else '-'}{settings.currency_symbol}{abs(value):,.2f}"


def current_context() -> UserContext:
    """Build the user context for this run."""
    return context_from_settings(st.session_state.user_id)


def navigate(view: str, investment_id: Optional[int] = None):
    """Switch view through the query parameters and rerun."""
    st.query_params.clear()
    st.query_params["view"] = view
    if investment_id is not None:
        st.query_params["investment_id"] = str(investment_id)
    st.rerun()


def query_investment_id() -> Optional[int]:
    """Investment id from the query string, if present and numeric."""
    raw = st.query_params.get("investment_id")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def show_flash():
    """Show a message queued before the last rerun."""
    if st.session_state.flash:
        st.toast(st.session_state.flash, icon="✅")
        st.session_state.flash = None


# ==================== SIDEBAR ====================
def render_sidebar():
    """Render the sidebar with identity and navigation."""
    st.sidebar.title("📈 InvestTrack")

    st.sidebar.subheader("👤 Account")
    if settings.user_id:
        st.sidebar.caption(f"Signed in as **{settings.user_id}**")
    else:
        user_id = st.sidebar.text_input(
            "User ID",
            value=st.session_state.user_id or "",
            help="Identity provided by your sign-in service"
        )
        st.session_state.user_id = user_id.strip() or None

    st.sidebar.subheader("🧭 Navigate")
    if st.sidebar.button("📊 Dashboard", use_container_width=True):
        navigate(VIEW_DASHBOARD)
    if st.sidebar.button("➕ New Transaction", use_container_width=True):
        navigate(VIEW_NEW_TRANSACTION)


# ==================== DASHBOARD ====================
def render_stats_cards(data: DashboardData):
    """Render the portfolio totals."""
    totals = data.totals
    col1, col2, col3 = st.columns(3)

    with col1:
        st.metric("Total Invested", money(totals.total_value))

    with col2:
        st.metric(
            "Total P/L",
            signed_money(totals.total_profit),
            delta=f"{totals.profit_percentage:+.2f}%"
        )

    with col3:
        st.metric("Investments", f"{totals.investment_count}")


def render_allocation_chart(data: DashboardData):
    """Render the distribution of invested value by asset type."""
    st.subheader("🥧 Portfolio Distribution")

    if not data.buckets:
        st.info("No investments yet. Add your first transaction to see the distribution.")
        return

    df = pd.DataFrame(
        [{"Category": b.name, "Value": b.value, "Profit": b.profit} for b in data.buckets]
    )
    fig = px.pie(df, names="Category", values="Value", hole=0.0)
    fig.update_traces(textinfo="label+percent")
    fig.update_layout(margin=dict(t=10, b=10, l=10, r=10), showlegend=True)
    st.plotly_chart(fig, use_container_width=True)


def render_investment_lists(data: DashboardData):
    """Render one list per asset type, in the fixed display order."""
    for asset_type, entries in data.by_asset_type.items():
        st.markdown(f"#### {asset_type.value}")

        if not entries:
            st.caption(f"No {asset_type.value} investments yet")
            continue

        for investment, summary in entries:
            with st.container(border=True):
                col1, col2, col3 = st.columns([4, 1, 1])

                with col1:
                    st.markdown(f"**{investment.name}** · {investment.country.value}")
                    st.caption(
                        f"Qty: {summary.total_quantity:.4f} | "
                        f"Invested: {money(summary.total_value)} | "
                        f"P/L: {signed_money(summary.total_profit)}"
                    )

                with col2:
                    if st.button("👁 View", key=f"view_{investment.id}", use_container_width=True):
                        navigate(VIEW_INVESTMENT, investment.id)

                with col3:
                    if st.button("➕ Trade", key=f"trade_{investment.id}", use_container_width=True):
                        navigate(VIEW_NEW_TRANSACTION, investment.id)


def render_dashboard():
    """Render the portfolio overview."""
    header, action = st.columns([4, 1])
    with header:
        st.header("Portfolio Overview")
    with action:
        if st.button("➕ New Transaction", key="dashboard_new", use_container_width=True):
            navigate(VIEW_NEW_TRANSACTION)

    try:
        with st.spinner("Loading portfolio..."):
            data = PortfolioService.load_dashboard(current_context())
    except StoreFetchError as e:
        st.error(f"Failed to load data: {e.message}")
        data = DashboardData()

    render_stats_cards(data)

    col1, col2 = st.columns(2)
    with col1:
        render_allocation_chart(data)
    with col2:
        render_investment_lists(data)


# ==================== INVESTMENT DETAIL ====================
def render_investment_detail(investment_id: Optional[int]):
    """Render metrics and transaction history for one investment."""
    detail = None
    if investment_id is not None:
        try:
            with st.spinner("Loading investment..."):
                detail = PortfolioService.load_investment_detail(current_context(), investment_id)
        except InvestmentNotFoundError:
            detail = None
        except StoreFetchError as e:
            st.error(f"Failed to load data: {e.message}")
            detail = None

    if detail is None:
        st.info("Investment not found")
        if st.button("Go Back"):
            navigate(VIEW_DASHBOARD)
        return

    if st.button("← Back"):
        navigate(VIEW_DASHBOARD)

    investment = detail.investment
    metrics = detail.metrics

    header, action = st.columns([4, 1])
    with header:
        st.header(investment.name)
        st.caption(f"`{investment.asset_type.value}` `{investment.country.value}`")
    with action:
        if st.button("➕ Add Transaction", use_container_width=True):
            navigate(VIEW_NEW_TRANSACTION, investment.id)

    m1, m2, m3, m4 = st.columns(4)
    with m1:
        st.metric("Current Holdings", f"{metrics.current_qty:.4f}")
    with m2:
        st.metric("Avg. Buy Price", money(metrics.avg_buy_price))
    with m3:
        st.metric("Total Invested", money(metrics.total_buy_value))
    with m4:
        st.metric("Total P/L", signed_money(metrics.total_profit))

    st.subheader("📜 Transaction History")

    if not detail.rows:
        st.info("No transactions yet")
        return

    records = []
    for row in detail.rows:
        tx = row.transaction
        m = row.metrics
        is_sell = tx.transaction_type == TransactionType.SELL
        records.append({
            "Date": tx.transaction_date.strftime("%d %b %Y"),
            "Type": tx.transaction_type.value.upper(),
            "Quantity": tx.quantity,
            "Price": money(tx.price),
            "Amount": money(m.amount),
            "Misc. Costs": money(tx.misc_costs),
            "Broker Fee": f"{money(m.broker_fee)} ({tx.broker_fee_percent:g}%)",
            "Tax": f"{money(m.tax_amount)} ({tx.tax_percent:g}%)",
            "Net P/L": money(m.profit_after_tax) if is_sell else "-",
            "Term": m.term,
            "FY": m.fiscal_year,
            "Notes": tx.notes or "",
        })

    st.dataframe(pd.DataFrame(records), use_container_width=True, hide_index=True)

    if detail.fiscal_years:
        st.subheader("🧾 Realized by Fiscal Year")
        st.dataframe(
            pd.DataFrame([
                {
                    "FY": fy.fiscal_year,
                    "Term": fy.term,
                    "Sells": fy.sell_count,
                    "Profit": money(fy.realized_profit),
                    "Tax": money(fy.tax_amount),
                    "Profit After Tax": money(fy.profit_after_tax),
                }
                for fy in detail.fiscal_years
            ]),
            use_container_width=True,
            hide_index=True
        )


# ==================== TRANSACTION FORM ====================
def render_transaction_form(preselected_id: Optional[int]):
    """Render the form to record a transaction, optionally for an existing investment."""
    st.header("➕ Add Transaction")

    ctx = current_context()
    try:
        investments = PortfolioService.list_investment_choices(ctx)
    except StoreFetchError as e:
        st.error(f"Failed to load data: {e.message}")
        investments = []

    new_label = "➕ New investment"
    options = {new_label: None}
    options.update({f"{inv.name} ({inv.asset_type.value})": inv.id for inv in investments})
    labels = list(options.keys())

    default_index = 0
    if preselected_id is not None:
        for i, label in enumerate(labels):
            if options[label] == preselected_id:
                default_index = i
                break

    selected_label = st.selectbox("Investment", labels, index=default_index)
    investment_id = options[selected_label]

    prefill = None
    if investment_id is not None:
        try:
            prefill = PortfolioService.get_prefill(ctx, investment_id)
        except StoreFetchError as e:
            st.error(f"Failed to load data: {e.message}")

    with st.form("transaction_form"):
        if prefill is None:
            col1, col2 = st.columns(2)
            with col1:
                asset_type = st.selectbox("Asset Type", [a.value for a in AssetType])
                name = st.text_input("Name", placeholder="e.g., Reliance Industries")
            with col2:
                country = st.selectbox("Country", [c.value for c in Country])
        else:
            asset_type, country, name = prefill.asset_type.value, prefill.country.value, prefill.name
            st.caption(f"**{name}** · {asset_type} · {country}")

        col1, col2 = st.columns(2)
        with col1:
            transaction_type = st.selectbox(
                "Transaction Type",
                [t.value for t in TransactionType],
                format_func=str.upper
            )
            price = st.number_input("Price per Unit*", min_value=0.0, step=0.01, value=0.0)
            misc_costs = st.number_input("Misc. Costs", min_value=0.0, step=0.01, value=0.0)
            tax_percent = st.number_input(
                "Tax %",
                min_value=0.0,
                max_value=100.0,
                step=0.1,
                value=settings.default_tax_percent
            )
        with col2:
            transaction_date = st.date_input("Transaction Date*", value=date.today())
            quantity = st.number_input("Quantity*", min_value=0.0, step=0.0001, value=0.0, format="%.4f")
            broker_fee_percent = st.number_input(
                "Broker Fee %",
                min_value=0.0,
                max_value=100.0,
                step=0.1,
                value=settings.default_broker_fee_percent
            )

        notes = st.text_area("Notes", placeholder="Optional")

        col1, col2 = st.columns(2)
        with col1:
            submitted = st.form_submit_button("Add Transaction", use_container_width=True)
        with col2:
            cancelled = st.form_submit_button("Cancel", use_container_width=True)

    if cancelled:
        navigate(VIEW_DASHBOARD)

    if not submitted:
        return

    values = {
        "investment_id": investment_id,
        "asset_type": asset_type,
        "country": country,
        "name": name,
        "transaction_type": transaction_type,
        "transaction_date": transaction_date,
        "price": price,
        "quantity": quantity,
        "misc_costs": misc_costs,
        "broker_fee_percent": broker_fee_percent,
        "tax_percent": tax_percent,
        "notes": notes,
    }

    try:
        with st.spinner("Adding..."):
            TransactionService.submit(ctx, TransactionForm.model_validate(values))
    except ValidationError as e:
        for error in e.errors():
            st.error(f"❌ {error['msg']}")
        return
    except (NotAuthenticatedError, InvestmentNotFoundError, StoreError) as e:
        st.error(f"Failed to add transaction: {e}")
        return

    st.session_state.flash = "Transaction added successfully"
    navigate(VIEW_DASHBOARD)


# ==================== MAIN APP ====================
def main():
    """Main application entry point."""
    render_sidebar()
    show_flash()

    if not st.session_state.user_id:
        st.title("📈 InvestTrack")
        st.info("Sign in to see your portfolio.")
        return

    view = st.query_params.get("view", VIEW_DASHBOARD)

    if view == VIEW_INVESTMENT:
        render_investment_detail(query_investment_id())
    elif view == VIEW_NEW_TRANSACTION:
        render_transaction_form(query_investment_id())
    else:
        render_dashboard()

    st.markdown("---")
    st.markdown(
        "<div style='text-align: center; color: gray;'>"
        "⚠️ Tax figures are indicative only. Not tax advice.</div>",
        unsafe_allow_html=True
    )


if __name__ == "__main__":
    main()
