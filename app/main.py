"""
Streamlit Frontend for Financify

The dashboard a user opens to see where their money stands:
net worth, this month's cashflow, and where it came from and went.

DESIGN PRINCIPLES:
1. Numbers first, AI second
2. The summary always renders, even when the AI is unavailable
3. Clear error messages in simple language
4. Nothing is edited or saved from here

The AI features are explicit actions:
- Insights are generated only when the user asks
- Chat answers only the question that was typed
"""

import asyncio
import logging
from datetime import date, datetime, time
from typing import Optional

import plotly.graph_objects as go
import streamlit as st

from financify.config import get_settings, validate_all_settings
from financify.currency import format_currency
from financify.display import big_number, message_box
from financify.models.finance import ChartSlice, DashboardType, FinancialSummary, UserFinances
from financify.orchestrator import (
    AppComponents,
    ChatSession,
    InsightsState,
    create_app_components,
)
from financify.storage import DataSourceError
from financify.summary import (
    DrillDownKind,
    category_name_map,
    category_spending_report,
    credit_card_analysis,
    debt_summary,
    drill_down_transactions,
    income_expense_report,
    palette_color,
    spending_by_classification,
)


# Page configuration
st.set_page_config(
    page_title="Financify",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for the insight and highlight panels
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .info-box {
        padding: 20px;
        background-color: #cce5ff;
        border-radius: 10px;
        border-left: 5px solid #004085;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


QUADRANTS = [
    # (title, summary field, chart field, drill-down kind, colour)
    ("Income", "income", "income_data", DrillDownKind.INCOME, "#16a34a"),
    ("Expenses", "expenses", "expense_data", DrillDownKind.EXPENSES, "#dc2626"),
    ("Assets", "assets", "asset_data", DrillDownKind.ASSETS, "#2563eb"),
    ("Liabilities", "liabilities", "liability_data", DrillDownKind.LIABILITIES, "#ea580c"),
]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create application components (cached)."""
    if get_settings().app.debug_mode:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)
    return create_app_components(use_ai=True)


def load_finances(components: AppComponents) -> Optional[UserFinances]:
    """Load the records once per session; None if the source is broken."""
    if "finances" not in st.session_state:
        try:
            st.session_state.finances = run_async(
                components.dashboard_service.load_finances()
            )
        except DataSourceError as e:
            st.error(f"Could not load your data: {e}")
            return None
    return st.session_state.finances


def main():
    """Main application entry point."""
    components = get_components()

    # Sidebar navigation
    st.sidebar.title("💰 Financify")
    st.sidebar.markdown("---")

    dashboard = st.sidebar.radio(
        "Dashboard:",
        list(DashboardType),
        format_func=lambda d: d.value.title(),
        horizontal=True,
    )

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "💳 Cards & Debts", "🤖 AI Assistant", "📑 Reports", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.caption(f"Data source: `{components.dashboard_service.source_name}`")
    if st.sidebar.button("🔄 Reload data"):
        st.session_state.pop("finances", None)
        st.session_state.pop("insights", None)

    if page == "⚙️ Settings":
        render_settings_page()
        return

    finances = load_finances(components)
    if finances is None:
        return

    # Route to appropriate page
    if page == "📊 Dashboard":
        render_dashboard_page(components, finances, dashboard)
    elif page == "💳 Cards & Debts":
        render_cards_and_debts_page(finances, dashboard)
    elif page == "🤖 AI Assistant":
        render_chat_page(components, finances)
    elif page == "📑 Reports":
        render_reports_page(finances, dashboard)


# =============================================================================
# CHARTS
# =============================================================================

def pie_chart(slices: list[ChartSlice], currency: str) -> go.Figure:
    """Donut chart for one quadrant."""
    fig = go.Figure(data=[go.Pie(
        labels=[s.name for s in slices],
        values=[float(s.value) for s in slices],
        marker_colors=[s.fill for s in slices],
        customdata=[format_currency(s.value, currency) for s in slices],
        hovertemplate="%{label} : %{customdata}<extra></extra>",
        hole=.5,
        textinfo="percent",
        sort=False,
    )])
    fig.update_layout(
        height=260,
        margin=dict(l=0, r=0, t=10, b=0),
        showlegend=True,
        legend=dict(orientation="h", yanchor="top", y=-0.05, font=dict(size=10)),
    )
    return fig


# =============================================================================
# DASHBOARD
# =============================================================================

def render_dashboard_page(
    components: AppComponents,
    finances: UserFinances,
    dashboard: DashboardType,
):
    """Render highlights, quadrant cards, insights and drill-downs."""
    st.title(f"📊 {dashboard.value.title()} Dashboard")

    data = finances.dashboard(dashboard)
    summary = run_async(components.dashboard_service.build_summary(finances, dashboard))
    currency = finances.currency

    # Highlights
    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Net Worth**")
        st.markdown(
            big_number(format_currency(summary.net_worth, currency)),
            unsafe_allow_html=True,
        )
    with col2:
        st.markdown("**Cashflow this month**")
        st.markdown(
            big_number(format_currency(summary.cashflow, currency)),
            unsafe_allow_html=True,
        )

    st.markdown("---")

    # Quadrant cards, two per row
    for row in (QUADRANTS[:2], QUADRANTS[2:]):
        columns = st.columns(2)
        for column, (title, field, chart_field, kind, color) in zip(columns, row):
            with column:
                render_quadrant_card(
                    title=title,
                    amount=getattr(summary, field),
                    slices=getattr(summary, chart_field),
                    color=color,
                    currency=currency,
                    key=f"{dashboard.value}-{kind.value}",
                )

    classification = spending_by_classification(data.transactions)
    if classification:
        with st.expander("🧭 Spending by need / want / must"):
            st.plotly_chart(
                pie_chart(classification, currency),
                use_container_width=True,
                config={"displayModeBar": False},
                key=f"{dashboard.value}-classification",
            )

    st.markdown("---")
    render_insights_panel(components, summary, dashboard)

    st.markdown("---")
    render_drill_down(data.accounts, data.transactions, data.categories, currency)


def render_quadrant_card(
    title: str,
    amount,
    slices: list[ChartSlice],
    color: str,
    currency: str,
    key: str,
):
    with st.container(border=True):
        st.markdown(f"#### {title}")
        st.markdown(
            big_number(format_currency(amount, currency), color=color),
            unsafe_allow_html=True,
        )
        if slices:
            st.plotly_chart(
                pie_chart(slices, currency),
                use_container_width=True,
                config={"displayModeBar": False},
                key=key,
            )
        else:
            st.caption("No data for this period.")


def render_insights_panel(
    components: AppComponents,
    summary: FinancialSummary,
    dashboard: DashboardType,
):
    """Render the AI insights button and its result."""
    st.markdown("### ✨ AI Insights")

    if components.insights_flow is None:
        st.info("AI insights are unavailable. Add a Gemini API key on the Settings page.")
        return

    all_insights = st.session_state.setdefault("insights", {})

    if st.button("✨ Get AI Insights", type="primary"):
        with st.spinner("Analyzing your finances..."):
            all_insights[dashboard.value] = run_async(
                components.insights_flow.request_insights(
                    summary, dashboard=dashboard.value
                )
            )

    state: Optional[InsightsState] = all_insights.get(dashboard.value)
    if state is None:
        st.caption("Ask the assistant for a quick read on this dashboard.")
        return

    if state.error:
        st.markdown(
            message_box("⚠️ Something went wrong", state.error, "error-box"),
            unsafe_allow_html=True,
        )
        return

    analysis = state.insights
    st.markdown(
        message_box("Overview", analysis.overview, "info-box"),
        unsafe_allow_html=True,
    )

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Key Observations**")
        for item in analysis.key_observations:
            st.markdown(f"- {item}")
    with col2:
        st.markdown("**Actionable Advice**")
        for item in analysis.actionable_advice:
            st.markdown(f"- {item}")

    st.caption(analysis.disclaimer)


def render_drill_down(accounts, transactions, categories, currency: str):
    """Transactions behind a quadrant, newest first."""
    st.markdown("### 🔍 Transactions")

    kind = st.selectbox(
        "Show transactions for",
        list(DrillDownKind),
        format_func=lambda k: k.value.title(),
        index=len(DrillDownKind) - 1,
    )

    rows = drill_down_transactions(kind, accounts, transactions)
    if not rows:
        st.info("No transactions to show.")
        return

    account_names = {a.id: a.name for a in accounts}
    names = category_name_map(categories)
    st.dataframe(
        [
            {
                "Date": txn.date.strftime("%Y-%m-%d"),
                "Description": txn.description,
                "Account": account_names.get(txn.account_id, "Unknown"),
                "Category": names.get(txn.category_id, "Uncategorized"),
                "Amount": format_currency(txn.amount, currency),
                "Transfer": "↔" if txn.is_transfer else "",
            }
            for txn in rows
        ],
        use_container_width=True,
        hide_index=True,
    )


# =============================================================================
# CARDS AND DEBTS
# =============================================================================

def render_cards_and_debts_page(finances: UserFinances, dashboard: DashboardType):
    """Credit card utilization and loan repayment progress."""
    st.title("💳 Cards & Debts")

    data = finances.dashboard(dashboard)
    currency = finances.currency

    st.markdown("### Credit Cards")
    cards = credit_card_analysis(data.accounts, data.transactions, data.categories)
    if not cards.cards:
        st.info("No credit cards on this dashboard.")
    else:
        st.metric("Total Credit Card Spending", format_currency(cards.total_spending, currency))
        columns = st.columns(min(len(cards.cards), 3))
        for i, card in enumerate(cards.cards):
            with columns[i % len(columns)], st.container(border=True):
                st.markdown(f"**{card.account.name}**")
                limit = card.account.credit_limit or 0
                st.caption(
                    f"Used: {format_currency(card.used, currency)} · "
                    f"Limit: {format_currency(limit, currency)}"
                )
                st.progress(
                    min(float(card.utilization), 100.0) / 100,
                    text=f"{card.utilization:.1f}%",
                )
                if card.high_utilization:
                    st.warning("High utilization may impact credit score.")

        col1, col2 = st.columns(2)
        with col1:
            st.markdown("**Spending by Category**")
            slices = [
                ChartSlice(name=row.category, value=row.amount, fill=palette_color(i))
                for i, row in enumerate(cards.spending_by_category)
            ]
            if slices:
                st.plotly_chart(
                    pie_chart(slices, currency),
                    use_container_width=True,
                    config={"displayModeBar": False},
                    key=f"{dashboard.value}-card-categories",
                )
            else:
                st.caption("No categorized card spending.")
        with col2:
            st.markdown("**Spending by Classification**")
            if cards.spending_by_classification:
                st.plotly_chart(
                    pie_chart(cards.spending_by_classification, currency),
                    use_container_width=True,
                    config={"displayModeBar": False},
                    key=f"{dashboard.value}-card-classification",
                )
            else:
                st.caption("No classified card spending.")

    st.markdown("---")
    st.markdown("### Debts")
    debts = debt_summary(data.accounts, data.transactions)
    if not debts.live and not debts.closed:
        st.info("No debts tracked on this dashboard.")
        return

    col1, col2 = st.columns(2)
    col1.metric("Total Outstanding Debt", format_currency(debts.total_outstanding, currency))
    col2.metric("Paid Towards Debt", format_currency(debts.total_paid, currency))

    for heading, reports in (("Live Debts", debts.live), ("Closed Debts", debts.closed)):
        st.markdown(f"#### {heading} ({len(reports)})")
        if not reports:
            st.caption("None.")
            continue
        st.dataframe(
            [
                {
                    "Name": r.account.name,
                    "Balance": format_currency(r.balance, currency),
                    "Paid": format_currency(r.amount_paid, currency),
                    "Progress": f"{100 if r.is_paid else r.progress:.0f}%",
                    "Due": r.account.due_date.strftime("%Y-%m-%d") if r.account.due_date else "",
                    "Status": "Paid" if r.is_paid else ("Overdue" if r.is_overdue else "Open"),
                }
                for r in reports
            ],
            use_container_width=True,
            hide_index=True,
        )


# =============================================================================
# AI ASSISTANT
# =============================================================================

def render_chat_page(components: AppComponents, finances: UserFinances):
    """Render the chat assistant."""
    st.title("🤖 AI Assistant")
    st.markdown("Ask anything about your accounts and spending.")

    if components.chat_flow is None:
        st.info("The assistant is unavailable. Add a Gemini API key on the Settings page.")
        return

    if "chat_session" not in st.session_state:
        st.session_state.chat_session = ChatSession()
    session: ChatSession = st.session_state.chat_session

    if st.button("🗑️ Clear chat"):
        run_async(components.chat_flow.clear(session))

    question = st.chat_input("e.g. How much did I spend on food last month?")
    if question:
        with st.spinner("Thinking..."):
            run_async(components.chat_flow.send(session, question, finances))

    for message in session.messages:
        role = "user" if message.sender == "user" else "assistant"
        with st.chat_message(role):
            st.markdown(message.text)
            st.caption(message.timestamp.strftime("%H:%M"))


# =============================================================================
# REPORTS
# =============================================================================

def render_reports_page(finances: UserFinances, dashboard: DashboardType):
    """Income vs. expense and category spending for a date range."""
    st.title("📑 Reports")

    data = finances.dashboard(dashboard)
    currency = finances.currency
    today = date.today()

    col1, col2 = st.columns(2)
    with col1:
        start_day = st.date_input("From", value=today.replace(day=1))
    with col2:
        end_day = st.date_input("To", value=today)

    if start_day > end_day:
        st.error("The start date must be on or before the end date.")
        return

    start = datetime.combine(start_day, time.min)
    end = datetime.combine(end_day, time.max)

    report = income_expense_report(data.transactions, start, end)
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", format_currency(report.income, currency))
    col2.metric("Total Expenses", format_currency(report.expenses, currency))
    col3.metric("Net Savings", format_currency(report.net, currency))

    st.markdown("### Spending by Category")
    rows = category_spending_report(data.transactions, data.categories, start, end)
    if not rows:
        st.info("No spending in this period.")
        return

    st.dataframe(
        [
            {
                "Category": row.category,
                "Amount": format_currency(row.amount, currency),
                "Transactions": row.count,
            }
            for row in rows
        ],
        use_container_width=True,
        hide_index=True,
    )


# =============================================================================
# SETTINGS
# =============================================================================

def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Gemini (AI)", "gemini"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file with your API key "
        "and, optionally, the path to your exported data file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
