"""Tests for drill-downs, classification spending and period reports."""

from datetime import datetime
from decimal import Decimal

from financify.models.finance import Account, Category, Transaction
from financify.summary import (
    DrillDownKind,
    category_spending_report,
    credit_card_analysis,
    debt_summary,
    drill_down_transactions,
    income_expense_report,
    spending_by_classification,
)
from financify.summary.breakdowns import (
    CLASSIFICATION_COLORS,
    FALLBACK_CLASSIFICATION_COLOR,
)


NOW = datetime(2024, 6, 15, 12, 0)


def make_txn(id, account_id, amount, day, month=6, **kwargs):
    return Transaction(
        id=id,
        account_id=account_id,
        date=datetime(2024, month, day, 10, 0),
        amount=Decimal(str(amount)),
        **kwargs,
    )


ACCOUNTS = [
    Account(id="bank", name="Checking", account_type="Bank"),
    Account(id="card", name="Card", account_type="Credit Card"),
    Account(id="loan", name="Loan", account_type="Loan"),
    Account(id="odd", name="Odd", account_type="Wallet"),
]

TRANSACTIONS = [
    make_txn("salary", "bank", 2500, 2, category_id="c-salary"),
    make_txn("food", "card", -75.5, 3, category_id="c-food", classification="need"),
    make_txn("movie", "card", -25, 4, category_id="c-fun", classification="want"),
    make_txn("move", "bank", -300, 5, is_transfer=True),
    make_txn("repay", "card", 300, 5, is_transfer=True),
    make_txn("opening", "loan", -18000, 10, month=5),
    make_txn("may-pay", "bank", 1000, 20, month=5, category_id="c-salary"),
    make_txn("wallet", "odd", -5, 6),
]

CATEGORIES = [
    Category(id="c-salary", name="Salary"),
    Category(id="c-food", name="Groceries"),
    Category(id="c-fun", name="Entertainment"),
]


class TestDrillDown:
    """Tests for quadrant drill-down lists."""

    def ids(self, kind):
        return [t.id for t in drill_down_transactions(kind, ACCOUNTS, TRANSACTIONS, now=NOW)]

    def test_income_is_month_to_date_non_transfer_inflows(self):
        assert self.ids(DrillDownKind.INCOME) == ["salary"]

    def test_expenses_are_month_to_date_non_transfer_outflows(self):
        assert self.ids(DrillDownKind.EXPENSES) == ["wallet", "movie", "food"]

    def test_assets_are_all_asset_account_transactions(self):
        assert self.ids(DrillDownKind.ASSETS) == ["move", "salary", "may-pay"]

    def test_liabilities_are_all_liability_account_transactions(self):
        assert self.ids(DrillDownKind.LIABILITIES) == ["repay", "movie", "food", "opening"]

    def test_total_is_everything_newest_first(self):
        ids = self.ids(DrillDownKind.TOTAL)
        assert len(ids) == len(TRANSACTIONS)
        assert ids[-1] == "opening"

    def test_kind_accepts_plain_string(self):
        assert self.ids("income") == ["salary"]

    def test_unknown_kind_behaves_as_total(self):
        assert self.ids("net-worth") == self.ids(DrillDownKind.TOTAL)


class TestSpendingByClassification:
    """Tests for need / want / must spending."""

    def test_groups_outflows_by_classification(self):
        slices = {s.name: s for s in spending_by_classification(TRANSACTIONS)}

        assert slices["need"].value == Decimal("75.5")
        assert slices["want"].value == Decimal("25")
        # Untagged, non-transfer outflows (wallet + May's loan opening balance)
        assert slices["unclassified"].value == Decimal("18005")
        assert slices["need"].fill == CLASSIFICATION_COLORS["need"]

    def test_excludes_transfers_and_inflows(self):
        slices = spending_by_classification([
            make_txn("t1", "bank", -300, 5, is_transfer=True, classification="must"),
            make_txn("t2", "bank", 50, 5, classification="must"),
        ])
        assert slices == []

    def test_known_classifications_have_colours(self):
        assert set(CLASSIFICATION_COLORS) >= {"need", "want", "must", "unclassified"}
        assert FALLBACK_CLASSIFICATION_COLOR.startswith("#")


class TestIncomeExpenseReport:
    """Tests for the period totals report."""

    def test_june_totals_include_transfers(self):
        report = income_expense_report(
            TRANSACTIONS, datetime(2024, 6, 1), datetime(2024, 6, 30, 23, 59, 59)
        )
        assert report.income == Decimal("2800")
        assert report.expenses == Decimal("405.5")
        assert report.net == Decimal("2394.5")

    def test_range_is_inclusive(self):
        report = income_expense_report(
            TRANSACTIONS, datetime(2024, 6, 2, 10, 0), datetime(2024, 6, 2, 10, 0)
        )
        assert report.income == Decimal("2500")
        assert report.expenses == Decimal("0")

    def test_empty_period(self):
        report = income_expense_report(
            TRANSACTIONS, datetime(2023, 1, 1), datetime(2023, 1, 31)
        )
        assert report.income == report.expenses == report.net == Decimal("0")


class TestCategorySpendingReport:
    """Tests for per-category spending."""

    def test_rows_sorted_by_amount(self):
        rows = category_spending_report(
            TRANSACTIONS, CATEGORIES, datetime(2024, 6, 1), datetime(2024, 6, 30)
        )
        assert [(r.category, r.amount, r.count) for r in rows] == [
            ("Uncategorized", Decimal("305"), 2),
            ("Groceries", Decimal("75.5"), 1),
            ("Entertainment", Decimal("25"), 1),
        ]

    def test_only_outflows_counted(self):
        rows = category_spending_report(
            TRANSACTIONS, CATEGORIES, datetime(2024, 5, 1), datetime(2024, 5, 31)
        )
        assert [r.category for r in rows] == ["Uncategorized"]
        assert rows[0].amount == Decimal("18000")


CARD_ACCOUNTS = [
    Account(id="visa", name="Visa", account_type="Credit Card", credit_limit=Decimal("1000")),
    Account(id="amex", name="Amex", account_type="Credit Card"),
    Account(id="bank", name="Checking", account_type="Bank"),
]

CARD_TRANSACTIONS = [
    make_txn("groceries", "visa", -200, 3, category_id="c-food", classification="need"),
    make_txn("gadget", "visa", -100, 4, classification="want"),
    make_txn("cash-advance", "visa", -50, 5, category_id="c-food", is_transfer=True),
    make_txn("payment", "visa", 50, 6),
    make_txn("mystery", "amex", -30, 7, category_id="c-gone", classification="must"),
    make_txn("rent", "bank", -999, 1, category_id="c-food"),
]


class TestCreditCardAnalysis:
    """Tests for per-card utilization and spending."""

    def test_per_card_figures(self):
        analysis = credit_card_analysis(CARD_ACCOUNTS, CARD_TRANSACTIONS, CATEGORIES)

        assert [c.account.id for c in analysis.cards] == ["visa", "amex"]
        visa, amex = analysis.cards
        assert visa.used == Decimal("300")
        assert visa.utilization == Decimal("30")
        assert visa.spending == Decimal("300")
        assert amex.used == Decimal("30")
        assert amex.spending == Decimal("30")

    def test_no_limit_means_zero_utilization(self):
        analysis = credit_card_analysis(CARD_ACCOUNTS, CARD_TRANSACTIONS, CATEGORIES)
        assert analysis.cards[1].utilization == Decimal("0")
        assert analysis.cards[1].high_utilization is False

    def test_high_utilization_above_forty_percent(self):
        card = Account(
            id="visa", name="Visa", account_type="Credit Card", credit_limit=Decimal("500")
        )
        analysis = credit_card_analysis([card], CARD_TRANSACTIONS, CATEGORIES)
        assert analysis.cards[0].utilization == Decimal("60")
        assert analysis.cards[0].high_utilization is True

    def test_category_spending_skips_uncategorized_and_transfers(self):
        analysis = credit_card_analysis(CARD_ACCOUNTS, CARD_TRANSACTIONS, CATEGORIES)

        visa_rows = analysis.cards[0].spending_by_category
        assert [(r.category, r.amount) for r in visa_rows] == [
            ("Groceries", Decimal("200"))
        ]
        assert analysis.cards[1].spending_by_category[0].category == "Uncategorized"

    def test_totals_across_cards(self):
        analysis = credit_card_analysis(CARD_ACCOUNTS, CARD_TRANSACTIONS, CATEGORIES)

        assert analysis.total_spending == Decimal("330")
        assert [r.category for r in analysis.spending_by_category] == [
            "Groceries", "Uncategorized"
        ]
        by_tag = {s.name: s.value for s in analysis.spending_by_classification}
        assert by_tag == {
            "need": Decimal("200"),
            "want": Decimal("100"),
            "must": Decimal("30"),
        }

    def test_no_cards(self):
        analysis = credit_card_analysis(ACCOUNTS[:1], TRANSACTIONS, CATEGORIES)
        assert analysis.cards == []
        assert analysis.total_spending == Decimal("0")


LOAN_ACCOUNTS = [
    Account(id="car", name="Car Loan", account_type="Loan", due_date=datetime(2024, 7, 5)),
    Account(id="house", name="Mortgage", account_type="Loan", due_date=datetime(2024, 6, 1)),
    Account(id="old", name="old phone plan", account_type="Loan"),
    Account(id="iou", name="IOU", account_type="Loan"),
    Account(id="bank", name="Checking", account_type="Bank"),
]

LOAN_TRANSACTIONS = [
    make_txn("car-open", "car", -10000, 1, month=1, description="Opening Balance"),
    make_txn("car-pay", "car", 2500, 1, month=5),
    make_txn("house-open", "house", -200000, 1, month=1, description="Opening Balance"),
    make_txn("house-pay", "house", 20000, 1, month=5),
    make_txn("old-open", "old", -1000, 1, month=1, description="Opening Balance"),
    make_txn("old-pay", "old", 1000, 1, month=3),
    make_txn("iou-borrow", "iou", -500, 2, month=6, description="Borrowed"),
    make_txn("salary", "bank", 3000, 1),
]


class TestDebtSummary:
    """Tests for the live / closed loan split."""

    def test_live_and_closed_split(self):
        summary = debt_summary(LOAN_ACCOUNTS, LOAN_TRANSACTIONS, now=NOW)

        assert [r.account.id for r in summary.live] == ["iou", "house", "car"]
        assert [r.account.id for r in summary.closed] == ["old"]
        assert summary.closed[0].is_paid is True

    def test_totals(self):
        summary = debt_summary(LOAN_ACCOUNTS, LOAN_TRANSACTIONS, now=NOW)

        assert summary.total_outstanding == Decimal("188000")
        # Every non-opening loan transaction counts, including new borrowing
        assert summary.total_paid == Decimal("23000")

    def test_repayment_progress(self):
        summary = debt_summary(LOAN_ACCOUNTS, LOAN_TRANSACTIONS, now=NOW)
        car = next(r for r in summary.live if r.account.id == "car")

        assert car.balance == Decimal("-7500")
        assert car.initial_amount == Decimal("10000")
        assert car.amount_paid == Decimal("2500")
        assert car.progress == Decimal("25")

    def test_without_opening_balance_progress_is_zero(self):
        summary = debt_summary(LOAN_ACCOUNTS, LOAN_TRANSACTIONS, now=NOW)
        iou = summary.live[0]

        assert iou.initial_amount == Decimal("0")
        assert iou.amount_paid == Decimal("0")
        assert iou.progress == Decimal("0")

    def test_overdue_only_when_owed_and_past_due(self):
        summary = debt_summary(LOAN_ACCOUNTS, LOAN_TRANSACTIONS, now=NOW)
        overdue = {r.account.id: r.is_overdue for r in summary.live + summary.closed}

        assert overdue == {"iou": False, "house": True, "car": False, "old": False}

    def test_no_loans(self):
        summary = debt_summary(ACCOUNTS[:1], TRANSACTIONS, now=NOW)
        assert summary.live == []
        assert summary.closed == []
        assert summary.total_outstanding == Decimal("0")
