"""
Built-in Sample Data

Demo dataset used when no data file is configured. Transaction dates are
relative to `now`, so the month-to-date figures always have something to
show.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from financify.models.finance import (
    Account,
    Category,
    DashboardData,
    SubCategory,
    Transaction,
    UserFinances,
)
from financify.storage.interface import DashboardDataSource


def _next_month_day(now: datetime, day: int) -> datetime:
    if now.month == 12:
        return datetime(now.year + 1, 1, day)
    return datetime(now.year, now.month + 1, day)


def build_sample_finances(now: Optional[datetime] = None) -> UserFinances:
    """Build the demo personal and home dashboards."""
    now = now or datetime.now()

    def days_ago(days: int) -> datetime:
        return now - timedelta(days=days)

    personal = DashboardData(
        accounts=[
            Account(id="p-acc-1", name="Personal Checking", account_type="Bank"),
            Account(
                id="p-acc-2",
                name="Travel Rewards Card",
                account_type="Credit Card",
                credit_limit=Decimal("15000"),
                due_date_day=15,
            ),
            Account(
                id="p-acc-3",
                name="Car Loan",
                account_type="Loan",
                debt_type="Auto Loan",
                interest_rate=4.5,
                installment=Decimal("350"),
                due_date=_next_month_day(now, 5),
            ),
            Account(
                id="p-acc-4",
                name="Old Savings Account",
                account_type="Bank",
                is_archived=True,
            ),
        ],
        categories=[
            Category(id="p-cat-1", name="Salary", icon="Landmark", color="#10b981"),
            Category(
                id="p-cat-2",
                name="Groceries",
                icon="ShoppingCart",
                color="#f97316",
                subcategories=[
                    SubCategory(id="p-subcat-1", name="Weekly Shopping"),
                    SubCategory(id="p-subcat-2", name="Snacks"),
                ],
            ),
            Category(id="p-cat-3", name="Gas", icon="Fuel", color="#ef4444"),
            Category(
                id="p-cat-4", name="Entertainment", icon="Clapperboard", color="#8b5cf6"
            ),
            Category(
                id="p-cat-5", name="Loan Payment", icon="Banknote", color="#6366f1"
            ),
        ],
        transactions=[
            Transaction(
                id="p-txn-1",
                account_id="p-acc-1",
                date=days_ago(2),
                description="Paycheck",
                amount=Decimal("2500"),
                category_id="p-cat-1",
            ),
            Transaction(
                id="p-txn-2",
                account_id="p-acc-2",
                date=days_ago(3),
                description="Supermarket",
                amount=Decimal("-75.50"),
                category_id="p-cat-2",
                sub_category_id="p-subcat-1",
                notes="Bought items for the week",
                tags=["food", "urgent"],
                classification="need",
            ),
            Transaction(
                id="p-txn-3",
                account_id="p-acc-1",
                date=days_ago(1),
                description="Fuel Station",
                amount=Decimal("-45.00"),
                category_id="p-cat-3",
                tags=["car"],
                classification="must",
            ),
            Transaction(
                id="p-txn-ob-car",
                account_id="p-acc-3",
                date=days_ago(30),
                description="Opening Balance",
                amount=Decimal("-18000"),
            ),
            Transaction(
                id="p-txn-4",
                account_id="p-acc-3",
                date=days_ago(5),
                description="Monthly Payment",
                amount=Decimal("350.00"),
                category_id="p-cat-5",
                classification="must",
            ),
            Transaction(
                id="p-txn-5",
                account_id="p-acc-2",
                date=days_ago(4),
                description="Movie Tickets",
                amount=Decimal("-25.00"),
                category_id="p-cat-4",
                classification="want",
            ),
        ],
    )

    home = DashboardData(
        accounts=[
            Account(id="h-acc-1", name="Joint Account", account_type="Bank"),
            Account(id="h-acc-2", name="Home Depot Card", account_type="Credit Card"),
            Account(
                id="h-acc-3",
                name="Mortgage",
                account_type="Loan",
                debt_type="Home Loan",
                interest_rate=3.2,
                installment=Decimal("1850"),
            ),
        ],
        categories=[
            Category(
                id="h-cat-1",
                name="Utilities",
                icon="Lightbulb",
                color="#eab308",
                subcategories=[
                    SubCategory(id="h-subcat-1", name="Electricity"),
                    SubCategory(id="h-subcat-2", name="Water"),
                ],
            ),
            Category(id="h-cat-2", name="Home Repair", icon="Wrench", color="#f43f5e"),
            Category(id="h-cat-3", name="Insurance", icon="Shield", color="#06b6d4"),
        ],
        transactions=[
            Transaction(
                id="h-txn-ob-mortgage",
                account_id="h-acc-3",
                date=days_ago(100),
                description="Opening Balance",
                amount=Decimal("-250000"),
            ),
            Transaction(
                id="h-txn-1",
                account_id="h-acc-1",
                date=now,
                description="Water Bill",
                amount=Decimal("-60"),
                category_id="h-cat-1",
                sub_category_id="h-subcat-2",
                tags=["utilities", "bill"],
                classification="must",
            ),
            Transaction(
                id="h-txn-2",
                account_id="h-acc-2",
                date=days_ago(7),
                description="New Paint",
                amount=Decimal("-150"),
                category_id="h-cat-2",
                tags=["home-improvement"],
                classification="want",
            ),
        ],
    )

    return UserFinances(currency="USD", personal=personal, home=home)


class SampleDataSource(DashboardDataSource):
    """Serves the demo dataset."""

    def __init__(self, now: Optional[datetime] = None):
        self._now = now

    @property
    def name(self) -> str:
        return "sample"

    async def load(self) -> UserFinances:
        return build_sample_finances(self._now)
