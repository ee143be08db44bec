"""Tests for the dashboard data sources."""

import asyncio
import json
from datetime import datetime
from decimal import Decimal

import pytest

from financify.storage import (
    DataNotFoundError,
    DataSourceError,
    InvalidDataError,
    JsonFileDataSource,
    SampleDataSource,
)


EXPORTED_STATE = {
    "currentUser": None,
    "theme": {"mode": "light", "palette": "blue"},
    "currency": "EUR",
    "personal": {
        "accounts": [
            {"id": "p-acc-1", "name": "Personal Checking", "type": "Bank", "isArchived": False},
            {"id": "p-acc-2", "name": "Card", "type": "Credit Card", "creditLimit": 15000},
        ],
        "categories": [
            {"id": "p-cat-1", "name": "Salary", "icon": "Landmark", "color": "#10b981",
             "subcategories": []},
        ],
        "transactions": [
            {"id": "p-txn-1", "accountId": "p-acc-1", "date": "2024-06-02T09:00:00",
             "description": "Paycheck", "amount": 2500, "categoryId": "p-cat-1"},
            {"id": "p-txn-2", "accountId": "p-acc-2", "date": "2024-06-03T09:00:00",
             "description": "Supermarket", "amount": -75.5, "tags": ["food"],
             "classification": "need"},
        ],
        "trash": [],
        "budgets": [],
        "widgetSettings": {"netWorth": True},
    },
    "home": {"accounts": [], "categories": [], "transactions": []},
}


def write_json(tmp_path, payload, name="state.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestJsonFileDataSource:
    """Tests for loading an exported state file."""

    def test_loads_exported_state(self, tmp_path):
        source = JsonFileDataSource(write_json(tmp_path, EXPORTED_STATE))

        finances = asyncio.run(source.load())

        assert finances.currency == "EUR"
        assert len(finances.personal.accounts) == 2
        assert finances.personal.transactions[1].amount == Decimal("-75.5")
        assert finances.personal.accounts[1].credit_limit == Decimal("15000")
        assert finances.home.transactions == []

    def test_negative_credit_limit_still_loads(self, tmp_path):
        """One bad card limit must not reject the rest of the export."""
        payload = json.loads(json.dumps(EXPORTED_STATE))
        payload["personal"]["accounts"][1]["creditLimit"] = -100
        payload["personal"]["accounts"][1]["dueDateDay"] = 0

        finances = asyncio.run(JsonFileDataSource(write_json(tmp_path, payload)).load())

        card = finances.personal.accounts[1]
        assert card.credit_limit is None
        assert card.due_date_day is None
        assert len(finances.personal.transactions) == 2

    def test_missing_file(self, tmp_path):
        source = JsonFileDataSource(tmp_path / "nope.json")
        with pytest.raises(DataNotFoundError):
            asyncio.run(source.load())

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InvalidDataError):
            asyncio.run(JsonFileDataSource(path).load())

    def test_top_level_must_be_object(self, tmp_path):
        path = write_json(tmp_path, [1, 2, 3])
        with pytest.raises(InvalidDataError):
            asyncio.run(JsonFileDataSource(path).load())

    def test_schema_error(self, tmp_path):
        payload = {"personal": {"transactions": [{"id": "t1", "amount": "lots"}]}}
        path = write_json(tmp_path, payload)
        with pytest.raises(InvalidDataError) as exc_info:
            asyncio.run(JsonFileDataSource(path).load())
        assert "does not match" in str(exc_info.value)

    def test_errors_share_base_class(self, tmp_path):
        with pytest.raises(DataSourceError):
            asyncio.run(JsonFileDataSource(tmp_path / "nope.json").load())

    def test_default_currency_when_missing(self, tmp_path):
        path = write_json(tmp_path, {"personal": {}, "home": {}})
        finances = asyncio.run(JsonFileDataSource(path, default_currency="inr").load())
        assert finances.currency == "INR"

    def test_file_currency_wins_over_default(self, tmp_path):
        path = write_json(tmp_path, EXPORTED_STATE)
        finances = asyncio.run(JsonFileDataSource(path, default_currency="INR").load())
        assert finances.currency == "EUR"

    def test_name_includes_path(self, tmp_path):
        path = tmp_path / "state.json"
        assert str(path) in JsonFileDataSource(path).name


class TestSampleDataSource:
    """Tests for the built-in demo data."""

    def test_both_dashboards_populated(self):
        finances = asyncio.run(SampleDataSource().load())

        assert finances.currency == "USD"
        assert len(finances.personal.accounts) == 4
        assert len(finances.home.accounts) == 3
        assert any(a.is_archived for a in finances.personal.accounts)

    def test_dates_relative_to_now(self):
        now = datetime(2024, 12, 20, 8, 0)
        finances = asyncio.run(SampleDataSource(now=now).load())

        dates = {t.id: t.date for t in finances.personal.transactions}
        assert dates["p-txn-1"] == datetime(2024, 12, 18, 8, 0)
        car_loan = next(a for a in finances.personal.accounts if a.id == "p-acc-3")
        assert car_loan.due_date == datetime(2025, 1, 5)

    def test_transaction_accounts_exist(self):
        finances = asyncio.run(SampleDataSource().load())
        for data in (finances.personal, finances.home):
            ids = {a.id for a in data.accounts}
            assert all(t.account_id in ids for t in data.transactions)
