"""Tests for loading expense and balance documents."""

import json
from decimal import Decimal

import pytest

from splitledger.balances import compute_balances
from splitledger.exceptions import LedgerInputError
from splitledger.loader import (
    load_balances,
    load_expenses,
    parse_balances,
    parse_expenses,
)


@pytest.fixture
def expenses_document():
    """Expenses as exported by the web client (camelCase keys)."""
    return {
        "expenses": [
            {
                "expenseId": "e1",
                "amount": 12.1,
                "paidBy": "alice",
                "participants": ["alice", "bob"],
                "splitDetails": {
                    "alice": {"amount": 6.05},
                    "bob": {"amount": 6.05},
                },
            },
            {
                "expense_id": "e2",
                "amount": 0,
                "paid_by": "bob",
                "participants": [],
            },
        ]
    }


class TestLoadExpenses:
    """Reading expense files."""

    def test_object_with_expenses_key(self, tmp_path, expenses_document):
        path = tmp_path / "expenses.json"
        path.write_text(json.dumps(expenses_document))

        expenses = load_expenses(path)

        assert len(expenses) == 2
        assert expenses[0].paid_by == "alice"
        assert expenses[0].amount == Decimal("12.1")
        assert expenses[0].split_details["bob"].amount == Decimal("6.05")

    def test_malformed_records_still_load(self, tmp_path, expenses_document):
        """Zero amounts and empty participants are the engine's concern."""
        path = tmp_path / "expenses.json"
        path.write_text(json.dumps(expenses_document))

        expenses = load_expenses(path)

        assert expenses[1].amount == Decimal("0")
        assert expenses[1].participants == []

    def test_bare_list(self, tmp_path, expenses_document):
        path = tmp_path / "expenses.json"
        path.write_text(json.dumps(expenses_document["expenses"]))

        assert len(load_expenses(path)) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(LedgerInputError, match="File not found"):
            load_expenses(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(LedgerInputError, match="not valid JSON"):
            load_expenses(path)

    def test_wrong_shape(self):
        with pytest.raises(LedgerInputError, match="missing 'expenses' key"):
            parse_expenses({"items": []})

    def test_invalid_field(self):
        with pytest.raises(LedgerInputError, match="invalid expenses"):
            parse_expenses([{"amount": "lots", "paidBy": "alice"}])

    def test_null_fields_do_not_reject_ledger(self):
        """Nulls load as empty so the engine can skip or fall back per record."""
        expenses = parse_expenses(
            [
                {
                    "amount": 30,
                    "paidBy": "alice",
                    "participants": ["alice", "bob"],
                    "splitDetails": {"alice": None},
                },
                {"amount": 10, "paidBy": "bob", "participants": None},
                {
                    "amount": 5,
                    "paidBy": "bob",
                    "participants": ["bob"],
                    "splitDetails": None,
                },
            ]
        )

        assert expenses[0].split_details == {"alice": None}
        assert expenses[0].share_for("alice") is None
        assert expenses[1].participants == []
        assert expenses[2].split_details == {}

        balances = compute_balances(expenses)

        assert balances["alice"].net_amount == Decimal("15.00")
        assert balances["bob"].net_amount == Decimal("-15.00")


class TestLoadBalances:
    """Reading balance files."""

    def test_balances(self, tmp_path):
        path = tmp_path / "balances.json"
        path.write_text(
            json.dumps(
                {
                    "balances": [
                        {"userId": "alice", "netAmount": 60},
                        {"user_id": "bob", "net_amount": -60.0},
                    ]
                }
            )
        )

        balances = load_balances(path)

        assert [b.user_id for b in balances] == ["alice", "bob"]
        assert balances[1].net_amount == Decimal("-60")
        assert balances[0].total_paid == Decimal("0")

    def test_missing_net_amount(self):
        with pytest.raises(LedgerInputError, match="invalid balances"):
            parse_balances([{"userId": "alice"}])
