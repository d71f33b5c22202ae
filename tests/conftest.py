"""
Shared fixtures for the ledger test suite.

Every test runs with LEDGER_* environment variables cleared and the
working directory set to a temp dir, so a developer's .env never leaks in.
"""

import os

import pytest

from ledger.config import get_settings
from ledger.models import Ledger
from ledger.operations import create_account, create_category


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.startswith("LEDGER_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ledger() -> Ledger:
    """
    Two USD accounts and two categories, no movements.

    accounts:   "1" Checking, "2" Savings
    categories: "1" Groceries (expense), "2" Salary (income)
    """
    state = Ledger()
    state = create_account(state, {"name": "Checking", "kind": "checking", "currency": "USD"}).unwrap()
    state = create_account(state, {"name": "Savings", "kind": "savings", "currency": "USD"}).unwrap()
    state = create_category(
        state, {"kind": "expense", "name": "Groceries", "group": "Everyday", "assigned": 40000}
    ).unwrap()
    state = create_category(
        state, {"kind": "income", "name": "Salary", "group": "Income"}
    ).unwrap()
    return state


@pytest.fixture
def mark_reconciled():
    """Returns a helper that sets `reconciled` directly, bypassing the balance check."""

    def mark(state: Ledger, *account_ids: str, on: str = "2024-01-31") -> Ledger:
        return state.with_accounts(
            a.model_copy(update={"reconciled": on}) if a.id in account_ids else a
            for a in state.accounts
        )

    return mark
