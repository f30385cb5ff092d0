"""Shared fixtures."""

from __future__ import annotations

import pytest

from billsight.data.schemas import Transaction, TransactionType

from factories import make_alipay_csv, make_alipay_xlsx, make_tx, make_wechat_xlsx


@pytest.fixture
def wechat_xlsx() -> bytes:
    return make_wechat_xlsx()


@pytest.fixture
def alipay_csv() -> bytes:
    return make_alipay_csv()


@pytest.fixture
def alipay_xlsx() -> bytes:
    return make_alipay_xlsx()


@pytest.fixture
def three_week_set() -> list[Transaction]:
    """10 transactions over ISO weeks 2024-W02..W04; 2 fall on 2024-01-16."""
    return [
        make_tx("2024-01-08 09:00:00", "12.00", "breakfast"),
        make_tx("2024-01-09 12:00:00", "30.00", "lunch"),
        make_tx("2024-01-10 19:00:00", "5000.00", "salary", TransactionType.INCOME, "Salary"),
        make_tx("2024-01-14 23:59:59", "88.00", "groceries", category="Food"),
        make_tx("2024-01-15 00:00:00", "15.00", "taxi", category="Transport"),
        make_tx("2024-01-16 08:15:00", "9.90", "coffee", category="Food"),
        make_tx("2024-01-16 21:40:00", "200.00", "refund", TransactionType.INCOME, "Refund"),
        make_tx("2024-01-17 13:00:00", "45.00", "dinner", category="Food"),
        make_tx("2024-01-22 10:00:00", "60.00", "books", category="Shopping"),
        make_tx("2024-01-28 18:00:00", "20.00", "movie", category="Entertainment"),
    ]
