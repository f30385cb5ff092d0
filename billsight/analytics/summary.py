"""
Summary analytics — totals, category breakdowns, weekly series, payment channels.

Every function is a pure computation over the transactions it is given.
"""
from __future__ import annotations

import datetime as dt
from typing import Sequence

from billsight.analytics.common import pct_of_total, to_frame
from billsight.data.schemas import (
    CategoryStats,
    DataSummary,
    Transaction,
    TransactionType,
    WeeklyBucket,
)


def generate_summary(transactions: Sequence[Transaction]) -> DataSummary:
    """Income/expense totals, net, count and the covered time span."""
    df = to_frame(transactions)
    if df.empty:
        return DataSummary.empty()

    by_type = df.groupby("type")["amount"].sum()
    income = float(by_type.get(TransactionType.INCOME.value, 0.0))
    expense = float(by_type.get(TransactionType.EXPENSE.value, 0.0))

    return DataSummary(
        total_income=income,
        total_expense=expense,
        net_income=income - expense,
        transaction_count=len(df),
        start=df["transaction_time"].min().to_pydatetime(),
        end=df["transaction_time"].max().to_pydatetime(),
    )


def category_stats(
    transactions: Sequence[Transaction],
    type: TransactionType,
) -> list[CategoryStats]:
    """Per-category amount/count/share for one type, largest first.

    Equal amounts are ordered by category label.
    """
    df = to_frame(transactions)
    df = df[df["type"] == type.value]
    if df.empty:
        return []

    total = float(df["amount"].sum())
    grouped = df.groupby("category").agg(
        amount=("amount", "sum"),
        count=("amount", "size"),
    ).reset_index().sort_values(["amount", "category"], ascending=[False, True])

    return [
        CategoryStats(
            category=str(r["category"]),
            amount=float(r["amount"]),
            count=int(r["count"]),
            percentage=pct_of_total(float(r["amount"]), total),
        )
        for _, r in grouped.iterrows()
    ]


def weekly_series(transactions: Sequence[Transaction]) -> list[WeeklyBucket]:
    """Income/expense per ISO week (Monday start), oldest first.

    Only weeks with at least one transaction appear.
    """
    df = to_frame(transactions)
    if df.empty:
        return []

    iso = df["transaction_time"].dt.isocalendar()
    df["iso_year"] = iso["year"].astype(int)
    df["iso_week"] = iso["week"].astype(int)
    df["income"] = df["amount"].where(df["type"] == TransactionType.INCOME.value, 0.0)
    df["expense"] = df["amount"].where(df["type"] == TransactionType.EXPENSE.value, 0.0)

    grouped = df.groupby(["iso_year", "iso_week"]).agg(
        income=("income", "sum"),
        expense=("expense", "sum"),
    ).reset_index().sort_values(["iso_year", "iso_week"])

    buckets = []
    for _, r in grouped.iterrows():
        y, w = int(r["iso_year"]), int(r["iso_week"])
        buckets.append(WeeklyBucket(
            week=f"{y}-W{w:02d}",
            week_start=dt.date.fromisocalendar(y, w, 1),
            label=f"Week {w}",
            income=float(r["income"]),
            expense=float(r["expense"]),
        ))
    return buckets


def payment_method_stats(transactions: Sequence[Transaction], limit: int = 8) -> list[dict]:
    """Amount per payment channel (blank channels skipped), largest first."""
    df = to_frame(transactions)
    df = df[df["payment_method"].str.strip() != ""] if not df.empty else df
    if df.empty:
        return []

    grouped = df.groupby("payment_method").agg(
        amount=("amount", "sum"),
        count=("amount", "size"),
    ).reset_index().sort_values(["amount", "payment_method"], ascending=[False, True])

    return [
        {"payment_method": str(r["payment_method"]), "amount": float(r["amount"]), "count": int(r["count"])}
        for _, r in grouped.head(limit).iterrows()
    ]


def date_range_label(transactions: Sequence[Transaction]) -> str:
    """Export label: one ISO date for a single day, else "start - end"; empty set gives ""."""
    if not transactions:
        return ""
    days = [t.transaction_time.date() for t in transactions]
    start, end = min(days).isoformat(), max(days).isoformat()
    return start if start == end else f"{start} - {end}"
