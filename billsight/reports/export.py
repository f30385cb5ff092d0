"""
Bill report export — frozen snapshot → styled workbook, with bounded retries.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

import pandas as pd

from billsight.analytics.common import sanitize_for_json
from billsight.analytics.summary import category_stats, date_range_label, payment_method_stats, weekly_series
from billsight.config import EXPORT_MAX_RETRIES, EXPORT_RETRY_BACKOFF_SECONDS
from billsight.data.schemas import SessionSnapshot, Transaction, TransactionType
from billsight.errors import ExportError
from billsight.excel import Column, ExcelWriter, KpiCard
from billsight.logging_setup import get_logger

logger = get_logger("billsight.reports.export")


CATEGORY_COLS = [
    Column("category", "text", "Category"),
    Column("amount", "currency", "Amount"),
    Column("count", "number", "Transactions"),
    Column("percentage", "percent", "Share"),
]

WEEKLY_COLS = [
    Column("week", "text", "Week"),
    Column("week_start", "date", "Week Of"),
    Column("income", "currency", "Income"),
    Column("expense", "currency", "Expense"),
]

PAYMENT_COLS = [
    Column("payment_method", "text", "Payment Method"),
    Column("amount", "currency", "Amount"),
    Column("count", "number", "Transactions"),
]

TRANSACTION_COLS = [
    Column("transaction_time", "datetime", "Time"),
    Column("type", "text", "Type"),
    Column("amount", "currency", "Amount"),
    Column("category", "text", "Category"),
    Column("counterparty", "text", "Counterparty"),
    Column("description", "text", "Description"),
    Column("payment_method", "text", "Payment Method"),
    Column("source", "text", "Source"),
]


@dataclass(frozen=True)
class ExportSnapshot:
    """Totals and rows computed once from a single transaction set."""
    total_income: float
    total_expense: float
    transaction_count: int
    date_range: str
    transactions: tuple[Transaction, ...]

    @property
    def net_income(self) -> float:
        return self.total_income - self.total_expense


def build_export_snapshot(session: SessionSnapshot) -> ExportSnapshot:
    """Freeze the filtered set (or the full set when the filter matched nothing)."""
    active = session.filtered or session.transactions
    income = sum(float(t.amount) for t in active if t.type == TransactionType.INCOME)
    expense = sum(float(t.amount) for t in active if t.type == TransactionType.EXPENSE)
    return ExportSnapshot(
        total_income=income,
        total_expense=expense,
        transaction_count=len(active),
        date_range=date_range_label(active),
        transactions=tuple(active),
    )


def _transaction_rows(transactions: Sequence[Transaction]) -> list[dict]:
    rows = []
    for t in transactions:
        row = sanitize_for_json(t)
        row["transaction_time"] = t.transaction_time
        rows.append(row)
    return rows


def _direction(record) -> str:
    return "income" if record["type"] == TransactionType.INCOME.value else "expense"


def generate_excel(snapshot: ExportSnapshot) -> ExcelWriter:
    """Lay out the summary, category, weekly, and transaction sheets."""
    tx = snapshot.transactions
    ew = ExcelWriter()

    ws = ew.add_sheet("Summary")
    ew.write_title(ws, "Personal Finance Report",
                   f"{snapshot.date_range or 'No data'}  |  Generated {pd.Timestamp.now():%Y-%m-%d %H:%M}")
    row = ew.write_section(ws, 5, "OVERVIEW")
    row = ew.write_kpi_row(ws, row, [
        KpiCard("TOTAL INCOME", snapshot.total_income),
        KpiCard("TOTAL EXPENSE", snapshot.total_expense),
        KpiCard("NET INCOME", snapshot.net_income),
        KpiCard("TRANSACTIONS", snapshot.transaction_count, "number"),
    ])
    row = ew.write_section(ws, row, "PAYMENT METHODS")
    ew.write_table(ws, row, PAYMENT_COLS, payment_method_stats(tx), freeze=False)

    for sheet_name, tx_type in [("Expense Categories", TransactionType.EXPENSE),
                                ("Income Categories", TransactionType.INCOME)]:
        ws_c = ew.add_sheet(sheet_name)
        ew.write_table(ws_c, 1, CATEGORY_COLS, sanitize_for_json(category_stats(tx, tx_type)), total_label="TOTAL")

    ws_w = ew.add_sheet("Weekly")
    weekly = [{**sanitize_for_json(b), "week_start": b.week_start} for b in weekly_series(tx)]
    ew.write_table(ws_w, 1, WEEKLY_COLS, weekly, total_label="TOTAL")

    ws_t = ew.add_sheet("Transactions")
    ew.write_table(ws_t, 1, TRANSACTION_COLS, _transaction_rows(tx), direction=_direction)
    return ew


def render_bytes(snapshot: ExportSnapshot) -> bytes:
    return generate_excel(snapshot).to_bytes()


def export_to_file(snapshot: ExportSnapshot, output_path: str | Path) -> Path:
    return generate_excel(snapshot).save(output_path)


def export_with_retry(
    render: Callable[[ExportSnapshot], object],
    snapshot: ExportSnapshot,
    max_retries: int = EXPORT_MAX_RETRIES,
    backoff_seconds: float = EXPORT_RETRY_BACKOFF_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
):
    """Run ``render(snapshot)``, retrying up to ``max_retries`` times.

    Waits ``backoff_seconds`` before each retry; after the last failed
    attempt raises ExportError chained to the final cause.
    """
    if snapshot.transaction_count == 0:
        raise ExportError("No data to export")

    attempt = 0
    while True:
        if attempt > 0:
            logger.info("Retrying export (%d/%d)", attempt, max_retries)
            sleep(backoff_seconds)
        try:
            return render(snapshot)
        except Exception as exc:
            logger.warning("Export attempt %d/%d failed: %s", attempt + 1, max_retries + 1, exc)
            if attempt >= max_retries:
                raise ExportError(f"Export failed after {attempt + 1} attempts: {exc}") from exc
            attempt += 1
