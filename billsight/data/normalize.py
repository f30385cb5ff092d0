"""
Field mapping, flow classification, timestamp/amount parsing → canonical Transaction.
"""
from __future__ import annotations

import datetime as dt
import re
import uuid
from decimal import Decimal, InvalidOperation
from typing import Optional

import pandas as pd

from billsight.config import (
    ALIPAY_FIELD_MAP,
    ALIPAY_NEUTRAL_FLOW,
    DEFAULT_CATEGORY,
    INCOME_MARKER,
    WECHAT_FIELD_MAP,
    WECHAT_NEUTRAL_FLOW,
)
from billsight.data.schemas import CellValue, RawRow, SourceDialect, Transaction, TransactionType
from billsight.errors import AmountParseError, RowError, TimestampParseError
from billsight.logging_setup import get_logger

logger = get_logger("billsight.data.normalize")

FIELD_MAPS = {
    SourceDialect.WECHAT: WECHAT_FIELD_MAP,
    SourceDialect.ALIPAY: ALIPAY_FIELD_MAP,
}

_AMOUNT_STRIP_RE = re.compile(r"[^\d.\-]")
_CN_DATE_SEP_RE = re.compile(r"[年月]")


# ---------------------------------------------------------------------------
# Cell parsers
# ---------------------------------------------------------------------------

def parse_timestamp(value: CellValue) -> dt.datetime:
    """Parse an export timestamp; raises TimestampParseError."""
    if value is None or value is pd.NaT:
        raise TimestampParseError("empty timestamp")
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if isinstance(value, dt.datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, (int, float)):
        raise TimestampParseError(f"unusable timestamp {value!r}")

    text = " ".join(_CN_DATE_SEP_RE.sub("-", str(value)).replace("日", " ").split())
    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        raise TimestampParseError(f"cannot parse timestamp {value!r}")
    # Offsets are dropped, not converted: calendar days stay local to the export
    if parsed.tzinfo is not None:
        parsed = parsed.tz_localize(None)
    return parsed.to_pydatetime()


def parse_amount(value: CellValue) -> Decimal:
    """Strip currency symbols and separators; return the absolute, non-zero amount."""
    if value is None:
        raise AmountParseError("empty amount")
    cleaned = _AMOUNT_STRIP_RE.sub("", str(value))
    try:
        amount = Decimal(cleaned)
    except InvalidOperation as exc:
        raise AmountParseError(f"cannot parse amount {value!r}") from exc
    if not amount.is_finite() or amount == 0:
        raise AmountParseError(f"zero or non-finite amount {value!r}")
    return abs(amount)


# ---------------------------------------------------------------------------
# Flow classification
# ---------------------------------------------------------------------------

def is_neutral_flow(source: SourceDialect, flow: Optional[str]) -> bool:
    """True for internal transfers that are neither income nor expense."""
    if flow is None:
        return False
    if source == SourceDialect.WECHAT:
        return flow == WECHAT_NEUTRAL_FLOW
    return ALIPAY_NEUTRAL_FLOW in flow


def classify_flow(flow: Optional[str]) -> TransactionType:
    if flow and INCOME_MARKER in flow:
        return TransactionType.INCOME
    return TransactionType.EXPENSE


# ---------------------------------------------------------------------------
# Row → Transaction
# ---------------------------------------------------------------------------

def _text(row: RawRow, label: str, default: str = "") -> str:
    value = row.get(label)
    if value is None:
        return default
    value = str(value).strip()
    return value or default


def new_transaction_id() -> str:
    return uuid.uuid4().hex[:12]


def normalize_row(row: RawRow, source: SourceDialect) -> Optional[Transaction]:
    """Map one raw row to a Transaction, or None when the row is dropped.

    Neutral-flow rows are discarded; unparseable timestamps or amounts raise
    a RowError subclass, which ``normalize_rows`` turns into a skip.
    """
    fields = FIELD_MAPS[source]
    flow = row.get(fields["flow"])
    flow = str(flow).strip() if flow is not None else None

    if is_neutral_flow(source, flow):
        return None

    transaction_time = parse_timestamp(row.get(fields["transaction_time"]))
    amount = parse_amount(row.get(fields["amount"]))

    return Transaction(
        id=new_transaction_id(),
        transaction_time=transaction_time,
        category=_text(row, fields["category"], DEFAULT_CATEGORY),
        counterparty=_text(row, fields["counterparty"]),
        description=_text(row, fields["description"]),
        type=classify_flow(flow),
        amount=amount,
        payment_method=_text(row, fields["payment_method"]),
        source=source,
    )


def normalize_rows(rows: list[RawRow], source: SourceDialect, filename: str = "") -> list[Transaction]:
    """Normalize a file's raw rows, skipping neutral and unparseable ones."""
    transactions: list[Transaction] = []
    neutral = invalid = 0
    for i, row in enumerate(rows):
        try:
            tx = normalize_row(row, source)
        except RowError as exc:
            invalid += 1
            logger.debug("%s row %d skipped: %s", filename, i, exc)
            continue
        if tx is None:
            neutral += 1
            continue
        transactions.append(tx)

    if neutral or invalid:
        logger.info(
            "%s: kept %d of %d rows (%d neutral, %d unparseable)",
            filename, len(transactions), len(rows), neutral, invalid,
        )
    return transactions
