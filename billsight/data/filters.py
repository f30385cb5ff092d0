"""
Date-range filtering and text search over a transaction set.
"""
from __future__ import annotations

from typing import Optional, Sequence

from billsight.data.schemas import DateRange, SourceDialect, Transaction, TransactionType


def filter_by_date_range(
    transactions: Sequence[Transaction],
    date_range: DateRange | None,
) -> Sequence[Transaction]:
    """Transactions whose calendar day falls inside ``date_range`` (inclusive).

    With no bounds the input is returned as-is.
    """
    if date_range is None or date_range.is_unbounded:
        return transactions
    return [t for t in transactions if date_range.contains(t.transaction_time)]


def search_transactions(
    transactions: Sequence[Transaction],
    term: str = "",
    type: Optional[TransactionType] = None,
    source: Optional[SourceDialect] = None,
) -> list[Transaction]:
    """Case-insensitive match on description/counterparty/category, plus exact type/source."""
    needle = term.strip().lower()
    result = []
    for t in transactions:
        if type is not None and t.type != type:
            continue
        if source is not None and t.source != source:
            continue
        if needle and not any(needle in field.lower() for field in (t.description, t.counterparty, t.category)):
            continue
        result.append(t)
    return result
