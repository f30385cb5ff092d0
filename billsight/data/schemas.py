"""
Canonical transaction record, derived value objects, and the date-range filter.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class SourceDialect(str, Enum):
    WECHAT = "wechat"
    ALIPAY = "alipay"


class TransactionType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


class MergeMode(str, Enum):
    CUMULATIVE = "cumulative"
    REPLACE = "replace"


# A raw cell as it comes out of a CSV or workbook reader
CellValue = Union[str, int, float, dt.datetime, None]
RawRow = dict[str, CellValue]


@dataclass(frozen=True)
class Transaction:
    """One normalized bill entry. Never mutated after creation."""
    id: str
    transaction_time: dt.datetime
    category: str
    counterparty: str
    description: str
    type: TransactionType
    amount: Decimal                      # always > 0; direction lives in `type`
    payment_method: str
    source: SourceDialect

    @property
    def dedup_key(self) -> tuple:
        return (self.transaction_time, self.amount, self.description, self.type)


@dataclass(frozen=True)
class DataSummary:
    total_income: float
    total_expense: float
    net_income: float
    transaction_count: int
    start: dt.datetime
    end: dt.datetime

    @classmethod
    def empty(cls) -> "DataSummary":
        """Zero totals; start and end both pinned to now."""
        now = dt.datetime.now()
        return cls(total_income=0.0, total_expense=0.0, net_income=0.0, transaction_count=0, start=now, end=now)


@dataclass(frozen=True)
class CategoryStats:
    category: str
    amount: float
    count: int
    percentage: float


@dataclass(frozen=True)
class WeeklyBucket:
    week: str                # "2024-W03"
    week_start: dt.date      # Monday of the ISO week
    label: str               # "Week 3"
    income: float
    expense: float


@dataclass(frozen=True)
class UploadStatus:
    in_flight: bool = False
    progress_percent: float = 0.0
    error_message: Optional[str] = None
    succeeded: bool = False


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-day window; a missing bound is unbounded."""
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None

    def __post_init__(self) -> None:
        if self.start and self.end and self.start > self.end:
            raise ValueError(f"start {self.start} is after end {self.end}")

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def resolve(self) -> tuple[Optional[dt.datetime], Optional[dt.datetime]]:
        """Return (start_of_start_day, end_of_end_day) as datetimes."""
        start = dt.datetime.combine(self.start, dt.time.min) if self.start else None
        end = dt.datetime.combine(self.end, dt.time.max) if self.end else None
        return start, end

    def contains(self, moment: dt.datetime) -> bool:
        day = dt.datetime.combine(moment.date(), dt.time.min)
        start, end = self.resolve()
        if start is not None and day < start:
            return False
        if end is not None and day > end:
            return False
        return True

    @property
    def label(self) -> str:
        """Human-readable label for the window."""
        if self.is_unbounded:
            return "All Time"
        s = self.start.isoformat() if self.start else "?"
        e = self.end.isoformat() if self.end else "?"
        return f"{s} to {e}"


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything a renderer needs, captured from one consistent store state."""
    transactions: tuple[Transaction, ...] = ()
    filtered: tuple[Transaction, ...] = ()
    date_range: DateRange = field(default_factory=DateRange)
    summary: DataSummary = field(default_factory=DataSummary.empty)
    upload_status: UploadStatus = field(default_factory=UploadStatus)

    @property
    def has_data(self) -> bool:
        return bool(self.transactions)
