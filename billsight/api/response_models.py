"""
Pydantic request/response schemas for the API.
"""
from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel

from billsight.data.schemas import (
    CategoryStats,
    DataSummary,
    Transaction,
    UploadStatus,
    WeeklyBucket,
)


class HealthResponse(BaseModel):
    status: str
    transactions: int
    filtered: int


class UploadStatusResponse(BaseModel):
    in_flight: bool
    progress_percent: float
    error_message: Optional[str] = None
    succeeded: bool

    @classmethod
    def from_status(cls, status: UploadStatus) -> "UploadStatusResponse":
        return cls(
            in_flight=status.in_flight,
            progress_percent=status.progress_percent,
            error_message=status.error_message,
            succeeded=status.succeeded,
        )


class UploadResponse(BaseModel):
    status: UploadStatusResponse
    files: int
    transactions: int


class TransactionOut(BaseModel):
    id: str
    transaction_time: dt.datetime
    category: str
    counterparty: str
    description: str
    type: str
    amount: float
    payment_method: str
    source: str

    @classmethod
    def from_transaction(cls, t: Transaction) -> "TransactionOut":
        return cls(
            id=t.id,
            transaction_time=t.transaction_time,
            category=t.category,
            counterparty=t.counterparty,
            description=t.description,
            type=t.type.value,
            amount=float(t.amount),
            payment_method=t.payment_method,
            source=t.source.value,
        )


class TransactionsResponse(BaseModel):
    transactions: list[TransactionOut]
    count: int


class SummaryResponse(BaseModel):
    total_income: float
    total_expense: float
    net_income: float
    transaction_count: int
    start: dt.datetime
    end: dt.datetime
    date_range: str

    @classmethod
    def from_summary(cls, s: DataSummary, date_range: str) -> "SummaryResponse":
        return cls(
            total_income=s.total_income,
            total_expense=s.total_expense,
            net_income=s.net_income,
            transaction_count=s.transaction_count,
            start=s.start,
            end=s.end,
            date_range=date_range,
        )


class CategoryStatsOut(BaseModel):
    category: str
    amount: float
    count: int
    percentage: float

    @classmethod
    def from_stats(cls, s: CategoryStats) -> "CategoryStatsOut":
        return cls(category=s.category, amount=s.amount, count=s.count, percentage=s.percentage)


class CategoriesResponse(BaseModel):
    type: str
    categories: list[CategoryStatsOut]


class WeeklyBucketOut(BaseModel):
    week: str
    week_start: dt.date
    label: str
    income: float
    expense: float

    @classmethod
    def from_bucket(cls, b: WeeklyBucket) -> "WeeklyBucketOut":
        return cls(week=b.week, week_start=b.week_start, label=b.label, income=b.income, expense=b.expense)


class WeeklyResponse(BaseModel):
    weeks: list[WeeklyBucketOut]


class PaymentMethodOut(BaseModel):
    payment_method: str
    amount: float
    count: int


class PaymentMethodsResponse(BaseModel):
    payment_methods: list[PaymentMethodOut]


class DateRangeRequest(BaseModel):
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None


class DateRangeResponse(BaseModel):
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None
    label: str
    summary: SummaryResponse
