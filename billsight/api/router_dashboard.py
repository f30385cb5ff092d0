"""
Dashboard endpoints — transactions, summary, category breakdowns, weekly series, date filter.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from billsight.analytics.summary import (
    category_stats,
    date_range_label,
    payment_method_stats,
    weekly_series,
)
from billsight.api.dependencies import get_session, parse_source, parse_type
from billsight.api.response_models import (
    CategoriesResponse,
    CategoryStatsOut,
    DateRangeRequest,
    DateRangeResponse,
    PaymentMethodOut,
    PaymentMethodsResponse,
    SummaryResponse,
    TransactionOut,
    TransactionsResponse,
    WeeklyBucketOut,
    WeeklyResponse,
)
from billsight.data.filters import search_transactions
from billsight.data.schemas import DateRange, SessionSnapshot, SourceDialect, TransactionType
from billsight.data.store import SessionStore

router = APIRouter(prefix="/api", tags=["dashboard"])


def _summary(snapshot: SessionSnapshot) -> SummaryResponse:
    return SummaryResponse.from_summary(snapshot.summary, date_range_label(snapshot.filtered))


@router.get("/transactions", response_model=TransactionsResponse)
def list_transactions(
    filtered: bool = Query(True, description="Apply the active date range"),
    q: str = Query("", description="Search description, counterparty, category"),
    tx_type: Optional[TransactionType] = Depends(parse_type),
    source: Optional[SourceDialect] = Depends(parse_source),
    session: SessionStore = Depends(get_session),
):
    snapshot = session.snapshot()
    rows = snapshot.filtered if filtered else snapshot.transactions
    rows = search_transactions(rows, q, tx_type, source)
    return TransactionsResponse(
        transactions=[TransactionOut.from_transaction(t) for t in rows],
        count=len(rows),
    )


@router.get("/summary", response_model=SummaryResponse)
def summary(session: SessionStore = Depends(get_session)):
    """Totals for the currently filtered transactions."""
    return _summary(session.snapshot())


@router.get("/categories", response_model=CategoriesResponse)
def categories(
    type: TransactionType = Query(TransactionType.EXPENSE),
    session: SessionStore = Depends(get_session),
):
    stats = category_stats(session.filtered, type)
    return CategoriesResponse(type=type.value, categories=[CategoryStatsOut.from_stats(s) for s in stats])


@router.get("/weekly", response_model=WeeklyResponse)
def weekly(session: SessionStore = Depends(get_session)):
    return WeeklyResponse(weeks=[WeeklyBucketOut.from_bucket(b) for b in weekly_series(session.filtered)])


@router.get("/payment-methods", response_model=PaymentMethodsResponse)
def payment_methods(
    limit: int = Query(8, ge=1, le=50),
    session: SessionStore = Depends(get_session),
):
    stats = payment_method_stats(session.filtered, limit)
    return PaymentMethodsResponse(payment_methods=[PaymentMethodOut(**s) for s in stats])


@router.put("/date-range", response_model=DateRangeResponse)
def set_date_range(req: DateRangeRequest, session: SessionStore = Depends(get_session)):
    """Set (or clear, with both bounds null) the active date filter."""
    try:
        date_range = DateRange(start=req.start, end=req.end)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    snapshot = session.set_date_range(date_range)
    return DateRangeResponse(start=date_range.start, end=date_range.end,
                             label=date_range.label, summary=_summary(snapshot))


@router.get("/date-range", response_model=DateRangeResponse)
def get_date_range(session: SessionStore = Depends(get_session)):
    snapshot = session.snapshot()
    dr = snapshot.date_range
    return DateRangeResponse(start=dr.start, end=dr.end, label=dr.label, summary=_summary(snapshot))
