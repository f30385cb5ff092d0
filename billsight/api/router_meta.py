"""
Meta endpoints: health.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from billsight.api.dependencies import get_session
from billsight.api.response_models import HealthResponse
from billsight.data.store import SessionStore

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(session: SessionStore = Depends(get_session)):
    snapshot = session.snapshot()
    return HealthResponse(
        status="ok",
        transactions=len(snapshot.transactions),
        filtered=len(snapshot.filtered),
    )
