"""
FastAPI dependencies — session store lookup, query parsing.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query, Request

from billsight.data.schemas import SourceDialect, TransactionType
from billsight.data.store import SessionStore


def get_session(request: Request) -> SessionStore:
    """The SessionStore owned by the running app (set in the lifespan)."""
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(503, "Server not initialized yet")
    return session


def parse_type(
    type: Optional[str] = Query(None, description="Income|Expense"),
) -> Optional[TransactionType]:
    if type is None:
        return None
    try:
        return TransactionType(type)
    except ValueError:
        raise HTTPException(400, f"Invalid type: {type}")


def parse_source(
    source: Optional[str] = Query(None, description="wechat|alipay"),
) -> Optional[SourceDialect]:
    if source is None:
        return None
    try:
        return SourceDialect(source)
    except ValueError:
        raise HTTPException(400, f"Invalid source: {source}")
