"""
Upload endpoints: upload bill exports, check status, clear the session.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from billsight.api.dependencies import get_session
from billsight.api.response_models import UploadResponse, UploadStatusResponse
from billsight.data.schemas import MergeMode
from billsight.data.store import SessionStore
from billsight.errors import FileReadError, ParseError, UploadInProgressError

router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload", response_model=UploadResponse)
async def upload_files(
    files: list[UploadFile] = File(...),
    mode: MergeMode = Form(MergeMode.CUMULATIVE),
    session: SessionStore = Depends(get_session),
):
    """Parse one or more WeChat Pay / Alipay exports and merge them into the session."""
    for f in files:
        if not f.filename:
            raise HTTPException(400, "Missing filename")

    try:
        snapshot = await session.upload(files, mode)
    except (ParseError, FileReadError) as exc:
        raise HTTPException(400, str(exc))
    except UploadInProgressError as exc:
        raise HTTPException(409, str(exc))

    return UploadResponse(
        status=UploadStatusResponse.from_status(snapshot.upload_status),
        files=len(files),
        transactions=len(snapshot.transactions),
    )


@router.get("/upload/status", response_model=UploadStatusResponse)
def upload_status(session: SessionStore = Depends(get_session)):
    return UploadStatusResponse.from_status(session.upload_status)


@router.delete("/transactions", response_model=UploadStatusResponse)
def clear_transactions(session: SessionStore = Depends(get_session)):
    """Drop every transaction, the date filter, and the upload status."""
    snapshot = session.clear()
    return UploadStatusResponse.from_status(snapshot.upload_status)
