"""
Export endpoint — workbook download of the current (filtered) session.
"""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from billsight.api.dependencies import get_session
from billsight.data.store import SessionStore
from billsight.errors import ExportError
from billsight.reports.export import build_export_snapshot, export_with_retry, render_bytes

router = APIRouter(prefix="/api", tags=["export"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/export")
def export_report(session: SessionStore = Depends(get_session)):
    snapshot = session.snapshot()
    if not snapshot.has_data:
        raise HTTPException(400, "No data to export")

    try:
        content = export_with_retry(render_bytes, build_export_snapshot(snapshot))
    except ExportError as exc:
        raise HTTPException(500, str(exc))

    filename = f"finance_report_{datetime.now():%Y%m%d_%H%M%S}.xlsx"
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
