"""
SessionStore — in-memory session state: transactions, active filter, upload status.

One instance is owned by whoever serves a session (the app, the CLI) and passed
explicitly. Every mutation swaps in a complete new snapshot under a lock, so
readers never observe a half-applied update.
"""
from __future__ import annotations

import asyncio
import dataclasses
import threading
from typing import Sequence

from billsight.analytics.summary import generate_summary
from billsight.data.filters import filter_by_date_range
from billsight.data.loader import UploadSource, load_uploads, merge_transactions
from billsight.data.schemas import (
    DateRange,
    MergeMode,
    SessionSnapshot,
    Transaction,
    UploadStatus,
)
from billsight.errors import UploadInProgressError
from billsight.logging_setup import get_logger

logger = get_logger("billsight.data.store")


class SessionStore:
    """Holds the current transaction set and everything derived from it."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = SessionSnapshot()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._snapshot

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self.snapshot().transactions

    @property
    def filtered(self) -> tuple[Transaction, ...]:
        return self.snapshot().filtered

    @property
    def upload_status(self) -> UploadStatus:
        return self.snapshot().upload_status

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_upload_status(self, **changes) -> UploadStatus:
        """Patch the upload status fields given as keyword arguments."""
        with self._lock:
            status = dataclasses.replace(self._snapshot.upload_status, **changes)
            self._snapshot = dataclasses.replace(self._snapshot, upload_status=status)
            return status

    def _derive(
        self,
        transactions: Sequence[Transaction],
        date_range: DateRange,
        upload_status: UploadStatus,
    ) -> SessionSnapshot:
        transactions = tuple(transactions)
        filtered = tuple(filter_by_date_range(transactions, date_range))
        return SessionSnapshot(
            transactions=transactions,
            filtered=filtered,
            date_range=date_range,
            summary=generate_summary(filtered),
            upload_status=upload_status,
        )

    async def upload(
        self,
        files: Sequence[UploadSource],
        mode: MergeMode = MergeMode.CUMULATIVE,
    ) -> SessionSnapshot:
        """Load ``files`` in order and merge them into the session.

        The merge commits only after every file parsed; on failure the
        transaction set is untouched, the status carries the error, and the
        error is re-raised. One batch runs at a time: a second call while one
        is in flight raises UploadInProgressError and changes nothing.
        """
        with self._lock:
            if self._snapshot.upload_status.in_flight:
                raise UploadInProgressError("An upload is already in progress")
            status = UploadStatus(in_flight=True, progress_percent=0.0)
            self._snapshot = dataclasses.replace(self._snapshot, upload_status=status)

        try:
            batch = await load_uploads(files, on_progress=lambda pct: self.set_upload_status(progress_percent=pct))
        except Exception as exc:
            logger.warning("Upload of %d file(s) failed: %s", len(files), exc)
            self.set_upload_status(in_flight=False, error_message=str(exc) or "File processing failed", succeeded=False)
            raise
        except asyncio.CancelledError:
            self.set_upload_status(in_flight=False, error_message="Upload cancelled", succeeded=False)
            raise

        with self._lock:
            current = self._snapshot
            merged = merge_transactions(current.transactions, batch, mode)
            status = UploadStatus(in_flight=False, progress_percent=100.0, error_message=None, succeeded=True)
            self._snapshot = self._derive(merged, current.date_range, status)
            snapshot = self._snapshot

        logger.info(
            "Upload committed (%s): %d new → %d in session",
            mode.value, len(batch), len(snapshot.transactions),
        )
        return snapshot

    def set_date_range(self, date_range: DateRange) -> SessionSnapshot:
        """Replace the active filter and recompute the filtered set and summary."""
        with self._lock:
            current = self._snapshot
            self._snapshot = self._derive(current.transactions, date_range, current.upload_status)
            return self._snapshot

    def apply_date_filter(self) -> SessionSnapshot:
        """Re-run the active filter against the current transactions."""
        return self.set_date_range(self.snapshot().date_range)

    def clear(self) -> SessionSnapshot:
        """Drop all transactions, the filter, and the upload status.

        A batch still in flight keeps its status and commits into the
        cleared session when it finishes.
        """
        with self._lock:
            status = self._snapshot.upload_status
            self._snapshot = SessionSnapshot(upload_status=status if status.in_flight else UploadStatus())
            return self._snapshot
