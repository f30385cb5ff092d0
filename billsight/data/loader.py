"""
Upload reading, per-file loading, and merge/deduplication.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence

import pandas as pd

from billsight.data.normalize import normalize_rows
from billsight.data.parsers import parse_file
from billsight.data.schemas import MergeMode, SourceDialect, Transaction
from billsight.errors import FileReadError
from billsight.logging_setup import get_logger

logger = get_logger("billsight.data.loader")


# ---------------------------------------------------------------------------
# Upload sources
# ---------------------------------------------------------------------------

class UploadSource(Protocol):
    """Anything with a filename and an async read(), e.g. FastAPI's UploadFile."""
    filename: Optional[str]

    async def read(self) -> bytes: ...


@dataclass
class LocalFile:
    """A file on disk presented as an upload."""
    path: Path

    @property
    def filename(self) -> str:
        return self.path.name

    async def read(self) -> bytes:
        return await asyncio.to_thread(self.path.read_bytes)


async def read_upload(upload: UploadSource) -> bytes:
    filename = upload.filename or "<unnamed>"
    try:
        return await upload.read()
    except Exception as exc:
        raise FileReadError(filename, exc) from exc


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_bytes(
    content: bytes,
    filename: str,
    dialect: SourceDialect | None = None,
) -> list[Transaction]:
    """Parse and normalize one export file."""
    dialect, rows = parse_file(content, filename, dialect)
    transactions = normalize_rows(rows, dialect, filename)
    logger.info("%s (%s): %d transactions", filename, dialect.value, len(transactions))
    return transactions


async def load_uploads(
    files: Sequence[UploadSource],
    on_progress: Callable[[float], None] | None = None,
) -> list[Transaction]:
    """Load files one at a time, in order.

    ``on_progress`` receives ``(index + 1) / total * 100`` after each file.
    Any file failure propagates and nothing from the batch is returned.
    """
    batch: list[Transaction] = []
    total = len(files)
    for i, upload in enumerate(files):
        content = await read_upload(upload)
        batch.extend(load_bytes(content, upload.filename or f"file-{i + 1}"))
        if on_progress is not None:
            on_progress((i + 1) / total * 100)
    return batch


# ---------------------------------------------------------------------------
# Merge & dedup
# ---------------------------------------------------------------------------

_DEDUP_COLS = ["transaction_time", "amount", "description", "type"]


def dedup_transactions(transactions: Sequence[Transaction]) -> list[Transaction]:
    """Drop later records sharing (time, amount, description, type) with an earlier one."""
    if not transactions:
        return []
    keys = pd.DataFrame([t.dedup_key for t in transactions], columns=_DEDUP_COLS)
    keep = ~keys.duplicated(subset=_DEDUP_COLS, keep="first")
    return [t for t, k in zip(transactions, keep.tolist()) if k]


def merge_transactions(
    existing: Sequence[Transaction],
    new: Sequence[Transaction],
    mode: MergeMode = MergeMode.CUMULATIVE,
) -> list[Transaction]:
    """Combine, deduplicate, and sort most-recent first."""
    combined = list(existing) + list(new) if mode == MergeMode.CUMULATIVE else list(new)
    unique = dedup_transactions(combined)
    dropped = len(combined) - len(unique)
    if dropped:
        logger.info("Merge (%s): %d duplicates dropped → %d transactions", mode.value, dropped, len(unique))
    unique.sort(key=lambda t: t.transaction_time, reverse=True)
    return unique
