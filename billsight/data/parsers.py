"""
Source parsers: raw export bytes → grid of cells → header-keyed raw rows.

Both dialects converge on ``list[RawRow]`` (header label → cell value)
before normalization.
"""
from __future__ import annotations

import csv
import datetime as dt
import io
import math
from typing import Callable, Optional

from openpyxl import load_workbook

from billsight.config import (
    ALIPAY_FIELD_MAP,
    ALIPAY_FILENAME_HINTS,
    ALIPAY_HEADER_KEYWORDS,
    CSV_ENCODINGS,
    HEADER_LOOKAHEAD_ROWS,
    REQUIRED_FIELDS,
    WECHAT_FIELD_MAP,
    WECHAT_FILENAME_HINTS,
    WECHAT_PREAMBLE_ROWS,
)
from billsight.data.schemas import CellValue, RawRow, SourceDialect
from billsight.errors import HeaderNotFoundError, ParseError
from billsight.logging_setup import get_logger

logger = get_logger("billsight.data.parsers")

Grid = list[list[CellValue]]


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------

def _clean_cell(value) -> CellValue:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, (dt.datetime, int, float)):
        return value
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time.min)
    return str(value)


def _decode_text(content: bytes, filename: str) -> str:
    for encoding in CSV_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise ParseError(f"cannot decode text with any of {CSV_ENCODINGS}", filename)


def read_csv_grid(content: bytes, filename: str = "") -> Grid:
    """Comma-delimited text → grid. Rows may have ragged lengths."""
    text = _decode_text(content, filename)
    try:
        return [[_clean_cell(c) for c in row] for row in csv.reader(io.StringIO(text))]
    except csv.Error as exc:
        raise ParseError(f"malformed CSV: {exc}", filename) from exc


def read_workbook_grid(content: bytes, filename: str = "") -> Grid:
    """First worksheet of a workbook → grid, keeping blank rows in place."""
    try:
        wb = load_workbook(io.BytesIO(content), data_only=True)
    except Exception as exc:
        raise ParseError(f"not a readable workbook: {exc}", filename) from exc
    ws = wb.worksheets[0]
    grid = [[_clean_cell(c) for c in row] for row in ws.iter_rows(values_only=True)]
    wb.close()
    return grid


def read_grid(content: bytes, filename: str) -> Grid:
    """Pick the reader from the file extension (.csv → text, else workbook)."""
    if filename.lower().endswith(".csv"):
        return read_csv_grid(content, filename)
    return read_workbook_grid(content, filename)


# ---------------------------------------------------------------------------
# Header location & row mapping
# ---------------------------------------------------------------------------

def find_header_row(
    grid: Grid,
    keywords: list[str],
    lookahead: int = HEADER_LOOKAHEAD_ROWS,
) -> Optional[int]:
    """Index of the first row (within ``lookahead``) containing every keyword."""
    for i, row in enumerate(grid[:lookahead]):
        joined = "".join(str(c) for c in row if c is not None)
        if all(kw in joined for kw in keywords):
            return i
    return None


def _header_labels(row: list[CellValue]) -> list[str]:
    return ["" if c is None else str(c).strip() for c in row]


def _check_required(labels: list[str], field_map: dict[str, str], filename: str) -> None:
    missing = [field_map[f] for f in REQUIRED_FIELDS if field_map[f] not in labels]
    if missing:
        raise HeaderNotFoundError(f"header row is missing columns: {', '.join(missing)}", filename)


def rows_to_mappings(grid: Grid, header_index: int) -> list[RawRow]:
    """Key every non-blank row after the header by header label."""
    labels = _header_labels(grid[header_index])
    mapped: list[RawRow] = []
    for row in grid[header_index + 1:]:
        if not row or all(c is None for c in row):
            continue
        padded = list(row) + [None] * (len(labels) - len(row))
        mapped.append({label: padded[i] for i, label in enumerate(labels) if label})
    return mapped


# ---------------------------------------------------------------------------
# Dialects
# ---------------------------------------------------------------------------

def _wechat_rows(grid: Grid, filename: str) -> list[RawRow]:
    if len(grid) <= WECHAT_PREAMBLE_ROWS:
        return []
    _check_required(_header_labels(grid[WECHAT_PREAMBLE_ROWS]), WECHAT_FIELD_MAP, filename)
    return rows_to_mappings(grid, WECHAT_PREAMBLE_ROWS)


def _alipay_rows(grid: Grid, filename: str) -> list[RawRow]:
    header_index = find_header_row(grid, ALIPAY_HEADER_KEYWORDS)
    if header_index is None:
        raise HeaderNotFoundError(
            f"no header row with {', '.join(ALIPAY_HEADER_KEYWORDS)} "
            f"in the first {HEADER_LOOKAHEAD_ROWS} rows",
            filename,
        )
    _check_required(_header_labels(grid[header_index]), ALIPAY_FIELD_MAP, filename)
    return rows_to_mappings(grid, header_index)


_GRID_PARSERS: dict[SourceDialect, Callable[[Grid, str], list[RawRow]]] = {
    SourceDialect.WECHAT: _wechat_rows,
    SourceDialect.ALIPAY: _alipay_rows,
}


def parse_wechat(content: bytes, filename: str = "wechat.xlsx") -> list[RawRow]:
    """WeChat Pay export: fixed preamble, header on row 17."""
    return _wechat_rows(read_grid(content, filename), filename)


def parse_alipay(content: bytes, filename: str = "alipay.csv") -> list[RawRow]:
    """Alipay export (CSV or workbook): header located by keyword scan."""
    return _alipay_rows(read_grid(content, filename), filename)


def _looks_like_wechat(grid: Grid) -> bool:
    if find_header_row(grid, ALIPAY_HEADER_KEYWORDS) is not None:
        return False
    if len(grid) <= WECHAT_PREAMBLE_ROWS:
        return False
    labels = _header_labels(grid[WECHAT_PREAMBLE_ROWS])
    return all(WECHAT_FIELD_MAP[f] in labels for f in REQUIRED_FIELDS)


def detect_dialect(filename: str, grid: Grid | None = None) -> SourceDialect:
    """Filename hints first, then a content probe; Alipay is the fallback."""
    name = filename.lower()
    if any(hint in name for hint in WECHAT_FILENAME_HINTS):
        return SourceDialect.WECHAT
    if any(hint in name for hint in ALIPAY_FILENAME_HINTS):
        return SourceDialect.ALIPAY
    if grid is not None and _looks_like_wechat(grid):
        logger.info("%s: no filename hint, content matches the WeChat layout", filename)
        return SourceDialect.WECHAT
    return SourceDialect.ALIPAY


def parse_file(
    content: bytes,
    filename: str,
    dialect: SourceDialect | None = None,
) -> tuple[SourceDialect, list[RawRow]]:
    """Read ``content`` once, resolve the dialect, and return its raw rows."""
    grid = read_grid(content, filename)
    if dialect is None:
        dialect = detect_dialect(filename, grid)
    rows = _GRID_PARSERS[dialect](grid, filename)
    logger.debug("%s: %d raw rows as %s", filename, len(rows), dialect.value)
    return dialect, rows
