"""
Cell-level formatting: number formats, header/data/total cells, KPI cards, column widths.
"""
from __future__ import annotations

from typing import NamedTuple

from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from billsight.config import CURRENCY_SYMBOL
from billsight.excel.styles import (
    CELL_BORDER,
    CENTER,
    DATA_FONT,
    DIRECTION_FONTS,
    HEADER_BORDER,
    HEADER_FILL,
    HEADER_FONT,
    KPI_LABEL_FONT,
    KPI_VALUE_FONT,
    LEFT,
    RIGHT,
    STRIPE_FILL,
    TOTAL_BORDER,
    TOTAL_FILL,
    TOTAL_FONT,
)

# Column kinds → Excel number formats; "percent" values are already 0-100
NUMBER_FORMATS = {
    "currency": f'"{CURRENCY_SYMBOL}"#,##0.00',
    "percent": '0.0"%"',
    "number": "#,##0",
    "datetime": "yyyy-mm-dd hh:mm:ss",
    "date": "yyyy-mm-dd",
}
NUMERIC_KINDS = ("currency", "number", "percent")
SUMMABLE_KINDS = ("currency", "number")


class KpiCard(NamedTuple):
    label: str
    value: float | int
    kind: str = "currency"


def style_header_cells(ws: Worksheet, row: int, width: int) -> None:
    for col in range(1, width + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER
        cell.border = HEADER_BORDER


def write_cell(
    ws: Worksheet,
    row: int,
    col: int,
    value,
    kind: str = "text",
    *,
    total: bool = False,
    direction: str | None = None,
) -> None:
    """Write one table cell; even rows are striped, ``direction`` tints income/expense rows."""
    cell = ws.cell(row=row, column=col, value=value)
    cell.alignment = RIGHT if kind in NUMERIC_KINDS else LEFT
    if kind in NUMBER_FORMATS:
        cell.number_format = NUMBER_FORMATS[kind]

    if total:
        cell.font, cell.border, cell.fill = TOTAL_FONT, TOTAL_BORDER, TOTAL_FILL
        return
    cell.font = DIRECTION_FONTS.get(direction, DATA_FONT)
    cell.border = CELL_BORDER
    if row % 2 == 0:
        cell.fill = STRIPE_FILL


def write_kpi_card(ws: Worksheet, row: int, col: int, card: KpiCard) -> None:
    """Big value with its caption underneath."""
    value = ws.cell(row=row, column=col, value=card.value)
    value.font = KPI_VALUE_FONT
    value.alignment = CENTER
    if card.kind in NUMBER_FORMATS:
        value.number_format = NUMBER_FORMATS[card.kind]

    caption = ws.cell(row=row + 1, column=col, value=card.label)
    caption.font = KPI_LABEL_FONT
    caption.alignment = CENTER


def display_width(text: str) -> int:
    # CJK glyphs render about two Latin characters wide
    return sum(2 if ord(ch) > 0x2E80 else 1 for ch in text)


def fit_columns(ws: Worksheet, min_width: int = 10, max_width: int = 50) -> None:
    for column in ws.columns:
        widest = max((display_width(str(c.value)) for c in column if c.value is not None), default=0)
        ws.column_dimensions[get_column_letter(column[0].column)].width = min(max(widest + 2, min_width), max_width)
