"""
ExcelWriter — sheet-level building blocks for the bill report workbook.
"""
from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Iterable, Mapping, NamedTuple, Optional, Sequence

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from billsight.excel.formatters import (
    SUMMABLE_KINDS,
    KpiCard,
    fit_columns,
    style_header_cells,
    write_cell,
    write_kpi_card,
)
from billsight.excel.styles import SECTION_FONT, SUBTITLE_FONT, TITLE_FONT


class Column(NamedTuple):
    key: str      # record key
    kind: str     # text | currency | number | percent | date | datetime
    label: str    # header text


Record = Mapping[str, object]


class ExcelWriter:
    """Builds one workbook sheet by sheet; every ``write_*`` returns the next free row."""

    def __init__(self) -> None:
        self.wb = Workbook()
        self._default_sheet: Optional[Worksheet] = self.wb.active

    def add_sheet(self, title: str) -> Worksheet:
        if self._default_sheet is not None:
            ws, self._default_sheet = self._default_sheet, None
            ws.title = title
            return ws
        return self.wb.create_sheet(title=title)

    def write_title(self, ws: Worksheet, title: str, subtitle: str, span: int = 8) -> int:
        for row, text, font in ((1, title, TITLE_FONT), (2, subtitle, SUBTITLE_FONT)):
            ws.cell(row=row, column=1, value=text).font = font
            ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=span)
        for col in range(1, span + 1):
            ws.column_dimensions[get_column_letter(col)].width = 18
        return 4

    def write_section(self, ws: Worksheet, row: int, title: str) -> int:
        ws.cell(row=row, column=1, value=title).font = SECTION_FONT
        return row + 2

    def write_kpi_row(self, ws: Worksheet, row: int, cards: Sequence[KpiCard], spacing: int = 2) -> int:
        for i, card in enumerate(cards):
            write_kpi_card(ws, row, 1 + i * spacing, card)
        return row + 3

    def write_table(
        self,
        ws: Worksheet,
        start_row: int,
        columns: Sequence[Column],
        records: Iterable[Record],
        *,
        direction: Optional[Callable[[Record], Optional[str]]] = None,
        total_label: Optional[str] = None,
        freeze: bool = True,
    ) -> int:
        """Header row, one row per record, and a totals row when ``total_label`` is given.

        ``direction(record)`` picks the row tint ("income"/"expense") or None.
        """
        for col, column in enumerate(columns, 1):
            ws.cell(row=start_row, column=col, value=column.label)
        style_header_cells(ws, start_row, len(columns))

        row = start_row + 1
        written: list[Record] = []
        for record in records:
            tint = direction(record) if direction else None
            for col, column in enumerate(columns, 1):
                write_cell(ws, row, col, record.get(column.key), column.kind, direction=tint)
            written.append(record)
            row += 1

        if total_label and written:
            write_cell(ws, row, 1, total_label, total=True)
            for col, column in enumerate(columns[1:], 2):
                if column.kind in SUMMABLE_KINDS:
                    value = sum(r.get(column.key) or 0 for r in written)
                    write_cell(ws, row, col, value, column.kind, total=True)
                else:
                    write_cell(ws, row, col, "", total=True)
            row += 1

        fit_columns(ws)
        if freeze:
            ws.freeze_panes = f"A{start_row + 1}"
        return row

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.wb.save(buffer)
        return buffer.getvalue()
