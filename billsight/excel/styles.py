"""
Workbook palette and the fonts, fills, borders and alignments built from it.
"""
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

# ---------------------------------------------------------------------------
# Palette (slate neutrals, green/red for money direction)
# ---------------------------------------------------------------------------
INK = "0F172A"
INK_SOFT = "334155"
MUTED = "64748B"
ROW_STRIPE = "F1F5F9"
RULE = "CBD5E1"
RULE_STRONG = "94A3B8"
TOTAL_BG = "E2E8F0"
PAPER = "FFFFFF"
INCOME_GREEN = "15803D"
EXPENSE_RED = "B91C1C"

FONT_NAME = "Calibri"


def _font(size: int, color: str = INK, **kw) -> Font:
    return Font(name=FONT_NAME, size=size, color=color, **kw)


def _solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _box(color: str, top: str = "thin", bottom: str = "thin") -> Border:
    side = Side(style="thin", color=color)
    return Border(left=side, right=side, top=Side(style=top, color=color), bottom=Side(style=bottom, color=color))


# Fonts
TITLE_FONT = _font(20, bold=True)
SUBTITLE_FONT = _font(11, MUTED, italic=True)
SECTION_FONT = _font(14, INK_SOFT, bold=True)
HEADER_FONT = _font(11, PAPER, bold=True)
DATA_FONT = _font(10)
TOTAL_FONT = _font(10, bold=True)
KPI_VALUE_FONT = _font(22, bold=True)
KPI_LABEL_FONT = _font(10, MUTED)

# Row fonts keyed by transaction direction
DIRECTION_FONTS = {
    "income": _font(10, INCOME_GREEN),
    "expense": _font(10, EXPENSE_RED),
}

# Fills
HEADER_FILL = _solid(INK)
STRIPE_FILL = _solid(ROW_STRIPE)
TOTAL_FILL = _solid(TOTAL_BG)

# Borders
CELL_BORDER = _box(RULE)
HEADER_BORDER = _box(INK, bottom="medium")
TOTAL_BORDER = _box(RULE_STRONG, top="medium", bottom="medium")

# Alignments
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")
