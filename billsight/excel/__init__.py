"""Workbook building: styles, cell formatters, and the ExcelWriter builder."""
from .formatters import KpiCard
from .writer import Column, ExcelWriter

__all__ = ["Column", "ExcelWriter", "KpiCard"]
