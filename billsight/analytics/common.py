"""
Safe math and JSON helpers used across analytics modules.
"""
from __future__ import annotations

import dataclasses
import datetime as dt
import math
from decimal import Decimal
from enum import Enum
from typing import Sequence

import numpy as np
import pandas as pd

from billsight.data.schemas import Transaction

FRAME_COLUMNS = [
    "id", "transaction_time", "category", "counterparty", "description",
    "type", "amount", "payment_method", "source",
]


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero or NaN."""
    if denominator == 0 or pd.isna(denominator):
        return default
    result = numerator / denominator
    return default if pd.isna(result) else result


def pct_of_total(part: float, total: float) -> float:
    """Percentage of total."""
    return safe_divide(part, total) * 100


def to_frame(transactions: Sequence[Transaction]) -> pd.DataFrame:
    """Transactions → DataFrame with float amounts and string enum values."""
    if not transactions:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    df = pd.DataFrame([
        {
            "id": t.id,
            "transaction_time": t.transaction_time,
            "category": t.category,
            "counterparty": t.counterparty,
            "description": t.description,
            "type": t.type.value,
            "amount": float(t.amount),
            "payment_method": t.payment_method,
            "source": t.source.value,
        }
        for t in transactions
    ], columns=FRAME_COLUMNS)
    df["transaction_time"] = pd.to_datetime(df["transaction_time"])
    return df


def sanitize_for_json(obj):
    """Recursively convert dataclasses, numpy/pandas and Decimal values to JSON-safe Python."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: sanitize_for_json(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, dict):
        return {str(k): sanitize_for_json(v) for k, v in obj.items() if k is not None}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, (dt.datetime, dt.date)):
        return obj.isoformat()
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        obj = float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    return obj
