import math
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

import pandas as pd

NAN = Decimal("NaN")

_AMOUNT_JUNK = re.compile(r"[^0-9.\-]")


def normalize_text(s: str) -> str:
    if s is None:
        return ""
    return re.sub(r"\s+", " ", str(s)).strip().lower()


def normalize_amount(raw) -> Decimal:
    """
    Strips everything except digits, '.' and '-' and parses what is left.
    Returns Decimal('NaN') instead of raising; NaN never equals anything.
    """
    if raw is None:
        return NAN
    if isinstance(raw, float) and math.isnan(raw):
        return NAN
    cleaned = _AMOUNT_JUNK.sub("", str(raw))
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return NAN


def normalize_date(raw) -> Optional[date]:
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        ts = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts.date()


def day_distance(a: Optional[date], b: Optional[date]) -> float:
    if a is None or b is None:
        return math.inf
    return abs((a - b).days)


def amounts_within(a: Decimal, b: Decimal, tolerance: Decimal) -> bool:
    if a.is_nan() or b.is_nan():
        return False
    return abs(a - b) <= tolerance


def as_decimal(value) -> Decimal:
    # str() first so 0.01 stays 0.01 instead of its binary expansion
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
