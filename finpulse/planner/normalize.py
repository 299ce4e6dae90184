# finpulse/planner/normalize.py
from __future__ import annotations

import math
from typing import Any, Iterable, Optional, Tuple


def _safe_float(v: Any) -> float:
    """Coerce anything a client may have stored into a finite float, else 0."""
    if v is None or isinstance(v, bool):
        return 0.0
    if isinstance(v, str) and v.strip() == "":
        return 0.0
    try:
        out = float(v)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(out) or math.isinf(out):
        return 0.0
    return out


def _item_parts(item: Any) -> Tuple[float, Optional[str]]:
    if item is None:
        return 0.0, None
    if isinstance(item, dict):
        return _safe_float(item.get("value")), item.get("frequency")
    return _safe_float(getattr(item, "value", None)), getattr(item, "frequency", None)


def monthly_equivalent(item: Any) -> float:
    value, frequency = _item_parts(item)
    if frequency == "annual":
        return value / 12.0
    return value


def annual_equivalent(item: Any) -> float:
    value, frequency = _item_parts(item)
    if frequency == "annual":
        return value
    return value * 12.0


def sum_fields(record: Any, keys: Iterable[str]) -> float:
    """Sum named numeric fields of a model or mapping; absent fields count as 0."""
    if record is None:
        return 0.0
    if isinstance(record, dict):
        return sum(_safe_float(record.get(k)) for k in keys)
    return sum(_safe_float(getattr(record, k, None)) for k in keys)


def split_by_frequency(items: Iterable[Any]) -> Tuple[float, float]:
    """Raw (not normalized) totals of monthly-entered and annual-entered items."""
    monthly_only = 0.0
    annual_only = 0.0
    for item in items:
        value, frequency = _item_parts(item)
        if frequency == "annual":
            annual_only += value
        else:
            monthly_only += value
    return monthly_only, annual_only
