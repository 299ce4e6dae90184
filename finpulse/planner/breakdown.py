# finpulse/planner/breakdown.py
from __future__ import annotations

import re
from typing import Any, Dict, List

from .assumptions import (
    ASSETS_BY_HORIZON,
    DEBT_ASSET_FIELDS,
    EQUITY_ASSET_FIELDS,
    INVESTABLE_ASSET_FIELDS,
    INVESTMENT_LABELS,
)
from .normalize import monthly_equivalent, sum_fields
from .schemas import Assets, Expenses

_CAMEL_RE = re.compile(r"([A-Z])")


def humanize_key(key: str) -> str:
    # "societyMaintenance" -> "Society Maintenance"
    spaced = _CAMEL_RE.sub(r" \1", key)
    return spaced[:1].upper() + spaced[1:]


def _share(value: float, total: float) -> float:
    return value / total * 100 if total > 0 else 0.0


def expense_breakdown(expenses: Expenses) -> List[Dict[str, Any]]:
    rows = [
        {"key": key, "label": humanize_key(key), "value": monthly_equivalent(getattr(expenses, key))}
        for key in type(expenses).model_fields
    ]
    total = sum(r["value"] for r in rows)
    if total <= 0:
        return []
    out = [{**r, "percentage": _share(r["value"], total)} for r in rows if r["value"] > 0]
    # sorted() is stable, so ties keep declaration order.
    return sorted(out, key=lambda r: r["value"], reverse=True)


def _split(assets: Assets, left: List[str], right: List[str], left_name: str, right_name: str) -> Dict[str, Any]:
    left_value = sum_fields(assets, left)
    right_value = sum_fields(assets, right)
    total = left_value + right_value
    return {
        left_name: {"value": left_value, "percentage": _share(left_value, total)},
        right_name: {"value": right_value, "percentage": _share(right_value, total)},
    }


def allocation_analytics(assets: Assets) -> Dict[str, Any]:
    total = sum_fields(assets, INVESTABLE_ASSET_FIELDS)
    allocations = [
        {
            "key": key,
            "label": INVESTMENT_LABELS[key],
            "value": getattr(assets, key),
            "percentage": _share(getattr(assets, key), total),
        }
        for key in INVESTABLE_ASSET_FIELDS
        if getattr(assets, key) > 0
    ]
    allocations.sort(key=lambda a: a["value"], reverse=True)

    horizons = {
        name: {
            "value": sum_fields(assets, keys),
            "percentage": _share(sum_fields(assets, keys), total),
        }
        for name, keys in (
            ("longTerm", ASSETS_BY_HORIZON["long"]),
            ("mediumTerm", ASSETS_BY_HORIZON["medium"]),
            ("shortTerm", ASSETS_BY_HORIZON["short"]),
        )
    }

    return {
        "total": total,
        "allocations": allocations,
        "analytics": {
            "equityVsDebt": _split(assets, EQUITY_ASSET_FIELDS, DEBT_ASSET_FIELDS, "equity", "debt"),
            "horizon": horizons,
            "growthVsSavings": _split(assets, EQUITY_ASSET_FIELDS, DEBT_ASSET_FIELDS, "growth", "savings"),
        },
    }
