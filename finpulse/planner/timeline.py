# finpulse/planner/timeline.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from finpulse.clock import age_at
from finpulse.config import RetirementPolicy

from .metrics import compute_metrics
from .schemas import FinancialSnapshot, Goal

BENCHMARK_START_AGE = 18
BENCHMARK_END_AGE = 85
BENCHMARK_LOOKBACK_YEARS = 10


def _as_date(value: Any) -> date:
    return value.date() if isinstance(value, datetime) else value


def historical_ratios(
    snapshots: Iterable[FinancialSnapshot],
    goals: Iterable[Goal],
    current_age: float,
    today: date,
    persona: Optional[str] = None,
    policy: Optional[RetirementPolicy] = None,
) -> List[Dict[str, Any]]:
    """
    Recompute the health ratios for every past snapshot.

    The current goal list is reused for each snapshot; the age is rolled back
    by the whole years elapsed since the snapshot was taken.
    """
    goal_list = list(goals)
    series: List[Dict[str, Any]] = []
    for snap in sorted(snapshots, key=lambda s: s.snapshot_date):
        snap_date = _as_date(snap.snapshot_date)
        age = age_at(current_age, snap_date, today)
        result = compute_metrics(
            snap.snapshot_data,
            {"age": age, "persona": persona},
            goal_list,
            policy=policy,
        )
        if result is None:
            continue
        series.append(
            {
                "date": snap_date.isoformat(),
                "age": age,
                "netWorth": result.metrics.net_worth,
                "ratios": {
                    key: {"value": r.value, "status": r.status}
                    for key, r in result.metrics.health_ratios.items()
                },
            }
        )
    return series


def net_worth_benchmark(age: float, annual_income: float) -> List[Tuple[int, float]]:
    # Rule of thumb: target net worth = age * annual income / 10.
    start = max(BENCHMARK_START_AGE, int(age) - BENCHMARK_LOOKBACK_YEARS)
    return [(a, annual_income / 10 * a) for a in range(start, BENCHMARK_END_AGE + 1)]
