# finpulse/planner/projections.py
from __future__ import annotations

from typing import Any, Dict, List


def _check_non_negative(**values: float) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValueError(f"{name} must be non-negative")


def sip_future_value(monthly_investment: float, annual_rate_pct: float, years: int) -> Dict[str, Any]:
    """
    Year-by-year value of a fixed monthly SIP.
    FV = P * ((1+r)^n - 1) / r, with r the monthly rate and n months.
    """
    _check_non_negative(monthly_investment=monthly_investment, annual_rate_pct=annual_rate_pct, years=years)
    r = annual_rate_pct / 100 / 12
    points: List[Dict[str, float]] = []
    for year in range(1, int(years) + 1):
        n = year * 12
        invested = monthly_investment * n
        if r == 0:
            fv = invested
        else:
            fv = monthly_investment * ((1 + r) ** n - 1) / r
        points.append({"year": year, "totalValue": fv, "totalInvested": invested})

    final = points[-1] if points else {"totalValue": 0.0, "totalInvested": 0.0}
    return {
        "futureValue": final["totalValue"],
        "totalInvested": final["totalInvested"],
        "totalGains": final["totalValue"] - final["totalInvested"],
        "points": points,
    }


def step_up_simulation(
    monthly_investment: float,
    years: int,
    annual_rate_pct: float,
    step_up_pct: float = 0.0,
    step_up_enabled: bool = True,
) -> Dict[str, Any]:
    _check_non_negative(
        monthly_investment=monthly_investment,
        years=years,
        annual_rate_pct=annual_rate_pct,
        step_up_pct=step_up_pct,
    )
    r = annual_rate_pct / 100 / 12
    corpus = 0.0
    invested = 0.0
    contribution = monthly_investment
    points: List[Dict[str, float]] = []
    for year in range(1, int(years) + 1):
        for _ in range(12):
            corpus = (corpus + contribution) * (1 + r)
            invested += contribution
        points.append({"year": year, "value": corpus})
        if step_up_enabled:
            contribution = contribution * (1 + step_up_pct / 100)

    return {"totalCorpus": corpus, "totalInvested": invested, "points": points}
