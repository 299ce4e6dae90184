# finpulse/planner/advisor.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional

from .rewards import SECTION_POINTS, has_completed
from .schemas import UserProfile

CompletionFilter = Literal["all", "completed", "in-progress", "not-started"]


def completion(profile: UserProfile) -> int:
    done = sum(1 for section in SECTION_POINTS if has_completed(profile, section))
    return round(done / len(SECTION_POINTS) * 100)


def summarize_clients(
    clients: Iterable[UserProfile],
    net_worths: Optional[Mapping[str, float]] = None,
) -> Dict[str, Any]:
    net_worths = net_worths or {}
    rows: List[Dict[str, Any]] = []
    stats = {
        "total_clients": 0,
        "net_worth_calculated": 0,
        "cashflow_added": 0,
        "planning_completed": 0,
    }
    for client in clients:
        pct = completion(client)
        rows.append(
            {
                "user_id": client.user_id,
                "name": client.name,
                "phone_number": client.phone_number,
                "age": client.age,
                "persona": client.persona,
                "completion": pct,
                "net_worth": net_worths.get(client.user_id, 0.0),
            }
        )
        stats["total_clients"] += 1
        if has_completed(client, "netWorth"):
            stats["net_worth_calculated"] += 1
        if has_completed(client, "monthlyFinances"):
            stats["cashflow_added"] += 1
        if pct == 100:
            stats["planning_completed"] += 1
    return {"clients": rows, "stats": stats}


def _matches_completion(pct: int, wanted: str) -> bool:
    if wanted == "completed":
        return pct == 100
    if wanted == "in-progress":
        return 0 < pct < 100
    if wanted == "not-started":
        return pct == 0
    return True


def _in_range(value: Optional[float], lo: Optional[float], hi: Optional[float]) -> bool:
    if lo is None and hi is None:
        return True
    if value is None:
        return False
    if lo is not None and value < lo:
        return False
    if hi is not None and value > hi:
        return False
    return True


def filter_clients(
    rows: Iterable[Dict[str, Any]],
    search: str = "",
    completion_filter: CompletionFilter = "all",
    net_worth_min: Optional[float] = None,
    net_worth_max: Optional[float] = None,
    age_min: Optional[float] = None,
    age_max: Optional[float] = None,
) -> List[Dict[str, Any]]:
    needle = (search or "").strip().lower()
    out: List[Dict[str, Any]] = []
    for row in rows:
        if needle and needle not in (row.get("name") or "").lower() and needle not in (row.get("phone_number") or ""):
            continue
        if not _matches_completion(row.get("completion", 0), completion_filter):
            continue
        if not _in_range(row.get("net_worth"), net_worth_min, net_worth_max):
            continue
        if not _in_range(row.get("age"), age_min, age_max):
            continue
        out.append(row)
    return out
