# finpulse/routers/advisors.py
from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends

from finpulse import clock
from finpulse.deps.repo import get_repository
from finpulse.planner.advisor import filter_clients, summarize_clients
from finpulse.planner.metrics import net_worth, resolve_age
from finpulse.store.repository import ClientRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/advisors", tags=["advisors"])


@router.get("/{advisor_id}/clients")
def advisor_clients(
    advisor_id: str,
    search: str = "",
    completion: Literal["all", "completed", "in-progress", "not-started"] = "all",
    netWorthMin: Optional[float] = None,
    netWorthMax: Optional[float] = None,
    ageMin: Optional[float] = None,
    ageMax: Optional[float] = None,
    repo: ClientRepository = Depends(get_repository),
):
    today = clock.today()
    clients = []
    net_worths = {}
    for profile in repo.list_clients(advisor_id):
        clients.append(profile.model_copy(update={"age": resolve_age(profile, today)}))
        snap = repo.latest_snapshot(profile.user_id)
        if snap is not None:
            net_worths[profile.user_id] = net_worth(snap.snapshot_data)

    summary = summarize_clients(clients, net_worths)
    rows = filter_clients(
        summary["clients"],
        search=search,
        completion_filter=completion,
        net_worth_min=netWorthMin,
        net_worth_max=netWorthMax,
        age_min=ageMin,
        age_max=ageMax,
    )
    logger.debug("advisor %s listed %d of %d clients", advisor_id, len(rows), len(summary["clients"]))
    return {"clients": rows, "stats": summary["stats"]}
