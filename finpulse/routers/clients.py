# finpulse/routers/clients.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException

from finpulse import clock
from finpulse.config import RetirementPolicy
from finpulse.deps.repo import get_policy, get_repository
from finpulse.planner.actions import build_action_plan
from finpulse.planner.breakdown import allocation_analytics, expense_breakdown
from finpulse.planner.errors import (
    ActionAlreadyActive,
    ActionNotInProgress,
    ActionNotTriggered,
    ActionStillTriggered,
    UnknownAction,
    UnknownUser,
)
from finpulse.planner.metrics import MetricsResult, compute_metrics, resolve_age
from finpulse.planner.persona import score_persona
from finpulse.planner.projections import sip_future_value, step_up_simulation
from finpulse.planner.rewards import (
    SIGNUP_POINTS,
    award_points,
    award_section,
    complete_action,
    record_persona,
    start_action,
)
from finpulse.planner.schemas import FinancialSnapshot, Financials, Goal, UserProfile
from finpulse.planner.timeline import historical_ratios, net_worth_benchmark
from finpulse.store.repository import ClientRepository
from models import GoalIn, PersonaAnswersIn, ProfileIn, SnapshotIn, StartActionIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["clients"])


def _profile_or_404(repo: ClientRepository, user_id: str) -> UserProfile:
    try:
        return repo.get_profile(user_id)
    except UnknownUser:
        raise HTTPException(status_code=404, detail="User not found")


def _current_financials(repo: ClientRepository, user_id: str) -> Financials:
    snap = repo.latest_snapshot(user_id)
    return snap.snapshot_data if snap else Financials()


def _evaluate(
    repo: ClientRepository, profile: UserProfile, policy: RetirementPolicy
) -> Tuple[MetricsResult, Financials]:
    financials = _current_financials(repo, profile.user_id)
    age = resolve_age(profile, clock.today())
    result = compute_metrics(
        financials,
        {"age": age, "persona": profile.persona},
        repo.list_goals(profile.user_id),
        policy=policy,
    )
    if result is None:
        raise HTTPException(status_code=409, detail="Age is required to compute metrics")
    return result, financials


# ---------- Profile ----------

@router.put("/{user_id}")
def upsert_profile(user_id: str, body: ProfileIn, repo: ClientRepository = Depends(get_repository)):
    fields = {
        "name": body.name,
        "phone_number": body.phoneNumber,
        "age": body.age,
        "date_of_birth": body.dateOfBirth,
        "role": body.role,
        "advisor_id": body.advisorId,
        "advisor_code": body.advisorCode,
    }

    def _upsert(existing: Optional[UserProfile]) -> UserProfile:
        if existing is not None:
            return existing.model_copy(update=fields)
        created = UserProfile(user_id=user_id, created_at=clock.now(), **fields)
        logger.info("profile created for %s", user_id)
        return award_points(created, "signup", SIGNUP_POINTS)

    profile = repo.update_profile(user_id, _upsert, create=True)
    return profile.model_dump(mode="json")


@router.get("/{user_id}")
def get_profile(user_id: str, repo: ClientRepository = Depends(get_repository)):
    return _profile_or_404(repo, user_id).model_dump(mode="json")


# ---------- Metrics ----------

@router.get("/{user_id}/metrics")
def get_metrics(
    user_id: str,
    repo: ClientRepository = Depends(get_repository),
    policy: RetirementPolicy = Depends(get_policy),
):
    profile = _profile_or_404(repo, user_id)
    result, financials = _evaluate(repo, profile, policy)
    out = result.to_dict()
    out["expenseBreakdown"] = expense_breakdown(financials.expenses)
    out["allocation"] = allocation_analytics(financials.assets)
    return out


@router.get("/{user_id}/plan")
def get_plan(
    user_id: str,
    repo: ClientRepository = Depends(get_repository),
    policy: RetirementPolicy = Depends(get_policy),
):
    profile = _profile_or_404(repo, user_id)
    result, _ = _evaluate(repo, profile, policy)
    return build_action_plan(result.triggered_action_keys, repo.list_actions(user_id))


@router.get("/{user_id}/timeline")
def get_timeline(
    user_id: str,
    repo: ClientRepository = Depends(get_repository),
    policy: RetirementPolicy = Depends(get_policy),
):
    profile = _profile_or_404(repo, user_id)
    today = clock.today()
    age = resolve_age(profile, today)
    if age is None:
        raise HTTPException(status_code=409, detail="Age is required to compute metrics")

    result, _ = _evaluate(repo, profile, policy)
    history = historical_ratios(
        repo.snapshot_history(user_id),
        repo.list_goals(user_id),
        age,
        today,
        persona=profile.persona,
        policy=policy,
    )
    benchmark = net_worth_benchmark(age, result.metrics.cashflow.annual_income)
    return {
        "history": history,
        "benchmark": [{"age": a, "netWorth": v} for a, v in benchmark],
    }


@router.get("/{user_id}/projections")
def get_projections(
    user_id: str,
    rate: float = 12.0,
    years: int = 10,
    stepUp: float = 10.0,
    monthly: Optional[float] = None,
    repo: ClientRepository = Depends(get_repository),
    policy: RetirementPolicy = Depends(get_policy),
):
    """SIP and step-up projections, seeded from current monthly savings unless `monthly` is given."""
    profile = _profile_or_404(repo, user_id)
    if monthly is None:
        result, _ = _evaluate(repo, profile, policy)
        monthly = max(0.0, result.metrics.cashflow.monthly_savings)
    try:
        sip = sip_future_value(monthly, rate, years)
        step_up = step_up_simulation(monthly, years, rate, step_up_pct=stepUp)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"monthlyInvestment": monthly, "sip": sip, "stepUp": step_up}


# ---------- Data entry ----------

@router.post("/{user_id}/snapshots")
def add_snapshot(user_id: str, body: SnapshotIn, repo: ClientRepository = Depends(get_repository)):
    _profile_or_404(repo, user_id)
    snap = FinancialSnapshot(
        snapshot_id=uuid4().hex,
        user_id=user_id,
        snapshot_date=clock.localize(body.snapshotDate) if body.snapshotDate else clock.now(),
        snapshot_data=body.financials,
    )
    repo.add_snapshot(snap)
    return {"snapshotId": snap.snapshot_id, "snapshotDate": snap.snapshot_date.isoformat()}


@router.post("/{user_id}/goals")
def add_goal(user_id: str, body: GoalIn, repo: ClientRepository = Depends(get_repository)):
    _profile_or_404(repo, user_id)
    goal = Goal(
        id=body.id or uuid4().hex,
        name=body.name,
        target_age=body.targetAge,
        target_value=body.targetValue,
    )
    repo.add_goal(user_id, goal)
    return goal.model_dump()


@router.delete("/{user_id}/goals/{goal_id}")
def remove_goal(user_id: str, goal_id: str, repo: ClientRepository = Depends(get_repository)):
    _profile_or_404(repo, user_id)
    if not repo.remove_goal(user_id, goal_id):
        raise HTTPException(status_code=404, detail="Goal not found")
    return {"ok": True}


# ---------- Gamification ----------

@router.post("/{user_id}/persona")
def submit_persona(user_id: str, body: PersonaAnswersIn, repo: ClientRepository = Depends(get_repository)):
    _profile_or_404(repo, user_id)
    try:
        persona = score_persona(body.answers)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    profile = repo.update_profile(user_id, lambda p: record_persona(p, persona))
    logger.info("persona %s recorded for %s", persona, user_id)
    return {"persona": persona, "points": profile.points}


@router.post("/{user_id}/rewards/{source}")
def claim_reward(user_id: str, source: str, repo: ClientRepository = Depends(get_repository)):
    _profile_or_404(repo, user_id)
    try:
        profile = repo.update_profile(user_id, lambda p: award_section(p, source))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"points": profile.points, "pointsSource": profile.points_source}


@router.post("/{user_id}/actions")
def begin_action(
    user_id: str,
    body: StartActionIn,
    repo: ClientRepository = Depends(get_repository),
    policy: RetirementPolicy = Depends(get_policy),
):
    profile = _profile_or_404(repo, user_id)
    result, _ = _evaluate(repo, profile, policy)
    started = []

    def _start(current: UserProfile) -> UserProfile:
        updated, action = start_action(
            current,
            body.actionKey,
            body.targetDate,
            result.triggered_action_keys,
            repo.list_actions(user_id),
            now=clock.now(),
        )
        repo.put_action(action)
        started.append(action)
        return updated

    try:
        profile = repo.update_profile(user_id, _start)
    except UnknownAction:
        raise HTTPException(status_code=404, detail=f"Unknown action '{body.actionKey}'")
    except (ActionAlreadyActive, ActionNotTriggered) as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"action": started[0].model_dump(mode="json"), "lockedPoints": profile.locked_points}


def _find_action(repo: ClientRepository, user_id: str, action_id: str):
    for a in repo.list_actions(user_id):
        if a.action_id == action_id:
            return a
    raise UnknownAction(action_id)


@router.post("/{user_id}/actions/{action_id}/complete")
def finish_action(
    user_id: str,
    action_id: str,
    repo: ClientRepository = Depends(get_repository),
    policy: RetirementPolicy = Depends(get_policy),
) -> Dict[str, Any]:
    profile = _profile_or_404(repo, user_id)
    try:
        _find_action(repo, user_id, action_id)
    except UnknownAction:
        raise HTTPException(status_code=404, detail="Action not found")

    # Completion is judged against freshly recomputed metrics.
    result, _ = _evaluate(repo, profile, policy)
    finished = []

    def _complete(current: UserProfile) -> UserProfile:
        # Re-read under the lock so a concurrent completion is seen.
        action = _find_action(repo, user_id, action_id)
        updated, done = complete_action(current, action, result.triggered_action_keys, clock.now())
        repo.put_action(done)
        finished.append(done)
        return updated

    try:
        profile = repo.update_profile(user_id, _complete)
    except (ActionStillTriggered, ActionNotInProgress) as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"action": finished[0].model_dump(mode="json"), "points": profile.points}
