# finpulse/planner/actions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Literal, Sequence

from .errors import ActionStillTriggered
from .schemas import UserAction

Severity = Literal["high", "medium"]


@dataclass(frozen=True)
class ActionSpec:
    key: str
    title: str
    severity: Severity
    level: int


LEVELS = {
    1: {"title": "Level 1: Quick Wins", "description": "Tackle these foundational tasks first to build a solid financial base."},
    2: {"title": "Level 2: The Strategist", "description": "Focus on medium-term planning to align your strategy and protect your assets."},
    3: {"title": "Level 3: Boss Mode", "description": "Optimize your portfolio and accelerate your journey to long-term wealth."},
}
FALLBACK_LEVEL = 2

ACTION_CATALOG: Dict[str, ActionSpec] = {
    spec.key: spec
    for spec in [
        ActionSpec("savingsRatio", "Boost Your Savings Ratio", "high", 1),
        ActionSpec("liquidityRatio", "Build Your Emergency Fund", "high", 1),
        ActionSpec("debtToIncomeRatio", "Reduce High-Interest Debt", "high", 1),
        ActionSpec("protection-health", "Increase Health Insurance Coverage", "high", 1),
        ActionSpec("goals-short", "Fund Your Short-Term Goals", "high", 1),
        ActionSpec("leverageRatio", "Manage Your Debt Levels", "medium", 2),
        ActionSpec("protection-life", "Review Your Life Insurance", "medium", 2),
        ActionSpec("protection-car", "Insure Your Car", "medium", 2),
        ActionSpec("protection-property", "Insure Your Property", "medium", 2),
        ActionSpec("goals-medium", "Plan for Medium-Term Goals", "medium", 2),
        ActionSpec("asset-allocation-persona-aggressive", "Align Investments to Your Persona", "medium", 2),
        ActionSpec("asset-allocation-persona-conservative", "Align Investments to Your Persona", "medium", 2),
        ActionSpec("asset-allocation-age-aggressive", "Review Your Portfolio Risk", "medium", 2),
        ActionSpec("asset-allocation-age-conservative", "Review Your Portfolio for Growth", "medium", 2),
        ActionSpec("financialAssetRatio", "Grow Your Financial Assets", "medium", 3),
        ActionSpec("wealthRatio", "Increase Your Net Worth", "medium", 3),
        ActionSpec("goals-overall", "Align Investments with Goals", "medium", 3),
        ActionSpec("goals-long", "Boost Long-Term Goal Savings", "medium", 3),
        ActionSpec("retirement", "Accelerate Retirement Savings", "high", 3),
    ]
}


def action_level(key: str) -> int:
    spec = ACTION_CATALOG.get(key)
    return spec.level if spec else FALLBACK_LEVEL


def action_title(key: str) -> str:
    spec = ACTION_CATALOG.get(key)
    return spec.title if spec else "Action"


def _action_card(key: str) -> Dict[str, Any]:
    spec = ACTION_CATALOG.get(key)
    return {
        "key": key,
        "title": action_title(key),
        "severity": spec.severity if spec else "medium",
        "level": action_level(key),
    }


def build_action_plan(triggered_keys: Sequence[str], user_actions: Iterable[UserAction]) -> Dict[str, Any]:
    """
    Split triggered keys into in-progress and to-do work.

    To-do keys are grouped by level; within a level they keep the engine's
    priority order.
    """
    in_progress = [a for a in user_actions if a.status == "in_progress"]
    in_progress_keys = {a.action_key for a in in_progress}
    todo_keys = [k for k in triggered_keys if k not in in_progress_keys]

    levels: List[Dict[str, Any]] = []
    for level, info in LEVELS.items():
        cards = [_action_card(k) for k in todo_keys if action_level(k) == level]
        if cards:
            levels.append({"level": level, **info, "actions": cards})

    return {
        "actionKeys": list(triggered_keys),
        "todoActionKeys": todo_keys,
        "inProgress": [
            {
                "actionId": a.action_id,
                "key": a.action_key,
                "title": action_title(a.action_key),
                "targetDate": a.target_date.isoformat(),
                "stillTriggered": a.action_key in triggered_keys,
            }
            for a in in_progress
        ],
        "levels": levels,
        "allClear": len(triggered_keys) == 0,
    }


def validate_completion(action_key: str, triggered_keys: Sequence[str]) -> None:
    if action_key in triggered_keys:
        raise ActionStillTriggered(
            f"Action '{action_key}' is still triggered; update your data and try again."
        )
