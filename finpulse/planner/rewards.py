# finpulse/planner/rewards.py
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Iterable, Optional, Sequence, Tuple

from .actions import ACTION_CATALOG, validate_completion
from .assumptions import PERSONAS
from .errors import ActionAlreadyActive, ActionNotInProgress, ActionNotTriggered, UnknownAction
from .schemas import UserAction, UserProfile

logger = logging.getLogger(__name__)

SIGNUP_POINTS = 70
PERSONA_QUIZ_POINTS = 30
ACTION_STAKE_POINTS = 100

SECTION_POINTS = {
    "netWorth": 250,
    "monthlyFinances": 250,
    "financialProtection": 250,
    "financialGoals": 250,
}


def has_completed(profile: UserProfile, source: str) -> bool:
    return bool(profile.points_source.get(source))


def award_points(profile: UserProfile, source: str, points: int) -> UserProfile:
    """Award points once per source; repeat awards return the profile unchanged."""
    if has_completed(profile, source):
        return profile
    logger.info("awarding %s points to %s for %s", points, profile.user_id, source)
    return profile.model_copy(
        update={
            "points": profile.points + points,
            "points_source": {**profile.points_source, source: True},
        }
    )


def award_section(profile: UserProfile, section: str) -> UserProfile:
    if section not in SECTION_POINTS:
        raise ValueError(f"Unknown reward section '{section}'")
    return award_points(profile, section, SECTION_POINTS[section])


def record_persona(profile: UserProfile, persona: str) -> UserProfile:
    if persona not in PERSONAS:
        raise ValueError(f"Unknown persona '{persona}'")
    updated = award_points(profile, "personaQuiz", PERSONA_QUIZ_POINTS)
    return updated.model_copy(update={"persona": persona})


def start_action(
    profile: UserProfile,
    action_key: str,
    target_date: date,
    triggered_keys: Sequence[str],
    existing: Iterable[UserAction] = (),
    now: Optional[datetime] = None,
) -> Tuple[UserProfile, UserAction]:
    """Stake points on a catalog action whose condition currently holds."""
    if action_key not in ACTION_CATALOG:
        raise UnknownAction(action_key)
    if action_key not in triggered_keys:
        raise ActionNotTriggered(f"Action '{action_key}' is not currently triggered")
    if any(a.action_key == action_key and a.status == "in_progress" for a in existing):
        raise ActionAlreadyActive(f"Action '{action_key}' is already in progress")

    action = UserAction(
        action_id=uuid.uuid4().hex,
        user_id=profile.user_id,
        action_key=action_key,
        target_date=target_date,
        status="in_progress",
        created_at=now,
    )
    updated = profile.model_copy(update={"locked_points": profile.locked_points + ACTION_STAKE_POINTS})
    logger.info("action %s started by %s", action_key, profile.user_id)
    return updated, action


def complete_action(
    profile: UserProfile,
    action: UserAction,
    triggered_keys: Sequence[str],
    now: datetime,
) -> Tuple[UserProfile, UserAction]:
    if action.status != "in_progress":
        raise ActionNotInProgress(f"Action '{action.action_key}' is not in progress")
    validate_completion(action.action_key, triggered_keys)

    completed = action.model_copy(update={"status": "completed", "completed_at": now})
    updated = profile.model_copy(
        update={
            "points": profile.points + ACTION_STAKE_POINTS,
            "locked_points": max(0, profile.locked_points - ACTION_STAKE_POINTS),
        }
    )
    logger.info("action %s completed by %s", action.action_key, profile.user_id)
    return updated, completed
