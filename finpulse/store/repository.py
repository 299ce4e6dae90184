# finpulse/store/repository.py
from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from finpulse.planner.errors import UnknownUser
from finpulse.planner.schemas import FinancialSnapshot, Goal, UserAction, UserProfile

logger = logging.getLogger(__name__)


class ClientRepository(ABC):
    @abstractmethod
    def get_profile(self, user_id: str) -> UserProfile:
        ...

    @abstractmethod
    def put_profile(self, profile: UserProfile) -> None:
        ...

    @abstractmethod
    def update_profile(
        self,
        user_id: str,
        fn: Callable[[Optional[UserProfile]], UserProfile],
        create: bool = False,
    ) -> UserProfile:
        """
        Read-modify-write a profile atomically and return the stored result.

        `fn` receives the current profile (None only when `create` is set and
        the user is new). It may call other methods of the same repository.
        """

    @abstractmethod
    def list_clients(self, advisor_id: str) -> List[UserProfile]:
        ...

    @abstractmethod
    def latest_snapshot(self, user_id: str) -> Optional[FinancialSnapshot]:
        ...

    @abstractmethod
    def snapshot_history(self, user_id: str) -> List[FinancialSnapshot]:
        ...

    @abstractmethod
    def add_snapshot(self, snapshot: FinancialSnapshot) -> None:
        ...

    @abstractmethod
    def list_goals(self, user_id: str) -> List[Goal]:
        ...

    @abstractmethod
    def add_goal(self, user_id: str, goal: Goal) -> None:
        ...

    @abstractmethod
    def remove_goal(self, user_id: str, goal_id: str) -> bool:
        ...

    @abstractmethod
    def list_actions(self, user_id: str) -> List[UserAction]:
        ...

    @abstractmethod
    def put_action(self, action: UserAction) -> None:
        ...


class InMemoryClientRepository(ClientRepository):
    """Process-local store. Every method takes the same reentrant lock; records are immutable."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._profiles: Dict[str, UserProfile] = {}
        self._snapshots: Dict[str, List[FinancialSnapshot]] = {}
        self._goals: Dict[str, Dict[str, Goal]] = {}
        self._actions: Dict[str, Dict[str, UserAction]] = {}

    def _require(self, user_id: str) -> None:
        if user_id not in self._profiles:
            logger.warning("unknown user %s", user_id)
            raise UnknownUser(user_id)

    def get_profile(self, user_id: str) -> UserProfile:
        with self._lock:
            self._require(user_id)
            return self._profiles[user_id]

    def put_profile(self, profile: UserProfile) -> None:
        with self._lock:
            self._profiles[profile.user_id] = profile

    def update_profile(
        self,
        user_id: str,
        fn: Callable[[Optional[UserProfile]], UserProfile],
        create: bool = False,
    ) -> UserProfile:
        with self._lock:
            current = self._profiles.get(user_id)
            if current is None and not create:
                self._require(user_id)
            updated = fn(current)
            self._profiles[user_id] = updated
            return updated

    def list_clients(self, advisor_id: str) -> List[UserProfile]:
        with self._lock:
            return [
                p for p in self._profiles.values()
                if p.advisor_id == advisor_id and p.role == "Individual"
            ]

    def latest_snapshot(self, user_id: str) -> Optional[FinancialSnapshot]:
        with self._lock:
            self._require(user_id)
            history = self._snapshots.get(user_id) or []
            if not history:
                return None
            return max(history, key=lambda s: s.snapshot_date)

    def snapshot_history(self, user_id: str) -> List[FinancialSnapshot]:
        with self._lock:
            self._require(user_id)
            return sorted(self._snapshots.get(user_id, []), key=lambda s: s.snapshot_date)

    def add_snapshot(self, snapshot: FinancialSnapshot) -> None:
        with self._lock:
            self._require(snapshot.user_id)
            self._snapshots.setdefault(snapshot.user_id, []).append(snapshot)
        logger.info("snapshot %s saved for %s", snapshot.snapshot_id, snapshot.user_id)

    def list_goals(self, user_id: str) -> List[Goal]:
        with self._lock:
            self._require(user_id)
            return list(self._goals.get(user_id, {}).values())

    def add_goal(self, user_id: str, goal: Goal) -> None:
        with self._lock:
            self._require(user_id)
            self._goals.setdefault(user_id, {})[goal.id] = goal
        logger.info("goal %s added for %s", goal.id, user_id)

    def remove_goal(self, user_id: str, goal_id: str) -> bool:
        with self._lock:
            self._require(user_id)
            removed = self._goals.get(user_id, {}).pop(goal_id, None) is not None
        if removed:
            logger.info("goal %s removed for %s", goal_id, user_id)
        return removed

    def list_actions(self, user_id: str) -> List[UserAction]:
        with self._lock:
            self._require(user_id)
            return list(self._actions.get(user_id, {}).values())

    def put_action(self, action: UserAction) -> None:
        with self._lock:
            self._require(action.user_id)
            self._actions.setdefault(action.user_id, {})[action.action_id] = action
