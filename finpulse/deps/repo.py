from __future__ import annotations

from finpulse.config import RetirementPolicy, retirement_policy_from_env
from finpulse.store.repository import ClientRepository, InMemoryClientRepository

_repository: ClientRepository = InMemoryClientRepository()


def get_repository() -> ClientRepository:
    return _repository


def get_policy() -> RetirementPolicy:
    return retirement_policy_from_env()
