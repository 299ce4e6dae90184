# finpulse/config.py
from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

load_dotenv(dotenv_path=os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))

DEFAULT_RETIREMENT_AGE = 85
DEFAULT_RETIREMENT_EXPENSE_FACTOR = 0.7
DEFAULT_TIMEZONE = "Asia/Kolkata"

_default_webs = ["http://127.0.0.1:3000", "http://localhost:3000"]


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class RetirementPolicy:
    """Corpus target = (retirement_age - age) * annual expenses * expense_factor."""

    retirement_age: float = DEFAULT_RETIREMENT_AGE
    expense_factor: float = DEFAULT_RETIREMENT_EXPENSE_FACTOR


def retirement_policy_from_env() -> RetirementPolicy:
    return RetirementPolicy(
        retirement_age=_env_int("FINPULSE_RETIREMENT_AGE", DEFAULT_RETIREMENT_AGE),
        expense_factor=_env_float("FINPULSE_RETIREMENT_EXPENSE_FACTOR", DEFAULT_RETIREMENT_EXPENSE_FACTOR),
    )


def timezone_name() -> str:
    return os.getenv("TZ") or DEFAULT_TIMEZONE


def log_level() -> str:
    level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    # Logger.setLevel rejects unknown names.
    return level if isinstance(logging.getLevelName(level), int) else "INFO"


def allowed_origins() -> List[str]:
    app_base = os.getenv("APP_BASE_URL")
    if not app_base:
        return list(_default_webs)
    return sorted(set(_default_webs + [app_base]))
