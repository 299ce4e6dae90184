from datetime import date, datetime
from typing import Optional, List, Literal

from pydantic import BaseModel, Field

from finpulse.planner.schemas import Financials


class ProfileIn(BaseModel):
    name: str = ""
    phoneNumber: str = ""
    age: Optional[float] = Field(default=None, ge=0)
    dateOfBirth: Optional[date] = None
    role: Literal["Individual", "Financial Professional"] = "Individual"
    advisorId: Optional[str] = None
    advisorCode: Optional[str] = None


class SnapshotIn(BaseModel):
    financials: Financials = Field(default_factory=Financials)
    snapshotDate: Optional[datetime] = None   # defaults to "now" in the configured TZ


class GoalIn(BaseModel):
    id: Optional[str] = None
    name: str
    targetAge: int = Field(ge=0)
    targetValue: float = Field(ge=0)


class PersonaAnswersIn(BaseModel):
    answers: List[int]


class StartActionIn(BaseModel):
    actionKey: str
    targetDate: date
