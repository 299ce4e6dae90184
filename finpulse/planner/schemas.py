# finpulse/planner/schemas.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, ValidationInfo, field_validator

from .assumptions import ANNUAL_BY_DEFAULT
from .normalize import _safe_float

Frequency = Literal["monthly", "annual"]
Role = Literal["Individual", "Financial Professional"]
ActionStatus = Literal["in_progress", "completed"]


class FinancialItem(BaseModel):
    value: float = Field(default=0.0, ge=0)
    frequency: Frequency = "monthly"

    class Config:
        frozen = True
        extra = "ignore"

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, v: Any) -> float:
        return _safe_float(v)

    @field_validator("frequency", mode="before")
    @classmethod
    def _default_frequency(cls, v: Any) -> Any:
        if v is None or v == "":
            return "monthly"
        return v


def _item(frequency: Frequency = "monthly"):
    return Field(default_factory=lambda: FinancialItem(frequency=frequency))


class _Amounts(BaseModel):
    """Fixed-shape record of non-negative amounts; blanks and garbage read as 0."""

    class Config:
        frozen = True
        extra = "ignore"

    @field_validator("*", mode="before")
    @classmethod
    def _coerce(cls, v: Any) -> float:
        return _safe_float(v)


class Assets(_Amounts):
    cashInHand: float = Field(default=0.0, ge=0)
    savingsAccount: float = Field(default=0.0, ge=0)
    fixedDeposit: float = Field(default=0.0, ge=0)
    recurringDeposit: float = Field(default=0.0, ge=0)
    gold: float = Field(default=0.0, ge=0)
    stocks: float = Field(default=0.0, ge=0)
    mutualFunds: float = Field(default=0.0, ge=0)
    crypto: float = Field(default=0.0, ge=0)
    nps: float = Field(default=0.0, ge=0)
    ppf: float = Field(default=0.0, ge=0)
    pf: float = Field(default=0.0, ge=0)
    sukanyaSamriddhi: float = Field(default=0.0, ge=0)
    house: float = Field(default=0.0, ge=0)
    car: float = Field(default=0.0, ge=0)
    otherProperty: float = Field(default=0.0, ge=0)
    other: float = Field(default=0.0, ge=0)


class Liabilities(_Amounts):
    homeLoan: float = Field(default=0.0, ge=0)
    personalLoan: float = Field(default=0.0, ge=0)
    carLoan: float = Field(default=0.0, ge=0)
    creditCard: float = Field(default=0.0, ge=0)
    other: float = Field(default=0.0, ge=0)


class Insurance(_Amounts):
    life: float = Field(default=0.0, ge=0)
    health: float = Field(default=0.0, ge=0)
    car: float = Field(default=0.0, ge=0)
    property: float = Field(default=0.0, ge=0)


class _Items(BaseModel):
    class Config:
        frozen = True
        extra = "ignore"

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_item(cls, v: Any, info: ValidationInfo) -> Any:
        default_frequency = "annual" if info.field_name in ANNUAL_BY_DEFAULT else "monthly"
        if v is None:
            return FinancialItem(frequency=default_frequency)
        if isinstance(v, dict):
            if v.get("frequency") in (None, ""):
                return {**v, "frequency": default_frequency}
            return v
        if isinstance(v, FinancialItem):
            return v
        # A bare number is an amount at the field's usual frequency.
        return FinancialItem(value=_safe_float(v), frequency=default_frequency)


class Income(_Items):
    salary: FinancialItem = _item()
    bonus: FinancialItem = _item("annual")
    business: FinancialItem = _item()
    rental: FinancialItem = _item()
    other: FinancialItem = _item()


class Expenses(_Items):
    rent: FinancialItem = _item()
    emi: FinancialItem = _item()
    utilities: FinancialItem = _item()
    societyMaintenance: FinancialItem = _item()
    propertyTax: FinancialItem = _item("annual")
    groceries: FinancialItem = _item()
    transport: FinancialItem = _item()
    health: FinancialItem = _item()
    education: FinancialItem = _item()
    insurancePremiums: FinancialItem = _item("annual")
    clothing: FinancialItem = _item()
    diningOut: FinancialItem = _item()
    entertainment: FinancialItem = _item()
    subscriptions: FinancialItem = _item()
    vacation: FinancialItem = _item("annual")
    other: FinancialItem = _item()


class Financials(BaseModel):
    assets: Assets = Field(default_factory=Assets)
    liabilities: Liabilities = Field(default_factory=Liabilities)
    income: Income = Field(default_factory=Income)
    expenses: Expenses = Field(default_factory=Expenses)
    insurance: Insurance = Field(default_factory=Insurance)

    class Config:
        frozen = True
        extra = "ignore"

    @field_validator("*", mode="before")
    @classmethod
    def _empty_section(cls, v: Any) -> Any:
        return {} if v is None else v


class Goal(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "goal_id"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "goal_name"))
    target_age: int = Field(ge=0)
    target_value: float = Field(default=0.0, ge=0)

    class Config:
        frozen = True
        extra = "ignore"

    @field_validator("target_value", mode="before")
    @classmethod
    def _coerce_value(cls, v: Any) -> float:
        return _safe_float(v)


class UserProfile(BaseModel):
    user_id: str
    name: str = ""
    phone_number: str = ""
    age: Optional[float] = None
    date_of_birth: Optional[date] = None
    persona: Optional[str] = None
    role: Role = "Individual"
    advisor_id: Optional[str] = None
    advisor_code: Optional[str] = None
    points: int = 0
    locked_points: int = 0
    points_source: Dict[str, bool] = Field(default_factory=dict)
    created_at: Optional[datetime] = None

    class Config:
        frozen = True
        extra = "ignore"

    @field_validator("persona", mode="before")
    @classmethod
    def _blank_persona(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @field_validator("points_source", mode="before")
    @classmethod
    def _empty_source(cls, v: Any) -> Any:
        return {} if v is None else v


class FinancialSnapshot(BaseModel):
    snapshot_id: str
    user_id: str
    snapshot_date: datetime
    snapshot_data: Financials = Field(default_factory=Financials)

    class Config:
        frozen = True
        extra = "ignore"


class UserAction(BaseModel):
    action_id: str
    user_id: str
    action_key: str
    target_date: date
    status: ActionStatus = "in_progress"
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        frozen = True
        extra = "ignore"
