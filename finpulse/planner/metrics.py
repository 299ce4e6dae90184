# finpulse/planner/metrics.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Iterator, List, Literal, Mapping, Optional, Tuple, Union

from finpulse.clock import age_from_dob
from finpulse.config import RetirementPolicy

from .assumptions import (
    ASSET_COVER_THRESHOLDS,
    ASSET_FIELDS,
    ASSETS_BY_HORIZON,
    EQUITY_AGE_BASE,
    EQUITY_AGE_TOLERANCE,
    EQUITY_ASSET_FIELDS,
    GOAL_BUCKET_LABELS,
    GOAL_COVERAGE_THRESHOLDS,
    HEALTH_COVER_TARGET,
    HIGH_RISK_MIN_EQUITY_PCT,
    HIGH_RISK_PERSONAS,
    INVESTABLE_ASSET_FIELDS,
    LIABILITY_FIELDS,
    LIFE_COVER_INCOME_MULTIPLE,
    LIQUID_ASSET_FIELDS,
    LOW_RISK_MAX_EQUITY_PCT,
    LOW_RISK_PERSONAS,
    MEDIUM_HORIZON_YEARS,
    PROTECTION_THRESHOLDS,
    RATIO_THRESHOLDS,
    RETIREMENT_THRESHOLDS,
    SHORT_HORIZON_YEARS,
)
from .normalize import monthly_equivalent, split_by_frequency, sum_fields
from .schemas import Expenses, Financials, Goal, Income, UserProfile

logger = logging.getLogger(__name__)

RagStatus = Literal["green", "amber", "red"]
CoverageStatus = Literal["green", "amber", "red", "neutral"]
Horizon = Literal["short", "medium", "long"]


@dataclass(frozen=True)
class Ratio:
    value: float
    status: RagStatus


@dataclass(frozen=True)
class HealthRatios:
    savings_ratio: Ratio
    financial_asset_ratio: Ratio
    liquidity_ratio: Ratio
    leverage_ratio: Ratio
    debt_to_income_ratio: Ratio
    wealth_ratio: Ratio

    def items(self) -> Iterator[Tuple[str, Ratio]]:
        yield "savingsRatio", self.savings_ratio
        yield "financialAssetRatio", self.financial_asset_ratio
        yield "liquidityRatio", self.liquidity_ratio
        yield "leverageRatio", self.leverage_ratio
        yield "debtToIncomeRatio", self.debt_to_income_ratio
        yield "wealthRatio", self.wealth_ratio


@dataclass(frozen=True)
class ProtectionScore:
    score: float
    status: RagStatus


@dataclass(frozen=True)
class ProtectionScores:
    life: ProtectionScore
    health: ProtectionScore
    car: ProtectionScore
    property: ProtectionScore

    def items(self) -> Iterator[Tuple[str, ProtectionScore]]:
        yield "life", self.life
        yield "health", self.health
        yield "car", self.car
        yield "property", self.property


@dataclass(frozen=True)
class GoalCoverage:
    ratio: float
    status: CoverageStatus
    label: str = ""


@dataclass(frozen=True)
class GoalCoverageRatios:
    overall: GoalCoverage
    short: GoalCoverage
    medium: GoalCoverage
    long: GoalCoverage

    def items(self) -> Iterator[Tuple[str, GoalCoverage]]:
        yield "overall", self.overall
        yield "short", self.short
        yield "medium", self.medium
        yield "long", self.long


@dataclass(frozen=True)
class RetirementReadiness:
    readiness_percentage: float
    investable_assets: float
    retirement_target: float
    status: RagStatus


@dataclass(frozen=True)
class Cashflow:
    monthly_income: float
    monthly_expenses: float
    monthly_savings: float
    annual_income: float
    annual_expenses: float
    monthly_emi: float
    # Raw partitions by entry frequency, not blended.
    monthly_only_income: float
    annual_only_income: float
    monthly_only_expenses: float
    annual_only_expenses: float


@dataclass(frozen=True)
class Metrics:
    age: float
    persona: Optional[str]
    total_assets: float
    total_liabilities: float
    net_worth: float
    financial_assets: float
    liquid_assets: float
    cashflow: Cashflow
    health_ratios: HealthRatios
    protection_scores: ProtectionScores
    goal_coverage_ratios: GoalCoverageRatios
    retirement_readiness: RetirementReadiness
    total_goal_value: float
    equity_allocation_percentage: float
    recommended_equity_by_age: float

    def to_dict(self) -> Dict[str, Any]:
        cf = self.cashflow
        rr = self.retirement_readiness
        return {
            "age": self.age,
            "persona": self.persona,
            "totalAssets": self.total_assets,
            "totalLiabilities": self.total_liabilities,
            "netWorth": self.net_worth,
            "financialAssets": self.financial_assets,
            "liquidAssets": self.liquid_assets,
            "monthlyIncome": cf.monthly_income,
            "monthlyExpenses": cf.monthly_expenses,
            "monthlySavings": cf.monthly_savings,
            "annualIncome": cf.annual_income,
            "annualExpenses": cf.annual_expenses,
            "monthlyEmi": cf.monthly_emi,
            "cashflowPartitions": {
                "monthlyOnlyIncome": cf.monthly_only_income,
                "annualOnlyIncome": cf.annual_only_income,
                "monthlyOnlyExpenses": cf.monthly_only_expenses,
                "annualOnlyExpenses": cf.annual_only_expenses,
            },
            "healthRatios": {
                key: {"value": r.value, "status": r.status} for key, r in self.health_ratios.items()
            },
            "protectionScores": {
                key: {"score": s.score, "status": s.status} for key, s in self.protection_scores.items()
            },
            "goalCoverageRatios": {
                key: {"ratio": g.ratio, "status": g.status, "label": g.label}
                for key, g in self.goal_coverage_ratios.items()
            },
            "retirementReadiness": {
                "readinessPercentage": rr.readiness_percentage,
                "investableAssets": rr.investable_assets,
                "retirementTarget": rr.retirement_target,
                "status": rr.status,
            },
            "totalGoalValue": self.total_goal_value,
            "equityAllocationPercentage": self.equity_allocation_percentage,
            "recommendedEquityByAge": self.recommended_equity_by_age,
        }


@dataclass(frozen=True)
class MetricsResult:
    metrics: Metrics
    triggered_action_keys: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metrics": self.metrics.to_dict(),
            "triggeredActionKeys": list(self.triggered_action_keys),
        }


# ---------- Classification ----------

def rag_status(value: float, green: float, amber: float) -> RagStatus:
    if value >= green:
        return "green"
    if value >= amber:
        return "amber"
    return "red"


def rag_status_reversed(value: float, green: float, amber: float) -> RagStatus:
    if value <= green:
        return "green"
    if value <= amber:
        return "amber"
    return "red"


def _ratio(key: str, value: float) -> Ratio:
    green, amber, reversed_ = RATIO_THRESHOLDS[key]
    if reversed_:
        return Ratio(value=value, status=rag_status_reversed(value, green, amber))
    return Ratio(value=value, status=rag_status(value, green, amber))


def _pct(numerator: float, denominator: float) -> float:
    return numerator * 100 / denominator if denominator > 0 else 0.0


# ---------- Aggregates ----------

def compute_cashflow(income: Income, expenses: Expenses) -> Cashflow:
    income_items = [getattr(income, k) for k in type(income).model_fields]
    expense_items = [getattr(expenses, k) for k in type(expenses).model_fields]

    monthly_income = sum(monthly_equivalent(item) for item in income_items)
    monthly_expenses = sum(monthly_equivalent(item) for item in expense_items)
    monthly_only_income, annual_only_income = split_by_frequency(income_items)
    monthly_only_expenses, annual_only_expenses = split_by_frequency(expense_items)

    return Cashflow(
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        monthly_savings=monthly_income - monthly_expenses,
        annual_income=monthly_income * 12,
        annual_expenses=monthly_expenses * 12,
        monthly_emi=monthly_equivalent(expenses.emi),
        monthly_only_income=monthly_only_income,
        annual_only_income=annual_only_income,
        monthly_only_expenses=monthly_only_expenses,
        annual_only_expenses=annual_only_expenses,
    )


def compute_health_ratios(
    cashflow: Cashflow,
    total_assets: float,
    total_liabilities: float,
    financial_assets: float,
    liquid_assets: float,
) -> HealthRatios:
    net_worth = total_assets - total_liabilities
    liquidity = liquid_assets / cashflow.monthly_expenses if cashflow.monthly_expenses > 0 else 0.0
    return HealthRatios(
        savings_ratio=_ratio("savingsRatio", _pct(cashflow.monthly_savings, cashflow.monthly_income)),
        financial_asset_ratio=_ratio("financialAssetRatio", _pct(financial_assets, total_assets)),
        liquidity_ratio=_ratio("liquidityRatio", liquidity),
        leverage_ratio=_ratio("leverageRatio", _pct(total_liabilities, total_assets)),
        debt_to_income_ratio=_ratio("debtToIncomeRatio", _pct(cashflow.monthly_emi, cashflow.monthly_income)),
        wealth_ratio=_ratio("wealthRatio", _pct(net_worth, cashflow.annual_income)),
    )


# ---------- Protection ----------

def _asset_cover_score(asset_value: float, cover: float) -> ProtectionScore:
    # Nothing to protect counts as fully covered.
    if asset_value > 0:
        score = 100.0 if cover > 0 else 0.0
    else:
        score = 100.0
    return ProtectionScore(score=score, status=rag_status(score, *ASSET_COVER_THRESHOLDS))


def compute_protection_scores(financials: Financials, annual_income: float) -> ProtectionScores:
    insurance = financials.insurance
    assets = financials.assets

    life_target = annual_income * LIFE_COVER_INCOME_MULTIPLE
    if life_target > 0:
        life_score = insurance.life * 100 / life_target
    else:
        life_score = 100.0 if insurance.life > 0 else 0.0
    health_score = insurance.health * 100 / HEALTH_COVER_TARGET

    return ProtectionScores(
        life=ProtectionScore(score=life_score, status=rag_status(life_score, *PROTECTION_THRESHOLDS)),
        health=ProtectionScore(score=health_score, status=rag_status(health_score, *PROTECTION_THRESHOLDS)),
        car=_asset_cover_score(assets.car, insurance.car),
        property=_asset_cover_score(assets.house + assets.otherProperty, insurance.property),
    )


# ---------- Goals ----------

def goal_horizon(years_left: float) -> Horizon:
    if years_left < SHORT_HORIZON_YEARS:
        return "short"
    if years_left <= MEDIUM_HORIZON_YEARS:
        return "medium"
    return "long"


def bucket_goals(goals: Iterable[Goal], age: float) -> Dict[Horizon, float]:
    buckets: Dict[Horizon, float] = {"short": 0.0, "medium": 0.0, "long": 0.0}
    for goal in goals:
        buckets[goal_horizon(goal.target_age - age)] += goal.target_value
    return buckets


def calculate_ratio(asset_value: float, goal_value: float, label: str = "") -> GoalCoverage:
    # Buckets without goals are excluded from scoring, not penalized.
    if goal_value == 0:
        return GoalCoverage(ratio=0.0, status="neutral", label=label)
    ratio = min(asset_value * 100 / goal_value, 100.0)
    return GoalCoverage(ratio=ratio, status=rag_status(ratio, *GOAL_COVERAGE_THRESHOLDS), label=label)


def compute_goal_coverage(
    financials: Financials,
    goals: List[Goal],
    age: float,
    financial_assets: float,
) -> GoalCoverageRatios:
    goal_buckets = bucket_goals(goals, age)
    total_goal_value = sum(g.target_value for g in goals)
    asset_buckets = {
        horizon: sum_fields(financials.assets, keys) for horizon, keys in ASSETS_BY_HORIZON.items()
    }
    return GoalCoverageRatios(
        overall=calculate_ratio(financial_assets, total_goal_value, GOAL_BUCKET_LABELS["overall"]),
        short=calculate_ratio(asset_buckets["short"], goal_buckets["short"], GOAL_BUCKET_LABELS["short"]),
        medium=calculate_ratio(asset_buckets["medium"], goal_buckets["medium"], GOAL_BUCKET_LABELS["medium"]),
        long=calculate_ratio(asset_buckets["long"], goal_buckets["long"], GOAL_BUCKET_LABELS["long"]),
    )


# ---------- Retirement ----------

def compute_retirement_readiness(
    age: float,
    annual_expenses: float,
    financial_assets: float,
    other_property: float,
    total_goal_value: float,
    policy: RetirementPolicy,
) -> RetirementReadiness:
    retirement_target = (policy.retirement_age - age) * annual_expenses * policy.expense_factor
    # Assets earmarked for goals do not count twice.
    retirement_assets = max(0.0, financial_assets + other_property - total_goal_value)
    if retirement_target > 0:
        readiness = min(retirement_assets * 100 / retirement_target, 100.0)
    else:
        readiness = 100.0
    return RetirementReadiness(
        readiness_percentage=readiness,
        investable_assets=retirement_assets,
        retirement_target=retirement_target,
        status=rag_status(readiness, *RETIREMENT_THRESHOLDS),
    )


# ---------- Allocation ----------

def recommended_equity_by_age(age: float) -> float:
    return max(0.0, EQUITY_AGE_BASE - age)


def allocation_action(persona: Optional[str], equity_pct: float, recommended_pct: float) -> Optional[str]:
    if persona in LOW_RISK_PERSONAS and equity_pct > LOW_RISK_MAX_EQUITY_PCT:
        return "asset-allocation-persona-aggressive"
    if persona in HIGH_RISK_PERSONAS and equity_pct < HIGH_RISK_MIN_EQUITY_PCT:
        return "asset-allocation-persona-conservative"
    if equity_pct > recommended_pct + EQUITY_AGE_TOLERANCE:
        return "asset-allocation-age-aggressive"
    if equity_pct < recommended_pct - EQUITY_AGE_TOLERANCE:
        return "asset-allocation-age-conservative"
    return None


# ---------- Action prioritization ----------

def prioritize_actions(metrics: Metrics) -> Tuple[str, ...]:
    """Ordered, de-duplicated action keys; lower tier number means more urgent."""
    candidates: List[Tuple[str, int]] = []
    for key, ratio in metrics.health_ratios.items():
        if ratio.status == "red":
            candidates.append((key, 1))
    for key, ratio in metrics.health_ratios.items():
        if ratio.status == "amber":
            candidates.append((key, 2))
    for kind, score in metrics.protection_scores.items():
        if score.status == "red":
            candidates.append((f"protection-{kind}", 3))
    for bucket, coverage in metrics.goal_coverage_ratios.items():
        if coverage.status == "red":
            candidates.append((f"goals-{bucket}", 4))
    if metrics.retirement_readiness.status != "green":
        candidates.append(("retirement", 5))
    allocation_key = allocation_action(
        metrics.persona,
        metrics.equity_allocation_percentage,
        metrics.recommended_equity_by_age,
    )
    if allocation_key:
        candidates.append((allocation_key, 6))

    seen = set()
    unique: List[Tuple[str, int]] = []
    for key, tier in candidates:
        if key not in seen:
            unique.append((key, tier))
            seen.add(key)
    unique.sort(key=lambda item: item[1])
    return tuple(key for key, _ in unique)


def net_worth(financials: Financials) -> float:
    """Net worth alone; unlike compute_metrics it needs no age."""
    return sum_fields(financials.assets, ASSET_FIELDS) - sum_fields(financials.liabilities, LIABILITY_FIELDS)


# ---------- Entry point ----------

def _valid_age(raw: Any) -> Optional[float]:
    if raw is None or isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    age = float(raw)
    if math.isnan(age) or math.isinf(age) or age < 0:
        return None
    return age


def _profile_fields(profile: Union[UserProfile, Mapping[str, Any], None]) -> Tuple[Any, Optional[str]]:
    if profile is None:
        return None, None
    if isinstance(profile, UserProfile):
        return profile.age, profile.persona
    return profile.get("age"), profile.get("persona") or None


def resolve_age(profile: UserProfile, on: date) -> Optional[float]:
    """Stored age wins; otherwise derive it from date of birth."""
    age = _valid_age(profile.age)
    if age is not None:
        return age
    derived = age_from_dob(profile.date_of_birth, on)
    return _valid_age(derived)


def compute_metrics(
    financials: Union[Financials, Mapping[str, Any], None],
    profile: Union[UserProfile, Mapping[str, Any], None],
    goals: Optional[Iterable[Union[Goal, Mapping[str, Any]]]] = None,
    policy: Optional[RetirementPolicy] = None,
) -> Optional[MetricsResult]:
    """
    Derive the full metrics record and triggered action keys.

    Returns None when the profile carries no usable age; every other gap in
    the inputs is read as 0.
    """
    raw_age, persona = _profile_fields(profile)
    age = _valid_age(raw_age)
    if age is None:
        logger.debug("metrics not computable: missing or invalid age %r", raw_age)
        return None

    if not isinstance(financials, Financials):
        financials = Financials.model_validate(financials or {})
    goal_list = [g if isinstance(g, Goal) else Goal.model_validate(g) for g in (goals or [])]
    policy = policy or RetirementPolicy()

    assets = financials.assets
    total_assets = sum_fields(assets, ASSET_FIELDS)
    total_liabilities = sum_fields(financials.liabilities, LIABILITY_FIELDS)
    financial_assets = sum_fields(assets, INVESTABLE_ASSET_FIELDS)
    liquid_assets = sum_fields(assets, LIQUID_ASSET_FIELDS)
    cashflow = compute_cashflow(financials.income, financials.expenses)
    total_goal_value = sum(g.target_value for g in goal_list)

    equity_assets = sum_fields(assets, EQUITY_ASSET_FIELDS)

    metrics = Metrics(
        age=age,
        persona=persona,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        net_worth=total_assets - total_liabilities,
        financial_assets=financial_assets,
        liquid_assets=liquid_assets,
        cashflow=cashflow,
        health_ratios=compute_health_ratios(
            cashflow, total_assets, total_liabilities, financial_assets, liquid_assets
        ),
        protection_scores=compute_protection_scores(financials, cashflow.annual_income),
        goal_coverage_ratios=compute_goal_coverage(financials, goal_list, age, financial_assets),
        retirement_readiness=compute_retirement_readiness(
            age,
            cashflow.annual_expenses,
            financial_assets,
            assets.otherProperty,
            total_goal_value,
            policy,
        ),
        total_goal_value=total_goal_value,
        equity_allocation_percentage=_pct(equity_assets, financial_assets),
        recommended_equity_by_age=recommended_equity_by_age(age),
    )
    return MetricsResult(metrics=metrics, triggered_action_keys=prioritize_actions(metrics))
