# finpulse/planner/assumptions.py

# Fixed benchmarks. Retirement constants are policy and live in config.RetirementPolicy.

ASSET_FIELDS = [
    "cashInHand",
    "savingsAccount",
    "fixedDeposit",
    "recurringDeposit",
    "gold",
    "stocks",
    "mutualFunds",
    "crypto",
    "nps",
    "ppf",
    "pf",
    "sukanyaSamriddhi",
    "house",
    "car",
    "otherProperty",
    "other",
]

LIABILITY_FIELDS = ["homeLoan", "personalLoan", "carLoan", "creditCard", "other"]

# Items that are usually entered once a year.
ANNUAL_BY_DEFAULT = {"bonus", "propertyTax", "insurancePremiums", "vacation"}

INVESTABLE_ASSET_FIELDS = [
    "stocks",
    "mutualFunds",
    "crypto",
    "nps",
    "ppf",
    "pf",
    "sukanyaSamriddhi",
    "cashInHand",
    "savingsAccount",
    "recurringDeposit",
    "fixedDeposit",
]

LIQUID_ASSET_FIELDS = ["cashInHand", "savingsAccount"]

EQUITY_ASSET_FIELDS = ["stocks", "mutualFunds", "crypto"]

DEBT_ASSET_FIELDS = [
    key for key in INVESTABLE_ASSET_FIELDS if key not in EQUITY_ASSET_FIELDS
]

ASSETS_BY_HORIZON = {
    "short": ["crypto", "cashInHand", "savingsAccount", "recurringDeposit", "fixedDeposit"],
    "medium": ["mutualFunds"],
    "long": ["stocks", "nps", "ppf", "pf", "sukanyaSamriddhi"],
}

INVESTMENT_LABELS = {
    "stocks": "Stocks",
    "mutualFunds": "Mutual Funds",
    "crypto": "Crypto",
    "nps": "NPS",
    "ppf": "PPF",
    "pf": "PF",
    "sukanyaSamriddhi": "SSY",
    "cashInHand": "Cash",
    "savingsAccount": "Savings A/C",
    "fixedDeposit": "Fixed Deposit",
    "recurringDeposit": "RD",
}

# (green, amber, reversed)
RATIO_THRESHOLDS = {
    "savingsRatio": (20.0, 10.0, False),
    "financialAssetRatio": (50.0, 25.0, False),
    "liquidityRatio": (6.0, 3.0, False),
    "leverageRatio": (30.0, 50.0, True),
    "debtToIncomeRatio": (36.0, 43.0, True),
    "wealthRatio": (200.0, 100.0, False),
}

LIFE_COVER_INCOME_MULTIPLE = 10
HEALTH_COVER_TARGET = 1_500_000.0
PROTECTION_THRESHOLDS = (90.0, 50.0)
ASSET_COVER_THRESHOLDS = (99.0, 0.0)

# Goal horizon boundaries in years: short < 2 <= medium <= 5 < long
SHORT_HORIZON_YEARS = 2
MEDIUM_HORIZON_YEARS = 5
GOAL_COVERAGE_THRESHOLDS = (75.0, 40.0)
GOAL_BUCKET_LABELS = {
    "overall": "Overall",
    "short": "Short-Term",
    "medium": "Medium-Term",
    "long": "Long-Term",
}

RETIREMENT_THRESHOLDS = (40.0, 20.0)

PERSONAS = ["Guardian", "Planner", "Adventurer", "Spender", "Seeker", "Accumulator"]
LOW_RISK_PERSONAS = {"Guardian", "Spender"}
HIGH_RISK_PERSONAS = {"Adventurer", "Accumulator"}
LOW_RISK_MAX_EQUITY_PCT = 40.0
HIGH_RISK_MIN_EQUITY_PCT = 50.0
EQUITY_AGE_BASE = 110
EQUITY_AGE_TOLERANCE = 15.0
