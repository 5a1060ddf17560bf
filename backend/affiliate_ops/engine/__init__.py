from affiliate_ops.engine.calculator import calculate_incentive, calculate_incentives
from affiliate_ops.engine.errors import IncentiveInputError
from affiliate_ops.engine.period import available_months, available_years, filter_by_period, period_bounds
from affiliate_ops.engine.types import (
    Account,
    IncentiveCalculation,
    IncentiveInput,
    IncentiveRule,
    IncentiveTier,
    PeriodKind,
    PeriodSpec,
    SalesRecord,
    TargetUser,
    TierState,
)

__all__ = [
    "calculate_incentive",
    "calculate_incentives",
    "IncentiveInputError",
    "available_months",
    "available_years",
    "filter_by_period",
    "period_bounds",
    "Account",
    "IncentiveCalculation",
    "IncentiveInput",
    "IncentiveRule",
    "IncentiveTier",
    "PeriodKind",
    "PeriodSpec",
    "SalesRecord",
    "TargetUser",
    "TierState",
]
