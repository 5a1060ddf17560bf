"""Value objects consumed and produced by the incentive engine.

All inputs are frozen pydantic models so a calculation pass works on an
immutable snapshot. They can be built straight from ORM rows
(``from_attributes``) or from plain dicts.
"""
import datetime as dt
import enum
from decimal import Decimal
from typing import Optional, Tuple

from pydantic import BaseModel, Field, model_validator


# Sentinel: a rule whose commission_rate_max is 100 has no upper bound
UNBOUNDED_RATE_MAX = Decimal("100")


class SalesRecord(BaseModel):
    account_id: str
    date: dt.date
    clicks: int = Field(default=0, ge=0)
    orders: int = Field(default=0, ge=0)
    gross_commission: Decimal = Field(..., ge=0)
    products_sold: int = Field(default=0, ge=0)
    total_purchases: Decimal = Field(..., ge=0)
    new_buyers: int = Field(default=0, ge=0)

    class Config:
        from_attributes = True
        frozen = True


class Account(BaseModel):
    id: str
    username: Optional[str] = None
    category_id: Optional[str] = None
    status: str = "active"
    payment_data: str = "belum diatur"

    class Config:
        from_attributes = True
        frozen = True


class IncentiveTier(BaseModel):
    revenue_threshold: Decimal
    incentive_rate: Decimal = Field(..., ge=0)
    id: Optional[str] = None

    class Config:
        from_attributes = True
        frozen = True


class IncentiveRule(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    min_commission_threshold: Decimal = Field(default=Decimal("0"), ge=0)
    commission_rate_min: Decimal = Field(default=Decimal("0"), ge=0)
    commission_rate_max: Decimal = Field(default=UNBOUNDED_RATE_MAX, ge=0)
    base_revenue_threshold: Decimal = Field(default=Decimal("0"), ge=0)
    tiers: Tuple[IncentiveTier, ...] = ()
    is_active: bool = True

    class Config:
        from_attributes = True
        frozen = True

    @property
    def is_open_ended(self) -> bool:
        return self.commission_rate_max == UNBOUNDED_RATE_MAX


class TargetUser(BaseModel):
    id: str
    name: str = ""
    managed_account_ids: Tuple[str, ...] = ()

    class Config:
        from_attributes = True
        frozen = True


class PeriodKind(str, enum.Enum):
    ALL = "all"
    DAYS = "days"
    MONTH = "month"
    RANGE = "range"


class PeriodSpec(BaseModel):
    """Reporting window.

    ``DAYS`` keeps rows dated on or after ``today - preset_days``; ``MONTH``
    keeps one calendar month; ``RANGE`` is inclusive on both ends.
    """
    kind: PeriodKind = PeriodKind.ALL
    preset_days: Optional[int] = Field(default=None, ge=0)
    year: Optional[int] = Field(default=None, ge=1)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_kind_fields(self):
        if self.kind == PeriodKind.DAYS and self.preset_days is None:
            raise ValueError("preset_days is required for a rolling-day period")
        if self.kind == PeriodKind.MONTH and (self.year is None or self.month is None):
            raise ValueError("year and month are required for a calendar-month period")
        if self.kind == PeriodKind.RANGE:
            if self.start is None or self.end is None:
                raise ValueError("start and end are required for a date-range period")
            if self.end < self.start:
                raise ValueError("end must not be before start")
        return self

    @classmethod
    def all_time(cls) -> "PeriodSpec":
        return cls(kind=PeriodKind.ALL)

    @classmethod
    def last_days(cls, days: int) -> "PeriodSpec":
        return cls(kind=PeriodKind.DAYS, preset_days=days)

    @classmethod
    def for_month(cls, year: int, month: int) -> "PeriodSpec":
        return cls(kind=PeriodKind.MONTH, year=year, month=month)

    @classmethod
    def between(cls, start: dt.date, end: dt.date) -> "PeriodSpec":
        return cls(kind=PeriodKind.RANGE, start=start, end=end)


class TierState(str, enum.Enum):
    LOCKED = "locked"
    TIERED = "tiered"
    MAXED = "maxed"


class IncentiveInput(BaseModel):
    accounts: Tuple[Account, ...] = ()
    sales_records: Tuple[SalesRecord, ...] = ()
    rules: Tuple[IncentiveRule, ...] = ()
    target_user: TargetUser
    period: PeriodSpec = PeriodSpec()
    today: Optional[dt.date] = None

    class Config:
        frozen = True


class IncentiveCalculation(BaseModel):
    user_id: str
    user_name: str
    total_revenue: Decimal
    total_commission: Decimal
    commission_rate: Decimal
    applicable_rule: Optional[IncentiveRule] = None
    current_tier: Optional[IncentiveTier] = None
    next_tier: Optional[IncentiveTier] = None
    incentive_amount: Decimal = Decimal("0")
    progress_percentage: Decimal = Decimal("0")
    remaining_to_next_tier: Decimal = Decimal("0")
    managed_accounts_count: int = 0
    qualifying_accounts_count: int = 0
    status: Optional[TierState] = None

    class Config:
        frozen = True
