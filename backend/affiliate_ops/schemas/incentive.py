from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal


class IncentiveTierBase(BaseModel):
    revenue_threshold: Decimal = Field(..., ge=0)
    incentive_rate: Decimal = Field(..., ge=0, le=100)


class IncentiveTierCreate(IncentiveTierBase):
    pass


class IncentiveTier(IncentiveTierBase):
    id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class IncentiveRuleBase(BaseModel):
    name: str
    description: Optional[str] = None
    min_commission_threshold: Decimal = Field(default=Decimal("0"), ge=0)
    commission_rate_min: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    commission_rate_max: Decimal = Field(default=Decimal("100"), ge=0, le=100)  # 100 = no upper bound
    base_revenue_threshold: Decimal = Field(default=Decimal("0"), ge=0)
    priority: int = 0
    is_active: bool = True


class IncentiveRuleCreate(IncentiveRuleBase):
    tiers: List[IncentiveTierCreate] = []

    @model_validator(mode="after")
    def _check_band(self):
        if self.commission_rate_min > self.commission_rate_max:
            raise ValueError("commission_rate_min must not exceed commission_rate_max")
        return self


class IncentiveRuleUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    min_commission_threshold: Optional[Decimal] = Field(None, ge=0)
    commission_rate_min: Optional[Decimal] = Field(None, ge=0, le=100)
    commission_rate_max: Optional[Decimal] = Field(None, ge=0, le=100)
    base_revenue_threshold: Optional[Decimal] = Field(None, ge=0)
    priority: Optional[int] = None
    is_active: Optional[bool] = None
    # When given, replaces the whole ladder
    tiers: Optional[List[IncentiveTierCreate]] = None


class IncentiveRule(IncentiveRuleBase):
    id: str
    tiers: List[IncentiveTier] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class IncentiveSummary(BaseModel):
    total_incentives: Decimal = Decimal("0")
    total_revenue: Decimal = Decimal("0")
    active_users: int = 0      # managing at least one account
    qualified_users: int = 0   # earning a non-zero incentive
    user_count: int = 0


class IncentivePeriodOptions(BaseModel):
    years: List[int] = []
    months: List[int] = []
