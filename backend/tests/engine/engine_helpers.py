from datetime import date
from decimal import Decimal

from affiliate_ops.engine import IncentiveRule, IncentiveTier, SalesRecord


def record(account_id, day, commission, revenue, **metrics):
    return SalesRecord(
        account_id=account_id,
        date=day,
        gross_commission=Decimal(str(commission)),
        total_purchases=Decimal(str(revenue)),
        **metrics,
    )


def tier(threshold, rate):
    return IncentiveTier(revenue_threshold=Decimal(str(threshold)), incentive_rate=Decimal(str(rate)))


def make_rule(rule_id="r1", name="Standard", rate_min=5, rate_max="7.99", floor=50_000,
              base=80_000_000, tiers=((80_000_000, "0.4"), (90_000_000, "0.6")), is_active=True):
    return IncentiveRule(
        id=rule_id,
        name=name,
        min_commission_threshold=Decimal(str(floor)),
        commission_rate_min=Decimal(str(rate_min)),
        commission_rate_max=Decimal(str(rate_max)),
        base_revenue_threshold=Decimal(str(base)),
        tiers=[tier(t, r) for t, r in tiers],
        is_active=is_active,
    )


TODAY = date(2024, 5, 31)
