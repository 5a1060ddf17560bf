"""Tier resolver.

Places qualifying revenue on a rule's tier ladder:

- locked: revenue is below the rule's base threshold (or between the base and
  the first tier). No current tier; the next tier is the first rung.
- tiered: revenue sits at or above a tier with another tier above it.
- maxed: revenue has reached the last tier.

Nothing is remembered between calls; every call recomputes from the ladder.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from affiliate_ops.engine.rates import HUNDRED, ZERO
from affiliate_ops.engine.types import IncentiveRule, IncentiveTier, TierState


@dataclass(frozen=True)
class TierResolution:
    state: Optional[TierState] = None
    current_tier: Optional[IncentiveTier] = None
    next_tier: Optional[IncentiveTier] = None
    incentive_amount: Decimal = ZERO
    progress_percentage: Decimal = ZERO
    remaining_to_next_tier: Decimal = ZERO


def sort_tiers(tiers: Iterable[IncentiveTier]) -> List[IncentiveTier]:
    # Stored order is not trusted
    return sorted(tiers, key=lambda tier: tier.revenue_threshold)


def clamp_progress(value: Decimal) -> Decimal:
    return max(ZERO, min(HUNDRED, value))


def _progress(revenue: Decimal, floor: Decimal, ceiling: Decimal) -> Decimal:
    span = ceiling - floor
    if span <= 0:
        return HUNDRED if revenue >= ceiling else ZERO
    return clamp_progress((revenue - floor) / span * HUNDRED)


def resolve_tier(rule: Optional[IncentiveRule], revenue: Decimal) -> TierResolution:
    if rule is None:
        return TierResolution()

    tiers = sort_tiers(rule.tiers)
    first_tier = tiers[0] if tiers else None
    base = rule.base_revenue_threshold

    if revenue < base:
        return TierResolution(
            state=TierState.LOCKED,
            next_tier=first_tier,
            progress_percentage=_progress(revenue, ZERO, base),
            remaining_to_next_tier=base - revenue,
        )

    current_index = None
    for index, tier in enumerate(tiers):
        if tier.revenue_threshold <= revenue:
            current_index = index
        else:
            break

    if current_index is None:
        # Base cleared but the first rung sits higher (or there are no rungs)
        if first_tier is None:
            return TierResolution(state=TierState.LOCKED)
        return TierResolution(
            state=TierState.LOCKED,
            next_tier=first_tier,
            progress_percentage=_progress(revenue, base, first_tier.revenue_threshold),
            remaining_to_next_tier=first_tier.revenue_threshold - revenue,
        )

    current_tier = tiers[current_index]
    incentive_amount = revenue * current_tier.incentive_rate / HUNDRED

    if current_index + 1 >= len(tiers):
        return TierResolution(
            state=TierState.MAXED,
            current_tier=current_tier,
            incentive_amount=incentive_amount,
            progress_percentage=HUNDRED,
        )

    next_tier = tiers[current_index + 1]
    return TierResolution(
        state=TierState.TIERED,
        current_tier=current_tier,
        next_tier=next_tier,
        incentive_amount=incentive_amount,
        progress_percentage=_progress(revenue, current_tier.revenue_threshold, next_tier.revenue_threshold),
        remaining_to_next_tier=next_tier.revenue_threshold - revenue,
    )
