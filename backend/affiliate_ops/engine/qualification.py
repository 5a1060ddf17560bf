"""Qualification filter: drop accounts whose own commission misses the rule's floor."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Mapping, Optional, Sequence

from affiliate_ops.engine.rates import ZERO, sum_totals
from affiliate_ops.engine.types import IncentiveRule, SalesRecord


@dataclass(frozen=True)
class QualificationResult:
    account_ids: List[str] = field(default_factory=list)
    total_revenue: Decimal = ZERO
    total_commission: Decimal = ZERO


def qualify_accounts(
    rule: Optional[IncentiveRule],
    grouped: Mapping[str, Sequence[SalesRecord]],
) -> QualificationResult:
    """Keep the accounts whose summed commission clears ``rule.min_commission_threshold``.

    With no rule, nothing is filtered out so callers still get the unfiltered
    totals to display.
    """
    account_ids: List[str] = []
    total_commission = ZERO
    total_revenue = ZERO
    for account_id, account_records in grouped.items():
        account_commission, account_revenue = sum_totals(account_records)
        if rule is not None and account_commission < rule.min_commission_threshold:
            continue
        account_ids.append(account_id)
        total_commission += account_commission
        total_revenue += account_revenue

    return QualificationResult(
        account_ids=account_ids,
        total_revenue=total_revenue,
        total_commission=total_commission,
    )
