"""Rule selector: pick the incentive rule whose commission-rate band holds a blended rate."""
from decimal import Decimal
from typing import Iterable, Optional

from affiliate_ops.engine.types import IncentiveRule


def rate_in_band(rate: Decimal, rule: IncentiveRule) -> bool:
    if rate < rule.commission_rate_min:
        return False
    # A max of 100 marks the open-ended top band
    if rule.is_open_ended:
        return True
    return rate <= rule.commission_rate_max


def select_rule(rate: Decimal, rules: Iterable[IncentiveRule]) -> Optional[IncentiveRule]:
    """First active rule (in input order) whose band contains ``rate``, else None.

    Overlapping bands are not rejected: the earlier rule wins.
    """
    for rule in rules:
        if rule.is_active and rate_in_band(rate, rule):
            return rule
    return None
