from decimal import Decimal
from typing import Iterable, Tuple

from affiliate_ops.engine.types import SalesRecord

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def sum_totals(records: Iterable[SalesRecord]) -> Tuple[Decimal, Decimal]:
    """Return (total gross commission, total purchases) over ``records``."""
    commission = ZERO
    revenue = ZERO
    for record in records:
        commission += record.gross_commission
        revenue += record.total_purchases
    return commission, revenue


def blended_rate(total_commission: Decimal, total_revenue: Decimal) -> Decimal:
    """Commission as a percentage of revenue; 0 when there is no revenue."""
    if total_revenue > 0:
        return total_commission / total_revenue * HUNDRED
    return ZERO
