"""Period filter: restrict sales records to a reporting window."""
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from affiliate_ops.engine.types import PeriodKind, PeriodSpec, SalesRecord


def period_bounds(period: PeriodSpec, today: Optional[date] = None) -> Tuple[Optional[date], Optional[date]]:
    """Inclusive (start, end) dates for a period. ``None`` means open on that side."""
    if period.kind == PeriodKind.ALL:
        return None, None
    if period.kind == PeriodKind.DAYS:
        today = today or date.today()
        return today - timedelta(days=period.preset_days), None
    if period.kind == PeriodKind.MONTH:
        first = date(period.year, period.month, 1)
        return first, first + relativedelta(months=1) - timedelta(days=1)
    return period.start, period.end


def filter_by_period(records: Iterable[SalesRecord], period: PeriodSpec, today: Optional[date] = None) -> List[SalesRecord]:
    start, end = period_bounds(period, today)
    return [
        r for r in records
        if (start is None or r.date >= start) and (end is None or r.date <= end)
    ]


def available_years(records: Iterable[SalesRecord]) -> List[int]:
    """Years present in the data, newest first."""
    return sorted({r.date.year for r in records}, reverse=True)


def available_months(records: Iterable[SalesRecord], year: int) -> List[int]:
    """Months (1-12) with data in ``year``, ascending."""
    return sorted({r.date.month for r in records if r.date.year == year})
