"""Shared query-parameter parsing for the API routers."""
from datetime import date
from typing import Optional

from fastapi import HTTPException, Query, status
from pydantic import ValidationError

from affiliate_ops.engine import PeriodSpec


def get_period(
    period: Optional[str] = Query(None, description="'all' or a number of days, e.g. 30"),
    year: Optional[int] = Query(None, description="Calendar year, used with month"),
    month: Optional[int] = Query(None, description="Calendar month 1-12, used with year"),
    start_date: Optional[date] = Query(None, description="Inclusive start YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="Inclusive end YYYY-MM-DD"),
) -> PeriodSpec:
    """Build a PeriodSpec. Month/year wins over a date range, which wins over ``period``."""
    try:
        if year is not None and month is not None:
            return PeriodSpec.for_month(year, month)
        if start_date is not None and end_date is not None:
            return PeriodSpec.between(start_date, end_date)
        if period is None or period == "all":
            return PeriodSpec.all_time()
        if period.isdigit():
            return PeriodSpec.last_days(int(period))
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.errors(include_url=False, include_context=False),
        )
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="period must be 'all' or a number of days",
    )
