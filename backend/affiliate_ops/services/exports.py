"""CSV exports of incentive calculations and sales reports."""
import calendar
import csv
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

import pandas as pd

from affiliate_ops.core.config import settings
from affiliate_ops.engine import IncentiveCalculation, PeriodKind, PeriodSpec
from affiliate_ops.models.sales import SalesData


def incentive_headers() -> List[str]:
    currency = settings.CURRENCY_CODE
    return [
        "User Name",
        "Managed Accounts",
        f"Total Revenue ({currency})",
        f"Total Commission ({currency})",
        "Commission Rate (%)",
        f"Incentive Amount ({currency})",
        "Applied Rule",
        "Current Tier Rate (%)",
        "Progress to Next Tier (%)",
        f"Remaining to Next Tier ({currency})",
    ]


def sales_report_headers() -> List[str]:
    currency = settings.CURRENCY_CODE
    return [
        "Date",
        "Account",
        "Clicks",
        "Orders",
        f"Gross Commission ({currency})",
        "Products Sold",
        f"Total Purchases ({currency})",
        "New Buyers",
    ]


def plain_number(value) -> str:
    """Render a number without exponent or trailing zeros (85000000.00 -> 85000000)."""
    if value is None:
        return "0"
    value = Decimal(str(value))
    if value == value.to_integral_value():
        return str(value.quantize(Decimal("1")))
    return format(value.normalize(), "f")


def incentive_rows(calculations: Iterable[IncentiveCalculation]) -> List[List[str]]:
    rows = []
    for calc in calculations:
        rows.append([
            calc.user_name,
            str(calc.managed_accounts_count),
            plain_number(calc.total_revenue),
            plain_number(calc.total_commission),
            f"{calc.commission_rate:.2f}",
            plain_number(calc.incentive_amount),
            calc.applicable_rule.name if calc.applicable_rule else "No Rule Applied",
            plain_number(calc.current_tier.incentive_rate) if calc.current_tier else "0",
            f"{calc.progress_percentage:.1f}",
            plain_number(calc.remaining_to_next_tier),
        ])
    return rows


def incentive_csv(calculations: Iterable[IncentiveCalculation]) -> str:
    """Every cell quoted, fixed column order."""
    df = pd.DataFrame(incentive_rows(calculations), columns=incentive_headers())
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def incentive_export_filename(period: PeriodSpec, today: Optional[date] = None) -> str:
    today = today or date.today()
    filename = "incentive-overview"
    if period.kind == PeriodKind.MONTH:
        filename += f"-{calendar.month_name[period.month]}-{period.year}"
    elif period.kind == PeriodKind.DAYS:
        filename += f"-last-{period.preset_days}-days"
    elif period.kind == PeriodKind.RANGE:
        filename += f"-{period.start.isoformat()}-to-{period.end.isoformat()}"
    else:
        filename += "-all-time"
    return f"{filename}-{today.isoformat()}.csv"


def sales_report_csv(rows: Iterable[SalesData]) -> str:
    data = [
        [
            row.date.isoformat(),
            row.account.username if row.account else "Unknown",
            row.clicks,
            row.orders,
            plain_number(row.gross_commission),
            row.products_sold,
            plain_number(row.total_purchases),
            row.new_buyers,
        ]
        for row in rows
    ]
    df = pd.DataFrame(data, columns=sales_report_headers())
    return df.to_csv(index=False, lineterminator="\n")


def sales_report_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"sales-report-{today.isoformat()}.csv"
