from pydantic import BaseModel
from typing import Dict, List
from datetime import date
from decimal import Decimal
from affiliate_ops.schemas.account import Account
from affiliate_ops.schemas.sales import SalesData


class SalesTotals(BaseModel):
    total_commission: Decimal = Decimal("0")
    total_revenue: Decimal = Decimal("0")
    total_orders: int = 0
    total_clicks: int = 0
    total_products_sold: int = 0
    total_new_buyers: int = 0
    commission_percentage: Decimal = Decimal("0")
    conversion_rate: Decimal = Decimal("0")


class DailyPoint(BaseModel):
    date: date
    commission: Decimal = Decimal("0")
    revenue: Decimal = Decimal("0")
    orders: int = 0
    clicks: int = 0


class DashboardMetrics(BaseModel):
    totals: SalesTotals
    daily: List[DailyPoint] = []
    account_status: Dict[str, int] = {}
    payment_data: Dict[str, int] = {}
    priority_accounts: List[Account] = []


class SalesReport(BaseModel):
    totals: SalesTotals
    rows: List[SalesData] = []


class ManagedAccountStats(BaseModel):
    account_id: str
    username: str
    status: str
    total_commission: Decimal = Decimal("0")
    total_revenue: Decimal = Decimal("0")
    total_orders: int = 0


class TeamMemberStats(BaseModel):
    user_id: str
    name: str
    role: str
    managed_accounts_count: int = 0
    total_commission: Decimal = Decimal("0")
    total_revenue: Decimal = Decimal("0")
    accounts: List[ManagedAccountStats] = []
