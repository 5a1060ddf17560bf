"""Dashboard and sales-report aggregates over a reporting period."""
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from affiliate_ops.engine import PeriodSpec, period_bounds
from affiliate_ops.models.account import Account, AccountStatus, PaymentDataStatus
from affiliate_ops.models.sales import SalesData
from affiliate_ops.models.user import User

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def percentage(numerator, denominator) -> Decimal:
    """numerator / denominator * 100, or 0 when the denominator is 0."""
    numerator = Decimal(numerator or 0)
    denominator = Decimal(denominator or 0)
    if denominator > 0:
        return numerator / denominator * 100
    return ZERO


class ReportService:
    def __init__(self, db: Session):
        self.db = db

    def _period_filters(self, period: PeriodSpec, today: Optional[date]) -> List:
        start, end = period_bounds(period, today)
        filters = []
        if start is not None:
            filters.append(SalesData.date >= start)
        if end is not None:
            filters.append(SalesData.date <= end)
        return filters

    def totals(self, filters: List) -> Dict:
        row = self.db.query(
            func.coalesce(func.sum(SalesData.gross_commission), 0),
            func.coalesce(func.sum(SalesData.total_purchases), 0),
            func.coalesce(func.sum(SalesData.orders), 0),
            func.coalesce(func.sum(SalesData.clicks), 0),
            func.coalesce(func.sum(SalesData.products_sold), 0),
            func.coalesce(func.sum(SalesData.new_buyers), 0),
        ).filter(*filters).one()

        commission, revenue, orders, clicks, products_sold, new_buyers = row
        commission = Decimal(str(commission))
        revenue = Decimal(str(revenue))
        return {
            "total_commission": commission,
            "total_revenue": revenue,
            "total_orders": int(orders),
            "total_clicks": int(clicks),
            "total_products_sold": int(products_sold),
            "total_new_buyers": int(new_buyers),
            "commission_percentage": percentage(commission, revenue),
            "conversion_rate": percentage(orders, clicks),
        }

    def dashboard(self, period: PeriodSpec, today: Optional[date] = None) -> Dict:
        filters = self._period_filters(period, today)

        daily_rows = (
            self.db.query(
                SalesData.date,
                func.sum(SalesData.gross_commission),
                func.sum(SalesData.total_purchases),
                func.sum(SalesData.orders),
                func.sum(SalesData.clicks),
            )
            .filter(*filters)
            .group_by(SalesData.date)
            .order_by(SalesData.date)
            .all()
        )
        daily = [
            {
                "date": day,
                "commission": Decimal(str(commission or 0)),
                "revenue": Decimal(str(revenue or 0)),
                "orders": int(orders or 0),
                "clicks": int(clicks or 0),
            }
            for day, commission, revenue, orders, clicks in daily_rows
        ]

        # Every known state is reported, zero counts included
        account_status = {s.value: 0 for s in AccountStatus}
        for status, count in self.db.query(Account.status, func.count(Account.id)).group_by(Account.status):
            account_status[status] = count

        payment_data = {p.value: 0 for p in PaymentDataStatus}
        for state, count in self.db.query(Account.payment_data, func.count(Account.id)).group_by(Account.payment_data):
            payment_data[state] = count

        priority_accounts = (
            self.db.query(Account)
            .filter(Account.payment_data == PaymentDataStatus.UTAMAKAN.value)
            .order_by(Account.username)
            .all()
        )

        return {
            "totals": self.totals(filters),
            "daily": daily,
            "account_status": account_status,
            "payment_data": payment_data,
            "priority_accounts": priority_accounts,
        }

    def sales_rows(
        self,
        period: PeriodSpec,
        account_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> List[SalesData]:
        """Sales rows in the period, newest first."""
        filters = self._period_filters(period, today)
        if account_id:
            filters.append(SalesData.account_id == account_id)
        return (
            self.db.query(SalesData)
            .options(selectinload(SalesData.account))
            .filter(*filters)
            .order_by(SalesData.date.desc(), SalesData.account_id)
            .all()
        )

    def sales_report(
        self,
        period: PeriodSpec,
        account_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Dict:
        filters = self._period_filters(period, today)
        if account_id:
            filters.append(SalesData.account_id == account_id)
        return {
            "totals": self.totals(filters),
            "rows": self.sales_rows(period, account_id, today),
        }

    def team_stats(self, period: PeriodSpec, today: Optional[date] = None) -> List[Dict]:
        """Per team member: managed accounts and their totals in the period."""
        filters = self._period_filters(period, today)
        per_account = {
            account_id: (Decimal(str(commission or 0)), Decimal(str(revenue or 0)), int(orders or 0))
            for account_id, commission, revenue, orders in (
                self.db.query(
                    SalesData.account_id,
                    func.sum(SalesData.gross_commission),
                    func.sum(SalesData.total_purchases),
                    func.sum(SalesData.orders),
                )
                .filter(*filters)
                .group_by(SalesData.account_id)
                .all()
            )
        }

        users = self.db.query(User).options(selectinload(User.managed_accounts)).order_by(User.name).all()
        stats = []
        for user in users:
            accounts = []
            for account in sorted(user.managed_accounts, key=lambda a: a.username):
                commission, revenue, orders = per_account.get(account.id, (ZERO, ZERO, 0))
                accounts.append({
                    "account_id": account.id,
                    "username": account.username,
                    "status": account.status,
                    "total_commission": commission,
                    "total_revenue": revenue,
                    "total_orders": orders,
                })
            stats.append({
                "user_id": user.id,
                "name": user.name,
                "role": user.role,
                "managed_accounts_count": len(accounts),
                "total_commission": sum((a["total_commission"] for a in accounts), ZERO),
                "total_revenue": sum((a["total_revenue"] for a in accounts), ZERO),
                "accounts": accounts,
            })
        return stats
