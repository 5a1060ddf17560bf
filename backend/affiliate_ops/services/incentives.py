"""Incentive service: feeds database snapshots to the incentive engine.

The engine never touches the database. This service loads accounts, sales
rows, rules and team members once per request, converts them to the
engine's frozen value objects and asks the engine for the calculations.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from affiliate_ops import engine as incentive_engine
from affiliate_ops.engine import IncentiveCalculation, PeriodSpec
from affiliate_ops.models.account import Account
from affiliate_ops.models.incentive import IncentiveRule, IncentiveTier
from affiliate_ops.models.sales import SalesData
from affiliate_ops.models.user import User, UserRole
from affiliate_ops.services.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class IncentiveService:
    def __init__(self, db: Session):
        self.db = db

    # ── Snapshot loading ─────────────────────────────────────────────────────

    def _load_sales(self, period: PeriodSpec, today: Optional[date]) -> List[incentive_engine.SalesRecord]:
        start, end = incentive_engine.period_bounds(period, today)
        query = self.db.query(SalesData)
        if start is not None:
            query = query.filter(SalesData.date >= start)
        if end is not None:
            query = query.filter(SalesData.date <= end)
        return [incentive_engine.SalesRecord.model_validate(s) for s in query.all()]

    def _load_rules(self) -> List[incentive_engine.IncentiveRule]:
        # With overlapping bands the first rule in this order wins
        rules = (
            self.db.query(IncentiveRule)
            .options(selectinload(IncentiveRule.tiers))
            .order_by(IncentiveRule.priority, IncentiveRule.created_at, IncentiveRule.id)
            .all()
        )
        return [incentive_engine.IncentiveRule.model_validate(r) for r in rules]

    def _load_users(self, user_id: Optional[str] = None) -> List[incentive_engine.TargetUser]:
        query = self.db.query(User).options(selectinload(User.managed_accounts))
        if user_id:
            query = query.filter(User.id == user_id)
        else:
            query = query.filter(User.role == UserRole.USER.value)
        users = query.order_by(User.name).all()
        if user_id and not users:
            raise NotFoundError(f"User {user_id} not found")
        return [incentive_engine.TargetUser.model_validate(u) for u in users]

    def _load_accounts(self) -> List[incentive_engine.Account]:
        return [incentive_engine.Account.model_validate(a) for a in self.db.query(Account).all()]

    # ── Calculations ─────────────────────────────────────────────────────────

    def calculate(
        self,
        period: Optional[PeriodSpec] = None,
        today: Optional[date] = None,
        user_id: Optional[str] = None,
    ) -> List[IncentiveCalculation]:
        """Calculate incentives for every regular user, or only ``user_id``."""
        period = period or PeriodSpec.all_time()
        users = self._load_users(user_id)
        calculations = incentive_engine.calculate_incentives(
            accounts=self._load_accounts(),
            sales_records=self._load_sales(period, today),
            rules=self._load_rules(),
            users=users,
            period=period,
            today=today,
        )
        logger.info(
            "Calculated incentives for %d users (period=%s)", len(calculations), period.kind.value
        )
        return calculations

    @staticmethod
    def summarize(calculations: List[IncentiveCalculation]) -> Dict:
        return {
            "total_incentives": sum((c.incentive_amount for c in calculations), Decimal("0")),
            "total_revenue": sum((c.total_revenue for c in calculations), Decimal("0")),
            "active_users": sum(1 for c in calculations if c.managed_accounts_count > 0),
            "qualified_users": sum(1 for c in calculations if c.incentive_amount > 0),
            "user_count": len(calculations),
        }

    def period_options(self, year: Optional[int] = None) -> Dict:
        """Years with sales data, and the months with data in ``year``."""
        records = [
            incentive_engine.SalesRecord.model_validate(s) for s in self.db.query(SalesData).all()
        ]
        years = incentive_engine.available_years(records)
        months = incentive_engine.available_months(records, year) if year else []
        return {"years": years, "months": months}

    # ── Rule management ──────────────────────────────────────────────────────

    def get_rule(self, rule_id: str) -> IncentiveRule:
        rule = self.db.query(IncentiveRule).filter(IncentiveRule.id == rule_id).first()
        if not rule:
            raise NotFoundError(f"Incentive rule {rule_id} not found")
        return rule

    def list_rules(self) -> List[IncentiveRule]:
        return (
            self.db.query(IncentiveRule)
            .options(selectinload(IncentiveRule.tiers))
            .order_by(IncentiveRule.priority, IncentiveRule.created_at, IncentiveRule.id)
            .all()
        )

    def create_rule(self, data: Dict) -> IncentiveRule:
        tiers = data.pop("tiers", []) or []
        rule = IncentiveRule(**data)
        rule.tiers = [IncentiveTier(**tier) for tier in tiers]
        self.db.add(rule)
        self.db.commit()
        self.db.refresh(rule)
        logger.info("Created incentive rule %s (%s) with %d tiers", rule.id, rule.name, len(rule.tiers))
        return rule

    def update_rule(self, rule_id: str, updates: Dict) -> IncentiveRule:
        rule = self.get_rule(rule_id)
        tiers = updates.pop("tiers", None)
        for field, value in updates.items():
            setattr(rule, field, value)
        if rule.commission_rate_min > rule.commission_rate_max:
            self.db.rollback()
            raise ValueError("commission_rate_min must not exceed commission_rate_max")
        if tiers is not None:
            # Replace the whole ladder
            rule.tiers = [IncentiveTier(**tier) for tier in tiers]
        self.db.commit()
        self.db.refresh(rule)
        return rule

    def delete_rule(self, rule_id: str) -> None:
        rule = self.get_rule(rule_id)
        self.db.delete(rule)
        self.db.commit()
        logger.info("Deleted incentive rule %s", rule_id)
