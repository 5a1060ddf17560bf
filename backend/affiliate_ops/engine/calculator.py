"""Incentive calculation pipeline.

Stages run strictly in order for each user:

1. period filter       - keep records inside the reporting window
2. account grouping    - keep the user's managed accounts, grouped per account
3. rate aggregator     - blended commission rate over *all* of those accounts
4. rule selector       - first active rule whose rate band holds that rate
5. qualification       - drop accounts below the rule's per-account commission floor
6. tier resolver       - tier, incentive and progress from qualifying revenue

Usage:
    calc = calculate_incentive({
        "accounts": accounts,
        "sales_records": records,
        "rules": rules,
        "target_user": {"id": "u1", "name": "Ayu", "managed_account_ids": ["a1"]},
        "period": PeriodSpec.for_month(2024, 5),
    })

Degenerate input (no records, no managed accounts, no matching rule) yields a
zero-valued result. Missing or ill-typed fields raise IncentiveInputError.
"""
import logging
from datetime import date
from typing import Any, Iterable, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from affiliate_ops.engine.errors import IncentiveInputError
from affiliate_ops.engine.grouping import count_managed_accounts, group_by_account, records_for_accounts
from affiliate_ops.engine.period import filter_by_period
from affiliate_ops.engine.qualification import qualify_accounts
from affiliate_ops.engine.rates import ZERO, blended_rate, sum_totals
from affiliate_ops.engine.rules import select_rule
from affiliate_ops.engine.tiers import resolve_tier
from affiliate_ops.engine.types import (
    Account,
    IncentiveCalculation,
    IncentiveInput,
    IncentiveRule,
    PeriodSpec,
    SalesRecord,
    TargetUser,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce(model: Type[ModelT], value: Any) -> ModelT:
    if isinstance(value, model):
        return value
    try:
        if isinstance(value, dict):
            return model.model_validate(value)
        return model.model_validate(value, from_attributes=True)
    except ValidationError as e:
        raise IncentiveInputError(f"Invalid {model.__name__}: {e}") from e


def _coerce_all(model: Type[ModelT], values: Optional[Iterable[Any]]) -> List[ModelT]:
    return [_coerce(model, v) for v in (values or [])]


def _calculate_for_user(
    user: TargetUser,
    accounts: Sequence[Account],
    records: Sequence[SalesRecord],
    rules: Sequence[IncentiveRule],
) -> IncentiveCalculation:
    """Stages 2-6 for one user over already period-filtered records."""
    if not user.managed_account_ids:
        # No managed accounts, so no rule applies
        return IncentiveCalculation(
            user_id=user.id,
            user_name=user.name,
            total_revenue=ZERO,
            total_commission=ZERO,
            commission_rate=ZERO,
        )

    user_records = records_for_accounts(records, user.managed_account_ids)

    all_commission, all_revenue = sum_totals(user_records)
    rate = blended_rate(all_commission, all_revenue)
    rule = select_rule(rate, rules)

    qualified = qualify_accounts(rule, group_by_account(user_records))
    resolution = resolve_tier(rule, qualified.total_revenue)

    return IncentiveCalculation(
        user_id=user.id,
        user_name=user.name,
        total_revenue=qualified.total_revenue,
        total_commission=qualified.total_commission,
        commission_rate=rate,
        applicable_rule=rule,
        current_tier=resolution.current_tier,
        next_tier=resolution.next_tier,
        incentive_amount=resolution.incentive_amount,
        progress_percentage=resolution.progress_percentage,
        remaining_to_next_tier=resolution.remaining_to_next_tier,
        managed_accounts_count=count_managed_accounts(accounts, user.managed_account_ids),
        qualifying_accounts_count=len(qualified.account_ids) if rule is not None else 0,
        status=resolution.state,
    )


def calculate_incentive(data: Any) -> IncentiveCalculation:
    """Run the full pipeline for ``data.target_user``.

    ``data`` is an IncentiveInput or anything that validates into one.
    """
    snapshot = _coerce(IncentiveInput, data)
    records = filter_by_period(snapshot.sales_records, snapshot.period, snapshot.today)
    return _calculate_for_user(snapshot.target_user, snapshot.accounts, records, snapshot.rules)


def calculate_incentives(
    accounts: Iterable[Any],
    sales_records: Iterable[Any],
    rules: Iterable[Any],
    users: Iterable[Any],
    period: Optional[PeriodSpec] = None,
    today: Optional[date] = None,
) -> List[IncentiveCalculation]:
    """Calculate every user in ``users`` against one shared snapshot.

    Results keep the order of ``users``.
    """
    account_list = _coerce_all(Account, accounts)
    record_list = _coerce_all(SalesRecord, sales_records)
    rule_list = _coerce_all(IncentiveRule, rules)
    user_list = _coerce_all(TargetUser, users)
    period = period or PeriodSpec.all_time()

    records = filter_by_period(record_list, period, today)
    logger.debug(
        "Calculating incentives for %d users over %d/%d records (period=%s)",
        len(user_list), len(records), len(record_list), period.kind.value,
    )
    return [_calculate_for_user(user, account_list, records, rule_list) for user in user_list]
