from datetime import date
from decimal import Decimal

import pytest

from affiliate_ops.engine import (
    Account,
    IncentiveInputError,
    PeriodSpec,
    TargetUser,
    TierState,
    calculate_incentive,
    calculate_incentives,
)
from engine_helpers import TODAY, make_rule, record


def snapshot(records, managed=("a1",), rules=None, period=None, accounts=None):
    return {
        "accounts": accounts if accounts is not None else [Account(id=a) for a in managed],
        "sales_records": records,
        "rules": rules if rules is not None else [make_rule()],
        "target_user": TargetUser(id="u1", name="Ayu", managed_account_ids=managed),
        "period": period or PeriodSpec.all_time(),
        "today": TODAY,
    }


def test_single_account_lands_in_first_tier():
    calc = calculate_incentive(snapshot([record("a1", date(2024, 5, 3), 5_100_000, 85_000_000)]))
    assert calc.applicable_rule.id == "r1"
    assert calc.status == TierState.TIERED
    assert calc.current_tier.revenue_threshold == Decimal(80_000_000)
    assert calc.next_tier.revenue_threshold == Decimal(90_000_000)
    assert calc.incentive_amount == Decimal(340_000)
    assert calc.progress_percentage == Decimal(50)
    assert calc.remaining_to_next_tier == Decimal(5_000_000)
    assert calc.qualifying_accounts_count == 1
    assert calc.managed_accounts_count == 1


def test_rate_outside_every_band_means_no_rule():
    calc = calculate_incentive(snapshot([record("a1", date(2024, 5, 3), 60_000, 85_000_000)]))
    assert calc.commission_rate < Decimal("0.08")
    assert calc.applicable_rule is None
    assert calc.status is None
    assert calc.incentive_amount == 0
    assert calc.qualifying_accounts_count == 0
    # unfiltered totals are still reported
    assert calc.total_revenue == Decimal(85_000_000)


def test_user_without_accounts_gets_zero_result():
    calc = calculate_incentive(snapshot([record("a1", date(2024, 5, 3), 5_100_000, 85_000_000)], managed=()))
    assert calc.managed_accounts_count == 0
    assert calc.total_revenue == 0
    assert calc.total_commission == 0
    assert calc.commission_rate == 0
    assert calc.applicable_rule is None
    assert calc.incentive_amount == 0


def test_rate_uses_all_accounts_but_tier_uses_qualifying_only():
    records = [
        record("a1", date(2024, 5, 3), 5_000_000, 84_000_000),
        record("a2", date(2024, 5, 3), 40_000, 1_000_000),
    ]
    calc = calculate_incentive(snapshot(records, managed=("a1", "a2")))
    assert calc.commission_rate == Decimal(5_040_000) / Decimal(85_000_000) * 100
    assert calc.qualifying_accounts_count == 1
    assert calc.total_revenue == Decimal(84_000_000)
    assert calc.incentive_amount == Decimal(84_000_000) * Decimal("0.4") / 100


def test_period_filter_runs_before_aggregation():
    records = [
        record("a1", date(2024, 4, 30), 5_100_000, 85_000_000),
        record("a1", date(2024, 5, 2), 1_000_000, 20_000_000),
    ]
    calc = calculate_incentive(snapshot(records, period=PeriodSpec.for_month(2024, 5)))
    assert calc.total_revenue == Decimal(20_000_000)
    assert calc.status == TierState.LOCKED
    assert calc.remaining_to_next_tier == Decimal(60_000_000)
    assert calc.progress_percentage == Decimal(25)


def test_open_ended_rule_catches_high_rates():
    high = make_rule(rule_id="high", rate_min=8, rate_max=100, base=1_000_000, tiers=((1_000_000, "1"),))
    calc = calculate_incentive(snapshot(
        [record("a1", date(2024, 5, 3), 900_000, 1_000_000)], rules=[make_rule(), high],
    ))
    assert calc.commission_rate == Decimal(90)
    assert calc.applicable_rule.id == "high"
    assert calc.status == TierState.MAXED
    assert calc.incentive_amount == Decimal(10_000)


def test_same_snapshot_gives_same_result():
    data = snapshot([record("a1", date(2024, 5, 3), 5_100_000, 85_000_000)])
    assert calculate_incentive(data) == calculate_incentive(data)


def test_dict_input_is_validated():
    calc = calculate_incentive({
        "sales_records": [{
            "account_id": "a1", "date": "2024-05-03",
            "gross_commission": "5100000", "total_purchases": "85000000",
        }],
        "rules": [make_rule().model_dump()],
        "target_user": {"id": "u1", "name": "Ayu", "managed_account_ids": ["a1"]},
    })
    assert calc.incentive_amount == Decimal(340_000)


def test_missing_target_user_is_rejected():
    with pytest.raises(IncentiveInputError):
        calculate_incentive({"sales_records": [], "rules": []})


def test_negative_money_is_rejected():
    with pytest.raises(IncentiveInputError):
        calculate_incentives(
            accounts=[],
            sales_records=[{"account_id": "a1", "date": "2024-05-03", "gross_commission": "-1", "total_purchases": "1"}],
            rules=[],
            users=[],
        )


def test_calculate_incentives_keeps_user_order():
    records = [
        record("a1", date(2024, 5, 3), 5_100_000, 85_000_000),
        record("a2", date(2024, 5, 3), 10, 100),
    ]
    users = [
        {"id": "u2", "name": "Budi", "managed_account_ids": ["a2"]},
        {"id": "u1", "name": "Ayu", "managed_account_ids": ["a1"]},
    ]
    results = calculate_incentives(
        accounts=[{"id": "a1"}, {"id": "a2"}],
        sales_records=records,
        rules=[make_rule()],
        users=users,
        period=PeriodSpec.last_days(30),
        today=TODAY,
    )
    assert [r.user_id for r in results] == ["u2", "u1"]
    assert results[1].incentive_amount == Decimal(340_000)
    assert results[0].applicable_rule is None


@pytest.mark.parametrize("revenue", [0, 1, 40_000_000, 79_999_999, 80_000_000, 89_999_999, 95_000_000, 500_000_000])
def test_progress_stays_within_bounds(revenue):
    commission = Decimal(revenue) * Decimal("0.06")
    calc = calculate_incentive(snapshot([record("a1", date(2024, 5, 3), commission, revenue)]))
    assert 0 <= calc.progress_percentage <= 100
    assert calc.remaining_to_next_tier >= 0


def test_user_without_accounts_gets_no_rule_even_from_open_band():
    catch_all = make_rule(rate_min=0, rate_max=100, base=0, tiers=((0, "1"),))
    calc = calculate_incentive(snapshot(
        [record("a1", date(2024, 5, 3), 5_100_000, 85_000_000)], managed=(), rules=[catch_all],
    ))
    assert calc.applicable_rule is None
    assert calc.status is None
    assert calc.current_tier is None
    assert calc.incentive_amount == 0
    assert calc.managed_accounts_count == 0


def test_losing_the_only_qualifying_account_drops_revenue_to_zero():
    big = record("a1", date(2024, 5, 3), 5_000_000, 84_000_000)
    small = record("a2", date(2024, 5, 3), 40_000, 600_000)

    before = calculate_incentive(snapshot([big, small], managed=("a1", "a2")))
    assert before.qualifying_accounts_count == 1
    assert before.current_tier.revenue_threshold == Decimal(80_000_000)

    after = calculate_incentive(snapshot([small], managed=("a1", "a2")))
    assert after.applicable_rule.id == "r1"
    assert after.qualifying_accounts_count == 0
    assert after.total_revenue == 0
    assert after.current_tier is None
    assert after.incentive_amount == 0
    assert after.status == TierState.LOCKED
