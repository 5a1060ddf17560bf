from datetime import date
from decimal import Decimal

from affiliate_ops.engine import Account
from affiliate_ops.engine.grouping import count_managed_accounts, group_by_account, records_for_accounts
from affiliate_ops.engine.qualification import qualify_accounts
from affiliate_ops.engine.rates import blended_rate, sum_totals
from engine_helpers import make_rule, record


DAY = date(2024, 5, 10)


def test_records_for_accounts_keeps_only_managed():
    records = [record("a1", DAY, 1, 10), record("a2", DAY, 2, 20), record("a3", DAY, 3, 30)]
    kept = records_for_accounts(records, ["a1", "a3"])
    assert [r.account_id for r in kept] == ["a1", "a3"]
    assert records_for_accounts(records, []) == []


def test_group_by_account_preserves_first_seen_order():
    records = [record("b", DAY, 1, 10), record("a", DAY, 1, 10), record("b", date(2024, 5, 11), 1, 10)]
    groups = group_by_account(records)
    assert list(groups) == ["b", "a"]
    assert len(groups["b"]) == 2


def test_count_managed_accounts_ignores_unknown_ids():
    accounts = [Account(id="a1"), Account(id="a2")]
    assert count_managed_accounts(accounts, ["a1", "ghost"]) == 1
    assert count_managed_accounts(accounts, []) == 0


def test_sum_totals_and_blended_rate():
    commission, revenue = sum_totals([record("a", DAY, 300, 5_000), record("a", DAY, 200, 5_000)])
    assert (commission, revenue) == (Decimal(500), Decimal(10_000))
    assert blended_rate(commission, revenue) == Decimal(5)


def test_blended_rate_is_zero_without_revenue():
    assert blended_rate(Decimal(100), Decimal(0)) == 0


def test_accounts_below_floor_are_dropped():
    rule = make_rule(floor=50_000)
    grouped = group_by_account([
        record("big", DAY, 30_000, 400_000),
        record("big", date(2024, 5, 11), 25_000, 400_000),
        record("small", DAY, 49_999, 1_000_000),
    ])
    result = qualify_accounts(rule, grouped)
    assert result.account_ids == ["big"]
    assert result.total_commission == Decimal(55_000)
    assert result.total_revenue == Decimal(800_000)


def test_floor_is_inclusive():
    result = qualify_accounts(make_rule(floor=50_000), group_by_account([record("a", DAY, 50_000, 1)]))
    assert result.account_ids == ["a"]


def test_no_rule_keeps_everything():
    grouped = group_by_account([record("a", DAY, 1, 10), record("b", DAY, 2, 20)])
    result = qualify_accounts(None, grouped)
    assert result.account_ids == ["a", "b"]
    assert result.total_revenue == Decimal(30)


def test_raising_the_floor_never_adds_accounts():
    grouped = group_by_account([
        record("a", DAY, 10_000, 1), record("b", DAY, 60_000, 1), record("c", DAY, 120_000, 1),
    ])
    previous = None
    for floor in (0, 10_000, 60_000, 100_000, 500_000):
        kept = set(qualify_accounts(make_rule(floor=floor), grouped).account_ids)
        if previous is not None:
            assert kept <= previous
        previous = kept
    assert previous == set()


def test_adding_sales_never_removes_a_qualifying_account():
    rule = make_rule(floor=50_000)
    records = [record("a", DAY, 60_000, 1_000), record("b", DAY, 20_000, 1_000)]
    before = set(qualify_accounts(rule, group_by_account(records)).account_ids)

    for extra in (record("a", date(2024, 5, 11), 0, 0), record("b", date(2024, 5, 11), 35_000, 500)):
        records = records + [extra]
        after = set(qualify_accounts(rule, group_by_account(records)).account_ids)
        assert before <= after
        before = after
    assert before == {"a", "b"}
