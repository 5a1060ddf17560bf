from datetime import date
from decimal import Decimal

from affiliate_ops.engine import PeriodSpec
from affiliate_ops.services.reports import ReportService, percentage


def test_percentage_handles_zero_denominator():
    assert percentage(5, 0) == 0
    assert percentage(None, None) == 0
    assert percentage(1, 4) == Decimal(25)


def test_totals_over_a_month(db, make_account, add_sales):
    account = make_account("shop_totals")
    add_sales(account, date(2024, 5, 1), 500, 10_000, clicks=200, orders=10)
    add_sales(account, date(2024, 5, 2), 700, 10_000, clicks=200, orders=30)
    add_sales(account, date(2024, 6, 1), 999, 99_999, clicks=1, orders=1)

    report = ReportService(db).sales_report(PeriodSpec.for_month(2024, 5))
    totals = report["totals"]
    assert totals["total_commission"] == Decimal(1_200)
    assert totals["total_revenue"] == Decimal(20_000)
    assert totals["total_orders"] == 40
    assert totals["commission_percentage"] == Decimal(6)
    assert totals["conversion_rate"] == Decimal(10)
    assert [r.date for r in report["rows"]] == [date(2024, 5, 2), date(2024, 5, 1)]


def test_totals_with_no_data_are_zero(db):
    totals = ReportService(db).sales_report(PeriodSpec.all_time())["totals"]
    assert totals["total_revenue"] == 0
    assert totals["commission_percentage"] == 0
    assert totals["conversion_rate"] == 0


def test_sales_report_filters_by_account(db, make_account, add_sales):
    one = make_account("shop_one")
    two = make_account("shop_two")
    add_sales(one, date(2024, 5, 1), 1, 10)
    add_sales(two, date(2024, 5, 1), 2, 20)

    report = ReportService(db).sales_report(PeriodSpec.all_time(), account_id=two.id)
    assert [r.account_id for r in report["rows"]] == [two.id]
    assert report["totals"]["total_revenue"] == Decimal(20)


def test_dashboard(db, make_account, add_sales):
    busy = make_account("shop_busy", payment_data="utamakan")
    make_account("shop_banned", status="violation")
    add_sales(busy, date(2024, 5, 1), 100, 1_000, clicks=10, orders=1)
    add_sales(busy, date(2024, 5, 2), 200, 2_000, clicks=20, orders=2)

    dashboard = ReportService(db).dashboard(PeriodSpec.all_time())
    assert [p["date"] for p in dashboard["daily"]] == [date(2024, 5, 1), date(2024, 5, 2)]
    assert dashboard["daily"][1]["revenue"] == Decimal(2_000)
    assert dashboard["account_status"] == {"active": 1, "violation": 1, "inactive": 0}
    assert dashboard["payment_data"]["utamakan"] == 1
    assert dashboard["payment_data"]["belum diatur"] == 1
    assert dashboard["payment_data"]["sah"] == 0
    assert [a.username for a in dashboard["priority_accounts"]] == ["shop_busy"]


def test_team_stats(db, make_account, make_user, add_sales):
    one = make_account("shop_b")
    two = make_account("shop_a")
    make_user("Ayu", accounts=[one, two])
    make_user("Budi")
    add_sales(one, date(2024, 5, 1), 100, 1_000, orders=3)

    stats = ReportService(db).team_stats(PeriodSpec.all_time())
    assert [s["name"] for s in stats] == ["Ayu", "Budi"]
    ayu = stats[0]
    assert ayu["managed_accounts_count"] == 2
    assert [a["username"] for a in ayu["accounts"]] == ["shop_a", "shop_b"]
    assert ayu["total_revenue"] == Decimal(1_000)
    assert ayu["accounts"][1]["total_orders"] == 3
    assert stats[1]["accounts"] == []
