from datetime import date

import pytest

from journal_analytics.filters import filter_records
from journal_analytics.metrics.balance import (
    DEFAULT_STARTING_BALANCE,
    MonthlyPL,
    account_balance,
    account_drawdown,
    account_summary,
    chronological_months,
    daily_net_performance,
    day_label,
    drawdown_series,
    equity_curve,
    month_label,
    monthly_pl,
)
from journal_analytics.metrics.summary import compute_trading_stats
from journal_analytics.models import DateRange

from tests.conftest import make_deposit, make_trade, make_withdrawal


def test_balance_of_all_accounts(journal_records):
    # Deposits 7,000, withdrawal 1,000, trading net +9.
    assert account_balance(journal_records) == pytest.approx(DEFAULT_STARTING_BALANCE + 7000 - 1000 + 9)


def test_balance_for_one_account(journal_records):
    assert account_balance(journal_records, account="Account 2") == pytest.approx(102_000.0)


def test_balance_filter_order_independence(journal_records):
    direct = account_balance(journal_records, account="Account 1")
    prefiltered = account_balance(filter_records(journal_records, account="Account 1"))
    assert direct == prefiltered


def test_withdrawal_sign_is_normalized():
    records = [make_trade(status="Win", gain_loss=10.0), make_withdrawal(50.0)]
    assert account_balance(records, starting_balance=0.0) == pytest.approx(-40.0)


def test_balance_of_empty_input_is_starting_balance():
    assert account_balance([], starting_balance=1234.0) == 1234.0


def test_account_summary(journal_records):
    summary = account_summary(journal_records, account="Account 1", starting_balance=10_000.0)
    assert summary.total_deposits == 5000.0
    assert summary.total_withdrawals == 1000.0
    assert summary.current_balance == pytest.approx(account_balance(journal_records, account="Account 1", starting_balance=10_000.0))
    assert summary.total_gain_loss == pytest.approx(summary.current_balance - 10_000.0)
    assert summary.change_pct == pytest.approx(summary.total_gain_loss / 100.0)


def test_account_summary_with_zero_starting_balance():
    assert account_summary([], starting_balance=0.0).change_pct == 0.0


def test_monthly_pl_buckets_in_first_seen_order():
    records = [
        make_trade(gain_loss=200.0, fees=10.0, date="2025-04-02"),
        make_trade(gain_loss=-50.0, fees=5.0, date="2025-03-15"),
        make_trade(gain_loss=80.0, date="2025-04-20"),
        make_deposit(1000.0, date="2025-03-01"),
    ]
    monthly = monthly_pl(records)
    assert list(monthly) == ["Apr 2025", "Mar 2025"]
    assert monthly["Apr 2025"] == MonthlyPL(gain=270.0, loss=0.0)
    assert monthly["Mar 2025"] == MonthlyPL(gain=0.0, loss=55.0)
    assert chronological_months(monthly) == ["Mar 2025", "Apr 2025"]


def test_chronological_months_across_years():
    monthly = {
        "Jan 2026": MonthlyPL(0.0, 0.0),
        "Dec 2025": MonthlyPL(0.0, 0.0),
        "Feb 2025": MonthlyPL(0.0, 0.0),
    }
    assert chronological_months(monthly) == ["Feb 2025", "Dec 2025", "Jan 2026"]


def test_monthly_pl_sums_to_total_pl(journal_records):
    monthly = monthly_pl(journal_records)
    total = sum(bucket.net for bucket in monthly.values())
    assert total == pytest.approx(compute_trading_stats(journal_records).total_pl)


def test_month_label():
    assert month_label(date(2025, 9, 1)) == "Sep 2025"


def test_daily_net_performance_sorted_by_date():
    records = [
        make_trade(gain_loss=30.0, fees=1.0, date="2025-03-30"),
        make_trade(gain_loss=-10.0, date="2025-03-02"),
        make_trade(gain_loss=5.0, date="2025-03-30"),
        make_deposit(999.0, date="2025-03-02"),
    ]
    series = daily_net_performance(records)
    assert series.labels == ["Mar-02", "Mar-30"]
    assert series.values == pytest.approx([-10.0, 34.0])


def test_daily_net_performance_applies_filters(journal_records):
    series = daily_net_performance(
        journal_records,
        date_range=DateRange("2025-03-01", "2025-03-31"),
        account="Account 1",
    )
    assert series.labels == ["Mar-03", "Mar-04"]
    assert series.values == pytest.approx([295.0, -125.0 + 245.0])


def test_daily_net_performance_sums_to_total_pl(journal_records):
    series = daily_net_performance(journal_records)
    assert sum(series.values) == pytest.approx(compute_trading_stats(journal_records).total_pl)


def test_daily_net_performance_empty():
    series = daily_net_performance([])
    assert series.labels == []
    assert series.values == []


def test_equity_curve_collapses_same_day_points():
    records = [
        make_deposit(1000.0, date="2025-01-01"),
        make_trade(gain_loss=100.0, fees=1.0, date="2025-01-02"),
        make_trade(gain_loss=-50.0, date="2025-01-02"),
        make_withdrawal(200.0, date="2025-01-03"),
    ]
    curve = equity_curve(records, starting_balance=0.0)
    assert [point.date for point in curve] == [date(2025, 1, 1), date(2025, 1, 2), date(2025, 1, 3)]
    assert [point.balance for point in curve] == pytest.approx([1000.0, 1049.0, 849.0])
    assert curve[-1].balance == pytest.approx(account_balance(records, starting_balance=0.0))


def test_daily_labels_carry_year_across_years():
    records = [
        make_trade(gain_loss=10.0, date="2025-03-30"),
        make_trade(gain_loss=20.0, date="2024-03-30"),
    ]
    series = daily_net_performance(records)
    assert series.labels == ["Mar-30-24", "Mar-30-25"]
    assert series.values == pytest.approx([20.0, 10.0])
    assert day_label(date(2025, 1, 5)) == "Jan-05"


def test_drawdown_series_tracks_running_peak():
    records = [
        make_deposit(1000.0, date="2025-02-01"),
        make_trade(gain_loss=-200.0, date="2025-03-01"),
        make_trade(gain_loss=500.0, date="2025-03-02"),
        make_withdrawal(400.0, date="2025-03-03"),
    ]
    summary = account_drawdown(records, starting_balance=0.0)
    assert [point.date for point in summary.points] == [
        point.date for point in equity_curve(records, starting_balance=0.0)
    ]
    assert [point.drawdown for point in summary.points] == pytest.approx([0.0, -200.0, 0.0, -400.0])
    assert [point.drawdown_pct for point in summary.points] == pytest.approx([0.0, -20.0, 0.0, -400 / 1300 * 100])
    assert summary.max_drawdown == pytest.approx(-400.0)
    assert summary.max_drawdown_pct == pytest.approx(-400 / 1300 * 100)


def test_drawdown_is_scoped_to_account(journal_records):
    summary = account_drawdown(journal_records, account="Account 2")
    assert summary.max_drawdown == 0.0
    assert summary.max_drawdown_pct == 0.0
    assert len(summary.points) == 2


def test_drawdown_of_empty_curve():
    summary = drawdown_series([])
    assert summary.points == []
    assert summary.max_drawdown == 0.0
    assert summary.max_drawdown_pct == 0.0
