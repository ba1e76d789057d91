from __future__ import annotations

import calendar as _calendar
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from journal_analytics.filters import chronological, trade_records
from journal_analytics.models import STATUS_WIN, TradeRecord


@dataclass(frozen=True)
class DayStats:
    date: date
    trade_count: int
    total_pl: float
    win_rate: float


@dataclass(frozen=True)
class MonthStats:
    total_pl: float
    trading_days: int


@dataclass(frozen=True)
class WeekStats:
    week_number: int
    start: date
    end: date
    total_pl: float
    days: int
    trading_days: int


def day_stats(records: Iterable[TradeRecord], day: date) -> DayStats:
    trades = [trade for trade_day, trade in _dated(records) if trade_day == day]
    return _summarize_day(day, trades)


def month_stats(records: Iterable[TradeRecord], year: int, month: int) -> MonthStats:
    total_pl = 0.0
    days: set[date] = set()
    for day, trade in _dated(records):
        if day.year == year and day.month == month:
            total_pl += trade.net_pnl
            days.add(day)
    return MonthStats(total_pl=total_pl, trading_days=len(days))


def daily_stats_for_month(records: Iterable[TradeRecord], year: int, month: int) -> list[DayStats]:
    by_day: dict[date, list[TradeRecord]] = {}
    for day, trade in _dated(records):
        if day.year == year and day.month == month:
            by_day.setdefault(day, []).append(trade)
    _, days_in_month = _calendar.monthrange(year, month)
    output = []
    for number in range(1, days_in_month + 1):
        day = date(year, month, number)
        output.append(_summarize_day(day, by_day.get(day, [])))
    return output


def weekly_stats(records: Iterable[TradeRecord], year: int, month: int) -> list[WeekStats]:
    """Monday-first weeks of the month. The first and last weeks may be partial."""
    days = daily_stats_for_month(records, year, month)
    offset = days[0].date.weekday()
    weeks = []
    for index in range(0, offset + len(days), 7):
        chunk = days[max(0, index - offset) : index - offset + 7]
        weeks.append(
            WeekStats(
                week_number=len(weeks) + 1,
                start=chunk[0].date,
                end=chunk[-1].date,
                total_pl=sum(day.total_pl for day in chunk),
                days=len(chunk),
                trading_days=sum(1 for day in chunk if day.trade_count),
            )
        )
    return weeks


def _summarize_day(day: date, trades: list[TradeRecord]) -> DayStats:
    count = len(trades)
    wins = sum(1 for trade in trades if trade.status == STATUS_WIN)
    return DayStats(
        date=day,
        trade_count=count,
        total_pl=sum(trade.net_pnl for trade in trades),
        win_rate=wins / count * 100.0 if count else 0.0,
    )


def _dated(records: Iterable[TradeRecord]) -> list[tuple[date, TradeRecord]]:
    return chronological(trade_records(records))
