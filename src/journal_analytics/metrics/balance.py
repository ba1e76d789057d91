from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from journal_analytics.filters import chronological, filter_records
from journal_analytics.models import ALL_ACCOUNTS, KIND_TRADE, DateRange, TradeRecord
from journal_analytics.parsing import Invalid, parse_record_date

DEFAULT_STARTING_BALANCE = 100_000.0

MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


@dataclass(frozen=True)
class AccountSummary:
    starting_balance: float
    current_balance: float
    total_gain_loss: float
    change_pct: float
    total_deposits: float
    total_withdrawals: float


@dataclass(frozen=True)
class MonthlyPL:
    gain: float
    loss: float

    @property
    def net(self) -> float:
        return self.gain - self.loss


@dataclass(frozen=True)
class DailySeries:
    labels: list[str]
    values: list[float]


@dataclass(frozen=True)
class EquityPoint:
    date: date
    balance: float


@dataclass(frozen=True)
class DrawdownPoint:
    date: date
    drawdown: float
    drawdown_pct: float


@dataclass(frozen=True)
class DrawdownSummary:
    max_drawdown: float
    max_drawdown_pct: float
    points: list[DrawdownPoint]


def account_balance(
    records: Iterable[TradeRecord],
    *,
    account: str | None = ALL_ACCOUNTS,
    starting_balance: float = DEFAULT_STARTING_BALANCE,
) -> float:
    scoped = filter_records(records, account=account)
    deposits, withdrawals = _cash_totals(scoped)
    trading_pl = sum(record.net_pnl for record in scoped if record.is_trade)
    return starting_balance + deposits - withdrawals + trading_pl


def account_summary(
    records: Iterable[TradeRecord],
    *,
    account: str | None = ALL_ACCOUNTS,
    starting_balance: float = DEFAULT_STARTING_BALANCE,
) -> AccountSummary:
    scoped = filter_records(records, account=account)
    current = account_balance(scoped, starting_balance=starting_balance)
    deposits, withdrawals = _cash_totals(scoped)
    total_gain_loss = current - starting_balance
    change_pct = total_gain_loss / starting_balance * 100.0 if starting_balance else 0.0
    return AccountSummary(
        starting_balance=starting_balance,
        current_balance=current,
        total_gain_loss=total_gain_loss,
        change_pct=change_pct,
        total_deposits=deposits,
        total_withdrawals=withdrawals,
    )


def monthly_pl(records: Iterable[TradeRecord]) -> dict[str, MonthlyPL]:
    """Gain and loss magnitude per ``MMM yyyy`` month, keyed in first-seen order."""
    gains: dict[str, float] = {}
    losses: dict[str, float] = {}
    for day, trade in _dated_trades(records):
        label = month_label(day)
        gains.setdefault(label, 0.0)
        losses.setdefault(label, 0.0)
        net = trade.net_pnl
        if net > 0:
            gains[label] += net
        else:
            losses[label] += abs(net)
    return {label: MonthlyPL(gain=gains[label], loss=losses[label]) for label in gains}


def chronological_months(monthly: dict[str, MonthlyPL]) -> list[str]:
    return sorted(monthly, key=_month_sort_key)


def daily_net_performance(
    records: Iterable[TradeRecord],
    *,
    date_range: DateRange | None = None,
    account: str | None = ALL_ACCOUNTS,
) -> DailySeries:
    scoped = filter_records(records, date_range=date_range, account=account, kind=KIND_TRADE)
    buckets: dict[date, float] = {}
    for day, trade in chronological(scoped):
        buckets[day] = buckets.get(day, 0.0) + trade.net_pnl
    ordered = sorted(buckets.items())
    with_year = len({day.year for day, _ in ordered}) > 1
    return DailySeries(
        labels=[day_label(day, with_year=with_year) for day, _ in ordered],
        values=[value for _, value in ordered],
    )


def equity_curve(
    records: Iterable[TradeRecord],
    *,
    account: str | None = ALL_ACCOUNTS,
    starting_balance: float = DEFAULT_STARTING_BALANCE,
) -> list[EquityPoint]:
    """Running balance after each dated record of the account, one point per day."""
    scoped = filter_records(records, account=account)
    balance = starting_balance
    points: list[EquityPoint] = []
    for day, record in chronological(scoped):
        balance += _balance_effect(record)
        if points and points[-1].date == day:
            points[-1] = EquityPoint(date=day, balance=balance)
        else:
            points.append(EquityPoint(date=day, balance=balance))
    return points


def drawdown_series(
    curve: Iterable[EquityPoint],
    *,
    starting_balance: float = DEFAULT_STARTING_BALANCE,
) -> DrawdownSummary:
    """Distance below the running peak for each equity point, in currency and percent.

    Both figures are zero or negative. The peak starts at ``starting_balance``;
    percentages are 0.0 while the peak is not positive.
    """
    peak = starting_balance
    max_drawdown = 0.0
    max_drawdown_pct = 0.0
    points: list[DrawdownPoint] = []
    for point in curve:
        peak = max(peak, point.balance)
        drawdown = point.balance - peak
        drawdown_pct = drawdown / peak * 100.0 if peak > 0 else 0.0
        points.append(DrawdownPoint(date=point.date, drawdown=drawdown, drawdown_pct=drawdown_pct))
        max_drawdown = min(max_drawdown, drawdown)
        max_drawdown_pct = min(max_drawdown_pct, drawdown_pct)
    return DrawdownSummary(max_drawdown=max_drawdown, max_drawdown_pct=max_drawdown_pct, points=points)


def account_drawdown(
    records: Iterable[TradeRecord],
    *,
    account: str | None = ALL_ACCOUNTS,
    starting_balance: float = DEFAULT_STARTING_BALANCE,
) -> DrawdownSummary:
    curve = equity_curve(records, account=account, starting_balance=starting_balance)
    return drawdown_series(curve, starting_balance=starting_balance)


def month_label(day: date) -> str:
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.year}"


def day_label(day: date, *, with_year: bool = False) -> str:
    """``Mar-02``, or ``Mar-02-25`` when a series spans more than one year."""
    label = f"{MONTH_ABBREVIATIONS[day.month - 1]}-{day.day:02d}"
    if with_year:
        label = f"{label}-{day.year % 100:02d}"
    return label


def _cash_totals(records: list[TradeRecord]) -> tuple[float, float]:
    deposits = sum(record.gain_loss for record in records if record.is_deposit)
    withdrawals = sum(abs(record.gain_loss) for record in records if record.is_withdrawal)
    return deposits, withdrawals


def _balance_effect(record: TradeRecord) -> float:
    if record.is_deposit:
        return record.gain_loss
    if record.is_withdrawal:
        return -abs(record.gain_loss)
    if record.is_trade:
        return record.net_pnl
    return 0.0


def _dated_trades(records: Iterable[TradeRecord]) -> list[tuple[date, TradeRecord]]:
    # Input order, not date order: month keys follow first appearance.
    dated = []
    for record in records:
        if not record.is_trade:
            continue
        result = parse_record_date(record.date)
        if isinstance(result, Invalid):
            continue
        dated.append((result.value, record))
    return dated


def _month_sort_key(label: str) -> tuple[int, int]:
    name, _, year = label.partition(" ")
    try:
        return int(year), MONTH_ABBREVIATIONS.index(name)
    except ValueError:
        return (0, 0)
