from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from journal_analytics.filters import chronological, trade_records
from journal_analytics.metrics.balance import DEFAULT_STARTING_BALANCE
from journal_analytics.models import (
    DIRECTION_LONG,
    DIRECTION_SHORT,
    STATUS_BREAKEVEN,
    STATUS_LOSS,
    STATUS_OPEN,
    STATUS_WIN,
    TradeRecord,
)
from journal_analytics.parsing import Invalid, parse_duration


@dataclass(frozen=True)
class TradingStats:
    total_trades: int
    total_wins: int
    total_losses: int
    total_breakevens: int
    total_open: int
    long_trades: int
    short_trades: int
    win_rate: float
    avg_win: float
    largest_win: float
    longest_win_streak: int
    avg_loss: float
    largest_loss: float
    longest_lose_streak: int
    max_drawdown: float
    avg_time_in_trade_minutes: float
    total_pl: float
    avg_pl: float


@dataclass(frozen=True)
class OutcomeDistribution:
    win_pct: float
    loss_pct: float
    breakeven_pct: float


def compute_trading_stats(
    records: Iterable[TradeRecord],
    *,
    starting_equity: float = DEFAULT_STARTING_BALANCE,
) -> TradingStats:
    trades = trade_records(records)

    wins = [trade for trade in trades if trade.status == STATUS_WIN]
    losses = [trade for trade in trades if trade.status == STATUS_LOSS]
    breakevens = [trade for trade in trades if trade.status == STATUS_BREAKEVEN]
    open_trades = [trade for trade in trades if trade.status == STATUS_OPEN]
    long_trades = [trade for trade in trades if trade.direction == DIRECTION_LONG]
    short_trades = [trade for trade in trades if trade.direction == DIRECTION_SHORT]

    total_trades = len(trades)
    win_rate = 0.0
    if total_trades:
        win_rate = len(wins) / total_trades * 100.0

    win_values = [trade.gain_loss for trade in wins]
    loss_values = [trade.gain_loss for trade in losses]

    avg_win = _mean(win_values)
    largest_win = max(win_values, default=0.0)
    avg_loss = abs(_mean(loss_values))
    largest_loss = abs(min(loss_values, default=0.0))

    ordered = [record for _, record in chronological(trades)]
    longest_win_streak, longest_lose_streak = _max_streaks(ordered)
    max_drawdown = _max_drawdown_pct(ordered, starting_equity)

    total_pl = sum(trade.net_pnl for trade in trades)
    avg_pl = total_pl / total_trades if total_trades else 0.0

    return TradingStats(
        total_trades=total_trades,
        total_wins=len(wins),
        total_losses=len(losses),
        total_breakevens=len(breakevens),
        total_open=len(open_trades),
        long_trades=len(long_trades),
        short_trades=len(short_trades),
        win_rate=win_rate,
        avg_win=avg_win,
        largest_win=largest_win,
        longest_win_streak=longest_win_streak,
        avg_loss=avg_loss,
        largest_loss=largest_loss,
        longest_lose_streak=longest_lose_streak,
        max_drawdown=max_drawdown,
        avg_time_in_trade_minutes=_avg_duration_minutes(trades),
        total_pl=total_pl,
        avg_pl=avg_pl,
    )


def compute_outcome_distribution(records: Iterable[TradeRecord]) -> OutcomeDistribution:
    trades = trade_records(records)
    if not trades:
        return OutcomeDistribution(win_pct=0.0, loss_pct=0.0, breakeven_pct=0.0)
    total = len(trades)
    wins = sum(1 for trade in trades if trade.status == STATUS_WIN)
    losses = sum(1 for trade in trades if trade.status == STATUS_LOSS)
    breakevens = sum(1 for trade in trades if trade.status == STATUS_BREAKEVEN)
    return OutcomeDistribution(
        win_pct=wins / total * 100.0,
        loss_pct=losses / total * 100.0,
        breakeven_pct=breakevens / total * 100.0,
    )


def longest_streaks(statuses: Iterable[str]) -> tuple[int, int]:
    """Longest consecutive run of wins and of losses in an ordered status sequence."""
    max_wins = 0
    max_losses = 0
    current_wins = 0
    current_losses = 0

    for status in statuses:
        if status == STATUS_WIN:
            current_wins += 1
            current_losses = 0
        elif status == STATUS_LOSS:
            current_losses += 1
            current_wins = 0
        else:
            current_wins = 0
            current_losses = 0
        max_wins = max(max_wins, current_wins)
        max_losses = max(max_losses, current_losses)

    return max_wins, max_losses


def _max_streaks(ordered: list[TradeRecord]) -> tuple[int, int]:
    return longest_streaks(trade.status for trade in ordered)


def _max_drawdown_pct(ordered: list[TradeRecord], starting_equity: float) -> float:
    equity = starting_equity
    peak = starting_equity
    max_dd_pct = 0.0

    for trade in ordered:
        equity += trade.net_pnl
        if equity > peak:
            peak = equity
        if peak <= 0:
            continue
        drawdown_pct = (peak - equity) / peak * 100.0
        if drawdown_pct > max_dd_pct:
            max_dd_pct = drawdown_pct

    return -max_dd_pct if max_dd_pct else 0.0


def _avg_duration_minutes(trades: list[TradeRecord]) -> float:
    values = []
    for trade in trades:
        result = parse_duration(trade.duration)
        if isinstance(result, Invalid):
            continue
        values.append(result.value)
    return _mean(values)


def _mean(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)
