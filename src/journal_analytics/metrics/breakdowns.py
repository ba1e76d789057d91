from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from journal_analytics.filters import filter_records
from journal_analytics.models import (
    ALL_ACCOUNTS,
    DIRECTION_LONG,
    DIRECTION_SHORT,
    KIND_TRADE,
    TradeRecord,
)

DEFAULT_STRATEGY_LABEL = "Strategy 1"
DEFAULT_PAIR_LABEL = "XAUUSD"


@dataclass(frozen=True)
class ProfitLoss:
    profit: float
    loss: float


def strategy_breakdown(
    records: Iterable[TradeRecord], *, account: str | None = ALL_ACCOUNTS
) -> dict[str, float]:
    totals: dict[str, float] = {}
    for trade in _account_trades(records, account):
        totals[trade.strategy] = totals.get(trade.strategy, 0.0) + trade.net_pnl
    return totals


def strategy_counts(
    records: Iterable[TradeRecord], *, account: str | None = ALL_ACCOUNTS
) -> dict[str, int]:
    return _count_by(_account_trades(records, account), lambda trade: trade.strategy)


def pair_breakdown(
    records: Iterable[TradeRecord], *, account: str | None = ALL_ACCOUNTS
) -> dict[str, int]:
    return _count_by(_account_trades(records, account), lambda trade: trade.pair)


def direction_breakdown(
    records: Iterable[TradeRecord], *, account: str | None = ALL_ACCOUNTS
) -> dict[str, float]:
    totals = {DIRECTION_LONG: 0.0, DIRECTION_SHORT: 0.0}
    for trade in _account_trades(records, account):
        if trade.direction in totals:
            totals[trade.direction] += trade.net_pnl
    return totals


def profit_loss_totals(records: Iterable[TradeRecord]) -> ProfitLoss:
    profit = 0.0
    loss = 0.0
    for record in records:
        if not record.is_trade:
            continue
        net = record.net_pnl
        if net > 0:
            profit += net
        elif net < 0:
            loss += net
    return ProfitLoss(profit=profit, loss=loss)


def most_used(counts: Mapping[str, int], default: str) -> str:
    """Label with the highest count; the first label seen wins a tie."""
    best_label = None
    best_count = 0
    for label, count in counts.items():
        if best_label is None or count > best_count:
            best_label = label
            best_count = count
    return default if best_label is None else best_label


def most_used_strategy(
    records: Iterable[TradeRecord],
    *,
    account: str | None = ALL_ACCOUNTS,
    default: str = DEFAULT_STRATEGY_LABEL,
) -> str:
    return most_used(strategy_counts(records, account=account), default)


def most_used_pair(
    records: Iterable[TradeRecord],
    *,
    account: str | None = ALL_ACCOUNTS,
    default: str = DEFAULT_PAIR_LABEL,
) -> str:
    return most_used(pair_breakdown(records, account=account), default)


def _account_trades(records: Iterable[TradeRecord], account: str | None) -> list[TradeRecord]:
    return filter_records(records, account=account, kind=KIND_TRADE)


def _count_by(trades: list[TradeRecord], key) -> dict[str, int]:
    counts: dict[str, int] = {}
    for trade in trades:
        label = key(trade)
        counts[label] = counts.get(label, 0) + 1
    return counts
