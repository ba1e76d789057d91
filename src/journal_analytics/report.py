from __future__ import annotations

import random
from dataclasses import asdict, dataclass
from typing import Any, Iterable

from journal_analytics.config.app_config import AppConfig
from journal_analytics.filters import InvalidHandler, filter_records
from journal_analytics.ingest.records import record_to_payload
from journal_analytics.metrics.balance import (
    DrawdownSummary,
    account_drawdown,
    account_summary,
    chronological_months,
    daily_net_performance,
    equity_curve,
    monthly_pl,
)
from journal_analytics.metrics.breakdowns import (
    direction_breakdown,
    most_used_pair,
    most_used_strategy,
    pair_breakdown,
    profit_loss_totals,
    strategy_breakdown,
)
from journal_analytics.metrics.scatter import Jitter, duration_series, time_of_day_series, uniform_jitter
from journal_analytics.metrics.summary import compute_outcome_distribution, compute_trading_stats
from journal_analytics.models import ALL_ACCOUNTS, KIND_TRADE, DateRange, TradeRecord

STRATEGY_REPORT_ROWS = 10


@dataclass(frozen=True)
class ReportFilters:
    start: str | None = None
    end: str | None = None
    account: str = ALL_ACCOUNTS
    strategy: str | None = None

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start, end=self.end)


def jitter_from_config(config: AppConfig) -> Jitter:
    seed = config.analytics.jitter_seed
    return uniform_jitter(random.Random(seed) if seed is not None else None)


def build_dashboard(
    records: Iterable[TradeRecord],
    filters: ReportFilters,
    config: AppConfig,
    *,
    jitter: Jitter | None = None,
    on_invalid: InvalidHandler | None = None,
) -> dict[str, Any]:
    all_records = list(records)
    scoped = filter_records(
        all_records,
        date_range=filters.date_range,
        account=filters.account,
        strategy=filters.strategy,
        on_invalid=on_invalid,
    )
    trades = [record for record in scoped if record.kind == KIND_TRADE]
    starting_balance = config.journal.starting_balance
    offset = jitter or jitter_from_config(config)

    monthly = monthly_pl(trades)
    daily = daily_net_performance(trades)

    return {
        "filters": asdict(filters),
        "currency": config.journal.currency,
        "summary": asdict(
            account_summary(all_records, account=filters.account, starting_balance=starting_balance)
        ),
        "stats": asdict(compute_trading_stats(trades, starting_equity=starting_balance)),
        "monthly_pl": {label: asdict(monthly[label]) for label in chronological_months(monthly)},
        "daily_pl": asdict(daily),
        "equity_curve": [
            {"date": point.date.isoformat(), "balance": point.balance}
            for point in equity_curve(all_records, account=filters.account, starting_balance=starting_balance)
        ],
        "drawdown": drawdown_payload(
            account_drawdown(all_records, account=filters.account, starting_balance=starting_balance)
        ),
        "strategy_breakdown": strategy_breakdown(trades),
        "pair_breakdown": pair_breakdown(trades),
        "most_used_strategy": most_used_strategy(trades, default=config.analytics.default_strategy),
        "most_used_pair": most_used_pair(trades, default=config.analytics.default_pair),
        "time_scatter": [
            asdict(point)
            for point in time_of_day_series(
                trades, jitter=offset, amplitude=config.analytics.time_jitter_hours, on_invalid=on_invalid
            )
        ],
        "duration_scatter": [
            asdict(point)
            for point in duration_series(
                trades,
                jitter=offset,
                amplitude=config.analytics.duration_jitter_minutes,
                on_invalid=on_invalid,
            )
        ],
    }


def build_strategy_report(
    records: Iterable[TradeRecord],
    filters: ReportFilters,
    config: AppConfig,
) -> dict[str, Any]:
    all_records = list(records)
    strategy = filters.strategy or most_used_strategy(
        all_records, account=filters.account, default=config.analytics.default_strategy
    )
    trades = filter_records(
        all_records,
        date_range=filters.date_range,
        account=filters.account,
        kind=KIND_TRADE,
        strategy=strategy,
    )
    return {
        "strategy": strategy,
        "filters": asdict(filters),
        "stats": asdict(compute_trading_stats(trades, starting_equity=config.journal.starting_balance)),
        "outcomes": asdict(compute_outcome_distribution(trades)),
        "profit_loss": asdict(profit_loss_totals(trades)),
        "direction": direction_breakdown(trades),
        "trades": [record_to_payload(trade) for trade in trades[:STRATEGY_REPORT_ROWS]],
    }


def drawdown_payload(summary: DrawdownSummary) -> dict[str, Any]:
    return {
        "max_drawdown": summary.max_drawdown,
        "max_drawdown_pct": summary.max_drawdown_pct,
        "points": [
            {"date": point.date.isoformat(), "drawdown": point.drawdown, "drawdown_pct": point.drawdown_pct}
            for point in summary.points
        ],
    }
