from __future__ import annotations

import sys
from dataclasses import asdict
from functools import lru_cache
from typing import Any

from fastapi import FastAPI, HTTPException, Request

from journal_analytics.config.app_config import AppConfig, load_app_config
from journal_analytics.filters import filter_records
from journal_analytics.ingest.records import load_records, load_records_payload, record_to_payload
from journal_analytics.metrics.balance import (
    account_balance,
    account_drawdown,
    account_summary,
    chronological_months,
    daily_net_performance,
    monthly_pl,
)
from journal_analytics.metrics.breakdowns import (
    direction_breakdown,
    most_used_pair,
    most_used_strategy,
    pair_breakdown,
    strategy_breakdown,
)
from journal_analytics.metrics.calendar import daily_stats_for_month, month_stats, weekly_stats
from journal_analytics.metrics.scatter import duration_series, time_of_day_series
from journal_analytics.metrics.summary import compute_trading_stats
from journal_analytics.models import ALL_ACCOUNTS, KIND_TRADE, TradeRecord
from journal_analytics.report import (
    ReportFilters,
    build_dashboard,
    build_strategy_report,
    drawdown_payload,
    jitter_from_config,
)
from journal_analytics.store import RecordStore

app = FastAPI(title="Journal Analytics")

_SCATTER_AXES = ("time", "duration")


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return load_app_config()


@lru_cache(maxsize=1)
def get_store() -> RecordStore:
    store = RecordStore()
    path = get_config().app.records_path
    if path.exists():
        result = load_records(path)
        if result.skipped:
            print(f"Skipped {result.skipped} record rows during normalization.", file=sys.stderr)
        store.replace(result.records)
    return store


@app.get("/api/records")
def records_api() -> list[dict[str, Any]]:
    return [record_to_payload(record) for record in get_store().snapshot()]


@app.put("/api/records")
async def replace_records_api(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
        result = load_records_payload(payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    get_store().replace(result.records)
    return {"loaded": len(result.records), "skipped": result.skipped}


@app.get("/api/accounts")
def accounts_api() -> dict[str, Any]:
    journal = get_config().journal
    store = get_store()
    return {
        "accounts": [ALL_ACCOUNTS, *_merged(journal.accounts, store.accounts())],
        "markets": _merged(journal.markets, store.pairs()),
        "strategies": _merged(journal.strategies, store.strategies()),
    }


@app.get("/api/summary")
def summary_api(request: Request) -> dict[str, Any]:
    filters = _parse_filters(request)
    trades = _scoped_trades(filters)
    config = get_config()
    return asdict(compute_trading_stats(trades, starting_equity=config.journal.starting_balance))


@app.get("/api/balance")
def balance_api(request: Request) -> dict[str, Any]:
    filters = _parse_filters(request)
    records = get_store().snapshot()
    starting_balance = get_config().journal.starting_balance
    return {
        "balance": account_balance(records, account=filters.account, starting_balance=starting_balance),
        "summary": asdict(
            account_summary(records, account=filters.account, starting_balance=starting_balance)
        ),
        "drawdown": drawdown_payload(
            account_drawdown(records, account=filters.account, starting_balance=starting_balance)
        ),
    }


@app.get("/api/monthly-pl")
def monthly_pl_api(request: Request) -> dict[str, Any]:
    monthly = monthly_pl(_scoped_trades(_parse_filters(request)))
    labels = chronological_months(monthly)
    return {
        "labels": labels,
        "gain": [monthly[label].gain for label in labels],
        "loss": [monthly[label].loss for label in labels],
    }


@app.get("/api/daily-pl")
def daily_pl_api(request: Request) -> dict[str, Any]:
    filters = _parse_filters(request)
    series = daily_net_performance(
        _scoped_trades(filters), date_range=filters.date_range, account=filters.account
    )
    return asdict(series)


@app.get("/api/breakdowns")
def breakdowns_api(request: Request) -> dict[str, Any]:
    filters = _parse_filters(request)
    trades = _scoped_trades(filters)
    analytics = get_config().analytics
    return {
        "strategy": strategy_breakdown(trades),
        "pair": pair_breakdown(trades),
        "direction": direction_breakdown(trades),
        "most_used_strategy": most_used_strategy(trades, default=analytics.default_strategy),
        "most_used_pair": most_used_pair(trades, default=analytics.default_pair),
    }


@app.get("/api/calendar/{year}/{month}")
def calendar_api(request: Request, year: int, month: int) -> dict[str, Any]:
    if not 1 <= year <= 9999:
        raise HTTPException(status_code=404, detail=f"Unknown year {year}.")
    if not 1 <= month <= 12:
        raise HTTPException(status_code=404, detail=f"Unknown month {month}.")
    trades = _scoped_trades(_parse_filters(request))
    days = daily_stats_for_month(trades, year, month)
    return {
        "month": asdict(month_stats(trades, year, month)),
        "days": [{**asdict(day), "date": day.date.isoformat()} for day in days],
        "weeks": [
            {**asdict(week), "start": week.start.isoformat(), "end": week.end.isoformat()}
            for week in weekly_stats(trades, year, month)
        ],
    }


@app.get("/api/scatter/{axis}")
def scatter_api(request: Request, axis: str) -> list[dict[str, float]]:
    if axis not in _SCATTER_AXES:
        raise HTTPException(status_code=404, detail=f"Unknown scatter axis '{axis}'.")
    config = get_config()
    trades = _scoped_trades(_parse_filters(request))
    jitter = jitter_from_config(config)
    if axis == "time":
        points = time_of_day_series(trades, jitter=jitter, amplitude=config.analytics.time_jitter_hours)
    else:
        points = duration_series(trades, jitter=jitter, amplitude=config.analytics.duration_jitter_minutes)
    return [asdict(point) for point in points]


@app.get("/api/dashboard")
def dashboard_api(request: Request) -> dict[str, Any]:
    return build_dashboard(get_store().snapshot(), _parse_filters(request), get_config())


@app.get("/api/strategy-report")
def strategy_report_api(request: Request) -> dict[str, Any]:
    return build_strategy_report(get_store().snapshot(), _parse_filters(request), get_config())


def _parse_filters(request: Request) -> ReportFilters:
    params = request.query_params
    return ReportFilters(
        start=(params.get("start") or "").strip() or None,
        end=(params.get("end") or "").strip() or None,
        account=(params.get("account") or "").strip() or ALL_ACCOUNTS,
        strategy=(params.get("strategy") or "").strip() or None,
    )


def _scoped_trades(filters: ReportFilters) -> list[TradeRecord]:
    return filter_records(
        get_store().snapshot(),
        date_range=filters.date_range,
        account=filters.account,
        kind=KIND_TRADE,
        strategy=filters.strategy,
    )


def _merged(configured: list[str], seen: list[str]) -> list[str]:
    return [*configured, *[name for name in seen if name not in configured]]
