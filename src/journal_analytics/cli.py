from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path

from journal_analytics.config.app_config import AppConfig, load_app_config
from journal_analytics.formatting import format_currency, format_duration, format_percentage
from journal_analytics.ingest.records import load_records
from journal_analytics.metrics.scatter import duration_series, no_jitter, time_of_day_series, uniform_jitter
from journal_analytics.models import ALL_ACCOUNTS, TradeRecord
from journal_analytics.report import ReportFilters, build_dashboard


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Trading journal analytics.")
    parser.add_argument("--config", type=Path, default=None, help="Path to app.toml.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    summary = subparsers.add_parser("summary", help="Compute dashboard statistics for a records file.")
    _add_records_argument(summary)
    summary.add_argument("--start", type=str, default=None, help="Inclusive start date (YYYY-MM-DD).")
    summary.add_argument("--end", type=str, default=None, help="Inclusive end date (YYYY-MM-DD).")
    summary.add_argument("--account", type=str, default=ALL_ACCOUNTS, help="Account name or 'All'.")
    summary.add_argument("--strategy", type=str, default=None, help="Only include trades of this strategy.")
    summary.add_argument("--json", action="store_true", help="Print JSON output.")
    summary.add_argument("--out", type=Path, default=None, help="Write output to a file instead of stdout.")

    scatter = subparsers.add_parser("scatter", help="Emit time-of-day or duration scatter points.")
    _add_records_argument(scatter)
    scatter.add_argument("--axis", choices=("time", "duration"), default="time")
    scatter.add_argument("--seed", type=int, default=None, help="Seed the jitter for repeatable output.")
    scatter.add_argument("--no-jitter", action="store_true", help="Emit exact x values.")

    serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", type=str, default=None)
    serve.add_argument("--port", type=int, default=None)

    args = parser.parse_args(argv)
    config = load_app_config(args.config)

    if args.command == "serve":
        return _serve(config, args.host, args.port)

    records = _load(args.records_path or config.app.records_path)
    if records is None:
        return 1

    if args.command == "scatter":
        return _scatter(records, config, args)
    return _summary(records, config, args)


def _add_records_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "records_path",
        type=Path,
        nargs="?",
        default=None,
        help="Path to journal records export (json/csv/tsv).",
    )


def _load(path: Path) -> list[TradeRecord] | None:
    if not path.exists():
        print(f"Records file not found: {path}", file=sys.stderr)
        return None
    result = load_records(path)
    if result.skipped:
        print(f"Skipped {result.skipped} record rows during normalization.", file=sys.stderr)
    return result.records


def _summary(records: list[TradeRecord], config: AppConfig, args: argparse.Namespace) -> int:
    invalid: list[str] = []
    filters = ReportFilters(start=args.start, end=args.end, account=args.account, strategy=args.strategy)
    payload = build_dashboard(
        records,
        filters,
        config,
        on_invalid=lambda record, reason: invalid.append(f"{record.record_id}: {reason}"),
    )
    if invalid:
        print(f"Ignored {len(invalid)} unparseable date/time values.", file=sys.stderr)

    if args.json or (args.out is not None and args.out.suffix.lower() == ".json"):
        text = json.dumps(payload, indent=2, sort_keys=True)
    else:
        text = _format_dashboard(payload)

    if args.out is None:
        print(text)
    else:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(text + "\n", encoding="utf-8")
    return 0


def _scatter(records: list[TradeRecord], config: AppConfig, args: argparse.Namespace) -> int:
    if args.no_jitter:
        jitter = no_jitter
    else:
        seed = args.seed if args.seed is not None else config.analytics.jitter_seed
        jitter = uniform_jitter(random.Random(seed) if seed is not None else None)

    if args.axis == "time":
        points = time_of_day_series(records, jitter=jitter, amplitude=config.analytics.time_jitter_hours)
    else:
        points = duration_series(records, jitter=jitter, amplitude=config.analytics.duration_jitter_minutes)

    print("x y")
    for point in points:
        print(f"{point.x:.6g} {point.y:.6g}")
    return 0


def _serve(config: AppConfig, host: str | None, port: int | None) -> int:
    import uvicorn

    uvicorn.run(
        "journal_analytics.web.app:app",
        host=host or config.app.host,
        port=port or config.app.port,
        reload=config.app.reload,
    )
    return 0


def _format_dashboard(payload: dict) -> str:
    currency = payload["currency"]
    summary = payload["summary"]
    stats = payload["stats"]
    lines = [
        f"starting_balance {format_currency(summary['starting_balance'], currency)}",
        f"current_balance {format_currency(summary['current_balance'], currency)}",
        f"total_gain_loss {format_currency(summary['total_gain_loss'], currency)}",
        f"change_pct {format_percentage(summary['change_pct'])}",
        f"total_deposits {format_currency(summary['total_deposits'], currency)}",
        f"total_withdrawals {format_currency(summary['total_withdrawals'], currency)}",
        f"total_trades {stats['total_trades']}",
        f"wins {stats['total_wins']}",
        f"losses {stats['total_losses']}",
        f"breakevens {stats['total_breakevens']}",
        f"open {stats['total_open']}",
        f"long_trades {stats['long_trades']}",
        f"short_trades {stats['short_trades']}",
        f"win_rate {format_percentage(stats['win_rate'])}",
        f"avg_win {format_currency(stats['avg_win'], currency)}",
        f"largest_win {format_currency(stats['largest_win'], currency)}",
        f"longest_win_streak {stats['longest_win_streak']}",
        f"avg_loss {format_currency(stats['avg_loss'], currency)}",
        f"largest_loss {format_currency(stats['largest_loss'], currency)}",
        f"longest_lose_streak {stats['longest_lose_streak']}",
        f"max_drawdown {format_percentage(stats['max_drawdown'])}",
        f"avg_time_in_trade {format_duration(stats['avg_time_in_trade_minutes'])}",
        f"total_pl {format_currency(stats['total_pl'], currency)}",
        f"avg_pl {format_currency(stats['avg_pl'], currency)}",
        f"most_used_strategy {payload['most_used_strategy']}",
        f"most_used_pair {payload['most_used_pair']}",
    ]
    for label, bucket in payload["monthly_pl"].items():
        lines.append(
            f"month {label} gain {format_currency(bucket['gain'], currency)} "
            f"loss {format_currency(bucket['loss'], currency)}"
        )
    return "\n".join(lines)


if __name__ == "__main__":
    raise SystemExit(main())
