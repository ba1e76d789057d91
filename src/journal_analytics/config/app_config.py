from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python <3.11
    import tomli as tomllib

from journal_analytics.metrics.balance import DEFAULT_STARTING_BALANCE
from journal_analytics.metrics.breakdowns import DEFAULT_PAIR_LABEL, DEFAULT_STRATEGY_LABEL
from journal_analytics.metrics.scatter import DURATION_JITTER_MINUTES, TIME_JITTER_HOURS

DEFAULT_CONFIG_PATH = Path("config/app.toml")


@dataclass(frozen=True)
class AppSettings:
    host: str
    port: int
    reload: bool
    records_path: Path


@dataclass(frozen=True)
class JournalSettings:
    currency: str
    starting_balance: float
    accounts: list[str]
    markets: list[str]
    strategies: list[str]


@dataclass(frozen=True)
class AnalyticsSettings:
    default_strategy: str
    default_pair: str
    time_jitter_hours: float
    duration_jitter_minutes: float
    jitter_seed: int | None


@dataclass(frozen=True)
class AppConfig:
    app: AppSettings
    journal: JournalSettings
    analytics: AnalyticsSettings


def load_app_config(path: Path | None = None, env: Mapping[str, str] | None = None) -> AppConfig:
    env = os.environ if env is None else env
    config_path = Path(path or env.get("JOURNAL_ANALYTICS_CONFIG") or DEFAULT_CONFIG_PATH)
    raw: Mapping[str, Any] = {}
    if config_path.exists():
        raw = tomllib.loads(config_path.read_text(encoding="utf-8"))

    app_raw = _section(raw, "app")
    journal_raw = _section(raw, "journal")
    analytics_raw = _section(raw, "analytics")

    app = AppSettings(
        host=str(app_raw.get("host", "127.0.0.1")),
        port=_int_or_default(app_raw.get("port"), 8000),
        reload=bool(app_raw.get("reload", False)),
        records_path=Path(app_raw.get("records_path", "data/records.json")),
    )

    journal = JournalSettings(
        currency=str(journal_raw.get("currency", "USD")).strip().upper() or "USD",
        starting_balance=_float_or_default(journal_raw.get("starting_balance"), DEFAULT_STARTING_BALANCE),
        accounts=_str_list(journal_raw.get("accounts")) or ["Account 1"],
        markets=_str_list(journal_raw.get("markets")) or [DEFAULT_PAIR_LABEL],
        strategies=_str_list(journal_raw.get("strategies")) or [DEFAULT_STRATEGY_LABEL],
    )

    analytics = AnalyticsSettings(
        default_strategy=str(analytics_raw.get("default_strategy", DEFAULT_STRATEGY_LABEL)),
        default_pair=str(analytics_raw.get("default_pair", DEFAULT_PAIR_LABEL)),
        time_jitter_hours=_float_or_default(analytics_raw.get("time_jitter_hours"), TIME_JITTER_HOURS),
        duration_jitter_minutes=_float_or_default(
            analytics_raw.get("duration_jitter_minutes"), DURATION_JITTER_MINUTES
        ),
        jitter_seed=_int_or_none(analytics_raw.get("jitter_seed")),
    )

    return AppConfig(app=app, journal=journal, analytics=analytics)


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if isinstance(value, Mapping):
        return value
    return {}


def _int_or_none(value: Any) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _int_or_default(value: Any, default: int) -> int:
    parsed = _int_or_none(value)
    return default if parsed is None else parsed


def _float_or_default(value: Any, default: float) -> float:
    if value in (None, ""):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    output: list[str] = []
    for item in value:
        text = str(item).strip()
        if text and text not in output:
            output.append(text)
    return output
