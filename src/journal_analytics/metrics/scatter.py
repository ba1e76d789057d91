from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Iterable

from journal_analytics.filters import InvalidHandler, trade_records
from journal_analytics.models import TradeRecord
from journal_analytics.parsing import Invalid, ParseResult, parse_clock_time, parse_duration

Jitter = Callable[[float], float]

TIME_JITTER_HOURS = 0.15
DURATION_JITTER_MINUTES = 2.0


@dataclass(frozen=True)
class ScatterPoint:
    x: float
    y: float


def uniform_jitter(rng: random.Random | None = None) -> Jitter:
    source = rng or random.Random()

    def _jitter(amplitude: float) -> float:
        return source.uniform(-amplitude, amplitude)

    return _jitter


def no_jitter(amplitude: float) -> float:
    return 0.0


def time_of_day_series(
    records: Iterable[TradeRecord],
    *,
    jitter: Jitter | None = None,
    amplitude: float = TIME_JITTER_HOURS,
    on_invalid: InvalidHandler | None = None,
) -> list[ScatterPoint]:
    """Entry hour of day against net P&L, one point per trade with a readable entry time."""
    offset = jitter or uniform_jitter()
    points = []
    for trade, hours in _parsed(records, lambda trade: trade.entry_time, parse_clock_time, on_invalid):
        points.append(ScatterPoint(x=hours + offset(amplitude), y=trade.net_pnl))
    return points


def duration_series(
    records: Iterable[TradeRecord],
    *,
    jitter: Jitter | None = None,
    amplitude: float = DURATION_JITTER_MINUTES,
    on_invalid: InvalidHandler | None = None,
) -> list[ScatterPoint]:
    """Minutes in trade against net P&L. Jittered x never drops below zero."""
    offset = jitter or uniform_jitter()
    points = []
    for trade, minutes in _parsed(records, lambda trade: trade.duration, parse_duration, on_invalid):
        points.append(ScatterPoint(x=max(0.0, minutes + offset(amplitude)), y=trade.net_pnl))
    return points


def _parsed(
    records: Iterable[TradeRecord],
    field: Callable[[TradeRecord], str],
    parser: Callable[[str], ParseResult],
    on_invalid: InvalidHandler | None,
) -> list[tuple[TradeRecord, float]]:
    output = []
    for trade in trade_records(records):
        raw = field(trade)
        if not raw:
            continue
        result = parser(raw)
        if isinstance(result, Invalid):
            if on_invalid is not None:
                on_invalid(trade, result.reason)
            continue
        output.append((trade, result.value))
    return output
