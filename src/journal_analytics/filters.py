from __future__ import annotations

from datetime import date
from typing import Callable, Iterable

from journal_analytics.models import ALL_ACCOUNTS, KIND_TRADE, DateRange, RecordKind, TradeRecord
from journal_analytics.parsing import Invalid, parse_record_date

InvalidHandler = Callable[[TradeRecord, str], None]


def filter_records(
    records: Iterable[TradeRecord],
    *,
    date_range: DateRange | None = None,
    account: str | None = ALL_ACCOUNTS,
    kind: RecordKind | None = None,
    strategy: str | None = None,
    on_invalid: InvalidHandler | None = None,
) -> list[TradeRecord]:
    """Return the records matching every supplied criterion, in input order.

    The strategy criterion only narrows trades; deposits and withdrawals pass
    through so cash totals stay intact under a strategy view. Records whose
    date cannot be parsed are dropped whenever a bounded date range is given.
    """
    bounds = _resolve_bounds(date_range)
    output: list[TradeRecord] = []
    for record in records:
        if kind is not None and record.kind != kind:
            continue
        if not _is_all(account) and record.account != account:
            continue
        if not _is_all(strategy) and record.is_trade and record.strategy != strategy:
            continue
        if bounds is not None and not _in_range(record, bounds, on_invalid):
            continue
        output.append(record)
    return output


def trade_records(records: Iterable[TradeRecord]) -> list[TradeRecord]:
    return [record for record in records if record.kind == KIND_TRADE]


def date_bounds(records: Iterable[TradeRecord]) -> DateRange:
    """Earliest and latest parseable record dates, or an open range if none parse."""
    dates = []
    for record in records:
        result = parse_record_date(record.date)
        if not isinstance(result, Invalid):
            dates.append(result.value)
    if not dates:
        return DateRange()
    return DateRange(start=min(dates), end=max(dates))


def _resolve_bounds(date_range: DateRange | None) -> tuple[date | None, date | None] | None:
    if date_range is None or date_range.is_open:
        return None
    start = _parse_bound(date_range.start)
    end = _parse_bound(date_range.end)
    if isinstance(start, Invalid) or isinstance(end, Invalid):
        # A malformed bound admits nothing.
        return (date.max, date.min)
    return (start, end)


def _parse_bound(value: str | date | None) -> date | Invalid | None:
    if value is None or value == "":
        return None
    result = parse_record_date(value)
    if isinstance(result, Invalid):
        return result
    return result.value


def _in_range(
    record: TradeRecord,
    bounds: tuple[date | None, date | None],
    on_invalid: InvalidHandler | None,
) -> bool:
    result = parse_record_date(record.date)
    if isinstance(result, Invalid):
        if on_invalid is not None:
            on_invalid(record, result.reason)
        return False
    start, end = bounds
    if start is not None and result.value < start:
        return False
    if end is not None and result.value > end:
        return False
    return True


def _is_all(value: str | None) -> bool:
    return value is None or value == "" or value == ALL_ACCOUNTS


def chronological(
    records: Iterable[TradeRecord],
    on_invalid: InvalidHandler | None = None,
) -> list[tuple[date, TradeRecord]]:
    """Pair records with their parsed date, ordered by date with ties kept in input order."""
    dated: list[tuple[date, TradeRecord]] = []
    for record in records:
        result = parse_record_date(record.date)
        if isinstance(result, Invalid):
            if on_invalid is not None:
                on_invalid(record, result.reason)
            continue
        dated.append((result.value, record))
    dated.sort(key=lambda item: item[0])
    return dated
