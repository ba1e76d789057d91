from __future__ import annotations

from typing import Callable, Iterable

from journal_analytics.models import TradeRecord


class RecordStore:
    """Caller-owned record list. Every change swaps in a new tuple, so
    snapshots handed to the analytics functions never change underneath them.
    """

    def __init__(self, records: Iterable[TradeRecord] = ()) -> None:
        self._records: tuple[TradeRecord, ...] = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    def snapshot(self) -> tuple[TradeRecord, ...]:
        return self._records

    def replace(self, records: Iterable[TradeRecord]) -> None:
        self._records = tuple(records)

    def append(self, record: TradeRecord) -> None:
        if any(existing.record_id == record.record_id for existing in self._records):
            raise ValueError(f"Duplicate record id '{record.record_id}'.")
        self._records = self._records + (record,)

    def remove(self, record_id: str) -> bool:
        kept = tuple(record for record in self._records if record.record_id != record_id)
        removed = len(kept) != len(self._records)
        self._records = kept
        return removed

    def accounts(self) -> list[str]:
        return self._distinct(lambda record: record.account)

    def strategies(self) -> list[str]:
        return self._distinct(lambda record: record.strategy if record.is_trade else "")

    def pairs(self) -> list[str]:
        return self._distinct(lambda record: record.pair if record.is_trade else "")

    def _distinct(self, field: Callable[[TradeRecord], str]) -> list[str]:
        seen: dict[str, None] = {}
        for record in self._records:
            value = field(record)
            if value:
                seen.setdefault(value, None)
        return list(seen)
