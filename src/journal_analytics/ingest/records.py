from __future__ import annotations

import csv
import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Iterable, Mapping
from uuid import uuid4

from journal_analytics.models import (
    DIRECTION_LONG,
    DIRECTION_SHORT,
    KIND_TRADE,
    KIND_WITHDRAWAL,
    RECORD_KINDS,
    TRADE_STATUSES,
    TradeRecord,
)

_KIND_ALIASES = {kind.lower(): kind for kind in RECORD_KINDS}
_KIND_ALIASES["withdraw"] = KIND_WITHDRAWAL
_DIRECTION_ALIASES = {
    "long": DIRECTION_LONG,
    "buy": DIRECTION_LONG,
    "short": DIRECTION_SHORT,
    "sell": DIRECTION_SHORT,
}
_STATUS_ALIASES = {status.lower(): status for status in TRADE_STATUSES}

# Output field name -> accepted input keys, camelCase first.
_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "record_id": ("id", "recordId", "record_id"),
    "account": ("account",),
    "kind": ("type", "kind"),
    "date": ("date",),
    "strategy": ("strategy",),
    "pair": ("pair", "symbol", "market"),
    "direction": ("direction", "side"),
    "lot_size": ("lotSize", "lot_size"),
    "leverage": ("leverage",),
    "risk_ratio": ("riskRatio", "risk_ratio"),
    "entry_time": ("entryTime", "entry_time"),
    "entry_point": ("entryPoint", "entry_point"),
    "take_profit": ("takeProfit", "take_profit"),
    "stop_loss": ("stopLoss", "stop_loss"),
    "exit_date": ("exitDate", "exit_date"),
    "exit_time": ("exitTime", "exit_time"),
    "exit_point": ("exitPoint", "exit_point"),
    "duration": ("duration",),
    "status": ("status",),
    "fees": ("fees", "fee"),
    "gain_loss": ("gainLoss", "gain_loss", "pnl"),
    "notes": ("notes",),
}
_NUMERIC_FIELDS = {
    "lot_size",
    "leverage",
    "risk_ratio",
    "entry_point",
    "take_profit",
    "stop_loss",
    "exit_point",
    "fees",
    "gain_loss",
}


@dataclass(frozen=True)
class IngestResult:
    records: list[TradeRecord]
    skipped: int = 0


def load_records(path: str | Path) -> IngestResult:
    source_path = Path(path)
    suffix = source_path.suffix.lower()
    if suffix == ".json":
        with source_path.open("r", encoding="utf-8-sig") as handle:
            payload = json.load(handle)
        return load_records_payload(payload)
    if suffix in {".csv", ".tsv"}:
        with source_path.open("r", encoding="utf-8-sig", newline="") as handle:
            reader = csv.DictReader(handle, delimiter="\t" if suffix == ".tsv" else ",")
            records, skipped = _normalize_records(reader)
        return IngestResult(records=records, skipped=skipped)
    raise ValueError(f"Unsupported file type: {source_path.suffix}")


def load_records_payload(payload: Any) -> IngestResult:
    records, skipped = _normalize_records(_extract_records(payload))
    return IngestResult(records=records, skipped=skipped)


def record_to_payload(record: TradeRecord) -> dict[str, Any]:
    """camelCase mapping of a record, the shape the journal UI exchanges."""
    payload: dict[str, Any] = {}
    for item in fields(record):
        key = _FIELD_KEYS[item.name][0]
        payload[key] = getattr(record, item.name)
    return payload


def _extract_records(payload: Any) -> Iterable[Mapping[str, Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("records", "trades", "data"):
            if key in payload and isinstance(payload[key], list):
                return payload[key]
    raise ValueError("Unsupported JSON format for records payload")


def _normalize_records(records: Iterable[Mapping[str, Any]]) -> tuple[list[TradeRecord], int]:
    output: list[TradeRecord] = []
    skipped = 0
    for raw in records:
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        try:
            output.append(_normalize_record(raw))
        except ValueError:
            skipped += 1
    return output, skipped


def _normalize_record(raw: Mapping[str, Any]) -> TradeRecord:
    values: dict[str, Any] = {}
    for name, keys in _FIELD_KEYS.items():
        value = _pick(raw, *keys)
        if name in _NUMERIC_FIELDS:
            values[name] = _to_float(value, default=0.0)
        else:
            values[name] = "" if value is None else str(value).strip()

    kind = _KIND_ALIASES.get(values["kind"].lower())
    if kind is None:
        raise ValueError(f"Unknown record type: {values['kind']!r}")
    if not values["account"]:
        raise ValueError("Missing account")
    values["kind"] = kind
    values["record_id"] = values["record_id"] or uuid4().hex
    values["fees"] = abs(values["fees"])

    if kind == KIND_TRADE:
        values["direction"] = _normalize_choice(values["direction"], _DIRECTION_ALIASES, "direction")
        values["status"] = _normalize_choice(values["status"], _STATUS_ALIASES, "status")
    else:
        values["direction"] = ""
        values["status"] = ""
        values["strategy"] = ""
        values["pair"] = ""
        if kind == KIND_WITHDRAWAL:
            values["gain_loss"] = -abs(values["gain_loss"])
        else:
            values["gain_loss"] = abs(values["gain_loss"])

    return TradeRecord(**values)


def _normalize_choice(value: str, aliases: Mapping[str, str], label: str) -> str:
    if not value:
        return ""
    resolved = aliases.get(value.lower())
    if resolved is None:
        raise ValueError(f"Unknown {label}: {value!r}")
    return resolved


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] not in (None, ""):
            return raw[key]
    return None


def _to_float(value: Any, default: float | None = None) -> float:
    if value is None:
        if default is None:
            raise ValueError("Missing numeric field")
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError("Invalid numeric field") from exc
