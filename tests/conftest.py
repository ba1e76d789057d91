"""Shared record builders for the journal analytics tests."""

from __future__ import annotations

import itertools

import pytest

from journal_analytics.models import (
    KIND_DEPOSIT,
    KIND_TRADE,
    KIND_WITHDRAWAL,
    TradeRecord,
)

_ids = itertools.count(1)


def make_trade(
    *,
    status: str = "Win",
    gain_loss: float = 100.0,
    fees: float = 0.0,
    date: str = "2025-03-03",
    account: str = "Account 1",
    strategy: str = "Strategy 1",
    pair: str = "XAUUSD",
    direction: str = "Long",
    entry_time: str = "",
    duration: str = "",
    record_id: str | None = None,
) -> TradeRecord:
    return TradeRecord(
        record_id=record_id or f"t{next(_ids)}",
        account=account,
        kind=KIND_TRADE,
        date=date,
        strategy=strategy,
        pair=pair,
        direction=direction,
        entry_time=entry_time,
        duration=duration,
        status=status,
        fees=fees,
        gain_loss=gain_loss,
    )


def make_deposit(amount: float, *, date: str = "2025-02-01", account: str = "Account 1") -> TradeRecord:
    return TradeRecord(
        record_id=f"d{next(_ids)}",
        account=account,
        kind=KIND_DEPOSIT,
        date=date,
        gain_loss=abs(amount),
    )


def make_withdrawal(amount: float, *, date: str = "2025-04-01", account: str = "Account 1") -> TradeRecord:
    return TradeRecord(
        record_id=f"w{next(_ids)}",
        account=account,
        kind=KIND_WITHDRAWAL,
        date=date,
        gain_loss=-abs(amount),
    )


@pytest.fixture
def journal_records() -> list[TradeRecord]:
    """A small two-account journal spanning three months."""
    return [
        make_deposit(5000.0, date="2025-02-01"),
        make_trade(status="Win", gain_loss=300.0, fees=5.0, date="2025-03-03", entry_time="9:30:00 AM", duration="0:45:00"),
        make_trade(status="Loss", gain_loss=-120.0, fees=5.0, date="2025-03-04", direction="Short", pair="EURUSD", entry_time="14:15:00", duration="1:10:00"),
        make_trade(status="Win", gain_loss=250.0, fees=5.0, date="2025-03-04", strategy="Breakout", entry_time="3:00:00 PM", duration="0:20:30"),
        make_trade(status="Breakeven", gain_loss=0.0, fees=2.0, date="2025-04-10", entry_time="bad", duration="?"),
        make_trade(status="Open", gain_loss=0.0, date="2025-04-11", account="Account 2"),
        make_withdrawal(1000.0, date="2025-04-15"),
        make_trade(status="Loss", gain_loss=-400.0, fees=4.0, date="2025-05-02", direction="Short"),
        make_deposit(2000.0, date="2025-05-05", account="Account 2"),
    ]
