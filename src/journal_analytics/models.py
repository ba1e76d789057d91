from __future__ import annotations

from dataclasses import dataclass
from datetime import date

RecordKind = str
TradeStatus = str
Direction = str

KIND_TRADE: RecordKind = "Trade"
KIND_DEPOSIT: RecordKind = "Deposit"
KIND_WITHDRAWAL: RecordKind = "Withdrawal"
RECORD_KINDS = (KIND_TRADE, KIND_DEPOSIT, KIND_WITHDRAWAL)

STATUS_OPEN: TradeStatus = "Open"
STATUS_WIN: TradeStatus = "Win"
STATUS_LOSS: TradeStatus = "Loss"
STATUS_BREAKEVEN: TradeStatus = "Breakeven"
TRADE_STATUSES = (STATUS_OPEN, STATUS_WIN, STATUS_LOSS, STATUS_BREAKEVEN)

DIRECTION_LONG: Direction = "Long"
DIRECTION_SHORT: Direction = "Short"

ALL_ACCOUNTS = "All"


@dataclass(frozen=True)
class TradeRecord:
    record_id: str
    account: str
    kind: RecordKind
    date: str
    strategy: str = ""
    pair: str = ""
    direction: Direction = ""
    lot_size: float = 0.0
    leverage: float = 0.0
    risk_ratio: float = 0.0
    entry_time: str = ""
    entry_point: float = 0.0
    take_profit: float = 0.0
    stop_loss: float = 0.0
    exit_date: str = ""
    exit_time: str = ""
    exit_point: float = 0.0
    duration: str = ""
    status: TradeStatus = ""
    fees: float = 0.0
    gain_loss: float = 0.0
    notes: str = ""

    @property
    def net_pnl(self) -> float:
        return self.gain_loss - self.fees

    @property
    def is_trade(self) -> bool:
        return self.kind == KIND_TRADE

    @property
    def is_deposit(self) -> bool:
        return self.kind == KIND_DEPOSIT

    @property
    def is_withdrawal(self) -> bool:
        return self.kind == KIND_WITHDRAWAL


@dataclass(frozen=True)
class DateRange:
    """Inclusive date window. A ``None`` or empty bound leaves that side open."""

    start: str | date | None = None
    end: str | date | None = None

    @property
    def is_open(self) -> bool:
        return not self.start and not self.end
