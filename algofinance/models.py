"""Data models for the AlgoFinance webhook trader."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional


class ExecutionPolicy(str, Enum):
    """Which execution strategy governs order placement."""

    GATE = "gate"          # AI can veto before the order is placed
    ADVISORY = "advisory"  # order first, AI commentary afterwards


class Verdict(str, Enum):
    """Approve/deny classification of an AI text response."""

    APPROVE = "APPROVE"
    DENY = "DENY"
    UNKNOWN = "UNKNOWN"


class LogType(str, Enum):
    """Activity log entry types shown on the dashboard."""

    WEBHOOK = "WEBHOOK"
    AI_ANALYSIS = "AI_ANALYSIS"
    AI_STRATEGY = "AI_STRATEGY"
    EXECUTION = "EXECUTION"
    ERROR = "ERROR"


class SignalState(str, Enum):
    """Lifecycle of a single inbound signal."""

    RECEIVED = "RECEIVED"
    VALIDATED = "VALIDATED"
    GATE_PENDING = "GATE_PENDING"
    EXECUTING = "EXECUTING"
    EXECUTED = "EXECUTED"
    ADVISING = "ADVISING"
    DONE = "DONE"
    REJECTED = "REJECTED"
    DENIED = "DENIED"
    FAILED = "FAILED"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@dataclass
class TradeSignal:
    """Inbound trade instruction from the alerting service (untrusted)."""

    ticker: Optional[str]
    action: Optional[str]
    price: Any = None  # informational only
    contracts: Any = None  # forwarded to the broker unvalidated
    timestamp: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "TradeSignal":
        """Build a signal from a decoded JSON body; non-objects yield an empty signal."""
        if not isinstance(payload, dict):
            return cls(ticker=None, action=None)
        return cls(
            ticker=payload.get("ticker"),
            action=payload.get("action"),
            price=payload.get("price"),
            contracts=payload.get("contracts"),
            timestamp=payload.get("timestamp"),
            raw=dict(payload),
        )

    def is_valid(self) -> bool:
        """A signal needs both a ticker and an action; nothing else is checked."""
        return not _is_blank(self.ticker) and not _is_blank(self.action)

    @property
    def side(self) -> str:
        return str(self.action).lower()

    @property
    def quantity(self) -> Any:
        # Falsy contracts (missing, 0, "") fall back to a single unit
        return self.contracts or 1

    def summary(self) -> str:
        """One-line description used for the webhook receipt entry."""
        action = str(self.action).upper() if not _is_blank(self.action) else "?"
        ticker = self.ticker if not _is_blank(self.ticker) else "?"
        price = self.price if self.price is not None else "?"
        return f"{action} {ticker} @ {price}"


@dataclass
class AdvisoryDecision:
    """Result of the pre-trade AI risk check."""

    raw: str
    verdict: Verdict

    @property
    def denied(self) -> bool:
        return self.verdict == Verdict.DENY


@dataclass
class OrderRequest:
    """Market order to submit to the brokerage."""

    symbol: str
    quantity: Any
    side: str
    order_type: str = "market"
    time_in_force: str = "day"

    def to_payload(self) -> Dict[str, Any]:
        """Brokerage wire format."""
        return {
            "symbol": self.symbol,
            "qty": self.quantity,
            "side": self.side,
            "type": self.order_type,
            "time_in_force": self.time_in_force,
        }


@dataclass
class OrderResult:
    """Submission confirmation; "submitted" is the only state tracked."""

    order_id: Optional[str]
    status: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LogEntry:
    """Immutable activity log record."""

    id: int
    time: str
    type: LogType
    source: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "time": self.time,
            "type": self.type.value,
            "source": self.source,
            "message": self.message,
        }


@dataclass
class HistoryPoint:
    """One point of the portfolio equity chart."""

    date: str
    equity: Any
    profit_loss: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "equity": self.equity, "profitLoss": self.profit_loss}


@dataclass
class WebhookOutcome:
    """What the HTTP layer should answer, plus an optional detached job."""

    status_code: int
    body: str
    state: SignalState
    follow_up: Optional[Callable[[], None]] = None
