"""In-memory brokerage and advisory fakes."""

from typing import Any, Dict, List, Optional

from algofinance.advisory.advisory_client import AdvisoryClient
from algofinance.brokers.broker_client import BrokerClient
from algofinance.exceptions import AdvisoryError, BrokerageError
from algofinance.models import OrderRequest, OrderResult


class FakeBroker(BrokerClient):
    """In-memory broker recording every call."""

    name = "Alpaca"

    def __init__(self, error: Optional[str] = None):
        self.error = error
        self.orders: List[OrderRequest] = []
        self.calls: List[str] = []
        self.account: Dict[str, Any] = {
            "portfolio_value": "100000.00",
            "buying_power": "150000.00",
            "cash": "50000.00",
        }
        self.positions: Dict[str, Dict[str, Any]] = {}
        self.history: Dict[str, Any] = {"timestamp": [], "equity": [], "profit_loss": []}

    def _maybe_fail(self):
        if self.error:
            raise BrokerageError(self.error, source=self.name)

    def place_order(self, order: OrderRequest) -> OrderResult:
        self.calls.append("place_order")
        self.orders.append(order)
        self._maybe_fail()
        return OrderResult(order_id="order-1", status="accepted", raw={"id": "order-1"})

    def get_account(self) -> Dict[str, Any]:
        self.calls.append("get_account")
        self._maybe_fail()
        return self.account

    def get_position(self, symbol: str) -> Optional[Dict[str, Any]]:
        self.calls.append("get_position")
        self._maybe_fail()
        return self.positions.get(symbol)

    def get_all_positions(self) -> List[Dict[str, Any]]:
        self.calls.append("get_all_positions")
        self._maybe_fail()
        return list(self.positions.values())

    def get_portfolio_history(self, period: str, timeframe: str, extended_hours: bool = True) -> Dict[str, Any]:
        self.calls.append(f"get_portfolio_history:{period}:{timeframe}")
        self._maybe_fail()
        return self.history


class FakeAdvisor(AdvisoryClient):
    """Advisor returning a canned reply (or raising) and recording prompts."""

    name = "Gemini Pro"

    def __init__(self, reply: str = "APPROVE", error: Optional[str] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise AdvisoryError(self.error, source=self.name)
        return self.reply


