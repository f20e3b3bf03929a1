"""Brokerage client interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from algofinance.models import OrderRequest, OrderResult


class BrokerClient(ABC):
    """Call surface the pipeline and dashboard endpoints need from a brokerage.

    Every method raises :class:`algofinance.exceptions.BrokerageError` on failure.
    """

    name: str = "Broker"

    @abstractmethod
    def place_order(self, order: OrderRequest) -> OrderResult:
        """Submit an order and return the submission confirmation."""

    @abstractmethod
    def get_account(self) -> Dict[str, Any]:
        """Return the account snapshot as provided by the brokerage."""

    @abstractmethod
    def get_position(self, symbol: str) -> Optional[Dict[str, Any]]:
        """Return the open position for ``symbol``, or None when nothing is held."""

    @abstractmethod
    def get_all_positions(self) -> List[Dict[str, Any]]:
        """Return every open position."""

    @abstractmethod
    def get_portfolio_history(
        self, period: str, timeframe: str, extended_hours: bool = True
    ) -> Dict[str, Any]:
        """Return the raw portfolio history (parallel timestamp/equity/profit_loss arrays)."""
