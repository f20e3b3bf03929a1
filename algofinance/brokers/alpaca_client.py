"""
Alpaca Trading API client (REST v2).
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from algofinance.brokers.broker_client import BrokerClient
from algofinance.exceptions import BrokerageError
from algofinance.models import OrderRequest, OrderResult

logger = logging.getLogger(__name__)


class AlpacaClient(BrokerClient):
    """Thin wrapper over the Alpaca REST endpoints used by the trader."""

    name = "Alpaca"

    def __init__(
        self,
        key_id: str,
        secret_key: str,
        base_url: str = "https://paper-api.alpaca.markets",
        timeout: float = 20.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Alpaca client.

        Args:
            key_id: API key id
            secret_key: API secret key
            base_url: Trading API base URL (paper endpoint by default)
            timeout: Per-request timeout in seconds
            session: Optional pre-built session (tests inject a mock)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "APCA-API-KEY-ID": key_id or "",
            "APCA-API-SECRET-KEY": secret_key or "",
            "Content-Type": "application/json",
        })

    def _request(self, method: str, path: str, allow_not_found: bool = False, **kwargs) -> Any:
        """
        Send a request and decode the JSON body.

        Args:
            method: HTTP method
            path: Path below the base URL (e.g. "/v2/account")
            allow_not_found: Return None on 404 instead of raising

        Returns:
            Decoded JSON body, or None for an allowed 404

        Raises:
            BrokerageError: On network failure, timeout, non-2xx status or bad JSON
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout:
            raise BrokerageError(f"Alpaca request timed out after {self.timeout:g}s", source=self.name)
        except requests.exceptions.RequestException as e:
            raise BrokerageError(str(e), source=self.name)

        if allow_not_found and response.status_code == 404:
            return None

        if not response.ok:
            message = self._error_message(response)
            logger.warning(f"Alpaca {method} {path} failed ({response.status_code}): {message}")
            raise BrokerageError(message, source=self.name)

        try:
            return response.json()
        except ValueError:
            raise BrokerageError("Alpaca returned an invalid JSON response", source=self.name)

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Prefer the broker's own JSON message, fall back to body text or reason."""
        try:
            data = response.json()
            if isinstance(data, dict) and data.get("message"):
                return str(data["message"])
        except ValueError:
            pass
        text = (response.text or "").strip()
        return text or f"{response.status_code} {response.reason}"

    def place_order(self, order: OrderRequest) -> OrderResult:
        payload = order.to_payload()
        logger.info(f"Submitting order: {payload}")
        data = self._request("POST", "/v2/orders", json=payload)
        if not isinstance(data, dict):
            data = {}
        return OrderResult(order_id=data.get("id"), status=data.get("status"), raw=data)

    def get_account(self) -> Dict[str, Any]:
        return self._request("GET", "/v2/account")

    def get_position(self, symbol: str) -> Optional[Dict[str, Any]]:
        return self._request("GET", f"/v2/positions/{symbol}", allow_not_found=True)

    def get_all_positions(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/v2/positions") or []

    def get_portfolio_history(
        self, period: str, timeframe: str, extended_hours: bool = True
    ) -> Dict[str, Any]:
        params = {
            "period": period,
            "timeframe": timeframe,
            "extended_hours": "true" if extended_hours else "false",
        }
        return self._request("GET", "/v2/account/portfolio/history", params=params) or {}
