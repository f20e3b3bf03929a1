"""Portfolio history formatting for the dashboard equity chart."""

from datetime import datetime
from typing import Any, Dict, List

from algofinance.models import HistoryPoint


def format_history(history: Dict[str, Any]) -> List[HistoryPoint]:
    """
    Join the brokerage's parallel history arrays by index.

    Args:
        history: Raw history with ``timestamp`` (epoch seconds), ``equity`` and
            ``profit_loss`` arrays; missing arrays count as empty

    Returns:
        One point per index, as many as the shortest array
    """
    timestamps = history.get("timestamp") or []
    equity = history.get("equity") or []
    profit_loss = history.get("profit_loss") or []

    count = min(len(timestamps), len(equity), len(profit_loss))
    return [
        HistoryPoint(
            date=datetime.fromtimestamp(timestamps[i]).date().isoformat(),
            equity=equity[i],
            profit_loss=profit_loss[i],
        )
        for i in range(count)
    ]
