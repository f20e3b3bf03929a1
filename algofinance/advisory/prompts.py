"""Prompt builders for the risk gate, post-trade strategy note and portfolio report."""

from typing import Any, Dict, List, Optional

from algofinance.models import TradeSignal


def _num(value: Any, default: float = 0.0) -> float:
    """Brokerage numbers arrive as strings; anything unparseable becomes default."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def build_risk_prompt(signal: TradeSignal) -> str:
    """Prompt asking for a one-word APPROVE/DENY on an inbound signal."""
    timestamp = signal.timestamp or "not provided"
    return f"""Act as a financial risk manager.
Signal: {signal.action} {signal.ticker} at {signal.price}.
Signal time: {timestamp}
Context: Current Market.
Task: Respond with strictly ONE word: "APPROVE" or "DENY".
Criteria: Deny if it sounds like a scam token or extremely low volume penny stock. Approve major stocks/crypto."""


def build_strategy_prompt(
    signal: TradeSignal,
    account: Dict[str, Any],
    position: Optional[Dict[str, Any]],
) -> str:
    """
    Prompt asking for a short follow-up recommendation after a trade was placed.

    Args:
        signal: The signal that was just executed
        account: Account snapshot after the order
        position: Position in the traded symbol, None when nothing is held

    Returns:
        str: Prompt text
    """
    portfolio_value = _num(account.get("portfolio_value", account.get("equity")))
    buying_power = _num(account.get("buying_power"))
    cash = _num(account.get("cash"))
    position_qty = _num(position.get("qty")) if position else 0.0

    return f"""You are a portfolio strategist reviewing a trade that was just executed.

TRADE:
- {signal.side.upper()} {signal.quantity} {signal.ticker} (signal price: {signal.price})

ACCOUNT AFTER THE TRADE:
- Portfolio Value: ${portfolio_value:,.2f}
- Buying Power: ${buying_power:,.2f}
- Cash: ${cash:,.2f}
- Current {signal.ticker} Position: {position_qty:g} shares

Give a brief strategy recommendation (3 sentences max): should the position be
scaled, held or hedged, and what risk should be watched next?"""


def format_position_line(position: Dict[str, Any]) -> str:
    """One summary line for a held position."""
    market_value = _num(position.get("market_value"))
    unrealized_pl = _num(position.get("unrealized_pl"))
    unrealized_plpc = _num(position.get("unrealized_plpc")) * 100
    return (
        f"- {position.get('symbol', '?')}: {position.get('qty', '?')} shares, "
        f"Market Value ${market_value:,.2f}, "
        f"Unrealized P/L ${unrealized_pl:,.2f} ({unrealized_plpc:+.2f}%)"
    )


def build_portfolio_prompt(positions: List[Dict[str, Any]], account: Dict[str, Any]) -> str:
    """Prompt asking for a structured report over every open position."""
    lines = [format_position_line(p) for p in positions]
    portfolio_value = _num(account.get("portfolio_value", account.get("equity")))
    cash = _num(account.get("cash"))
    buying_power = _num(account.get("buying_power"))

    positions_block = "\n".join(lines)
    return f"""Act as a professional portfolio manager. Analyze this portfolio.

OPEN POSITIONS ({len(positions)}):
{positions_block}

ACCOUNT TOTALS:
- Portfolio Value: ${portfolio_value:,.2f}
- Cash: ${cash:,.2f}
- Buying Power: ${buying_power:,.2f}

Provide a report with these sections:
1. BEST PERFORMER: which position is doing best and why it matters.
2. WORST PERFORMER: which position is doing worst, and whether to cut losses.
3. CONCENTRATION: is the portfolio too concentrated in any single position or sector?
Keep it concise and actionable."""
