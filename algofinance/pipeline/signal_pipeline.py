"""Webhook signal ingestion and execution pipeline.

One inbound signal goes through:

    RECEIVED -> VALIDATED -> (GATE_PENDING ->) EXECUTING -> EXECUTED -> (ADVISING) -> DONE

with early exits to REJECTED (bad payload), DENIED (AI veto) or FAILED
(adapter error at a fatal point). Exactly one execution policy applies per
pipeline instance:

- gate: the AI risk check runs first and can veto the order
- advisory: the order is placed straight away and an AI strategy note is
  produced afterwards, detached from the HTTP response
"""

import logging
from typing import Any, Optional

from algofinance.advisory.advisory_client import AdvisoryClient
from algofinance.advisory.prompts import build_risk_prompt
from algofinance.advisory.verdict import parse_verdict
from algofinance.brokers.broker_client import BrokerClient
from algofinance.exceptions import TradingSystemError, ValidationError
from algofinance.memory.activity_log import ActivityLog
from algofinance.models import (
    AdvisoryDecision,
    ExecutionPolicy,
    LogType,
    OrderRequest,
    SignalState,
    TradeSignal,
    Verdict,
    WebhookOutcome,
)
from algofinance.pipeline.post_trade_advisor import PostTradeAdvisor

logger = logging.getLogger(__name__)

SIGNAL_SOURCE = "TradingView"
SYSTEM_SOURCE = "System"

INVALID_PAYLOAD = "Invalid payload"
ORDER_EXECUTED = "Order Executed"
TRADE_DENIED = "Trade Denied by AI"


class SignalPipeline:
    """Validates a trade signal, applies the execution policy and records outcomes."""

    def __init__(
        self,
        broker: BrokerClient,
        advisor: AdvisoryClient,
        activity_log: ActivityLog,
        policy: ExecutionPolicy = ExecutionPolicy.GATE,
    ):
        """
        Initialize the pipeline.

        Args:
            broker: Brokerage adapter used to place orders
            advisor: Advisory adapter for the gate or the post-trade note
            activity_log: Shared activity log
            policy: Execution policy governing order placement
        """
        self.broker = broker
        self.advisor = advisor
        self.activity_log = activity_log
        self.policy = ExecutionPolicy(policy)
        self.post_trade_advisor = PostTradeAdvisor(broker, advisor, activity_log)

    def _transition(self, signal: TradeSignal, state: SignalState) -> SignalState:
        logger.debug(f"Signal {signal.ticker or '?'}: {state.value}")
        return state

    def handle_signal(self, payload: Any) -> WebhookOutcome:
        """
        Process one inbound webhook body.

        Args:
            payload: Decoded JSON body (anything other than an object is invalid)

        Returns:
            WebhookOutcome with the HTTP status/body and, under the advisory
            policy, a follow-up job to run after the response is sent
        """
        signal = TradeSignal.from_payload(payload)
        logger.info(f"Received Signal: {payload}")
        self._transition(signal, SignalState.RECEIVED)

        # Audit trail of all received traffic, even invalid bodies
        self.activity_log.record(LogType.WEBHOOK, SIGNAL_SOURCE, signal.summary())

        try:
            self.validate(signal)
            if self.policy == ExecutionPolicy.GATE:
                decision = self._run_gate(signal)
                if decision.denied:
                    state = self._transition(signal, SignalState.DENIED)
                    return WebhookOutcome(200, TRADE_DENIED, state)

            self._execute(signal)
        except ValidationError as e:
            logger.info(f"Rejected signal: {e.message}")
            state = self._transition(signal, SignalState.REJECTED)
            return WebhookOutcome(400, INVALID_PAYLOAD, state)
        except TradingSystemError as e:
            return self._fail(signal, e.source, e.message)
        except Exception as e:
            logger.error(f"Unexpected error handling signal {signal.raw}: {e}", exc_info=True)
            return self._fail(signal, SYSTEM_SOURCE, str(e))

        if self.policy == ExecutionPolicy.ADVISORY:
            state = self._transition(signal, SignalState.ADVISING)
            return WebhookOutcome(200, ORDER_EXECUTED, state, follow_up=self.post_trade_advisor.job_for(signal))

        state = self._transition(signal, SignalState.DONE)
        return WebhookOutcome(200, ORDER_EXECUTED, state)

    def validate(self, signal: TradeSignal) -> None:
        """
        Check that the signal names a ticker and an action.

        Raises:
            ValidationError: If either field is missing or blank
        """
        if not signal.is_valid():
            raise ValidationError(f"{INVALID_PAYLOAD}: ticker and action are required", SIGNAL_SOURCE)
        self._transition(signal, SignalState.VALIDATED)

    def _run_gate(self, signal: TradeSignal) -> AdvisoryDecision:
        """Ask the advisory service for an APPROVE/DENY verdict. AdvisoryError propagates."""
        self._transition(signal, SignalState.GATE_PENDING)
        self.activity_log.record(LogType.AI_ANALYSIS, self.advisor.name, f"Analyzing risk for {signal.ticker}...")

        raw = self.advisor.generate(build_risk_prompt(signal))
        decision = AdvisoryDecision(raw=raw, verdict=parse_verdict(raw))
        self.activity_log.record(
            LogType.AI_ANALYSIS,
            self.advisor.name,
            f"Decision: {raw.strip().upper()} ({decision.verdict.value})",
        )

        if decision.verdict == Verdict.UNKNOWN:
            # Neither word found: the trade still goes through
            logger.warning(f"Unrecognized AI verdict for {signal.ticker}, proceeding with execution: {raw!r}")
        return decision

    def _execute(self, signal: TradeSignal) -> None:
        """Submit a market/day order. BrokerageError propagates."""
        self._transition(signal, SignalState.EXECUTING)
        order = OrderRequest(symbol=signal.ticker, quantity=signal.quantity, side=signal.side)
        result = self.broker.place_order(order)
        logger.info(f"Order submitted for {signal.ticker}: id={result.order_id} status={result.status}")

        self.activity_log.record(
            LogType.EXECUTION,
            self.broker.name,
            f"Filled: {order.side.upper()} {order.quantity} {order.symbol}",
        )
        self._transition(signal, SignalState.EXECUTED)

    def _fail(self, signal: TradeSignal, source: Optional[str], message: str) -> WebhookOutcome:
        # The ERROR entry is echoed to the diagnostic log by the activity log
        self.activity_log.record(LogType.ERROR, source or SYSTEM_SOURCE, message)
        state = self._transition(signal, SignalState.FAILED)
        return WebhookOutcome(500, message, state)
