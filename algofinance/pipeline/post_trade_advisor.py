"""Best-effort AI strategy note generated after a trade has been executed."""

import logging

from algofinance.advisory.advisory_client import AdvisoryClient
from algofinance.advisory.prompts import build_strategy_prompt
from algofinance.brokers.broker_client import BrokerClient
from algofinance.memory.activity_log import ActivityLog
from algofinance.models import LogType, TradeSignal

logger = logging.getLogger(__name__)


class PostTradeAdvisor:
    """Fetches fresh account state and records an AI_STRATEGY note.

    Runs detached from the webhook response. Failures never reach the
    activity log or the caller; they are only written to the diagnostic log.
    """

    def __init__(self, broker: BrokerClient, advisor: AdvisoryClient, activity_log: ActivityLog):
        self.broker = broker
        self.advisor = advisor
        self.activity_log = activity_log

    def run(self, signal: TradeSignal) -> None:
        try:
            account = self.broker.get_account()
            position = self.broker.get_position(signal.ticker)
            prompt = build_strategy_prompt(signal, account, position)
            recommendation = self.advisor.generate(prompt)
            self.activity_log.record(LogType.AI_STRATEGY, self.advisor.name, recommendation)
        except Exception as e:
            logger.error(f"Post-trade advisory for {signal.ticker} failed: {e}", exc_info=True)

    def job_for(self, signal: TradeSignal):
        """Zero-argument callable suitable for a background task."""
        def _job() -> None:
            self.run(signal)
        return _job
