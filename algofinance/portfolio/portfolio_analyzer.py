"""AI portfolio report over every open position."""

import logging

from algofinance.advisory.advisory_client import AdvisoryClient
from algofinance.advisory.prompts import build_portfolio_prompt
from algofinance.brokers.broker_client import BrokerClient

logger = logging.getLogger(__name__)

NO_POSITIONS_MESSAGE = "No open positions to analyze. Place some trades first!"


class PortfolioAnalyzer:
    """Builds a position summary and asks the advisory service for a report."""

    def __init__(self, broker: BrokerClient, advisor: AdvisoryClient):
        self.broker = broker
        self.advisor = advisor

    def analyze(self) -> str:
        """
        Produce a free-form portfolio report.

        Returns:
            str: Raw advisory text, or a fixed message when nothing is held

        Raises:
            BrokerageError: If positions or account cannot be fetched
            AdvisoryError: If the report cannot be generated
        """
        positions = self.broker.get_all_positions()
        account = self.broker.get_account()

        if not positions:
            logger.info("Portfolio analysis skipped: no open positions")
            return NO_POSITIONS_MESSAGE

        logger.info(f"Analyzing portfolio with {len(positions)} open positions")
        return self.advisor.generate(build_portfolio_prompt(positions, account))
