"""Wiring of adapters, activity log and pipeline for the API server."""

import logging
from dataclasses import dataclass
from typing import Optional

from algofinance.advisory.advisory_client import AdvisoryClient, OpenAIAdvisoryClient
from algofinance.brokers.alpaca_client import AlpacaClient
from algofinance.brokers.broker_client import BrokerClient
from algofinance.config import Config
from algofinance.memory.activity_log import ActivityLog
from algofinance.models import ExecutionPolicy
from algofinance.pipeline.signal_pipeline import SignalPipeline
from algofinance.portfolio.portfolio_analyzer import PortfolioAnalyzer

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Everything the HTTP layer needs, built once per process."""

    broker: BrokerClient
    advisor: AdvisoryClient
    activity_log: ActivityLog
    pipeline: SignalPipeline
    analyzer: PortfolioAnalyzer
    history_period: str = "1M"
    history_timeframe: str = "1D"

    @classmethod
    def build(
        cls,
        broker: BrokerClient,
        advisor: AdvisoryClient,
        activity_log: Optional[ActivityLog] = None,
        policy: ExecutionPolicy = ExecutionPolicy.GATE,
        history_period: str = "1M",
        history_timeframe: str = "1D",
    ) -> "ServiceContainer":
        if activity_log is None:
            activity_log = ActivityLog()
        return cls(
            broker=broker,
            advisor=advisor,
            activity_log=activity_log,
            pipeline=SignalPipeline(broker, advisor, activity_log, policy),
            analyzer=PortfolioAnalyzer(broker, advisor),
            history_period=history_period,
            history_timeframe=history_timeframe,
        )

    @classmethod
    def from_config(cls, config: Config) -> "ServiceContainer":
        """Build the production wiring (Alpaca + OpenAI-compatible advisory)."""
        broker = AlpacaClient(
            key_id=config.alpaca_key_id,
            secret_key=config.alpaca_secret_key,
            base_url=config.alpaca_base_url,
            timeout=config.broker_timeout_seconds,
        )
        advisor = OpenAIAdvisoryClient(
            api_key=config.advisory_api_key,
            model=config.advisory_model,
            base_url=config.advisory_base_url,
            timeout=config.advisory_timeout_seconds,
        )
        logger.info(
            f"Services ready: policy={config.execution_policy.value}, "
            f"broker={config.alpaca_base_url}, advisory model={config.advisory_model}, "
            f"log capacity={config.log_capacity}"
        )
        return cls.build(
            broker,
            advisor,
            activity_log=ActivityLog(config.log_capacity),
            policy=config.execution_policy,
            history_period=config.history_period,
            history_timeframe=config.history_timeframe,
        )
