"""Configuration module for the AlgoFinance webhook trader."""

import os
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

from algofinance.models import ExecutionPolicy


PAPER_BASE_URL = "https://paper-api.alpaca.markets"


@dataclass
class Config:
    """Configuration for the webhook trader loaded from environment variables."""

    # Brokerage
    alpaca_key_id: str
    alpaca_secret_key: str
    alpaca_base_url: str

    # Advisory (any OpenAI-compatible endpoint)
    advisory_api_key: str
    advisory_base_url: Optional[str]
    advisory_model: str

    # Pipeline behavior
    execution_policy: ExecutionPolicy
    log_capacity: int

    # Timeouts for external calls
    broker_timeout_seconds: float
    advisory_timeout_seconds: float

    # Dashboard defaults
    history_period: str = "1M"
    history_timeframe: str = "1D"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    @property
    def is_paper(self) -> bool:
        """True when orders go to the paper trading endpoint."""
        return "paper-api" in self.alpaca_base_url

    @classmethod
    def from_env(cls) -> "Config":
        """
        Load configuration from environment variables with validation.

        Credentials are not required here: a missing key surfaces as a
        failure of the first brokerage or advisory call.

        Returns:
            Config: Validated configuration object

        Raises:
            ValueError: If a numeric field or the execution policy is invalid
        """
        # Load .env file if it exists
        load_dotenv()

        alpaca_key_id = os.getenv("ALPACA_KEY_ID", "")
        alpaca_secret_key = os.getenv("ALPACA_SECRET_KEY", "")
        alpaca_base_url = os.getenv("ALPACA_BASE_URL", PAPER_BASE_URL).rstrip("/")

        advisory_api_key = os.getenv("ADVISORY_API_KEY") or os.getenv("OPENAI_API_KEY", "")
        advisory_base_url = os.getenv("ADVISORY_BASE_URL") or None
        advisory_model = os.getenv("ADVISORY_MODEL", "gpt-4o-mini")

        policy_str = os.getenv("EXECUTION_POLICY", ExecutionPolicy.GATE.value).strip().lower()
        try:
            execution_policy = ExecutionPolicy(policy_str)
        except ValueError:
            allowed = ", ".join(p.value for p in ExecutionPolicy)
            raise ValueError(f"EXECUTION_POLICY must be one of: {allowed}")

        try:
            log_capacity = int(os.getenv("LOG_CAPACITY", "200"))
        except ValueError:
            raise ValueError("LOG_CAPACITY must be a valid integer")

        try:
            broker_timeout_seconds = float(os.getenv("BROKER_TIMEOUT_SECONDS", "20"))
        except ValueError:
            raise ValueError("BROKER_TIMEOUT_SECONDS must be a valid float")

        try:
            advisory_timeout_seconds = float(os.getenv("ADVISORY_TIMEOUT_SECONDS", "20"))
        except ValueError:
            raise ValueError("ADVISORY_TIMEOUT_SECONDS must be a valid float")

        try:
            port = int(os.getenv("PORT", "3001"))
        except ValueError:
            raise ValueError("PORT must be a valid integer")

        # Validate numeric ranges
        if log_capacity < 1:
            raise ValueError("LOG_CAPACITY must be at least 1")

        if broker_timeout_seconds <= 0:
            raise ValueError("BROKER_TIMEOUT_SECONDS must be greater than 0")

        if advisory_timeout_seconds <= 0:
            raise ValueError("ADVISORY_TIMEOUT_SECONDS must be greater than 0")

        if not 0 < port < 65536:
            raise ValueError("PORT must be between 1 and 65535")

        origins_str = os.getenv("CORS_ORIGINS", "*")
        cors_origins = [o.strip() for o in origins_str.split(",") if o.strip()] or ["*"]

        return cls(
            alpaca_key_id=alpaca_key_id,
            alpaca_secret_key=alpaca_secret_key,
            alpaca_base_url=alpaca_base_url,
            advisory_api_key=advisory_api_key,
            advisory_base_url=advisory_base_url,
            advisory_model=advisory_model,
            execution_policy=execution_policy,
            log_capacity=log_capacity,
            broker_timeout_seconds=broker_timeout_seconds,
            advisory_timeout_seconds=advisory_timeout_seconds,
            history_period=os.getenv("HISTORY_PERIOD", "1M"),
            history_timeframe=os.getenv("HISTORY_TIMEFRAME", "1D"),
            cors_origins=cors_origins,
            host=os.getenv("HOST", "0.0.0.0"),
            port=port,
        )
