#!/usr/bin/env python3
"""
Main entry point for the AlgoFinance webhook trader.

This script loads configuration, wires the brokerage and advisory clients,
and starts the API server that receives TradingView webhooks.
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from algofinance.config import Config
from algofinance.models import ExecutionPolicy

__version__ = "1.0.0"


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }
        # Add exception info if present
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def setup_logging(verbose: bool = False, json_logs: bool = False, log_dir: str = "logs") -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, set log level to DEBUG, otherwise INFO
        json_logs: If True, use the JSON formatter
        log_dir: Directory for the server log file
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    Path(log_dir).mkdir(exist_ok=True)

    if json_logs:
        formatter = JSONFormatter()
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        date_format = "%Y-%m-%d %H:%M:%S"
        formatter = logging.Formatter(log_format, date_format)

    handlers = [
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(os.path.join(log_dir, "server.log"), mode="a")
    ]
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    # Reduce noisy third-party loggers
    for name in ("httpx", "httpcore", "openai", "urllib3", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="AlgoFinance - TradingView webhook trader with AI risk checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                     # Run with default .env file
  python main.py --env .env.paper    # Run with custom env file
  python main.py --policy advisory   # Execute first, AI strategy note afterwards
  python main.py --verbose           # Run with debug logging

Environment Variables:
  ALPACA_KEY_ID, ALPACA_SECRET_KEY, ADVISORY_API_KEY, EXECUTION_POLICY, PORT, ...
        """
    )

    parser.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to environment file (default: .env)"
    )

    parser.add_argument(
        "--policy",
        choices=[p.value for p in ExecutionPolicy],
        help="Override EXECUTION_POLICY (gate: AI can veto; advisory: AI note after execution)"
    )

    parser.add_argument("--host", type=str, help="Override HOST")
    parser.add_argument("--port", type=int, help="Override PORT")

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging"
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Enable JSON structured logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"AlgoFinance Webhook Trader v{__version__}"
    )

    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    """Load the env file (if given) and build the config, applying CLI overrides."""
    if args.env != ".env":
        from dotenv import load_dotenv
        if not Path(args.env).exists():
            raise ValueError(f"Environment file not found: {args.env}")
        load_dotenv(args.env, override=True)

    config = Config.from_env()
    if args.policy:
        config.execution_policy = ExecutionPolicy(args.policy)
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    return config


def main(argv=None) -> int:
    """
    Main entry point for the webhook trader.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_arguments(argv)

    setup_logging(verbose=args.verbose, json_logs=args.json_logs)
    logger = logging.getLogger(__name__)

    logger.info("=" * 80)
    logger.info("ALGOFINANCE WEBHOOK TRADER")
    logger.info("=" * 80)

    try:
        logger.info(f"Loading configuration from: {args.env}")
        config = load_config(args)
        logger.info("[OK] Configuration loaded successfully")
    except ValueError as e:
        logger.error(f"[ERROR] Configuration error: {e}")
        logger.error("Please check your .env file.")
        return 1

    if config.is_paper:
        logger.info("PAPER TRADING - orders go to the Alpaca paper endpoint")
    else:
        logger.warning("!" * 80)
        logger.warning(f"!!! NON-PAPER BROKER ENDPOINT: {config.alpaca_base_url} !!!")
        logger.warning("!" * 80)

    if config.execution_policy == ExecutionPolicy.GATE:
        logger.info("Execution policy: GATE (AI risk check can veto each signal)")
    else:
        logger.info("Execution policy: ADVISORY (orders execute first, AI strategy note afterwards)")

    import uvicorn
    import api_server
    from algofinance.services.container import ServiceContainer

    # Register services BEFORE starting the API server
    api_server.services_instance = ServiceContainer.from_config(config)
    app = api_server.create_app(config.cors_origins)

    try:
        logger.info(f"Server running on port {config.port}")
        uvicorn.run(app, host=config.host, port=config.port, log_level="warning")
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    except Exception as e:
        logger.error(f"[ERROR] API server crashed: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
