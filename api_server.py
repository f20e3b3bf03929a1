#!/usr/bin/env python3
"""
FastAPI server: TradingView webhook intake and dashboard data endpoints.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv
from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from algofinance.config import Config
from algofinance.exceptions import TradingSystemError
from algofinance.portfolio.history import format_history
from algofinance.services.container import ServiceContainer

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

router = APIRouter()

# Set by main.py before the server starts; built lazily from the environment otherwise
services_instance: Optional[ServiceContainer] = None
_services_lock = threading.Lock()


def get_services() -> ServiceContainer:
    """Return the process-wide service container."""
    global services_instance
    if services_instance is None:
        with _services_lock:
            if services_instance is None:
                services_instance = ServiceContainer.from_config(Config.from_env())
    return services_instance


def error_response(exc: Exception) -> JSONResponse:
    code = getattr(exc, "code", "internal_error")
    return JSONResponse(status_code=500, content={"error": str(exc), "code": code})


async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and return 500 with error details"""
    logger.error(f"Unhandled exception in {request.url.path}: {exc}", exc_info=True)
    return error_response(exc)


async def log_requests(request: Request, call_next):
    logger.debug(f"Incoming {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"Response status: {response.status_code}")
    return response


# Pydantic models
class LogEntryOut(BaseModel):
    id: int
    time: str
    type: str
    source: str
    message: str


class AnalysisResponse(BaseModel):
    analysis: str


@router.get("/", response_class=PlainTextResponse)
async def root():
    return "AlgoFinance Backend is Running"


@router.post("/webhook", response_class=PlainTextResponse)
async def webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    services: ServiceContainer = Depends(get_services),
):
    """
    Receive a TradingView alert and run it through the execution pipeline.

    Under the advisory policy the AI strategy note is scheduled as a
    background task, so it only starts once this response has been sent.
    """
    try:
        payload = await request.json()
    except ValueError:
        # Not JSON at all: the pipeline rejects it as an invalid payload
        payload = None

    outcome = await run_in_threadpool(services.pipeline.handle_signal, payload)
    if outcome.follow_up is not None:
        background_tasks.add_task(outcome.follow_up)
    return PlainTextResponse(outcome.body, status_code=outcome.status_code)


@router.get("/api/analyze-portfolio", response_model=AnalysisResponse)
async def analyze_portfolio(services: ServiceContainer = Depends(get_services)):
    """Ask the AI for a report over every open position."""
    try:
        analysis = await run_in_threadpool(services.analyzer.analyze)
        return {"analysis": analysis}
    except Exception as e:
        logger.error(f"Error analyzing portfolio: {e}", exc_info=not isinstance(e, TradingSystemError))
        return error_response(e)


@router.get("/api/logs", response_model=List[LogEntryOut])
async def get_logs(services: ServiceContainer = Depends(get_services)):
    """Get the activity log, most recent first"""
    return [entry.to_dict() for entry in services.activity_log.snapshot()]


@router.get("/api/account")
async def get_account(services: ServiceContainer = Depends(get_services)):
    """Get the brokerage account snapshot"""
    try:
        return await run_in_threadpool(services.broker.get_account)
    except Exception as e:
        logger.error(f"Error getting account: {e}", exc_info=not isinstance(e, TradingSystemError))
        return error_response(e)


@router.get("/api/positions")
async def get_positions(services: ServiceContainer = Depends(get_services)):
    """Get current open positions"""
    try:
        return await run_in_threadpool(services.broker.get_all_positions)
    except Exception as e:
        logger.error(f"Error getting positions: {e}", exc_info=not isinstance(e, TradingSystemError))
        return error_response(e)


@router.get("/api/history")
async def get_history(
    period: Optional[str] = None,
    timeframe: Optional[str] = None,
    services: ServiceContainer = Depends(get_services),
):
    """Get portfolio history formatted for the equity chart"""
    period = period or services.history_period
    timeframe = timeframe or services.history_timeframe
    try:
        history: Dict[str, Any] = await run_in_threadpool(
            services.broker.get_portfolio_history, period, timeframe, True
        )
        return [point.to_dict() for point in format_history(history)]
    except Exception as e:
        logger.error(f"Error fetching history: {e}", exc_info=not isinstance(e, TradingSystemError))
        return error_response(e)


def create_app(cors_origins: Sequence[str] = ("*",)) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        cors_origins: Origins allowed to call the API from a browser (the dashboard)

    Returns:
        Configured FastAPI app
    """
    application = FastAPI(title="AlgoFinance Webhook Trader")
    application.add_exception_handler(Exception, global_exception_handler)

    # Enable CORS for the dashboard
    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.middleware("http")(log_requests)
    application.include_router(router)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    config = Config.from_env()
    uvicorn.run(create_app(config.cors_origins), host=config.host, port=config.port, log_level="info")
