import pytest

from algofinance.config import PAPER_BASE_URL, Config
from algofinance.models import ExecutionPolicy

ENV_VARS = [
    "ALPACA_KEY_ID", "ALPACA_SECRET_KEY", "ALPACA_BASE_URL",
    "ADVISORY_API_KEY", "OPENAI_API_KEY", "ADVISORY_BASE_URL", "ADVISORY_MODEL",
    "EXECUTION_POLICY", "LOG_CAPACITY", "BROKER_TIMEOUT_SECONDS", "ADVISORY_TIMEOUT_SECONDS",
    "HISTORY_PERIOD", "HISTORY_TIMEFRAME", "CORS_ORIGINS", "HOST", "PORT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a stray .env file from leaking into the tests
    monkeypatch.setattr("algofinance.config.load_dotenv", lambda *a, **k: False)


def test_defaults_without_credentials():
    config = Config.from_env()

    assert config.alpaca_key_id == ""
    assert config.alpaca_base_url == PAPER_BASE_URL
    assert config.is_paper
    assert config.execution_policy == ExecutionPolicy.GATE
    assert config.log_capacity == 200
    assert config.broker_timeout_seconds == 20
    assert config.advisory_timeout_seconds == 20
    assert config.advisory_base_url is None
    assert config.port == 3001
    assert config.cors_origins == ["*"]
    assert (config.history_period, config.history_timeframe) == ("1M", "1D")


def test_overrides(monkeypatch):
    monkeypatch.setenv("ALPACA_KEY_ID", "k")
    monkeypatch.setenv("ALPACA_SECRET_KEY", "s")
    monkeypatch.setenv("ALPACA_BASE_URL", "https://api.alpaca.markets/")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("ADVISORY_BASE_URL", "https://api.deepseek.com")
    monkeypatch.setenv("EXECUTION_POLICY", "Advisory")
    monkeypatch.setenv("LOG_CAPACITY", "50")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, http://localhost:5173")
    monkeypatch.setenv("PORT", "8080")

    config = Config.from_env()

    assert config.alpaca_base_url == "https://api.alpaca.markets"
    assert not config.is_paper
    assert config.advisory_api_key == "sk-test"
    assert config.advisory_base_url == "https://api.deepseek.com"
    assert config.execution_policy == ExecutionPolicy.ADVISORY
    assert config.log_capacity == 50
    assert config.cors_origins == ["http://localhost:3000", "http://localhost:5173"]
    assert config.port == 8080


def test_advisory_key_preferred_over_openai_key(monkeypatch):
    monkeypatch.setenv("ADVISORY_API_KEY", "primary")
    monkeypatch.setenv("OPENAI_API_KEY", "fallback")

    assert Config.from_env().advisory_api_key == "primary"


@pytest.mark.parametrize(
    "name, value, message",
    [
        ("EXECUTION_POLICY", "both", "EXECUTION_POLICY"),
        ("LOG_CAPACITY", "many", "LOG_CAPACITY must be a valid integer"),
        ("LOG_CAPACITY", "0", "LOG_CAPACITY must be at least 1"),
        ("BROKER_TIMEOUT_SECONDS", "-1", "BROKER_TIMEOUT_SECONDS"),
        ("ADVISORY_TIMEOUT_SECONDS", "soon", "ADVISORY_TIMEOUT_SECONDS"),
        ("PORT", "70000", "PORT"),
    ],
)
def test_invalid_values(monkeypatch, name, value, message):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=message):
        Config.from_env()
