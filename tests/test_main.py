import logging
import sys

import pytest

import main
from algofinance.models import ExecutionPolicy


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("EXECUTION_POLICY", "PORT", "HOST", "LOG_CAPACITY", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("algofinance.config.load_dotenv", lambda *a, **k: False)


def test_cli_overrides_policy_host_and_port():
    args = main.parse_arguments(["--policy", "advisory", "--port", "8081", "--host", "127.0.0.1"])

    config = main.load_config(args)

    assert config.execution_policy == ExecutionPolicy.ADVISORY
    assert config.port == 8081
    assert config.host == "127.0.0.1"


def test_missing_env_file_is_a_config_error(tmp_path):
    args = main.parse_arguments(["--env", str(tmp_path / "missing.env")])

    with pytest.raises(ValueError, match="Environment file not found"):
        main.load_config(args)


def test_main_returns_1_on_bad_config(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_CAPACITY", "zero")
    monkeypatch.setattr(main, "setup_logging", lambda **kwargs: None)

    assert main.main([]) == 1


def test_json_formatter_includes_exception():
    formatter = main.JSONFormatter()
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed %s", ("here",), sys.exc_info())

    output = formatter.format(record)

    assert '"message": "failed here"' in output
    assert "RuntimeError: boom" in output


def test_main_applies_configured_cors_origins(monkeypatch, tmp_path):
    import api_server
    from fastapi.testclient import TestClient

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CORS_ORIGINS", "https://dashboard.example.com")
    monkeypatch.setattr(main, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(api_server, "services_instance", None)
    served = []
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: served.append(app))

    assert main.main([]) == 0

    response = TestClient(served[0]).get("/", headers={"Origin": "https://dashboard.example.com"})
    assert response.headers["access-control-allow-origin"] == "https://dashboard.example.com"
