from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from algofinance.advisory.advisory_client import OpenAIAdvisoryClient
from algofinance.exceptions import AdvisoryError


def completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def sdk():
    return MagicMock()


def test_generate_returns_stripped_text(sdk):
    sdk.chat.completions.create.return_value = completion("  APPROVE\n")
    client = OpenAIAdvisoryClient("key", model="deepseek-chat", timeout=12, client=sdk)

    assert client.generate("prompt") == "APPROVE"
    sdk.chat.completions.create.assert_called_once_with(
        model="deepseek-chat",
        messages=[{"role": "user", "content": "prompt"}],
        timeout=12,
    )
    assert client.name == "deepseek-chat"


def test_sdk_error_becomes_advisory_error(sdk):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    sdk.chat.completions.create.side_effect = openai.APIConnectionError(request=request)
    client = OpenAIAdvisoryClient("key", client=sdk)

    with pytest.raises(AdvisoryError):
        client.generate("prompt")


def test_timeout_becomes_advisory_error(sdk):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    sdk.chat.completions.create.side_effect = openai.APITimeoutError(request=request)
    client = OpenAIAdvisoryClient("key", timeout=5, client=sdk)

    with pytest.raises(AdvisoryError, match="timed out after 5s"):
        client.generate("prompt")


@pytest.mark.parametrize("content", [None, ""])
def test_empty_completion_is_an_error(sdk, content):
    sdk.chat.completions.create.return_value = completion(content)
    client = OpenAIAdvisoryClient("key", client=sdk)

    with pytest.raises(AdvisoryError, match="empty response"):
        client.generate("prompt")


def test_sdk_client_built_lazily(monkeypatch):
    built = []

    class StubOpenAI:
        def __init__(self, **kwargs):
            built.append(kwargs)
            self.chat = MagicMock()
            self.chat.completions.create.return_value = completion("DENY")

    monkeypatch.setattr("algofinance.advisory.advisory_client.OpenAI", StubOpenAI)
    client = OpenAIAdvisoryClient("key", base_url="https://api.deepseek.com", timeout=7)
    assert built == []

    assert client.generate("prompt") == "DENY"
    assert built == [{"api_key": "key", "base_url": "https://api.deepseek.com", "timeout": 7, "max_retries": 0}]
