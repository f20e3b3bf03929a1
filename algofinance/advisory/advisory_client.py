"""Advisory (text generation) client interface and OpenAI-compatible implementation."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import openai
from openai import OpenAI

from algofinance.exceptions import AdvisoryError

logger = logging.getLogger(__name__)


class AdvisoryClient(ABC):
    """Single-turn prompt -> completion surface."""

    name: str = "AI"

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Generate a natural-language completion for a prompt.

        Args:
            prompt: Full prompt text

        Returns:
            str: Raw completion text

        Raises:
            AdvisoryError: On any failure
        """
        pass


class OpenAIAdvisoryClient(AdvisoryClient):
    """Chat completions against OpenAI or any OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        timeout: float = 20.0,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize advisory client.

        The SDK client is created on first use so a missing key fails the
        call that needs it rather than the server start.

        Args:
            api_key: Advisory API key
            model: Model name
            base_url: Optional OpenAI-compatible base URL (e.g. DeepSeek)
            timeout: Per-call timeout in seconds
            client: Optional pre-built SDK client (tests inject a mock)
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = timeout
        self._client = client
        self.name = model

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def generate(self, prompt: str) -> str:
        try:
            response = self._get_client().chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                timeout=self.timeout,
            )
        except openai.APITimeoutError:
            raise AdvisoryError(f"Advisory request timed out after {self.timeout:g}s", source=self.name)
        except openai.OpenAIError as e:
            logger.warning(f"Advisory call failed: {type(e).__name__}: {e}")
            raise AdvisoryError(str(e), source=self.name)

        if not response.choices or not response.choices[0].message.content:
            raise AdvisoryError("Advisory service returned an empty response", source=self.name)
        return response.choices[0].message.content.strip()
