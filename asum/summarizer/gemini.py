"""Gemini (Google Generative Language API) Summarizer"""

import logging
import time
from typing import Callable
from urllib.parse import quote

from asum.summarizer.base import (
    AIConfig,
    Summarizer,
    ConfigurationError,
    UpstreamStatusError,
    RateLimitExhaustedError,
    MalformedResponseError,
)

logger = logging.getLogger(__name__)


class GeminiSummarizer(Summarizer):
    """
    Gemini API client. Requires an API key, sent as the ``key`` query parameter.

    Rate limiting (HTTP 429) is the only retried condition: up to
    MAX_RETRIES more attempts, waiting 2s, 4s, 8s between them.
    """

    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
    MAX_RETRIES = 3
    INITIAL_BACKOFF = 2
    RATE_LIMITED = 429

    def __init__(
        self,
        config: AIConfig,
        base_url: str | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(config)
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip('/')
        self._sleep = sleep

    @property
    def name(self) -> str:
        return f"Gemini ({self.config.model})"

    def _endpoint(self, api_key: str) -> str:
        model = quote(self.config.model, safe='')
        return f"{self.base_url}/v1beta/models/{model}:generateContent?key={quote(api_key, safe='')}"

    def build_payload(self, diff: str) -> dict:
        return {
            "system_instruction": {
                "parts": [{"text": self.config.system_prompt}],
            },
            "contents": [
                {"parts": [{"text": self._render(diff)}]},
            ],
            "generationConfig": {
                "temperature": self.config.temperature,
                "topP": self.config.top_p,
                "maxOutputTokens": self.config.num_predict,
            },
        }

    def extract_text(self, data: dict) -> str:
        """candidates[0].content.parts[0].text"""
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError(
                f"{self.name} response has no candidates[0].content.parts[0].text", self.name
            ) from e
        if not isinstance(text, str):
            raise MalformedResponseError(f"{self.name} returned non-text content", self.name)
        return text

    def _send(self, url: str, payload: dict) -> str:
        """POST with bounded exponential backoff on 429. Returns the 2xx body."""
        backoff = self.INITIAL_BACKOFF

        for attempt in range(self.MAX_RETRIES + 1):
            status, body = self._post_json(url, payload)

            if 200 <= status < 300:
                return body

            if status != self.RATE_LIMITED:
                raise UpstreamStatusError(
                    f"Gemini API returned error: {status} - {body}",
                    self.name, status=status, body=body,
                )

            if attempt == self.MAX_RETRIES:
                raise RateLimitExhaustedError(
                    f"Gemini API still rate limited after {self.MAX_RETRIES} retries: {body}",
                    self.name, body=body, attempts=attempt + 1,
                )

            logger.warning(
                "Gemini API rate limited (429). Retrying in %ss... (Attempt %d/%d)",
                backoff, attempt + 1, self.MAX_RETRIES,
            )
            self._sleep(backoff)
            backoff *= 2

        # Unreachable: the last attempt either returns or raises
        raise RateLimitExhaustedError("Gemini API retry loop exited", self.name)

    def summarize(self, diff: str) -> str:
        api_key = self.config.api_key
        if not api_key:
            raise ConfigurationError(
                "Gemini API key is missing. Set api_key under [gemini] in asum.toml", self.name
            )

        payload = self.build_payload(diff)
        logger.debug("Sending %d chars to %s", len(diff), self.name)

        body = self._send(self._endpoint(api_key), payload)
        return self._clean(self.extract_text(self._parse_json(body)))
