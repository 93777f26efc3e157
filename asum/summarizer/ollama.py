"""Ollama Summarizer for Local or Remote Models"""

import logging

from asum.summarizer.base import (
    Summarizer,
    UpstreamStatusError,
    MalformedResponseError,
)

logger = logging.getLogger(__name__)


class OllamaSummarizer(Summarizer):
    """
    Ollama client speaking either the chat or the generate API.

    The endpoint decides the shape: a URL ending in /api/generate gets a
    single flattened prompt, anything else gets a system/user message list.
    No retries; any non-2xx status is terminal.
    """

    DEFAULT_URL = "http://localhost:11434/api/chat"
    GENERATE_SUFFIX = "/api/generate"

    @property
    def name(self) -> str:
        return f"Ollama ({self.config.model})"

    @property
    def url(self) -> str:
        return self.config.api_url or self.DEFAULT_URL

    @property
    def is_generate_api(self) -> bool:
        return self.url.endswith(self.GENERATE_SUFFIX)

    def _options(self) -> dict:
        return {
            "temperature": self.config.temperature,
            "num_predict": self.config.num_predict,
            "top_p": self.config.top_p,
        }

    def build_payload(self, diff: str) -> dict:
        """Request body for the configured endpoint."""
        prompt = self._render(diff)

        if self.is_generate_api:
            return {
                "model": self.config.model,
                "prompt": f"{self.config.system_prompt}\n\n{prompt}",
                "stream": False,
                "options": self._options(),
            }

        return {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": self.config.system_prompt},
                {"role": "user", "content": prompt},
            ],
            "stream": False,
            "options": self._options(),
        }

    def extract_text(self, data: dict) -> str:
        """Pull the generated text out of a parsed response.

        Generate API: top-level "response". Chat API: "message.content",
        falling back to "response". Neither present is malformed.
        """
        if not self.is_generate_api:
            message = data.get("message")
            if isinstance(message, dict) and isinstance(message.get("content"), str):
                return message["content"]

        text = data.get("response")
        if isinstance(text, str):
            return text

        expected = "response" if self.is_generate_api else "message.content or response"
        raise MalformedResponseError(
            f"{self.name} response has no {expected} field", self.name
        )

    def summarize(self, diff: str) -> str:
        payload = self.build_payload(diff)
        logger.debug("Sending %d chars to %s at %s", len(diff), self.name, self.url)

        status, body = self._post_json(self.url, payload)
        if not 200 <= status < 300:
            raise UpstreamStatusError(
                f"Ollama API returned error: {status}", self.name, status=status, body=body
            )

        return self._clean(self.extract_text(self._parse_json(body)))
