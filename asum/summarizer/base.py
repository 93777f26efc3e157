"""Summarizer Base Classes, Errors and Shared Helpers"""

import http.client
import json
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass

from asum.prompts import render_prompt

# Lines echoing the prompt back at us
BOILERPLATE_MARKERS = ("diff to analyze", "input diff")

BULLET_MARKERS = ("- ", "* ")


@dataclass(frozen=True)
class AIConfig:
    """Everything a provider needs to execute one request."""
    model: str
    temperature: float
    top_p: float
    num_predict: int
    system_prompt: str
    user_prompt: str
    api_url: str | None = None
    api_key: str | None = None
    bullets_only: bool = False
    timeout: float = 120.0


class SummarizerError(Exception):
    """Base class for all summarization failures."""

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message)
        self.provider = provider


class ConfigurationError(SummarizerError):
    """Missing credential or unknown provider. Raised before any network call."""
    pass


class TransportError(SummarizerError):
    """Connection refused, DNS failure or timeout."""
    pass


class UpstreamStatusError(SummarizerError):
    """Non-2xx HTTP response."""

    def __init__(self, message: str, provider: str = "", status: int = 0, body: str = ""):
        super().__init__(message, provider)
        self.status = status
        self.body = body


class RateLimitExhaustedError(UpstreamStatusError):
    """429 responses persisted past the retry budget."""

    def __init__(self, message: str, provider: str = "", body: str = "", attempts: int = 0):
        super().__init__(message, provider, status=429, body=body)
        self.attempts = attempts


class MalformedResponseError(SummarizerError):
    """Response body is not JSON or lacks the expected text field."""
    pass


class EmptyGenerationError(SummarizerError):
    """Model output reduced to nothing after sanitization."""
    pass


def _is_boilerplate(line: str) -> bool:
    lowered = line.lower()
    return any(marker in lowered for marker in BOILERPLATE_MARKERS)


def sanitize_message(raw: str, bullets_only: bool = False, provider: str = "") -> str:
    """Turn raw model output into a clean commit message.

    Trims every line, drops blank lines and lines echoing the prompt
    instructions. With ``bullets_only`` only the header line and lines
    starting with a bullet marker survive.

    Raises:
        EmptyGenerationError: if nothing is left.
    """
    lines = [line.strip() for line in raw.strip().split('\n')]
    lines = [line for line in lines if line and not _is_boilerplate(line)]

    if bullets_only and lines:
        lines = lines[:1] + [line for line in lines[1:] if line.startswith(BULLET_MARKERS)]

    message = '\n'.join(lines)
    if not message:
        raise EmptyGenerationError("AI generated an empty or invalid message.", provider)
    return message


class Summarizer(ABC):
    """Abstract base for summarization providers."""

    def __init__(self, config: AIConfig):
        self.config = config

    @abstractmethod
    def summarize(self, diff: str) -> str:
        """Generate a commit message for the diff."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name."""
        pass

    def _render(self, diff: str) -> str:
        return render_prompt(self.config.user_prompt, diff)

    def _clean(self, raw: str) -> str:
        return sanitize_message(raw, bullets_only=self.config.bullets_only, provider=self.name)

    def _post_json(self, url: str, payload: dict) -> tuple[int, str]:
        """POST a JSON payload and return (status, body) for any HTTP response.

        Only failures below HTTP (refused, DNS, timeout, dropped connection)
        raise, as TransportError. Status handling is left to the provider.
        """
        data = json.dumps(payload).encode('utf-8')
        req = urllib.request.Request(
            url,
            data=data,
            headers={"Content-Type": "application/json"},
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout) as response:
                return response.status, response.read().decode('utf-8', errors='replace')
        except urllib.error.HTTPError as e:
            # HTTPError must come before URLError (it's a subclass)
            try:
                body = e.read().decode('utf-8', errors='replace')
            except (OSError, AttributeError):
                body = ""
            return e.code, body
        except urllib.error.URLError as e:
            if isinstance(e.reason, TimeoutError):
                raise TransportError(
                    f"{self.name} request timed out after {self.config.timeout}s", self.name
                ) from e
            raise TransportError(f"{self.name} request failed: {e.reason}", self.name) from e
        except TimeoutError as e:
            raise TransportError(
                f"{self.name} request timed out after {self.config.timeout}s", self.name
            ) from e
        except http.client.HTTPException as e:
            raise TransportError(f"Incomplete response from {self.name}: {e}", self.name) from e
        except OSError as e:
            raise TransportError(f"Connection to {self.name} lost: {e}", self.name) from e

    def _parse_json(self, body: str) -> dict:
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(f"Invalid JSON from {self.name}: {e}", self.name) from e
        if not isinstance(data, dict):
            raise MalformedResponseError(f"Unexpected response shape from {self.name}", self.name)
        return data
