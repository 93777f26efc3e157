"""Summarizer Package"""

import logging

from asum import PROVIDER_NAMES
from asum.config import AsumConfig
from asum.summarizer.base import (
    AIConfig,
    Summarizer,
    SummarizerError,
    ConfigurationError,
    TransportError,
    UpstreamStatusError,
    RateLimitExhaustedError,
    MalformedResponseError,
    EmptyGenerationError,
    sanitize_message,
)
from asum.prompts import DIFF_PLACEHOLDER, render_prompt
from asum.summarizer.gemini import GeminiSummarizer
from asum.summarizer.ollama import OllamaSummarizer

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, type[Summarizer]] = {
    "ollama": OllamaSummarizer,
    "gemini": GeminiSummarizer,
}


def mask_key(key: str) -> str:
    """Show only the first and last 4 characters of a credential."""
    if len(key) > 8:
        return f"{key[:4]}...{key[-4:]}"
    return "****"


def build_ai_config(config: AsumConfig) -> AIConfig:
    """Flatten the resolved configuration into what a provider consumes."""
    if config.active_provider == "gemini":
        model = config.gemini_model or ""
    elif config.active_provider == "ollama":
        model = config.ollama_model or ""
    else:
        model = ""

    return AIConfig(
        model=model,
        temperature=config.ai_temperature,
        top_p=config.ai_top_p,
        num_predict=config.ai_num_predict,
        system_prompt=config.system_prompt,
        user_prompt=config.user_prompt,
        api_url=config.ollama_url,
        api_key=config.gemini_api_key,
        bullets_only=config.bullets_only,
        timeout=config.timeout,
    )


def get_summarizer(config: AsumConfig) -> Summarizer:
    """Build the provider named by ``active_provider``.

    Raises:
        ConfigurationError: for anything other than 'ollama' or 'gemini'.
    """
    provider = config.active_provider
    if provider not in PROVIDERS:
        raise ConfigurationError(
            f"Unknown provider: {provider}. Use {' or '.join(repr(p) for p in PROVIDER_NAMES)}.",
            provider,
        )

    ai_config = build_ai_config(config)

    logger.info("Using provider: %s", provider)
    logger.info("Using model: %s", ai_config.model)
    if ai_config.api_key:
        logger.info("Using API key: %s", mask_key(ai_config.api_key))

    return PROVIDERS[provider](ai_config)


__all__ = [
    "AIConfig",
    "Summarizer",
    "SummarizerError",
    "ConfigurationError",
    "TransportError",
    "UpstreamStatusError",
    "RateLimitExhaustedError",
    "MalformedResponseError",
    "EmptyGenerationError",
    "OllamaSummarizer",
    "GeminiSummarizer",
    "PROVIDERS",
    "DIFF_PLACEHOLDER",
    "build_ai_config",
    "get_summarizer",
    "mask_key",
    "render_prompt",
    "sanitize_message",
]
