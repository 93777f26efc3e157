"""Prompt Templates Package"""

from asum.prompts.builder import (
    DIFF_PLACEHOLDER,
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_USER_PROMPT,
    render_prompt,
)

__all__ = [
    "DIFF_PLACEHOLDER",
    "DEFAULT_SYSTEM_PROMPT",
    "DEFAULT_USER_PROMPT",
    "render_prompt",
]
