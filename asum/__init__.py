"""
ASUM - AI Commit Summarizer

Generates commit messages from staged git changes using Ollama or Gemini.
"""

__version__ = "1.0.0"

# Single source of truth for provider names
# Used by: summarizer/__init__.py (factory)
PROVIDER_NAMES = ["ollama", "gemini"]
