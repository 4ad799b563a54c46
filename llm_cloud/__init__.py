"""Top-level package exports for llm_cloud.

This package holds the LLM infrastructure:
    • provider.py – OpenRouter client configuration
"""

from .provider import get_client

__all__ = [
    "get_client",
]
