"""
provider.py – External LLM client. Build and return a configured OpenRouter client
----------------------------------------------------------------------------------
In the overall data-flow this file sits at the infrastructure layer.
It is the single place where we talk to the external LLM platform (OpenRouter's
OpenAI-compatible chat-completion endpoint).

Why a *provider* module?
• Keeps third-party SDK initialisation separate from routing logic.
• Offers a tiny, easily mockable `get_client()` function instead of a
  global singleton. Tests can monkey-patch this function or inject a fake
  client into the engine without importing heavy objects.
• The engine simply receives a client; it does not need to know about base URLs,
  API keys or the site-identification headers OpenRouter expects.

Validation happens at client creation time (not import time) so the module stays
importable for testing while still enforcing configuration requirements at runtime.
"""

import logging
import os
from typing import Dict, List, Tuple

from openai import AsyncOpenAI
from config import CONFIG

logger = logging.getLogger(__name__)

DEFAULT_SITE_URL = "https://discord-ai-bot.com"
DEFAULT_SITE_NAME = "Wren Ford Assistant"

# NOTE: client creation is wrapped in a **function** instead of a module-level global.
# The client is built only when the application starts serving, and tests can inject a fake.


def require_any_env(var_names: List[str]) -> Tuple[str, str]:
    """
    Check that at least one of the specified environment variables is present and non-empty.

    Only the name of the variable that was found is meant to be logged, never its value.

    Args:
        var_names (List[str]): List of environment variable names to check, in order of preference.

    Returns:
        Tuple[str, str]: (selected_var_name, value).

    Raises:
        RuntimeError: If none of the specified environment variables are present or are empty.
    """
    for var_name in var_names:
        value = os.getenv(var_name, "")
        if value:
            return var_name, value

    var_list = ", ".join(var_names)
    raise RuntimeError(
        f"Missing required environment variable. Set one of: {var_list}"
    )


def build_site_headers(config: Dict) -> Dict[str, str]:
    """
    Build the headers OpenRouter uses to attribute requests to a calling site.

    Args:
        config (Dict): The configuration dictionary with a 'site' section.

    Empty values fall back to the defaults.

    Returns:
        Dict[str, str]: {"HTTP-Referer": <site url>, "X-Title": <site name>}
    """
    site = config.get("site", {})
    return {
        "HTTP-Referer": site.get("url") or DEFAULT_SITE_URL,
        "X-Title": site.get("name") or DEFAULT_SITE_NAME,
    }


def get_client() -> AsyncOpenAI:
    """
    Build and return an async OpenAI-compatible client targeting OpenRouter.

    The client is configured for a single attempt per request (`max_retries=0`): a failed
    call is reported to the user once and the user decides whether to ask again. The
    timeout from `CONFIG["llm"]["timeout"]` bounds each request at the transport level.

    Returns:
        AsyncOpenAI: A ready-to-use client.

    Raises:
        RuntimeError: If OPENROUTER_API_KEY is missing.
    """
    selected_var, api_key = require_any_env(["OPENROUTER_API_KEY"])
    llm_config = CONFIG.get("llm", {})
    base_url = llm_config.get("base_url", "https://openrouter.ai/api/v1")

    logger.info("LLM provider selected: openrouter | base_url=%s | key from %s", base_url, selected_var)

    return AsyncOpenAI(
        base_url=base_url,
        api_key=api_key,
        timeout=float(llm_config.get("timeout", 30)),  # seconds – explicit is better than implicit
        max_retries=0,
        default_headers=build_site_headers(CONFIG),
    )
