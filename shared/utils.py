"""
shared/utils.py

Shared utility functions used across multiple modules.

This module contains small text helpers used by the engine, the command layer and the
API so that log previews and mention handling stay consistent across the service.
"""

import re

# Discord-style user mention tokens: <@123456> or <@!123456>
MENTION_PATTERN = re.compile(r"<@!?\d+>")

DEFAULT_GREETING = "Hello!"


def truncate_message_for_logging(message: str, max_length: int = 100) -> str:
    """
    Truncate long messages for logging purposes.

    Args:
        message (str): Message to truncate
        max_length (int): Maximum length before truncation (default: 100)

    Returns:
        str: Truncated message with ellipsis if needed

    Used for logging to avoid extremely long log entries while preserving
    the beginning of the message for debugging purposes.
    """
    if len(message) <= max_length:
        return message
    return message[:max_length] + "..."


def clean_mentions(text: str) -> str:
    """
    Strip user mention tokens from a message and trim surrounding whitespace.

    A message that consisted only of a mention becomes a plain greeting so the
    engine always receives some text to respond to.

    Args:
        text (str): Raw message text as received from the chat platform

    Returns:
        str: Cleaned message text, never empty
    """
    cleaned = MENTION_PATTERN.sub("", text).strip()
    return cleaned or DEFAULT_GREETING
