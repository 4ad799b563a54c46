"""
core/classifier.py

Message classification for model routing.

This module holds the two rule-based classifiers used by the engine:
- TaskClassifier picks the task category that selects the backend model profile
- ResponseStyleClassifier tags how the user phrased the request, for display only

Both work on ordered keyword sets where the first matching rule wins. The ordering is
part of the contract: attachments dominate everything, technical intent dominates
reasoning, and reasoning dominates generic brevity. Multi-intent messages such as
"quickly debug this algorithm" therefore resolve deterministically to the earliest
matching category.
"""

import logging
from typing import Iterable, Tuple

from shared.models import TaskCategory, ResponseStyle
from shared.utils import truncate_message_for_logging

logger = logging.getLogger(__name__)

CODE_KEYWORDS: Tuple[str, ...] = (
    "code", "programming", "function", "script", "debug", "error", "syntax",
    "javascript", "python", "java", "html", "css", "react", "node", "api",
    "database", "sql", "git", "github", "algorithm", "data structure", "compile",
    "runtime", "framework", "library", "package", "install",
)

REASONING_KEYWORDS: Tuple[str, ...] = (
    "analyze", "calculate", "solve", "logic", "reasoning", "strategy", "plan",
    "step by step", "problem", "math", "equation", "proof", "research", "compare",
    "evaluate", "decision", "pros and cons", "complex", "detailed analysis",
    "breakdown", "methodology",
)

SPEED_KEYWORDS: Tuple[str, ...] = (
    "quick", "fast", "simple", "brief", "short", "yes or no", "define", "what is",
    "who is", "when", "where", "translate", "convert", "list", "name", "tell me",
    "explain briefly",
)

# Messages shorter than this are routed to the speed profile when no keyword rule matched
SHORT_MESSAGE_THRESHOLD = 50

QUESTION_PREFIXES: Tuple[str, ...] = (
    "what", "how", "why", "when", "where", "who", "can you", "could you",
)

ADVICE_MARKERS: Tuple[str, ...] = (
    "advice", "suggest", "recommend", "should i", "what do you think",
)

STATEMENT_MARKERS: Tuple[str, ...] = (
    "tell me", "explain", "describe", "statement", "opinion",
)


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


class TaskClassifier:
    """
    Rule-based classifier that assigns a message to a TaskCategory.

    Responsibilities:
    - Route any message with an attachment to the multimodal profile
    - Match code, reasoning and speed keyword sets in priority order
    - Fall back to the conversational profile for everything else

    The classifier is deterministic and explainable; it does not call a model.
    """

    def __init__(self, short_message_threshold: int = SHORT_MESSAGE_THRESHOLD):
        self.short_message_threshold = short_message_threshold

    def classify(self, message: str, has_attachment: bool = False) -> TaskCategory:
        """
        Classify a user message into exactly one task category.

        Args:
            message (str): The raw user input.
            has_attachment (bool): True if the message carries files or images.

        Returns:
            TaskCategory: MULTIMODAL, CODE, REASONING, SPEED or CONVERSATIONAL, decided by
            the first rule that matches.
        """
        result = self._classify(message, has_attachment)
        logger.debug(
            f"[TaskClassifier] Classified '{truncate_message_for_logging(message, 50)}' as {result.value}"
        )
        return result

    def _classify(self, message: str, has_attachment: bool) -> TaskCategory:
        if has_attachment:
            return TaskCategory.MULTIMODAL

        lower_message = message.lower()

        if _contains_any(lower_message, CODE_KEYWORDS):
            return TaskCategory.CODE

        if _contains_any(lower_message, REASONING_KEYWORDS):
            return TaskCategory.REASONING

        if _contains_any(lower_message, SPEED_KEYWORDS) or len(message) < self.short_message_threshold:
            return TaskCategory.SPEED

        return TaskCategory.CONVERSATIONAL


class ResponseStyleClassifier:
    """
    Tag a message with the style of reply it asks for.

    The tag only decorates the response footer; it never influences routing.
    """

    def style_of(self, message: str) -> ResponseStyle:
        """
        Determine the response style for a user message.

        Args:
            message (str): The raw user input.

        Returns:
            ResponseStyle: QUESTIONED for questions, ADVISED for requests for advice,
            STATEMENTED for requests for explanation, ANSWERED otherwise.
        """
        lower_message = message.lower()

        if "?" in lower_message or lower_message.startswith(QUESTION_PREFIXES):
            return ResponseStyle.QUESTIONED

        if _contains_any(lower_message, ADVICE_MARKERS):
            return ResponseStyle.ADVISED

        if _contains_any(lower_message, STATEMENT_MARKERS):
            return ResponseStyle.STATEMENTED

        return ResponseStyle.ANSWERED
