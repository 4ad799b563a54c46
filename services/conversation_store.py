"""
Manages per-user conversation memory for the routing engine.

Each user identifier owns one bounded, ordered history of role-tagged turns. The
history is created lazily on the first append and destroyed on an explicit clear or
when the process exits; nothing is written to disk.

Concurrency: histories of different users never share state, so interleaved calls
for different users do not interfere. Calls for the *same* user are not serialized:
two overlapping requests from one user may race on truncation and the last write
wins. This is accepted weak consistency for a chat assistant, not a defect.
"""

import logging
from typing import Dict, List, Set, Tuple, Union

from shared.models import Role, Turn

logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY_LENGTH = 10


class ConversationStore:
    """
    In-memory, per-user bounded conversation history.

    The store is an explicit object owned by the hosting application (see `main.py`),
    not a module-level singleton, so its lifetime is tied to the process serving requests.
    """

    def __init__(self, max_history_length: int = DEFAULT_MAX_HISTORY_LENGTH):
        """
        Args:
            max_history_length (int): Window W, the maximum number of turns kept per user.

        Raises:
            ValueError: If the window is not a positive integer.
        """
        if max_history_length <= 0:
            raise ValueError(f"max_history_length must be positive, got {max_history_length}")
        self.max_history_length = max_history_length
        self._conversations: Dict[str, List[Turn]] = {}

    def append(self, user_id: str, role: Union[Role, str], content: str) -> None:
        """
        Append a turn to the user's history, dropping the oldest turns beyond the window.

        Args:
            user_id (str): Opaque user identifier.
            role (Union[Role, str]): "user" or "assistant".
            content (str): Message text.

        Raises:
            ValueError: If the role is not a known Role.
        """
        turn = Turn(role=Role(role), content=content)
        conversation = self._conversations.setdefault(user_id, [])
        conversation.append(turn)

        overflow = len(conversation) - self.max_history_length
        if overflow > 0:
            del conversation[:overflow]

    def record_exchange(self, user_id: str, user_content: str, assistant_content: str) -> None:
        """
        Append one user message and the assistant reply to it, in that order.
        """
        self.append(user_id, Role.USER, user_content)
        self.append(user_id, Role.ASSISTANT, assistant_content)

    def history(self, user_id: str) -> Tuple[Turn, ...]:
        """
        Return a snapshot of the user's history in conversation order.

        Args:
            user_id (str): Opaque user identifier.

        Returns:
            Tuple[Turn, ...]: The stored turns, or an empty tuple for an unknown user.
        """
        return tuple(self._conversations.get(user_id, ()))

    def clear(self, user_id: str) -> None:
        """
        Forget the user's history entirely; clearing an unknown user is a no-op.
        """
        removed = self._conversations.pop(user_id, None)
        if removed is not None:
            logger.info("[ConversationStore] Cleared %d turns for user %s", len(removed), user_id)

    def active_users(self) -> Set[str]:
        return {user_id for user_id, turns in self._conversations.items() if turns}
