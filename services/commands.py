"""
Administrative chat commands handled before a message reaches the routing engine.

Supported commands (matched on the start of the raw message text):
- `!clear`: forget the sender's conversation history
- `!help`: describe the assistant's capabilities and the command list
- `!time` / `!bdtime`: report the current time and day period in Dhaka

Any other message returns None and continues to the engine.
"""

import logging
from typing import Optional

from core.time_context import TimeContext
from services.conversation_store import ConversationStore
from shared.models import CommandResponse

logger = logging.getLogger(__name__)

HELP_COLOR = 0x3498db

CLEARED_MESSAGE = "🗑️ Conversation history cleared!"

HELP_EMBED = {
    "color": HELP_COLOR,
    "title": "🤖 Wren Ford - Personal Assistant",
    "description": (
        "I am Wren Ford, Sir Abdul Mukit's personal assistant and advisor. "
        "I am here to serve and guide you with wisdom and loyalty."
    ),
    "fields": [
        {"name": "💬 Natural Conversation", "value": "Engage in thoughtful dialogue and receive guidance", "inline": True},
        {"name": "💻 Technical Assistance", "value": "Programming, debugging, and technical solutions", "inline": True},
        {"name": "🧠 Strategic Analysis", "value": "Complex problem solving and business strategy", "inline": True},
        {"name": "⚡ Quick Responses", "value": "Fast answers to immediate questions", "inline": True},
        {"name": "📄 Document Analysis", "value": "Review files, images, and documents", "inline": True},
        {
            "name": "🔧 Commands",
            "value": "`!clear` - Clear conversation\n`!help` - Show this help\n`!time` or `!bdtime` - Show Bangladesh time",
            "inline": False,
        },
    ],
}


class CommandHandler:
    """
    Dispatch administrative commands against the conversation store and the clock.
    """

    def __init__(self, store: ConversationStore, time_context: TimeContext):
        self.store = store
        self.time_context = time_context

    def handle(self, user_id: str, text: str) -> Optional[CommandResponse]:
        """
        Run the command contained in `text`, if any.

        Args:
            user_id (str): Sender of the message.
            text (str): Raw message text.

        Returns:
            Optional[CommandResponse]: The command reply, or None when the message is not
            a command and should be routed to the engine.
        """
        if text.startswith("!clear"):
            self.store.clear(user_id)
            logger.info("[CommandHandler] History cleared on request of user %s", user_id)
            return CommandResponse(command="clear", message=CLEARED_MESSAGE)

        if text.startswith("!help"):
            return CommandResponse(command="help", message=HELP_EMBED["title"], embed=HELP_EMBED)

        if text.startswith("!time") or text.startswith("!bdtime"):
            return CommandResponse(command="time", message=self.time_message())

        return None

    def time_message(self) -> str:
        return (
            f"🇧🇩 {self.time_context.formatted_time()}\n"
            f"🌅 It's currently **{self.time_context.day_period().value}** in Dhaka."
        )
