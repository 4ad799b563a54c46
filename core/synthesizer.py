"""
core/synthesizer.py

Central routing engine that turns one user message into one response envelope.

This module contains the coordination logic that:
1. Classifies the incoming message into a task category
2. Selects the model profile and builds the persona system prompt
3. Assembles a bounded conversation context
4. Calls the chat-completion provider exactly once
5. Maps the provider output, or any failure, into a ResponseEnvelope

The provider call is the only suspending step. It is wrapped in a bounded wait and
every failure is mapped to the error envelope at a single boundary, so `respond`
never raises to its caller. The engine keeps no state between calls and does not
write to the conversation store; the caller records the exchange afterwards.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from core.classifier import TaskClassifier, ResponseStyleClassifier
from core.profiles import ModelProfileRegistry, ERROR_MODEL_ID
from core.time_context import TimeContext
from monitoring.metrics import ERROR_COUNT, LLM_REQUEST_TIME, ROUTED_REQUESTS, observe_latency
from shared.models import ModelProfile, ResponseEnvelope, ResponseStyle, Role, TaskCategory, Turn
from shared.utils import truncate_message_for_logging

logger = logging.getLogger(__name__)

# Number of most recent history turns sent to the provider
CONTEXT_WINDOW = 10

DEFAULT_PROVIDER_TIMEOUT = 30.0

EMPTY_COMPLETION_FALLBACK = "I apologize, but I'm having difficulty generating a response right now, Sir."
TECHNICAL_DIFFICULTY_MESSAGE = "I encountered a technical difficulty, Sir. Please allow me a moment to resolve this."


class ResponseSynthesizer:
    """
    Routing engine that composes the prompt, calls the provider and normalizes the reply.

    Responsibilities:
    - Task classification and profile selection
    - System prompt and context assembly
    - Single-shot provider invocation with a bounded wait
    - Failure mapping into the error envelope

    All collaborators are injected so the engine can be exercised without network access.
    """

    def __init__(
        self,
        client: Any,
        registry: ModelProfileRegistry,
        time_context: Optional[TimeContext] = None,
        task_classifier: Optional[TaskClassifier] = None,
        style_classifier: Optional[ResponseStyleClassifier] = None,
        context_window: int = CONTEXT_WINDOW,
        timeout: float = DEFAULT_PROVIDER_TIMEOUT,
    ):
        """
        Args:
            client (Any): An `AsyncOpenAI`-compatible client exposing `chat.completions.create`.
            registry (ModelProfileRegistry): Profile table and persona templates.
            time_context (Optional[TimeContext]): Clock for the persona prompt and day period.
            task_classifier (Optional[TaskClassifier]): Category rules.
            style_classifier (Optional[ResponseStyleClassifier]): Response style rules.
            context_window (int): Maximum number of history turns sent to the provider.
            timeout (float): Upper bound, in seconds, on waiting for the provider.
        """
        self.client = client
        self.registry = registry
        self.time_context = time_context or TimeContext()
        self.task_classifier = task_classifier or TaskClassifier()
        self.style_classifier = style_classifier or ResponseStyleClassifier()
        self.context_window = context_window
        self.timeout = timeout

    def build_messages(
        self,
        category: TaskCategory,
        user_message: str,
        history: Sequence[Turn],
    ) -> List[Dict[str, str]]:
        """
        Assemble the message sequence sent to the provider.

        Args:
            category (TaskCategory): Category that selects the instruction suffix.
            user_message (str): The new user message.
            history (Sequence[Turn]): Prior turns in conversation order.

        Returns:
            List[Dict[str, str]]: System prompt, then the most recent
            min(len(history), context_window) turns in their original order, then the
            new user message.
        """
        system_prompt = self.registry.persona_prompt(category, self.time_context.formatted_time())
        recent = list(history)[-self.context_window:] if self.context_window > 0 else []

        messages = [{"role": "system", "content": system_prompt}]
        messages.extend(turn.to_message() for turn in recent)
        messages.append({"role": Role.USER.value, "content": user_message})
        return messages

    async def respond(
        self,
        user_message: str,
        history: Sequence[Turn] = (),
        has_attachment: bool = False,
    ) -> ResponseEnvelope:
        """
        Route a user message to its backend model and return the normalized reply.

        Args:
            user_message (str): The cleaned user message.
            history (Sequence[Turn]): The user's prior turns, oldest first.
            has_attachment (bool): True if the message carries files or images.

        Returns:
            ResponseEnvelope: The model's reply with its profile colour, or the error
            envelope if the provider call failed. Never raises for provider failures.
        """
        category = self.task_classifier.classify(user_message, has_attachment)
        profile = self.registry.profile_for(category)
        ROUTED_REQUESTS.labels(category=category.value).inc()
        logger.info(
            "Routing message to %s (%s)",
            profile.backend_model_id,
            category.value,
            extra={
                'category': category.value,
                'model': profile.backend_model_id,
            }
        )

        try:
            messages = self.build_messages(category, user_message, history)
            content = await self._complete(profile, messages)
        except Exception as e:
            ERROR_COUNT.labels(type='provider', location=category.value).inc()
            logger.error(
                "Reply failed for message '%s'",
                truncate_message_for_logging(user_message, 50),
                exc_info=True,
                extra={
                    'category': category.value,
                    'model': profile.backend_model_id,
                    'error_type': type(e).__name__,
                }
            )
            return self._error_envelope()

        return ResponseEnvelope(
            content=content,
            model_id=profile.backend_model_id,
            color=profile.display_color,
            response_style=self.style_classifier.style_of(user_message).value,
            time_of_day=self.time_context.day_period().value,
        )

    async def _complete(self, profile: ModelProfile, messages: List[Dict[str, str]]) -> str:
        with observe_latency(LLM_REQUEST_TIME, model=profile.backend_model_id):
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=profile.backend_model_id,
                    messages=messages,
                    temperature=profile.temperature,
                    max_tokens=profile.max_output_tokens,
                ),
                timeout=self.timeout,
            )
        return self._extract_content(response)

    @staticmethod
    def _extract_content(response: Any) -> str:
        """
        Pull the first completion's text out of a provider response.

        An empty choice list or an empty (or whitespace-only) message yields the apology fallback. A response
        without a `choices` list is malformed and raises, which the caller maps to the
        error envelope.
        """
        choices = response.choices
        if choices is None:
            raise ValueError("Provider response did not include a choices list")
        if not choices:
            return EMPTY_COMPLETION_FALLBACK

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        content = content.strip() if isinstance(content, str) else ""
        if not content:
            return EMPTY_COMPLETION_FALLBACK
        return content

    def _error_envelope(self) -> ResponseEnvelope:
        return ResponseEnvelope(
            content=TECHNICAL_DIFFICULTY_MESSAGE,
            model_id=ERROR_MODEL_ID,
            color=self.registry.error_profile.display_color,
            response_style=ResponseStyle.ANSWERED.value,
            time_of_day=self.time_context.day_period().value,
        )
