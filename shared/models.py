"""
shared/models.py

Common data models and type definitions used across the routing engine.

This module contains the enumerations that drive model selection, the immutable
records that flow between the classifier, the profile registry, the engine and the
conversation store, and the Pydantic schemas that validate the HTTP boundary.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, List
from enum import Enum
from pydantic import BaseModel, Field


class TaskCategory(Enum):
    """
    Task categories used to pick a backend model profile.

    - CONVERSATIONAL: Natural dialogue, the default for anything unclassified
    - CODE: Programming, debugging and other technical requests
    - REASONING: Analysis, calculations, planning and multi-step problems
    - SPEED: Short or lookup-style questions that want a quick answer
    - MULTIMODAL: Any message that carries an attachment
    """
    CONVERSATIONAL = "conversational"
    CODE = "code"
    REASONING = "reasoning"
    SPEED = "speed"
    MULTIMODAL = "multimodal"


class ResponseStyle(Enum):
    """Display-only tag describing how the user phrased the request."""
    QUESTIONED = "questioned"
    ADVISED = "advised"
    STATEMENTED = "statemented"
    ANSWERED = "answered"


class DayPeriod(Enum):
    """Coarse period of the day in the assistant's home timezone."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Turn:
    """
    One role-tagged message in a user's conversation history.

    Turns are immutable; their position in the history carries the conversation order.
    """
    role: Role
    content: str

    def to_message(self) -> Dict[str, str]:
        """
        Render the turn in the role/content form expected by chat-completion APIs.

        Returns:
            Dict[str, str]: {"role": "user" | "assistant", "content": <text>}
        """
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class ModelProfile:
    """
    Immutable configuration bundle for one task category.

    A profile names the backend model that serves the category along with the sampling
    settings and the colour used when the reply is rendered. Values are validated on
    construction so a bad table fails at startup rather than on the first request.
    """
    category: str
    backend_model_id: str
    display_name: str
    display_color: int
    temperature: float
    max_output_tokens: int
    description: str

    def __post_init__(self):
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(
                f"Temperature for '{self.category}' must be within [0, 1], got {self.temperature}"
            )
        if self.max_output_tokens <= 0:
            raise ValueError(
                f"max_output_tokens for '{self.category}' must be positive, got {self.max_output_tokens}"
            )


@dataclass(frozen=True)
class ResponseEnvelope:
    """
    Normalized result of one routing request, produced for success and failure alike.

    The platform layer renders `content` in a panel coloured with `color` and shows
    `response_style` and `time_of_day` in the footer.
    """
    content: str
    model_id: str
    color: int
    response_style: str
    time_of_day: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def footer(self) -> str:
        return f"{self.response_style} • {self.time_of_day}"


class PromptRequest(BaseModel):
    """
    Validate the body of an inbound chat message handed over by the platform layer.
    """
    message: str = Field(..., description="Raw message text, mentions included")
    user_id: str = Field(..., min_length=1, description="Opaque identifier of the sender")
    has_attachment: bool = Field(False, description="True when the message carries files or images")


class CommandResponse(BaseModel):
    """Reply produced by an administrative command instead of the routing engine."""
    type: str = Field("command", description="Always 'command'")
    command: str = Field(..., description="Command name without the leading '!'")
    message: str = Field(..., description="Text to show to the user")
    embed: Dict[str, Any] = Field(default_factory=dict, description="Optional rich panel payload")


class EngineResponse(BaseModel):
    """Rendered form of a ResponseEnvelope returned by the prompt endpoint."""
    type: str = Field("response", description="Always 'response'")
    content: str
    model: str
    color: int
    responseType: str
    timeOfDay: str
    footer: str


class SessionsResponse(BaseModel):
    users: List[str] = Field(default_factory=list)
