"""
api/prompt.py (PROMPT, RESET and diagnostic endpoints)

Handles all API endpoints related to routed model interactions, including processing
user messages and managing per-user conversation memory. The endpoints play the role of
the chat-platform glue: they strip mentions, run administrative commands, invoke the
routing engine with the sender's history and record the exchange afterwards.

Endpoints:
  - POST /prompt: Receives a user message, runs commands or routes it to a backend model,
                  and returns the rendered reply.
  - POST /reset: Clears the conversation history of one user.
  - GET /sessions: Lists users that currently have stored history.
  - GET /models: Describes the task category to model table.
"""

import logging
from typing import Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from config.logging_config import get_logger
from core.synthesizer import ResponseSynthesizer
from monitoring.metrics import REQUEST_COUNT, track_errors
from services.commands import CommandHandler
from services.conversation_store import ConversationStore
from shared.models import CommandResponse, EngineResponse, PromptRequest, SessionsResponse
from shared.utils import clean_mentions, truncate_message_for_logging

# Get a logger instance for this module
logger = get_logger(__name__)

router = APIRouter()


def get_store(request: Request) -> ConversationStore:
    return request.app.state.conversation_store


def get_synthesizer(request: Request) -> ResponseSynthesizer:
    return request.app.state.synthesizer


def get_command_handler(request: Request) -> CommandHandler:
    return request.app.state.command_handler


GENERIC_ERROR_MESSAGE = (
    "I apologize, but I encountered an unexpected issue processing your request. Please try again."
)


@track_errors('http', 'prompt')
async def route_prompt(
    body: PromptRequest,
    store: ConversationStore,
    synthesizer: ResponseSynthesizer,
    commands: CommandHandler,
    request_logger: logging.LoggerAdapter,
) -> Union[CommandResponse, EngineResponse]:
    """Answer a command or route the message. Errors are counted and re-raised."""
    command_reply = commands.handle(body.user_id, body.message)
    if command_reply is not None:
        request_logger.info(f"[handle_prompt] Handled command '{command_reply.command}'")
        return command_reply

    message = clean_mentions(body.message)
    request_logger.info(
        f"[handle_prompt] Received prompt: '{truncate_message_for_logging(message, 50)}' "
        f"(attachment: {body.has_attachment})"
    )

    envelope = await synthesizer.respond(message, store.history(body.user_id), body.has_attachment)
    store.record_exchange(body.user_id, message, envelope.content)

    request_logger.info(f"[handle_prompt] Replied with model {envelope.model_id}")
    return EngineResponse(
        content=envelope.content,
        model=envelope.model_id,
        color=envelope.color,
        responseType=envelope.response_style,
        timeOfDay=envelope.time_of_day,
        footer=envelope.footer,
    )


@router.post("/prompt", response_model=Union[CommandResponse, EngineResponse])
async def handle_prompt(
    body: PromptRequest,
    store: ConversationStore = Depends(get_store),
    synthesizer: ResponseSynthesizer = Depends(get_synthesizer),
    commands: CommandHandler = Depends(get_command_handler),
):
    """
    Process one inbound chat message and return either a command reply or a routed reply.

    Commands (`!clear`, `!help`, `!time`, `!bdtime`) are answered directly and never reach
    the engine. Every other message has its mention tokens removed, is routed with the
    sender's stored history, and the user message together with the reply is appended to
    that history afterwards. Anything unexpected that escapes is logged and answered with
    a generic JSON error and status 500.

    Args:
        body (PromptRequest): Message text, sender identifier and attachment flag.

    Returns:
        CommandResponse | EngineResponse | JSONResponse: The command reply, the rendered
            envelope with content, model, colour, response style, time of day and a footer
            string, or the generic error payload.

    Side effects:
        - `!clear` removes the sender's history.
        - Routed messages append two turns to the sender's history.
    """
    request_logger = logging.LoggerAdapter(logger.logger, {**logger.extra, 'user_id': body.user_id})

    try:
        reply = await route_prompt(body, store, synthesizer, commands, request_logger)
    except Exception as e:
        request_logger.error(f"[handle_prompt] An unexpected error occurred: {e}", exc_info=True)
        REQUEST_COUNT.labels(method="POST", endpoint="/api/prompt", status="500").inc()
        error_response = {
            "type": "error",
            "message": GENERIC_ERROR_MESSAGE,
        }
        return JSONResponse(content=error_response, status_code=500)

    REQUEST_COUNT.labels(method="POST", endpoint="/api/prompt", status="200").inc()
    return reply


@router.post("/reset")
async def reset_conversation(user_id: str, store: ConversationStore = Depends(get_store)):
    """
    Clear the conversation history of a user.

    Clearing a user without history is a no-op and still succeeds.

    Args:
        user_id (str): Identifier of the user whose history should be forgotten.

    Returns:
        JSONResponse: {"response": "ok", "message": <description>}
    """
    logger.info(f"[reset_conversation] Received request to reset conversation for user: {user_id}")
    store.clear(user_id)
    return JSONResponse({"response": "ok", "message": f"Conversation history cleared for {user_id}"})


@router.get("/sessions", response_model=SessionsResponse)
async def list_sessions(store: ConversationStore = Depends(get_store)):
    return SessionsResponse(users=sorted(store.active_users()))


@router.get("/models")
async def list_models(synthesizer: ResponseSynthesizer = Depends(get_synthesizer)):
    return JSONResponse(synthesizer.registry.describe())
