""" main.py: FastAPI application entry point and runtime configuration.

This module builds the ASGI app, wires the routing engine and the per-user conversation
store into application state, mounts the API routers, configures CORS and exposes a
Prometheus metrics endpoint. The conversation store lives on `app.state` for the
lifetime of the process instead of in a module global, so each app instance (and each
test) gets its own memory. When executed directly, it starts a Uvicorn server using
host/port values from configuration.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from config import CONFIG

# --- Router Imports ---
from api import health as health_router
from api import prompt as prompt_router

from core.profiles import ModelProfileRegistry
from core.synthesizer import ResponseSynthesizer
from core.time_context import TimeContext
from llm_cloud.provider import get_client
from services.commands import CommandHandler
from services.conversation_store import ConversationStore
from version import __version__

# Get a logger instance for this module
logger = logging.getLogger(__name__)


def create_app(
    synthesizer: Optional[ResponseSynthesizer] = None,
    store: Optional[ConversationStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Collaborators that are not passed in are built from CONFIG: the provider client,
    the model profile registry with its prompt templates, the time context and an empty
    conversation store sized by `memory.max_history_length`.

    Args:
        synthesizer (Optional[ResponseSynthesizer]): Pre-built routing engine (tests inject one
            with a fake client).
        store (Optional[ConversationStore]): Pre-built conversation store.

    Returns:
        FastAPI: The configured application.
    """
    app = FastAPI(title="Wren Ford Assistant", version=__version__)

    if synthesizer is None:
        synthesizer = ResponseSynthesizer(
            client=get_client(),
            registry=ModelProfileRegistry.from_config(CONFIG),
            time_context=TimeContext.from_config(CONFIG),
            context_window=int(CONFIG['memory'].get('context_window', 10)),
            timeout=float(CONFIG['llm'].get('timeout', 30)),
        )
    if store is None:
        store = ConversationStore(max_history_length=int(CONFIG['memory']['max_history_length']))

    app.state.synthesizer = synthesizer
    app.state.conversation_store = store
    app.state.command_handler = CommandHandler(store, synthesizer.time_context)

    # Include routers
    app.include_router(health_router.router, tags=["Health"])
    app.include_router(prompt_router.router, prefix="/api", tags=["Prompt"])

    # Add Prometheus metrics endpoint
    app.mount("/metrics", make_asgi_app())

    # Configure CORS
    allow_origins = CONFIG.get('cors', {}).get('allow_origins', ["*"])
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    logger.info("[create_app] Routing %d task categories", len(synthesizer.registry.describe()))
    return app


# The uvicorn server is used to run the FastAPI application.
if __name__ == '__main__':
    import uvicorn
    logger.info("[__main__] Starting Uvicorn server for main.py")
    uvicorn.run(
        create_app(),
        host=CONFIG.get('server', {}).get('host', '0.0.0.0'),
        port=int(CONFIG.get('server', {}).get('port', 3000))
    )
