"""
conftest.py – central pytest configuration and test bootstrap ("config test").

Pytest imports this module before it collects any test files, which lets us prepare
the environment so that subsequent imports and test collection succeed consistently:
  1) Extend `sys.path` with the project root directory so absolute-style imports like
     `from core ...` and `from services ...` resolve without an editable install.
  2) Define safe default environment variables read at import time by the configuration
     layer and the provider factory (`OPENROUTER_API_KEY`), and disable file logging.

Shared fixtures build routing components with fake collaborators so no test performs
network I/O or depends on the wall clock.
"""

import os
import sys
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo

import pytest

# Ensure project root is on sys.path for direct imports like `core`, `shared`, etc.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Provide required environment defaults for tests
os.environ.setdefault("OPENROUTER_API_KEY", "test-key")
os.environ.setdefault("LOG_FILE_PATH", "")

DHAKA = ZoneInfo("Asia/Dhaka")


def fixed_clock(hour: int, minute: int = 0):
    """Return a clock callable pinned to 19 October 2026 at the given Dhaka time."""
    instant = datetime(2026, 10, 19, hour, minute, tzinfo=DHAKA)
    return lambda tz: instant.astimezone(tz)


def completion(content):
    """Build a minimal chat-completion response object with one choice."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def fake_client(result=None, error=None):
    """Build a fake AsyncOpenAI client whose `chat.completions.create` returns or raises."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=result, side_effect=error)
    return client


@pytest.fixture
def registry():
    from config import CONFIG
    from core.profiles import ModelProfileRegistry
    return ModelProfileRegistry.from_config(CONFIG)


@pytest.fixture
def evening_time_context():
    from core.time_context import TimeContext
    return TimeContext(clock=fixed_clock(19, 5))
