"""
API tests for `api/prompt.py` and `api/health.py` endpoints using FastAPI's TestClient.

Covers:
- POST /api/prompt: routed reply, history recording, command short-circuits, error envelope
- POST /api/reset, GET /api/sessions, GET /api/models
- GET / liveness probe and GET /health

The app is built with `create_app` and a ResponseSynthesizer whose provider client is a
fake, so no request leaves the process. Each test gets its own conversation store.
"""

import pytest
from fastapi.testclient import TestClient

from api.prompt import GENERIC_ERROR_MESSAGE
from conftest import completion, fake_client, fixed_clock
from config import CONFIG
from core.profiles import ModelProfileRegistry
from core.synthesizer import ResponseSynthesizer, TECHNICAL_DIFFICULTY_MESSAGE
from core.time_context import TimeContext
from main import create_app


def build(client):
    synthesizer = ResponseSynthesizer(
        client=client,
        registry=ModelProfileRegistry.from_config(CONFIG),
        time_context=TimeContext(clock=fixed_clock(14, 0)),
    )
    app = create_app(synthesizer=synthesizer)
    return app, TestClient(app)


@pytest.fixture
def provider():
    return fake_client(result=completion("Try X"))


@pytest.fixture
def app_and_client(provider):
    return build(provider)


def test_prompt_routes_message_and_records_history(app_and_client, provider):
    app, client = app_and_client

    resp = client.post(
        "/api/prompt",
        json={"message": "<@999> How do I fix this Python error?", "user_id": "u1"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["type"] == "response"
    assert body["content"] == "Try X"
    assert body["model"] == "qwen/qwen3-14b:free"
    assert body["color"] == 0xe74c3c
    assert body["responseType"] == "questioned"
    assert body["timeOfDay"] == "afternoon"
    assert body["footer"] == "questioned • afternoon"

    history = app.state.conversation_store.history("u1")
    assert [(turn.role.value, turn.content) for turn in history] == [
        ("user", "How do I fix this Python error?"),
        ("assistant", "Try X"),
    ]


def test_prompt_sends_stored_history_to_provider(app_and_client, provider):
    _, client = app_and_client

    client.post("/api/prompt", json={"message": "first question", "user_id": "u1"})
    client.post("/api/prompt", json={"message": "second question", "user_id": "u1"})

    messages = provider.chat.completions.create.call_args.kwargs["messages"]
    assert [m["content"] for m in messages[1:]] == ["first question", "Try X", "second question"]


def test_prompt_with_attachment_uses_multimodal_model(app_and_client):
    _, client = app_and_client

    resp = client.post(
        "/api/prompt",
        json={"message": "", "user_id": "u1", "has_attachment": True},
    )

    assert resp.json()["model"] == "qwen/qwen2.5-vl-3b-instruct:free"


def test_provider_failure_returns_error_envelope_with_200():
    app, client = build(fake_client(error=TimeoutError("upstream timed out")))

    resp = client.post("/api/prompt", json={"message": "hello", "user_id": "u1"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["model"] == "error"
    assert body["color"] == 0x95a5a6
    assert body["content"] == TECHNICAL_DIFFICULTY_MESSAGE
    assert body["responseType"] == "answered"
    assert len(app.state.conversation_store.history("u1")) == 2


def test_clear_command_short_circuits_engine(app_and_client, provider):
    app, client = app_and_client
    client.post("/api/prompt", json={"message": "hello", "user_id": "u1"})
    provider.chat.completions.create.reset_mock()

    resp = client.post("/api/prompt", json={"message": "!clear", "user_id": "u1"})

    assert resp.status_code == 200
    assert resp.json()["type"] == "command"
    assert resp.json()["command"] == "clear"
    assert app.state.conversation_store.history("u1") == ()
    provider.chat.completions.create.assert_not_called()


@pytest.mark.parametrize("text, command", [("!help", "help"), ("!time", "time"), ("!bdtime", "time")])
def test_info_commands_never_reach_engine(app_and_client, provider, text, command):
    app, client = app_and_client

    resp = client.post("/api/prompt", json={"message": text, "user_id": "u1"})

    assert resp.json()["command"] == command
    provider.chat.completions.create.assert_not_called()
    assert app.state.conversation_store.history("u1") == ()


def test_prompt_requires_user_id(app_and_client):
    _, client = app_and_client

    resp = client.post("/api/prompt", json={"message": "hello"})

    assert resp.status_code == 422


def test_reset_and_sessions(app_and_client):
    _, client = app_and_client
    client.post("/api/prompt", json={"message": "hello", "user_id": "u1"})
    client.post("/api/prompt", json={"message": "hello", "user_id": "u2"})

    assert client.get("/api/sessions").json()["users"] == ["u1", "u2"]

    resp = client.post("/api/reset", params={"user_id": "u1"})

    assert resp.status_code == 200
    assert resp.json()["response"] == "ok"
    assert client.get("/api/sessions").json()["users"] == ["u2"]


def test_models_endpoint_describes_profiles(app_and_client):
    _, client = app_and_client

    body = client.get("/api/models").json()

    assert body["speed"]["description"] == "Speed Demon"
    assert len(body) == 5


def test_liveness_returns_empty_body(app_and_client):
    _, client = app_and_client

    resp = client.get("/")

    assert resp.status_code == 200
    assert resp.text == ""


def test_health_returns_ok(app_and_client):
    _, client = app_and_client

    assert client.get("/health").json()["status"] == "ok"


def test_unexpected_error_returns_generic_json_500(app_and_client, monkeypatch):
    app, client = app_and_client

    def broken_record(*args, **kwargs):
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(app.state.conversation_store, "record_exchange", broken_record)

    resp = client.post("/api/prompt", json={"message": "hello", "user_id": "u1"})

    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/json")
    body = resp.json()
    assert body["type"] == "error"
    assert body["message"] == GENERIC_ERROR_MESSAGE
    assert "store unavailable" not in resp.text
