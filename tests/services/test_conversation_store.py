"""
Tests for `services/conversation_store.py` using pytest.

Focus:
- Window invariant: at most W turns per user, most recent kept in order
- Snapshot semantics and idempotent reads
- Clear semantics and active-user enumeration
- Isolation between users
"""

import pytest

from services.conversation_store import ConversationStore
from shared.models import Role, Turn


@pytest.fixture
def store():
    return ConversationStore(max_history_length=10)


def test_unknown_user_has_empty_history(store):
    assert store.history("nobody") == ()
    assert store.active_users() == set()


def test_append_keeps_insertion_order(store):
    store.append("u1", "user", "hello")
    store.append("u1", Role.ASSISTANT, "good evening, Sir")

    assert store.history("u1") == (
        Turn(Role.USER, "hello"),
        Turn(Role.ASSISTANT, "good evening, Sir"),
    )


def test_eleven_appends_drop_the_first_turn(store):
    for index in range(11):
        store.append("u1", "user", f"message {index}")

    history = store.history("u1")
    assert len(history) == 10
    assert [turn.content for turn in history] == [f"message {index}" for index in range(1, 11)]


@pytest.mark.parametrize("count", [0, 1, 9, 10, 25])
def test_window_invariant_holds_for_any_number_of_appends(count):
    store = ConversationStore(max_history_length=10)
    for index in range(count):
        store.append("u1", "assistant" if index % 2 else "user", str(index))

    history = store.history("u1")
    assert len(history) == min(count, 10)
    assert [turn.content for turn in history] == [str(index) for index in range(max(0, count - 10), count)]


def test_history_is_a_snapshot(store):
    store.append("u1", "user", "first")
    snapshot = store.history("u1")

    store.append("u1", "user", "second")

    assert len(snapshot) == 1
    assert store.history("u1") == store.history("u1")


def test_record_exchange_appends_user_then_assistant(store):
    store.record_exchange("u1", "question", "answer")

    assert [turn.role for turn in store.history("u1")] == [Role.USER, Role.ASSISTANT]


def test_clear_removes_history_and_active_user(store):
    store.append("u1", "user", "hello")
    store.append("u2", "user", "hi")

    store.clear("u1")

    assert store.history("u1") == ()
    assert store.active_users() == {"u2"}


def test_clear_unknown_user_is_noop(store):
    store.clear("ghost")
    assert store.active_users() == set()


def test_users_do_not_share_history(store):
    store.append("u1", "user", "from one")
    store.append("u2", "user", "from two")

    assert [turn.content for turn in store.history("u1")] == ["from one"]
    assert [turn.content for turn in store.history("u2")] == ["from two"]


def test_invalid_role_is_rejected(store):
    with pytest.raises(ValueError):
        store.append("u1", "system", "not allowed")


def test_window_must_be_positive():
    with pytest.raises(ValueError):
        ConversationStore(max_history_length=0)
