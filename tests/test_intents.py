"""
Tests for the intent lifecycle and the in-memory store.
"""
import threading

import pytest

from tint_sdk.exceptions import IntentNotFoundError, IntentStateError
from tint_sdk.intents import (
    InMemoryIntentStore, can_transition, create_intent, new_intent_id, transition
)
from tint_sdk.models import IntentStatus
from tests.test_helpers import USDC, WETH

HAPPY_PATH = [
    IntentStatus.CONNECTING,
    IntentStatus.CONNECTED,
    IntentStatus.AUTHENTICATING,
    IntentStatus.AUTHENTICATED,
    IntentStatus.SUBMITTED,
    IntentStatus.MATCHED,
    IntentStatus.SETTLING,
    IntentStatus.SETTLED,
]


@pytest.fixture
def intent():
    return create_intent(USDC, WETH, 1_000_000, "base")


def test_new_intent_starts_created(intent):
    assert intent.status is IntentStatus.CREATED
    assert intent.amount == 1_000_000
    assert intent.recipient is None
    assert intent.commitment is None
    assert [entry.status for entry in intent.timeline] == [IntentStatus.CREATED]
    assert intent.timeline[0].timestamp == intent.created_at


def test_intent_ids_are_unique():
    ids = {new_intent_id() for _ in range(100)}
    assert len(ids) == 100
    assert all(i.startswith("0x") and len(i) == 18 for i in ids)


def test_happy_path_records_timeline(intent):
    for status in HAPPY_PATH:
        transition(intent, status, f"now {status.value}")

    assert intent.status is IntentStatus.SETTLED
    assert [entry.status for entry in intent.timeline] == [IntentStatus.CREATED] + HAPPY_PATH
    assert intent.timeline[-1].message == "now settled"
    timestamps = [entry.timestamp for entry in intent.timeline]
    assert timestamps == sorted(timestamps)


def test_unmatched_branch(intent):
    for status in HAPPY_PATH[:5]:
        transition(intent, status)
    transition(intent, IntentStatus.UNMATCHED)
    transition(intent, IntentStatus.SETTLING)

    assert intent.status is IntentStatus.SETTLING


@pytest.mark.parametrize("target", [
    IntentStatus.CONNECTED,
    IntentStatus.AUTHENTICATED,
    IntentStatus.SUBMITTED,
    IntentStatus.SETTLED,
    IntentStatus.CREATED,
])
def test_skipping_ahead_is_rejected(intent, target):
    with pytest.raises(IntentStateError):
        transition(intent, target)
    assert intent.status is IntentStatus.CREATED
    assert len(intent.timeline) == 1


def test_no_step_backwards(intent):
    transition(intent, IntentStatus.CONNECTING)
    transition(intent, IntentStatus.CONNECTED)
    assert not can_transition(IntentStatus.CONNECTED, IntentStatus.CONNECTING)
    with pytest.raises(IntentStateError):
        transition(intent, IntentStatus.CONNECTING)


@pytest.mark.parametrize("steps", range(len(HAPPY_PATH)))
def test_failed_reachable_from_any_non_terminal_state(intent, steps):
    for status in HAPPY_PATH[:steps]:
        transition(intent, status)

    transition(intent, IntentStatus.FAILED, "boom")

    assert intent.status is IntentStatus.FAILED
    assert intent.timeline[-1].message == "boom"


@pytest.mark.parametrize("terminal", [IntentStatus.SETTLED, IntentStatus.FAILED])
def test_terminal_states_are_final(terminal):
    assert terminal.is_terminal
    for target in IntentStatus:
        assert not can_transition(terminal, target)


def test_failed_intent_cannot_move(intent):
    transition(intent, IntentStatus.FAILED)
    with pytest.raises(IntentStateError, match="already failed"):
        transition(intent, IntentStatus.FAILED)
    with pytest.raises(IntentStateError):
        transition(intent, IntentStatus.CONNECTING)


class TestInMemoryIntentStore:

    def test_put_and_get(self, intent):
        store = InMemoryIntentStore()
        store.put(intent)

        assert store.get(intent.id) is intent
        assert store.find(intent.id) is intent
        assert len(store) == 1

    def test_missing_intent(self):
        store = InMemoryIntentStore()

        with pytest.raises(IntentNotFoundError):
            store.get("0xdeadbeef")
        with pytest.raises(KeyError):
            store.get("0xdeadbeef")
        assert store.find("0xdeadbeef") is None

    def test_update_status(self, intent):
        store = InMemoryIntentStore()
        store.put(intent)

        updated = store.update_status(intent.id, IntentStatus.CONNECTING, "opening session")

        assert updated.status is IntentStatus.CONNECTING
        assert store.get(intent.id).timeline[-1].message == "opening session"

    def test_update_status_rejects_invalid_step(self, intent):
        store = InMemoryIntentStore()
        store.put(intent)

        with pytest.raises(IntentStateError):
            store.update_status(intent.id, IntentStatus.SETTLED)
        assert store.get(intent.id).status is IntentStatus.CREATED

    def test_concurrent_updates_apply_once(self, intent):
        """Racing identical transitions: exactly one succeeds."""
        store = InMemoryIntentStore()
        store.put(intent)
        outcomes = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            try:
                store.update_status(intent.id, IntentStatus.CONNECTING)
                outcomes.append("ok")
            except IntentStateError:
                outcomes.append("rejected")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 1
        assert outcomes.count("rejected") == 7
        assert len(store.get(intent.id).timeline) == 2
