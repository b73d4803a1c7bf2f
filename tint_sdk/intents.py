"""
Intent lifecycle and storage.

An intent moves strictly forward through::

    created -> connecting -> connected -> authenticating -> authenticated
        -> submitted -> (matched | unmatched) -> settling -> settled

and may drop to ``failed`` from any non-terminal state. ``settled`` and
``failed`` are terminal.
"""
import logging
import secrets
import threading
import time
from typing import Dict, Optional, Protocol

from .exceptions import IntentNotFoundError, IntentStateError
from .models import Intent, IntentStatus, TimelineEntry

logger = logging.getLogger(__name__)

_NEXT: Dict[IntentStatus, frozenset] = {
    IntentStatus.CREATED: frozenset({IntentStatus.CONNECTING}),
    IntentStatus.CONNECTING: frozenset({IntentStatus.CONNECTED}),
    IntentStatus.CONNECTED: frozenset({IntentStatus.AUTHENTICATING}),
    IntentStatus.AUTHENTICATING: frozenset({IntentStatus.AUTHENTICATED}),
    IntentStatus.AUTHENTICATED: frozenset({IntentStatus.SUBMITTED}),
    IntentStatus.SUBMITTED: frozenset({IntentStatus.MATCHED, IntentStatus.UNMATCHED}),
    IntentStatus.MATCHED: frozenset({IntentStatus.SETTLING}),
    IntentStatus.UNMATCHED: frozenset({IntentStatus.SETTLING}),
    IntentStatus.SETTLING: frozenset({IntentStatus.SETTLED}),
}


def now_ms() -> int:
    return int(time.time() * 1000)


def new_intent_id() -> str:
    return "0x" + secrets.token_hex(8)


def can_transition(current: IntentStatus, target: IntentStatus) -> bool:
    """Whether ``current -> target`` is a legal lifecycle step."""
    if current.is_terminal:
        return False
    if target is IntentStatus.FAILED:
        return True
    return target in _NEXT.get(current, frozenset())


def transition(intent: Intent, target: IntentStatus, message: str = "") -> Intent:
    """
    Move an intent to ``target`` and record it on the timeline.

    Raises:
        IntentStateError: If the intent is terminal or the step skips ahead
    """
    if intent.status.is_terminal:
        raise IntentStateError(
            f"Intent {intent.id} is already {intent.status.value}; cannot move to {target.value}"
        )
    if not can_transition(intent.status, target):
        raise IntentStateError(
            f"Invalid transition for intent {intent.id}: {intent.status.value} -> {target.value}"
        )

    intent.status = target
    intent.timeline.append(TimelineEntry(status=target, message=message, timestamp=now_ms()))
    logger.info(f"[{intent.id}] {target.value}: {message}" if message else f"[{intent.id}] {target.value}")
    return intent


class IntentStore(Protocol):
    """Storage for intents owned by a pipeline."""

    def get(self, intent_id: str) -> Intent: ...

    def put(self, intent: Intent) -> None: ...

    def update_status(self, intent_id: str, status: IntentStatus, message: str = "") -> Intent: ...


class InMemoryIntentStore:
    """Thread-safe in-process intent store"""

    def __init__(self):
        self._intents: Dict[str, Intent] = {}
        self._lock = threading.RLock()

    def get(self, intent_id: str) -> Intent:
        with self._lock:
            intent = self._intents.get(intent_id)
            if intent is None:
                raise IntentNotFoundError(f"Intent not found: {intent_id}")
            return intent

    def put(self, intent: Intent) -> None:
        with self._lock:
            self._intents[intent.id] = intent

    def update_status(self, intent_id: str, status: IntentStatus, message: str = "") -> Intent:
        with self._lock:
            return transition(self.get(intent_id), status, message)

    def find(self, intent_id: str) -> Optional[Intent]:
        with self._lock:
            return self._intents.get(intent_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._intents)


def create_intent(
    from_token: str,
    to_token: str,
    amount: int,
    network: str,
    recipient: Optional[str] = None,
) -> Intent:
    """New intent in the ``created`` state."""
    created_at = now_ms()
    return Intent(
        id=new_intent_id(),
        from_token=from_token,
        to_token=to_token,
        amount=amount,
        network=network,
        recipient=recipient,
        status=IntentStatus.CREATED,
        created_at=created_at,
        timeline=[TimelineEntry(status=IntentStatus.CREATED, message="Intent created", timestamp=created_at)],
    )
