"""Single channel for session-change notifications.

Listeners subscribe once and receive every sign-up, sign-in and sign-out.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Literal

logger = logging.getLogger(__name__)

SessionEventKind = Literal["signed_up", "signed_in", "signed_out"]


@dataclass(frozen=True, slots=True)
class SessionEvent:
    kind: SessionEventKind
    user_id: int
    email: str
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


SessionListener = Callable[[SessionEvent], None]

_listeners: list[SessionListener] = []


def subscribe(listener: SessionListener) -> Callable[[], None]:
    """Register ``listener`` and return a callable that removes it again."""
    _listeners.append(listener)

    def unsubscribe() -> None:
        if listener in _listeners:
            _listeners.remove(listener)

    return unsubscribe


def publish(event: SessionEvent) -> None:
    # Iterate over a snapshot so listeners may unsubscribe while being notified
    for listener in list(_listeners):
        try:
            listener(event)
        except Exception:
            logger.exception("Session listener %r failed on %s", listener, event.kind)


def listener_count() -> int:
    return len(_listeners)


def log_session_event(event: SessionEvent) -> None:
    logger.info("Session %s for user %d", event.kind, event.user_id)
