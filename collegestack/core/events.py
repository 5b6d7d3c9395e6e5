"""
In-process publish/subscribe bus for session and moderation events.

Listeners subscribe to a named event and receive the payload dict. subscribe()
returns a callable that removes the listener again, so a consumer tied to a
lifecycle (a websocket, a background task, a test) unsubscribes explicitly.
"""
import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger("app")

SIGNED_IN = "signed_in"
SIGNED_OUT = "signed_out"
PROFILE_UPDATED = "profile_updated"
UNANSWERED_POSTS_CHANGED = "unanswered_posts_changed"

Listener = Callable[[Dict[str, Any]], None]


class SessionEvents:
    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event: str, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners[event].append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners[event]:
                    self._listeners[event].remove(listener)

        return unsubscribe

    def listener_count(self, event: str) -> int:
        with self._lock:
            return len(self._listeners[event])

    def publish(self, event: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            listeners = list(self._listeners[event])
        logger.debug(f"Publishing {event} to {len(listeners)} listener(s)")
        for listener in listeners:
            try:
                listener(payload)
            except Exception as e:
                # A failing listener must not stop delivery to the others
                logger.error(f"Listener for {event} failed: {e}")


session_events = SessionEvents()
