"""In-process progress pub/sub, keyed by session id."""

import logging
from collections import defaultdict
from collections.abc import Callable
from datetime import datetime
from typing import Any

from devduel.models import DuelStatus, ProgressEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[ProgressEvent], None]


class EventBus:
    """Fan-out of ProgressEvents to the subscribers of a session.

    Delivery is at-most-once to whoever is subscribed at publish time; there is
    no replay for late subscribers.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Subscriber]] = defaultdict(list)

    def subscribe(self, session_id: str, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for a session. Returns the unsubscribe function."""
        self._subscribers[session_id].append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(session_id, [])
            if callback in callbacks:
                callbacks.remove(callback)
            if not callbacks:
                self._subscribers.pop(session_id, None)

        return unsubscribe

    def publish(self, event: ProgressEvent) -> None:
        for callback in list(self._subscribers.get(event.session_id, [])):
            try:
                callback(event)
            except Exception:
                logger.exception("Progress subscriber failed for session %s", event.session_id)

    def broadcast(
        self,
        session_id: str,
        stage: DuelStatus,
        message: str,
        progress: int,
        data: dict[str, Any] | None = None,
    ) -> ProgressEvent:
        event = ProgressEvent(
            session_id=session_id,
            stage=stage,
            message=message,
            progress=progress,
            timestamp=datetime.now(),
            data=data,
        )
        self.publish(event)
        return event
