"""Keyed duel-session store. In-memory, lives as long as the process."""

import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from typing import Any

from devduel.models import DuelSession, DuelStatus, LogEntry

logger = logging.getLogger(__name__)


class DuelNotFoundError(LookupError):
    """Raised when a session id is not in the store."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


class SessionStore(ABC):
    """Single-writer keyed store: only the orchestrator running a duel mutates it.

    All access happens on one asyncio loop, so a mutation can never interleave
    with another. A threaded store would need a per-session lock here.
    """

    @abstractmethod
    def create(self, url1: str, url2: str) -> DuelSession:
        ...

    @abstractmethod
    def get(self, session_id: str) -> DuelSession | None:
        ...

    @abstractmethod
    def update(self, session_id: str, mutation: Callable[[DuelSession], None]) -> DuelSession:
        """Apply ``mutation`` to the stored session in place.

        Raises:
            DuelNotFoundError: If the id is unknown.
        """
        ...

    def append_log(
        self,
        session_id: str,
        stage: DuelStatus,
        message: str,
        data: dict[str, Any] | None = None,
    ) -> DuelSession:
        entry = LogEntry(timestamp=datetime.now(), stage=stage, message=message, data=data)
        return self.update(session_id, lambda s: s.logs.append(entry))

    async def health_check(self) -> bool:
        return True


class InMemorySessionStore(SessionStore):
    def __init__(self) -> None:
        self._sessions: dict[str, DuelSession] = {}

    def create(self, url1: str, url2: str) -> DuelSession:
        session = DuelSession(id=str(uuid.uuid4()), created_at=datetime.now(), url1=url1, url2=url2)
        self._sessions[session.id] = session
        logger.info("Session created: %s", session.id)
        return session

    def get(self, session_id: str) -> DuelSession | None:
        return self._sessions.get(session_id)

    def update(self, session_id: str, mutation: Callable[[DuelSession], None]) -> DuelSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise DuelNotFoundError(session_id)
        mutation(session)
        return session
