"""
Loaded export sessions.

Each import produces a HelvaultSession. Sessions live in a registry owned by
one worker; queries name the session they read, so there is no implicit
"current" export.
"""

import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import UTC, datetime

from bagofholding.models.failure import NoDataLoadedError
from bagofholding.models.snapshot import HelvaultSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HelvaultSession:
    """One imported export."""

    id: str
    snapshot: HelvaultSnapshot
    loaded_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class SessionRegistry:
    """
    Sessions of one worker, oldest first.

    Handlers run on a thread pool, so access is serialized with a lock.
    Past `max_sessions` the oldest session is evicted.
    """

    def __init__(self, max_sessions: int) -> None:
        self._max_sessions = max(1, max_sessions)
        self._sessions: OrderedDict[str, HelvaultSession] = OrderedDict()
        self._lock = threading.Lock()

    def add(self, snapshot: HelvaultSnapshot) -> HelvaultSession:
        """Register a snapshot under a new session id."""
        session = HelvaultSession(id=uuid.uuid4().hex, snapshot=snapshot)

        with self._lock:
            self._sessions[session.id] = session
            while len(self._sessions) > self._max_sessions:
                _, evicted = self._sessions.popitem(last=False)
                logger.info(
                    "helvault_session_evicted",
                    extra={
                        "session_id": evicted.id,
                        "loaded_at": evicted.loaded_at.isoformat(),
                    },
                )

        return session

    def get(self, session_id: str) -> HelvaultSession:
        """
        Look up a session.

        Raises:
            NoDataLoadedError: If no export is loaded under this id
        """
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise NoDataLoadedError(session_id)
        return session

    def remove(self, session_id: str) -> bool:
        """Drop a session. Returns False if it was not loaded."""
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions
