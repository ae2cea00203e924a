"""In-memory store of active quiz sessions keyed by user id."""
from threading import Lock
from typing import Callable, Dict, Optional

from .models import QuizSession


class QuizSessionStore:
    """
    Concurrent map user_id → QuizSession.

    Every single operation is atomic. A get followed by a set is not: callers
    that need read-modify-write for one user serialize it themselves.
    Sessions live as long as the process.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._sessions: Dict[str, QuizSession] = {}

    def get(self, user_id: str) -> Optional[QuizSession]:
        with self._lock:
            return self._sessions.get(user_id)

    def set(self, user_id: str, session: QuizSession) -> None:
        with self._lock:
            self._sessions[user_id] = session

    def remove(self, user_id: str) -> bool:
        """Remove the session; returns whether one was present."""
        with self._lock:
            return self._sessions.pop(user_id, None) is not None

    def update(self, user_id: str, mutate: Callable[[QuizSession], None]) -> bool:
        """Apply `mutate` to the stored session in place. No-op when absent."""
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                return False
            mutate(session)
            self._sessions[user_id] = session
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
