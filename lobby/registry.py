"""
Session registry.

Owns every live Session: creation with collision-free codes, lookup,
per-session locking, roster changes and expiry of idle sessions. One
instance is built at process start and injected where commands run.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from threading import RLock
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .models import Player, Session
from .player_manager import PlayerManager
from game.results import FailureKind
from utils.helpers import generate_session_code, normalize_session_code

logger = logging.getLogger(__name__)

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class SessionRegistry:
    """In-memory mapping from session code to Session."""

    def __init__(self, clock: Callable[[], datetime] = utcnow,
                 code_generator: Callable[[], str] = generate_session_code,
                 player_manager: Optional[PlayerManager] = None):
        """
        Initialize the registry.

        Args:
            clock: Source of the current time
            code_generator: Produces candidate session codes
            player_manager: Roster operations helper
        """
        self.clock = clock
        self.code_generator = code_generator
        self.player_manager = player_manager or PlayerManager()
        self._sessions: Dict[str, Session] = {}
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create_session(self) -> str:
        """
        Create a new session in the waiting phase.

        Returns:
            The new session's code
        """
        with self._lock:
            code = self.code_generator()
            while code in self._sessions:
                code = self.code_generator()

            now = self.clock()
            self._sessions[code] = Session(code=code, created_at=now, last_activity_at=now)

        logger.info(f"Created session: {code}")
        return code

    def get_session(self, code: Optional[str]) -> Optional[Session]:
        """Get a live session by code, or None."""
        with self._lock:
            return self._sessions.get(normalize_session_code(code))

    def list_codes(self) -> List[str]:
        with self._lock:
            return list(self._sessions.keys())

    @contextmanager
    def locked(self, code: Optional[str]) -> Iterator[Optional[Session]]:
        """
        Hold a session's lock for the duration of one command.

        Yields None if the session does not exist or was removed while we
        were waiting for its lock.
        """
        session = self.get_session(code)
        if session is None:
            yield None
            return

        with session.lock:
            with self._lock:
                still_live = self._sessions.get(session.code) is session
            yield session if still_live else None

    def delete_session(self, code: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(normalize_session_code(code), None)
        if removed:
            logger.info(f"Deleted session {removed.code}")
        return removed is not None

    def idle_for(self, code: str) -> Optional[timedelta]:
        """Time since the session's last activity, or None if it is gone."""
        session = self.get_session(code)
        if session is None:
            return None
        return session.idle_for(self.clock())

    def expire_inactive(self, max_age_seconds: float) -> int:
        """
        Remove sessions idle for longer than `max_age_seconds`.

        Sessions with a command in flight are skipped; they are by
        definition not idle.

        Args:
            max_age_seconds: Inactivity threshold

        Returns:
            Number of sessions removed
        """
        cutoff = timedelta(seconds=max_age_seconds)
        now = self.clock()
        expired = []

        with self._lock:
            for code, session in list(self._sessions.items()):
                if not session.lock.acquire(blocking=False):
                    continue
                try:
                    if session.idle_for(now) > cutoff:
                        del self._sessions[code]
                        expired.append(code)
                finally:
                    session.lock.release()

        if expired:
            logger.info(f"Expired {len(expired)} inactive sessions: {', '.join(expired)}")
        return len(expired)

    def add_player(self, session: Session, name: str,
                   is_observer: bool = False) -> Tuple[Optional[Player], Optional[FailureKind], str]:
        """Add a player to a session the caller has locked."""
        return self.player_manager.add_player(session, name, self.clock(), is_observer=is_observer)

    def remove_player(self, session: Session, player_id: str) -> Optional[Player]:
        """
        Remove a player from a session the caller has locked.

        The session itself is deleted when its last player goes.
        """
        player = self.player_manager.remove_player(session, player_id)
        if player is None:
            return None

        if not session.players:
            self.delete_session(session.code)
        else:
            session.touch(self.clock())
        return player

    def authenticate(self, code: str, player_id: Optional[str], secret: Optional[str]) -> bool:
        """Check that `secret` belongs to `player_id` in session `code`."""
        session = self.get_session(code)
        if session is None or not player_id or not secret:
            return False
        player = session.get_player(player_id)
        return player is not None and player.secret == secret
