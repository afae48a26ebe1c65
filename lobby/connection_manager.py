"""
Connection Manager for Spyfall Party sessions.

Tracks which socket belongs to which player in which session.
Contains no game logic - purely connection bookkeeping for the socket layer.
"""

import logging
from typing import Dict, Optional, Tuple, List, Set
from dataclasses import dataclass
from datetime import datetime
from threading import Lock

logger = logging.getLogger(__name__)

@dataclass
class PlayerConnection:
    """Information about a player's socket connection."""
    socket_id: str
    session_code: str
    player_id: str
    connected_at: datetime

class ConnectionManager:
    """
    Maps socket ids to (session code, player id) and back.

    A player has at most one bound socket; binding a new one replaces the
    old binding (e.g. a page reload).
    """

    def __init__(self):
        self.connections: Dict[str, PlayerConnection] = {}  # socket_id -> PlayerConnection
        self.player_sockets: Dict[Tuple[str, str], str] = {}  # (code, player_id) -> socket_id
        self._lock = Lock()

    def bind(self, socket_id: str, session_code: str, player_id: str) -> Optional[str]:
        """
        Bind a socket to a player.

        Args:
            socket_id: Socket connection ID
            session_code: Session the player belongs to
            player_id: Player's id

        Returns:
            Socket id previously bound to this player, if any
        """
        with self._lock:
            key = (session_code, player_id)
            previous = self.player_sockets.get(key)
            if previous and previous != socket_id:
                self.connections.pop(previous, None)

            stale = self.connections.get(socket_id)
            if stale:
                self.player_sockets.pop((stale.session_code, stale.player_id), None)

            self.connections[socket_id] = PlayerConnection(
                socket_id=socket_id,
                session_code=session_code,
                player_id=player_id,
                connected_at=datetime.now()
            )
            self.player_sockets[key] = socket_id

        logger.debug(f"Bound socket {socket_id} to player {player_id} in {session_code}")
        return previous if previous != socket_id else None

    def unbind(self, socket_id: str) -> Optional[PlayerConnection]:
        """Forget a socket; returns what it was bound to."""
        with self._lock:
            connection = self.connections.pop(socket_id, None)
            if connection:
                key = (connection.session_code, connection.player_id)
                if self.player_sockets.get(key) == socket_id:
                    del self.player_sockets[key]
        return connection

    def get(self, socket_id: str) -> Optional[PlayerConnection]:
        with self._lock:
            return self.connections.get(socket_id)

    def socket_for(self, session_code: str, player_id: str) -> Optional[str]:
        with self._lock:
            return self.player_sockets.get((session_code, player_id))

    def session_codes(self) -> Set[str]:
        with self._lock:
            return {c.session_code for c in self.connections.values()}

    def drop_session(self, session_code: str) -> List[str]:
        """Forget every socket bound to a session; returns their ids."""
        with self._lock:
            socket_ids = [sid for sid, c in self.connections.items() if c.session_code == session_code]
            for sid in socket_ids:
                connection = self.connections.pop(sid)
                self.player_sockets.pop((connection.session_code, connection.player_id), None)
        return socket_ids
