"""
Player management for sessions.

Handles roster operations: joining, leaving, disconnection and reconnection.
"""

import logging
from typing import Optional, Tuple
from datetime import datetime
from .models import Player, Session
from game.results import FailureKind
from utils.helpers import generate_token, names_match

logger = logging.getLogger(__name__)

class PlayerManager:
    """Manages player operations within sessions."""

    def add_player(self, session: Session, name: str, now: datetime,
                   is_observer: bool = False) -> Tuple[Optional[Player], Optional[FailureKind], str]:
        """
        Add a player to a session.

        Nothing is changed unless every check passes.

        Args:
            session: The session to add player to
            name: Player's display name (already sanitized)
            now: Join timestamp
            is_observer: Whether the member only watches

        Returns:
            tuple: (player, failure_kind, message)
        """
        if session.is_full:
            return None, FailureKind.CAPACITY, f"Game is full ({session.max_players} players max)"

        for existing in session.players:
            if names_match(existing.name, name):
                return None, FailureKind.DUPLICATE_NAME, f"Name '{name}' is already taken"

        player = Player(
            id=generate_token(),
            secret=generate_token(),
            name=name,
            is_host=not session.players,
            is_observer=is_observer,
            is_connected=True,
            joined_at=now
        )

        session.players.append(player)
        session.touch(now)

        logger.info(f"Player {name} ({'observer' if is_observer else 'player'}) added to session {session.code}")
        return player, None, "Player added successfully"

    def remove_player(self, session: Session, player_id: str) -> Optional[Player]:
        """
        Remove a player from a session roster.

        Host status moves to the new first player. The active index keeps
        pointing at the same player when someone earlier in the order leaves;
        when the active player leaves, the turn continues with whoever now
        occupies that slot.

        Args:
            session: The session to remove player from
            player_id: Id of player to remove

        Returns:
            The removed player, or None if not found
        """
        index = session.index_of(player_id)
        if index == -1:
            return None

        player = session.players.pop(index)

        if session.active_player_index > index:
            session.active_player_index -= 1
        elif session.active_player_index >= len(session.players):
            session.active_player_index = 0

        if player.is_host and session.players:
            session.players[0].is_host = True

        logger.info(f"Player {player.name} removed from session {session.code}")
        return player

    def disconnect_player(self, session: Session, player_id: str) -> Optional[Player]:
        """Mark a player as disconnected without removing them."""
        player = session.get_player(player_id)
        if not player:
            return None

        player.is_connected = False
        logger.info(f"Player {player.name} disconnected from session {session.code}")
        return player

    def reconnect_player(self, session: Session, player_id: str, secret: str) -> Optional[Player]:
        """
        Reconnect a player who proves ownership of their id.

        Returns:
            The player, or None if the id is unknown or the secret is wrong
        """
        player = session.get_player(player_id)
        if not player or player.secret != secret:
            return None

        player.is_connected = True
        logger.info(f"Player {player.name} reconnected to session {session.code}")
        return player
