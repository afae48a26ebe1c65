"""
Lobby Module for Spyfall Party.

Contains session storage and roster management.
Handles session creation and expiry, player management, and connection tracking.
"""

from .models import Session, Player
from .registry import SessionRegistry
from .player_manager import PlayerManager
from .connection_manager import ConnectionManager, PlayerConnection

__all__ = [
    # Data models
    'Session',
    'Player',
    'PlayerConnection',

    # Managers
    'SessionRegistry',
    'PlayerManager',
    'ConnectionManager'
]
