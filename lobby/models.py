"""
Data models for session management.

These are the mutable structures owned by the registry: one Session per
live game code and the Players on its roster.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from datetime import datetime, timedelta
from threading import RLock
from game.models import Phase, Role, AccusationState, RoundResult
from utils.constants import GAME_CONFIG

@dataclass
class Player:
    """Represents a member of a session."""
    id: str
    secret: str
    name: str
    is_host: bool = False
    is_observer: bool = False
    is_connected: bool = True
    role: Optional[Role] = None
    location: Optional[str] = None
    has_acknowledged_role: bool = False
    has_asked_question: bool = False
    score: int = 0
    joined_at: Optional[datetime] = None

    @property
    def is_participant(self) -> bool:
        """Observers never play, score or vote."""
        return not self.is_observer

    @property
    def is_spy(self) -> bool:
        return self.role == Role.SPY

    @property
    def is_civilian(self) -> bool:
        return self.role == Role.CIVILIAN

    def clear_round_state(self):
        """Forget everything about the current round, keep the score."""
        self.role = None
        self.location = None
        self.has_acknowledged_role = False
        self.has_asked_question = False

    def to_dict(self, reveal_role: bool = False) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        The secret is never included.

        Args:
            reveal_role: Whether to include role and location
        """
        return {
            'id': self.id,
            'name': self.name,
            'is_host': self.is_host,
            'is_observer': self.is_observer,
            'is_connected': self.is_connected,
            'has_acknowledged_role': self.has_acknowledged_role,
            'has_asked_question': self.has_asked_question,
            'score': self.score,
            'role': self.role.value if reveal_role and self.role else None,
            'location': self.location if reveal_role else None,
            'joined_at': self.joined_at.isoformat() if self.joined_at else None
        }

@dataclass
class Session:
    """Represents one game instance and its roster."""
    code: str
    created_at: datetime
    last_activity_at: datetime
    max_players: int = GAME_CONFIG['MAX_PLAYERS']
    players: List[Player] = field(default_factory=list)
    active_player_index: int = 0
    round_number: int = 0
    phase: Phase = Phase.WAITING
    secret_location: Optional[str] = None
    accusation: Optional[AccusationState] = None
    last_round_result: Optional[RoundResult] = None
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    @property
    def is_full(self) -> bool:
        """Check if session is at max capacity."""
        return len(self.players) >= self.max_players

    @property
    def participants(self) -> List[Player]:
        """Members who take part in rounds, in roster order."""
        return [p for p in self.players if p.is_participant]

    @property
    def civilians(self) -> List[Player]:
        return [p for p in self.players if p.is_civilian]

    @property
    def spy(self) -> Optional[Player]:
        for player in self.players:
            if player.is_spy:
                return player
        return None

    @property
    def host(self) -> Optional[Player]:
        for player in self.players:
            if player.is_host:
                return player
        return None

    @property
    def active_player(self) -> Optional[Player]:
        """Player whose turn it is; only meaningful while playing."""
        if self.phase != Phase.PLAYING or not self.players:
            return None
        if 0 <= self.active_player_index < len(self.players):
            return self.players[self.active_player_index]
        return None

    def get_player(self, player_id: Optional[str]) -> Optional[Player]:
        """Find player by id."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def index_of(self, player_id: str) -> int:
        """Roster index of a player, -1 when absent."""
        for index, player in enumerate(self.players):
            if player.id == player_id:
                return index
        return -1

    def touch(self, now: datetime):
        self.last_activity_at = now

    def idle_for(self, now: datetime) -> timedelta:
        """Time since the last successful command."""
        return now - self.last_activity_at

    def to_dict(self, viewer_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Read-only projection for observers and late joiners.

        Secrets are always redacted. Roles and locations are only shown for
        the viewer's own player, or for everyone once the round is in summary.

        Args:
            viewer_id: Id of the player requesting the view, if any
        """
        reveal_all = self.phase == Phase.SUMMARY
        active = self.active_player
        return {
            'code': self.code,
            'phase': self.phase.value,
            'round_number': self.round_number,
            'active_player_index': self.active_player_index,
            'active_player_id': active.id if active else None,
            'max_players': self.max_players,
            'players': [
                p.to_dict(reveal_role=reveal_all or p.id == viewer_id)
                for p in self.players
            ],
            'accusation': self.accusation.to_dict() if self.accusation else None,
            'last_round_result': self.last_round_result.to_dict() if self.last_round_result else None,
            'created_at': self.created_at.isoformat(),
            'last_activity_at': self.last_activity_at.isoformat()
        }
