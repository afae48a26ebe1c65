"""
Outbound notifications produced by the game core.

One frozen dataclass per notification kind, each with a fixed `type` tag.
`to_dict()` yields the `{'type': ..., 'data': {...}}` shape the socket layer
broadcasts as a `game_update`. RoleAssignment is the only private payload
and must be delivered to its player alone.
"""

from dataclasses import dataclass, fields
from typing import ClassVar, Optional, Dict, Any
from .models import RoundResult

@dataclass(frozen=True)
class Notification:
    """Base class for broadcast notifications."""
    type: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.to_dict() if hasattr(value, 'to_dict') else value
        return {'type': self.type, 'data': data}

@dataclass(frozen=True)
class PlayerJoined(Notification):
    type: ClassVar[str] = "player_joined"
    player_id: str
    player_name: str
    is_host: bool
    is_observer: bool
    total_players: int

@dataclass(frozen=True)
class PlayerLeft(Notification):
    type: ClassVar[str] = "player_left"
    player_id: str
    player_name: str
    new_host_id: Optional[str]
    total_players: int

@dataclass(frozen=True)
class PlayerDisconnected(Notification):
    type: ClassVar[str] = "player_disconnected"
    player_id: str
    player_name: str

@dataclass(frozen=True)
class PlayerReconnected(Notification):
    type: ClassVar[str] = "player_reconnected"
    player_id: str
    player_name: str

@dataclass(frozen=True)
class RoundStarted(Notification):
    type: ClassVar[str] = "round_started"
    round_number: int

@dataclass(frozen=True)
class PlayerAcknowledged(Notification):
    type: ClassVar[str] = "player_acknowledged"
    player_id: str
    acknowledged_count: int
    pending_count: int

@dataclass(frozen=True)
class PlayingStarted(Notification):
    type: ClassVar[str] = "playing_started"
    round_number: int
    active_player_id: str

@dataclass(frozen=True)
class TurnAdvanced(Notification):
    type: ClassVar[str] = "turn_advanced"
    previous_player_id: Optional[str]
    active_player_id: str
    active_player_index: int

@dataclass(frozen=True)
class AccuseModeStarted(Notification):
    type: ClassVar[str] = "accuse_mode_started"
    round_number: int

@dataclass(frozen=True)
class SpyGuessSubmitted(Notification):
    type: ClassVar[str] = "spy_guess_submitted"
    round_number: int

@dataclass(frozen=True)
class VoteCast(Notification):
    type: ClassVar[str] = "vote_cast"
    voter_id: str
    votes_cast: int
    votes_needed: int

@dataclass(frozen=True)
class RoundSummary(Notification):
    type: ClassVar[str] = "round_summary"
    result: RoundResult

@dataclass(frozen=True)
class SubRoundStarted(Notification):
    """Nobody won the accusation; questioning resumes with the same spy and location."""
    type: ClassVar[str] = "sub_round_started"
    round_number: int
    active_player_id: Optional[str]

@dataclass(frozen=True)
class RoundEnded(Notification):
    type: ClassVar[str] = "round_ended"
    round_number: int
    reason: str

@dataclass(frozen=True)
class RoleAssignment:
    """Private role reveal for a single player."""
    player_id: str
    role: str
    location: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {'role': self.role, 'location': self.location}
