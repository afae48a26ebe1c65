"""
Inbound commands accepted by the game core.

The adapter builds one of these per client action after it has checked that
the caller really controls `player_id`. GameManager.execute() dispatches on
the command type.
"""

from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class Command:
    code: str

@dataclass(frozen=True)
class JoinSession(Command):
    name: str
    observer: bool = False

@dataclass(frozen=True)
class ReconnectPlayer(Command):
    player_id: str
    secret: str

@dataclass(frozen=True)
class DisconnectPlayer(Command):
    player_id: str

@dataclass(frozen=True)
class LeaveSession(Command):
    player_id: str

@dataclass(frozen=True)
class KickPlayer(Command):
    player_id: str
    target_id: str

@dataclass(frozen=True)
class StartRound(Command):
    # None means the summary auto-continue timer
    player_id: Optional[str] = None

@dataclass(frozen=True)
class AcknowledgeRole(Command):
    player_id: str

@dataclass(frozen=True)
class AdvanceTurn(Command):
    player_id: str

@dataclass(frozen=True)
class SubmitSpyGuess(Command):
    player_id: str
    location: str

@dataclass(frozen=True)
class SubmitPlayerVote(Command):
    player_id: str
    accused_id: str

@dataclass(frozen=True)
class EndRound(Command):
    player_id: str
