"""
Game Module for Spyfall Party.

Contains the session state machine and its contract: commands in,
results and notifications out. The managers (GameManager, TurnManager,
VoteManager) depend on the lobby package and are imported from their
own modules.
"""

from .models import Phase, Role, AccusationState, RoundResult
from .catalog import LocationCatalog
from .results import CommandResult, FailureKind
from .notifications import Notification, RoleAssignment
from .commands import (
    Command, JoinSession, ReconnectPlayer, DisconnectPlayer, LeaveSession, KickPlayer,
    StartRound, AcknowledgeRole, AdvanceTurn, SubmitSpyGuess, SubmitPlayerVote, EndRound
)

__all__ = [
    # Data models
    'Phase',
    'Role',
    'AccusationState',
    'RoundResult',
    'LocationCatalog',

    # Contract
    'CommandResult',
    'FailureKind',
    'Notification',
    'RoleAssignment',
    'Command',
    'JoinSession',
    'ReconnectPlayer',
    'DisconnectPlayer',
    'LeaveSession',
    'KickPlayer',
    'StartRound',
    'AcknowledgeRole',
    'AdvanceTurn',
    'SubmitSpyGuess',
    'SubmitPlayerVote',
    'EndRound'
]
