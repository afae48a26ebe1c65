"""
Command results for the game core.

Every public operation returns a CommandResult instead of raising for
expected conditions. Failures carry a FailureKind so the adapter can pick
its own wording.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum
from .notifications import Notification, RoleAssignment

class FailureKind(Enum):
    """Why a command was rejected."""
    SESSION_NOT_FOUND = "session_not_found"
    PLAYER_NOT_FOUND = "player_not_found"
    PHASE_MISMATCH = "phase_mismatch"
    NOT_AUTHORIZED = "not_authorized"
    CAPACITY = "capacity"
    DUPLICATE_NAME = "duplicate_name"
    INVALID_GUESS_TARGET = "invalid_guess_target"
    INVALID_VOTE_TARGET = "invalid_vote_target"
    NOT_ENOUGH_PLAYERS = "not_enough_players"

@dataclass
class CommandResult:
    """
    Outcome of a single command.

    On success, `notifications` are meant for everyone in the session and
    `private` payloads for one player each. On failure both are empty and
    the session was not changed.
    """
    success: bool
    message: str
    code: Optional[str] = None
    failure: Optional[FailureKind] = None
    notifications: List[Notification] = field(default_factory=list)
    private: List[RoleAssignment] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, code: str, notifications: Optional[List[Notification]] = None,
           private: Optional[List[RoleAssignment]] = None, **data) -> 'CommandResult':
        return cls(
            success=True,
            message=message,
            code=code,
            notifications=list(notifications or []),
            private=list(private or []),
            data=data
        )

    @classmethod
    def fail(cls, failure: FailureKind, message: str, code: Optional[str] = None) -> 'CommandResult':
        return cls(success=False, message=message, code=code, failure=failure)

    def __bool__(self) -> bool:
        return self.success

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization (private payloads excluded)."""
        return {
            'success': self.success,
            'message': self.message,
            'code': self.code,
            'failure': self.failure.value if self.failure else None,
            'notifications': [n.to_dict() for n in self.notifications]
        }
