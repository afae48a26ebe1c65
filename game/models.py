"""
Data models for game management.

These represent game-specific data structures that live inside a session:
phases, roles, the accusation in progress and the summary of a finished round.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum

class Phase(Enum):
    """Session phase enumeration."""
    WAITING = "waiting"
    INFORMING = "informing"
    PLAYING = "playing"
    ACCUSING = "accusing"
    SUMMARY = "summary"

    @property
    def is_round_active(self) -> bool:
        """Phases in which roles are assigned."""
        return self in (Phase.INFORMING, Phase.PLAYING, Phase.ACCUSING)

class Role(Enum):
    """Secret role of a participant during a round."""
    SPY = "spy"
    CIVILIAN = "civilian"

@dataclass
class AccusationState:
    """The spy's guess and the civilians' votes collected during accusing."""
    spy_guess: Optional[str] = None
    votes: Dict[str, str] = field(default_factory=dict)  # voter id -> accused id

    @property
    def has_spy_guess(self) -> bool:
        return self.spy_guess is not None

    def to_dict(self) -> Dict[str, Any]:
        """Public view: who has acted, never what they submitted."""
        return {
            'spy_has_guessed': self.has_spy_guess,
            'voters': sorted(self.votes.keys())
        }

@dataclass(frozen=True)
class RoundResult:
    """
    Snapshot of a resolved round.

    The display aggregates (spy name, correct voters and counts) are computed
    once at resolution so clients never re-derive them from raw votes.
    """
    round_number: int
    winner: str  # 'spy' or 'civilians'
    spy_guessed_correctly: bool
    civilians_won: bool
    spy_guess: Optional[str]
    correct_location: str
    spy_id: str
    spy_name: str
    points_awarded: Dict[str, int] = field(default_factory=dict)  # player id -> points this round
    vote_counts: Dict[str, int] = field(default_factory=dict)  # accused id -> votes
    correct_voter_ids: List[str] = field(default_factory=list)
    correct_voter_names: List[str] = field(default_factory=list)
    total_civilians_count: int = 0

    @property
    def correct_voters_count(self) -> int:
        return len(self.correct_voter_ids)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'round_number': self.round_number,
            'winner': self.winner,
            'spy_guessed_correctly': self.spy_guessed_correctly,
            'civilians_won': self.civilians_won,
            'spy_guess': self.spy_guess,
            'correct_location': self.correct_location,
            'spy_id': self.spy_id,
            'spy_name': self.spy_name,
            'points_awarded': dict(self.points_awarded),
            'vote_counts': dict(self.vote_counts),
            'correct_voter_ids': list(self.correct_voter_ids),
            'correct_voter_names': list(self.correct_voter_names),
            'correct_voters_count': self.correct_voters_count,
            'total_civilians_count': self.total_civilians_count
        }
