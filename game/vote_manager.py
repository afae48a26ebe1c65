"""
Vote Manager for Spyfall Party.

Handles vote validation, counting and round resolution during the
accusation phase. Computes outcomes; applying them to the session is the
GameManager's job.
"""

import logging
from typing import Dict, Optional
from collections import Counter
from dataclasses import dataclass

from lobby.models import Session
from utils.constants import GAME_CONFIG, WINNER_TYPES
from .models import RoundResult

logger = logging.getLogger(__name__)

@dataclass
class RoundOutcome:
    """Everything resolution decided, before it is applied."""
    spy_won: bool
    civilians_won: bool
    result: RoundResult

    @property
    def has_winner(self) -> bool:
        return self.spy_won or self.civilians_won

class VoteManager:
    """
    Vote counting and accusation resolution.

    Resolution needs the spy's guess and a vote from every civilian.
    """

    def __init__(self, spy_win_points: int = GAME_CONFIG['SPY_WIN_POINTS'],
                 correct_vote_points: int = GAME_CONFIG['CORRECT_VOTE_POINTS']):
        self.spy_win_points = spy_win_points
        self.correct_vote_points = correct_vote_points

    @staticmethod
    def majority_threshold(civilian_count: int) -> int:
        """Votes needed on the spy: ceil(civilians / 2)."""
        return (civilian_count + 1) // 2

    @staticmethod
    def tally(votes: Dict[str, str]) -> Dict[str, int]:
        """Count votes per accused player id."""
        return dict(Counter(votes.values()))

    @staticmethod
    def most_accused(vote_counts: Dict[str, int]) -> Optional[str]:
        """
        Get the id with strictly the most votes.

        Returns:
            Accused player id, or None when there are no votes or a tie
        """
        if not vote_counts:
            return None

        max_votes = max(vote_counts.values())
        top = [accused for accused, count in vote_counts.items() if count == max_votes]

        if len(top) > 1:
            return None

        return top[0]

    @staticmethod
    def votes_needed(session: Session) -> int:
        return len(session.civilians)

    def is_ready_to_resolve(self, session: Session) -> bool:
        """Check that the spy has guessed and every civilian has voted."""
        accusation = session.accusation
        if accusation is None or not accusation.has_spy_guess:
            return False
        return all(c.id in accusation.votes for c in session.civilians)

    def resolve(self, session: Session) -> RoundOutcome:
        """
        Decide the outcome of the accusation phase.

        Args:
            session: Session in the accusing phase, ready to resolve

        Returns:
            RoundOutcome with points per player and display aggregates
        """
        accusation = session.accusation
        spy = session.spy
        civilians = session.civilians

        spy_won = accusation.spy_guess == session.secret_location

        vote_counts = self.tally(accusation.votes)
        most_accused_id = self.most_accused(vote_counts)
        votes_for_spy = vote_counts.get(spy.id, 0)
        threshold = self.majority_threshold(len(civilians))
        civilians_won = most_accused_id == spy.id and votes_for_spy >= threshold

        correct_voters = [c for c in civilians if accusation.votes.get(c.id) == spy.id]

        # A correct guess outranks being identified: civilians_won is still
        # reported but only the spy scores.
        points: Dict[str, int] = {p.id: 0 for p in session.participants}
        if spy_won:
            points[spy.id] += self.spy_win_points
        elif civilians_won:
            for voter in correct_voters:
                points[voter.id] += self.correct_vote_points

        result = RoundResult(
            round_number=session.round_number,
            winner=WINNER_TYPES['SPY'] if spy_won else WINNER_TYPES['CIVILIANS'],
            spy_guessed_correctly=spy_won,
            civilians_won=civilians_won,
            spy_guess=accusation.spy_guess,
            correct_location=session.secret_location,
            spy_id=spy.id,
            spy_name=spy.name,
            points_awarded=points,
            vote_counts=vote_counts,
            correct_voter_ids=[c.id for c in correct_voters],
            correct_voter_names=[c.name for c in correct_voters],
            total_civilians_count=len(civilians)
        )

        logger.info(
            f"Resolved round {session.round_number} in {session.code}: spy_won={spy_won}, "
            f"civilians_won={civilians_won}, votes_for_spy={votes_for_spy}/{threshold}"
        )
        return RoundOutcome(spy_won=spy_won, civilians_won=civilians_won, result=result)
