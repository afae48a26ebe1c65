"""
Turn Manager for Spyfall Party.

Handles starting player selection and turn progression over a session
roster. Turn order is roster order, starting from a random offset and
wrapping around. Contains no phase logic - pure turn mechanics.
"""

import logging
from typing import List, Optional

from lobby.models import Player
from utils.randomizer import Randomizer

logger = logging.getLogger(__name__)

class TurnManager:
    """
    Picks who asks next.

    A player is eligible for a turn when they take part in rounds, are
    connected and have not asked a question yet in this pass.
    """

    def __init__(self, randomizer: Randomizer):
        self.randomizer = randomizer

    @staticmethod
    def is_eligible(player: Player) -> bool:
        return player.is_participant and player.is_connected and not player.has_asked_question

    def choose_starting_index(self, players: List[Player]) -> Optional[int]:
        """
        Choose a random starting player among connected participants.

        Args:
            players: Full session roster

        Returns:
            Roster index of the starting player, or None if nobody can start
        """
        candidates = [i for i, p in enumerate(players) if self.is_eligible(p)]
        if not candidates:
            return None

        starting_index = candidates[self.randomizer.pick_index(len(candidates))]
        logger.debug(f"Chose starting index {starting_index} from {len(candidates)} candidates")
        return starting_index

    def find_next_eligible(self, players: List[Player], from_index: int,
                           include_current: bool = False) -> Optional[int]:
        """
        Find the next eligible player in roster order.

        Scans at most one full lap so it terminates even when every other
        player is disconnected or has already asked.

        Args:
            players: Full session roster
            from_index: Roster index to scan from
            include_current: Whether `from_index` itself may be returned

        Returns:
            Roster index of the next eligible player, or None
        """
        count = len(players)
        if count == 0:
            return None

        offset = 0 if include_current else 1
        for step in range(count):
            index = (from_index + offset + step) % count
            if self.is_eligible(players[index]):
                return index
        return None

    @staticmethod
    def everyone_has_asked(players: List[Player]) -> bool:
        """Check whether every participant has asked this pass."""
        return all(p.has_asked_question for p in players if p.is_participant)

    @staticmethod
    def reset_questions(players: List[Player]):
        for player in players:
            player.has_asked_question = False
