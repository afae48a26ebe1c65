"""
Random choice source for game-determining decisions.

Spy selection, location selection and the starting turn offset all go
through a Randomizer so a deterministic one can be swapped in.
"""

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar('T')

class Randomizer:
    """Uniform index picker backed by random.Random."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def pick_index(self, size: int) -> int:
        """
        Pick an index uniformly from range(size).

        Args:
            size: Number of candidates, must be positive

        Returns:
            Index in [0, size)
        """
        if size <= 0:
            raise ValueError("Cannot pick from an empty sequence")
        return self._random.randrange(size)

    def choice(self, items: Sequence[T]) -> T:
        """Pick one item uniformly."""
        return items[self.pick_index(len(items))]
