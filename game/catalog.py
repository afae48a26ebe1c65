"""
Location catalog for Spyfall Party.

Static list of candidate secret locations; read-only.
"""

from typing import Iterable, List, Optional
from utils.constants import LOCATIONS
from utils.randomizer import Randomizer

class LocationCatalog:
    """Fixed set of location names a round can be played in."""

    def __init__(self, locations: Optional[Iterable[str]] = None):
        self._locations: List[str] = list(locations if locations is not None else LOCATIONS)
        if not self._locations:
            raise ValueError("Location catalog cannot be empty")

    def pick(self, randomizer: Randomizer) -> str:
        """Pick one location uniformly at random."""
        return randomizer.choice(self._locations)

    def __contains__(self, name: object) -> bool:
        return name in self._locations

    def __len__(self) -> int:
        return len(self._locations)
