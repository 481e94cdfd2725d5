"""
Seedable random source shared by every randomized decision of a round.
"""

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """
    Uniform integer source with the draws the session engine needs.

    Everything is expressed through ``uniform_int`` so a test double only has
    to override that one method.
    """

    def __init__(self, seed: Optional[int] = None, generator: Optional[random.Random] = None):
        self.seed = seed
        self._generator = generator or random.Random(seed)

    def uniform_int(self, low: int, high: int) -> int:
        """Return an integer uniformly drawn from ``[low, high]`` (both inclusive)."""
        if high < low:
            raise ValueError(f"Empty range [{low}, {high}]")
        return self._generator.randint(low, high)

    def choice(self, items: Sequence[T]) -> T:
        """Pick one element uniformly."""
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[self.uniform_int(0, len(items) - 1)]

    def shuffle(self, items: List[T]) -> List[T]:
        """
        Fisher-Yates shuffle in place.

        For i from the last index down to 1, draw j in [0, i] and swap.
        Every permutation of the list is equally likely.
        """
        for i in range(len(items) - 1, 0, -1):
            j = self.uniform_int(0, i)
            items[i], items[j] = items[j], items[i]
        return items
