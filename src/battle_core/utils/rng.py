import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """Every probability draw the engine makes goes through one of these methods.

    Seed it for deterministic tests; leave it unseeded in production. Each
    call is an independent draw.
    """

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def roll_percent(self) -> float:
        """Uniform draw in [0, 100)"""
        return self._random.random() * 100.0

    def chance(self, percent: float) -> bool:
        """Bernoulli draw that succeeds with the given percentage (100 always, 0 never)"""
        return self.roll_percent() < percent

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], inclusive at both ends"""
        return self._random.randint(low, high)

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high)"""
        return low + (high - low) * self._random.random()

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("cannot choose from an empty sequence")
        return items[self.randint(0, len(items) - 1)]
