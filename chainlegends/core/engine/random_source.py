"""Injectable randomness and time sources.

Every call in the battle core that needs entropy (critical rolls, turn-order
jitter, the opponent's weighted draw) takes a ``RandomSource``. The default is
a ``numpy.random.Generator``; tests pass scripted sources instead.
"""

import time
from typing import Callable, Optional, Protocol

import numpy as np


class RandomSource(Protocol):
    """The subset of ``numpy.random.Generator`` the battle core relies on."""

    def random(self) -> float:
        """Return a float in [0.0, 1.0)."""
        ...

    def uniform(self, low: float, high: float) -> float:
        """Return a float in [low, high)."""
        ...

    def integers(self, low: int, high: int) -> int:
        """Return an int in [low, high)."""
        ...


Clock = Callable[[], int]


def create_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the default random source, seeded for reproducible battles."""
    return np.random.default_rng(seed)


def system_clock() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)
