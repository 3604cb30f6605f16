"""Random number of commits per day."""

from typing import Optional

import numpy as np

COMMIT_COUNTS = np.arange(14)

# Heavier at both ends: a few very quiet days, a few very busy ones
COMMIT_WEIGHTS = np.array([3, 4, 2, 2, 2, 1, 1, 1, 1, 2, 2, 2, 4, 3], dtype=float)


class WeightedCommitSampler:
    """Draw daily commit counts from a U-shaped weighted distribution."""

    def __init__(self, seed: Optional[int] = None):
        """
        Args:
            seed: Optional seed for reproducible draws. Without one the
                generator is seeded from OS entropy.
        """
        self.seed = seed
        self._rng = np.random.default_rng(seed)
        self._probabilities = COMMIT_WEIGHTS / COMMIT_WEIGHTS.sum()

    def draw_count(self) -> int:
        """Return the number of commits to make on one day (0-13)."""
        return int(self._rng.choice(COMMIT_COUNTS, p=self._probabilities))
