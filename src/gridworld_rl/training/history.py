from __future__ import annotations

from collections import deque

import numpy as np

from .config import HISTORY_CAPACITY
from .episodes import EpisodeOutcome


class RollingHistory:
    """
    Bounded window of recent episode rewards and step counts for one strategy.

    Once `capacity` entries are stored, every append evicts the oldest one (FIFO).
    The window only feeds reporting and convergence checks; learning never reads it.

    :param capacity: Maximum number of episodes kept.
        :type capacity: int
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity <= 0:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = int(capacity)
        self._rewards: deque[float] = deque(maxlen=self.capacity)
        self._steps: deque[int] = deque(maxlen=self.capacity)

    def __len__(self) -> int:
        return len(self._rewards)

    def append(self, outcome: EpisodeOutcome) -> None:
        self._rewards.append(float(outcome.total_reward))
        self._steps.append(int(outcome.steps))

    def clear(self) -> None:
        self._rewards.clear()
        self._steps.clear()

    def rewards(self) -> np.ndarray:
        """
        Rewards in the window, oldest first.

        :return: 1D float array (copy).
            :rtype: np.ndarray
        """
        return np.fromiter(self._rewards, dtype=np.float64, count=len(self._rewards))

    def steps(self) -> np.ndarray:
        """
        Step counts in the window, oldest first.

        :return: 1D int array (copy).
            :rtype: np.ndarray
        """
        return np.fromiter(self._steps, dtype=np.int64, count=len(self._steps))

    def average_reward(self) -> float:
        if not self._rewards:
            return 0.0
        return sum(self._rewards) / len(self._rewards)

    def average_steps(self) -> float:
        if not self._steps:
            return 0.0
        return sum(self._steps) / len(self._steps)

    def win_rate(self) -> float:
        """
        Fraction of episodes in the window with a positive return.

        :return: Win rate in [0, 1] (0 for an empty window).
            :rtype: float
        """
        if not self._rewards:
            return 0.0
        return sum(1 for r in self._rewards if r > 0) / len(self._rewards)
