from __future__ import annotations

import logging

from ..tabular import REWARD_GOAL
from .episodes import LEARNING_STRATEGIES
from .history import RollingHistory

logger = logging.getLogger(__name__)

WIN_RATE_THRESHOLD = 0.9
REWARD_FRACTION = 0.8


class ConvergenceTracker:
    """
    Decide, once per strategy, when its recent behaviour looks near-optimal.

    A strategy is marked converged at the first check where, over its rolling window:
        1. win rate > 90%
        2. average reward > 80% of a perfect run

    A perfect run is scored as REWARD_GOAL - 2 * size. The true shortest path is a bit
    shorter (2 * (size - 1) moves), so this is slightly conservative.
    We do not ask for near-perfect scores: with ε > 0 the agents keep stepping into
    hazards every now and then, even after they know the way.

    Markers are sticky: once set they are never re-evaluated, even if a later window
    regresses. The naive baseline never learns, so it is never evaluated.

    :param size: Grid side length.
        :type size: int
    """

    def __init__(self, size: int):
        self.size = int(size)
        self._converged: dict[str, int | None] = {name: None for name in LEARNING_STRATEGIES}

    @property
    def threshold(self) -> float:
        perfect_run_score = REWARD_GOAL - 2 * self.size
        return perfect_run_score * REWARD_FRACTION

    def reset(self, size: int | None = None) -> None:
        if size is not None:
            self.size = int(size)
        for name in self._converged:
            self._converged[name] = None

    def converged_episode(self, strategy: str) -> int | None:
        """
        Episode at which `strategy` was marked converged (None if not yet / never).

        :param strategy: Strategy id.
            :type strategy: str

        :return: Episode number or None.
            :rtype: int | None
        """
        return self._converged.get(strategy)

    def check(self, strategy: str, history: RollingHistory, episode: int) -> int | None:
        """
        Evaluate `strategy` against its rolling window and set the marker if due.

        :param strategy: Strategy id.
            :type strategy: str
        :param history: Rolling window of that strategy.
            :type history: RollingHistory
        :param episode: Total episode count at the time of the check.
            :type episode: int

        :return: The convergence episode (new or previously set), or None.
            :rtype: int | None
        """
        if strategy not in self._converged:
            return None  # naive (or anything that does not learn)

        marker = self._converged[strategy]
        if marker is not None:
            return marker

        if history.win_rate() > WIN_RATE_THRESHOLD and history.average_reward() > self.threshold:
            self._converged[strategy] = int(episode)
            logger.info("%s converged at episode %d", strategy, episode)

        return self._converged[strategy]
