from __future__ import annotations

from dataclasses import dataclass, replace
import numbers


MAX_EPISODES_SMALL = 10_000
MAX_EPISODES_LARGE = 20_000
DEFAULT_EPISODES_PER_BATCH = 200
LARGE_GRID_MIN_BATCH = 500
HISTORY_CAPACITY = 200
TIME_SLICE = 0.02  # seconds of episodes per scheduler tick


@dataclass(frozen=True)
class TrainingConfig:
    """
    Hyperparameters shared by the learning strategies and the scheduler.

    :param alpha: Learning rate, in (0, 1].
        :type alpha: float
    :param gamma: Discount factor, in (0, 1].
        :type gamma: float
    :param min_epsilon: Floor of the exploration rate, in [0, 1].
        :type min_epsilon: float
    :param epsilon_decay: Amount subtracted from ε after every episode, in [0, 1].
        :type epsilon_decay: float
    :param episodes_per_batch: How far one batch-mode start extends the target.
        :type episodes_per_batch: int
    :param max_episodes: Target of one-shot training.
        :type max_episodes: int
    :param history_capacity: Size of the rolling reward/step windows.
        :type history_capacity: int
    :param time_slice: Wall-clock budget (seconds) of one scheduler tick.
        :type time_slice: float
    """

    alpha: float = 0.1
    gamma: float = 0.95
    min_epsilon: float = 0.01
    epsilon_decay: float = 0.001
    episodes_per_batch: int = DEFAULT_EPISODES_PER_BATCH
    max_episodes: int = MAX_EPISODES_SMALL
    history_capacity: int = HISTORY_CAPACITY
    time_slice: float = TIME_SLICE

    def __post_init__(self):
        _check_range("alpha", self.alpha, 0.0, 1.0, low_inclusive=False)
        _check_range("gamma", self.gamma, 0.0, 1.0, low_inclusive=False)
        _check_range("min_epsilon", self.min_epsilon, 0.0, 1.0)
        _check_range("epsilon_decay", self.epsilon_decay, 0.0, 1.0)
        _check_positive_int("episodes_per_batch", self.episodes_per_batch)
        _check_positive_int("max_episodes", self.max_episodes)
        _check_positive_int("history_capacity", self.history_capacity)
        if not isinstance(self.time_slice, numbers.Real) or self.time_slice <= 0:
            raise ValueError(f"time_slice must be > 0, got {self.time_slice!r}")

    @classmethod
    def for_grid_size(cls, size: int, **overrides) -> TrainingConfig:
        """
        Auto-tuned defaults for a grid of side `size`.

        Bigger grids need longer horizons and more exploration:
        - size >= 10: faster learning rate, slower ε decay, higher ε floor, γ close to 1
        - 7 <= size < 10: in between
        - smaller grids: the classic 4x4 settings

        :param size: Grid side length.
            :type size: int
        :param overrides: Fields to set explicitly instead of the tier default.
            :type overrides: dict

        :return: Validated configuration.
            :rtype: TrainingConfig
        """
        size = int(size)
        if size >= 10:
            tier = dict(alpha=0.15, gamma=0.995, epsilon_decay=0.0001, min_epsilon=0.05)
        elif size >= 7:
            tier = dict(alpha=0.1, gamma=0.98, epsilon_decay=0.0005, min_epsilon=0.02)
        else:
            tier = dict(alpha=0.1, gamma=0.95, epsilon_decay=0.001, min_epsilon=0.01)

        tier["max_episodes"] = MAX_EPISODES_LARGE if size > 8 else MAX_EPISODES_SMALL
        batch = int(overrides.pop("episodes_per_batch", DEFAULT_EPISODES_PER_BATCH))
        tier["episodes_per_batch"] = effective_batch_size(size, batch)
        tier.update(overrides)
        return cls(**tier)

    def replace(self, **changes) -> TrainingConfig:
        """
        Return a validated copy with some fields changed.

        :param changes: Field values to change.
            :type changes: dict

        :return: New configuration (self is untouched).
            :rtype: TrainingConfig
        """
        return replace(self, **changes)


def effective_batch_size(size: int, requested: int) -> int:
    """
    Episodes added per batch-mode start; large grids get at least 500.

    :param size: Grid side length.
        :type size: int
    :param requested: Requested batch size.
        :type requested: int

    :return: Batch size actually used.
        :rtype: int
    """
    if size >= 10 and requested < LARGE_GRID_MIN_BATCH:
        return LARGE_GRID_MIN_BATCH
    return int(requested)


def _check_range(name: str, value, low: float, high: float, low_inclusive: bool = True) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"{name} must be a number, got {value!r}")
    ok_low = value >= low if low_inclusive else value > low
    if not ok_low or value > high:
        bracket = "[" if low_inclusive else "("
        raise ValueError(f"{name} must be in {bracket}{low}, {high}], got {value}")


def _check_positive_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
