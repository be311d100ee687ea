"""
Training engine for the hazard Gridworld.

Includes:
- hyperparameter configuration with auto-tuned tiers per grid size
- episode runners for Q-learning, SARSA and the greedy-only baseline
- rolling reward/step windows and convergence detection
- the session aggregate that owns all mutable training state
- a cooperative, time-sliced scheduler (start/pause/resume, one-shot or batch)
"""

from .config import TrainingConfig, effective_batch_size
from .episodes import (
    EpisodeOutcome,
    EpisodeRunner,
    run_q_learning_episode,
    run_sarsa_episode,
    run_naive_episode,
    Q_LEARNING,
    SARSA,
    NAIVE,
    STRATEGIES,
    LEARNING_STRATEGIES,
)
from .history import RollingHistory
from .convergence import ConvergenceTracker
from .session import TrainingSession
from .scheduler import TrainingScheduler, SchedulerState, TrainingMode

__all__ = [
    "TrainingConfig",
    "effective_batch_size",
    "EpisodeOutcome",
    "EpisodeRunner",
    "run_q_learning_episode",
    "run_sarsa_episode",
    "run_naive_episode",
    "Q_LEARNING",
    "SARSA",
    "NAIVE",
    "STRATEGIES",
    "LEARNING_STRATEGIES",
    "RollingHistory",
    "ConvergenceTracker",
    "TrainingSession",
    "TrainingScheduler",
    "SchedulerState",
    "TrainingMode",
]
