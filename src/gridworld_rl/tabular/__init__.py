"""
Tabular pieces of the hazard Gridworld.

Includes:
- the deterministic Gridworld (layout, transition and reward function)
- ε-greedy action selection with random tie-breaking
- Q-learning / SARSA agents and a greedy-only baseline
- a Gymnasium adapter over the same dynamics
"""

from .gridworld import (
    GridConfig,
    GridEnvironment,
    Transition,
    N_ACTIONS,
    UP,
    DOWN,
    LEFT,
    RIGHT,
    REWARD_GOAL,
    REWARD_HAZARD,
    REWARD_STEP,
    DEFAULT_HAZARDS,
    max_steps_for,
)
from .action_selection import epsilon_greedy, greedy_action, greedy_policy
from .q_learning import QLearningAgent
from .sarsa import SARSAgent
from .naive import NaiveAgent
from .gym_env import HazardGridEnv

__all__ = [
    "GridConfig",
    "GridEnvironment",
    "Transition",
    "N_ACTIONS",
    "UP",
    "DOWN",
    "LEFT",
    "RIGHT",
    "REWARD_GOAL",
    "REWARD_HAZARD",
    "REWARD_STEP",
    "DEFAULT_HAZARDS",
    "max_steps_for",
    "epsilon_greedy",
    "greedy_action",
    "greedy_policy",
    "QLearningAgent",
    "SARSAgent",
    "NaiveAgent",
    "HazardGridEnv",
]
