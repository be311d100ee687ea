from __future__ import annotations

import numpy as np

from .action_selection import epsilon_greedy
from .gridworld import N_ACTIONS


class SARSAgent:
    """
    Tabular SARSA agent with ε-greedy exploration.

    This file implements a tabular SARSA agent:
        - Tabular: stores a table 'Q[state, action]'
        - SARSA (on-policy TD control): updates using the next action actually chosen by the same behaviour policy (ε-greedy)

    Update:
        Q(s,a) <- Q(s,a) + alpha * [r + gamma * Q(s',a') - Q(s,a)]

    The episode runner selects a' before calling `update` and then reuses it as the
    next action, so every action is drawn exactly once.

    :param n_states: Number of discrete states.
        :type n_states: int
    :param n_actions: Number of discrete actions.
        :type n_actions: int
    :param alpha: Learning rate.
        :type alpha: float
    :param gamma: Discount factor.
        :type gamma: float
    :param seed: RNG seed (or SeedSequence) for action selection.
        :type seed: int | np.random.SeedSequence | None
    """

    name = "sarsa"

    def __init__(
        self,
        n_states: int,
        n_actions: int = N_ACTIONS,
        alpha: float = 0.1,
        gamma: float = 0.95,
        seed: int | np.random.SeedSequence | None = None,
    ):
        self.n_states = int(n_states)
        self.n_actions = int(n_actions)

        self.alpha = float(alpha)
        self.gamma = float(gamma)

        self.rng = np.random.default_rng(seed)
        self.Q = np.zeros(shape=(self.n_states, self.n_actions), dtype=np.float64)

    def reset(self) -> None:
        self.Q.fill(0.0)

    def select_action(self, state: int, epsilon: float) -> int:
        """
        Select an action using ε-greedy.

        :param state: Current state index.
            :type state: int
        :param epsilon: Exploration probability.
            :type epsilon: float

        :return: Action index.
            :rtype: int
        """
        return epsilon_greedy(self.Q[state], epsilon, self.rng)

    def update(
        self,
        state: int,
        action: int,
        reward: float,
        next_state: int,
        next_action: int,
        done: bool,
    ) -> None:
        """
        Apply the SARSA update.

        Update:
            Q(s,a) <- Q(s,a) + alpha * [r + gamma * Q(s',a') - Q(s,a)]

        :param state: Current state.
            :type state: int
        :param action: Action taken.
            :type action: int
        :param reward: Observed reward.
            :type reward: float
        :param next_state: Next state.
            :type next_state: int
        :param next_action: Next action chosen by the same behaviour policy.
            :type next_action: int
        :param done: Whether the episode ended after this transition.
            :type done: bool

        :return: None
            :rtype: None
        """
        target = reward
        if not done:
            target += self.gamma * self.Q[next_state, next_action]

        td_error = target - self.Q[state, action]
        self.Q[state, action] += self.alpha * td_error
