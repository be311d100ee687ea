from __future__ import annotations

import numpy as np

from .action_selection import greedy_action
from .gridworld import N_ACTIONS


class NaiveAgent:
    """
    Greedy-only baseline that never learns.

    It keeps a table like the other agents so it can be inspected the same way, but the
    table stays all zeros forever. Every action is therefore a random tie-break among
    the four moves: this is how a "just be greedy" agent with no exploration and no
    updates fares on the same grid.

    :param n_states: Number of discrete states.
        :type n_states: int
    :param n_actions: Number of discrete actions.
        :type n_actions: int
    :param seed: RNG seed (or SeedSequence) for tie-breaking.
        :type seed: int | np.random.SeedSequence | None
    """

    name = "naive"

    def __init__(
        self,
        n_states: int,
        n_actions: int = N_ACTIONS,
        seed: int | np.random.SeedSequence | None = None,
    ):
        self.n_states = int(n_states)
        self.n_actions = int(n_actions)

        self.rng = np.random.default_rng(seed)
        self.Q = np.zeros(shape=(self.n_states, self.n_actions), dtype=np.float64)

    def reset(self) -> None:
        self.Q.fill(0.0)

    def select_action(self, state: int, epsilon: float = 0.0) -> int:
        """
        Greedy action; `epsilon` is accepted for interface parity and ignored.

        :param state: Current state index.
            :type state: int
        :param epsilon: Ignored.
            :type epsilon: float

        :return: Action index.
            :rtype: int
        """
        return greedy_action(self.Q[state], self.rng)

    def update(self, *args, **kwargs) -> None:
        """No learning."""
        return None
