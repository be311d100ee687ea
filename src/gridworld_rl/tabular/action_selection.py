from __future__ import annotations

import numpy as np


def greedy_action(q_values: np.ndarray, rng: np.random.Generator) -> int:
    """
    Pick an action with the maximum value, breaking ties uniformly at random.

    Early in learning many actions have identical values (all 0 at the start).
    Always taking the first argmax would bias the agent toward action 0 (up), so we
    collect every index that reaches the maximum and sample one of them.

    :param q_values: Action values of one state, shape (n_actions,).
        :type q_values: np.ndarray
    :param rng: NumPy RNG used for tie-breaking.
        :type rng: np.random.Generator

    :return: Action index.
        :rtype: int
    """
    max_q = np.max(q_values)
    best_actions = np.flatnonzero(q_values == max_q)
    return int(rng.choice(best_actions))


def epsilon_greedy(q_values: np.ndarray, epsilon: float, rng: np.random.Generator) -> int:
    """
    ε-greedy action selection.

    1. With probability epsilon: explore -> uniformly random action
    2. Else: exploit -> one of the actions with the maximum value (random tie-break)

    :param q_values: Action values of one state, shape (n_actions,).
        :type q_values: np.ndarray
    :param epsilon: Exploration probability in [0,1].
        :type epsilon: float
    :param rng: NumPy RNG used for exploration and tie-breaking.
        :type rng: np.random.Generator

    :return: Action index.
        :rtype: int
    """
    if epsilon > 0.0 and rng.random() < epsilon:
        return int(rng.integers(low=0, high=len(q_values)))
    return greedy_action(q_values, rng)


def greedy_policy(Q: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """
    Greedy action for every state (what a policy-arrow view draws).

    Ties are broken at random, like during training, so an all-zero table gives
    arbitrary arrows rather than a wall of "up".

    :param Q: Value table of shape (n_states, n_actions).
        :type Q: np.ndarray
    :param rng: NumPy RNG used for tie-breaking.
        :type rng: np.random.Generator

    :return: Policy array of shape (n_states,), each entry is an action index.
        :rtype: np.ndarray
    """
    return np.array([greedy_action(Q[s], rng) for s in range(Q.shape[0])], dtype=np.int64)
