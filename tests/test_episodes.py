import logging

import numpy as np
import pytest

from gridworld_rl.tabular import (
    GridConfig,
    GridEnvironment,
    NaiveAgent,
    QLearningAgent,
    SARSAgent,
    UP,
    DOWN,
    RIGHT,
)
from gridworld_rl.training import (
    EpisodeOutcome,
    EpisodeRunner,
    STRATEGIES,
    run_naive_episode,
    run_q_learning_episode,
    run_sarsa_episode,
)


class CountingSARSAgent(SARSAgent):
    """SARSA agent that records how often an action is drawn."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = 0

    def select_action(self, state: int, epsilon: float) -> int:
        self.calls += 1
        return super().select_action(state, epsilon)


def test_outcome_win_flag_follows_return_sign() -> None:
    assert EpisodeOutcome(total_reward=995.0, steps=6).won
    assert not EpisodeOutcome(total_reward=-103.0, steps=4).won
    assert not EpisodeOutcome(total_reward=0.0, steps=0).won


def test_q_learning_follows_trained_table_to_goal() -> None:
    """
    On a 2x2 grid a table that says "right, then down" reaches the goal in 2 steps:
        return = -1 + 1000 = 999
    """
    env = GridEnvironment(GridConfig(size=2))
    agent = QLearningAgent(n_states=4, seed=0)
    agent.Q[0, RIGHT] = 10.0
    agent.Q[1, DOWN] = 10.0

    outcome = run_q_learning_episode(env, agent, epsilon=0.0, max_steps=env.max_steps)
    assert outcome == EpisodeOutcome(total_reward=999.0, steps=2, timed_out=False)
    assert outcome.won


def test_hazard_ends_episode_with_penalty() -> None:
    """
    Stepping from the start straight into a hazard: one step, return -100.
    """
    env = GridEnvironment(GridConfig(size=3, hazards=frozenset({1})))
    agent = QLearningAgent(n_states=9, seed=0)
    agent.Q[0, RIGHT] = 5.0

    outcome = run_q_learning_episode(env, agent, epsilon=0.0, max_steps=env.max_steps)
    assert outcome.total_reward == -100.0
    assert outcome.steps == 1
    assert not outcome.won


def test_step_cap_ends_episode_without_terminal_bonus(caplog) -> None:
    """
    A greedy table that always says "up" keeps the agent at the start forever.
    The cap stops the episode; the accumulated step costs stand as they are.
    """
    env = GridEnvironment(GridConfig(size=4))
    agent = NaiveAgent(n_states=16, seed=0)
    agent.Q[:, UP] = 1.0

    with caplog.at_level(logging.DEBUG, logger="gridworld_rl.training.episodes"):
        outcome = run_naive_episode(env, agent, epsilon=0.0, max_steps=env.max_steps)

    assert outcome.steps == 132
    assert outcome.total_reward == -132.0
    assert outcome.timed_out
    assert "step cap" in caplog.text


def test_sarsa_draws_each_action_once() -> None:
    """
    SARSA picks a' before the update and reuses it as the next action:
    an episode of n steps draws exactly n + 1 actions (the last one is never executed).
    """
    env = GridEnvironment(GridConfig.default())
    agent = CountingSARSAgent(n_states=16, seed=3)

    outcome = run_sarsa_episode(env, agent, epsilon=1.0, max_steps=env.max_steps)
    assert agent.calls == outcome.steps + 1


def test_sarsa_updates_visited_entries() -> None:
    env = GridEnvironment(GridConfig.default())
    agent = SARSAgent(n_states=16, seed=5)

    run_sarsa_episode(env, agent, epsilon=1.0, max_steps=env.max_steps)
    assert agent.Q.any()


def test_runner_plays_every_strategy_from_start() -> None:
    """
    One call -> one outcome per strategy. Learners change their tables, the baseline does not.
    """
    env = GridEnvironment(GridConfig.default())
    agents = {
        "q_learning": QLearningAgent(16, seed=1),
        "sarsa": SARSAgent(16, seed=2),
        "naive": NaiveAgent(16, seed=3),
    }
    runner = EpisodeRunner(env, agents)

    outcomes = runner.run(epsilon=1.0)
    assert list(outcomes) == list(STRATEGIES)
    for outcome in outcomes.values():
        assert 1 <= outcome.steps <= env.max_steps

    assert agents["q_learning"].Q.any()
    assert agents["sarsa"].Q.any()
    assert not agents["naive"].Q.any()


def test_runner_requires_all_strategies() -> None:
    env = GridEnvironment()
    with pytest.raises(ValueError):
        EpisodeRunner(env, {"q_learning": QLearningAgent(16)})


def test_naive_ignores_epsilon() -> None:
    """
    The baseline is greedy even if a high ε is passed in: with a table that says "right, then down"
    on a 2x2 grid it always wins in 2 steps.
    """
    env = GridEnvironment(GridConfig(size=2))
    agent = NaiveAgent(n_states=4, seed=0)
    agent.Q[0, RIGHT] = 1.0
    agent.Q[1, DOWN] = 1.0

    results = [run_naive_episode(env, agent, epsilon=1.0, max_steps=env.max_steps) for _ in range(20)]
    assert all(r.steps == 2 and r.total_reward == 999.0 for r in results)
    assert np.allclose(agent.Q[0], [0.0, 0.0, 0.0, 1.0])
