from __future__ import annotations

import logging
from typing import Any, Iterable

import numpy as np

from ..tabular import GridConfig, GridEnvironment, NaiveAgent, QLearningAgent, SARSAgent, greedy_action, greedy_policy
from .config import TrainingConfig
from .convergence import ConvergenceTracker
from .episodes import NAIVE, Q_LEARNING, SARSA, STRATEGIES, EpisodeOutcome, EpisodeRunner
from .history import RollingHistory

logger = logging.getLogger(__name__)

INITIAL_EPSILON = 1.0


class TrainingSession:
    """
    Everything that changes while the three strategies train side by side.

    A session owns:
    - the grid layout and the environment built from it
    - one agent (value table + RNG) per strategy
    - one rolling history and one win counter per strategy
    - the shared exploration rate ε and the total episode count
    - the convergence markers

    It is plain in-memory state: nothing is persisted, and reporting code only reads it
    through the query methods below (tables are returned as copies).

    Randomness: `seed` feeds a SeedSequence that is split into one independent stream
    per strategy, so runs are reproducible and the strategies never share draws.

    :param grid: Grid layout. Defaults to the 4x4 grid with the classic hazards.
        :type grid: GridConfig | None
    :param config: Hyperparameters. Defaults to the auto-tuned tier for the grid size.
        :type config: TrainingConfig | None
    :param seed: Master seed.
        :type seed: int | None
    """

    def __init__(
        self,
        grid: GridConfig | None = None,
        config: TrainingConfig | None = None,
        seed: int | None = None,
    ):
        self.grid = grid if grid is not None else GridConfig.default()
        self.config = config if config is not None else TrainingConfig.for_grid_size(self.grid.size)
        self.seed = seed
        # set by the scheduler while it is RUNNING
        self.running = False
        self._build()

    def _build(self) -> None:
        self.env = GridEnvironment(self.grid)

        seeds = np.random.SeedSequence(self.seed).spawn(len(STRATEGIES) + 1)
        n_states = self.grid.n_states
        self.agents = {
            Q_LEARNING: QLearningAgent(n_states, alpha=self.config.alpha, gamma=self.config.gamma, seed=seeds[0]),
            SARSA: SARSAgent(n_states, alpha=self.config.alpha, gamma=self.config.gamma, seed=seeds[1]),
            NAIVE: NaiveAgent(n_states, seed=seeds[2]),
        }
        # separate stream for reporting queries so that looking at the policy
        # never shifts the training draws
        self._query_rng = np.random.default_rng(seeds[3])

        self.runner = EpisodeRunner(self.env, self.agents)
        self.histories = {name: RollingHistory(self.config.history_capacity) for name in STRATEGIES}
        self.tracker = ConvergenceTracker(self.grid.size)
        self._wins = {name: 0 for name in STRATEGIES}
        self.total_episodes = 0
        self.epsilon = INITIAL_EPSILON

    # ---------------------------
    # Training
    # ---------------------------

    def run_episode(self) -> dict[str, EpisodeOutcome]:
        """
        Run one episode per strategy and record the results.

        Order of effects:
        1. each strategy plays (and learns from) one episode with the current ε
        2. histories and win counters are updated
        3. the episode count grows by one and ε decays by `epsilon_decay` (floored at `min_epsilon`)
        4. convergence is checked for the learning strategies

        :return: Outcome per strategy id.
            :rtype: dict[str, EpisodeOutcome]
        """
        outcomes = self.runner.run(self.epsilon)

        for name, outcome in outcomes.items():
            self.histories[name].append(outcome)
            if outcome.won:
                self._wins[name] += 1

        self.total_episodes += 1
        # never back up, even if min_epsilon was raised above the current value
        self.epsilon = min(self.epsilon, max(self.config.min_epsilon, self.epsilon - self.config.epsilon_decay))

        for name in STRATEGIES:
            self.tracker.check(name, self.histories[name], self.total_episodes)

        return outcomes

    # ---------------------------
    # Commands
    # ---------------------------

    def _require_not_running(self, command: str) -> None:
        if self.running:
            raise RuntimeError(f"Cannot {command} while training is running. Pause first.")

    def reset(self) -> None:
        """
        Forget everything: zero tables, empty histories, zero counters, ε = 1, episode 0.

        Rejected (RuntimeError) while a scheduler is running this session.

        :return: None.
            :rtype: None
        """
        self._require_not_running("reset")
        for agent in self.agents.values():
            agent.reset()
        for history in self.histories.values():
            history.clear()
        for name in self._wins:
            self._wins[name] = 0
        self.tracker.reset(self.grid.size)
        self.total_episodes = 0
        self.epsilon = INITIAL_EPSILON
        logger.info("Session reset (%dx%d grid, hazards=%s)", self.grid.size, self.grid.size, sorted(self.grid.hazards))

    def resize(self, size: int) -> None:
        """
        Switch to an empty `size` x `size` grid with the auto-tuned hyperparameters.

        Tables change shape, so the whole session is rebuilt (this implies a reset).

        :param size: New grid side length.
            :type size: int

        :return: None.
            :rtype: None
        """
        self._require_not_running("resize the grid")
        grid = GridConfig(size=size)
        config = TrainingConfig.for_grid_size(grid.size)

        self.grid = grid
        self.config = config
        self._build()
        logger.info(
            "Resized to %dx%d (alpha=%s, gamma=%s, decay=%s, min_epsilon=%s)",
            grid.size, grid.size, config.alpha, config.gamma, config.epsilon_decay, config.min_epsilon,
        )

    def set_hazards(self, hazards: Iterable[int]) -> None:
        """
        Replace the hazard cells. Learned tables are kept.

        :param hazards: Hazard state indices (validated against start/goal/bounds).
            :type hazards: Iterable[int]

        :return: None.
            :rtype: None
        """
        self._require_not_running("change hazards")
        grid = self.grid.with_hazards(hazards)
        self.grid = grid
        self.env.grid = grid
        logger.info("Hazards set to %s", sorted(grid.hazards))

    def update_config(self, **changes) -> TrainingConfig:
        """
        Change hyperparameters; the new α/γ apply from the next update.

        :param changes: TrainingConfig fields to change.
            :type changes: dict

        :return: The new configuration.
            :rtype: TrainingConfig
        """
        config = self.config.replace(**changes)
        if config.history_capacity != self.config.history_capacity:
            raise ValueError("history_capacity is fixed for the lifetime of a session")

        self.config = config
        for agent in (self.agents[Q_LEARNING], self.agents[SARSA]):
            agent.alpha = config.alpha
            agent.gamma = config.gamma
        return config

    # ---------------------------
    # Queries
    # ---------------------------

    def _check_strategy(self, strategy: str) -> str:
        if strategy not in self.agents:
            raise KeyError(f"Unknown strategy {strategy!r}. Expected one of {list(STRATEGIES)}")
        return strategy

    def history(self, strategy: str) -> RollingHistory:
        return self.histories[self._check_strategy(strategy)]

    def average_reward(self, strategy: str) -> float:
        return self.history(strategy).average_reward()

    def average_steps(self, strategy: str) -> float:
        return self.history(strategy).average_steps()

    def win_rate(self, strategy: str) -> float:
        return self.history(strategy).win_rate()

    def wins(self, strategy: str) -> int:
        return self._wins[self._check_strategy(strategy)]

    def converged_episode(self, strategy: str) -> int | None:
        return self.tracker.converged_episode(self._check_strategy(strategy))

    def value_table(self, strategy: str) -> np.ndarray:
        """
        Copy of a strategy's value table, shape (n_states, 4).

        :param strategy: Strategy id.
            :type strategy: str

        :return: Value table copy.
            :rtype: np.ndarray
        """
        return self.agents[self._check_strategy(strategy)].Q.copy()

    def greedy_action(self, strategy: str, state: int) -> int:
        """
        Greedy action of a strategy in one state (random tie-break).

        :param strategy: Strategy id.
            :type strategy: str
        :param state: State index.
            :type state: int

        :return: Action index.
            :rtype: int
        """
        if not (0 <= state < self.grid.n_states):
            raise ValueError(f"state={state} out of bounds [0, {self.grid.n_states - 1}]")
        return greedy_action(self.agents[self._check_strategy(strategy)].Q[state], self._query_rng)

    def greedy_policy(self, strategy: str) -> np.ndarray:
        """
        Greedy action for every state, -1 on terminal cells (goal and hazards).

        An episode ends on entering a terminal cell, so whatever the table holds there
        is never acted on and has no arrow to show.

        :param strategy: Strategy id.
            :type strategy: str

        :return: Policy array of shape (n_states,).
            :rtype: np.ndarray
        """
        policy = greedy_policy(self.agents[self._check_strategy(strategy)].Q, self._query_rng)
        policy[[s for s in range(self.grid.n_states) if self.env.is_terminal(s)]] = -1
        return policy

    def greedy_rollout(self, strategy: str) -> list[int]:
        """
        Follow a strategy's table greedily from the start cell (no exploration, no learning).

        Stops on the goal, on a hazard, or at the step cap (an untrained table can
        walk in circles forever).

            e.g. [0, 1, 3] on a 2x2 grid: right, then down into the goal

        :param strategy: Strategy id.
            :type strategy: str

        :return: Visited states, start included.
            :rtype: list[int]
        """
        Q = self.agents[self._check_strategy(strategy)].Q
        state = self.env.start_state
        path = [state]

        for _ in range(self.env.max_steps):
            tr = self.env.transition(state, greedy_action(Q[state], self._query_rng))
            state = tr.next_state
            path.append(state)
            if tr.done:
                break

        return path

    def snapshot(self) -> dict[str, Any]:
        """
        Plain-data summary for reporting code (no formatting).

        :return: Nested dict with session-wide and per-strategy figures.
            :rtype: dict[str, Any]
        """
        return {
            "total_episodes": self.total_episodes,
            "epsilon": self.epsilon,
            "grid_size": self.grid.size,
            "hazards": sorted(self.grid.hazards),
            "strategies": {
                name: {
                    "average_reward": self.average_reward(name),
                    "average_steps": self.average_steps(name),
                    "win_rate": self.win_rate(name),
                    "wins": self._wins[name],
                    "converged_episode": self.tracker.converged_episode(name),
                }
                for name in STRATEGIES
            },
        }
