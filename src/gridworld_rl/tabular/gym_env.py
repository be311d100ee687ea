from __future__ import annotations

from typing import Any

import gymnasium as gym
from gymnasium import spaces

from .gridworld import GridConfig, GridEnvironment


class HazardGridEnv(gym.Env):
    """
    Gymnasium view of the hazard Gridworld.

    The dynamics are exactly `GridEnvironment.transition`; this wrapper only adds the
    episode bookkeeping Gymnasium expects (current state, step counter, truncation at
    the step cap). It is handy when you want to drive the grid with code written for
    Toy-Text environments such as CliffWalking.

    Observations and actions are plain integers:
    - observation_space: Discrete(n_states)
    - action_space: Discrete(4) with 0=up, 1=down, 2=left, 3=right

    :param grid: Grid layout. Defaults to the 4x4 grid with the classic hazards.
        :type grid: GridConfig | None
    """

    metadata = {"render_modes": []}

    def __init__(self, grid: GridConfig | None = None):
        super().__init__()
        self.env = GridEnvironment(grid)
        self.observation_space = spaces.Discrete(self.env.n_states)
        self.action_space = spaces.Discrete(self.env.n_actions)

        self._state: int | None = None
        self._steps = 0

    @property
    def max_steps(self) -> int:
        return self.env.max_steps

    def reset(self, *, seed: int | None = None, options: dict[str, Any] | None = None) -> tuple[int, dict]:
        """
        Put the agent back on the start cell.

        :param seed: Seed forwarded to gym.Env.reset (seeds self.np_random).
            :type seed: int | None
        :param options: Unused.
            :type options: dict | None

        :return: (start_state, info)
            :rtype: tuple[int, dict]
        """
        super().reset(seed=seed)
        self._state = self.env.start_state
        self._steps = 0
        return self._state, {}

    def step(self, action: int) -> tuple[int, float, bool, bool, dict]:
        """
        Step the simulator by one action.

        :param action: Action index.
            :type action: int

        :return: (next_state, reward, terminated, truncated, info)
            :rtype: tuple[int, float, bool, bool, dict]
        """
        if self._state is None:
            raise RuntimeError("You must call reset() before step().")

        tr = self.env.transition(self._state, int(action))
        self._state = tr.next_state
        self._steps += 1

        terminated = tr.done
        truncated = (not terminated) and self._steps >= self.max_steps
        return tr.next_state, tr.reward, terminated, truncated, {"steps": self._steps}
