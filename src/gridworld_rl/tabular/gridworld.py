from __future__ import annotations

from dataclasses import dataclass, field
import numbers
from typing import Iterable

# Action indices: 0=up, 1=down, 2=left, 3=right
UP, DOWN, LEFT, RIGHT = 0, 1, 2, 3
N_ACTIONS = 4

REWARD_GOAL = 1000.0
REWARD_HAZARD = -100.0
REWARD_STEP = -1.0

DEFAULT_SIZE = 4
DEFAULT_HAZARDS = (5, 7, 11, 12)


def max_steps_for(size: int) -> int:
    """
    Step cap for one episode on a grid of side `size`.

    Without a cap an untrained greedy table can bounce against a wall forever.

    :param size: Grid side length.
        :type size: int

    :return: Maximum number of steps per episode.
        :rtype: int
    """
    return int(size) ** 2 * 2 + 100


@dataclass(frozen=True)  # frozen -> a grid layout is swapped, never edited in place
class GridConfig:
    """
    Layout of a square hazard grid.

    The start cell is always the top-left corner (state 0) and the goal is always the
    bottom-right corner (state n_states - 1). Hazards are any other cells.

    :param size: Grid side length (>= 2).
        :type size: int
    :param hazards: Hazard state indices. Must not contain the start or the goal.
        :type hazards: frozenset[int]
    """
    size: int = DEFAULT_SIZE
    hazards: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self):
        if isinstance(self.size, bool) or not isinstance(self.size, numbers.Integral):
            raise ValueError(f"Grid size must be an integer, got {self.size!r}")
        object.__setattr__(self, "size", int(self.size))
        if self.size < 2:
            raise ValueError(f"Grid size must be >= 2, got {self.size}")

        for h in self.hazards:
            if isinstance(h, bool) or not isinstance(h, numbers.Integral):
                raise ValueError(f"Hazard indices must be integers, got {h!r}")

        hazards = frozenset(int(h) for h in self.hazards)
        for h in sorted(hazards):
            if not (0 <= h < self.n_states):
                raise ValueError(f"Hazard {h} out of bounds [0, {self.n_states - 1}]")
            if h == self.start_state:
                raise ValueError(f"Hazard {h} overlaps the start state")
            if h == self.goal_state:
                raise ValueError(f"Hazard {h} overlaps the goal state")

        # frozen dataclass: bypass __setattr__ to store the normalised set
        object.__setattr__(self, "hazards", hazards)

    @classmethod
    def default(cls) -> GridConfig:
        """
        The 4x4 layout with the classic four hazards.

        :return: Default grid configuration.
            :rtype: GridConfig
        """
        return cls(size=DEFAULT_SIZE, hazards=frozenset(DEFAULT_HAZARDS))

    @property
    def n_states(self) -> int:
        return self.size * self.size

    @property
    def start_state(self) -> int:
        return 0

    @property
    def goal_state(self) -> int:
        return self.n_states - 1

    @property
    def max_steps(self) -> int:
        return max_steps_for(self.size)

    def with_hazards(self, hazards: Iterable[int]) -> GridConfig:
        """
        Return a copy of this layout with a different hazard set (validated).

        :param hazards: New hazard state indices.
            :type hazards: Iterable[int]

        :return: New grid configuration.
            :rtype: GridConfig
        """
        return GridConfig(size=self.size, hazards=frozenset(hazards))


@dataclass(frozen=True)
class Transition:
    """
    Result of applying one action in one state.

    :param next_state: Next state index.
        :type next_state: int
    :param reward: Reward received.
        :type reward: float
    :param done: Whether the next state is terminal (goal or hazard).
        :type done: bool
    """
    next_state: int
    reward: float
    done: bool


class GridEnvironment:
    """
    Deterministic hazard Gridworld.

    States are integers in [0, n_states-1], mapped from (row, col) as row * size + col.

    Actions:
    - 0: up
    - 1: down
    - 2: left
    - 3: right

    Rewards:
    - reaching the goal: +1000, episode ends
    - landing on a hazard: -100, episode ends
    - any other move: -1 (pushes the agent toward short paths)

    Moving into the outer wall keeps you in the same cell (and still costs a step).
    There is no hidden simulation state: `transition` is a pure function of
    (state, action) and the current layout.

    :param grid: Grid layout.
        :type grid: GridConfig
    """

    def __init__(self, grid: GridConfig | None = None):
        self.grid = grid if grid is not None else GridConfig.default()

    @property
    def size(self) -> int:
        return self.grid.size

    @property
    def n_states(self) -> int:
        return self.grid.n_states

    @property
    def n_actions(self) -> int:
        return N_ACTIONS

    @property
    def start_state(self) -> int:
        return self.grid.start_state

    @property
    def goal_state(self) -> int:
        return self.grid.goal_state

    @property
    def hazards(self) -> frozenset[int]:
        return self.grid.hazards

    @property
    def max_steps(self) -> int:
        return self.grid.max_steps

    def pos_to_state(self, row: int, col: int) -> int:
        """
        Convert grid position (row, col) to a state index.

        :param row: Row index.
            :type row: int
        :param col: Column index.
            :type col: int

        :return: State index.
            :rtype: int
        """
        return row * self.size + col

    def state_to_pos(self, state: int) -> tuple[int, int]:
        """
        Convert a state index to grid position (row, col).

        :param state: State index.
            :type state: int

        :return: (row, col) position.
            :rtype: tuple[int, int]
        """
        row = state // self.size
        col = state % self.size
        return int(row), int(col)

    def is_terminal(self, state: int) -> bool:
        """
        Check whether a state ends an episode (goal or hazard).

        :param state: State index.
            :type state: int

        :return: True if terminal.
            :rtype: bool
        """
        return state == self.goal_state or state in self.grid.hazards

    def transition(self, state: int, action: int) -> Transition:
        """
        Apply `action` in `state`.

        :param state: Current state index.
            :type state: int
        :param action: Action index in {0,1,2,3}.
            :type action: int

        :return: The resulting transition.
            :rtype: Transition
        """
        if not (0 <= state < self.n_states):
            raise ValueError(f"state={state} out of bounds [0, {self.n_states - 1}]")

        row, col = self.state_to_pos(state)

        if action == UP:
            row = max(0, row - 1)
        elif action == DOWN:
            row = min(self.size - 1, row + 1)
        elif action == LEFT:
            col = max(0, col - 1)
        elif action == RIGHT:
            col = min(self.size - 1, col + 1)
        else:
            raise ValueError(f"Invalid action {action}. Must be in {{0,1,2,3}}.")

        next_state = self.pos_to_state(row, col)

        if next_state == self.goal_state:
            return Transition(next_state=next_state, reward=REWARD_GOAL, done=True)
        if next_state in self.grid.hazards:
            return Transition(next_state=next_state, reward=REWARD_HAZARD, done=True)
        return Transition(next_state=next_state, reward=REWARD_STEP, done=False)
