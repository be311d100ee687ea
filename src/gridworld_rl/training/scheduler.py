from __future__ import annotations

from enum import Enum
import logging
import time
from typing import Callable, Iterable
import warnings

from .config import TrainingConfig, effective_batch_size
from .session import TrainingSession

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class TrainingMode(Enum):
    ONE_SHOT = "one_shot"  # train up to config.max_episodes, then stop for good
    BATCH = "batch"  # every start adds config.episodes_per_batch to the target


class TrainingScheduler:
    """
    Cooperative, time-sliced training driver.

    The host (a GUI timer, an event loop, a plain while loop) calls `tick()` periodically.
    Each tick runs whole episodes until either the target episode count is reached or the
    time slice (config.time_slice, 20 ms by default) is used up, then returns control.
    The slice is checked after every episode, so a tick always makes progress and never
    stops in the middle of an episode. Pausing takes effect at the next tick boundary.

    States:
        IDLE --start--> RUNNING --pause--> PAUSED --start--> RUNNING
        RUNNING --target reached--> COMPLETED
        COMPLETED --start--> RUNNING (batch mode only; one-shot mode stays COMPLETED)

    While RUNNING, commands that change the environment (reset, resize, hazards, mode)
    are rejected with RuntimeError so no episode ever sees the grid change under it.

    :param session: Training session to drive.
        :type session: TrainingSession
    :param mode: One-shot or batch training.
        :type mode: TrainingMode
    :param clock: Monotonic clock in seconds (injectable for tests).
        :type clock: Callable[[], float]
    """

    def __init__(
        self,
        session: TrainingSession,
        mode: TrainingMode = TrainingMode.ONE_SHOT,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.session = session
        self.mode = TrainingMode(mode)
        self.clock = clock

        self.state = SchedulerState.IDLE
        self.target: int | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @state.setter
    def state(self, value: SchedulerState) -> None:
        # the session rejects environment changes by itself while this is set
        self._state = value
        self.session.running = value is SchedulerState.RUNNING

    @property
    def is_running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    @property
    def config(self) -> TrainingConfig:
        return self.session.config

    def _require_not_running(self, command: str) -> None:
        if self.is_running:
            raise RuntimeError(f"Cannot {command} while training is running. Pause first.")

    # ---------------------------
    # Start / pause
    # ---------------------------

    def start(self) -> SchedulerState:
        """
        Start (or resume) training.

        - PAUSED with a pending target: resume toward that target
        - one-shot mode: target is config.max_episodes; if already there, warn and stay COMPLETED
        - batch mode: target is the current total plus one batch

        :return: State after the command.
            :rtype: SchedulerState
        """
        if self.is_running:
            return self.state

        total = self.session.total_episodes

        if self.state is SchedulerState.PAUSED and self.target is not None and total < self.target:
            self.state = SchedulerState.RUNNING
            logger.info("Training resumed at episode %d (target %d)", total, self.target)
            return self.state

        if self.mode is TrainingMode.ONE_SHOT:
            maximum = self.config.max_episodes
            if total >= maximum:
                warnings.warn(
                    message=f"Training already complete ({total}/{maximum} episodes). Reset to train again.",
                    category=RuntimeWarning,
                )
                self.state = SchedulerState.COMPLETED
                return self.state
            self.target = maximum
        else:
            batch = effective_batch_size(self.session.grid.size, self.config.episodes_per_batch)
            self.target = total + batch

        self.state = SchedulerState.RUNNING
        logger.info("Training started at episode %d (target %d, %s mode)", total, self.target, self.mode.value)
        return self.state

    def pause(self) -> SchedulerState:
        """
        Pause training. Tables, histories and counters are left exactly as they are.

        :return: State after the command.
            :rtype: SchedulerState
        """
        if self.is_running:
            self.state = SchedulerState.PAUSED
            logger.info("Training paused at episode %d", self.session.total_episodes)
        return self.state

    def toggle(self) -> SchedulerState:
        """Start/resume when not running, pause when running."""
        if self.is_running:
            return self.pause()
        return self.start()

    # ---------------------------
    # Execution
    # ---------------------------

    def tick(self) -> SchedulerState:
        """
        Run one time slice worth of episodes.

        :return: State after the tick (RUNNING if more ticks are needed, COMPLETED when done).
            :rtype: SchedulerState
        """
        if not self.is_running:
            return self.state

        started = self.clock()
        episodes = 0
        while self.session.total_episodes < self.target:
            self.session.run_episode()
            episodes += 1
            if self.clock() - started > self.config.time_slice:
                break

        logger.debug(
            "Tick ran %d episodes (total %d, epsilon %.4f)",
            episodes, self.session.total_episodes, self.session.epsilon,
        )

        if self.session.total_episodes >= self.target:
            self.state = SchedulerState.COMPLETED
            logger.info("Training target reached at episode %d", self.session.total_episodes)

        return self.state

    def run_to_completion(self, max_ticks: int | None = None) -> SchedulerState:
        """
        Tick until the target is reached (or `max_ticks` ticks have run).

        Handy for scripts and tests that have no event loop of their own.

        :param max_ticks: Optional upper bound on the number of ticks.
            :type max_ticks: int | None

        :return: Final state.
            :rtype: SchedulerState
        """
        ticks = 0
        while self.is_running and (max_ticks is None or ticks < max_ticks):
            self.tick()
            ticks += 1
        return self.state

    # ---------------------------
    # Commands on the session
    # ---------------------------

    def reset(self) -> None:
        """Clear the session and go back to IDLE."""
        self._require_not_running("reset")
        self.session.reset()
        self.state = SchedulerState.IDLE
        self.target = None

    def resize(self, size: int) -> None:
        """
        Switch grid size (implies reset, clears hazards, applies the auto-tuned tier).

        :param size: New grid side length.
            :type size: int
        """
        self._require_not_running("resize the grid")
        self.session.resize(size)
        self.state = SchedulerState.IDLE
        self.target = None

    def set_hazards(self, hazards: Iterable[int]) -> None:
        """
        Replace the hazard cells.

        :param hazards: Hazard state indices.
            :type hazards: Iterable[int]
        """
        self._require_not_running("change hazards")
        self.session.set_hazards(hazards)

    def set_mode(self, mode: TrainingMode) -> None:
        """
        Switch between one-shot and batch training. A pending target is dropped.

        :param mode: New mode.
            :type mode: TrainingMode
        """
        self._require_not_running("change the training mode")
        self.mode = TrainingMode(mode)
        self.target = None
        if self.state is SchedulerState.COMPLETED:
            self.state = SchedulerState.IDLE

    def configure(self, **changes) -> TrainingConfig:
        """
        Change hyperparameters (allowed at any time, applied from the next update).

        :param changes: TrainingConfig fields to change.
            :type changes: dict

        :return: The new configuration.
            :rtype: TrainingConfig
        """
        return self.session.update_config(**changes)
