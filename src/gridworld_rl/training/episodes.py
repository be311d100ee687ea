from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Mapping

from ..tabular import GridEnvironment, NaiveAgent, QLearningAgent, SARSAgent

logger = logging.getLogger(__name__)

Q_LEARNING = "q_learning"
SARSA = "sarsa"
NAIVE = "naive"
STRATEGIES = (Q_LEARNING, SARSA, NAIVE)
LEARNING_STRATEGIES = (Q_LEARNING, SARSA)


@dataclass(frozen=True)
class EpisodeOutcome:
    """
    Summary of one finished episode.

    :param total_reward: Sum of rewards collected.
        :type total_reward: float
    :param steps: Number of steps taken.
        :type steps: int
    :param timed_out: True if the step cap ended the episode before a terminal cell.
        :type timed_out: bool
    """
    total_reward: float
    steps: int
    timed_out: bool = False

    @property
    def won(self) -> bool:
        # Only the goal reward can make a return positive
        return self.total_reward > 0


def _log_timeout(name: str, outcome: EpisodeOutcome) -> EpisodeOutcome:
    if outcome.timed_out:
        logger.debug("%s episode hit the step cap after %d steps (return %.1f)", name, outcome.steps, outcome.total_reward)
    return outcome


def run_q_learning_episode(env: GridEnvironment, agent: QLearningAgent, epsilon: float, max_steps: int) -> EpisodeOutcome:
    """
    Run one Q-learning episode with online TD updates.
    Q-learning is off-policy. It behaves with ε-greedy exploration,
    but its target uses the greedy value at next state:

        max_a' Q(S_{t+1}, a')

    So it doesn't need next_action in the runner.

    :param env: Hazard Gridworld.
        :type env: GridEnvironment
    :param agent: Q-learning agent (its table is updated in place).
        :type agent: QLearningAgent
    :param epsilon: Exploration probability for this episode.
        :type epsilon: float
    :param max_steps: Max steps per episode (safety cap).
        :type max_steps: int

    :return: Episode outcome.
        :rtype: EpisodeOutcome
    """
    state = env.start_state
    total_reward = 0.0
    steps = 0
    done = False

    while not done and steps < max_steps:
        action = agent.select_action(state, epsilon)
        tr = env.transition(state, action)
        agent.update(state, action, tr.reward, tr.next_state, tr.done)

        total_reward += tr.reward
        state = tr.next_state
        done = tr.done
        steps += 1

    return _log_timeout(agent.name, EpisodeOutcome(total_reward=total_reward, steps=steps, timed_out=not done))


def run_sarsa_episode(env: GridEnvironment, agent: SARSAgent, epsilon: float, max_steps: int) -> EpisodeOutcome:
    """
    Run one SARSA episode with online TD updates.
    SARSA is on-policy and its update needs the next action A_{t+1}:
        Q(S_t,A_t) <- Q(S_t,A_t) + alpha * [R_{t+1} + gamma * Q(S_{t+1},A_{t+1}) - Q(S_t,A_t)]

    So the loop is:
        select A
        step -> observe S', R
        select A' (from the same ε-greedy behaviour policy)
        update using (S,A,R,S',A')
        carry A' forward as the next A

    :param env: Hazard Gridworld.
        :type env: GridEnvironment
    :param agent: SARSA agent (its table is updated in place).
        :type agent: SARSAgent
    :param epsilon: Exploration probability for this episode.
        :type epsilon: float
    :param max_steps: Max steps per episode (safety cap).
        :type max_steps: int

    :return: Episode outcome.
        :rtype: EpisodeOutcome
    """
    state = env.start_state
    action = agent.select_action(state, epsilon)
    total_reward = 0.0
    steps = 0
    done = False

    while not done and steps < max_steps:
        tr = env.transition(state, action)
        next_action = agent.select_action(tr.next_state, epsilon)
        agent.update(state, action, tr.reward, tr.next_state, next_action, tr.done)

        total_reward += tr.reward
        state, action = tr.next_state, next_action
        done = tr.done
        steps += 1

    return _log_timeout(agent.name, EpisodeOutcome(total_reward=total_reward, steps=steps, timed_out=not done))


def run_naive_episode(env: GridEnvironment, agent: NaiveAgent, epsilon: float, max_steps: int) -> EpisodeOutcome:
    """
    Run one greedy-only episode with no learning.

    `epsilon` is ignored: the baseline never explores on purpose.

    :param env: Hazard Gridworld.
        :type env: GridEnvironment
    :param agent: Naive agent.
        :type agent: NaiveAgent
    :param epsilon: Ignored.
        :type epsilon: float
    :param max_steps: Max steps per episode (safety cap).
        :type max_steps: int

    :return: Episode outcome.
        :rtype: EpisodeOutcome
    """
    state = env.start_state
    total_reward = 0.0
    steps = 0
    done = False

    while not done and steps < max_steps:
        action = agent.select_action(state, 0.0)
        tr = env.transition(state, action)

        total_reward += tr.reward
        state = tr.next_state
        done = tr.done
        steps += 1

    return _log_timeout(agent.name, EpisodeOutcome(total_reward=total_reward, steps=steps, timed_out=not done))


RUNNERS = {
    Q_LEARNING: run_q_learning_episode,
    SARSA: run_sarsa_episode,
    NAIVE: run_naive_episode,
}


class EpisodeRunner:
    """
    Run one episode per strategy on the same environment.

    The three loops run one after the other (Q-learning, SARSA, naive), all from the
    start cell, all with the same ε and the same step cap. They share nothing but the
    read-only environment.

    :param env: Hazard Gridworld.
        :type env: GridEnvironment
    :param agents: Agents keyed by strategy id.
        :type agents: Mapping[str, object]
    """

    def __init__(self, env: GridEnvironment, agents: Mapping[str, object]):
        missing = [s for s in STRATEGIES if s not in agents]
        if missing:
            raise ValueError(f"Missing agents for strategies: {missing}")
        self.env = env
        self.agents = agents

    def run(self, epsilon: float) -> dict[str, EpisodeOutcome]:
        """
        Run one episode for every strategy.

        :param epsilon: Shared exploration rate.
            :type epsilon: float

        :return: Outcome per strategy id.
            :rtype: dict[str, EpisodeOutcome]
        """
        max_steps = self.env.max_steps
        return {
            name: RUNNERS[name](self.env, self.agents[name], epsilon, max_steps)
            for name in STRATEGIES
        }
