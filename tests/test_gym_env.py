import pytest

from gridworld_rl.tabular import GridConfig, HazardGridEnv, DOWN, RIGHT, UP


def test_spaces_match_grid() -> None:
    env = HazardGridEnv(GridConfig(size=5))
    assert env.observation_space.n == 25
    assert env.action_space.n == 4


def test_step_before_reset_raises() -> None:
    env = HazardGridEnv()
    with pytest.raises(RuntimeError):
        env.step(RIGHT)


def test_reaching_goal_terminates() -> None:
    env = HazardGridEnv(GridConfig(size=2))
    s, info = env.reset(seed=0)
    assert s == 0
    assert info == {}

    s, r, terminated, truncated, info = env.step(RIGHT)
    assert (s, r, terminated, truncated) == (1, -1.0, False, False)

    s, r, terminated, truncated, info = env.step(DOWN)
    assert (s, r, terminated, truncated) == (3, 1000.0, True, False)
    assert info["steps"] == 2


def test_hazard_terminates_with_penalty() -> None:
    env = HazardGridEnv()
    env.reset()
    env.step(RIGHT)
    s, r, terminated, truncated, _ = env.step(DOWN)
    assert (s, r, terminated, truncated) == (5, -100.0, True, False)


def test_truncates_at_step_cap() -> None:
    """
    Bumping into the top wall forever: truncated (not terminated) after size^2 * 2 + 100 steps.
    """
    env = HazardGridEnv()
    env.reset()
    for _ in range(env.max_steps - 1):
        *_, terminated, truncated, _ = env.step(UP)
        assert not terminated and not truncated

    _, _, terminated, truncated, info = env.step(UP)
    assert not terminated
    assert truncated
    assert info["steps"] == 132


def test_reset_restarts_the_episode() -> None:
    env = HazardGridEnv()
    env.reset()
    env.step(DOWN)
    s, _ = env.reset()
    assert s == 0
    *_, info = env.step(UP)
    assert info["steps"] == 1
