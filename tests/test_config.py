import pytest

from gridworld_rl.training import TrainingConfig, effective_batch_size


def test_defaults_match_small_grid_tier() -> None:
    cfg = TrainingConfig()
    assert cfg == TrainingConfig.for_grid_size(4)
    assert (cfg.alpha, cfg.gamma, cfg.epsilon_decay, cfg.min_epsilon) == (0.1, 0.95, 0.001, 0.01)
    assert cfg.max_episodes == 10_000
    assert cfg.episodes_per_batch == 200
    assert cfg.history_capacity == 200
    assert cfg.time_slice == 0.02


@pytest.mark.parametrize(
    "size, expected",
    [
        (4, (0.1, 0.95, 0.001, 0.01, 10_000)),
        (6, (0.1, 0.95, 0.001, 0.01, 10_000)),
        (7, (0.1, 0.98, 0.0005, 0.02, 10_000)),
        (9, (0.1, 0.98, 0.0005, 0.02, 20_000)),
        (10, (0.15, 0.995, 0.0001, 0.05, 20_000)),
        (15, (0.15, 0.995, 0.0001, 0.05, 20_000)),
    ],
)
def test_auto_tuned_tiers(size: int, expected: tuple) -> None:
    """
    Larger grids get a longer horizon, slower decay and a higher exploration floor.
    """
    cfg = TrainingConfig.for_grid_size(size)
    assert (cfg.alpha, cfg.gamma, cfg.epsilon_decay, cfg.min_epsilon, cfg.max_episodes) == expected


def test_large_grids_get_a_batch_floor() -> None:
    assert TrainingConfig.for_grid_size(10).episodes_per_batch == 500
    assert TrainingConfig.for_grid_size(10, episodes_per_batch=800).episodes_per_batch == 800
    assert TrainingConfig.for_grid_size(5, episodes_per_batch=50).episodes_per_batch == 50
    assert effective_batch_size(12, 100) == 500
    assert effective_batch_size(9, 100) == 100


def test_overrides_win_over_tier() -> None:
    cfg = TrainingConfig.for_grid_size(10, alpha=0.3, max_episodes=50)
    assert cfg.alpha == 0.3
    assert cfg.max_episodes == 50
    assert cfg.gamma == 0.995


@pytest.mark.parametrize(
    "changes",
    [
        {"alpha": 0.0},
        {"alpha": 1.5},
        {"gamma": 0.0},
        {"gamma": -0.1},
        {"min_epsilon": 1.2},
        {"epsilon_decay": -0.001},
        {"episodes_per_batch": 0},
        {"max_episodes": -5},
        {"max_episodes": 10.5},
        {"history_capacity": 0},
        {"time_slice": 0},
        {"alpha": "fast"},
    ],
)
def test_invalid_values_are_rejected(changes: dict) -> None:
    """
    replace() validates; the original config is untouched when it fails.
    """
    cfg = TrainingConfig()
    with pytest.raises(ValueError):
        cfg.replace(**changes)
    assert cfg == TrainingConfig()


def test_replace_returns_validated_copy() -> None:
    cfg = TrainingConfig()
    new = cfg.replace(alpha=1.0, gamma=1.0)
    assert (new.alpha, new.gamma) == (1.0, 1.0)
    assert cfg.alpha == 0.1
