"""
Train Q-learning vs SARSA vs a greedy-only baseline on the hazard Gridworld.

Run from repo root:
    python examples/01_gridworld/train_hazard_grid.py

It saves plots to:
    assets/plots/hazard_grid_rewards.png
    assets/plots/hazard_grid_steps.png
    assets/plots/hazard_grid_policy_q_learning.png
    assets/plots/hazard_grid_policy_sarsa.png

Tip:
    Use --mode batch --episodes-per-batch 500 to train in chunks, like pressing
    "resume" repeatedly. Use --size 10 to see the auto-tuned settings for large grids
    (the grid starts without hazards after a resize; add some with --hazards).

The script plays the role of the "host": it calls scheduler.tick() in a loop and
reads plain numbers from the session after each tick to build the curves.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import numpy as np

from gridworld_rl.common.plotting import ARROWS, save_lines, save_policy_grid
from gridworld_rl.common.seeding import seed_everything
from gridworld_rl.tabular import GridConfig
from gridworld_rl.training import (
    LEARNING_STRATEGIES,
    STRATEGIES,
    SchedulerState,
    TrainingConfig,
    TrainingMode,
    TrainingScheduler,
    TrainingSession,
)

LABELS = {
    "q_learning": "Q-learning",
    "sarsa": "SARSA",
    "naive": "Naive",
}


def format_policy(policy: np.ndarray, grid: GridConfig) -> str:
    """
    Format a greedy policy as a grid of arrows.
    We can get something like this as output:
        S ↓ ← ←
        ↓ H → H
        → → ↓ H
        H → → G

    :param policy: Policy array of shape (n_states,).
        :type policy: np.ndarray
    :param grid: Grid layout.
        :type grid: GridConfig

    :return: Multi-line string of the policy grid.
        :rtype: str
    """
    lines = list()
    for r in range(grid.size):
        row_syms = list()
        for c in range(grid.size):
            s = r * grid.size + c
            if s == grid.start_state:
                row_syms.append("S")
            elif s == grid.goal_state:
                row_syms.append("G")
            elif s in grid.hazards:
                row_syms.append("H")
            else:
                row_syms.append(ARROWS[int(policy[s])])
        lines.append(" ".join(row_syms))
    return "\n".join(lines)


def parse_args() -> argparse.Namespace:
    """
    Parse CLI arguments.

    :return: Parsed args.
        :rtype: argparse.Namespace
    """
    p = argparse.ArgumentParser(description="Train Q-learning vs SARSA vs naive on the hazard Gridworld.")
    p.add_argument("--size", type=int, default=4, help="Grid side length.")
    p.add_argument("--hazards", type=int, nargs="*", default=None, help="Hazard state indices (default: 5 7 11 12 on 4x4, none otherwise).")
    p.add_argument("--mode", choices=[m.value for m in TrainingMode], default=TrainingMode.ONE_SHOT.value, help="One-shot or batch training.")
    p.add_argument("--batches", type=int, default=5, help="Number of batches to run in batch mode.")
    p.add_argument("--episodes-per-batch", type=int, default=None, help="Episodes per batch (default: tier default).")
    p.add_argument("--max-episodes", type=int, default=None, help="One-shot target (default: tier default).")
    p.add_argument("--alpha", type=float, default=None, help="Learning rate (default: tier default).")
    p.add_argument("--gamma", type=float, default=None, help="Discount factor (default: tier default).")
    p.add_argument("--seed", type=int, default=0, help="Master seed.")
    p.add_argument("--smooth", type=int, default=5, help="Smoothing window for plotting.")
    p.add_argument("--out-dir", type=str, default="assets/plots", help="Where to save plots.")
    p.add_argument("--verbose", action="store_true", help="Log every scheduler tick.")
    return p.parse_args()


def main():
    """
    Main loop:
    - build the grid + session (auto-tuned hyperparameters for the grid size)
    - start the scheduler and tick until the target is reached
    - after each tick, record the rolling averages (what a live chart would show)
    - print a summary, the greedy policies and greedy rollouts, save plots
    """
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    seed_everything(args.seed)

    if args.hazards is None:
        grid = GridConfig.default() if args.size == 4 else GridConfig(size=args.size)
    else:
        grid = GridConfig(size=args.size, hazards=frozenset(args.hazards))

    overrides = {
        name: value
        for name, value in (
            ("episodes_per_batch", args.episodes_per_batch),
            ("max_episodes", args.max_episodes),
            ("alpha", args.alpha),
            ("gamma", args.gamma),
        )
        if value is not None
    }
    config = TrainingConfig.for_grid_size(grid.size, **overrides)

    session = TrainingSession(grid=grid, config=config, seed=args.seed)
    scheduler = TrainingScheduler(session, mode=TrainingMode(args.mode))

    print(f"Training on {grid.size}x{grid.size}, hazards={sorted(grid.hazards)}, mode={args.mode}")
    print(f"alpha={config.alpha}, gamma={config.gamma}, decay={config.epsilon_decay}, min_epsilon={config.min_epsilon}")

    episodes_x = list()
    avg_rewards = {name: list() for name in STRATEGIES}
    avg_steps = {name: list() for name in STRATEGIES}

    n_runs = args.batches if scheduler.mode is TrainingMode.BATCH else 1
    for _ in range(n_runs):
        if scheduler.start() is not SchedulerState.RUNNING:
            break
        state = SchedulerState.RUNNING
        while state is SchedulerState.RUNNING:
            state = scheduler.tick()
            episodes_x.append(session.total_episodes)
            for name in STRATEGIES:
                avg_rewards[name].append(session.average_reward(name))
                avg_steps[name].append(session.average_steps(name))
        print(f"Episode {session.total_episodes}: epsilon={session.epsilon:.4f}")

    snapshot = session.snapshot()
    print("\nRolling window summary:")
    for name in STRATEGIES:
        stats = snapshot["strategies"][name]
        conv = stats["converged_episode"]
        conv_txt = f"Ep {conv}" if conv is not None else "--"
        print(
            f"  {LABELS[name]:<11} avg reward {stats['average_reward']:8.1f} | "
            f"win rate {stats['win_rate'] * 100:5.1f}% | wins {stats['wins']:6d} | converged {conv_txt}"
        )

    out_dir = Path(args.out_dir)
    x = np.asarray(episodes_x, dtype=np.int64)
    labels = [LABELS[name] for name in STRATEGIES]

    if len(x) > 0:
        save_lines(
            ys=[np.asarray(avg_rewards[name]) for name in STRATEGIES],
            labels=labels,
            title="Hazard Gridworld: rolling average reward (higher is better)",
            xlabel="Episode",
            ylabel="Average reward (last 200 episodes)",
            out_path=out_dir / "hazard_grid_rewards.png",
            smooth_window=args.smooth,
            x=x,
        )
        save_lines(
            ys=[np.asarray(avg_steps[name]) for name in STRATEGIES],
            labels=labels,
            title="Hazard Gridworld: steps per episode (lower is better)",
            xlabel="Episode",
            ylabel="Average steps (last 200 episodes)",
            out_path=out_dir / "hazard_grid_steps.png",
            smooth_window=args.smooth,
            x=x,
        )

    for name in LEARNING_STRATEGIES:
        policy = session.greedy_policy(name)
        print(f"\nGreedy policy learned by {LABELS[name]}:")
        print(format_policy(policy, grid))

        path = session.greedy_rollout(name)
        outcome = "goal" if path[-1] == grid.goal_state else ("hazard" if path[-1] in grid.hazards else "step cap")
        print(f"Greedy rollout ({len(path) - 1} steps, ends at {outcome}): {' -> '.join(str(s) for s in path)}")

        save_policy_grid(
            policy=policy,
            grid=grid,
            title=f"{LABELS[name]} greedy policy",
            out_path=out_dir / f"hazard_grid_policy_{name}.png",
        )

    print(f"\nSaved plots to {out_dir.resolve()}")


if __name__ == "__main__":
    main()
