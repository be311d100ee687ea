from __future__ import annotations
import random
import numpy as np


def seed_everything(seed: int) -> np.random.Generator:
    """
    Seed common RNGs for reproducibility and return a fresh NumPy Generator.

    Seeds:
    - Python's random
    - NumPy's legacy global state (np.random.*)

    Notes:
    - The engine itself never touches global RNG state: every agent owns a Generator
      spawned from the session seed. Seeding the globals only matters for script code
      (and third-party code) that still uses them.

    :param seed: Master seed.
        :type seed: int

    :return: Generator seeded with `seed`, for script-level randomness.
        :rtype: np.random.Generator
    """
    seed = int(seed)
    random.seed(seed)
    np.random.seed(seed)
    return np.random.default_rng(seed)
