"""
Random sampling helpers.

Every random operation in this library takes a ``numpy.random.Generator``
as an argument; nothing reads global random state.
"""

from typing import Optional

import numpy as np


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a generator, reproducible when ``seed`` is given."""
    return np.random.default_rng(seed)


def uniform_index(rng: np.random.Generator, n: int) -> int:
    """Draw an index in ``0..n`` with equal probability."""
    if n <= 0:
        raise ValueError(f"Cannot sample an index from an empty range (n={n})")
    return int(rng.integers(0, n))


def shuffled(rng: np.random.Generator, values) -> np.ndarray:
    """Return a uniformly random permutation of ``values``."""
    return rng.permutation(np.asarray(values))


def coin_flips(rng: np.random.Generator, n: int, p: float = 0.5) -> np.ndarray:
    """Draw ``n`` independent booleans, each True with probability ``p``."""
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"Probability must be in [0, 1], got {p}")
    return rng.random(n) < p
