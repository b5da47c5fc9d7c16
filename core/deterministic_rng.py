"""Deterministic RNG container for reproducible heatmap runs."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class DeterministicRNG:
    """Owns a seeded numpy generator without touching global random state."""

    seed: int

    def __post_init__(self) -> None:
        self.numpy_rng = np.random.default_rng(self.seed)

    def reset(self) -> None:
        """Rewind to the first draw of ``seed``."""
        self.numpy_rng = np.random.default_rng(self.seed)
