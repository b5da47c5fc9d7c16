"""Per-cell visit counters accumulated across generations."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from environment.grid import LifeGrid

# Counters never clamp; depth is capped at 255 so 32 bits leave ample headroom.
COUNTER_DTYPE = np.uint32


class HeatAccumulator:
    """Owns the heat buffer and increments it once per recorded generation."""

    def __init__(self, width: int, height: int) -> None:
        self._counts: NDArray[np.uint32] = np.zeros((height, width), dtype=COUNTER_DTYPE)
        self.generations_recorded = 0

    @property
    def width(self) -> int:
        return int(self._counts.shape[1])

    @property
    def height(self) -> int:
        return int(self._counts.shape[0])

    @property
    def counts(self) -> NDArray[np.uint32]:
        """Read-only view of the counters, indexed ``[y, x]``."""
        view = self._counts.view()
        view.setflags(write=False)
        return view

    def record(self, grid: LifeGrid) -> None:
        """Add one observation of ``grid``: +1 for every living cell."""
        if grid.shape != self._counts.shape:
            raise ValueError(
                f"Grid shape {grid.shape} does not match heat buffer shape {self._counts.shape}"
            )
        self._counts += grid.cells
        self.generations_recorded += 1

    def max_count(self) -> int:
        return int(self._counts.max(initial=0))

    def snapshot(self) -> NDArray[np.uint32]:
        return self._counts.copy()


def record(heat: HeatAccumulator, grid: LifeGrid) -> HeatAccumulator:
    """Functional form of ``HeatAccumulator.record``; returns the same buffer."""
    heat.record(grid)
    return heat
