"""Boolean life grid owned by the simulation driver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
from numpy.typing import NDArray

ALIVE_PROBABILITY = 0.5


@dataclass(frozen=True, eq=False)
class LifeGrid:
    """Immutable snapshot of one generation.

    ``cells`` is a ``(height, width)`` boolean array indexed as ``cells[y, x]``.
    The array is marked read-only on construction, so a grid handed to the
    rule engine can never be changed while it is being read.
    """

    cells: NDArray[np.bool_]

    def __post_init__(self) -> None:
        cells = np.array(self.cells, dtype=bool, copy=True)
        if cells.ndim != 2:
            raise ValueError(f"Grid must be 2-D, got shape {cells.shape}")
        cells.setflags(write=False)
        object.__setattr__(self, "cells", cells)

    @classmethod
    def empty(cls, width: int, height: int) -> LifeGrid:
        return cls(np.zeros((height, width), dtype=bool))

    @classmethod
    def random(cls, width: int, height: int, rng: np.random.Generator) -> LifeGrid:
        """Seed generation 0: each cell is alive with probability one half."""
        draws = rng.random((height, width))
        return cls(draws >= ALIVE_PROBABILITY)

    @classmethod
    def from_rows(cls, rows: Sequence[Iterable[int | bool]]) -> LifeGrid:
        """Build a grid from row-major truthy values, e.g. ``[[0, 1, 0], ...]``."""
        materialized = [list(row) for row in rows]
        widths = {len(row) for row in materialized}
        if len(widths) > 1:
            raise ValueError("Every row must have the same number of cells")
        return cls(np.array(materialized, dtype=bool))

    @property
    def width(self) -> int:
        return int(self.cells.shape[1])

    @property
    def height(self) -> int:
        return int(self.cells.shape[0])

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width

    def is_alive(self, x: int, y: int) -> bool:
        return bool(self.cells[y, x])

    def alive_count(self) -> int:
        return int(np.count_nonzero(self.cells))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LifeGrid):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self.cells, other.cells))
