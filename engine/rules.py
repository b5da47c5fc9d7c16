"""Conway's Game of Life transition rule with edge-clamped neighborhoods."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from environment.grid import LifeGrid

# (dy, dx) offsets of the eight Moore neighbors.
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if not (dy == 0 and dx == 0)
)


def count_neighbors(grid: LifeGrid) -> NDArray[np.uint8]:
    """Return the number of living neighbors of every cell.

    Positions outside the grid are treated as dead, so border cells see fewer
    than eight candidates and nothing wraps to the opposite edge.
    """
    height, width = grid.shape
    padded = np.pad(grid.cells.astype(np.uint8), 1, mode="constant", constant_values=0)
    counts = np.zeros((height, width), dtype=np.uint8)
    for dy, dx in NEIGHBOR_OFFSETS:
        counts += padded[1 + dy : 1 + dy + height, 1 + dx : 1 + dx + width]
    return counts


def next_generation(grid: LifeGrid) -> LifeGrid:
    """Compute the next generation from ``grid`` without modifying it.

    Rules:
      1) a live cell with 2 or 3 living neighbors survives,
      2) a dead cell with exactly 3 living neighbors is born,
      3) every other cell is dead in the next state.
    """
    neighbors = count_neighbors(grid)
    alive = grid.cells
    survive = alive & ((neighbors == 2) | (neighbors == 3))
    birth = ~alive & (neighbors == 3)
    return LifeGrid(survive | birth)
