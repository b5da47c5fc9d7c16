"""Simulation driver lifecycle orchestrator."""

from __future__ import annotations

import enum
import logging
import threading
from typing import Callable

from core.deterministic_rng import DeterministicRNG
from engine.heat import HeatAccumulator
from engine.rules import next_generation
from environment.grid import LifeGrid

LOGGER = logging.getLogger(__name__)

GenerationHook = Callable[[int, LifeGrid, HeatAccumulator], None]


class SimulatorState(str, enum.Enum):
    """Lifecycle states of one heatmap run."""

    UNINITIALIZED = "uninitialized"
    SEEDED = "seeded"
    STEPPING = "stepping"
    DONE = "done"


class SimulatorStateError(RuntimeError):
    """Raised when a lifecycle transition is requested from the wrong state."""


class SimulatorExecutionError(RuntimeError):
    """Raised when a generation hook fails."""


class SimulationDriver:
    """Owns the current grid and heat buffer for one run.

    Generation 0 is seeded from ``rng`` and recorded; every ``step`` replaces
    the grid with the rule engine output and records it. The run is done once
    ``depth + 1`` generations have been recorded.
    """

    def __init__(
        self,
        width: int,
        height: int,
        depth: int,
        rng: DeterministicRNG,
        on_generation_end: GenerationHook | None = None,
    ) -> None:
        if depth < 0:
            raise ValueError("depth must be non-negative")
        self.width = width
        self.height = height
        self.depth = depth
        self.rng = rng
        self.on_generation_end = on_generation_end

        self.grid: LifeGrid | None = None
        self.heat = HeatAccumulator(width, height)

        self._state = SimulatorState.UNINITIALIZED
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()

    @property
    def state(self) -> SimulatorState:
        with self._state_lock:
            return self._state

    @property
    def generations_recorded(self) -> int:
        return self.heat.generations_recorded

    @property
    def target_generations(self) -> int:
        return self.depth + 1

    def seed(self) -> LifeGrid:
        """Create and record generation 0."""
        with self._state_lock:
            if self._state != SimulatorState.UNINITIALIZED:
                raise SimulatorStateError(f"Cannot seed from state '{self._state.value}'")

        grid = LifeGrid.random(self.width, self.height, self.rng.numpy_rng)
        LOGGER.info("Initialized grid %dx%d (%d alive)", self.width, self.height, grid.alive_count())
        self._record(grid)
        return grid

    def step(self) -> LifeGrid:
        """Apply the rule engine once and record the resulting generation."""
        with self._state_lock:
            state = self._state
        if state not in {SimulatorState.SEEDED, SimulatorState.STEPPING}:
            raise SimulatorStateError(f"Cannot step from state '{state.value}'")
        if self.grid is None:
            raise SimulatorStateError("Cannot step without a seeded grid")

        grid = next_generation(self.grid)
        self._record(grid)
        return grid

    def run(self) -> HeatAccumulator:
        """Run every remaining generation and return the accumulated heat.

        A ``stop`` requested before ``run`` still applies: only generation 0
        is recorded.
        """
        if self.state == SimulatorState.UNINITIALIZED:
            self.seed()

        while self.state != SimulatorState.DONE:
            if self._stop_event.is_set():
                LOGGER.info(
                    "Run stopped after %d of %d generations",
                    self.generations_recorded,
                    self.target_generations,
                )
                with self._state_lock:
                    self._state = SimulatorState.DONE
                break
            self.step()
        else:
            LOGGER.info("Max depth reached after %d generations", self.generations_recorded)
        return self.heat

    def stop(self) -> None:
        """Request cancellation; honored between fully recorded generations."""
        self._stop_event.set()

    def _record(self, grid: LifeGrid) -> None:
        self.grid = grid
        self.heat.record(grid)
        generation_index = self.heat.generations_recorded - 1
        LOGGER.debug("Recorded generation %d (%d alive)", generation_index, grid.alive_count())
        # State must match the buffer before any hook can fail.
        self._advance_state()

        if self.on_generation_end is None:
            return
        try:
            self.on_generation_end(generation_index, grid, self.heat)
        except Exception as exc:
            raise SimulatorExecutionError(
                f"on_generation_end failed at generation {generation_index}: {exc}"
            ) from exc

    def _advance_state(self) -> None:
        with self._state_lock:
            if self.heat.generations_recorded >= self.target_generations:
                self._state = SimulatorState.DONE
            elif self._state == SimulatorState.UNINITIALIZED:
                self._state = SimulatorState.SEEDED
            else:
                self._state = SimulatorState.STEPPING
