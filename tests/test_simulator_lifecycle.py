"""Tests for the simulation driver lifecycle and generation accounting."""

from __future__ import annotations

import numpy as np
import pytest

from core.deterministic_rng import DeterministicRNG
from engine.heat import HeatAccumulator
from engine.rules import next_generation
from engine.simulator import (
    SimulationDriver,
    SimulatorExecutionError,
    SimulatorState,
    SimulatorStateError,
)
from environment.grid import LifeGrid
from visualization.renderer import render


def _driver(depth: int, seed: int = 42, width: int = 12, height: int = 10, **kwargs) -> SimulationDriver:
    return SimulationDriver(width=width, height=height, depth=depth, rng=DeterministicRNG(seed), **kwargs)


def test_lifecycle_states() -> None:
    driver = _driver(depth=2)
    assert driver.state == SimulatorState.UNINITIALIZED

    driver.seed()
    assert driver.state == SimulatorState.SEEDED
    assert driver.generations_recorded == 1

    driver.step()
    assert driver.state == SimulatorState.STEPPING

    driver.step()
    assert driver.state == SimulatorState.DONE
    assert driver.generations_recorded == 3


def test_depth_zero_is_done_after_seeding() -> None:
    driver = _driver(depth=0)
    driver.seed()

    assert driver.state == SimulatorState.DONE
    with pytest.raises(SimulatorStateError, match="Cannot step"):
        driver.step()


def test_step_before_seed_is_rejected() -> None:
    with pytest.raises(SimulatorStateError, match="Cannot step from state 'uninitialized'"):
        _driver(depth=1).step()


def test_seed_twice_is_rejected() -> None:
    driver = _driver(depth=1)
    driver.seed()
    with pytest.raises(SimulatorStateError, match="Cannot seed"):
        driver.seed()


@pytest.mark.parametrize("depth", [0, 1, 5, 17])
def test_run_records_depth_plus_one_generations(depth: int) -> None:
    heat = _driver(depth=depth).run()

    assert heat.generations_recorded == depth + 1
    assert heat.max_count() <= depth + 1


def test_heat_matches_replayed_generations() -> None:
    depth = 4
    driver = _driver(depth=depth, seed=3)
    heat = driver.run()

    grid = LifeGrid.random(12, 10, DeterministicRNG(3).numpy_rng)
    expected = grid.cells.astype(np.uint32)
    for _ in range(depth):
        grid = next_generation(grid)
        expected += grid.cells
    assert np.array_equal(heat.counts, expected)
    assert driver.grid == grid


def test_counters_never_decrease_between_recordings() -> None:
    snapshots: list[np.ndarray] = []

    def capture(index: int, grid: LifeGrid, heat: HeatAccumulator) -> None:
        snapshots.append(heat.snapshot())

    depth = 10
    _driver(depth=depth, on_generation_end=capture).run()

    assert len(snapshots) == depth + 1
    for previous, current in zip(snapshots, snapshots[1:]):
        assert (current >= previous).all()
    assert snapshots[-1].max() <= depth + 1


def test_hook_receives_generation_indices_in_order() -> None:
    indices: list[int] = []
    _driver(depth=3, on_generation_end=lambda index, grid, heat: indices.append(index)).run()
    assert indices == [0, 1, 2, 3]


def test_hook_failure_is_wrapped() -> None:
    def explode(index: int, grid: LifeGrid, heat: HeatAccumulator) -> None:
        raise RuntimeError("boom")

    with pytest.raises(SimulatorExecutionError, match="generation 0: boom"):
        _driver(depth=1, on_generation_end=explode).run()


def test_stop_is_honored_at_generation_boundary() -> None:
    driver: SimulationDriver

    def stop_after_two(index: int, grid: LifeGrid, heat: HeatAccumulator) -> None:
        if index == 1:
            driver.stop()

    driver = _driver(depth=50, on_generation_end=stop_after_two)
    heat = driver.run()

    assert driver.state == SimulatorState.DONE
    assert heat.generations_recorded == 2
    assert heat.max_count() <= 2


def test_end_to_end_depth_zero_matches_seeded_grid() -> None:
    seed = 42
    driver = SimulationDriver(width=5, height=5, depth=0, rng=DeterministicRNG(seed))
    heat = driver.run()
    initial = LifeGrid.random(5, 5, DeterministicRNG(seed).numpy_rng)

    assert heat.generations_recorded == 1
    for strength in (1, 3):
        pixels = render(heat, strength=strength)
        assert np.array_equal(pixels[..., 0], initial.cells.astype(np.uint8) * strength)
        assert set(np.unique(pixels[..., 0])) <= {0, strength}


def test_runs_are_deterministic_for_seed() -> None:
    first = _driver(depth=20, seed=11, width=30, height=20).run()
    second = _driver(depth=20, seed=11, width=30, height=20).run()

    assert np.array_equal(first.counts, second.counts)
    assert np.array_equal(render(first), render(second))


def test_negative_depth_is_rejected() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        _driver(depth=-1)


def test_failed_seed_hook_does_not_reseed_on_retry() -> None:
    calls: list[int] = []

    def fail_once(index: int, grid: LifeGrid, heat: HeatAccumulator) -> None:
        calls.append(index)
        if len(calls) == 1:
            raise RuntimeError("hook down")

    driver = SimulationDriver(width=5, height=5, depth=0, rng=DeterministicRNG(42), on_generation_end=fail_once)
    with pytest.raises(SimulatorExecutionError):
        driver.seed()

    assert driver.state == SimulatorState.DONE
    assert driver.generations_recorded == 1

    heat = driver.run()

    assert heat.generations_recorded == 1
    assert heat.max_count() <= 1
    assert calls == [0]


def test_failed_step_hook_keeps_state_in_sync_with_heat() -> None:
    calls: list[int] = []

    def fail_at_two(index: int, grid: LifeGrid, heat: HeatAccumulator) -> None:
        calls.append(index)
        if index == 2 and calls.count(2) == 1:
            raise RuntimeError("hook down")

    depth = 5
    driver = _driver(depth=depth, on_generation_end=fail_at_two)
    with pytest.raises(SimulatorExecutionError, match="generation 2"):
        driver.run()

    assert driver.state == SimulatorState.STEPPING
    assert driver.generations_recorded == 3

    heat = driver.run()

    assert heat.generations_recorded == depth + 1
    assert heat.max_count() <= depth + 1
    assert calls == [0, 1, 2, 3, 4, 5]
    expected = LifeGrid.random(12, 10, DeterministicRNG(42).numpy_rng)
    counts = expected.cells.astype(np.uint32)
    for _ in range(depth):
        expected = next_generation(expected)
        counts += expected.cells
    assert np.array_equal(heat.counts, counts)


def test_stop_before_run_records_only_generation_zero() -> None:
    driver = _driver(depth=10)
    driver.stop()
    heat = driver.run()

    assert driver.state == SimulatorState.DONE
    assert heat.generations_recorded == 1
