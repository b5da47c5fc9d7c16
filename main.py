"""Composition root wiring config, simulation, rendering and image output."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from configs.loader import HeatmapConfig
from core.deterministic_rng import DeterministicRNG
from engine.simulator import GenerationHook, SimulationDriver
from visualization.image_writer import write_png
from visualization.renderer import render

LOGGER = logging.getLogger(__name__)


def build_driver(config: HeatmapConfig, on_generation_end: GenerationHook | None = None) -> SimulationDriver:
    """Build a simulation driver from run configuration."""
    return SimulationDriver(
        width=config.width,
        height=config.height,
        depth=config.depth,
        rng=DeterministicRNG(config.seed),
        on_generation_end=on_generation_end,
    )


def run_heatmap(config: HeatmapConfig, now: datetime | None = None) -> Path:
    """Simulate, render and write the heatmap; return the image path."""
    driver = build_driver(config)
    heat = driver.run()
    LOGGER.info("Heatmap generated, writing to file")
    pixels = render(heat, strength=config.strength)
    return write_png(pixels, config.output_dir, now=now)


if __name__ == "__main__":
    from cli.main import run_cli

    raise SystemExit(run_cli())
