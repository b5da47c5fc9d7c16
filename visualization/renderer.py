"""Grayscale heatmap rendering from accumulated visit counts."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from engine.heat import HeatAccumulator

MAX_LUMINANCE = 255
OPAQUE = 255

# (height, width, 4) uint8 RGBA.
PixelBuffer = NDArray[np.uint8]


def luminance(heat: HeatAccumulator, strength: int = 1) -> NDArray[np.uint8]:
    """Map counters to ``min(255, count * strength)``.

    ``strength`` amplifies faint counts for inspection; production renders use 1.
    """
    if strength < 1:
        raise ValueError("strength must be >= 1")
    # Any strength above 255 saturates every nonzero count anyway.
    factor = np.uint64(min(strength, MAX_LUMINANCE))
    scaled = heat.counts.astype(np.uint64) * factor
    return np.minimum(scaled, MAX_LUMINANCE).astype(np.uint8)


def render(heat: HeatAccumulator, strength: int = 1) -> PixelBuffer:
    """Render the heat buffer as a grayscale image in RGBA pixel format."""
    value = luminance(heat, strength)
    pixels = np.empty((heat.height, heat.width, 4), dtype=np.uint8)
    pixels[..., 0] = value
    pixels[..., 1] = value
    pixels[..., 2] = value
    pixels[..., 3] = OPAQUE
    return pixels
