"""Tests for PNG encoding of rendered heatmaps."""

from __future__ import annotations

from datetime import datetime

import numpy as np
import pytest
from PIL import Image

from visualization.image_writer import ImageWriteError, timestamped_filename, write_png


def _pixels(width: int = 6, height: int = 5) -> np.ndarray:
    value = (np.arange(width * height, dtype=np.uint8) * 7).reshape(height, width)
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., :3] = value[..., None]
    pixels[..., 3] = 255
    return pixels


def test_timestamped_filename() -> None:
    assert timestamped_filename(datetime(2022, 12, 9, 12, 53, 22)) == "09-12-2022-12-53-22.png"


def test_write_png_round_trips_pixels(tmp_path) -> None:
    pixels = _pixels()
    now = datetime(2024, 1, 2, 3, 4, 5)

    path = write_png(pixels, tmp_path / "Images", now=now)

    assert path == (tmp_path / "Images" / "02-01-2024-03-04-05.png").resolve()
    with Image.open(path) as image:
        assert image.format == "PNG"
        assert image.size == (6, 5)
        assert np.array_equal(np.asarray(image.convert("RGBA")), pixels)
    assert sorted(p.name for p in path.parent.iterdir()) == [path.name]


def test_write_png_reports_unwritable_directory(tmp_path) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(ImageWriteError, match="Failed to write heatmap"):
        write_png(_pixels(), blocker / "Images")


def test_write_png_rejects_wrong_shape(tmp_path) -> None:
    with pytest.raises(ValueError, match="RGBA"):
        write_png(np.zeros((5, 5), dtype=np.uint8), tmp_path)
