"""PNG encoding of rendered heatmaps with timestamped file names."""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from PIL import Image

from visualization.renderer import PixelBuffer

LOGGER = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%d-%m-%Y-%H-%M-%S"


class ImageWriteError(OSError):
    """Raised when a heatmap image cannot be encoded or written."""


def timestamped_filename(now: datetime) -> str:
    """Return e.g. ``09-12-2022-12-53-22.png`` for ``now``."""
    return f"{now.strftime(TIMESTAMP_FORMAT)}.png"


def write_png(pixels: PixelBuffer, output_dir: str | Path, now: datetime | None = None) -> Path:
    """Encode ``pixels`` as a lossless PNG in ``output_dir``.

    The image is written to a temporary file beside the target and renamed
    into place, so a failed write never leaves a partial image behind.
    """
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected (height, width, 4) RGBA pixels, got shape {pixels.shape}")

    directory = Path(output_dir)
    target = directory / timestamped_filename(now or datetime.now())

    try:
        directory.mkdir(parents=True, exist_ok=True)
        image = Image.fromarray(pixels)
        fd, tmp_name = tempfile.mkstemp(prefix=".heatmap-", suffix=".png", dir=directory)
        try:
            with os.fdopen(fd, "wb") as handle:
                image.save(handle, format="PNG")
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise ImageWriteError(f"Failed to write heatmap to '{target}': {exc}") from exc

    LOGGER.info("Wrote %dx%d heatmap to %s", pixels.shape[1], pixels.shape[0], target)
    return target.resolve()
