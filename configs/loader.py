"""Run configuration and validation utilities for heatmap runs."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

MIN_DIMENSION = 5
MAX_DEPTH = 255
# Pixel counts of 4K UHD (3840x2160) and 8K UHD (7680x4320).
PIXEL_WARN_THRESHOLD = 8_294_400
PIXEL_HARD_LIMIT = 33_177_600


class ConfigValidationError(ValueError):
    """Raised when run configuration fails validation."""


@dataclass(frozen=True)
class HeatmapConfig:
    """Validated heatmap run configuration container."""

    width: int = 400
    height: int = 300
    depth: int = 0
    seed: int = 42
    strength: int = 1
    output_dir: str = "Images"

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def needs_confirmation(self) -> bool:
        """True when the run is at least 4K-sized and should be confirmed."""
        return self.pixel_count >= PIXEL_WARN_THRESHOLD

    def replace(self, **changes: Any) -> HeatmapConfig:
        """Return a validated copy with ``changes`` applied."""
        return _validate_and_build({**self.to_dict(), **changes})

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


_FIELD_TYPES: dict[str, type[Any]] = {
    "width": int,
    "height": int,
    "depth": int,
    "seed": int,
    "strength": int,
    "output_dir": str,
}


class ConfigLoader:
    """Build validated heatmap configuration from command-line values."""

    @staticmethod
    def from_args(values: Sequence[int], base: HeatmapConfig | None = None) -> HeatmapConfig:
        """Apply positional integers the way the command line accepts them.

        One value sets ``depth``; two set ``width height``; three set
        ``width height depth``. No values keep ``base`` unchanged.
        """
        config = base or HeatmapConfig()
        if len(values) == 0:
            return config
        if len(values) == 1:
            return config.replace(depth=values[0])
        if len(values) == 2:
            return config.replace(width=values[0], height=values[1])
        if len(values) == 3:
            return config.replace(width=values[0], height=values[1], depth=values[2])
        raise ConfigValidationError(f"Expected at most 3 positional values, got {len(values)}.")


def validate_dimensions(width: int, height: int, depth: int) -> None:
    """Check size and depth limits shared by every config source."""
    if width < MIN_DIMENSION or height < MIN_DIMENSION:
        raise ConfigValidationError(
            f"Both dimensions must be at least {MIN_DIMENSION} pixels, got {width}x{height}."
        )
    if not 0 <= depth <= MAX_DEPTH:
        raise ConfigValidationError(
            f"{depth} was input as the depth. Depth is limited to 0-{MAX_DEPTH}."
        )
    if width * height > PIXEL_HARD_LIMIT:
        raise ConfigValidationError(
            "Dimensions are limited to a max amount of pixels equal to 8K resolutions "
            f"({PIXEL_HARD_LIMIT}), got {width * height}."
        )


def _validate_and_build(payload: Mapping[str, Any]) -> HeatmapConfig:
    """Validate raw mapping and build ``HeatmapConfig``."""
    unknown = sorted(key for key in payload if key not in _FIELD_TYPES)
    if unknown:
        raise ConfigValidationError(f"Unknown config key(s): {', '.join(unknown)}")

    for key, expected_type in _FIELD_TYPES.items():
        if key not in payload:
            continue
        value = payload[key]
        # bool is an int subclass; reject it explicitly.
        if type(value) is not expected_type:
            raise ConfigValidationError(
                f"Field '{key}' expected {expected_type.__name__}, got {type(value).__name__}."
            )

    config = HeatmapConfig(**dict(payload))
    validate_dimensions(config.width, config.height, config.depth)
    if config.strength < 1:
        raise ConfigValidationError("strength must be >= 1")
    if not config.output_dir:
        raise ConfigValidationError("output_dir must be non-empty")
    return config
