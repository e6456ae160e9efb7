"""Grid evaluation of noise fields.

Evaluates an engine over a pixel grid the way image generators consume
noise: pixel ``(px, py)`` of a ``width x height`` grid maps to the noise
coordinate ``(px / (width / frequency), py / (height / frequency))``, so
``frequency`` cells span the grid along each axis.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from .engine import PerlinNoise

if TYPE_CHECKING:
    from .config import NoiseConfig


def grid_coordinates(
    width: int,
    height: int,
    frequency: float = 8.0,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Noise-space coordinates of every pixel in a grid.

    Args:
        width: Grid width in pixels
        height: Grid height in pixels
        frequency: Number of noise cells across each axis
        offset_x: X offset added in noise space
        offset_y: Y offset added in noise space

    Returns:
        (x, y) arrays of shape (height, width)

    Raises:
        ValueError: If width, height or frequency is not positive
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Grid size must be positive, got {width}x{height}")
    if not math.isfinite(frequency) or frequency <= 0:
        raise ValueError(f"frequency must be positive and finite, got {frequency}")
    if not (math.isfinite(offset_x) and math.isfinite(offset_y)):
        raise ValueError(f"Offsets must be finite, got ({offset_x}, {offset_y})")

    fx = width / frequency
    fy = height / frequency
    x = np.arange(width, dtype=np.float64) / fx + offset_x
    y = np.arange(height, dtype=np.float64) / fy + offset_y
    xv, yv = np.meshgrid(x, y)
    return xv, yv


def sample_grid(
    engine: PerlinNoise,
    width: int,
    height: int,
    frequency: float = 8.0,
    octaves: int = 8,
    z: float = 0.0,
    normalized: bool = False,
    zero_to_one: bool = True,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
) -> NDArray[np.floating]:
    """Evaluate octave noise over a pixel grid.

    Defaults reproduce the classic grayscale demo image: accumulated octave
    noise remapped (and clamped) to [0, 1].

    Returns:
        Array of shape (height, width) in the engine's dtype
    """
    xv, yv = grid_coordinates(width, height, frequency, offset_x, offset_y)
    return engine.octave_noise_array(
        xv, yv, z,
        octaves=octaves,
        normalized=normalized,
        zero_to_one=zero_to_one,
    )


def sample_config(config: NoiseConfig, engine: PerlinNoise | None = None) -> NDArray[np.floating]:
    """Sample the grid described by a :class:`NoiseConfig`.

    Args:
        config: Grid, octave and seed settings
        engine: Engine to evaluate; built from the config's seed when omitted
    """
    if engine is None:
        engine = config.create_engine()
    return sample_grid(
        engine,
        config.width,
        config.height,
        frequency=config.frequency,
        octaves=config.octaves,
        z=config.z,
        normalized=config.normalized,
        zero_to_one=config.zero_to_one,
        offset_x=config.offset_x,
        offset_y=config.offset_y,
    )
