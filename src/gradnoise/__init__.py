"""gradnoise - deterministic Perlin gradient noise.

Classic 3D Perlin noise with 1D/2D projections, multi-octave composition
and a portable 256-byte serialized state.
"""

from .config import ConfigLoader, NoiseConfig
from .core.permutation import DEFAULT_SEED, PermutationTable
from .engine import PerlinNoise
from .errors import (
    ConfigError,
    GradNoiseError,
    InvalidPermutationError,
    InvalidSeedError,
    InvalidStateError,
    InvalidStateSizeError,
    UnsupportedDtypeError,
)
from .octaves import octave_weight
from .sampling import grid_coordinates, sample_config, sample_grid

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_SEED",
    "PerlinNoise",
    "PermutationTable",
    "NoiseConfig",
    "ConfigLoader",
    "octave_weight",
    "grid_coordinates",
    "sample_grid",
    "sample_config",
    "GradNoiseError",
    "InvalidStateError",
    "InvalidStateSizeError",
    "InvalidPermutationError",
    "InvalidSeedError",
    "UnsupportedDtypeError",
    "ConfigError",
]
