"""Noise configuration and YAML loading."""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .core.kernel import resolve_dtype
from .core.permutation import DEFAULT_SEED, check_seed
from .engine import PerlinNoise
from .errors import ConfigError, InvalidSeedError, UnsupportedDtypeError

logger = logging.getLogger(__name__)

FREQUENCY_RANGE = (0.1, 64.0)
OCTAVES_RANGE = (1, 16)


@dataclass
class NoiseConfig:
    """Settings for sampling a noise grid.

    Frequency and octaves are clamped to the ranges the grid sampler is
    tuned for (0.1-64 cells, 1-16 octaves).

    Attributes:
        seed: Unsigned 32-bit permutation seed
        frequency: Noise cells across each grid axis
        octaves: Number of octaves
        width: Grid width in pixels
        height: Grid height in pixels
        z: Z coordinate of the sampled slice
        offset_x: X offset in noise space
        offset_y: Y offset in noise space
        normalized: Use normalized instead of accumulated octaves
        zero_to_one: Remap values to [0, 1]
        dtype: "float32" or "float64"
    """

    seed: int = DEFAULT_SEED
    frequency: float = 8.0
    octaves: int = 8
    width: int = 512
    height: int = 512
    z: float = 0.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    normalized: bool = False
    zero_to_one: bool = True
    dtype: str = "float64"

    def __post_init__(self) -> None:
        try:
            self.seed = check_seed(self.seed)
        except InvalidSeedError as exc:
            raise ConfigError(str(exc)) from exc

        try:
            self.dtype = resolve_dtype(self.dtype).name
        except UnsupportedDtypeError as exc:
            raise ConfigError(str(exc)) from exc

        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

        if isinstance(self.octaves, bool) or not isinstance(self.octaves, int):
            raise ConfigError(f"octaves must be an integer, got {self.octaves!r}")

        for name in ("frequency", "z", "offset_x", "offset_y"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigError(f"{name} must be finite, got {value!r}")
            setattr(self, name, float(value))

        self.frequency = self._clamp("frequency", self.frequency, *FREQUENCY_RANGE)
        self.octaves = self._clamp("octaves", self.octaves, *OCTAVES_RANGE)

    @staticmethod
    def _clamp(name: str, value, low, high):
        clamped = min(max(value, low), high)
        if clamped != value:
            logger.warning("%s=%s out of range [%s, %s], using %s", name, value, low, high, clamped)
        return clamped

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NoiseConfig:
        """Build a config from parsed YAML data.

        Raises:
            ConfigError: On unknown keys or invalid values
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def create_engine(self) -> PerlinNoise:
        """Build the engine this config describes."""
        return PerlinNoise(self.seed, dtype=self.dtype)


class ConfigLoader:
    """Loads noise configs from YAML files.

    YAML format:
    ```yaml
    seed: 1234
    frequency: 8.0
    octaves: 8
    width: 512
    height: 512
    normalized: false
    zero_to_one: true
    ```
    """

    def __init__(self, search_paths: list[Path] | None = None) -> None:
        """Initialize loader with search paths.

        Args:
            search_paths: Directories to search for config YAML files.
                         Defaults to the current working directory.
        """
        if search_paths is None:
            self.search_paths = [Path.cwd()]
        else:
            self.search_paths = [Path(p) for p in search_paths]

        self._cache: dict[str, NoiseConfig] = {}

    def load(self, name: str) -> NoiseConfig:
        """Load a config by name.

        Searches for {name}.yaml in search paths.

        Args:
            name: Config name (without .yaml extension)

        Returns:
            NoiseConfig instance

        Raises:
            FileNotFoundError: If config YAML not found
            ConfigError: If YAML content is invalid
        """
        if name in self._cache:
            return self._cache[name]

        yaml_path = self._find_yaml(name)
        if yaml_path is None:
            raise FileNotFoundError(
                f"Noise config '{name}' not found in search paths: {self.search_paths}"
            )

        config = self.load_file(yaml_path)
        self._cache[name] = config
        return config

    def load_file(self, path: Path | str) -> NoiseConfig:
        """Load a config from an explicit YAML path."""
        path = Path(path)
        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

        # Empty file means all defaults
        if data is None:
            data = {}
        config = NoiseConfig.from_dict(data)
        logger.debug("Loaded noise config from %s", path)
        return config

    def _find_yaml(self, name: str) -> Path | None:
        """Find YAML file for config name."""
        for search_path in self.search_paths:
            yaml_path = search_path / f"{name}.yaml"
            if yaml_path.exists():
                return yaml_path
        return None

    def clear_cache(self) -> None:
        """Clear the config cache."""
        self._cache.clear()
