"""Perlin noise engine."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import ArrayLike, DTypeLike, NDArray

from .core.kernel import noise3d_array, noise3d, resolve_dtype
from .core.permutation import DEFAULT_SEED, PermutationTable, UniformBitGenerator
from .octaves import accumulate, clamp_unit, normalize, to_unit_interval

logger = logging.getLogger(__name__)


class PerlinNoise:
    """Deterministic 3D Perlin gradient noise with 1D/2D projections.

    The engine's only state is its :class:`PermutationTable`. Two engines
    with equal tables and dtype return identical values for identical
    inputs. Queries only read the table, so an engine can be shared between
    threads; ``reseed`` and ``deserialize`` replace the table in a single
    assignment and need external synchronization if readers must not
    observe the switch mid-computation.

    Scalar methods evaluate one point. In float64 they return ``float``; in
    float32 they return ``numpy.float32`` computed entirely in float32.

    Octave methods sum ``noise(2**i * p) / 2**i`` over ``octaves`` terms:
    the accumulated form is that raw sum, the normalized form divides it by
    ``2 - 2**(1 - octaves)``. ``octaves <= 0`` yields 0.

    Attributes:
        dtype: Floating point type of all results (float32 or float64)
    """

    def __init__(self, seed: int = DEFAULT_SEED, dtype: DTypeLike = np.float64) -> None:
        """Create an engine seeded with ``seed``.

        Args:
            seed: Unsigned 32-bit seed for the MT19937-driven shuffle
            dtype: float32 or float64

        Raises:
            InvalidSeedError: If seed is outside [0, 2**32)
            UnsupportedDtypeError: If dtype is neither float32 nor float64
        """
        self._dtype = resolve_dtype(dtype)
        self._table = PermutationTable.from_seed(seed)

    @classmethod
    def from_bit_generator(
        cls,
        rng: UniformBitGenerator | np.random.Generator,
        dtype: DTypeLike = np.float64,
    ) -> PerlinNoise:
        """Create an engine shuffled with draws from ``rng``."""
        engine = cls.__new__(cls)
        engine._dtype = resolve_dtype(dtype)
        engine._table = PermutationTable.from_bit_generator(rng)
        return engine

    @classmethod
    def from_bytes(
        cls,
        data: bytes | bytearray,
        dtype: DTypeLike = np.float64,
        validate: bool = True,
    ) -> PerlinNoise:
        """Create an engine from serialized state (see :meth:`serialize`)."""
        engine = cls.__new__(cls)
        engine._dtype = resolve_dtype(dtype)
        engine._table = PermutationTable.from_bytes(data, validate=validate)
        return engine

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def permutation(self) -> PermutationTable:
        """Current permutation table (immutable)."""
        return self._table

    # --- State -----------------------------------------------------------

    def reseed(self, seed: int) -> None:
        """Rebuild the permutation table from ``seed``."""
        self._table = PermutationTable.from_seed(seed)
        logger.debug("Reseeded engine with seed %d", seed)

    def reseed_bit_generator(self, rng: UniformBitGenerator | np.random.Generator) -> None:
        """Rebuild the permutation table from draws of ``rng``."""
        self._table = PermutationTable.from_bit_generator(rng)
        logger.debug("Reseeded engine from %s", type(rng).__name__)

    def serialize(self) -> bytes:
        """Return the 256-byte state: the first half of the permutation table."""
        return self._table.to_bytes()

    def deserialize(self, data: bytes | bytearray, validate: bool = True) -> None:
        """Restore state produced by :meth:`serialize`.

        Args:
            data: 256 bytes
            validate: Reject data that is not a permutation of 0..255. With
                validation off, corrupt data degrades output quality but is
                still accepted.

        Raises:
            InvalidStateSizeError: If data is not 256 bytes long
            InvalidPermutationError: If validating and data is not a permutation
        """
        self._table = PermutationTable.from_bytes(data, validate=validate)
        logger.debug("Restored engine state (validate=%s)", validate)

    def copy(self) -> PerlinNoise:
        engine = self.__class__.__new__(self.__class__)
        engine._dtype = self._dtype
        engine._table = self._table
        return engine

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> PerlinNoise:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PerlinNoise):
            return NotImplemented
        return self._dtype == other._dtype and self._table == other._table

    __hash__ = None

    def __repr__(self) -> str:
        return f"PerlinNoise(dtype={self._dtype.name}, state={self.serialize()[:4].hex()}...)"

    # --- Single octave ---------------------------------------------------

    def noise3d(self, x: float, y: float, z: float) -> float:
        """Noise at (x, y, z), in [-1, 1]."""
        if self._dtype == np.float64:
            return noise3d(self._table.table, float(x), float(y), float(z))
        return self._dtype.type(noise3d_array(self._table.indices, x, y, z, self._dtype))

    def noise2d(self, x: float, y: float) -> float:
        """Noise at (x, y, 0)."""
        return self.noise3d(x, y, 0.0)

    def noise1d(self, x: float) -> float:
        """Noise at (x, 0, 0)."""
        return self.noise3d(x, 0.0, 0.0)

    def noise3d_0_1(self, x: float, y: float, z: float) -> float:
        """:meth:`noise3d` remapped to [0, 1] (not clamped)."""
        return to_unit_interval(self.noise3d(x, y, z))

    def noise2d_0_1(self, x: float, y: float) -> float:
        return to_unit_interval(self.noise2d(x, y))

    def noise1d_0_1(self, x: float) -> float:
        return to_unit_interval(self.noise1d(x))

    # --- Octaves ---------------------------------------------------------

    def _coords(self, *coords: float) -> list:
        if self._dtype == np.float64:
            return [float(c) for c in coords]
        return [self._dtype.type(c) for c in coords]

    def _zero(self):
        return 0.0 if self._dtype == np.float64 else self._dtype.type(0)

    def _accumulate(self, noise, coords: list, octaves: int):
        if octaves <= 0:
            return self._zero()
        return accumulate(noise, coords, octaves)

    def accumulated_octave_noise1d(self, x: float, octaves: int) -> float:
        return self._accumulate(self.noise1d, self._coords(x), octaves)

    def accumulated_octave_noise2d(self, x: float, y: float, octaves: int) -> float:
        return self._accumulate(self.noise2d, self._coords(x, y), octaves)

    def accumulated_octave_noise3d(self, x: float, y: float, z: float, octaves: int) -> float:
        """Sum of ``octaves`` octaves, unclamped."""
        return self._accumulate(self.noise3d, self._coords(x, y, z), octaves)

    def normalized_octave_noise1d(self, x: float, octaves: int) -> float:
        return normalize(self.accumulated_octave_noise1d(x, octaves), octaves)

    def normalized_octave_noise2d(self, x: float, y: float, octaves: int) -> float:
        return normalize(self.accumulated_octave_noise2d(x, y, octaves), octaves)

    def normalized_octave_noise3d(self, x: float, y: float, z: float, octaves: int) -> float:
        """Accumulated octaves divided by their total amplitude, in [-1, 1]."""
        return normalize(self.accumulated_octave_noise3d(x, y, z, octaves), octaves)

    def accumulated_octave_noise1d_0_1(self, x: float, octaves: int) -> float:
        return clamp_unit(to_unit_interval(self.accumulated_octave_noise1d(x, octaves)))

    def accumulated_octave_noise2d_0_1(self, x: float, y: float, octaves: int) -> float:
        return clamp_unit(to_unit_interval(self.accumulated_octave_noise2d(x, y, octaves)))

    def accumulated_octave_noise3d_0_1(self, x: float, y: float, z: float, octaves: int) -> float:
        """Accumulated octaves remapped to [0, 1] and clamped."""
        return clamp_unit(to_unit_interval(self.accumulated_octave_noise3d(x, y, z, octaves)))

    def normalized_octave_noise1d_0_1(self, x: float, octaves: int) -> float:
        return to_unit_interval(self.normalized_octave_noise1d(x, octaves))

    def normalized_octave_noise2d_0_1(self, x: float, y: float, octaves: int) -> float:
        return to_unit_interval(self.normalized_octave_noise2d(x, y, octaves))

    def normalized_octave_noise3d_0_1(self, x: float, y: float, z: float, octaves: int) -> float:
        """Normalized octaves remapped to [0, 1]."""
        return to_unit_interval(self.normalized_octave_noise3d(x, y, z, octaves))

    # --- Arrays ----------------------------------------------------------

    def noise_array(
        self,
        x: ArrayLike,
        y: ArrayLike = 0.0,
        z: ArrayLike = 0.0,
    ) -> NDArray[np.floating]:
        """Vectorized :meth:`noise3d` over broadcast coordinate arrays.

        Leaving ``y`` and ``z`` at 0 gives the 1D and 2D projections.
        """
        return noise3d_array(self._table.indices, x, y, z, self._dtype)

    def octave_noise_array(
        self,
        x: ArrayLike,
        y: ArrayLike = 0.0,
        z: ArrayLike = 0.0,
        octaves: int = 1,
        normalized: bool = False,
        zero_to_one: bool = False,
    ) -> NDArray[np.floating]:
        """Vectorized octave noise.

        Args:
            x: X coordinates
            y: Y coordinates
            z: Z coordinates
            octaves: Number of octaves
            normalized: Divide by the octave weight
            zero_to_one: Remap to [0, 1]; accumulated values are also clamped

        Returns:
            Array of the broadcast shape of x, y and z
        """
        coords = np.broadcast_arrays(
            np.asarray(x, dtype=self._dtype),
            np.asarray(y, dtype=self._dtype),
            np.asarray(z, dtype=self._dtype),
        )
        if octaves <= 0:
            result = np.zeros(coords[0].shape, dtype=self._dtype)
        else:
            result = accumulate(self.noise_array, coords, octaves)

        if normalized:
            result = normalize(result, octaves)
        if zero_to_one:
            result = to_unit_interval(result)
            if not normalized:
                result = clamp_unit(result)
        return result
