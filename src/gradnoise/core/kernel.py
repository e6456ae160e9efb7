"""Single-cell Perlin gradient noise.

Classic improved Perlin noise on the unit cube: quintic fade curves,
the 12-edge gradient set selected by the low nibble of a corner hash, and
trilinear interpolation with x innermost.

Two evaluators share the same arithmetic. :func:`noise3d` works on Python
floats (binary64) and is used for single points; :func:`noise3d_array`
works on numpy arrays of float32 or float64 and is bitwise-identical to
:func:`noise3d` when run in float64.
"""

import math

import numpy as np
from numpy.typing import ArrayLike, DTypeLike, NDArray

from ..errors import UnsupportedDtypeError

SUPPORTED_DTYPES = (np.dtype(np.float32), np.dtype(np.float64))


def resolve_dtype(dtype: DTypeLike) -> np.dtype:
    """Return the numpy dtype for a supported floating point type."""
    try:
        resolved = np.dtype(dtype)
    except TypeError as exc:
        raise UnsupportedDtypeError(f"Unknown dtype: {dtype!r}") from exc
    if resolved not in SUPPORTED_DTYPES:
        raise UnsupportedDtypeError(
            f"Unsupported dtype {resolved}; expected float32 or float64"
        )
    return resolved


def fade(t):
    """Quintic fade curve: 6t^5 - 15t^4 + 10t^3"""
    return t * t * t * (t * (t * 6 - 15) + 10)


def lerp(t, a, b):
    """Linear interpolation from a (t=0) to b (t=1)."""
    return a + t * (b - a)


def grad(hash_val: int, x: float, y: float, z: float) -> float:
    """Dot product of (x, y, z) with the gradient picked by ``hash_val``."""
    h = hash_val & 15
    u = x if h < 8 else y
    v = y if h < 4 else (x if h == 12 or h == 14 else z)
    return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)


def _cell(t: float) -> tuple[int, float]:
    """Split a coordinate into its lattice index (mod 256) and fraction."""
    if not math.isfinite(t):
        return 0, math.nan
    lattice = math.floor(t)
    return lattice & 255, t - lattice


def noise3d(p: bytes, x: float, y: float, z: float) -> float:
    """Evaluate noise at one point.

    Args:
        p: 512-byte doubled permutation table
        x: X coordinate
        y: Y coordinate
        z: Z coordinate

    Returns:
        Noise value in [-1, 1]; exactly 0 on integer lattice points.
        Non-finite coordinates give an unspecified (currently NaN) result.
    """
    X, x = _cell(x)
    Y, y = _cell(y)
    Z, z = _cell(z)

    u = fade(x)
    v = fade(y)
    w = fade(z)

    A = p[X] + Y
    AA = p[A] + Z
    AB = p[A + 1] + Z
    B = p[X + 1] + Y
    BA = p[B] + Z
    BB = p[B + 1] + Z

    return lerp(
        w,
        lerp(
            v,
            lerp(u, grad(p[AA], x, y, z), grad(p[BA], x - 1, y, z)),
            lerp(u, grad(p[AB], x, y - 1, z), grad(p[BB], x - 1, y - 1, z)),
        ),
        lerp(
            v,
            lerp(u, grad(p[AA + 1], x, y, z - 1), grad(p[BA + 1], x - 1, y, z - 1)),
            lerp(u, grad(p[AB + 1], x, y - 1, z - 1), grad(p[BB + 1], x - 1, y - 1, z - 1)),
        ),
    )


def _grad_array(
    hash_val: NDArray[np.intp],
    x: NDArray[np.floating],
    y: NDArray[np.floating],
    z: NDArray[np.floating],
) -> NDArray[np.floating]:
    """Vectorized :func:`grad`."""
    h = hash_val & 15
    u = np.where(h < 8, x, y)
    v = np.where(h < 4, y, np.where((h == 12) | (h == 14), x, z))
    return np.where((h & 1) == 0, u, -u) + np.where((h & 2) == 0, v, -v)


def _cell_array(t: NDArray[np.floating]) -> tuple[NDArray[np.intp], NDArray[np.floating]]:
    """Vectorized :func:`_cell`.

    The index is taken as ``floor(t) mod 256`` in floating point, which is
    exact and stays valid past the int64 range.
    """
    finite = np.isfinite(t)
    lattice = np.floor(np.where(finite, t, 0))
    index = np.mod(lattice, 256).astype(np.intp)
    frac = np.where(finite, t - lattice, t.dtype.type(np.nan))
    return index, frac


def noise3d_array(
    perm: NDArray[np.intp],
    x: ArrayLike,
    y: ArrayLike,
    z: ArrayLike,
    dtype: DTypeLike = np.float64,
) -> NDArray[np.floating]:
    """Evaluate noise over broadcast coordinate arrays.

    Args:
        perm: 512-entry doubled permutation table as integers
        x: X coordinates
        y: Y coordinates
        z: Z coordinates
        dtype: float32 or float64; all arithmetic is done in this type

    Returns:
        Array of the broadcast shape of x, y and z with values in [-1, 1]
    """
    dtype = resolve_dtype(dtype)
    x, y, z = np.broadcast_arrays(
        np.asarray(x, dtype=dtype),
        np.asarray(y, dtype=dtype),
        np.asarray(z, dtype=dtype),
    )

    X, x = _cell_array(x)
    Y, y = _cell_array(y)
    Z, z = _cell_array(z)

    u = fade(x)
    v = fade(y)
    w = fade(z)

    A = perm[X] + Y
    AA = perm[A] + Z
    AB = perm[A + 1] + Z
    B = perm[X + 1] + Y
    BA = perm[B] + Z
    BB = perm[B + 1] + Z

    # Corner dot products, xyz bit order
    g000 = _grad_array(perm[AA], x, y, z)
    g100 = _grad_array(perm[BA], x - 1, y, z)
    g010 = _grad_array(perm[AB], x, y - 1, z)
    g110 = _grad_array(perm[BB], x - 1, y - 1, z)
    g001 = _grad_array(perm[AA + 1], x, y, z - 1)
    g101 = _grad_array(perm[BA + 1], x - 1, y, z - 1)
    g011 = _grad_array(perm[AB + 1], x, y - 1, z - 1)
    g111 = _grad_array(perm[BB + 1], x - 1, y - 1, z - 1)

    return lerp(
        w,
        lerp(v, lerp(u, g000, g100), lerp(u, g010, g110)),
        lerp(v, lerp(u, g001, g101), lerp(u, g011, g111)),
    )
