"""Octave composition and range remapping.

Each octave doubles the frequency and halves the amplitude of the one
before it. The accumulated sum is bounded by the geometric series weight
``W(n) = 2 - 2**(1 - n)``; dividing by it gives the normalized form.

All helpers accept Python floats as well as numpy arrays.
"""

from collections.abc import Callable, Sequence

import numpy as np


def octave_weight(octaves: int) -> float:
    """Total amplitude of ``octaves`` octaves: sum of 2**-i for i < octaves.

    Returns 0.0 for ``octaves <= 0``.
    """
    if octaves <= 0:
        return 0.0
    return 2.0 - 2.0 ** (1 - octaves)


def _all_finite(coords: list):
    finite = np.isfinite(coords[0])
    for c in coords[1:]:
        finite = finite & np.isfinite(c)
    return finite


def accumulate(noise: Callable, coords: Sequence, octaves: int):
    """Sum ``noise(2**i * p) / 2**i`` for i in [0, octaves).

    Once doubling overflows a coordinate (or the amplitude underflows), the
    remaining terms are below the rounding of the sum and are skipped.
    Points that were non-finite to begin with still give NaN.

    Args:
        noise: Single-octave noise taking one argument per coordinate
        coords: Point (or coordinate arrays) of the first octave
        octaves: Number of octaves; ``octaves <= 0`` yields 0

    Returns:
        Unclamped sum, within [-W(octaves), W(octaves)]
    """
    result = 0.0
    amp = 1.0
    coords = list(coords)
    if not coords:
        raise ValueError("accumulate needs at least one coordinate")
    start_finite = _all_finite(coords)

    for _ in range(octaves):
        if amp == 0.0:
            break
        finite = _all_finite(coords)
        if isinstance(finite, np.ndarray):
            term = noise(*coords) * amp
            overflowed = start_finite & ~finite
            if overflowed.any():
                term = np.where(overflowed, 0, term)
            result = result + term
            if not finite.any():
                break
        else:
            if start_finite and not finite:
                break
            result = result + noise(*coords) * amp
        with np.errstate(over="ignore"):
            coords = [c * 2 for c in coords]
        amp *= 0.5

    return result


def normalize(value, octaves: int):
    """Divide an accumulated value by its octave weight.

    ``octaves <= 0`` yields 0 instead of dividing by zero.
    """
    if octaves <= 0:
        return value * 0
    return value / octave_weight(octaves)


def to_unit_interval(value):
    """Map [-1, 1] onto [0, 1] without clamping."""
    return value * 0.5 + 0.5


def clamp_unit(value):
    """Clamp to [0, 1]."""
    if isinstance(value, (np.ndarray, np.generic)):
        return np.clip(value, 0.0, 1.0)
    return min(max(value, 0.0), 1.0)
