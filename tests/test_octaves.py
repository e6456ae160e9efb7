"""Tests for octave composition helpers."""

import math

import numpy as np
import pytest

from gradnoise.octaves import accumulate, clamp_unit, normalize, octave_weight, to_unit_interval


@pytest.mark.parametrize("octaves,expected", [(1, 1.0), (2, 1.5), (3, 1.75), (4, 1.875)])
def test_octave_weight_values(octaves, expected):
    assert octave_weight(octaves) == expected


@pytest.mark.parametrize("octaves", range(1, 40))
def test_octave_weight_matches_series(octaves):
    series = math.fsum(2.0**-i for i in range(octaves))
    assert octave_weight(octaves) == pytest.approx(series, rel=1e-15)
    assert octave_weight(octaves) == 2 - 2 ** (1 - octaves)


@pytest.mark.parametrize("octaves", [0, -1, -50])
def test_octave_weight_empty(octaves):
    assert octave_weight(octaves) == 0.0


def test_octave_weight_many_octaves():
    assert octave_weight(2000) == 2.0


def test_accumulate_constant_noise_gives_weight():
    for octaves in range(1, 10):
        assert accumulate(lambda x: 1.0, [0.3], octaves) == octave_weight(octaves)


def test_accumulate_doubles_coordinates():
    calls = []

    def noise(x, y):
        calls.append((x, y))
        return 0.0

    accumulate(noise, (0.75, -1.5), 4)
    assert calls == [(0.75, -1.5), (1.5, -3.0), (3.0, -6.0), (6.0, -12.0)]


def test_accumulate_linear_noise():
    # noise(2**i * x) / 2**i == x for every octave
    assert accumulate(lambda x: x, [0.25], 5) == 5 * 0.25


@pytest.mark.parametrize("octaves", [0, -3])
def test_accumulate_no_octaves(octaves):
    assert accumulate(lambda x: 1.0, [0.5], octaves) == 0.0


def test_accumulate_arrays():
    x = np.array([0.5, 1.0, 2.0])
    result = accumulate(lambda a: a * 0 + 1.0, [x], 3)
    assert result.tolist() == [1.75, 1.75, 1.75]


def test_normalize():
    assert normalize(1.5, 2) == 1.0
    assert normalize(-1.75, 3) == -1.0
    assert normalize(0.5, 0) == 0
    assert normalize(0.5, -2) == 0
    assert normalize(np.array([1.5, -0.75]), 2).tolist() == [1.0, -0.5]


def test_to_unit_interval():
    assert to_unit_interval(-1.0) == 0.0
    assert to_unit_interval(0.0) == 0.5
    assert to_unit_interval(1.0) == 1.0
    # Not clamped
    assert to_unit_interval(1.5) == 1.25


def test_clamp_unit():
    assert clamp_unit(-0.2) == 0.0
    assert clamp_unit(0.3) == 0.3
    assert clamp_unit(1.7) == 1.0
    assert clamp_unit(np.array([-1.0, 0.5, 2.0])).tolist() == [0.0, 0.5, 1.0]
    clamped = clamp_unit(np.float32(1.5))
    assert clamped == 1.0
    assert isinstance(clamped, np.float32)


def test_accumulate_stops_when_coordinates_overflow():
    calls = []

    def noise(x):
        calls.append(x)
        return 0.5

    result = accumulate(noise, [1e308], 10)
    assert math.isfinite(result)
    assert calls == [1e308]
    assert result == 0.5


def test_accumulate_array_overflow_only_drops_overflowed_terms():
    x = np.array([1e308, 0.25, np.nan])
    result = accumulate(lambda a: np.where(np.isfinite(a), 0.5, np.nan), [x], 3)
    assert result[0] == 0.5
    assert result[1] == 0.875
    assert np.isnan(result[2])
