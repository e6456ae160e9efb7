"""Permutation table and seeded shuffling.

The table is the only state of a Perlin noise engine: a permutation of
0..255 stored twice in a row so that corner hashes up to 511 can be looked
up without wrapping.

Seeding is pinned to MT19937 with the reference ``init_genrand`` seeding, so
``PermutationTable.from_seed(s)`` matches a C++ ``std::mt19937(s)`` driven
through the same shuffle. The shuffle walks from the highest index down and
swaps index ``i`` with a uniform index in ``[0, i]``; uniform indices come
from rejection sampling on 32-bit draws (see :func:`bounded`).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, MutableSequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from ..errors import InvalidPermutationError, InvalidSeedError, InvalidStateSizeError

logger = logging.getLogger(__name__)

# Canonical MT19937 default seed (std::mt19937::default_seed)
DEFAULT_SEED = 5489

TABLE_SIZE = 256
STATE_SIZE = TABLE_SIZE

_UINT32_RANGE = 1 << 32
_UINT32_MASK = _UINT32_RANGE - 1


@runtime_checkable
class UniformBitGenerator(Protocol):
    """Anything producing raw uniform integers, like ``numpy.random.BitGenerator``."""

    def random_raw(self, size: None = None, output: bool = True) -> int:
        ...


def mt19937(seed: int) -> np.random.MT19937:
    """Create an MT19937 bit generator in the reference ``init_genrand`` state.

    ``numpy.random.MT19937(seed)`` hashes its seed through a SeedSequence,
    which does not match other MT19937 implementations. The legacy
    ``RandomState`` seeding does, so its state is transplanted into a fresh
    bit generator.

    Args:
        seed: Unsigned 32-bit seed

    Returns:
        MT19937 bit generator whose first ``random_raw()`` is the first
        32-bit output of the reference generator

    Raises:
        InvalidSeedError: If seed is outside [0, 2**32)
    """
    seed = check_seed(seed)
    legacy = np.random.RandomState(seed).get_state(legacy=False)
    bit_generator = np.random.MT19937()
    bit_generator.state = {
        "bit_generator": "MT19937",
        "state": legacy["state"],
    }
    return bit_generator


def check_seed(seed: int) -> int:
    """Validate an unsigned 32-bit seed and return it as an int."""
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise InvalidSeedError(f"Seed must be an integer, got {type(seed).__name__}")
    seed = int(seed)
    if not 0 <= seed < _UINT32_RANGE:
        raise InvalidSeedError(f"Seed must be between 0 and 2**32 - 1, got {seed}")
    return seed


def uint32_source(rng: UniformBitGenerator | np.random.Generator) -> Callable[[], int]:
    """Wrap a bit generator as a callable returning 32-bit draws.

    Generators producing 64-bit raw values contribute their low 32 bits.
    """
    if isinstance(rng, np.random.Generator):
        rng = rng.bit_generator
    if not isinstance(rng, UniformBitGenerator):
        raise TypeError(
            f"Expected a numpy BitGenerator or Generator, got {type(rng).__name__}"
        )

    def next_uint32() -> int:
        return int(rng.random_raw()) & _UINT32_MASK

    return next_uint32


def bounded(next_uint32: Callable[[], int], bound: int) -> int:
    """Draw a uniform integer in [0, bound) by rejection sampling.

    Draws falling into the incomplete top bucket are discarded, so the
    number of draws consumed is at least one and usually exactly one.
    """
    if bound <= 0:
        raise ValueError(f"bound must be positive, got {bound}")
    limit = _UINT32_RANGE - (_UINT32_RANGE % bound)
    while True:
        r = next_uint32()
        if r < limit:
            return r % bound


def shuffle(values: MutableSequence[int], next_uint32: Callable[[], int]) -> None:
    """Fisher-Yates shuffle in place, from the last index down to 1."""
    for i in range(len(values) - 1, 0, -1):
        j = bounded(next_uint32, i + 1)
        values[i], values[j] = values[j], values[i]


def _missing_values(data: bytes) -> list[int]:
    seen = set(data)
    return [v for v in range(TABLE_SIZE) if v not in seen]


@dataclass(frozen=True)
class PermutationTable:
    """Doubled permutation of 0..255.

    Attributes:
        table: 512 bytes; ``table[i + 256] == table[i]`` for i in [0, 256)
        indices: Read-only ``intp`` copy of ``table`` for array lookups
    """

    table: bytes
    indices: NDArray[np.intp] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.table) != 2 * TABLE_SIZE:
            raise InvalidStateSizeError(len(self.table), 2 * TABLE_SIZE)
        if self.table[:TABLE_SIZE] != self.table[TABLE_SIZE:]:
            raise ValueError("Permutation table halves differ")
        indices = np.frombuffer(self.table, dtype=np.uint8).astype(np.intp)
        indices.flags.writeable = False
        object.__setattr__(self, "indices", indices)

    def __reduce__(self):
        # Rebuild through __post_init__ so indices stay read-only
        return (self.__class__, (self.table,))

    @classmethod
    def from_sequence(cls, values: Iterable[int]) -> PermutationTable:
        """Build the doubled table from its first 256 entries."""
        half = bytes(values)
        return cls(half + half)

    @classmethod
    def identity(cls) -> PermutationTable:
        return cls.from_sequence(range(TABLE_SIZE))

    @classmethod
    def from_seed(cls, seed: int = DEFAULT_SEED) -> PermutationTable:
        """Shuffle 0..255 with MT19937 seeded by ``seed``."""
        table = cls.from_bit_generator(mt19937(seed))
        logger.debug("Built permutation table from seed %d", seed)
        return table

    @classmethod
    def from_bit_generator(
        cls, rng: UniformBitGenerator | np.random.Generator
    ) -> PermutationTable:
        """Shuffle 0..255 with draws from an external bit generator.

        The generator is advanced by exactly the draws the shuffle consumes.
        """
        values = list(range(TABLE_SIZE))
        shuffle(values, uint32_source(rng))
        return cls.from_sequence(values)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray, validate: bool = True) -> PermutationTable:
        """Restore a table from its 256-byte serialized form.

        Args:
            data: Serialized state, the first half of the table
            validate: Reject data that is not a permutation of 0..255

        Raises:
            InvalidStateSizeError: If data is not 256 bytes long
            InvalidPermutationError: If validating and a value is missing
        """
        if len(data) != STATE_SIZE:
            raise InvalidStateSizeError(len(data), STATE_SIZE)
        if validate:
            missing = _missing_values(bytes(data))
            if missing:
                raise InvalidPermutationError(missing)
        return cls.from_sequence(data)

    def to_bytes(self) -> bytes:
        """Serialized form: the first 256 entries, one byte each."""
        return self.table[:STATE_SIZE]

    def is_permutation(self) -> bool:
        return not _missing_values(self.table[:TABLE_SIZE])

    def __getitem__(self, index: int) -> int:
        return self.table[index]

    def __len__(self) -> int:
        return len(self.table)
