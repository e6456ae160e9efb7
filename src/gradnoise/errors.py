"""Exceptions raised by gradnoise."""


class GradNoiseError(Exception):
    """Base class for all gradnoise errors."""


class InvalidStateError(GradNoiseError, ValueError):
    """Serialized engine state could not be restored."""


class InvalidStateSizeError(InvalidStateError):
    """Serialized state does not have the expected length."""

    def __init__(self, size: int, expected: int = 256) -> None:
        super().__init__(f"Serialized state must be {expected} bytes, got {size}")
        self.size = size
        self.expected = expected


class InvalidPermutationError(InvalidStateError):
    """Serialized state is not a permutation of 0..255."""

    def __init__(self, missing: list[int]) -> None:
        preview = ", ".join(str(v) for v in missing[:8])
        if len(missing) > 8:
            preview += ", ..."
        super().__init__(
            f"Serialized state is not a permutation of 0..255 "
            f"({len(missing)} values missing: {preview})"
        )
        self.missing = missing


class InvalidSeedError(GradNoiseError, ValueError):
    """Seed does not fit in an unsigned 32-bit integer."""


class UnsupportedDtypeError(GradNoiseError, TypeError):
    """Requested floating point type is not supported by the engine."""


class ConfigError(GradNoiseError, ValueError):
    """Noise configuration is malformed."""
