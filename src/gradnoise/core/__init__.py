"""Noise engine internals: permutation table and single-cell evaluator."""

from .permutation import DEFAULT_SEED, PermutationTable, mt19937
from . import kernel

__all__ = ["DEFAULT_SEED", "PermutationTable", "mt19937", "kernel"]
