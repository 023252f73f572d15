"""Deterministic xorshift128+ random number generation."""

from .errors import (
    ArithmeticInvariantError,
    GeneratorError,
    InvalidArgumentError,
    InvalidSeedError,
    InvalidStateError,
)
from .generator import Generator
from .seed import GeneratorState, derive_seed, seed_from_text

__all__ = [
    "ArithmeticInvariantError",
    "Generator",
    "GeneratorError",
    "GeneratorState",
    "InvalidArgumentError",
    "InvalidSeedError",
    "InvalidStateError",
    "derive_seed",
    "seed_from_text",
]
