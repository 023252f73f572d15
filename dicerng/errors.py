"""Error taxonomy for generator construction and draws."""

from __future__ import annotations


class GeneratorError(Exception):
    """Base class for every error raised by this package."""


class InvalidSeedError(GeneratorError, ValueError):
    """Raised when a seed has an unrecognized type or shape."""


class InvalidStateError(GeneratorError, ValueError):
    """Raised when an explicit or derived state is the forbidden all-zero pair."""


class InvalidArgumentError(GeneratorError, ValueError):
    """Raised when draw arguments such as range bounds are invalid."""


class ArithmeticInvariantError(GeneratorError, ArithmeticError):
    """Raised when a derived value falls outside its documented interval."""
