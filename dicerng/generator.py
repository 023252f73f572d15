"""xorshift128+ generator with derived integer and floating-point draws."""

from __future__ import annotations

import math
import sys
from typing import Any

import numpy as np

from dicerng.entropy import ByteSource
from dicerng.errors import ArithmeticInvariantError, InvalidArgumentError, InvalidStateError
from dicerng.seed import MASK64, GeneratorState, resolve_seed

MASK32 = 0xFFFFFFFF
MASK21 = 0x1FFFFF
TWO_POW_32 = 4294967296
TWO_POW_53 = 9007199254740992


class Generator:
    """Deterministic, non-cryptographic 128-bit state generator.

    Instances are not synchronized. Use one generator per thread, or guard
    shared access externally.
    """

    def __init__(self, seed: Any = None, *, entropy: ByteSource | None = None) -> None:
        self._state0 = 0
        self._state1 = 0
        self.reseed(seed, entropy=entropy)

    def reseed(self, seed: Any = None, *, entropy: ByteSource | None = None) -> None:
        """Replace the state using the same rules as construction."""

        state = resolve_seed(seed, entropy)
        if state.is_zero():
            raise InvalidStateError("Invalid state: both state words are zero.")
        self._state0 = state.state0
        self._state1 = state.state1

    def next(self) -> int:
        """Advance the state one step and return the raw unsigned 64-bit output."""

        s1 = self._state0
        s0 = self._state1

        self._state0 = s0
        s1 ^= (s1 << 23) & MASK64
        s1 ^= s1 >> 17
        s1 ^= s0
        s1 ^= s0 >> 26
        self._state1 = s1

        return (self._state0 + self._state1) & MASK64

    def next_uint32(self) -> int:
        return self.next() & MASK32

    def next_double(self) -> float:
        """Return a uniform float in [0, 1) carrying 53 random bits."""

        value = self.next()
        high_bits = (value & MASK21) * TWO_POW_32
        low_bits = (value >> 32) & MASK32
        result = (high_bits + low_bits) / TWO_POW_53

        if not 0.0 <= result < 1.0:
            raise ArithmeticInvariantError(f"Random value out of range: {result}")
        return result

    def next_range(self, low: int, high: int) -> int:
        """Return a uniform integer in the inclusive range [low, high].

        Scales one `next_double` draw by the span, so every call consumes exactly
        one transition.
        """

        if not _is_int(low) or not _is_int(high):
            raise InvalidArgumentError("Min and max must be integers.")
        if low >= high:
            raise InvalidArgumentError(f"Max must be greater than min (got min={low}, max={high}).")

        span = int(high) - int(low) + 1
        if span > sys.float_info.max:
            raise InvalidArgumentError(f"Range span {span} is too large to scale a double draw.")
        value = self.next_double()
        if value < 0.0 or value >= 1.0:
            raise ArithmeticInvariantError(f"Random value out of range: {value}")

        return int(low) + math.floor(value * span)

    def current_state(self) -> tuple[int, int]:
        return (self._state0, self._state1)

    @property
    def state(self) -> GeneratorState:
        return GeneratorState(self._state0, self._state1)

    def __repr__(self) -> str:
        return f"Generator(state0={self._state0:#018x}, state1={self._state1:#018x})"


def _is_int(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)
