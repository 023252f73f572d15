"""Seed parsing, state derivation, and hashing utilities."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import numbers
import re
from typing import Any

import numpy as np

from dicerng.entropy import ByteSource, system_bytes
from dicerng.errors import InvalidSeedError, InvalidStateError

MASK64 = (1 << 64) - 1
SEED_XOR = 0x6A09E667F3BCC909
SEED_BYTES = 16

_INT_RE = re.compile(r"^(?:0[xX][0-9a-fA-F]+|[0-9]+)$")

_EXAMPLE_SEEDS = ["12345", "0xDEADBEEF", "MistyForge"]


@dataclass(frozen=True)
class GeneratorState:
    """Two unsigned 64-bit state words."""

    state0: int
    state1: int

    def is_zero(self) -> bool:
        return self.state0 == 0 and self.state1 == 0

    def as_tuple(self) -> tuple[int, int]:
        return (self.state0, self.state1)


def resolve_seed(seed: Any = None, entropy: ByteSource | None = None) -> GeneratorState:
    """Turn a seed of any accepted shape into a valid initial state.

    `None` draws 16 bytes from `entropy` (the system source by default), a single
    integer is expanded into both words, and a pair is taken as the explicit state.
    Derived all-zero states are corrected; an explicit all-zero pair is rejected.
    """

    if seed is None:
        return _state_from_bytes((entropy or system_bytes)(SEED_BYTES))
    if _is_integer(seed):
        return _state_from_int(int(seed))
    if isinstance(seed, (list, tuple, np.ndarray)):
        return _state_from_pair(seed)
    raise InvalidSeedError(
        f"Invalid seed type {type(seed).__name__}. Use None, an unsigned 64-bit integer, or a pair of integers."
    )


def parse_seed_text(seed_text: str) -> int:
    """Parse a command-line seed: decimal or hex integers verbatim, other text hashed."""

    if seed_text is None:
        raise InvalidSeedError(_error_message("Seed is required."))

    raw = seed_text.strip()
    if not raw:
        raise InvalidSeedError(_error_message("Seed cannot be empty."))
    if raw[0] in "+-":
        raise InvalidSeedError(_error_message(f"Seed {raw} must be an unsigned integer or plain text."))

    if _INT_RE.fullmatch(raw):
        value = int(raw, 0) if raw[:2].lower() == "0x" else int(raw, 10)
        if value > MASK64:
            raise InvalidSeedError(_error_message(f"Seed {raw} does not fit in 64 bits."))
        return value
    return seed_from_text(raw)


def seed_from_text(text: str) -> int:
    """Hash readable seed text to a deterministic unsigned 64-bit integer."""

    canonical = text.strip().lower()
    if not canonical:
        raise InvalidSeedError(_error_message("Seed text cannot be empty."))
    try:
        payload = canonical.encode("ascii", errors="strict")
    except UnicodeEncodeError as exc:
        raise InvalidSeedError(_error_message("Seed text must be ASCII.")) from exc

    digest = hashlib.blake2b(payload, digest_size=8, person=b"dicerng0").digest()
    return int.from_bytes(digest, byteorder="big", signed=False)


def derive_seed(parent_seed: int, key: str, *, namespace: str = "dicerng-v1") -> int:
    """Derive a deterministic child seed from a parent seed and label."""

    if not key:
        raise InvalidSeedError("derive key must be non-empty")
    payload = f"{namespace}:{int(parent_seed) & MASK64}:{key}".encode("utf-8")
    digest = hashlib.blake2b(payload, digest_size=8, person=b"rngfork00").digest()
    return int.from_bytes(digest, byteorder="big", signed=False)


def _is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, (bool, np.bool_))


def _state_from_bytes(buf: bytes) -> GeneratorState:
    if len(buf) != SEED_BYTES:
        raise InvalidSeedError(f"Entropy source returned {len(buf)} bytes, expected {SEED_BYTES}.")
    state0 = int.from_bytes(buf[:8], byteorder="little", signed=False)
    state1 = int.from_bytes(buf[8:], byteorder="little", signed=False)
    if state0 == 0 and state1 == 0:
        state1 = 1
    return GeneratorState(state0, state1)


def _state_from_int(seed: int) -> GeneratorState:
    if seed < 0 or seed > MASK64:
        raise InvalidSeedError(f"Seed {seed} is outside the unsigned 64-bit range.")
    state0 = seed
    state1 = seed ^ SEED_XOR
    if state0 == 0 and state1 == 0:
        state1 = 1
    return GeneratorState(state0, state1)


def _state_from_pair(seed: Any) -> GeneratorState:
    if isinstance(seed, np.ndarray):
        if seed.ndim != 1:
            raise InvalidStateError(f"Seed array must be one-dimensional, got shape {seed.shape}.")
        words = seed.tolist()
    else:
        words = list(seed)
    if len(words) != 2:
        raise InvalidStateError(f"Seed array must have exactly 2 elements, got {len(words)}.")
    for word in words:
        if not _is_integer(word):
            raise InvalidSeedError(f"State words must be integers, got {type(word).__name__}.")

    state0 = int(words[0]) & MASK64
    state1 = int(words[1]) & MASK64
    if state0 == 0 and state1 == 0:
        raise InvalidStateError("State cannot be all zero.")
    return GeneratorState(state0, state1)


def _error_message(reason: str) -> str:
    examples = ", ".join(_EXAMPLE_SEEDS)
    return f"{reason} Examples: {examples}"
