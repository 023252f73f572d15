"""Sources of seed bytes for generators constructed without a seed."""

from __future__ import annotations

import secrets
from typing import Callable

ByteSource = Callable[[int], bytes]


def system_bytes(count: int) -> bytes:
    """Return `count` bytes from the operating system's secure generator."""

    return secrets.token_bytes(count)


def fixed_bytes(payload: bytes) -> ByteSource:
    """Return a byte source that replays `payload` from the start on every call."""

    data = bytes(payload)

    def _source(count: int) -> bytes:
        return data[:count]

    return _source
