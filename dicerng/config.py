"""Configuration models for sampling runs."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from dicerng.errors import InvalidArgumentError

KINDS = ("u64", "u32", "double", "range")
DEFAULT_KIND = "double"
DEFAULT_COUNT = 10
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


@dataclass(frozen=True)
class RangeConfig:
    """Inclusive bounds used when drawing ranged integers."""

    low: int = 1
    high: int = 6


@dataclass(frozen=True)
class PreviewConfig:
    """Noise preview raster size; zero width or height disables the preview."""

    width: int = 0
    height: int = 0

    @property
    def enabled(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class SampleConfig:
    """Primary sampling configuration."""

    kind: str = DEFAULT_KIND
    count: int = DEFAULT_COUNT
    range: RangeConfig = field(default_factory=RangeConfig)
    preview: PreviewConfig = field(default_factory=PreviewConfig)

    def validate(self) -> None:
        if self.kind not in KINDS:
            raise InvalidArgumentError(f"Unknown kind {self.kind!r}; expected one of {', '.join(KINDS)}.")
        if self.count < 0:
            raise InvalidArgumentError("count must be non-negative")
        if self.kind == "range" and self.range.low >= self.range.high:
            raise InvalidArgumentError(
                f"Max must be greater than min (got min={self.range.low}, max={self.range.high})."
            )
        if self.kind == "range" and (self.range.low < INT64_MIN or self.range.high > INT64_MAX):
            raise InvalidArgumentError("Range bounds must fit in a signed 64-bit integer.")
        if self.preview.width < 0 or self.preview.height < 0:
            raise InvalidArgumentError("preview width and height must be non-negative")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
