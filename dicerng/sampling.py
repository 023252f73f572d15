"""Bulk draws into numpy arrays and summary statistics over them."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from dicerng.errors import InvalidArgumentError
from dicerng.generator import Generator

HISTOGRAM_MAX_SPAN = 1 << 20


@dataclass(frozen=True)
class SampleSummary:
    """Basic moments of a batch of draws."""

    count: int
    minimum: float
    maximum: float
    mean: float
    std: float


@dataclass(frozen=True)
class RangeHistogram:
    """Per-value counts of ranged draws over an inclusive interval."""

    low: int
    high: int
    counts: np.ndarray
    values_covered: int
    out_of_range: int
    chi_square: float

    @property
    def span(self) -> int:
        return self.high - self.low + 1

    @property
    def full_coverage(self) -> bool:
        return self.values_covered == self.span and self.out_of_range == 0


def draw_u64(gen: Generator, count: int) -> np.ndarray:
    """Draw `count` raw outputs in call order."""

    _check_count(count)
    return np.fromiter((gen.next() for _ in range(count)), dtype=np.uint64, count=count)


def draw_u32(gen: Generator, count: int) -> np.ndarray:
    _check_count(count)
    return np.fromiter((gen.next_uint32() for _ in range(count)), dtype=np.uint32, count=count)


def draw_doubles(gen: Generator, count: int) -> np.ndarray:
    _check_count(count)
    return np.fromiter((gen.next_double() for _ in range(count)), dtype=np.float64, count=count)


def draw_range(gen: Generator, low: int, high: int, count: int) -> np.ndarray:
    """Draw `count` inclusive-range integers; bounds must fit in int64."""

    _check_count(count)
    _check_bounds(low, high)
    info = np.iinfo(np.int64)
    if low < info.min or high > info.max:
        raise InvalidArgumentError("Range bounds must fit in a signed 64-bit integer for array draws.")
    return np.fromiter((gen.next_range(low, high) for _ in range(count)), dtype=np.int64, count=count)


def noise_raster_u8(gen: Generator, width: int, height: int) -> np.ndarray:
    """Fill a height x width 8-bit raster with row-major uniform draws."""

    if width <= 0 or height <= 0:
        raise InvalidArgumentError("width and height must be positive")
    values = draw_doubles(gen, width * height).reshape(height, width)
    return np.floor(values * 256.0).astype(np.uint8)


def summarize(values: np.ndarray) -> SampleSummary:
    """Summarize a one-dimensional batch of draws."""

    if values.ndim != 1:
        raise InvalidArgumentError("values must be 1D")
    if values.size == 0:
        return SampleSummary(0, 0.0, 0.0, 0.0, 0.0)

    as_float = values.astype(np.float64)
    return SampleSummary(
        count=int(values.size),
        minimum=float(as_float.min()),
        maximum=float(as_float.max()),
        mean=float(as_float.mean()),
        std=float(as_float.std()),
    )


def range_histogram(values: np.ndarray, low: int, high: int) -> RangeHistogram:
    """Count ranged draws per value and compare them to a uniform expectation."""

    _check_bounds(low, high)
    span = high - low + 1
    if span > HISTOGRAM_MAX_SPAN:
        raise InvalidArgumentError(
            f"Range span {span} is too wide for a per-value histogram (limit {HISTOGRAM_MAX_SPAN})."
        )
    ints = values.astype(np.int64, copy=False)
    inside = _inside_mask(ints, low, high)
    counts = np.bincount(ints[inside] - low, minlength=span).astype(np.int64)

    total = int(counts.sum())
    if total == 0:
        chi_square = 0.0
    else:
        expected = total / span
        chi_square = float(np.sum((counts - expected) ** 2) / expected)

    return RangeHistogram(
        low=int(low),
        high=int(high),
        counts=counts,
        values_covered=int(np.count_nonzero(counts)),
        out_of_range=int(ints.size - np.count_nonzero(inside)),
        chi_square=chi_square,
    )


def count_out_of_range(values: np.ndarray, low: int, high: int) -> int:
    """Count draws outside [low, high] without allocating per-value bins."""

    _check_bounds(low, high)
    ints = values.astype(np.int64, copy=False)
    return int(ints.size - np.count_nonzero(_inside_mask(ints, low, high)))


def _inside_mask(ints: np.ndarray, low: int, high: int) -> np.ndarray:
    return (ints >= low) & (ints <= high)


def _check_count(count: int) -> None:
    if isinstance(count, bool) or not isinstance(count, (int, np.integer)) or count < 0:
        raise InvalidArgumentError(f"count must be a non-negative integer, got {count!r}")


def _check_bounds(low: int, high: int) -> None:
    if isinstance(low, bool) or isinstance(high, bool):
        raise InvalidArgumentError("Min and max must be integers.")
    if not isinstance(low, (int, np.integer)) or not isinstance(high, (int, np.integer)):
        raise InvalidArgumentError("Min and max must be integers.")
    if low >= high:
        raise InvalidArgumentError(f"Max must be greater than min (got min={low}, max={high}).")
