from __future__ import annotations

import numpy as np
import pytest

from dicerng.errors import InvalidArgumentError, InvalidSeedError, InvalidStateError
from dicerng.generator import Generator
from dicerng.seed import MASK64, SEED_XOR


def test_transition_matches_reference_from_small_state() -> None:
    gen = Generator([1, 2])

    assert gen.next() == 0x800045
    assert gen.current_state() == (2, 0x800043)
    assert gen.next() == 0x2000104
    assert gen.current_state() == (0x800043, 0x18000C1)


def test_transition_masks_left_shift_to_64_bits() -> None:
    gen = Generator([1 << 63, 1 << 63])

    out = gen.next()

    assert gen.current_state() == (1 << 63, (1 << 46) | (1 << 37))
    assert out == (1 << 63) + (1 << 46) + (1 << 37)


def test_output_addition_wraps_modulo_2_64() -> None:
    gen = Generator([1, MASK64])

    out = gen.next()

    assert gen.current_state() == (MASK64, 0xFFFFFFC000800041)
    assert out == 0xFFFFFFC000800040
    assert 0 <= out <= MASK64


def test_single_seed_derivation() -> None:
    gen = Generator(123456789)

    assert gen.current_state() == (123456789, 123456789 ^ 0x6A09E667F3BCC909)


def test_zero_seed_is_valid() -> None:
    gen = Generator(0)

    assert gen.current_state() == (0, SEED_XOR)


def test_explicit_zero_state_is_rejected() -> None:
    with pytest.raises(InvalidStateError):
        Generator([0, 0])

    gen = Generator([0, 1])
    assert gen.current_state() == (0, 1)


def test_explicit_state_accepts_tuple_and_numpy_array() -> None:
    assert Generator((5, 7)).current_state() == (5, 7)
    assert Generator(np.array([5, 7], dtype=np.uint64)).current_state() == (5, 7)


def test_explicit_state_words_are_coerced_to_64_bits() -> None:
    gen = Generator([(1 << 64) + 3, -1])

    assert gen.current_state() == (3, MASK64)


def test_explicit_state_wrong_length_is_invalid_state() -> None:
    with pytest.raises(InvalidStateError):
        Generator([1])
    with pytest.raises(InvalidStateError):
        Generator([1, 2, 3])


@pytest.mark.parametrize("seed", ["123", 1.5, {"state0": 1}, True, [1.0, 2]])
def test_unrecognized_seed_shape_is_invalid_seed(seed) -> None:
    with pytest.raises(InvalidSeedError):
        Generator(seed)


def test_single_seed_outside_u64_is_invalid_seed() -> None:
    with pytest.raises(InvalidSeedError):
        Generator(-1)
    with pytest.raises(InvalidSeedError):
        Generator(1 << 64)


def test_numpy_integer_seed_matches_python_int() -> None:
    assert Generator(np.uint64(99)).current_state() == Generator(99).current_state()


def test_next_uint32_is_low_word() -> None:
    gen = Generator([1, MASK64])

    assert gen.next_uint32() == 0x00800040


def test_next_double_uses_53_bit_split() -> None:
    gen = Generator([1, 2])

    assert gen.next_double() == 69 / 2**21


def test_next_double_bounds() -> None:
    gen = Generator(2024)

    for _ in range(50_000):
        value = gen.next_double()
        assert 0.0 <= value < 1.0


def test_next_range_covers_die_faces() -> None:
    gen = Generator(42)
    seen = set()

    for _ in range(100_000):
        value = gen.next_range(1, 6)
        assert 1 <= value <= 6
        seen.add(value)

    assert seen == {1, 2, 3, 4, 5, 6}


def test_next_range_consumes_one_transition() -> None:
    a = Generator(7)
    b = Generator(7)

    a.next_range(-10, 10)
    b.next()

    assert a.current_state() == b.current_state()


def test_next_range_matches_scaled_double() -> None:
    a = Generator(31337)
    b = Generator(31337)

    for _ in range(100):
        assert a.next_range(-3, 1000) == -3 + int(b.next_double() * 1004)


@pytest.mark.parametrize("bounds", [(5, 5), (5, 2), (1.5, 6), (1, 6.0), (True, 6), ("1", 6)])
def test_next_range_rejects_bad_bounds(bounds) -> None:
    gen = Generator(1)
    before = gen.current_state()

    with pytest.raises(InvalidArgumentError):
        gen.next_range(*bounds)

    assert gen.current_state() == before


def test_current_state_is_snapshot() -> None:
    gen = Generator(11)
    snapshot = gen.current_state()

    gen.next()

    assert snapshot == (11, 11 ^ SEED_XOR)
    assert gen.current_state() != snapshot
    assert gen.state.as_tuple() == gen.current_state()


def test_state_never_zero_over_many_steps() -> None:
    gen = Generator([0, 1])

    for _ in range(20_000):
        gen.next()
        assert gen.current_state() != (0, 0)


def test_reseed_failure_leaves_state_untouched() -> None:
    gen = Generator(5)
    gen.next()
    before = gen.current_state()

    with pytest.raises(InvalidStateError):
        gen.reseed([0, 0])

    assert gen.current_state() == before
    gen.reseed(5)
    assert gen.current_state() == (5, 5 ^ SEED_XOR)


def test_next_range_rejects_span_beyond_double() -> None:
    gen = Generator(1)
    before = gen.current_state()

    with pytest.raises(InvalidArgumentError):
        gen.next_range(0, 10**400)

    assert gen.current_state() == before


def test_state_words_are_read_only() -> None:
    gen = Generator(9)

    with pytest.raises(AttributeError):
        gen.state = (0, 0)
    assert not hasattr(gen, "state0")
    assert not hasattr(gen, "state1")
    assert gen.current_state() == (9, 9 ^ SEED_XOR)
