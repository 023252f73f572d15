import pytest

from dicerng.entropy import fixed_bytes, system_bytes
from dicerng.errors import InvalidSeedError
from dicerng.generator import Generator
from dicerng.seed import GeneratorState, derive_seed, parse_seed_text, resolve_seed, seed_from_text


def test_entropy_bytes_are_little_endian_words() -> None:
    payload = bytes([1, 0, 0, 0, 0, 0, 0, 0, 2, 0, 0, 0, 0, 0, 0, 0])

    gen = Generator(entropy=fixed_bytes(payload))

    assert gen.current_state() == (1, 2)


def test_entropy_high_byte_order() -> None:
    payload = bytes(range(16))

    state = resolve_seed(None, fixed_bytes(payload))

    assert state == GeneratorState(0x0706050403020100, 0x0F0E0D0C0B0A0908)


def test_all_zero_entropy_is_corrected() -> None:
    gen = Generator(entropy=fixed_bytes(bytes(16)))

    assert gen.current_state() == (0, 1)


def test_short_entropy_read_is_rejected() -> None:
    with pytest.raises(InvalidSeedError):
        Generator(entropy=fixed_bytes(bytes(8)))


def test_entropy_source_requested_once_for_sixteen_bytes() -> None:
    requests = []

    def source(count: int) -> bytes:
        requests.append(count)
        return bytes([9] * count)

    Generator(entropy=source)

    assert requests == [16]


def test_system_bytes_default_seeding() -> None:
    assert len(system_bytes(16)) == 16
    assert Generator().current_state() != (0, 0)


def test_seed_from_text_case_insensitive() -> None:
    a = seed_from_text("mistyforge")
    b = seed_from_text("MISTYFORGE")
    c = seed_from_text("  MistyForge ")

    assert a == b == c
    assert 0 <= a < 2**64


def test_seed_from_text_rejects_empty_and_non_ascii() -> None:
    with pytest.raises(InvalidSeedError):
        seed_from_text("   ")
    with pytest.raises(InvalidSeedError) as exc:
        seed_from_text("forêt")

    assert "Examples:" in str(exc.value)


def test_parse_seed_text_integers_and_words() -> None:
    assert parse_seed_text("12345") == 12345
    assert parse_seed_text("0xDEADBEEF") == 0xDEADBEEF
    assert parse_seed_text("MistyForge") == seed_from_text("MistyForge")

    with pytest.raises(InvalidSeedError):
        parse_seed_text(str(2**64))


def test_derive_seed_is_stable_and_key_sensitive() -> None:
    assert derive_seed(42, "worker-1") == derive_seed(42, "worker-1")
    assert derive_seed(42, "worker-1") != derive_seed(42, "worker-2")
    assert derive_seed(42, "worker-1") != derive_seed(43, "worker-1")

    with pytest.raises(InvalidSeedError):
        derive_seed(42, "")


@pytest.mark.parametrize("text", ["-5", "+5", "-0x10"])
def test_parse_seed_text_rejects_signed_integers(text) -> None:
    with pytest.raises(InvalidSeedError):
        parse_seed_text(text)
