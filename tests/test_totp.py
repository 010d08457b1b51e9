"""Tests for HOTP/TOTP code generation."""

import hashlib
import hmac

import pytest

from totp_auth.secret import decode_secret
from totp_auth.totp import (
    MAX_COUNTER,
    generate_code,
    generate_hotp,
    remaining_seconds,
    time_counter,
    validate_digits,
)


RFC_KEY = b"12345678901234567890"

# RFC 4226 test vectors (Appendix D)
RFC4226_TEST_VECTORS = [
    # (counter, expected_code)
    (0, "755224"),
    (1, "287082"),
    (2, "359152"),
    (3, "969429"),
    (4, "338314"),
    (5, "254676"),
    (6, "287922"),
    (7, "162583"),
    (8, "399871"),
    (9, "520489"),
]

# RFC 6238 test vectors (Appendix B, SHA-1 only)
RFC6238_TEST_VECTORS = [
    # (timestamp, expected_code)
    (59, "94287082"),
    (1111111109, "07081804"),
    (1111111111, "14050471"),
    (1234567890, "89005924"),
    (2000000000, "69279037"),
    (20000000000, "65353130"),
]


@pytest.mark.parametrize("counter,expected_code", RFC4226_TEST_VECTORS)
def test_rfc4226_test_vectors(counter, expected_code):
    """Test HOTP generation against RFC 4226 test vectors."""
    assert generate_hotp(RFC_KEY, counter, digits=6) == expected_code


@pytest.mark.parametrize("timestamp,expected_code", RFC6238_TEST_VECTORS)
def test_rfc6238_test_vectors(timestamp, expected_code):
    """Test TOTP generation against RFC 6238 test vectors."""
    assert generate_code(RFC_KEY, timestamp=timestamp, digits=8) == expected_code


def test_rfc6238_vectors_from_encoded_secrets():
    """Test that hex and Base32 forms of the RFC key produce the same codes."""
    for secret in ("3132333435363738393031323334353637383930", "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"):
        key = decode_secret(secret)
        assert generate_code(key, timestamp=59, digits=8) == "94287082"
        assert generate_code(key, timestamp=1111111109, digits=8) == "07081804"


def test_code_is_constant_within_time_step():
    """Test that every timestamp in one 30-second step gives the same code."""
    codes = {generate_code(RFC_KEY, timestamp=t, digits=8) for t in range(30, 60)}
    assert codes == {"94287082"}
    assert generate_code(RFC_KEY, timestamp=59.999, digits=8) == "94287082"


def test_generate_code_deterministic():
    """Test that repeated calls with the same inputs agree."""
    key = decode_secret("JBSWY3DPEHPK3PXP")
    codes = {generate_code(key, timestamp=1700000000, digits=6) for _ in range(5)}
    assert len(codes) == 1


def test_generate_code_default_time():
    """Test that the current time is used when no timestamp is given."""
    code = generate_code(RFC_KEY)
    assert len(code) == 6
    assert code.isdigit()


@pytest.mark.parametrize("digits", range(1, 11))
def test_code_length_matches_digits(digits):
    """Test that the code always has exactly ``digits`` characters."""
    code = generate_code(RFC_KEY, timestamp=1111111109, digits=digits)
    assert len(code) == digits
    assert code.isdigit()


def test_different_digits_share_suffix():
    """Test that shorter codes are suffixes of longer ones."""
    code_6 = generate_hotp(RFC_KEY, 0, digits=6)
    code_7 = generate_hotp(RFC_KEY, 0, digits=7)
    code_8 = generate_hotp(RFC_KEY, 0, digits=8)

    assert code_7.endswith(code_6)
    assert code_8.endswith(code_7)


def test_code_is_zero_padded():
    """Test that leading zeros are kept."""
    assert generate_code(RFC_KEY, timestamp=1111111109, digits=8) == "07081804"
    assert generate_code(RFC_KEY, timestamp=1111111109, digits=7) == "7081804"


def test_hotp_matches_manual_truncation():
    """Test dynamic truncation against a direct HMAC-SHA1 computation."""
    key = b"\x00\x01\x02"
    counter = 123456789
    digest = hmac.new(key, counter.to_bytes(8, "big"), hashlib.sha1).digest()
    offset = digest[-1] & 0x0F
    value = int.from_bytes(digest[offset : offset + 4], "big") & 0x7FFFFFFF

    assert generate_hotp(key, counter, digits=6) == str(value % 10**6).zfill(6)


def test_ten_digits_returns_full_truncated_value():
    """Test that ten digits expose the whole 31-bit truncated value."""
    code = generate_hotp(RFC_KEY, 0, digits=10)
    assert int(code) < 2**31
    # RFC 4226 Appendix D: HOTP value for count 0 is 1284755224
    assert code == "1284755224"


def test_counter_boundaries():
    """Test that counters beyond 32 bits are not truncated."""
    assert time_counter(0) == 0
    assert time_counter(59) == 1
    assert time_counter(4_294_967_295 * 30) == 4_294_967_295
    assert time_counter(2**32 * 30) == 2**32
    assert time_counter(MAX_COUNTER * 30) == MAX_COUNTER


def test_large_counter_codes_differ_from_wrapped_counter():
    """Test that a 33-bit counter is not reduced modulo 2**32."""
    assert generate_code(RFC_KEY, timestamp=2**32 * 30, digits=8) == generate_hotp(
        RFC_KEY, 2**32, digits=8
    )
    assert generate_hotp(RFC_KEY, 2**32, digits=8) != generate_hotp(RFC_KEY, 0, digits=8)


def test_counter_out_of_range():
    """Test that counters outside the unsigned 64-bit range are rejected."""
    with pytest.raises(ValueError):
        time_counter((MAX_COUNTER + 1) * 30)
    with pytest.raises(ValueError):
        time_counter(-1)
    with pytest.raises(ValueError):
        generate_hotp(RFC_KEY, -1)
    with pytest.raises(ValueError):
        generate_hotp(RFC_KEY, MAX_COUNTER + 1)


@pytest.mark.parametrize("digits", [0, -6, 11, 6.0, "6", True, None])
def test_invalid_digits(digits):
    """Test that digits outside 1..10 or non-integers are rejected."""
    with pytest.raises(ValueError, match="Digits"):
        validate_digits(digits)
    with pytest.raises(ValueError, match="Digits"):
        generate_code(RFC_KEY, timestamp=59, digits=digits)


def test_remaining_seconds():
    """Test the seconds left in a time step."""
    assert remaining_seconds(0) == 30
    assert remaining_seconds(29) == 1
    assert remaining_seconds(30) == 30
    assert remaining_seconds(59.5) == 1
    assert 1 <= remaining_seconds() <= 30


def test_remaining_seconds_negative():
    """Test that negative timestamps are rejected like in time_counter."""
    with pytest.raises(ValueError, match="negative"):
        remaining_seconds(-1)
