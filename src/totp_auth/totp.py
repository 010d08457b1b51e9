"""RFC 6238 TOTP (Time-based One-Time Password) implementation over HMAC-SHA1."""

import hashlib
import hmac
import time
from typing import Optional, Union


TIME_STEP = 30
DEFAULT_DIGITS = 6
MAX_DIGITS = 10
MAX_COUNTER = 2**64 - 1

Timestamp = Union[int, float]


def validate_digits(digits: int) -> None:
    """Raise ValueError unless ``digits`` is an integer in 1..MAX_DIGITS."""
    if isinstance(digits, bool) or not isinstance(digits, int):
        raise ValueError(f"Digits must be an integer, got {digits!r}")
    if not 1 <= digits <= MAX_DIGITS:
        raise ValueError(f"Digits must be between 1 and {MAX_DIGITS}, got {digits}")


def time_counter(timestamp: Optional[Timestamp] = None) -> int:
    """
    Compute the time-step counter for a Unix timestamp.

    Args:
        timestamp: Seconds since the epoch (default: current time).

    Returns:
        ``floor(timestamp / 30)`` as an unsigned 64-bit value.

    Raises:
        ValueError: If the timestamp is negative or the counter exceeds 64 bits.
    """
    t = time.time() if timestamp is None else timestamp
    if t < 0:
        raise ValueError(f"Timestamp must not be negative, got {t}")

    counter = int(t // TIME_STEP)
    if counter > MAX_COUNTER:
        raise ValueError(f"Timestamp {t} is out of range for a 64-bit counter")
    return counter


def remaining_seconds(timestamp: Optional[Timestamp] = None) -> int:
    """
    Return the number of seconds until the current time step ends.

    Raises:
        ValueError: If the timestamp is negative.
    """
    t = time.time() if timestamp is None else timestamp
    if t < 0:
        raise ValueError(f"Timestamp must not be negative, got {t}")
    return TIME_STEP - int(t % TIME_STEP)


def generate_hotp(key: bytes, counter: int, digits: int = DEFAULT_DIGITS) -> str:
    """
    Generate an HOTP code using RFC 4226.

    Args:
        key: The raw (decoded) shared key.
        counter: The moving counter value.
        digits: Number of digits in the output code (default: 6).

    Returns:
        A zero-padded HOTP code string.

    Raises:
        ValueError: If ``digits`` or ``counter`` is out of range.
    """
    validate_digits(digits)
    if not 0 <= counter <= MAX_COUNTER:
        raise ValueError(f"Counter must fit in an unsigned 64-bit integer, got {counter}")

    # Convert counter to 8-byte big-endian integer
    counter_bytes = counter.to_bytes(8, byteorder="big")

    hmac_digest = hmac.new(key, counter_bytes, hashlib.sha1).digest()

    # Dynamic truncation (RFC 4226, Section 5.4)
    offset = hmac_digest[19] & 0x0F
    binary = (
        int.from_bytes(hmac_digest[offset : offset + 4], byteorder="big") & 0x7FFFFFFF
    )

    code = binary % (10**digits)
    return f"{code:0{digits}d}"


def generate_code(
    key: bytes,
    timestamp: Optional[Timestamp] = None,
    digits: int = DEFAULT_DIGITS,
) -> str:
    """
    Generate the TOTP code for a point in time.

    Args:
        key: The raw (decoded) shared key.
        timestamp: Seconds since the epoch (default: current time).
        digits: Number of digits in the output code (default: 6).

    Returns:
        A zero-padded TOTP code string of exactly ``digits`` characters.
    """
    return generate_hotp(key, time_counter(timestamp), digits)
