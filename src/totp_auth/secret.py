"""Decoding of user-supplied TOTP secrets (hex or Base32) into key bytes."""

import re


HEX_PATTERN = re.compile(r"(?:[0-9a-fA-F]{2})+")

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_BASE32_VALUES = {char: value for value, char in enumerate(BASE32_ALPHABET)}
_BASE32_VALUES.update(
    {char.lower(): value for char, value in _BASE32_VALUES.items() if char.isalpha()}
)


class DecodeError(ValueError):
    """Raised when a secret is neither valid hex nor valid Base32."""


def decode_secret(secret: str) -> bytes:
    """
    Decode a secret given either as hex or as Base32.

    A string made only of an even number of hex digits is decoded as hex;
    anything else is treated as Base32.

    Args:
        secret: The secret text as entered by the user.

    Returns:
        Raw key bytes.

    Raises:
        DecodeError: If the secret cannot be decoded.
    """
    if HEX_PATTERN.fullmatch(secret):
        return decode_hex(secret)
    return decode_base32(secret)


def decode_hex(secret: str) -> bytes:
    """
    Decode a hex string into bytes, two characters per byte.

    Odd-length input gets a single leading ``'0'``.

    Raises:
        DecodeError: If the string contains a non-hex character.
    """
    if len(secret) % 2:
        secret = "0" + secret

    if not HEX_PATTERN.fullmatch(secret):
        raise DecodeError("Cannot decode secret: invalid hex string")

    return bytes(int(secret[i : i + 2], 16) for i in range(0, len(secret), 2))


def decode_base32(secret: str) -> bytes:
    """
    Decode an RFC 4648 Base32 string into bytes.

    Whitespace anywhere and trailing ``=`` padding are ignored, and letters
    are accepted in either case. Bits that do not fill a whole byte at the
    end of the input are dropped.

    Args:
        secret: The Base32 text.

    Returns:
        Decoded bytes.

    Raises:
        DecodeError: On an invalid character or an empty secret.
    """
    chars = "".join(secret.split()).rstrip("=")
    if not chars:
        raise DecodeError("Cannot decode secret: secret is empty")

    buffer = 0
    bits = 0
    decoded = bytearray()
    for char in chars:
        try:
            value = _BASE32_VALUES[char]
        except KeyError:
            raise DecodeError(
                f"Cannot decode secret: invalid Base32 character {char!r}"
            ) from None

        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            decoded.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1

    return bytes(decoded)
