"""Public identifier generation and validation.

A public identifier is 128 bits from a CSPRNG, encoded with Crockford's
base-32 alphabet (no I, L, O, U) and lowercased. 128 bits at 5 bits per
symbol gives a fixed 26-character identifier; the final symbol carries
the last 3 bits padded with two zero bits. No ``=`` padding is emitted.

INVARIANT: Public IDs are permanent. Once assigned, a public ID never changes.
"""

from __future__ import annotations

import re
import secrets
from collections.abc import Callable

CROCKFORD_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"

PUBLIC_ID_BYTES = 16
PUBLIC_ID_LENGTH = 26

PUBLIC_ID_PATTERN: re.Pattern[str] = re.compile(r"^[0-9a-hjkmnp-tv-z]{26}$")


def encode_crockford(data: bytes) -> str:
    """Encode *data* with Crockford base-32, most significant bit first.

    Trailing bits that do not fill a whole symbol are right-padded with
    zeros. The result is uppercase, as the alphabet is defined.

    Examples:
        >>> encode_crockford(b"")
        ''
        >>> encode_crockford(b"\\x00")
        '00'
        >>> encode_crockford(b"\\xff")
        'ZW'
    """
    output: list[str] = []
    buffer = 0
    bits = 0
    for byte in data:
        buffer = (buffer << 8) | byte
        bits += 8
        while bits >= 5:
            bits -= 5
            output.append(CROCKFORD_ALPHABET[(buffer >> bits) & 0x1F])
    if bits:
        output.append(CROCKFORD_ALPHABET[(buffer << (5 - bits)) & 0x1F])
    return "".join(output)


def generate_public_id(random_bytes: Callable[[int], bytes] = secrets.token_bytes) -> str:
    """Generate a new lowercase 26-character public identifier.

    *random_bytes* is the randomness source; it defaults to
    :func:`secrets.token_bytes` and is injectable so the encoding can be
    checked against a fixed input.
    """
    raw = random_bytes(PUBLIC_ID_BYTES)
    if len(raw) != PUBLIC_ID_BYTES:
        msg = f"Random source returned {len(raw)} bytes, expected {PUBLIC_ID_BYTES}"
        raise ValueError(msg)
    return encode_crockford(raw).lower()


def is_public_id(value: str) -> bool:
    """Check whether *value* has the shape of a generated public identifier."""
    return PUBLIC_ID_PATTERN.match(value) is not None
