"""Field-element helpers and the domain-separated field hash."""

import hashlib
import secrets

from guessgame.constants import FIELD_BYTES, FIELD_MODULUS


def is_field_element(x) -> bool:
    """True for ints in [0, FIELD_MODULUS). Booleans are rejected."""
    return isinstance(x, int) and not isinstance(x, bool) and 0 <= x < FIELD_MODULUS


def to_field_bytes(x: int) -> bytes:
    """Fixed-width big-endian encoding of a field element."""
    if not is_field_element(x):
        raise ValueError(f"not a field element: {x!r}")
    return x.to_bytes(FIELD_BYTES, "big")


def hash_fields(domain: bytes, *elements: int) -> int:
    """
    Hash a sequence of field elements into the field.

    H = SHA256(len(domain) || domain || e_0 || ... || e_n) mod p, every
    element encoded as 32 big-endian bytes. Different domains never share
    an input encoding.

    Args:
        domain: Domain separation tag
        *elements: Field elements, hashed in order

    Returns:
        Field element digest
    """
    h = hashlib.sha256()
    h.update(len(domain).to_bytes(2, "big"))
    h.update(domain)
    for e in elements:
        h.update(to_field_bytes(e))
    return int.from_bytes(h.digest(), "big") % FIELD_MODULUS


def random_field() -> int:
    """Uniformly random field element."""
    return secrets.randbelow(FIELD_MODULUS)


def parse_field(text: str) -> int:
    """Parse a decimal (or 0x-prefixed hex) string into a field element."""
    text = text.strip()
    value = int(text, 16) if text.lower().startswith("0x") else int(text, 10)
    if not is_field_element(value):
        raise ValueError(f"not a field element: {text!r}")
    return value
