"""Cryptographic commit-reveal mechanism for the hidden number."""

import hmac

from guessgame.constants import DOMAIN_COMMIT
from guessgame.utils.field import hash_fields, random_field, to_field_bytes


def commit(value: int, salt: int) -> int:
    """
    Create a cryptographic commitment to a hidden value.

    Args:
        value: The value to commit to (range-checked by the caller)
        salt: Random field element blinding the value

    Returns:
        Field element commitment, H(value, salt) in that order
    """
    return hash_fields(DOMAIN_COMMIT, value, salt)


def open_commitment(commitment: int, value: int, salt: int) -> bool:
    """
    Check that (value, salt) opens a commitment.

    The comparison runs in constant time over the encoded digests.

    Args:
        commitment: Previously published commitment
        value: Claimed hidden value
        salt: Claimed salt

    Returns:
        True if commit(value, salt) == commitment
    """
    try:
        expected = to_field_bytes(commit(value, salt))
        claimed = to_field_bytes(commitment)
    except ValueError:
        return False
    return hmac.compare_digest(expected, claimed)


def random_salt() -> int:
    """Fresh blinding factor for a commitment."""
    return random_field()
