"""Player identity service.

Players authenticate with short-lived JWT tokens. The game only ever sees
the hash of the identity carried in the token.
"""

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from guessgame.config import settings
from guessgame.constants import DOMAIN_IDENTITY, FIELD_MODULUS
from guessgame.utils.field import hash_fields

PLAYER_ROLE = "player"


def identity_hash(identity: str) -> int:
    """Map an identity string to the field element used as ledger key.

    Args:
        identity: Player identity (name or public key)

    Returns:
        Field element player id
    """
    if not identity:
        raise ValueError("identity must be non-empty")
    encoded = hashlib.sha256(identity.encode("utf-8")).digest()
    return hash_fields(DOMAIN_IDENTITY, int.from_bytes(encoded, "big") % FIELD_MODULUS)


def create_player_token(identity: str, expiration_hours: Optional[int] = None) -> str:
    """Create a JWT token for a player.

    Args:
        identity: Player identity

    Returns:
        JWT token string
    """
    hours = settings.jwt_expiration_hours if expiration_hours is None else expiration_hours
    now = datetime.now(timezone.utc)
    payload = {
        "sub": identity,
        "role": PLAYER_ROLE,
        "exp": now + timedelta(hours=hours),
        "iat": now
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_player_token(token: str) -> Optional[dict]:
    """Verify and decode a player JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded token payload if valid, None otherwise
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None

    if payload.get("role") != PLAYER_ROLE or not payload.get("sub"):
        return None

    return payload
