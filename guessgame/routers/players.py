"""Player identity router.

Issues bearer tokens and resolves the caller behind them.
"""

from typing import Optional

from fastapi import APIRouter, Header, HTTPException

from guessgame.models.requests import PlayerTokenRequest
from guessgame.models.responses import PlayerTokenResponse
from guessgame.services.identity_service import (
    create_player_token,
    identity_hash,
    verify_player_token,
)

router = APIRouter(prefix="/players", tags=["players"])


def get_current_player(authorization: Optional[str] = Header(None)) -> int:
    """Resolve the caller's identity hash from the Authorization header.

    Raises:
        HTTPException: If token is invalid or missing
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    # Extract token from "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    payload = verify_player_token(parts[1])
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return identity_hash(payload["sub"])


@router.post("/token", response_model=PlayerTokenResponse)
async def player_token(request: PlayerTokenRequest):
    """Issue a player token.

    The returned ``player_id`` is the ledger key scores are kept under.
    """
    token = create_player_token(request.identity)
    return PlayerTokenResponse(access_token=token, player_id=str(identity_hash(request.identity)))
