"""Score ledger router.

Serves scores and witnesses from the server-side mirror of the ledger.
"""

from fastapi import APIRouter, HTTPException

from guessgame.models.responses import LedgerEntryResponse, LedgerRootResponse
from guessgame.services.runtime import get_game, get_score_book
from guessgame.utils.field import parse_field

router = APIRouter(prefix="/ledger", tags=["ledger"])


@router.get("/root", response_model=LedgerRootResponse)
async def ledger_root():
    """Published root and whether the mirror agrees with it."""
    root = get_game().state().score_root
    mirror_root = get_score_book().root
    return LedgerRootResponse(root=str(root), mirror_root=str(mirror_root), in_sync=root == mirror_root)


@router.get("/{player_id}", response_model=LedgerEntryResponse)
async def ledger_entry(player_id: str):
    """Score and witness for a player id (decimal string)."""
    try:
        key = parse_field(player_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="player_id must be a field element")

    book = get_score_book()
    witness = book.witness_for(key)
    return LedgerEntryResponse(
        player_id=str(key),
        score=book.score_of(key),
        root=str(book.root),
        witness_key=str(witness.key),
        witness_siblings=[str(s) for s in witness.siblings],
    )
