"""Game router for the guess game.

Thin HTTP shell over ``GuessGame``: each endpoint runs one transition
under ``game_lock`` and maps rejections to HTTP errors.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from guessgame.constants import COMPARISON_CIRCUIT_ID
from guessgame.errors import CircuitError, GameError
from guessgame.models.game import ComparisonPublicInput, Opening, Settlement
from guessgame.models.requests import (
    CheckRequest,
    GuessRequest,
    HideRequest,
    ProveRequest,
    RevealRequest,
    SettleRequest,
)
from guessgame.models.responses import (
    CheckResponse,
    GuessResponse,
    HideResponse,
    RoundStateResponse,
    SettlementResponse,
)
from guessgame.routers.players import get_current_player
from guessgame.services.runtime import game_lock, get_game, get_score_book
from guessgame.utils.field import parse_field

router = APIRouter(prefix="/game", tags=["game"])

STATUS_BY_CATEGORY = {
    "precondition": 409,
    "crypto": 422,
    "domain": 400,
    "concurrency": 409,
}


def game_error(e: GameError) -> HTTPException:
    return HTTPException(status_code=STATUS_BY_CATEGORY.get(e.category, 400), detail=e.to_dict())


def settlement_response(settlement: Optional[Settlement]) -> SettlementResponse:
    if settlement is None:
        return SettlementResponse(ok=True, settled=False)
    # Keep the served witnesses in step with the published root
    get_score_book().apply(settlement)
    return SettlementResponse(
        ok=True,
        settled=True,
        player=str(settlement.player),
        previous_score=settlement.previous_score,
        new_score=settlement.new_score,
        score_root=str(settlement.score_root),
    )


@router.get("/state", response_model=RoundStateResponse)
async def game_state():
    """Public round state. Never includes the hidden number."""
    return get_game().state().to_dict()


@router.post("/hide", response_model=HideResponse)
async def hide_number(request: HideRequest):
    """Commit to a hidden number and open a round."""
    async with game_lock:
        try:
            commitment = get_game().hide(request.value, parse_field(request.salt))
        except GameError as e:
            raise game_error(e)
    return HideResponse(ok=True, commitment=str(commitment))


@router.post("/guess", response_model=GuessResponse)
async def guess_number(request: GuessRequest, player: int = Depends(get_current_player)):
    """Guess the hidden number as the authenticated player."""
    async with game_lock:
        try:
            remaining = get_game().guess(request.number, player)
        except GameError as e:
            raise game_error(e)
    return GuessResponse(ok=True, guesses_remaining=remaining)


@router.post("/prove")
async def prove_clue(request: ProveRequest):
    """Prove the clue of ``guessed_number`` against the hider's opening.

    Only the hider knows an opening that matches the published commitment,
    so a proof built from any other opening is rejected as stale by ``check``.
    """
    try:
        opening = Opening(value=request.value, salt=parse_field(request.salt))
        proof = get_game().prover.prove(
            COMPARISON_CIRCUIT_ID,
            ComparisonPublicInput(guessed_number=request.guessed_number),
            opening,
        )
    except (ValueError, CircuitError) as e:
        raise HTTPException(status_code=422, detail=f"Cannot prove: {e}")
    return proof.to_dict()


@router.post("/check", response_model=CheckResponse)
async def check_value(request: CheckRequest):
    """Submit the hider's comparison proof for the pending guess."""
    try:
        proof = request.to_proof()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Malformed proof: {e}")

    async with game_lock:
        try:
            clue = get_game().check_value(proof)
        except GameError as e:
            raise game_error(e)
    return CheckResponse(ok=True, clue=clue.name)


@router.post("/reveal", response_model=SettlementResponse)
async def reveal_number(request: RevealRequest):
    """Open the hidden number against the pending guess."""
    try:
        opening = Opening(value=request.value, salt=parse_field(request.salt))
        witness = request.witness.to_witness()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    async with game_lock:
        try:
            settlement = get_game().reveal(opening, request.score, witness)
        except GameError as e:
            raise game_error(e)
        return settlement_response(settlement)


@router.post("/settle", response_model=SettlementResponse)
async def settle_round(request: SettleRequest):
    """Settle a won or exhausted round into the score ledger."""
    try:
        witness = request.witness.to_witness()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    async with game_lock:
        try:
            settlement = get_game().update_score(request.score, witness)
        except GameError as e:
            raise game_error(e)
        return settlement_response(settlement)
