"""Pydantic response models for the guess game API."""

from typing import List, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    env: str
    version: str


class PlayerTokenResponse(BaseModel):
    """Player token and the ledger key it maps to."""
    access_token: str
    token_type: str = "bearer"
    player_id: str


class RoundStateResponse(BaseModel):
    """Public view of the round."""
    hidden_commitment: str
    guessed_number: Optional[int] = None
    guesser: Optional[str] = None
    guesses_remaining: int
    last_clue: str  # NONE | LESS | EQUALS | GREATER
    score_root: str
    active: bool


class HideResponse(BaseModel):
    ok: bool
    commitment: str


class GuessResponse(BaseModel):
    ok: bool
    guesses_remaining: int


class CheckResponse(BaseModel):
    ok: bool
    clue: str


class SettlementResponse(BaseModel):
    """Result of a reveal or settle call."""
    ok: bool
    settled: bool
    player: Optional[str] = None
    previous_score: Optional[int] = None
    new_score: Optional[int] = None
    score_root: Optional[str] = None


class LedgerEntryResponse(BaseModel):
    """A player's score and witness against the current root."""
    player_id: str
    score: int
    root: str
    witness_key: str
    witness_siblings: List[str]


class LedgerRootResponse(BaseModel):
    root: str
    mirror_root: str
    in_sync: bool
