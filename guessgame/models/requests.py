"""Pydantic request models for the guess game API.

Field elements travel as decimal strings.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator

from guessgame.models.game import ComparisonProof
from guessgame.utils.field import parse_field
from guessgame.utils.merkle_map import MerkleWitness


def _field(value) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise ValueError("expected a field element string")
    return parse_field(value)


class PlayerTokenRequest(BaseModel):
    """Request a player token."""
    identity: str = Field(min_length=1, max_length=128)


class WitnessBody(BaseModel):
    """Score ledger witness."""
    key: str
    siblings: List[str]

    def to_witness(self) -> MerkleWitness:
        return MerkleWitness(key=_field(self.key), siblings=tuple(_field(s) for s in self.siblings))


class HideRequest(BaseModel):
    """Hide a number."""
    value: int
    salt: str

    @field_validator("salt")
    @classmethod
    def salt_is_field(cls, v: str) -> str:
        _field(v)
        return v


class GuessRequest(BaseModel):
    """Guess a number."""
    number: int = Field(ge=0)


class RevealRequest(BaseModel):
    """Reveal the opening against the pending guess."""
    value: int
    salt: str
    score: int = Field(ge=0)
    witness: WitnessBody


class ProofPublicInputBody(BaseModel):
    guessed_number: str


class ProofPublicOutputBody(BaseModel):
    clue: int
    hidden_value_hash: str


class CheckRequest(BaseModel):
    """Submit a comparison proof for the pending guess."""
    circuit_id: str = "check-program"
    public_input: ProofPublicInputBody
    public_output: ProofPublicOutputBody
    proof: str = ""

    def to_proof(self) -> ComparisonProof:
        return ComparisonProof.from_dict(self.model_dump())


class SettleRequest(BaseModel):
    """Settle the round into the score ledger."""
    score: int = Field(ge=0)
    witness: WitnessBody


class ProveRequest(BaseModel):
    """Ask the proving service for the clue of a guess against an opening."""
    value: int
    salt: str
    guessed_number: int = Field(ge=0)
