"""Game data models for the guess game."""

from dataclasses import dataclass, field
from typing import Optional

from guessgame.constants import COMPARISON_CIRCUIT_ID, EMPTY, Clue
from guessgame.utils.commit_reveal import commit, random_salt


@dataclass(frozen=True)
class Opening:
    """The hider's private (value, salt) pair. Never persisted."""
    value: int
    salt: int

    @classmethod
    def with_random_salt(cls, value: int) -> "Opening":
        return cls(value=value, salt=random_salt())

    def hash(self) -> int:
        """Commitment this opening reproduces."""
        return commit(self.value, self.salt)

    def __repr__(self) -> str:
        return "Opening(<hidden>)"


@dataclass(frozen=True)
class ComparisonPublicInput:
    guessed_number: int


@dataclass(frozen=True)
class ComparisonPublicOutput:
    clue: Clue
    hidden_value_hash: int


@dataclass(frozen=True)
class ComparisonProof:
    """A proof that a committed value compares to a guess as ``clue``."""
    public_input: ComparisonPublicInput
    public_output: ComparisonPublicOutput
    proof: bytes = b""
    circuit_id: str = COMPARISON_CIRCUIT_ID

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary (field elements as strings)."""
        return {
            "circuit_id": self.circuit_id,
            "public_input": {"guessed_number": str(self.public_input.guessed_number)},
            "public_output": {
                "clue": int(self.public_output.clue),
                "hidden_value_hash": str(self.public_output.hidden_value_hash),
            },
            "proof": self.proof.hex(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ComparisonProof":
        """Load from dictionary."""
        return cls(
            public_input=ComparisonPublicInput(
                guessed_number=int(data["public_input"]["guessed_number"])
            ),
            public_output=ComparisonPublicOutput(
                clue=Clue(int(data["public_output"]["clue"])),
                hidden_value_hash=int(data["public_output"]["hidden_value_hash"]),
            ),
            proof=bytes.fromhex(data.get("proof", "")),
            circuit_id=data.get("circuit_id", COMPARISON_CIRCUIT_ID),
        )


@dataclass(frozen=True)
class RoundState:
    """Snapshot of the single global round plus the score ledger root."""
    hidden_commitment: int = EMPTY
    guessed_number: Optional[int] = None
    guesser: Optional[int] = None
    guesses_remaining: int = 0
    last_clue: Clue = Clue.NONE
    score_root: int = EMPTY

    @property
    def active(self) -> bool:
        return self.hidden_commitment != EMPTY

    def to_dict(self) -> dict:
        return {
            "hidden_commitment": str(self.hidden_commitment),
            "guessed_number": self.guessed_number,
            "guesser": None if self.guesser is None else str(self.guesser),
            "guesses_remaining": self.guesses_remaining,
            "last_clue": self.last_clue.name,
            "score_root": str(self.score_root),
            "active": self.active,
        }


@dataclass
class Settlement:
    """Result of a score update applied to the ledger."""
    player: int
    previous_score: int
    new_score: int
    score_root: int
    delta: int = field(init=False)

    def __post_init__(self):
        self.delta = self.new_score - self.previous_score
