"""Round history models.

Stores settled rounds for review. Openings are never part of a record.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import json

from guessgame.constants import Outcome


@dataclass
class GuessEntry:
    """A single guess and the clue it earned."""
    number: int
    timestamp: float
    clue: Optional[str] = None  # LESS | EQUALS | GREATER, None until checked

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "timestamp": self.timestamp,
            "clue": self.clue
        }


@dataclass
class RoundRecord:
    """A complete round with its outcome."""
    round_id: str
    hidden_commitment: str
    started_at: float
    settled_at: Optional[float] = None
    guesser: Optional[str] = None
    guesses: List[GuessEntry] = field(default_factory=list)

    # Outcome
    outcome: Optional[Outcome] = None
    settled_by: Optional[str] = None  # 'check' or 'reveal'
    score_delta: int = 0
    score_root: Optional[str] = None

    def add_guess(self, number: int, guesser: str, timestamp: float):
        """Record a guess by the round's guesser."""
        self.guesser = guesser
        self.guesses.append(GuessEntry(number=number, timestamp=timestamp))

    def set_last_clue(self, clue: str):
        """Attach a clue to the most recent guess."""
        if self.guesses:
            self.guesses[-1].clue = clue

    def settle(self, outcome: Outcome, settled_by: str, score_delta: int,
               score_root: str, settled_at: float):
        """Record round outcome."""
        self.outcome = outcome
        self.settled_by = settled_by
        self.score_delta = score_delta
        self.score_root = score_root
        self.settled_at = settled_at

    @property
    def total_guesses(self) -> int:
        return len(self.guesses)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "round_id": self.round_id,
            "hidden_commitment": self.hidden_commitment,
            "started_at": self.started_at,
            "settled_at": self.settled_at,
            "guesser": self.guesser,
            "guesses": [g.to_dict() for g in self.guesses],
            "total_guesses": self.total_guesses,
            "outcome": self.outcome,
            "settled_by": self.settled_by,
            "score_delta": self.score_delta,
            "score_root": self.score_root
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RoundRecord":
        """Load from dictionary."""
        record = cls(
            round_id=data["round_id"],
            hidden_commitment=data["hidden_commitment"],
            started_at=data["started_at"],
            settled_at=data.get("settled_at"),
            guesser=data.get("guesser"),
            outcome=data.get("outcome"),
            settled_by=data.get("settled_by"),
            score_delta=data.get("score_delta", 0),
            score_root=data.get("score_root")
        )

        for guess_data in data.get("guesses", []):
            record.guesses.append(GuessEntry(**guess_data))

        return record

    def to_json(self) -> str:
        """Serialize to JSON."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "RoundRecord":
        """Deserialize from JSON."""
        return cls.from_dict(json.loads(json_str))
