"""Typed rejections for game transitions.

Every failed transition raises one of these and leaves the round state
untouched. Each error has a stable ``code`` (used by the HTTP layer and in
logs) and a ``category``:

- ``precondition``: the caller tried an operation the round does not allow
- ``crypto``: a commitment, proof or witness did not match live state
- ``domain``: an input is outside its allowed range
- ``concurrency``: another transition changed a field this one read
"""

from guessgame.constants import ErrorCategory


class GameError(Exception):
    """Base class for all rejected transitions."""

    code: str = "GameError"
    category: ErrorCategory = "precondition"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_dict(self) -> dict:
        return {"code": self.code, "category": self.category, "message": self.message}


# --- Precondition violations ---

class AlreadyHidden(GameError):
    code = "AlreadyHidden"


class AlreadyGuessed(GameError):
    code = "AlreadyGuessed"


class NoGuessesLeft(GameError):
    code = "NoGuessesLeft"


class WrongGuesser(GameError):
    code = "WrongGuesser"


class NoActiveGuess(GameError):
    code = "NoActiveGuess"


class NotSettleable(GameError):
    code = "NotSettleable"


class RoundAlreadyWon(GameError):
    code = "RoundAlreadyWon"


# --- Cryptographic mismatches ---

class CommitmentMismatch(GameError):
    code = "CommitmentMismatch"
    category: ErrorCategory = "crypto"


class ProofInvalid(GameError):
    code = "ProofInvalid"
    category: ErrorCategory = "crypto"


class StaleProof(GameError):
    code = "StaleProof"
    category: ErrorCategory = "crypto"


class WitnessMismatch(GameError):
    code = "WitnessMismatch"
    category: ErrorCategory = "crypto"


# --- Domain violations ---

class ValueOutOfRange(GameError):
    code = "ValueOutOfRange"
    category: ErrorCategory = "domain"


# --- Store rejections ---

class ConcurrentModification(GameError):
    code = "ConcurrentModification"
    category: ErrorCategory = "concurrency"


class CircuitError(Exception):
    """Raised while proving when the circuit's own constraints fail."""


class MalformedPrivateInput(CircuitError):
    """Not exactly one ordering predicate held for the private input."""
