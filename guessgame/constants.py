"""Constants and type definitions for the guess game."""

from enum import IntEnum
from typing import Literal

# Type definitions
Outcome = Literal["won", "lost"]
ErrorCategory = Literal["precondition", "crypto", "domain", "concurrency", "circuit"]

# Scalar field of the proof system (Pallas base field). All hashes,
# commitments, salts and ledger keys are elements of this field.
FIELD_MODULUS = 0x40000000000000000000000000000000224698FC094CF91B992D30ED00000001
FIELD_BYTES = 32

# Sentinel for "no round active"; never a legitimate commitment
EMPTY = 0

# Game constants
MAX_GUESSES = 5
VALUE_UPPER_BOUND = 100

# Score ledger: one sibling per key bit
LEDGER_HEIGHT = 255

# Hash domains
DOMAIN_COMMIT = b"guessgame/commit/v1"
DOMAIN_MERKLE_NODE = b"guessgame/merkle-node/v1"
DOMAIN_IDENTITY = b"guessgame/identity/v1"
DOMAIN_PROOF = b"guessgame/proof/v1"

COMPARISON_CIRCUIT_ID = "check-program"


class Clue(IntEnum):
    """Ordering of the hidden value against a guess."""

    NONE = 0
    LESS = 1
    EQUALS = 2
    GREATER = 3
