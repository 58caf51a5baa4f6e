"""Game state machine for the verifiable guess game.

This module handles the round lifecycle:
- Hiding a committed number
- Guessing, bounded by the guess counter and locked to one guesser
- Checking a guess with a comparison proof (three-way clue)
- Revealing the opening directly (win/lose without clues)
- Settling the round into the authenticated score ledger

Every operation runs as one store transition: it reads through
``get_and_require_equals``, buffers its writes and either commits all of
them or raises a ``GameError`` with nothing applied.
"""

import functools
import logging
import secrets
import time
from typing import Optional

from guessgame.constants import (
    COMPARISON_CIRCUIT_ID,
    EMPTY,
    MAX_GUESSES,
    VALUE_UPPER_BOUND,
    Clue,
)
from guessgame.errors import (
    AlreadyGuessed,
    AlreadyHidden,
    CommitmentMismatch,
    GameError,
    NoActiveGuess,
    NoGuessesLeft,
    NotSettleable,
    ProofInvalid,
    RoundAlreadyWon,
    StaleProof,
    ValueOutOfRange,
    WrongGuesser,
)
from guessgame.models.game import ComparisonProof, Opening, RoundState, Settlement
from guessgame.models.history import RoundRecord
from guessgame.models.state import StateStore, Transition
from guessgame.services.proof_service import MockProvingBackend, ProvingBackend
from guessgame.services.round_logger import RoundLogger
from guessgame.utils.commit_reveal import commit, open_commitment
from guessgame.utils.field import is_field_element
from guessgame.utils.merkle_map import MerkleWitness, empty_root, verify_and_compute

logger = logging.getLogger(__name__)


def _short(x: Optional[int]) -> str:
    return "-" if x is None else f"{x:064x}"[:12]


def _rejections_logged(op: str):
    """Log a rejected transition before re-raising it."""
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except GameError as e:
                logger.warning("%s rejected: %s (%s)", op, e.code, e.message)
                raise
        return wrapper
    return decorator


class GuessGame:
    """The single global round and the score ledger root."""

    def __init__(
        self,
        store: Optional[StateStore] = None,
        prover: Optional[ProvingBackend] = None,
        round_logger: Optional[RoundLogger] = None,
        max_guesses: int = MAX_GUESSES,
        value_upper_bound: int = VALUE_UPPER_BOUND,
    ):
        self.store = store if store is not None else StateStore()
        self.prover = prover if prover is not None else MockProvingBackend()
        self.round_logger = round_logger
        self.max_guesses = max_guesses
        self.value_upper_bound = value_upper_bound
        self._record: Optional[RoundRecord] = None

        # A fresh ledger maps every player to 0
        with self.store.transition() as tx:
            if tx.get_and_require_equals("score_root") == EMPTY:
                tx.set("score_root", empty_root())

    def state(self) -> RoundState:
        """Current round snapshot."""
        return self.store.snapshot()

    @_rejections_logged("hide")
    def hide(self, value: int, salt: int) -> int:
        """Commit to a hidden number and open a round.

        Args:
            value: Hidden number in [0, value_upper_bound)
            salt: Blinding field element

        Returns:
            The published commitment
        """
        with self.store.transition() as tx:
            if tx.get_and_require_equals("hidden_commitment") != EMPTY:
                raise AlreadyHidden("Number is already hidden")
            if not (is_field_element(value) and value < self.value_upper_bound):
                raise ValueOutOfRange(f"Value should be in [0, {self.value_upper_bound})")
            if not is_field_element(salt):
                raise ValueOutOfRange("Salt should be a field element")

            commitment = commit(value, salt)
            if commitment == EMPTY:
                raise ValueOutOfRange("Salt yields the empty commitment")

            tx.set("hidden_commitment", commitment)
            tx.set("guessed_number", None)
            tx.set("guesser", None)
            tx.set("guesses_remaining", self.max_guesses)
            tx.set("last_clue", Clue.NONE)

        self._record = RoundRecord(
            round_id=secrets.token_hex(8),
            hidden_commitment=str(commitment),
            started_at=time.time(),
        )
        logger.info("Number hidden: commitment=%s round=%s", _short(commitment), self._record.round_id)
        return commitment

    @_rejections_logged("guess")
    def guess(self, number: int, caller: int) -> int:
        """Submit a guess as ``caller`` (an identity hash).

        Returns:
            Guesses remaining after this one
        """
        if not is_field_element(number):
            raise ValueOutOfRange("Guess should be a field element")
        if not is_field_element(caller):
            raise ValueOutOfRange("Caller should be an identity hash")

        with self.store.transition() as tx:
            if tx.get_and_require_equals("guessed_number") is not None:
                raise AlreadyGuessed("You have already guessed number")
            if tx.get_and_require_equals("last_clue") == Clue.EQUALS:
                raise RoundAlreadyWon("Round is won; settle it before guessing again")
            remaining = tx.get_and_require_equals("guesses_remaining")
            if remaining <= 0:
                raise NoGuessesLeft("No guesses left in this round")
            guesser = tx.get_and_require_equals("guesser")
            if guesser is not None and guesser != caller:
                raise WrongGuesser("Another player is guessing this round")

            tx.set("guessed_number", number)
            tx.set("guesser", caller)
            tx.set("guesses_remaining", remaining - 1)

        self._current_record().add_guess(number, str(caller), time.time())
        logger.info("Guess %d by %s, %d left", number, _short(caller), remaining - 1)
        return remaining - 1

    @_rejections_logged("check_value")
    def check_value(self, proof: ComparisonProof) -> Clue:
        """Accept a comparison proof for the pending guess and record its clue."""
        with self.store.transition() as tx:
            guessed = tx.get_and_require_equals("guessed_number")
            if guessed is None:
                raise NoActiveGuess("There is no guess to check")
            if not self.prover.verify(COMPARISON_CIRCUIT_ID, proof):
                raise ProofInvalid("Comparison proof does not verify")

            hidden = tx.get_and_require_equals("hidden_commitment")
            if proof.public_input.guessed_number != guessed:
                raise StaleProof("Proof is for a different guess")
            if proof.public_output.hidden_value_hash != hidden:
                raise StaleProof("Proof is for a different hidden number")

            clue = proof.public_output.clue
            if clue not in (Clue.LESS, Clue.EQUALS, Clue.GREATER):
                raise ProofInvalid("Proof carries no clue")

            tx.set("last_clue", clue)
            tx.set("guessed_number", None)

        self._current_record().set_last_clue(clue.name)
        logger.info("Guess %d checked: %s", guessed, clue.name)
        return clue

    @_rejections_logged("reveal")
    def reveal(self, opening: Opening, score: int, witness: MerkleWitness) -> Optional[Settlement]:
        """Open the commitment against the pending guess.

        A correct guess credits the guesser and ends the round. A miss
        frees the guess slot so the guesser can try again, and ends the
        round with no credit once the guesses are used up.

        Returns:
            The settlement if the round ended, else None
        """
        with self.store.transition() as tx:
            hidden = tx.get_and_require_equals("hidden_commitment")
            if hidden == EMPTY or not open_commitment(hidden, opening.value, opening.salt):
                raise CommitmentMismatch("It is not hidden number")
            guessed = tx.get_and_require_equals("guessed_number")
            if guessed is None:
                raise NoActiveGuess("There is no guess to reveal against")

            won = opening.value == guessed
            if not won and tx.get_and_require_equals("guesses_remaining") > 0:
                tx.set("guessed_number", None)
                settlement = None
            else:
                settlement = self._settle(tx, score, witness, 1 if won else 0)

        if settlement is None:
            logger.info("Reveal: guess %d missed, round continues", guessed)
        else:
            self._finish_round(settlement, "reveal")
        return settlement

    @_rejections_logged("update_score")
    def update_score(self, score: int, witness: MerkleWitness) -> Settlement:
        """Settle a won or exhausted round into the score ledger.

        Args:
            score: The guesser's current score
            witness: Ledger witness for the guesser against the current root

        Returns:
            The applied settlement (delta 1 on a win, 0 otherwise)
        """
        with self.store.transition() as tx:
            if tx.get_and_require_equals("hidden_commitment") == EMPTY:
                raise NotSettleable("No round is active")
            if tx.get_and_require_equals("guessed_number") is not None:
                raise NotSettleable("A guess is still waiting for its check")
            clue = tx.get_and_require_equals("last_clue")
            remaining = tx.get_and_require_equals("guesses_remaining")
            if clue != Clue.EQUALS and remaining > 0:
                raise NotSettleable("Round is neither won nor out of guesses")

            settlement = self._settle(tx, score, witness, 1 if clue == Clue.EQUALS else 0)

        self._finish_round(settlement, "check")
        return settlement

    def _settle(self, tx: Transition, score: int, witness: MerkleWitness, delta: int) -> Settlement:
        """Move the guesser's score by ``delta`` and clear the round."""
        guesser = tx.get_and_require_equals("guesser")
        if guesser is None:
            raise NotSettleable("Nobody guessed this round")
        if not is_field_element(score):
            raise ValueOutOfRange("Score should be a field element")
        if not is_field_element(score + delta):
            raise ValueOutOfRange("Score cannot be raised any further")

        root = tx.get_and_require_equals("score_root")
        new_root = verify_and_compute(root, witness.key, score, witness, score + delta)
        if witness.key != guesser:
            raise WrongGuesser("Witness for wrong user")

        tx.set("score_root", new_root)
        tx.set("hidden_commitment", EMPTY)
        tx.set("guessed_number", None)
        tx.set("guesser", None)
        tx.set("guesses_remaining", 0)
        tx.set("last_clue", Clue.NONE)
        return Settlement(player=guesser, previous_score=score, new_score=score + delta,
                          score_root=new_root)

    def _current_record(self) -> RoundRecord:
        if self._record is None:
            # Round opened before this process started
            state = self.store.snapshot()
            self._record = RoundRecord(
                round_id=secrets.token_hex(8),
                hidden_commitment=str(state.hidden_commitment),
                started_at=time.time(),
            )
        return self._record

    def _finish_round(self, settlement: Settlement, settled_by: str):
        record = self._current_record()
        record.settle(
            outcome="won" if settlement.delta > 0 else "lost",
            settled_by=settled_by,
            score_delta=settlement.delta,
            score_root=str(settlement.score_root),
            settled_at=time.time(),
        )
        self._record = None
        logger.info(
            "Round %s settled by %s: player %s %d -> %d",
            record.round_id, settled_by, _short(settlement.player),
            settlement.previous_score, settlement.new_score,
        )
        if self.round_logger is not None:
            try:
                self.round_logger.save_round(record)
            except OSError as e:
                logger.error("Error saving round %s: %s", record.round_id, e)
