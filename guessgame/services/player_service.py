"""Player-side helpers.

``HiderSession`` keeps the hider's opening private and authors comparison
proofs for each guess. ``ScoreBook`` is the off-chain mirror of the score
ledger that players use to look up scores and build witnesses.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from guessgame.constants import COMPARISON_CIRCUIT_ID
from guessgame.models.game import ComparisonProof, ComparisonPublicInput, Opening, Settlement
from guessgame.services.proof_service import ProvingBackend
from guessgame.utils.merkle_map import MerkleWitness, SparseMerkleMap

logger = logging.getLogger(__name__)


class HiderSession:
    """The hider's view of one round."""

    def __init__(self, value: int, prover: ProvingBackend, salt: Optional[int] = None):
        self.opening = Opening.with_random_salt(value) if salt is None else Opening(value, salt)
        self.prover = prover

    @property
    def commitment(self) -> int:
        return self.opening.hash()

    def prove_clue(self, guessed_number: int) -> ComparisonProof:
        """Prove how the hidden number compares to ``guessed_number``."""
        return self.prover.prove(
            COMPARISON_CIRCUIT_ID,
            ComparisonPublicInput(guessed_number=guessed_number),
            self.opening,
        )


class ScoreBook:
    """Mirror of the authenticated score map.

    With a ``path`` the non-empty scores are kept in a JSON file, rewritten
    on every ``apply`` and replayed on load so witnesses survive a restart.
    """

    def __init__(self, scores: Optional[SparseMerkleMap] = None, path: Optional[str] = None):
        self.scores = scores if scores is not None else SparseMerkleMap()
        self.path = Path(path) if path else None
        if self.path is not None and self.path.exists():
            self._load()

    @property
    def root(self) -> int:
        return self.scores.get_root()

    def score_of(self, player: int) -> int:
        return self.scores.get(player)

    def witness_for(self, player: int) -> MerkleWitness:
        return self.scores.get_witness(player)

    def apply(self, settlement: Settlement) -> int:
        """Mirror a settlement; returns the new local root."""
        previous = self.scores.get(settlement.player)
        self.scores.set(settlement.player, settlement.new_score)
        if self.path is not None:
            try:
                self._save()
            except OSError:
                self.scores.set(settlement.player, previous)
                raise
        return self.root

    def _load(self):
        with open(self.path, "r") as f:
            data = json.load(f)
        for player, score in data["scores"].items():
            self.scores.set(int(player), int(score))
        if str(self.root) != data["root"]:
            raise ValueError(f"score book {self.path} does not rebuild its saved root")
        logger.info("Loaded %d scores from %s", len(self.scores), self.path)

    def _save(self):
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        data = {
            "root": str(self.root),
            "scores": {str(player): str(score) for player, score in self.scores.items()},
        }
        with open(tmp, "w") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, self.path)
