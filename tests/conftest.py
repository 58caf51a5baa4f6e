"""Shared fixtures for the guess game tests."""

import pytest

from guessgame.models.state import StateStore
from guessgame.services.game_service import GuessGame
from guessgame.services.identity_service import identity_hash
from guessgame.services.player_service import HiderSession, ScoreBook
from guessgame.services.proof_service import AttestationProvingBackend, MockProvingBackend
from guessgame.services.round_logger import RoundLogger

SALT = 123456789


@pytest.fixture
def prover():
    return MockProvingBackend()


@pytest.fixture
def attesting_prover():
    return AttestationProvingBackend("test-secret")


@pytest.fixture
def round_logger(tmp_path):
    return RoundLogger(str(tmp_path / "rounds"))


@pytest.fixture
def game(prover, round_logger):
    return GuessGame(store=StateStore(), prover=prover, round_logger=round_logger)


@pytest.fixture
def score_book():
    return ScoreBook()


@pytest.fixture
def alice():
    return identity_hash("alice")


@pytest.fixture
def bob():
    return identity_hash("bob")


@pytest.fixture
def hider(prover):
    """Hider of the number 9 with a fixed salt."""
    return HiderSession(9, prover, salt=SALT)


@pytest.fixture
def hidden_game(game, hider):
    """A game with a round open on the hider's number."""
    game.hide(hider.opening.value, hider.opening.salt)
    return game

