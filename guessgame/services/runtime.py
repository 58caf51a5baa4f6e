"""Process-wide game objects shared by the routers."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from guessgame.config import settings
from guessgame.models.state import get_state_store
from guessgame.services.game_service import GuessGame
from guessgame.services.player_service import ScoreBook
from guessgame.services.proof_service import get_proving_backend
from guessgame.services.round_logger import RoundLogger

logger = logging.getLogger(__name__)

# Serializes transitions submitted through the API
game_lock = asyncio.Lock()

_game: Optional[GuessGame] = None
_score_book: Optional[ScoreBook] = None
_round_logger: Optional[RoundLogger] = None


def get_round_logger() -> RoundLogger:
    global _round_logger
    if _round_logger is None:
        _round_logger = RoundLogger(settings.rounds_log_dir)
    return _round_logger


def get_game() -> GuessGame:
    global _game
    if _game is None:
        _game = GuessGame(
            store=get_state_store(settings),
            prover=get_proving_backend(settings),
            round_logger=get_round_logger(),
            max_guesses=settings.max_guesses,
            value_upper_bound=settings.value_upper_bound,
        )
        logger.info("Game ready, score root %s", _game.state().score_root)
    return _game


def score_book_path(state_file: str) -> Optional[str]:
    """Ledger mirror file kept next to the round state file, if any."""
    if not state_file:
        return None
    path = Path(state_file)
    return str(path.with_name(path.stem + ".scores.json"))


def get_score_book() -> ScoreBook:
    global _score_book
    if _score_book is None:
        _score_book = ScoreBook(path=score_book_path(settings.state_file))
        root = get_game().state().score_root
        if _score_book.root != root:
            logger.warning("Score book root %s differs from the ledger root %s", _score_book.root, root)
    return _score_book


def install(game: GuessGame, score_book: ScoreBook, round_logger: RoundLogger):
    """Replace the shared objects (used by tests and embedders)."""
    global _game, _score_book, _round_logger
    _game = game
    _score_book = score_book
    _round_logger = round_logger
