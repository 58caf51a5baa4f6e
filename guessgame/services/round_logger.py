"""Round logging service.

Manages storage and retrieval of settled rounds.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from guessgame.config import settings
from guessgame.models.history import RoundRecord

logger = logging.getLogger(__name__)


class RoundLogger:
    """Service for logging and retrieving rounds."""

    def __init__(self, logs_dir: Optional[str] = None):
        self.logs_dir = Path(logs_dir or settings.rounds_log_dir)
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def _get_round_path(self, round_id: str) -> Path:
        """Get file path for a round."""
        return self.logs_dir / f"{round_id}.json"

    def save_round(self, record: RoundRecord):
        """Save a round record to disk."""
        path = self._get_round_path(record.round_id)
        with open(path, 'w') as f:
            f.write(record.to_json())

    def get_round(self, round_id: str) -> Optional[RoundRecord]:
        """Retrieve a round by ID."""
        path = self._get_round_path(round_id)
        if not path.exists():
            return None

        with open(path, 'r') as f:
            return RoundRecord.from_json(f.read())

    def list_rounds(self, limit: int = 100, offset: int = 0) -> List[dict]:
        """List settled rounds with metadata (newest first)."""
        rounds = []

        for path in self.logs_dir.glob("*.json"):
            try:
                with open(path, 'r') as f:
                    data = json.load(f)
                rounds.append({
                    "round_id": data["round_id"],
                    "started_at": data["started_at"],
                    "settled_at": data.get("settled_at"),
                    "guesser": data.get("guesser"),
                    "total_guesses": data.get("total_guesses", 0),
                    "outcome": data.get("outcome"),
                    "score_delta": data.get("score_delta", 0)
                })
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.warning("Error loading round %s: %s", path.name, e)
                continue

        rounds.sort(key=lambda r: r["settled_at"] or r["started_at"], reverse=True)
        return rounds[offset:offset + limit]

    def get_rounds_count(self) -> int:
        """Get total number of logged rounds."""
        return len(list(self.logs_dir.glob("*.json")))

    def analyze_rounds(self) -> dict:
        """Generate statistics from logged rounds."""
        total = 0
        won = 0
        lost = 0
        total_guesses = 0
        winning_guesses = 0

        for path in self.logs_dir.glob("*.json"):
            try:
                with open(path, 'r') as f:
                    data = json.load(f)
            except (OSError, ValueError):
                continue
            if not isinstance(data, dict) or "round_id" not in data:
                continue

            total += 1
            guesses = data.get("total_guesses", 0)
            total_guesses += guesses

            if data.get("outcome") == "won":
                won += 1
                winning_guesses += guesses
            elif data.get("outcome") == "lost":
                lost += 1

        return {
            "total_rounds": total,
            "rounds_won": won,
            "rounds_lost": lost,
            "total_guesses": total_guesses,
            "avg_guesses_per_round": total_guesses / total if total > 0 else 0,
            "avg_guesses_to_win": winning_guesses / won if won > 0 else 0,
            "win_rate": won / (won + lost) if (won + lost) > 0 else 0
        }
