"""Persisted round state with assert-then-set transitions.

A transition reads fields through ``get_and_require_equals``, which records
the value it saw, and buffers its writes with ``set``. On commit the store
re-checks every recorded read under its lock and applies the whole
write-set only if none of them changed. A transition that raises is simply
never committed, so a failed operation leaves no partial state behind.
"""

import json
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from guessgame.constants import EMPTY, Clue
from guessgame.errors import ConcurrentModification
from guessgame.models.game import RoundState

logger = logging.getLogger(__name__)

# Field name -> empty sentinel
STATE_FIELDS: Dict[str, Any] = {
    "hidden_commitment": EMPTY,
    "guessed_number": None,
    "guesser": None,
    "guesses_remaining": 0,
    "last_clue": Clue.NONE,
    "score_root": EMPTY,
}


class Transition:
    """Read-set and write-set of one pending state transition."""

    def __init__(self, store: "StateStore"):
        self._store = store
        self.reads: Dict[str, Any] = {}
        self.writes: Dict[str, Any] = {}

    def get_and_require_equals(self, name: str) -> Any:
        """Read a field and require it to be unchanged at commit time."""
        if name in self.writes:
            return self.writes[name]
        if name not in self.reads:
            self.reads[name] = self._store.get(name)
        return self.reads[name]

    def set(self, name: str, value: Any):
        if name not in STATE_FIELDS:
            raise KeyError(f"unknown state field: {name}")
        self.writes[name] = value


class StateStore:
    """In-memory store for the single global round."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._lock = threading.Lock()
        self._values: Dict[str, Any] = dict(STATE_FIELDS)
        if initial:
            self._values.update({k: v for k, v in initial.items() if k in STATE_FIELDS})
        self._values["last_clue"] = Clue(self._values["last_clue"])

    def get(self, name: str) -> Any:
        if name not in STATE_FIELDS:
            raise KeyError(f"unknown state field: {name}")
        with self._lock:
            return self._values[name]

    def snapshot(self) -> RoundState:
        with self._lock:
            return RoundState(**self._values)

    def commit(self, reads: Dict[str, Any], writes: Dict[str, Any]):
        """Apply ``writes`` if every field in ``reads`` still has the recorded value.

        Raises:
            ConcurrentModification: a field read by the transition changed
        """
        with self._lock:
            for name, seen in reads.items():
                if self._values[name] != seen:
                    raise ConcurrentModification(f"{name} changed during the transition")
            if not writes:
                return
            values = dict(self._values)
            values.update(writes)
            self._persist(values)
            self._values = values

    @contextmanager
    def transition(self) -> Iterator[Transition]:
        """Open a transition; it is committed when the block exits cleanly."""
        tx = Transition(self)
        yield tx
        self.commit(tx.reads, tx.writes)

    def _persist(self, values: Dict[str, Any]):
        """Hook for durable stores; called with the lock held, before
        ``values`` replace the current state."""


class JsonFileStateStore(StateStore):
    """State store that rewrites a JSON file for every transition before applying it."""

    def __init__(self, path: str):
        self.path = Path(path)
        initial = None
        if self.path.exists():
            with open(self.path, "r") as f:
                initial = json.load(f)
            logger.info("Loaded round state from %s", self.path)
        super().__init__(initial)

    def _persist(self, values: Dict[str, Any]):
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        data = dict(values)
        data["last_clue"] = int(data["last_clue"])
        with open(tmp, "w") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, self.path)


def get_state_store(settings) -> StateStore:
    """In-memory store unless ``settings.state_file`` names a file."""
    if settings.state_file:
        return JsonFileStateStore(settings.state_file)
    return StateStore()
