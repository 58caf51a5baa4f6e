"""Sparse Merkle map used as the authenticated score ledger.

Keys are field elements; bit ``i`` of the key (least significant first)
says whether the path is the right child at level ``i``. Leaves hold the
raw value, empty leaves are 0, and an inner node is
``H(DOMAIN_MERKLE_NODE, left, right)``. The map with every key at 0 has
root ``empty_root()``.

Witnesses are plain values. The ledger logic only needs the pure
functions ``compute_root``/``verify_and_compute``; ``SparseMerkleMap`` is
the off-chain structure players use to build witnesses.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterator, Tuple

from guessgame.constants import DOMAIN_MERKLE_NODE, LEDGER_HEIGHT
from guessgame.errors import WitnessMismatch
from guessgame.utils.field import hash_fields, is_field_element


def merkle_parent(left: int, right: int) -> int:
    return hash_fields(DOMAIN_MERKLE_NODE, left, right)


@lru_cache(maxsize=None)
def zero_hashes(height: int = LEDGER_HEIGHT) -> Tuple[int, ...]:
    """Roots of empty subtrees, indexed by level (0 = leaf)."""
    zeros = [0]
    for _ in range(height):
        zeros.append(merkle_parent(zeros[-1], zeros[-1]))
    return tuple(zeros)


def empty_root(height: int = LEDGER_HEIGHT) -> int:
    return zero_hashes(height)[height]


@dataclass(frozen=True)
class MerkleWitness:
    """Path witness for one key: its sibling hashes from leaf to root."""
    key: int
    siblings: Tuple[int, ...]

    def to_dict(self) -> dict:
        return {"key": str(self.key), "siblings": [str(s) for s in self.siblings]}

    @classmethod
    def from_dict(cls, data: dict) -> "MerkleWitness":
        return cls(key=int(data["key"]), siblings=tuple(int(s) for s in data["siblings"]))


def compute_root(key: int, value: int, witness: MerkleWitness) -> int:
    """Root of the map in which ``key`` holds ``value`` and the rest of the
    path is described by ``witness``."""
    if not 0 <= key < 1 << len(witness.siblings):
        raise WitnessMismatch("key does not fit the witness height")
    node = value
    for level, sibling in enumerate(witness.siblings):
        if (key >> level) & 1:
            node = merkle_parent(sibling, node)
        else:
            node = merkle_parent(node, sibling)
    return node


def root_after(key: int, value: int, witness: MerkleWitness) -> int:
    """Alias of ``compute_root`` reading as "the root once key = value"."""
    return compute_root(key, value, witness)


def verify_and_compute(
    root: int,
    key: int,
    current_value: int,
    witness: MerkleWitness,
    new_value: int,
    height: int = LEDGER_HEIGHT,
) -> int:
    """
    Verify ``key -> current_value`` under ``root`` and return the root after
    setting ``key -> new_value``.

    Both roots come from the same witness in one pass, so a witness built
    against any other root is rejected.

    Raises:
        WitnessMismatch: malformed witness, or the recomputed root differs
    """
    if len(witness.siblings) != height:
        raise WitnessMismatch(f"witness has {len(witness.siblings)} siblings, expected {height}")
    if witness.key != key:
        raise WitnessMismatch("witness was built for a different key")
    for v in (current_value, new_value, *witness.siblings):
        if not is_field_element(v):
            raise WitnessMismatch("witness contains a non-field value")
    if compute_root(key, current_value, witness) != root:
        raise WitnessMismatch("witness does not match the current root")
    return compute_root(key, new_value, witness)


class SparseMerkleMap:
    """Mutable sparse Merkle map keeping only non-empty nodes."""

    def __init__(self, height: int = LEDGER_HEIGHT):
        self.height = height
        self._zeros = zero_hashes(height)
        self._nodes: Dict[Tuple[int, int], int] = {}

    def _node(self, level: int, index: int) -> int:
        return self._nodes.get((level, index), self._zeros[level])

    def _check_key(self, key: int):
        if not (0 <= key < 1 << self.height):
            raise ValueError(f"key out of range for height {self.height}")

    def get(self, key: int) -> int:
        self._check_key(key)
        return self._node(0, key)

    def set(self, key: int, value: int):
        """Set ``key`` to ``value`` and rehash its path."""
        self._check_key(key)
        if not is_field_element(value):
            raise ValueError(f"not a field element: {value!r}")
        index = key
        node = value
        for level in range(self.height):
            if node == self._zeros[level]:
                self._nodes.pop((level, index), None)
            else:
                self._nodes[(level, index)] = node
            sibling = self._node(level, index ^ 1)
            if index & 1:
                node = merkle_parent(sibling, node)
            else:
                node = merkle_parent(node, sibling)
            index >>= 1
        if node == self._zeros[self.height]:
            self._nodes.pop((self.height, 0), None)
        else:
            self._nodes[(self.height, 0)] = node

    def get_root(self) -> int:
        return self._node(self.height, 0)

    def get_witness(self, key: int) -> MerkleWitness:
        self._check_key(key)
        siblings = []
        index = key
        for level in range(self.height):
            siblings.append(self._node(level, index ^ 1))
            index >>= 1
        return MerkleWitness(key=key, siblings=tuple(siblings))

    def items(self) -> Iterator[Tuple[int, int]]:
        """Non-empty leaves as ``(key, value)`` pairs."""
        for (level, index), value in self._nodes.items():
            if level == 0:
                yield index, value

    def __len__(self) -> int:
        return sum(1 for level, _ in self._nodes if level == 0)
