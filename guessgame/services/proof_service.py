"""Proving backends for the comparison circuit.

The game never proves anything itself. It talks to a ``ProvingBackend``
that can run the circuit over a private opening and later verify the
resulting proof:

- ``MockProvingBackend`` runs the circuit and emits an empty proof. Any
  well-formed proof for the right circuit verifies (proofs disabled).
- ``AttestationProvingBackend`` signs the public input and output with an
  HMAC key held by the proving service; verification recomputes the tag.
"""

import hashlib
import hmac
import json
import logging
from typing import Protocol

from guessgame.constants import COMPARISON_CIRCUIT_ID, DOMAIN_PROOF
from guessgame.models.game import ComparisonProof, ComparisonPublicInput, Opening
from guessgame.utils.comparison import check

logger = logging.getLogger(__name__)

CIRCUITS = {COMPARISON_CIRCUIT_ID: check}

# Environments where unchecked proofs are acceptable
MOCK_ENVS = ("dev", "test")


class ProvingBackend(Protocol):
    """External prove/verify capability."""

    def prove(self, circuit_id: str, public_input: ComparisonPublicInput,
              private_input: Opening) -> ComparisonProof:
        ...

    def verify(self, circuit_id: str, proof: ComparisonProof) -> bool:
        ...


def _run_circuit(circuit_id: str, public_input: ComparisonPublicInput, private_input: Opening):
    try:
        circuit = CIRCUITS[circuit_id]
    except KeyError:
        raise ValueError(f"unknown circuit: {circuit_id}") from None
    return circuit(public_input, private_input)


def proof_statement(proof: ComparisonProof) -> bytes:
    """Canonical encoding of everything a proof attests to."""
    payload = {
        "circuit_id": proof.circuit_id,
        "guessed_number": str(proof.public_input.guessed_number),
        "clue": int(proof.public_output.clue),
        "hidden_value_hash": str(proof.public_output.hidden_value_hash),
    }
    return DOMAIN_PROOF + json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")


class MockProvingBackend:
    """Runs the circuit but produces no cryptographic proof."""

    def prove(self, circuit_id: str, public_input: ComparisonPublicInput,
              private_input: Opening) -> ComparisonProof:
        output = _run_circuit(circuit_id, public_input, private_input)
        return ComparisonProof(public_input=public_input, public_output=output,
                               circuit_id=circuit_id)

    def verify(self, circuit_id: str, proof: ComparisonProof) -> bool:
        return proof.circuit_id == circuit_id and circuit_id in CIRCUITS


class AttestationProvingBackend:
    """Proofs are HMAC-SHA256 tags over the public statement."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("attestation backend needs a non-empty secret")
        self._key = secret.encode("utf-8")

    def _tag(self, proof: ComparisonProof) -> bytes:
        return hmac.new(self._key, proof_statement(proof), hashlib.sha256).digest()

    def prove(self, circuit_id: str, public_input: ComparisonPublicInput,
              private_input: Opening) -> ComparisonProof:
        output = _run_circuit(circuit_id, public_input, private_input)
        unsigned = ComparisonProof(public_input=public_input, public_output=output,
                                   circuit_id=circuit_id)
        return ComparisonProof(public_input=public_input, public_output=output,
                               proof=self._tag(unsigned), circuit_id=circuit_id)

    def verify(self, circuit_id: str, proof: ComparisonProof) -> bool:
        if proof.circuit_id != circuit_id:
            return False
        return hmac.compare_digest(self._tag(proof), proof.proof)


def get_proving_backend(settings) -> ProvingBackend:
    """Build the backend named by ``settings.proving_backend``.

    Raises:
        ValueError: unknown backend, or the mock requested outside dev/test
    """
    if settings.proving_backend == "attestation":
        return AttestationProvingBackend(settings.prover_secret)
    if settings.proving_backend == "mock":
        if settings.app_env not in MOCK_ENVS:
            raise ValueError(
                f"mock proving backend is not allowed in app_env={settings.app_env!r}"
            )
        logger.warning("Using mock proving backend; proofs are not checked")
        return MockProvingBackend()
    raise ValueError(f"unknown proving backend: {settings.proving_backend}")
