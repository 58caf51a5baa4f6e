"""Comparison circuit: three-way clue of a committed value against a guess."""

from typing import Sequence, TypeVar

from guessgame.constants import Clue
from guessgame.errors import MalformedPrivateInput
from guessgame.models.game import ComparisonPublicInput, ComparisonPublicOutput, Opening
from guessgame.utils.field import is_field_element

T = TypeVar("T")


def switch(predicates: Sequence[bool], values: Sequence[T]) -> T:
    """Select the value whose predicate holds; exactly one must hold."""
    if len(predicates) != len(values):
        raise ValueError("predicates and values differ in length")
    chosen = [v for p, v in zip(predicates, values) if p is True]
    if len(chosen) != 1:
        raise MalformedPrivateInput(
            f"expected exactly one true predicate, got {len(chosen)}"
        )
    return chosen[0]


def check(public_input: ComparisonPublicInput, opening: Opening) -> ComparisonPublicOutput:
    """
    Compute the public output of the comparison circuit.

    The hash is derived from the private opening here, so the clue is
    bound to one specific commitment.

    Args:
        public_input: Holds the guessed number
        opening: The hider's private (value, salt)

    Returns:
        Clue of the hidden value relative to the guess, plus its commitment
    """
    if not (is_field_element(opening.value) and is_field_element(opening.salt)):
        raise MalformedPrivateInput("opening is not a pair of field elements")
    guessed = public_input.guessed_number
    value = opening.value
    hidden_less = value < guessed
    hidden_equals = value == guessed
    hidden_greater = value > guessed

    clue = switch(
        [hidden_less, hidden_equals, hidden_greater],
        [Clue.LESS, Clue.EQUALS, Clue.GREATER],
    )
    return ComparisonPublicOutput(clue=clue, hidden_value_hash=opening.hash())
