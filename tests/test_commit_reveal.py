"""Unit tests for commitments and field hashing."""

import pytest

from guessgame.constants import DOMAIN_COMMIT, DOMAIN_MERKLE_NODE, EMPTY, FIELD_MODULUS
from guessgame.models.game import Opening
from guessgame.utils.commit_reveal import commit, open_commitment, random_salt
from guessgame.utils.field import hash_fields, parse_field, to_field_bytes


class TestHashFields:
    """Test the domain-separated field hash."""

    def test_deterministic(self):
        """Test same inputs give the same digest."""
        assert hash_fields(DOMAIN_COMMIT, 1, 2) == hash_fields(DOMAIN_COMMIT, 1, 2)

    def test_result_in_field(self):
        """Test digests are reduced into the field."""
        for i in range(20):
            assert 0 <= hash_fields(DOMAIN_COMMIT, i, i) < FIELD_MODULUS

    def test_domains_are_separated(self):
        """Test the same elements hash differently under different domains."""
        assert hash_fields(DOMAIN_COMMIT, 1, 2) != hash_fields(DOMAIN_MERKLE_NODE, 1, 2)

    def test_order_matters(self):
        """Test element order is part of the input."""
        assert hash_fields(DOMAIN_COMMIT, 1, 2) != hash_fields(DOMAIN_COMMIT, 2, 1)

    def test_rejects_non_field_elements(self):
        """Test negative, oversized and boolean inputs are refused."""
        for bad in (-1, FIELD_MODULUS, True):
            with pytest.raises(ValueError):
                hash_fields(DOMAIN_COMMIT, bad)

    def test_fixed_width_encoding(self):
        """Test field elements encode to 32 bytes."""
        assert len(to_field_bytes(0)) == 32
        assert len(to_field_bytes(FIELD_MODULUS - 1)) == 32

    def test_parse_field(self):
        """Test decimal and hex parsing."""
        assert parse_field("42") == 42
        assert parse_field("0x2a") == 42
        assert parse_field(" 7 ") == 7
        with pytest.raises(ValueError):
            parse_field(str(FIELD_MODULUS))
        with pytest.raises(ValueError):
            parse_field("-3")


class TestCommitment:
    """Test commit and open."""

    def test_open_accepts_own_commitment(self):
        """Test every value in range opens its own commitment."""
        salt = random_salt()
        for value in range(100):
            assert open_commitment(commit(value, salt), value, salt)

    def test_open_rejects_other_value(self):
        """Test a different value does not open the commitment."""
        salt = random_salt()
        c = commit(9, salt)
        assert not open_commitment(c, 8, salt)
        assert not open_commitment(c, 10, salt)

    def test_open_rejects_other_salt(self):
        """Test a different salt does not open the commitment."""
        c = commit(9, 1000)
        assert not open_commitment(c, 9, 1001)

    def test_open_rejects_malformed_inputs(self):
        """Test non-field inputs simply fail to open."""
        c = commit(9, 1000)
        assert not open_commitment(c, -9, 1000)
        assert not open_commitment(-1, 9, 1000)

    def test_commitment_never_empty(self):
        """Test commitments do not collide with the empty sentinel."""
        for value in range(100):
            assert commit(value, value * 7919) != EMPTY

    def test_salt_blinds_value(self):
        """Test two salts give two commitments for one value."""
        assert commit(5, random_salt()) != commit(5, random_salt())

    def test_opening_hash_matches_commit(self):
        """Test Opening.hash is commit(value, salt)."""
        opening = Opening(value=9, salt=77)
        assert opening.hash() == commit(9, 77)

    def test_opening_repr_hides_value(self):
        """Test the opening does not print its secret."""
        opening = Opening(value=9, salt=77)
        assert "9" not in repr(opening)
        assert "77" not in repr(opening)

    def test_random_salt_opening(self):
        """Test random-salt openings use fresh salts."""
        a = Opening.with_random_salt(3)
        b = Opening.with_random_salt(3)
        assert a.value == b.value == 3
        assert a.salt != b.salt
