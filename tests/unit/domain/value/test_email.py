"""Unit tests for the Email value object."""

import pytest
from pydantic import ValidationError

from portal.domain.value import Email


class TestEmail:
    """Tests for Email normalization and validation."""

    def test_normalizes_case_and_whitespace(self):
        assert Email("  Alice@Example.COM ").root == "alice@example.com"

    def test_spellings_differing_in_case_are_equal(self):
        """Normalized email is the identity key."""
        assert Email("Bob@Example.com") == Email("bob@example.com")
        assert hash(Email("Bob@Example.com")) == hash(Email("bob@example.com"))

    @pytest.mark.parametrize(
        "raw",
        ["", "no-at-sign", "two@@example.com", "spaces in@example.com", "a@nodot"],
    )
    def test_rejects_malformed(self, raw):
        with pytest.raises(ValidationError):
            Email(raw)

    def test_rejects_overlong(self):
        with pytest.raises(ValidationError):
            Email("a" * 320 + "@example.com")

    def test_str_is_address(self):
        assert str(Email("carol@example.org")) == "carol@example.org"
