"""
Unit tests for SQL identifier validation.
"""

# Third-party imports
import pytest

# Local imports
from erp_db.application.interfaces.exceptions import InvalidIdentifierError, RepositoryError
from erp_db.infrastructure.security.input_sanitizer import InputSanitizer, safe_identifier


@pytest.mark.unit
class TestSafeIdentifier:
    """Test safe_identifier."""

    @pytest.mark.parametrize("name", ["users", "_private", "order_lines", "Table1", "a", "_"])
    def test_valid_identifiers_are_returned_unchanged(self, name):
        """Test accepted names pass through untouched."""
        assert safe_identifier(name) == name

    @pytest.mark.parametrize(
        "name",
        [
            "users; DROP TABLE users",
            "1users",
            "",
            "user-name",
            "users.email",
            "name ",
            "naïve",
            "users\n",
        ],
    )
    def test_invalid_identifiers_raise(self, name):
        """Test rejected names raise with the offending value."""
        with pytest.raises(InvalidIdentifierError) as exc_info:
            safe_identifier(name)

        assert exc_info.value.identifier == name
        assert str(exc_info.value).startswith("Invalid identifier: ")

    @pytest.mark.parametrize("name", [None, 42, b"users", ["users"]])
    def test_non_strings_raise(self, name):
        """Test values that are not strings are rejected."""
        with pytest.raises(InvalidIdentifierError):
            safe_identifier(name)

    def test_error_message(self):
        """Test the message names the identifier."""
        with pytest.raises(InvalidIdentifierError, match="Invalid identifier: bad name"):
            safe_identifier("bad name")

    def test_error_is_repository_error(self):
        """Test callers can catch the base repository error."""
        with pytest.raises(RepositoryError):
            safe_identifier("1bad")


@pytest.mark.unit
class TestInputSanitizer:
    """Test InputSanitizer helpers."""

    def test_is_safe_identifier_never_raises(self):
        """Test the predicate form."""
        assert InputSanitizer.is_safe_identifier("users") is True
        assert InputSanitizer.is_safe_identifier("drop table") is False
        assert InputSanitizer.is_safe_identifier(None) is False
