"""
Input Sanitization - Infrastructure layer guard for SQL identifiers.

Table and column names cannot be bound as query parameters, so any name
that ends up interpolated into SQL text must pass through this module
first. Values are never sanitized here; they always travel as bind
parameters.
"""

import logging
import re
from typing import Any

from erp_db.application.interfaces.exceptions import InvalidIdentifierError

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class InputSanitizer:
    """
    Identifier validation for security purposes.

    Unlike the fallback behaviour of the ORDER BY builder, a rejected
    identifier is always a hard failure.
    """

    @classmethod
    def is_safe_identifier(cls, identifier: Any) -> bool:
        """Check an identifier without raising."""
        return isinstance(identifier, str) and IDENTIFIER_PATTERN.fullmatch(identifier) is not None

    @classmethod
    def sanitize_sql_identifier(cls, identifier: Any) -> str:
        """
        Validate a SQL identifier (table/column name).

        Args:
            identifier: SQL identifier to validate

        Returns:
            The identifier, unchanged

        Raises:
            InvalidIdentifierError: If identifier is unsafe
        """
        if not cls.is_safe_identifier(identifier):
            logger.warning(f"Rejected SQL identifier: {str(identifier)[:50]!r}")
            raise InvalidIdentifierError(identifier)

        return identifier


def safe_identifier(name: Any) -> str:
    """
    Return ``name`` unchanged if it is a safe table or column name.

    Raises:
        InvalidIdentifierError: If ``name`` does not match ``^[a-zA-Z_][a-zA-Z0-9_]*$``
    """
    return InputSanitizer.sanitize_sql_identifier(name)
