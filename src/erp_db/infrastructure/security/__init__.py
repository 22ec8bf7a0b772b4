"""
Security module for the database utility layer.

Provides the identifier guard used before any table or column name is
interpolated into SQL text.
"""

from .input_sanitizer import IDENTIFIER_PATTERN, InputSanitizer, safe_identifier

__all__ = ["IDENTIFIER_PATTERN", "InputSanitizer", "safe_identifier"]
