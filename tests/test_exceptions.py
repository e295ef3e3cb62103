"""
Unit tests for typedcfg.exceptions module.

Tests messages, attributes and the exception hierarchy.
"""

from __future__ import annotations

from typedcfg.exceptions import (
    ConfigError,
    ConversionError,
    ConversionOverflowError,
    ConverterNotFoundError,
    InvalidKeyError,
    MalformedStructureError,
    MissingKeyError,
)


class TestHierarchy:
    """Tests for the exception hierarchy."""

    def test_config_errors(self):
        """Public errors derive from ConfigError."""
        for exc_cls in (
            MissingKeyError,
            InvalidKeyError,
            MalformedStructureError,
            ConverterNotFoundError,
        ):
            assert issubclass(exc_cls, ConfigError)

    def test_builtin_bases(self):
        """Errors can be caught by the matching builtin exception."""
        assert issubclass(MissingKeyError, KeyError)
        assert issubclass(InvalidKeyError, ValueError)
        assert issubclass(ConverterNotFoundError, TypeError)
        assert issubclass(ConversionOverflowError, ConversionError)
        assert issubclass(ConversionError, ValueError)


class TestMessages:
    """Tests for exception messages and attributes."""

    def test_missing_key(self):
        """MissingKeyError names key and block without KeyError quoting."""
        err = MissingKeyError("steps", "solver")
        assert str(err) == "Missing key 'steps' in configuration block 'solver'"
        assert (err.key, err.block) == ("steps", "solver")

    def test_invalid_key(self):
        """InvalidKeyError names key, block, raw text, type and reason."""
        err = InvalidKeyError(
            "steps", "solver", "ten", "int", "'ten' is not an integer"
        )
        message = str(err)
        assert "'steps'" in message
        assert "'solver'" in message
        assert "'ten'" in message
        assert "as int" in message
        assert "is not an integer" in message
        assert err.reason == "'ten' is not an integer"

    def test_malformed_structure(self):
        """MalformedStructureError includes the position."""
        err = MalformedStructureError("[1", "unclosed '['", 0)
        assert str(err) == "Malformed value '[1': unclosed '[' at position 0"

    def test_converter_not_found_sorted(self):
        """ConverterNotFoundError lists registered types alphabetically."""
        err = ConverterNotFoundError("complex", ["str", "int"])
        assert str(err).endswith("Registered types: 'int', 'str'")
        assert err.available == ["str", "int"]
