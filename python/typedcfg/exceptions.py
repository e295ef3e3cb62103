"""
Custom exceptions for typedcfg.

This module defines the exception hierarchy for configuration errors:
- ConfigError: Base exception for all config errors
- MissingKeyError: Requested key has no entry in the configuration block
- InvalidKeyError: Key is present but its value cannot be read as the requested type
- MalformedStructureError: Raw text does not follow the value grammar
- ConverterNotFoundError: No converter is registered for a type
- ConversionError / ConversionOverflowError: Raised by converters for a single token
"""

from __future__ import annotations

__all__ = [
    "ConfigError",
    "ConversionError",
    "ConversionOverflowError",
    "ConverterNotFoundError",
    "InvalidKeyError",
    "MalformedStructureError",
    "MissingKeyError",
]


class ConfigError(Exception):
    """Base exception for all configuration errors."""

    pass


class MissingKeyError(ConfigError, KeyError):
    """
    Raised when a requested key has no entry in the configuration block.

    Parameters
    ----------
    key
        The key that was looked up.
    block
        Name of the configuration block the key was looked up in.
    """

    def __init__(self, key: str, block: str) -> None:
        """
        Initialize the exception.

        Parameters
        ----------
        key
            Key that was not found.
        block
            Owning configuration block name.
        """
        message = f"Missing key '{key}' in configuration block '{block}'"
        super().__init__(message)
        self.key = key
        self.block = block

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class InvalidKeyError(ConfigError, ValueError):
    """
    Raised when a key is present but its raw text cannot be read as the requested type.

    This covers malformed scalars, a failing array or matrix element, numeric
    overflow and values whose structure does not match the requested shape.

    Parameters
    ----------
    key
        The key that was looked up.
    block
        Name of the configuration block the key was looked up in.
    raw
        The offending raw text (the whole value or a single element).
    type_name
        Name of the requested type.
    reason
        Human-readable description of the underlying failure.
    """

    def __init__(
        self, key: str, block: str, raw: str, type_name: str, reason: str
    ) -> None:
        """
        Initialize the exception.

        Parameters
        ----------
        key
            Key whose value is invalid.
        block
            Owning configuration block name.
        raw
            Offending raw text.
        type_name
            Requested type name.
        reason
            Underlying failure reason.
        """
        message = (
            f"Invalid value {raw!r} for key '{key}' in configuration block "
            f"'{block}': cannot read as {type_name} ({reason})"
        )
        super().__init__(message)
        self.key = key
        self.block = block
        self.raw = raw
        self.type_name = type_name
        self.reason = reason


class MalformedStructureError(ConfigError, ValueError):
    """
    Raised when raw text does not follow the bracket/comma value grammar.

    Parameters
    ----------
    raw
        The text being parsed.
    reason
        What was wrong with it.
    position
        Zero-based character offset where the problem was detected.
    """

    def __init__(self, raw: str, reason: str, position: int) -> None:
        """
        Initialize the exception.

        Parameters
        ----------
        raw
            Text being parsed.
        reason
            Description of the structural problem.
        position
            Character offset of the problem.
        """
        message = f"Malformed value {raw!r}: {reason} at position {position}"
        super().__init__(message)
        self.raw = raw
        self.reason = reason
        self.position = position


class ConverterNotFoundError(ConfigError, TypeError):
    """
    Raised when no converter is registered for a requested type.

    Parameters
    ----------
    type_name
        The type name that was looked up.
    available
        Names of the types that do have converters.
    """

    def __init__(self, type_name: str, available: list[str]) -> None:
        """
        Initialize the exception.

        Parameters
        ----------
        type_name
            Type name that was not found.
        available
            List of registered type names.
        """
        if not available:
            message = (
                f"No converter for type '{type_name}'. No converters are registered."
            )
        else:
            available_str = ", ".join(f"'{c}'" for c in sorted(available))
            message = (
                f"No converter for type '{type_name}'. "
                f"Registered types: {available_str}"
            )
        super().__init__(message)
        self.type_name = type_name
        self.available = available


class ConversionError(ValueError):
    """Raised by a converter when a token cannot represent the target type."""

    pass


class ConversionOverflowError(ConversionError):
    """Raised by a numeric converter when a value is outside the target type's range."""

    pass
