"""
Type converters for typedcfg.

A converter maps a single leaf token to a semantic type and back. Converters
are looked up by type in a registry, so new types can be supported without
touching the accessor.

Example:
    >>> from typedcfg.converters import converter_registry
    >>> converter_registry.get(int).parse("42")
    42
    >>> converter_registry.get(bool).format(True)
    'true'
"""

from __future__ import annotations

import enum
import math
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import numpy as np

from .exceptions import (
    ConversionError,
    ConversionOverflowError,
    ConverterNotFoundError,
)

__all__ = [
    "Converter",
    "ConverterRegistry",
    "converter_registry",
    "register_converter",
    "type_name",
]

_INT_RE = re.compile(r"^[+-]?\d+$")

_TRUE = frozenset({"true", "yes", "on", "1"})
_FALSE = frozenset({"false", "no", "off", "0"})

# Range of the plain ``int`` converter
_INT_INFO = np.iinfo(np.int64)


def type_name(type_: Any) -> str:
    """Return a readable name for a type, for diagnostics."""
    return getattr(type_, "__name__", repr(type_))


@dataclass(frozen=True)
class Converter:
    """
    Text conversion capability for one type.

    Parameters
    ----------
    name
        Type name used in diagnostics
    parse
        Converts a token to the type. Raises ConversionError (or
        ConversionOverflowError) when the token cannot represent a value.
    format
        Converts a value to a token. Never fails.
    """

    name: str
    parse: Callable[[str], Any]
    format: Callable[[Any], str]


def _parse_bounded_int(text: str, low: int, high: int, name: str) -> int:
    if not _INT_RE.match(text):
        msg = f"{text!r} is not an integer"
        raise ConversionError(msg)
    value = int(text)
    if value < low or value > high:
        msg = f"{text} is outside the range of {name} [{low}, {high}]"
        raise ConversionOverflowError(msg)
    return value


def _parse_bounded_float(text: str, max_value: float, name: str) -> float:
    if "_" in text:
        # float() accepts digit separators, the int converters do not
        msg = f"{text!r} is not a number"
        raise ConversionError(msg)
    try:
        value = float(text)
    except ValueError as err:
        msg = f"{text!r} is not a number"
        raise ConversionError(msg) from err
    if math.isfinite(value) and abs(value) > max_value:
        msg = f"{text} is outside the range of {name}"
        raise ConversionOverflowError(msg)
    if math.isinf(value) and "inf" not in text.lower():
        # e.g. "1e999"
        msg = f"{text} is outside the range of {name}"
        raise ConversionOverflowError(msg)
    return value


def _parse_int(text: str) -> int:
    return _parse_bounded_int(text, int(_INT_INFO.min), int(_INT_INFO.max), "int")


def _parse_float(text: str) -> float:
    return _parse_bounded_float(text, float(np.finfo(np.float64).max), "float")


def _parse_bool(text: str) -> bool:
    lowered = text.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    msg = f"{text!r} is not a boolean (expected one of true/false, yes/no, on/off, 1/0)"
    raise ConversionError(msg)


def _format_bool(value: Any) -> str:
    return "true" if value else "false"


def _numpy_int_converter(dtype: type[np.integer]) -> Converter:
    info = np.iinfo(dtype)
    name = dtype.__name__
    low, high = int(info.min), int(info.max)

    def parse(text: str) -> np.integer:
        return dtype(_parse_bounded_int(text, low, high, name))

    return Converter(name=name, parse=parse, format=lambda value: str(int(value)))


def _numpy_float_converter(dtype: type[np.floating]) -> Converter:
    info = np.finfo(dtype)
    name = dtype.__name__
    max_value = float(info.max)

    def parse(text: str) -> np.floating:
        return dtype(_parse_bounded_float(text, max_value, name))

    return Converter(name=name, parse=parse, format=lambda value: repr(float(value)))


def _enum_converter(enum_cls: type[enum.Enum]) -> Converter:
    by_name = {member.name.lower(): member for member in enum_cls}

    def parse(text: str) -> enum.Enum:
        try:
            return by_name[text.lower()]
        except KeyError:
            choices = ", ".join(member.name for member in enum_cls)
            msg = f"{text!r} is not one of: {choices}"
            raise ConversionError(msg) from None

    return Converter(
        name=enum_cls.__name__, parse=parse, format=lambda value: value.name
    )


class ConverterRegistry:
    """
    Registry of converters keyed by type.

    Enum subclasses do not need to be registered; a converter that reads
    member names is created on first use.

    Example:
        >>> registry = ConverterRegistry()
        >>> registry.register(int, Converter("int", int, str))
        >>> registry.get(int).parse("3")
        3
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._registry: dict[Any, Converter] = {}

    def register(self, type_: Any, converter: Converter) -> None:
        """
        Register a converter for a type.

        Parameters
        ----------
        type_
            Type the converter reads and writes.
        converter
            Converter to associate with the type.

        Raises
        ------
        ValueError
            If the type is already registered with a different converter.
        """
        existing = self._registry.get(type_)
        if existing is not None and existing is not converter:
            msg = f"Type '{type_name(type_)}' already has a different converter"
            raise ValueError(msg)
        self._registry[type_] = converter

    def get(self, type_: Any) -> Converter:
        """
        Get the converter for a type.

        Parameters
        ----------
        type_
            Type to look up.

        Returns
        -------
        Converter
            Converter associated with the type.

        Raises
        ------
        ConverterNotFoundError
            If no converter is registered for the type.
        """
        if type_ in self._registry:
            return self._registry[type_]
        if isinstance(type_, type) and issubclass(type_, enum.Enum):
            converter = _enum_converter(type_)
            self._registry[type_] = converter
            return converter
        raise ConverterNotFoundError(type_name(type_), self.list())

    def list(self) -> list[str]:
        """
        List the names of all types with a registered converter.

        Returns
        -------
        list[str]
            Sorted list of type names.
        """
        return sorted(converter.name for converter in self._registry.values())

    def is_registered(self, type_: Any) -> bool:
        """
        Check if a type has a converter.

        Parameters
        ----------
        type_
            Type to check.

        Returns
        -------
        bool
            True if a converter is registered (or can be derived) for the type.
        """
        return type_ in self._registry or (
            isinstance(type_, type) and issubclass(type_, enum.Enum)
        )


def _default_registry() -> ConverterRegistry:
    registry = ConverterRegistry()
    registry.register(str, Converter(name="str", parse=str, format=str))
    registry.register(int, Converter(name="int", parse=_parse_int, format=str))
    registry.register(float, Converter(name="float", parse=_parse_float, format=repr))
    registry.register(
        bool, Converter(name="bool", parse=_parse_bool, format=_format_bool)
    )
    for int_type in (
        np.int8,
        np.int16,
        np.int32,
        np.int64,
        np.uint8,
        np.uint16,
        np.uint32,
        np.uint64,
    ):
        registry.register(int_type, _numpy_int_converter(int_type))
    for float_type in (np.float16, np.float32, np.float64):
        registry.register(float_type, _numpy_float_converter(float_type))
    return registry


# Module-level singleton instance
converter_registry = _default_registry()


def register_converter(
    type_: Any,
    parse: Callable[[str], Any],
    format: Callable[[Any], str] = str,  # noqa: A002
    name: str | None = None,
) -> Converter:
    """
    Register a converter for a type in the module-level registry.

    Parameters
    ----------
    type_
        Type the converter reads and writes.
    parse
        Token to value. Should raise ConversionError on bad input; a plain
        ValueError is also accepted by the accessor.
    format
        Value to token.
    name
        Name used in diagnostics. Defaults to the type's name.

    Returns
    -------
    Converter
        The registered converter.

    Example:
        >>> from pathlib import Path
        >>> register_converter(Path, Path)  # doctest: +ELLIPSIS
        Converter(name='Path', ...)
    """
    converter = Converter(name=name or type_name(type_), parse=parse, format=format)
    converter_registry.register(type_, converter)
    return converter
