"""
Typed access to a configuration block.

:class:`TypedAccessor` reads raw text from a store, parses it into a node
tree and converts the leaves to the requested type. Writing goes the other
way: values are formatted by the type's converter and stored as raw text.

Every failure reaches the caller as one of two exceptions:

- :class:`~typedcfg.exceptions.MissingKeyError` if the key is absent and no
  default was given
- :class:`~typedcfg.exceptions.InvalidKeyError` if the key is present but its
  value cannot be read as the requested type or shape

Example:
    >>> from typedcfg import DictStore, TypedAccessor
    >>> cfg = TypedAccessor(DictStore("grid", {"shape": "[1,2],[3,4,5]"}))
    >>> cfg.get_matrix("shape", int)
    [[1, 2], [3, 4, 5]]
    >>> cfg.get("cells", int, default=10)
    10
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import MISSING
from typing import Any, TypeVar

from .converters import Converter, ConverterRegistry, converter_registry
from .exceptions import (
    ConversionOverflowError,
    InvalidKeyError,
    MalformedStructureError,
    MissingKeyError,
)
from .parser import CLOSE, OPEN, SEPARATOR, Node, parse_value, unwritable_reason
from .store import ConfigStore

logger = logging.getLogger(__name__)

__all__ = ["TypedAccessor"]

T = TypeVar("T")

MATRIX_DIMENSION_REASON = "matrix has less than two dimensions"
NESTED_ELEMENT_REASON = "element is a nested list"


class _ValueFailure(Exception):
    """A single token or row that could not be read."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(reason)
        self.raw = raw
        self.reason = reason


def _convert(node: Node, converter: Converter) -> Any:
    if not node.is_leaf:
        raise _ValueFailure(node.value, NESTED_ELEMENT_REASON)
    try:
        return converter.parse(node.value)
    except ConversionOverflowError as err:
        raise _ValueFailure(node.value, f"overflow: {err}") from err
    except ValueError as err:
        raise _ValueFailure(node.value, str(err)) from err


def _read_scalar(node: Node, converter: Converter) -> Any:
    # The whole value is the token, whatever its structure
    return _convert(Node(value=node.value), converter)


def _elements(node: Node) -> list[Node]:
    if node.is_leaf:
        return [node] if node.value else []
    return node.children


def _read_array(node: Node, converter: Converter) -> list[Any]:
    return [_convert(element, converter) for element in _elements(node)]


def _matrix_rows(node: Node) -> list[Node]:
    if (
        node.is_list
        and node.children
        and node.value.startswith(OPEN)
        and all(child.is_leaf for child in node.children)
    ):
        # "[1,2]" is a single bracketed row, not two scalar rows
        return [node]
    return _elements(node)


def _read_matrix(node: Node, converter: Converter) -> list[list[Any]]:
    rows = _matrix_rows(node)
    for row in rows:
        if not row.children:
            raise _ValueFailure(node.value, MATRIX_DIMENSION_REASON)
    return [[_convert(element, converter) for element in row.children] for row in rows]


class TypedAccessor:
    """
    Typed reader and writer for one configuration block.

    Parameters
    ----------
    store
        Store holding the block's raw text entries
    converters
        Registry used to look up converters. Defaults to the module-level
        registry.
    """

    def __init__(
        self, store: ConfigStore, converters: ConverterRegistry | None = None
    ) -> None:
        self._store = store
        self._converters = converters if converters is not None else converter_registry

    @property
    def name(self) -> str:
        """Name of the underlying configuration block."""
        return self._store.name

    def has(self, key: str) -> bool:
        """Return True if the key has an entry."""
        return self._store.has(key)

    # -- Reading ---------------------------------------------------------

    def get(self, key: str, type_: type[T], default: Any = MISSING) -> T:
        """
        Read a scalar value.

        Parameters
        ----------
        key
            Key to read.
        type_
            Type to convert the value to.
        default
            Returned if the key is absent. Does not apply to present but
            invalid values.

        Returns
        -------
        T
            The converted value.

        Raises
        ------
        MissingKeyError
            If the key is absent and no default was given.
        InvalidKeyError
            If the value cannot be converted, including numeric overflow.
        """
        return self._read(key, type_, default, _read_scalar)

    def get_array(
        self, key: str, type_: type[T], default: Any = MISSING
    ) -> list[T]:
        """
        Read a one-level list such as ``1, 2, 3``.

        An empty value gives an empty list and a single bare token gives a
        one-element list.

        Parameters
        ----------
        key
            Key to read.
        type_
            Element type.
        default
            Returned if the key is absent.

        Returns
        -------
        list[T]
            The converted elements, in order.

        Raises
        ------
        MissingKeyError
            If the key is absent and no default was given.
        InvalidKeyError
            If any element cannot be converted. The error names that element.
        """
        return self._read(key, type_, default, _read_array)

    def get_matrix(
        self, key: str, type_: type[T], default: Any = MISSING
    ) -> list[list[T]]:
        """
        Read a two-level list such as ``[1, 2], [3, 4, 5]``.

        Every row must be a non-empty bracketed list. Rows may differ in
        length. A single bracketed list such as ``[1, 2]`` is one row.

        Parameters
        ----------
        key
            Key to read.
        type_
            Element type.
        default
            Returned if the key is absent.

        Returns
        -------
        list[list[T]]
            The converted rows.

        Raises
        ------
        MissingKeyError
            If the key is absent and no default was given.
        InvalidKeyError
            If a row is not a non-empty list ("matrix has less than two
            dimensions") or an element cannot be converted.
        """
        return self._read(key, type_, default, _read_matrix)

    def _read(
        self,
        key: str,
        type_: Any,
        default: Any,
        read: Callable[[Node, Converter], Any],
    ) -> Any:
        converter = self._converters.get(type_)
        try:
            raw = self._store.at(key)
        except KeyError:
            if default is MISSING:
                raise MissingKeyError(key, self.name) from None
            logger.debug(f"Key '{key}' not in block '{self.name}', using default")
            return default

        try:
            return read(parse_value(raw), converter)
        except MalformedStructureError as err:
            msg = f"{err.reason} at position {err.position}"
            raise InvalidKeyError(key, self.name, raw, converter.name, msg) from err
        except _ValueFailure as err:
            raise InvalidKeyError(
                key, self.name, err.raw, converter.name, err.reason
            ) from err.__cause__

    # -- Writing ---------------------------------------------------------

    def set(self, key: str, value: Any, type_: Any = None) -> None:
        """
        Write a scalar value, replacing any existing entry.

        Parameters
        ----------
        key
            Key to write.
        value
            Value to store.
        type_
            Type whose converter formats the value. Defaults to ``type(value)``.

        Raises
        ------
        InvalidKeyError
            If the formatted value contains brackets.
        """
        self._write(key, self._format(key, value, type_))

    def set_array(self, key: str, values: Sequence[Any], type_: Any = None) -> None:
        """
        Write a list of values as a single comma-separated entry.

        Each element is formatted once. An element whose text is empty or holds
        a comma or bracket would not read back as one element, so it is
        refused and nothing is written.

        Parameters
        ----------
        key
            Key to write.
        values
            Values to store.
        type_
            Element type. Defaults to the type of each element.

        Raises
        ------
        InvalidKeyError
            If an element would not read back unchanged.
        """
        self._write(key, self._format_array(key, values, type_))

    def set_matrix(
        self, key: str, rows: Sequence[Sequence[Any]], type_: Any = None
    ) -> None:
        """
        Write a list of rows so that :meth:`get_matrix` reads them back.

        Parameters
        ----------
        key
            Key to write.
        rows
            Rows of values to store.
        type_
            Element type. Defaults to the type of each element.
        """
        self._write(key, self._format_matrix(key, rows, type_))

    def set_default(self, key: str, value: Any, type_: Any = None) -> bool:
        """
        Write a scalar value only if the key is absent.

        Returns
        -------
        bool
            True if the value was written.
        """
        return self._write_default(key, lambda: self._format(key, value, type_))

    def set_default_array(
        self, key: str, values: Sequence[Any], type_: Any = None
    ) -> bool:
        """
        Write a list of values only if the key is absent.

        Returns
        -------
        bool
            True if the values were written.
        """
        return self._write_default(key, lambda: self._format_array(key, values, type_))

    def set_default_matrix(
        self, key: str, rows: Sequence[Sequence[Any]], type_: Any = None
    ) -> bool:
        """
        Write a list of rows only if the key is absent.

        Returns
        -------
        bool
            True if the rows were written.
        """
        return self._write_default(key, lambda: self._format_matrix(key, rows, type_))

    def _format(self, key: str, value: Any, type_: Any, element: bool = False) -> str:
        converter = self._converters.get(type(value) if type_ is None else type_)
        raw = converter.format(value)
        reason = unwritable_reason(raw, element)
        if reason is not None:
            msg = f"would not read back: {reason}"
            raise InvalidKeyError(key, self.name, raw, converter.name, msg)
        return raw

    def _format_array(self, key: str, values: Sequence[Any], type_: Any) -> str:
        return SEPARATOR.join(
            self._format(key, value, type_, element=True) for value in values
        )

    def _format_matrix(
        self, key: str, rows: Sequence[Sequence[Any]], type_: Any
    ) -> str:
        return SEPARATOR.join(
            f"{OPEN}{self._format_array(key, row, type_)}{CLOSE}" for row in rows
        )

    def _write(self, key: str, raw: str) -> None:
        self._store.set(key, raw)
        logger.debug(f"Set '{key}' in block '{self.name}' to {raw!r}")

    def _write_default(self, key: str, format_raw: Callable[[], str]) -> bool:
        if self._store.has(key):
            logger.debug(f"Key '{key}' already set in block '{self.name}', keeping it")
            return False
        self._write(key, format_raw())
        return True
