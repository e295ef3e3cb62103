"""
Raw-text storage for configuration blocks.

The accessor only needs a small mapping-like interface, described by
:class:`ConfigStore`. :class:`DictStore` is an in-memory implementation.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Protocol, runtime_checkable

__all__ = ["ConfigStore", "DictStore"]


@runtime_checkable
class ConfigStore(Protocol):
    """
    Key to raw-text store backing a configuration block.

    Attributes
    ----------
    name
        Identifier of the configuration block, used in error messages
    """

    name: str

    def has(self, key: str) -> bool:
        """Return True if the key has an entry."""
        ...

    def at(self, key: str) -> str:
        """Return the raw text for a key. Raises KeyError if absent."""
        ...

    def set(self, key: str, raw: str) -> None:
        """Store raw text for a key, replacing any existing entry."""
        ...


class DictStore:
    """
    In-memory configuration block.

    Parameters
    ----------
    name
        Block name
    values
        Initial entries. Values are stored as ``str(value)``.

    Example:
        >>> store = DictStore("solver", {"tolerance": "1e-6"})
        >>> store.at("tolerance")
        '1e-6'
    """

    def __init__(self, name: str, values: Mapping[str, object] | None = None) -> None:
        self.name = name
        self._values: dict[str, str] = {}
        for key, value in (values or {}).items():
            self.set(key, value)

    def has(self, key: str) -> bool:
        return key in self._values

    def at(self, key: str) -> str:
        return self._values[key]

    def set(self, key: str, raw: object) -> None:
        self._values[key] = str(raw)

    def keys(self) -> list[str]:
        """Return entry keys in insertion order."""
        return list(self._values)

    def as_dict(self) -> dict[str, str]:
        """Return a copy of all entries."""
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"DictStore(name={self.name!r}, keys={self.keys()!r})"
