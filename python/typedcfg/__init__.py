"""
Typed access to text-based configuration.

This package reads configuration entries stored as raw text and converts
them on demand into typed values:
- Scalars, one-level arrays and two-level matrices from a small bracket/comma grammar
- Pluggable per-type converters (builtins, enums and numpy fixed-width numbers)
- Writing typed values back as text, and persisting defaults for absent keys
- Loading configuration blocks from layered TOML files

Example:
    >>> from typedcfg import DictStore, TypedAccessor
    >>> cfg = TypedAccessor(DictStore("solver", {"steps": "1, 2, 3"}))
    >>> cfg.get_array("steps", int)
    [1, 2, 3]
"""

from __future__ import annotations

from .accessor import TypedAccessor
from .converters import (
    Converter,
    ConverterRegistry,
    converter_registry,
    register_converter,
)
from .exceptions import (
    ConfigError,
    ConversionError,
    ConversionOverflowError,
    ConverterNotFoundError,
    InvalidKeyError,
    MalformedStructureError,
    MissingKeyError,
)
from .loader import deep_merge, load_block_layers, load_blocks
from .parser import Node, parse_value
from .store import ConfigStore, DictStore

__all__ = [
    "ConfigError",
    "ConfigStore",
    "ConversionError",
    "ConversionOverflowError",
    "Converter",
    "ConverterNotFoundError",
    "ConverterRegistry",
    "DictStore",
    "InvalidKeyError",
    "MalformedStructureError",
    "MissingKeyError",
    "Node",
    "TypedAccessor",
    "converter_registry",
    "deep_merge",
    "load_block_layers",
    "load_blocks",
    "parse_value",
    "register_converter",
]
