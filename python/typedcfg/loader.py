"""
Configuration loading and merging for typedcfg.

This module provides:
- load_blocks: Load a TOML file into one store per table
- load_block_layers: Merge multiple TOML files (layered configuration) into stores
- deep_merge: Recursive dictionary merge used for layering

TOML values are rendered to the raw-text grammar read by
:class:`~typedcfg.accessor.TypedAccessor`, so ``values = [1, 2, 3]`` is
stored as ``"1,2,3"`` and ``grid = [[1, 2], [3]]`` as ``"[1,2],[3]"``.
"""

from __future__ import annotations

import datetime
import logging
import tomllib
from pathlib import Path
from typing import Any

from .exceptions import ConfigError
from .parser import CLOSE, OPEN, SEPARATOR, unwritable_reason
from .store import DictStore

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_BLOCK",
    "blocks_from_dict",
    "deep_merge",
    "load_block_layers",
    "load_blocks",
    "read_toml",
]

DEFAULT_BLOCK = "default"
"""Block that receives top-level keys which are not tables."""


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Combine two parsed TOML documents, ``override`` winning.

    Tables present in both documents are combined table by table. Any other
    value from ``override``, arrays included, replaces the one in ``base``.
    Neither input is modified.

    Parameters
    ----------
    base
        Lower-precedence document.
    override
        Higher-precedence document.

    Returns
    -------
    dict[str, Any]
        Combined document.

    Examples
    --------
    >>> deep_merge({"solver": {"steps": 1, "tol": 0.1}}, {"solver": {"steps": 5}})
    {'solver': {'steps': 5, 'tol': 0.1}}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = deep_merge(current, value)
        merged[key] = value
    return merged


def read_toml(path: str | Path) -> dict[str, Any]:
    """
    Read a TOML file.

    Parameters
    ----------
    path
        Path to the TOML file.

    Returns
    -------
    dict[str, Any]
        Parsed document.
    """
    path = Path(path)
    with path.open("rb") as f:
        return tomllib.load(f)


def _render(value: Any, where: str, top: bool = True) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        reason = unwritable_reason(value, element=not top)
        if reason is not None:
            msg = f"Cannot store string at '{where}' as configuration text: {reason}"
            raise ConfigError(msg)
        return value
    if isinstance(value, (datetime.date, datetime.time)):
        logger.warning(f"Storing TOML date/time at '{where}' as ISO text")
        return value.isoformat()
    if isinstance(value, list):
        inner = SEPARATOR.join(_render(item, where, top=False) for item in value)
        return inner if top else f"{OPEN}{inner}{CLOSE}"
    msg = f"Cannot store value at '{where}' as configuration text: {value!r}"
    raise ConfigError(msg)


def _flatten(table: dict[str, Any], block: str, prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in table.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, block, prefix=f"{dotted}."))
        else:
            flat[dotted] = _render(value, f"{block}.{dotted}")
    return flat


def blocks_from_dict(document: dict[str, Any]) -> dict[str, DictStore]:
    """
    Build one store per top-level table of a parsed TOML document.

    Nested tables inside a block are flattened to dotted keys. Top-level keys
    that are not tables go to the :data:`DEFAULT_BLOCK` block.

    Parameters
    ----------
    document
        Parsed TOML document.

    Returns
    -------
    dict[str, DictStore]
        Stores keyed by block name.

    Raises
    ------
    ConfigError
        If a value cannot be rendered as text (e.g. an array of tables).
    """
    loose = {k: v for k, v in document.items() if not isinstance(v, dict)}
    blocks: dict[str, DictStore] = {}
    if loose:
        blocks[DEFAULT_BLOCK] = DictStore(
            DEFAULT_BLOCK, _flatten(loose, DEFAULT_BLOCK)
        )
    for name, table in document.items():
        if isinstance(table, dict):
            if name in blocks:
                msg = f"Table '{name}' clashes with the block for top-level keys"
                raise ConfigError(msg)
            blocks[name] = DictStore(name, _flatten(table, name))
    return blocks


def load_blocks(path: str | Path) -> dict[str, DictStore]:
    """
    Load a TOML file into configuration blocks.

    Parameters
    ----------
    path
        Path to TOML configuration file.

    Returns
    -------
    dict[str, DictStore]
        Stores keyed by block name.

    Examples
    --------
    >>> blocks = load_blocks("solver.toml")
    >>> TypedAccessor(blocks["solver"]).get("tolerance", float)
    1e-06
    """
    blocks = blocks_from_dict(read_toml(path))
    logger.debug(f"Loaded {len(blocks)} configuration blocks from {path}")
    return blocks


def load_block_layers(*paths: str | Path) -> dict[str, DictStore]:
    """
    Load and merge multiple TOML files into configuration blocks.

    Later files override earlier ones. Nested tables are merged recursively.

    Parameters
    ----------
    *paths
        Paths to TOML configuration files (in order of precedence).

    Returns
    -------
    dict[str, DictStore]
        Stores keyed by block name.
    """
    if not paths:
        return {}

    document = read_toml(paths[0])
    for path in paths[1:]:
        document = deep_merge(document, read_toml(path))

    return blocks_from_dict(document)
