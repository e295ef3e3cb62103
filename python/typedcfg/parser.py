"""
Structural parser for raw configuration values.

Raw text is turned into a tree of :class:`Node` objects. No type
interpretation happens here; the only decisions are token boundaries and
whitespace trimming.

Grammar::

    value := item ("," item)*
    item  := "[" [item ("," item)*] "]" | token
    token := any run of characters other than "[", "]" and ","

Examples
--------
>>> [child.value for child in parse_value("1, 2, 3").children]
['1', '2', '3']
>>> parse_value("42").is_leaf
True
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .exceptions import MalformedStructureError

__all__ = ["Node", "parse_value", "unwritable_reason"]

OPEN = "["
CLOSE = "]"
SEPARATOR = ","


def unwritable_reason(text: str, element: bool) -> str | None:
    """
    Say why text would not read back unchanged, if it would not.

    Parameters
    ----------
    text
        Formatted value or element.
    element
        Whether the text is an element of a list. Elements may not be empty
        or contain separators; scalars may not contain brackets.

    Returns
    -------
    str | None
        Reason the text cannot be written, or None if it can.
    """
    if element and not text.strip():
        return "empty element"
    special = (OPEN, CLOSE, SEPARATOR) if element else (OPEN, CLOSE)
    found = [ch for ch in special if ch in text]
    if found:
        return "contains " + ", ".join(f"'{ch}'" for ch in found)
    return None


@dataclass
class Node:
    """
    Element of a parsed value.

    Parameters
    ----------
    value
        Trimmed source text of the node
    children
        Child nodes, in source order (empty for a leaf)
    is_list
        Whether the node is a list (bracketed or comma-separated), even an empty one
    """

    value: str
    children: list[Node] = field(default_factory=list)
    is_list: bool = False

    @property
    def is_leaf(self) -> bool:
        """Whether this node holds directly convertible text."""
        return not self.is_list


@dataclass
class _Frame:
    start: int
    items: list[Node] = field(default_factory=list)


def parse_value(raw: str) -> Node:
    """
    Parse raw text into a node tree.

    A single bare token parses to a leaf. Several top-level comma-separated
    items parse to a list whose children are those items. A bracketed group
    spanning the whole text is the root itself, so ``"[1,2]"`` and ``"1,2"``
    parse to the same tree.

    Parameters
    ----------
    raw
        Text to parse.

    Returns
    -------
    Node
        Root of the parsed tree. Empty text gives a leaf with value ``""``.

    Raises
    ------
    MalformedStructureError
        If brackets are unbalanced, an element is empty, or text sits directly
        next to a bracketed group.
    """
    text = raw.strip()
    offset = len(raw) - len(raw.lstrip())
    if not text:
        return Node(value="")

    def fail(reason: str, position: int) -> MalformedStructureError:
        return MalformedStructureError(raw, reason, position + offset)

    def take_item(
        frame: _Frame, group: Node | None, start: int, end: int, closing: bool
    ) -> None:
        if group is not None:
            frame.items.append(group)
            return
        token = text[start:end].strip()
        if token:
            frame.items.append(Node(value=token))
        elif not (closing and not frame.items):
            # Only "[]" may be empty
            raise fail("empty element", end)

    stack = [_Frame(start=-1)]
    group: Node | None = None
    token_start = 0

    for i, ch in enumerate(text):
        if ch == OPEN:
            if group is not None or text[token_start:i].strip():
                raise fail(f"unexpected '{OPEN}'", i)
            stack.append(_Frame(start=i))
            token_start = i + 1
        elif ch == CLOSE:
            if len(stack) == 1:
                raise fail(f"unmatched '{CLOSE}'", i)
            frame = stack.pop()
            take_item(frame, group, token_start, i, closing=True)
            group = Node(
                value=text[frame.start : i + 1], children=frame.items, is_list=True
            )
            token_start = i + 1
        elif ch == SEPARATOR:
            take_item(stack[-1], group, token_start, i, closing=False)
            group = None
            token_start = i + 1
        elif group is not None and not ch.isspace():
            raise fail(f"unexpected text after '{CLOSE}'", i)

    if len(stack) > 1:
        raise fail(f"unclosed '{OPEN}'", stack[-1].start)

    root = stack[0]
    take_item(root, group, token_start, len(text), closing=False)

    if len(root.items) == 1:
        return root.items[0]
    return Node(value=text, children=root.items, is_list=True)
