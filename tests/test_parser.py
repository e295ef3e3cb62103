"""
Unit tests for typedcfg.parser module.

Tests structural parsing of scalars, arrays and nested lists.
"""

from __future__ import annotations

import pytest

from typedcfg.exceptions import MalformedStructureError
from typedcfg.parser import Node, parse_value, unwritable_reason


def values(node: Node) -> list[str]:
    return [child.value for child in node.children]


class TestParseScalars:
    """Tests for values without structure."""

    def test_bare_token_is_leaf(self):
        """A single token parses to a leaf."""
        node = parse_value("42")
        assert node.is_leaf
        assert node.value == "42"
        assert node.children == []

    def test_whitespace_is_trimmed(self):
        """Surrounding whitespace is not part of the token."""
        assert parse_value("  hello  ").value == "hello"

    def test_inner_whitespace_is_kept(self):
        """Whitespace inside a token is preserved."""
        assert parse_value(" hello world ").value == "hello world"

    def test_empty_text(self):
        """Empty text gives an empty leaf."""
        node = parse_value("")
        assert node.is_leaf
        assert node.value == ""

    def test_blank_text(self):
        """Whitespace-only text gives an empty leaf."""
        assert parse_value("   ").value == ""


class TestParseLists:
    """Tests for one-level lists."""

    def test_comma_separated(self):
        """Top-level commas separate siblings."""
        node = parse_value("1,2,3")
        assert node.is_list
        assert values(node) == ["1", "2", "3"]
        assert all(child.is_leaf for child in node.children)

    def test_spaces_around_separators(self):
        """Whitespace around separators is insignificant."""
        assert values(parse_value(" 1 ,  2,3 ")) == ["1", "2", "3"]

    def test_bracketed_list_same_as_bare(self):
        """A bracketed group spanning the whole text is the root."""
        assert parse_value("[1, 2, 3]").children == parse_value("1, 2, 3").children

    def test_root_value_is_trimmed_text(self):
        """The root keeps the whole trimmed text as its value."""
        assert parse_value(" a, b ").value == "a, b"

    def test_empty_brackets(self):
        """[] is an empty list, not a token."""
        node = parse_value("[]")
        assert node.is_list
        assert node.children == []

    def test_single_bracketed_element(self):
        """[5] is a one-element list."""
        node = parse_value("[5]")
        assert node.is_list
        assert values(node) == ["5"]


class TestParseNested:
    """Tests for nested lists."""

    def test_rows(self):
        """Bracketed groups separated by commas become rows."""
        node = parse_value("[1,2],[3,4,5]")
        assert [values(row) for row in node.children] == [["1", "2"], ["3", "4", "5"]]

    def test_row_values_are_source_text(self):
        """Container nodes keep their bracketed source text."""
        node = parse_value("[1, 2], [3]")
        assert [row.value for row in node.children] == ["[1, 2]", "[3]"]

    def test_outer_brackets(self):
        """[[1,2],[3]] parses like [1,2],[3]."""
        assert parse_value("[[1,2],[3]]").children == parse_value("[1,2],[3]").children

    def test_mixed_leaf_and_list(self):
        """Leaves and lists may be siblings."""
        node = parse_value("1, [2, 3]")
        assert node.children[0].is_leaf
        assert values(node.children[1]) == ["2", "3"]

    def test_empty_inner_list(self):
        """[[]] is a list holding one empty list."""
        node = parse_value("[[]]")
        assert len(node.children) == 1
        assert node.children[0].is_list
        assert node.children[0].children == []

    def test_deep_nesting(self):
        """Nesting depth is not limited by recursion."""
        depth = 5000
        node = parse_value("[" * depth + "x" + "]" * depth)
        for _ in range(depth - 1):
            assert len(node.children) == 1
            node = node.children[0]
        assert node.children == [Node(value="x")]


class TestParseMalformed:
    """Tests for structurally invalid text."""

    @pytest.mark.parametrize(
        "raw",
        ["[1,2", "1,2]", "[[1]", "]", "["],
    )
    def test_unbalanced_brackets(self, raw):
        """Unbalanced brackets are rejected."""
        with pytest.raises(MalformedStructureError):
            parse_value(raw)

    @pytest.mark.parametrize(
        "raw",
        ["1,,2", "1,2,", ",1", ",", "[,]", "[1,]", "[1],,[2]"],
    )
    def test_empty_element(self, raw):
        """Empty elements between separators are rejected."""
        with pytest.raises(MalformedStructureError, match="empty element"):
            parse_value(raw)

    @pytest.mark.parametrize("raw", ["a[1]", "[1]b", "[1] [2]"])
    def test_text_next_to_group(self, raw):
        """Text directly adjacent to a bracketed group is rejected."""
        with pytest.raises(MalformedStructureError):
            parse_value(raw)

    def test_error_attributes(self):
        """MalformedStructureError records text, reason and position."""
        with pytest.raises(MalformedStructureError) as exc_info:
            parse_value("  1,2]")
        assert exc_info.value.raw == "  1,2]"
        assert exc_info.value.reason == "unmatched ']'"
        assert exc_info.value.position == 5

    def test_unclosed_reports_open_position(self):
        """An unclosed group is reported where it was opened."""
        with pytest.raises(MalformedStructureError) as exc_info:
            parse_value("1, [2, 3")
        assert exc_info.value.position == 3

    def test_is_value_error(self):
        """MalformedStructureError can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_value("[")


class TestUnwritableReason:
    """Tests for checking text before it is written."""

    def test_plain_text(self):
        """Text without grammar characters can be written anywhere."""
        assert unwritable_reason("x y", element=True) is None
        assert unwritable_reason("", element=False) is None

    def test_scalar_may_hold_separators(self):
        """A scalar is read whole, so commas are fine but brackets are not."""
        assert unwritable_reason("a, b", element=False) is None
        assert unwritable_reason("x[0]", element=False) == "contains '[', ']'"

    def test_element_rules(self):
        """Elements may not be empty or hold a separator or bracket."""
        assert unwritable_reason(" ", element=True) == "empty element"
        assert unwritable_reason("a,b", element=True) == "contains ','"
        assert unwritable_reason("[a", element=True) == "contains '['"
