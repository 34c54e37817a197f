"""Unit tests for :mod:`stepwright.tags`."""

from __future__ import annotations

import pytest

from stepwright.errors import InvalidTagFilterError
from stepwright.tags import TagFilter, normalise_tags


@pytest.mark.parametrize("expression", [None, "", "   "])
def test_empty_filter_matches_everything(expression: str | None) -> None:
    """Blank filters place no constraint on tags."""
    tag_filter = TagFilter.parse(expression)
    assert tag_filter.is_empty
    assert tag_filter.matches([])
    assert tag_filter.matches(["@anything"])


def test_single_tag_filter() -> None:
    """A bare tag requires that tag to be active."""
    tag_filter = TagFilter.parse("@slow")
    assert tag_filter.matches({"@slow"})
    assert not tag_filter.matches({"@fast"})


def test_at_sign_is_optional_on_both_sides() -> None:
    """Tags compare equal with or without the leading ``@``."""
    assert TagFilter.parse("slow").matches({"@slow"})
    assert TagFilter.parse("@slow").matches({"slow"})


@pytest.mark.parametrize(
    ("expression", "tags", "expected"),
    [
        ("@a and @b", {"a", "b"}, True),
        ("@a and @b", {"a"}, False),
        ("@a or @b", {"b"}, True),
        ("not @wip", {"wip"}, False),
        ("not @wip", set(), True),
        ("@a or @b and @c", {"a"}, True),
        ("(@a or @b) and @c", {"a"}, False),
        ("@a,@b", {"b"}, True),
        ("@a&&~@b", {"a", "b"}, False),
        ("@a&&~@b", {"a"}, True),
        ("@a || @b", set(), False),
        ("NOT @a AND @b", {"b"}, True),
    ],
)
def test_boolean_expressions(expression: str, tags: set[str], expected: bool) -> None:
    """Word and compact operators follow the usual precedence."""
    assert TagFilter.parse(expression).matches(tags) is expected


@pytest.mark.parametrize(
    "expression", ["@a and", "(@a", "@a)", "and @a", "@a & @b", "not", "@"]
)
def test_malformed_filters_raise(expression: str) -> None:
    """Unparseable expressions raise :class:`InvalidTagFilterError`."""
    with pytest.raises(InvalidTagFilterError):
        TagFilter.parse(expression)


def test_parse_returns_existing_filter_unchanged() -> None:
    """Passing a parsed filter back in is a no-op."""
    tag_filter = TagFilter.parse("@x")
    assert TagFilter.parse(tag_filter) is tag_filter
    assert str(tag_filter) == "@x"


def test_normalise_tags_drops_blank_entries() -> None:
    """Blank tags are ignored and ``@`` prefixes stripped."""
    assert normalise_tags(["@a", "b", " ", "@c "]) == frozenset({"a", "b", "c"})
