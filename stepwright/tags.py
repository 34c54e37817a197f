"""Boolean tag filters used to scope hooks.

A filter is a small boolean expression over tag names. Both a word form and a
compact form are understood and can be mixed::

    @slow and not @wip
    (@db or @network) and ~@flaky
    @slow,@db&&~@wip

``,`` and ``||`` mean *or*, ``&&`` means *and*, ``~`` means *not*. *and* binds
tighter than *or*. Tag names are compared without their leading ``@``.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as t

from .errors import InvalidTagFilterError

_TOKEN = re.compile(r"\s*(\(|\)|&&|\|\||,|~|[^\s(),~&|]+)")

_OR_TOKENS = frozenset({"or", ",", "||"})
_AND_TOKENS = frozenset({"and", "&&"})
_NOT_TOKENS = frozenset({"not", "~"})
_KEYWORDS = _OR_TOKENS | _AND_TOKENS | _NOT_TOKENS | {"(", ")"}


def normalise_tag(tag: str) -> str:
    """Return *tag* without surrounding whitespace or its leading ``@``."""
    return tag.strip().removeprefix("@")


def normalise_tags(tags: t.Iterable[str]) -> frozenset[str]:
    """Return the set of normalised tag names in *tags*."""
    return frozenset(normalise_tag(tag) for tag in tags if tag.strip())


class _Node(t.Protocol):
    def evaluate(self, tags: frozenset[str]) -> bool: ...


@dc.dataclass(frozen=True, slots=True)
class _Tag:
    name: str

    def evaluate(self, tags: frozenset[str]) -> bool:
        return self.name in tags


@dc.dataclass(frozen=True, slots=True)
class _Not:
    operand: _Node

    def evaluate(self, tags: frozenset[str]) -> bool:
        return not self.operand.evaluate(tags)


@dc.dataclass(frozen=True, slots=True)
class _All:
    operands: tuple[_Node, ...]

    def evaluate(self, tags: frozenset[str]) -> bool:
        return all(operand.evaluate(tags) for operand in self.operands)


@dc.dataclass(frozen=True, slots=True)
class _Any:
    operands: tuple[_Node, ...]

    def evaluate(self, tags: frozenset[str]) -> bool:
        return any(operand.evaluate(tags) for operand in self.operands)


def _tokenise(expression: str) -> list[str]:
    tokens: list[str] = []
    position = 0
    text = expression.rstrip()
    while position < len(text):
        found = _TOKEN.match(text, position)
        if found is None:
            msg = f"unexpected character {text[position]!r} at {position}"
            raise InvalidTagFilterError(expression, msg)
        tokens.append(found.group(1))
        position = found.end()
    return tokens


class _Parser:
    """Recursive-descent parser over the token list."""

    def __init__(self, expression: str) -> None:
        self._expression = expression
        self._tokens = _tokenise(expression)
        self._index = 0

    def parse(self) -> _Node:
        node = self._parse_or()
        if self._index != len(self._tokens):
            self._fail(f"unexpected {self._tokens[self._index]!r}")
        return node

    def _peek(self) -> str | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index].lower()
        return None

    def _advance(self) -> str:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _fail(self, reason: str) -> t.NoReturn:
        raise InvalidTagFilterError(self._expression, reason)

    def _parse_or(self) -> _Node:
        operands = [self._parse_and()]
        while self._peek() in _OR_TOKENS:
            self._advance()
            operands.append(self._parse_and())
        return operands[0] if len(operands) == 1 else _Any(tuple(operands))

    def _parse_and(self) -> _Node:
        operands = [self._parse_not()]
        while self._peek() in _AND_TOKENS:
            self._advance()
            operands.append(self._parse_not())
        return operands[0] if len(operands) == 1 else _All(tuple(operands))

    def _parse_not(self) -> _Node:
        if self._peek() in _NOT_TOKENS:
            self._advance()
            return _Not(self._parse_not())
        return self._parse_atom()

    def _parse_atom(self) -> _Node:
        token = self._peek()
        if token is None:
            self._fail("unexpected end of expression")
        if token == "(":
            self._advance()
            node = self._parse_or()
            if self._peek() != ")":
                self._fail("missing closing parenthesis")
            self._advance()
            return node
        if token in _KEYWORDS:
            self._fail(f"expected a tag, got {self._tokens[self._index]!r}")
        name = normalise_tag(self._advance())
        if not name:
            self._fail("empty tag name")
        return _Tag(name)


@dc.dataclass(frozen=True, slots=True)
class TagFilter:
    """A parsed tag filter; the empty filter matches every tag set."""

    expression: str = ""
    _root: _Node | None = dc.field(default=None, repr=False, compare=False)

    @classmethod
    def parse(cls, expression: str | TagFilter | None) -> TagFilter:
        """Parse *expression*, returning the empty filter for ``None``/blank."""
        if isinstance(expression, TagFilter):
            return expression
        if expression is None or not expression.strip():
            return cls()
        root = _Parser(expression).parse()
        return cls(expression=expression.strip(), _root=root)

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when the filter places no constraint on tags."""
        return self._root is None

    def matches(self, tags: t.Iterable[str]) -> bool:
        """Return ``True`` when *tags* satisfy this filter."""
        if self._root is None:
            return True
        return self._root.evaluate(normalise_tags(tags))

    def __str__(self) -> str:
        return self.expression


__all__ = ["TagFilter", "normalise_tag", "normalise_tags"]
