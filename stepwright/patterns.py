"""Regular-expression patterns for step definitions.

Patterns are compiled once at registration time and matched against the whole
normalised step line. A pattern is a plain regular expression, for
example ``^I have ordered hot "([^"]*)"$``.

Passing ``delimited=True`` selects the ``/regex/flags`` form common in
closure-style definition files, where *flags* is any combination of ``i``,
``m``, ``s``, ``x`` and ``u``. Without it a leading ``/`` is literal.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as t

from .errors import InvalidPatternError

_DELIMITED = re.compile(r"^/(?P<body>.*)/(?P<flags>[imsxu]*)$", re.DOTALL)

_FLAGS: t.Final[dict[str, re.RegexFlag]] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": re.UNICODE,
}

Arguments = tuple[str | None, ...]


@dc.dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A step pattern together with its compiled regular expression."""

    source: str
    regex: re.Pattern[str]

    def match(self, line: str) -> Arguments | None:
        """Return the captured groups if *line* matches, else ``None``."""
        return match(self, line)

    def __str__(self) -> str:
        return self.source


def _split_delimited(pattern: str) -> tuple[str, int]:
    found = _DELIMITED.match(pattern)
    if found is None:
        raise InvalidPatternError(pattern, "expected the form /regex/flags")
    flags = 0
    for letter in found.group("flags"):
        flags |= _FLAGS[letter]
    return found.group("body"), flags


def compile_pattern(pattern: str, *, delimited: bool = False) -> CompiledPattern:
    """Compile *pattern* into a :class:`CompiledPattern`.

    With *delimited* set, *pattern* must use the ``/regex/flags`` form.

    Raises
    ------
    InvalidPatternError
        If *pattern* is not a string, is not a valid regular expression or,
        with *delimited*, lacks its delimiters.
    """
    if not isinstance(pattern, str):
        raise InvalidPatternError(pattern, "pattern must be a string")
    body, flags = _split_delimited(pattern) if delimited else (pattern, 0)
    try:
        regex = re.compile(body, flags)
    except re.error as exc:
        raise InvalidPatternError(pattern, str(exc)) from exc
    return CompiledPattern(source=pattern, regex=regex)


def match(compiled: CompiledPattern, line: str) -> Arguments | None:
    """Match *line* against *compiled* as a whole.

    Anchors inside the pattern are allowed but not required; a partial match
    never counts. Groups that did not take part in the match are ``None``.
    """
    found = compiled.regex.fullmatch(line)
    if found is None:
        return None
    return found.groups()


class PatternMatcher:
    """Compile and match step patterns, caching compiled expressions."""

    def __init__(self) -> None:
        self._cache: dict[tuple[str, bool], CompiledPattern] = {}

    def compile(self, pattern: str, *, delimited: bool = False) -> CompiledPattern:
        """Return the compiled form of *pattern*, reusing earlier compilations."""
        key = (pattern, delimited)
        if isinstance(pattern, str) and key in self._cache:
            return self._cache[key]
        compiled = compile_pattern(pattern, delimited=delimited)
        self._cache[key] = compiled
        return compiled

    def match(self, compiled: CompiledPattern, line: str) -> Arguments | None:
        """Return the captured groups for *line*, or ``None`` on no match."""
        return match(compiled, line)


__all__ = [
    "Arguments",
    "CompiledPattern",
    "PatternMatcher",
    "compile_pattern",
    "match",
]
