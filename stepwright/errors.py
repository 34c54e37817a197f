"""Exception hierarchy shared by the stepwright core."""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .definitions import StepDefinition


class StepwrightError(Exception):
    """Base class for all stepwright errors."""


class LifecycleError(StepwrightError):
    """Raised when an operation is attempted in the wrong lifecycle phase."""


class ResourceLoadError(StepwrightError):
    """Raised when a definition resource cannot be located or executed."""


class InvalidPatternError(StepwrightError, ValueError):
    """Raised when a step pattern is not a well-formed regular expression."""

    def __init__(self, pattern: object, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid step pattern {pattern!r}: {reason}")


class InvalidTagFilterError(StepwrightError, ValueError):
    """Raised when a hook tag filter expression cannot be parsed."""

    def __init__(self, expression: str, reason: str) -> None:
        self.expression = expression
        self.reason = reason
        super().__init__(f"Invalid tag filter {expression!r}: {reason}")


class UndefinedStepError(StepwrightError):
    """No step definition matches a step line."""

    def __init__(self, line: str) -> None:
        self.line = line
        super().__init__(f"No matching definition for step: {line!r}")


class AmbiguousMatchError(StepwrightError):
    """More than one step definition matches a step line."""

    def __init__(self, line: str, candidates: t.Sequence[StepDefinition]) -> None:
        self.line = line
        self.candidates = tuple(candidates)
        super().__init__(_describe_ambiguity(line, self.candidates))


class PendingSignal(StepwrightError):
    """Raised from a definition to mark it as not yet implemented."""

    def __init__(self, message: str = "Definition is not implemented yet") -> None:
        super().__init__(message)


def pending(message: str = "Definition is not implemented yet") -> t.NoReturn:
    """Abort the current definition and report it as pending."""
    raise PendingSignal(message)


def _describe_ambiguity(line: str, candidates: t.Sequence[StepDefinition]) -> str:
    lines = [f"Ambiguous match for step: {line!r}", "", "Candidates:"]
    for index, definition in enumerate(candidates, start=1):
        where = f" ({definition.location})" if definition.location else ""
        lines.append(f"  {index}. {definition.pattern.source}{where}")
    return "\n".join(lines)


__all__ = [
    "AmbiguousMatchError",
    "InvalidPatternError",
    "InvalidTagFilterError",
    "LifecycleError",
    "PendingSignal",
    "ResourceLoadError",
    "StepwrightError",
    "UndefinedStepError",
    "pending",
]
