"""Immutable records describing registered step and hook definitions."""

from __future__ import annotations

import dataclasses as dc
import enum
import inspect
import typing as t

from .patterns import Arguments, CompiledPattern
from .tags import TagFilter

StepAction = t.Callable[..., object]
HookAction = t.Callable[..., object]


class HookKind(enum.StrEnum):
    """Lifecycle points at which hooks may run."""

    BEFORE_SUITE = "BeforeSuite"
    AFTER_SUITE = "AfterSuite"
    BEFORE_FEATURE = "BeforeFeature"
    AFTER_FEATURE = "AfterFeature"
    BEFORE_SCENARIO = "BeforeScenario"
    AFTER_SCENARIO = "AfterScenario"
    BEFORE_STEP = "BeforeStep"
    AFTER_STEP = "AfterStep"

    @property
    def is_suite_level(self) -> bool:
        """Suite hooks ignore tag filters and receive no payload."""
        return self in {HookKind.BEFORE_SUITE, HookKind.AFTER_SUITE}


def describe_location(action: t.Callable[..., object]) -> str | None:
    """Return ``file:line`` for *action* when it can be determined."""
    target = inspect.unwrap(action)
    try:
        filename = inspect.getsourcefile(target) or inspect.getfile(target)
        _, lineno = inspect.getsourcelines(target)
    except (OSError, TypeError):
        return None
    return f"{filename}:{lineno}"


@dc.dataclass(frozen=True, slots=True)
class StepDefinition:
    """A pattern paired with the callable that implements the step."""

    pattern: CompiledPattern
    action: StepAction
    label: str | None = None
    location: str | None = None

    def __str__(self) -> str:
        prefix = f"{self.label} " if self.label else ""
        return f"{prefix}{self.pattern.source}"


@dc.dataclass(frozen=True, slots=True)
class HookDefinition:
    """A callable bound to a lifecycle point, optionally scoped by tags."""

    kind: HookKind
    action: HookAction
    tag_filter: TagFilter = dc.field(default_factory=TagFilter)
    location: str | None = None

    def applies_to(self, active_tags: t.Iterable[str]) -> bool:
        """Return ``True`` when this hook should fire for *active_tags*."""
        if self.kind.is_suite_level:
            return True
        return self.tag_filter.matches(active_tags)

    def __str__(self) -> str:
        scope = f" {self.tag_filter}" if not self.tag_filter.is_empty else ""
        return f"{self.kind}{scope}"


@dc.dataclass(frozen=True, slots=True)
class MatchResult:
    """A step definition that matched a line, with its captured arguments."""

    definition: StepDefinition
    arguments: Arguments = ()


__all__ = [
    "HookAction",
    "HookDefinition",
    "HookKind",
    "MatchResult",
    "StepAction",
    "StepDefinition",
    "describe_location",
]
