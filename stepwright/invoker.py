"""Invoke matched definitions and classify what happened."""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import traceback
import typing as t

from .errors import AmbiguousMatchError, PendingSignal, UndefinedStepError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .context import Context
    from .definitions import MatchResult, StepDefinition
    from .registry import DefinitionRegistry

logger = logging.getLogger(__name__)


class Status(enum.StrEnum):
    """Classified result of running one step or hook."""

    SUCCESS = "success"
    PENDING = "pending"
    FAILED = "failed"
    AMBIGUOUS = "ambiguous"
    UNDEFINED = "undefined"
    SKIPPED = "skipped"


@dc.dataclass(frozen=True, slots=True)
class Outcome:
    """Result of a single invocation, ready for reporting."""

    status: Status
    error: BaseException | None = None
    detail: str | None = None
    candidates: tuple[StepDefinition, ...] = ()

    @property
    def succeeded(self) -> bool:
        """Return ``True`` for :attr:`Status.SUCCESS`."""
        return self.status is Status.SUCCESS

    @property
    def is_failure(self) -> bool:
        """Return ``True`` when the outcome should fail its scenario."""
        return self.status in {Status.FAILED, Status.AMBIGUOUS}

    @classmethod
    def success(cls) -> Outcome:
        """Return a successful outcome."""
        return cls(Status.SUCCESS)

    @classmethod
    def skipped(cls) -> Outcome:
        """Return the outcome of a step that was never run."""
        return cls(Status.SKIPPED)


def call_action(action: t.Callable[..., object], *args: object) -> Outcome:
    """Call *action* with *args* and classify the result.

    ``PendingSignal`` yields a pending outcome; any other ``Exception`` yields a
    failed outcome carrying the formatted traceback. ``KeyboardInterrupt`` and
    other ``BaseException`` subclasses are not caught.
    """
    try:
        action(*args)
    except PendingSignal as exc:
        return Outcome(Status.PENDING, error=exc, detail=str(exc))
    except Exception as exc:  # noqa: BLE001 - user code may raise anything
        detail = "".join(traceback.format_exception(exc))
        return Outcome(Status.FAILED, error=exc, detail=detail)
    return Outcome.success()


class DefinitionInvoker:
    """Stateless bridge between match results and user-supplied actions."""

    def invoke(self, match: MatchResult, context: Context) -> Outcome:
        """Run ``match.definition.action(context, *match.arguments)``."""
        return call_action(match.definition.action, context, *match.arguments)

    def resolve(
        self, line: str, matches: t.Sequence[MatchResult]
    ) -> MatchResult | Outcome:
        """Return the single match for *line*, or an outcome explaining why not.

        Zero matches give :attr:`Status.UNDEFINED`; more than one give
        :attr:`Status.AMBIGUOUS` listing every candidate. Neither runs any
        action.
        """
        if not matches:
            error = UndefinedStepError(line)
            return Outcome(Status.UNDEFINED, error=error, detail=str(error))
        if len(matches) > 1:
            candidates = tuple(match.definition for match in matches)
            ambiguous = AmbiguousMatchError(line, candidates)
            logger.warning("%s", ambiguous)
            return Outcome(
                Status.AMBIGUOUS,
                error=ambiguous,
                detail=str(ambiguous),
                candidates=candidates,
            )
        return matches[0]

    def run_step(
        self, registry: DefinitionRegistry, line: str, context: Context
    ) -> Outcome:
        """Look up *line* in *registry* and invoke the unique match."""
        resolved = self.resolve(line, registry.find_matching_steps(line))
        if isinstance(resolved, Outcome):
            return resolved
        return self.invoke(resolved, context)


__all__ = ["DefinitionInvoker", "Outcome", "Status", "call_action"]
