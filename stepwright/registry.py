"""Registry of step and hook definitions.

The registry is populated during a loading phase, usually through the
:class:`StepsHandle` and :class:`HooksHandle` objects injected into definition
files, and is then frozen. Registration order is significant: it is the order
in which matches are reported and hooks are run. The registry never
deduplicates, reorders or ranks definitions; when several steps match one line
all of them are returned so the caller can report the ambiguity.
"""

from __future__ import annotations

import logging
import typing as t

from .definitions import (
    HookAction,
    HookDefinition,
    HookKind,
    MatchResult,
    StepAction,
    StepDefinition,
    describe_location,
)
from .errors import LifecycleError
from .patterns import PatternMatcher
from .tags import TagFilter

logger = logging.getLogger(__name__)

_F = t.TypeVar("_F", bound=t.Callable[..., object])


def _require_callable(action: object, what: str) -> None:
    if not callable(action):
        msg = f"{what} action must be callable, got {type(action).__name__}"
        raise TypeError(msg)


class DefinitionRegistry:
    """Ordered store of :class:`StepDefinition` and :class:`HookDefinition`."""

    def __init__(self, matcher: PatternMatcher | None = None) -> None:
        self._matcher = matcher if matcher is not None else PatternMatcher()
        self._steps: list[StepDefinition] = []
        self._hooks: list[HookDefinition] = []
        self._frozen = False

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def steps(self) -> tuple[StepDefinition, ...]:
        """Return registered step definitions in registration order."""
        return tuple(self._steps)

    @property
    def hooks(self) -> tuple[HookDefinition, ...]:
        """Return registered hook definitions in registration order."""
        return tuple(self._hooks)

    @property
    def frozen(self) -> bool:
        """Return ``True`` once the loading phase has completed."""
        return self._frozen

    def freeze(self) -> None:
        """End the loading phase; further registration raises an error."""
        if not self._frozen:
            logger.debug(
                "Registry frozen with %d step(s) and %d hook(s)",
                len(self._steps),
                len(self._hooks),
            )
        self._frozen = True

    def _check_open(self) -> None:
        if self._frozen:
            msg = "Definitions cannot be registered after the registry is frozen"
            raise LifecycleError(msg)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register_step(
        self,
        pattern: str,
        action: StepAction,
        label: str | None = None,
        *,
        delimited: bool = False,
    ) -> StepDefinition:
        """Append a step definition for *pattern*.

        Set *delimited* to write *pattern* in the ``/regex/flags`` form.

        Raises
        ------
        InvalidPatternError
            If *pattern* is not a valid regular expression.
        LifecycleError
            If the registry has been frozen.
        """
        self._check_open()
        _require_callable(action, "Step")
        definition = StepDefinition(
            pattern=self._matcher.compile(pattern, delimited=delimited),
            action=action,
            label=label,
            location=describe_location(action),
        )
        self._steps.append(definition)
        logger.debug("Registered step %s", definition)
        return definition

    def register_hook(
        self,
        kind: HookKind | str,
        tag_filter: TagFilter | str | None,
        action: HookAction,
    ) -> HookDefinition:
        """Append a hook definition for the lifecycle point *kind*.

        Raises
        ------
        InvalidTagFilterError
            If *tag_filter* cannot be parsed.
        LifecycleError
            If the registry has been frozen.
        """
        self._check_open()
        _require_callable(action, "Hook")
        definition = HookDefinition(
            kind=HookKind(kind),
            action=action,
            tag_filter=TagFilter.parse(tag_filter),
            location=describe_location(action),
        )
        self._hooks.append(definition)
        logger.debug("Registered hook %s", definition)
        return definition

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def find_matching_steps(self, line: str) -> list[MatchResult]:
        """Return every step definition matching *line*, in registration order."""
        results: list[MatchResult] = []
        for definition in self._steps:
            arguments = self._matcher.match(definition.pattern, line)
            if arguments is not None:
                results.append(MatchResult(definition, arguments))
        return results

    def find_matching_hooks(
        self, kind: HookKind | str, active_tags: t.Iterable[str] = ()
    ) -> list[HookDefinition]:
        """Return hooks of *kind* whose tag filter accepts *active_tags*."""
        wanted = HookKind(kind)
        tags = tuple(active_tags)
        return [
            hook
            for hook in self._hooks
            if hook.kind is wanted and hook.applies_to(tags)
        ]

    # ------------------------------------------------------------------
    # Registration handles
    # ------------------------------------------------------------------
    def steps_handle(self) -> StepsHandle:
        """Return a :class:`StepsHandle` bound to this registry."""
        return StepsHandle(self)

    def hooks_handle(self) -> HooksHandle:
        """Return a :class:`HooksHandle` bound to this registry."""
        return HooksHandle(self)


class _StepRegistrar:
    """Registration call carrying the label it was looked up under."""

    def __init__(self, registry: DefinitionRegistry, label: str | None) -> None:
        self._registry = registry
        self._label = label

    @t.overload
    def __call__(
        self, pattern: str, *, delimited: bool = ...
    ) -> t.Callable[[_F], _F]: ...

    @t.overload
    def __call__(self, pattern: str, action: _F, *, delimited: bool = ...) -> _F: ...

    def __call__(
        self, pattern: str, action: _F | None = None, *, delimited: bool = False
    ) -> _F | t.Callable[[_F], _F]:
        register = self._registry.register_step
        if action is not None:
            register(pattern, action, self._label, delimited=delimited)
            return action

        def decorator(func: _F) -> _F:
            register(pattern, func, self._label, delimited=delimited)
            return func

        return decorator


class StepsHandle:
    """Registration handle exposed to definition files as ``steps``.

    Any public attribute is a registration call whose name becomes the
    definition's label, so ``steps.Given``, ``steps.Then`` and
    ``steps.anything`` all register steps::

        steps.Given(r'^I have ordered hot "([^"]*)"$', order_drink)

        @steps.Then(r"^I should be served (\\d+) cups?$")
        def served(world, count): ...

    Pass ``delimited=True`` to write a pattern as ``/regex/flags``::

        steps.When(r"/^i press (\\w+)$/i", press, delimited=True)
    """

    def __init__(self, registry: DefinitionRegistry) -> None:
        self._registry = registry

    def step(
        self,
        pattern: str,
        action: StepAction | None = None,
        label: str | None = None,
        *,
        delimited: bool = False,
    ) -> t.Any:  # noqa: ANN401 - decorator or action
        """Register *action* for *pattern*, or return a decorator."""
        return _StepRegistrar(self._registry, label)(
            pattern, action, delimited=delimited
        )

    def __getattr__(self, name: str) -> _StepRegistrar:
        if name.startswith("_"):
            raise AttributeError(name)
        return _StepRegistrar(self._registry, name)


def _split_hook_args(
    tag_filter: TagFilter | str | HookAction | None,
    action: HookAction | None,
) -> tuple[TagFilter | str | None, HookAction | None]:
    """Allow hooks to be declared with or without a leading tag filter."""
    if action is None and callable(tag_filter) and not isinstance(tag_filter, str):
        return None, tag_filter
    return t.cast("TagFilter | str | None", tag_filter), action


def _hook_method(kind: HookKind) -> t.Callable[..., t.Any]:
    def register(
        self: HooksHandle,
        tag_filter: TagFilter | str | HookAction | None = None,
        action: HookAction | None = None,
    ) -> t.Any:  # noqa: ANN401 - decorator or action
        return self.on(kind, tag_filter, action)

    register.__name__ = kind.name.lower()
    register.__doc__ = f"Register a ``{kind}`` hook, directly or as a decorator."
    return register


class HooksHandle:
    """Registration handle exposed to definition files as ``hooks``.

    Each lifecycle point has a method in both snake_case and camelCase. A hook
    may be registered with an optional tag filter, either directly or as a
    decorator::

        hooks.before_scenario("@database", reset_database)

        @hooks.after_step
        def log_step(event): ...
    """

    def __init__(self, registry: DefinitionRegistry) -> None:
        self._registry = registry

    def on(
        self,
        kind: HookKind | str,
        tag_filter: TagFilter | str | HookAction | None = None,
        action: HookAction | None = None,
    ) -> t.Any:  # noqa: ANN401 - decorator or action
        """Register a hook for *kind*, or return a decorator doing so."""
        tag_filter, action = _split_hook_args(tag_filter, action)
        if action is not None:
            self._registry.register_hook(kind, tag_filter, action)
            return action

        def decorator(func: _F) -> _F:
            self._registry.register_hook(kind, tag_filter, func)
            return func

        return decorator

    before_suite = _hook_method(HookKind.BEFORE_SUITE)
    after_suite = _hook_method(HookKind.AFTER_SUITE)
    before_feature = _hook_method(HookKind.BEFORE_FEATURE)
    after_feature = _hook_method(HookKind.AFTER_FEATURE)
    before_scenario = _hook_method(HookKind.BEFORE_SCENARIO)
    after_scenario = _hook_method(HookKind.AFTER_SCENARIO)
    before_step = _hook_method(HookKind.BEFORE_STEP)
    after_step = _hook_method(HookKind.AFTER_STEP)

    beforeSuite = before_suite  # noqa: N815
    afterSuite = after_suite  # noqa: N815
    beforeFeature = before_feature  # noqa: N815
    afterFeature = after_feature  # noqa: N815
    beforeScenario = before_scenario  # noqa: N815
    afterScenario = after_scenario  # noqa: N815
    beforeStep = before_step  # noqa: N815
    afterStep = after_step  # noqa: N815


__all__ = ["DefinitionRegistry", "HooksHandle", "StepsHandle"]
