"""Drive parsed features through the definition core.

The runner does not parse Gherkin. It receives features, scenarios and
keyword-stripped step lines as plain data, creates one :class:`Context` per
scenario, fires lifecycle hooks and tracks each scenario through its state
machine::

    NOT_STARTED -> RUNNING -> {PASSED, FAILED, PENDING}

Failures stay local to their scenario: after the first step that does not
succeed, the remaining steps of that scenario are skipped, while later
scenarios run normally.
"""

from __future__ import annotations

import collections
import dataclasses as dc
import enum
import logging
import typing as t

from .config import RunnerConfig
from .context import Context
from .definitions import HookKind
from .errors import LifecycleError
from .hooks import HookDispatcher
from .invoker import DefinitionInvoker, Outcome, Status
from .tags import normalise_tags

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .registry import DefinitionRegistry

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Input model
# ----------------------------------------------------------------------
@dc.dataclass(frozen=True, slots=True)
class Step:
    """One step line with its Gherkin keyword already separated."""

    keyword: str
    text: str

    def __str__(self) -> str:
        return f"{self.keyword} {self.text}".strip()


def _coerce_steps(steps: t.Iterable[Step | str]) -> tuple[Step, ...]:
    if isinstance(steps, str):
        msg = "steps must be a sequence of step lines, not a single string"
        raise TypeError(msg)
    return tuple(step if isinstance(step, Step) else Step("", step) for step in steps)


@dc.dataclass(frozen=True, slots=True)
class Scenario:
    """A named, tagged sequence of steps."""

    name: str
    steps: tuple[Step, ...] = ()
    tags: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", _coerce_steps(self.steps))
        object.__setattr__(self, "tags", normalise_tags(self.tags))


@dc.dataclass(frozen=True, slots=True)
class Feature:
    """A named, tagged group of scenarios."""

    name: str
    scenarios: tuple[Scenario, ...] = ()
    tags: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "scenarios", tuple(self.scenarios))
        object.__setattr__(self, "tags", normalise_tags(self.tags))


# ----------------------------------------------------------------------
# Hook payloads
# ----------------------------------------------------------------------
@dc.dataclass(frozen=True, slots=True)
class FeatureEvent:
    """Payload passed to feature-level hooks."""

    feature: Feature


@dc.dataclass(frozen=True, slots=True)
class ScenarioEvent:
    """Payload passed to scenario-level hooks.

    ``state`` is ``None`` for BeforeScenario hooks. AfterScenario hooks receive
    the verdict implied by the step and hook outcomes recorded so far.
    """

    scenario: Scenario
    feature: Feature | None
    context: Context
    state: ScenarioState | None = None


@dc.dataclass(frozen=True, slots=True)
class StepEvent:
    """Payload passed to step-level hooks; ``outcome`` is set after the step."""

    step: Step
    scenario: Scenario
    feature: Feature | None
    context: Context
    outcome: Outcome | None = None


# ----------------------------------------------------------------------
# Scenario state machine
# ----------------------------------------------------------------------
class ScenarioState(enum.StrEnum):
    """Lifecycle states of one scenario execution."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    PENDING = "pending"

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` once the scenario has finished."""
        return self not in {ScenarioState.NOT_STARTED, ScenarioState.RUNNING}


class ScenarioTracker:
    """Accumulate outcomes for one scenario and derive its final state."""

    def __init__(self) -> None:
        self._state = ScenarioState.NOT_STARTED
        self._seen: collections.Counter[Status] = collections.Counter()

    @property
    def state(self) -> ScenarioState:
        """Return the current state."""
        return self._state

    def start(self) -> None:
        """Move from ``NOT_STARTED`` to ``RUNNING``."""
        if self._state is not ScenarioState.NOT_STARTED:
            msg = f"Cannot start a scenario in state {self._state}"
            raise LifecycleError(msg)
        self._state = ScenarioState.RUNNING

    def record(self, outcome: Outcome) -> None:
        """Record a step or hook outcome while the scenario is running."""
        if self._state is not ScenarioState.RUNNING:
            msg = f"Cannot record outcomes for a scenario in state {self._state}"
            raise LifecycleError(msg)
        self._seen[outcome.status] += 1

    def verdict(self) -> ScenarioState:
        """Return the terminal state implied by the outcomes recorded so far.

        Failed and ambiguous outcomes win. Pending and undefined outcomes both
        leave the scenario pending; the step outcomes keep the distinction.
        """
        if self._seen[Status.FAILED] or self._seen[Status.AMBIGUOUS]:
            return ScenarioState.FAILED
        if self._seen[Status.PENDING] or self._seen[Status.UNDEFINED]:
            return ScenarioState.PENDING
        return ScenarioState.PASSED

    def finish(self) -> ScenarioState:
        """Move to the terminal state implied by the recorded outcomes."""
        if self._state is not ScenarioState.RUNNING:
            msg = f"Cannot finish a scenario in state {self._state}"
            raise LifecycleError(msg)
        self._state = self.verdict()
        return self._state


# ----------------------------------------------------------------------
# Results
# ----------------------------------------------------------------------
@dc.dataclass(frozen=True, slots=True)
class StepResult:
    """Outcome of one step together with the outcomes of its step hooks."""

    step: Step
    outcome: Outcome
    hook_outcomes: tuple[Outcome, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class ScenarioResult:
    """Terminal state, step results and context of one scenario run."""

    scenario: Scenario
    state: ScenarioState
    steps: tuple[StepResult, ...]
    hook_outcomes: tuple[Outcome, ...]
    context: Context


@dc.dataclass(frozen=True, slots=True)
class FeatureResult:
    """Scenario results and feature hook outcomes of one feature run."""

    feature: Feature
    scenarios: tuple[ScenarioResult, ...]
    hook_outcomes: tuple[Outcome, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class SuiteResult:
    """Aggregate result of a run; :attr:`passed` is the run verdict."""

    features: tuple[FeatureResult, ...]
    hook_outcomes: tuple[Outcome, ...] = ()
    strict: bool = False

    @property
    def scenarios(self) -> tuple[ScenarioResult, ...]:
        """Return every scenario result across all features, in run order."""
        return tuple(
            scenario for feature in self.features for scenario in feature.scenarios
        )

    def counts(self) -> collections.Counter[ScenarioState]:
        """Return the number of scenarios in each terminal state."""
        return collections.Counter(result.state for result in self.scenarios)

    def _hook_outcomes(self) -> t.Iterator[Outcome]:
        yield from self.hook_outcomes
        for feature in self.features:
            yield from feature.hook_outcomes

    @property
    def passed(self) -> bool:
        """Return ``False`` on any failure, or on anything pending when strict."""
        for outcome in self._hook_outcomes():
            if outcome.is_failure:
                return False
            if self.strict and outcome.status is Status.PENDING:
                return False
        for result in self.scenarios:
            if result.state is ScenarioState.FAILED:
                return False
            if self.strict and result.state is ScenarioState.PENDING:
                return False
        return True


def _blocks(outcomes: t.Iterable[Outcome]) -> bool:
    return any(not outcome.succeeded for outcome in outcomes)


class Runner:
    """Execute features against a frozen :class:`DefinitionRegistry`.

    Constructing a runner freezes *registry*; matching and invocation then
    only read from it, so scenarios may be run from several threads as long
    as each run gets its own context, which :meth:`run_scenario` guarantees.
    """

    def __init__(
        self,
        registry: DefinitionRegistry,
        config: RunnerConfig | None = None,
        *,
        invoker: DefinitionInvoker | None = None,
        context_factory: t.Callable[..., Context] = Context,
    ) -> None:
        registry.freeze()
        self.registry = registry
        self.config = config if config is not None else RunnerConfig()
        self._invoker = invoker if invoker is not None else DefinitionInvoker()
        self._hooks = HookDispatcher(
            registry, stop_on_failure=self.config.stop_hooks_on_failure
        )
        self._context_factory = context_factory

    def run_suite(self, features: t.Iterable[Feature]) -> SuiteResult:
        """Run *features* between the suite-level hooks."""
        before = self._hooks.dispatch(HookKind.BEFORE_SUITE)
        results: list[FeatureResult] = []
        if _blocks(before):
            logger.warning("BeforeSuite hooks did not succeed; skipping features")
        else:
            results.extend(self.run_feature(feature) for feature in features)
        after = self._hooks.dispatch(HookKind.AFTER_SUITE)
        suite = SuiteResult(
            features=tuple(results),
            hook_outcomes=(*before, *after),
            strict=self.config.strict,
        )
        logger.debug("Suite finished: %s", dict(suite.counts()))
        return suite

    def run_feature(self, feature: Feature) -> FeatureResult:
        """Run every scenario in *feature* between the feature-level hooks."""
        event = FeatureEvent(feature)
        before = self._hooks.dispatch(HookKind.BEFORE_FEATURE, feature.tags, event)
        scenarios: list[ScenarioResult] = []
        if _blocks(before):
            logger.warning(
                "BeforeFeature hooks did not succeed; skipping feature %r",
                feature.name,
            )
        else:
            scenarios.extend(
                self.run_scenario(scenario, feature) for scenario in feature.scenarios
            )
        after = self._hooks.dispatch(HookKind.AFTER_FEATURE, feature.tags, event)
        return FeatureResult(feature, tuple(scenarios), (*before, *after))

    def run_scenario(
        self, scenario: Scenario, feature: Feature | None = None
    ) -> ScenarioResult:
        """Run *scenario* with a fresh context and return its result."""
        context = self._context_factory(scenario=scenario)
        tags = scenario.tags | (feature.tags if feature is not None else frozenset())
        tracker = ScenarioTracker()
        tracker.start()

        before = self._hooks.dispatch(
            HookKind.BEFORE_SCENARIO,
            tags,
            ScenarioEvent(scenario, feature, context),
        )
        for outcome in before:
            tracker.record(outcome)
        blocked = _blocks(before)

        results: list[StepResult] = []
        for step in scenario.steps:
            if blocked:
                results.append(StepResult(step, Outcome.skipped()))
                continue
            result = self._run_step(step, scenario, feature, context, tags)
            tracker.record(result.outcome)
            for outcome in result.hook_outcomes:
                tracker.record(outcome)
            results.append(result)
            blocked = not result.outcome.succeeded or _blocks(result.hook_outcomes)

        after = self._hooks.dispatch(
            HookKind.AFTER_SCENARIO,
            tags,
            ScenarioEvent(scenario, feature, context, tracker.verdict()),
        )
        for outcome in after:
            tracker.record(outcome)
        state = tracker.finish()
        logger.debug("Scenario %r finished: %s", scenario.name, state)
        return ScenarioResult(
            scenario=scenario,
            state=state,
            steps=tuple(results),
            hook_outcomes=(*before, *after),
            context=context,
        )

    def _run_step(
        self,
        step: Step,
        scenario: Scenario,
        feature: Feature | None,
        context: Context,
        tags: frozenset[str],
    ) -> StepResult:
        event = StepEvent(step, scenario, feature, context)
        before = self._hooks.dispatch(HookKind.BEFORE_STEP, tags, event)
        if _blocks(before):
            outcome = Outcome.skipped()
        else:
            outcome = self._invoker.run_step(self.registry, step.text, context)
        after = self._hooks.dispatch(
            HookKind.AFTER_STEP, tags, dc.replace(event, outcome=outcome)
        )
        return StepResult(step, outcome, (*before, *after))


__all__ = [
    "Feature",
    "FeatureEvent",
    "FeatureResult",
    "Runner",
    "Scenario",
    "ScenarioEvent",
    "ScenarioResult",
    "ScenarioState",
    "ScenarioTracker",
    "Step",
    "StepEvent",
    "StepResult",
    "SuiteResult",
]
